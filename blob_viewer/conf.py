from django.conf import settings

DEFAULTS = {
    "DEFAULT_ENCODING": "utf-8",
    "BINARY_SNIFF_BYTES": 8000,
    "NAV_LINK_TEMPLATES": {
        "history": "/{repository}/log/{ref}/{path}",
        "blame": "/{repository}/blame/{ref}/{path}",
    },
}


def get(key):
    """Return one BLOB_VIEWER setting merged over DEFAULTS.

    Dict-valued settings are merged key by key, so a partial override keeps
    the remaining defaults.
    """
    overrides = getattr(settings, "BLOB_VIEWER", {})
    default = DEFAULTS[key]
    if key not in overrides:
        return default
    if isinstance(default, dict):
        return {**default, **overrides[key]}
    return overrides[key]
