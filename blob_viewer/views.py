import logging

from django.http import Http404, HttpRequest, HttpResponse
from django.shortcuts import render
from django.urls import reverse
from django.utils.http import content_disposition_header

from . import conf
from .errors import NotFound, Unsupported
from .renderer import BlobContent, render as render_blob
from .storage import DatabaseBlobSource, load_blob

logger = logging.getLogger(__name__)


def _raw_url(name, ref, path):
    return reverse("blob_viewer:blob_raw", kwargs={"name": name, "rest": f"{ref}/{path}"})


def make_link_resolver(ref):
    """Links for the blob page: raw is served here, history and blame by the host site."""
    templates = conf.get("NAV_LINK_TEMPLATES")

    def resolve(kind, metadata):
        if kind == "raw":
            return _raw_url(metadata.repository, ref, metadata.path)
        return templates[kind].format(repository=metadata.repository, ref=ref, path=metadata.path)

    return resolve


def blob_view(request: HttpRequest, name: str, rest: str) -> HttpResponse:
    source = DatabaseBlobSource()
    try:
        ref, path = source.split_ref(name, rest)
        metadata, content = load_blob(
            source,
            name,
            ref,
            path,
            encoding=conf.get("DEFAULT_ENCODING"),
            sniff_bytes=conf.get("BINARY_SNIFF_BYTES"),
        )
    except NotFound as exc:
        raise Http404(str(exc))
    except Unsupported as exc:
        logger.info("Offering raw download instead: %s", exc)
        return render(
            request,
            "blob_viewer/binary.html",
            {"repo_name": name, "ref": ref, "path": exc.path, "reason": exc.reason,
             "raw_url": _raw_url(name, ref, exc.path)},
        )

    view = render_blob(metadata, content, make_link_resolver(ref))
    return render(request, "blob_viewer/blob.html", {"repo_name": name, "ref": ref, "view": view})


def raw_view(request: HttpRequest, name: str, rest: str) -> HttpResponse:
    source = DatabaseBlobSource()
    try:
        ref, path = source.split_ref(name, rest)
        metadata, data = source.fetch_blob(name, ref, path)
    except NotFound as exc:
        raise Http404(str(exc))

    encoding = conf.get("DEFAULT_ENCODING")
    try:
        BlobContent.from_bytes(data, metadata.path, encoding=encoding,
                               sniff_bytes=conf.get("BINARY_SNIFF_BYTES"))
    except Unsupported:
        response = HttpResponse(data, content_type="application/octet-stream")
        filename = metadata.path.rpartition("/")[2]
        response["Content-Disposition"] = content_disposition_header(as_attachment=True, filename=filename)
        return response
    return HttpResponse(data, content_type=f"text/plain; charset={encoding}")
