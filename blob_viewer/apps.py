from django.apps import AppConfig


class BlobViewerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "blob_viewer"
    verbose_name = "Blob viewer"
