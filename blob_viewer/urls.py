from django.urls import path

from . import views

app_name = 'blob_viewer'

# ``rest`` is ``<ref>/<path>``; refs may contain slashes, so views split it
# against the stored references.
urlpatterns = [
    path(
        "<str:name>/blob/<path:rest>",
        views.blob_view,
        name="blob_view",
    ),
    path(
        "<str:name>/raw/<path:rest>",
        views.raw_view,
        name="blob_raw",
    ),
]
