from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/git/', include('blob_viewer.urls', namespace='blob_viewer')),
]
