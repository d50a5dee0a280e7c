"""
URL configuration for the gridboard project.
"""
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("layouts/", include("apps.layout.urls")),
]
