from __future__ import annotations

from django.urls import path

from . import views


app_name = "layout"

urlpatterns = [
    path("<str:username>/<slug:slug>/canvas", views.canvas_detail, name="canvas_detail"),
    path("<str:username>/<slug:slug>/grid/update", views.canvas_grid_update, name="canvas_grid_update"),
    path("<str:username>/<slug:slug>/widget/add", views.canvas_widget_add, name="canvas_widget_add"),
    path(
        "<str:username>/<slug:slug>/widget/<str:widget_id>/delete",
        views.canvas_widget_delete,
        name="canvas_widget_delete",
    ),
]
