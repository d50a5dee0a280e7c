from django.contrib import admin

from .models import Dashboard, DashboardWidget


class DashboardWidgetInline(admin.TabularInline):
    model = DashboardWidget
    extra = 0
    fields = ("widget_id", "title", "kind", "x", "y", "width", "height", "visible", "order")


@admin.register(Dashboard)
class DashboardAdmin(admin.ModelAdmin):
    list_display = ("name", "owner", "columns", "updated_at")
    search_fields = ("name", "slug", "owner__username")
    prepopulated_fields = {"slug": ("name",)}
    inlines = (DashboardWidgetInline,)


@admin.register(DashboardWidget)
class DashboardWidgetAdmin(admin.ModelAdmin):
    list_display = ("dashboard", "widget_id", "kind", "x", "y", "width", "height")
    list_filter = ("kind", "visible")
    search_fields = ("widget_id", "title", "dashboard__name")
