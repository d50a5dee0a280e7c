from django.http import Http404
from django.shortcuts import get_object_or_404

from apps.layout.models import Dashboard


class DashboardAccessMixin:
    """Shared access helpers for dashboard endpoints."""

    @staticmethod
    def get_dashboard(*, username: str, slug: str) -> Dashboard:
        qs = Dashboard.objects.select_related("owner")
        return get_object_or_404(qs, slug=slug, owner__username=username)

    @staticmethod
    def can_manage(user, dashboard: Dashboard) -> bool:
        return bool(
            getattr(user, "is_staff", False)
            or dashboard.owner_id == getattr(user, "id", None)
        )

    @classmethod
    def ensure_access(cls, request, dashboard: Dashboard) -> None:
        # Sharing is handled elsewhere; here only the owner and staff get in.
        if not cls.can_manage(request.user, dashboard):
            raise Http404()
