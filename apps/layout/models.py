from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.text import slugify

from apps.layout.engine.types import (
    ContentKind,
    GridConfig,
    GridPosition,
    Widget,
    WidgetContent,
)


class Dashboard(models.Model):
    """A grid canvas owned by one user."""

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="dashboards",
    )
    name = models.CharField(max_length=255)
    # Slug is auto-derived from name; unique per-owner
    slug = models.SlugField(max_length=255, blank=True)
    description = models.TextField(blank=True, default="")
    columns = models.PositiveIntegerField(
        default=12,
        validators=[MinValueValidator(1)],
        help_text="Number of grid columns; cannot shrink below the widgets already placed.",
    )
    row_height_px = models.FloatField(
        default=100,
        validators=[MinValueValidator(1)],
        help_text="Height of one grid row in pixels.",
    )
    # Last generated widget-<n>; ids are never reused after a delete.
    next_widget_seq = models.PositiveIntegerField(default=0, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("owner", "name")
        constraints = [
            models.UniqueConstraint(
                fields=("owner", "slug"),
                name="unique_dashboard_owner_slug",
            ),
        ]

    def __str__(self) -> str:
        return self.name

    def clean(self):
        super().clean()
        if self.pk is None or not self.columns:
            return
        too_wide = [
            row.widget_id
            for row in self.widgets.only("widget_id", "x", "width")
            if row.x + row.width > self.columns
        ]
        if too_wide:
            raise ValidationError(
                {
                    "columns": f"Widgets {', '.join(too_wide)} do not fit in "
                    f"{self.columns} columns; move or resize them first."
                }
            )

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name or "")
        super().save(*args, **kwargs)

    def grid_config(self) -> GridConfig:
        return GridConfig(columns=int(self.columns), row_height_px=float(self.row_height_px))


class DashboardWidget(models.Model):
    """Stored placement and content of one widget on a dashboard."""

    dashboard = models.ForeignKey(
        Dashboard,
        on_delete=models.CASCADE,
        related_name="widgets",
    )
    widget_id = models.CharField(
        max_length=64,
        help_text="Engine-assigned identifier, unique within the dashboard.",
    )
    title = models.CharField(max_length=255, blank=True, default="")
    kind = models.CharField(
        max_length=16,
        choices=[(kind.value, kind.value.title()) for kind in ContentKind],
    )
    content = models.JSONField(default=dict, blank=True)
    x = models.PositiveIntegerField(default=0)
    y = models.PositiveIntegerField(default=0)
    width = models.PositiveIntegerField(default=4, validators=[MinValueValidator(1)])
    height = models.PositiveIntegerField(default=3, validators=[MinValueValidator(1)])
    visible = models.BooleanField(default=True)
    # Sequence in which widgets are handed back to the engine.
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ("dashboard", "order", "id")
        constraints = [
            models.UniqueConstraint(
                fields=("dashboard", "widget_id"),
                name="unique_dashboard_widget_id",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.dashboard.name}: {self.widget_id}"

    def clean(self):
        super().clean()
        if self.dashboard_id is None or self.x is None or not self.width:
            return
        columns = self.dashboard.columns
        if self.x + self.width > columns:
            raise ValidationError(
                f"Widget spans columns {self.x}-{self.x + self.width} but the "
                f"dashboard only has {columns}."
            )

    def to_widget(self) -> Widget:
        return Widget(
            id=self.widget_id,
            position=GridPosition(x=self.x, y=self.y, width=self.width, height=self.height),
            content=WidgetContent(kind=ContentKind(self.kind), config=dict(self.content or {})),
            title=self.title or None,
            visible=self.visible,
        )
