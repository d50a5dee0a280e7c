import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Dashboard",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("slug", models.SlugField(blank=True, max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "columns",
                    models.PositiveIntegerField(
                        default=12,
                        help_text="Number of grid columns; fixed once widgets are placed.",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "row_height_px",
                    models.FloatField(
                        default=100,
                        help_text="Height of one grid row in pixels.",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="dashboards",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ("owner", "name"),
            },
        ),
        migrations.CreateModel(
            name="DashboardWidget",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "widget_id",
                    models.CharField(
                        help_text="Engine-assigned identifier, unique within the dashboard.",
                        max_length=64,
                    ),
                ),
                ("title", models.CharField(blank=True, default="", max_length=255)),
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("chart", "Chart"),
                            ("text", "Text"),
                            ("image", "Image"),
                            ("iframe", "Iframe"),
                            ("filter", "Filter"),
                            ("metric", "Metric"),
                            ("table", "Table"),
                            ("markdown", "Markdown"),
                        ],
                        max_length=16,
                    ),
                ),
                ("content", models.JSONField(blank=True, default=dict)),
                ("x", models.PositiveIntegerField(default=0)),
                ("y", models.PositiveIntegerField(default=0)),
                ("width", models.PositiveIntegerField(default=4, validators=[django.core.validators.MinValueValidator(1)])),
                ("height", models.PositiveIntegerField(default=3, validators=[django.core.validators.MinValueValidator(1)])),
                ("visible", models.BooleanField(default=True)),
                ("order", models.PositiveIntegerField(default=0)),
                (
                    "dashboard",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="widgets",
                        to="layout.dashboard",
                    ),
                ),
            ],
            options={
                "ordering": ("dashboard", "order", "id"),
            },
        ),
        migrations.AddConstraint(
            model_name="dashboard",
            constraint=models.UniqueConstraint(fields=("owner", "slug"), name="unique_dashboard_owner_slug"),
        ),
        migrations.AddConstraint(
            model_name="dashboardwidget",
            constraint=models.UniqueConstraint(fields=("dashboard", "widget_id"), name="unique_dashboard_widget_id"),
        ),
    ]
