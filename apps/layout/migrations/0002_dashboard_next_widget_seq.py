import django.core.validators
from django.db import migrations, models


def seed_next_widget_seq(apps, schema_editor):
    Dashboard = apps.get_model("layout", "Dashboard")
    DashboardWidget = apps.get_model("layout", "DashboardWidget")
    for dashboard in Dashboard.objects.all():
        highest = 0
        for widget_id in DashboardWidget.objects.filter(dashboard=dashboard).values_list("widget_id", flat=True):
            prefix, _, number = widget_id.partition("-")
            if prefix == "widget" and number.isdigit():
                highest = max(highest, int(number))
        if highest:
            Dashboard.objects.filter(pk=dashboard.pk).update(next_widget_seq=highest)


class Migration(migrations.Migration):

    dependencies = [
        ("layout", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="dashboard",
            name="next_widget_seq",
            field=models.PositiveIntegerField(default=0, editable=False),
        ),
        migrations.AlterField(
            model_name="dashboard",
            name="columns",
            field=models.PositiveIntegerField(
                default=12,
                help_text="Number of grid columns; cannot shrink below the widgets already placed.",
                validators=[django.core.validators.MinValueValidator(1)],
            ),
        ),
        migrations.RunPython(seed_next_widget_seq, migrations.RunPython.noop),
    ]
