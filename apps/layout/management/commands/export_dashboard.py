import json
import logging

from django.core.management.base import BaseCommand, CommandError

from apps.layout.engine.exceptions import LayoutError
from apps.layout.models import Dashboard
from apps.layout.services.canvas import load_widget_set, serialize_canvas

log = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Write a dashboard's canvas (grid settings and widgets) as JSON."

    def add_arguments(self, parser):
        parser.add_argument("username", help="Owner of the dashboard")
        parser.add_argument("slug", help="Dashboard slug")
        parser.add_argument("--output", help="File to write; defaults to stdout")

    def handle(self, *args, **options):
        try:
            dashboard = Dashboard.objects.get(
                owner__username=options["username"], slug=options["slug"]
            )
        except Dashboard.DoesNotExist:
            raise CommandError(
                f"Dashboard '{options['slug']}' not found for user '{options['username']}'"
            )

        try:
            widget_set = load_widget_set(dashboard)
        except (LayoutError, ValueError) as exc:
            raise CommandError(f"Stored layout of '{dashboard.slug}' is invalid: {exc}")

        payload = serialize_canvas(widget_set)
        payload["name"] = dashboard.name
        payload["description"] = dashboard.description
        text = json.dumps(payload, indent=2)

        output = options.get("output")
        if output:
            with open(output, "w", encoding="utf-8") as fh:
                fh.write(text)
            log.info("Exported dashboard %s (%s widgets) to %s", dashboard.pk, len(payload["widgets"]), output)
            self.stdout.write(self.style.SUCCESS(f"Wrote {output}"))
        else:
            self.stdout.write(text)
