import json
import logging
import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils.text import slugify

from apps.layout.engine.exceptions import LayoutError
from apps.layout.engine.collision import find_overlaps
from apps.layout.models import Dashboard
from apps.layout.services.canvas import deserialize_canvas, lock_dashboard, save_widget_set

log = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Create or replace a dashboard from an exported canvas JSON file."

    def add_arguments(self, parser):
        parser.add_argument("username", help="Owner of the imported dashboard")
        parser.add_argument("file", help="Path to the JSON export")
        parser.add_argument("--name", help="Dashboard name (defaults to the name in the file)")

    def handle(self, *args, **options):
        path = options["file"]
        if not os.path.exists(path):
            raise CommandError(f"File not found: {path}")

        try:
            owner = get_user_model().objects.get(username=options["username"])
        except get_user_model().DoesNotExist:
            raise CommandError(f"Unknown user '{options['username']}'")

        try:
            with open(path, encoding="utf-8") as fh:
                payload = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            raise CommandError(f"Could not read {path}: {exc}")
        if not isinstance(payload, dict):
            raise CommandError("Export must be a JSON object")

        try:
            widget_set = deserialize_canvas(payload)
        except (LayoutError, ValueError) as exc:
            raise CommandError(f"Invalid canvas in {path}: {exc}")

        # Stored positions are kept as-is, so refuse layouts that overlap.
        overlaps = find_overlaps(widget_set.list())
        if overlaps:
            first, second = overlaps[0]
            raise CommandError(f"Widgets {first.id!r} and {second.id!r} overlap in {path}")

        name = options.get("name") or payload.get("name") or os.path.splitext(os.path.basename(path))[0]
        with transaction.atomic():
            dashboard, created = Dashboard.objects.get_or_create(
                owner=owner,
                slug=slugify(name),
                defaults={
                    "name": name,
                    "description": payload.get("description") or "",
                    "columns": widget_set.config.columns,
                    "row_height_px": widget_set.config.row_height_px,
                },
            )
            dashboard = lock_dashboard(dashboard)
            if not created:
                dashboard.columns = widget_set.config.columns
                dashboard.row_height_px = widget_set.config.row_height_px
                dashboard.save(update_fields=["columns", "row_height_px", "updated_at"])
            save_widget_set(dashboard, widget_set)

        log.info("Imported %s widgets into dashboard %s", len(widget_set), dashboard.pk)
        verb = "Created" if created else "Updated"
        self.stdout.write(self.style.SUCCESS(f"{verb} dashboard '{dashboard.slug}' with {len(widget_set)} widgets"))
