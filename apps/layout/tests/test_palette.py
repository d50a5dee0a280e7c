from importlib import import_module

from django.test import SimpleTestCase, override_settings

from apps.layout import palette
from apps.layout.apps import LayoutConfig
from apps.layout.engine.exceptions import NotFoundError
from apps.layout.engine.types import ContentKind
from apps.layout.palette import PaletteEntry


class PaletteRegistryTests(SimpleTestCase):
    def setUp(self):
        palette.register_builtins()

    def tearDown(self):
        palette.unregister("tests.kpi")
        palette.unregister("tests.bad")

    def test_builtins_are_registered(self):
        registry = palette.get_registry()
        for widget_type in ("chart", "metric", "table", "text", "image", "markdown", "iframe", "filter"):
            self.assertIn(widget_type, registry)
        self.assertEqual(registry["chart"].title, "Chart Widget")

    def test_register_builtins_is_idempotent(self):
        before = palette.get_registry()
        palette.register_builtins()
        self.assertEqual(palette.get_registry(), before)

    def test_default_footprint(self):
        self.assertEqual(palette.get_entry("chart").footprint(2, 1).as_dict(), {"x": 2, "y": 1, "width": 4, "height": 3})

    @override_settings(LAYOUT_DEFAULT_WIDGET_WIDTH=6, LAYOUT_DEFAULT_WIDGET_HEIGHT=2)
    def test_footprint_follows_settings(self):
        self.assertEqual(palette.get_entry("chart").size, (6, 2))

    def test_content_is_copied_per_widget(self):
        entry = palette.get_entry("table")
        first = entry.content()
        first.config["columns"].append({"key": "extra"})
        self.assertEqual(len(entry.config["columns"]), 2)
        self.assertEqual(entry.content().kind, ContentKind.TABLE)

    def test_duplicate_type_is_rejected(self):
        with self.assertRaises(ValueError):
            palette.register(PaletteEntry(type="chart", name="Again", kind=ContentKind.CHART))

    def test_invalid_size_is_rejected(self):
        with self.assertRaises(ValueError):
            palette.register(PaletteEntry(type="tests.bad", name="Bad", kind=ContentKind.TEXT, width=0))
        self.assertNotIn("tests.bad", palette.get_registry())

    def test_unknown_type(self):
        with self.assertRaises(NotFoundError) as ctx:
            palette.get_entry("nope")
        self.assertEqual(ctx.exception.what, "palette type")


class PaletteSettingTests(SimpleTestCase):
    def tearDown(self):
        palette.unregister("tests.kpi")

    @override_settings(LAYOUT_PALETTE=["apps.layout.tests.palette_entries:register_extra"])
    def test_ready_loads_configured_entries(self):
        LayoutConfig("apps.layout", import_module("apps.layout")).ready()

        entry = palette.get_entry("tests.kpi")
        self.assertEqual(entry.kind, ContentKind.METRIC)
        self.assertEqual(entry.footprint().as_dict(), {"x": 0, "y": 0, "width": 2, "height": 2})
