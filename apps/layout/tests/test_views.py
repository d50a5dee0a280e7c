import json
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from apps.layout.models import Dashboard, DashboardWidget
from apps.layout.palette import register_builtins
from apps.layout.services import canvas


class CanvasViewTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        User = get_user_model()
        cls.owner = User.objects.create_user("owner", password="pw")
        cls.other = User.objects.create_user("other", password="pw")
        cls.staff = User.objects.create_user("staff", password="pw", is_staff=True)
        cls.dashboard = Dashboard.objects.create(owner=cls.owner, name="Ops")
        for widget_id, x in (("a", 0), ("b", 4)):
            DashboardWidget.objects.create(
                dashboard=cls.dashboard,
                widget_id=widget_id,
                kind="text",
                content={"content": widget_id},
                x=x,
                y=0,
                width=4,
                height=3,
                order=x,
            )

    def setUp(self):
        register_builtins()
        self.client.force_login(self.owner)

    def url(self, name, **kwargs):
        return reverse(f"layout:{name}", kwargs={"username": "owner", "slug": "ops", **kwargs})

    def post_json(self, url, payload):
        return self.client.post(url, data=json.dumps(payload), content_type="application/json")

    def positions(self):
        return {
            row.widget_id: (row.x, row.y, row.width, row.height)
            for row in DashboardWidget.objects.filter(dashboard=self.dashboard)
        }

    # ------------------------------------------------------------------
    # Detail
    # ------------------------------------------------------------------
    def test_detail(self):
        response = self.client.get(self.url("canvas_detail"))
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["name"], "Ops")
        self.assertEqual(data["columns"], 12)
        self.assertEqual([w["id"] for w in data["widgets"]], ["a", "b"])

    def test_detail_requires_login(self):
        self.client.logout()
        response = self.client.get(self.url("canvas_detail"))
        self.assertEqual(response.status_code, 302)

    def test_detail_hidden_from_other_users(self):
        self.client.force_login(self.other)
        self.assertEqual(self.client.get(self.url("canvas_detail")).status_code, 404)

    def test_staff_can_open_any_dashboard(self):
        self.client.force_login(self.staff)
        self.assertEqual(self.client.get(self.url("canvas_detail")).status_code, 200)

    # ------------------------------------------------------------------
    # Grid update
    # ------------------------------------------------------------------
    def test_grid_update(self):
        response = self.post_json(
            self.url("canvas_grid_update"),
            {"items": [{"id": "a", "x": 0, "y": 3, "w": 6, "h": 2}]},
        )
        self.assertEqual(response.status_code, 204)
        self.assertEqual(self.positions()["a"], (0, 3, 6, 2))

    def test_grid_update_rejects_overlap(self):
        response = self.post_json(
            self.url("canvas_grid_update"),
            {"items": [{"id": "a", "x": 2, "y": 0, "w": 4, "h": 3}]},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.positions()["a"], (0, 0, 4, 3))

    def test_grid_update_unknown_widget(self):
        response = self.post_json(self.url("canvas_grid_update"), {"items": [{"id": "zzz", "x": 0}]})
        self.assertEqual(response.status_code, 404)

    def test_grid_update_bad_payloads(self):
        url = self.url("canvas_grid_update")
        bad_json = self.client.post(url, data="{not json", content_type="application/json")
        self.assertEqual(bad_json.status_code, 400)
        self.assertEqual(self.post_json(url, {"items": {"id": "a"}}).status_code, 400)
        self.assertEqual(self.client.get(url).status_code, 405)

    # ------------------------------------------------------------------
    # Widget add / delete
    # ------------------------------------------------------------------
    def test_add_at_drop_point(self):
        response = self.post_json(self.url("canvas_widget_add"), {"type": "chart", "x": 8, "y": 0})
        self.assertEqual(response.status_code, 201)
        widget = response.json()["widget"]
        self.assertEqual((widget["x"], widget["y"], widget["w"], widget["h"]), (8, 0, 4, 3))
        self.assertEqual(widget["title"], "Chart Widget")
        self.assertEqual(widget["id"], "widget-1")
        self.assertIn("widget-1", self.positions())

    def test_add_on_occupied_spot_is_relocated(self):
        response = self.post_json(self.url("canvas_widget_add"), {"type": "chart", "x": 0, "y": 0})
        self.assertEqual(response.status_code, 201)
        widget = response.json()["widget"]
        self.assertEqual((widget["x"], widget["y"]), (0, 3))

    def test_add_without_drop_point_goes_below(self):
        response = self.post_json(self.url("canvas_widget_add"), {"type": "text"})
        widget = response.json()["widget"]
        self.assertEqual((widget["x"], widget["y"]), (0, 3))

    def test_add_with_target_splits_it(self):
        DashboardWidget.objects.filter(dashboard=self.dashboard, widget_id="b").delete()
        DashboardWidget.objects.filter(dashboard=self.dashboard, widget_id="a").update(width=8, height=4)

        response = self.post_json(self.url("canvas_widget_add"), {"type": "metric", "target": "a"})

        self.assertEqual(response.status_code, 201)
        positions = self.positions()
        self.assertEqual(positions["a"], (0, 0, 4, 4))
        self.assertEqual(positions[response.json()["widget"]["id"]], (4, 0, 4, 4))

    def test_add_unknown_type(self):
        response = self.post_json(self.url("canvas_widget_add"), {"type": "video"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(len(self.positions()), 2)

    def test_add_unknown_target(self):
        response = self.post_json(self.url("canvas_widget_add"), {"type": "chart", "target": "zzz"})
        self.assertEqual(response.status_code, 404)

    def test_delete(self):
        response = self.client.post(self.url("canvas_widget_delete", widget_id="a"))
        self.assertEqual(response.status_code, 204)
        self.assertEqual(set(self.positions()), {"b"})

        missing = self.client.post(self.url("canvas_widget_delete", widget_id="a"))
        self.assertEqual(missing.status_code, 404)

    def test_ids_of_deleted_widgets_are_not_reused(self):
        add_url = self.url("canvas_widget_add")
        first = self.post_json(add_url, {"type": "chart"}).json()["widget"]["id"]
        second = self.post_json(add_url, {"type": "chart"}).json()["widget"]["id"]
        self.client.post(self.url("canvas_widget_delete", widget_id=second))
        third = self.post_json(add_url, {"type": "chart"}).json()["widget"]["id"]

        self.assertEqual((first, second), ("widget-1", "widget-2"))
        self.assertEqual(third, "widget-3")
        self.dashboard.refresh_from_db()
        self.assertEqual(self.dashboard.next_widget_seq, 3)

    def test_mutations_lock_the_dashboard(self):
        with mock.patch("apps.layout.views.lock_dashboard", wraps=canvas.lock_dashboard) as lock:
            self.post_json(self.url("canvas_widget_add"), {"type": "chart"})
            self.post_json(self.url("canvas_grid_update"), {"items": [{"id": "a", "y": 6}]})
            self.client.post(self.url("canvas_widget_delete", widget_id="b"))
        self.assertEqual(lock.call_count, 3)
        for call in lock.call_args_list:
            self.assertEqual(call.args[0].pk, self.dashboard.pk)


class StoredLayoutErrorTests(TestCase):
    """Rows edited behind the engine's back must not crash the endpoints."""

    @classmethod
    def setUpTestData(cls):
        cls.owner = get_user_model().objects.create_user("owner", password="pw")
        cls.dashboard = Dashboard.objects.create(owner=cls.owner, name="Ops")
        DashboardWidget.objects.create(
            dashboard=cls.dashboard, widget_id="a", kind="text", x=8, y=0, width=4, height=3
        )
        # Bypasses model validation the way a raw update would.
        Dashboard.objects.filter(pk=cls.dashboard.pk).update(columns=6)

    def setUp(self):
        register_builtins()
        self.client.force_login(self.owner)

    def url(self, name, **kwargs):
        return reverse(f"layout:{name}", kwargs={"username": "owner", "slug": "ops", **kwargs})

    def test_every_endpoint_reports_a_conflict(self):
        responses = [
            self.client.get(self.url("canvas_detail")),
            self.client.post(
                self.url("canvas_grid_update"),
                data=json.dumps({"items": [{"id": "a", "x": 0}]}),
                content_type="application/json",
            ),
            self.client.post(
                self.url("canvas_widget_add"),
                data=json.dumps({"type": "chart"}),
                content_type="application/json",
            ),
            self.client.post(self.url("canvas_widget_delete", widget_id="a")),
        ]
        for response in responses:
            self.assertEqual(response.status_code, 409)
            self.assertIn("error", response.json())
        self.assertEqual(DashboardWidget.objects.filter(dashboard=self.dashboard).count(), 1)
