from django.test import SimpleTestCase

from apps.layout.engine.collision import has_collision
from apps.layout.engine.exceptions import InvalidPositionError, PlacementExhaustedError
from apps.layout.engine.placement import bottom_edge, find_valid_position, split_position

from .utils import make_widget, pos


def _filled_rows(rows):
    """Three 4x3 tiles per band, ``rows`` bands deep, on a 12-column canvas."""

    widgets = []
    for band in range(rows):
        for column in range(3):
            widgets.append(make_widget(f"t{band}-{column}", column * 4, band * 3, 4, 3))
    return widgets


class FindValidPositionTests(SimpleTestCase):
    def test_free_spot_on_empty_canvas_is_kept(self):
        preferred = pos(5, 0, 4, 3)
        self.assertEqual(find_valid_position(preferred, [], 12), preferred)

    def test_free_spot_next_to_widgets_is_kept(self):
        widgets = [make_widget("a", 0, 0, 4, 3)]
        self.assertEqual(find_valid_position(pos(4, 0, 4, 3), widgets, 12), pos(4, 0, 4, 3))

    def test_collision_is_resolved_nearby(self):
        widgets = [make_widget("a", 0, 0, 4, 3)]
        preferred = pos(0, 0, 4, 3)

        result = find_valid_position(preferred, widgets, 12)

        self.assertFalse(has_collision(result, widgets))
        self.assertLessEqual(max(abs(result.x - preferred.x), abs(result.y - preferred.y)), 10)
        self.assertEqual((result.width, result.height), (4, 3))
        self.assertEqual(result, pos(0, 3, 4, 3))

    def test_search_is_deterministic(self):
        widgets = [make_widget("a", 2, 2, 4, 4), make_widget("b", 6, 0, 4, 3)]
        first = find_valid_position(pos(3, 1, 4, 3), widgets, 12)
        second = find_valid_position(pos(3, 1, 4, 3), widgets, 12)
        self.assertEqual(first, second)

    def test_preferred_position_is_clamped_first(self):
        self.assertEqual(find_valid_position(pos(10, 0, 4, 3), [], 12), pos(8, 0, 4, 3))
        self.assertEqual(find_valid_position(pos(0, 0, 20, 3), [], 12), pos(0, 0, 12, 3))

    def test_exclude_id_lets_a_widget_keep_its_spot(self):
        widgets = [make_widget("a", 0, 0, 4, 3)]
        self.assertEqual(
            find_valid_position(pos(0, 0, 4, 3), widgets, 12, exclude_id="a"),
            pos(0, 0, 4, 3),
        )

    def test_dense_canvas_falls_back_below_everything(self):
        widgets = _filled_rows(10)

        result = find_valid_position(pos(0, 0, 4, 3), widgets, 12)

        self.assertEqual(result, pos(0, 30, 4, 3))
        self.assertFalse(has_collision(result, widgets))

    def test_fallback_can_be_disabled(self):
        with self.assertRaises(PlacementExhaustedError):
            find_valid_position(pos(0, 0, 4, 3), _filled_rows(10), 12, fallback=False)

    def test_attempt_budget_is_honoured(self):
        widgets = [make_widget("a", 0, 0, 4, 3)]
        result = find_valid_position(pos(0, 0, 4, 3), widgets, 12, max_attempts=0)
        self.assertEqual(result, pos(0, 3, 4, 3))

        with self.assertRaises(PlacementExhaustedError):
            find_valid_position(pos(0, 0, 4, 3), widgets, 12, max_attempts=5, fallback=False)

    def test_bottom_edge(self):
        widgets = [make_widget("a", 0, 0, 4, 3), make_widget("b", 4, 2, 4, 5)]
        self.assertEqual(bottom_edge([]), 0)
        self.assertEqual(bottom_edge(widgets), 7)
        self.assertEqual(bottom_edge(widgets, exclude_id="b"), 3)


class SplitPositionTests(SimpleTestCase):
    def test_even_split(self):
        shrunk, freed = split_position(pos(0, 0, 8, 4))
        self.assertEqual(shrunk, pos(0, 0, 4, 4))
        self.assertEqual(freed, pos(4, 0, 4, 4))

    def test_odd_width_gives_the_extra_column_to_the_new_widget(self):
        shrunk, freed = split_position(pos(2, 5, 5, 2))
        self.assertEqual(shrunk, pos(2, 5, 2, 2))
        self.assertEqual(freed, pos(4, 5, 3, 2))

    def test_smallest_splittable_width(self):
        shrunk, freed = split_position(pos(0, 0, 4, 3))
        self.assertEqual((shrunk.width, freed.width), (2, 2))

    def test_too_narrow_to_split(self):
        with self.assertRaises(InvalidPositionError):
            split_position(pos(0, 0, 3, 4))

    def test_custom_minimum_width(self):
        shrunk, freed = split_position(pos(0, 0, 7, 1), min_width=3)
        self.assertEqual((shrunk.width, freed.width), (3, 4))
        with self.assertRaises(InvalidPositionError):
            split_position(pos(0, 0, 5, 1), min_width=3)
