from __future__ import annotations

import math
import unittest

from sagamaker.geometry import (
    CANVAS_CENTER,
    CIRCLE_RADIUS,
    SECTOR_ANGLE,
    SECTOR_CLAMP_MARGIN,
    SECTOR_SLOTS,
    SKILL_ANGLE_INCREMENT,
    angle_between,
    calculate_child_angle,
    category_angle,
    circle_position,
    clamp_to_sector,
    distance,
    in_sector,
    normalize_angle,
    point_at,
)


class TestCirclePosition(unittest.TestCase):
    def test_first_item_sits_at_the_top(self) -> None:
        x, y, angle = circle_position(0, 5)
        self.assertAlmostEqual(CANVAS_CENTER[0], x)
        self.assertAlmostEqual(CANVAS_CENTER[1] - CIRCLE_RADIUS, y)
        self.assertAlmostEqual(-math.pi / 2, angle)

    def test_items_are_evenly_spaced(self) -> None:
        points = [circle_position(i, 5)[:2] for i in range(5)]
        gaps = [distance(points[i], points[(i + 1) % 5]) for i in range(5)]
        for gap in gaps:
            self.assertAlmostEqual(gaps[0], gap, places=6)

    def test_category_angle_follows_category_order(self) -> None:
        self.assertAlmostEqual(-math.pi / 2, category_angle("category-body"))
        self.assertAlmostEqual(-math.pi / 2 + SECTOR_ANGLE, category_angle("category-mind"))

    def test_unknown_category_raises_key_error(self) -> None:
        with self.assertRaises(KeyError):
            category_angle("category-luck")


class TestAngles(unittest.TestCase):
    def test_normalize_angle_wraps_into_half_open_range(self) -> None:
        self.assertAlmostEqual(math.pi, normalize_angle(3 * math.pi))
        self.assertAlmostEqual(math.pi, normalize_angle(-math.pi))
        self.assertAlmostEqual(0.5, normalize_angle(0.5 + 4 * math.pi))

    def test_angle_between_and_point_at_agree(self) -> None:
        origin = (100.0, 100.0)
        target = point_at(origin, 1.2, 50)
        self.assertAlmostEqual(1.2, angle_between(origin, target))
        self.assertAlmostEqual(50, distance(origin, target))


class TestChildAngle(unittest.TestCase):
    def test_first_root_child_points_straight_out(self) -> None:
        self.assertAlmostEqual(0.7, calculate_child_angle(0, 0.7, is_root_category=True))

    def test_later_root_children_use_sector_slots(self) -> None:
        base = category_angle("category-mind")
        slot = SECTOR_ANGLE / SECTOR_SLOTS
        expected = base - SECTOR_ANGLE / 2 + slot * 1.5
        self.assertAlmostEqual(expected, calculate_child_angle(1, base, is_root_category=True))

    def test_root_children_stay_in_sector(self) -> None:
        base = category_angle("category-spirit")
        for count in range(12):
            self.assertTrue(in_sector(calculate_child_angle(count, base, True), base))

    def test_skill_children_fan_out_in_fixed_steps(self) -> None:
        self.assertAlmostEqual(1.0 + 2 * SKILL_ANGLE_INCREMENT, calculate_child_angle(2, 1.0))


class TestClampToSector(unittest.TestCase):
    def test_angle_inside_sector_is_unchanged(self) -> None:
        base = category_angle("category-body")
        self.assertEqual(base + 0.2, clamp_to_sector(base + 0.2, base))

    def test_angle_past_either_edge_is_pulled_inside(self) -> None:
        base = category_angle("category-body")
        half = SECTOR_ANGLE / 2
        self.assertAlmostEqual(base + half - SECTOR_CLAMP_MARGIN, clamp_to_sector(base + 1.0, base))
        self.assertAlmostEqual(base - half + SECTOR_CLAMP_MARGIN, clamp_to_sector(base - 1.0, base))

    def test_sector_crossing_the_seam(self) -> None:
        # Creativity's sector straddles +/-pi
        base = category_angle("category-creativity")
        self.assertEqual(-3.0, clamp_to_sector(-3.0, base))
        self.assertTrue(in_sector(-3.0, base))


if __name__ == "__main__":
    unittest.main()
