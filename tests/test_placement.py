from __future__ import annotations

import random
import unittest

from sagamaker.geometry import distance
from sagamaker.placement import (
    DISTANCE_STEP,
    MAX_DISTANCE_ATTEMPTS,
    ROOT_BASE_DISTANCE,
    SKILL_BASE_DISTANCE,
    clearance,
    place,
)


class TestPlace(unittest.TestCase):
    def test_first_attempt_is_used_when_clear(self) -> None:
        x, y = place((0.0, 0.0), 0.0, [], is_root_category=True)
        self.assertAlmostEqual(ROOT_BASE_DISTANCE + DISTANCE_STEP, x)
        self.assertAlmostEqual(0.0, y)

    def test_steps_outward_past_a_collision(self) -> None:
        # A skill child at 160 is too close to its own parent; 200 is not
        x, y = place((0.0, 0.0), 0.0, [(0.0, 0.0)])
        self.assertAlmostEqual(SKILL_BASE_DISTANCE + 2 * DISTANCE_STEP, x)
        self.assertAlmostEqual(0.0, y)

    def test_jitter_finds_room_when_the_ray_is_blocked(self) -> None:
        others = [(0.0, 0.0)] + [(160.0 + 40 * i, 0.0) for i in range(5)]
        point = place((0.0, 0.0), 0.0, others, rng=random.Random(3), min_distance=50)
        self.assertGreaterEqual(clearance(point, others), 50)
        self.assertNotAlmostEqual(0.0, point[1])

    def test_exhaustion_returns_best_candidate(self) -> None:
        with self.assertLogs("sagamaker.placement", level="WARNING"):
            point = place((0.0, 0.0), 0.0, [(0.0, 0.0)],
                          rng=random.Random(1), min_distance=10_000)
        farthest = SKILL_BASE_DISTANCE + MAX_DISTANCE_ATTEMPTS * DISTANCE_STEP
        self.assertAlmostEqual(farthest, distance(point, (0.0, 0.0)))

    def test_clearance_without_others_is_infinite(self) -> None:
        self.assertEqual(float("inf"), clearance((1.0, 2.0), []))


if __name__ == "__main__":
    unittest.main()
