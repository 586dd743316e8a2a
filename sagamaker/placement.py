"""Collision-avoiding placement of new nodes."""

import logging
import random
from typing import Iterable, Optional, Tuple

from sagamaker.geometry import MIN_DISTANCE, Point, distance, point_at

logger = logging.getLogger(__name__)

ROOT_BASE_DISTANCE = 150
SKILL_BASE_DISTANCE = 120
DISTANCE_STEP = 40
MAX_DISTANCE_ATTEMPTS = 5
ANGLE_JITTER = 0.5
MAX_JITTER_ROUNDS = 100


def clearance(candidate: Point, others: Iterable[Point]) -> float:
    """Distance from ``candidate`` to the nearest of ``others``."""
    return min((distance(candidate, p) for p in others), default=float("inf"))


def place(parent: Point, angle: float, others: Iterable[Point],
          is_root_category: bool = False,
          rng: Optional[random.Random] = None,
          min_distance: float = MIN_DISTANCE) -> Point:
    """Find a position for a new child of ``parent`` along ``angle``.

    Candidates step outward from the parent; after ``MAX_DISTANCE_ATTEMPTS``
    collisions the angle is nudged at random and the ramp starts over. After
    ``MAX_JITTER_ROUNDS`` restarts the candidate with the most clearance wins.
    """
    rng = rng or random.Random()
    others = list(others)
    base = ROOT_BASE_DISTANCE if is_root_category else SKILL_BASE_DISTANCE

    best: Optional[Tuple[float, Point]] = None
    for _ in range(MAX_JITTER_ROUNDS + 1):
        for attempt in range(1, MAX_DISTANCE_ATTEMPTS + 1):
            candidate = point_at(parent, angle, base + attempt * DISTANCE_STEP)
            room = clearance(candidate, others)
            if room >= min_distance:
                return candidate
            if best is None or room > best[0]:
                best = (room, candidate)
        angle += (rng.random() - 0.5) * ANGLE_JITTER

    logger.warning(
        "No collision-free position near (%.0f, %.0f); using best candidate "
        "with clearance %.1f", parent[0], parent[1], best[0]
    )
    return best[1]
