"""Angle and position helpers for the skill tree layout."""

import math
from typing import Tuple

from sagamaker.database import CATEGORIES, CATEGORY_IDS

Point = Tuple[float, float]

CANVAS_WIDTH = 5000
CANVAS_HEIGHT = 5000
CANVAS_CENTER: Point = (CANVAS_WIDTH / 2, CANVAS_HEIGHT / 2)

CIRCLE_RADIUS = 200
NODE_RADIUS = 60
MIN_DISTANCE = NODE_RADIUS * 2.5 + 20

SECTOR_ANGLE = (2 * math.pi) / len(CATEGORIES)
SECTOR_SLOTS = 5
SECTOR_CLAMP_MARGIN = 0.1
SKILL_ANGLE_INCREMENT = math.pi / 4


def circle_position(index: int, total: int, center: Point = CANVAS_CENTER,
                    radius: float = CIRCLE_RADIUS) -> Tuple[float, float, float]:
    """Place item ``index`` of ``total`` on a ring, starting at the top.

    Returns ``(x, y, angle)``.
    """
    angle = (2 * math.pi * index) / total - math.pi / 2
    return (
        center[0] + radius * math.cos(angle),
        center[1] + radius * math.sin(angle),
        angle,
    )


def category_angle(category_id: str) -> float:
    """Ring angle of a fixed category."""
    if category_id not in CATEGORY_IDS:
        raise KeyError(category_id)
    return circle_position(CATEGORY_IDS.index(category_id), len(CATEGORIES))[2]


def normalize_angle(angle: float) -> float:
    """Wrap an angle into (-pi, pi]."""
    wrapped = math.fmod(angle + math.pi, 2 * math.pi)
    if wrapped <= 0:
        wrapped += 2 * math.pi
    return wrapped - math.pi


def distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def angle_between(origin: Point, target: Point) -> float:
    """Direction from ``origin`` to ``target``."""
    return math.atan2(target[1] - origin[1], target[0] - origin[0])


def point_at(origin: Point, angle: float, radius: float) -> Point:
    return (
        origin[0] + radius * math.cos(angle),
        origin[1] + radius * math.sin(angle),
    )


def calculate_child_angle(existing_sibling_count: int, base_angle: float,
                          is_root_category: bool = False) -> float:
    """Direction for the next child of a parent.

    Children of a root category are spread over the category's sector in
    ``SECTOR_SLOTS`` evenly spaced slots; the first child always points
    straight out along ``base_angle``. Children of skill nodes fan out in
    fixed increments from the inherited direction.
    """
    if not is_root_category:
        return base_angle + existing_sibling_count * SKILL_ANGLE_INCREMENT

    if existing_sibling_count == 0:
        return base_angle

    sector_start = base_angle - SECTOR_ANGLE / 2
    slot_angle = SECTOR_ANGLE / SECTOR_SLOTS
    slot = existing_sibling_count % SECTOR_SLOTS
    return sector_start + slot * slot_angle + slot_angle / 2


def clamp_to_sector(angle: float, base_angle: float) -> float:
    """Pull ``angle`` back inside the sector centered on ``base_angle``.

    Angles already inside the sector are returned unchanged. The comparison
    uses the wrapped difference so sectors crossing the +/-pi seam work.
    """
    half = SECTOR_ANGLE / 2
    offset = normalize_angle(angle - base_angle)
    if offset < -half:
        return base_angle - half + SECTOR_CLAMP_MARGIN
    if offset > half:
        return base_angle + half - SECTOR_CLAMP_MARGIN
    return angle


def in_sector(angle: float, base_angle: float) -> bool:
    return abs(normalize_angle(angle - base_angle)) <= SECTOR_ANGLE / 2 + 1e-9
