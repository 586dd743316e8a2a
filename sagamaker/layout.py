"""Where things go inside a node circle.

Kept free of cairo so the placement can be checked without a display;
text widths come from a ``measure`` callable supplied by the renderer.
"""

import math
from dataclasses import dataclass
from typing import Callable, List

from sagamaker.controller import ADD_BUTTON_OFFSET
from sagamaker.database import SkillNode
from sagamaker.geometry import NODE_RADIUS, Point
from sagamaker.tree_store import MAX_LINES

BASE_FONT_SIZE = 14
MAX_TEXT_WIDTH = NODE_RADIUS * 1.6
ICON_FONT_SIZE = 32
ICON_DISC_RADIUS = NODE_RADIUS * 0.5

# Name box, relative to the node center
LABEL_TOP = NODE_RADIUS * 0.2
LABEL_HEIGHT = NODE_RADIUS * 0.8

# Width of a string at the current font size
Measure = Callable[[str], float]


@dataclass(frozen=True)
class NodeLayout:
    """Anchor points for one node, in canvas coordinates."""
    icon_center: Point
    label_center: Point
    add_button_center: Point


def node_layout(node: SkillNode) -> NodeLayout:
    # The icon sits on the node center; the name fills the box below it
    return NodeLayout(
        icon_center=(node.x, node.y),
        label_center=(node.x, node.y + LABEL_TOP + LABEL_HEIGHT / 2),
        add_button_center=(node.x, node.y + ADD_BUTTON_OFFSET),
    )


def fit_font_size(lines: List[str], measure: Measure) -> float:
    """Font size that keeps the widest line inside the node circle.

    ``measure`` must report widths at ``BASE_FONT_SIZE``.
    """
    line_count = max(1, len(lines))
    widest = max((measure(line) for line in lines), default=0)
    size = BASE_FONT_SIZE
    if widest > MAX_TEXT_WIDTH:
        size = math.floor(BASE_FONT_SIZE * MAX_TEXT_WIDTH / widest)
    return min(size, BASE_FONT_SIZE / line_count)


def wrap_lines(text: str, measure: Measure, max_width: float = MAX_TEXT_WIDTH) -> List[str]:
    """Word-wrap each explicit line to ``max_width`` and keep the first few."""
    result: List[str] = []
    for paragraph in text.split("\n"):
        current = ""
        for word in paragraph.split(" "):
            candidate = f"{current} {word}" if current else word
            if current and measure(candidate) > max_width:
                result.append(current)
                current = word
            else:
                current = candidate
        result.append(current)
    return result[:MAX_LINES]
