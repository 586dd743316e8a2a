"""View state and gesture handling for the skill tree.

The controller owns everything transient about the view (pan, zoom and the
selected node) and turns user gestures into ``TreeStore`` calls. It has no
GTK dependency; the canvas forwards raw screen coordinates to it.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from sagamaker.database import SkillNode, get_category
from sagamaker.events import CLEAR_SKILL_TREE, RESET_SKILL_TREE_VIEW, EventBus
from sagamaker.exceptions import NotFound
from sagamaker.geometry import CANVAS_CENTER, NODE_RADIUS, distance
from sagamaker.tree_store import ROOT_DELETE_MESSAGE, TreeStore

logger = logging.getLogger(__name__)

MIN_ZOOM = 0.05
MAX_ZOOM = 2.0
ZOOM_STEP = 0.1

# The "+" button sits just below the node circle
ADD_BUTTON_RADIUS = 14
ADD_BUTTON_OFFSET = NODE_RADIUS + 9

CLEAR_SKILLS_MESSAGE = (
    "Are you sure you want to clear all skills? "
    "This will reset the tree to just the main categories."
)
RESET_TREE_MESSAGE = (
    "Are you sure you want to reset the skill tree? "
    "This will delete all custom skills."
)

ConfirmHook = Callable[[str, Callable[[], None]], None]
NotifyHook = Callable[[str], None]


@dataclass
class ViewTransform:
    """Pan and zoom mapping canvas units to screen pixels."""
    pan_x: float = 0.0
    pan_y: float = 0.0
    zoom: float = 1.0

    def to_canvas(self, screen_x: float, screen_y: float) -> Tuple[float, float]:
        return ((screen_x - self.pan_x) / self.zoom,
                (screen_y - self.pan_y) / self.zoom)

    def to_screen(self, x: float, y: float) -> Tuple[float, float]:
        return (x * self.zoom + self.pan_x, y * self.zoom + self.pan_y)


def delete_message(node: SkillNode) -> str:
    return f'Are you sure you want to delete "{node.name}" and all its child skills?'


def describe_category(node: SkillNode) -> str:
    """Category label shown in the properties panel."""
    if node.is_root:
        return "Root Category"
    category = get_category(node.root_category_id)
    return category.name if category else "Unknown"


def _confirm_immediately(message: str, on_confirmed: Callable[[], None]) -> None:
    on_confirmed()


def _log_notice(message: str) -> None:
    logger.info("Notice: %s", message)


class ViewController:
    """Maps gestures and menu intents onto the tree store."""

    def __init__(self, store: TreeStore, bus: Optional[EventBus] = None,
                 confirm: Optional[ConfirmHook] = None,
                 notify: Optional[NotifyHook] = None):
        self.store = store
        self.confirm = confirm or _confirm_immediately
        self.notify = notify or _log_notice

        # View state
        self.transform = ViewTransform()
        self.viewport_width = 0.0
        self.viewport_height = 0.0
        self._pan_start: Optional[Tuple[float, float]] = None

        # Selection state
        self.selected_id: Optional[str] = None

        # Callbacks
        self.on_changed: Optional[Callable[[], None]] = None
        self.on_selection_changed: Optional[Callable[[Optional[SkillNode]], None]] = None

        self.store.on_changed = self._on_store_changed

        self._unsubscribers: List[Callable[[], None]] = []
        if bus is not None:
            self._unsubscribers.append(
                bus.subscribe(CLEAR_SKILL_TREE, lambda event: self.request_clear_skills())
            )
            self._unsubscribers.append(
                bus.subscribe(RESET_SKILL_TREE_VIEW, lambda event: self.reset_view())
            )

    def dispose(self):
        """Stop listening to the event bus."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    # ==================== Selection ====================

    @property
    def selected_node(self) -> Optional[SkillNode]:
        if self.selected_id is None:
            return None
        return self.store.nodes.get(self.selected_id)

    def select(self, node_id: Optional[str]):
        """Select a node, or clear the selection with ``None``."""
        if node_id is not None and node_id not in self.store:
            logger.warning("Ignoring selection of unknown node %s", node_id)
            node_id = None
        if node_id == self.selected_id:
            return
        self.selected_id = node_id
        if self.on_selection_changed:
            self.on_selection_changed(self.selected_node)
        self._notify_changed()

    def toggle_selection(self, node_id: str):
        self.select(None if self.selected_id == node_id else node_id)

    def close_panel(self):
        self.select(None)

    # ==================== View ====================

    def set_viewport(self, width: float, height: float):
        self.viewport_width = width
        self.viewport_height = height

    def center_on(self, x: float, y: float):
        """Put canvas point (x, y) in the middle of the viewport at 100%."""
        self.transform = ViewTransform(
            pan_x=self.viewport_width / 2 - x,
            pan_y=self.viewport_height / 2 - y,
            zoom=1.0,
        )
        self._notify_changed()

    def reset_view(self):
        """Re-center on the middle of the canvas."""
        self.center_on(*CANVAS_CENTER)

    def zoom_at(self, screen_x: float, screen_y: float, direction: int) -> bool:
        """Zoom one step in (direction > 0) or out, keeping the pointer fixed."""
        t = self.transform
        old_zoom = t.zoom
        factor = 1 + ZOOM_STEP if direction > 0 else 1 - ZOOM_STEP
        new_zoom = max(MIN_ZOOM, min(MAX_ZOOM, old_zoom * factor))
        if new_zoom == old_zoom:
            return False

        t.pan_x = screen_x - (screen_x - t.pan_x) * (new_zoom / old_zoom)
        t.pan_y = screen_y - (screen_y - t.pan_y) * (new_zoom / old_zoom)
        t.zoom = new_zoom
        self._notify_changed()
        return True

    def begin_pan(self):
        self._pan_start = (self.transform.pan_x, self.transform.pan_y)

    def update_pan(self, offset_x: float, offset_y: float):
        if self._pan_start is None:
            return
        self.transform.pan_x = self._pan_start[0] + offset_x
        self.transform.pan_y = self._pan_start[1] + offset_y
        self._notify_changed()

    def end_pan(self):
        self._pan_start = None

    # ==================== Hit testing ====================

    def node_at(self, screen_x: float, screen_y: float) -> Optional[SkillNode]:
        """Topmost node whose circle contains the screen point."""
        point = self.transform.to_canvas(screen_x, screen_y)
        for node in reversed(list(self.store.nodes.values())):
            if distance(point, node.position) <= NODE_RADIUS:
                return node
        return None

    def add_button_at(self, screen_x: float, screen_y: float) -> Optional[SkillNode]:
        """Node whose add-child button contains the screen point."""
        point = self.transform.to_canvas(screen_x, screen_y)
        for node in reversed(list(self.store.nodes.values())):
            if distance(point, (node.x, node.y + ADD_BUTTON_OFFSET)) <= ADD_BUTTON_RADIUS:
                return node
        return None

    def click(self, screen_x: float, screen_y: float):
        """Handle a primary click on the canvas."""
        button_node = self.add_button_at(screen_x, screen_y)
        if button_node is not None:
            self.add_child(button_node.id)
            return

        node = self.node_at(screen_x, screen_y)
        if node is not None:
            self.toggle_selection(node.id)
        else:
            self.select(None)

    # ==================== Intents ====================

    def add_child(self, parent_id: str, icon: Optional[str] = None) -> Optional[str]:
        """Create a child, select it and bring it into view."""
        try:
            new_id = self.store.add_child(parent_id, icon)
        except NotFound as exc:
            self._handle_not_found(exc)
            return None

        self.select(new_id)
        node = self.store.get(new_id)
        self.center_on(node.x, node.y)
        return new_id

    def rename_selected(self, name: str):
        if self.selected_id is None:
            return
        try:
            self.store.rename(self.selected_id, name)
        except NotFound as exc:
            self._handle_not_found(exc)

    def set_icon_selected(self, icon: Optional[str]):
        if self.selected_id is None:
            return
        try:
            self.store.set_icon(self.selected_id, icon)
        except NotFound as exc:
            self._handle_not_found(exc)

    def request_delete(self, node_id: Optional[str] = None):
        """Ask for confirmation, then delete a node and its subtree."""
        node_id = node_id or self.selected_id
        if node_id is None:
            return
        try:
            node = self.store.get(node_id)
        except NotFound as exc:
            self._handle_not_found(exc)
            return

        if node.is_root:
            self.notify(ROOT_DELETE_MESSAGE)
            return

        self.confirm(delete_message(node), lambda: self._delete(node_id))

    def request_clear_skills(self):
        self.confirm(CLEAR_SKILLS_MESSAGE, self._reset_all)

    def request_reset_skill_tree(self):
        self.confirm(RESET_TREE_MESSAGE, self._reset_all)

    def _delete(self, node_id: str):
        # Selection of a removed node is dropped by _on_store_changed
        try:
            self.store.delete(node_id)
        except NotFound as exc:
            self._handle_not_found(exc)

    def _reset_all(self):
        self.store.reset_all()
        self.select(None)

    def _handle_not_found(self, exc: NotFound):
        logger.warning("%s", exc.message)
        if self.selected_id is not None and self.selected_id not in self.store:
            self.select(None)

    # ==================== Notifications ====================

    def _on_store_changed(self):
        if self.selected_id is not None and self.selected_id not in self.store:
            self.selected_id = None
            if self.on_selection_changed:
                self.on_selection_changed(None)
        self._notify_changed()

    def _notify_changed(self):
        if self.on_changed:
            self.on_changed()
