"""Canvas widget for rendering the skill tree."""

import math
from typing import Optional, Tuple

import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Gdk", "4.0")
from gi.repository import Gtk, Gdk

import cairo

from sagamaker.controller import ADD_BUTTON_RADIUS, ViewController
from sagamaker.database import SkillNode
from sagamaker.geometry import CANVAS_HEIGHT, CANVAS_WIDTH, NODE_RADIUS
from sagamaker.icons import display_icon
from sagamaker.layout import (
    BASE_FONT_SIZE,
    ICON_DISC_RADIUS,
    ICON_FONT_SIZE,
    fit_font_size,
    node_layout,
    wrap_lines,
)


class SkillTreeCanvas(Gtk.DrawingArea):
    """Draws the tree and forwards gestures to the view controller."""

    COLORS = {
        'bg_top': (0.118, 0.227, 0.541),          # #1e3a8a
        'bg_bottom': (0.067, 0.094, 0.153),       # #111827
        'canvas_area': (0.031, 0.212, 0.463),     # #083676
        'link': (0.376, 0.647, 0.980),            # #60a5fa
        'node_fill': (1.0, 1.0, 1.0),
        'root_border': (0.298, 0.114, 0.584),     # #4c1d95
        'skill_border': (0.231, 0.510, 0.965),    # #3b82f6
        'root_text': (0.298, 0.114, 0.584),
        'skill_text': (0.118, 0.227, 0.541),      # #1e3a8a
        'glow': (0.984, 0.749, 0.141),            # #fbbf24
    }

    DRAG_THRESHOLD = 5

    def __init__(self, controller: ViewController):
        super().__init__()

        self.controller = controller
        self.controller.on_changed = self.queue_draw

        self.last_mouse_x = 0.0
        self.last_mouse_y = 0.0
        self.hovered_id: Optional[str] = None

        self._drag_start: Tuple[float, float] = (0.0, 0.0)
        self._drag_exceeded_threshold = False
        self._view_initialized = False

        self.set_draw_func(self._on_draw)
        self.set_focusable(True)
        self.set_can_focus(True)
        self.set_hexpand(True)
        self.set_vexpand(True)

        self.connect("resize", self._on_resize)
        self._setup_event_controllers()

    def _setup_event_controllers(self):
        """Setup mouse and keyboard event controllers."""
        motion_ctrl = Gtk.EventControllerMotion()
        motion_ctrl.connect("motion", self._on_motion)
        motion_ctrl.connect("leave", self._on_leave)
        self.add_controller(motion_ctrl)

        scroll_ctrl = Gtk.EventControllerScroll()
        scroll_ctrl.set_flags(Gtk.EventControllerScrollFlags.VERTICAL)
        scroll_ctrl.connect("scroll", self._on_scroll)
        self.add_controller(scroll_ctrl)

        key_ctrl = Gtk.EventControllerKey()
        key_ctrl.connect("key-pressed", self._on_key_pressed)
        self.add_controller(key_ctrl)

        # A primary drag below the threshold counts as a click
        drag_ctrl = Gtk.GestureDrag()
        drag_ctrl.set_button(1)
        drag_ctrl.connect("drag-begin", self._on_drag_begin)
        drag_ctrl.connect("drag-update", self._on_drag_update)
        drag_ctrl.connect("drag-end", self._on_drag_end)
        self.add_controller(drag_ctrl)

    # ==================== Drawing ====================

    def _on_draw(self, area, cr, width, height):
        """Main drawing function."""
        cr.save()

        gradient = cairo.LinearGradient(0, 0, width, height)
        gradient.add_color_stop_rgb(0, *self.COLORS['bg_top'])
        gradient.add_color_stop_rgb(1, *self.COLORS['bg_bottom'])
        cr.set_source(gradient)
        cr.paint()

        t = self.controller.transform
        cr.translate(t.pan_x, t.pan_y)
        cr.scale(t.zoom, t.zoom)

        cr.set_source_rgba(*self.COLORS['canvas_area'], 0.1)
        cr.rectangle(0, 0, CANVAS_WIDTH, CANVAS_HEIGHT)
        cr.fill()

        nodes = self.controller.store.nodes
        self._draw_links(cr, nodes)
        for node in nodes.values():
            self._draw_node(cr, node)

        cr.restore()

    def _draw_links(self, cr, nodes):
        cr.save()
        cr.set_source_rgb(*self.COLORS['link'])
        cr.set_line_width(3)
        cr.set_line_cap(cairo.LINE_CAP_ROUND)
        for node in nodes.values():
            parent = nodes.get(node.parent_id) if node.parent_id else None
            if parent is None:
                continue
            cr.move_to(parent.x, parent.y)
            cr.line_to(node.x, node.y)
        cr.stroke()
        cr.restore()

    def _draw_node(self, cr, node: SkillNode):
        is_selected = node.id == self.controller.selected_id
        is_hovered = node.id == self.hovered_id
        border = self.COLORS['root_border'] if node.is_root else self.COLORS['skill_border']

        cr.save()

        if is_selected:
            for i in range(3):
                cr.set_source_rgba(*self.COLORS['glow'], 0.35 - i * 0.1)
                cr.arc(node.x, node.y, NODE_RADIUS + 4 + i * 4, 0, 2 * math.pi)
                cr.set_line_width(4)
                cr.stroke()

        cr.arc(node.x, node.y, NODE_RADIUS, 0, 2 * math.pi)
        cr.set_source_rgb(*self.COLORS['node_fill'])
        cr.fill_preserve()
        cr.set_source_rgb(*border)
        cr.set_line_width(5 if is_hovered else 4)
        cr.stroke()

        layout = node_layout(node)

        # Icon on a translucent disc at the node center
        icon_x, icon_y = layout.icon_center
        cr.arc(icon_x, icon_y, ICON_DISC_RADIUS, 0, 2 * math.pi)
        cr.set_source_rgba(1, 1, 1, 0.6)
        cr.fill()

        cr.set_font_size(ICON_FONT_SIZE)
        icon = display_icon(node.emoji)
        extents = cr.text_extents(icon)
        cr.move_to(icon_x - extents.x_advance / 2, icon_y + extents.height / 2)
        cr.set_source_rgb(0, 0, 0)
        cr.show_text(icon)

        self._draw_name(cr, node, layout.label_center)
        self._draw_add_button(cr, layout.add_button_center)

        cr.restore()

    def _draw_name(self, cr, node: SkillNode, center):
        cr.select_font_face("Sans", cairo.FONT_SLANT_NORMAL, cairo.FONT_WEIGHT_BOLD)
        cr.set_font_size(BASE_FONT_SIZE)

        def measure(text: str) -> float:
            return cr.text_extents(text).x_advance

        lines = wrap_lines(node.name, measure)
        size = fit_font_size(lines, measure)
        cr.set_font_size(size)

        color = self.COLORS['root_text'] if node.is_root else self.COLORS['skill_text']
        cr.set_source_rgb(*color)

        cx, cy = center
        line_height = size * 1.2
        top = cy - line_height * len(lines) / 2
        for index, line in enumerate(lines):
            extents = cr.text_extents(line)
            cr.move_to(cx - extents.x_advance / 2, top + line_height * (index + 0.8))
            cr.show_text(line)

    def _draw_add_button(self, cr, center):
        cx, cy = center
        cr.arc(cx, cy, ADD_BUTTON_RADIUS, 0, 2 * math.pi)
        cr.set_source_rgb(*self.COLORS['skill_border'])
        cr.fill_preserve()
        cr.set_source_rgb(1, 1, 1)
        cr.set_line_width(2)
        cr.stroke()

        arm = ADD_BUTTON_RADIUS * 0.5
        cr.move_to(cx - arm, cy)
        cr.line_to(cx + arm, cy)
        cr.move_to(cx, cy - arm)
        cr.line_to(cx, cy + arm)
        cr.set_line_width(2.5)
        cr.stroke()

    # ==================== Events ====================

    def _on_resize(self, area, width, height):
        self.controller.set_viewport(width, height)
        if not self._view_initialized:
            self._view_initialized = True
            self.controller.reset_view()

    def _on_motion(self, controller, x, y):
        """Handle mouse motion."""
        self.last_mouse_x = x
        self.last_mouse_y = y

        node = self.controller.node_at(x, y)
        new_hover = node.id if node else None
        if new_hover != self.hovered_id:
            self.hovered_id = new_hover
            self.queue_draw()

    def _on_leave(self, controller):
        if self.hovered_id:
            self.hovered_id = None
            self.queue_draw()

    def _on_scroll(self, controller, dx, dy):
        """Zoom toward the pointer."""
        if dy == 0:
            return False
        self.controller.zoom_at(self.last_mouse_x, self.last_mouse_y, -1 if dy > 0 else 1)
        return True

    def _on_drag_begin(self, gesture, start_x, start_y):
        self.grab_focus()
        self._drag_start = (start_x, start_y)
        self._drag_exceeded_threshold = False
        self.controller.begin_pan()

    def _on_drag_update(self, gesture, offset_x, offset_y):
        if not self._drag_exceeded_threshold:
            if math.hypot(offset_x, offset_y) < self.DRAG_THRESHOLD:
                return
            self._drag_exceeded_threshold = True
        self.controller.update_pan(offset_x, offset_y)

    def _on_drag_end(self, gesture, offset_x, offset_y):
        self.controller.end_pan()
        if not self._drag_exceeded_threshold:
            self.controller.click(*self._drag_start)

    def _on_key_pressed(self, controller, keyval, keycode, state):
        """Handle keyboard shortcuts."""
        if keyval in (Gdk.KEY_Delete, Gdk.KEY_KP_Delete):
            self.controller.request_delete()
            return True
        if keyval == Gdk.KEY_Escape:
            self.controller.close_panel()
            return True
        if keyval == Gdk.KEY_Home:
            self.controller.reset_view()
            return True
        if keyval in (Gdk.KEY_Insert, Gdk.KEY_Tab):
            if self.controller.selected_id:
                self.controller.add_child(self.controller.selected_id)
            return True
        return False
