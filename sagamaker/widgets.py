"""Custom widgets for the Saga Maker application."""

from typing import Optional

import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
from gi.repository import Gtk, Adw, GLib

from sagamaker.controller import ViewController, describe_category
from sagamaker.database import SkillNode
from sagamaker.icons import get_all_icons
from sagamaker.shortcuts import help_sections

ICON_COLUMNS = 6


class PropertiesPanel(Gtk.Box):
    """Right sidebar for editing the selected node."""

    def __init__(self, controller: ViewController):
        super().__init__(orientation=Gtk.Orientation.VERTICAL, spacing=12)
        self.controller = controller
        self.current_node: Optional[SkillNode] = None
        self._icon_buttons = {}

        self.add_css_class("properties-panel")
        self.set_size_request(300, -1)
        self.set_margin_start(16)
        self.set_margin_end(16)
        self.set_margin_top(12)
        self.set_margin_bottom(12)

        # Header
        header = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=8)

        self.title = Gtk.Label(label="Edit Skill")
        self.title.set_hexpand(True)
        self.title.set_halign(Gtk.Align.START)
        self.title.add_css_class("title-3")
        header.append(self.title)

        close_btn = Gtk.Button(icon_name="window-close-symbolic")
        close_btn.add_css_class("flat")
        close_btn.set_tooltip_text("Close (Esc)")
        close_btn.connect("clicked", lambda b: self.controller.close_panel())
        header.append(close_btn)

        self.append(header)

        # Name editor
        name_label = Gtk.Label(label="Name")
        name_label.set_halign(Gtk.Align.START)
        name_label.add_css_class("heading")
        self.append(name_label)

        frame = Gtk.Frame()
        self.text_view = Gtk.TextView()
        self.text_view.set_wrap_mode(Gtk.WrapMode.WORD_CHAR)
        self.text_view.set_left_margin(8)
        self.text_view.set_right_margin(8)
        self.text_view.set_top_margin(8)
        self.text_view.set_bottom_margin(8)
        self.text_view.set_size_request(-1, 72)
        frame.set_child(self.text_view)
        self.append(frame)

        self.text_buffer = self.text_view.get_buffer()
        self.text_buffer.connect("changed", self._on_text_changed)

        # Icon palette
        icon_label = Gtk.Label(label="Icon")
        icon_label.set_halign(Gtk.Align.START)
        icon_label.add_css_class("heading")
        self.append(icon_label)

        grid = Gtk.Grid()
        grid.set_row_spacing(4)
        grid.set_column_spacing(4)
        for index, icon in enumerate(get_all_icons()):
            btn = Gtk.Button(label=icon)
            btn.add_css_class("flat")
            btn.connect("clicked", self._on_icon_clicked, icon)
            grid.attach(btn, index % ICON_COLUMNS, index // ICON_COLUMNS, 1, 1)
            self._icon_buttons[icon] = btn
        self.append(grid)

        # Category
        self.category_label = Gtk.Label(label="")
        self.category_label.set_halign(Gtk.Align.START)
        self.category_label.add_css_class("dim-label")
        self.append(self.category_label)

        # Delete
        self.delete_btn = Gtk.Button(label="Delete Skill")
        self.delete_btn.add_css_class("destructive-action")
        self.delete_btn.set_valign(Gtk.Align.END)
        self.delete_btn.set_vexpand(True)
        self.delete_btn.connect("clicked", lambda b: self.controller.request_delete())
        self.append(self.delete_btn)

    def show_node(self, node: Optional[SkillNode]):
        """Fill the panel from ``node``; ``None`` leaves it empty."""
        self.current_node = node
        if node is None:
            return

        self.title.set_label("Category Settings" if node.is_root else "Edit Skill")
        self.category_label.set_label(f"Category: {describe_category(node)}")
        self.delete_btn.set_visible(not node.is_root)

        self._set_buffer_text(node.name)
        self._update_icon_buttons(node.emoji)

    def _set_buffer_text(self, text: str):
        self.text_buffer.handler_block_by_func(self._on_text_changed)
        self.text_buffer.set_text(text)
        self.text_buffer.handler_unblock_by_func(self._on_text_changed)

    def _update_icon_buttons(self, active: Optional[str]):
        for icon, btn in self._icon_buttons.items():
            if icon == active:
                btn.add_css_class("suggested-action")
            else:
                btn.remove_css_class("suggested-action")

    def _on_text_changed(self, buffer):
        if not self.current_node:
            return
        start = buffer.get_start_iter()
        end = buffer.get_end_iter()
        self.controller.rename_selected(buffer.get_text(start, end, True))
        # The store keeps at most a few lines; mirror what it kept
        GLib.idle_add(self._sync_name)

    def _sync_name(self) -> bool:
        node = self.controller.selected_node
        if node is None:
            return False
        start = self.text_buffer.get_start_iter()
        end = self.text_buffer.get_end_iter()
        if self.text_buffer.get_text(start, end, True) != node.name:
            self._set_buffer_text(node.name)
        self.current_node = node
        return False

    def _on_icon_clicked(self, button, icon: str):
        if not self.current_node:
            return
        self.controller.set_icon_selected(icon)
        self.current_node = self.controller.selected_node
        self._update_icon_buttons(icon)


class ShortcutsDialog(Adw.PreferencesWindow):
    """Keyboard and pointer help, one group per section."""

    def __init__(self, parent: Gtk.Window):
        super().__init__()

        self.set_transient_for(parent)
        self.set_modal(True)
        self.set_default_size(460, 520)
        self.set_title("Keyboard Shortcuts")
        self.set_search_enabled(False)

        page = Adw.PreferencesPage()
        page.set_title("Shortcuts")
        page.set_icon_name("input-keyboard-symbolic")

        for section, rows in help_sections():
            group = Adw.PreferencesGroup()
            group.set_title(section)
            for title, keys in rows:
                row = Adw.ActionRow()
                row.set_title(title)
                keys_label = Gtk.Label(label=keys)
                keys_label.add_css_class("dim-label")
                row.add_suffix(keys_label)
                group.add(row)
            page.add(group)

        self.add(page)
