"""Main Saga Maker application."""

import logging
import sys
from typing import Callable, Optional

import gi
gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
from gi.repository import Gtk, Gio, Adw

from sagamaker import __version__, __app_id__
from sagamaker.canvas import SkillTreeCanvas
from sagamaker.controller import ViewController
from sagamaker.database import Database, SkillNode
from sagamaker.events import CLEAR_SKILL_TREE, RESET_SKILL_TREE_VIEW, EventBus
from sagamaker.log import setup_logging
from sagamaker.shortcuts import ACCELERATORS
from sagamaker.tree_store import TreeStore
from sagamaker.widgets import PropertiesPanel, ShortcutsDialog

logger = logging.getLogger(__name__)


class SagaMakerWindow(Adw.ApplicationWindow):
    """Main application window."""

    def __init__(self, app: Adw.Application, store: TreeStore, bus: EventBus):
        super().__init__(application=app)
        self.store = store
        self.bus = bus
        self.controller = ViewController(
            store, bus=bus, confirm=self._confirm, notify=self._show_toast,
        )
        self.controller.on_selection_changed = self._on_selection_changed

        self.set_title("Saga Maker")
        self.set_default_size(1280, 860)

        self._build_ui()
        self._setup_shortcuts()
        self.connect("close-request", self._on_close_request)

    def _build_ui(self):
        """Build the main UI layout."""
        main_box = Gtk.Box(orientation=Gtk.Orientation.VERTICAL)
        main_box.append(self._build_header())

        self.main_paned = Gtk.Paned(orientation=Gtk.Orientation.HORIZONTAL)
        self.main_paned.set_vexpand(True)

        self.canvas = SkillTreeCanvas(self.controller)
        self.main_paned.set_start_child(self.canvas)
        self.main_paned.set_shrink_start_child(False)

        self.properties_panel = PropertiesPanel(self.controller)

        self.panel_revealer = Gtk.Revealer()
        self.panel_revealer.set_transition_type(Gtk.RevealerTransitionType.SLIDE_LEFT)
        self.panel_revealer.set_reveal_child(False)
        self.panel_revealer.set_child(self.properties_panel)

        self.main_paned.set_end_child(self.panel_revealer)
        self.main_paned.set_shrink_end_child(False)
        self.main_paned.set_resize_end_child(False)

        self.toast_overlay = Adw.ToastOverlay()
        self.toast_overlay.set_child(self.main_paned)
        main_box.append(self.toast_overlay)

        self.set_content(main_box)

    def _build_header(self) -> Adw.HeaderBar:
        """Build the header bar."""
        header = Adw.HeaderBar()

        menu_btn = Gtk.MenuButton()
        menu_btn.set_icon_name("open-menu-symbolic")
        menu_btn.set_tooltip_text("Menu")

        menu = Gio.Menu()

        tree_section = Gio.Menu()
        tree_section.append("Clear Skills", "win.clear-skills")
        tree_section.append("Reset View", "win.reset-view")
        tree_section.append("Reset Skill Tree", "win.reset-tree")
        menu.append_section(None, tree_section)

        help_section = Gio.Menu()
        help_section.append("Keyboard Shortcuts", "win.show-shortcuts")
        help_section.append("About Saga Maker", "win.show-about")
        menu.append_section(None, help_section)

        popover = Gtk.PopoverMenu()
        popover.set_menu_model(menu)
        menu_btn.set_popover(popover)
        header.pack_end(menu_btn)

        reset_tree_btn = Gtk.Button(label="Reset Tree")
        reset_tree_btn.add_css_class("destructive-action")
        reset_tree_btn.set_tooltip_text("Delete all custom skills")
        reset_tree_btn.connect("clicked", lambda b: self.controller.request_reset_skill_tree())
        header.pack_start(reset_tree_btn)

        add_btn = Gtk.Button()
        add_btn.set_icon_name("list-add-symbolic")
        add_btn.set_tooltip_text("Add Child Skill (Insert)")
        add_btn.connect("clicked", lambda b: self._add_child_to_selected())
        header.pack_start(add_btn)

        reset_view_btn = Gtk.Button()
        reset_view_btn.set_icon_name("zoom-original-symbolic")
        reset_view_btn.set_tooltip_text("Reset View (Ctrl+0)")
        reset_view_btn.connect("clicked", lambda b: self.bus.publish(RESET_SKILL_TREE_VIEW))
        header.pack_end(reset_view_btn)

        return header

    def _setup_shortcuts(self):
        """Setup window actions and their accelerators."""
        actions = [
            ("clear-skills", lambda: self.bus.publish(CLEAR_SKILL_TREE)),
            ("reset-view", lambda: self.bus.publish(RESET_SKILL_TREE_VIEW)),
            ("reset-tree", self.controller.request_reset_skill_tree),
            ("show-shortcuts", self._show_shortcuts),
            ("show-about", self._show_about),
            ("quit", lambda: self.close()),
        ]

        for name, callback in actions:
            action = Gio.SimpleAction.new(name, None)
            action.connect("activate", lambda a, p, cb=callback: cb())
            self.add_action(action)

            accels = ACCELERATORS.get(name)
            if accels:
                self.get_application().set_accels_for_action(f"win.{name}", accels)

    # ==================== Controller hooks ====================

    def _confirm(self, message: str, on_confirmed: Callable[[], None]):
        """Ask before a destructive change; runs ``on_confirmed`` on accept."""
        dialog = Adw.MessageDialog(
            transient_for=self,
            heading="Are you sure?",
            body=message,
        )
        dialog.add_response("cancel", "Cancel")
        dialog.add_response("confirm", "Confirm")
        dialog.set_response_appearance("confirm", Adw.ResponseAppearance.DESTRUCTIVE)
        dialog.set_default_response("cancel")
        dialog.connect("response", self._on_confirm_response, on_confirmed)
        dialog.present()

    def _on_confirm_response(self, dialog, response: str, on_confirmed: Callable[[], None]):
        if response == "confirm":
            on_confirmed()

    def _on_selection_changed(self, node: Optional[SkillNode]):
        self.properties_panel.show_node(node)
        self.panel_revealer.set_reveal_child(node is not None)
        if node is None:
            self.canvas.grab_focus()

    def _add_child_to_selected(self):
        if self.controller.selected_id is None:
            self._show_toast("Select a skill first")
            return
        self.controller.add_child(self.controller.selected_id)

    # ==================== Dialogs ====================

    def _show_shortcuts(self):
        """Show keyboard shortcuts dialog."""
        dialog = ShortcutsDialog(self)
        dialog.present()

    def _show_about(self):
        """Show about dialog."""
        about = Adw.AboutWindow(
            transient_for=self,
            application_name="Saga Maker",
            application_icon="applications-games",
            developer_name="Saga Maker Project",
            version=__version__,
            license_type=Gtk.License.MIT_X11,
            comments="Grow a personal skill tree around five life categories",
        )
        about.present()

    def _show_toast(self, message: str):
        """Show a toast notification."""
        toast = Adw.Toast(title=message)
        toast.set_timeout(3)
        self.toast_overlay.add_toast(toast)

    def _on_close_request(self, window) -> bool:
        self.controller.dispose()
        return False


class SagaMakerApp(Adw.Application):
    """Main application class."""

    def __init__(self):
        super().__init__(
            application_id=__app_id__,
            flags=Gio.ApplicationFlags.DEFAULT_FLAGS
        )
        self.db: Optional[Database] = None
        self.store: Optional[TreeStore] = None
        self.bus = EventBus()
        self.window: Optional[SagaMakerWindow] = None

    def do_startup(self):
        """Open storage and load the saved tree."""
        Adw.Application.do_startup(self)

        self.db = Database()
        self.store = TreeStore(self.db)
        self.store.load()
        logger.info("Skill tree loaded from %s", self.db.db_path)

    def do_activate(self):
        """Activate application."""
        if not self.window:
            self.window = SagaMakerWindow(self, self.store, self.bus)

        self.window.present()

    def do_shutdown(self):
        """Shutdown application."""
        if self.db:
            self.db.close()

        Adw.Application.do_shutdown(self)


def main() -> int:
    """Application entry point."""
    setup_logging()
    app = SagaMakerApp()
    return app.run(sys.argv)


if __name__ == "__main__":
    sys.exit(main())
