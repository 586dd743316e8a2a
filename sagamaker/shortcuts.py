"""Keyboard accelerators and the help text that lists them."""

from typing import Dict, List, Tuple

# Window action -> GTK accelerators
ACCELERATORS: Dict[str, List[str]] = {
    "reset-view": ["<Control>0"],
    "show-shortcuts": ["<Control>slash", "F1"],
    "quit": ["<Control>q"],
}

# Keys handled by the canvas itself rather than by a window action
CANVAS_KEYS: List[Tuple[str, str]] = [
    ("Add Child Skill", "Insert"),
    ("Add Child Skill", "Tab"),
    ("Delete Skill", "Delete"),
    ("Close Panel", "Escape"),
    ("Reset View", "Home"),
]

ACTION_TITLES = {
    "reset-view": "Reset View",
    "show-shortcuts": "Keyboard Shortcuts",
    "quit": "Quit",
}

POINTER_HINTS: List[Tuple[str, str]] = [
    ("Select or Deselect a Skill", "Click a skill"),
    ("Add Child Skill", "Click the + under a skill"),
    ("Pan", "Drag the background"),
    ("Zoom", "Scroll"),
]


def accelerator_label(accel: str) -> str:
    """Human-readable form of a GTK accelerator string."""
    label = accel.replace("<Control>", "Ctrl+").replace("<Shift>", "Shift+").replace("<Alt>", "Alt+")
    modifiers, _, key = label.rpartition("+")
    key = {"slash": "/", "Escape": "Esc"}.get(key, key)
    if len(key) == 1:
        key = key.upper()
    return f"{modifiers}+{key}" if modifiers else key


def help_sections() -> List[Tuple[str, List[Tuple[str, str]]]]:
    """Rows for the shortcuts window, grouped by section."""
    keyboard: Dict[str, List[str]] = {}
    for title, key in CANVAS_KEYS:
        keyboard.setdefault(title, []).append(accelerator_label(key))
    for action, accels in ACCELERATORS.items():
        keyboard.setdefault(ACTION_TITLES[action], []).extend(
            accelerator_label(a) for a in accels
        )

    return [
        ("Pointer", list(POINTER_HINTS)),
        ("Keyboard", [(title, " or ".join(keys)) for title, keys in keyboard.items()]),
    ]
