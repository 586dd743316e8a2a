from __future__ import annotations

import unittest

from sagamaker.shortcuts import (
    ACCELERATORS,
    ACTION_TITLES,
    CANVAS_KEYS,
    accelerator_label,
    help_sections,
)


def keyboard_rows() -> dict[str, str]:
    return dict(dict(help_sections())["Keyboard"])


class TestAcceleratorLabel(unittest.TestCase):
    def test_labels(self) -> None:
        cases = {
            "<Control>0": "Ctrl+0",
            "<Control>slash": "Ctrl+/",
            "<Control>q": "Ctrl+Q",
            "F1": "F1",
            "Escape": "Esc",
            "Delete": "Delete",
        }
        for accel, expected in cases.items():
            with self.subTest(accel=accel):
                self.assertEqual(expected, accelerator_label(accel))


class TestHelpSections(unittest.TestCase):
    def test_every_window_accelerator_is_listed(self) -> None:
        rows = keyboard_rows()
        for action, accels in ACCELERATORS.items():
            title = ACTION_TITLES[action]
            self.assertIn(title, rows)
            for accel in accels:
                self.assertIn(accelerator_label(accel), rows[title])

    def test_every_canvas_key_is_listed(self) -> None:
        rows = keyboard_rows()
        for title, key in CANVAS_KEYS:
            self.assertIn(accelerator_label(key), rows[title])

    def test_keys_for_one_command_share_a_row(self) -> None:
        rows = keyboard_rows()
        self.assertEqual("Insert or Tab", rows["Add Child Skill"])
        self.assertEqual("Home or Ctrl+0", rows["Reset View"])
        self.assertEqual("Ctrl+/ or F1", rows["Keyboard Shortcuts"])

    def test_pointer_section_comes_first(self) -> None:
        sections = [name for name, _ in help_sections()]
        self.assertEqual(["Pointer", "Keyboard"], sections)


if __name__ == "__main__":
    unittest.main()
