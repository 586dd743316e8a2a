from __future__ import annotations

import unittest

from sagamaker.icons import DEFAULT_ICON, ICONS, display_icon, get_all_icons


class TestIcons(unittest.TestCase):
    def test_palette_has_no_duplicates(self) -> None:
        self.assertEqual(len(ICONS), len(set(get_all_icons())))

    def test_display_falls_back_to_default(self) -> None:
        self.assertEqual(DEFAULT_ICON, display_icon(None))
        self.assertEqual(DEFAULT_ICON, display_icon(""))
        self.assertEqual("🎨", display_icon("🎨"))


if __name__ == "__main__":
    unittest.main()
