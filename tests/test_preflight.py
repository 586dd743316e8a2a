from __future__ import annotations

import os
import unittest
from unittest.mock import patch

import sagamaker.preflight as preflight


class TestPreflight(unittest.TestCase):
    def test_env_skip_bypasses_checks(self) -> None:
        with patch.dict(os.environ, {"SAGAMAKER_SKIP_PREFLIGHT": "1"}, clear=False):
            with patch.object(preflight, "_check_python_deps") as deps:
                result = preflight.run_preflight()
        self.assertTrue(result.ok)
        deps.assert_not_called()

    def test_missing_dependency_fails(self) -> None:
        with patch.dict(os.environ, {"SAGAMAKER_SKIP_PREFLIGHT": "0"}, clear=False):
            with patch.object(preflight, "_check_python_deps", return_value="no cairo"):
                result = preflight.run_preflight()
        self.assertFalse(result.ok)
        self.assertEqual("no cairo", result.message)

    def test_or_die_exits_with_status_one(self) -> None:
        with patch.dict(os.environ, {"SAGAMAKER_SKIP_PREFLIGHT": "0"}, clear=False):
            with patch.object(preflight, "_check_python_deps", return_value="no gtk"):
                with patch("sys.stderr"):
                    with self.assertRaises(SystemExit) as ctx:
                        preflight.run_preflight_or_die()
        self.assertEqual(1, ctx.exception.code)

    def test_dependency_check_can_be_skipped(self) -> None:
        with patch.dict(os.environ, {"SAGAMAKER_SKIP_PREFLIGHT": "0"}, clear=False):
            with patch.object(preflight, "_check_python_deps") as deps:
                result = preflight.run_preflight(check_deps=False)
        self.assertTrue(result.ok)
        deps.assert_not_called()


if __name__ == "__main__":
    unittest.main()
