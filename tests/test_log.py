from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from tempfile import TemporaryDirectory
import unittest

from sagamaker.log import setup_logging


class TestSetupLogging(unittest.TestCase):
    def test_adds_rotating_file_handler(self) -> None:
        with TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "sagamaker.log"
            root = logging.getLogger()
            before = list(root.handlers)
            level = root.level

            setup_logging("debug", log_path)
            added = [h for h in root.handlers if h not in before]
            try:
                rotating = [h for h in added if isinstance(h, RotatingFileHandler)]
                self.assertEqual(1, len(rotating))
                handler = rotating[0]
                self.assertEqual(5 * 1024 * 1024, handler.maxBytes)
                self.assertEqual(3, handler.backupCount)

                logging.getLogger("sagamaker.test").warning("hello")
                handler.flush()
                self.assertIn("hello", log_path.read_text(encoding="utf-8"))
            finally:
                for h in added:
                    root.removeHandler(h)
                    h.close()
                root.setLevel(level)


if __name__ == "__main__":
    unittest.main()
