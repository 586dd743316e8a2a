from __future__ import annotations

import json
from pathlib import Path
from tempfile import TemporaryDirectory
import unittest

from sagamaker.database import (
    CATEGORY_IDS,
    STORAGE_KEY,
    Database,
    MemoryStorage,
    SkillNode,
    SkillTreeDocument,
    get_category,
)
from sagamaker.exceptions import Corrupt


class TestSkillNode(unittest.TestCase):
    def test_to_dict_uses_document_keys_and_omits_empty_fields(self) -> None:
        root = SkillNode(id="category-body", name="Body", x=1.0, y=2.0,
                         root_category_id="category-body")
        skill = SkillNode(id="s1", name="Run", x=3.0, y=4.0, parent_id="category-body",
                          root_category_id="category-body", emoji="🏃")

        self.assertNotIn("parentId", root.to_dict())
        self.assertNotIn("emoji", root.to_dict())
        self.assertEqual(
            {"id": "s1", "name": "Run", "x": 3.0, "y": 4.0,
             "parentId": "category-body", "rootCategory": "category-body", "emoji": "🏃"},
            skill.to_dict(),
        )

    def test_root_without_category_points_at_itself(self) -> None:
        node = SkillNode.from_dict({"id": "category-mind", "name": "Mind", "x": 0, "y": 0})
        self.assertTrue(node.is_root)
        self.assertEqual("category-mind", node.root_category_id)

    def test_invalid_records_raise_corrupt(self) -> None:
        bad_records = [
            "not a dict",
            {"name": "no id", "x": 0, "y": 0},
            {"id": "a", "name": "A", "x": "1", "y": 0},
            {"id": "a", "name": "A", "x": True, "y": 0},
            {"id": "a", "name": "A", "x": float("inf"), "y": 0},
            {"id": "a", "name": "A", "x": 0, "y": float("nan")},
            {"id": "a", "name": "A", "x": 10 ** 400, "y": 0},
            {"id": "a", "name": 7, "x": 0, "y": 0},
            {"id": "a", "name": "A", "x": 0, "y": 0, "parentId": 3},
        ]
        for record in bad_records:
            with self.subTest(record=record):
                with self.assertRaises(Corrupt):
                    SkillNode.from_dict(record)


class TestSkillTreeDocument(unittest.TestCase):
    def test_json_keeps_emoji_readable(self) -> None:
        doc = SkillTreeDocument(nodes=[
            SkillNode(id="category-body", name="Body", x=0.0, y=0.0,
                      root_category_id="category-body", emoji="⭐"),
        ])
        text = doc.to_json()
        self.assertIn("⭐", text)
        self.assertEqual(doc.nodes, SkillTreeDocument.from_json(text).nodes)

    def test_json_refuses_non_finite_positions(self) -> None:
        doc = SkillTreeDocument(nodes=[
            SkillNode(id="category-body", name="Body", x=float("nan"), y=0.0,
                      root_category_id="category-body"),
        ])
        with self.assertRaises(ValueError):
            doc.to_json()

    def test_unreadable_documents_raise_corrupt(self) -> None:
        for raw in ["", "{not json", "[]", json.dumps({"nodes": []}), json.dumps({"other": 1})]:
            with self.subTest(raw=raw):
                with self.assertRaises(Corrupt) as ctx:
                    SkillTreeDocument.from_json(raw)
                self.assertTrue(ctx.exception.message.startswith("Corrupt skill tree document"))


class TestCategories(unittest.TestCase):
    def test_five_fixed_categories(self) -> None:
        self.assertEqual(5, len(CATEGORY_IDS))
        self.assertEqual("Professionalism", get_category("category-professionalism").name)
        self.assertIsNone(get_category("category-luck"))


class TestMemoryStorage(unittest.TestCase):
    def test_get_set_remove(self) -> None:
        storage = MemoryStorage({"a": "1"})
        self.assertEqual("1", storage.get("a"))
        storage.set("a", "2")
        self.assertEqual("2", storage.get("a"))
        storage.remove("a")
        storage.remove("a")
        self.assertIsNone(storage.get("a"))


class TestDatabase(unittest.TestCase):
    def _db_path(self) -> Path:
        td = TemporaryDirectory()
        self.addCleanup(td.cleanup)
        return Path(td.name) / "sagamaker.db"

    def test_missing_key_returns_none(self) -> None:
        db = Database(self._db_path())
        self.addCleanup(db.close)
        self.assertIsNone(db.get(STORAGE_KEY))

    def test_value_survives_reopen(self) -> None:
        path = self._db_path()
        db = Database(path)
        db.set(STORAGE_KEY, '{"nodes": []}')
        db.set(STORAGE_KEY, '{"nodes": [1]}')
        db.close()

        reopened = Database(path)
        self.addCleanup(reopened.close)
        self.assertEqual('{"nodes": [1]}', reopened.get(STORAGE_KEY))

    def test_remove_deletes_the_key(self) -> None:
        db = Database(self._db_path())
        self.addCleanup(db.close)
        db.set("k", "v")
        db.remove("k")
        self.assertIsNone(db.get("k"))


if __name__ == "__main__":
    unittest.main()
