"""Persistence layer for Saga Maker.

The skill tree is kept as one JSON document in a small key-value table. The
storage only knows about strings; encoding and decoding the document is done
by ``SkillTreeDocument``.
"""

import sqlite3
import json
import logging
import math
from pathlib import Path
from typing import Optional, List, Dict, Any, Protocol
from dataclasses import dataclass, field

from sagamaker.exceptions import Corrupt

logger = logging.getLogger(__name__)

STORAGE_KEY = "skillTreeData"


def get_data_dir() -> Path:
    """Get the application data directory."""
    data_dir = Path.home() / ".local" / "share" / "sagamaker"
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_db_path() -> Path:
    """Get the database file path."""
    return get_data_dir() / "sagamaker.db"


@dataclass(frozen=True)
class Category:
    """One of the fixed top-level categories."""
    id: str
    name: str


CATEGORIES = (
    Category("category-body", "Body"),
    Category("category-mind", "Mind"),
    Category("category-spirit", "Spirit"),
    Category("category-professionalism", "Professionalism"),
    Category("category-creativity", "Creativity"),
)

CATEGORY_IDS = tuple(c.id for c in CATEGORIES)


def get_category(category_id: str) -> Optional[Category]:
    for category in CATEGORIES:
        if category.id == category_id:
            return category
    return None


@dataclass(frozen=True)
class SkillNode:
    """A vertex of the skill tree."""
    id: str
    name: str
    x: float
    y: float
    parent_id: Optional[str] = None
    root_category_id: Optional[str] = None
    emoji: Optional[str] = None

    @property
    def position(self):
        return (self.x, self.y)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "name": self.name, "x": self.x, "y": self.y}
        if self.parent_id is not None:
            data["parentId"] = self.parent_id
        if self.root_category_id is not None:
            data["rootCategory"] = self.root_category_id
        if self.emoji:
            data["emoji"] = self.emoji
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "SkillNode":
        if not isinstance(data, dict):
            raise Corrupt("node record is not an object")

        node_id = data.get("id")
        if not isinstance(node_id, str) or not node_id:
            raise Corrupt("node record without a valid id")

        name = data.get("name", "")
        if not isinstance(name, str):
            raise Corrupt(f"node {node_id} has a non-text name")

        x, y = data.get("x"), data.get("y")
        for value in (x, y):
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise Corrupt(f"node {node_id} has an invalid position")

        parent_id = data.get("parentId")
        root_category_id = data.get("rootCategory")
        emoji = data.get("emoji")
        for key, value in (("parentId", parent_id), ("rootCategory", root_category_id),
                           ("emoji", emoji)):
            if value is not None and not isinstance(value, str):
                raise Corrupt(f"node {node_id} has an invalid {key}")

        if parent_id is None and root_category_id is None:
            root_category_id = node_id

        try:
            fx, fy = float(x), float(y)
        except OverflowError as exc:
            raise Corrupt(f"node {node_id} has an invalid position") from exc
        if not (math.isfinite(fx) and math.isfinite(fy)):
            raise Corrupt(f"node {node_id} has an invalid position")

        return cls(
            id=node_id,
            name=name,
            x=fx,
            y=fy,
            parent_id=parent_id,
            root_category_id=root_category_id,
            emoji=emoji or None,
        )


@dataclass
class SkillTreeDocument:
    """The single persisted document: ``{"nodes": [...]}``."""
    nodes: List[SkillNode] = field(default_factory=list)

    def to_json(self) -> str:
        return json.dumps({"nodes": [n.to_dict() for n in self.nodes]}, ensure_ascii=False,
                          allow_nan=False)

    @classmethod
    def from_json(cls, data: Optional[str]) -> "SkillTreeDocument":
        if not data:
            raise Corrupt("document is empty")
        try:
            payload = json.loads(data)
        except (ValueError, TypeError, RecursionError) as exc:
            # ValueError covers JSONDecodeError and oversized integer literals
            raise Corrupt(f"invalid JSON ({type(exc).__name__})") from exc

        if not isinstance(payload, dict):
            raise Corrupt("document is not an object")
        nodes = payload.get("nodes")
        if not isinstance(nodes, list) or not nodes:
            raise Corrupt("document has no nodes")

        return cls(nodes=[SkillNode.from_dict(n) for n in nodes])


class KeyValueStorage(Protocol):
    """Synchronous string key-value storage."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryStorage:
    """In-memory storage, used headless and in tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class Database:
    """SQLite-backed key-value storage for Saga Maker."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path or get_db_path()
        self._conn: Optional[sqlite3.Connection] = None
        self._init_db()

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def _init_db(self):
        """Initialize the database schema."""
        self.conn.executescript("""
            CREATE TABLE IF NOT EXISTS storage (
                key TEXT PRIMARY KEY,
                value TEXT
            );
        """)
        self.conn.commit()
        logger.debug("Opened storage at %s", self.db_path)

    def close(self):
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def get(self, key: str) -> Optional[str]:
        cursor = self.conn.cursor()
        cursor.execute("SELECT value FROM storage WHERE key = ?", (key,))
        row = cursor.fetchone()
        if not row:
            return None
        return row["value"]

    def set(self, key: str, value: str) -> None:
        self.conn.execute(
            "INSERT OR REPLACE INTO storage (key, value) VALUES (?, ?)",
            (key, value)
        )
        self.conn.commit()

    def remove(self, key: str) -> None:
        self.conn.execute("DELETE FROM storage WHERE key = ?", (key,))
        self.conn.commit()
