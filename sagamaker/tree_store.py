"""Skill tree store: the node mapping, its invariants and its persistence."""

import dataclasses
import logging
import math
import random
import secrets
import time
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Set

from sagamaker.database import (
    CATEGORIES, CATEGORY_IDS, STORAGE_KEY,
    KeyValueStorage, SkillNode, SkillTreeDocument,
)
from sagamaker.exceptions import Corrupt, Forbidden, NotFound
from sagamaker.geometry import (
    angle_between, calculate_child_angle, category_angle,
    circle_position, clamp_to_sector,
)
from sagamaker.placement import place

logger = logging.getLogger(__name__)

MAX_LINES = 3
DEFAULT_SKILL_NAME = "New Skill"
ROOT_DELETE_MESSAGE = "Cannot delete root category nodes"

IdFactory = Callable[[], str]


def new_skill_id() -> str:
    stamp = int(time.time() * 1000)
    token = secrets.token_hex(5)
    return f"skill-{stamp}-{token}"


def default_nodes() -> List[SkillNode]:
    """The five root categories on their ring positions."""
    nodes = []
    for index, category in enumerate(CATEGORIES):
        x, y, _ = circle_position(index, len(CATEGORIES))
        nodes.append(SkillNode(
            id=category.id,
            name=category.name,
            x=x,
            y=y,
            root_category_id=category.id,
        ))
    return nodes


def truncate_lines(text: str, max_lines: int = MAX_LINES) -> str:
    lines = text.replace("\r\n", "\n").split("\n")
    return "\n".join(lines[:max_lines])


def validate_nodes(nodes: Iterable[SkillNode]) -> None:
    """Raise ``Corrupt`` unless ``nodes`` form a well-formed skill forest."""
    by_id: Dict[str, SkillNode] = {}
    for node in nodes:
        if node.id in by_id:
            raise Corrupt(f"duplicate node id {node.id}")
        by_id[node.id] = node

    roots = sorted(n.id for n in by_id.values() if n.is_root)
    if roots != sorted(CATEGORY_IDS):
        raise Corrupt(f"unexpected root categories {roots}")

    for node in by_id.values():
        if node.is_root:
            if node.root_category_id != node.id:
                raise Corrupt(f"root {node.id} points at category {node.root_category_id}")
            continue

        seen = {node.id}
        current = node
        while not current.is_root:
            parent = by_id.get(current.parent_id)
            if parent is None:
                raise Corrupt(f"node {current.id} references missing parent {current.parent_id}")
            if parent.id in seen:
                raise Corrupt(f"cycle through node {parent.id}")
            seen.add(parent.id)
            current = parent

        if node.root_category_id != current.id:
            raise Corrupt(
                f"node {node.id} claims category {node.root_category_id} "
                f"but descends from {current.id}"
            )


class TreeStore:
    """Owns the skill tree and is the only writer to storage.

    Every mutation builds the next mapping, persists the whole document and
    only then swaps it in, so ``nodes`` is always a complete snapshot.
    """

    def __init__(self, storage: KeyValueStorage,
                 id_factory: Optional[IdFactory] = None,
                 rng: Optional[random.Random] = None):
        self.storage = storage
        self._id_factory = id_factory or new_skill_id
        self._rng = rng or random.Random()
        self._nodes: Dict[str, SkillNode] = {}
        self._children: Dict[str, List[str]] = {}

        self.on_changed: Optional[Callable[[], None]] = None

        self._install(default_nodes())

    # ==================== Queries ====================

    @property
    def nodes(self) -> Mapping[str, SkillNode]:
        """Read-only snapshot of the current mapping."""
        return MappingProxyType(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def get(self, node_id: str) -> SkillNode:
        node = self._nodes.get(node_id)
        if node is None:
            raise NotFound(node_id)
        return node

    def children_of(self, node_id: str) -> List[SkillNode]:
        self.get(node_id)
        return [self._nodes[c] for c in self._children.get(node_id, [])]

    def descendants_of(self, node_id: str) -> Set[str]:
        """Ids of every node below ``node_id``."""
        self.get(node_id)
        found: Set[str] = set()
        stack = list(self._children.get(node_id, []))
        while stack:
            child_id = stack.pop()
            if child_id in found:
                continue
            found.add(child_id)
            stack.extend(self._children.get(child_id, []))
        return found

    def category_of(self, node_id: str) -> SkillNode:
        node = self.get(node_id)
        return self._nodes[node.root_category_id]

    # ==================== Loading ====================

    def load(self) -> None:
        """Read the saved document, falling back to the default categories.

        Never raises for missing or unreadable data.
        """
        raw = self.storage.get(STORAGE_KEY)
        nodes: Optional[List[SkillNode]] = None

        if raw is None:
            logger.info("No saved skill tree; starting from the default categories")
        else:
            try:
                document = SkillTreeDocument.from_json(raw)
                validate_nodes(document.nodes)
                nodes = document.nodes
            except Corrupt as exc:
                logger.warning("%s; falling back to the default categories", exc.message)

        self._install(nodes if nodes is not None else default_nodes())
        logger.debug("Loaded skill tree with %d nodes", len(self._nodes))
        self._notify_changed()

    # ==================== Mutations ====================

    def add_child(self, parent_id: str, icon: Optional[str] = None) -> str:
        """Create a child under ``parent_id`` and return its id."""
        parent = self.get(parent_id)
        sibling_count = len(self._children.get(parent_id, []))

        if parent.is_root:
            angle = calculate_child_angle(sibling_count, category_angle(parent.id), True)
        else:
            category = self._nodes[parent.root_category_id]
            inherited = angle_between(category.position, parent.position)
            angle = calculate_child_angle(sibling_count, inherited, False)
            angle = clamp_to_sector(angle, category_angle(category.id))

        x, y = place(
            parent.position,
            angle,
            [n.position for n in self._nodes.values()],
            is_root_category=parent.is_root,
            rng=self._rng,
        )

        node = SkillNode(
            id=self._new_id(),
            name=DEFAULT_SKILL_NAME,
            x=x,
            y=y,
            parent_id=parent.id,
            root_category_id=parent.id if parent.is_root else parent.root_category_id,
            emoji=icon or None,
        )

        nodes = dict(self._nodes)
        nodes[node.id] = node
        self._commit(nodes)
        logger.info("Added skill %s under %s at (%.0f, %.0f), %.0f deg",
                    node.id, parent.id, x, y, math.degrees(angle))
        return node.id

    def rename(self, node_id: str, new_name: str) -> None:
        node = self.get(node_id)
        self._replace(dataclasses.replace(node, name=truncate_lines(new_name)))
        logger.debug("Renamed %s", node_id)

    def set_icon(self, node_id: str, icon: Optional[str]) -> None:
        node = self.get(node_id)
        self._replace(dataclasses.replace(node, emoji=icon or None))

    def delete(self, node_id: str) -> Set[str]:
        """Remove a skill node and everything below it; returns removed ids."""
        node = self.get(node_id)
        if node.is_root:
            raise Forbidden(node_id, ROOT_DELETE_MESSAGE)

        removed = {node_id} | self.descendants_of(node_id)
        self._commit({k: v for k, v in self._nodes.items() if k not in removed})
        logger.info("Deleted %s and %d descendant(s)", node_id, len(removed) - 1)
        return removed

    def reset_all(self) -> None:
        """Discard every skill and reinstall the default categories."""
        self._commit({n.id: n for n in default_nodes()})
        logger.info("Skill tree reset to the default categories")

    # ==================== Internals ====================

    def _new_id(self) -> str:
        for _ in range(100):
            node_id = self._id_factory()
            if node_id not in self._nodes:
                return node_id
        raise RuntimeError("id factory keeps returning ids already in use")

    def _replace(self, node: SkillNode) -> None:
        nodes = dict(self._nodes)
        nodes[node.id] = node
        self._commit(nodes)

    def _commit(self, nodes: Dict[str, SkillNode]) -> None:
        document = SkillTreeDocument(nodes=list(nodes.values()))
        self.storage.set(STORAGE_KEY, document.to_json())
        self._install(nodes.values())
        self._notify_changed()

    def _install(self, nodes: Iterable[SkillNode]) -> None:
        mapping: Dict[str, SkillNode] = {}
        children: Dict[str, List[str]] = {}
        for node in nodes:
            mapping[node.id] = node
            if node.parent_id is not None:
                children.setdefault(node.parent_id, []).append(node.id)
        self._nodes = mapping
        self._children = children

    def _notify_changed(self):
        if self.on_changed:
            self.on_changed()
