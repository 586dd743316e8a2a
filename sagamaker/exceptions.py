"""Skill tree exceptions."""

from typing import Optional


class SkillTreeError(Exception):
    """Base skill tree exception."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(SkillTreeError):
    """A node id is absent from the current document."""

    def __init__(self, node_id: str):
        super().__init__(f"Node not found: {node_id}")
        self.node_id = node_id


class Forbidden(SkillTreeError):
    """The operation is not allowed on this node."""

    def __init__(self, node_id: str, message: Optional[str] = None):
        super().__init__(message or f"Operation not allowed on node: {node_id}")
        self.node_id = node_id


class Corrupt(SkillTreeError):
    """The persisted document could not be parsed or is inconsistent."""

    def __init__(self, reason: str):
        super().__init__(f"Corrupt skill tree document: {reason}")
        self.reason = reason
