"""In-process publish/subscribe channel between the menu and the skill tree."""

from __future__ import annotations

from collections.abc import Callable
import contextlib
from datetime import datetime, timezone
import logging
import secrets
import time
from typing import Any

logger = logging.getLogger(__name__)

CLEAR_SKILL_TREE = "clearSkillTree"
RESET_SKILL_TREE_VIEW = "resetSkillTreeView"

EventHandler = Callable[[dict[str, Any]], Any]


def utc_now_iso() -> str:
    return datetime.now(tz=timezone.utc).replace(microsecond=0).isoformat()


def new_event_id() -> str:
    stamp = int(time.time() * 1000)
    token = secrets.token_hex(4)
    return f"evt-{stamp}-{token}"


class EventBus:
    """Synchronous pub/sub bus keyed by event type."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self.events_published = 0

    def subscribe(self, event_type: str, handler: EventHandler) -> Callable[[], None]:
        self._handlers.setdefault(event_type, []).append(handler)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError, KeyError):
                self._handlers[event_type].remove(handler)

        return _unsubscribe

    def subscriber_count(self, event_type: str) -> int:
        return len(self._handlers.get(event_type, []))

    def publish(self, event_type: str, **payload: Any) -> dict[str, Any]:
        event = {
            "id": new_event_id(),
            "ts": utc_now_iso(),
            "type": str(event_type),
            "payload": payload,
        }
        self.events_published += 1
        logger.debug("Publishing %s", event_type)
        self._dispatch(event)
        return event

    def _dispatch(self, event: dict[str, Any]) -> None:
        for handler in list(self._handlers.get(event["type"], [])):
            try:
                handler(event)
            except Exception:  # pylint: disable=broad-except
                logger.exception("Handler for %s failed", event["type"])
