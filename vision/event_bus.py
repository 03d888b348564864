"""Thread-safe event bus carrying perception updates to speech and UI consumers."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
import threading
import time
from typing import Deque, Iterable

from core.logging import logger
from vision.detections import Snapshot


SCENE_DESCRIPTION_KIND = "scene_description"

_PRIORITIES = {"critical": 3, "high": 2, "normal": 1, "low": 0}


@dataclass(frozen=True)
class PerceptionEvent:
    """Published perception update."""

    kind: str
    content: str
    snapshot: Snapshot | None = None
    priority: str = "normal"
    dedupe_key: str | None = None
    created_at: float = field(default_factory=time.time)


class PerceptionEventBus:
    """Bounded queue of pending perception events."""

    def __init__(self, maxlen: int = 50) -> None:
        self._maxlen = max(1, maxlen)
        self._lock = threading.Lock()
        self._cond = threading.Condition(self._lock)
        self._queue: Deque[PerceptionEvent] = deque()

    def publish(self, event: PerceptionEvent, *, coalesce: bool = False) -> None:
        """Queue an event; with ``coalesce`` a pending event with the same key is replaced."""

        with self._cond:
            if coalesce and event.dedupe_key:
                self._remove_matching(event.dedupe_key)
            if len(self._queue) >= self._maxlen:
                dropped = self._queue.popleft()
                logger.warning("[EVENTS] Event bus full; dropping oldest %s event.", dropped.kind)
            self._queue.append(event)
            self._cond.notify()

    def publish_description(self, description: str, snapshot: Snapshot) -> None:
        """Publish a scene description, replacing any unread one."""

        self.publish(
            PerceptionEvent(
                kind=SCENE_DESCRIPTION_KIND,
                content=description,
                snapshot=snapshot,
                dedupe_key=SCENE_DESCRIPTION_KIND,
            ),
            coalesce=True,
        )

    def get_next(self, timeout: float | None = None) -> PerceptionEvent | None:
        with self._cond:
            if not self._queue:
                self._cond.wait(timeout=timeout)
            if not self._queue:
                return None
            return self._pop_highest_priority()

    def drain(self) -> Iterable[PerceptionEvent]:
        with self._cond:
            events = list(self._queue)
            self._queue.clear()
            return events

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)

    def _remove_matching(self, dedupe_key: str) -> None:
        for index, event in enumerate(self._queue):
            if event.dedupe_key == dedupe_key:
                del self._queue[index]
                return

    def _pop_highest_priority(self) -> PerceptionEvent:
        best_index = 0
        best_score = -1
        for index, event in enumerate(self._queue):
            score = _PRIORITIES.get(event.priority, 1)
            if score > best_score:
                best_score = score
                best_index = index
        event = self._queue[best_index]
        del self._queue[best_index]
        return event
