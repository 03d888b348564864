"""Perception engine exposing perceive, describe and quick scan."""

from __future__ import annotations

import concurrent.futures
import threading
import time
from typing import Any, Callable

from core.logging import log_snapshot, logger
from vision.description import describe as describe_entities
from vision.detections import EMPTY_SNAPSHOT, PerceptionOutcome, PerceivedEntity, Snapshot
from vision.dispatcher import FanInDispatcher
from vision.event_bus import PerceptionEventBus
from vision.frames import FrameDecodeError, decode_frame
from vision.fusion import fuse
from vision.recognizers import Classifier, Detector, NullClassifier, NullDetector
from vision.settings import PerceptionSettings


SnapshotCallback = Callable[[Snapshot], None]


class PerceptionEngine:
    """Fuse detector and classifier output into the current scene snapshot.

    Exactly one snapshot is current. Every completed pass replaces it under a
    single writer lock, so concurrent ``perceive`` calls never interleave and
    readers only ever see a complete, immutable snapshot.
    """

    def __init__(
        self,
        detector: Detector | None = None,
        classifier: Classifier | None = None,
        settings: PerceptionSettings | None = None,
        executor: concurrent.futures.Executor | None = None,
        event_bus: PerceptionEventBus | None = None,
    ) -> None:
        self.settings = settings or PerceptionSettings()
        self._owns_executor = executor is None
        self._executor = executor or concurrent.futures.ThreadPoolExecutor(
            max_workers=self.settings.max_workers,
            thread_name_prefix="perception-recognizer",
        )
        self._dispatcher = FanInDispatcher(
            detector or NullDetector(),
            classifier or NullClassifier(),
            self._executor,
            self.settings,
        )
        self._event_bus = event_bus

        self._lock = threading.Lock()
        self._write_lock = threading.RLock()
        self._current: Snapshot = EMPTY_SNAPSHOT
        self._subscribers: set[SnapshotCallback] = set()
        self._closed = False
        self._in_flight = 0
        self._perceptions_completed = 0
        self._last_perception_monotonic: float | None = None

    def __enter__(self) -> "PerceptionEngine":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Shut down the owned worker pool (safe to call repeatedly)."""

        with self._lock:
            if self._closed:
                return
            self._closed = True
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

    def perceive(self, frame: Any) -> Snapshot:
        """Run both recognizers over ``frame`` and make the fused result current.

        Recognizer failures and malformed frames degrade to an empty
        snapshot; only use after ``close`` raises.
        """

        with self._lock:
            if self._closed:
                raise RuntimeError("PerceptionEngine is closed")
            self._in_flight += 1

        try:
            try:
                decoded = decode_frame(frame)
            except FrameDecodeError as exc:
                logger.warning("[PERCEPTION] Nothing to perceive: %s", exc)
                return self._publish((), None, PerceptionOutcome.NOTHING_TO_PERCEIVE)

            detector_entities, classifier_entities = self._dispatcher.dispatch(decoded)
            entities = fuse(detector_entities, classifier_entities, self.settings.snapshot_cap)
            outcome = PerceptionOutcome.PERCEIVED if entities else PerceptionOutcome.NO_SIGNAL
            return self._publish(entities, decoded.frame_id, outcome)
        finally:
            with self._lock:
                self._in_flight -= 1

    def describe(self, snapshot: Snapshot | None = None) -> str:
        """Describe ``snapshot``, or the current snapshot when omitted."""

        if snapshot is None:
            snapshot = self.get_current_snapshot()
        return describe_entities(snapshot, top_n=self.settings.description_top_n)

    def quick_scan(self, frame: Any) -> str:
        """Perceive ``frame`` and describe the resulting snapshot."""

        return self.describe(self.perceive(frame))

    def get_current_snapshot(self) -> Snapshot:
        with self._lock:
            return self._current

    def is_processing(self) -> bool:
        with self._lock:
            return self._in_flight > 0

    def subscribe(self, callback: SnapshotCallback) -> None:
        """Subscribe to future snapshot replacements."""

        with self._lock:
            self._subscribers.add(callback)

    def unsubscribe(self, callback: SnapshotCallback) -> None:
        with self._lock:
            self._subscribers.discard(callback)

    def get_runtime_status(self) -> dict[str, int | float | str]:
        """Return counters describing recent perception activity."""

        now = time.monotonic()
        with self._lock:
            current = self._current
            last_age_s = (
                now - self._last_perception_monotonic
                if self._last_perception_monotonic is not None
                else -1.0
            )
            status: dict[str, int | float | str] = {
                "in_flight": self._in_flight,
                "perceptions_completed": self._perceptions_completed,
                "last_outcome": current.outcome.value,
                "last_entity_count": len(current),
                "last_perception_age_s": round(last_age_s, 3) if last_age_s >= 0.0 else -1.0,
                "last_labels": ", ".join(
                    f"{entity.label}:{entity.confidence:.2f}" for entity in current
                ),
            }
        return status

    def _publish(
        self,
        entities: tuple[PerceivedEntity, ...],
        frame_id: int | None,
        outcome: PerceptionOutcome,
    ) -> Snapshot:
        snapshot = Snapshot(
            entities=tuple(entities),
            frame_id=frame_id,
            timestamp_ms=int(time.time() * 1000),
            outcome=outcome,
        )

        with self._write_lock:
            with self._lock:
                self._current = snapshot
                self._perceptions_completed += 1
                self._last_perception_monotonic = time.monotonic()
                subscribers = list(self._subscribers)

            log_snapshot(snapshot)

            if self._event_bus is not None:
                self._event_bus.publish_description(self.describe(snapshot), snapshot)

            for callback in subscribers:
                try:
                    callback(snapshot)
                except Exception:
                    logger.exception("[PERCEPTION] Subscriber callback failed")

        return snapshot
