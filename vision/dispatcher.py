"""Fan-out/fan-in dispatch of the detector and classifier over one frame."""

from __future__ import annotations

import concurrent.futures
from typing import Callable

from core.logging import logger
from vision.detections import (
    FULL_FRAME_REGION,
    PerceivedEntity,
    RawResult,
    RecognizerSource,
)
from vision.frames import Frame
from vision.labels import normalize_label
from vision.recognizers import Classifier, Detector, coerce_raw_results
from vision.sectors import Sector, locate_sector
from vision.settings import PerceptionSettings


class FanInDispatcher:
    """Run both recognizers concurrently and threshold their results.

    Both branches always report: a branch that raises or does not finish
    within ``branch_timeout_s`` contributes an empty list.
    """

    def __init__(
        self,
        detector: Detector,
        classifier: Classifier,
        executor: concurrent.futures.Executor,
        settings: PerceptionSettings | None = None,
    ) -> None:
        self._detector = detector
        self._classifier = classifier
        self._executor = executor
        self.settings = settings or PerceptionSettings()

    def dispatch(self, frame: Frame) -> tuple[list[PerceivedEntity], list[PerceivedEntity]]:
        """Return ``(detector_entities, classifier_entities)`` for ``frame``."""

        detect_future = self._executor.submit(
            self._run_branch, "detector", self._detector.detect, frame, RecognizerSource.DETECTOR
        )
        classify_future = self._executor.submit(
            self._run_branch,
            "classifier",
            self._classifier.classify,
            frame,
            RecognizerSource.CLASSIFIER,
        )

        concurrent.futures.wait(
            [detect_future, classify_future],
            timeout=self.settings.branch_timeout_s,
        )
        raw_detections = self._collect("detector", detect_future, frame)
        raw_classifications = self._collect("classifier", classify_future, frame)

        detector_entities = self.threshold_detections(raw_detections)
        classifier_entities = self.threshold_classifications(raw_classifications)
        logger.debug(
            "[DISPATCH] frame=%s detections=%d/%d classifications=%d/%d",
            frame.frame_id,
            len(detector_entities),
            len(raw_detections),
            len(classifier_entities),
            len(raw_classifications),
        )
        return detector_entities, classifier_entities

    def threshold_detections(self, raw_results: list[RawResult]) -> list[PerceivedEntity]:
        """Keep the top label per detected instance if it clears the detector floor."""

        best_by_instance: dict[object, RawResult] = {}
        for index, result in enumerate(raw_results):
            key: object = ("instance", result.instance_id)
            if result.instance_id is None:
                key = ("result", index)
            current = best_by_instance.get(key)
            if current is None or result.confidence > current.confidence:
                best_by_instance[key] = result

        entities: list[PerceivedEntity] = []
        for result in best_by_instance.values():
            if result.confidence <= self.settings.detector_confidence_floor:
                continue
            entities.append(
                PerceivedEntity(
                    label=normalize_label(result.label),
                    confidence=float(result.confidence),
                    region=tuple(result.region),
                    sector=locate_sector(result.region),
                    source=RecognizerSource.DETECTOR,
                )
            )
        return entities

    def threshold_classifications(self, raw_results: list[RawResult]) -> list[PerceivedEntity]:
        """Take the top classifier candidates and keep those above the classifier floor."""

        ranked = sorted(raw_results, key=lambda result: result.confidence, reverse=True)
        candidates = ranked[: self.settings.classifier_candidate_cap]
        return [
            PerceivedEntity(
                label=normalize_label(result.label),
                confidence=float(result.confidence),
                region=FULL_FRAME_REGION,
                sector=Sector.CENTER,
                source=RecognizerSource.CLASSIFIER,
            )
            for result in candidates
            if result.confidence > self.settings.classifier_confidence_floor
        ]

    def _run_branch(
        self,
        name: str,
        recognize: Callable[[Frame], list[RawResult]],
        frame: Frame,
        source: RecognizerSource,
    ) -> list[RawResult]:
        try:
            return coerce_raw_results(recognize(frame), source)
        except Exception:
            logger.exception("[DISPATCH] %s failed on frame %s", name, frame.frame_id)
            return []

    def _collect(
        self,
        name: str,
        future: concurrent.futures.Future[list[RawResult]],
        frame: Frame,
    ) -> list[RawResult]:
        if not future.done():
            future.cancel()
            logger.warning(
                "[DISPATCH] %s did not finish within %.2fs on frame %s; using no results",
                name,
                self.settings.branch_timeout_s or 0.0,
                frame.frame_id,
            )
            return []
        if future.cancelled():
            return []
        return future.result()
