"""Recognizer interfaces and the implementations shipped with the engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
import math
from pathlib import Path
from typing import Any, Callable, Iterable

import yaml

from core.logging import logger
from vision.detections import FULL_FRAME_REGION, RawResult, RecognizerSource, Region
from vision.frames import Frame


_LABEL_KEYS = ("label", "identifier", "class_name", "class", "name")
_CONFIDENCE_KEYS = ("confidence", "score")
_BBOX_KEYS = ("region", "bbox", "box", "rect", "rectangle")


class RecognizerError(RuntimeError):
    """Raised when a recognizer backend cannot produce results."""


class Detector(ABC):
    """Object detector that localizes what it recognizes."""

    @abstractmethod
    def detect(self, frame: Frame) -> list[RawResult]:
        """Return raw detections for ``frame``."""


class Classifier(ABC):
    """Whole-frame image classifier."""

    @abstractmethod
    def classify(self, frame: Frame) -> list[RawResult]:
        """Return raw classifications for ``frame``."""


class NullDetector(Detector):
    """Detector that never sees anything."""

    def detect(self, frame: Frame) -> list[RawResult]:
        return []


class NullClassifier(Classifier):
    """Classifier that never sees anything."""

    def classify(self, frame: Frame) -> list[RawResult]:
        return []


class CallableDetector(Detector):
    """Adapt a plain callable returning result payloads into a detector."""

    def __init__(self, func: Callable[[Frame], Iterable[Any]]) -> None:
        self._func = func

    def detect(self, frame: Frame) -> list[RawResult]:
        return coerce_raw_results(self._func(frame), RecognizerSource.DETECTOR)


class CallableClassifier(Classifier):
    """Adapt a plain callable returning result payloads into a classifier."""

    def __init__(self, func: Callable[[Frame], Iterable[Any]]) -> None:
        self._func = func

    def classify(self, frame: Frame) -> list[RawResult]:
        return coerce_raw_results(self._func(frame), RecognizerSource.CLASSIFIER)


class RecordedRecognizer(Detector, Classifier):
    """Replay detections and classifications recorded in a YAML file.

    The file holds two optional lists, ``detections`` and ``classifications``,
    of mappings with a label, a confidence and (for detections) a region.
    """

    def __init__(
        self,
        detections: Iterable[Any] = (),
        classifications: Iterable[Any] = (),
    ) -> None:
        self._detections = tuple(coerce_raw_results(detections, RecognizerSource.DETECTOR))
        self._classifications = tuple(
            coerce_raw_results(classifications, RecognizerSource.CLASSIFIER)
        )

    @classmethod
    def from_file(cls, path: Path) -> "RecordedRecognizer":
        path = Path(path).expanduser()
        try:
            with path.open("r", encoding="utf-8") as file:
                payload = yaml.safe_load(file) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise RecognizerError(f"Could not read recording {path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise RecognizerError(f"Recording {path} must be a mapping")

        recognizer = cls(
            detections=payload.get("detections") or [],
            classifications=payload.get("classifications") or [],
        )
        logger.info(
            "[RECOGNIZER] Loaded recording %s (detections=%d classifications=%d)",
            path,
            len(recognizer._detections),
            len(recognizer._classifications),
        )
        return recognizer

    def detect(self, frame: Frame) -> list[RawResult]:
        return list(self._detections)

    def classify(self, frame: Frame) -> list[RawResult]:
        return list(self._classifications)


def coerce_raw_results(payloads: Iterable[Any], source: RecognizerSource) -> list[RawResult]:
    """Convert recognizer payloads into raw results, skipping unusable entries."""

    results: list[RawResult] = []
    for payload in payloads or ():
        result = coerce_raw_result(payload, source)
        if result is not None:
            results.append(result)
    return results


def coerce_raw_result(payload: Any, source: RecognizerSource) -> RawResult | None:
    """Convert one payload (``RawResult``, mapping or attribute object).

    Every payload, including a ``RawResult``, is validated: entries with a
    non-finite confidence are dropped, and so are detector entries without a
    usable four-value region.
    """

    mapping = _to_mapping(payload)
    if mapping is None:
        return None

    confidence = _extract_confidence(mapping)
    if confidence is None:
        return None

    region = _extract_region(mapping)
    if region is None:
        if source is RecognizerSource.DETECTOR:
            return None
        region = FULL_FRAME_REGION

    instance_id = mapping.get("instance_id")
    try:
        instance_id = int(instance_id) if instance_id is not None else None
    except (TypeError, ValueError):
        instance_id = None

    return RawResult(
        label=_extract_label(mapping),
        confidence=confidence,
        region=region,
        source=source,
        instance_id=instance_id,
    )


def _to_mapping(raw: Any) -> dict[str, Any] | None:
    if isinstance(raw, dict):
        return raw

    mapping: dict[str, Any] = {}
    for field in (*_LABEL_KEYS, *_CONFIDENCE_KEYS, *_BBOX_KEYS, "instance_id"):
        if hasattr(raw, field):
            mapping[field] = getattr(raw, field)

    return mapping or None


def _extract_label(mapping: dict[str, Any]) -> str:
    for key in _LABEL_KEYS:
        value = mapping.get(key)
        if value is not None:
            label = str(value).strip()
            if label:
                return label
    return "unknown"


def _extract_confidence(mapping: dict[str, Any]) -> float | None:
    for key in _CONFIDENCE_KEYS:
        if key in mapping:
            number = _to_finite_float(mapping[key])
            if number is None:
                return None
            return max(0.0, min(1.0, number))
    return 0.0


def _extract_region(mapping: dict[str, Any]) -> Region | None:
    raw_bbox = None
    for key in _BBOX_KEYS:
        if mapping.get(key) is not None:
            raw_bbox = mapping[key]
            break

    if not isinstance(raw_bbox, (list, tuple)) or len(raw_bbox) < 4:
        return None

    values = [_to_finite_float(value) for value in raw_bbox[:4]]
    if any(value is None for value in values):
        return None
    x, y, w, h = values
    return _normalize_region(x, y, w, h)


def _to_finite_float(value: Any) -> float | None:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _normalize_region(x: float, y: float, w: float, h: float) -> Region:
    x = max(0.0, min(1.0, x))
    y = max(0.0, min(1.0, y))
    w = max(0.0, min(1.0 - x, w))
    h = max(0.0, min(1.0 - y, h))
    return (x, y, w, h)
