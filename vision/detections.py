"""Stable result schemas for the perception pipeline.

Regions are normalized to the source frame dimensions and represented as
``(x, y, width, height)`` with each value expected in the inclusive range
``[0.0, 1.0]``. The producing coordinate system places its origin at the
bottom-left corner of the frame.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from vision.sectors import Sector


Region = tuple[float, float, float, float]

FULL_FRAME_REGION: Region = (0.25, 0.25, 0.5, 0.5)


class RecognizerSource(str, Enum):
    """Recognizer that produced a raw result."""

    DETECTOR = "detector"
    CLASSIFIER = "classifier"


class PerceptionOutcome(str, Enum):
    """How a perception pass ended."""

    PERCEIVED = "perceived"
    NO_SIGNAL = "no_signal"
    NOTHING_TO_PERCEIVE = "nothing_to_perceive"


@dataclass(frozen=True)
class RawResult:
    """Unprocessed recognizer output before thresholding and localization.

    Detector label candidates describing the same detected instance share an
    ``instance_id``; ``None`` marks a result as its own instance.
    """

    label: str
    confidence: float
    region: Region
    source: RecognizerSource
    instance_id: int | None = None


@dataclass(frozen=True)
class PerceivedEntity:
    """Thresholded, normalized and localized recognizer result."""

    label: str
    confidence: float
    region: Region
    sector: Sector
    source: RecognizerSource = RecognizerSource.DETECTOR

    @property
    def confidence_percent(self) -> int:
        return int(self.confidence * 100)


@dataclass(frozen=True)
class Snapshot:
    """Ranked, deduplicated and capped entities for one perception pass."""

    entities: tuple[PerceivedEntity, ...] = ()
    frame_id: int | None = None
    timestamp_ms: int = 0
    outcome: PerceptionOutcome = PerceptionOutcome.NO_SIGNAL

    def __len__(self) -> int:
        return len(self.entities)

    def __iter__(self) -> Iterator[PerceivedEntity]:
        return iter(self.entities)

    def __getitem__(self, index: int) -> PerceivedEntity:
        return self.entities[index]

    def __bool__(self) -> bool:
        return bool(self.entities)

    @property
    def labels(self) -> list[str]:
        return [entity.label for entity in self.entities]


EMPTY_SNAPSHOT = Snapshot()
