"""Vision package exports."""

from vision.description import NO_OBJECTS_SENTENCE, describe
from vision.detections import (
    PerceivedEntity,
    PerceptionOutcome,
    RawResult,
    RecognizerSource,
    Snapshot,
)
from vision.engine import PerceptionEngine
from vision.frames import Frame, FrameDecodeError, decode_frame
from vision.labels import normalize_label
from vision.recognizers import Classifier, Detector, RecordedRecognizer
from vision.sectors import SECTOR_PHRASES, Sector, locate_sector
from vision.settings import PerceptionSettings, load_perception_settings

__all__ = [
    "NO_OBJECTS_SENTENCE",
    "describe",
    "PerceivedEntity",
    "PerceptionOutcome",
    "RawResult",
    "RecognizerSource",
    "Snapshot",
    "PerceptionEngine",
    "Frame",
    "FrameDecodeError",
    "decode_frame",
    "normalize_label",
    "Classifier",
    "Detector",
    "RecordedRecognizer",
    "SECTOR_PHRASES",
    "Sector",
    "locate_sector",
    "PerceptionSettings",
    "load_perception_settings",
]
