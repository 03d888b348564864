"""Tests for detector/classifier fusion."""

from __future__ import annotations

from vision.detections import FULL_FRAME_REGION, PerceivedEntity, RecognizerSource
from vision.fusion import fuse, labels_overlap
from vision.sectors import Sector


def _detected(label: str, confidence: float = 0.9) -> PerceivedEntity:
    return PerceivedEntity(
        label=label,
        confidence=confidence,
        region=(0.1, 0.1, 0.2, 0.2),
        sector=Sector.BOTTOM_LEFT,
        source=RecognizerSource.DETECTOR,
    )


def _classified(label: str, confidence: float = 0.8) -> PerceivedEntity:
    return PerceivedEntity(
        label=label,
        confidence=confidence,
        region=FULL_FRAME_REGION,
        sector=Sector.CENTER,
        source=RecognizerSource.CLASSIFIER,
    )


def test_overlap_is_symmetric_and_case_insensitive() -> None:
    assert labels_overlap("Dog", "dog toy")
    assert labels_overlap("dog toy", "Dog")
    assert labels_overlap("GOLDEN RETRIEVER", "retriever")
    assert not labels_overlap("Cat", "Dog")


def test_classifier_entity_containing_detector_label_is_dropped() -> None:
    fused = fuse([_detected("Dog")], [_classified("Dog Toy")])

    assert [entity.label for entity in fused] == ["Dog"]


def test_classifier_entity_contained_in_detector_label_is_dropped() -> None:
    fused = fuse([_detected("Golden Retriever")], [_classified("Retriever")])

    assert [entity.label for entity in fused] == ["Golden Retriever"]


def test_survivors_follow_all_detector_entities() -> None:
    fused = fuse(
        [_detected("Chair", 0.6), _detected("Person", 0.95)],
        [_classified("Kitchen", 0.99), _classified("Chair Cushion", 0.9)],
    )

    assert [entity.label for entity in fused] == ["Person", "Chair", "Kitchen"]
    assert fused[-1].source is RecognizerSource.CLASSIFIER


def test_cap_keeps_every_detector_entity() -> None:
    detections = [_detected(label) for label in ("Person", "Chair", "Table", "Lamp")]
    classifications = [_classified(label) for label in ("Indoor", "Office", "Room", "Night")]

    fused = fuse(detections, classifications, cap=5)

    assert len(fused) == 5
    assert [entity.label for entity in fused[:4]] == ["Person", "Chair", "Table", "Lamp"]
    assert fused[4].label == "Indoor"


def test_fuse_of_nothing_is_empty() -> None:
    assert fuse([], []) == ()
