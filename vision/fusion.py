"""Merge detector and classifier entities into one ranked, capped list."""

from __future__ import annotations

from typing import Iterable, Sequence

from vision.detections import PerceivedEntity


def labels_overlap(first: str, second: str) -> bool:
    """Return whether either label contains the other, ignoring case."""

    first_folded = first.lower()
    second_folded = second.lower()
    return first_folded in second_folded or second_folded in first_folded


def fuse(
    detector_entities: Iterable[PerceivedEntity],
    classifier_entities: Iterable[PerceivedEntity],
    cap: int = 5,
) -> tuple[PerceivedEntity, ...]:
    """Fuse both result lists with detector priority.

    Detector entities come first, ordered by descending confidence rather
    than in the order the detector reported them. Classifier entities whose
    label overlaps any detector label are dropped; the rest follow in their
    given order. The result holds at most ``cap`` entities.
    """

    detected: Sequence[PerceivedEntity] = sorted(
        detector_entities, key=lambda entity: entity.confidence, reverse=True
    )
    combined = list(detected)
    for classification in classifier_entities:
        if any(labels_overlap(classification.label, entity.label) for entity in detected):
            continue
        combined.append(classification)
    return tuple(combined[: max(cap, 0)])
