"""Spoken scene descriptions built from perception snapshots."""

from __future__ import annotations

from typing import Iterable, Mapping

from vision.detections import PerceivedEntity
from vision.sectors import SECTOR_PHRASES, Sector


NO_OBJECTS_SENTENCE = "No objects detected in the current view."
SENTENCE_PREFIX = "I can see "


def render_entity(
    entity: PerceivedEntity,
    phrases: Mapping[Sector, str] = SECTOR_PHRASES,
) -> str:
    phrase = phrases.get(entity.sector) or SECTOR_PHRASES[entity.sector]
    return f"{entity.label} {phrase}"


def join_items(items: list[str]) -> str:
    """Join items as an English list: ``a``, ``a and b``, ``a, b and c``."""

    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    return ", ".join(items[:-1]) + " and " + items[-1]


def describe(
    entities: Iterable[PerceivedEntity],
    top_n: int = 3,
    phrases: Mapping[Sector, str] = SECTOR_PHRASES,
) -> str:
    """Render the most confident entities as one sentence.

    Ties keep their incoming order. An empty input yields
    ``NO_OBJECTS_SENTENCE``.
    """

    ranked = sorted(entities, key=lambda entity: entity.confidence, reverse=True)
    if not ranked:
        return NO_OBJECTS_SENTENCE

    top_entities = ranked[: max(top_n, 1)]
    items = [render_entity(entity, phrases) for entity in top_entities]
    return f"{SENTENCE_PREFIX}{join_items(items)}."
