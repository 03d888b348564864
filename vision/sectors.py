"""Coarse spatial sectors for normalized frame regions."""

from __future__ import annotations

from enum import Enum
from typing import Mapping, Sequence


LOW_BOUNDARY = 0.33
HIGH_BOUNDARY = 0.67


class Sector(str, Enum):
    """One of nine fixed regions of a frame."""

    CENTER = "center"
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"


SECTOR_PHRASES: Mapping[Sector, str] = {
    Sector.CENTER: "in the center",
    Sector.LEFT: "on the left",
    Sector.RIGHT: "on the right",
    Sector.TOP: "at the top",
    Sector.BOTTOM: "at the bottom",
    Sector.TOP_LEFT: "in the top left",
    Sector.TOP_RIGHT: "in the top right",
    Sector.BOTTOM_LEFT: "in the bottom left",
    Sector.BOTTOM_RIGHT: "in the bottom right",
}

# (vertical third, horizontal third) -> sector, thirds indexed 0..2
_SECTOR_GRID: Mapping[tuple[int, int], Sector] = {
    (0, 0): Sector.TOP_LEFT,
    (0, 1): Sector.TOP,
    (0, 2): Sector.TOP_RIGHT,
    (1, 0): Sector.LEFT,
    (1, 1): Sector.CENTER,
    (1, 2): Sector.RIGHT,
    (2, 0): Sector.BOTTOM_LEFT,
    (2, 1): Sector.BOTTOM,
    (2, 2): Sector.BOTTOM_RIGHT,
}


def _third(value: float) -> int:
    if value < LOW_BOUNDARY:
        return 0
    if value > HIGH_BOUNDARY:
        return 2
    return 1


def locate_sector(region: Sequence[float]) -> Sector:
    """Return the sector containing the center of a normalized region.

    The vertical axis is inverted before quantization because regions use a
    bottom-left origin.
    """

    x, y, width, height = region[:4]
    center_x = x + width / 2.0
    center_y = y + height / 2.0
    normalized_y = 1.0 - center_y
    return _SECTOR_GRID[(_third(normalized_y), _third(center_x))]


def sector_phrase(sector: Sector) -> str:
    """Return the spoken phrase for a sector."""

    return SECTOR_PHRASES[sector]
