"""Tests for sector localization."""

from __future__ import annotations

import pytest

from vision.sectors import SECTOR_PHRASES, Sector, locate_sector, sector_phrase


def _point(x: float, y: float) -> tuple[float, float, float, float]:
    return (x, y, 0.0, 0.0)


@pytest.mark.parametrize(
    ("center", "expected"),
    [
        ((0.1, 0.9), Sector.TOP_LEFT),
        ((0.5, 0.9), Sector.TOP),
        ((0.9, 0.9), Sector.TOP_RIGHT),
        ((0.1, 0.5), Sector.LEFT),
        ((0.5, 0.5), Sector.CENTER),
        ((0.9, 0.5), Sector.RIGHT),
        ((0.1, 0.1), Sector.BOTTOM_LEFT),
        ((0.5, 0.1), Sector.BOTTOM),
        ((0.9, 0.1), Sector.BOTTOM_RIGHT),
    ],
)
def test_vertical_axis_is_inverted_before_quantization(center, expected) -> None:
    assert locate_sector(_point(*center)) is expected


def test_center_uses_half_of_width_and_height() -> None:
    assert locate_sector((0.0, 0.0, 0.2, 0.2)) is Sector.BOTTOM_LEFT
    assert locate_sector((0.4, 0.4, 0.2, 0.2)) is Sector.CENTER
    assert locate_sector((0.7, 0.7, 0.3, 0.3)) is Sector.TOP_RIGHT


def test_horizontal_boundary_is_closed_on_the_middle_third() -> None:
    assert locate_sector(_point(0.33, 0.5)) is Sector.CENTER
    assert locate_sector(_point(0.329, 0.5)) is Sector.LEFT
    assert locate_sector(_point(0.67, 0.5)) is Sector.CENTER
    assert locate_sector(_point(0.671, 0.5)) is Sector.RIGHT


def test_full_frame_region_is_center() -> None:
    assert locate_sector((0.0, 0.0, 1.0, 1.0)) is Sector.CENTER
    assert locate_sector((0.25, 0.25, 0.5, 0.5)) is Sector.CENTER


def test_every_sector_has_a_phrase() -> None:
    assert set(SECTOR_PHRASES) == set(Sector)
    assert sector_phrase(Sector.CENTER) == "in the center"
    assert sector_phrase(Sector.LEFT) == "on the left"
    assert sector_phrase(Sector.TOP) == "at the top"
    assert sector_phrase(Sector.BOTTOM_RIGHT) == "in the bottom right"
