"""Tests for frame decoding."""

from __future__ import annotations

import io

import numpy as np
from PIL import Image
import pytest

from vision.frames import Frame, FrameDecodeError, decode_frame


def _png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (6, 4), color=(10, 20, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


def test_decode_pillow_image_and_frame_passthrough() -> None:
    frame = decode_frame(Image.new("L", (3, 2)))

    assert isinstance(frame, Frame)
    assert frame.size == (3, 2)
    assert decode_frame(frame) is frame


def test_decode_encoded_bytes_and_path(tmp_path) -> None:
    data = _png_bytes()
    path = tmp_path / "frame.png"
    path.write_bytes(data)

    assert decode_frame(data).size == (6, 4)
    assert decode_frame(path).size == (6, 4)
    assert decode_frame(str(path)).size == (6, 4)


def test_decode_numpy_array() -> None:
    array = np.zeros((4, 5, 3), dtype=np.uint8)

    assert decode_frame(array).size == (5, 4)


def test_frames_get_increasing_ids() -> None:
    first = decode_frame(Image.new("RGB", (1, 1)))
    second = decode_frame(Image.new("RGB", (1, 1)))

    assert second.frame_id > first.frame_id


@pytest.mark.parametrize(
    "source",
    [None, b"", b"\x89PNG broken", 3.5, np.zeros((2, 2, 7), dtype=np.uint8)],
)
def test_undecodable_sources_raise(source) -> None:
    with pytest.raises(FrameDecodeError):
        decode_frame(source)


def test_missing_path_raises(tmp_path) -> None:
    with pytest.raises(FrameDecodeError):
        decode_frame(tmp_path / "missing.jpg")


def test_decompression_bomb_raises(monkeypatch) -> None:
    data = _png_bytes()
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)

    with pytest.raises(FrameDecodeError):
        decode_frame(data)
