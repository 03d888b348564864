"""Frame decoding for perception passes."""

from __future__ import annotations

from dataclasses import dataclass, field
import io
import itertools
from pathlib import Path
import time
from typing import Any

import numpy as np
from PIL import Image


_frame_ids = itertools.count(1)


class FrameDecodeError(ValueError):
    """Raised when a frame source cannot be decoded into an image."""


@dataclass(frozen=True)
class Frame:
    """Decoded image handed to recognizers. Recognizers must not mutate it."""

    image: Image.Image
    frame_id: int = field(default_factory=lambda: next(_frame_ids))
    captured_at: float = field(default_factory=time.time)

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size


def decode_frame(source: Any) -> Frame:
    """Decode a frame from an image, encoded bytes, a path or a numpy array.

    Raises:
        FrameDecodeError: If ``source`` is empty or cannot be decoded.
    """

    if isinstance(source, Frame):
        return source
    if source is None:
        raise FrameDecodeError("No frame supplied")

    if isinstance(source, Image.Image):
        image = source
    elif isinstance(source, (bytes, bytearray, memoryview)):
        if not source:
            raise FrameDecodeError("Empty frame buffer")
        image = _open_image(io.BytesIO(bytes(source)), "frame buffer")
    elif isinstance(source, (str, Path)):
        image = _open_image(Path(source).expanduser(), str(source))
    elif isinstance(source, np.ndarray):
        try:
            image = Image.fromarray(source)
        except (TypeError, ValueError) as exc:
            raise FrameDecodeError(f"Unsupported frame array: {exc}") from exc
    else:
        raise FrameDecodeError(f"Unsupported frame type: {type(source).__name__}")

    width, height = image.size
    if width <= 0 or height <= 0:
        raise FrameDecodeError("Frame has no pixels")
    return Frame(image=image)


def _open_image(fp: Any, description: str) -> Image.Image:
    try:
        image = Image.open(fp)
        image.load()
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise FrameDecodeError(f"Could not decode {description}: {exc}") from exc
    return image
