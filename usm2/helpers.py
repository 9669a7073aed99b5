"""Numeric helpers and pixel blitting routines for preview conversion."""

from __future__ import annotations

import math
import time
from typing import Sequence

import numpy as np

Buffer = bytes | bytearray | memoryview


def clamp(value, low, high):
    """Limit ``value`` to the closed range [low, high]."""
    return max(low, min(value, high))


def align(value: int, n: int) -> int:
    """Round ``value`` up to the next multiple of ``n``."""
    if n <= 0:
        raise ValueError("alignment must be positive")
    value += n - 1
    return value - value % n


def rescale(x: float, l1: float, h1: float, l2: float, h2: float) -> float:
    """Map ``x`` linearly from the range [l1, h1] onto [l2, h2]."""
    return (x - l1) * (h2 - l2) / (h1 - l1) + l2


def round_half_away(value: float) -> int:
    """Round to the nearest integer, with halves rounded away from zero."""
    if value >= 0.0:
        return int(math.floor(value + 0.5))
    return int(math.ceil(value - 0.5))


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


def scale_area(factor: float, x: int, y: int, width: int, height: int) -> tuple[int, int, int, int]:
    """Grow or shrink an area by ``factor`` around its centre.

    Returns the new ``(x, y, width, height)``.  A factor of zero leaves the
    area unchanged.
    """
    if factor == 0:
        return x, y, width, height
    added_width = int(width * factor) - width
    added_height = int(height * factor) - height
    return (
        x - _trunc_div(added_width, 2),
        y - _trunc_div(added_height, 2),
        width + added_width,
        height + added_height,
    )


def _gather(source: Buffer, width: int, height: int, in_channels: int,
            in_stride: int, offsets: Sequence[int]) -> np.ndarray:
    data = np.frombuffer(bytes(source), dtype=np.uint8)
    base = (np.arange(height)[:, None] * in_stride
            + np.arange(width)[None, :] * in_channels)
    index = base[..., None] + np.asarray(offsets, dtype=np.int64)
    try:
        return data[index]
    except IndexError:
        raise ValueError("source buffer is too small for the given geometry") from None


def _emit(rows: np.ndarray, width: int, height: int, bytes_per_pixel: int,
          out_stride: int | None) -> bytearray:
    row_bytes = width * bytes_per_pixel
    if out_stride is None:
        out_stride = row_bytes
    if out_stride < row_bytes:
        raise ValueError("output stride is smaller than a row of pixels")
    out = np.zeros((height, out_stride), dtype=np.uint8)
    out[:, :row_bytes] = rows.reshape(height, row_bytes)
    return bytearray(out.tobytes())


def _to_bgra(channels: np.ndarray, alpha: np.ndarray | None) -> np.ndarray:
    if alpha is None:
        alpha = np.full(channels.shape[:2] + (1,), 255, dtype=np.uint8)
    return np.concatenate([channels, alpha], axis=2)


def blit_y_to_bgra(source: Buffer, width: int, height: int, in_channels: int,
                   with_alpha: bool, in_stride: int, out_stride: int | None = None) -> bytearray:
    """Expand the first channel of each pixel into grey BGRA.

    The second input byte is used as alpha only when ``with_alpha`` is set and
    the input has no channel step; otherwise alpha is opaque.
    """
    if in_channels:
        with_alpha = False
    grey = _gather(source, width, height, in_channels, in_stride, (0, 0, 0))
    alpha = _gather(source, width, height, in_channels, in_stride, (1,)) if with_alpha else None
    return _emit(_to_bgra(grey, alpha), width, height, 4, out_stride)


def blit_rgb_to_bgra(source: Buffer, width: int, height: int, in_channels: int,
                     in_stride: int, out_stride: int | None = None) -> bytearray:
    """Convert RGB (with any number of trailing channels) to opaque BGRA."""
    bgr = _gather(source, width, height, in_channels, in_stride, (2, 1, 0))
    return _emit(_to_bgra(bgr, None), width, height, 4, out_stride)


def blit_rgba_to_bgra(source: Buffer, width: int, height: int, in_channels: int,
                      in_stride: int, out_stride: int | None = None) -> bytearray:
    """Convert RGBA to BGRA, keeping the alpha channel."""
    bgra = _gather(source, width, height, in_channels, in_stride, (2, 1, 0, 3))
    return _emit(bgra, width, height, 4, out_stride)


def blit_16_to_8(source: Buffer, width: int, height: int, channels: int,
                 in_stride: int, out_stride: int | None = None) -> bytearray:
    """Convert native-order 16-bit samples (range 0..32768) to 8-bit samples.

    ``in_stride`` and ``out_stride`` are in bytes.
    """
    raw = bytes(source)
    data = np.frombuffer(raw[: len(raw) // 2 * 2], dtype=np.uint16)
    stride = in_stride // 2
    index = (np.arange(height)[:, None, None] * stride
             + np.arange(width)[None, :, None] * channels
             + np.arange(channels)[None, None, :])
    try:
        values = data[index].astype(np.uint32)
    except IndexError:
        raise ValueError("source buffer is too small for the given geometry") from None
    converted = ((values * 10 // 1285) & 0xFF).astype(np.uint8)
    return _emit(converted, width, height, channels, out_stride)


def gettime() -> float:
    """Return a monotonic timestamp in seconds."""
    return time.monotonic()