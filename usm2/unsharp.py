"""Unsharp masking with a recursive (IIR) Gaussian blur.

The blur is a forward/backward recursive filter whose coefficients depend
only on the radius.  Sharpening is weighted by a per-pixel noise factor that
is interpolated between shadow, midtone, light and highlight weights.
"""

from __future__ import annotations

import math
from typing import Callable, Iterator, Protocol

import numpy as np

from .image import FloatImage, ImageError

FR = np.float32(0.212671)
FG = np.float32(0.715160)
FB = np.float32(0.072169)

_CHUNK = 64


class Cancelled(Exception):
    """Raised when a stop request interrupts processing."""


class _StopFlag(Protocol):
    def is_set(self) -> bool: ...


Progress = Callable[[], None] | None


def _tick(stop: _StopFlag | None, progress: Progress) -> None:
    if stop is not None and stop.is_set():
        raise Cancelled("processing was cancelled")
    if progress is not None:
        progress()


def _chunks(count: int, stop: _StopFlag | None, progress: Progress) -> Iterator[tuple[int, int]]:
    """Yield ``(start, end)`` ranges, checking for cancellation once per index."""
    for start in range(0, count, _CHUNK):
        end = min(start + _CHUNK, count)
        for _ in range(start, end):
            _tick(stop, progress)
        yield start, end


class IIRBlur:
    """A recursive approximation of a Gaussian blur of the given radius.

    Lines are processed along axis 0; any further axes are filtered in
    parallel.
    """

    def __init__(self, radius: float) -> None:
        if radius < 0:
            raise ValueError("radius must not be negative")
        self.radius = radius
        if radius >= 2.5:
            q = 0.98711 * radius - 0.96330
        else:
            q = 3.97156 - 4.14554 * math.sqrt(1.0 - 0.26891 * radius)
        b0 = 1.57825 + ((0.422205 * q + 1.4281) * q + 2.44413) * q
        b1 = ((1.26661 * q + 2.85619) * q + 2.44413) * q / b0
        b2 = -((1.26661 * q + 1.4281) * q * q) / b0
        b3 = 0.422205 * q * q * q / b0
        self.q = np.float32(q)
        self.b0 = np.float32(b0)
        self.b1 = np.float32(b1)
        self.b2 = np.float32(b2)
        self.b3 = np.float32(b3)
        self.B = np.float32(1.0) - (self.b1 + self.b2 + self.b3)
        self.margin = int(radius)

    def filter(self, line) -> np.ndarray:
        """Return the blurred copy of ``line``; its edges are mirrored first."""
        data = np.asarray(line, dtype=np.float32)
        length = data.shape[0] if data.ndim else 0
        if length == 0:
            return data.copy()
        w = self.margin
        pad = [(w, w)] + [(0, 0)] * (data.ndim - 1)
        mode = "reflect" if length > 1 else "edge"
        ext = np.pad(data, pad, mode=mode).astype(np.float32)
        B, b1, b2, b3 = self.B, self.b1, self.b2, self.b3

        d1 = d2 = d3 = ext[0].copy()
        for i in range(ext.shape[0]):
            x = ext[i] * B + b3 * d3 + b2 * d2 + b1 * d1
            ext[i] = x
            d3, d2, d1 = d2, d1, x

        last = ext.shape[0] - 1
        d1 = d2 = d3 = ext[last].copy()
        for i in range(last, w - 1, -1):
            x = ext[i] * B + b3 * d3 + b2 * d2 + b1 * d1
            ext[i] = x
            d3, d2, d1 = d2, d1, x

        return ext[w:w + length].copy()

    def blur_line(self, line: np.ndarray) -> None:
        """Blur a writable array in place."""
        line[...] = self.filter(line)


def noise_factor(value, shadow: float, midtone: float, light: float, high: float):
    """Interpolate the sharpening weight for a luminance in [0, 1].

    Accepts a scalar or an array; a scalar gives a float back.
    """
    v = np.asarray(value, dtype=np.float32)
    quarter = np.float32(0.25)
    one = np.float32(1.0)
    s, m, lt, h = (np.float32(x) for x in (shadow, midtone, light, high))
    t1 = (np.float32(0.5) - v) / quarter
    t2 = (np.float32(0.75) - v) / quarter
    t3 = (one - v) / quarter
    result = np.select(
        [v <= quarter, v <= np.float32(0.5), v <= np.float32(0.75)],
        [np.broadcast_to(s, v.shape), s * t1 + m * (one - t1), m * t2 + lt * (one - t2)],
        default=lt * t3 + h * (one - t3),
    ).astype(np.float32)
    if result.ndim == 0:
        return float(result)
    return result


def apply_gamma(image: FloatImage, gamma: float, stop: _StopFlag | None = None,
                progress: Progress = None) -> None:
    """Raise every sample to the power ``gamma``, in place."""
    px = image.pixels()
    g = np.float32(gamma)
    with np.errstate(invalid="ignore", divide="ignore"):
        for start, end in _chunks(image.height, stop, progress):
            px[start:end] = np.power(px[start:end], g)


def blur_horizontal(image: FloatImage, radius: float, stop: _StopFlag | None = None,
                    progress: Progress = None) -> None:
    """Blur every row of ``image`` in place."""
    blur = IIRBlur(radius)
    px = image.pixels()
    for start, end in _chunks(image.height, stop, progress):
        if image.width:
            blur.blur_line(px[start:end].transpose(1, 0, 2))


def blur_vertical(image: FloatImage, radius: float, stop: _StopFlag | None = None,
                  progress: Progress = None) -> None:
    """Blur every column of ``image`` in place."""
    blur = IIRBlur(radius)
    px = image.pixels()
    for start, end in _chunks(image.width, stop, progress):
        if image.height:
            blur.blur_line(px[:, start:end])


def combine(source: FloatImage, dest: FloatImage, amount_up: float, amount_down: float,
            threshold: float, shadow: float, midtone: float, light: float, high: float,
            stop: _StopFlag | None = None, progress: Progress = None) -> None:
    """Merge ``source`` with its blurred version held in ``dest``; the result goes to ``dest``."""
    if (source.width, source.height, source.channels) != (dest.width, dest.height, dest.channels):
        raise ImageError("combine requires images of identical geometry")
    src_px = source.pixels()
    dst_px = dest.pixels()
    channels = source.channels
    thr = np.float32(threshold)
    up_amount = np.float32(amount_up)
    down_amount = np.float32(amount_down)
    one = np.float32(1.0)
    zero = np.float32(0.0)

    with np.errstate(invalid="ignore"):
        for start, end in _chunks(source.height, stop, progress):
            s = src_px[start:end]
            d = dst_px[start:end]
            if channels in (3, 4):
                lum = FR * s[..., 0] + FG * s[..., 1] + FB * s[..., 2]
            else:
                lum = s.sum(axis=-1, dtype=np.float32) / np.float32(channels)
            a = np.asarray(noise_factor(lum, shadow, midtone, light, high),
                           dtype=np.float32)[..., None]
            diff = s - d
            raised = s + (diff - thr) * a * up_amount * np.sqrt(one - s)
            lowered = s + (diff + thr) * a * down_amount * np.sqrt(s)
            value = np.where(diff > thr, raised, np.where(diff < -thr, lowered, s))
            value = np.clip(value, zero, one)
            d[...] = np.nan_to_num(value, nan=0.0).astype(np.float32)


def unsharp_region(source: FloatImage, radius: float, amount_up: float, gamma: float,
                   amount_down: float, threshold: float, shadow: float, midtone: float,
                   light: float, high: float, stop: _StopFlag | None = None,
                   progress: Progress = None) -> FloatImage:
    """Return an unsharp-masked copy of ``source``."""
    dest = source.copy()
    if gamma != 1:
        apply_gamma(dest, gamma, stop, progress)
    blur_horizontal(dest, radius, stop, progress)
    blur_vertical(dest, radius, stop, progress)
    if gamma != 1:
        apply_gamma(dest, 1.0 / gamma, stop, progress)
    with np.errstate(invalid="ignore"):
        np.clip(dest.data, 0.0, 1.0, out=dest.data)
    combine(source, dest, amount_up, amount_down, threshold, shadow, midtone, light, high,
            stop, progress)
    return dest


__all__ = [
    "Cancelled",
    "IIRBlur",
    "apply_gamma",
    "blur_horizontal",
    "blur_vertical",
    "combine",
    "noise_factor",
    "unsharp_region",
]