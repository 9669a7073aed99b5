"""Interleaved floating-point images and strided integer images.

:class:`FloatImage` holds single-precision samples in interleaved order, with
rows padded to a stride that is a multiple of four samples.  :class:`IntImage`
holds 8- or 16-bit samples in a byte buffer that may be shared between views.
It is mostly used to hold an image and to blit between integer and float images.
"""

from __future__ import annotations

import math

import numpy as np

from .helpers import align, clamp


class ImageError(Exception):
    """Raised for incompatible or unsupported image formats."""


def _sample_dtype(bytes_per_channel: int) -> np.dtype:
    if bytes_per_channel == 1:
        return np.dtype(np.uint8)
    if bytes_per_channel == 2:
        return np.dtype("=u2")
    raise ImageError(f"invalid bytes per channel: {bytes_per_channel}")


def _round_half_away(values: np.ndarray) -> np.ndarray:
    return np.where(values >= 0, np.floor(values + 0.5), np.ceil(values - 0.5)).astype(np.int64)


class FloatImage:
    """An interleaved float32 image with padded rows.

    ``stride`` is measured in samples, not bytes.
    """

    def __init__(self, width: int = 0, height: int = 0, channels: int = 0,
                 stride: int | None = None) -> None:
        self.width = 0
        self.height = 0
        self.channels = 0
        self.stride = 0
        self.data = np.zeros(0, dtype=np.float32)
        self.alloc(width, height, channels, stride)

    @classmethod
    def from_array(cls, array) -> "FloatImage":
        """Build an image from an array shaped (height, width[, channels])."""
        arr = np.asarray(array, dtype=np.float32)
        if arr.ndim == 2:
            arr = arr[:, :, None]
        if arr.ndim != 3:
            raise ValueError("array must have shape (height, width) or (height, width, channels)")
        height, width, channels = arr.shape
        image = cls(width, height, channels)
        image.pixels()[...] = arr
        return image

    def alloc(self, width: int, height: int, channels: int, stride: int | None = None) -> None:
        """Reallocate storage for the given geometry; contents are reset."""
        if min(width, height, channels) < 0:
            raise ValueError("image dimensions must not be negative")
        if stride is None:
            stride = align(width * channels, 4)
        if stride < width * channels:
            raise ValueError("stride is smaller than a row of samples")
        self.width = width
        self.height = height
        self.channels = channels
        self.stride = stride
        self.data = np.zeros(height * stride, dtype=np.float32)

    def assign(self, other: "FloatImage") -> None:
        """Become a copy of ``other``, geometry and samples alike."""
        data = other.data[: other.size()].copy()
        self.width = other.width
        self.height = other.height
        self.channels = other.channels
        self.stride = other.stride
        self.data = data

    def copy(self) -> "FloatImage":
        image = FloatImage()
        image.assign(self)
        return image

    def is_empty(self) -> bool:
        return not (self.data.size and self.width and self.height and self.channels)

    def size(self) -> int:
        """Number of stored samples, row padding included."""
        return self.height * self.stride

    def pixels(self) -> np.ndarray:
        """A writable (height, width, channels) view of the samples, without padding."""
        rows = self.data[: self.size()].reshape(self.height, self.stride)
        return rows[:, : self.width * self.channels].reshape(self.height, self.width, self.channels)

    def fill(self, value: float) -> None:
        self.data[:] = value

    def scale(self, factor: float) -> None:
        self.data *= np.float32(factor)

    def maxmin(self) -> tuple[float, float]:
        """Return ``(minimum, maximum)`` over all samples; ``(0, 0)`` when empty."""
        if self.is_empty():
            return 0.0, 0.0
        px = self.pixels()
        return float(px.min()), float(px.max())

    def normalize(self, low: float, high: float) -> None:
        """Linearly remap the sample range onto [low, high].

        A constant image becomes all zeros.
        """
        if self.is_empty():
            return
        m, big_m = self.maxmin()
        if m == big_m:
            self.fill(0.0)
            return
        if m == low and big_m == high:
            return
        px = self.pixels()
        px[...] = (px - np.float32(m)) / np.float32(big_m - m) * np.float32(high - low) + np.float32(low)

    def draw_image(self, sprite: "FloatImage", x0: int, y0: int = 0,
                   width: int | None = None, height: int | None = None) -> None:
        """Copy ``sprite`` into this image with its top-left corner at (x0, y0)."""
        if self.is_empty():
            return
        if width is None:
            width = sprite.width
        if height is None:
            height = sprite.height
        if self.channels != sprite.channels:
            raise ImageError("draw_image requires identical formats")
        if sprite.is_empty() or sprite.data is self.data:
            return

        sx = sy = 0
        if y0 < 0:
            sy = -y0
            height -= sy
            y0 = 0
        if x0 < 0:
            sx = -x0
            width -= sx
            x0 = 0

        lx = min(width, self.width - x0, sprite.width - sx)
        ly = min(height, self.height - y0, sprite.height - sy)
        if lx <= 0 or ly <= 0:
            return
        self.pixels()[y0:y0 + ly, x0:x0 + lx] = sprite.pixels()[sy:sy + ly, sx:sx + lx]

    def linear_pix2d(self, fx: float, fy: float, channel: int = 0) -> float:
        """Bilinearly interpolated sample at (fx, fy), clamped to the image."""
        nfx = clamp(fx, 0.0, float(self.width - 1))
        nfy = clamp(fy, 0.0, float(self.height - 1))
        x = int(nfx)
        y = int(nfy)
        dx = nfx - x
        dy = nfy - y
        nx = x + 1 if dx > 0 else x
        ny = y + 1 if dy > 0 else y
        icc = self[x, y, channel]
        inc = self[nx, y, channel]
        icn = self[x, ny, channel]
        inn = self[nx, ny, channel]
        return icc + dx * (inc - icc + dy * (icc + inn - icn - inc)) + dy * (icn - icc)

    def copy_from(self, source: "IntImage", source_x: int, source_y: int,
                  dest_x: int, dest_y: int, width: int, height: int) -> None:
        """Copy a region of an integer image into this image.

        Only the channels the two images have in common are copied.
        """
        if source.bytes_per_channel not in (1, 2):
            raise ImageError("copy_from: invalid bytes per channel")
        width = min(width, self.width - dest_x, source.width - source_x)
        height = min(height, self.height - dest_y, source.height - source_y)
        if width <= 0 or height <= 0:
            return
        planes = min(self.channels, source.channels)
        region = source._region(source_x, source_y, width, height)
        self.pixels()[dest_y:dest_y + height, dest_x:dest_x + width, :planes] = region[..., :planes]

    def copy_to(self, dest: "IntImage", source_x: int, source_y: int,
                dest_x: int, dest_y: int, width: int, height: int) -> None:
        """Round a region of this image into an integer image, capped at the sample maximum."""
        if dest.bytes_per_channel == 1:
            limit = 0xFF
        elif dest.bytes_per_channel == 2:
            limit = 0xFFFF
        else:
            raise ImageError("copy_to: invalid bytes per channel")
        width = min(width, self.width - source_x, dest.width - dest_x)
        height = min(height, self.height - source_y, dest.height - dest_y)
        if width <= 0 or height <= 0:
            return
        planes = min(self.channels, dest.channels)
        values = self.pixels()[source_y:source_y + height, source_x:source_x + width, :planes]
        rounded = np.minimum(_round_half_away(values.astype(np.float64)), limit) & limit
        region = dest._region(dest_x, dest_y, width, height)
        region[..., :planes] = rounded.astype(region.dtype)

    def _index(self, key) -> int:
        if len(key) == 2:
            x, y = key
            v = 0
        elif len(key) == 3:
            x, y, v = key
        else:
            raise TypeError("index with (x, y) or (x, y, channel)")
        if not (0 <= x < self.width and 0 <= y < self.height and 0 <= v < self.channels):
            raise IndexError(f"pixel {key} is outside the image")
        return x * self.channels + y * self.stride + v

    def __getitem__(self, key) -> float:
        return float(self.data[self._index(key)])

    def __setitem__(self, key, value: float) -> None:
        self.data[self._index(key)] = value


class IntImage:
    """An 8- or 16-bit interleaved image stored in a byte buffer.

    Views created by :meth:`view` share the buffer of the image they come from.
    """

    def __init__(self, width: int = 0, height: int = 0, bytes_per_channel: int = 1,
                 channels: int = 1, stride_bytes: int | None = None) -> None:
        if min(width, height, bytes_per_channel, channels) < 0:
            raise ValueError("image dimensions must not be negative")
        if stride_bytes is None:
            stride_bytes = width * bytes_per_channel * channels
        self.width = width
        self.height = height
        self.bytes_per_channel = bytes_per_channel
        self.channels = channels
        self.stride_bytes = stride_bytes
        self.data = bytearray(stride_bytes * height)
        self.base = 0

    @classmethod
    def alloc_like(cls, other: "IntImage") -> "IntImage":
        """A new, zeroed image with the same geometry as ``other``."""
        return cls(other.width, other.height, other.bytes_per_channel,
                   other.channels, other.stride_bytes)

    def view(self, x: int = 0, y: int = 0, width: int | None = None,
             height: int | None = None) -> "IntImage":
        """A sub-image sharing this image's buffer, clipped to its bounds."""
        if width is None:
            width = self.width
        if height is None:
            height = self.height
        x = min(x, self.width)
        y = min(y, self.height)
        width = min(width, self.width - x)
        height = min(height, self.height - y)
        sub = IntImage.__new__(IntImage)
        sub.width = width
        sub.height = height
        sub.bytes_per_channel = self.bytes_per_channel
        sub.channels = self.channels
        sub.stride_bytes = self.stride_bytes
        sub.data = self.data
        sub.base = self.offset(x, y)
        return sub

    def is_empty(self) -> bool:
        return not self.width or not self.height

    def _pixel_bytes(self) -> int:
        return self.channels * self.bytes_per_channel

    def offset(self, x: int, y: int = 0) -> int:
        """Byte offset of pixel (x, y) within :attr:`data`."""
        return self.base + x * self._pixel_bytes() + y * self.stride_bytes

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) is outside the image")

    def __getitem__(self, key) -> int:
        x, y = key
        self._check(x, y)
        return self.data[self.offset(x, y)]

    def __setitem__(self, key, value: int) -> None:
        x, y = key
        self._check(x, y)
        self.data[self.offset(x, y)] = value

    def row(self, y: int) -> memoryview:
        """A writable view of the bytes of row ``y``, without padding."""
        if not 0 <= y < self.height:
            raise IndexError(f"row {y} is outside the image")
        start = self.offset(0, y)
        return memoryview(self.data)[start:start + self.width * self._pixel_bytes()]

    def _region(self, x: int, y: int, width: int, height: int) -> np.ndarray:
        dtype = _sample_dtype(self.bytes_per_channel)
        if width <= 0 or height <= 0:
            return np.zeros((max(height, 0), max(width, 0), self.channels), dtype=dtype)
        return np.ndarray(
            shape=(height, width, self.channels),
            dtype=dtype,
            buffer=self.data,
            offset=self.offset(x, y),
            strides=(self.stride_bytes, self._pixel_bytes(), self.bytes_per_channel),
        )

    def convert_to_8bpp(self) -> None:
        """Convert 16-bit samples (range 0..32768) to 8 bits in place.

        The row stride is kept, so the image is not compacted.
        """
        if self.bytes_per_channel == 1:
            return
        if self.bytes_per_channel != 2:
            raise ImageError("convert_to_8bpp: invalid bytes per channel")
        if not self.is_empty():
            values = self._region(0, 0, self.width, self.height).astype(np.uint32)
            converted = ((values * 10 // 1285) & 0xFF).astype(np.uint8)
            count = self.width * self.channels
            for y, line in enumerate(converted.reshape(self.height, count)):
                start = self.offset(0, y)
                self.data[start:start + count] = line.tobytes()
        self.bytes_per_channel = 1

    def copy_from(self, source: "IntImage", source_x: int, source_y: int,
                  dest_x: int, dest_y: int, width: int, height: int) -> None:
        """Copy a region from an image of the same sample format."""
        if source.bytes_per_channel != self.bytes_per_channel:
            raise ImageError("copy_from: incompatible bytes per channel")
        if source.channels != self.channels:
            raise ImageError("copy_from: incompatible channel count")
        width = min(width, source.width - source_x, self.width - dest_x)
        height = min(height, source.height - source_y, self.height - dest_y)
        if width <= 0 or height <= 0:
            return
        row_bytes = width * self._pixel_bytes()
        rows = [bytes(source.data[start:start + row_bytes])
                for start in (source.offset(source_x, source_y + y) for y in range(height))]
        for y, chunk in enumerate(rows):
            start = self.offset(dest_x, dest_y + y)
            self.data[start:start + row_bytes] = chunk

    def mask_region(self, top: int, bottom: int, left: int, right: int,
                    mask_outside: bool = True) -> None:
        """Zero everything outside the rectangle, or inside it when ``mask_outside`` is false."""
        left = clamp(left, 0, self.width)
        right = clamp(right, 0, self.width)
        top = clamp(top, 0, self.height)
        bottom = clamp(bottom, 0, self.height)
        pixel = self._pixel_bytes()

        def zero(x: int, y: int, count: int) -> None:
            if count > 0:
                start = self.offset(x, y)
                self.data[start:start + count * pixel] = bytes(count * pixel)

        if mask_outside:
            for y in range(top):
                zero(0, y, self.width)
            for y in range(top, bottom):
                zero(0, y, left)
                zero(right, y, self.width - right)
            for y in range(bottom, self.height):
                zero(0, y, self.width)
        else:
            for y in range(top, bottom):
                zero(left, y, right - left)


__all__ = ["FloatImage", "ImageError", "IntImage"]

_ = math  # kept for numeric helpers used by callers importing this module