"""Preparing source images and masks, and converting images to BGRA for display."""

from __future__ import annotations

from dataclasses import dataclass

from .helpers import blit_16_to_8, blit_rgb_to_bgra, blit_rgba_to_bgra, blit_y_to_bgra
from .image import ImageError, IntImage


@dataclass(frozen=True)
class ChannelLayout:
    """How the interleaved planes of an image are divided up.

    The planes appear in this order: layer planes, the transparency mask,
    layer masks, inverted layer masks, then non-layer planes.
    """

    layer_planes: int = 0
    transparency_mask: int = 0
    layer_masks: int = 0
    inverted_layer_masks: int = 0
    non_layer_planes: int = 0


def color_channels(layout: ChannelLayout, planes: int) -> tuple[int, bool]:
    """Return ``(number of colour channels, has alpha channel)`` for display.

    Layer planes count as colour, followed by an alpha channel if there is a
    transparency mask.  Non-layer planes count as colour only when nothing
    else is present.  Otherwise every plane is treated as colour.
    """
    if layout.layer_planes > 0:
        return layout.layer_planes, layout.transparency_mask > 0
    others = (layout.layer_planes + layout.transparency_mask
              + layout.layer_masks + layout.inverted_layer_masks)
    if layout.non_layer_planes > 0 and others == 0:
        return layout.non_layer_planes, False
    return planes, False


def preview_bgra(image: IntImage, layout: ChannelLayout) -> IntImage:
    """Convert ``image`` to an 8-bit BGRA image suitable for display.

    One colour channel is shown as grey, three as RGB (with alpha when the
    layout has one).  Any other layout, such as CMYK, gives a zeroed image.
    """
    if image.bytes_per_channel == 1:
        samples = memoryview(image.data)[image.base:]
    elif image.bytes_per_channel == 2:
        samples = blit_16_to_8(memoryview(image.data)[image.base:], image.width, image.height,
                               image.channels, image.stride_bytes, image.stride_bytes)
    else:
        raise ImageError(f"invalid bytes per channel: {image.bytes_per_channel}")

    dest = IntImage(image.width, image.height, 1, 4)
    if dest.is_empty():
        return dest

    count, has_alpha = color_channels(layout, image.channels)
    args = (samples, dest.width, dest.height, image.channels)
    if count == 1:
        converted = blit_y_to_bgra(*args, has_alpha, image.stride_bytes, dest.stride_bytes)
    elif count == 3 and has_alpha:
        converted = blit_rgba_to_bgra(*args, image.stride_bytes, dest.stride_bytes)
    elif count == 3:
        converted = blit_rgb_to_bgra(*args, image.stride_bytes, dest.stride_bytes)
    else:
        return dest
    dest.data[:] = converted
    return dest


def source_mask(width: int, height: int, mask=None,
                marquee: tuple[int, int, int, int] | None = None) -> IntImage:
    """Build the one-byte selection mask for a ``width`` x ``height`` image.

    ``mask`` holds the selection rows, whose stride is taken from its length;
    without one the whole image is selected.  ``marquee`` is a rectangle
    ``(top, left, bottom, right)``; everything outside it is deselected.
    """
    if width < 0 or height < 0:
        raise ValueError("mask dimensions must not be negative")
    if mask is None:
        result = IntImage(width, height, 1, 1)
        result.data[:] = b"\xff" * len(result.data)
    else:
        raw = bytes(mask)
        stride = len(raw) // height if height else width
        if stride < width or stride * height != len(raw):
            raise ValueError("mask buffer does not match the image size")
        result = IntImage(width, height, 1, 1, stride)
        result.data[:] = raw

    if marquee is not None:
        top, left, bottom, right = marquee
        result.mask_region(top, bottom, left, right)
    return result


__all__ = ["ChannelLayout", "color_channels", "preview_bgra", "source_mask"]