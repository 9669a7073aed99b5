"""Geometry of the zoomable, draggable preview pane."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .helpers import round_half_away

BORDER = 2
DRAG_SNAP_DISTANCE = 10

FillRect = tuple[int, int, int, int]


def _mul(a: float, b: float) -> float:
    return float(np.float32(a) * np.float32(b))


def _div(a: float, b: float) -> float:
    return float(np.float32(a) / np.float32(b))


@dataclass(frozen=True)
class PaintLayout:
    """Where a preview image is drawn and which part of it is shown.

    ``fill_rects`` are the ``(left, top, right, bottom)`` areas of the pane
    that the image does not cover and that must be cleared.
    """

    dest_x: int
    dest_y: int
    dest_width: int
    dest_height: int
    source_x: int
    source_y: int
    source_width: int
    source_height: int
    fill_rects: tuple[FillRect, ...]

    @property
    def visible(self) -> bool:
        """True if any part of the image is drawn."""
        return self.dest_width > 0 and self.dest_height > 0


def paint_layout(preview_x: int, preview_y: int, image_x: int, image_y: int,
                 image_width: int, image_height: int, dest_left: int, dest_top: int,
                 dest_width: int, dest_height: int, zoom: float) -> PaintLayout:
    """Lay out an image whose top-left lies at (image_x, image_y) in the full image.

    The pane shows the full image from (preview_x, preview_y) onwards,
    magnified by ``zoom``, inside the area starting at (dest_left, dest_top).
    When the zoomed image would not fill the pane, the drawn area shrinks;
    otherwise the shown part of the source shrinks.
    """
    pane = (dest_left, dest_top, dest_left + dest_width, dest_top + dest_height)
    src_x = preview_x - image_x
    src_y = preview_y - image_y
    dest_x = dest_left
    dest_y = dest_top
    avail_width = image_width - src_x
    avail_height = image_height - src_y

    if preview_x < 0:
        shift = int(_mul(-preview_x, zoom))
        dest_x += shift
        dest_width -= shift
        src_x = 0
        avail_width -= -preview_x
    if preview_y < 0:
        shift = int(_mul(-preview_y, zoom))
        dest_y += shift
        dest_height -= shift
        src_y = 0
        avail_height -= -preview_y

    wanted_width = round_half_away(_div(dest_width, zoom))
    if avail_width >= wanted_width:
        source_width = wanted_width
    else:
        source_width = avail_width
        dest_width = round_half_away(_mul(avail_width, zoom))

    wanted_height = round_half_away(_div(dest_height, zoom))
    if avail_height >= wanted_height:
        source_height = wanted_height
    else:
        source_height = avail_height
        dest_height = round_half_away(_mul(avail_height, zoom))

    left, top, right, bottom = pane
    fills: list[FillRect] = []
    below = max(top, dest_y + dest_height)
    if bottom > below:
        fills.append((left, below, right, bottom))
    beside = max(left, dest_x + dest_width)
    if right > beside:
        fills.append((beside, top, right, bottom))
    before = min(right, dest_x)
    if before > left:
        fills.append((left, top, before, bottom))
    above = min(bottom, dest_y)
    if above > top:
        fills.append((left, top, right, above))

    return PaintLayout(dest_x, dest_y, dest_width, dest_height,
                       src_x, src_y, source_width, source_height, tuple(fills))


def preview_size(client_width: int, client_height: int, zoom: float) -> tuple[int, int]:
    """Image pixels visible in a pane of the given client size, border excluded."""
    width = round_half_away(_div(client_width - BORDER, zoom))
    height = round_half_away(_div(client_height - BORDER, zoom))
    return width, height


def drag_position(orig_x: int, orig_y: int, anchor_x: int, anchor_y: int,
                  x: int, y: int, zoom: float) -> tuple[int, int, bool]:
    """Preview position while dragging from (anchor_x, anchor_y) to (x, y).

    Returns ``(new_x, new_y, snapped)``; ``snapped`` is true once the cursor
    has moved more than the snap distance on either axis.  Callers move the
    preview only after a drag has snapped.
    """
    distance_x = anchor_x - x
    distance_y = anchor_y - y
    snapped = abs(distance_x) > DRAG_SNAP_DISTANCE or abs(distance_y) > DRAG_SNAP_DISTANCE
    new_x = orig_x + int(_div(distance_x, zoom))
    new_y = orig_y + int(_div(distance_y, zoom))
    return new_x, new_y, snapped


def zoom_anchor(preview_x: int, preview_y: int, cursor_x: int, cursor_y: int,
                old_zoom: float, new_zoom: float) -> tuple[int, int]:
    """New preview position that keeps the image point under the cursor fixed."""
    image_x = preview_x + int(_div(cursor_x, old_zoom))
    image_y = preview_y + int(_div(cursor_y, old_zoom))
    return (image_x - int(_div(cursor_x, new_zoom)),
            image_y - int(_div(cursor_y, new_zoom)))


__all__ = ["PaintLayout", "drag_position", "paint_layout", "preview_size", "zoom_anchor"]