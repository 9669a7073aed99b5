"""Stepped zoom levels for the preview."""

from __future__ import annotations

ZOOM_FACTORS = (
    0.38, 0.42, 0.46, 0.51, 0.56, 0.62, 0.68, 0.75, 0.82, 0.9,
    1.0,
    1.1, 1.21, 1.33, 1.46, 1.61, 1.77, 1.95, 2.14, 2.36, 3.59,
)
MIN_STEP = -10
MAX_STEP = 10


class PreviewZoom:
    """The current preview zoom step, between -10 and +10; step 0 is 1:1."""

    def __init__(self, step: int = 0) -> None:
        if not MIN_STEP <= step <= MAX_STEP:
            raise ValueError(f"zoom step must lie in [{MIN_STEP}, {MAX_STEP}]")
        self.step = step

    def change(self, zoom_in: bool) -> bool:
        """Move one step in or out; returns False if already at the limit."""
        old = self.step
        new = old + 1 if zoom_in else old - 1
        self.step = max(MIN_STEP, min(new, MAX_STEP))
        return self.step != old

    def factor(self) -> float:
        """The magnification for the current step."""
        return ZOOM_FACTORS[self.step - MIN_STEP]


__all__ = ["PreviewZoom", "ZOOM_FACTORS"]