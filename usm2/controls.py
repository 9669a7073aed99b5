"""Limits, mouse-wheel stepping and text handling for the filter's edit controls."""

from __future__ import annotations

import re
from dataclasses import dataclass

import numpy as np

MIN_THREADS = 1
MAX_THREADS = 32

_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def _f32(value: float) -> float:
    return float(np.float32(value))


@dataclass(frozen=True)
class ControlLimit:
    """The allowed range and wheel step of one setting's edit control."""

    name: str
    low: float | None
    high: float | None
    wheel_delta: float
    integer: bool = False

    def clamp(self, value):
        """Limit ``value`` to the control's range."""
        if self.integer:
            if self.low is not None:
                value = max(value, int(self.low))
            if self.high is not None:
                value = min(value, int(self.high))
            return int(value)
        value = _f32(value)
        if self.low is not None:
            value = max(value, _f32(self.low))
        if self.high is not None:
            value = min(value, _f32(self.high))
        return value

    def step(self, value, wheel_up: bool, coarse: bool = False):
        """Value after one mouse-wheel notch; ``coarse`` makes the step ten times larger."""
        change = np.float32(self.wheel_delta)
        if not wheel_up:
            change *= np.float32(-1.0)
        if coarse:
            change *= np.float32(10.0)
        if self.integer:
            return self.clamp(int(value) + int(change))
        return self.clamp(float(np.float32(value) + change))


_CONTROLS = {
    limit.name: limit
    for limit in (
        ControlLimit("radius", 0.25, 500.0, 0.1),
        ControlLimit("amount_up", 0.0, 10.0, 0.1),
        ControlLimit("amount_down", 0.0, 10.0, 0.1),
        ControlLimit("gamma", 0.1, 5.0, 0.1),
        ControlLimit("threshold", 0.0, 1.0, 0.01),
        ControlLimit("high", 0.0, 1.0, 0.01),
        ControlLimit("light", 0.0, 1.0, 0.01),
        ControlLimit("midtone", 0.0, 1.0, 0.01),
        ControlLimit("shadow", 0.0, 1.0, 0.01),
    )
}


def control_limit(name: str) -> ControlLimit:
    """The limits of the control editing the setting called ``name``."""
    try:
        return _CONTROLS[name]
    except KeyError:
        raise KeyError(f"no control for setting {name!r}") from None


def format_control_value(value: float) -> str:
    """Text shown in an edit control: three significant digits."""
    return "%.3g" % _f32(value)


def parse_control_value(text: str) -> float:
    """Read the leading number of ``text``; text without one reads as zero."""
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        return 0.0
    return _f32(float(match.group(1)))


def parse_thread_count(text: str) -> int:
    """Interpret the thread selector: 0 for "Auto", -1 for "Auto-1", else 1 to 32."""
    if text == "Auto":
        return 0
    if text == "Auto-1":
        return -1
    match = _INT_PREFIX.match(text)
    count = int(match.group(1)) if match else 0
    return max(MIN_THREADS, min(count, MAX_THREADS))


__all__ = [
    "ControlLimit",
    "control_limit",
    "format_control_value",
    "parse_control_value",
    "parse_thread_count",
]