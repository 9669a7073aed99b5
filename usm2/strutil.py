"""Small string helpers: substring replacement and compact float formatting."""

from __future__ import annotations

import numpy as np


def replace_all(text: str, old: str, new: str | None) -> str:
    """Replace every occurrence of ``old`` in ``text`` with ``new``.

    Replacement proceeds left to right and never rescans inserted text.  An
    empty ``old`` leaves the text unchanged, and a ``new`` of ``None`` deletes
    the matches.
    """
    if not old:
        return text
    return text.replace(old, new or "")


def format_float(value: float, max_digits_after_decimal: int = 6) -> str:
    """Format a single-precision value with at most the given number of decimals.

    Trailing zeros, and then a dangling decimal point, are removed whenever
    any decimals were requested.
    """
    if max_digits_after_decimal < 0:
        raise ValueError("max_digits_after_decimal must not be negative")
    single = float(np.float32(value))
    text = f"{single:.{max_digits_after_decimal}f}"
    if max_digits_after_decimal:
        text = text.rstrip("0")
        if text.endswith("."):
            text = text[:-1]
    return text