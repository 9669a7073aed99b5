"""Unsharp mask sharpening with a gamma-aware IIR Gaussian blur and preview helpers."""

__version__ = "0.1.0"