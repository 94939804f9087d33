"""Length conversions between millimetres and PDF points."""

from __future__ import annotations

MM_PER_INCH = 25.4
POINTS_PER_INCH = 72.0

PT_PER_MM = POINTS_PER_INCH / MM_PER_INCH


def mm_to_pt(value_mm: float) -> float:
    """Convert millimetres to PDF points (1/72 inch)."""

    return value_mm * PT_PER_MM


def pt_to_mm(value_pt: float) -> float:
    """Convert PDF points back to millimetres."""

    return value_pt / PT_PER_MM


to_native_units = mm_to_pt


__all__ = ["MM_PER_INCH", "POINTS_PER_INCH", "PT_PER_MM", "mm_to_pt", "pt_to_mm", "to_native_units"]
