# File: utils/math_utils.py
"""Math and calculation utilities for habitlog.

Functions:
    - round_ratio: Consistent rounding for strength values
    - safe_ratio: Division with an explicit empty-denominator result
    - clamp: Bound a value to a range
    - calculate_percentage: Ratio expressed as a rounded percentage
"""

from __future__ import annotations

# Default float precision for strength values
DATA_FLOAT_PRECISION = 4


def round_ratio(value: float, precision: int = DATA_FLOAT_PRECISION) -> float:
    """Round a ratio to the configured precision.

    Examples:
        round_ratio(0.285714) → 0.2857
        round_ratio(1.0) → 1.0
    """
    return round(value, precision)


def safe_ratio(numerator: float, denominator: float, empty: float = 0.0) -> float:
    """Divide numerator by denominator, returning `empty` when there is nothing to divide by.

    Args:
        numerator: Satisfied units
        denominator: Total units
        empty: Value returned when denominator <= 0

    Examples:
        safe_ratio(2, 7) → 0.2857142857142857
        safe_ratio(0, 0, empty=1.0) → 1.0
    """
    if denominator <= 0:
        return empty
    return numerator / denominator


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(1.5, 0, 1) → 1
        clamp(-0.1, 0, 1) → 0
        clamp(0.5, 0, 1) → 0.5
    """
    return max(min_val, min(value, max_val))


def calculate_percentage(ratio: float) -> int:
    """Convert a 0..1 ratio into a whole-number percentage.

    Examples:
        calculate_percentage(0.5) → 50
        calculate_percentage(0.2857) → 29
        calculate_percentage(1.3) → 100
    """
    return round(clamp(ratio, 0.0, 1.0) * 100)
