"""Numeric helpers shared by the analyzers and the scorer."""

import math
from typing import Any


def clamp_unit(value: Any) -> float:
    """Clamp a value into the closed interval [0, 1].

    Non-numeric values and NaN collapse to 0.0; infinities clamp to the
    nearest bound.

    Example:
        >>> clamp_unit(1.7), clamp_unit(-3), clamp_unit(float("nan"))
        (1.0, 0.0, 0.0)
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return min(max(number, 0.0), 1.0)
