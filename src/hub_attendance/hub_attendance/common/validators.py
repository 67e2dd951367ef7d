from __future__ import annotations

import math
from typing import Any

from ..core.exceptions import InvalidCoordinateError


def require_finite_float(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise InvalidCoordinateError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidCoordinateError(f"{field_name} must be a number") from exc
    if not math.isfinite(number):
        raise InvalidCoordinateError(f"{field_name} must be finite")
    return number
