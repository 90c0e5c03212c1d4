"""
Input validation utilities for PyFactorial.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import math
import numbers
from collections.abc import Iterable
from typing import Any

from pyfactorial.core.exceptions import ValidationError


def is_numeric_value(value: Any) -> bool:
    """
    Return True if value is a finite real number.

    Booleans are rejected even though bool subclasses int: a True/False
    response is categorical, not a measurement.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(float(value))


def check_not_none(value: Any, name: str) -> None:
    """
    Verify a required input was supplied.

    Raises:
        ValidationError: If value is None
    """
    if value is None:
        raise ValidationError(f"{name}: required, got None")


def check_sequence(value: Any, name: str) -> list[Any]:
    """
    Validate that value is an iterable container (not a string or mapping)
    and return its items as a list.

    Raises:
        ValidationError: If value is None, a string, a mapping, or not iterable
    """
    check_not_none(value, name)
    if isinstance(value, (str, bytes, dict)) or not isinstance(value, Iterable):
        raise ValidationError(
            f"{name}: expected a sequence of records, got {type(value).__name__}"
        )
    return list(value)


def check_probability(value: Any, name: str) -> float:
    """
    Verify value lies strictly between 0 and 1.

    Raises:
        ValidationError: If value is not a number in the open interval (0, 1)
    """
    if not is_numeric_value(value) or not 0.0 < float(value) < 1.0:
        raise ValidationError(f"{name}: must be in (0, 1), got {value!r}")
    return float(value)


def check_one_of(value: Any, choices: tuple[Any, ...], name: str) -> None:
    """
    Verify value is one of the allowed choices.

    Raises:
        ValidationError: If value is not in choices
    """
    if value not in choices:
        raise ValidationError(f"{name}: must be one of {choices}, got {value!r}")


def check_int_range(value: Any, low: int, high: int, name: str) -> int:
    """
    Verify value is an integer in the closed range [low, high].

    Raises:
        ValidationError: If value is not an int or falls outside the range
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(f"{name}: expected an integer, got {value!r}")
    if not low <= int(value) <= high:
        raise ValidationError(
            f"{name}: must be between {low} and {high}, got {value}"
        )
    return int(value)
