"""Numeric rules.
"""

from __future__ import annotations

import math
from numbers import Number
from typing import Any, Dict

from .base import Options, Rule, rule


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, (bool, complex))


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@rule("range")
class Range(Rule):
    """Value must lie within bounds.

    Numbers are compared by value; strings by their UTF-8 byte length. Other
    types are not checked.

    Options:
        min: Inclusive lower bound
        max: Inclusive upper bound
    """

    @staticmethod
    def between(min: float, max: float) -> Dict[str, Any]:
        return {"min": min, "max": max}

    @staticmethod
    def min(min: float) -> Dict[str, Any]:
        return {"min": min}

    @staticmethod
    def max(max: float) -> Dict[str, Any]:
        return {"max": max}

    @staticmethod
    def positive() -> Dict[str, Any]:
        return {"min": 0}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return None

        minimum = options.get("min")
        maximum = options.get("max")

        if _is_number(value):
            return self._check_number(value, minimum, maximum)
        if isinstance(value, str):
            return self._check_string(value, minimum, maximum)
        return None

    def _check_number(self, value: Any, minimum: Any, maximum: Any) -> str | None:
        if isinstance(value, float) and math.isnan(value):
            return "Value is NaN (Not a Number), which is not valid for range comparisons"
        if minimum is not None and value < minimum:
            return (
                f"Number [{_format_number(value)}] too small. "
                f"Min value is: [{_format_number(minimum)}]."
            )
        if maximum is not None and value > maximum:
            return (
                f"Number [{_format_number(value)}] too big. "
                f"Max value is: [{_format_number(maximum)}]."
            )
        return None

    def _check_string(self, value: str, minimum: Any, maximum: Any) -> str | None:
        length = len(value.encode("utf-8"))
        if minimum is not None and length < minimum:
            return f"String too short. Min length is: [{minimum}], got: [{length}]."
        if maximum is not None and length > maximum:
            return f"String too long. Max length is: [{maximum}], got: [{length}]."
        return None


@rule("positive")
class Positive(Rule):
    """Value must be greater than zero (or not negative with allow_zero).

    Numeric strings such as "12.5" are accepted and compared as numbers.

    Options:
        allow_zero: Accept zero (default False)
        message: Error message
    """

    @staticmethod
    def allow_zero() -> Dict[str, Any]:
        return {"allow_zero": True}

    @staticmethod
    def strict() -> Dict[str, Any]:
        return {"allow_zero": False}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return None

        number = self._as_number(value)
        if number is None:
            return "Value must be numeric"

        message = options.get("message", "Value must be positive")
        if options.get("allow_zero", False):
            return None if number >= 0 else message
        return None if number > 0 else message

    @staticmethod
    def _as_number(value: Any) -> Any:
        if _is_number(value):
            return None if isinstance(value, float) and math.isnan(value) else value
        if isinstance(value, str):
            try:
                number = float(value.strip())
            except ValueError:
                return None
            return None if math.isnan(number) else number
        return None
