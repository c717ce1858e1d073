"""Collection rules.
"""

from __future__ import annotations

from collections.abc import Mapping, Sized
from typing import Any, Dict, List

from .base import Options, Rule, rule

_TEXT_TYPES = (str, bytes, bytearray)


@rule("count")
class Count(Rule):
    """Collection must have an exact, minimum or maximum number of elements.

    Options:
        min: Minimum element count
        max: Maximum element count
        exact: Exact element count (cannot be combined with min/max)
    """

    @staticmethod
    def min(min: int) -> Dict[str, Any]:
        return {"min": min}

    @staticmethod
    def max(max: int) -> Dict[str, Any]:
        return {"max": max}

    @staticmethod
    def exact(exact: int) -> Dict[str, Any]:
        return {"exact": exact}

    @staticmethod
    def between(min: int, max: int) -> Dict[str, Any]:
        return {"min": min, "max": max}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return None
        if not isinstance(value, Sized) or isinstance(value, _TEXT_TYPES):
            return "Value must be a collection"

        minimum = options.get("min")
        maximum = options.get("max")
        exact = options.get("exact")

        if minimum is None and maximum is None and exact is None:
            raise self.config_error("At least one of min, max, or exact must be specified", options)
        if exact is not None and (minimum is not None or maximum is not None):
            raise self.config_error("Cannot specify exact with min or max", options)

        count = len(value)
        if exact is not None:
            if count != exact:
                return f"Must contain exactly {exact} element(s), got {count}"
            return None
        if minimum is not None and count < minimum:
            return f"Must contain at least {minimum} element(s), got {count}"
        if maximum is not None and count > maximum:
            return f"Must contain at most {maximum} element(s), got {count}"
        return None


@rule("unique_items")
class UniqueItems(Rule):
    """List must not contain duplicate items.

    Mapping values are checked for mappings. Items need not be hashable.

    Options:
        strict: Duplicates must also share a type, so 1 and True differ
            (default True)
        message: Error message prefix
    """

    @staticmethod
    def strict() -> Dict[str, Any]:
        return {"strict": True}

    @staticmethod
    def loose() -> Dict[str, Any]:
        return {"strict": False}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return None
        if isinstance(value, Mapping):
            items = list(value.values())
        elif isinstance(value, (list, tuple)):
            items = list(value)
        else:
            return "Value must be a list"

        duplicates = self._duplicates(items, options.get("strict", True))
        if not duplicates:
            return None

        message = options.get("message", "Array must contain only unique values")
        return f"{message} (duplicates: {', '.join(repr(d) for d in duplicates)})"

    @staticmethod
    def _duplicates(items: List[Any], strict: bool) -> List[Any]:
        def same(left: Any, right: Any) -> bool:
            if strict and type(left) is not type(right):
                return False
            return left == right

        seen: List[Any] = []
        duplicates: List[Any] = []
        for item in items:
            if any(same(item, previous) for previous in seen):
                if not any(same(item, dup) for dup in duplicates):
                    duplicates.append(item)
            else:
                seen.append(item)
        return duplicates
