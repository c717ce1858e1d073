"""Presence, equality and membership rules.
"""

from __future__ import annotations

from collections.abc import Callable, Sized
from typing import Any, Dict, Iterable

from .base import Options, Rule, rule


def _strict_equal(left: Any, right: Any) -> bool:
    return type(left) is type(right) and left == right


@rule("not_blank")
class NotBlank(Rule):
    """Rejects None. Everything else, including empty strings, passes.

    Options:
        message: Error message (default "Field can not be empty")
    """

    DEFAULT_MESSAGE = "Field can not be empty"

    @staticmethod
    def required(message: str = DEFAULT_MESSAGE) -> Dict[str, Any]:
        return {"message": message}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return options.get("message", self.DEFAULT_MESSAGE)
        return None


@rule("not_empty")
class NotEmpty(Rule):
    """Rejects None, empty collections and empty (or blank) strings.

    Zero and False are not empty.

    Options:
        message: Error message
        trim_whitespace: Treat whitespace-only strings as empty (default True)
    """

    @staticmethod
    def trimmed() -> Dict[str, Any]:
        return {"trim_whitespace": True}

    @staticmethod
    def strict() -> Dict[str, Any]:
        return {"trim_whitespace": False}

    def validate_value(self, value: Any, options: Options) -> str | None:
        message = options.get("message", "Field must not be empty")

        if value is None:
            return message

        if isinstance(value, str):
            check = value.strip() if options.get("trim_whitespace", True) else value
            return message if check == "" else None

        if isinstance(value, Sized) and len(value) == 0:
            return message

        return None


@rule("equals")
class Equals(Rule):
    """Value must equal an expected value.

    Options:
        expected_value: Value to compare against; if unset any value passes
        strict: Require identical types as well (default True)
        message: Error message
    """

    @staticmethod
    def value(expected_value: Any) -> Dict[str, Any]:
        return {"expected_value": expected_value}

    @staticmethod
    def strict(expected_value: Any) -> Dict[str, Any]:
        return {"expected_value": expected_value, "strict": True}

    @staticmethod
    def loose(expected_value: Any) -> Dict[str, Any]:
        return {"expected_value": expected_value, "strict": False}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return None

        expected = options.get("expected_value")
        if expected is None:
            return None

        if options.get("strict", True):
            equal = _strict_equal(value, expected)
        else:
            equal = value == expected

        if not equal:
            return options.get("message", "Value does not match expected value")
        return None


@rule("contain")
class Contain(Rule):
    """Value must be one of a set of allowed values (type-strict).

    None is rejected.

    Options:
        allowed_values: Iterable of allowed values
        message: Error message
    """

    @staticmethod
    def one_of(allowed_values: Iterable[Any]) -> Dict[str, Any]:
        return {"allowed_values": list(allowed_values)}

    def validate_value(self, value: Any, options: Options) -> str | None:
        message = options.get("message", "Value is not in allowed list")
        if value is None:
            return message

        allowed = options.get("allowed_values", [])
        if any(_strict_equal(value, candidate) for candidate in allowed):
            return None
        return message


@rule("callback")
class Callback(Rule):
    """Delegates to a callable passed in the options.

    The callable receives the value and returns an error message or None.
    It is passed per attachment so that one rule instance serves every
    callback.

    Options:
        callback: Callable[[Any], str | None] (required)
    """

    @staticmethod
    def using(callback: Callable[[Any], str | None]) -> Dict[str, Any]:
        return {"callback": callback}

    def validate_value(self, value: Any, options: Options) -> str | None:
        callback = options.get("callback")
        if not callable(callback):
            raise self.config_error("Callback must be a callable", options)
        return callback(value)
