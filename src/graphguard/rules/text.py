"""String format rules.
"""

from __future__ import annotations

import json
import re
from datetime import datetime
from re import Pattern as RegexPattern
from typing import Any, Dict, Tuple

from .base import Options, Rule, rule

ISO_8601 = "iso8601"


@rule("length")
class Length(Rule):
    """String length must match exact/min/max bounds.

    Length counts characters, or UTF-8 bytes with ``count_bytes``. When
    ``exact`` is given, min and max are not consulted.

    Options:
        min: Minimum length
        max: Maximum length
        exact: Exact length
        count_bytes: Count bytes instead of characters (default False)
    """

    @staticmethod
    def between(min: int, max: int) -> Dict[str, Any]:
        return {"min": min, "max": max}

    @staticmethod
    def min(min: int) -> Dict[str, Any]:
        return {"min": min}

    @staticmethod
    def max(max: int) -> Dict[str, Any]:
        return {"max": max}

    @staticmethod
    def exact(length: int) -> Dict[str, Any]:
        return {"exact": length}

    @staticmethod
    def zip_code() -> Dict[str, Any]:
        return {"exact": 5}

    @staticmethod
    def phone_number() -> Dict[str, Any]:
        return {"min": 10, "max": 15}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            return "Value must be a string"

        count_bytes = options.get("count_bytes", False)
        length = len(value.encode("utf-8")) if count_bytes else len(value)
        unit = "bytes" if count_bytes else "characters"

        exact = options.get("exact")
        if exact is not None:
            if length != exact:
                return f"String must be exactly {exact} {unit}, got {length}"
            return None

        minimum = options.get("min")
        if minimum is not None and length < minimum:
            return f"String too short: minimum {minimum} {unit} required, got {length}"

        maximum = options.get("max")
        if maximum is not None and length > maximum:
            return f"String too long: maximum {maximum} {unit} allowed, got {length}"

        return None


@rule("format")
class Format(Rule):
    """String must match a regular expression (searched, not anchored).

    Compiled patterns are cached on the instance.

    Options:
        pattern: Regex string or compiled pattern (required)
        message: Error message
    """

    def __init__(self) -> None:
        self._compiled: Dict[str, RegexPattern[str]] = {}

    @staticmethod
    def pattern(pattern: str) -> Dict[str, Any]:
        return {"pattern": pattern}

    @staticmethod
    def slug() -> Dict[str, Any]:
        return {"pattern": r"^[a-z0-9]+(?:-[a-z0-9]+)*$"}

    @staticmethod
    def hex_color() -> Dict[str, Any]:
        return {"pattern": r"^#[0-9A-Fa-f]{6}$"}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            return "Value must be a string"

        pattern = options.get("pattern")
        if pattern is None:
            raise self.config_error("Pattern must be specified", options)

        if not self._compile(pattern, options).search(value):
            return options.get("message", "Value is not in correct format")
        return None

    def _compile(self, pattern: Any, options: Options) -> RegexPattern[str]:
        if isinstance(pattern, RegexPattern):
            return pattern
        compiled = self._compiled.get(pattern)
        if compiled is None:
            try:
                compiled = re.compile(pattern)
            except re.error as e:
                raise self.config_error(f"Invalid pattern: {e}", options) from e
            self._compiled[pattern] = compiled
        return compiled


@rule("alphanumeric")
class Alphanumeric(Rule):
    """String may contain only ASCII letters and digits.

    The empty string passes.

    Options:
        additional_chars: Extra characters to allow
        allow_spaces: Allow whitespace (default False)
        message: Error message
    """

    def __init__(self) -> None:
        self._compiled: Dict[Tuple[str, bool], RegexPattern[str]] = {}

    @staticmethod
    def with_dashes() -> Dict[str, Any]:
        return {"additional_chars": "-"}

    @staticmethod
    def with_spaces() -> Dict[str, Any]:
        return {"allow_spaces": True}

    @staticmethod
    def with_underscores() -> Dict[str, Any]:
        return {"additional_chars": "_"}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            return "Value must be a string"
        if value == "":
            return None

        key = (options.get("additional_chars", ""), bool(options.get("allow_spaces", False)))
        regex = self._compiled.get(key)
        if regex is None:
            extra, spaces = key
            whitespace = r"\s" if spaces else ""
            regex = re.compile(f"[a-zA-Z0-9{re.escape(extra)}{whitespace}]+")
            self._compiled[key] = regex

        if not regex.fullmatch(value):
            return options.get("message", "Value must be alphanumeric")
        return None


@rule("uuid")
class Uuid(Rule):
    """String must be a UUID in 8-4-4-4-12 hex form, optionally of a version.

    Options:
        version: Required UUID version (1, 3, 4 or 5)
        message: Error message
    """

    UUID_PATTERN = re.compile(
        r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
    )

    @staticmethod
    def any() -> Dict[str, Any]:
        return {}

    @staticmethod
    def v1() -> Dict[str, Any]:
        return {"version": 1}

    @staticmethod
    def v3() -> Dict[str, Any]:
        return {"version": 3}

    @staticmethod
    def v4() -> Dict[str, Any]:
        return {"version": 4}

    @staticmethod
    def v5() -> Dict[str, Any]:
        return {"version": 5}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            return "UUID must be a string"

        if not self.UUID_PATTERN.match(value):
            return options.get("message", "Invalid UUID format")

        version = options.get("version")
        if version is not None and value[14] != str(version):
            return f"UUID must be version {version}"
        return None


def _json_depth(data: Any) -> int:
    if isinstance(data, dict):
        return 1 + max((_json_depth(v) for v in data.values()), default=0)
    if isinstance(data, list):
        return 1 + max((_json_depth(v) for v in data), default=0)
    return 0


def _json_type(data: Any) -> str:
    if isinstance(data, dict):
        return "object"
    if isinstance(data, list):
        return "array"
    if isinstance(data, str):
        return "string"
    if isinstance(data, bool):
        return "boolean"
    if data is None:
        return "null"
    return "number"


@rule("json")
class Json(Rule):
    """String must contain valid JSON, optionally an object or an array.

    Options:
        expected_type: "object" or "array"
        max_depth: Maximum nesting depth (default 512)
        message: Error message for empty input
    """

    @staticmethod
    def object() -> Dict[str, Any]:
        return {"expected_type": "object"}

    @staticmethod
    def array() -> Dict[str, Any]:
        return {"expected_type": "array"}

    @staticmethod
    def max_depth(depth: int) -> Dict[str, Any]:
        return {"max_depth": depth}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            return "JSON must be a string"
        if value == "":
            return options.get("message", "Invalid JSON")

        try:
            decoded = json.loads(value)
        except json.JSONDecodeError as e:
            return f"Invalid JSON: {e.msg}"
        except RecursionError:
            return "Invalid JSON: Maximum stack depth exceeded"

        if _json_depth(decoded) > options.get("max_depth", 512):
            return "Invalid JSON: Maximum stack depth exceeded"

        expected = options.get("expected_type")
        if expected is not None:
            actual = _json_type(decoded)
            if actual != expected:
                return f"JSON must be a {expected}, got {actual}"
        return None


@rule("date_time")
class DateTime(Rule):
    """String must be a date/time in a given format, optionally within bounds.

    ``format`` is a ``strptime`` format; the default parses ISO 8601 with
    ``datetime.fromisoformat``. Values must round-trip through the format,
    so "2024-1-5" does not satisfy "%Y-%m-%d". Unparsable bounds are
    ignored.

    Options:
        format: strptime format or "iso8601" (default)
        min: Earliest allowed value, in the same format
        max: Latest allowed value, in the same format
        message: Error message for unparsable values
    """

    @staticmethod
    def iso8601() -> Dict[str, Any]:
        return {"format": ISO_8601}

    @staticmethod
    def between(min: str, max: str, format: str = ISO_8601) -> Dict[str, Any]:
        return {"format": format, "min": min, "max": max}

    @staticmethod
    def date_only() -> Dict[str, Any]:
        return {"format": "%Y-%m-%d"}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            return "Date/time must be a string"

        fmt = options.get("format", ISO_8601)
        parsed = self._parse(value, fmt)
        if parsed is None:
            return options.get("message", "Invalid date/time format")

        minimum = options.get("min")
        if minimum is not None:
            bound = self._parse(minimum, fmt)
            if bound is not None and self._compare(parsed, bound, options) < 0:
                return f"Date/time must be after {minimum}"

        maximum = options.get("max")
        if maximum is not None:
            bound = self._parse(maximum, fmt)
            if bound is not None and self._compare(parsed, bound, options) > 0:
                return f"Date/time must be before {maximum}"

        return None

    @staticmethod
    def _parse(value: str, fmt: str) -> datetime | None:
        if fmt == ISO_8601:
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                return None
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            return None
        return parsed if parsed.strftime(fmt) == value else None

    def _compare(self, left: datetime, right: datetime, options: Options) -> int:
        try:
            return (left > right) - (left < right)
        except TypeError as e:
            raise self.config_error(
                "Cannot compare timezone-aware and naive date/time bounds", options
            ) from e
