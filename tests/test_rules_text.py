"""Tests for string format rules."""

import re

import pytest

from graphguard import RuleConfigurationError
from graphguard.rules import Alphanumeric, DateTime, Format, Json, Length, Uuid


class TestLength:
    """Test Length rule."""

    def test_bounds(self):
        """Test min and max messages."""
        assert Length()("abc", Length.between(2, 5)) is None
        assert Length()("a", Length.min(2)) == "String too short: minimum 2 characters required, got 1"
        assert Length()("abcdef", Length.max(5)) == "String too long: maximum 5 characters allowed, got 6"

    def test_exact_overrides_bounds(self):
        """Test that exact ignores min and max."""
        assert Length()("1234", Length.zip_code()) == "String must be exactly 5 characters, got 4"
        assert Length()("12345", {"exact": 5, "min": 10}) is None

    def test_count_bytes(self):
        """Test counting UTF-8 bytes."""
        options = {"max": 3, "count_bytes": True}
        assert Length()("äb", options) is None
        assert Length()("ää", options) == "String too long: maximum 3 bytes allowed, got 4"

    def test_non_strings(self):
        """Test that None passes and other types fail."""
        assert Length()(None, Length.min(1)) is None
        assert Length()(12345, Length.exact(5)) == "Value must be a string"


class TestFormat:
    """Test Format rule."""

    def test_search_semantics(self):
        """Test that patterns are searched rather than anchored."""
        assert Format()("abc123", Format.pattern(r"\d+")) is None
        assert Format()("abc", Format.pattern(r"\d+")) == "Value is not in correct format"

    def test_custom_message_and_compiled_pattern(self):
        """Test compiled patterns and custom messages."""
        options = {"pattern": re.compile(r"^x"), "message": "Must start with x"}
        assert Format()("yes", options) == "Must start with x"

    def test_presets(self):
        """Test slug and colour presets."""
        assert Format()("my-post-1", Format.slug()) is None
        assert Format()("My Post", Format.slug()) is not None
        assert Format()("#a0B1c2", Format.hex_color()) is None
        assert Format()("#abc", Format.hex_color()) is not None

    def test_pattern_required(self):
        """Test that a missing pattern is a configuration error."""
        with pytest.raises(RuleConfigurationError, match="Pattern must be specified"):
            Format()("value", {})

    def test_invalid_pattern(self):
        """Test that an invalid regex is a configuration error."""
        with pytest.raises(RuleConfigurationError):
            Format()("value", Format.pattern("(unclosed"))


class TestAlphanumeric:
    """Test Alphanumeric rule."""

    def test_letters_and_digits(self):
        """Test the default character set."""
        assert Alphanumeric()("abc123") is None
        assert Alphanumeric()("") is None
        assert Alphanumeric()("abc-123") == "Value must be alphanumeric"
        assert Alphanumeric()("äbc") == "Value must be alphanumeric"

    def test_extra_characters(self):
        """Test additional characters and spaces."""
        assert Alphanumeric()("abc-123", Alphanumeric.with_dashes()) is None
        assert Alphanumeric()("abc_123", Alphanumeric.with_underscores()) is None
        assert Alphanumeric()("abc 123", Alphanumeric.with_spaces()) is None
        assert Alphanumeric()("abc 123", Alphanumeric.with_dashes()) is not None


class TestUuid:
    """Test Uuid rule."""

    VALID_V4 = "550e8400-e29b-41d4-a716-446655440000"

    def test_format(self):
        """Test UUID shape."""
        assert Uuid()(self.VALID_V4) is None
        assert Uuid()(self.VALID_V4.upper()) is None
        assert Uuid()("not-a-uuid") == "Invalid UUID format"
        assert Uuid()(123) == "UUID must be a string"

    def test_version(self):
        """Test version checks."""
        assert Uuid()(self.VALID_V4, Uuid.v4()) is None
        assert Uuid()(self.VALID_V4, Uuid.v1()) == "UUID must be version 1"


class TestJson:
    """Test Json rule."""

    def test_valid_and_invalid(self):
        """Test decoding."""
        assert Json()('{"a": 1}') is None
        assert Json()("[1, 2]") is None
        assert Json()("{bad}").startswith("Invalid JSON: ")
        assert Json()("") == "Invalid JSON"

    def test_expected_type(self):
        """Test object and array expectations."""
        assert Json()("[1]", Json.object()) == "JSON must be a object, got array"
        assert Json()('"text"', Json.array()) == "JSON must be a array, got string"
        assert Json()("{}", Json.object()) is None

    def test_max_depth(self):
        """Test the nesting limit."""
        assert Json()("[[[1]]]", Json.max_depth(2)) == "Invalid JSON: Maximum stack depth exceeded"
        assert Json()("[[1]]", Json.max_depth(2)) is None


class TestDateTime:
    """Test DateTime rule."""

    def test_iso8601(self):
        """Test the default ISO 8601 format."""
        assert DateTime()("2024-03-01T12:30:00") is None
        assert DateTime()("2024-03-01") is None
        assert DateTime()("01.03.2024") == "Invalid date/time format"

    def test_custom_format_round_trip(self):
        """Test that values must match the format exactly."""
        assert DateTime()("2024-01-05", DateTime.date_only()) is None
        assert DateTime()("2024-1-5", DateTime.date_only()) == "Invalid date/time format"

    def test_bounds(self):
        """Test earliest and latest values."""
        options = DateTime.between("2024-01-01", "2024-12-31", "%Y-%m-%d")
        assert DateTime()("2024-06-15", options) is None
        assert DateTime()("2023-12-31", options) == "Date/time must be after 2024-01-01"
        assert DateTime()("2025-01-01", options) == "Date/time must be before 2024-12-31"

    def test_unparsable_bound_ignored(self):
        """Test that a bound in the wrong format is skipped."""
        assert DateTime()("2024-06-15", {"format": "%Y-%m-%d", "min": "soon"}) is None

    def test_mixed_timezone_awareness(self):
        """Test that comparing naive and aware values is a configuration error."""
        with pytest.raises(RuleConfigurationError):
            DateTime()("2024-06-15T10:00:00+00:00", {"min": "2024-01-01T00:00:00"})
