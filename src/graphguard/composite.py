"""Field-level validation of a single object with a fluent configuration API.

Example:
    ```python
    from graphguard import CompositeFieldValidator
    from graphguard.rules import Email, Length, NotBlank, Range

    validator = (
        CompositeFieldValidator()
        .field("email").validates(NotBlank).validates(Email)
        .field("age").validates(Range, Range.between(18, 120))
        .field("password").validates(Length, Length.min(8))
        .end()
    )
    result = validator.validate(user)
    ```
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Set, Tuple, Type

from .extraction import FieldValueExtractor, default_extractor
from .result import ValidationResult
from .rules.base import Rule, RuleKey, create_rule, resolve_rule_class

logger = logging.getLogger(__name__)

ID_FIELD = "id"


class RuleMode(str, Enum):
    """How a rule failure is handled."""

    NORMAL = "normal"  # record the message and continue
    BREAK = "break"  # abort validation of the object


@dataclass(frozen=True)
class RuleAttachment:
    """A rule type bound to the options it is called with."""

    rule_key: RuleKey
    options: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def of(cls, rule_key: RuleKey, options: Mapping[str, Any] | None = None) -> RuleAttachment:
        """Create an attachment holding a read-only copy of ``options``."""
        return cls(rule_key, MappingProxyType(dict(options or {})))


@dataclass
class FieldRuleTable:
    """Rule attachments per field, split by mode, plus excluded field names.

    Fields are evaluated in the order they were first registered; a field's
    attachments are evaluated in attachment order.
    """

    normal: Dict[str, List[RuleAttachment]] = field(default_factory=dict)
    breaking: Dict[str, List[RuleAttachment]] = field(default_factory=dict)
    excluded: Set[str] = field(default_factory=set)

    def add(self, field_name: str, attachment: RuleAttachment, mode: RuleMode) -> None:
        table = self.breaking if mode is RuleMode.BREAK else self.normal
        table.setdefault(field_name, []).append(attachment)

    def rules_for(self, field_name: str, mode: RuleMode = RuleMode.NORMAL) -> Tuple[RuleAttachment, ...]:
        table = self.breaking if mode is RuleMode.BREAK else self.normal
        return tuple(table.get(field_name, ()))

    def is_excluded(self, field_name: str) -> bool:
        return field_name in self.excluded


class FieldBuilder:
    """Cursor collecting normal rules for one field until flushed.

    Pending attachments move to the composite's rule table when the builder
    is flushed: explicitly with ``flush()``, or implicitly by ``field()``,
    ``exclude_fields()``, ``end()``, opening another field on the composite,
    or validating. Flushing clears the pending list, so it is idempotent.

    Once the composite has moved on to another field the builder is closed:
    rules attached through a kept reference go straight to the rule table.
    """

    def __init__(self, field_name: str, composite: CompositeFieldValidator):
        self._field_name = field_name
        self._composite = composite
        self._pending: List[RuleAttachment] = []
        self._closed = False

    @property
    def field_name(self) -> str:
        return self._field_name

    @property
    def pending(self) -> Tuple[RuleAttachment, ...]:
        """Attachments not yet flushed to the composite."""
        return tuple(self._pending)

    def validates(self, rule_key: RuleKey, options: Mapping[str, Any] | None = None) -> FieldBuilder:
        """Attach a normal rule to this field.

        Args:
            rule_key: Rule class or catalog name
            options: Options passed to the rule on every call

        Returns:
            Self for chaining
        """
        self._pending.append(RuleAttachment.of(rule_key, options))
        if self._closed:
            self.flush()
        return self

    def breaks_on(
        self, rule_key: RuleKey, options: Mapping[str, Any] | None = None
    ) -> CompositeFieldValidator:
        """Register a break rule for this field immediately.

        If the rule fails, validation of the whole object stops and an
        empty result is returned.

        Returns:
            The composite validator
        """
        self._composite.register_rule(self._field_name, rule_key, options, RuleMode.BREAK)
        return self._composite

    def field(self, field_name: str) -> FieldBuilder:
        """Flush this builder and start configuring another field."""
        self.flush()
        return self._composite.field(field_name)

    def exclude_fields(self, field_names: Iterable[str]) -> CompositeFieldValidator:
        """Flush this builder and exclude fields on the composite."""
        self.flush()
        return self._composite.exclude_fields(field_names)

    def end(self) -> CompositeFieldValidator:
        """Flush this builder and return to the composite."""
        self.flush()
        return self._composite

    def flush(self) -> int:
        """Move pending attachments into the composite's rule table.

        Returns:
            Number of attachments moved (0 when already flushed)
        """
        pending, self._pending = self._pending, []
        for attachment in pending:
            self._composite.register_rule(
                self._field_name, attachment.rule_key, attachment.options, RuleMode.NORMAL
            )
        return len(pending)

    def close(self) -> int:
        """Flush and stop buffering; later rules register immediately."""
        self._closed = True
        return self.flush()


class CompositeFieldValidator:
    """Validates the fields of one object against attached rules.

    Break rules run first: the first failing break rule ends validation
    with an *empty* result, discarding anything collected so far. Otherwise
    every normal rule runs and failures are collected per field.

    Fields listed with ``exclude_fields`` are skipped while the object has
    no ``id`` (create), and validated once it has one (update).

    One rule instance is created per rule type and shared across all fields
    and options of this validator.
    """

    NORMAL = RuleMode.NORMAL
    BREAK = RuleMode.BREAK

    def __init__(self, extractor: FieldValueExtractor | None = None):
        """Initialize an empty validator.

        Args:
            extractor: Field value extractor (default: accessor/attribute lookup)
        """
        self._table = FieldRuleTable()
        self._instances: Dict[Type[Rule], Rule] = {}
        self._current_builder: FieldBuilder | None = None
        self._extractor = extractor or default_extractor

    @property
    def rule_table(self) -> FieldRuleTable:
        """Flushed rule attachments (pending builder rules not included)."""
        return self._table

    def field(self, field_name: str) -> FieldBuilder:
        """Start configuring a field, flushing any open builder first."""
        self.flush()
        self._current_builder = FieldBuilder(field_name, self)
        return self._current_builder

    def flush(self) -> int:
        """Flush and close the open field builder, if any.

        Returns:
            Number of attachments moved into the rule table
        """
        builder, self._current_builder = self._current_builder, None
        return builder.close() if builder is not None else 0

    def register_rule(
        self,
        field_name: str,
        rule_key: RuleKey,
        options: Mapping[str, Any] | None = None,
        mode: RuleMode | str = RuleMode.NORMAL,
    ) -> CompositeFieldValidator:
        """Attach a rule to a field directly.

        Raises:
            ValueError: If mode is not "normal" or "break"
        """
        try:
            mode = RuleMode(mode)
        except ValueError as e:
            raise ValueError(f"Invalid validation type: {mode}") from e
        self._table.add(field_name, RuleAttachment.of(rule_key, options), mode)
        return self

    def exclude_fields(self, field_names: Iterable[str]) -> CompositeFieldValidator:
        """Skip these fields while the validated object has no id."""
        self._table.excluded.update(field_names)
        return self

    def get_rule_instance(self, rule_key: RuleKey) -> Rule:
        """Return the shared rule instance for a rule key, creating it once.

        Raises:
            RuleResolutionError: If the key cannot be resolved or instantiated
        """
        rule_class = resolve_rule_class(rule_key)
        instance = self._instances.get(rule_class)
        if instance is None:
            instance = create_rule(rule_class)
            self._instances[rule_class] = instance
        return instance

    def validate(self, obj: Any) -> ValidationResult:
        """Validate the fields of ``obj``.

        Returns:
            ValidationResult with messages for failing fields only
        """
        self.flush()

        if self._should_break(obj):
            return ValidationResult.success()

        errors: Dict[str, List[str]] = {}
        for field_name, attachments in self._table.normal.items():
            if self._should_skip(obj, field_name):
                continue

            value = self._extractor.extract(obj, field_name)
            for attachment in attachments:
                message = self.get_rule_instance(attachment.rule_key).validate_value(
                    value, attachment.options
                )
                if message is not None:
                    errors.setdefault(field_name, []).append(message)

        return ValidationResult(errors)

    def _should_break(self, obj: Any) -> bool:
        for field_name, attachments in self._table.breaking.items():
            value = self._extractor.extract(obj, field_name)
            for attachment in attachments:
                rule = self.get_rule_instance(attachment.rule_key)
                message = rule.validate_value(value, attachment.options)
                if message is not None:
                    logger.debug(
                        "Break rule %s failed on field '%s': %s",
                        type(rule).__name__, field_name, message,
                    )
                    return True
        return False

    def _should_skip(self, obj: Any, field_name: str) -> bool:
        if not self._table.is_excluded(field_name):
            return False
        return self._extractor.extract(obj, ID_FIELD) is None
