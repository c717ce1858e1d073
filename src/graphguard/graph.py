"""Recursive validation of object graphs.

Example:
    ```python
    registry = ValidatorRegistry()
    registry.register(Address, address_validator)
    registry.register(Person, person_validator)

    result = ObjectGraphValidator(registry).validate(person)
    result.get_errors()
    # {"person": {"name": ["Field can not be empty"],
    #             "address": {"zip": ["String must be exactly 5 characters, got 3"]}}}
    ```
"""

from __future__ import annotations

import datetime
import inspect
import logging
import re
import uuid
from collections.abc import Iterator, Mapping, Sequence, Set
from enum import Enum
from numbers import Number
from pathlib import PurePath
from types import ModuleType
from typing import Any, List, Tuple

from .context import ValidationContext
from .result import ErrorTree, ValidationResult, merge_errors
from .settings import ValidationSettings
from .validator_registry import ValidatorRegistry

logger = logging.getLogger(__name__)

# Values of these types are never traversed into.
LEAF_TYPES: Tuple[type, ...] = (
    str,
    bytes,
    bytearray,
    memoryview,
    Number,
    Enum,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    datetime.tzinfo,
    uuid.UUID,
    PurePath,
    range,
    re.Pattern,
    type,
    ModuleType,
)

_NO_VALUE = object()


def type_key(obj: Any) -> str:
    """Key for an object's errors: its class name with a lower-cased first char."""
    name = type(obj).__name__
    return name[:1].lower() + name[1:]


def _slot_names(cls: type) -> List[str]:
    names: List[str] = []
    for klass in cls.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot in ("__dict__", "__weakref__"):
                continue
            if slot.startswith("__") and not slot.endswith("__"):
                slot = f"_{klass.__name__.lstrip('_')}{slot}"
            if slot not in names:
                names.append(slot)
    return names


def iter_attribute_values(obj: Any) -> Iterator[Any]:
    """Yield the values of every instance attribute, public or not.

    Covers the instance ``__dict__`` and all slots along the MRO. Unset
    slots are skipped.
    """
    instance_dict = getattr(obj, "__dict__", None)
    if isinstance(instance_dict, dict):
        yield from list(instance_dict.values())

    for name in _slot_names(type(obj)):
        value = getattr(obj, name, _NO_VALUE)
        if value is not _NO_VALUE:
            yield value


class ObjectGraphValidator:
    """Validates an object and every object reachable from it.

    Each object is validated by the validator registered for its type (if
    any); then its attributes are walked, recursing into nested objects and
    into the elements of lists, tuples, sets and mapping values. Objects are
    visited at most once per traversal, which also terminates cycles.

    Errors are keyed by type name at each level, for example
    ``{"person": {"email": [...], "address": {"zip": [...]}}}``. Types
    without errors anywhere below them are pruned from the result.

    Raises ``MaxDepthExceededError`` when nesting exceeds the configured
    maximum depth.
    """

    def __init__(
        self,
        registry: ValidatorRegistry,
        context: ValidationContext | None = None,
        settings: ValidationSettings | None = None,
    ):
        """Initialize the validator.

        Args:
            registry: Type-keyed validators
            context: Shared traversal context reused by every ``validate``
                call; visited objects and depth then persist across calls
            settings: Traversal settings (default depth limit and leaf types)
        """
        self._registry = registry
        self._context = context
        self._settings = settings or ValidationSettings()
        self._leaf_types = LEAF_TYPES + tuple(self._settings.leaf_types)

    @property
    def registry(self) -> ValidatorRegistry:
        return self._registry

    @property
    def settings(self) -> ValidationSettings:
        return self._settings

    def validate(self, root: Any, context: ValidationContext | None = None) -> ValidationResult:
        """Validate ``root`` and its object graph.

        Args:
            root: Object (or collection of objects) to validate
            context: Traversal context for this call; overrides the one
                given to the constructor

        Returns:
            ValidationResult with the pruned error tree

        Raises:
            MaxDepthExceededError: If the graph is nested too deeply
        """
        context = context or self._context or ValidationContext(self._settings.max_depth)
        errors = self._visit_value(root, context)
        return ValidationResult(errors)

    def is_traversable_object(self, value: Any) -> bool:
        """Check whether a value is an object to validate and walk into."""
        if value is None or isinstance(value, self._leaf_types):
            return False
        if self.is_collection(value) or inspect.isroutine(value):
            return False
        return hasattr(value, "__dict__") or bool(_slot_names(type(value)))

    def is_collection(self, value: Any) -> bool:
        if isinstance(value, self._leaf_types):
            return False
        return isinstance(value, (Mapping, Sequence, Set))

    def _visit_value(self, value: Any, context: ValidationContext) -> ErrorTree:
        if self.is_traversable_object(value):
            return self._validate_object(value, context)
        if self.is_collection(value):
            return self._validate_collection(value, context)
        return {}

    def _validate_object(self, obj: Any, context: ValidationContext) -> ErrorTree:
        if context.has_visited(obj):
            return {}

        context.mark_visited(obj)
        with context.level():
            errors: ErrorTree = {}

            validator = self._registry.resolve(obj)
            if validator is not None:
                logger.debug("Validating %s at depth %d", type(obj).__name__, context.depth)
                merge_errors(errors, validator.validate(obj).get_errors())

            for value in iter_attribute_values(obj):
                merge_errors(errors, self._visit_value(value, context))

        return {type_key(obj): errors}

    def _validate_collection(self, values: Any, context: ValidationContext) -> ErrorTree:
        errors: ErrorTree = {}
        items = values.values() if isinstance(values, Mapping) else values
        for value in list(items):
            merge_errors(errors, self._visit_value(value, context))
        return errors
