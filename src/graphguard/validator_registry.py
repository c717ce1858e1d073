"""Type-keyed lookup of object-level validators.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Protocol, runtime_checkable

from .result import ValidationResult

logger = logging.getLogger(__name__)


@runtime_checkable
class ObjectValidator(Protocol):
    """Anything that validates a whole object, such as CompositeFieldValidator."""

    def validate(self, obj: Any) -> ValidationResult:
        ...


class ValidatorRegistry:
    """Maps types to the validators for their instances.

    Lookup tries the object's exact type first. Failing that, registered
    types are tried in registration order and the first one the object is
    an instance of wins (base classes, ABCs, runtime-checkable protocols).
    The order is significant: a broad type registered early shadows more
    specific types registered after it.
    """

    def __init__(self) -> None:
        self._validators: Dict[type, ObjectValidator] = {}

    def register(self, type_key: type, validator: ObjectValidator) -> ValidatorRegistry:
        """Register a validator for a type.

        Registering the same type again replaces its validator and keeps its
        original position in the lookup order.

        Returns:
            Self for chaining
        """
        if not isinstance(type_key, type):
            raise TypeError(f"type_key must be a type, got {type_key!r}")
        self._validators[type_key] = validator
        logger.debug("Registered validator for %s", type_key.__qualname__)
        return self

    def resolve(self, obj: Any) -> ObjectValidator | None:
        """Return the validator for ``obj``, or None if no type matches."""
        validator = self._validators.get(type(obj))
        if validator is not None:
            return validator

        for type_key, candidate in self._validators.items():
            if isinstance(obj, type_key):
                return candidate
        return None

    def has_validator(self, obj: Any) -> bool:
        return self.resolve(obj) is not None

    def registered_types(self) -> List[type]:
        """Registered types in lookup order."""
        return list(self._validators.keys())

    def __len__(self) -> int:
        return len(self._validators)

    def __contains__(self, type_key: object) -> bool:
        return type_key in self._validators
