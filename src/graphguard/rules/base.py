"""Rule contract and the catalog of named rule types.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, ClassVar, Type, TypeVar, Union

from graphguard.exceptions import NotFoundError, RuleConfigurationError, RuleResolutionError
from graphguard.registry import Registry

logger = logging.getLogger(__name__)

Options = Mapping[str, Any]
RuleKey = Union[str, Type["Rule"]]

R = TypeVar("R", bound=Type["Rule"])


class Rule(ABC):
    """Base class for value rules.

    A rule checks one extracted value against per-call options and returns
    an error message, or None when the value is acceptable. Rules hold no
    per-call state: one instance serves every field and every set of
    options, so any setup (compiled patterns, lookup tables) belongs in
    ``__init__`` or at class level.

    ``None`` is vacuously valid unless the rule exists to reject it.
    Unrecognised option keys are ignored; contradictory or missing
    mandatory options raise ``RuleConfigurationError``.
    """

    name: ClassVar[str] = ""

    @abstractmethod
    def validate_value(self, value: Any, options: Options) -> str | None:
        """Validate a value.

        Args:
            value: Value extracted from the validated object
            options: Flat option mapping for this attachment

        Returns:
            Error message, or None if the value is valid
        """

    def __call__(self, value: Any, options: Options | None = None) -> str | None:
        return self.validate_value(value, options or {})

    def config_error(self, message: str, options: Options) -> RuleConfigurationError:
        """Build a configuration error carrying this rule's name and options."""
        return RuleConfigurationError(
            message,
            context={"rule": self.name or type(self).__name__, "options": dict(options)},
        )


rule_catalog: Registry[Type[Rule]] = Registry("rules")


def register_rule(name: str, rule_class: Type[Rule], allow_overwrite: bool = False) -> None:
    """Add a rule class to the catalog under ``name``.

    Raises:
        OperationError: If the name is taken and allow_overwrite is False
    """
    rule_catalog.register(name, rule_class, allow_overwrite=allow_overwrite)


def rule(name: str) -> Callable[[R], R]:
    """Class decorator registering a rule class in the catalog.

    Example:
        ```python
        @rule("even")
        class Even(Rule):
            def validate_value(self, value, options):
                if value is None or value % 2 == 0:
                    return None
                return options.get("message", "Value must be even")
        ```
    """

    def decorator(rule_class: R) -> R:
        rule_class.name = name
        register_rule(name, rule_class)
        return rule_class

    return decorator


def resolve_rule_class(rule_key: RuleKey) -> Type[Rule]:
    """Resolve a rule key (catalog name or class) to a rule class.

    Raises:
        RuleResolutionError: If the name is unknown or the key is not a rule
    """
    if isinstance(rule_key, str):
        try:
            return rule_catalog.get(rule_key)
        except NotFoundError as e:
            raise RuleResolutionError(
                f"Unknown rule type: {rule_key}",
                context={"rule_key": rule_key, "available": rule_catalog.list_keys()},
            ) from e

    if isinstance(rule_key, type) and callable(getattr(rule_key, "validate_value", None)):
        return rule_key

    raise RuleResolutionError(
        f"Not a rule type: {rule_key!r}",
        context={"rule_key": repr(rule_key)},
    )


def create_rule(rule_key: RuleKey) -> Rule:
    """Instantiate the rule class identified by ``rule_key``.

    Raises:
        RuleResolutionError: If the key cannot be resolved or instantiated
    """
    rule_class = resolve_rule_class(rule_key)
    try:
        instance = rule_class()
    except TypeError as e:
        raise RuleResolutionError(
            f"Failed to instantiate rule {rule_class.__name__}: {e}",
            context={"rule_key": getattr(rule_class, "name", "") or rule_class.__name__},
        ) from e
    logger.debug("Created rule instance %s", rule_class.__name__)
    return instance
