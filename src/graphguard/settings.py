"""Traversal settings with dictionary and environment overrides."""

from __future__ import annotations

import dataclasses
import importlib
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from .context import DEFAULT_MAX_DEPTH
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "GRAPHGUARD_"


def load_type(type_path: str) -> type:
    """Load a class from a dotted path such as ``"decimal.Decimal"``.

    Raises:
        ConfigurationError: If the path is malformed or cannot be imported
    """
    if "." not in type_path:
        raise ConfigurationError(f"Invalid class path: {type_path}", context={"path": type_path})

    module_path, class_name = type_path.rsplit(".", 1)
    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise ConfigurationError(f"Failed to import {type_path}: {e}", context={"path": type_path}) from e

    loaded = getattr(module, class_name, None)
    if not isinstance(loaded, type):
        raise ConfigurationError(
            f"Class {class_name} not found in {module_path}", context={"path": type_path}
        )
    return loaded


def _parse_env_value(value: str) -> Any:
    """Parse an environment variable value to int where possible."""
    try:
        return int(value)
    except ValueError:
        return value


@dataclass(frozen=True)
class ValidationSettings:
    """Settings for object graph traversal.

    Attributes:
        max_depth: Deepest nesting level before traversal aborts
        leaf_types: Extra types whose instances are never traversed into
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    leaf_types: Tuple[type, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.max_depth, int) or self.max_depth < 1:
            raise ConfigurationError(
                f"max_depth must be a positive integer, got {self.max_depth!r}",
                context={"max_depth": self.max_depth},
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ValidationSettings:
        """Create settings from a dictionary.

        ``leaf_types`` entries may be types or dotted class paths. Unknown
        keys are ignored with a warning.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        for key in data:
            if key not in known:
                logger.warning("Ignoring unknown validation setting: %s", key)

        kwargs: Dict[str, Any] = {}
        if "max_depth" in data:
            max_depth = data["max_depth"]
            kwargs["max_depth"] = _parse_env_value(max_depth) if isinstance(max_depth, str) else max_depth
        if "leaf_types" in data:
            kwargs["leaf_types"] = tuple(
                t if isinstance(t, type) else load_type(t) for t in data["leaf_types"] or ()
            )
        return cls(**kwargs)

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX, base: ValidationSettings | None = None) -> ValidationSettings:
        """Apply environment overrides on top of ``base`` (or the defaults).

        Recognised variables: ``<PREFIX>MAX_DEPTH``.
        """
        settings = base or cls()
        raw = os.environ.get(f"{prefix}MAX_DEPTH")
        if raw is None:
            return settings
        return settings.merged_with(max_depth=_parse_env_value(raw))

    def merged_with(self, **overrides: Any) -> ValidationSettings:
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_depth": self.max_depth,
            "leaf_types": [f"{t.__module__}.{t.__qualname__}" for t in self.leaf_types],
        }
