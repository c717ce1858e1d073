"""Validation result type and error-tree helpers.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

# A field maps to its ordered messages; a type key maps to a nested tree.
ErrorEntry = Union[List[str], Dict[str, Any]]
ErrorTree = Dict[str, ErrorEntry]

logger = logging.getLogger(__name__)


def prune_errors(errors: ErrorTree) -> ErrorTree:
    """Recursively drop keys whose message list or subtree is empty.

    Args:
        errors: Error tree to prune

    Returns:
        New tree containing only branches with at least one message
    """
    pruned: ErrorTree = {}
    for key, value in errors.items():
        if isinstance(value, dict):
            subtree = prune_errors(value)
            if subtree:
                pruned[key] = subtree
        elif isinstance(value, list):
            if value:
                pruned[key] = list(value)
        elif value is not None:
            pruned[key] = value
    return pruned


def merge_errors(target: ErrorTree, contribution: ErrorTree) -> ErrorTree:
    """Deep-merge ``contribution`` into ``target`` in place.

    Same-key subtrees merge recursively and same-key message lists
    concatenate, so sibling objects of one type never hide each other's
    errors. Any other collision is resolved in favour of the contribution
    and logged as a warning: a field whose name equals a nested type key
    (a field ``address`` next to an ``Address`` object) loses its messages
    to that subtree, or the reverse, depending on merge order.

    Returns:
        The updated target
    """
    for key, value in contribution.items():
        existing = target.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            merge_errors(existing, value)
            continue
        if isinstance(existing, list) and isinstance(value, list):
            existing.extend(value)
            continue

        if existing:
            logger.warning("Error entry '%s' replaced by an entry of another shape", key)
        if isinstance(value, dict):
            target[key] = merge_errors({}, value)
        elif isinstance(value, list):
            target[key] = list(value)
        else:
            target[key] = value
    return target


@dataclass
class ValidationResult:
    """Outcome of validating one object or one object graph.

    ``errors`` maps field names to ordered message lists (flat case) or type
    keys to nested trees (graph case). Empty branches are pruned on
    construction, so the result is valid exactly when ``errors`` is empty.
    """

    errors: ErrorTree = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.errors = prune_errors(self.errors)

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check validity."""
        return self.is_valid()

    @classmethod
    def success(cls) -> ValidationResult:
        """Create a result without errors."""
        return cls({})

    def is_valid(self) -> bool:
        return not self.errors

    def get_errors(self) -> ErrorTree:
        """Return the (possibly nested) error map."""
        return self.errors

    def get_field_errors(self, field_name: str) -> List[str]:
        """Return the messages recorded for a field.

        Args:
            field_name: Field (or key) to look up

        Returns:
            Ordered messages, or an empty list if the key is absent or holds
            a nested tree rather than messages
        """
        entry = self.errors.get(field_name)
        if isinstance(entry, list):
            return list(entry)
        return []

    def has_field_error(self, field_name: str) -> bool:
        return field_name in self.errors

    def get_all_fields_with_errors(self) -> List[str]:
        """Return failing keys in first-seen order."""
        return list(self.errors.keys())

    def get_error_count(self) -> int:
        """Count keys with at least one error (not individual messages)."""
        return len(self.errors)

    def get_first_error(self, field_name: str) -> str | None:
        messages = self.get_field_errors(field_name)
        return messages[0] if messages else None

    def flatten(self, separator: str = ".") -> Dict[str, List[str]]:
        """Flatten the error tree into dotted paths.

        Example:
            ``{"person": {"address": {"zip": ["bad"]}}}`` flattens to
            ``{"person.address.zip": ["bad"]}``.
        """
        flat: Dict[str, List[str]] = {}

        def walk(prefix: str, tree: ErrorTree) -> None:
            for key, value in tree.items():
                path = f"{prefix}{separator}{key}" if prefix else key
                if isinstance(value, dict):
                    walk(path, value)
                else:
                    flat.setdefault(path, []).extend(value)

        walk("", self.errors)
        return flat

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to a plain dictionary."""
        return {
            "valid": self.is_valid(),
            "errors": copy.deepcopy(self.errors),
        }
