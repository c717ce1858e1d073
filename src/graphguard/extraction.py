"""Reading named fields off arbitrary objects.

Resolution order for a field ``name``:

1. For mappings, the key ``name`` and nothing else. Methods and attributes
   of the mapping itself are never consulted.
2. A zero-argument accessor method named ``name`` with its first character
   upper-cased (``email`` -> ``Email``), or a method named exactly ``name``.
   Accessors win over attributes of the same name.
3. A directly declared attribute: instance ``__dict__`` entries, slots,
   properties and class attributes, also under the non-public spellings
   ``_name`` and ``_Class__name``.

A field that cannot be found is absent, which reads as ``None``.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping
from typing import Any, List, Tuple

logger = logging.getLogger(__name__)

_ROUTINE_TYPES = (staticmethod, classmethod)


def accessor_name(field_name: str) -> str:
    """Return the accessor method name for a field (first char upper-cased)."""
    return field_name[:1].upper() + field_name[1:]


def _is_routine(attr: Any) -> bool:
    return isinstance(attr, _ROUTINE_TYPES) or inspect.isroutine(attr)


def _takes_no_arguments(func: Any) -> bool:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures
        return False
    return all(
        param.default is not inspect.Parameter.empty
        or param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        for param in signature.parameters.values()
    )


class FieldValueExtractor:
    """Looks up field values by mapping key, or by accessor then attribute."""

    def lookup(self, obj: Any, field_name: str) -> Tuple[Any, bool]:
        """Find a field value.

        Args:
            obj: Object to read from
            field_name: Name of the field

        Returns:
            Tuple of (value, found). ``value`` is None when not found.
        """
        # Mapping methods such as items() or clear() are never accessors
        if isinstance(obj, Mapping):
            if field_name in obj:
                return obj[field_name], True
            return None, False

        found, value = self._from_accessor(obj, field_name)
        if found:
            return value, True

        found, value = self._from_attribute(obj, field_name)
        if found:
            return value, True

        return None, False

    def extract(self, obj: Any, field_name: str) -> Any:
        """Return a field value, or None if the field is absent."""
        value, _ = self.lookup(obj, field_name)
        return value

    def _from_accessor(self, obj: Any, field_name: str) -> Tuple[bool, Any]:
        cls = type(obj)
        for candidate in dict.fromkeys((accessor_name(field_name), field_name)):
            try:
                attr = inspect.getattr_static(cls, candidate)
            except AttributeError:
                continue
            if not _is_routine(attr):
                continue
            # Bind from the class so an instance attribute of the same name
            # cannot shadow the accessor.
            bound = attr.__get__(obj, cls)
            if _takes_no_arguments(bound):
                return True, bound()
        return False, None

    def _from_attribute(self, obj: Any, field_name: str) -> Tuple[bool, Any]:
        for candidate in self._attribute_candidates(type(obj), field_name):
            try:
                attr = inspect.getattr_static(obj, candidate)
            except AttributeError:
                continue
            if _is_routine(attr):
                continue
            try:
                return True, getattr(obj, candidate)
            except AttributeError:
                # Declared but unset slot
                continue
        return False, None

    @staticmethod
    def _attribute_candidates(cls: type, field_name: str) -> List[str]:
        candidates = [field_name, f"_{field_name}"]
        for klass in cls.__mro__:
            mangled = f"_{klass.__name__.lstrip('_')}__{field_name}"
            if mangled not in candidates:
                candidates.append(mangled)
        return candidates


default_extractor = FieldValueExtractor()


def lookup_field_value(obj: Any, field_name: str) -> Tuple[Any, bool]:
    """Find a field value with the default extractor; returns (value, found)."""
    return default_extractor.lookup(obj, field_name)


def extract_field_value(obj: Any, field_name: str) -> Any:
    """Read a field value with the default extractor; absent reads as None."""
    return default_extractor.extract(obj, field_name)
