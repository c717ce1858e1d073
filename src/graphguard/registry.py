"""Generic registry for named items.

The rule catalog is built on this registry: it maps rule names such as
``"email"`` or ``"length"`` to rule classes so that validators can be
configured from plain data (YAML, JSON, dicts).

Example:
    ```python
    from graphguard.registry import Registry

    registry = Registry[type]("rule_types")
    registry.register("email", Email)
    registry.get("email")
    # <class 'graphguard.rules.contact.Email'>
    ```
"""

import logging
import threading
from typing import Dict, Generic, Iterator, List, TypeVar

from graphguard.exceptions import NotFoundError, OperationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Registry(Generic[T]):
    """Thread-safe registry of items keyed by unique names.

    Attributes:
        name: Name of the registry (for logging/debugging)

    Args:
        name: Name for this registry instance
    """

    def __init__(self, name: str):
        self._name = name
        self._items: Dict[str, T] = {}
        self._lock = threading.RLock()

    @property
    def name(self) -> str:
        """Get registry name."""
        return self._name

    def register(self, key: str, item: T, allow_overwrite: bool = False) -> None:
        """Register an item by key.

        Args:
            key: Unique identifier for the item
            item: Item to register
            allow_overwrite: Whether to allow replacing an existing item

        Raises:
            OperationError: If the key is taken and allow_overwrite is False
        """
        with self._lock:
            if not allow_overwrite and key in self._items:
                raise OperationError(
                    f"Item '{key}' already registered in {self._name}",
                    context={"key": key, "registry": self._name},
                )
            self._items[key] = item
            logger.debug("Registered '%s' in %s", key, self._name)

    def unregister(self, key: str) -> T:
        """Unregister and return an item by key.

        Raises:
            NotFoundError: If item not found
        """
        with self._lock:
            if key not in self._items:
                raise NotFoundError(
                    f"Item not found: {key}",
                    context={"key": key, "registry": self._name},
                )
            return self._items.pop(key)

    def get(self, key: str) -> T:
        """Get an item by key.

        Args:
            key: Key of item to retrieve

        Returns:
            The registered item

        Raises:
            NotFoundError: If item not found
        """
        with self._lock:
            if key not in self._items:
                raise NotFoundError(
                    f"Item not found: {key}",
                    context={
                        "key": key,
                        "registry": self._name,
                        "available_keys": list(self._items.keys()),
                    },
                )
            return self._items[key]

    def get_optional(self, key: str) -> T | None:
        """Get an item by key, returning None if not found."""
        with self._lock:
            return self._items.get(key)

    def has(self, key: str) -> bool:
        """Check if item exists."""
        with self._lock:
            return key in self._items

    def list_keys(self) -> List[str]:
        """List all registered keys in registration order."""
        with self._lock:
            return list(self._items.keys())

    def items(self) -> List[tuple[str, T]]:
        """Get all key-item pairs."""
        with self._lock:
            return list(self._items.items())

    def count(self) -> int:
        """Get count of registered items."""
        with self._lock:
            return len(self._items)

    def clear(self) -> None:
        """Clear all items from registry."""
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __iter__(self) -> Iterator[T]:
        with self._lock:
            return iter(list(self._items.values()))
