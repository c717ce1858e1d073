"""Traversal state for object graph validation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Dict

from .exceptions import MaxDepthExceededError

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100


class ValidationContext:
    """Tracks visited objects and recursion depth during one traversal.

    Objects are tracked by identity, never by equality: two equal but
    distinct objects are validated independently. Visited objects are kept
    referenced until the context is reset so their ids cannot be reused by
    new objects mid-traversal.

    A context passed explicitly to several ``validate`` calls keeps its
    visited set and depth between those calls.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        """Initialize the context.

        Args:
            max_depth: Deepest nesting level allowed before traversal aborts
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        self.max_depth = max_depth
        self._visited: Dict[int, Any] = {}
        self._depth = 0

    @property
    def depth(self) -> int:
        """Current recursion depth."""
        return self._depth

    @property
    def visited_count(self) -> int:
        return len(self._visited)

    def has_visited(self, obj: Any) -> bool:
        """Check if an object has already been validated in this traversal."""
        return id(obj) in self._visited

    def mark_visited(self, obj: Any) -> None:
        self._visited[id(obj)] = obj

    def enter_level(self) -> None:
        """Enter a new recursion level.

        Raises:
            MaxDepthExceededError: If the new depth is beyond max_depth
        """
        self._depth += 1
        if self._depth > self.max_depth:
            logger.debug("Depth %d exceeds limit %d", self._depth, self.max_depth)
            raise MaxDepthExceededError(self.max_depth, self._depth)

    def exit_level(self) -> None:
        self._depth -= 1

    @contextmanager
    def level(self) -> Iterator[ValidationContext]:
        """Enter a level for the duration of a ``with`` block.

        The level is exited even when the body raises, including when
        entering the level itself failed.
        """
        try:
            self.enter_level()
            yield self
        finally:
            self.exit_level()

    def reset(self) -> None:
        """Forget visited objects and reset depth to zero."""
        self._visited.clear()
        self._depth = 0
