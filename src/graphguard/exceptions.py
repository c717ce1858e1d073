"""Exception hierarchy for graphguard.

Validation failures are never raised: rules report them as messages that are
collected into a ``ValidationResult``. The exceptions in this module signal
the other kind of problem, a defect in how validation was configured or a
traversal that cannot be completed. They abort the whole validation call.

The hierarchy supports:
- Simple error messages for straightforward cases
- Context dictionaries for rich error information

Example:
    ```python
    from graphguard.exceptions import GraphguardError, RuleConfigurationError

    raise RuleConfigurationError(
        "Cannot specify exact with min or max",
        context={"rule": "count", "options": {"exact": 2, "min": 1}},
    )

    try:
        validator.validate(order)
    except GraphguardError as e:
        logger.error(f"Validation could not run: {e}")
        if e.context:
            logger.error(f"Context: {e.context}")
    ```
"""

from typing import Any, Dict


class GraphguardError(Exception):
    """Base exception for all graphguard errors.

    Attributes:
        context: Dictionary containing contextual information about the error

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (rule keys, depths, etc.)
    """

    def __init__(self, message: str, context: Dict[str, Any] | None = None):
        """Initialize the exception with optional context.

        Args:
            message: Error message
            context: Optional context dictionary
        """
        super().__init__(message)
        self.context = context or {}


class ConfigurationError(GraphguardError):
    """Raised when validation is configured incorrectly.

    Common scenarios include:
    - Invalid validator configuration files
    - Unknown rule types referenced from configuration
    - Rule options that contradict each other
    """

    pass


class RuleConfigurationError(ConfigurationError):
    """Raised when a rule receives self-contradictory or missing options.

    Example:
        ```python
        raise RuleConfigurationError(
            "Pattern must be specified",
            context={"rule": "format"}
        )
        ```
    """

    pass


class RuleResolutionError(ConfigurationError):
    """Raised when a rule key cannot be resolved to a rule instance."""

    pass


class TraversalError(GraphguardError):
    """Raised when an object graph cannot be traversed."""

    pass


class MaxDepthExceededError(TraversalError):
    """Raised when object graph recursion goes deeper than allowed.

    Attributes:
        max_depth: The configured depth limit
        depth: The depth that was reached
    """

    def __init__(self, max_depth: int, depth: int):
        super().__init__(
            f"Maximum validation depth of {max_depth} exceeded",
            context={"max_depth": max_depth, "depth": depth},
        )
        self.max_depth = max_depth
        self.depth = depth


class NotFoundError(GraphguardError):
    """Raised when a requested item is not registered."""

    pass


class OperationError(GraphguardError):
    """Raised when a registry operation is not allowed."""

    pass


__all__ = [
    "GraphguardError",
    "ConfigurationError",
    "RuleConfigurationError",
    "RuleResolutionError",
    "TraversalError",
    "MaxDepthExceededError",
    "NotFoundError",
    "OperationError",
]
