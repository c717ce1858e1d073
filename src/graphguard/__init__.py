"""graphguard - rule-based validation of objects and object graphs.

Modules:
    composite: CompositeFieldValidator and its fluent FieldBuilder
    graph: ObjectGraphValidator, recursive validation of nested objects
    validator_registry: Type-keyed lookup of object validators
    context: Traversal state (visited objects, depth limit)
    extraction: Field value lookup through accessors, attributes and keys
    result: ValidationResult and error-tree helpers
    rules: Built-in value rules and the rule catalog
    settings: ValidationSettings with dict and environment overrides
    factory: Building validators from YAML/JSON configuration
    exceptions: Error hierarchy

Quick Example:

    ```python
    from graphguard import CompositeFieldValidator, ObjectGraphValidator, ValidatorRegistry
    from graphguard.rules import Email, Length, NotBlank

    user_validator = (
        CompositeFieldValidator()
        .field("email").validates(NotBlank).validates(Email)
        .field("password").validates(Length, Length.min(8))
        .exclude_fields(["password"])
    )
    address_validator = (
        CompositeFieldValidator()
        .field("zip").validates(Length, Length.zip_code())
        .end()
    )

    registry = (
        ValidatorRegistry()
        .register(User, user_validator)
        .register(Address, address_validator)
    )
    result = ObjectGraphValidator(registry).validate(user)
    if not result:
        print(result.get_errors())
    ```
"""

from .composite import (
    ID_FIELD,
    CompositeFieldValidator,
    FieldBuilder,
    FieldRuleTable,
    RuleAttachment,
    RuleMode,
)
from .context import DEFAULT_MAX_DEPTH, ValidationContext
from .exceptions import (
    ConfigurationError,
    GraphguardError,
    MaxDepthExceededError,
    NotFoundError,
    OperationError,
    RuleConfigurationError,
    RuleResolutionError,
    TraversalError,
)
from .extraction import (
    FieldValueExtractor,
    accessor_name,
    default_extractor,
    extract_field_value,
    lookup_field_value,
)
from .factory import (
    CompositeValidatorFactory,
    FactoryBase,
    ObjectGraphValidatorFactory,
    load_graph_validator,
    load_validator_config,
    substitute_env_vars,
)
from .graph import LEAF_TYPES, ObjectGraphValidator, type_key
from .registry import Registry
from .result import ErrorTree, ValidationResult, merge_errors, prune_errors
from .rules import Rule, register_rule, rule, rule_catalog
from .settings import ValidationSettings
from .validator_registry import ObjectValidator, ValidatorRegistry

__version__ = "0.1.0"

__all__ = [
    # Validators
    "CompositeFieldValidator",
    "FieldBuilder",
    "FieldRuleTable",
    "RuleAttachment",
    "RuleMode",
    "ID_FIELD",
    "ObjectGraphValidator",
    "ObjectValidator",
    "ValidatorRegistry",
    "LEAF_TYPES",
    "type_key",
    # Traversal state and results
    "ValidationContext",
    "DEFAULT_MAX_DEPTH",
    "ValidationResult",
    "ErrorTree",
    "merge_errors",
    "prune_errors",
    # Extraction
    "FieldValueExtractor",
    "default_extractor",
    "accessor_name",
    "extract_field_value",
    "lookup_field_value",
    # Rules
    "Rule",
    "rule",
    "rule_catalog",
    "register_rule",
    "Registry",
    # Configuration
    "ValidationSettings",
    "FactoryBase",
    "CompositeValidatorFactory",
    "ObjectGraphValidatorFactory",
    "load_validator_config",
    "load_graph_validator",
    "substitute_env_vars",
    # Exceptions
    "GraphguardError",
    "ConfigurationError",
    "RuleConfigurationError",
    "RuleResolutionError",
    "TraversalError",
    "MaxDepthExceededError",
    "NotFoundError",
    "OperationError",
]
