"""Factories building validators from configuration.

Example configuration (YAML):

    settings:
      max_depth: 50
    validators:
      - class: myapp.models.User
        exclude: [password]
        fields:
          - name: email
            rules:
              - type: not_blank
              - type: email
          - name: age
            rules:
              - type: range
                min: 18
                max: 120
          - name: status
            break_rules:
              - type: equals
                expected_value: active
      - class: myapp.models.Address
        fields:
          - name: zip
            rules:
              - type: length
                exact: 5
                message: "${ZIP_MESSAGE:Invalid zip code}"

Rule options may be written inline next to ``type`` or nested under an
``options`` key; both forms are merged.
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .composite import CompositeFieldValidator, RuleMode
from .exceptions import ConfigurationError
from .graph import ObjectGraphValidator
from .rules.base import resolve_rule_class
from .settings import ValidationSettings, load_type
from .validator_registry import ValidatorRegistry

logger = logging.getLogger(__name__)

_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")


class FactoryBase:
    """Base class for factory objects.

    Factories that inherit from this should implement the create method.
    """

    def create(self, **config: Any) -> Any:
        """Create an object from configuration.

        Args:
            **config: Configuration parameters

        Returns:
            Created object
        """
        raise NotImplementedError("Subclasses must implement create method")


class CompositeValidatorFactory(FactoryBase):
    """Factory for creating CompositeFieldValidator instances.

    Configuration Options:
        fields (list): Field definitions
        exclude (list): Field names skipped while the object has no id

    Field Definition Options:
        name (str): Field name
        rules (list): Normal rule definitions
        break_rules (list): Break rule definitions

    Rule Definition Options:
        type (str): Rule name in the rule catalog (e.g. ``length``)
        options (dict): Rule options; other keys are rule options as well
    """

    def create(self, **config: Any) -> CompositeFieldValidator:
        """Create a CompositeFieldValidator from configuration.

        Raises:
            RuleResolutionError: If a rule type is not in the catalog
        """
        validator = CompositeFieldValidator()

        fields = config.get("fields") or []
        logger.info("Creating composite validator with %d field(s)", len(fields))

        for field_config in fields:
            self._add_field(validator, field_config)

        exclude = config.get("exclude") or []
        if exclude:
            validator.exclude_fields(exclude)

        return validator

    def _add_field(self, validator: CompositeFieldValidator, field_config: Dict[str, Any]) -> None:
        field_name = field_config.get("name")
        if not field_name:
            logger.warning("Field configuration missing 'name', skipping")
            return

        for rule_config in field_config.get("rules") or []:
            self._add_rule(validator, field_name, rule_config, RuleMode.NORMAL)
        for rule_config in field_config.get("break_rules") or []:
            self._add_rule(validator, field_name, rule_config, RuleMode.BREAK)

    def _add_rule(
        self,
        validator: CompositeFieldValidator,
        field_name: str,
        rule_config: Dict[str, Any],
        mode: RuleMode,
    ) -> None:
        rule_type = rule_config.get("type")
        if not rule_type:
            logger.warning("Rule configuration for field '%s' missing 'type', skipping", field_name)
            return

        options = {k: v for k, v in rule_config.items() if k not in ("type", "options")}
        options.update(rule_config.get("options") or {})

        # Resolve eagerly so unknown names fail at build time
        rule_class = resolve_rule_class(str(rule_type).lower())
        validator.register_rule(field_name, rule_class, options, mode)


class ObjectGraphValidatorFactory(FactoryBase):
    """Factory for creating ObjectGraphValidator instances.

    Configuration Options:
        validators (list): Composite validator definitions, each with a
            ``class`` dotted path plus CompositeValidatorFactory options
        settings (dict): ValidationSettings options; ``GRAPHGUARD_*``
            environment variables are applied on top
    """

    def __init__(self, composite_factory: CompositeValidatorFactory | None = None):
        self._composite_factory = composite_factory or CompositeValidatorFactory()

    def create(self, **config: Any) -> ObjectGraphValidator:
        settings = ValidationSettings.from_env(
            base=ValidationSettings.from_dict(config.get("settings") or {})
        )

        registry = ValidatorRegistry()
        validators: List[Dict[str, Any]] = config.get("validators") or []
        for validator_config in validators:
            class_path = validator_config.get("class")
            if not class_path:
                logger.warning("Validator configuration missing 'class', skipping")
                continue
            type_key = load_type(class_path)
            registry.register(type_key, self._composite_factory.create(**validator_config))

        logger.info(
            "Creating object graph validator for %d type(s), max depth %d",
            len(registry), settings.max_depth,
        )
        return ObjectGraphValidator(registry, settings=settings)


def substitute_env_vars(data: Any) -> Any:
    """Recursively substitute environment variables in configuration.

    Supports formats:
    - ${VAR_NAME}: Required variable, raises error if not set
    - ${VAR_NAME:default_value}: Optional with default

    A value that is exactly one placeholder is converted to int, float or
    bool where it parses as one, so ``min: ${MIN_AGE:18}`` yields 18.
    Placeholders embedded in longer strings always substitute as text.

    Raises:
        ConfigurationError: If a required environment variable is not set
    """
    if isinstance(data, dict):
        return {k: substitute_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [substitute_env_vars(item) for item in data]
    elif isinstance(data, str):
        if _ENV_PATTERN.fullmatch(data):
            return _convert_type(_ENV_PATTERN.sub(_replace_env_var, data))
        return _ENV_PATTERN.sub(_replace_env_var, data)
    else:
        return data


def _convert_type(value: str) -> Any:
    """Convert a substituted value to int, float or bool where possible."""
    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    if value.lower() in ("true", "yes"):
        return True
    elif value.lower() in ("false", "no"):
        return False
    return value


def _replace_env_var(match: re.Match) -> str:
    var_name, default_value = match.group(1), match.group(2)

    env_value = os.environ.get(var_name)
    if env_value is not None:
        return env_value
    elif default_value is not None:
        return default_value
    raise ConfigurationError(
        f"Required environment variable not set: {var_name}", context={"variable": var_name}
    )


def load_validator_config(path: str | Path) -> Dict[str, Any]:
    """Load a YAML or JSON validator configuration with env substitution.

    Raises:
        ConfigurationError: If the file is missing, unreadable, malformed,
            or not a mapping
    """
    filepath = Path(path)
    suffix = filepath.suffix.lower()
    if suffix not in (".yaml", ".yml", ".json"):
        raise ConfigurationError(f"Unsupported file format: {suffix}", context={"path": str(filepath)})

    try:
        with open(filepath, encoding="utf-8") as f:
            if suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse YAML file {filepath}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Failed to parse JSON file {filepath}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read configuration file {filepath}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file must contain a dictionary: {filepath}")

    return substitute_env_vars(data)


def load_graph_validator(path: str | Path) -> ObjectGraphValidator:
    """Build an ObjectGraphValidator from a configuration file."""
    return ObjectGraphValidatorFactory().create(**load_validator_config(path))
