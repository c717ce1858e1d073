"""Tests for configuration-driven validator construction."""

import json
import logging

import pytest

from conftest import Address, Person
from graphguard import (
    CompositeFieldValidator,
    CompositeValidatorFactory,
    ConfigurationError,
    FactoryBase,
    ObjectGraphValidator,
    ObjectGraphValidatorFactory,
    RuleMode,
    RuleResolutionError,
    load_graph_validator,
    load_validator_config,
    substitute_env_vars,
)
from graphguard.rules import Length, NotBlank, Range

GRAPH_YAML = """
settings:
  max_depth: 20
validators:
  - class: conftest.Person
    exclude: [email]
    fields:
      - name: name
        rules:
          - type: not_blank
            message: "${NAME_MESSAGE:Name is required}"
      - name: age
        rules:
          - type: range
            min: 18
            max: 120
  - class: conftest.Address
    fields:
      - name: zip
        rules:
          - type: length
            options:
              exact: 5
"""


class TestFactoryBase:
    """Test the factory base class."""

    def test_create_not_implemented(self):
        """Test that subclasses must implement create."""
        with pytest.raises(NotImplementedError):
            FactoryBase().create()


class TestCompositeValidatorFactory:
    """Test building composite validators."""

    def test_create(self):
        """Test rules, break rules and exclusions."""
        validator = CompositeValidatorFactory().create(
            fields=[
                {"name": "name", "rules": [{"type": "not_blank"}]},
                {"name": "age", "rules": [{"type": "Range", "min": 18}]},
                {"name": "status", "break_rules": [{"type": "equals", "expected_value": "active"}]},
            ],
            exclude=["name"],
        )

        assert isinstance(validator, CompositeFieldValidator)
        table = validator.rule_table
        assert table.rules_for("name")[0].rule_key is NotBlank
        assert table.rules_for("age")[0].rule_key is Range
        assert dict(table.rules_for("age")[0].options) == {"min": 18}
        assert len(table.rules_for("status", RuleMode.BREAK)) == 1
        assert table.is_excluded("name")

    def test_inline_and_nested_options_merge(self):
        """Test that nested options take precedence over inline keys."""
        validator = CompositeValidatorFactory().create(
            fields=[{"name": "zip", "rules": [{"type": "length", "exact": 4, "options": {"exact": 5}}]}]
        )
        attachment = validator.rule_table.rules_for("zip")[0]
        assert attachment.rule_key is Length
        assert attachment.options["exact"] == 5

    def test_skips_incomplete_entries(self, caplog):
        """Test that entries without name or type are skipped with a warning."""
        with caplog.at_level(logging.WARNING, logger="graphguard.factory"):
            validator = CompositeValidatorFactory().create(
                fields=[{"rules": [{"type": "not_blank"}]}, {"name": "age", "rules": [{"min": 1}]}]
            )

        assert validator.rule_table.normal == {}
        assert "missing 'name'" in caplog.text
        assert "missing 'type'" in caplog.text

    def test_unknown_rule_type(self):
        """Test that unknown rule names fail at build time."""
        with pytest.raises(RuleResolutionError):
            CompositeValidatorFactory().create(fields=[{"name": "x", "rules": [{"type": "sparkly"}]}])

    def test_built_validator_validates(self):
        """Test that the built validator runs."""
        validator = CompositeValidatorFactory().create(
            fields=[{"name": "age", "rules": [{"type": "range", "min": 18}]}]
        )
        result = validator.validate(Person(name="a", email="b", age=3))
        assert result.get_field_errors("age") == ["Number [3] too small. Min value is: [18]."]


class TestObjectGraphValidatorFactory:
    """Test building graph validators."""

    def test_create(self, monkeypatch):
        """Test registry and settings construction."""
        monkeypatch.delenv("GRAPHGUARD_MAX_DEPTH", raising=False)
        validator = ObjectGraphValidatorFactory().create(
            settings={"max_depth": 10},
            validators=[
                {"class": "conftest.Address", "fields": [{"name": "zip", "rules": [{"type": "not_blank"}]}]},
                {"fields": []},
            ],
        )

        assert isinstance(validator, ObjectGraphValidator)
        assert validator.settings.max_depth == 10
        assert validator.registry.registered_types() == [Address]

    def test_environment_overrides_settings(self, monkeypatch):
        """Test that GRAPHGUARD_MAX_DEPTH wins over configured settings."""
        monkeypatch.setenv("GRAPHGUARD_MAX_DEPTH", "4")
        validator = ObjectGraphValidatorFactory().create(settings={"max_depth": 10})
        assert validator.settings.max_depth == 4

    def test_bad_class_path(self):
        """Test that unknown classes are configuration errors."""
        with pytest.raises(ConfigurationError):
            ObjectGraphValidatorFactory().create(validators=[{"class": "conftest.Nope"}])


class TestSubstituteEnvVars:
    """Test ${VAR} substitution."""

    def test_substitution(self, monkeypatch):
        """Test set variables, defaults and nesting."""
        monkeypatch.setenv("GG_TEST_VAR", "hello")
        monkeypatch.delenv("GG_MISSING", raising=False)
        data = {
            "key": "${GG_TEST_VAR}",
            "items": ["${GG_MISSING:world}", 3],
            "pattern": "^https?://${GG_MISSING:example}\\.com$",
        }
        assert substitute_env_vars(data) == {
            "key": "hello",
            "items": ["world", 3],
            "pattern": "^https?://example\\.com$",
        }

    def test_required_variable(self, monkeypatch):
        """Test that a missing required variable is an error."""
        monkeypatch.delenv("GG_MISSING", raising=False)
        with pytest.raises(ConfigurationError) as exc_info:
            substitute_env_vars({"key": "${GG_MISSING}"})
        assert exc_info.value.context["variable"] == "GG_MISSING"

    def test_single_placeholder_values_are_typed(self, monkeypatch):
        """Test that whole-value placeholders become int, float or bool."""
        for name in ("GG_MIN_AGE", "GG_RATIO", "GG_FLAG", "GG_LABEL"):
            monkeypatch.delenv(name, raising=False)
        data = {
            "min": "${GG_MIN_AGE:18}",
            "ratio": "${GG_RATIO:0.5}",
            "flag": "${GG_FLAG:true}",
            "label": "${GG_LABEL:adult}",
            "text": "age ${GG_MIN_AGE:18}",
        }
        assert substitute_env_vars(data) == {
            "min": 18,
            "ratio": 0.5,
            "flag": True,
            "label": "adult",
            "text": "age 18",
        }

    def test_typed_value_from_environment(self, monkeypatch):
        """Test that values read from the environment are typed as well."""
        monkeypatch.setenv("GG_MIN_AGE", "21")
        assert substitute_env_vars({"min": "${GG_MIN_AGE:18}"}) == {"min": 21}

    def test_typed_placeholder_drives_numeric_rule(self, monkeypatch):
        """Test that a substituted bound compares as a number."""
        monkeypatch.delenv("GG_MIN_AGE", raising=False)
        config = substitute_env_vars(
            {"fields": [{"name": "age", "rules": [{"type": "range", "min": "${GG_MIN_AGE:18}"}]}]}
        )
        validator = CompositeValidatorFactory().create(**config)

        result = validator.validate({"age": 10})
        assert result.get_field_errors("age") == ["Number [10] too small. Min value is: [18]."]


class TestLoadFromFile:
    """Test loading configuration files."""

    def test_yaml_graph_validator(self, tmp_path, monkeypatch):
        """Test building and running a graph validator from YAML."""
        monkeypatch.delenv("GRAPHGUARD_MAX_DEPTH", raising=False)
        monkeypatch.delenv("NAME_MESSAGE", raising=False)
        path = tmp_path / "validation.yaml"
        path.write_text(GRAPH_YAML)

        validator = load_graph_validator(path)
        person = Person(name=None, email="", age=12, address=Address("Main", "123"))
        result = validator.validate(person)

        assert validator.settings.max_depth == 20
        assert result.get_errors() == {
            "person": {
                "name": ["Name is required"],
                "age": ["Number [12] too small. Min value is: [18]."],
                "address": {"zip": ["String must be exactly 5 characters, got 3"]},
            }
        }

    def test_yaml_substitution(self, tmp_path, monkeypatch):
        """Test that environment variables are substituted on load."""
        monkeypatch.setenv("NAME_MESSAGE", "custom")
        path = tmp_path / "validation.yml"
        path.write_text(GRAPH_YAML)

        config = load_validator_config(path)
        name_rule = config["validators"][0]["fields"][0]["rules"][0]
        assert name_rule["message"] == "custom"

    def test_json(self, tmp_path):
        """Test loading JSON."""
        path = tmp_path / "validation.json"
        path.write_text(json.dumps({"validators": []}))
        assert load_validator_config(path) == {"validators": []}

    def test_empty_yaml(self, tmp_path):
        """Test that an empty YAML file is an empty configuration."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_validator_config(path) == {}

    @pytest.mark.parametrize(
        "filename, content",
        [
            ("config.toml", "a = 1"),
            ("list.yaml", "- a\n- b\n"),
            ("broken.yaml", "key: [unclosed"),
            ("broken.json", "{nope"),
        ],
    )
    def test_invalid_files(self, tmp_path, filename, content):
        """Test unsupported, non-mapping and malformed files."""
        path = tmp_path / filename
        path.write_text(content)
        with pytest.raises(ConfigurationError):
            load_validator_config(path)

    def test_missing_file(self, tmp_path):
        """Test a file that does not exist."""
        with pytest.raises(ConfigurationError):
            load_validator_config(tmp_path / "missing.yaml")
