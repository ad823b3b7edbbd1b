"""Tests for the configuration system."""

import json

import pytest

from simple_xml_tree.shared.config import (
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    ParserConfig,
    SerializationConfig,
    TreeConfig,
)


class TestComponentConfigs:
    """Test suite for the component configurations."""

    def test_tree_defaults(self):
        """Test default tree configuration values."""
        config = TreeConfig()

        assert config.max_depth == 200
        assert config.strip_header is True
        assert config.strip_formatting is True
        assert config.merge_unseparated_roots is False

    @pytest.mark.parametrize("max_depth", [0, -5])
    def test_tree_rejects_non_positive_depth(self, max_depth):
        """Test max_depth must be positive."""
        with pytest.raises(ValueError, match="max_depth"):
            TreeConfig(max_depth=max_depth)

    def test_serialization_indent(self):
        """Test indentation may only hold spaces."""
        assert SerializationConfig().indent is None
        assert SerializationConfig(indent="    ").indent == "    "
        with pytest.raises(ValueError, match="indent"):
            SerializationConfig(indent="\t")

    def test_global_logging_level(self):
        """Test logging levels are validated."""
        assert GlobalConfig().logging_level == "INFO"
        with pytest.raises(ValueError, match="logging_level"):
            GlobalConfig(logging_level="LOUD")


class TestParserConfig:
    """Test suite for the complete parser configuration."""

    def test_defaults(self):
        """Test the default configuration."""
        config = ParserConfig()

        assert config.tree == TreeConfig()
        assert config.serialization == SerializationConfig()
        assert config.global_.enable_correlation_tracking is True
        assert config.name is None

    def test_is_immutable(self):
        """Test fields cannot be reassigned."""
        config = ParserConfig()
        with pytest.raises(AttributeError):
            config.name = "changed"

    def test_override_nested_fields(self):
        """Test double-underscore keys reach component fields."""
        config = ParserConfig().override(
            tree__max_depth=10,
            serialization__indent="  ",
            global___logging_level="DEBUG",
            name="custom",
        )

        assert config.tree.max_depth == 10
        assert config.serialization.indent == "  "
        assert config.global_.logging_level == "DEBUG"
        assert config.name == "custom"

    def test_override_keeps_original(self):
        """Test overriding returns a new object."""
        original = ParserConfig()
        original.override(tree__max_depth=5)

        assert original.tree.max_depth == 200

    def test_override_unknown_component(self):
        """Test unknown components are reported with suggestions."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ParserConfig().override(parser__speed=3)

        assert exc_info.value.field_name == "parser__speed"
        assert "tree" in exc_info.value.suggestions

    def test_override_unknown_field(self):
        """Test unknown component fields are rejected."""
        with pytest.raises(ConfigValidationError):
            ParserConfig().override(tree__colour="red")

    def test_override_invalid_value(self):
        """Test invalid values are rejected."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ParserConfig().override(tree__max_depth=0)
        assert exc_info.value.field_name == "tree"

    def test_invalid_component_at_construction(self):
        """Test a component made invalid after creation is caught."""
        tree = TreeConfig()
        tree.max_depth = -1

        with pytest.raises(ConfigValidationError):
            ParserConfig(tree=tree)

    def test_presets(self):
        """Test the named presets."""
        assert ParserConfig.strict().tree.merge_unseparated_roots is False
        assert ParserConfig.lenient().tree.merge_unseparated_roots is True
        assert ParserConfig.lenient().name == "lenient"


class TestSerialization:
    """Test configuration import and export."""

    def test_to_dict(self):
        """Test nested dictionary output."""
        data = ParserConfig.lenient().to_dict()

        assert data["tree"]["merge_unseparated_roots"] is True
        assert data["serialization"] == {"indent": None}
        assert data["global_"]["logging_level"] == "INFO"
        assert data["name"] == "lenient"

    def test_json_round_trip(self):
        """Test a configuration survives JSON export and import."""
        config = ParserConfig().override(tree__max_depth=12, serialization__indent="  ")

        assert ParserConfig.from_json(config.to_json()) == config

    def test_from_dict_partial(self):
        """Test missing keys keep defaults and unknown keys are ignored."""
        config = ParserConfig.from_dict({
            "tree": {"max_depth": 7, "unknown": True},
            "extra": 1,
        })

        assert config.tree.max_depth == 7
        assert config.tree.strip_header is True
        assert config.serialization == SerializationConfig()

    def test_from_dict_invalid_value(self):
        """Test invalid values raise a validation error."""
        with pytest.raises(ConfigValidationError):
            ParserConfig.from_dict({"tree": {"max_depth": 0}})

    def test_from_json_invalid(self):
        """Test malformed JSON raises ConfigError."""
        with pytest.raises(ConfigError, match="Invalid configuration JSON"):
            ParserConfig.from_json("{not json")

    def test_from_json_not_an_object(self):
        """Test JSON that is not an object is rejected."""
        with pytest.raises(ConfigError, match="must be an object"):
            ParserConfig.from_json(json.dumps([1, 2]))
