"""Configuration classes for simple XML tree parsing.

This module provides configuration objects for tree construction, text
serialization and global behavior, plus named presets.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

_COMPONENTS = ("tree", "serialization", "global_")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass
class TreeConfig:
    """Configuration for tree construction."""

    max_depth: int = 200
    strip_header: bool = True
    strip_formatting: bool = True
    merge_unseparated_roots: bool = False

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")


@dataclass
class SerializationConfig:
    """Configuration for turning trees back into text."""

    indent: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate serialization configuration."""
        if self.indent is not None and self.indent.strip(" "):
            raise ValueError("indent must contain only spaces")


@dataclass
class GlobalConfig:
    """Global configuration settings that apply across all components."""

    logging_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging_level not in valid_levels:
            raise ValueError(f"logging_level must be one of {valid_levels}")


@dataclass(frozen=True)
class ParserConfig:
    """Complete configuration for the parser.

    Immutable; use :meth:`override` to derive modified copies.
    """

    tree: TreeConfig = field(default_factory=TreeConfig)
    serialization: SerializationConfig = field(default_factory=SerializationConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete parser configuration."""
        try:
            self.tree.__post_init__()
            self.serialization.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Nested fields use double underscores:

            >>> config = ParserConfig().override(tree__max_depth=50)
            >>> config.tree.max_depth
            50
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.rsplit("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for key, value in nested_overrides.items():
            if key in _COMPONENTS:
                try:
                    new_fields[key] = replace(getattr(self, key), **value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, Enum):
                return obj.name
            return obj

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Unknown keys are ignored; missing keys keep their defaults.
        """
        component_types = {
            "tree": TreeConfig,
            "serialization": SerializationConfig,
            "global_": GlobalConfig,
        }
        fields_: Dict[str, Any] = {}
        try:
            for name, component_type in component_types.items():
                if name in data:
                    known = component_type.__dataclass_fields__
                    values = {k: v for k, v in data[name].items() if k in known}
                    fields_[name] = component_type(**values)
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e
        for name in ("name", "description"):
            if name in data:
                fields_[name] = data[name]
        return cls(**fields_)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def strict(cls) -> "ParserConfig":
        """Preset that reports every structural problem as a failure."""
        return cls(
            tree=TreeConfig(merge_unseparated_roots=False),
            name="strict",
            description="Report sibling roots and malformed structure as failures",
        )

    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Preset that recombines sibling roots into a merge container."""
        return cls(
            tree=TreeConfig(merge_unseparated_roots=True),
            name="lenient",
            description="Parse sibling roots separately and merge the results",
        )
