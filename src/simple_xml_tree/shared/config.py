"""Configuration classes for parsing and serializing XML node trees.

This module provides immutable configuration objects for the tokenizer,
tree builder, and text writer, together with the aggregate TreeConfig used
to pass both around as one value.
"""

import codecs
import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Union

# Read size used when feeding the tokenizer from a byte stream
DEFAULT_CHUNK_SIZE = 8192


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


def _validate_encoding(encoding: str, field_name: str) -> None:
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise ConfigValidationError(
            f"Unknown encoding: {encoding!r}",
            field_name=field_name,
            suggestions=["Use 'utf-8'"],
        ) from e


@dataclass(frozen=True)
class ParseConfig:
    """Configuration for the tokenizer and the tree builder.

    Attributes:
        encoding: Encoding assumed for byte sources and used to encode str input
        chunk_size: Number of bytes fed to the tokenizer per read
        strict_nesting: Treat events after the root end tag as an error
        local_names: Report tag and attribute names without their namespace URI
        resolve_entities: Let the tokenizer expand entities declared in a DTD
    """

    encoding: str = "utf-8"
    chunk_size: int = DEFAULT_CHUNK_SIZE
    strict_nesting: bool = True
    local_names: bool = True
    resolve_entities: bool = False

    def __post_init__(self) -> None:
        """Validate parse configuration."""
        if self.chunk_size <= 0:
            raise ConfigValidationError("chunk_size must be > 0", field_name="chunk_size")
        _validate_encoding(self.encoding, "encoding")


@dataclass(frozen=True)
class SerializeConfig:
    """Configuration for the XML text writer.

    Attributes:
        encoding: Encoding of the produced document
        xml_declaration: Emit an ``<?xml ...?>`` declaration before the root
    """

    encoding: str = "utf-8"
    xml_declaration: bool = False

    def __post_init__(self) -> None:
        """Validate serialize configuration."""
        _validate_encoding(self.encoding, "encoding")


_COMPONENTS = ("parse", "serialize")


@dataclass(frozen=True)
class TreeConfig:
    """Combined configuration for reading and writing node trees.

    Thread-safe due to frozen dataclass implementation.
    """

    parse: ParseConfig = field(default_factory=ParseConfig)
    serialize: SerializeConfig = field(default_factory=SerializeConfig)

    version: str = "1.0.0"
    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate component types."""
        if not isinstance(self.parse, ParseConfig):
            raise ConfigValidationError("parse must be a ParseConfig", field_name="parse")
        if not isinstance(self.serialize, SerializeConfig):
            raise ConfigValidationError(
                "serialize must be a SerializeConfig", field_name="serialize"
            )

    def override(self, **kwargs: Any) -> "TreeConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields to override; component fields use ``component__field``

        Returns:
            New TreeConfig instance with overrides applied

        Example:
            >>> config = TreeConfig()
            >>> new_config = config.override(
            ...     parse__strict_nesting=False,
            ...     serialize__xml_declaration=True
            ... )
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        new_fields: Dict[str, Any] = {}

        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=[f"Use one of: {', '.join(_COMPONENTS)}"],
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                new_fields[key] = value

        try:
            for component, overrides in nested_overrides.items():
                new_fields[component] = replace(getattr(self, component), **overrides)
            return replace(self, **new_fields)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {
            "version": self.version,
            "name": self.name,
        }
        for component in _COMPONENTS:
            config = getattr(self, component)
            result[component] = {
                name: getattr(config, name) for name in config.__dataclass_fields__
            }
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TreeConfig":
        """Create configuration from dictionary.

        Unknown keys raise ConfigValidationError; missing keys keep defaults.
        """
        component_classes = {"parse": ParseConfig, "serialize": SerializeConfig}
        field_values: Dict[str, Any] = {}

        try:
            for key, value in data.items():
                if key in component_classes:
                    field_values[key] = component_classes[key](**value)
                elif key in cls.__dataclass_fields__:
                    field_values[key] = value
                else:
                    raise ConfigValidationError(
                        f"Unknown configuration field: {key}", field_name=key
                    )
            return cls(**field_values)
        except TypeError as e:
            raise ConfigValidationError(f"Failed to deserialize to {cls.__name__}: {e}") from e

    @classmethod
    def from_json(cls, json_str: str) -> "TreeConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def lenient(cls) -> "TreeConfig":
        """Preset that silently ignores events after the root end tag."""
        return cls(
            parse=ParseConfig(strict_nesting=False),
            name="lenient",
        )


ParseOptions = Union[ParseConfig, TreeConfig]
SerializeOptions = Union[SerializeConfig, TreeConfig]


def resolve_parse_config(config: Optional[ParseOptions]) -> ParseConfig:
    """Return the parse settings carried by ``config``.

    Entry points accept either a ParseConfig or a whole TreeConfig, so one
    TreeConfig can be handed to both parsing and serialization.
    """
    if config is None:
        return ParseConfig()
    if isinstance(config, TreeConfig):
        return config.parse
    if not isinstance(config, ParseConfig):
        raise ConfigValidationError(
            f"Expected ParseConfig or TreeConfig, got {type(config).__name__}",
            field_name="config",
        )
    return config


def resolve_serialize_config(config: Optional[SerializeOptions]) -> SerializeConfig:
    """Return the serialize settings carried by ``config``."""
    if config is None:
        return SerializeConfig()
    if isinstance(config, TreeConfig):
        return config.serialize
    if not isinstance(config, SerializeConfig):
        raise ConfigValidationError(
            f"Expected SerializeConfig or TreeConfig, got {type(config).__name__}",
            field_name="config",
        )
    return config
