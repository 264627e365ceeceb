"""Configuration classes for XML comparison and highlighting.

This module provides immutable configuration objects for the parser, the
indented serializer, the HTML renderer and the comparer that composes them.
Rendering policy (colors, indentation, placeholder) lives here so that it can
be swapped without touching the alignment algorithm.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

HIGHLIGHT_BACKGROUND = "#b36b00"
HIGHLIGHT_FOREGROUND = "white"
INDENT_CHAR = "\t"
INDENT_HTML = "&nbsp;" * 4
LINE_BREAK_HTML = "<br/>"
EMPTY_PLACEHOLDER = "-"

_COMPONENTS = ("parser", "serialization", "render")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for turning raw text into an XML tree."""

    allow_fragments: bool = True
    resolve_entities: bool = False
    no_network: bool = True
    strip_whitespace_text: bool = True


@dataclass(frozen=True)
class SerializationConfig:
    """Configuration for the indented XML writer."""

    indent_char: str = INDENT_CHAR
    empty_element_suffix: str = " />"
    include_declaration: bool = True

    def __post_init__(self) -> None:
        """Validate serialization configuration."""
        if len(self.indent_char) != 1:
            raise ValueError("indent_char must be a single character")
        if self.indent_char in "<>&\"'\n":
            raise ValueError("indent_char must not be subject to HTML escaping")
        if not self.empty_element_suffix.endswith("/>"):
            raise ValueError("empty_element_suffix must end with '/>'")


@dataclass(frozen=True)
class RenderConfig:
    """Configuration for the HTML rendering of serialized XML."""

    placeholder: str = EMPTY_PLACEHOLDER
    line_break: str = LINE_BREAK_HTML
    indent_html: str = INDENT_HTML
    highlight_background: str = HIGHLIGHT_BACKGROUND
    highlight_foreground: str = HIGHLIGHT_FOREGROUND
    highlight_unmatched_elements: bool = False

    def __post_init__(self) -> None:
        """Validate render configuration."""
        if not self.highlight_background:
            raise ValueError("highlight_background cannot be empty")
        if not self.highlight_foreground:
            raise ValueError("highlight_foreground cannot be empty")
        if "'" in self.highlight_background + self.highlight_foreground:
            raise ValueError("highlight colors must not contain quotes")

    @property
    def span_start(self) -> str:
        """Opening markup of a highlighted span."""
        return (
            f"<span style='background-color: {self.highlight_background}; "
            f"color: {self.highlight_foreground}'>"
        )

    @property
    def span_end(self) -> str:
        """Closing markup of a highlighted span."""
        return "</span>"


@dataclass(frozen=True)
class ComparerConfig:
    """Complete configuration for formatting and comparing XML documents.

    Thread-safe due to frozen dataclass implementation.
    """

    parser: ParserConfig = field(default_factory=ParserConfig)
    serialization: SerializationConfig = field(default_factory=SerializationConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    fallback_on_parse_error: bool = False
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the composed configuration."""
        for name in _COMPONENTS:
            component = getattr(self, name)
            expected = self.__dataclass_fields__[name].default_factory
            if not isinstance(component, expected):
                raise ConfigValidationError(
                    f"{name} must be a {expected.__name__}, "
                    f"got {type(component).__name__}",
                    field_name=name,
                )

    def override(self, **kwargs: Any) -> "ComparerConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Field overrides; nested fields use ``component__field``

        Returns:
            New ComparerConfig instance with overrides applied

        Example:
            >>> config = ComparerConfig()
            >>> new_config = config.override(
            ...     render__highlight_unmatched_elements=True,
            ...     fallback_on_parse_error=True
            ... )
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        try:
            new_fields: Dict[str, Any] = {
                component: replace(getattr(self, component), **values)
                for component, values in nested_overrides.items()
            }
            new_fields.update(top_level)
            return replace(self, **new_fields)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {
            name: dict(vars(getattr(self, name))) for name in _COMPONENTS
        }
        result["fallback_on_parse_error"] = self.fallback_on_parse_error
        result["correlation_id"] = self.correlation_id
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComparerConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files do not
        silently fall back to defaults.
        """
        component_types = {
            "parser": ParserConfig,
            "serialization": SerializationConfig,
            "render": RenderConfig,
        }
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {', '.join(sorted(unknown))}",
                suggestions=sorted(known),
            )

        values: Dict[str, Any] = {}
        try:
            for key, value in data.items():
                if key in component_types:
                    if not isinstance(value, dict):
                        raise ConfigValidationError(
                            f"{key} must be an object", field_name=key
                        )
                    values[key] = component_types[key](**value)
                else:
                    values[key] = value
            return cls(**values)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "ComparerConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)
