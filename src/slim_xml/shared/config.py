"""Configuration classes for slim-xml.

Each processing layer gets its own small dataclass validated in
``__post_init__``; :class:`DocumentConfig` bundles them into one immutable
object that documents, parsers and serializers share.
"""

import json
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

from slim_xml.shared.errors import SlimXMLError

# Names of the Encode members; kept as strings so this module stays free of
# imports from the character layer.
ENCODE_NAMES = ("ANSI", "UTF_8", "UTF_8_NO_MARK", "UTF_16", "UTF_16_BIG_ENDIAN")

_COMPONENTS = ("character", "parsing", "serialization")


class ConfigError(SlimXMLError):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass
class CharacterConfig:
    """Configuration for encoding detection and transcoding."""

    detection_sample_size: int = 0      # 0 scans the whole buffer
    ansi_codec: str = "latin-1"
    default_encode: str = "UTF_8"

    def __post_init__(self) -> None:
        """Validate character configuration."""
        if self.detection_sample_size < 0:
            raise ValueError("detection_sample_size must be >= 0")
        if not self.ansi_codec:
            raise ValueError("ansi_codec cannot be empty")
        try:
            b"".decode(self.ansi_codec)
        except LookupError:
            raise ValueError(f"Unknown ansi_codec: {self.ansi_codec}") from None
        if self.default_encode not in ENCODE_NAMES:
            raise ValueError(f"default_encode must be one of {list(ENCODE_NAMES)}")


@dataclass
class ParsingConfig:
    """Configuration for label scanning and interpretation."""

    transfer_characters: bool = True    # unescape the five XML entities
    strip_text: bool = True
    keep_comments: bool = True
    keep_declarations: bool = True

    def __post_init__(self) -> None:
        """Validate parsing configuration."""
        for name in ("transfer_characters", "strip_text", "keep_comments",
                     "keep_declarations"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be a bool")


@dataclass
class SerializationConfig:
    """Configuration for writing documents back to text."""

    indent: str = "\t"
    newline: str = "\n"
    transfer_characters: bool = True    # escape the five XML entities

    def __post_init__(self) -> None:
        """Validate serialization configuration."""
        if self.indent.strip():
            raise ValueError("indent must contain only whitespace")
        if self.newline not in ("", "\n", "\r\n", "\r"):
            raise ValueError("newline must be '', '\\n', '\\r\\n' or '\\r'")


@dataclass(frozen=True)
class DocumentConfig:
    """Complete configuration shared by every layer of a document.

    Immutable; derive variants with :meth:`override`.
    """

    character: CharacterConfig = field(default_factory=CharacterConfig)
    parsing: ParsingConfig = field(default_factory=ParsingConfig)
    serialization: SerializationConfig = field(default_factory=SerializationConfig)

    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.character.__post_init__()
            self.parsing.__post_init__()
            self.serialization.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "DocumentConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = DocumentConfig().override(
            ...     serialization__indent="  ",
            ...     parsing__strip_text=False,
            ... )
        """
        nested: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        known = [f.name for f in fields(self)]
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                nested.setdefault(component, {})[field_name] = value
            elif key not in known:
                raise ConfigValidationError(
                    f"Unknown configuration field: {key}",
                    field_name=key,
                    suggestions=known,
                )
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = {}
        for component, overrides in nested.items():
            try:
                new_fields[component] = replace(getattr(self, component), **overrides)
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(str(e), field_name=component) from e
        new_fields.update(top_level)
        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {"name": self.name}
        for component in _COMPONENTS:
            section = getattr(self, component)
            result[component] = {
                f.name: getattr(section, f.name) for f in fields(section)
            }
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DocumentConfig":
        """Create configuration from dictionary.

        Missing sections and fields keep their defaults.
        """
        section_types = {
            "character": CharacterConfig,
            "parsing": ParsingConfig,
            "serialization": SerializationConfig,
        }
        kwargs: Dict[str, Any] = {"name": data.get("name")}
        try:
            for component, section_type in section_types.items():
                kwargs[component] = section_type(**data.get(component, {}))
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e
        return cls(**kwargs)

    @classmethod
    def from_json(cls, json_str: str) -> "DocumentConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def compact(cls) -> "DocumentConfig":
        """Preset writing documents without indentation or line breaks."""
        return cls(
            serialization=SerializationConfig(indent="", newline=""),
            name="compact",
        )

    @classmethod
    def verbatim(cls) -> "DocumentConfig":
        """Preset keeping text exactly as found: no entity transfer, no stripping."""
        return cls(
            parsing=ParsingConfig(transfer_characters=False, strip_text=False),
            serialization=SerializationConfig(transfer_characters=False),
            name="verbatim",
        )
