"""
Codec configuration.

The separator divides a line's key from its value; the escape character
makes the following character literal. Both are configurable, and can be
loaded from a small YAML document:

    separator: ":"
    escape: "^"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

from kvline.errors import ConfigError


DEFAULT_SEPARATOR = "="
DEFAULT_ESCAPE = "\\"

# Characters the line format already gives a meaning to.
_RESERVED = {",": "list comma", "\n": "line terminator", "\r": "line terminator"}


def _check_char(name: str, value: Any) -> None:
    if not isinstance(value, str) or len(value) != 1:
        raise ConfigError(f"{name} must be a single character, got {value!r}")
    if value in _RESERVED:
        raise ConfigError(f"{name} cannot be the {_RESERVED[value]} ({value!r})")
    if value.isspace():
        raise ConfigError(f"{name} cannot be whitespace ({value!r})")


@dataclass(frozen=True)
class CodecConfig:
    """
    Separator and escape character shared by the decoder and encoder.

    Properties:
        separator: Character between key and value (default "=")
        escape: Character that makes the next character literal (default "\\")

    INVARIANTS:
        - Both are exactly one character
        - They differ from each other
        - Neither is whitespace, a line terminator or the list comma
    """

    separator: str = DEFAULT_SEPARATOR
    escape: str = DEFAULT_ESCAPE

    def __post_init__(self) -> None:
        _check_char("separator", self.separator)
        _check_char("escape", self.escape)
        if self.separator == self.escape:
            raise ConfigError(
                f"separator and escape must differ, both are {self.separator!r}"
            )


DEFAULT_CONFIG = CodecConfig()


def config_from_dict(d: Optional[Dict[str, Any]]) -> CodecConfig:
    if d is None:
        return CodecConfig()
    if not isinstance(d, dict):
        raise ConfigError(f"configuration must be a mapping, got {type(d).__name__}")
    unknown = sorted(set(d) - {"separator", "escape"})
    if unknown:
        raise ConfigError(f"unknown configuration keys: {unknown}")
    return CodecConfig(
        separator=d.get("separator", DEFAULT_SEPARATOR),
        escape=d.get("escape", DEFAULT_ESCAPE),
    )


def config_from_yaml(text: str) -> CodecConfig:
    try:
        d = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid configuration YAML: {e}") from e
    return config_from_dict(d)


def load_config(path: str) -> CodecConfig:
    """
    Load a CodecConfig from a YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigError: If the document is not a valid configuration
    """
    with open(path, "r", encoding="utf-8") as f:
        return config_from_yaml(f.read())


__all__ = [
    "DEFAULT_SEPARATOR",
    "DEFAULT_ESCAPE",
    "DEFAULT_CONFIG",
    "CodecConfig",
    "config_from_dict",
    "config_from_yaml",
    "load_config",
]
