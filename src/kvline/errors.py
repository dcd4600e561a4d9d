"""
Errors raised by the kvline codec.

Every contract violation aborts the current decode/encode call.
There is no warning tier: the caller receives the first error
encountered and any partially-built record is discarded.

Hierarchy:
    KVLineError
        ConfigError
        LineParseError
            NoKeyError
            NoValueError
            InvalidValueError
        UnsupportedNestingError
        IOFailure
        EncodingFailure
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Stable identifiers for each failure category."""

    NO_KEY = "no_key"
    NO_VALUE = "no_value"
    INVALID_VALUE = "invalid_value"
    UNSUPPORTED_NESTING = "unsupported_nesting"
    IO_FAILURE = "io_failure"
    ENCODING_FAILURE = "encoding_failure"
    CONFIG = "config"


class KVLineError(Exception):
    """
    Base error for this package.

    Properties:
        line_number: 1-based input line the error was detected on (optional)
        key: key or field name involved (optional)
        line: raw line text (optional)
    """

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        *,
        line_number: Optional[int] = None,
        key: Optional[str] = None,
        line: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.line_number = line_number
        self.key = key
        self.line = line

    def __str__(self) -> str:
        if self.line_number is not None:
            return f"line {self.line_number}: {self.message}"
        return self.message


class ConfigError(KVLineError, ValueError):
    """Raised when codec configuration is invalid."""

    kind = ErrorKind.CONFIG


class LineParseError(KVLineError):
    """Raised when a line or value cannot be parsed."""


class NoKeyError(LineParseError):
    """Separator found but the key before it is empty."""

    kind = ErrorKind.NO_KEY


class NoValueError(LineParseError):
    """No unescaped separator on a line, or a value is owed but none is left."""

    kind = ErrorKind.NO_VALUE


class InvalidValueError(LineParseError):
    """Value present but not representable as the required type."""

    kind = ErrorKind.INVALID_VALUE


class UnsupportedNestingError(KVLineError):
    """A structured value was requested inside a field value."""

    kind = ErrorKind.UNSUPPORTED_NESTING


class IOFailure(KVLineError):
    """The underlying stream raised an OSError."""

    kind = ErrorKind.IO_FAILURE


class EncodingFailure(KVLineError):
    """Bytes that are not valid UTF-8 where text is required."""

    kind = ErrorKind.ENCODING_FAILURE


__all__ = [
    "ErrorKind",
    "KVLineError",
    "ConfigError",
    "LineParseError",
    "NoKeyError",
    "NoValueError",
    "InvalidValueError",
    "UnsupportedNestingError",
    "IOFailure",
    "EncodingFailure",
]
