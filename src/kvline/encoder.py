"""
Encoder: record -> key/value lines.

For a record (dataclass instance), each field is written in declared order:

    name<SEPARATOR>escaped value\\n

Mappings are written the same way in their own iteration order. A bare
scalar or list (not inside a record) is written as its escaped text only,
with no key, separator or line terminator.

Field values:
    bool        -> true / false
    int         -> decimal
    float       -> repr() ("1.5", "inf", "nan")
    str         -> escaped text
    bytes       -> UTF-8 decoded, then escaped
    None        -> empty string (indistinguishable from "")
    list/tuple  -> elements formatted and comma-joined

LIMITATIONS:
    - A string list element cannot contain a comma
    - A list holding a single empty element ([""], [None]) cannot be written
    - Integers must lie between -2**63 and 2**64 - 1
    - Records, mappings and lists of lists cannot appear inside a field
"""

from __future__ import annotations

import dataclasses
import io
import logging
from collections.abc import Mapping
from typing import Any, Iterable, Optional, Tuple

from kvline.config import CodecConfig, DEFAULT_CONFIG
from kvline.errors import (
    EncodingFailure,
    InvalidValueError,
    IOFailure,
    NoKeyError,
    UnsupportedNestingError,
)
from kvline.grammar import LIST_SEPARATOR, escape_value, join_list
from kvline.model import is_record_type
from kvline.scalars import I64_MIN, U64_MAX


logger = logging.getLogger(__name__)


def _is_record(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


class Encoder:
    """
    Writes key/value lines to a sink.

    Args:
        sink: Binary stream (UTF-8 bytes are written) or text stream; a
            writer that is not an io.TextIOBase but rejects bytes is
            switched to str on the first write
        config: Separator and escape characters

    Stateless beyond the sink and the configuration.
    """

    def __init__(self, sink: Any, config: Optional[CodecConfig] = None):
        self.sink = sink
        self.config = config or DEFAULT_CONFIG
        self._text = isinstance(sink, io.TextIOBase)

    def _write(self, text: str) -> None:
        try:
            if self._text:
                self.sink.write(text)
            else:
                try:
                    self.sink.write(text.encode("utf-8"))
                except TypeError:
                    self._text = True
                    self.sink.write(text)
        except OSError as e:
            raise IOFailure(f"write failed: {e}") from e

    def _text_of(self, value: Any, name: str = "") -> str:
        if isinstance(value, bytes):
            try:
                value = value.decode("utf-8")
            except UnicodeDecodeError as e:
                raise EncodingFailure(
                    f"bytes value for {name or 'value'!r} is not valid UTF-8", key=name or None
                ) from e
        try:
            return escape_value(value, self.config)
        except InvalidValueError as e:
            e.key = name or None
            raise

    def format_scalar(self, value: Any, name: str = "") -> str:
        """
        Render one scalar as line-safe text.

        Raises:
            UnsupportedNestingError: If value is a record, mapping or list
            InvalidValueError: If value has no line representation
        """
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            if not I64_MIN <= value <= U64_MAX:
                raise InvalidValueError(
                    f"integer {value} for {name or 'value'!r} is outside the 64-bit range", key=name or None
                )
            return str(value)
        if isinstance(value, float):
            return repr(value)
        if isinstance(value, (str, bytes)):
            return self._text_of(value, name)
        if _is_record(value) or isinstance(value, Mapping) or isinstance(value, (list, tuple)):
            raise UnsupportedNestingError(
                f"nested value for {name or 'value'!r} is not supported", key=name or None
            )
        raise InvalidValueError(
            f"cannot encode {type(value).__name__} for {name or 'value'!r}", key=name or None
        )

    def format_value(self, value: Any, name: str = "") -> str:
        """Render a field value: a scalar, or a list of scalars joined by commas."""
        if isinstance(value, (list, tuple)):
            parts = []
            for item in value:
                text = self.format_scalar(item, name)
                if LIST_SEPARATOR in text:
                    raise InvalidValueError(
                        f"list element {item!r} of {name or 'value'!r} contains {LIST_SEPARATOR!r}",
                        key=name or None,
                    )
                parts.append(text)
            if parts == [""]:
                # Would read back as an empty list.
                raise InvalidValueError(
                    f"a list holding one empty element cannot be encoded for {name or 'value'!r}",
                    key=name or None,
                )
            return join_list(parts)
        return self.format_scalar(value, name)

    def format_key(self, key: Any) -> str:
        if not isinstance(key, str):
            raise InvalidValueError(f"keys must be str, got {type(key).__name__}")
        if key == "":
            raise NoKeyError("cannot encode an empty key")
        return self._text_of(key, key)

    def write_pair(self, key: Any, value: Any) -> None:
        line = (
            self.format_key(key)
            + self.config.separator
            + self.format_value(value, key)
            + "\n"
        )
        self._write(line)

    def encode_pairs(self, pairs: Iterable[Tuple[Any, Any]]) -> None:
        for key, value in pairs:
            logger.debug("writing field %r", key)
            self.write_pair(key, value)

    def encode_record(self, record: Any) -> None:
        """Write every field of a dataclass instance in declared order."""
        self.encode_pairs(
            (f.name, getattr(record, f.name)) for f in dataclasses.fields(record)
        )

    def encode_map(self, mapping: Mapping) -> None:
        self.encode_pairs(mapping.items())

    def encode_scalar(self, value: Any) -> None:
        """Write a bare scalar or list: escaped text only, no terminator."""
        self._write(self.format_value(value))

    def encode(self, value: Any) -> None:
        """
        Write ``value``: a record, a mapping, or a bare scalar/list.

        Raises:
            TypeError: If value is a class rather than an instance
        """
        if is_record_type(value):
            raise TypeError(f"Expected a record instance, got the class {value!r}")
        if _is_record(value):
            self.encode_record(value)
        elif isinstance(value, Mapping):
            self.encode_map(value)
        else:
            self.encode_scalar(value)


def to_writer(sink: Any, value: Any, config: Optional[CodecConfig] = None) -> None:
    Encoder(sink, config).encode(value)


def to_string(value: Any, config: Optional[CodecConfig] = None) -> str:
    buf = io.StringIO()
    to_writer(buf, value, config)
    return buf.getvalue()


def to_bytes(value: Any, config: Optional[CodecConfig] = None) -> bytes:
    buf = io.BytesIO()
    to_writer(buf, value, config)
    return buf.getvalue()


def dump(value: Any, path: str, config: Optional[CodecConfig] = None) -> None:
    """Write ``value`` to a file, replacing its contents."""
    with open(path, "wb") as f:
        to_writer(f, value, config)


__all__ = [
    "Encoder",
    "to_writer",
    "to_string",
    "to_bytes",
    "dump",
]
