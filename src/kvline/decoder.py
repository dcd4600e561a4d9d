"""
Decoder: line stream -> record.

State machine:

    AWAITING_KEY --read line--> HAVE_KEY_VALUE --value consumed--> AWAITING_KEY
         |
         +--zero bytes read--> DONE

Reaching end of input is the normal way a record completes. If the target
record still owes a required field at that point, NoValueError is raised
for the first such field; no partially-populated record is returned.

Only flat records are representable. Entering record or map decoding while
a key or value is buffered fails with UnsupportedNestingError.

Usage:
    reading = from_str("sensor=t1\\nvalue=21.5\\n", Reading)
    values = from_str("a=1\\nb=-2\\nc=\\n")   # {"a": 1, "b": -2, "c": None}
"""

from __future__ import annotations

import collections.abc
import dataclasses
import io
import logging
import typing
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple, Union

from kvline.config import CodecConfig, DEFAULT_CONFIG
from kvline.errors import (
    EncodingFailure,
    IOFailure,
    KVLineError,
    NoValueError,
    UnsupportedNestingError,
)
from kvline.grammar import split_line
from kvline.model import FieldKind, FieldShape, RecordShape, is_record_type, shape_of, shape_of_type
from kvline.scalars import ValueInterpreter


logger = logging.getLogger(__name__)

_MAP_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


class DecoderState(Enum):
    """Where the decoder is within the line stream."""

    AWAITING_KEY = "awaiting_key"
    HAVE_KEY_VALUE = "have_key_value"
    DONE = "done"


class Decoder:
    """
    Reads key/value lines from a stream.

    Args:
        source: Binary or text stream with readline()
        config: Separator and escape characters
        interpreter: Scalar conversion capability (default ValueInterpreter)

    One instance owns its stream cursor; instances share nothing.
    """

    def __init__(
        self,
        source: Any,
        config: Optional[CodecConfig] = None,
        interpreter: Optional[ValueInterpreter] = None,
    ):
        self.source = source
        self.config = config or DEFAULT_CONFIG
        self.interpreter = interpreter or ValueInterpreter()
        self.state = DecoderState.AWAITING_KEY
        self.line_number = 0
        self.current_key: Optional[str] = None
        self.current_value: Optional[str] = None

    # ------------------------------------------------------------------
    # Line cursor
    # ------------------------------------------------------------------

    def _read_line(self) -> str:
        try:
            raw = self.source.readline()
        except OSError as e:
            raise IOFailure(f"read failed: {e}", line_number=self.line_number + 1) from e
        if isinstance(raw, (bytes, bytearray)):
            try:
                return bytes(raw).decode("utf-8")
            except UnicodeDecodeError as e:
                raise EncodingFailure(
                    f"input is not valid UTF-8: {e}", line_number=self.line_number + 1
                ) from e
        return raw

    def next_key(self) -> Optional[str]:
        """
        Load the next line and return its key.

        Returns:
            The key, or None once the input is exhausted

        Raises:
            NoValueError / NoKeyError: If the line is malformed
        """
        if self.state is DecoderState.DONE:
            return None
        line = self._read_line()
        if not line:
            logger.debug("end of input after %d lines", self.line_number)
            self.state = DecoderState.DONE
            self.current_key = None
            self.current_value = None
            return None
        self.line_number += 1
        try:
            key, value = split_line(line, self.config)
        except KVLineError as e:
            e.line_number = self.line_number
            raise
        self.current_key = key
        self.current_value = value
        self.state = DecoderState.HAVE_KEY_VALUE
        return key

    def take_value(self) -> str:
        """
        Return the buffered value and go back to AWAITING_KEY.

        Raises:
            NoValueError: If no value is buffered
        """
        if self.current_value is None:
            raise NoValueError("no value available", line_number=self.line_number or None)
        value = self.current_value
        self.current_key = None
        self.current_value = None
        self.state = DecoderState.AWAITING_KEY
        return value

    def begin_record(self) -> None:
        """
        Guard for entering record or map decoding.

        Raises:
            UnsupportedNestingError: If a key or value is already buffered
        """
        if self.current_key is not None or self.current_value is not None:
            raise UnsupportedNestingError(
                "nested maps or structs are not supported",
                line_number=self.line_number,
                key=self.current_key,
            )

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        """Yield raw (key, value) pairs until end of input."""
        while True:
            key = self.next_key()
            if key is None:
                return
            yield key, self.take_value()

    # ------------------------------------------------------------------
    # Value decoding
    # ------------------------------------------------------------------

    def _decode_value(self, shape: FieldShape) -> Any:
        if shape.kind is FieldKind.NESTED:
            # The value is still buffered, so this raises.
            self.begin_record()
        text = self.current_value
        if text is None:
            raise NoValueError(
                f"no value for field {shape.name!r}", key=shape.name or None
            )
        try:
            value = self.interpreter.interpret(text, shape, self.current_key or "")
        except KVLineError as e:
            if e.line_number is None:
                e.line_number = self.line_number
            raise
        self.take_value()
        return value

    def decode_record(self, shape: RecordShape) -> Any:
        """
        Decode the remaining lines into one record.

        Unknown keys are skipped. A repeated key overwrites the earlier
        value (last write wins).

        Raises:
            NoValueError: If a required field has no line
            InvalidValueError: If a value does not fit its field type
            UnsupportedNestingError: If a field is a nested structure
        """
        self.begin_record()
        values: Dict[str, Any] = {}
        while True:
            key = self.next_key()
            if key is None:
                break
            field_shape = shape.get_field(key)
            if field_shape is None:
                logger.debug("line %d: skipping unknown key %r for %s", self.line_number, key, shape.name)
                self.take_value()
                continue
            if key in values:
                logger.debug("line %d: key %r repeated, last value wins", self.line_number, key)
            values[key] = self._decode_value(field_shape)

        for f in shape.fields:
            if f.name in values:
                continue
            if f.kind is FieldKind.OPTIONAL and not f.has_default:
                values[f.name] = None
            elif f.required:
                raise NoValueError(
                    f"end of input with no value for field {f.name!r} of {shape.name}",
                    key=f.name,
                )
        return shape.factory(**values)

    def decode_map(self, value_shape: FieldShape) -> Dict[str, Any]:
        """Decode the remaining lines into a dict with every value of one shape."""
        self.begin_record()
        result: Dict[str, Any] = {}
        while True:
            key = self.next_key()
            if key is None:
                return result
            result[key] = self._decode_value(dataclasses.replace(value_shape, name=key))

    def decode_any(self) -> Dict[str, Any]:
        """Decode the remaining lines with scalar inference."""
        return self.decode_map(FieldShape(name="", kind=FieldKind.ANY))

    def decode(self, target: Any = None) -> Any:
        """
        Decode the remaining lines into ``target``.

        Args:
            target: None, dict or Dict[str, Any] for inferred values;
                Dict[str, T] for uniformly typed values; a dataclass type
                for a record

        Raises:
            TypeError: If target has no line representation
        """
        if target is None or target is dict:
            return self.decode_any()
        if is_record_type(target):
            return self.decode_record(shape_of(target))
        if typing.get_origin(target) in _MAP_ORIGINS:
            args = typing.get_args(target)
            if args and args[0] is not str:
                raise TypeError(f"Map keys must be str, got {args[0]!r}")
            value_type = args[1] if len(args) == 2 else Any
            return self.decode_map(shape_of_type(value_type))
        raise TypeError(f"Cannot decode a record into {target!r}")


def from_stream(stream: Any, target: Any = None, config: Optional[CodecConfig] = None) -> Any:
    """Decode a record from a binary or text stream."""
    return Decoder(stream, config).decode(target)


def from_bytes(data: Union[bytes, bytearray], target: Any = None, config: Optional[CodecConfig] = None) -> Any:
    return from_stream(io.BytesIO(bytes(data)), target, config)


def from_str(text: str, target: Any = None, config: Optional[CodecConfig] = None) -> Any:
    return from_stream(io.StringIO(text), target, config)


def load(path: str, target: Any = None, config: Optional[CodecConfig] = None) -> Any:
    """
    Decode a record from a file.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    with open(path, "rb") as f:
        return from_stream(f, target, config)


__all__ = [
    "DecoderState",
    "Decoder",
    "from_stream",
    "from_bytes",
    "from_str",
    "load",
]
