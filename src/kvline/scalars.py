"""
Scalar interpretation for kvline values.

Two modes:

    Typed:   the target shape is known. A ValueInterpreter converts the raw
             value text with the method matching the declared field kind and
             raises InvalidValueError when the text does not fit.

    Untyped: no target shape. The value domain is inferred with a fixed
             precedence, first match wins:

                 boolean -> unsigned 64-bit -> signed 64-bit -> unit -> string

             "0" and "42" therefore decode as unsigned, "-1" as signed,
             "" as unit (None) and anything else as a string. Floats and
             lists are never inferred. This ordering must not change;
             existing serialized data depends on it.

All parsers are strict: no surrounding whitespace, no digit separators.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, List, Optional, Tuple

from kvline.errors import InvalidValueError, UnsupportedNestingError
from kvline.grammar import split_list
from kvline.model import FieldKind, FieldShape


U64_MAX = 2**64 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1

_UNSIGNED_RE = re.compile(r"\+?[0-9]+")
_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


class ScalarKind(Enum):
    """Scalar value domains."""

    BOOL = "bool"
    UNSIGNED = "unsigned"
    SIGNED = "signed"
    FLOAT = "float"
    CHAR = "char"
    STRING = "string"
    UNIT = "unit"


def parse_bool(text: str) -> Optional[bool]:
    if text == "true":
        return True
    if text == "false":
        return False
    return None


def parse_unsigned(text: str) -> Optional[int]:
    if not _UNSIGNED_RE.fullmatch(text):
        return None
    value = int(text)
    return value if value <= U64_MAX else None


def parse_signed(text: str) -> Optional[int]:
    if not _SIGNED_RE.fullmatch(text):
        return None
    value = int(text)
    return value if I64_MIN <= value <= I64_MAX else None


def parse_float(text: str) -> Optional[float]:
    if not _FLOAT_RE.fullmatch(text):
        return None
    return float(text)


def parse_char(text: str) -> Optional[str]:
    return text if len(text) == 1 else None


def infer(text: str) -> Tuple[ScalarKind, Any]:
    """
    Infer the value domain of untyped text.

    Returns:
        (ScalarKind, converted value)
    """
    b = parse_bool(text)
    if b is not None:
        return ScalarKind.BOOL, b
    u = parse_unsigned(text)
    if u is not None:
        return ScalarKind.UNSIGNED, u
    i = parse_signed(text)
    if i is not None:
        return ScalarKind.SIGNED, i
    if text == "":
        return ScalarKind.UNIT, None
    return ScalarKind.STRING, text


def infer_kind(text: str) -> ScalarKind:
    return infer(text)[0]


def infer_scalar(text: str) -> Any:
    return infer(text)[1]


class ValueInterpreter:
    """
    Converts raw value text into Python values, one method per target shape.

    The decoder calls interpret() with the declared FieldShape; the
    individual methods can also be used directly.
    """

    def _invalid(self, text: str, expected: str, name: str = "") -> InvalidValueError:
        where = f" for field {name!r}" if name else ""
        return InvalidValueError(f"expected {expected}{where}, got {text!r}", key=name or None)

    def as_bool(self, text: str, name: str = "") -> bool:
        value = parse_bool(text)
        if value is None:
            raise self._invalid(text, "a boolean", name)
        return value

    def as_unsigned(self, text: str, name: str = "") -> int:
        value = parse_unsigned(text)
        if value is None:
            raise self._invalid(text, "an unsigned 64-bit integer", name)
        return value

    def as_signed(self, text: str, name: str = "") -> int:
        value = parse_signed(text)
        if value is None:
            raise self._invalid(text, "a signed 64-bit integer", name)
        return value

    def as_int(self, text: str, name: str = "") -> int:
        value = parse_unsigned(text)
        if value is None:
            value = parse_signed(text)
        if value is None:
            raise self._invalid(text, "an integer", name)
        return value

    def as_float(self, text: str, name: str = "") -> float:
        value = parse_float(text)
        if value is None:
            raise self._invalid(text, "a number", name)
        return value

    def as_char(self, text: str, name: str = "") -> str:
        value = parse_char(text)
        if value is None:
            raise self._invalid(text, "a single character", name)
        return value

    def as_string(self, text: str, name: str = "") -> str:
        return text

    def as_unit(self, text: str, name: str = "") -> None:
        if text != "":
            raise self._invalid(text, "an empty value", name)
        return None

    def as_any(self, text: str, name: str = "") -> Any:
        return infer_scalar(text)

    def as_optional(self, text: str, element: FieldShape, name: str = "") -> Any:
        # Absent and empty are the same thing on the wire.
        if text == "":
            return None
        return self.interpret(text, element, name)

    def as_list(self, text: str, element: FieldShape, name: str = "", container: type = list) -> Any:
        items: List[Any] = [self.interpret(part, element, name) for part in split_list(text)]
        return container(items)

    def interpret(self, text: str, shape: FieldShape, name: str = "") -> Any:
        """
        Dispatch on the declared shape.

        Raises:
            InvalidValueError: If text does not fit the shape
            UnsupportedNestingError: If the shape is a nested structure
        """
        name = shape.name or name
        kind = shape.kind
        if kind is FieldKind.BOOL:
            return self.as_bool(text, name)
        if kind is FieldKind.INT:
            return self.as_int(text, name)
        if kind is FieldKind.FLOAT:
            return self.as_float(text, name)
        if kind is FieldKind.CHAR:
            return self.as_char(text, name)
        if kind is FieldKind.STR:
            return self.as_string(text, name)
        if kind is FieldKind.UNIT:
            return self.as_unit(text, name)
        if kind is FieldKind.ANY:
            return self.as_any(text, name)
        if kind is FieldKind.OPTIONAL:
            return self.as_optional(text, shape.element, name)
        if kind is FieldKind.LIST:
            return self.as_list(text, shape.element, name, shape.container)
        raise UnsupportedNestingError(
            f"nested maps or structs are not supported (field {name!r})", key=name or None
        )


__all__ = [
    "U64_MAX",
    "I64_MIN",
    "I64_MAX",
    "ScalarKind",
    "parse_bool",
    "parse_unsigned",
    "parse_signed",
    "parse_float",
    "parse_char",
    "infer",
    "infer_kind",
    "infer_scalar",
    "ValueInterpreter",
]
