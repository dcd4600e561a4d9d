"""
Target shapes for kvline decoding.

A shape tells the decoder which scalar interpretation to apply to each
field value. Shapes are reflected from ordinary Python dataclasses and
typing annotations:

    @dataclass
    class Reading:
        sensor: str
        value: float
        tags: List[str] = field(default_factory=list)
        note: Optional[str] = None

Supported field annotations:
    bool, int, float, str, Char, None, Any
    Optional[T] / T | None
    List[T], list[T], Sequence[T], Tuple[T, ...]

ARCHITECTURAL RULE:
    Only flat records are representable. A dataclass, a mapping or a list
    of lists inside a field is recorded as NESTED and rejected when a value
    for it is decoded.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import types
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, NewType, Optional


Char = NewType("Char", str)
"""Marks a field holding exactly one character."""


class FieldKind(Enum):
    """Value domain a field is decoded into."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    CHAR = "char"
    STR = "str"
    UNIT = "unit"
    ANY = "any"
    LIST = "list"
    OPTIONAL = "optional"
    NESTED = "nested"


@dataclass(frozen=True)
class FieldShape:
    """
    Describes one field of a target record.

    Properties:
        name: Field (and key) name; empty for list elements
        kind: FieldKind
        element: Element shape for LIST and OPTIONAL
        container: Python type a LIST is built as (list or tuple)
        has_default: Whether the record supplies a default when the key is absent
    """

    name: str
    kind: FieldKind
    element: Optional["FieldShape"] = None
    container: type = list
    has_default: bool = False

    @property
    def required(self) -> bool:
        return not self.has_default and self.kind is not FieldKind.OPTIONAL


@dataclass
class RecordShape:
    """
    Ordered field shapes of a record type.

    Properties:
        name: Record type name (for messages)
        fields: FieldShapes in declared order
        factory: Callable building the record from keyword arguments
    """

    name: str
    fields: List[FieldShape] = field(default_factory=list)
    factory: Callable[..., Any] = dict

    def __post_init__(self) -> None:
        self._by_name: Dict[str, FieldShape] = {f.name: f for f in self.fields}

    def get_field(self, name: str) -> Optional[FieldShape]:
        """
        Retrieve a field shape by key name.

        Returns:
            FieldShape or None if the record has no such field
        """
        return self._by_name.get(name)

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]


_SCALARS = {
    bool: FieldKind.BOOL,
    int: FieldKind.INT,
    float: FieldKind.FLOAT,
    str: FieldKind.STR,
}

_SEQUENCE_ORIGINS = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
)

_MAPPING_ORIGINS = (
    dict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)


def _list_shape(name: str, element: FieldShape, container: type) -> FieldShape:
    if element.kind in (FieldKind.LIST, FieldKind.NESTED):
        return FieldShape(name=name, kind=FieldKind.NESTED)
    return FieldShape(name=name, kind=FieldKind.LIST, element=element, container=container)


def shape_of_type(tp: Any, name: str = "") -> FieldShape:
    """
    Map a type annotation to a FieldShape.

    Raises:
        TypeError: If the annotation has no line representation
    """
    if tp is Any:
        return FieldShape(name=name, kind=FieldKind.ANY)
    if tp is None or tp is type(None):
        return FieldShape(name=name, kind=FieldKind.UNIT)
    if tp is Char:
        return FieldShape(name=name, kind=FieldKind.CHAR)
    if tp in _SCALARS:
        return FieldShape(name=name, kind=_SCALARS[tp])
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        return FieldShape(name=name, kind=FieldKind.NESTED)
    if tp in (list, tuple):
        return FieldShape(
            name=name,
            kind=FieldKind.LIST,
            element=FieldShape(name="", kind=FieldKind.ANY),
            container=tp,
        )
    if tp in _MAPPING_ORIGINS:
        return FieldShape(name=name, kind=FieldKind.NESTED)

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is typing.Union or origin is types.UnionType:
        members = [a for a in args if a is not type(None)]
        if len(members) == 1 and len(args) == 2:
            return FieldShape(
                name=name,
                kind=FieldKind.OPTIONAL,
                element=shape_of_type(members[0]),
            )
        raise TypeError(f"Unsupported union for field {name!r}: {tp!r}")

    if origin in _SEQUENCE_ORIGINS:
        element = shape_of_type(args[0]) if args else FieldShape(name="", kind=FieldKind.ANY)
        return _list_shape(name, element, list)

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return _list_shape(name, shape_of_type(args[0]), tuple)
        raise TypeError(f"Only variable-length tuples are supported for field {name!r}: {tp!r}")

    if origin in _MAPPING_ORIGINS:
        return FieldShape(name=name, kind=FieldKind.NESTED)

    raise TypeError(f"Unsupported field type for {name!r}: {tp!r}")


def is_record_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def shape_of(cls: type) -> RecordShape:
    """
    Reflect a dataclass into a RecordShape.

    Fields excluded from __init__ are ignored; they cannot be set
    from input.

    Raises:
        TypeError: If cls is not a dataclass or has an unsupported field type
    """
    if not is_record_type(cls):
        raise TypeError(f"Expected a dataclass type, got {cls!r}")

    hints = typing.get_type_hints(cls)
    fields: List[FieldShape] = []
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        shape = shape_of_type(hints[f.name], name=f.name)
        has_default = (
            f.default is not dataclasses.MISSING
            or f.default_factory is not dataclasses.MISSING
        )
        fields.append(dataclasses.replace(shape, has_default=has_default))
    return RecordShape(name=cls.__name__, fields=fields, factory=cls)


__all__ = [
    "Char",
    "FieldKind",
    "FieldShape",
    "RecordShape",
    "shape_of_type",
    "shape_of",
    "is_record_type",
]
