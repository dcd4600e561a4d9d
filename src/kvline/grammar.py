"""
Line Grammar for kvline.

Defines how one physical line decomposes into (key, value) and how a value
decomposes into a comma-separated list, given an escape character and a
separator character.

Line form:
    key<SEPARATOR>value

Escaping (encode direction):
    escape  -> escape escape
    separator -> escape separator

    The escape character is always doubled before any separator is
    prefixed. Reversing that order would leave the escape inserted in
    front of a separator unprotected.

Trimming rule:
    Only UNESCAPED whitespace is trimmed from either end of the key and of
    the value. An escaped space survives. The encoder escapes a leading or
    trailing whitespace character so that such values round-trip exactly.

Lists:
    A value is split on literal commas, once, with no escaping at the comma
    boundary. List elements cannot contain a comma.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Tuple

from kvline.config import CodecConfig, DEFAULT_CONFIG
from kvline.errors import InvalidValueError, NoKeyError, NoValueError


LIST_SEPARATOR = ","

# (character, was_escaped)
ScannedChar = Tuple[str, bool]


class EscapeState(Enum):
    """Per-character scanner state. Reset after every consumed character."""

    NORMAL = "normal"
    ESCAPED = "escaped"


def _strip_terminator(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def _scan_key(line: str, config: CodecConfig) -> Tuple[List[ScannedChar], Optional[int]]:
    """
    Scan the key part of a line.

    Returns:
        (key characters, index where the value starts) -- the index is None
        when no unescaped separator was found.
    """
    chars: List[ScannedChar] = []
    state = EscapeState.NORMAL
    for index, c in enumerate(line):
        if state is EscapeState.ESCAPED:
            chars.append((c, True))
            state = EscapeState.NORMAL
        elif c == config.escape:
            state = EscapeState.ESCAPED
        elif c == config.separator:
            return chars, index + 1
        else:
            chars.append((c, False))
    return chars, None


def _scan_value(text: str, config: CodecConfig) -> List[ScannedChar]:
    """Scan a value. Unescaped separators are kept literally."""
    chars: List[ScannedChar] = []
    state = EscapeState.NORMAL
    for c in text:
        if state is EscapeState.ESCAPED:
            chars.append((c, True))
            state = EscapeState.NORMAL
        elif c == config.escape:
            state = EscapeState.ESCAPED
        else:
            chars.append((c, False))
    if state is EscapeState.ESCAPED:
        # Dangling escape at end of input is literal.
        chars.append((config.escape, False))
    return chars


def _trim(chars: List[ScannedChar]) -> List[ScannedChar]:
    start, end = 0, len(chars)
    while start < end and not chars[start][1] and chars[start][0].isspace():
        start += 1
    while end > start and not chars[end - 1][1] and chars[end - 1][0].isspace():
        end -= 1
    return chars[start:end]


def _join(chars: Iterable[ScannedChar]) -> str:
    return "".join(c for c, _ in chars)


def split_line(line: str, config: CodecConfig = DEFAULT_CONFIG) -> Tuple[str, str]:
    """
    Split one line into (key, value).

    The first unescaped separator ends the key; the rest of the line is the
    value. Both sides are unescaped and trimmed of unescaped whitespace.

    Args:
        line: Line text, with or without its line terminator
        config: Separator and escape characters

    Returns:
        (key, value)

    Raises:
        NoValueError: If the line has no unescaped separator
        NoKeyError: If the key is empty after trimming
    """
    line = _strip_terminator(line)
    key_chars, value_start = _scan_key(line, config)
    if value_start is None:
        raise NoValueError(
            f"no unescaped {config.separator!r} found in {line!r}", line=line
        )
    key = _join(_trim(key_chars))
    if not key:
        raise NoKeyError(
            f"empty key before {config.separator!r} in {line!r}", line=line
        )
    value = _join(_trim(_scan_value(line[value_start:], config)))
    return key, value


def escape_value(text: str, config: CodecConfig = DEFAULT_CONFIG) -> str:
    """
    Return the line-safe form of ``text``.

    Equivalent to replacing every escape with a doubled escape and THEN every
    separator with escape+separator, plus escaping a leading or trailing
    whitespace character. Commas are never escaped.

    Raises:
        InvalidValueError: If text contains a line terminator
    """
    if "\n" in text or "\r" in text:
        raise InvalidValueError(f"multi-line values are not supported: {text!r}")
    last = len(text) - 1
    out: List[str] = []
    for index, c in enumerate(text):
        if c == config.escape or c == config.separator:
            out.append(config.escape)
        elif c.isspace() and (index == 0 or index == last):
            out.append(config.escape)
        out.append(c)
    return "".join(out)


def unescape_value(text: str, config: CodecConfig = DEFAULT_CONFIG) -> str:
    """Inverse of escape_value for a value fragment (no trimming)."""
    return _join(_scan_value(text, config))


def split_list(value: str) -> List[str]:
    """
    Split a value on literal commas.

    An empty value is the empty list; elements are not trimmed.
    """
    if value == "":
        return []
    return value.split(LIST_SEPARATOR)


def join_list(items: Iterable[str]) -> str:
    return LIST_SEPARATOR.join(items)


__all__ = [
    "LIST_SEPARATOR",
    "EscapeState",
    "split_line",
    "escape_value",
    "unescape_value",
    "split_list",
    "join_list",
]
