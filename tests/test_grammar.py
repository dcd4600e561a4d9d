"""
Tests for the Line Grammar.

These tests verify:
    - Splitting a line at the first unescaped separator
    - NoKey / NoValue failures
    - Escaping order (escape doubled before separator is prefixed)
    - Trimming of unescaped whitespace only
    - Comma list splitting
"""

import pytest

from kvline.config import CodecConfig
from kvline.errors import InvalidValueError, NoKeyError, NoValueError
from kvline.grammar import (
    EscapeState,
    escape_value,
    join_list,
    split_line,
    split_list,
    unescape_value,
)


class TestSplitLine:
    """Test splitting one line into (key, value)."""

    def test_simple_pair(self):
        """key=value splits at the separator."""
        assert split_line("int=10") == ("int", "10")

    def test_line_terminator_removed(self):
        """Trailing \\n and \\r\\n are not part of the value."""
        assert split_line("a=1\n") == ("a", "1")
        assert split_line("a=1\r\n") == ("a", "1")

    def test_first_unescaped_separator_wins(self):
        """Later separators belong to the value."""
        assert split_line("expr=a=b=c") == ("expr", "a=b=c")

    def test_empty_value(self):
        """A separator with nothing after it gives an empty value."""
        assert split_line("empty=") == ("empty", "")

    def test_no_separator_is_no_value(self):
        """A line without an unescaped separator is NoValue."""
        with pytest.raises(NoValueError):
            split_line("onlykey")

    def test_escaped_separator_only_is_no_value(self):
        """An escaped separator does not end the key."""
        with pytest.raises(NoValueError):
            split_line("only\\=key")

    def test_blank_line_is_no_value(self):
        """Blank lines are malformed."""
        with pytest.raises(NoValueError):
            split_line("\n")

    def test_leading_separator_is_no_key(self):
        """=value has an empty key."""
        with pytest.raises(NoKeyError):
            split_line("=value")

    def test_whitespace_key_is_no_key(self):
        """A key that is empty after trimming is NoKey."""
        with pytest.raises(NoKeyError):
            split_line("   =value")

    def test_escaped_separator_in_key(self):
        """\\= inside the key is a literal separator."""
        assert split_line("a\\=b=c") == ("a=b", "c")

    def test_escaped_escape_in_key(self):
        """\\\\ inside the key is a literal backslash."""
        assert split_line("a\\\\=c") == ("a\\", "c")

    def test_escaped_characters_in_value(self):
        """Value escapes are removed."""
        assert split_line("path=C:\\\\temp\\=x") == ("path", "C:\\temp=x")

    def test_unicode_characters(self):
        """Scanning works on characters, not bytes."""
        assert split_line("clé=naïve ☃") == ("clé", "naïve ☃")

    def test_dangling_escape_at_end_of_value(self):
        """A lone trailing escape is kept literally."""
        assert split_line("a=b\\") == ("a", "b\\")

    def test_message_mentions_line(self):
        """Errors carry the offending line."""
        with pytest.raises(NoValueError) as excinfo:
            split_line("onlykey")
        assert excinfo.value.line == "onlykey"
        assert "onlykey" in str(excinfo.value)


class TestTrimming:
    """Only unescaped whitespace is trimmed."""

    def test_surrounding_whitespace_trimmed(self):
        """Spaces around key and value are removed."""
        assert split_line("  key  =  value  ") == ("key", "value")

    def test_inner_whitespace_kept(self):
        """Spaces inside the value stay."""
        assert split_line("msg=hello  world") == ("msg", "hello  world")

    def test_escaped_leading_space_survives(self):
        """An escaped leading space is part of the value."""
        assert split_line("pad=\\  x") == ("pad", "  x")

    def test_escaped_trailing_space_survives(self):
        """An escaped trailing space is part of the value."""
        assert split_line("pad=x \\ ") == ("pad", "x  ")

    def test_escaped_space_in_key_survives(self):
        """Escaped whitespace counts as key content."""
        assert split_line("\\ =v") == (" ", "v")


class TestCustomConfig:
    """Separator and escape are configurable."""

    def test_colon_and_caret(self):
        """Other characters behave the same way."""
        config = CodecConfig(separator=":", escape="^")
        assert split_line("time:12^:30", config) == ("time", "12:30")
        assert split_line("a=b:c", config) == ("a=b", "c")

    def test_default_escape_is_plain_text(self):
        """With a different escape, backslash is ordinary."""
        config = CodecConfig(separator=":", escape="^")
        assert split_line("dir:C:\\x", config) == ("dir", "C:\\x")


class TestEscapeValue:
    """Test the encode-direction escaping."""

    def test_plain_text_unchanged(self):
        """Text without special characters passes through."""
        assert escape_value("hello world") == "hello world"

    def test_separator_escaped(self):
        """= becomes \\=."""
        assert escape_value("a=b") == "a\\=b"

    def test_escape_doubled(self):
        """\\ becomes \\\\."""
        assert escape_value("a\\b") == "a\\\\b"

    def test_escape_before_separator(self):
        """\\= becomes \\\\\\= (escape doubled, then separator escaped)."""
        assert escape_value("\\=") == "\\\\\\="

    def test_commas_not_escaped(self):
        """Commas are never escaped."""
        assert escape_value("a,b") == "a,b"

    def test_edge_whitespace_escaped(self):
        """Leading and trailing whitespace is protected from trimming."""
        assert escape_value(" a ") == "\\ a\\ "
        assert escape_value(" ") == "\\ "

    def test_newline_rejected(self):
        """Multi-line values are not supported."""
        with pytest.raises(InvalidValueError):
            escape_value("two\nlines")

    @pytest.mark.parametrize(
        "text",
        ["=", "\\", "\\\\==", "=\\=\\", "a\\=b", "  =\\ ", "x\\", "\\x"],
    )
    def test_escaped_value_survives_split(self, text):
        """Any mix of separator and escape characters survives a line split."""
        line = "k=" + escape_value(text)
        assert split_line(line) == ("k", text)

    def test_unescape_inverts_escape(self):
        """unescape_value(escape_value(s)) == s."""
        text = "a\\b=c"
        assert unescape_value(escape_value(text)) == text


class TestLists:
    """Test comma list splitting."""

    def test_split(self):
        """1,2,3 has three elements."""
        assert split_list("1,2,3") == ["1", "2", "3"]

    def test_empty_value_is_empty_list(self):
        """An empty value is the empty list."""
        assert split_list("") == []

    def test_empty_elements_kept(self):
        """Consecutive commas give empty elements."""
        assert split_list("a,,b") == ["a", "", "b"]

    def test_elements_not_trimmed(self):
        """Whitespace around elements is kept."""
        assert split_list("a, b") == ["a", " b"]

    def test_join(self):
        """join_list is comma-joined."""
        assert join_list(["x", "y"]) == "x,y"


def test_escape_states():
    assert EscapeState.NORMAL != EscapeState.ESCAPED
