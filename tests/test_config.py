"""
Tests for CodecConfig validation and YAML loading.
"""

import pytest

from kvline.config import (
    DEFAULT_ESCAPE,
    DEFAULT_SEPARATOR,
    CodecConfig,
    config_from_dict,
    config_from_yaml,
    load_config,
)
from kvline.errors import ConfigError, KVLineError


class TestCodecConfig:
    """Test configuration invariants."""

    def test_defaults(self):
        config = CodecConfig()
        assert config.separator == DEFAULT_SEPARATOR == "="
        assert config.escape == DEFAULT_ESCAPE == "\\"

    @pytest.mark.parametrize(
        "separator, escape",
        [
            ("==", "\\"),
            ("", "\\"),
            ("=", "="),
            (" ", "\\"),
            ("=", "\t"),
            (",", "\\"),
            ("\n", "\\"),
        ],
    )
    def test_invalid(self, separator, escape):
        with pytest.raises(ConfigError):
            CodecConfig(separator=separator, escape=escape)

    def test_error_is_value_error(self):
        """ConfigError is both a KVLineError and a ValueError."""
        with pytest.raises(ValueError):
            CodecConfig(separator="ab")
        assert issubclass(ConfigError, KVLineError)

    def test_frozen(self):
        config = CodecConfig()
        with pytest.raises(AttributeError):
            config.separator = ":"


class TestLoading:
    """Test loading configuration documents."""

    def test_from_yaml(self):
        config = config_from_yaml('separator: ":"\nescape: "^"\n')
        assert config == CodecConfig(separator=":", escape="^")

    def test_partial_yaml(self):
        """Missing keys keep their defaults."""
        assert config_from_yaml('separator: ":"\n') == CodecConfig(separator=":")

    def test_empty_yaml(self):
        assert config_from_yaml("") == CodecConfig()

    def test_unknown_keys(self):
        with pytest.raises(ConfigError):
            config_from_dict({"delimiter": ":"})

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError):
            config_from_yaml("- a\n- b\n")

    def test_bad_yaml(self):
        with pytest.raises(ConfigError):
            config_from_yaml("separator: [\n")

    def test_load_config(self, tmp_path):
        path = tmp_path / "kvline.yaml"
        path.write_text('escape: "^"\n', encoding="utf-8")
        assert load_config(str(path)) == CodecConfig(escape="^")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "absent.yaml"))
