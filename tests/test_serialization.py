"""
Tests for the JSON/YAML bridge in `kvline.serialization`.

These tests ensure flat records move between line form and JSON/YAML
documents without losing values.
"""

import json

import pytest
import yaml

from kvline.errors import InvalidValueError, UnsupportedNestingError
from kvline.examples import build_example_report
from kvline.serialization import (
    dict_to_lines,
    json_to_lines,
    lines_to_dict,
    lines_to_json,
    lines_to_yaml,
    record_to_dict,
    yaml_to_lines,
)


SAMPLE_LINES = "host=db\\=1\nport=5432\nretries=-1\nenabled=true\nnote=\n"


def test_record_to_dict():
    d = record_to_dict(build_example_report())
    assert list(d)[:3] == ["station", "sequence", "temperature"]
    assert d["station"] == "north\\ridge=2"
    assert d["offsets"] == [0, -4, 12]


def test_record_to_dict_rejects_non_records():
    with pytest.raises(TypeError):
        record_to_dict({"a": 1})


def test_lines_to_dict():
    assert lines_to_dict(SAMPLE_LINES) == {
        "host": "db=1",
        "port": 5432,
        "retries": -1,
        "enabled": True,
        "note": None,
    }


def test_json_roundtrip():
    json_str = lines_to_json(SAMPLE_LINES)
    assert json.loads(json_str)["host"] == "db=1"
    assert json_to_lines(json_str) == SAMPLE_LINES


def test_yaml_roundtrip():
    yaml_str = lines_to_yaml(SAMPLE_LINES)
    assert yaml.safe_load(yaml_str)["port"] == 5432
    assert yaml_to_lines(yaml_str) == SAMPLE_LINES


def test_json_must_be_mapping():
    with pytest.raises(InvalidValueError):
        json_to_lines("[1, 2]")


def test_nested_json_rejected():
    with pytest.raises(UnsupportedNestingError):
        json_to_lines('{"a": {"b": 1}}')


def test_json_list_values():
    assert json_to_lines('{"ids": [1, 2, 3]}') == "ids=1,2,3\n"


def test_empty_yaml_document():
    assert yaml_to_lines("") == ""
    assert dict_to_lines({}) == ""
