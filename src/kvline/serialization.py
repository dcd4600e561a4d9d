"""
Serialization helpers bridging kvline records and JSON/YAML documents.

Line records map onto flat JSON/YAML mappings through an intermediate dict.
Decoding uses scalar inference, so "42" becomes 42 and "" becomes null.
Documents must be flat: a nested mapping or a list of mappings is rejected
by the encoder.
"""
from __future__ import annotations

import dataclasses
import json
from typing import Any, Dict, Optional

import yaml

from kvline.config import CodecConfig
from kvline.decoder import from_str
from kvline.encoder import to_string
from kvline.errors import InvalidValueError


def record_to_dict(record: Any) -> Dict[str, Any]:
    """Dataclass instance -> dict in declared field order (tuples become lists)."""
    if not dataclasses.is_dataclass(record) or isinstance(record, type):
        raise TypeError(f"Expected a record instance, got {record!r}")
    d: Dict[str, Any] = {}
    for f in dataclasses.fields(record):
        value = getattr(record, f.name)
        d[f.name] = list(value) if isinstance(value, tuple) else value
    return d


def _flat_mapping(d: Any, source: str) -> Dict[str, Any]:
    if d is None:
        return {}
    if not isinstance(d, dict):
        raise InvalidValueError(
            f"{source} document must be a mapping, got {type(d).__name__}"
        )
    return d


def lines_to_dict(text: str, config: Optional[CodecConfig] = None) -> Dict[str, Any]:
    return from_str(text, None, config)


def dict_to_lines(d: Dict[str, Any], config: Optional[CodecConfig] = None) -> str:
    return to_string(_flat_mapping(d, "input"), config)


def lines_to_json(text: str, config: Optional[CodecConfig] = None) -> str:
    return json.dumps(lines_to_dict(text, config))


def json_to_lines(s: str, config: Optional[CodecConfig] = None) -> str:
    d = json.loads(s)
    return to_string(_flat_mapping(d, "JSON"), config)


def lines_to_yaml(text: str, config: Optional[CodecConfig] = None) -> str:
    return yaml.safe_dump(lines_to_dict(text, config), sort_keys=False)


def yaml_to_lines(s: str, config: Optional[CodecConfig] = None) -> str:
    d = yaml.safe_load(s)
    return to_string(_flat_mapping(d, "YAML"), config)
