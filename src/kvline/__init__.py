"""
kvline: key/value line codec.

Converts flat records to and from a line-oriented text format:

    key1=value1
    key2=value2,value3,value4

One key/value pair per line. A configurable escape character (default
backslash) makes a literal separator or escape character possible inside
a key or value.

ARCHITECTURAL GUARANTEE:
------------------------
Only flat records are supported. Nested records, maps of maps, multi-line
values, tagged variants and binary payloads are rejected, never guessed at.

Layers:
    grammar   one line <-> (key, value); value <-> list
    scalars   typed interpretation and untyped inference
    model     target shapes reflected from dataclasses
    decoder   line stream -> record
    encoder   record -> line stream
"""

from kvline.config import CodecConfig, load_config
from kvline.decoder import Decoder, from_bytes, from_str, from_stream, load
from kvline.encoder import Encoder, dump, to_bytes, to_string, to_writer
from kvline.errors import (
    EncodingFailure,
    ErrorKind,
    InvalidValueError,
    IOFailure,
    KVLineError,
    NoKeyError,
    NoValueError,
    UnsupportedNestingError,
)
from kvline.model import Char

__version__ = "0.1.0"

__all__ = [
    "CodecConfig",
    "load_config",
    "Decoder",
    "from_bytes",
    "from_str",
    "from_stream",
    "load",
    "Encoder",
    "dump",
    "to_bytes",
    "to_string",
    "to_writer",
    "ErrorKind",
    "KVLineError",
    "NoKeyError",
    "NoValueError",
    "InvalidValueError",
    "UnsupportedNestingError",
    "IOFailure",
    "EncodingFailure",
    "Char",
]
