"""Command-line interface for kvline.

    kvline decode [PATH] [--format json|yaml]   lines -> JSON/YAML
    kvline encode [PATH] [--format json|yaml]   flat JSON/YAML mapping -> lines
    kvline check  [PATH]                        validate every line

PATH defaults to '-' (stdin). Output goes to stdout.

Exit codes:
    0  success
    1  input file could not be read
    2  the input violates the line format (message on stderr)
"""

from __future__ import annotations

import argparse
import io
import logging
import sys
from typing import List, Optional

import yaml

from kvline.config import CodecConfig, load_config
from kvline.decoder import Decoder
from kvline.errors import EncodingFailure, KVLineError
from kvline.serialization import (
    json_to_lines,
    lines_to_json,
    lines_to_yaml,
    yaml_to_lines,
)


logger = logging.getLogger(__name__)


def _read_text(path: str) -> str:
    if path == "-":
        data = sys.stdin.buffer.read()
    else:
        with open(path, "rb") as fh:
            data = fh.read()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingFailure(f"{path}: input is not valid UTF-8: {e}") from e


def _resolve_config(args: argparse.Namespace) -> CodecConfig:
    config = load_config(args.config) if args.config else CodecConfig()
    if args.separator is not None or args.escape is not None:
        config = CodecConfig(
            separator=args.separator if args.separator is not None else config.separator,
            escape=args.escape if args.escape is not None else config.escape,
        )
    return config


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="kvline", description="Convert key/value line records.")
    p.add_argument("--separator", help="Key/value separator character (default '=')")
    p.add_argument("--escape", help="Escape character (default '\\')")
    p.add_argument("--config", help="YAML file with 'separator' and/or 'escape'")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    sub = p.add_subparsers(dest="command", required=True)

    dec = sub.add_parser("decode", help="Lines to JSON or YAML")
    dec.add_argument("path", nargs="?", default="-", help="Input file path or '-' for stdin")
    dec.add_argument("--format", choices=["json", "yaml"], default="json")

    enc = sub.add_parser("encode", help="Flat JSON or YAML mapping to lines")
    enc.add_argument("path", nargs="?", default="-", help="Input file path or '-' for stdin")
    enc.add_argument("--format", choices=["json", "yaml"], default="json")

    chk = sub.add_parser("check", help="Validate every line")
    chk.add_argument("path", nargs="?", default="-", help="Input file path or '-' for stdin")

    return p


def _check(text: str, config: CodecConfig) -> int:
    count = 0
    for _key, _value in Decoder(io.StringIO(text), config):
        count += 1
    return count


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = _resolve_config(args)
        text = _read_text(args.path)
    except KVLineError as ex:
        sys.stderr.write(f"error: {ex}\n")
        return 2
    except OSError as ex:
        sys.stderr.write(f"error: {ex}\n")
        return 1

    logger.debug("running %s on %s", args.command, args.path)
    try:
        if args.command == "decode":
            out = lines_to_yaml(text, config) if args.format == "yaml" else lines_to_json(text, config) + "\n"
        elif args.command == "encode":
            out = yaml_to_lines(text, config) if args.format == "yaml" else json_to_lines(text, config)
        else:
            out = f"ok: {_check(text, config)} lines\n"
    except KVLineError as ex:
        sys.stderr.write(f"error: {ex}\n")
        return 2
    except (ValueError, yaml.YAMLError) as ex:
        # Malformed JSON or YAML input document.
        sys.stderr.write(f"error: {ex}\n")
        return 2

    sys.stdout.write(out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
