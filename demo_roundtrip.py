#!/usr/bin/env python3
"""
Demo: Record -> lines -> record, plus untyped decoding and error reporting.

Shows:
1. Encoding a dataclass record (escaping separator and escape characters)
2. Decoding it back into the same record
3. Decoding without a target type (scalar inference)
4. What a malformed line looks like
"""

import io

from kvline import Decoder, KVLineError, from_str, to_string
from kvline.examples import StationReport, build_example_report
from kvline.scalars import infer_kind


def main():
    print("=" * 80)
    print("KVLINE ROUND-TRIP DEMO")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Encode
    # =========================================================================
    report = build_example_report(sequence=42)
    text = to_string(report)
    print("\n1. ENCODED RECORD:")
    print("-" * 80)
    print(text, end="")

    # =========================================================================
    # STEP 2: Decode
    # =========================================================================
    restored = from_str(text, StationReport)
    print("\n2. DECODED RECORD:")
    print("-" * 80)
    print(f"   {restored}")
    print(f"   ✓ Round-trip equal: {restored == report}")

    # =========================================================================
    # STEP 3: Untyped decode
    # =========================================================================
    print("\n3. UNTYPED DECODE (inferred kinds):")
    print("-" * 80)
    untyped = from_str(text)
    for key, raw in Decoder(io.StringIO(text)):
        print(f"   {key:<12} {infer_kind(raw).value:<9} {untyped[key]!r}")

    # =========================================================================
    # STEP 4: Errors
    # =========================================================================
    print("\n4. MALFORMED INPUT:")
    print("-" * 80)
    for bad in ["sequence=1\nonlykey\n", "=value\n", "sequence=ten\n"]:
        try:
            from_str(bad, StationReport)
        except KVLineError as e:
            print(f"   {e.kind.value:<14} {e}")

    print("\n" + "=" * 80)


if __name__ == "__main__":
    main()
