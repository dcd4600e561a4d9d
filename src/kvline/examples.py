"""
Example record types for the demo script and tests.

StationReport is a flat weather-station record using every supported
field kind: strings that need escaping, integers, floats, a flag, a
single-character grade, list fields and optional fields.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from kvline.model import Char


@dataclass
class StationReport:
    station: str
    sequence: int
    temperature: float
    online: bool
    grade: Char
    offsets: List[int] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    note: Optional[str] = None


@dataclass
class Counter:
    int: int


def build_example_report(sequence: int = 1) -> StationReport:
    return StationReport(
        station="north\\ridge=2",
        sequence=sequence,
        temperature=-3.5,
        online=True,
        grade=Char("A"),
        offsets=[0, -4, 12],
        tags=["alpine", "wind"],
        note="calibrated 2024-03-01",
    )


EXAMPLE_REPORT_TEXT = (
    "station=north\\\\ridge\\=2\n"
    "sequence=1\n"
    "temperature=-3.5\n"
    "online=true\n"
    "grade=A\n"
    "offsets=0,-4,12\n"
    "tags=alpine,wind\n"
    "note=calibrated 2024-03-01\n"
)
