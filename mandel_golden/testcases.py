"""
Test-case records for the golden model.

One record per line:

    center_x center_y zoom max_iterations c1 c2 c3 c4 c5 c6 [ignored ...]

centre and colours are hex (with or without 0x), zoom and max_iterations are
decimal. Blank lines and lines starting with '#' are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from mandel_golden.colours import NUM_ANCHORS
from mandel_golden.coords import clamp_max_iterations
from mandel_golden.fixed_point import parse_hex_fixed

MIN_FIELDS = 4 + NUM_ANCHORS


@dataclass(frozen=True)
class TestCase:
    center_x: int  # Q3.29, 32-bit
    center_y: int
    zoom: int  # raw, clamped later by the coordinate mapper
    max_iterations: int  # already clamped
    anchors: Tuple[int, ...]
    line_no: int = 0

    __test__ = False  # not a pytest class


def parse_line(line: str, line_no: int = 0) -> TestCase:
    fields = line.split()
    if len(fields) < MIN_FIELDS:
        raise ValueError(
            f"line {line_no}: expected at least {MIN_FIELDS} fields, got {len(fields)}"
        )
    try:
        center_x = parse_hex_fixed(fields[0])
        center_y = parse_hex_fixed(fields[1])
        zoom = int(fields[2])
        max_iterations = int(fields[3])
        anchors = tuple(int(f, 16) & 0xFFFF for f in fields[4:4 + NUM_ANCHORS])
    except ValueError as e:
        raise ValueError(f"line {line_no}: {e}") from e

    return TestCase(
        center_x=center_x,
        center_y=center_y,
        zoom=zoom,
        max_iterations=clamp_max_iterations(max_iterations),
        anchors=anchors,
        line_no=line_no,
    )


def iter_test_case_lines(path: str | Path):
    """Yield (line_no, text) for every record line, skipping blanks and comments."""
    with open(path, "r") as f:
        for line_no, line in enumerate(f, start=1):
            text = line.strip()
            if not text or text.startswith("#"):
                continue
            yield line_no, text


def load_test_cases(path: str | Path) -> List[TestCase]:
    """Parse every record in a file. Raises ValueError on the first bad line."""
    return [parse_line(text, line_no) for line_no, text in iter_test_case_lines(path)]
