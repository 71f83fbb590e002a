"""
Diff a golden text dump against a hardware-simulation dump.

Run:
    python -m scripts.compare_framebuffers output/output_files/output_file_0.txt sim/output_file_0.txt

Exit code 0 on a bit-exact match, 1 otherwise. Mismatching pixels can be
written to CSV with --mismatches.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from mandel_golden.coords import XSIZE, YSIZE
from mandel_golden.framestore import compare_framebuffers, read_framebuffer_file


def main():
    parser = argparse.ArgumentParser(description="Compare two per-pixel frame buffer dumps")
    parser.add_argument("expected", type=str, help="golden dump")
    parser.add_argument("actual", type=str, help="simulation dump")
    parser.add_argument("--mismatches", type=str, default=None, help="write mismatching pixels to this CSV")
    parser.add_argument("--show", type=int, default=10, help="number of mismatches to print")
    args = parser.parse_args()

    for p in (args.expected, args.actual):
        if not Path(p).exists():
            print(f"Error: file not found: {p}")
            return 1

    expected = read_framebuffer_file(args.expected)
    actual = read_framebuffer_file(args.actual)
    diff = compare_framebuffers(expected, actual)

    total = XSIZE * YSIZE
    if diff.empty:
        print(f"✓ {total} pixels match")
        return 0

    print(f"✗ {len(diff)} of {total} pixels differ ({100 * len(diff) / total:.3f}%)")
    shown = diff.head(args.show)
    for row in shown.itertuples(index=False):
        print(f"  ({row.x:3d}, {row.y:3d})  expected 0x{row.expected:04x}  actual 0x{row.actual:04x}")
    if len(diff) > len(shown):
        print(f"  ... {len(diff) - len(shown)} more")

    if args.mismatches:
        out = Path(args.mismatches)
        out.parent.mkdir(parents=True, exist_ok=True)
        diff.to_csv(out, index=False)
        print(f"[compare] mismatches -> {out}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
