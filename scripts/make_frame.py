import argparse
import os
import sys
from pathlib import Path

# Ensure repository root is on sys.path so `from mandel_golden...` works when
# running this script directly (e.g. `python scripts/make_frame.py`).
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from mandel_golden.fixed_point import format_hex_fixed
from mandel_golden.framestore import write_framebuffer_file, write_png, write_ppm
from mandel_golden.render import METHODS, render_frame
from mandel_golden.utils import parse_colour, parse_coordinate

DEFAULT_ANCHORS = ["0000", "2104", "4208", "630C", "8410", "FFFF"]


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--cx", type=str, required=True, help="centre x: real (-0.75) or 0x-prefixed Q3.29 hex")
    parser.add_argument("--cy", type=str, required=True)
    parser.add_argument("--zoom", type=int, default=0)
    parser.add_argument("--max_iter", type=int, default=255)
    parser.add_argument("--colours", type=str, nargs=6, default=DEFAULT_ANCHORS,
                        help="6 RGB565 anchor colours in hex")
    parser.add_argument("--method", type=str, default="vectorized", choices=list(METHODS))
    parser.add_argument("--workers", type=int, default=1)
    parser.add_argument("--outfile", type=str, required=True,
                        help=".ppm, .png or .txt (text dump)")

    args = parser.parse_args()

    cx = parse_coordinate(args.cx)
    cy = parse_coordinate(args.cy)
    anchors = [parse_colour(c) for c in args.colours]
    out_path = Path(args.outfile)

    print(f"[run] centre=({format_hex_fixed(cx, 32)}, {format_hex_fixed(cy, 32)}) "
          f"zoom={args.zoom} max_iter={args.max_iter}, saving to {out_path}")

    result = render_frame(cx, cy, args.zoom, args.max_iter, anchors,
                          method=args.method, workers=args.workers)

    suffix = out_path.suffix.lower()
    if suffix == ".png":
        write_png(out_path, result.framebuffer)
    elif suffix == ".txt":
        write_framebuffer_file(out_path, result.framebuffer)
    else:
        write_ppm(out_path, result.framebuffer)
    print("[run] done.")


if __name__ == "__main__":
    main()
