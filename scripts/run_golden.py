"""
Batch golden-model run.

Renders every test case in an input file and writes, per frame:
    <output_dir>/images/<n>_framestore_golden.ppm   (and/or .png)
    <output_dir>/output_files/output_file_<n>.txt   per-pixel text dump

plus one summary CSV row per frame.

Run:
    python -m scripts.run_golden --config configs/golden.yaml

Options:
    --input      override input_file from the config
    --output-dir override output_dir
    --workers    row bands rendered in parallel
    --method     vectorized | scalar
"""

from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path

import numpy as np
import pandas as pd

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from mandel_golden.colours import BLACK
from mandel_golden.fixed_point import fixed_to_float, format_hex_fixed
from mandel_golden.framestore import write_framebuffer_file, write_png, write_ppm
from mandel_golden.render import METHODS, render_frame
from mandel_golden.testcases import iter_test_case_lines, parse_line
from mandel_golden.utils import load_config


def clear_outputs(directory: Path, pattern: str):
    """Remove stale outputs from a previous run so frame numbering stays consistent."""
    if not directory.exists():
        return
    for p in directory.glob(pattern):
        p.unlink()


def run_golden(cfg: dict) -> int:
    input_file = Path(cfg["input_file"])
    out_dir = Path(cfg["output_dir"])
    image_dir = out_dir / "images"
    text_dir = out_dir / "output_files"

    if not input_file.exists():
        print(f"Error: input file not found: {input_file}")
        return 1
    if cfg["method"] not in METHODS:
        print(f"Error: unknown method {cfg['method']!r} (choose from {', '.join(METHODS)})")
        return 1

    clear_outputs(image_dir, "*_framestore_golden.*")
    clear_outputs(text_dir, "output_file_*.txt")

    rows = []
    failures = 0
    frame_no = int(cfg["start_index"])

    for line_no, text in iter_test_case_lines(input_file):
        tag = f"[frame {frame_no}]"
        try:
            case = parse_line(text, line_no)
        except ValueError as e:
            print(f"✗ {tag} skipped: {e}")
            failures += 1
            frame_no += 1
            continue

        t0 = time.time()
        result = render_frame(
            case.center_x,
            case.center_y,
            case.zoom,
            case.max_iterations,
            case.anchors,
            method=cfg["method"],
            workers=cfg["workers"],
        )
        elapsed = time.time() - t0

        fb = result.framebuffer
        outputs = []
        if cfg["write_ppm"]:
            outputs.append(write_ppm(image_dir / f"{frame_no}_framestore_golden.ppm", fb))
        if cfg["write_png"]:
            outputs.append(write_png(image_dir / f"{frame_no}_framestore_golden.png", fb))
        if cfg["write_text"]:
            outputs.append(write_framebuffer_file(text_dir / f"output_file_{frame_no}.txt", fb))

        print(
            f"✓ {tag} line {line_no}: zoom={result.zoom} max_iter={result.max_iterations} "
            f"unique={result.unique_colours} ({elapsed:.2f}s)"
        )

        rows.append({
            "frame": frame_no,
            "line": line_no,
            "center_x": format_hex_fixed(case.center_x, 32),
            "center_y": format_hex_fixed(case.center_y, 32),
            "center_x_real": fixed_to_float(case.center_x),
            "center_y_real": fixed_to_float(case.center_y),
            "zoom_raw": case.zoom,
            "zoom": result.zoom,
            "max_iterations": result.max_iterations,
            "step": result.coord.step,
            "unique_colours": result.unique_colours,
            "escaped_fraction": float(np.mean(fb != BLACK)),
            "distinct_colours": int(np.unique(fb).size),
            "seconds": round(elapsed, 3),
            "outputs": ";".join(str(p) for p in outputs),
        })
        frame_no += 1

    summary_csv = cfg.get("summary_csv")
    if summary_csv and rows:
        summary_path = Path(summary_csv)
        summary_path.parent.mkdir(parents=True, exist_ok=True)
        pd.DataFrame(rows).to_csv(summary_path, index=False)
        print(f"\n[golden] summary -> {summary_path}")

    print(f"[golden] {len(rows)} frame(s) rendered, {failures} skipped")
    return 1 if failures else 0


def main():
    parser = argparse.ArgumentParser(description="Run the fixed-point Mandelbrot golden model over a test-case file")
    parser.add_argument("--config", type=str, default=None, help="Path to golden.yaml config")
    parser.add_argument("--input", type=str, default=None, help="Test-case file (overrides config)")
    parser.add_argument("--output-dir", type=str, default=None)
    parser.add_argument("--summary-csv", type=str, default=None)
    parser.add_argument("--method", type=str, choices=list(METHODS), default=None)
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument("--png", action="store_true", help="Also write PNG images")
    parser.add_argument("--no-text", action="store_true", help="Skip the per-pixel text dumps")
    args = parser.parse_args()

    if args.config is not None and not Path(args.config).exists():
        print(f"Error: Config file not found: {args.config}")
        return 1

    cfg = load_config(args.config)
    if args.input is not None:
        cfg["input_file"] = args.input
    if args.output_dir is not None:
        cfg["output_dir"] = args.output_dir
    if args.summary_csv is not None:
        cfg["summary_csv"] = args.summary_csv
    if args.method is not None:
        cfg["method"] = args.method
    if args.workers is not None:
        cfg["workers"] = args.workers
    if args.png:
        cfg["write_png"] = True
    if args.no_text:
        cfg["write_text"] = False

    print("=" * 60)
    print("GOLDEN MODEL RUN")
    print("=" * 60)
    print(f"Input:   {cfg['input_file']}")
    print(f"Output:  {cfg['output_dir']}")
    print(f"Method:  {cfg['method']} (workers={cfg['workers']})")
    print()

    return run_golden(cfg)


if __name__ == "__main__":
    sys.exit(main())
