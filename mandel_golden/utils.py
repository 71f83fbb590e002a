# mandel_golden/utils.py
from __future__ import annotations

from pathlib import Path

import yaml

from mandel_golden.fixed_point import float_to_fixed, parse_hex_fixed

DEFAULT_CONFIG = {
    "input_file": "configs/test_cases.txt",
    "output_dir": "output",
    "write_ppm": True,
    "write_png": False,
    "write_text": True,
    "summary_csv": "results/golden_summary.csv",
    "method": "vectorized",
    "workers": 1,
    "start_index": 0,
}


def load_config(path: str | Path | None) -> dict:
    """Read a YAML config and fill in defaults for any missing keys."""
    cfg = dict(DEFAULT_CONFIG)
    if path is None:
        return cfg
    with open(path, "r") as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config {path} must be a mapping, got {type(loaded).__name__}")
    cfg.update(loaded)

    cfg["workers"] = int(cfg.get("workers", 1))
    cfg["start_index"] = int(cfg.get("start_index", 0))
    cfg["method"] = str(cfg.get("method", "vectorized"))
    for key in ("write_ppm", "write_png", "write_text"):
        cfg[key] = bool(cfg.get(key))
    return cfg


def parse_coordinate(s: str) -> int:
    """
    Accept either 0x-prefixed hex fixed-point ('0xF0000000', '0xFFFFFFFFE0000000') or a
    decimal real ('-0.75'), returning a 32-bit Q3.29 value.
    """
    s = s.strip().lower()
    body = s.lstrip("-")
    if body.startswith("0x"):
        return parse_hex_fixed(s)
    return float_to_fixed(float(s))


def parse_colour(s: str) -> int:
    return int(s.strip(), 16) & 0xFFFF
