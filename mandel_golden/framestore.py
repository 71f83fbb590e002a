"""
Frame buffer I/O: images for eyeballing, text dumps for diffing against the
hardware simulation.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
from PIL import Image

from mandel_golden.coords import XSIZE, YSIZE


def to_rgb888(frame: np.ndarray) -> np.ndarray:
    """
    Expand RGB565 to one byte per channel by left shift (red/blue << 3,
    green << 2). Low bits are left zero, as the display path does.
    """
    frame = np.asarray(frame, dtype=np.uint16)
    r = ((frame >> 11) & 0x1F) << 3
    g = ((frame >> 5) & 0x3F) << 2
    b = (frame & 0x1F) << 3
    return np.stack([r, g, b], axis=-1).astype(np.uint8)


def write_ppm(path: str | Path, frame: np.ndarray) -> Path:
    """Binary P6 image of the frame."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(to_rgb888(frame)).save(path, format="PPM")
    return path


def write_png(path: str | Path, frame: np.ndarray) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(to_rgb888(frame)).save(path, format="PNG")
    return path


def write_framebuffer_file(path: str | Path, frame: np.ndarray) -> Path:
    """
    Plain per-pixel dump, row-major:

        <x> <y> 0x<colour as 4 hex digits>
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    frame = np.asarray(frame, dtype=np.uint16)
    height, width = frame.shape
    with open(path, "w") as f:
        for y in range(height):
            row = frame[y]
            f.write("".join(f"{x} {y} 0x{int(row[x]):04x}\n" for x in range(width)))
    return path


def read_framebuffer_file(path: str | Path, width: int = XSIZE, height: int = YSIZE) -> np.ndarray:
    """Load a text dump back into a (height, width) uint16 frame. Missing pixels stay 0."""
    df = pd.read_csv(
        path,
        sep=r"\s+",
        header=None,
        names=["x", "y", "colour"],
        dtype={"x": int, "y": int, "colour": str},
    )
    frame = np.zeros((height, width), dtype=np.uint16)
    if df.empty:
        return frame

    colours = df["colour"].map(lambda s: int(s, 16)).to_numpy()
    xs = df["x"].to_numpy()
    ys = df["y"].to_numpy()
    inside = (xs >= 0) & (xs < width) & (ys >= 0) & (ys < height)
    if not inside.all():
        bad = df[~inside].iloc[0]
        raise ValueError(f"Pixel ({bad['x']}, {bad['y']}) outside {width}x{height} frame")
    frame[ys, xs] = colours
    return frame


def compare_framebuffers(expected: np.ndarray, actual: np.ndarray) -> pd.DataFrame:
    """
    Pixel-by-pixel diff.

    Returns one row per mismatching pixel with columns x, y, expected, actual
    (colours as ints). Empty frame => bit-exact match.
    """
    expected = np.asarray(expected, dtype=np.uint16)
    actual = np.asarray(actual, dtype=np.uint16)
    if expected.shape != actual.shape:
        raise ValueError(f"Frame shapes differ: {expected.shape} vs {actual.shape}")

    ys, xs = np.nonzero(expected != actual)
    return pd.DataFrame({
        "x": xs.astype(int),
        "y": ys.astype(int),
        "expected": expected[ys, xs].astype(int),
        "actual": actual[ys, xs].astype(int),
    })
