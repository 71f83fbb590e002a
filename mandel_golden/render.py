"""
Frame renderer for the 640x480 drawing engine.

A frame is produced in separable steps:
    sample_grid       coordinate stream (top-left + step -> per-pixel x, y)
    escape_time_grid  per-point evaluation
    colourise         spread index + colour map, sentinel black for interior

draw_mandelbrot glues them together, either as one vectorised pass, as row
bands on a thread pool, or as the literal scalar nested loop. All three give
the same frame buffer.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from mandel_golden.colours import (
    BLACK,
    generate_colour_map,
    generate_unique_colours,
    get_spread_colour_index,
    spread_indices,
)
from mandel_golden.coords import (
    XSIZE,
    YSIZE,
    CoordStep,
    center_coords,
    clamp_max_iterations,
    clamp_zoom,
)
from mandel_golden.fixed_point import wrap_int32
from mandel_golden.iterators import escape_time, escape_time_grid

METHODS = ("vectorized", "scalar")


@dataclass
class FrameResult:
    framebuffer: np.ndarray  # (YSIZE, XSIZE) uint16, RGB565
    colour_map: np.ndarray
    unique_colours: int
    coord: CoordStep
    zoom: int
    max_iterations: int


def _wrap32_array(values: np.ndarray) -> np.ndarray:
    return values.astype(np.int32).astype(np.int64)


def sample_grid(coord: CoordStep, width: int = XSIZE, height: int = YSIZE):
    """
    Per-pixel sample coordinates as two (height, width) int64 arrays.

    Mirrors the engine's accumulators: x advances by step per column and is
    reset each row, y drops by step per row; both are 32-bit registers.
    """
    cols = np.arange(width, dtype=np.int64)
    rows = np.arange(height, dtype=np.int64)
    xs = _wrap32_array(coord.x + cols * coord.step)
    ys = _wrap32_array(coord.y - rows * coord.step)
    return np.broadcast_to(xs, (height, width)), np.broadcast_to(ys[:, None], (height, width))


def colourise(iterations: np.ndarray, max_iterations: int, colour_map: np.ndarray) -> np.ndarray:
    """Map escape counts to RGB565; points that never escaped get black."""
    colour_map = np.asarray(colour_map, dtype=np.uint16)
    if colour_map.shape[0] != max_iterations:
        raise ValueError(
            f"Colour map has {colour_map.shape[0]} entries, expected {max_iterations}"
        )
    iterations = np.asarray(iterations)
    escaped = iterations < max_iterations
    index = np.where(escaped, spread_indices(iterations, max_iterations), 0)
    return np.where(escaped, colour_map[index], np.uint16(BLACK)).astype(np.uint16)


def _draw_scalar(coord: CoordStep, max_iterations: int, colour_map: np.ndarray) -> np.ndarray:
    framebuffer = np.empty((YSIZE, XSIZE), dtype=np.uint16)
    x_fixed = coord.x
    y_fixed = coord.y
    for row in range(YSIZE):
        for col in range(XSIZE):
            iterations, escaped = escape_time(x_fixed, y_fixed, max_iterations)
            if escaped:
                framebuffer[row, col] = colour_map[get_spread_colour_index(iterations, max_iterations)]
            else:
                framebuffer[row, col] = BLACK
            x_fixed = wrap_int32(x_fixed + coord.step)
        y_fixed = wrap_int32(y_fixed - coord.step)
        x_fixed = coord.x
    return framebuffer


def _row_bands(height: int, workers: int):
    edges = np.linspace(0, height, workers + 1).astype(int)
    return [(int(a), int(b)) for a, b in zip(edges[:-1], edges[1:]) if b > a]


def draw_mandelbrot(
    coord: CoordStep,
    max_iterations: int,
    colour_map: Sequence[int],
    *,
    method: str = "vectorized",
    workers: int = 1,
) -> np.ndarray:
    """
    Render one frame buffer.

    method:
      "vectorized"  -> numpy pass over the whole grid (or row bands if workers > 1)
      "scalar"      -> nested per-pixel loop, the direct reference

    Pure function of its arguments; a fresh buffer is returned every call.
    """
    colour_map = np.asarray(colour_map, dtype=np.uint16)
    if colour_map.shape[0] != max_iterations:
        raise ValueError(
            f"Colour map has {colour_map.shape[0]} entries, expected {max_iterations}"
        )
    if method not in METHODS:
        raise ValueError(f"Unknown render method: {method}")
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")

    if method == "scalar":
        return _draw_scalar(coord, max_iterations, colour_map)

    xs, ys = sample_grid(coord)
    if workers == 1:
        iterations = escape_time_grid(xs, ys, max_iterations)
    else:
        iterations = np.empty((YSIZE, XSIZE), dtype=np.int32)
        bands = _row_bands(YSIZE, workers)

        def _band(bounds):
            lo, hi = bounds
            return lo, hi, escape_time_grid(xs[lo:hi], ys[lo:hi], max_iterations)

        with ThreadPoolExecutor(max_workers=workers) as ex:
            for lo, hi, band in ex.map(_band, bands):
                iterations[lo:hi] = band

    return colourise(iterations, max_iterations, colour_map)


def render_frame(
    center_x: int,
    center_y: int,
    zoom: int,
    max_iterations: int,
    anchors: Sequence[int],
    *,
    method: str = "vectorized",
    workers: int = 1,
) -> FrameResult:
    """
    Full per-frame pipeline from raw (unclamped) parameters.

    Colour map and coordinates are derived independently, then the frame is
    drawn. Nothing is carried over between calls.
    """
    max_iterations = clamp_max_iterations(max_iterations)
    unique = generate_unique_colours(anchors)
    colour_map = np.asarray(generate_colour_map(max_iterations, unique), dtype=np.uint16)
    coord = center_coords(center_x, center_y, zoom)

    framebuffer = draw_mandelbrot(coord, max_iterations, colour_map, method=method, workers=workers)
    return FrameResult(
        framebuffer=framebuffer,
        colour_map=colour_map,
        unique_colours=len(unique),
        coord=coord,
        zoom=clamp_zoom(zoom),
        max_iterations=max_iterations,
    )
