"""
Coordinate mapping for the 640x480 drawing engine.

Turns a logical (centre, zoom) pair into the top-left sample point and the
per-pixel step. Also holds the parameter clamps, which reset out-of-range
values to the floor instead of saturating (the hardware registers are
unsigned and simply wrap).
"""

from __future__ import annotations

from dataclasses import dataclass

from mandel_golden.fixed_point import wrap_int32

XSIZE = 640
YSIZE = 480

# distance between adjacent samples at zoom level 10
BASE_STEP = 0x00000FA0

MAX_ZOOM = 10
MAX_ITERATIONS_LIMIT = 1023


@dataclass(frozen=True)
class CoordStep:
    x: int  # top-left sample, Q3.29
    y: int
    step: int


def clamp_zoom(zoom: int) -> int:
    """Zoom outside [0, 10] resets to 0 (not to the nearest bound)."""
    if zoom > MAX_ZOOM:
        return 0
    if zoom < 0:
        return 0
    return zoom


def clamp_max_iterations(max_iterations: int) -> int:
    """max_iterations outside [1, 1023] resets to 1 (not to the nearest bound)."""
    if max_iterations <= 0:
        return 1
    if max_iterations > MAX_ITERATIONS_LIMIT:
        return 1
    return max_iterations


def step_for_zoom(zoom: int) -> int:
    zoom = clamp_zoom(zoom)
    return wrap_int32(BASE_STEP * (1 << (MAX_ZOOM - zoom)))


def center_coords(center_x: int, center_y: int, zoom: int) -> CoordStep:
    """
    Compute the top-left sample point and step for a frame.

    x decreases to the left of centre, y increases upward: pixel rows run
    downward while the imaginary axis runs up, hence the sign difference.
    """
    step = step_for_zoom(zoom)
    x = wrap_int32(center_x - (XSIZE >> 1) * step)
    y = wrap_int32(center_y + (YSIZE >> 1) * step)
    return CoordStep(x=x, y=y, step=step)
