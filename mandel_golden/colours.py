"""
RGB565 colour handling and per-frame colour map generation.

Pipeline:
    6 anchor colours
      -> generate_unique_colours   (walk each channel one step at a time)
      -> generate_colour_map       (resample to exactly max_iterations entries)
    iteration count
      -> get_spread_colour_index   (nonlinear remap into the colour map)
"""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

NUM_ANCHORS = 6
BLACK = 0x0000


# -----------------------------
# RGB565 packing
# -----------------------------

def red(colour: int) -> int:
    return (colour >> 11) & 0x1F


def green(colour: int) -> int:
    return (colour >> 5) & 0x3F


def blue(colour: int) -> int:
    return colour & 0x1F


def pack_rgb565(r: int, g: int, b: int) -> int:
    return ((r & 0x1F) << 11) | ((g & 0x3F) << 5) | (b & 0x1F)


def _direction(start: int, end: int) -> int:
    return 1 if end - start > 0 else -1


# -----------------------------
# Colour map builder
# -----------------------------

def generate_unique_colours(anchors: Sequence[int]) -> List[int]:
    """
    Expand 6 anchor colours into the path of intermediate colours.

    For each of the 5 segments, every channel of the start colour moves one
    unit per step toward the end colour and stops once it matches. The
    segment's start colour and every intermediate colour are emitted; the
    walk ends on the end anchor, which is emitted again as the start of the
    next segment. A segment with identical anchors contributes one colour.

    The length of the result is governed by the largest per-channel distance
    in each segment.
    """
    if len(anchors) != NUM_ANCHORS:
        raise ValueError(f"Expected {NUM_ANCHORS} anchor colours, got {len(anchors)}")

    unique = []
    for start, end in zip(anchors[:-1], anchors[1:]):
        start &= 0xFFFF
        end &= 0xFFFF

        r, g, b = red(start), green(start), blue(start)
        r_end, g_end, b_end = red(end), green(end), blue(end)
        r_inc = _direction(r, r_end)
        g_inc = _direction(g, g_end)
        b_inc = _direction(b, b_end)

        current = start
        unique.append(current)
        while current != end:
            # all channels move together where they can, for a smooth gradient
            if r != r_end:
                r += r_inc
            if g != g_end:
                g += g_inc
            if b != b_end:
                b += b_inc
            current = pack_rgb565(r, g, b)
            unique.append(current)

    return unique


def generate_colour_map(max_iterations: int, unique_colours: Sequence[int]) -> List[int]:
    """
    Resample the unique colour path to exactly max_iterations entries.

    Downsampling (more unique colours than slots): take every
    floor(unique / max_iterations)-th colour. The last index read is
    (max_iterations - 1) * stride <= unique - stride, always in range.

    Upsampling: repeat each colour stride = ceil(max_iterations / unique)
    times. Slot i reads index floor(i / stride) <= floor((max_iterations - 1) / stride),
    and stride >= max_iterations / unique makes that strictly less than
    unique. The index therefore never runs past the end; when
    max_iterations is not a multiple of stride the tail of the path is
    simply never reached.
    """
    n_unique = len(unique_colours)
    if n_unique == 0:
        raise ValueError("unique_colours is empty")

    colour_map = []
    index = 0
    if n_unique > max_iterations:
        stride = n_unique // max_iterations
        for _ in range(max_iterations):
            colour_map.append(unique_colours[index])
            index += stride
    else:
        stride = -(-max_iterations // n_unique)  # ceil
        for i in range(max_iterations):
            colour_map.append(unique_colours[index])
            if (i + 1) % stride == 0:
                index += 1

    return colour_map


def build_colour_map(max_iterations: int, anchors: Sequence[int]) -> np.ndarray:
    """Anchors -> colour map as a uint16 lookup table."""
    unique = generate_unique_colours(anchors)
    return np.asarray(generate_colour_map(max_iterations, unique), dtype=np.uint16)


# -----------------------------
# Spread index
# -----------------------------

def spread_factor(max_iterations: int) -> int:
    # ~0.078 * max_iterations, built from shifts
    return (
        (max_iterations >> 4)
        - (max_iterations >> 5)
        - (max_iterations >> 6)
        - (max_iterations >> 10)
    )


def get_spread_colour_index(iterations: int, max_iterations: int) -> int:
    """
    Remap an escape count to a colour map index.

    Counts near the set boundary dominate the image, so the raw count is
    stretched by a fixed factor and saturated at the last entry. With fewer
    than 16 entries there is nothing to spread and the count is used as is.
    """
    if max_iterations < 16:
        return iterations
    spread = iterations * spread_factor(max_iterations)
    if spread < max_iterations:
        return spread
    return max_iterations - 1


def spread_indices(iterations: np.ndarray, max_iterations: int) -> np.ndarray:
    """Array form of get_spread_colour_index."""
    iterations = np.asarray(iterations, dtype=np.int64)
    if max_iterations < 16:
        return iterations
    spread = iterations * spread_factor(max_iterations)
    return np.where(spread < max_iterations, spread, max_iterations - 1)
