"""
Escape-time iteration in Q3.29.

Two forms of the same recurrence:
    escape_time       one sample point, plain ints (the literal reference)
    escape_time_grid  numpy int64 arrays, bit-identical to the scalar form

Loop order (kept exactly):
    while modulus_sq <= 4.0 and iterations < max_iterations:
        modulus_sq = zr*zr + zi*zi        # from the state BEFORE this update
        zr, zi = zr*zr - zi*zi + x, 2*zr*zi + y
        iterations += 1

So the escape test always lags one update behind, and the first pass is
unconditional.
"""

from typing import Tuple

import numpy as np

from mandel_golden.fixed_point import ESCAPE_LIMIT, FRAC_BITS, multiply, to_uint64, wrap_int64


def escape_time(x: int, y: int, max_iterations: int) -> Tuple[int, bool]:
    """
    Run the Mandelbrot recurrence for c = x + iy.

    Returns (iterations, escaped). escaped is iterations < max_iterations;
    otherwise the point is presumed interior.
    """
    zr = 0
    zi = 0
    modulus_sq = 0  # unsigned 64-bit
    iterations = 0

    while modulus_sq <= ESCAPE_LIMIT and iterations < max_iterations:
        zr_sq = multiply(zr, zr)
        zi_sq = multiply(zi, zi)
        modulus_sq = to_uint64(zr_sq + zi_sq)
        temp = wrap_int64(zr_sq - zi_sq + x)
        zi = wrap_int64((multiply(zr, zi) << 1) + y)
        zr = temp
        iterations += 1

    return iterations, iterations < max_iterations


def escape_time_grid(xs: np.ndarray, ys: np.ndarray, max_iterations: int) -> np.ndarray:
    """
    Vectorised escape_time over arrays of sample points.

    int64 products wrap exactly like the 64-bit accumulator and >> is an
    arithmetic shift, so no explicit narrowing is needed here. Only points
    still inside the escape radius are updated on each pass.
    """
    xs = np.asarray(xs, dtype=np.int64)
    ys = np.asarray(ys, dtype=np.int64)
    if xs.shape != ys.shape:
        raise ValueError(f"xs and ys differ in shape: {xs.shape} vs {ys.shape}")

    shape = xs.shape
    cx = xs.ravel()
    cy = ys.ravel()

    zr = np.zeros(cx.shape, dtype=np.int64)
    zi = np.zeros(cx.shape, dtype=np.int64)
    modulus_sq = np.zeros(cx.shape, dtype=np.uint64)
    iterations = np.zeros(cx.shape, dtype=np.int32)
    limit = np.uint64(ESCAPE_LIMIT)

    # every live point has iterations == pass, so the pass count bounds the loop
    for _ in range(max_iterations):
        live = np.flatnonzero(modulus_sq <= limit)
        if live.size == 0:
            break

        r = zr[live]
        i = zi[live]
        r_sq = (r * r) >> FRAC_BITS
        i_sq = (i * i) >> FRAC_BITS

        modulus_sq[live] = (r_sq + i_sq).view(np.uint64)
        zi[live] = (((r * i) >> FRAC_BITS) << 1) + cy[live]
        zr[live] = r_sq - i_sq + cx[live]
        iterations[live] += 1

    return iterations.reshape(shape)
