from __future__ import annotations

import math
from typing import Optional, Tuple

import numpy as np
from numba import njit

from fractalzoom.state import BURNING_SHIP, FRACTAL_VARIANTS, INTERIOR, MANDELBROT, SampleResult

ESCAPE_RADIUS = 100.0
ESCAPE_RADIUS_SQUARED = ESCAPE_RADIUS * ESCAPE_RADIUS
LOG2 = math.log(2.0)


@njit(nogil=True)
def in_main_bulbs(cr, ci):
    xq = cr - 0.25
    q = xq * xq + ci * ci
    if q * (q + xq) < 0.25 * ci * ci:
        return True
    return (cr + 1.0) * (cr + 1.0) + ci * ci < 0.0625


@njit(nogil=True)
def smooth_escape(iteration, magnitude_squared):
    log_zn = math.log(magnitude_squared) / 2.0 if magnitude_squared > 0.0 else 0.0
    if log_zn <= 1e-9:
        return float(iteration)
    return iteration + 1.0 - math.log(log_zn) / LOG2


@njit(nogil=True)
def escape_time(real, imag, variant, julia, julia_x, julia_y, max_iterations,
                stripes, stripe_frequency, interior_coloring, prune):
    # (iteration, smooth_iteration, stripe_sum); INTERIOR when pruned, or capped without interior colouring
    if julia:
        zr, zi = real, imag
        cr, ci = julia_x, julia_y
    else:
        zr, zi = 0.0, 0.0
        cr, ci = real, imag

    if prune and not interior_coloring and not julia and variant == MANDELBROT:
        if in_main_bulbs(cr, ci):
            return INTERIOR, 0.0, 0.0

    zr2 = zr * zr
    zi2 = zi * zi
    # single precision, like the colour metric it feeds
    stripe_sum = np.float32(0.0)
    i = 0
    while zr2 + zi2 < ESCAPE_RADIUS_SQUARED:
        cross = zr * zi
        if variant == BURNING_SHIP:
            cross = abs(cross)
        zi = 2.0 * cross + ci
        zr = zr2 - zi2 + cr
        zr2 = zr * zr
        zi2 = zi * zi
        if stripes:
            s = np.float32(math.sin(math.atan2(zi, zr) * stripe_frequency))
            stripe_sum += s * s
        i += 1
        # the cap wins over an escape on the same step
        if i == max_iterations:
            if interior_coloring:
                return i, smooth_escape(i, zr2 + zi2), float(stripe_sum)
            return INTERIOR, 0.0, 0.0

    return i, smooth_escape(i, zr2 + zi2), float(stripe_sum)


def evaluate(
    real: float,
    imag: float,
    fractal_variant: int = MANDELBROT,
    julia_seed: Optional[Tuple[float, float]] = None,
    max_iterations: int = 128,
    stripes: bool = False,
    stripe_frequency: float = 5.0,
    interior_coloring: bool = False,
    *,
    prune: bool = True,
) -> SampleResult:
    if fractal_variant not in FRACTAL_VARIANTS:
        raise ValueError(f"unknown fractal variant {fractal_variant!r}")
    if max_iterations < 1:
        raise ValueError("max_iterations must be >= 1")
    julia = julia_seed is not None
    jx, jy = julia_seed if julia else (0.0, 0.0)
    iteration, smooth, stripe_sum = escape_time(
        float(real), float(imag), int(fractal_variant), julia, float(jx), float(jy), int(max_iterations),
        bool(stripes), float(stripe_frequency), bool(interior_coloring), bool(prune),
    )
    return SampleResult(iteration=int(iteration), smooth_iteration=float(smooth), stripe_sum=float(stripe_sum))
