from __future__ import annotations

from typing import Tuple

from numba import njit

from fractalzoom.palette import RGB, palette_for_scheme, shade_sample
from fractalzoom.renderers.escape import escape_time
from fractalzoom.state import RenderState

# Highest anti-aliasing level; the grid is (AA_MAX_SAMPLES + 1) squared
AA_MAX_SAMPLES = 6
AA_SAMPLES = AA_MAX_SAMPLES + 1


@njit(nogil=True)
def pixel_sample(table, left, top, pixel_width, pixel_height, px, py, offset_x, offset_y,
                 variant, julia, julia_x, julia_y, max_iterations, stripes, stripe_frequency,
                 stripe_intensity, color_density, interior_coloring):
    cr = left + (px + offset_x) * pixel_width
    ci = top + (py + offset_y) * pixel_height
    iteration, smooth, stripe_sum = escape_time(
        cr, ci, variant, julia, julia_x, julia_y, max_iterations,
        stripes, stripe_frequency, interior_coloring, True,
    )
    return shade_sample(table, iteration, smooth, stripe_sum, stripes, stripe_intensity, color_density)


@njit(nogil=True)
def supersample(table, left, top, pixel_width, pixel_height, px, py, samples,
                variant, julia, julia_x, julia_y, max_iterations, stripes, stripe_frequency,
                stripe_intensity, color_density, interior_coloring):
    total_r = 0
    total_g = 0
    total_b = 0
    for sy in range(samples):
        offset_y = (sy + 0.5) / samples
        for sx in range(samples):
            offset_x = (sx + 0.5) / samples
            r, g, b = pixel_sample(
                table, left, top, pixel_width, pixel_height, px, py, offset_x, offset_y,
                variant, julia, julia_x, julia_y, max_iterations, stripes, stripe_frequency,
                stripe_intensity, color_density, interior_coloring,
            )
            total_r += r
            total_g += g
            total_b += b
    count = samples * samples
    return total_r // count, total_g // count, total_b // count


def frame_geometry(state: RenderState, width: int, height: int) -> Tuple[float, float, float, float]:
    if width <= 0 or height <= 0:
        raise ValueError(f"image size must be positive, got {width}x{height}")
    view_w = state.viewport_width
    view_h = state.viewport_height
    return (
        state.viewport_x - view_w / 2,
        state.viewport_y - view_h / 2,
        view_w / width,
        view_h / height,
    )


def pixel_to_world(state: RenderState, px: float, py: float, width: int, height: int,
                   offset_x: float = 0.5, offset_y: float = 0.5) -> Tuple[float, float]:
    left, top, pixel_width, pixel_height = frame_geometry(state, width, height)
    return left + (px + offset_x) * pixel_width, top + (py + offset_y) * pixel_height


def kernel_arguments(state: RenderState) -> tuple:
    # same order as the trailing pixel kernel arguments
    return (
        int(state.fractal_variant), bool(state.julia), float(state.julia_x), float(state.julia_y),
        int(state.max_iterations), bool(state.stripes), float(state.stripe_frequency),
        float(state.stripe_intensity), float(state.color_density), bool(state.interior_coloring),
    )


def single_sample_color(px: int, py: int, state: RenderState, width: int, height: int) -> RGB:
    table = palette_for_scheme(state.color_scheme).table
    left, top, pixel_width, pixel_height = frame_geometry(state, width, height)
    return pixel_sample(table, left, top, pixel_width, pixel_height, int(px), int(py), 0.5, 0.5,
                        *kernel_arguments(state))


def sample_color(px: int, py: int, state: RenderState, width: int, height: int,
                 samples: int = AA_SAMPLES) -> RGB:
    """Anti-aliased colour of a pixel: mean of a regular ``samples`` x ``samples`` grid.

    Channels are averaged with integer division, so the mean is truncated.
    """
    if samples < 1:
        raise ValueError("samples must be >= 1")
    table = palette_for_scheme(state.color_scheme).table
    left, top, pixel_width, pixel_height = frame_geometry(state, width, height)
    return supersample(table, left, top, pixel_width, pixel_height, int(px), int(py), int(samples),
                       *kernel_arguments(state))
