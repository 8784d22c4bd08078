from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

MANDELBROT = 0
BURNING_SHIP = 1
FRACTAL_VARIANTS = (MANDELBROT, BURNING_SHIP)

INTERIOR = -1

# 1344x756 window of the desktop explorer
ASPECT_RATIO = 1344.0 / 756.0

HOME_VIEW = (-0.5, 0.0, 3.0)


@dataclass(frozen=True)
class RenderState:
    viewport_x: float = -0.5
    viewport_y: float = 0.0
    viewport_height: float = 3.0
    max_iterations: int = 128
    auto_iterations: bool = True
    color_density: float = 0.2
    color_scheme: int = 0
    julia: bool = False
    julia_x: float = -0.8
    julia_y: float = 0.156
    fractal_variant: int = MANDELBROT
    stripes: bool = False
    stripe_frequency: float = 5.0
    stripe_intensity: float = 10.0
    interior_coloring: bool = False
    anti_aliasing: bool = False
    aspect_ratio: float = ASPECT_RATIO

    def __post_init__(self) -> None:
        if not self.viewport_height > 0:
            raise ValueError(f"viewport_height must be > 0, got {self.viewport_height}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.fractal_variant not in FRACTAL_VARIANTS:
            raise ValueError(f"fractal_variant must be one of {FRACTAL_VARIANTS}, got {self.fractal_variant}")
        if not self.aspect_ratio > 0:
            raise ValueError(f"aspect_ratio must be > 0, got {self.aspect_ratio}")

    @property
    def viewport_width(self) -> float:
        return self.viewport_height * self.aspect_ratio

    @property
    def julia_seed(self) -> Optional[Tuple[float, float]]:
        return (self.julia_x, self.julia_y) if self.julia else None

    def summary(self) -> str:
        mode = "julia(%s,%s)" % (self.julia_x, self.julia_y) if self.julia else "mandelbrot"
        variant = "burning-ship" if self.fractal_variant == BURNING_SHIP else "standard"
        return (
            f"center=({self.viewport_x!r},{self.viewport_y!r}) height={self.viewport_height:.6g} "
            f"iter={self.max_iterations} mode={mode} variant={variant} scheme={self.color_scheme} "
            f"stripes={self.stripes} interior={self.interior_coloring} aa={self.anti_aliasing}"
        )


@dataclass(frozen=True)
class SampleResult:
    iteration: int
    smooth_iteration: float = 0.0
    stripe_sum: float = 0.0

    @property
    def interior(self) -> bool:
        return self.iteration == INTERIOR

    @property
    def stripe_average(self) -> float:
        return self.stripe_sum / max(self.iteration, 1)


def screen_to_world(state: RenderState, px: float, py: float, width: int, height: int) -> Tuple[float, float]:
    # Mouse positions map from the pixel corner, not the pixel centre
    x = state.viewport_x - state.viewport_width / 2 + px * state.viewport_width / width
    y = state.viewport_y - state.viewport_height / 2 + py * state.viewport_height / height
    return x, y


def zoom_at(state: RenderState, world_x: float, world_y: float, factor: float) -> RenderState:
    if factor <= 0:
        raise ValueError("zoom factor must be > 0")
    return replace(
        state,
        viewport_x=world_x + (state.viewport_x - world_x) * factor,
        viewport_y=world_y + (state.viewport_y - world_y) * factor,
        viewport_height=state.viewport_height * factor,
    )


def pan(state: RenderState, dx_pixels: float, dy_pixels: float, width: int, height: int) -> RenderState:
    return replace(
        state,
        viewport_x=state.viewport_x + dx_pixels * state.viewport_width / width,
        viewport_y=state.viewport_y + dy_pixels * state.viewport_height / height,
    )


def reset_view(state: RenderState) -> RenderState:
    x, y, h = HOME_VIEW
    return replace(state, viewport_x=x, viewport_y=y, viewport_height=h)


def cycle_color_scheme(state: RenderState, palette_count: Optional[int] = None) -> RenderState:
    if palette_count is None:
        from fractalzoom.palette import PALETTES
        palette_count = len(PALETTES)
    return replace(state, color_scheme=(state.color_scheme + 1) % palette_count)


def toggle_julia(state: RenderState, seed: Optional[Tuple[float, float]] = None) -> RenderState:
    """Flip between Mandelbrot and Julia mode.

    Leaving Julia mode with a ``seed`` stores it, so the next switch shows the
    Julia set of the point that was under the cursor.
    """
    if state.julia and seed is not None:
        return replace(state, julia=False, julia_x=seed[0], julia_y=seed[1])
    return replace(state, julia=not state.julia)


def toggle_variant(state: RenderState) -> RenderState:
    return replace(state, fractal_variant=(state.fractal_variant + 1) % len(FRACTAL_VARIANTS))


def scale_color_density(state: RenderState, factor: float) -> RenderState:
    return replace(state, color_density=state.color_density * factor)


def step_stripe_frequency(state: RenderState, delta: float) -> RenderState:
    return replace(state, stripe_frequency=max(1.0, state.stripe_frequency + delta))
