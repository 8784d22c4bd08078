from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence, Tuple, Union

import numpy as np
from numba import njit

from fractalzoom.state import INTERIOR, RenderState, SampleResult

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class ColorPalette:
    name: str
    stops: Tuple[RGB, ...]
    table: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.stops:
            raise ValueError(f"palette {self.name!r} has no colour stops")
        for stop in self.stops:
            if len(stop) != 3 or any(not 0 <= int(c) <= 255 for c in stop):
                raise ValueError(f"palette {self.name!r} has an invalid stop {stop!r}")
        table = np.array(self.stops, dtype=np.int64).reshape(len(self.stops), 3)
        table.setflags(write=False)
        object.__setattr__(self, "table", table)

    def __len__(self) -> int:
        return len(self.stops)


PALETTES = [
    ColorPalette("ultra", (
        (66, 30, 15), (25, 7, 26), (9, 1, 47),
        (4, 4, 73), (0, 7, 100), (12, 44, 138),
        (24, 82, 177), (57, 125, 209), (134, 181, 229),
        (211, 236, 248), (241, 233, 191), (248, 201, 95),
        (255, 170, 0), (204, 128, 0), (153, 87, 0),
    )),
    ColorPalette("mono", ((0, 0, 0), (255, 255, 255))),
]


def palette_for_scheme(scheme: int) -> ColorPalette:
    return PALETTES[scheme % len(PALETTES)]


@njit(nogil=True)
def interpolate_table(table, metric):
    n = table.shape[0]
    base = math.floor(metric)
    index = int(base) % n
    if index < 0:
        index += n
    following = (index + 1) % n
    fraction = metric - base
    r = int(table[index, 0] + fraction * (table[following, 0] - table[index, 0]))
    g = int(table[index, 1] + fraction * (table[following, 1] - table[index, 1]))
    b = int(table[index, 2] + fraction * (table[following, 2] - table[index, 2]))
    return r, g, b


@njit(nogil=True)
def shade_sample(table, iteration, smooth_iteration, stripe_sum, stripes, stripe_intensity, color_density):
    if iteration == INTERIOR:
        return 0, 0, 0
    if stripes:
        metric = np.float32(stripe_intensity * (stripe_sum / max(iteration, 1)))
    else:
        metric = np.float32(smooth_iteration * color_density)
    return interpolate_table(table, float(metric))


def _as_palette(palette: Union[ColorPalette, Sequence[RGB]]) -> ColorPalette:
    if isinstance(palette, ColorPalette):
        return palette
    return ColorPalette("custom", tuple(tuple(int(c) for c in stop) for stop in palette))


def color_for(metric: float, palette: Union[ColorPalette, Sequence[RGB]]) -> RGB:
    return interpolate_table(_as_palette(palette).table, float(metric))


def sample_metric(result: SampleResult, state: RenderState) -> float:
    """Palette position of a sample, rounded to single precision like the kernels."""
    if state.stripes:
        return float(np.float32(state.stripe_intensity * result.stripe_average))
    return float(np.float32(result.smooth_iteration * state.color_density))


def shade(result: SampleResult, state: RenderState, palette: Union[ColorPalette, Sequence[RGB], None] = None) -> RGB:
    if result.interior:
        return (0, 0, 0)
    table = palette_for_scheme(state.color_scheme) if palette is None else _as_palette(palette)
    return color_for(sample_metric(result, state), table)
