"""Iteration cap policy: automatic scaling with zoom depth, plus manual stepping."""

from __future__ import annotations

import math
from dataclasses import replace

from fractalzoom.state import RenderState

BASE_VIEWPORT_HEIGHT = 3.0
MIN_AUTO_ITERATIONS = 100
MAX_AUTO_ITERATIONS = 10000
MIN_MANUAL_ITERATIONS = 50
MANUAL_STEP = 1.5


def auto_iteration_cap(viewport_height: float) -> int:
    zoom_factor = BASE_VIEWPORT_HEIGHT / viewport_height
    cap = int(100 * math.log10(1 + zoom_factor))
    return max(MIN_AUTO_ITERATIONS, min(MAX_AUTO_ITERATIONS, cap))


def adjust_iterations(state: RenderState) -> RenderState:
    """Return ``state`` with ``max_iterations`` tracking the zoom depth, if auto-iterations is on."""
    if not state.auto_iterations:
        return state
    return replace(state, max_iterations=auto_iteration_cap(state.viewport_height))


def increase_iterations(state: RenderState) -> RenderState:
    return replace(state, max_iterations=int(state.max_iterations * MANUAL_STEP), auto_iterations=False)


def decrease_iterations(state: RenderState) -> RenderState:
    return replace(
        state,
        max_iterations=max(MIN_MANUAL_ITERATIONS, int(state.max_iterations / MANUAL_STEP)),
        auto_iterations=False,
    )


def toggle_auto_iterations(state: RenderState) -> RenderState:
    return adjust_iterations(replace(state, auto_iterations=not state.auto_iterations))
