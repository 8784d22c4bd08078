from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Iterator, Optional, Tuple

from fractalzoom.state import RenderState
from fractalzoom.util.logging_setup import get_logger


@dataclass(frozen=True)
class CameraTarget:
    """Where the camera path is heading. ``max_iterations=None`` leaves the cap to the iteration controller."""

    viewport_x: float
    viewport_y: float
    viewport_height: float
    color_density: Optional[float] = None
    max_iterations: Optional[int] = None


# Mandelbrot real-axis antenna, 1e13 deep
DEFAULT_TARGET = CameraTarget(
    viewport_x=-1.7110287606470104826428269,
    viewport_y=0.0003109297379698081368812,
    viewport_height=0.0000000000001705302565824,
    color_density=0.0186927672475576400756836,
    max_iterations=1941,
)


@dataclass(frozen=True)
class Easing:
    """Per-frame divisors: each quantity moves ``(target - current) / divisor`` per step."""

    position: float = 1.0
    height: float = 25.0
    density: float = 25.0
    iterations: int = 25

    def __post_init__(self) -> None:
        for name in ("position", "height", "density", "iterations"):
            if getattr(self, name) < 1:
                raise ValueError(f"easing divisor {name} must be >= 1")


class AnimationDriver:
    """Owns the camera-path state machine and the frame counter of an animation."""

    def __init__(self, state: RenderState, target: CameraTarget = DEFAULT_TARGET, easing: Easing = Easing()):
        if target.viewport_height <= 0:
            raise ValueError("target viewport_height must be > 0")
        self.target = target
        self.easing = easing
        self.frame = 0
        if target.max_iterations is not None:
            state = replace(state, auto_iterations=False)
        self.state = state

    def step(self) -> RenderState:
        s, t, e = self.state, self.target, self.easing
        changes = {
            "viewport_x": s.viewport_x + (t.viewport_x - s.viewport_x) / e.position,
            "viewport_y": s.viewport_y + (t.viewport_y - s.viewport_y) / e.position,
            "viewport_height": s.viewport_height + (t.viewport_height - s.viewport_height) / e.height,
        }
        if t.color_density is not None:
            changes["color_density"] = s.color_density + (t.color_density - s.color_density) / e.density
        if t.max_iterations is not None:
            delta = math.trunc((t.max_iterations - s.max_iterations) / e.iterations)
            changes["max_iterations"] = max(1, s.max_iterations + delta)
        self.state = replace(s, **changes)
        self.frame += 1
        get_logger("animation").debug("Camera frame %s %s", self.frame, self.state.summary())
        return self.state

    def frames(self, count: int) -> Iterator[Tuple[int, RenderState]]:
        """Yield ``count`` frames, starting with the current state."""
        for _ in range(count):
            yield self.frame, self.state
            self.step()
