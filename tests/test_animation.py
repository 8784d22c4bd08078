import pytest

from fractalzoom.animation import DEFAULT_TARGET, AnimationDriver, CameraTarget, Easing
from fractalzoom.state import MANDELBROT, RenderState


def test_default_path_jumps_position_and_eases_depth():
    driver = AnimationDriver(RenderState())
    state = driver.step()
    assert driver.frame == 1
    assert (state.viewport_x, state.viewport_y) == pytest.approx((DEFAULT_TARGET.viewport_x, DEFAULT_TARGET.viewport_y))
    assert state.viewport_height == pytest.approx(3.0 + (DEFAULT_TARGET.viewport_height - 3.0) / 25)
    assert state.max_iterations == 128 + (1941 - 128) // 25
    assert not state.auto_iterations


def test_path_converges_monotonically():
    target = CameraTarget(-0.75, 0.1, 1e-4, color_density=1.0, max_iterations=500)
    driver = AnimationDriver(RenderState(), target, Easing(position=4.0, height=10.0, density=5.0, iterations=10))
    heights, xs, iters = [], [], []
    for _, state in driver.frames(200):
        heights.append(state.viewport_height)
        xs.append(state.viewport_x)
        iters.append(state.max_iterations)
    assert driver.frame == 200
    assert all(a >= b for a, b in zip(heights, heights[1:]))
    assert all(a >= b for a, b in zip(xs, xs[1:]))
    assert all(a <= b for a, b in zip(iters, iters[1:]))
    assert heights[-1] == pytest.approx(1e-4, rel=1e-3)
    assert xs[-1] == pytest.approx(-0.75)
    assert driver.state.viewport_height > 0


def test_frames_start_with_current_state():
    start = RenderState(viewport_x=0.1)
    driver = AnimationDriver(start, CameraTarget(0.0, 0.0, 1.0))
    frames = list(driver.frames(3))
    assert [i for i, _ in frames] == [0, 1, 2]
    assert frames[0][1] == start


def test_open_iteration_target_keeps_auto_mode():
    driver = AnimationDriver(RenderState(), CameraTarget(0.0, 0.0, 1.0))
    state = driver.step()
    assert state.auto_iterations
    assert state.max_iterations == 128
    assert state.color_density == 0.2


def test_invalid_configuration():
    with pytest.raises(ValueError):
        Easing(height=0.5)
    with pytest.raises(ValueError):
        AnimationDriver(RenderState(), CameraTarget(0.0, 0.0, 0.0))


def test_default_path_stays_on_the_standard_mandelbrot():
    driver = AnimationDriver(RenderState())
    for _, state in driver.frames(5):
        assert state.fractal_variant == MANDELBROT
        assert not state.julia
