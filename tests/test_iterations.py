from fractalzoom.iterations import (
    adjust_iterations,
    auto_iteration_cap,
    decrease_iterations,
    increase_iterations,
    toggle_auto_iterations,
)
from fractalzoom.state import RenderState


def test_home_zoom_is_clamped_to_minimum():
    state = adjust_iterations(RenderState(viewport_height=3.0, max_iterations=7))
    assert state.max_iterations == 100


def test_deep_zoom_grows_logarithmically():
    assert adjust_iterations(RenderState(viewport_height=3e-10)).max_iterations == 1000
    assert auto_iteration_cap(3e-3) == 300


def test_cap_is_bounded_above():
    assert auto_iteration_cap(3e-200) == 10000


def test_manual_mode_is_left_alone():
    state = RenderState(viewport_height=3e-10, max_iterations=42, auto_iterations=False)
    assert adjust_iterations(state) is state


def test_manual_stepping_disables_auto():
    state = RenderState(max_iterations=100)
    up = increase_iterations(state)
    assert (up.max_iterations, up.auto_iterations) == (150, False)
    down = decrease_iterations(RenderState(max_iterations=60))
    assert (down.max_iterations, down.auto_iterations) == (50, False)
    assert decrease_iterations(RenderState(max_iterations=300)).max_iterations == 200


def test_toggle_back_to_auto_reapplies_the_cap():
    manual = RenderState(viewport_height=3e-10, max_iterations=42, auto_iterations=False)
    assert toggle_auto_iterations(manual).max_iterations == 1000
    auto = RenderState(viewport_height=3e-10, max_iterations=42, auto_iterations=True)
    off = toggle_auto_iterations(auto)
    assert (off.auto_iterations, off.max_iterations) == (False, 42)
