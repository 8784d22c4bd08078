import pytest

from fractalzoom.state import (
    ASPECT_RATIO,
    BURNING_SHIP,
    MANDELBROT,
    RenderState,
    SampleResult,
    cycle_color_scheme,
    pan,
    reset_view,
    scale_color_density,
    screen_to_world,
    step_stripe_frequency,
    toggle_julia,
    toggle_variant,
    zoom_at,
)


def test_defaults_match_home_view():
    state = RenderState()
    assert (state.viewport_x, state.viewport_y, state.viewport_height) == (-0.5, 0.0, 3.0)
    assert state.viewport_width == pytest.approx(3.0 * ASPECT_RATIO)
    assert state.julia_seed is None
    assert RenderState(julia=True).julia_seed == (-0.8, 0.156)


@pytest.mark.parametrize("kwargs", [
    {"viewport_height": 0.0},
    {"viewport_height": -1.0},
    {"max_iterations": 0},
    {"fractal_variant": 2},
    {"aspect_ratio": 0.0},
])
def test_invariants_enforced(kwargs):
    with pytest.raises(ValueError):
        RenderState(**kwargs)


def test_state_is_immutable():
    with pytest.raises(AttributeError):
        RenderState().viewport_x = 1.0


def test_sample_result_properties():
    assert SampleResult(iteration=-1).interior
    assert SampleResult(iteration=4, stripe_sum=2.0).stripe_average == 0.5
    assert SampleResult(iteration=0, stripe_sum=0.0).stripe_average == 0.0


def test_zoom_keeps_anchor_fixed():
    state = RenderState()
    anchor = screen_to_world(state, 300, 200, 1344, 756)
    zoomed = zoom_at(state, anchor[0], anchor[1], 0.5)
    assert zoomed.viewport_height == 1.5
    assert screen_to_world(zoomed, 300, 200, 1344, 756) == pytest.approx(anchor)
    with pytest.raises(ValueError):
        zoom_at(state, 0.0, 0.0, 0.0)


def test_pan_and_reset():
    state = RenderState(viewport_height=2.0, aspect_ratio=2.0)
    moved = pan(state, 10, -5, 100, 50)
    assert moved.viewport_x == pytest.approx(-0.5 + 10 * 4.0 / 100)
    assert moved.viewport_y == pytest.approx(-5 * 2.0 / 50)
    home = reset_view(zoom_at(moved, 0.3, 0.1, 0.01))
    assert (home.viewport_x, home.viewport_y, home.viewport_height) == (-0.5, 0.0, 3.0)


def test_julia_toggle_remembers_seed_on_the_way_back():
    julia = toggle_julia(RenderState())
    assert julia.julia
    back = toggle_julia(julia, seed=(0.285, 0.01))
    assert not back.julia
    assert (back.julia_x, back.julia_y) == (0.285, 0.01)


def test_simple_toggles():
    state = RenderState()
    assert toggle_variant(state).fractal_variant == BURNING_SHIP
    assert toggle_variant(toggle_variant(state)).fractal_variant == MANDELBROT
    assert cycle_color_scheme(state).color_scheme == 1
    assert cycle_color_scheme(cycle_color_scheme(state)).color_scheme == 0
    assert scale_color_density(state, 1.2).color_density == pytest.approx(0.24)
    assert step_stripe_frequency(state, 1).stripe_frequency == 6.0
    assert step_stripe_frequency(RenderState(stripe_frequency=1.5), -1).stripe_frequency == 1.0


def test_summary_mentions_mode():
    assert "mandelbrot" in RenderState().summary()
    assert "julia" in RenderState(julia=True).summary()
    assert "burning-ship" in RenderState(fractal_variant=BURNING_SHIP).summary()
