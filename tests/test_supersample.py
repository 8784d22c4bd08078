import pytest

from fractalzoom.palette import shade
from fractalzoom.renderers.escape import evaluate
from fractalzoom.renderers.supersample import (
    AA_SAMPLES,
    frame_geometry,
    pixel_to_world,
    sample_color,
    single_sample_color,
)
from fractalzoom.state import RenderState

WIDTH, HEIGHT = 48, 27
PIXELS = [(0, 0), (5, 3), (24, 13), (47, 26), (31, 20)]


def reference_color(px, py, state, samples, width=WIDTH, height=HEIGHT):
    totals = [0, 0, 0]
    for sy in range(samples):
        for sx in range(samples):
            x, y = pixel_to_world(state, px, py, width, height, (sx + 0.5) / samples, (sy + 0.5) / samples)
            result = evaluate(x, y, state.fractal_variant, state.julia_seed, state.max_iterations,
                              state.stripes, state.stripe_frequency, state.interior_coloring)
            for channel, value in enumerate(shade(result, state)):
                totals[channel] += value
    return tuple(t // (samples * samples) for t in totals)


def test_pixel_to_world_maps_pixel_centres():
    state = RenderState(viewport_x=1.0, viewport_y=-2.0, viewport_height=2.0, aspect_ratio=2.0)
    assert pixel_to_world(state, 0, 0, 4, 2) == pytest.approx((1.0 - 2.0 + 0.5, -2.0 - 1.0 + 0.5))
    assert pixel_to_world(state, 3, 1, 4, 2, 0.0, 0.0) == pytest.approx((2.0, -2.0))


def test_frame_geometry_rejects_empty_images():
    with pytest.raises(ValueError):
        frame_geometry(RenderState(), 0, 10)


def test_one_by_one_grid_equals_single_sample(small_states):
    for state in small_states:
        for px, py in PIXELS:
            assert sample_color(px, py, state, WIDTH, HEIGHT, samples=1) == single_sample_color(px, py, state, WIDTH, HEIGHT)


def test_single_sample_matches_evaluator(small_states):
    for state in small_states:
        for px, py in PIXELS:
            assert single_sample_color(px, py, state, WIDTH, HEIGHT) == reference_color(px, py, state, 1)


@pytest.mark.parametrize("samples", [2, 3])
def test_grid_mean_is_truncated(small_states, samples):
    for state in small_states:
        for px, py in PIXELS:
            assert sample_color(px, py, state, WIDTH, HEIGHT, samples=samples) == reference_color(px, py, state, samples)


def test_default_grid_and_determinism():
    state = RenderState(auto_iterations=False, max_iterations=64, viewport_height=0.5, viewport_x=-0.75, viewport_y=0.1)
    first = sample_color(10, 10, state, 32, 18)
    assert AA_SAMPLES == 7
    assert first == sample_color(10, 10, state, 32, 18)
    assert first == reference_color(10, 10, state, AA_SAMPLES, 32, 18)


def test_invalid_sample_count():
    with pytest.raises(ValueError):
        sample_color(0, 0, RenderState(), 4, 4, samples=0)
