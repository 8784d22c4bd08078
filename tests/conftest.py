import pytest

from fractalzoom.state import RenderState


@pytest.fixture
def home_state():
    return RenderState(auto_iterations=False, max_iterations=128)


@pytest.fixture
def small_states():
    """A spread of settings that exercise every branch of the pixel kernels."""
    return [
        RenderState(auto_iterations=False, max_iterations=64),
        RenderState(auto_iterations=False, max_iterations=64, stripes=True, color_scheme=1),
        RenderState(auto_iterations=False, max_iterations=64, julia=True, viewport_x=0.0, viewport_height=3.2),
        RenderState(auto_iterations=False, max_iterations=64, fractal_variant=1,
                    viewport_x=-1.75, viewport_y=-0.03, viewport_height=0.15),
        RenderState(auto_iterations=False, max_iterations=40, interior_coloring=True, stripes=True),
        RenderState(auto_iterations=False, max_iterations=32, anti_aliasing=True),
    ]
