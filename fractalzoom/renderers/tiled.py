from __future__ import annotations

import os
import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import List, Optional, Tuple

import numpy as np
from numba import njit
from PIL import Image

from fractalzoom.palette import palette_for_scheme
from fractalzoom.renderers.supersample import AA_SAMPLES, frame_geometry, kernel_arguments, pixel_sample, supersample
from fractalzoom.state import RenderState
from fractalzoom.util.logging_setup import frame_logger

FALLBACK_WORKERS = 8


class RenderError(RuntimeError):
    """A band worker failed; the frame in the buffer must not be used."""


class PixelBuffer:
    def __init__(self, width: int, height: int, data: Optional[np.ndarray] = None):
        if width <= 0 or height <= 0:
            raise ValueError(f"buffer size must be positive, got {width}x{height}")
        if data is None:
            data = np.zeros((height, width, 4), dtype=np.uint8)
        elif data.shape != (height, width, 4) or data.dtype != np.uint8 or not data.flags.c_contiguous:
            raise ValueError(f"buffer array must be C-contiguous uint8 of shape {(height, width, 4)}, "
                             f"got {data.dtype} {data.shape}")
        self.width = int(width)
        self.height = int(height)
        self.data = data

    def __len__(self) -> int:
        return self.data.size

    def tobytes(self) -> bytes:
        return self.data.tobytes()

    def to_image(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.data[..., :3]))


def default_workers() -> int:
    return os.cpu_count() or FALLBACK_WORKERS


def partition_rows(height: int, bands: int) -> List[Tuple[int, int]]:
    if bands < 1:
        raise ValueError("bands must be >= 1")
    rows = height // bands
    out = []
    for i in range(bands):
        y0 = i * rows
        y1 = height if i == bands - 1 else (i + 1) * rows
        out.append((y0, y1))
    return out


@njit(nogil=True)
def render_band(pixels, start_y, end_y, table, left, top, pixel_width, pixel_height,
                anti_aliasing, samples, variant, julia, julia_x, julia_y, max_iterations,
                stripes, stripe_frequency, stripe_intensity, color_density, interior_coloring):
    width = pixels.shape[1]
    for y in range(start_y, end_y):
        for x in range(width):
            if anti_aliasing:
                r, g, b = supersample(
                    table, left, top, pixel_width, pixel_height, x, y, samples,
                    variant, julia, julia_x, julia_y, max_iterations, stripes, stripe_frequency,
                    stripe_intensity, color_density, interior_coloring,
                )
            else:
                r, g, b = pixel_sample(
                    table, left, top, pixel_width, pixel_height, x, y, 0.5, 0.5,
                    variant, julia, julia_x, julia_y, max_iterations, stripes, stripe_frequency,
                    stripe_intensity, color_density, interior_coloring,
                )
            pixels[y, x, 0] = r
            pixels[y, x, 1] = g
            pixels[y, x, 2] = b
            pixels[y, x, 3] = 255


class TiledRenderer:
    """Renders frames as horizontal bands over a fixed pool of worker threads.

    The pool is created once and reused for every frame; call ``close`` (or
    use the renderer as a context manager) to release it.
    """

    def __init__(self, workers: Optional[int] = None, *, samples: int = AA_SAMPLES):
        n = default_workers() if workers is None else int(workers)
        if n < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        if samples < 1:
            raise ValueError(f"samples must be >= 1, got {samples}")
        self.workers = n
        self.samples = int(samples)
        self._pool = ThreadPoolExecutor(max_workers=n, thread_name_prefix="band")

    def __enter__(self) -> "TiledRenderer":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._pool.shutdown(wait=True)

    def render(self, buffer: PixelBuffer, state: RenderState, *, frame_id: Optional[str] = None) -> PixelBuffer:
        logger = frame_logger("render", frame_id)
        left, top, pixel_width, pixel_height = frame_geometry(state, buffer.width, buffer.height)
        table = palette_for_scheme(state.color_scheme).table
        params = kernel_arguments(state)

        logger.debug("render start %sx%s workers=%s %s",
                     buffer.width, buffer.height, self.workers, state.summary())
        start = time.perf_counter()

        futures = []
        for y0, y1 in partition_rows(buffer.height, self.workers):
            if y0 == y1:
                continue
            futures.append(self._pool.submit(
                render_band, buffer.data, y0, y1, table, left, top, pixel_width, pixel_height,
                bool(state.anti_aliasing), self.samples, *params,
            ))
        wait(futures)

        for future in futures:
            exc = future.exception()
            if exc is not None:
                logger.error("band worker failed: %r", exc, exc_info=exc)
                raise RenderError(f"band worker failed: {exc}") from exc

        logger.debug("render done in %.1fms", (time.perf_counter() - start) * 1000.0)
        return buffer


def render_frame(state: RenderState, width: int, height: int, workers: Optional[int] = None) -> PixelBuffer:
    buffer = PixelBuffer(width, height)
    with TiledRenderer(workers) as renderer:
        renderer.render(buffer, state)
    return buffer
