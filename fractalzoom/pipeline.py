from __future__ import annotations

import math
import os
import time
from typing import Any, Dict, Optional

from PIL import Image
from tqdm import tqdm

from fractalzoom.animation import AnimationDriver
from fractalzoom.iterations import adjust_iterations
from fractalzoom.renderers.tiled import PixelBuffer, TiledRenderer
from fractalzoom.state import RenderState
from fractalzoom.util.logging_setup import get_logger

def _ensure_dir(path: str) -> None:
    if path:
        os.makedirs(path, exist_ok=True)

def _save_frame(img: Image.Image, frames_dir: str, frame_index: int) -> str:
    path = os.path.join(frames_dir, f"frame_{frame_index:06d}.png")
    img.save(path, format="PNG", optimize=True)
    return path

def render_image(
    state: RenderState,
    width: int,
    height: int,
    *,
    renderer: TiledRenderer,
    preview_scale: int = 1,
    frame_id: Optional[str] = None,
) -> Image.Image:
    """Render one frame to a Pillow image.

    With ``preview_scale > 1`` the frame is computed at a reduced resolution
    and scaled back up, trading detail for a proportionally faster render.
    """
    if preview_scale < 1:
        raise ValueError("preview_scale must be >= 1")
    if preview_scale == 1:
        buffer = renderer.render(PixelBuffer(width, height), state, frame_id=frame_id)
        return buffer.to_image()
    small_w = max(1, math.ceil(width / preview_scale))
    small_h = max(1, math.ceil(height / preview_scale))
    buffer = renderer.render(PixelBuffer(small_w, small_h), state, frame_id=frame_id)
    return buffer.to_image().resize((width, height), Image.NEAREST)

def render_preview(state: RenderState, width: int, height: int, scale: int, *, workers: Optional[int] = None) -> Image.Image:
    with TiledRenderer(workers) as renderer:
        return render_image(state, width, height, renderer=renderer, preview_scale=scale)

def render_still(
    state: RenderState,
    width: int,
    height: int,
    path: str,
    *,
    workers: Optional[int] = None,
    preview_scale: int = 1,
) -> str:
    logger = get_logger("pipeline")
    state = adjust_iterations(state)
    _ensure_dir(os.path.dirname(path))

    logger.info("Render still %sx%s preview_scale=%s %s", width, height, preview_scale, state.summary())
    start = time.perf_counter()
    with TiledRenderer(workers) as renderer:
        img = render_image(state, width, height, renderer=renderer, preview_scale=preview_scale, frame_id="still")
    elapsed = time.perf_counter() - start

    img.save(path, format="PNG", optimize=True)
    logger.info("Saved still -> %s (%.0fms, workers=%s)", path, elapsed * 1000.0, renderer.workers)
    return path

def render_sequence(
    *,
    driver: AnimationDriver,
    frame_count: int,
    width: int,
    height: int,
    frames_dir: str,
    workers: Optional[int] = None,
    progress: bool = True,
) -> Dict[str, Any]:
    logger = get_logger("pipeline")
    if frame_count <= 0:
        raise ValueError("frame_count must be positive.")
    _ensure_dir(frames_dir)

    logger.info("Render start frames=%s size=%sx%s target=(%r,%r,%g) frames_dir=%s",
                frame_count, width, height, driver.target.viewport_x, driver.target.viewport_y,
                driver.target.viewport_height, frames_dir)

    with TiledRenderer(workers) as renderer:
        buffer = PixelBuffer(width, height)
        for i, state in tqdm(driver.frames(frame_count), total=frame_count, disable=not progress, unit="frame"):
            state = adjust_iterations(state)
            frame_id = f"{i:06d}"
            start = time.perf_counter()
            renderer.render(buffer, state, frame_id=frame_id)
            path = _save_frame(buffer.to_image(), frames_dir, i)
            logger.info("Saved frame %s -> %s (%.0fms height=%.6g iter=%s)",
                        i, path, (time.perf_counter() - start) * 1000.0, state.viewport_height, state.max_iterations)
        used_workers = renderer.workers

    logger.info("Render complete frames_dir=%s", frames_dir)
    return {"frames_dir": frames_dir, "total_frames": frame_count, "width": width, "height": height, "workers": used_workers}
