from __future__ import annotations

import argparse
import logging
import subprocess
import time
from typing import Any, Dict, Optional

from fractalzoom.animation import AnimationDriver
from fractalzoom.config import load_config, normalise_config, state_from_config, target_from_config
from fractalzoom.pipeline import render_sequence, render_still
from fractalzoom.renderers.tiled import default_workers
from fractalzoom.state import RenderState
from fractalzoom.util.logging_setup import close_handlers, configure_root_logging, get_logger
from fractalzoom.util.manifest import build_manifest, write_manifest
from fractalzoom.video.opencv_writer import encode_with_opencv

def _git_commit() -> Optional[str]:
    try:
        r = subprocess.run(["git", "rev-parse", "HEAD"], capture_output=True, text=True, check=True)
        return r.stdout.strip()
    except (OSError, subprocess.CalledProcessError):
        return None

def _add_view_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--width", type=int, default=None, help="Image width in pixels.")
    p.add_argument("--height", type=int, default=None, help="Image height in pixels.")
    p.add_argument("--workers", type=int, default=None, help="Render threads (defaults to the CPU count).")
    p.add_argument("--center", type=float, nargs=2, metavar=("RE", "IM"), default=None, help="Viewport centre.")
    p.add_argument("--viewport-height", type=float, default=None, help="Viewport height in the complex plane.")
    p.add_argument("--iterations", type=int, default=None, help="Fixed iteration cap (disables auto iterations).")
    p.add_argument("--scheme", type=int, default=None, help="Colour palette index.")
    p.add_argument("--density", type=float, default=None, help="Colour density multiplier.")
    p.add_argument("--julia", type=float, nargs=2, metavar=("RE", "IM"), default=None, help="Render the Julia set of this seed.")
    p.add_argument("--burning-ship", action="store_true", help="Use the Burning-Ship iteration.")
    p.add_argument("--stripes", action="store_true", help="Stripe-average colouring.")
    p.add_argument("--interior", action="store_true", help="Colour interior points instead of leaving them black.")
    p.add_argument("--aa", action="store_true", help="Supersampled anti-aliasing.")

def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="fractalzoom", description="Escape-time fractal renderer (Mandelbrot / Burning Ship / Julia).")
    p.add_argument("--config", type=str, default=None, help="Path to config JSON. If omitted, built-in defaults are used.")
    p.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG","INFO","WARNING","ERROR"], help="Log level.")
    p.add_argument("--log-file", type=str, default="fractalzoom.log", help="Log file path (rotating). Set empty to disable file logging.")
    p.add_argument("--manifest", type=str, default="artifacts/run.json", help="Run manifest path. Set empty to skip.")
    sub = p.add_subparsers(dest="cmd", required=True)

    r = sub.add_parser("render", help="Render a single image.")
    _add_view_arguments(r)
    r.add_argument("--output", type=str, default=None, help="Output PNG (defaults to config.output_image).")
    r.add_argument("--preview-scale", type=int, default=None, help="Render at 1/N resolution and upscale.")

    a = sub.add_parser("animate", help="Render a camera-path zoom to the frames directory.")
    _add_view_arguments(a)
    a.add_argument("--frames", type=int, default=None, help="Number of frames (defaults to config.frames).")
    a.add_argument("--frames-dir", type=str, default=None, help="Override frames_dir from config.")
    a.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")

    e = sub.add_parser("encode", help="Encode frames into an MP4 video using OpenCV.")
    e.add_argument("--input-dir", type=str, default=None, help="Frames directory (defaults to config.frames_dir).")
    e.add_argument("--output", type=str, default=None, help="Output MP4 file (defaults to config.output_video).")
    e.add_argument("--fps", type=int, default=None, help="Frames per second (defaults to config.fps).")

    return p

def _apply_overrides(cfg: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    out = dict(cfg)
    if args.width:
        out["width"] = args.width
    if args.height:
        out["height"] = args.height
    if args.workers:
        out["workers"] = args.workers
    if args.center:
        out["center"] = list(args.center)
    if args.viewport_height:
        out["viewport_height"] = args.viewport_height
    if args.iterations:
        out["max_iterations"] = args.iterations
        out["auto_iterations"] = False
    if args.scheme is not None:
        out["color_scheme"] = args.scheme
    if args.density:
        out["color_density"] = args.density
    if args.julia:
        out["julia"] = True
        out["julia_seed"] = list(args.julia)
    if args.burning_ship:
        out["fractal_variant"] = 1
    if args.stripes:
        out["stripes"] = True
    if args.interior:
        out["interior_coloring"] = True
    if args.aa:
        out["anti_aliasing"] = True
    return normalise_config(out)

def _write_manifest(path: str, command: str, cfg: Dict[str, Any], state: RenderState,
                    renderer_info: Dict[str, Any], started: float) -> None:
    if not path:
        return
    manifest = build_manifest(command=command, config=cfg, state=state, renderer_info=renderer_info,
                              started=started, finished=time.time(), git_commit=_git_commit())
    write_manifest(path, manifest)
    get_logger().info("Run manifest written: %s", path)

def main(argv: Optional[list] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    log_file = args.log_file if args.log_file and args.log_file.strip() else None
    logger = configure_root_logging(level=log_level, console=True, log_file=log_file)

    started = time.time()
    try:
        cfg = normalise_config(load_config(args.config))

        if args.cmd == "render":
            cfg = _apply_overrides(cfg, args)
            if args.output:
                cfg["output_image"] = args.output
            if args.preview_scale:
                cfg["preview_scale"] = args.preview_scale
            state = state_from_config(cfg)
            render_still(state, cfg["width"], cfg["height"], cfg["output_image"],
                         workers=cfg["workers"], preview_scale=cfg["preview_scale"])
            info = {"workers": cfg["workers"] or default_workers(), "frames": 1, "preview_scale": cfg["preview_scale"]}
            _write_manifest(args.manifest, "render", cfg, state, info, started)
            return 0

        if args.cmd == "animate":
            cfg = _apply_overrides(cfg, args)
            if args.frames:
                cfg["frames"] = args.frames
            if args.frames_dir:
                cfg["frames_dir"] = args.frames_dir
            state = state_from_config(cfg)
            driver = AnimationDriver(state, target_from_config(cfg))
            result = render_sequence(
                driver=driver, frame_count=cfg["frames"], width=cfg["width"], height=cfg["height"],
                frames_dir=cfg["frames_dir"], workers=cfg["workers"], progress=not args.no_progress,
            )
            info = {"workers": result["workers"], "frames": result["total_frames"], "frames_dir": result["frames_dir"]}
            _write_manifest(args.manifest, "animate", cfg, state, info, started)
            return 0

        if args.cmd == "encode":
            input_dir = args.input_dir or cfg["frames_dir"]
            output = args.output or cfg["output_video"]
            fps = args.fps or cfg["fps"]
            encode_with_opencv(input_dir=input_dir, output_file=output, fps=fps)
            return 0

        raise RuntimeError("Unknown command.")
    except Exception:
        logger.exception("Command %s failed", args.cmd)
        raise
    finally:
        close_handlers()

if __name__ == "__main__":
    raise SystemExit(main())
