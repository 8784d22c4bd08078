import json
from typing import Any, Dict, Optional

from fractalzoom.animation import CameraTarget, DEFAULT_TARGET
from fractalzoom.state import RenderState

DEFAULT_CONFIG: Dict[str, Any] = {
    "width": 1344,
    "height": 756,
    "workers": None,
    "frames": 300,
    "fps": 60,
    "frames_dir": "frames",
    "output_video": "fractal_zoom.mp4",
    "output_image": "fractal.png",
    "preview_scale": 1,
    "center": [-0.5, 0.0],
    "viewport_height": 3.0,
    "max_iterations": 128,
    "auto_iterations": True,
    "color_density": 0.2,
    "color_scheme": 0,
    "julia": False,
    "julia_seed": [-0.8, 0.156],
    "fractal_variant": 0,
    "stripes": False,
    "stripe_frequency": 5.0,
    "stripe_intensity": 10.0,
    "interior_coloring": False,
    "anti_aliasing": False,
    "target": None,
}

def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    if not config_path:
        return dict(DEFAULT_CONFIG)
    with open(config_path, "r", encoding="utf-8") as f:
        cfg = json.load(f)
    if not isinstance(cfg, dict):
        raise ValueError("Config JSON must be an object.")
    return cfg

def _pair(cfg: Dict[str, Any], key: str) -> list:
    value = cfg[key]
    if not (isinstance(value, (list, tuple)) and len(value) == 2):
        raise ValueError(f"{key} must be [re, im].")
    return [float(value[0]), float(value[1])]

def normalise_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    unknown = sorted(set(cfg) - set(DEFAULT_CONFIG))
    if unknown:
        raise ValueError(f"Unknown config field(s): {', '.join(unknown)}")

    out = dict(DEFAULT_CONFIG)
    out.update(cfg)

    for key in ("width", "height", "frames", "fps", "preview_scale"):
        out[key] = int(out[key])
        if out[key] <= 0:
            raise ValueError(f"{key} must be positive.")
    if out["workers"] is not None:
        out["workers"] = int(out["workers"])
        if out["workers"] <= 0:
            raise ValueError("workers must be positive.")
    if float(out["viewport_height"]) <= 0:
        raise ValueError("viewport_height must be positive.")

    out["center"] = _pair(out, "center")
    out["julia_seed"] = _pair(out, "julia_seed")
    out["frames_dir"] = str(out["frames_dir"])
    out["output_video"] = str(out["output_video"])
    out["output_image"] = str(out["output_image"])

    target = out["target"]
    if target is not None:
        if not isinstance(target, dict):
            raise ValueError("target must be an object.")
        for r in ("center", "viewport_height"):
            if r not in target:
                raise ValueError(f"Missing target field: {r}")
    return out

def state_from_config(cfg: Dict[str, Any]) -> RenderState:
    return RenderState(
        viewport_x=float(cfg["center"][0]),
        viewport_y=float(cfg["center"][1]),
        viewport_height=float(cfg["viewport_height"]),
        max_iterations=int(cfg["max_iterations"]),
        auto_iterations=bool(cfg["auto_iterations"]),
        color_density=float(cfg["color_density"]),
        color_scheme=int(cfg["color_scheme"]),
        julia=bool(cfg["julia"]),
        julia_x=float(cfg["julia_seed"][0]),
        julia_y=float(cfg["julia_seed"][1]),
        fractal_variant=int(cfg["fractal_variant"]),
        stripes=bool(cfg["stripes"]),
        stripe_frequency=float(cfg["stripe_frequency"]),
        stripe_intensity=float(cfg["stripe_intensity"]),
        interior_coloring=bool(cfg["interior_coloring"]),
        anti_aliasing=bool(cfg["anti_aliasing"]),
        aspect_ratio=float(cfg["width"]) / float(cfg["height"]),
    )

def target_from_config(cfg: Dict[str, Any]) -> CameraTarget:
    target = cfg.get("target")
    if target is None:
        return DEFAULT_TARGET
    max_iter = target.get("max_iterations")
    density = target.get("color_density")
    return CameraTarget(
        viewport_x=float(target["center"][0]),
        viewport_y=float(target["center"][1]),
        viewport_height=float(target["viewport_height"]),
        color_density=None if density is None else float(density),
        max_iterations=None if max_iter is None else int(max_iter),
    )
