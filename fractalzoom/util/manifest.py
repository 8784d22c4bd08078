"""Run manifest: a JSON record of what was rendered, with which settings, on which machine."""

import importlib.metadata as importlib_metadata
import json
import os
import platform
import sys
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from fractalzoom.state import RenderState

TRACKED_PACKAGES = ("numpy", "numba", "llvmlite", "Pillow", "tqdm", "natsort", "opencv-python")


@dataclass(frozen=True)
class RunManifest:
    started_utc: str
    command: str
    config: Dict[str, Any]
    view: Dict[str, Any]
    renderer: Dict[str, Any]
    timing: Dict[str, float]
    environment: Dict[str, Any] = field(default_factory=dict)


def _utc_iso(ts: float) -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(ts))


def installed_versions() -> Dict[str, str]:
    versions = {}
    for name in TRACKED_PACKAGES:
        try:
            versions[name] = importlib_metadata.version(name)
        except importlib_metadata.PackageNotFoundError:
            continue
    return versions


def build_manifest(
    *,
    command: str,
    config: Dict[str, Any],
    state: RenderState,
    renderer_info: Dict[str, Any],
    started: float,
    finished: float,
    git_commit: Optional[str],
) -> RunManifest:
    frames = int(renderer_info.get("frames", 1))
    elapsed = max(0.0, finished - started)
    return RunManifest(
        started_utc=_utc_iso(started),
        command=command,
        config=config,
        view=asdict(state),
        renderer=renderer_info,
        timing={"elapsed_s": round(elapsed, 3), "per_frame_s": round(elapsed / max(frames, 1), 3)},
        environment={
            "python": sys.version.split()[0],
            "packages": installed_versions(),
            "platform": platform.platform(),
            "cpu_count": os.cpu_count(),
            "git_commit": git_commit,
        },
    )


def write_manifest(path: str, manifest: RunManifest) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(asdict(manifest), f, indent=2, sort_keys=True)
