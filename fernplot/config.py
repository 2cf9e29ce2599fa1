import json
from typing import Any, Dict, Optional

from fernplot.themes import DEFAULT_THEME, THEME_NAMES

DEFAULTS: Dict[str, Any] = {
    "width": 900,
    "height": 600,
    "compact": False,
    "throughput": 100,
    "theme": DEFAULT_THEME,
    "fps": 60,
    "seed": None,
    "total_frames": 600,
    "save_every_n": 10,
    "frames_dir": "frames",
    "output_video": "fern.mp4",
    "still_points": 200_000,
}

def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    if config_path:
        with open(config_path, "r", encoding="utf-8") as f:
            cfg = json.load(f)
        if not isinstance(cfg, dict):
            raise ValueError("Config JSON must be an object.")
        return cfg
    return dict(DEFAULTS)

def _positive_int(cfg: Dict[str, Any], key: str) -> int:
    raw = cfg[key]
    if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
        raise ValueError(f"{key} must be an integer, got {raw!r}")
    try:
        value = int(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{key} must be an integer, got {cfg[key]!r}") from e
    if value <= 0:
        raise ValueError(f"{key} must be positive.")
    return value

def normalise_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(DEFAULTS)
    out.update(cfg)

    for key in ("width", "height", "throughput", "fps", "total_frames", "save_every_n", "still_points"):
        out[key] = _positive_int(out, key)

    theme = str(out["theme"])
    if theme not in THEME_NAMES:
        raise ValueError(f"theme must be one of: {', '.join(THEME_NAMES)}")
    out["theme"] = theme

    seed = out["seed"]
    if seed is not None:
        try:
            out["seed"] = int(seed)
        except (TypeError, ValueError) as e:
            raise ValueError(f"seed must be an integer or null, got {seed!r}") from e

    out["compact"] = bool(out["compact"])
    out["frames_dir"] = str(out["frames_dir"])
    out["output_video"] = str(out["output_video"])
    return out
