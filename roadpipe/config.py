from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from roadpipe._io import load_yaml


LANE_WIDTH = 6.0
LANE_DISTANCE_RATIO = 0.8

# yaml key -> RoadConfig field
CONFIG_KEYS = {
    "LANE_WIDTH_M": "lane_width",
    "LANE_DISTANCE_RATIO": "lane_distance_ratio",
    "CENTER_LANE_DISTANCE_M": "center_lane_distance",
    "ARC_STEP_M": "arc_step_m",
    "LANE_RENDER_RATIO": "lane_render_ratio",
    "OUTLINE_RENDER_WIDTH_M": "outline_render_width",
}


@dataclass(frozen=True)
class RoadConfig:
    lane_width: float = LANE_WIDTH
    lane_distance_ratio: float = LANE_DISTANCE_RATIO
    center_lane_distance: Optional[float] = None
    arc_step_m: float = 0.5
    lane_render_ratio: float = 0.7
    outline_render_width: float = 0.1

    @property
    def lane_distance(self) -> float:
        return self.lane_distance_ratio * self.lane_width

    @property
    def center_distance(self) -> float:
        if self.center_lane_distance is None:
            return self.lane_distance
        return self.center_lane_distance

    @property
    def lane_render_width(self) -> float:
        return self.lane_width * self.lane_render_ratio

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["center_lane_distance"] = self.center_distance
        return out


def _positive(name: str, value: Any) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if v <= 0.0:
        raise ValueError(f"{name} must be positive, got {v}")
    return v


def resolve_road_config(raw: Optional[Dict[str, Any]] = None) -> RoadConfig:
    """Merge yaml-style overrides (upper-case keys) onto the defaults.

    Unknown keys are ignored so that one yaml file can carry settings for
    several tools.
    """
    kwargs: Dict[str, float] = {}
    for key, field_name in CONFIG_KEYS.items():
        if raw and raw.get(key) is not None:
            kwargs[field_name] = _positive(key, raw[key])
    return RoadConfig(**kwargs)


def load_road_config(path: Path) -> RoadConfig:
    if not path.exists():
        return RoadConfig()
    return resolve_road_config(load_yaml(path))


def _normalize(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _normalize(obj[k]) for k in sorted(obj.keys())}
    if isinstance(obj, list):
        return [_normalize(v) for v in obj]
    return obj


def get_params_hash(cfg: RoadConfig) -> str:
    payload = _normalize(cfg.to_dict())
    raw = json.dumps(payload, sort_keys=True, ensure_ascii=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha1(raw).hexdigest()
