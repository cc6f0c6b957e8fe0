from __future__ import annotations

from .config import RoadConfig, load_road_config, resolve_road_config
from .model import (
    Gesture,
    IntersectionConnector,
    IntersectionPrototype,
    LanePrototype,
    OtherIntent,
    Plan,
    PlanResult,
    Prototype,
    RoadIntent,
    load_plan,
    plan_from_dict,
)
from .prototypes import calculate_plan_result, calculate_prototypes
from .render import RenderStrip, render_preview

__all__ = [
    "RoadConfig",
    "load_road_config",
    "resolve_road_config",
    "Gesture",
    "IntersectionConnector",
    "IntersectionPrototype",
    "LanePrototype",
    "OtherIntent",
    "Plan",
    "PlanResult",
    "Prototype",
    "RoadIntent",
    "load_plan",
    "plan_from_dict",
    "calculate_plan_result",
    "calculate_prototypes",
    "RenderStrip",
    "render_preview",
]
