from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from roadpipe.config import RoadConfig
from roadpipe.geometry import Path
from roadpipe.intersections import detect_intersections
from roadpipe.lane_trim import trim_lanes
from roadpipe.model import GestureId, Plan, PlanResult, Prototype, RoadIntent
from roadpipe.outline import road_outline
from roadpipe.smoothing import smooth_gesture

LOG = logging.getLogger("prototypes")


def road_gestures(plan: Plan) -> List[Tuple[GestureId, RoadIntent, List]]:
    out = []
    for gesture_id, gesture in plan.pairs():
        if isinstance(gesture.intent, RoadIntent) and len(gesture.points) >= 2:
            out.append((gesture_id, gesture.intent, list(gesture.points)))
    return out


def smoothed_roads(plan: Plan) -> List[Tuple[GestureId, RoadIntent, Path]]:
    roads = []
    for gesture_id, intent, points in road_gestures(plan):
        path = smooth_gesture(points)
        if path is None:
            LOG.warning("gesture %s: no smoothed path", gesture_id)
            continue
        roads.append((gesture_id, intent, path))
    return roads


def calculate_prototypes(plan: Plan, cfg: Optional[RoadConfig] = None) -> List[Prototype]:
    """Recompute the whole road network of ``plan``: intersections, then lanes."""
    cfg = cfg or RoadConfig()
    roads = smoothed_roads(plan)
    shapes = [road_outline(path, intent, cfg) for _, intent, path in roads]
    intersections = detect_intersections(shapes)
    lanes = trim_lanes([(path, intent) for _, intent, path in roads], intersections, cfg)
    LOG.info(
        "roads=%d intersections=%d lanes=%d",
        len(roads),
        len(intersections),
        len(lanes),
    )
    prototypes: List[Prototype] = []
    prototypes.extend(intersections)
    prototypes.extend(lanes)
    return prototypes


def calculate_plan_result(plan: Plan, cfg: Optional[RoadConfig] = None) -> PlanResult:
    return PlanResult(prototypes=calculate_prototypes(plan, cfg))
