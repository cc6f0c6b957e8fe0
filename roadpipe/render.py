from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from shapely.geometry import LineString, Polygon, mapping

from roadpipe.config import RoadConfig
from roadpipe.model import IntersectionPrototype, LanePrototype, Prototype

LANE_INSTANCE_BASE = 18_000
INTERSECTION_INSTANCE_BASE = 18_500


@dataclass
class RenderStrip:
    kind: str
    instance_id: int
    geometry: Polygon


def _band(line: LineString, width: float) -> Polygon:
    return line.buffer(width / 2.0, cap_style="flat", join_style="round")


def render_preview(prototypes: Sequence[Prototype], cfg: RoadConfig) -> List[RenderStrip]:
    """Drawable strips for a prototype list: lanes as wide bands, intersections as thin outlines."""
    strips: List[RenderStrip] = []
    for i, proto in enumerate(prototypes):
        if isinstance(proto, LanePrototype):
            line = proto.path.to_linestring(cfg.arc_step_m)
            strips.append(RenderStrip("lane", LANE_INSTANCE_BASE + i, _band(line, cfg.lane_render_width)))
        elif isinstance(proto, IntersectionPrototype):
            ring = LineString(proto.shape.exterior.coords)
            strips.append(
                RenderStrip("intersection", INTERSECTION_INSTANCE_BASE + i, _band(ring, cfg.outline_render_width))
            )
    return strips


def strips_to_features(strips: Sequence[RenderStrip]) -> List[Dict[str, Any]]:
    return [
        {
            "type": "Feature",
            "geometry": mapping(s.geometry),
            "properties": {"kind": s.kind, "instance_id": s.instance_id},
        }
        for s in strips
    ]


def prototypes_to_features(prototypes: Sequence[Prototype], cfg: RoadConfig) -> List[Dict[str, Any]]:
    features: List[Dict[str, Any]] = []
    for i, proto in enumerate(prototypes):
        if isinstance(proto, LanePrototype):
            features.append(
                {
                    "type": "Feature",
                    "geometry": mapping(proto.path.to_linestring(cfg.arc_step_m)),
                    "properties": {"kind": "lane", "index": i, "length_m": round(proto.path.length, 3)},
                }
            )
        elif isinstance(proto, IntersectionPrototype):
            features.append(
                {
                    "type": "Feature",
                    "geometry": mapping(proto.shape),
                    "properties": {
                        "kind": "intersection",
                        "index": i,
                        "area_m2": round(float(proto.shape.area), 3),
                        "incoming": [list(c.position) for c in proto.incoming],
                        "outgoing": [list(c.position) for c in proto.outgoing],
                    },
                }
            )
    return features
