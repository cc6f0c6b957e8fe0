from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path as FsPath
from typing import Any, Dict, Iterator, List, Tuple, Union

from shapely.geometry import Polygon

from roadpipe._io import load_yaml
from roadpipe.geometry import Path, Point

GestureId = str


@dataclass(frozen=True)
class RoadIntent:
    n_lanes_forward: int
    n_lanes_backward: int

    def __post_init__(self) -> None:
        if self.n_lanes_forward < 0 or self.n_lanes_backward < 0:
            raise ValueError(
                f"lane counts must be non-negative, got {self.n_lanes_forward}/{self.n_lanes_backward}"
            )


@dataclass(frozen=True)
class OtherIntent:
    """Any non-road gesture (zones, rails, ...); skipped by the road pipeline."""

    kind: str


GestureIntent = Union[RoadIntent, OtherIntent]


@dataclass
class Gesture:
    points: List[Point]
    intent: GestureIntent


@dataclass
class Plan:
    gestures: Dict[GestureId, Gesture] = field(default_factory=dict)

    def pairs(self) -> Iterator[Tuple[GestureId, Gesture]]:
        return iter(self.gestures.items())


@dataclass
class IntersectionConnector:
    position: Point
    direction: Point


@dataclass
class LanePrototype:
    path: Path


@dataclass
class IntersectionPrototype:
    shape: Polygon
    incoming: List[IntersectionConnector] = field(default_factory=list)
    outgoing: List[IntersectionConnector] = field(default_factory=list)
    # filled by the traffic layer, never here
    connecting_lanes: List[LanePrototype] = field(default_factory=list)
    timings: List[List[bool]] = field(default_factory=list)


Prototype = Union[LanePrototype, IntersectionPrototype]


@dataclass
class PlanResult:
    prototypes: List[Prototype] = field(default_factory=list)

    def lanes(self) -> List[LanePrototype]:
        return [p for p in self.prototypes if isinstance(p, LanePrototype)]

    def intersections(self) -> List[IntersectionPrototype]:
        return [p for p in self.prototypes if isinstance(p, IntersectionPrototype)]


def _parse_intent(raw: Any) -> GestureIntent:
    if not isinstance(raw, dict) or len(raw) != 1:
        raise ValueError(f"intent must be a single-key mapping, got {raw!r}")
    kind, body = next(iter(raw.items()))
    if kind == "road":
        body = body or {}
        return RoadIntent(int(body.get("forward", 0)), int(body.get("backward", 0)))
    if kind == "other":
        return OtherIntent(str(body))
    raise ValueError(f"unknown intent {kind!r}")


def plan_from_dict(data: Dict[str, Any]) -> Plan:
    gestures: Dict[GestureId, Gesture] = {}
    for gid, item in (data.get("gestures") or {}).items():
        points = [(float(p[0]), float(p[1])) for p in item.get("points") or []]
        gestures[str(gid)] = Gesture(points=points, intent=_parse_intent(item["intent"]))
    return Plan(gestures=gestures)


def load_plan(path: FsPath) -> Plan:
    return plan_from_dict(load_yaml(path))
