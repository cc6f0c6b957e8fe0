"""Cut raw lane paths at intersection boundaries.

Every lane path is tested against every intersection polygon.  Crossings
turn into connectors on the intersection and into cuts on the lane:

* two or more crossings: the stretch between the first and the last one
  lies inside the intersection and is removed; the first crossing is an
  incoming connector, the last an outgoing one.
* exactly one crossing: the lane starts or ends inside the intersection, so
  it is trimmed from that side up to the crossing.
* no crossing: the intersection does not touch the lane.

What is left between consecutive cuts becomes one lane prototype each.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from roadpipe.config import RoadConfig
from roadpipe.geometry import Path, boundary_crossings, contains_point
from roadpipe.model import IntersectionConnector, IntersectionPrototype, LanePrototype, RoadIntent

LOG = logging.getLogger("lane_trim")


def lane_offsets(intent: RoadIntent, cfg: RoadConfig) -> List[float]:
    half_center = cfg.center_distance / 2.0
    forward = [half_center + k * cfg.lane_distance for k in range(intent.n_lanes_forward)]
    backward = [-(half_center + k * cfg.lane_distance) for k in range(intent.n_lanes_backward)]
    return forward + backward


def raw_lane_paths(path: Path, intent: RoadIntent, cfg: RoadConfig) -> List[Path]:
    lanes: List[Path] = []
    for offset in lane_offsets(intent, cfg):
        lane = path.shift_orthogonally(offset)
        if lane is None:
            LOG.debug("lane at offset %.3f has no valid path, dropped", offset)
            continue
        lanes.append(lane)
    return lanes


def _connector(path: Path, d: float) -> IntersectionConnector:
    return IntersectionConnector(position=path.along(d), direction=path.direction_along(d))


def trim_lane_path(
    lane_path: Path,
    intersections: List[IntersectionPrototype],
    cfg: RoadConfig,
) -> List[Path]:
    start_trim = 0.0
    end_trim = lane_path.length
    cuts: List[Tuple[float, float]] = []

    for intersection in intersections:
        crossings = boundary_crossings(lane_path, intersection.shape, cfg.arc_step_m)
        if len(crossings) >= 2:
            entry, exit_ = crossings[0], crossings[-1]
            intersection.incoming.append(_connector(lane_path, entry))
            intersection.outgoing.append(_connector(lane_path, exit_))
            cuts.append((entry, exit_))
        elif len(crossings) == 1:
            crossing = crossings[0]
            if contains_point(intersection.shape, lane_path.start):
                intersection.outgoing.append(_connector(lane_path, crossing))
                start_trim = max(start_trim, crossing)
            elif contains_point(intersection.shape, lane_path.end):
                intersection.incoming.append(_connector(lane_path, crossing))
                end_trim = min(end_trim, crossing)

    cuts.sort(key=lambda c: c[0])
    cuts.insert(0, (-1.0, start_trim))
    cuts.append((end_trim, lane_path.length + 1.0))

    pieces: List[Path] = []
    for (_, exit_distance), (entry_distance, _) in zip(cuts, cuts[1:]):
        piece = lane_path.subsection(exit_distance, entry_distance)
        if piece is None:
            LOG.debug("empty lane piece %.3f..%.3f omitted", exit_distance, entry_distance)
            continue
        pieces.append(piece)
    return pieces


def trim_lanes(
    roads: Iterable[Tuple[Path, RoadIntent]],
    intersections: List[IntersectionPrototype],
    cfg: RoadConfig,
) -> List[LanePrototype]:
    prototypes: List[LanePrototype] = []
    for path, intent in roads:
        for lane_path in raw_lane_paths(path, intent, cfg):
            prototypes.extend(LanePrototype(piece) for piece in trim_lane_path(lane_path, intersections, cfg))
    return prototypes
