from __future__ import annotations

import logging
from typing import Tuple

from shapely.geometry import Polygon

from roadpipe.config import RoadConfig
from roadpipe.geometry import Path, build_path, line_segment, path_shape
from roadpipe.model import RoadIntent

LOG = logging.getLogger("outline")


def boundary_offsets(intent: RoadIntent, cfg: RoadConfig) -> Tuple[float, float]:
    """Right and left shift of the road edges relative to the centerline."""
    half_center = cfg.center_distance / 2.0
    right = half_center + intent.n_lanes_forward * cfg.lane_distance
    left = -(half_center + intent.n_lanes_backward * cfg.lane_distance)
    return right, left


def _shift_or_center(path: Path, shift: float) -> Path:
    shifted = path.shift_orthogonally(shift)
    if shifted is None:
        LOG.warning("road edge shift %.3f failed, falling back to centerline", shift)
        return path
    return shifted


def road_outline(path: Path, intent: RoadIntent, cfg: RoadConfig) -> Polygon:
    """Footprint of one road: left edge, right edge reversed, joined at both ends.

    Raises RuntimeError when the loop cannot be built; a valid smoothed
    centerline always yields one.
    """
    right_shift, left_shift = boundary_offsets(intent, cfg)
    right_path = _shift_or_center(path, right_shift).reverse()
    left_path = _shift_or_center(path, left_shift)

    segments = list(left_path.segments)
    closing = line_segment(left_path.end, right_path.start)
    if closing is not None:
        segments.append(closing)
    segments.extend(right_path.segments)
    closing = line_segment(right_path.end, left_path.start)
    if closing is not None:
        segments.append(closing)

    loop = build_path(segments)
    if loop is None:
        raise RuntimeError("road_outline_path_invalid")
    shape = path_shape(loop, cfg.arc_step_m)
    if shape is None:
        raise RuntimeError("road_outline_shape_invalid")
    return shape
