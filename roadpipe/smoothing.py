from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from roadpipe.geometry import (
    Path,
    Point,
    Segment,
    arc_with_direction,
    build_path,
    distance,
    line_segment,
    normalize,
    roughly_equal,
)

LOG = logging.getLogger("smoothing")


def _midpoint(a: Point, b: Point) -> Point:
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


def corner_anchors(points: Sequence[Point]) -> Optional[List[Tuple[Point, Point, Point]]]:
    """Per gesture segment: where the incoming corner arc ends (``end``),
    where the outgoing corner arc starts (``start``) and the segment direction.

    Each corner arc reaches at most to the nearer of the two neighbouring
    segment midpoints, so arcs of adjacent corners never overlap.  Returns
    ``None`` if a gesture segment has zero length.
    """
    centers = [_midpoint(a, b) for a, b in zip(points, points[1:])]
    anchors: List[Tuple[Point, Point, Point]] = []
    for i, (first, second) in enumerate(zip(points, points[1:])):
        direction = normalize((second[0] - first[0], second[1] - first[1]))
        if direction is None:
            return None
        previous_center = first if i < 1 else centers[i - 1]
        this_center = centers[i]
        next_center = centers[i + 1] if i + 1 < len(centers) else second

        to_first = min(distance(first, previous_center), distance(first, this_center))
        to_second = min(distance(second, this_center), distance(second, next_center))

        end = (first[0] + direction[0] * to_first, first[1] + direction[1] * to_first)
        start = (second[0] - direction[0] * to_second, second[1] - direction[1] * to_second)
        anchors.append((end, start, direction))
    return anchors


def smooth_gesture(points: Sequence[Point]) -> Optional[Path]:
    if len(points) < 2:
        return None
    anchors = corner_anchors(points)
    if anchors is None:
        LOG.warning("gesture has a zero-length segment, skipped: %s", list(points))
        return None

    segments: List[Segment] = []
    previous_point = points[0]
    previous_direction = anchors[0][2]
    for end, start, direction in anchors:
        arc = arc_with_direction(previous_point, previous_direction, end)
        if arc is not None:
            segments.append(arc)
        elif not roughly_equal(previous_point, end):
            LOG.debug("corner arc %s -> %s could not be built, dropped", previous_point, end)
        line = line_segment(end, start)
        if line is not None:
            segments.append(line)
        previous_point = start
        previous_direction = direction

    path = build_path(segments)
    if path is None:
        LOG.warning("could not assemble smoothed path from %d gesture points", len(points))
    return path
