"""Curve primitives for road centerlines and lane paths.

A :class:`Path` is an ordered, gap-free chain of straight lines and
circular arcs.  Arcs are kept exact so that offsetting a path only changes
arc radii; shapely is used where polygons come in (outline shapes, boundary
crossings), working on a sampled copy of the curve.

Offsets are signed: positive shifts move to the right of the direction of
travel, negative ones to the left.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
from shapely.geometry import LineString, Polygon
from shapely.geometry import Point as ShapelyPoint

LOG = logging.getLogger("geometry")

# two points closer than this are the same point
THICKNESS = 0.001

Point = Tuple[float, float]


def _sub(a: Point, b: Point) -> Point:
    return (a[0] - b[0], a[1] - b[1])


def _offset(p: Point, v: Point, scale: float) -> Point:
    return (p[0] + v[0] * scale, p[1] + v[1] * scale)


def normalize(v: Point) -> Optional[Point]:
    length = math.hypot(v[0], v[1])
    if length == 0:
        return None
    return (v[0] / length, v[1] / length)


def right_normal(direction: Point) -> Point:
    return (direction[1], -direction[0])


def roughly_equal(a: Point, b: Point, tol: float = THICKNESS) -> bool:
    return math.hypot(a[0] - b[0], a[1] - b[1]) <= tol


def distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


@dataclass(frozen=True)
class LineSegment:
    start: Point
    end: Point

    @property
    def length(self) -> float:
        return distance(self.start, self.end)

    @property
    def direction(self) -> Point:
        return normalize(_sub(self.end, self.start)) or (1.0, 0.0)

    @property
    def start_direction(self) -> Point:
        return self.direction

    @property
    def end_direction(self) -> Point:
        return self.direction

    def along(self, d: float) -> Point:
        return _offset(self.start, self.direction, d)

    def direction_along(self, d: float) -> Point:
        return self.direction

    def subsection(self, a: float, b: float) -> Optional["LineSegment"]:
        a = max(a, 0.0)
        b = min(b, self.length)
        if b - a < THICKNESS:
            return None
        return LineSegment(self.along(a), self.along(b))

    def shift_orthogonally(self, shift: float) -> Optional["LineSegment"]:
        n = right_normal(self.direction)
        return LineSegment(_offset(self.start, n, shift), _offset(self.end, n, shift))

    def reverse(self) -> "LineSegment":
        return LineSegment(self.end, self.start)

    def sample(self, step: float) -> Tuple[np.ndarray, np.ndarray]:
        coords = np.array([self.start, self.end], dtype=float)
        return coords, np.array([0.0, self.length])


@dataclass(frozen=True)
class ArcSegment:
    """Circular arc; ``sweep`` is signed, counter-clockwise positive."""

    center: Point
    radius: float
    start_angle: float
    sweep: float

    def _point_at(self, angle: float) -> Point:
        return (
            self.center[0] + self.radius * math.cos(angle),
            self.center[1] + self.radius * math.sin(angle),
        )

    def _angle_along(self, d: float) -> float:
        return self.start_angle + math.copysign(d / self.radius, self.sweep)

    @property
    def start(self) -> Point:
        return self._point_at(self.start_angle)

    @property
    def end(self) -> Point:
        return self._point_at(self.start_angle + self.sweep)

    @property
    def length(self) -> float:
        return self.radius * abs(self.sweep)

    @property
    def counter_clockwise(self) -> bool:
        return self.sweep > 0

    @property
    def start_direction(self) -> Point:
        return self.direction_along(0.0)

    @property
    def end_direction(self) -> Point:
        return self.direction_along(self.length)

    def along(self, d: float) -> Point:
        return self._point_at(self._angle_along(d))

    def direction_along(self, d: float) -> Point:
        angle = self._angle_along(d)
        if self.counter_clockwise:
            return (-math.sin(angle), math.cos(angle))
        return (math.sin(angle), -math.cos(angle))

    def subsection(self, a: float, b: float) -> Optional["ArcSegment"]:
        a = max(a, 0.0)
        b = min(b, self.length)
        if b - a < THICKNESS:
            return None
        sweep = math.copysign((b - a) / self.radius, self.sweep)
        return ArcSegment(self.center, self.radius, self._angle_along(a), sweep)

    def shift_orthogonally(self, shift: float) -> Optional["ArcSegment"]:
        # the right side is the outside of a left turn
        radius = self.radius + shift if self.counter_clockwise else self.radius - shift
        if radius < THICKNESS:
            return None
        return ArcSegment(self.center, radius, self.start_angle, self.sweep)

    def reverse(self) -> "ArcSegment":
        return ArcSegment(self.center, self.radius, self.start_angle + self.sweep, -self.sweep)

    def sample(self, step: float) -> Tuple[np.ndarray, np.ndarray]:
        n = max(2, int(math.ceil(self.length / max(step, THICKNESS))) + 1)
        angles = self.start_angle + np.linspace(0.0, self.sweep, n)
        coords = np.column_stack(
            [
                self.center[0] + self.radius * np.cos(angles),
                self.center[1] + self.radius * np.sin(angles),
            ]
        )
        return coords, np.linspace(0.0, self.length, n)


Segment = Union[LineSegment, ArcSegment]


def line_segment(start: Point, end: Point) -> Optional[LineSegment]:
    if distance(start, end) < THICKNESS:
        return None
    return LineSegment((float(start[0]), float(start[1])), (float(end[0]), float(end[1])))


def arc_with_direction(start: Point, direction: Point, end: Point) -> Optional[Segment]:
    """Arc leaving ``start`` tangent to ``direction`` and ending at ``end``.

    Returns ``None`` when ``end`` coincides with ``start`` or lies straight
    behind it, and a straight line when it lies straight ahead.
    """
    chord = _sub(end, start)
    chord_len = math.hypot(chord[0], chord[1])
    if chord_len < THICKNESS:
        return None
    n = right_normal(direction)
    lateral = n[0] * chord[0] + n[1] * chord[1]
    if abs(lateral) <= 1e-9 * chord_len:
        ahead = direction[0] * chord[0] + direction[1] * chord[1]
        return line_segment(start, end) if ahead > 0 else None

    # signed distance from start to the center along the right normal
    signed_radius = chord_len * chord_len / (2.0 * lateral)
    center = _offset(start, n, signed_radius)
    radius = abs(signed_radius)
    a0 = math.atan2(start[1] - center[1], start[0] - center[0])
    a1 = math.atan2(end[1] - center[1], end[0] - center[0])
    if signed_radius < 0:
        sweep = (a1 - a0) % (2.0 * math.pi)
    else:
        sweep = -((a0 - a1) % (2.0 * math.pi))
    if radius * abs(sweep) < THICKNESS:
        return None
    return ArcSegment(center, radius, a0, sweep)


class Path:
    """Continuous chain of segments, addressed by distance from its start."""

    def __init__(self, segments: Sequence[Segment]):
        self._segments: Tuple[Segment, ...] = tuple(segments)
        lengths = [seg.length for seg in self._segments]
        self._offsets = np.concatenate(([0.0], np.cumsum(lengths)))

    def __repr__(self) -> str:
        return f"Path(segments={len(self._segments)}, length={self.length:.3f})"

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return self._segments

    @property
    def start(self) -> Point:
        return self._segments[0].start

    @property
    def end(self) -> Point:
        return self._segments[-1].end

    @property
    def length(self) -> float:
        return float(self._offsets[-1])

    def is_closed(self) -> bool:
        return roughly_equal(self.start, self.end)

    def _locate(self, d: float) -> Tuple[Segment, float]:
        d = min(max(d, 0.0), self.length)
        idx = int(np.searchsorted(self._offsets, d, side="right")) - 1
        idx = min(max(idx, 0), len(self._segments) - 1)
        return self._segments[idx], d - float(self._offsets[idx])

    def along(self, d: float) -> Point:
        seg, local = self._locate(d)
        return seg.along(local)

    def direction_along(self, d: float) -> Point:
        seg, local = self._locate(d)
        return seg.direction_along(local)

    def subsection(self, a: float, b: float) -> Optional["Path"]:
        a = max(a, 0.0)
        b = min(b, self.length)
        if b - a < THICKNESS:
            return None
        parts: List[Segment] = []
        for seg, off in zip(self._segments, self._offsets[:-1]):
            off = float(off)
            part = seg.subsection(max(a, off) - off, min(b, off + seg.length) - off)
            if part is not None:
                parts.append(part)
        return build_path(parts)

    def shift_orthogonally(self, shift: float) -> Optional["Path"]:
        shifted = [s for s in (seg.shift_orthogonally(shift) for seg in self._segments) if s is not None]
        glued: List[Segment] = []
        for seg in shifted:
            if glued and not roughly_equal(glued[-1].end, seg.start):
                bridge = line_segment(glued[-1].end, seg.start)
                if bridge is not None:
                    glued.append(bridge)
            glued.append(seg)
        return build_path(glued)

    def reverse(self) -> "Path":
        return Path([seg.reverse() for seg in reversed(self._segments)])

    def sample(self, step: float) -> Tuple[np.ndarray, np.ndarray]:
        """Sampled coordinates and the path distance of every sample."""
        coords: List[np.ndarray] = []
        dists: List[np.ndarray] = []
        for i, (seg, off) in enumerate(zip(self._segments, self._offsets[:-1])):
            c, d = seg.sample(step)
            if i > 0:
                c, d = c[1:], d[1:]
            coords.append(c)
            dists.append(d + float(off))
        return np.vstack(coords), np.concatenate(dists)

    def to_linestring(self, step: float) -> LineString:
        coords, _ = self.sample(step)
        return LineString(coords)


def build_path(segments: Iterable[Segment]) -> Optional[Path]:
    segments = list(segments)
    if not segments:
        return None
    for i, (prev, nxt) in enumerate(zip(segments, segments[1:])):
        if not roughly_equal(prev.end, nxt.start):
            LOG.debug("path gap after segment %d: %s -> %s", i, prev.end, nxt.start)
            return None
    return Path(segments)


def path_shape(path: Path, step: float) -> Optional[Polygon]:
    if not path.is_closed():
        return None
    coords, _ = path.sample(step)
    if coords.shape[0] < 4:
        return None
    poly = Polygon(coords)
    if poly.area <= 0.0:
        return None
    return poly


def _iter_points(geom) -> List[ShapelyPoint]:
    if geom is None or geom.is_empty:
        return []
    if geom.geom_type == "Point":
        return [geom]
    if geom.geom_type == "LineString":
        coords = list(geom.coords)
        return [ShapelyPoint(coords[0]), ShapelyPoint(coords[-1])]
    if geom.geom_type in ("MultiPoint", "MultiLineString", "GeometryCollection"):
        pts: List[ShapelyPoint] = []
        for g in geom.geoms:
            pts.extend(_iter_points(g))
        return pts
    return []


def boundary_crossings(path: Path, polygon: Polygon, step: float) -> List[float]:
    """Distances along ``path`` where it meets the exterior of ``polygon``."""
    coords, dists = path.sample(step)
    line = LineString(coords)
    seg_len = np.hypot(np.diff(coords[:, 0]), np.diff(coords[:, 1]))
    chord = np.concatenate(([0.0], np.cumsum(seg_len)))
    hits = line.intersection(polygon.exterior)
    found = sorted(float(np.interp(line.project(pt), chord, dists)) for pt in _iter_points(hits))
    out: List[float] = []
    for d in found:
        if out and d - out[-1] < THICKNESS:
            continue
        out.append(d)
    return out


def contains_point(polygon: Polygon, p: Point) -> bool:
    return bool(polygon.contains(ShapelyPoint(p)))
