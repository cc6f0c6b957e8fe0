from __future__ import annotations

import logging
from typing import List, Sequence

import shapely
from shapely.errors import GEOSException
from shapely.geometry import GeometryCollection, MultiPolygon, Polygon

from roadpipe.model import IntersectionPrototype

LOG = logging.getLogger("intersections")

MIN_AREA = 1e-9


def _iter_polygons(geom) -> List[Polygon]:
    if geom is None or geom.is_empty:
        return []
    if isinstance(geom, Polygon):
        return [geom]
    if isinstance(geom, (MultiPolygon, GeometryCollection)):
        polys: List[Polygon] = []
        for g in geom.geoms:
            polys.extend(_iter_polygons(g))
        return polys
    return []


def _make_valid(geom):
    # outlines of tight corners cross themselves
    if geom is None or geom.is_empty or geom.is_valid:
        return geom
    try:
        fixed = shapely.make_valid(geom)
    except GEOSException:
        return geom.buffer(0)
    polys = _iter_polygons(fixed)
    if len(polys) == 1:
        return polys[0]
    return MultiPolygon(polys)


def clip_intersection(shape_a: Polygon, shape_b: Polygon) -> List[Polygon]:
    """Boolean AND of two road footprints, one polygon per overlap region."""
    overlap = _make_valid(shape_a).intersection(_make_valid(shape_b))
    return [p for p in _iter_polygons(overlap) if p.area > MIN_AREA]


def detect_intersections(shapes: Sequence[Polygon]) -> List[IntersectionPrototype]:
    # both (a, b) and (b, a) are clipped, so every overlap shows up twice
    prototypes: List[IntersectionPrototype] = []
    for i_a, shape_a in enumerate(shapes):
        for i_b, shape_b in enumerate(shapes):
            if i_a == i_b:
                continue
            try:
                regions = clip_intersection(shape_a, shape_b)
            except (GEOSException, ValueError) as exc:
                LOG.warning("intersection clipping error for roads %d/%d: %s", i_a, i_b, exc)
                continue
            LOG.debug("roads %d/%d overlap in %d region(s)", i_a, i_b, len(regions))
            prototypes.extend(IntersectionPrototype(shape=region) for region in regions)
    return prototypes
