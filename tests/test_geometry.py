"""Unit tests for curve primitives."""

import math

import pytest
from shapely.geometry import box

from roadpipe.geometry import (
    ArcSegment,
    LineSegment,
    Path,
    arc_with_direction,
    boundary_crossings,
    build_path,
    line_segment,
    path_shape,
    roughly_equal,
)


def _pt(p, abs_tol=1e-6):
    return pytest.approx(tuple(p), abs=abs_tol)


class TestSegments:
    """Lines and arcs."""

    def test_line_segment_rejects_zero_length(self):
        assert line_segment((1.0, 1.0), (1.0, 1.0)) is None
        assert line_segment((0.0, 0.0), (3.0, 4.0)).length == pytest.approx(5.0)

    def test_left_turn_arc(self):
        arc = arc_with_direction((50.0, 0.0), (1.0, 0.0), (100.0, 50.0))
        assert isinstance(arc, ArcSegment)
        assert arc.center == _pt((50.0, 50.0))
        assert arc.radius == pytest.approx(50.0)
        assert arc.sweep == pytest.approx(math.pi / 2)
        assert arc.end == _pt((100.0, 50.0))
        assert arc.start_direction == _pt((1.0, 0.0))
        assert arc.end_direction == _pt((0.0, 1.0))
        assert arc.length == pytest.approx(25.0 * math.pi)

    def test_right_turn_arc(self):
        arc = arc_with_direction((0.0, 0.0), (1.0, 0.0), (50.0, -50.0))
        assert isinstance(arc, ArcSegment)
        assert arc.center == _pt((0.0, -50.0))
        assert arc.sweep == pytest.approx(-math.pi / 2)
        assert arc.start_direction == _pt((1.0, 0.0))
        assert arc.end_direction == _pt((0.0, -1.0))

    def test_arc_straight_ahead_is_a_line(self):
        seg = arc_with_direction((0.0, 0.0), (1.0, 0.0), (10.0, 0.0))
        assert isinstance(seg, LineSegment)
        assert seg.end == _pt((10.0, 0.0))

    def test_arc_degenerate_cases(self):
        assert arc_with_direction((0.0, 0.0), (1.0, 0.0), (0.0, 0.0)) is None
        assert arc_with_direction((0.0, 0.0), (1.0, 0.0), (-10.0, 0.0)) is None

    def test_arc_shift_changes_radius(self):
        left_turn = arc_with_direction((50.0, 0.0), (1.0, 0.0), (100.0, 50.0))
        right_turn = arc_with_direction((0.0, 0.0), (1.0, 0.0), (50.0, -50.0))
        assert left_turn.shift_orthogonally(5.0).radius == pytest.approx(55.0)
        assert right_turn.shift_orthogonally(5.0).radius == pytest.approx(45.0)
        assert right_turn.shift_orthogonally(60.0) is None

    def test_arc_reverse(self):
        arc = arc_with_direction((50.0, 0.0), (1.0, 0.0), (100.0, 50.0))
        rev = arc.reverse()
        assert rev.start == _pt(arc.end)
        assert rev.end == _pt(arc.start)
        assert rev.start_direction == _pt((0.0, -1.0))


class TestPath:
    """Path construction and queries."""

    def _l_path(self):
        return build_path(
            [
                line_segment((0.0, 0.0), (50.0, 0.0)),
                arc_with_direction((50.0, 0.0), (1.0, 0.0), (100.0, 50.0)),
                line_segment((100.0, 50.0), (100.0, 100.0)),
            ]
        )

    def test_build_path_rejects_gaps_and_empty(self):
        assert build_path([]) is None
        gap = [line_segment((0.0, 0.0), (1.0, 0.0)), line_segment((2.0, 0.0), (3.0, 0.0))]
        assert build_path(gap) is None

    def test_along_and_direction(self):
        path = self._l_path()
        assert path.length == pytest.approx(100.0 + 25.0 * math.pi)
        assert path.along(25.0) == _pt((25.0, 0.0))
        assert path.direction_along(25.0) == _pt((1.0, 0.0))
        assert path.along(path.length) == _pt((100.0, 100.0))
        assert path.direction_along(path.length - 1.0) == _pt((0.0, 1.0))
        # distances are clamped to the path
        assert path.along(-5.0) == _pt((0.0, 0.0))

    def test_shift_by_zero_is_identity(self):
        path = self._l_path()
        shifted = path.shift_orthogonally(0.0)
        assert shifted is not None
        assert shifted.length == pytest.approx(path.length)
        for d in (0.0, 30.0, 80.0, 120.0, path.length):
            assert shifted.along(d) == _pt(path.along(d))

    def test_shift_moves_to_the_right(self):
        path = build_path([line_segment((0.0, 0.0), (100.0, 0.0))])
        right = path.shift_orthogonally(2.0)
        left = path.shift_orthogonally(-2.0)
        assert right.start == _pt((0.0, -2.0))
        assert left.end == _pt((100.0, 2.0))

    def test_shift_of_l_path_stays_continuous(self):
        path = self._l_path()
        outer = path.shift_orthogonally(5.0)
        assert outer is not None
        assert outer.segments[1].radius == pytest.approx(55.0)
        for prev, nxt in zip(outer.segments, outer.segments[1:]):
            assert roughly_equal(prev.end, nxt.start)

    def test_subsection(self):
        path = build_path([line_segment((0.0, 0.0), (100.0, 0.0))])
        sub = path.subsection(10.0, 20.0)
        assert sub.length == pytest.approx(10.0)
        assert sub.start == _pt((10.0, 0.0))
        assert path.subsection(20.0, 10.0) is None
        assert path.subsection(50.0, 50.0) is None
        assert path.subsection(-1.0, 200.0).length == pytest.approx(100.0)

    def test_subsection_across_segments(self):
        path = self._l_path()
        sub = path.subsection(40.0, 60.0 + 25.0 * math.pi)
        assert sub.start == _pt((40.0, 0.0))
        assert sub.end == _pt((100.0, 60.0))
        assert len(sub.segments) == 3

    def test_reverse(self):
        path = self._l_path()
        rev = path.reverse()
        assert rev.start == _pt(path.end)
        assert rev.end == _pt(path.start)
        assert rev.length == pytest.approx(path.length)

    def test_sample_distances_cover_path(self):
        path = self._l_path()
        coords, dists = path.sample(0.5)
        assert coords.shape[0] == dists.shape[0]
        assert dists[0] == pytest.approx(0.0)
        assert dists[-1] == pytest.approx(path.length)
        assert tuple(coords[-1]) == _pt((100.0, 100.0))


class TestShapes:
    """Polygon helpers."""

    def test_path_shape_requires_closed_path(self):
        open_path = build_path([line_segment((0.0, 0.0), (10.0, 0.0))])
        assert path_shape(open_path, 0.5) is None

        square = build_path(
            [
                line_segment((0.0, 0.0), (10.0, 0.0)),
                line_segment((10.0, 0.0), (10.0, 10.0)),
                line_segment((10.0, 10.0), (0.0, 10.0)),
                line_segment((0.0, 10.0), (0.0, 0.0)),
            ]
        )
        shape = path_shape(square, 0.5)
        assert shape.area == pytest.approx(100.0)

    def test_boundary_crossings_on_line(self):
        path = build_path([line_segment((0.0, 0.0), (100.0, 0.0))])
        crossings = boundary_crossings(path, box(40.0, -10.0, 60.0, 10.0), 0.5)
        assert crossings == [pytest.approx(40.0), pytest.approx(60.0)]

    def test_boundary_crossings_on_arc(self):
        arc = ArcSegment(center=(0.0, 0.0), radius=10.0, start_angle=0.0, sweep=math.pi / 2)
        path = Path([arc])
        crossings = boundary_crossings(path, box(5.0, -1.0, 11.0, 11.0), 0.5)
        assert len(crossings) == 1
        assert crossings[0] == pytest.approx(10.0 * math.pi / 3, abs=0.05)

    def test_no_crossings(self):
        path = build_path([line_segment((0.0, 0.0), (100.0, 0.0))])
        assert boundary_crossings(path, box(40.0, 20.0, 60.0, 30.0), 0.5) == []
