"""Connector snapping."""
import pytest

from tracklayout.config import SNAP_DISTANCE_CM
from tracklayout.engine.snap import find_snap, snap_piece
from tracklayout.model.geometry_primitives import Point
from tracklayout.model.pieces import Piece, Straight, Curve, end_point
from tracklayout.model.project import Project

EPS = 1e-6


@pytest.fixture
def moving():
    return Piece(kind=Straight(length=50.0), position=Point(500.0, 500.0), rotation=0.0, id="m")


class TestFindSnap:

    def test_within_threshold_snaps_exactly(self, straight_a, moving):
        candidate = Point(100.0 + SNAP_DISTANCE_CM - EPS, 0.0)
        result = find_snap(moving, candidate, [straight_a])
        assert result.snapped
        assert result.position == Point(100.0, 0.0)
        assert result.target == Point(100.0, 0.0)
        assert not result.via_end

    def test_beyond_threshold_never_snaps(self, straight_a, moving):
        candidate = Point(100.0 + SNAP_DISTANCE_CM + EPS, 0.0)
        result = find_snap(moving, candidate, [straight_a])
        assert not result.snapped
        assert result.position == candidate

    def test_exactly_at_threshold_does_not_snap(self, straight_a, moving):
        candidate = Point(100.0, 10.0)
        result = find_snap(moving, candidate, [straight_a], threshold=10.0)
        assert not result.snapped

    def test_end_connector_snap_keeps_orientation(self, straight_a, moving):
        # Moving end lands at (-3, 4), 5 cm from the start of straight_a
        candidate = Point(-53.0, 4.0)
        result = find_snap(moving, candidate, [straight_a])
        assert result.via_end
        assert result.target == Point(0.0, 0.0)
        assert result.position == Point(-50.0, 0.0)
        end = end_point(moving, result.position)
        assert end.x == pytest.approx(0.0, abs=1e-9)
        assert end.y == pytest.approx(0.0, abs=1e-9)

    def test_curve_end_snap(self, straight_a):
        curve = Piece(kind=Curve(radius=50.0, angle=90.0), rotation=90.0, id="curve")
        # Curve rotated 90: start -> end offset is (-50, -50)
        candidate = Point(52.0, 48.0)
        result = find_snap(curve, candidate, [straight_a])
        assert result.via_end
        assert result.target == Point(0.0, 0.0)
        end = end_point(curve, result.position)
        assert end.x == pytest.approx(0.0, abs=1e-9)
        assert end.y == pytest.approx(0.0, abs=1e-9)

    def test_closest_connector_wins(self, straight_a, moving):
        near = Piece(kind=Straight(10.0), position=Point(200.0, 0.0), id="near")
        # Start at (195, 0): 5 from near.start, 95 from straight_a.end
        result = find_snap(moving, Point(195.0, 0.0), [straight_a, near])
        assert result.target == Point(200.0, 0.0)

    def test_tie_keeps_first_piece_in_scan_order(self, straight_a, moving):
        other = Piece(kind=Straight(10.0), position=Point(110.0, 0.0), id="other")
        candidate = Point(105.0, 0.0)
        assert find_snap(moving, candidate, [straight_a, other]).target == Point(100.0, 0.0)
        assert find_snap(moving, candidate, [other, straight_a]).target == Point(110.0, 0.0)

    def test_tie_on_one_point_prefers_start_connector(self, straight_a):
        short = Piece(kind=Straight(10.0), id="short")
        # Start (-5, 0) and end (5, 0) are both 5 cm from (0, 0)
        result = find_snap(short, Point(-5.0, 0.0), [straight_a])
        assert not result.via_end
        assert result.position == Point(0.0, 0.0)

    def test_ignores_itself(self, moving):
        stale = Piece(kind=moving.kind, position=Point(0.0, 0.0), id=moving.id)
        result = find_snap(moving, Point(1.0, 1.0), [stale])
        assert not result.snapped

    def test_never_changes_rotation(self, straight_a, moving):
        rotated = moving.rotated_to(33.0)
        find_snap(rotated, Point(101.0, 0.0), [straight_a])
        assert rotated.rotation == 33.0


class TestSnapPiece:

    def test_snaps_against_other_project_pieces(self, project):
        result = snap_piece(project, "b", Point(103.0, 2.0))
        assert result.position == Point(100.0, 0.0)

    def test_excluded_pieces_are_not_targets(self, project):
        result = snap_piece(project, "b", Point(103.0, 2.0), exclude=["a"])
        assert not result.snapped
        assert result.position == Point(103.0, 2.0)

    def test_unknown_piece_returns_candidate(self, project):
        result = snap_piece(project, "missing", Point(103.0, 2.0))
        assert result.position == Point(103.0, 2.0)
        assert result.target is None

    def test_single_piece_never_snaps(self, straight_a):
        result = snap_piece(Project(pieces=(straight_a,)), "a", Point(1.0, 1.0))
        assert not result.snapped
