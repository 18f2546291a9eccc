"""
Shared test fixtures for the track layout engine tests.
"""
import pytest

from tracklayout.engine import editor
from tracklayout.engine.view import ViewTransform
from tracklayout.model.geometry_primitives import Point
from tracklayout.model.pieces import Piece, Straight, Curve
from tracklayout.model.project import Project


@pytest.fixture
def straight_a():
    """L100 at the origin pointing along +X: connectors (0, 0) and (100, 0)."""
    return Piece(kind=Straight(length=100.0), position=Point(0.0, 0.0), rotation=0.0, id="a")


@pytest.fixture
def straight_b():
    """L100 at (300, 0) pointing along +X: connectors (300, 0) and (400, 0)."""
    return Piece(kind=Straight(length=100.0), position=Point(300.0, 0.0), rotation=0.0, id="b")


@pytest.fixture
def curve_c():
    """R50-90 at (600, 0)."""
    return Piece(kind=Curve(radius=50.0, angle=90.0), position=Point(600.0, 0.0), rotation=0.0, id="c")


@pytest.fixture
def project(straight_a, straight_b, curve_c):
    return Project(name="Test Track", pieces=(straight_a, straight_b, curve_c))


@pytest.fixture
def state(project):
    """Fresh editor state; history holds the initial project only."""
    return editor.new_state(project)


@pytest.fixture
def view():
    """Default view on a canvas the size of the initial window (1 px per cm)."""
    return ViewTransform()
