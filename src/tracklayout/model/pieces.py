"""
Track Pieces (Geometry Model)
=============================
Defines the track piece data structure and the pure functions that derive
its connectors, footprint and length from its parameters.

Why is this file needed?
------------------------
1. Single source of truth: the snap engine, the hit test, the BOM and any
   renderer all ask this module where a piece starts and ends.
2. Type safety: a piece is either a Straight or a Curve. Each variant carries
   only its own parameters, so a "straight with an angle" cannot exist.

Conventions:
    - Positions are in centimeters, Y up.
    - `rotation` is the direction of the start tangent in degrees, [0, 360).
    - A curve's `angle` is signed: positive turns counter-clockwise.
    - The start connector is `position`; the end connector is always computed.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Iterable, Optional, Union
import logging
import math
import uuid

from tracklayout.config import DEFAULT_TRACK_WIDTH_CM
from tracklayout.model.geometry_primitives import (
    Point, Vector, StraightFootprint, SectorFootprint, Footprint, ORIGIN
)

logger = logging.getLogger(__name__)

PieceId = Union[str, int, float]


class PieceType(StrEnum):
    STRAIGHT = "straight"
    CURVE = "curve"


@dataclass(frozen=True)
class Straight:
    length: float = 0.0

    @property
    def type(self) -> PieceType:
        return PieceType.STRAIGHT


@dataclass(frozen=True)
class Curve:
    radius: float = 0.0
    angle: float = 0.0  # degrees, signed

    @property
    def type(self) -> PieceType:
        return PieceType.CURVE


PieceKind = Union[Straight, Curve]


def normalize_angle(degrees: float) -> float:
    """Wrap an angle in degrees into [0, 360)."""
    wrapped = float(degrees) % 360.0
    # -1e-15 % 360 rounds to 360.0
    if wrapped >= 360.0:
        wrapped = 0.0
    return wrapped + 0.0


def new_piece_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Piece:
    """
    One track segment instance.

    Pieces are immutable; edits produce a new instance via `moved_to`,
    `rotated_to` or `dataclasses.replace`.
    """
    kind: PieceKind
    position: Point = ORIGIN
    rotation: float = 0.0
    id: PieceId = field(default_factory=new_piece_id)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rotation", normalize_angle(self.rotation))

    @property
    def type(self) -> PieceType:
        return self.kind.type

    def moved_to(self, position: Point) -> Piece:
        return replace(self, position=position)

    def moved_by(self, delta: Vector) -> Piece:
        return replace(self, position=self.position + delta)

    def rotated_to(self, rotation: float) -> Piece:
        return replace(self, rotation=rotation)

    def with_new_id(self) -> Piece:
        return replace(self, id=new_piece_id())


# ------------------------------------------------------------------------------
# Geometry
# ------------------------------------------------------------------------------

def turn_center(piece: Piece, position: Optional[Point] = None) -> Optional[Point]:
    """Center of the turn circle of a curve, or None for straights."""
    if not isinstance(piece.kind, Curve):
        return None
    start = piece.position if position is None else position
    theta = math.radians(piece.rotation)
    return start - Vector.from_angle(theta, piece.kind.radius)


def end_point(piece: Piece, position: Optional[Point] = None) -> Point:
    """
    Compute the end connector of a piece.

    Args:
        piece: The piece.
        position: Optional start position overriding `piece.position`
            (used when evaluating a candidate drag position).

    Returns:
        The end connector in world space.
    """
    start = piece.position if position is None else position
    theta = math.radians(piece.rotation)
    kind = piece.kind

    if isinstance(kind, Straight):
        return start + Vector.from_angle(theta, kind.length)

    if isinstance(kind, Curve):
        center = start - Vector.from_angle(theta, kind.radius)
        return center + Vector.from_angle(theta + math.radians(kind.angle), kind.radius)

    return start


def connectors(piece: Piece, position: Optional[Point] = None) -> tuple[Point, Point]:
    """(start, end) connectors of a piece."""
    start = piece.position if position is None else position
    return start, end_point(piece, start)


def footprint(piece: Piece, track_width_cm: float = DEFAULT_TRACK_WIDTH_CM) -> Footprint:
    """
    Area covered by the piece for a given track width.

    Straights cover a rectangle along the centerline; curves cover an annular
    sector whose radii are the centerline radius -/+ half the track width.
    """
    kind = piece.kind
    if isinstance(kind, Curve):
        half = track_width_cm / 2.0
        radius = abs(kind.radius)
        return SectorFootprint(
            center=turn_center(piece),
            inner_radius=max(0.0, radius - half),
            outer_radius=radius + half,
            start_deg=piece.rotation,
            sweep_deg=kind.angle,
        )

    return StraightFootprint(start=piece.position, end=end_point(piece), width=track_width_cm)


def length_cm(piece: Piece) -> float:
    """Centerline length: straight length, or arc length r * angle(rad)."""
    kind = piece.kind
    if isinstance(kind, Straight):
        return float(kind.length)
    if isinstance(kind, Curve):
        return float(kind.radius) * math.radians(abs(kind.angle))
    return 0.0


def _format_param(value: float) -> str:
    # 2-decimal rounding absorbs float noise from edits; "+ 0.0" drops "-0"
    return f"{round(float(value), 2) + 0.0:g}"


def canonical_key(piece: Piece) -> str:
    """
    Shape identifier for BOM grouping, independent of id/position/rotation.

    Examples: ``L37.5``, ``R50-90``.
    """
    kind = piece.kind
    if isinstance(kind, Straight):
        return f"L{_format_param(kind.length)}"
    return f"R{_format_param(kind.radius)}-{_format_param(kind.angle)}"


def hit_test(
    pieces: Iterable[Piece],
    point: Point,
    track_width_cm: float = DEFAULT_TRACK_WIDTH_CM,
) -> Optional[Piece]:
    """
    Return the topmost piece whose footprint contains `point`.

    Pieces later in the sequence are drawn on top, so the scan goes backwards.
    """
    for piece in reversed(list(pieces)):
        if footprint(piece, track_width_cm).contains(point):
            return piece
    return None
