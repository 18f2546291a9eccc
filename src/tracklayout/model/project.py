"""
Project (Data Model)
====================
This module defines the document edited by the application: a named,
ordered collection of track pieces plus an optional boundary polygon and the
track skin.

Why is this file needed?
------------------------
1. Snapshots: A Project is immutable (frozen dataclass holding tuples), so
   the undo history can store references instead of deep copies.
2. Persistence: This object is what gets serialized when saving a project.
3. Decoupling: The engine builds new projects; views only read them.

Classes:
    BoundaryPoint, Boundary: The optional track area polygon.
    TrackSkin: Cosmetic metadata (track width, color).
    Project: The main container class.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Iterable, Optional, Sequence
import logging
import math

from tracklayout.config import (
    CM_TO_PX, DEFAULT_TRACK_WIDTH_CM, DEFAULT_TRACK_COLOR, DEFAULT_PROJECT_NAME, DEFAULT_PROJECT_VERSION
)
from tracklayout.model.geometry_primitives import Point
from tracklayout.model.pieces import Piece, PieceId

logger = logging.getLogger(__name__)


class BoundaryUnit(StrEnum):
    CM = "cm"
    PX = "px"


@dataclass(frozen=True)
class BoundaryPoint:
    idx: int
    x: float
    y: float


@dataclass(frozen=True)
class Boundary:
    """Closed or open polygon describing the track area, independent of pieces."""
    unit: BoundaryUnit = BoundaryUnit.CM
    points: tuple[BoundaryPoint, ...] = ()
    closed: bool = True

    @staticmethod
    def from_points(points: Sequence[tuple[float, float]], unit: BoundaryUnit = BoundaryUnit.CM,
                    closed: bool = True) -> Boundary:
        return Boundary(
            unit=unit,
            points=tuple(BoundaryPoint(idx=i, x=float(x), y=float(y)) for i, (x, y) in enumerate(points)),
            closed=closed,
        )

    def points_cm(self) -> list[Point]:
        scale = 1.0 / CM_TO_PX if self.unit == BoundaryUnit.PX else 1.0
        return [Point(p.x * scale, p.y * scale) for p in self.points]

    def length_cm(self) -> float:
        """Polyline length in cm, including the closing edge for closed loops."""
        if len(self.points) < 2:
            return 0.0

        pts = [(p.x, p.y) for p in self.points]
        total = sum(math.dist(a, b) for a, b in zip(pts[:-1], pts[1:]))
        if self.closed and len(pts) > 2:
            total += math.dist(pts[-1], pts[0])

        if self.unit == BoundaryUnit.PX:
            total /= CM_TO_PX
        return total


@dataclass(frozen=True)
class TrackSkin:
    track_width_cm: float = DEFAULT_TRACK_WIDTH_CM
    color: Optional[str] = DEFAULT_TRACK_COLOR


@dataclass(frozen=True)
class Project:
    """
    Immutable project document. Every edit returns a new Project.
    """
    name: str = DEFAULT_PROJECT_NAME
    version: str = DEFAULT_PROJECT_VERSION
    description: str = ""
    pieces: tuple[Piece, ...] = ()
    boundary: Optional[Boundary] = None
    skin: TrackSkin = field(default_factory=TrackSkin)

    def __post_init__(self) -> None:
        # Accept any iterable of pieces but always store a tuple
        object.__setattr__(self, "pieces", tuple(self.pieces))

    # ---- queries ----

    def get_piece(self, piece_id: PieceId) -> Optional[Piece]:
        for piece in self.pieces:
            if piece.id == piece_id:
                return piece
        return None

    def has_piece(self, piece_id: PieceId) -> bool:
        return self.get_piece(piece_id) is not None

    def piece_ids(self) -> list[PieceId]:
        return [piece.id for piece in self.pieces]

    def pieces_by_ids(self, ids: Iterable[PieceId]) -> list[Piece]:
        """Existing pieces among `ids`, in project order. Unknown ids are skipped."""
        wanted = set(ids)
        return [piece for piece in self.pieces if piece.id in wanted]

    # ---- edits (return new projects) ----

    def with_pieces(self, pieces: Iterable[Piece]) -> Project:
        return replace(self, pieces=tuple(pieces))

    def add_pieces(self, pieces: Iterable[Piece]) -> Project:
        return replace(self, pieces=self.pieces + tuple(pieces))

    def remove_pieces(self, ids: Iterable[PieceId]) -> Project:
        doomed = set(ids)
        return replace(self, pieces=tuple(p for p in self.pieces if p.id not in doomed))

    def replace_pieces(self, updated: dict[PieceId, Piece]) -> Project:
        """Swap in updated pieces by id, keeping order. Unknown ids are ignored."""
        if not updated:
            return self
        return replace(self, pieces=tuple(updated.get(p.id, p) for p in self.pieces))

    def with_boundary(self, boundary: Optional[Boundary]) -> Project:
        return replace(self, boundary=boundary)

    def with_skin(self, skin: TrackSkin) -> Project:
        return replace(self, skin=skin)
