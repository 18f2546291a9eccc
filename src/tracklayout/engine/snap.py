"""
Connector snapping.

While a piece is dragged, its start and end connectors are compared against
the connectors of every other piece. The closest pair within the snap
distance wins and the candidate position is adjusted so the matching
connectors coincide exactly. The piece's rotation is never changed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional
import logging

from tracklayout.config import SNAP_DISTANCE_CM
from tracklayout.model.geometry_primitives import Point
from tracklayout.model.pieces import Piece, PieceId, connectors
from tracklayout.model.project import Project

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapResult:
    position: Point                   # start position to use (snapped or not)
    target: Optional[Point] = None    # matched connector, for highlighting
    via_end: bool = False             # True when the moving piece's end connector matched

    @property
    def snapped(self) -> bool:
        return self.target is not None


def find_snap(
    moving: Piece,
    candidate: Point,
    others: Iterable[Piece],
    threshold: float = SNAP_DISTANCE_CM,
) -> SnapResult:
    """
    Snap a piece being moved to `candidate` onto the nearest foreign connector.

    Args:
        moving: The dragged piece (its kind and rotation are used).
        candidate: Proposed start position of the dragged piece.
        others: Pieces that may be snapped to, in scan order.
        threshold: Maximum connector distance that still snaps.

    Returns:
        SnapResult. Without a match the candidate is returned unchanged.

    Notes:
        - Comparison is strict (`<`), so a connector exactly at `threshold`
          does not snap.
        - Ties keep the first match in scan order: pieces as given, and for
          each target point the moving start before the moving end.
    """
    start, end = connectors(moving, candidate)

    best_dist = float(threshold)
    best_target: Optional[Point] = None
    via_end = False

    for other in others:
        if other.id == moving.id:
            continue

        for point in connectors(other):
            dist_start = start.distance_to(point)
            if dist_start < best_dist:
                best_dist = dist_start
                best_target = point
                via_end = False

            dist_end = end.distance_to(point)
            if dist_end < best_dist:
                best_dist = dist_end
                best_target = point
                via_end = True

    if best_target is None:
        return SnapResult(position=candidate)

    if via_end:
        # Land the end connector on the target, keep the orientation
        position = best_target - (end - start)
    else:
        position = best_target

    return SnapResult(position=position, target=best_target, via_end=via_end)


def snap_piece(
    project: Project,
    piece_id: PieceId,
    candidate: Point,
    exclude: Iterable[PieceId] = (),
    threshold: float = SNAP_DISTANCE_CM,
) -> SnapResult:
    """
    Snap a piece of `project` moved to `candidate`.

    Pieces listed in `exclude` (the rest of a dragged group) are not snap
    targets. An unknown `piece_id` returns the candidate unchanged.
    """
    moving = project.get_piece(piece_id)
    if moving is None:
        logger.debug(f"Snap requested for unknown piece {piece_id!r}.")
        return SnapResult(position=candidate)

    skipped = set(exclude)
    skipped.add(piece_id)
    others = (p for p in project.pieces if p.id not in skipped)
    return find_snap(moving, candidate, others, threshold)
