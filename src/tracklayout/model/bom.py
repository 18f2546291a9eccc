"""
Bill of Materials
=================
Groups the pieces of a layout by shape and totals the track length.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List
import logging

from tracklayout.model.pieces import Piece, PieceType, Straight, Curve, canonical_key, length_cm
from tracklayout.model.project import Project
from tracklayout.model.io import piece_to_dict

logger = logging.getLogger(__name__)


@dataclass
class BOMEntry:
    key: str
    type: PieceType
    count: int
    unit_length_cm: float
    # Sort parameters: length for straights, (radius, angle) for curves
    sort_params: tuple[float, ...] = ()

    @property
    def total_length_cm(self) -> float:
        return self.count * self.unit_length_cm


@dataclass
class BOMSummary:
    entries: List[BOMEntry] = field(default_factory=list)
    total_pieces: int = 0
    total_length_cm: float = 0.0
    details: List[Piece] = field(default_factory=list)

    @property
    def total_length_m(self) -> float:
        return round(self.total_length_cm / 100.0, 2)

    def counts(self) -> Dict[str, int]:
        return {entry.key: entry.count for entry in self.entries}

    def to_dict(self, include_details: bool = True) -> Dict[str, Any]:
        """Export in the shape of the legacy BOM files (length in meters, 2 decimals)."""
        data: Dict[str, Any] = {
            "totalPieces": self.total_pieces,
            "totalLength": f"{self.total_length_m:.2f}",
            "bom": self.counts(),
        }
        if include_details:
            data["details"] = [piece_to_dict(p) for p in self.details]
        return data


def _sort_params(piece: Piece) -> tuple[float, ...]:
    kind = piece.kind
    if isinstance(kind, Straight):
        return (kind.length,)
    if isinstance(kind, Curve):
        return (kind.radius, kind.angle)
    return ()


def aggregate(pieces: Iterable[Piece]) -> BOMSummary:
    """
    Count pieces per canonical key and sum their centerline lengths.

    Entries are ordered straights first, then by length (straights) or
    radius and angle (curves). The ordering never affects the totals.
    """
    groups: Dict[str, BOMEntry] = {}
    summary = BOMSummary()

    for piece in pieces:
        piece_length = length_cm(piece)
        summary.total_length_cm += piece_length
        summary.total_pieces += 1
        summary.details.append(piece)

        key = canonical_key(piece)
        entry = groups.get(key)
        if entry is None:
            groups[key] = BOMEntry(
                key=key,
                type=piece.type,
                count=1,
                unit_length_cm=piece_length,
                sort_params=_sort_params(piece),
            )
        else:
            entry.count += 1

    summary.entries = sorted(
        groups.values(),
        key=lambda e: (0 if e.type == PieceType.STRAIGHT else 1, e.sort_params, e.key),
    )
    return summary


def summarize_project(project: Project) -> BOMSummary:
    """
    BOM of a project. A project without pieces reports its boundary length
    as the total track length.
    """
    summary = aggregate(project.pieces)
    if not project.pieces and project.boundary is not None:
        summary.total_length_cm = project.boundary.length_cm()
        logger.debug(f"No pieces; using boundary length {summary.total_length_cm:.2f} cm.")
    return summary
