"""Standard track pieces (catalog) and the quick-text piece notation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
import logging
import re

from tracklayout.config import QUICK_STRAIGHT_POSITION, QUICK_CURVE_POSITION, CATALOG_POSITION
from tracklayout.model.geometry_primitives import Point
from tracklayout.model.pieces import Piece, PieceKind, Straight, Curve, canonical_key

logger = logging.getLogger(__name__)


class QuickTextError(ValueError):
    """Quick-text input does not follow the L<len> / R<radius>-<angle> notation."""


# ------------------------------------------------------------------------------
# Catalog
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class PieceDefinition:
    """A catalog entry. The code doubles as the BOM key of its pieces."""
    name: str
    kind: PieceKind

    @property
    def code(self) -> str:
        return canonical_key(Piece(kind=self.kind, id=""))

    def create(self, position: Optional[Point] = None) -> Piece:
        if position is None:
            position = Point(*CATALOG_POSITION)
        return Piece(kind=self.kind, position=position)


STRAIGHT_PIECES: list[PieceDefinition] = [
    PieceDefinition(name=f"L{length:g} ({length:g}cm)", kind=Straight(length=length))
    for length in (25.0, 37.5, 50.0, 75.0, 100.0)
]

CURVE_PIECES: list[PieceDefinition] = [
    PieceDefinition(name=f"R{radius:g}-{angle:g}° (radius {radius:g}cm)", kind=Curve(radius=radius, angle=angle))
    for radius, angle in (
        (50.0, 30.0), (50.0, 45.0), (50.0, 60.0), (50.0, 90.0),
        (60.0, 30.0), (60.0, 45.0), (60.0, 60.0), (60.0, 90.0),
        (70.0, 45.0),
    )
]

ALL_PIECES: Dict[str, PieceDefinition] = {
    definition.code: definition for definition in STRAIGHT_PIECES + CURVE_PIECES
}


def get_definition(code: str) -> Optional[PieceDefinition]:
    return ALL_PIECES.get(code.strip().upper())


# ------------------------------------------------------------------------------
# Quick text
# ------------------------------------------------------------------------------
_NUMBER = r"(\d+\.?\d*)"
_STRAIGHT_RE = re.compile(rf"^L{_NUMBER}$", re.IGNORECASE)
_CURVE_RE = re.compile(rf"^R{_NUMBER}-{_NUMBER}$", re.IGNORECASE)

QUICK_TEXT_HELP = "Use L<length> for straights (e.g. L100, L37.5) or R<radius>-<angle> for curves (e.g. R50-90)."


def parse_quick_text(text: str) -> PieceKind:
    """
    Parse the quick-text piece notation.

    Args:
        text: User input such as ``"L100"`` or ``" r50-90 "``.

    Returns:
        The parsed piece kind.

    Raises:
        QuickTextError: If the input does not match either form.
    """
    value = text.strip()

    match = _STRAIGHT_RE.match(value)
    if match:
        return Straight(length=float(match.group(1)))

    match = _CURVE_RE.match(value)
    if match:
        return Curve(radius=float(match.group(1)), angle=float(match.group(2)))

    raise QuickTextError(f"Invalid piece format '{value}'. {QUICK_TEXT_HELP}")


def piece_from_quick_text(text: str) -> Piece:
    """Create a new piece from quick text at the default spawn position."""
    kind = parse_quick_text(text)
    spawn = QUICK_STRAIGHT_POSITION if isinstance(kind, Straight) else QUICK_CURVE_POSITION
    return Piece(kind=kind, position=Point(*spawn))
