"""
Input/Output Manager (JSON)
Handles converting Projects to and from the persisted JSON document, and
importing the older export formats.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional

from tracklayout.config import DEFAULT_PROJECT_VERSION, DEFAULT_TRACK_WIDTH_CM
from tracklayout.model.geometry_primitives import Point
from tracklayout.model.pieces import Piece, PieceType, Straight, Curve, new_piece_id
from tracklayout.model.project import Project, Boundary, BoundaryPoint, BoundaryUnit, TrackSkin

# Get module logger
logger = logging.getLogger(__name__)

IMPORTED_PROJECT_NAME = "Imported Track"


class ProjectFormatError(ValueError):
    """The data is not a readable project document."""


def _float_field(data: Dict[str, Any], key: str, default: float = 0.0) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value)


def _str_field(data: Dict[str, Any], key: str, default: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else default


# ------------------------------------------------------------------------------
# Pieces
# ------------------------------------------------------------------------------

def piece_to_dict(piece: Piece) -> Dict[str, Any]:
    if isinstance(piece.kind, Straight):
        params = {"length": piece.kind.length}
    else:
        params = {"radius": piece.kind.radius, "angle": piece.kind.angle}
    return {
        "id": piece.id,
        "type": str(piece.type),
        "params": params,
        "x": piece.position.x,
        "y": piece.position.y,
        "rotation": piece.rotation,
    }


def piece_from_dict(data: Dict[str, Any], default_type: Optional[str] = None) -> Piece:
    """
    Build a Piece from its document form.

    Missing parameters default to 0 (a degenerate but valid piece). A missing
    id gets a fresh one.

    Raises:
        ProjectFormatError: If the piece type is unknown.
    """
    if not isinstance(data, dict):
        raise ProjectFormatError(f"Piece entry must be an object, got {type(data).__name__}.")

    raw_type = data.get("type", default_type)
    try:
        piece_type = PieceType(raw_type)
    except ValueError as e:
        raise ProjectFormatError(f"Unknown piece type: {raw_type!r}") from e

    params = data.get("params")
    if not isinstance(params, dict):
        params = {}

    if piece_type == PieceType.STRAIGHT:
        kind = Straight(length=_float_field(params, "length"))
    else:
        kind = Curve(radius=_float_field(params, "radius"), angle=_float_field(params, "angle"))

    piece_id = data.get("id")
    if piece_id is None or isinstance(piece_id, (bool, dict, list)):
        piece_id = new_piece_id()

    return Piece(
        kind=kind,
        position=Point(_float_field(data, "x"), _float_field(data, "y")),
        rotation=_float_field(data, "rotation"),
        id=piece_id,
    )


# ------------------------------------------------------------------------------
# Project
# ------------------------------------------------------------------------------

def project_to_dict(project: Project) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "name": project.name,
        "version": project.version,
        "pieces": [piece_to_dict(p) for p in project.pieces],
        "skin": {"trackWidthCm": project.skin.track_width_cm},
    }
    if project.description:
        data["description"] = project.description
    if project.skin.color is not None:
        data["skin"]["color"] = project.skin.color
    if project.boundary is not None:
        data["boundary"] = {
            "unit": str(project.boundary.unit),
            "points": [{"idx": p.idx, "x": p.x, "y": p.y} for p in project.boundary.points],
            "closed": project.boundary.closed,
        }
    return data


def _boundary_from_dict(data: Any) -> Optional[Boundary]:
    if not isinstance(data, dict):
        return None
    try:
        unit = BoundaryUnit(data.get("unit", BoundaryUnit.CM))
    except ValueError as e:
        raise ProjectFormatError(f"Unknown boundary unit: {data.get('unit')!r}") from e

    points = []
    for i, item in enumerate(data.get("points") or []):
        if not isinstance(item, dict):
            continue
        idx = item.get("idx", i)
        points.append(BoundaryPoint(
            idx=int(idx) if isinstance(idx, (int, float)) else i,
            x=_float_field(item, "x"),
            y=_float_field(item, "y"),
        ))
    return Boundary(unit=unit, points=tuple(points), closed=bool(data.get("closed", False)))


def _skin_from_dict(data: Any) -> TrackSkin:
    if not isinstance(data, dict):
        return TrackSkin()
    color = data.get("color")
    return TrackSkin(
        track_width_cm=_float_field(data, "trackWidthCm", DEFAULT_TRACK_WIDTH_CM),
        color=color if isinstance(color, str) else None,
    )


def project_from_dict(data: Dict[str, Any], default_type: Optional[str] = None) -> Project:
    """
    Build a Project from the persisted document.

    Raises:
        ProjectFormatError: If the document is not an object or holds invalid pieces.
    """
    if not isinstance(data, dict):
        raise ProjectFormatError("Project document must be a JSON object.")

    pieces_data = data.get("pieces") or []
    if not isinstance(pieces_data, list):
        raise ProjectFormatError("'pieces' must be a list.")

    return Project(
        name=_str_field(data, "name", IMPORTED_PROJECT_NAME),
        version=_str_field(data, "version", DEFAULT_PROJECT_VERSION),
        description=_str_field(data, "description", ""),
        pieces=tuple(piece_from_dict(p, default_type) for p in pieces_data),
        boundary=_boundary_from_dict(data.get("boundary")),
        skin=_skin_from_dict(data.get("skin")),
    )


def import_legacy_json(text: str) -> Project:
    """
    Import any of the older JSON exports.

    Recognized shapes:
        1. A bare list of pieces.
        2. A BOM export: ``{"totalPieces": n, "details": [...], "bom": {...}}``
           (the bom table is ignored and recomputed).
        3. A standard document with a ``pieces`` list.
        4. An object with only a ``details`` list.

    Pieces without a type are treated as straights.

    Raises:
        ProjectFormatError: For invalid JSON or an unrecognized shape.
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ProjectFormatError("Invalid JSON format") from e

    if isinstance(raw, list):
        pieces = _legacy_pieces(raw)
        logger.info(f"Imported bare piece list ({len(pieces)} pieces).")
        return Project(name=IMPORTED_PROJECT_NAME, pieces=pieces)

    if not isinstance(raw, dict):
        raise ProjectFormatError("Unrecognized JSON format")

    name = _str_field(raw, "name", IMPORTED_PROJECT_NAME)

    if isinstance(raw.get("totalPieces"), (int, float)):
        details = raw.get("details")
        pieces = _legacy_pieces(details if isinstance(details, list) else [])
        logger.info(f"Imported BOM export '{name}' ({len(pieces)} pieces).")
        return Project(name=name, pieces=pieces)

    if isinstance(raw.get("pieces"), list):
        project = project_from_dict(
            {**raw, "name": name, "pieces": [p for p in raw["pieces"] if isinstance(p, dict)]},
            default_type=PieceType.STRAIGHT,
        )
        logger.info(f"Imported project '{name}' ({len(project.pieces)} pieces).")
        return project

    if isinstance(raw.get("details"), list):
        pieces = _legacy_pieces(raw["details"])
        logger.info(f"Imported details list '{name}' ({len(pieces)} pieces).")
        return Project(name=name, pieces=pieces)

    raise ProjectFormatError("Unrecognized JSON format")


def _legacy_pieces(items: List[Any]) -> tuple[Piece, ...]:
    return tuple(
        piece_from_dict(item, default_type=PieceType.STRAIGHT)
        for item in items
        if isinstance(item, dict)
    )


class ProjectIO:
    """Reads and writes project files."""

    @staticmethod
    def save_project(project: Project, filepath: str) -> None:
        logger.info(f"Saving project to: {filepath}")
        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(project_to_dict(project), f, ensure_ascii=False, indent=2)
        except OSError:
            logger.exception(f"Failed to save project to '{filepath}'")
            raise
        logger.debug(f"Saved {len(project.pieces)} pieces.")

    @staticmethod
    def load_project(filepath: str) -> Project:
        """
        Load a project file, accepting the legacy export shapes too.

        Raises:
            FileNotFoundError: If the file does not exist.
            ProjectFormatError: If the content cannot be understood.
        """
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"Project file not found: {filepath}")

        with open(filepath, "r", encoding="utf-8") as f:
            text = f.read()

        project = import_legacy_json(text)
        logger.info(f"Project loaded from: {filepath}")
        return project
