"""
Editor State & Commands
=======================
This module defines the application state of the editor and every operation
that changes it.

Why is this file needed?
------------------------
1. State Management: The project, the selection, the clipboard and the undo
   history live in one explicit `EditorState` object instead of ambient
   globals.
2. Commands: Every operation is a plain function `command(state, ...) ->
   EditorState`. This keeps the engine testable without any UI.
3. History: Structural edits (add, delete, paste, rotate, committed moves)
   record exactly one snapshot. Selection changes never do.

Notes:
    `EditorState` is frozen, commands return a new instance. The
    `HistoryManager` is the one mutable collaborator shared between the old
    and the new state; once a command has returned, only the returned state
    should be used.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional
import logging
import math

import numpy as np

from tracklayout.config import HISTORY_CAPACITY, PASTE_OFFSET_CM
from tracklayout.engine.history import HistoryManager
from tracklayout.model.catalog import get_definition, piece_from_quick_text, QuickTextError
from tracklayout.model.geometry_primitives import Point, Vector
from tracklayout.model.pieces import Piece, PieceId
from tracklayout.model.project import Project, Boundary, TrackSkin

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditorState:
    project: Project = field(default_factory=Project)
    selection: frozenset = frozenset()
    clipboard: tuple[Piece, ...] = ()
    history: HistoryManager = field(default_factory=HistoryManager)

    def selected_pieces(self) -> list[Piece]:
        """Selected pieces that still exist, in project order."""
        return self.project.pieces_by_ids(self.selection)

    def is_selected(self, piece_id: PieceId) -> bool:
        return piece_id in self.selection


def new_state(project: Optional[Project] = None, capacity: int = HISTORY_CAPACITY) -> EditorState:
    """Create the state for a session; the initial project is the first history entry."""
    project = project if project is not None else Project()
    history: HistoryManager = HistoryManager(capacity=capacity)
    history.reset(project)
    return EditorState(project=project, history=history)


def _commit(state: EditorState, project: Project, action: str, **changes) -> EditorState:
    """Replace the project and record it as one undo step."""
    state.history.record(project)
    logger.info(f"{action} ({len(project.pieces)} pieces in project).")
    return replace(state, project=project, **changes)


# ------------------------------------------------------------------------------
# Project lifecycle
# ------------------------------------------------------------------------------

def load_project(state: EditorState, project: Project) -> EditorState:
    """Replace the whole project. Selection is cleared and history restarts."""
    state.history.reset(project)
    logger.info(f"Loaded project '{project.name}' ({len(project.pieces)} pieces).")
    return replace(state, project=project, selection=frozenset())


def commit_project(state: EditorState, project: Project, action: str = "Edit") -> EditorState:
    """Record an externally computed project (e.g. the end of a drag) as one undo step."""
    return _commit(state, project, action)


def set_boundary(state: EditorState, boundary: Optional[Boundary]) -> EditorState:
    return _commit(state, state.project.with_boundary(boundary), "Set boundary")


def set_skin(state: EditorState, skin: TrackSkin) -> EditorState:
    return _commit(state, state.project.with_skin(skin), "Set skin")


# ------------------------------------------------------------------------------
# Piece CRUD
# ------------------------------------------------------------------------------

def add_piece(state: EditorState, piece: Piece) -> EditorState:
    if state.project.has_piece(piece.id):
        raise ValueError(f"Piece with id '{piece.id}' already exists.")
    return _commit(state, state.project.add_pieces([piece]), f"Added {piece.type} piece {piece.id}")


def add_from_text(state: EditorState, text: str) -> EditorState:
    """
    Add a piece typed in quick-text notation (``L100``, ``R50-90``).

    Raises:
        QuickTextError: If the text is malformed; the state is unchanged.
    """
    try:
        piece = piece_from_quick_text(text)
    except QuickTextError as e:
        logger.warning(f"Rejected quick text: {e}")
        raise
    return add_piece(state, piece)


def add_from_catalog(state: EditorState, code: str, position: Optional[Point] = None) -> EditorState:
    definition = get_definition(code)
    if definition is None:
        raise ValueError(f"Unknown catalog piece '{code}'.")
    return add_piece(state, definition.create(position))


def delete_pieces(state: EditorState, ids: Iterable[PieceId]) -> EditorState:
    """Delete existing pieces among `ids`; unknown ids are skipped."""
    doomed = {p.id for p in state.project.pieces_by_ids(ids)}
    if not doomed:
        logger.debug("Delete: nothing to remove.")
        return state
    return _commit(
        state,
        state.project.remove_pieces(doomed),
        f"Deleted {len(doomed)} piece(s)",
        selection=frozenset(),
    )


def delete_selection(state: EditorState) -> EditorState:
    return delete_pieces(state, state.selection)


def update_piece(
    state: EditorState,
    piece_id: PieceId,
    position: Optional[Point] = None,
    rotation: Optional[float] = None,
) -> EditorState:
    """Set the position and/or rotation of one piece (the edit dialog)."""
    piece = state.project.get_piece(piece_id)
    if piece is None:
        logger.debug(f"Update skipped, piece {piece_id!r} not found.")
        return state

    updated = piece
    if position is not None:
        updated = updated.moved_to(position)
    if rotation is not None:
        updated = updated.rotated_to(rotation)
    if updated == piece:
        return state
    return _commit(state, state.project.replace_pieces({piece_id: updated}), f"Edited piece {piece_id}")


# ------------------------------------------------------------------------------
# Rigid transforms
# ------------------------------------------------------------------------------

def translate_pieces(project: Project, ids: Iterable[PieceId], delta: Vector) -> Project:
    """Move the given pieces by `delta`. No history, used for drag frames."""
    if delta.x == 0.0 and delta.y == 0.0:
        return project
    return project.replace_pieces({p.id: p.moved_by(delta) for p in project.pieces_by_ids(ids)})


def centroid(pieces: Iterable[Piece]) -> Optional[Point]:
    """Arithmetic mean of the piece start positions."""
    positions = np.array([(p.position.x, p.position.y) for p in pieces], dtype=float)
    if positions.size == 0:
        return None
    return Point.from_array(positions.mean(axis=0))


def rotate_pieces(project: Project, ids: Iterable[PieceId], delta_deg: float) -> Project:
    """
    Rotate pieces by `delta_deg` (counter-clockwise).

    A single piece spins in place around its start connector. Several pieces
    rotate as one rigid body around the centroid of their positions: each
    position is rotated about the centroid and each rotation increases by
    the same angle.
    """
    pieces = project.pieces_by_ids(ids)
    if not pieces:
        return project

    if len(pieces) == 1:
        piece = pieces[0]
        return project.replace_pieces({piece.id: piece.rotated_to(piece.rotation + delta_deg)})

    positions = np.array([(p.position.x, p.position.y) for p in pieces], dtype=float)
    center = positions.mean(axis=0)

    angle = math.radians(delta_deg)
    rotation_matrix = np.array([
        [math.cos(angle), -math.sin(angle)],
        [math.sin(angle), math.cos(angle)],
    ])
    rotated = (positions - center) @ rotation_matrix.T + center

    updates = {
        p.id: replace(p, position=Point.from_array(xy), rotation=p.rotation + delta_deg)
        for p, xy in zip(pieces, rotated)
    }
    return project.replace_pieces(updates)


def rotate_selection(state: EditorState, delta_deg: float) -> EditorState:
    selected = state.selected_pieces()
    if not selected:
        return state
    project = rotate_pieces(state.project, [p.id for p in selected], delta_deg)
    return _commit(state, project, f"Rotated {len(selected)} piece(s) by {delta_deg:g}°")


# ------------------------------------------------------------------------------
# Selection (transient, never recorded)
# ------------------------------------------------------------------------------

def select(state: EditorState, piece_id: PieceId, multi: bool = False) -> EditorState:
    """
    Click selection. Without `multi` the piece becomes the only selection;
    with `multi` its membership is toggled.
    """
    if not state.project.has_piece(piece_id):
        return state
    if not multi:
        return replace(state, selection=frozenset([piece_id]))
    return replace(state, selection=state.selection ^ {piece_id})


def select_many(state: EditorState, ids: Iterable[PieceId], additive: bool = False) -> EditorState:
    found = {p.id for p in state.project.pieces_by_ids(ids)}
    selection = state.selection | found if additive else frozenset(found)
    return replace(state, selection=frozenset(selection))


def select_in_rect(state: EditorState, corner_a: Point, corner_b: Point, additive: bool = False) -> EditorState:
    """Select pieces whose start connector lies inside the rectangle."""
    min_x, max_x = sorted((corner_a.x, corner_b.x))
    min_y, max_y = sorted((corner_a.y, corner_b.y))
    inside = [
        p.id for p in state.project.pieces
        if min_x <= p.position.x <= max_x and min_y <= p.position.y <= max_y
    ]
    if not inside:
        return state
    return select_many(state, inside, additive=additive)


def clear_selection(state: EditorState) -> EditorState:
    if not state.selection:
        return state
    return replace(state, selection=frozenset())


# ------------------------------------------------------------------------------
# Clipboard
# ------------------------------------------------------------------------------

def copy_selection(state: EditorState) -> EditorState:
    selected = state.selected_pieces()
    logger.debug(f"Copied {len(selected)} piece(s).")
    return replace(state, clipboard=tuple(selected))


def paste(state: EditorState, offset: tuple[float, float] = PASTE_OFFSET_CM) -> EditorState:
    """
    Insert copies of the clipboard shifted by `offset`, with fresh ids.
    The new pieces become the selection.
    """
    if not state.clipboard:
        return state
    shift = Vector(*offset)
    copies = [p.with_new_id().moved_by(shift) for p in state.clipboard]
    return _commit(
        state,
        state.project.add_pieces(copies),
        f"Pasted {len(copies)} piece(s)",
        selection=frozenset(p.id for p in copies),
    )


# ------------------------------------------------------------------------------
# History
# ------------------------------------------------------------------------------

def undo(state: EditorState) -> EditorState:
    project = state.history.undo()
    if project is None:
        return state
    logger.info("Undo.")
    return replace(state, project=project, selection=frozenset())


def redo(state: EditorState) -> EditorState:
    project = state.history.redo()
    if project is None:
        return state
    logger.info("Redo.")
    return replace(state, project=project, selection=frozenset())
