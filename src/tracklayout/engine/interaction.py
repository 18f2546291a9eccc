"""
Pointer Interaction
===================
Turns raw pointer events (press, move, release, leave) into editor commands.

Why is this file needed?
------------------------
A press on a piece is ambiguous until the pointer moves: it may be a click
(select) or the start of a drag (move + snap). The interaction is modelled
as an explicit state machine instead of scattered flags:

    IDLE --press on piece--> ARMED --travel >= threshold--> DRAGGING
      ^                        |                              |
      +------release (click)---+-------release (commit)-------+

    IDLE --middle press--> PANNING --release--> IDLE
    IDLE --press on empty canvas--> BOX_SELECTING --release--> IDLE

Drag frames update the project without touching the history; the release
of a drag records a single undo step.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Optional
import logging
import math

from tracklayout.config import CLICK_THRESHOLD_PX, SNAP_DISTANCE_CM
from tracklayout.engine import editor
from tracklayout.engine.editor import EditorState
from tracklayout.engine.snap import snap_piece
from tracklayout.engine.view import ViewTransform, ScreenPoint
from tracklayout.model.geometry_primitives import Point, Vector
from tracklayout.model.pieces import PieceId, hit_test

logger = logging.getLogger(__name__)


class InteractionMode(Enum):
    IDLE = auto()
    ARMED = auto()
    DRAGGING = auto()
    PANNING = auto()
    BOX_SELECTING = auto()


class PointerButton(Enum):
    LEFT = 0
    MIDDLE = 1
    RIGHT = 2


@dataclass
class DragState:
    """Transient data of a press on a piece."""
    piece_id: PieceId
    press_screen: ScreenPoint
    grab_offset: Vector                       # pointer world point - piece position
    start_positions: dict = field(default_factory=dict)
    moved_ids: tuple = ()


@dataclass
class PointerController:
    """
    Pointer state machine of one canvas.

    All handlers take and return an `EditorState`; the controller itself only
    keeps the transient gesture data.
    """
    view: ViewTransform
    click_threshold_px: float = CLICK_THRESHOLD_PX
    snap_distance: float = SNAP_DISTANCE_CM

    mode: InteractionMode = InteractionMode.IDLE
    drag: Optional[DragState] = None
    snap_target: Optional[Point] = None
    pan_last: Optional[ScreenPoint] = None
    box_start: Optional[Point] = None
    box_end: Optional[Point] = None

    def reset(self) -> None:
        self.mode = InteractionMode.IDLE
        self.drag = None
        self.snap_target = None
        self.pan_last = None
        self.box_start = None
        self.box_end = None

    # ------------------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------------------

    def press(
        self,
        state: EditorState,
        screen_point: ScreenPoint,
        button: PointerButton = PointerButton.LEFT,
        multi: bool = False,
    ) -> EditorState:
        if self.mode != InteractionMode.IDLE:
            # A second button while a gesture runs is ignored
            return state

        if button == PointerButton.MIDDLE:
            self.mode = InteractionMode.PANNING
            self.pan_last = screen_point
            return state

        if button != PointerButton.LEFT:
            return state

        world = self.view.screen_to_world(screen_point)
        piece = hit_test(state.project.pieces, world, state.project.skin.track_width_cm)

        if piece is None:
            self.mode = InteractionMode.BOX_SELECTING
            self.box_start = world
            self.box_end = world
            return state if multi else editor.clear_selection(state)

        if multi:
            # Ctrl+click only toggles membership, it never starts a drag
            return editor.select(state, piece.id, multi=True)

        self.mode = InteractionMode.ARMED
        self.drag = DragState(
            piece_id=piece.id,
            press_screen=screen_point,
            grab_offset=world - piece.position,
        )
        return state

    def move(self, state: EditorState, screen_point: ScreenPoint) -> EditorState:
        if self.mode == InteractionMode.PANNING and self.pan_last is not None:
            last_x, last_y = self.pan_last
            self.view.pan_by((screen_point[0] - last_x, screen_point[1] - last_y))
            self.pan_last = screen_point
            return state

        if self.mode == InteractionMode.BOX_SELECTING:
            self.box_end = self.view.screen_to_world(screen_point)
            return state

        if self.mode == InteractionMode.ARMED:
            px, py = self.drag.press_screen
            if math.hypot(screen_point[0] - px, screen_point[1] - py) < self.click_threshold_px:
                return state
            state = self._begin_drag(state)
            if self.mode != InteractionMode.DRAGGING:
                return state

        if self.mode == InteractionMode.DRAGGING:
            return self._drag_to(state, screen_point)

        return state

    def release(self, state: EditorState, screen_point: Optional[ScreenPoint] = None,
                multi: bool = False) -> EditorState:
        try:
            if self.mode == InteractionMode.BOX_SELECTING:
                if screen_point is not None:
                    self.box_end = self.view.screen_to_world(screen_point)
                return editor.select_in_rect(state, self.box_start, self.box_end, additive=multi)

            if self.mode == InteractionMode.ARMED:
                # Sub-threshold travel: plain click
                return editor.select(state, self.drag.piece_id, multi=False)

            if self.mode == InteractionMode.DRAGGING:
                return self._commit_drag(state)

            return state
        finally:
            self.reset()

    def leave(self, state: EditorState) -> EditorState:
        """Pointer left the canvas: finish the gesture like a release."""
        return self.release(state)

    # ------------------------------------------------------------------------------
    # Drag internals
    # ------------------------------------------------------------------------------

    def _begin_drag(self, state: EditorState) -> EditorState:
        drag = self.drag
        if not state.project.has_piece(drag.piece_id):
            logger.debug(f"Drag target {drag.piece_id!r} vanished, cancelling.")
            self.reset()
            return state

        if not state.is_selected(drag.piece_id):
            state = editor.select(state, drag.piece_id, multi=False)

        moved = [p.id for p in state.selected_pieces()]
        drag.moved_ids = tuple(moved)
        drag.start_positions = {p.id: p.position for p in state.project.pieces_by_ids(moved)}
        self.mode = InteractionMode.DRAGGING
        logger.debug(f"Drag started on {drag.piece_id!r} with {len(moved)} piece(s).")
        return state

    def _drag_to(self, state: EditorState, screen_point: ScreenPoint) -> EditorState:
        drag = self.drag
        current = state.project.get_piece(drag.piece_id)
        if current is None:
            return state

        candidate = self.view.screen_to_world(screen_point) - drag.grab_offset
        result = snap_piece(
            state.project,
            drag.piece_id,
            candidate,
            exclude=drag.moved_ids,
            threshold=self.snap_distance,
        )
        self.snap_target = result.target

        delta = result.position - current.position
        project = editor.translate_pieces(state.project, drag.moved_ids, delta)
        return replace(state, project=project)

    def _commit_drag(self, state: EditorState) -> EditorState:
        drag = self.drag
        moved = [
            p for p in state.project.pieces_by_ids(drag.moved_ids)
            if p.position != drag.start_positions.get(p.id)
        ]
        if not moved:
            return state
        return editor.commit_project(state, state.project, f"Moved {len(moved)} piece(s)")
