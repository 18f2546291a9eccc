from __future__ import annotations

from typing import Optional
import logging

from PySide6.QtCore import QObject, Signal

from tracklayout.engine import editor
from tracklayout.engine.editor import EditorState
from tracklayout.engine.interaction import PointerController, PointerButton
from tracklayout.engine.shortcuts import handle_key
from tracklayout.engine.view import ViewTransform, ScreenPoint
from tracklayout.model.bom import BOMSummary, summarize_project
from tracklayout.model.geometry_primitives import Point
from tracklayout.model.io import ProjectIO
from tracklayout.model.pieces import Piece, PieceId, connectors
from tracklayout.model.project import Project, Boundary, TrackSkin

logger = logging.getLogger(__name__)


class Store(QObject):
    """Central editor store with signals for canvas/panel sync."""
    project_changed = Signal(object)
    selection_changed = Signal(object)
    history_changed = Signal(bool, bool)   # can_undo, can_redo
    view_changed = Signal(object)
    snap_target_changed = Signal(object)
    error_occurred = Signal(str)

    def __init__(self, project: Optional[Project] = None) -> None:
        super().__init__()
        self.state: EditorState = editor.new_state(project)
        self.view = ViewTransform()
        self.pointer = PointerController(view=self.view)

    # ---- read access ----

    @property
    def project(self) -> Project:
        return self.state.project

    @property
    def selection(self) -> frozenset:
        return self.state.selection

    def bom(self) -> BOMSummary:
        return summarize_project(self.state.project)

    # ---- state plumbing ----

    def _apply(self, new_state: EditorState) -> None:
        """Swap in a new state and emit what changed."""
        old = self.state
        self.state = new_state

        if new_state.project is not old.project:
            self.project_changed.emit(new_state.project)
        if new_state.selection != old.selection:
            self.selection_changed.emit(new_state.selection)
        self.history_changed.emit(new_state.history.can_undo(), new_state.history.can_redo())

    def _run(self, command, *args, **kwargs) -> None:
        """Run an editor command; errors are reported and re-raised unchanged."""
        try:
            new_state = command(self.state, *args, **kwargs)
        except ValueError as e:
            self.error_occurred.emit(str(e))
            raise
        self._apply(new_state)

    # ---- project ----

    def new_project(self, name: Optional[str] = None) -> None:
        project = Project() if name is None else Project(name=name)
        self._run(editor.load_project, project)
        self.view.reset()
        self.view_changed.emit(self.view)

    def set_project(self, project: Project) -> None:
        self._run(editor.load_project, project)

    def open_project(self, filepath: str) -> None:
        try:
            project = ProjectIO.load_project(filepath)
        except (OSError, ValueError) as e:
            self.error_occurred.emit(str(e))
            raise
        self.set_project(project)
        self.fit_view()

    def save_project(self, filepath: str) -> None:
        ProjectIO.save_project(self.state.project, filepath)

    def set_boundary(self, boundary: Optional[Boundary]) -> None:
        self._run(editor.set_boundary, boundary)

    def set_skin(self, skin: TrackSkin) -> None:
        self._run(editor.set_skin, skin)

    # ---- pieces ----

    def add_piece(self, piece: Piece) -> None:
        self._run(editor.add_piece, piece)

    def add_from_text(self, text: str) -> None:
        self._run(editor.add_from_text, text)

    def add_from_catalog(self, code: str) -> None:
        self._run(editor.add_from_catalog, code)

    def update_piece(self, piece_id: PieceId, position: Optional[Point] = None,
                     rotation: Optional[float] = None) -> None:
        self._run(editor.update_piece, piece_id, position=position, rotation=rotation)

    def delete_selection(self) -> None:
        self._run(editor.delete_selection)

    def rotate_selection(self, delta_deg: float) -> None:
        self._run(editor.rotate_selection, delta_deg)

    def copy_selection(self) -> None:
        self._run(editor.copy_selection)

    def paste(self) -> None:
        self._run(editor.paste)

    def undo(self) -> None:
        self._run(editor.undo)

    def redo(self) -> None:
        self._run(editor.redo)

    # ---- selection ----

    def select(self, piece_id: PieceId, multi: bool = False) -> None:
        self._run(editor.select, piece_id, multi=multi)

    def clear_selection(self) -> None:
        self._run(editor.clear_selection)

    # ---- input events ----

    def pointer_press(self, screen_point: ScreenPoint, button: PointerButton = PointerButton.LEFT,
                      multi: bool = False) -> None:
        self._apply(self.pointer.press(self.state, screen_point, button=button, multi=multi))

    def pointer_move(self, screen_point: ScreenPoint) -> None:
        window_before = self.view.window.x, self.view.window.y
        snap_before = self.pointer.snap_target

        self._apply(self.pointer.move(self.state, screen_point))

        if (self.view.window.x, self.view.window.y) != window_before:
            self.view_changed.emit(self.view)
        if self.pointer.snap_target != snap_before:
            self.snap_target_changed.emit(self.pointer.snap_target)

    def pointer_release(self, screen_point: Optional[ScreenPoint] = None, multi: bool = False) -> None:
        had_target = self.pointer.snap_target is not None
        self._apply(self.pointer.release(self.state, screen_point, multi=multi))
        if had_target:
            self.snap_target_changed.emit(None)

    def pointer_leave(self) -> None:
        self.pointer_release()

    def wheel(self, screen_point: ScreenPoint, delta_y: float) -> None:
        zoom = self.view.zoom
        self.view.wheel(screen_point, delta_y)
        if self.view.zoom != zoom:
            self.view_changed.emit(self.view)

    def fit_view(self) -> None:
        """Frame every connector of the layout."""
        points = [point for piece in self.state.project.pieces for point in connectors(piece)]
        self.view.fit_to(points)
        self.view_changed.emit(self.view)

    def resize_canvas(self, width: float, height: float) -> None:
        self.view.resize(width, height)
        self.view_changed.emit(self.view)

    def key_press(self, key: str, ctrl: bool = False, shift: bool = False,
                  text_input_focused: bool = False) -> bool:
        """Returns True when the key was consumed by a shortcut."""
        new_state, shortcut = handle_key(
            self.state, key, ctrl=ctrl, shift=shift, text_input_focused=text_input_focused
        )
        if shortcut is None:
            return False
        self._apply(new_state)
        return True
