"""Qt store: signals emitted for canvas and panel updates."""
import pytest

from tracklayout.app.state import Store
from tracklayout.engine.interaction import PointerButton
from tracklayout.model.catalog import QuickTextError
from tracklayout.model.geometry_primitives import Point


class Recorder:
    """Collects signal payloads."""

    def __init__(self, signal):
        self.calls = []
        signal.connect(self)

    def __call__(self, *args):
        self.calls.append(args)


@pytest.fixture
def store(project):
    return Store(project)


def test_add_piece_emits_project_and_history(store):
    projects = Recorder(store.project_changed)
    history = Recorder(store.history_changed)
    store.add_from_text("L50")
    assert len(projects.calls) == 1
    assert history.calls[-1] == (True, False)
    assert len(store.project.pieces) == 4


def test_invalid_quick_text_reports_error(store):
    errors = Recorder(store.error_occurred)
    projects = Recorder(store.project_changed)
    with pytest.raises(QuickTextError):
        store.add_from_text("L")
    assert len(errors.calls) == 1
    assert "Invalid piece format" in errors.calls[0][0]
    assert projects.calls == []


def test_selection_change_does_not_emit_project(store):
    projects = Recorder(store.project_changed)
    selections = Recorder(store.selection_changed)
    store.select("a")
    assert projects.calls == []
    assert selections.calls == [(frozenset({"a"}),)]


def test_undo_redo_flags(store):
    history = Recorder(store.history_changed)
    store.add_from_text("L50")
    store.undo()
    assert history.calls[-1] == (False, True)
    store.redo()
    assert history.calls[-1] == (True, False)


def test_key_press(store):
    store.select("b")
    assert store.key_press("Tab")
    assert store.project.get_piece("b").rotation == 15.0
    assert not store.key_press("Delete", text_input_focused=True)
    assert store.project.has_piece("b")


def test_pointer_drag_emits_snap_target(store):
    targets = Recorder(store.snap_target_changed)
    view = store.view
    store.pointer_press(view.world_to_screen(Point(350.0, 0.0)))
    store.pointer_move(view.world_to_screen(Point(160.0, 5.0)))
    assert targets.calls[-1] == (Point(100.0, 0.0),)
    store.pointer_release()
    assert targets.calls[-1] == (None,)
    assert store.project.get_piece("b").position == Point(100.0, 0.0)
    assert store.state.history.can_undo()


def test_wheel_and_pan_emit_view_changed(store):
    views = Recorder(store.view_changed)
    store.wheel((100.0, 100.0), -120.0)
    assert len(views.calls) == 1
    store.pointer_press((100.0, 100.0), button=PointerButton.MIDDLE)
    store.pointer_move((120.0, 100.0))
    assert len(views.calls) == 2


def test_bom(store):
    assert store.bom().counts() == {"L100": 2, "R50-90": 1}


def test_open_and_save(store, tmp_path):
    path = str(tmp_path / "track.json")
    store.save_project(path)
    store.new_project("Blank")
    assert store.project.pieces == ()
    store.open_project(path)
    assert store.project.name == "Test Track"
    assert len(store.project.pieces) == 3
    assert not store.state.history.can_undo()


def test_open_missing_reports_error(store, tmp_path):
    errors = Recorder(store.error_occurred)
    with pytest.raises(FileNotFoundError):
        store.open_project(str(tmp_path / "nope.json"))
    assert len(errors.calls) == 1


def test_fit_view_frames_layout(store):
    views = Recorder(store.view_changed)
    store.fit_view()
    assert len(views.calls) == 1
    for piece in store.project.pieces:
        sx, sy = store.view.world_to_screen(piece.position)
        assert 0.0 <= sx <= store.view.canvas_width
        assert 0.0 <= sy <= store.view.canvas_height
