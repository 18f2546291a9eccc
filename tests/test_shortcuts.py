"""Keyboard shortcut mapping."""
import pytest

from tracklayout.engine import editor
from tracklayout.engine.shortcuts import Shortcut, resolve_shortcut, handle_key


@pytest.mark.parametrize("key, ctrl, shift, expected", [
    ("z", True, False, Shortcut.UNDO),
    ("Z", True, True, Shortcut.REDO),
    ("y", True, False, Shortcut.REDO),
    ("c", True, False, Shortcut.COPY),
    ("v", True, False, Shortcut.PASTE),
    ("Tab", False, False, Shortcut.ROTATE),
    ("Delete", False, False, Shortcut.DELETE),
    ("Escape", False, False, Shortcut.CLEAR_SELECTION),
    ("a", False, False, None),
    ("x", True, False, None),
    ("z", False, False, None),
])
def test_resolve(key, ctrl, shift, expected):
    assert resolve_shortcut(key, ctrl=ctrl, shift=shift) == expected


def test_tab_rotates_selection_by_step(state):
    state = editor.select(state, "b")
    state, shortcut = handle_key(state, "Tab")
    assert shortcut == Shortcut.ROTATE
    assert state.project.get_piece("b").rotation == 15.0


def test_delete_key(state):
    state = editor.select(state, "a")
    state, _ = handle_key(state, "Delete")
    assert not state.project.has_piece("a")


def test_copy_paste_keys(state):
    state = editor.select(state, "a")
    state, _ = handle_key(state, "c", ctrl=True)
    state, _ = handle_key(state, "v", ctrl=True)
    assert len(state.project.pieces) == 4


def test_undo_redo_keys(state):
    state = editor.add_from_text(state, "L100")
    state, _ = handle_key(state, "z", ctrl=True)
    assert len(state.project.pieces) == 3
    state, _ = handle_key(state, "z", ctrl=True, shift=True)
    assert len(state.project.pieces) == 4


def test_text_input_focus_suppresses_shortcuts(state):
    state = editor.select(state, "a")
    new_state, shortcut = handle_key(state, "Delete", text_input_focused=True)
    assert shortcut is None
    assert new_state is state


def test_unbound_key_returns_state(state):
    new_state, shortcut = handle_key(state, "q")
    assert shortcut is None
    assert new_state is state
