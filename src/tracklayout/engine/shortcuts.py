"""Keyboard shortcuts of the canvas."""
from __future__ import annotations

from enum import StrEnum
from typing import Optional
import logging

from tracklayout.config import ROTATION_STEP_DEG
from tracklayout.engine import editor
from tracklayout.engine.editor import EditorState

logger = logging.getLogger(__name__)


class Shortcut(StrEnum):
    ROTATE = "rotate"
    DELETE = "delete"
    UNDO = "undo"
    REDO = "redo"
    COPY = "copy"
    PASTE = "paste"
    CLEAR_SELECTION = "clear_selection"


def resolve_shortcut(key: str, ctrl: bool = False, shift: bool = False) -> Optional[Shortcut]:
    """
    Map a key press to a shortcut.

    Args:
        key: Key name as reported by the toolkit ("Tab", "Delete", "z", ...).
        ctrl: Ctrl (or Cmd) held.
        shift: Shift held.
    """
    name = key.lower()

    if ctrl:
        if name == "z":
            return Shortcut.REDO if shift else Shortcut.UNDO
        if name == "y":
            return Shortcut.REDO
        if name == "c":
            return Shortcut.COPY
        if name == "v":
            return Shortcut.PASTE
        return None

    if name == "tab":
        return Shortcut.ROTATE
    if name in ("delete", "del"):
        return Shortcut.DELETE
    if name in ("escape", "esc"):
        return Shortcut.CLEAR_SELECTION
    return None


def apply_shortcut(state: EditorState, shortcut: Shortcut) -> EditorState:
    if shortcut == Shortcut.ROTATE:
        return editor.rotate_selection(state, ROTATION_STEP_DEG)
    if shortcut == Shortcut.DELETE:
        return editor.delete_selection(state)
    if shortcut == Shortcut.UNDO:
        return editor.undo(state)
    if shortcut == Shortcut.REDO:
        return editor.redo(state)
    if shortcut == Shortcut.COPY:
        return editor.copy_selection(state)
    if shortcut == Shortcut.PASTE:
        return editor.paste(state)
    if shortcut == Shortcut.CLEAR_SELECTION:
        return editor.clear_selection(state)
    return state


def handle_key(
    state: EditorState,
    key: str,
    ctrl: bool = False,
    shift: bool = False,
    text_input_focused: bool = False,
) -> tuple[EditorState, Optional[Shortcut]]:
    """
    Apply the shortcut bound to a key press.

    Returns:
        The new state and the shortcut that fired (None if the key is not
        bound or a text input has focus).
    """
    if text_input_focused:
        return state, None

    shortcut = resolve_shortcut(key, ctrl=ctrl, shift=shift)
    if shortcut is None:
        return state, None

    logger.debug(f"Shortcut {shortcut} ({key}).")
    return apply_shortcut(state, shortcut), shortcut
