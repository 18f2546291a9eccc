"""Bounded linear undo/redo history."""
import pytest

from tracklayout.engine.history import HistoryManager


@pytest.fixture
def history():
    h = HistoryManager(capacity=5)
    h.reset("initial")
    return h


def test_rejects_zero_capacity():
    with pytest.raises(ValueError):
        HistoryManager(capacity=0)


def test_empty_history():
    h = HistoryManager()
    assert len(h) == 0
    assert h.current is None
    assert not h.can_undo()
    assert not h.can_redo()
    assert h.undo() is None
    assert h.redo() is None


def test_reset_holds_one_entry(history):
    assert len(history) == 1
    assert history.cursor == 0
    assert history.current == "initial"
    assert not history.can_undo()


def test_record_moves_cursor_to_newest(history):
    history.record("one")
    history.record("two")
    assert len(history) == 3
    assert history.cursor == 2
    assert history.current == "two"
    assert history.can_undo()
    assert not history.can_redo()


def test_undo_redo_walk(history):
    history.record("one")
    history.record("two")
    assert history.undo() == "one"
    assert history.undo() == "initial"
    assert history.undo() is None
    assert history.cursor == 0
    assert history.redo() == "one"
    assert history.redo() == "two"
    assert history.redo() is None


def test_record_after_undo_discards_redo_branch(history):
    history.record("one")
    history.record("two")
    history.undo()
    history.record("other")
    assert not history.can_redo()
    assert history.undo() == "one"
    assert history.redo() == "other"
    assert len(history) == 3


def test_capacity_evicts_oldest(history):
    for i in range(12):
        history.record(f"edit {i}")
    assert len(history) == 5
    assert history.cursor == 4
    assert history.current == "edit 11"

    undone = [history.undo() for _ in range(4)]
    assert undone == ["edit 10", "edit 9", "edit 8", "edit 7"]
    assert history.undo() is None


@pytest.mark.parametrize("records", [3, 50, 120])
def test_length_never_exceeds_capacity_and_round_trips(records):
    h = HistoryManager(capacity=50)
    h.reset(0)
    for i in range(1, records + 1):
        h.record(i)
        assert len(h) <= 50

    newest = h.current
    steps = h.cursor
    for _ in range(steps):
        assert h.undo() is not None
    assert not h.can_undo()
    for _ in range(steps):
        assert h.redo() is not None
    assert h.current == newest


def test_snapshots_are_stored_by_reference(history):
    snapshot = ("immutable", 1)
    history.record(snapshot)
    history.record("after")
    assert history.undo() is snapshot
