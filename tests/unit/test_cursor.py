from __future__ import annotations

from sheetfeed.source.cursor import CursorState, RecordCursor

RECORDS = [{"A": "1"}, {"A": "2"}]


def test_initial_state():
    cursor = RecordCursor()
    assert cursor.state is CursorState.NOT_STARTED
    assert cursor.position == 0


def test_rewind_then_drain():
    cursor = RecordCursor()
    cursor.rewind()
    assert cursor.state is CursorState.ITERATING
    assert cursor.advance(RECORDS) == {"A": "1"}
    assert cursor.advance(RECORDS) == {"A": "2"}
    assert cursor.state is CursorState.ITERATING
    assert cursor.advance(RECORDS) is None
    assert cursor.state is CursorState.EXHAUSTED
    # 尽きた後も None を返し続ける
    assert cursor.advance(RECORDS) is None


def test_rewind_restarts_from_any_state():
    cursor = RecordCursor()
    cursor.rewind()
    cursor.advance(RECORDS)
    cursor.rewind()
    assert cursor.position == 0
    assert cursor.advance(RECORDS) == {"A": "1"}


def test_advance_without_rewind_starts_at_zero():
    cursor = RecordCursor()
    assert cursor.advance(RECORDS) == {"A": "1"}
    assert cursor.state is CursorState.ITERATING


def test_empty_records_exhaust_immediately():
    cursor = RecordCursor()
    cursor.rewind()
    assert cursor.advance([]) is None
    assert cursor.state is CursorState.EXHAUSTED
