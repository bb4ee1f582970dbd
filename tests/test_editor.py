from __future__ import annotations

from exchange import keys
from exchange.buffer import ExchangeBuffer
from exchange.editor import ExchangeEditor


def _editor(text: str, width: int = 10, cursor=None) -> ExchangeEditor:
    return ExchangeEditor(ExchangeBuffer(width, text), cursor)


def test_cursor_starts_on_last_character():
    ed = _editor("ABC")
    assert ed.cursor == 2


def test_home_then_insert_promotes_and_advances():
    ed = _editor("ABC")
    assert ed.handle(keys.KEY_HOME)
    assert ed.cursor == 0
    assert ed.handle(ord("x"))
    assert ed.buffer.text == "XABC"
    assert ed.cursor == 1
    assert ed.changed


def test_insert_refused_when_full():
    ed = _editor("ABC", width=3, cursor=0)
    assert ed.handle(ord("Z"))
    assert ed.buffer.text == "ABC"
    assert ed.cursor == 0
    assert not ed.changed


def test_right_on_last_character_exits():
    ed = _editor("ABC", cursor=1)
    assert ed.handle(keys.KEY_RIGHT)
    assert ed.cursor == 2
    assert not ed.handle(keys.KEY_RIGHT)


def test_left_stops_at_zero():
    ed = _editor("AB", cursor=0)
    assert ed.handle(keys.KEY_LEFT)
    assert ed.cursor == 0


def test_backspace_deletes_left_of_cursor():
    ed = _editor("ABC")
    assert ed.handle(keys.KEY_BACKSPACE)
    assert ed.buffer.text == "AC"
    assert ed.cursor == 1


def test_delete_removes_char_under_cursor():
    ed = _editor("ABC", cursor=1)
    assert ed.handle(keys.KEY_DC)
    assert ed.buffer.text == "AC"


def test_end_escape_and_other_keys_exit():
    ed = _editor("ABC")
    assert not ed.handle(keys.KEY_END)
    assert ed.cursor == 3
    assert not _editor("ABC").handle(keys.ESCAPE)
    assert not _editor("ABC").handle(keys.TAB)
    assert _editor("ABC").handle(0)
