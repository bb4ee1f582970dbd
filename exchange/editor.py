from __future__ import annotations

from typing import Optional

from . import keys
from .buffer import ExchangeBuffer


class ExchangeEditor:
    """
    Cursor addressed in-place editing of the exchange buffer.
    `handle` returns False once the key ends the edit submode.
    """

    def __init__(self, buffer: ExchangeBuffer, cursor: Optional[int] = None):
        self.buffer = buffer
        self.cursor = len(buffer) - 1 if cursor is None else cursor
        self.cursor = max(0, min(self.cursor, len(buffer)))
        self.changed = False

    def handle(self, key: int) -> bool:
        buf = self.buffer

        if key in (keys.CTRL_A, keys.KEY_HOME):
            self.cursor = 0
            return True

        if key in (keys.CTRL_E, keys.KEY_END):
            self.cursor = len(buf)
            return False

        if key == keys.KEY_LEFT:
            if self.cursor > 0:
                self.cursor -= 1
            return True

        if key == keys.KEY_RIGHT:
            if self.cursor < len(buf) - 1:
                self.cursor += 1
                return True
            return False

        if key == keys.KEY_DC:
            self.changed |= buf.delete(self.cursor)
            return self._in_range()

        if key == keys.KEY_BACKSPACE:
            if self.cursor > 0:
                self.cursor -= 1
                self.changed |= buf.delete(self.cursor)
            return self._in_range()

        if key == keys.ESCAPE:
            return False

        key = keys.promote(key)
        if keys.is_exchange_char(key):
            if buf.insert(self.cursor, chr(key)):
                self.cursor += 1
                self.changed = True
            return True

        # Any other key leaves the editor, except the "no key" marker 0.
        return key == 0

    def _in_range(self) -> bool:
        if self.cursor > len(self.buffer):
            self.cursor = len(self.buffer)
            return False
        return True
