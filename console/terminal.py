from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Optional

try:
    import curses
except Exception:  # pragma: no cover - optional runtime dependency (missing on Windows)
    curses = None

CALL_ROW = 2
EXCHANGE_ROW = 3
FIELD_ROW = 5
STATUS_ROW = 10
LABEL_WIDTH = 8


class CursesKeySource:
    """Key source over a curses window; `poll` waits at most `timeout` seconds."""

    def __init__(self, screen):
        self.screen = screen
        self.screen.keypad(True)

    def poll(self, timeout: float) -> Optional[int]:
        self.screen.timeout(max(int(timeout * 1000), 0))
        key = self.screen.getch()
        if key == -1:
            return None
        return key


class CursesDisplay:
    def __init__(self, screen, contest: str, my_call: str):
        self.screen = screen
        self.contest = contest
        self.my_call = my_call
        self.fields: Dict[str, int] = {}
        self.wpm = 0
        self.rst = ""
        self.cursor = (EXCHANGE_ROW, LABEL_WIDTH)

    def draw_frame(self) -> None:
        self.screen.erase()
        self._put(0, 0, f"{self.contest}  de {self.my_call}", curses.A_REVERSE)
        self._put(CALL_ROW, 0, "Call:")
        self._put(EXCHANGE_ROW, 0, "Exch:")
        self.tick()

    def tick(self) -> None:
        _, width = self.screen.getmaxyx()
        clock = datetime.now(timezone.utc).strftime("%H:%M:%S")
        self._put(0, max(width - len(clock) - 1, 0), clock, curses.A_REVERSE)
        self._restore_cursor()

    def show(self, field_id: str, text: str) -> None:
        row = self.fields.setdefault(field_id, FIELD_ROW + len(self.fields))
        self._line(row, f"{field_id:>{LABEL_WIDTH - 2}}: {text}")

    def notify(self, message: str) -> None:
        self._line(STATUS_ROW, message, curses.A_BOLD)
        curses.beep()

    def show_exchange(self, text: str, cursor: int) -> None:
        self._line(EXCHANGE_ROW, f"{'Exch:':<{LABEL_WIDTH}}{text}")
        self.cursor = (EXCHANGE_ROW, LABEL_WIDTH + cursor)
        self._restore_cursor()

    def show_call(self, call: str) -> None:
        self._line(CALL_ROW, f"{'Call:':<{LABEL_WIDTH}}{call}")

    def show_speed(self, wpm: int) -> None:
        self.wpm = wpm
        self._status_bar()

    def show_rst(self, rst: str) -> None:
        self.rst = rst
        self._status_bar()

    def _status_bar(self) -> None:
        parts = []
        if self.wpm:
            parts.append(f"{self.wpm:2d} WPM")
        if self.rst:
            parts.append(f"RST {self.rst}")
        self._line(STATUS_ROW + 1, "  ".join(parts))

    def _line(self, row: int, text: str, attr: int = 0) -> None:
        self._put(row, 0, " " * (self.screen.getmaxyx()[1] - 1))
        self._put(row, 0, text, attr)
        self._restore_cursor()

    def _put(self, row: int, col: int, text: str, attr: int = 0) -> None:
        try:
            self.screen.addstr(row, col, text, attr)
        except curses.error:
            pass

    def _restore_cursor(self) -> None:
        try:
            self.screen.move(*self.cursor)
        except curses.error:
            pass
        self.screen.refresh()


def run_curses(session, *args, **kwargs):
    """Run `session(screen, *args, **kwargs)` inside curses.wrapper with meta keys enabled."""
    if curses is None:
        raise RuntimeError("curses is not available on this platform.")

    def _inner(screen):
        curses.meta(True)
        curses.curs_set(1)
        return session(screen, *args, **kwargs)

    return curses.wrapper(_inner)
