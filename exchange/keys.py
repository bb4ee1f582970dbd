from __future__ import annotations

# Numeric values follow curses so a curses getch() result can be used as-is.

CTRL_A = 1
CTRL_E = 5
CTRL_K = 11
CTRL_Q = 17
CTRL_S = 19
TAB = 9
LINEFEED = 10
ESCAPE = 27
BACKSLASH = 92

KEY_LEFT = 260
KEY_RIGHT = 261
KEY_HOME = 262
KEY_BACKSPACE = 263
KEY_F0 = 264
KEY_DC = 330
KEY_IC = 331
KEY_NPAGE = 338
KEY_PPAGE = 339
KEY_ENTER = 343
KEY_END = 360

# Alt-0 .. Alt-9 as delivered by the terminal in meta mode.
ALT_0 = 176
ALT_9 = 185


def KEY_F(n: int) -> int:
    return KEY_F0 + n


ENTER_KEYS = frozenset({LINEFEED, KEY_ENTER})
FINALIZE_KEYS = frozenset({LINEFEED, KEY_ENTER, BACKSLASH})
COMPLETION_KEYS = frozenset({LINEFEED, KEY_ENTER, TAB, BACKSLASH})


def promote(key: int) -> int:
    """Lower case letters become upper case, everything else is unchanged."""
    if ord("a") <= key <= ord("z"):
        return key - 32
    return key


def is_exchange_char(key: int) -> bool:
    return ord(" ") <= key <= ord("Z")
