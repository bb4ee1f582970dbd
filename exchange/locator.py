from __future__ import annotations

import re

# Field A-R, square 0-9, optional subsquare A-X.
GRID_RE = re.compile(r"^[A-R]{2}[0-9]{2}([A-X]{2})?$")


def is_valid_grid_square(text: str) -> bool:
    return GRID_RE.match(text.strip().upper()) is not None


def get_grid(buffer: str) -> str:
    """Locator candidate: from the first upper case letter on, at most 4 characters."""
    start = 0
    for idx, ch in enumerate(buffer):
        if "A" <= ch <= "Z":
            start = idx
            break
    return buffer[start : start + 4]
