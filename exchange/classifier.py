from __future__ import annotations

from typing import NamedTuple

UNDEFINED = "u"
BLANK = "b"
LETTER = "a"
DIGIT = "f"

ALPHABET = frozenset({UNDEFINED, BLANK, LETTER, DIGIT})


class PatternMatch(NamedTuple):
    found: bool
    offset: int

    def buffer_index(self, position: int = 0) -> int:
        """Buffer index of template symbol `position` (the sentinel shifts by one)."""
        return self.offset + position - 1


NO_MATCH = PatternMatch(False, 0)


def classify_char(ch: str) -> str:
    if "0" <= ch <= "9":
        return DIGIT
    if "A" <= ch <= "Z":
        return LETTER
    if ch == " ":
        return BLANK
    return UNDEFINED


def classify(buffer: str) -> str:
    """
    Map every exchange character onto the u/b/a/f alphabet.
    Both ends carry an undefined sentinel so templates can anchor on field borders.
    """
    return UNDEFINED + "".join(classify_char(ch) for ch in buffer) + UNDEFINED


def locate(classified: str, template: str) -> PatternMatch:
    """
    Find `template` in `classified`; the rightmost window wins.
    Exchanges are corrected by appending, so the latest occurrence is the relevant one.
    """
    width = len(template)
    if not width or len(classified) < width:
        return NO_MATCH

    result = NO_MATCH
    for offset in range(len(classified) - width + 1):
        if classified[offset : offset + width] == template:
            result = PatternMatch(True, offset)
    return result


def window_text(buffer: str, match: PatternMatch, template: str, skip: int = 1) -> str:
    """Buffer text under a matched template, minus `skip` leading delimiter symbols."""
    if not match.found:
        return ""
    start = max(match.buffer_index(skip), 0)
    end = min(match.buffer_index(len(template)), len(buffer))
    if end <= start:
        return ""
    return buffer[start:end]
