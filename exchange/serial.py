from __future__ import annotations

from typing import Optional

PADDING_MODES = ("none", "length", "wpx", "compressed")


def leading_number(text: str) -> int:
    """atoi-style parse: skip blanks, read digits, 0 when there are none."""
    digits = ""
    for ch in text.lstrip(" "):
        if not ch.isdigit():
            break
        digits += ch
    return int(digits) if digits else 0


def format_serial(number: int) -> str:
    if 0 < number <= 9999:
        return f"{number:4d}"
    return " " * 4


def pad_by_length(text: str) -> str:
    if len(text) == 1:
        return "00" + text
    if len(text) == 2:
        return "0" + text
    return text


def pad_wpx(text: str) -> str:
    """The serial ends at the first blank, so '5 EU' becomes '005 EU'."""
    if len(text) == 1 or (len(text) > 1 and text[1] == " "):
        text = "00" + text
    if len(text) == 2 or (len(text) > 2 and text[2] == " "):
        text = "0" + text
    return text


def pad_compressed(text: str) -> str:
    """Rebuild a 3 digit serial typed with separators, e.g. '5 A' -> '005 A'."""
    if len(text) > 1 and text[1] == " " and text[0] != " ":
        text = "00" + text[0] + text[1:]
    if len(text) > 2 and text[2] == " " and text[1] != " ":
        text = "0" + text[0] + text[1] + text[2:]
    return text


_PADDERS = {
    "length": pad_by_length,
    "wpx": pad_wpx,
    "compressed": pad_compressed,
}


def pad_serial(text: str, mode: str, width: Optional[int] = None) -> str:
    """
    Zero pad a leading serial number on field completion.
    Only applies when the exchange starts with a digit and the result still fits `width`.
    """
    padder = _PADDERS.get(mode)
    if padder is None or not text or not text[0].isdigit():
        return text
    padded = padder(text)
    if width is not None and len(padded) > width:
        return text
    return padded


def normalize_serial(number: int) -> str:
    if 0 < number <= 9999:
        return f"{number:03d}"
    return ""
