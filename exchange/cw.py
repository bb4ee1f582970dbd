from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Sequence, Tuple

MORSE_CODE: Dict[str, str] = dict(
    zip(
        "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789/?=.,-",
        (
            ".- -... -.-. -.. . ..-. --. .... .. .--- -.- .-.. -- -. --- .--. --.- .-. ... - ..- ...- .-- -..- -.-- --.. "
            "----- .---- ..--- ...-- ....- ..... -.... --... ---.. ----. "
            "-..-. ..--.. -...- .-.-.- --..-- -....-"
        ).split(),
    )
)

# Keyer speeds selectable with Page-Up/Page-Down, in WPM.
CW_SPEEDS: Tuple[int, ...] = (6, 12, 14, 16, 18, 20, 22, 24, 26, 28, 30, 32, 34, 36, 38, 40, 42, 44, 46, 48, 50)

RST_STEPS: Tuple[str, ...] = tuple(f"{r}{s}" for r in (3, 4, 5) for s in range(3, 10))


def speed_index(wpm: int) -> int:
    """Index of the first table speed not below `wpm`; the top speed for anything faster."""
    for idx, speed in enumerate(CW_SPEEDS):
        if wpm <= speed:
            return idx
    return len(CW_SPEEDS) - 1


@dataclass
class CWSpeed:
    index: int = 10

    @classmethod
    def from_wpm(cls, wpm: int) -> "CWSpeed":
        return cls(speed_index(wpm))

    @property
    def wpm(self) -> int:
        return CW_SPEEDS[self.index]

    def set_wpm(self, wpm: int) -> None:
        self.index = speed_index(wpm)

    def increase(self) -> int:
        if self.index < len(CW_SPEEDS) - 1:
            self.index += 1
        return self.wpm

    def decrease(self) -> int:
        if self.index > 0:
            self.index -= 1
        return self.wpm


@dataclass
class ReceivedRST:
    steps: Tuple[str, ...] = RST_STEPS
    index: int = field(default=-1)
    tone: bool = True

    def __post_init__(self) -> None:
        if self.index < 0:
            self.index = len(self.steps) - 1

    @property
    def report(self) -> str:
        rst = self.steps[self.index]
        return rst + "9" if self.tone else rst

    def up(self) -> str:
        if self.index < len(self.steps) - 1:
            self.index += 1
        return self.report

    def down(self) -> str:
        if self.index > 0:
            self.index -= 1
        return self.report


def cw_dots(ch: str) -> int:
    """Length of one character in dot units, including the following character space."""
    if ch == " ":
        return 3
    code = MORSE_CODE.get(ch.upper())
    if code is None:
        return 0
    return sum((1 if el == "." else 3) + 1 for el in code) + 3


def cw_message_length(message: str, my_call: str = "") -> int:
    total = 0
    for ch in message:
        if ch == "%":
            total += sum(cw_dots(c) for c in my_call)
        else:
            total += cw_dots(ch)
    return total


def cw_message_seconds(message: str, wpm: int, my_call: str = "") -> float:
    return cw_message_length(message, my_call) * 1.2 / max(wpm, 1)


def expand_macro(message: str, my_call: str, his_call: str = "", serial: int = 0) -> str:
    """'%' is my call, '@' the worked station and '#' the outgoing serial number."""
    out = []
    for ch in message:
        if ch == "%":
            out.append(my_call)
        elif ch == "@":
            out.append(his_call)
        elif ch == "#":
            out.append(f"{serial:03d}" if serial > 0 else "")
        else:
            out.append(ch)
    return "".join(out)


def message_slot(messages: Sequence[str], index: int) -> str:
    if 0 <= index < len(messages):
        return messages[index]
    return ""
