from __future__ import annotations


class ExchangeBuffer:
    """
    Exchange text limited to the contest's exchange width.
    Mutations that would overflow are refused and report False; nothing is ever truncated.
    """

    def __init__(self, width: int, text: str = ""):
        if width < 1:
            raise ValueError(f"exchange width must be positive, got {width}")
        self.width = width
        self._text = ""
        if not self.replace(text):
            raise ValueError(f"'{text}' does not fit into {width} characters")

    def __str__(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def __bool__(self) -> bool:
        return bool(self._text)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ExchangeBuffer):
            return self._text == other._text
        if isinstance(other, str):
            return self._text == other
        return NotImplemented

    def __getitem__(self, index):
        return self._text[index]

    @property
    def text(self) -> str:
        return self._text

    def is_full(self) -> bool:
        return len(self._text) >= self.width

    def append(self, ch: str) -> bool:
        return self.insert(len(self._text), ch)

    def insert(self, index: int, ch: str) -> bool:
        if not ch or len(self._text) + len(ch) > self.width:
            return False
        index = max(0, min(index, len(self._text)))
        self._text = self._text[:index] + ch + self._text[index:]
        return True

    def delete(self, index: int) -> bool:
        if not 0 <= index < len(self._text):
            return False
        self._text = self._text[:index] + self._text[index + 1 :]
        return True

    def pop(self) -> str:
        if not self._text:
            return ""
        ch = self._text[-1]
        self._text = self._text[:-1]
        return ch

    def replace(self, text: str) -> bool:
        if len(text) > self.width:
            return False
        self._text = text
        return True

    def clear(self) -> None:
        self._text = ""
