from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional, Sequence


def parse_multiplier_lines(lines: Sequence[str]) -> List[str]:
    mults: List[str] = []
    seen = set()
    for raw in lines:
        line = raw.strip().lstrip("\ufeff")
        if not line or line.startswith("#"):
            continue
        first = line.split(",", 1)[0].split(":", 1)[0].strip().upper()
        if not first or first.startswith("#"):
            continue
        if first in seen:
            continue
        seen.add(first)
        mults.append(first)
    return mults


def parse_multiplier_text(text: str) -> List[str]:
    return parse_multiplier_lines(text.splitlines())


class MultiplierTable:
    """Ordered multiplier list (sections, states, zones); order is the canonical list order."""

    def __init__(self, entries: Sequence[str] = ()):
        self._entries: List[str] = parse_multiplier_lines(list(entries))

    @classmethod
    def from_file(cls, path: str | Path) -> "MultiplierTable":
        p = Path(path)
        data = p.read_text(encoding="utf-8", errors="ignore")
        return cls(parse_multiplier_text(data))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, candidate: object) -> bool:
        return candidate in self._entries

    def count(self) -> int:
        return len(self._entries)

    def entry(self, index: int) -> str:
        return self._entries[index]

    def matching_length(self, candidate: str, index: int) -> int:
        """Number of leading characters `candidate` shares with entry `index`."""
        n = 0
        for a, b in zip(candidate, self._entries[index]):
            if a != b:
                break
            n += 1
        return n

    def find_exact(self, candidate: str) -> Optional[str]:
        for entry in self._entries:
            if entry == candidate:
                return entry
        return None

    def find_leading(self, candidate: str, last: bool = False) -> Optional[str]:
        """Entry that `candidate` fully leads into; first hit unless `last` is set."""
        if not candidate:
            return None
        found: Optional[str] = None
        for idx in range(self.count()):
            if self.matching_length(candidate, idx) == len(candidate):
                found = self.entry(idx)
                if not last:
                    break
        return found

    def find_longest_prefix(self, candidate: str) -> Optional[str]:
        best_len = 0
        found: Optional[str] = None
        for idx in range(self.count()):
            n = self.matching_length(candidate, idx)
            if n > best_len:
                best_len = n
                found = self.entry(idx)
        return found
