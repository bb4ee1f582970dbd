from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Tuple

import yaml

from .classifier import ALPHABET


TemplateList = Tuple[str, ...]


@dataclass(frozen=True)
class ExchangeTemplates:
    serial: TemplateList
    section: TemplateList
    generic_section: TemplateList
    callsign: TemplateList


# Callsign templates map to the length of the call they describe.
CALLSIGN_LENGTHS = {
    "bafaab": 4,
    "baafab": 4,
    "baafaab": 5,
    "bafaaab": 5,
    "baafaaab": 6,
}


def default_exchange_templates() -> ExchangeTemplates:
    return ExchangeTemplates(
        serial=(
            "bfb",
            "afb",
            "bfa",
            "bffab",
            "affab",
            "bffbffb",
            "fff",
            "ffff",
        ),
        section=(
            "fab",
            "faab",
            "faaab",
            "faaaab",
            "bab",
            "baab",
            "baaab",
            "baaaab",
            "bau",
            "baau",
            "baaau",
            "baaaau",
            "baafb",
        ),
        generic_section=(
            "uab",
            "uaab",
            "uaaab",
            "uaaaab",
            "uau",
            "uaau",
            "uaaau",
            "bab",
            "baab",
            "baaab",
            "baaaab",
        ),
        callsign=tuple(CALLSIGN_LENGTHS),
    )


def callsign_length(template: str) -> int:
    return CALLSIGN_LENGTHS.get(template, len(template) - 2)


def load_exchange_templates(path: Optional[str | Path]) -> Tuple[ExchangeTemplates, Optional[str]]:
    defaults = default_exchange_templates()
    path_str = str(path or "").strip()
    if not path_str:
        return defaults, None

    p = Path(path_str)
    if not p.exists():
        return defaults, f"Template file not found: {p}. Using built-in defaults."

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except Exception as exc:
        return defaults, f"Template file could not be read: {p} ({exc}). Using built-in defaults."

    if not isinstance(raw, Mapping):
        return defaults, f"Template file has invalid format: {p}. Using built-in defaults."

    node = raw.get("templates", raw)
    if not isinstance(node, Mapping):
        return defaults, f"Template file has invalid root: {p}. Using built-in defaults."

    return (
        ExchangeTemplates(
            serial=_as_template_list(node.get("serial")) or defaults.serial,
            section=_as_template_list(node.get("section")) or defaults.section,
            generic_section=_as_template_list(node.get("generic_section")) or defaults.generic_section,
            # Callsign templates carry fixed lengths, only known shapes are kept.
            callsign=tuple(
                t for t in _as_template_list(node.get("callsign")) if t in CALLSIGN_LENGTHS
            )
            or defaults.callsign,
        ),
        None,
    )


def _as_template_list(raw: Any) -> TemplateList:
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, Sequence):
        return tuple()

    out = []
    for item in raw:
        if not isinstance(item, str):
            continue
        text = item.strip().lower()
        if text and set(text) <= ALPHABET:
            out.append(text)
    return tuple(out)
