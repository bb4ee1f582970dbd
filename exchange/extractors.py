from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Type

from .classifier import DIGIT, classify, locate, window_text
from .contests import ContestRule
from .exchange_patterns import ExchangeTemplates, callsign_length, default_exchange_templates
from .locator import get_grid, is_valid_grid_square
from .multipliers import MultiplierTable
from .serial import format_serial, leading_number, normalize_serial

Preview = Tuple[str, str]  # (field_id, text)

# First letters accepted for a call retyped into the exchange (continental North America).
NA_CALL_PREFIXES = "KNWVC"
SS_CALL_PREFIXES = "AKNWVC"


@dataclass
class ExchangeData:
    normalized: str = ""
    multiplier: str = ""
    section: str = ""
    serial: str = ""
    callsign_correction: str = ""
    previews: List[Preview] = field(default_factory=list)


class ContestExtractor:
    """Turns the raw exchange text into normalized exchange, multiplier and call fix."""

    strategy = "none"

    def __init__(
        self,
        rule: ContestRule,
        table: Optional[MultiplierTable] = None,
        templates: Optional[ExchangeTemplates] = None,
    ):
        self.rule = rule
        self.table = table if table is not None else MultiplierTable()
        self.templates = templates or default_exchange_templates()

    def extract(self, buffer: str, interactive: bool = False) -> ExchangeData:
        return ExchangeData()

    def is_complete(self, data: ExchangeData) -> bool:
        return True

    def scan_callsign(self, buffer: str, classified: str) -> str:
        """Last callsign shaped group whose prefix looks North American."""
        correction = ""
        for template in self.templates.callsign:
            match = locate(classified, template)
            if not match.found:
                continue
            start = match.buffer_index(1)
            first = buffer[start : start + 1]
            second = buffer[start + 1 : start + 2]
            if first in NA_CALL_PREFIXES or (first == "A" and second.isalpha()):
                correction = buffer[start : start + callsign_length(template)]
        return correction


class NullExtractor(ContestExtractor):
    pass


class SerialExtractor(ContestExtractor):
    strategy = "serial"

    def extract(self, buffer: str, interactive: bool = False) -> ExchangeData:
        classified = classify(buffer)
        number = self.find_serial(buffer, classified)
        return ExchangeData(
            normalized=normalize_serial(number),
            serial=format_serial(number),
            callsign_correction=self.scan_callsign(buffer, classified),
        )

    def find_serial(self, buffer: str, classified: str) -> int:
        """Leading number, overridden by every serial template found later in the list."""
        serial = leading_number(buffer)
        for template in self.templates.serial:
            match = locate(classified, template)
            if not match.found:
                continue
            start = match.buffer_index(template.index(DIGIT)) if DIGIT in template else match.buffer_index()
            number = leading_number(buffer[max(start, 0) :])
            if number:
                serial = number
        return serial


class SectionExtractor(SerialExtractor):
    """Serial and/or section exchanges located through classification templates."""

    strategy = "serial_section"
    with_serial = True

    def extract(self, buffer: str, interactive: bool = False) -> ExchangeData:
        classified = classify(buffer)
        number = self.find_serial(buffer, classified) if self.with_serial else 0
        section = self.find_section(buffer, classified)
        data = ExchangeData(
            normalized=" ".join(part for part in (normalize_serial(number), section) if part),
            multiplier=section,
            section=section,
            serial=format_serial(number) if self.with_serial else "",
            callsign_correction=self.scan_callsign(buffer, classified),
        )
        if interactive:
            data.previews.append(("section", section))
        return data

    def is_complete(self, data: ExchangeData) -> bool:
        return bool(data.section)

    def find_section(self, buffer: str, classified: str) -> str:
        section = ""
        for template in self.templates.section:
            candidate = _candidate(buffer, classified, template)
            if not candidate:
                continue
            found = self.table.find_leading(candidate)
            if found:
                section = found
        return section


class GenericSectionExtractor(SectionExtractor):
    """Section only exchanges, best prefix match over the whole multiplier list."""

    strategy = "section"
    with_serial = False

    def find_section(self, buffer: str, classified: str) -> str:
        section = ""
        for template in self.templates.generic_section:
            candidate = _candidate(buffer, classified, template)
            if not candidate:
                continue
            found = self.table.find_longest_prefix(candidate)
            if found:
                section = found
        return section


class SectionOnceExtractor(GenericSectionExtractor):
    strategy = "section_once"


class DxSectionExtractor(SectionExtractor):
    """US/VE side of a DX contest: state or province from the first three characters."""

    strategy = "dx_section"
    with_serial = False

    def find_section(self, buffer: str, classified: str) -> str:
        return self.table.find_leading(buffer[:3].rstrip(" "), last=True) or ""


class ZoneExtractor(ContestExtractor):
    strategy = "zone"

    # <zone> [<call fix>] [<zone fix>]
    PATTERN = re.compile(
        r"\s*(\d+)?"
        r"\s*([A-Z0-9/]*?[A-Z]\d+[A-Z]+[A-Z0-9/]*)?"
        r"\s*(\d+)?"
        r"\s*"
    )

    def extract(self, buffer: str, interactive: bool = False) -> ExchangeData:
        zone = 0
        correction = ""
        match = self.PATTERN.match(buffer)
        if match:
            digits = match.group(3) or match.group(1)
            if digits and 1 <= len(digits) <= 4:
                zone = int(digits)
            correction = match.group(2) or ""

        zone_text = f"{zone:02d}"
        data = ExchangeData(
            normalized=zone_text,
            multiplier=zone_text,
            callsign_correction=correction,
        )
        if interactive:
            data.previews.append(("zone", zone_text))
        return data


class SweepstakesExtractor(ContestExtractor):
    strategy = "arrl_ss"

    PATTERN = re.compile(
        r"\s*(\d+)?"  # serial
        r"\s*([ABMSQU])?"  # precedence
        r"\s*([A-Z0-9]*?[A-Z]\d+[A-Z]+(?:/\d)?)?"  # call, optional region
        r"\s*(\d+)?"  # check
        r"\s*([A-Z]{2,3})?"  # section
        r"\s*"
    )

    def extract(self, buffer: str, interactive: bool = False) -> ExchangeData:
        serial = " " * 4
        precedence = " "
        check = " " * 2
        section = ""
        correction = ""

        match = self.PATTERN.match(buffer)
        if match:
            number, prec, call, chk, sect = match.groups()
            if number and 1 <= len(number) <= 4:
                serial = format_serial(int(number))
            if prec:
                precedence = prec
            if call and call[0] in SS_CALL_PREFIXES:
                correction = call
            if chk and len(chk) == 2:
                check = chk
            if sect:
                section = self.table.find_exact(sect) or ""

        data = ExchangeData(
            normalized=f"{serial} {precedence} {check} {section}",
            multiplier=section,
            section=section,
            serial=serial,
            callsign_correction=correction,
        )
        if interactive:
            data.previews.append(("ss", f" {serial} {precedence} {check} {section:>2} "))
        return data

    def is_complete(self, data: ExchangeData) -> bool:
        return len(data.section) >= 2


class GridExtractor(ContestExtractor):
    strategy = "grid"

    def extract(self, buffer: str, interactive: bool = False) -> ExchangeData:
        grid = get_grid(buffer)
        data = ExchangeData(
            normalized=grid,
            multiplier=grid,
            section=grid,
            callsign_correction=self.scan_callsign(buffer, classify(buffer)),
        )
        if interactive:
            data.previews.append(("grid", grid))
        return data

    def is_complete(self, data: ExchangeData) -> bool:
        if not self.rule.locator_check:
            return True
        return is_valid_grid_square(data.section)


EXTRACTORS: Dict[str, Type[ContestExtractor]] = {
    "none": NullExtractor,
    "serial": SerialExtractor,
    "serial_section": SectionExtractor,
    "section": GenericSectionExtractor,
    "section_once": SectionOnceExtractor,
    "dx_section": DxSectionExtractor,
    "zone": ZoneExtractor,
    "grid": GridExtractor,
    "arrl_ss": SweepstakesExtractor,
}


def build_extractor(
    rule: ContestRule,
    table: Optional[MultiplierTable] = None,
    templates: Optional[ExchangeTemplates] = None,
) -> ContestExtractor:
    cls = EXTRACTORS.get(rule.strategy, NullExtractor)
    return cls(rule, table, templates)


def _candidate(buffer: str, classified: str, template: str) -> str:
    text = window_text(buffer, locate(classified, template), template)
    if text.endswith(" "):
        text = text[:-1]
    return text
