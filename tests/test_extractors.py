from __future__ import annotations

import pytest

from exchange.contests import ContestRule, default_contest_rules
from exchange.extractors import (
    EXTRACTORS,
    GridExtractor,
    NullExtractor,
    SectionExtractor,
    ZoneExtractor,
    build_extractor,
)
from exchange.multipliers import MultiplierTable

TABLE = ("CT", "MA", "ON", "QC")


def _extractor(strategy: str, entries=TABLE, **kwargs):
    rule = ContestRule(name="TEST", strategy=strategy, **kwargs)
    return build_extractor(rule, MultiplierTable(entries))


def test_registry_covers_every_strategy():
    ext = _extractor("zone")
    assert isinstance(ext, ZoneExtractor)
    assert isinstance(_extractor("grid"), GridExtractor)
    assert isinstance(_extractor("serial_section"), SectionExtractor)
    assert isinstance(_extractor("bogus"), NullExtractor)
    assert set(EXTRACTORS) >= {"none", "serial", "section", "section_once", "dx_section", "arrl_ss"}


def test_zone_defaults_to_00():
    data = _extractor("zone").extract("")
    assert data.normalized == "00"
    assert data.multiplier == "00"


def test_zone_two_digits():
    data = _extractor("zone").extract("14", interactive=True)
    assert data.normalized == "14"
    assert data.previews == [("zone", "14")]


def test_zone_with_call_fix_and_zone_fix():
    data = _extractor("zone").extract("AB1CD 5")
    assert data.callsign_correction == "AB1CD"
    assert data.normalized == "05"


def test_zone_fix_overrides_leading_zone():
    assert _extractor("zone").extract("14 5").normalized == "05"


def test_sweepstakes_full_exchange():
    ext = _extractor("arrl_ss")
    data = ext.extract("123 A W1ABC 05 CT", interactive=True)
    assert data.normalized == " 123 A 05 CT"
    assert data.section == "CT"
    assert data.multiplier == "CT"
    assert data.callsign_correction == "W1ABC"
    assert data.previews == [("ss", "  123 A 05 CT ")]
    assert ext.is_complete(data)


def test_sweepstakes_rejects_single_digit_check_and_unknown_section():
    ext = _extractor("arrl_ss")
    data = ext.extract("12 B 5 MA")
    assert data.normalized == "  12 B    MA"

    data = ext.extract("12 B 05 XX")
    assert data.section == ""
    assert data.normalized == "  12 B 05 "
    assert not ext.is_complete(data)


def test_sweepstakes_ignores_non_na_call():
    data = _extractor("arrl_ss").extract("12 B DL1ABC 05 CT")
    assert data.callsign_correction == ""


def test_grid_candidate_and_check():
    ext = _extractor("grid")
    data = ext.extract("73 JO65XY")
    assert data.normalized == "JO65"
    assert ext.is_complete(data)

    data = ext.extract("73 XX")
    assert data.normalized == "XX"
    assert not ext.is_complete(data)
    assert _extractor("grid", locator_check=False).is_complete(data)


def test_serial_uses_last_matching_template():
    data = _extractor("serial").extract("599 123")
    assert data.normalized == "123"
    assert data.serial == " 123"


def test_serial_from_leading_digits():
    data = _extractor("serial").extract("5")
    assert data.normalized == "005"
    assert data.serial == "   5"


def test_serial_section():
    ext = _extractor("serial_section")
    data = ext.extract("5 ON", interactive=True)
    assert data.normalized == "005 ON"
    assert data.section == "ON"
    assert data.multiplier == "ON"
    assert data.previews == [("section", "ON")]
    assert ext.is_complete(data)
    assert not ext.is_complete(ext.extract("5"))


def test_generic_section_longest_prefix():
    ext = _extractor("section")
    assert ext.extract("ON").normalized == "ON"
    assert ext.extract("QCX").section == "QC"
    assert ext.extract("XX").section == ""


def test_dx_section_takes_last_table_hit():
    ext = _extractor("dx_section", entries=("MA", "ME", "MI"))
    assert ext.extract("MA 100").section == "MA"
    assert ext.extract("M").section == "MI"


def test_callsign_scan_north_american_prefixes():
    ext = _extractor("serial_section")
    assert ext.extract("5 ON K1ABC ").callsign_correction == "K1ABC"
    assert ext.extract("5 ON AA1BC ").callsign_correction == "AA1BC"
    assert ext.extract("5 ON A1BCD ").callsign_correction == ""
    assert ext.extract("5 ON D1ABC ").callsign_correction == ""


def test_null_extractor_returns_empty_data():
    data = _extractor("none").extract("599 14")
    assert data.normalized == ""
    assert data.previews == []


SAMPLES = {
    "none": "599",
    "serial": "5",
    "serial_section": "5 ON",
    "section": "ON",
    "section_once": "ON",
    "dx_section": "MA",
    "zone": "14",
    "grid": "JO65",
    "arrl_ss": "123 A W1ABC 05 CT",
}


@pytest.mark.parametrize("name", sorted(default_contest_rules()))
def test_normalized_exchange_is_stable(name: str):
    rule = default_contest_rules()[name]
    ext = build_extractor(rule, MultiplierTable(TABLE))
    first = ext.extract(SAMPLES[rule.strategy]).normalized
    assert ext.extract(first).normalized == first
