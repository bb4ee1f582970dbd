from __future__ import annotations

from pathlib import Path

from exchange.multipliers import MultiplierTable, parse_multiplier_text


def test_parse_multiplier_text_ignores_comments_and_uses_first_field():
    text = "\ufeff" + """
# sections
ON,Ontario
qc:Quebec

  # more
MA
ON,duplicate
"""
    assert parse_multiplier_text(text) == ["ON", "QC", "MA"]


def test_from_file(tmp_path: Path):
    p = tmp_path / "sections.txt"
    p.write_text("CT\nMA\nME\n", encoding="utf-8")
    table = MultiplierTable.from_file(p)
    assert table.count() == 3
    assert table.entry(1) == "MA"
    assert "ME" in table
    assert list(table) == ["CT", "MA", "ME"]


def test_matching_length():
    table = MultiplierTable(["ONS"])
    assert table.matching_length("ON", 0) == 2
    assert table.matching_length("OX", 0) == 1
    assert table.matching_length("", 0) == 0


def test_find_leading_first_or_last_hit():
    table = MultiplierTable(["ONS", "ON", "ONE"])
    assert table.find_leading("ON") == "ONS"
    assert table.find_leading("ON", last=True) == "ONE"
    assert table.find_leading("OX") is None
    assert table.find_leading("") is None


def test_find_longest_prefix_keeps_earliest_on_ties():
    assert MultiplierTable(["OR", "ON", "ONT"]).find_longest_prefix("ONT") == "ONT"
    assert MultiplierTable(["ONA", "ONB"]).find_longest_prefix("ONX") == "ONA"
    assert MultiplierTable(["MA"]).find_longest_prefix("XX") is None


def test_find_exact():
    table = MultiplierTable(["CT", "MA"])
    assert table.find_exact("MA") == "MA"
    assert table.find_exact("M") is None
