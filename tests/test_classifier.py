from __future__ import annotations

from exchange.classifier import NO_MATCH, PatternMatch, classify, locate, window_text


def test_classify_adds_sentinels_and_keeps_length():
    assert classify("5 ON") == "ufbaau"
    assert classify("") == "uu"
    assert len(classify("599 14 K1ABC")) == len("599 14 K1ABC") + 2


def test_classify_marks_lowercase_and_punctuation_undefined():
    assert classify("a?/") == "uuuuu"


def test_locate_prefers_rightmost_window():
    assert locate("ufbfbfu", "fb") == PatternMatch(True, 3)


def test_locate_reports_not_found_with_zero_offset():
    match = locate("uau", "f")
    assert not match.found
    assert match.offset == 0
    assert match == NO_MATCH


def test_locate_distinguishes_match_at_offset_zero():
    match = locate("uau", "ua")
    assert match.found
    assert match.offset == 0


def test_locate_rejects_empty_or_too_long_template():
    assert locate("uau", "") == NO_MATCH
    assert locate("uu", "uau") == NO_MATCH


def test_window_text_skips_leading_delimiter():
    buffer = "5 ON"
    match = locate(classify(buffer), "baau")
    assert match.found
    assert match.buffer_index(1) == 2
    assert window_text(buffer, match, "baau") == "ON"


def test_window_text_empty_without_match():
    assert window_text("5 ON", NO_MATCH, "baau") == ""
