from __future__ import annotations

from exchange.serial import format_serial, leading_number, normalize_serial, pad_serial


def test_wpx_padding():
    assert pad_serial("5", "wpx") == "005"
    assert pad_serial("47", "wpx") == "047"
    assert pad_serial("123", "wpx") == "123"
    assert pad_serial("5 EU", "wpx") == "005 EU"


def test_compressed_padding():
    assert pad_serial("5 A", "compressed") == "005 A"
    assert pad_serial("12 A", "compressed") == "012 A"
    assert pad_serial("123 A", "compressed") == "123 A"


def test_length_padding_only_counts_whole_buffer():
    assert pad_serial("5", "length") == "005"
    assert pad_serial("42", "length") == "042"
    assert pad_serial("5 A", "length") == "5 A"


def test_padding_needs_leading_digit():
    assert pad_serial("A5", "wpx") == "A5"
    assert pad_serial("", "wpx") == ""
    assert pad_serial(" 5", "length") == " 5"


def test_padding_never_overflows_width():
    assert pad_serial("5", "length", width=2) == "5"
    assert pad_serial("5", "length", width=3) == "005"


def test_unknown_or_disabled_mode_keeps_text():
    assert pad_serial("5", "none") == "5"
    assert pad_serial("5", "bogus") == "5"


def test_serial_formatting():
    assert format_serial(12) == "  12"
    assert format_serial(0) == "    "
    assert format_serial(10000) == "    "
    assert normalize_serial(5) == "005"
    assert normalize_serial(1234) == "1234"
    assert normalize_serial(0) == ""


def test_leading_number_is_atoi_like():
    assert leading_number("  42AB") == 42
    assert leading_number("AB") == 0
    assert leading_number("") == 0
