from __future__ import annotations

from pathlib import Path

from exchange.exchange_patterns import callsign_length, default_exchange_templates, load_exchange_templates


def test_default_templates_use_valid_alphabet():
    templates = default_exchange_templates()
    for group in (templates.serial, templates.section, templates.generic_section, templates.callsign):
        for template in group:
            assert set(template) <= set("ubaf")
    assert "uaiaaau" not in templates.generic_section


def test_callsign_lengths():
    assert callsign_length("bafaab") == 4
    assert callsign_length("baafaaab") == 6


def test_load_templates_keeps_defaults_for_missing_groups(tmp_path: Path):
    p = tmp_path / "templates.yaml"
    p.write_text(
        """
templates:
  serial:
    - fff
    - xyz
  callsign: [bafaab, bfb]
""".strip(),
        encoding="utf-8",
    )

    templates, warning = load_exchange_templates(p)

    assert warning is None
    assert templates.serial == ("fff",)
    assert templates.callsign == ("bafaab",)
    assert templates.section == default_exchange_templates().section


def test_load_templates_missing_or_invalid(tmp_path: Path):
    templates, warning = load_exchange_templates(tmp_path / "missing.yaml")
    assert templates == default_exchange_templates()
    assert warning is not None and "not found" in warning

    p = tmp_path / "bad.yaml"
    p.write_text("- just\n- a list\n", encoding="utf-8")
    templates, warning = load_exchange_templates(p)
    assert templates == default_exchange_templates()
    assert warning is not None
