from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from .serial import PADDING_MODES

STRATEGIES = (
    "none",
    "serial",
    "serial_section",
    "section",
    "section_once",
    "dx_section",
    "zone",
    "grid",
    "arrl_ss",
)

# Strategies whose extractor runs on every keystroke.
LIVE_STRATEGIES = frozenset(
    {"serial_section", "section", "section_once", "dx_section", "zone", "grid", "arrl_ss"}
)
SECTION_STRATEGIES = frozenset({"serial_section", "section"})


@dataclass
class ContestRule:
    name: str = "GENERAL"
    strategy: str = "none"
    exchange_width: int = 24
    recall_exchange: bool = False
    serial_padding: str = "none"  # none | length | wpx | compressed
    pad_foreign_only: bool = False
    serial_or_section: bool = False
    locator_check: bool = True
    zone_prefill: str = "none"  # none | cq | itu
    continent_prefill: bool = False
    state_province_countries: Tuple[str, ...] = ("K", "VE")
    is_contest: bool = True

    @property
    def live_validation(self) -> bool:
        return self.strategy in LIVE_STRATEGIES

    @property
    def requires_section(self) -> bool:
        return self.strategy in SECTION_STRATEGIES


def default_contest_rules() -> Dict[str, ContestRule]:
    rules = [
        ContestRule(name="GENERAL", strategy="none", is_contest=False),
        ContestRule(name="QSO", strategy="none"),
        ContestRule(name="DXPED", strategy="none"),
        ContestRule(name="CQWW", strategy="zone", exchange_width=12, zone_prefill="cq"),
        ContestRule(name="WAZ", strategy="zone", exchange_width=12, zone_prefill="cq"),
        ContestRule(name="IARU", strategy="zone", exchange_width=12, zone_prefill="itu"),
        ContestRule(name="WPX", strategy="serial", exchange_width=12, serial_padding="wpx"),
        ContestRule(name="SPRINT", strategy="serial", exchange_width=24, serial_padding="compressed"),
        ContestRule(name="PACC", strategy="serial", exchange_width=12, serial_padding="length", pad_foreign_only=True),
        ContestRule(name="ARRL_SS", strategy="arrl_ss", exchange_width=24),
        ContestRule(name="ARRL_FD", strategy="section", exchange_width=12, recall_exchange=True),
        ContestRule(name="ARRLDX_USA", strategy="dx_section", exchange_width=12, recall_exchange=True),
        ContestRule(name="NAQP", strategy="section_once", exchange_width=16, recall_exchange=True),
        ContestRule(name="SERIAL_SECTION", strategy="serial_section", exchange_width=16, serial_padding="length"),
        ContestRule(
            name="EUSPRINT",
            strategy="serial_section",
            exchange_width=16,
            serial_padding="length",
            serial_or_section=True,
        ),
        ContestRule(name="STEWPERRY", strategy="grid", exchange_width=8, recall_exchange=True),
        ContestRule(name="SERIAL_GRID4", strategy="grid", exchange_width=12, locator_check=False),
    ]
    return {r.name: r for r in rules}


def load_contest_rules(path: Optional[str | Path]) -> Tuple[Dict[str, ContestRule], Optional[str]]:
    defaults = default_contest_rules()
    path_str = str(path or "").strip()
    if not path_str:
        return defaults, None

    p = Path(path_str)
    if not p.exists():
        return defaults, f"Contest file not found: {p}. Using built-in rules."

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except Exception as exc:
        return defaults, f"Contest file could not be read: {p} ({exc}). Using built-in rules."

    node = raw.get("contests", raw) if isinstance(raw, Mapping) else None
    if not isinstance(node, Mapping):
        return defaults, f"Contest file has invalid root: {p}. Using built-in rules."

    merged = dict(defaults)
    skipped = []
    for raw_name, raw_rule in node.items():
        if not isinstance(raw_name, str) or not isinstance(raw_rule, Mapping):
            continue
        name = raw_name.strip().upper()
        if not name:
            continue
        base = merged.get(name, ContestRule(name=name))
        rule = _rule_from_mapping(base, raw_rule)
        if rule is None:
            skipped.append(name)
            continue
        merged[name] = rule

    warning = None
    if skipped:
        warning = f"Ignored invalid contest definitions: {', '.join(skipped)}."
    return merged, warning


def _rule_from_mapping(base: ContestRule, updates: Mapping[str, Any]) -> Optional[ContestRule]:
    known = {f.name for f in fields(ContestRule)}
    changes: Dict[str, Any] = {}
    for key, value in updates.items():
        if key not in known or key == "name":
            continue
        if key == "state_province_countries":
            if isinstance(value, str):
                value = (value,)
            value = tuple(str(v).strip().upper() for v in value or ())
        changes[key] = value

    rule = replace(base, **changes)
    rule.strategy = str(rule.strategy).strip().lower()
    rule.serial_padding = str(rule.serial_padding).strip().lower()
    rule.zone_prefill = str(rule.zone_prefill).strip().lower()
    try:
        rule.exchange_width = int(rule.exchange_width)
    except (TypeError, ValueError):
        return None
    if rule.strategy not in STRATEGIES or rule.serial_padding not in PADDING_MODES:
        return None
    if rule.zone_prefill not in ("none", "cq", "itu") or rule.exchange_width < 1:
        return None
    return rule


def get_contest_rule(rules: Mapping[str, ContestRule], name: str) -> ContestRule:
    key = (name or "").strip().upper()
    if key in rules:
        return rules[key]
    return rules.get("GENERAL", ContestRule())


@dataclass
class Contact:
    """What the call field knows about the station being worked."""

    call: str = ""
    cq_zone: str = ""
    itu_zone: str = ""
    continent: str = ""
    country: str = ""
    country_has_sections: bool = False
    foreign: bool = True
