from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .input_loop import CaptureSettings

TRX_MODES = {"CW", "SSB", "DIGI"}
QTC_DIRECTIONS = {"off", "recv", "send", "both"}


def _default_messages() -> List[str]:
    messages = [
        "CQ % TEST",  # F1
        "@ 5NN #",  # F2
        "TU %",  # F3
        "TU 73",  # F4
        "@",  # F5
        "%",  # F6
        "@ SRI QSO B4 GL",  # F7
        "AGN",  # F8
        "?",  # F9
        "QRZ?",  # F10
        "PSE K",  # F11
        "CQ % %",  # F12
    ]
    return messages + [""] * (24 - len(messages))


@dataclass
class StationConfig:
    my_call: str = "N0CALL"
    trx_mode: str = "CW"  # CW | SSB | DIGI


@dataclass
class ContestConfig:
    name: str = "GENERAL"
    rules_file: Optional[str] = None
    templates_file: Optional[str] = None
    multipliers_file: Optional[str] = None


@dataclass
class KeyerConfig:
    wpm: int = 30
    tone_hz: float = 600.0
    volume: float = 0.3
    sample_rate: int = 48000
    output_device: Optional[int] = None
    messages: List[str] = field(default_factory=_default_messages)


@dataclass
class ConsoleConfig:
    ct_compat: bool = False
    call_update: bool = True
    change_rst: bool = False
    qtc_direction: str = "off"  # off | recv | send | both
    poll_interval: float = 0.01


@dataclass
class AppConfig:
    station: StationConfig = field(default_factory=StationConfig)
    contest: ContestConfig = field(default_factory=ContestConfig)
    keyer: KeyerConfig = field(default_factory=KeyerConfig)
    console: ConsoleConfig = field(default_factory=ConsoleConfig)


def load_config(path: str | Path) -> AppConfig:
    p = Path(path)
    if not p.exists():
        cfg = AppConfig()
        save_config(p, cfg)
        return cfg

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    cfg = AppConfig()

    _apply_dataclass_updates(cfg.station, raw.get("station", {}))
    _apply_dataclass_updates(cfg.contest, raw.get("contest", {}))
    _apply_dataclass_updates(cfg.keyer, raw.get("keyer", {}))
    _apply_dataclass_updates(cfg.console, raw.get("console", {}))

    cfg.station.my_call = str(cfg.station.my_call or "N0CALL").strip().upper()
    mode = str(cfg.station.trx_mode or "CW").strip().upper()
    cfg.station.trx_mode = mode if mode in TRX_MODES else "CW"
    cfg.contest.name = str(cfg.contest.name or "GENERAL").strip().upper()

    direction = str(cfg.console.qtc_direction or "off").strip().lower()
    cfg.console.qtc_direction = direction if direction in QTC_DIRECTIONS else "off"
    cfg.console.poll_interval = max(0.001, min(1.0, float(cfg.console.poll_interval)))

    cfg.keyer.wpm = max(1, int(cfg.keyer.wpm))
    cfg.keyer.volume = max(0.0, min(1.0, float(cfg.keyer.volume)))
    # Short message lists from older files keep the remaining default slots.
    messages = [str(m) for m in (cfg.keyer.messages or [])]
    defaults = _default_messages()
    cfg.keyer.messages = messages[: len(defaults)] + defaults[len(messages) :]

    return cfg


def save_config(path: str | Path, config: AppConfig) -> None:
    payload = {
        "station": asdict(config.station),
        "contest": asdict(config.contest),
        "keyer": asdict(config.keyer),
        "console": asdict(config.console),
    }
    p = Path(path)
    p.write_text(yaml.safe_dump(payload, sort_keys=False, allow_unicode=False), encoding="utf-8")


def capture_settings(config: AppConfig) -> CaptureSettings:
    return CaptureSettings(
        my_call=config.station.my_call,
        trx_mode=config.station.trx_mode,
        ct_compat=bool(config.console.ct_compat),
        call_update=bool(config.console.call_update),
        change_rst=bool(config.console.change_rst),
        qtc_direction=config.console.qtc_direction,
    )


def _apply_dataclass_updates(target: Any, updates: Dict[str, Any]) -> None:
    for key, value in updates.items():
        if hasattr(target, key):
            setattr(target, key, value)
