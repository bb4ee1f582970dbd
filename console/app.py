from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

if __package__ in (None, ""):
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from console.sidetone import SidetoneConfig, SidetonePlayer
from console.terminal import CursesDisplay, CursesKeySource, run_curses
from exchange import keys
from exchange.config import AppConfig, capture_settings, load_config, save_config
from exchange.contests import Contact, ContestRule, get_contest_rule, load_contest_rules
from exchange.cw import cw_message_seconds, expand_macro, message_slot
from exchange.exchange_patterns import ExchangeTemplates, load_exchange_templates
from exchange.extractors import build_extractor
from exchange.input_loop import (
    CaptureState,
    Collaborators,
    ExchangeInputLoop,
    ExchangeResult,
    run_exchange_capture,
)
from exchange.multipliers import MultiplierTable

# Named keys accepted in simulation input, e.g. "599 14<TAB>".
KEY_TOKENS: Dict[str, int] = {
    "TAB": keys.TAB,
    "ENTER": keys.LINEFEED,
    "ESC": keys.ESCAPE,
    "BS": keys.KEY_BACKSPACE,
    "DEL": keys.KEY_DC,
    "LEFT": keys.KEY_LEFT,
    "RIGHT": keys.KEY_RIGHT,
    "HOME": keys.KEY_HOME,
    "END": keys.KEY_END,
    "INS": keys.KEY_IC,
    "PGUP": keys.KEY_PPAGE,
    "PGDN": keys.KEY_NPAGE,
    "SPOT": keys.CTRL_A,
}


class ScriptedKeySource:
    """Feeds a fixed key sequence; raises EOFError once it runs dry."""

    def __init__(self, codes: Iterable[int]):
        self.codes = list(codes)

    def poll(self, timeout: float) -> Optional[int]:
        if not self.codes:
            raise EOFError
        return self.codes.pop(0)


class PrintDisplay:
    def show(self, field_id: str, text: str) -> None:
        print(f"  {field_id}: {text}")

    def notify(self, message: str) -> None:
        print(f"ERR {message}")

    def show_exchange(self, text: str, cursor: int) -> None:
        pass

    def show_call(self, call: str) -> None:
        print(f"CALL {call}")

    def show_speed(self, wpm: int) -> None:
        print(f"WPM {wpm}")

    def show_rst(self, rst: str) -> None:
        print(f"RST {rst}")


class ConsoleCollaborators(Collaborators):
    def __init__(self, cfg: AppConfig, display=None, player: Optional[SidetonePlayer] = None, log_fn=print):
        super().__init__(display)
        self.cfg = cfg
        self.player = player
        self.log_fn = log_fn
        self.contact = Contact()
        self.serial = 1
        self.recalled: Dict[str, str] = {}
        self.spots: List[str] = []
        self.speed.set_wpm(cfg.keyer.wpm)

    def recall_exchange(self, call: str) -> str:
        return self.recalled.get(call, "")

    def remember(self, result: ExchangeResult) -> None:
        if result.accepted and result.call:
            self.recalled[result.call] = result.exchange
            self.serial += 1

    def time_update(self) -> None:
        if isinstance(self.display, CursesDisplay):
            self.display.tick()

    def send_message(self, index: int) -> None:
        template = message_slot(self.cfg.keyer.messages, index)
        text = expand_macro(template, self.cfg.station.my_call, self.contact.call, self.serial)
        self._send(text)

    def send_call(self, call: str) -> None:
        self._send(call)

    def play_voice(self, index: int) -> None:
        self.log_fn(f"Voice message {index} not available.")

    def stop_tx(self) -> None:
        if self.player is not None:
            self.player.silence()

    def add_spot(self) -> None:
        if self.contact.call:
            self.spots.append(self.contact.call)
            self.log_fn(f"Spot added: {self.contact.call}")

    def qtc_panel(self, direction: str) -> None:
        self.log_fn(f"QTC {direction} panel not available.")

    def keyer(self) -> None:
        self.log_fn("Keyboard keyer not available.")

    def set_speed(self, wpm: int) -> None:
        self.cfg.keyer.wpm = wpm
        if self.player is not None:
            self.player.config.wpm = wpm

    def _send(self, text: str) -> None:
        if not text.strip():
            return
        seconds = cw_message_seconds(text, self.speed.wpm)
        self.log_fn(f"TX {text} ({seconds:.1f}s)")
        if self.player is not None:
            self.player.send(text)


def keys_for_line(line: str) -> List[int]:
    """Key codes for a line of simulation input, completed with Enter unless it ends in a completion key."""
    codes: List[int] = []
    i = 0
    while i < len(line):
        if line[i] == "<":
            end = line.find(">", i)
            token = line[i + 1 : end].upper() if end > 0 else ""
            if token in KEY_TOKENS:
                codes.append(KEY_TOKENS[token])
                i = end + 1
                continue
        codes.append(ord(line[i]))
        i += 1
    if not codes or codes[-1] not in keys.COMPLETION_KEYS:
        codes.append(keys.LINEFEED)
    return codes


def _load_engine(cfg: AppConfig, log_fn) -> Tuple[ContestRule, MultiplierTable, ExchangeTemplates]:
    rules, warning = load_contest_rules(cfg.contest.rules_file)
    if warning:
        log_fn(warning)
    rule = get_contest_rule(rules, cfg.contest.name)
    if rule.name != cfg.contest.name:
        log_fn(f"Unknown contest {cfg.contest.name}; using {rule.name}.")

    templates, warning = load_exchange_templates(cfg.contest.templates_file)
    if warning:
        log_fn(warning)

    table = MultiplierTable()
    path_str = (cfg.contest.multipliers_file or "").strip()
    if path_str:
        table = MultiplierTable.from_file(path_str)
        log_fn(f"Multipliers loaded: {len(table)} from {path_str}")
    return rule, table, templates


def _new_loop(cfg: AppConfig, rule: ContestRule, table: MultiplierTable, templates: ExchangeTemplates, contact: Contact):
    return ExchangeInputLoop(rule, build_extractor(rule, table, templates), capture_settings(cfg), contact)


def _export(payload: Dict[str, object], prefix: str) -> Path:
    out_dir = Path("logs")
    out_dir.mkdir(exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    out_file = out_dir / f"{prefix}_{stamp}.json"
    out_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return out_file


def _parse_contact(args: Sequence[str], contact: Contact) -> None:
    # /call CALL [cq_zone] [itu_zone] [continent] [country]
    values = list(args) + [""] * 5
    contact.call = values[0].upper()
    contact.cq_zone = values[1]
    contact.itu_zone = values[2]
    contact.continent = values[3].upper()
    contact.country = values[4].upper()


def _run_simulation_cli(cfg: AppConfig, cfg_path: Path) -> int:
    rule, table, templates = _load_engine(cfg, print)
    collab = ConsoleCollaborators(cfg, display=PrintDisplay())
    sessions: List[Dict[str, object]] = []
    print(f"Simulation mode (stdin), contest {rule.name}. Commands: /call CALL [cq itu cont country] /export /quit")
    while True:
        try:
            line = input("exch> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not line.strip():
            continue
        parts = line.split()
        cmd = parts[0].lower()
        if cmd == "/quit":
            break
        if cmd == "/call":
            _parse_contact(parts[1:], collab.contact)
            print(f"CALL {collab.contact.call}")
            continue
        if cmd == "/export":
            out_file = _export({"contest": rule.name, "sessions": sessions}, "exchange_session_sim")
            print(f"Exported to {out_file}")
            continue

        loop = _new_loop(cfg, rule, table, templates, collab.contact)
        result = run_exchange_capture(loop, ScriptedKeySource(keys_for_line(line)), collab)
        collab.remember(result)
        sessions.append(loop.export_session())
        print(f"state: {result.status.value}")
        if result.accepted:
            print(f"exchange: {result.data.normalized or result.exchange}")
            if result.data.multiplier:
                print(f"mult: {result.data.multiplier}")
    save_config(cfg_path, cfg)
    return 0


def _read_call(key_source: CursesKeySource, display: CursesDisplay, call: str, poll_interval: float) -> Optional[str]:
    display.show_call(call)
    while True:
        key = key_source.poll(poll_interval)
        display.tick()
        if key is None:
            continue
        if key == keys.ESCAPE:
            if not call:
                return None
            call = ""
        elif key == keys.KEY_BACKSPACE:
            call = call[:-1]
        elif key in keys.COMPLETION_KEYS:
            if call:
                return call
        else:
            key = keys.promote(key)
            if keys.is_exchange_char(key) and key != ord(" ") and len(call) < 12:
                call += chr(key)
        display.show_call(call)


def _terminal_session(screen, cfg: AppConfig) -> int:
    messages: List[str] = []
    rule, table, templates = _load_engine(cfg, messages.append)
    display = CursesDisplay(screen, rule.name, cfg.station.my_call)
    player = SidetonePlayer(
        SidetoneConfig(
            sample_rate=cfg.keyer.sample_rate,
            tone_hz=cfg.keyer.tone_hz,
            wpm=cfg.keyer.wpm,
            volume=cfg.keyer.volume,
        ),
        device=cfg.keyer.output_device,
    )
    collab = ConsoleCollaborators(cfg, display=display, player=player, log_fn=display.notify)
    key_source = CursesKeySource(screen)
    player.start()

    display.draw_frame()
    for msg in messages:
        display.notify(msg)
    if not player.available:
        display.notify("sounddevice not installed; CW sidetone disabled.")

    sessions: List[Dict[str, object]] = []
    call = ""
    try:
        while True:
            entered = _read_call(key_source, display, call, cfg.console.poll_interval)
            if entered is None:
                break
            collab.contact.call = entered
            loop = _new_loop(cfg, rule, table, templates, collab.contact)
            result = run_exchange_capture(loop, key_source, collab, poll_interval=cfg.console.poll_interval)
            collab.remember(result)
            sessions.append(loop.export_session())
            if result.status in (CaptureState.COMPLETE, CaptureState.REJECTED):
                display.notify(f"{result.status.value}: {result.call} {result.data.normalized or result.exchange}")
                call = ""
            else:
                call = result.call
            display.show_exchange("", 0)
    finally:
        player.close()
    if sessions:
        _export({"contest": rule.name, "sessions": sessions}, "exchange_session")
    return 0


def _print_contests_cli(cfg: AppConfig) -> int:
    rules, warning = load_contest_rules(cfg.contest.rules_file)
    if warning:
        print(warning)
    for name, rule in sorted(rules.items()):
        print(f"  {name:<16} {rule.strategy:<15} width={rule.exchange_width}")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Contest exchange entry console")
    p.add_argument("--config", default="config.yaml", help="YAML config path.")
    p.add_argument("--simulate", action="store_true", help="Read exchanges from stdin instead of the terminal.")
    p.add_argument("--list-contests", action="store_true", help="List known contest rules and exit.")
    p.add_argument("--contest", default=None, help="Contest rule name.")
    p.add_argument("--rules", default=None, help="YAML file with contest rules.")
    p.add_argument("--templates", default=None, help="YAML file with exchange templates.")
    p.add_argument("--multipliers", default=None, help="Multiplier list file (sections, states).")
    p.add_argument("--my-call", default=None, help="My callsign.")
    p.add_argument("--mode", choices=["CW", "SSB", "DIGI"], default=None, help="Transceiver mode.")
    p.add_argument("--wpm", type=int, default=None, help="Keyer speed.")
    p.add_argument("--ct-compat", action="store_true", help="CT compatible Enter and '+' handling.")
    p.add_argument("--no-call-update", action="store_true", help="Do not take call fixes from the exchange.")
    p.add_argument("--change-rst", action="store_true", help="PgUp/PgDn change RST instead of speed.")
    p.add_argument("--qtc", choices=["off", "recv", "send", "both"], default=None, help="QTC direction.")
    return p


def _apply_cli_overrides(cfg: AppConfig, args: argparse.Namespace) -> None:
    if args.contest:
        cfg.contest.name = args.contest.strip().upper()
    if args.rules:
        cfg.contest.rules_file = args.rules
    if args.templates:
        cfg.contest.templates_file = args.templates
    if args.multipliers:
        cfg.contest.multipliers_file = args.multipliers
    if args.my_call:
        cfg.station.my_call = args.my_call.upper()
    if args.mode:
        cfg.station.trx_mode = args.mode
    if args.wpm is not None:
        cfg.keyer.wpm = max(1, int(args.wpm))
    if args.ct_compat:
        cfg.console.ct_compat = True
    if args.no_call_update:
        cfg.console.call_update = False
    if args.change_rst:
        cfg.console.change_rst = True
    if args.qtc:
        cfg.console.qtc_direction = args.qtc


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    cfg_path = Path(args.config)
    cfg = load_config(cfg_path)
    _apply_cli_overrides(cfg, args)

    if args.list_contests:
        return _print_contests_cli(cfg)
    if args.simulate:
        return _run_simulation_cli(cfg, cfg_path)

    try:
        status = run_curses(_terminal_session, cfg)
    except RuntimeError as exc:
        print(f"{exc} Use --simulate for stdin mode.")
        return 2
    save_config(cfg_path, cfg)
    return status


if __name__ == "__main__":
    raise SystemExit(main())
