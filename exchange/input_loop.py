from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Protocol

from . import keys
from .buffer import ExchangeBuffer
from .contests import Contact, ContestRule
from .cw import CWSpeed, ReceivedRST
from .editor import ExchangeEditor
from .extractors import ContestExtractor, ExchangeData, build_extractor
from .serial import pad_serial


class CaptureState(str, Enum):
    IDLE = "IDLE"
    COLLECTING = "COLLECTING"
    EDITING = "EDITING"
    COMPLETE = "COMPLETE"
    BACK = "BACK"
    REJECTED = "REJECTED"
    ABORTED = "ABORTED"


FINAL_STATES = frozenset({CaptureState.COMPLETE, CaptureState.BACK, CaptureState.REJECTED, CaptureState.ABORTED})

SECTION_PROMPT = "section?"
LOCATOR_PROMPT = "locator?"
STATE_PROV_PROMPT = "state/prov?"


@dataclass
class CaptureSettings:
    my_call: str = "N0CALL"
    trx_mode: str = "CW"  # CW | SSB | DIGI
    ct_compat: bool = False
    call_update: bool = True
    change_rst: bool = False
    qtc_direction: str = "off"  # off | recv | send | both
    voice_call_slot: int = 5


class Action(NamedTuple):
    kind: str
    value: Any = None


@dataclass
class Transition:
    state: CaptureState
    key: int = 0
    actions: List[Action] = field(default_factory=list)

    @property
    def done(self) -> bool:
        return self.state in FINAL_STATES


@dataclass
class ExchangeResult:
    key: int
    status: CaptureState
    exchange: str
    data: ExchangeData
    call: str

    @property
    def accepted(self) -> bool:
        return self.status == CaptureState.COMPLETE


@dataclass
class ExchangeCaptureSession:
    rule: ContestRule
    buffer: ExchangeBuffer
    contact: Contact
    state: CaptureState = CaptureState.IDLE
    data: Optional[ExchangeData] = None
    editor: Optional[ExchangeEditor] = None
    last_key: int = 0


class ExchangeInputLoop:
    """
    Key-by-key state machine for the exchange field.
    `step` only computes the next state and the actions to perform; nothing here blocks or draws.
    """

    def __init__(
        self,
        rule: ContestRule,
        extractor: Optional[ContestExtractor] = None,
        settings: Optional[CaptureSettings] = None,
        contact: Optional[Contact] = None,
    ):
        self.rule = rule
        self.extractor = extractor or build_extractor(rule)
        self.settings = settings or CaptureSettings()
        self.session = ExchangeCaptureSession(
            rule=rule,
            buffer=ExchangeBuffer(rule.exchange_width),
            contact=contact or Contact(),
        )
        self.logs: List[Dict[str, str]] = []

    @property
    def state(self) -> CaptureState:
        return self.session.state

    @property
    def buffer(self) -> ExchangeBuffer:
        return self.session.buffer

    @property
    def contact(self) -> Contact:
        return self.session.contact

    @property
    def data(self) -> ExchangeData:
        return self.session.data or ExchangeData()

    def start(self, prefill: str = "", recalled: str = "") -> Transition:
        s = self.session
        text = prefill.upper()
        if self.rule.recall_exchange and not text and recalled:
            text = recalled.upper()
        if not text and s.contact.call:
            if self.rule.zone_prefill == "cq":
                text = s.contact.cq_zone
            elif self.rule.zone_prefill == "itu":
                text = s.contact.itu_zone
        if not text and s.contact.call and self.rule.continent_prefill:
            text = s.contact.continent

        if not s.buffer.replace(text):
            self._log("WARN", f"Prefill '{text}' does not fit {s.buffer.width} characters; ignored.")
            s.buffer.clear()

        s.state = CaptureState.COLLECTING
        s.data = None
        s.editor = None
        self._log("INFO", f"Exchange capture started for {s.contact.call or '-'}")

        actions: List[Action] = []
        if self.rule.live_validation:
            self._validate(actions)
        actions.append(self._refresh())
        return Transition(state=s.state, actions=actions)

    def step(self, key: int) -> Transition:
        s = self.session
        if s.state == CaptureState.IDLE:
            self.start()
        if s.state in FINAL_STATES:
            return Transition(state=s.state, key=s.last_key)

        s.last_key = key
        if s.state == CaptureState.EDITING:
            return self._step_editing(key)
        return self._step_collecting(key)

    def abort(self) -> Transition:
        self.session.state = CaptureState.ABORTED
        self._log("INFO", "Exchange capture aborted")
        return Transition(state=self.session.state, key=self.session.last_key)

    def result(self) -> ExchangeResult:
        s = self.session
        return ExchangeResult(
            key=s.last_key,
            status=s.state,
            exchange=s.buffer.text,
            data=self.data,
            call=s.contact.call,
        )

    def export_session(self) -> Dict[str, object]:
        s = self.session
        data = self.data
        return {
            "state": s.state.value,
            "contest": s.rule.name,
            "call": s.contact.call,
            "exchange": s.buffer.text,
            "normalized": data.normalized,
            "multiplier": data.multiplier,
            "logs": self.logs,
        }

    def _step_collecting(self, key: int) -> Transition:
        s = self.session
        cfg = self.settings
        buf = s.buffer
        actions: List[Action] = []
        before = buf.text
        x = key

        if x == keys.CTRL_Q:
            if cfg.qtc_direction in ("recv", "both"):
                actions.append(Action("qtc", "recv"))
            elif cfg.qtc_direction == "send":
                actions.append(Action("qtc", "send"))
            return self._stay(actions)
        if x == keys.CTRL_S:
            if cfg.qtc_direction in ("send", "both"):
                actions.append(Action("qtc", "send"))
            return self._stay(actions)

        if x == keys.CTRL_A:
            actions.append(Action("add_spot"))
            buf.clear()
            return self._finish(CaptureState.BACK, keys.TAB, actions)

        if x == keys.ESCAPE:
            actions.append(Action("stop_tx"))
            if not buf:
                return self._finish(CaptureState.BACK, keys.TAB, actions)
            buf.clear()
            x = 0
        elif x == keys.KEY_BACKSPACE:
            buf.pop()
        elif x == ord("+"):
            if cfg.ct_compat and len(s.contact.call) > 2:
                if not buf:
                    x = -1
                else:
                    actions.append(Action("send_message", 3))
                    x = keys.BACKSLASH
        elif x == keys.KEY_IC:
            if cfg.ct_compat:
                actions.append(Action("send_message", 2))
        elif x == keys.KEY_F(1):
            if cfg.trx_mode in ("CW", "DIGI"):
                actions.append(Action("send_call", cfg.my_call))
            else:
                actions.append(Action("play_voice", cfg.voice_call_slot))
        elif keys.KEY_F(2) <= x <= keys.KEY_F(11):
            actions.append(Action("send_message", x - keys.KEY_F(1)))
        elif keys.ALT_0 <= x <= keys.ALT_9:
            actions.append(Action("send_message", x - keys.ALT_0 + 14))
        elif x in (keys.KEY_HOME, keys.KEY_LEFT):
            if buf:
                s.editor = ExchangeEditor(buf, 0 if x == keys.KEY_HOME else None)
                s.state = CaptureState.EDITING
                self._log("INFO", "Edit exchange")
            return self._stay(actions)
        elif x == keys.KEY_PPAGE:
            actions.append(self._adjust("up"))
        elif x == keys.KEY_NPAGE:
            actions.append(self._adjust("down"))
        elif x in (ord(","), keys.CTRL_K):
            actions.append(Action("keyer"))
            x = 0
        elif x in keys.ENTER_KEYS:
            if cfg.ct_compat or not self.rule.is_contest:
                x = keys.BACKSLASH if buf else -1

        x = keys.promote(x)
        if keys.is_exchange_char(x) and not buf.is_full():
            buf.append(chr(x))

        if self.rule.live_validation and (buf.text != before or s.data is None):
            self._validate(actions)

        if x in keys.COMPLETION_KEYS:
            return self._complete(x, actions)
        return self._stay(actions)

    def _step_editing(self, key: int) -> Transition:
        s = self.session
        editor = s.editor
        if editor is None:
            s.state = CaptureState.COLLECTING
            return self._step_collecting(key)
        actions: List[Action] = []
        before = s.buffer.text

        still_editing = editor.handle(key)
        if self.rule.live_validation and s.buffer.text != before:
            self._validate(actions)
        if not still_editing:
            s.editor = None
            s.state = CaptureState.COLLECTING
        return self._stay(actions)

    def _complete(self, x: int, actions: List[Action]) -> Transition:
        s = self.session
        rule = self.rule
        buf = s.buffer

        if rule.serial_padding != "none" and (not rule.pad_foreign_only or s.contact.foreign):
            padded = pad_serial(buf.text, rule.serial_padding, buf.width)
            if padded != buf.text and buf.replace(padded):
                self._log("INFO", f"Serial aligned to '{padded}'")

        data = self.extractor.extract(buf.text, interactive=False)
        s.data = data
        valid = self.extractor.is_complete(data)
        complete = x == keys.TAB or valid

        if rule.strategy == "arrl_ss" and not complete:
            return self._prompt(SECTION_PROMPT, actions)

        if rule.requires_section and not complete:
            if rule.serial_or_section and not s.contact.country_has_sections:
                return self._finish(CaptureState.COMPLETE, x, actions)
            actions.append(Action("notify", SECTION_PROMPT))
            self._log("ERR", f"Section missing in '{buf.text}'")
            return self._finish(CaptureState.REJECTED, x, actions)

        # Tab does not bypass the locator check.
        if rule.strategy == "grid" and not valid:
            return self._prompt(LOCATOR_PROMPT, actions)

        if (
            rule.strategy == "zone"
            and self.settings.trx_mode == "DIGI"
            and s.contact.country in rule.state_province_countries
            and len(buf) < 5
        ):
            actions.append(Action("notify", STATE_PROV_PROMPT))
            if x in keys.FINALIZE_KEYS:
                self._log("ERR", "State/province missing")
                return self._stay(actions)

        return self._finish(CaptureState.COMPLETE, x, actions)

    def _validate(self, actions: List[Action]) -> None:
        s = self.session
        data = self.extractor.extract(s.buffer.text, interactive=True)
        s.data = data
        for field_id, text in data.previews:
            actions.append(Action("show", (field_id, text)))

        fix = data.callsign_correction
        if self.settings.call_update and len(fix) >= 3 and fix != s.contact.call:
            self._log("INFO", f"Call corrected {s.contact.call or '-'} -> {fix}")
            s.contact.call = fix
            actions.append(Action("update_call", fix))

    def _adjust(self, direction: str) -> Action:
        if self.settings.change_rst:
            return Action(f"rst_{direction}")
        if self.settings.trx_mode != "CW":
            return Action("noop")
        return Action(f"speed_{direction}")

    def _prompt(self, message: str, actions: List[Action]) -> Transition:
        actions.append(Action("notify", message))
        self._log("ERR", f"{message} '{self.session.buffer.text}'")
        return self._stay(actions)

    def _stay(self, actions: List[Action]) -> Transition:
        actions.append(self._refresh())
        return Transition(state=self.session.state, key=self.session.last_key, actions=actions)

    def _finish(self, state: CaptureState, key: int, actions: List[Action]) -> Transition:
        s = self.session
        s.state = state
        s.last_key = key
        s.editor = None
        if s.data is None:
            s.data = self.extractor.extract(s.buffer.text, interactive=False)
        self._log("INFO", f"Exchange '{s.buffer.text}' finished ({state.value})")
        actions.append(self._refresh())
        return Transition(state=state, key=key, actions=actions)

    def _refresh(self) -> Action:
        s = self.session
        cursor = s.editor.cursor if s.editor is not None else len(s.buffer)
        return Action("refresh", (s.buffer.text, cursor))

    def _log(self, level: str, message: str) -> None:
        self.logs.append(
            {
                "timestamp_utc": datetime.now(timezone.utc).isoformat(),
                "level": level,
                "state": self.session.state.value,
                "message": message,
            }
        )
        if len(self.logs) > 2000:
            self.logs = self.logs[-1000:]


class KeySource(Protocol):
    def poll(self, timeout: float) -> Optional[int]:
        """Next key code, or None when nothing arrived within `timeout` seconds."""


class Display(Protocol):
    def show(self, field_id: str, text: str) -> None: ...

    def notify(self, message: str) -> None: ...

    def show_exchange(self, text: str, cursor: int) -> None: ...

    def show_call(self, call: str) -> None: ...

    def show_speed(self, wpm: int) -> None: ...

    def show_rst(self, rst: str) -> None: ...


class Collaborators:
    """Default no-op collaborators; the console front end overrides what it supports."""

    def __init__(self, display: Optional[Display] = None):
        self.display = display
        self.speed = CWSpeed()
        self.rst = ReceivedRST()

    def recall_exchange(self, call: str) -> str:
        return ""

    def time_update(self) -> None:
        pass

    def terminal_update(self) -> None:
        pass

    def send_message(self, index: int) -> None:
        pass

    def send_call(self, call: str) -> None:
        pass

    def play_voice(self, index: int) -> None:
        pass

    def stop_tx(self) -> None:
        pass

    def add_spot(self) -> None:
        pass

    def qtc_panel(self, direction: str) -> None:
        pass

    def keyer(self) -> None:
        pass

    def set_speed(self, wpm: int) -> None:
        pass


def perform(actions: List[Action], collab: Collaborators) -> None:
    display = collab.display
    for action in actions:
        kind, value = action
        if kind == "send_message":
            collab.send_message(value)
        elif kind == "send_call":
            collab.send_call(value)
        elif kind == "play_voice":
            collab.play_voice(value)
        elif kind == "stop_tx":
            collab.stop_tx()
        elif kind == "add_spot":
            collab.add_spot()
        elif kind == "qtc":
            collab.qtc_panel(value)
        elif kind == "keyer":
            collab.keyer()
        elif kind in ("speed_up", "speed_down"):
            wpm = collab.speed.increase() if kind == "speed_up" else collab.speed.decrease()
            collab.set_speed(wpm)
            if display is not None:
                display.show_speed(wpm)
        elif kind in ("rst_up", "rst_down"):
            rst = collab.rst.up() if kind == "rst_up" else collab.rst.down()
            if display is not None:
                display.show_rst(rst)
        elif display is None:
            continue
        elif kind == "show":
            display.show(*value)
        elif kind == "notify":
            display.notify(value)
        elif kind == "update_call":
            display.show_call(value)
        elif kind == "refresh":
            display.show_exchange(*value)


def run_exchange_capture(
    loop: ExchangeInputLoop,
    key_source: KeySource,
    collab: Optional[Collaborators] = None,
    prefill: str = "",
    poll_interval: float = 0.01,
) -> ExchangeResult:
    """
    Capture one exchange: poll keys with a short timeout, keep the clock (and the
    digimode terminal) ticking between keys, and feed every key through the state machine.
    """
    collab = collab or Collaborators()
    recalled = ""
    if loop.rule.recall_exchange and not prefill:
        recalled = collab.recall_exchange(loop.contact.call)

    transition = loop.start(prefill, recalled)
    perform(transition.actions, collab)

    while not transition.done:
        try:
            key = key_source.poll(poll_interval)
        except (EOFError, KeyboardInterrupt):
            transition = loop.abort()
            break

        collab.time_update()
        if loop.settings.trx_mode == "DIGI":
            collab.terminal_update()
        if key is None:
            continue

        transition = loop.step(key)
        perform(transition.actions, collab)

    return loop.result()
