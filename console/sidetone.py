from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from exchange.cw import MORSE_CODE

try:
    import sounddevice as sd
except Exception:  # pragma: no cover - optional runtime dependency
    sd = None


Element = Tuple[bool, int]  # (key_down, length in dots)


@dataclass
class SidetoneConfig:
    sample_rate: int = 48000
    tone_hz: float = 600.0
    wpm: int = 30
    volume: float = 0.3
    ramp_ms: float = 5.0

    @property
    def dot_seconds(self) -> float:
        return 1.2 / max(self.wpm, 1)


def text_to_elements(text: str) -> List[Element]:
    """Keying elements for `text`; unknown characters are skipped."""
    elements: List[Element] = []
    for word_idx, word in enumerate(text.upper().split()):
        if word_idx and elements:
            elements.append((False, 7))
        first_letter = True
        for ch in word:
            code = MORSE_CODE.get(ch)
            if code is None:
                continue
            if not first_letter:
                elements.append((False, 3))
            first_letter = False
            for idx, el in enumerate(code):
                if idx:
                    elements.append((False, 1))
                elements.append((True, 1 if el == "." else 3))
    return elements


def render(text: str, config: SidetoneConfig) -> np.ndarray:
    elements = text_to_elements(text)
    sr = config.sample_rate
    if not elements:
        return np.zeros(1, dtype=np.float32)

    dot_samples = max(int(round(config.dot_seconds * sr)), 1)
    ramp = max(min(int(sr * config.ramp_ms / 1000.0), dot_samples // 2), 0)
    volume = float(np.clip(config.volume, 0.0, 1.0))
    step = 2.0 * np.pi * config.tone_hz / sr

    chunks: List[np.ndarray] = []
    offset = 0
    for key_down, dots in elements:
        n = dots * dot_samples
        if key_down:
            t = np.arange(offset, offset + n, dtype=np.float32)
            wave = np.sin(step * t).astype(np.float32)
            if ramp:
                env = np.ones(n, dtype=np.float32)
                env[:ramp] = np.linspace(0.0, 1.0, ramp, endpoint=False, dtype=np.float32)
                env[-ramp:] = np.linspace(1.0, 0.0, ramp, endpoint=False, dtype=np.float32)
                wave *= env
            chunks.append(wave * volume)
        else:
            chunks.append(np.zeros(n, dtype=np.float32))
        offset += n
    return np.concatenate(chunks).astype(np.float32)


class SidetonePlayer:
    """Plays queued CW messages on a background thread so the key loop never blocks."""

    def __init__(self, config: SidetoneConfig, device: Optional[int] = None):
        self.config = config
        self.device = device
        self.queue: queue.Queue[Optional[str]] = queue.Queue(maxsize=32)
        self.stop_event = threading.Event()
        self.thread = threading.Thread(target=self._run, daemon=True)

    @property
    def available(self) -> bool:
        return sd is not None

    def start(self) -> None:
        if not self.thread.is_alive():
            self.thread.start()

    def close(self) -> None:
        self.stop_event.set()
        self.silence()
        try:
            self.queue.put_nowait(None)
        except queue.Full:
            pass
        if self.thread.is_alive():
            self.thread.join(timeout=1.5)

    def send(self, text: str) -> None:
        if not text.strip():
            return
        try:
            self.queue.put_nowait(text)
        except queue.Full:
            pass

    def silence(self) -> None:
        """Drop pending messages and cut the one playing."""
        while True:
            try:
                self.queue.get_nowait()
            except queue.Empty:
                break
        if sd is not None:
            sd.stop()

    def _run(self) -> None:
        while not self.stop_event.is_set():
            try:
                text = self.queue.get(timeout=0.2)
            except queue.Empty:
                continue
            if text is None:
                break
            if sd is None:
                continue
            audio = render(text, self.config)
            try:
                sd.play(audio, samplerate=self.config.sample_rate, device=self.device, blocking=True)
            except Exception:
                continue
