from __future__ import annotations

import numpy as np

from console.sidetone import SidetoneConfig, render, text_to_elements


def test_text_to_elements_spacing():
    assert text_to_elements("E") == [(True, 1)]
    assert text_to_elements("A") == [(True, 1), (False, 1), (True, 3)]
    assert text_to_elements("EE") == [(True, 1), (False, 3), (True, 1)]
    assert text_to_elements("E E") == [(True, 1), (False, 7), (True, 1)]
    assert text_to_elements("~") == []


def test_render_length_and_level():
    cfg = SidetoneConfig(sample_rate=1000, wpm=12, volume=0.3)
    audio = render("E", cfg)
    assert audio.dtype == np.float32
    assert audio.size == 100
    assert float(np.max(np.abs(audio))) <= 0.3 + 1e-6

    assert render("EE", cfg).size == 500


def test_render_empty_text():
    audio = render("", SidetoneConfig())
    assert audio.size == 1
    assert float(audio[0]) == 0.0
