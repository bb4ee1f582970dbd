from __future__ import annotations

from exchange.cw import CWSpeed, ReceivedRST, cw_dots, cw_message_length, cw_message_seconds, expand_macro, speed_index


def test_speed_index_rounds_up_to_table():
    assert speed_index(4) == 0
    assert speed_index(7) == 1
    for wpm in range(11, 49):
        assert speed_index(wpm) == (wpm - 9) // 2
    assert speed_index(60) == 20


def test_speed_stepping_clamps():
    speed = CWSpeed.from_wpm(43)
    assert speed.wpm == 44
    assert speed.increase() == 46

    top = CWSpeed.from_wpm(50)
    assert top.increase() == 50
    bottom = CWSpeed.from_wpm(6)
    assert bottom.decrease() == 6
    assert bottom.increase() == 12


def test_received_rst_stepping():
    rst = ReceivedRST()
    assert rst.report == "599"
    assert rst.up() == "599"
    assert rst.down() == "589"
    assert ReceivedRST(tone=False).report == "59"
    assert ReceivedRST(index=0).down() == "339"


def test_cw_dots():
    assert cw_dots("E") == 5
    assert cw_dots("A") == 9
    assert cw_dots("0") == 23
    assert cw_dots(" ") == 3
    assert cw_dots("~") == 0


def test_message_length_expands_my_call():
    assert cw_message_length("%", "E") == 5
    assert cw_message_length("E E") == 13
    assert abs(cw_message_seconds("E", 12) - 0.5) < 1e-9


def test_expand_macro():
    assert expand_macro("@ 5NN #", "DL1X", "K1ABC", 7) == "K1ABC 5NN 007"
    assert expand_macro("TU %", "DL1X") == "TU DL1X"
    assert expand_macro("#", "DL1X", serial=0) == ""
