from __future__ import annotations

import io
from pathlib import Path

from console.app import keys_for_line, main
from exchange import keys


def test_keys_for_line_appends_enter():
    assert keys_for_line("14") == [ord("1"), ord("4"), keys.LINEFEED]
    assert keys_for_line("5<tab>") == [ord("5"), keys.TAB]
    assert keys_for_line("<ESC>") == [keys.ESCAPE, keys.LINEFEED]
    assert keys_for_line("a<b") == [ord("a"), ord("<"), ord("b"), keys.LINEFEED]


def test_simulation_cli_captures_exchange(tmp_path: Path, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("/call DL1ABC 14\n<TAB>\n/call K1ABC\n05\n/quit\n"))
    cfg_path = tmp_path / "config.yaml"

    assert main(["--config", str(cfg_path), "--simulate", "--contest", "CQWW"]) == 0

    out = capsys.readouterr().out
    assert "CALL DL1ABC" in out
    assert "state: COMPLETE" in out
    assert "exchange: 14" in out
    assert "exchange: 05" in out
    assert "mult: 05" in out
    assert cfg_path.exists()


def test_list_contests(tmp_path: Path, capsys):
    assert main(["--config", str(tmp_path / "config.yaml"), "--list-contests"]) == 0
    out = capsys.readouterr().out
    assert "CQWW" in out
    assert "ARRL_SS" in out
