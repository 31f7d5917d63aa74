import logging
from pathlib import Path

import pytest

from memoy import __version__
from memoy.__main__ import main
from memoy.ledger import HighScoreEntry, HighScoreLedger


def test_scores_prints_table(tmp_path: Path, capsys: pytest.CaptureFixture):
    path = tmp_path / "scores.txt"
    HighScoreLedger.load(path).record(HighScoreEntry("Ada", 3, 42, 1270))

    assert main(["--ledger", str(path), "--scores"]) == 0

    out = capsys.readouterr().out
    assert "High Scores" in out
    assert "Ada" in out and "1270" in out


def test_scores_with_empty_ledger(tmp_path: Path, capsys: pytest.CaptureFixture):
    assert main(["--ledger", str(tmp_path / "none.txt"), "--scores"]) == 0
    assert "No high scores yet" in capsys.readouterr().out


def test_invalid_settings_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("game:\n  grid_size: 3\n", encoding="utf-8")

    assert main(["--settings", str(cfg), "--scores"]) == 2
    assert "grid_size" in capsys.readouterr().err


def test_invalid_time_limit_exit_code(tmp_path: Path):
    assert main(["--ledger", str(tmp_path / "s.txt"), "--time-limit", "0", "--scores"]) == 2


def test_version(capsys: pytest.CaptureFixture):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_end_of_input_exits_cleanly(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    def no_input(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", no_input)
    assert main(["--ledger", str(tmp_path / "s.txt"), "--no-color", "--easy"]) == 0


def test_verbose_sets_log_level(tmp_path: Path):
    main(["--ledger", str(tmp_path / "s.txt"), "--scores", "-vv"])
    assert logging.getLogger().level == logging.DEBUG
