"""Tests for hanoi_tutor/cli - solve, play and stats commands."""

import json
import os

import pytest

from hanoi_tutor.analytics import AnalyticsStore
from hanoi_tutor.cli import format_towers, main
from hanoi_tutor.cli import commands
from hanoi_tutor.models import AnalyticsSnapshot


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Keep the CLI from attaching handlers to the package logger."""
    monkeypatch.setattr(commands, "setup_logging", lambda *args, **kwargs: None)
    for name in list(os.environ):
        if name.startswith("HANOI_TUTOR_"):
            monkeypatch.delenv(name)


def test_format_towers():
    assert format_towers([[3, 2], [], [1]]) == "0 | 3 2\n1 |\n2 | 1"


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "solve" in capsys.readouterr().out


class TestSolve:
    def test_prints_sequence(self, capsys):
        assert main(["solve", "--disks", "3"]) == 0
        out = capsys.readouterr().out
        assert "   1. disk 1: 0 -> 2" in out
        assert "7 moves for 3 disks" in out

    def test_alternate_target(self, capsys):
        assert main(["solve", "--disks", "3", "--target", "1"]) == 0
        assert "   1. disk 1: 0 -> 1" in capsys.readouterr().out

    def test_bad_disk_count(self, capsys):
        assert main(["solve", "--disks", "12"]) == 1

    def test_zero_disks_is_rejected(self, capsys):
        assert main(["solve", "--disks", "0"]) == 1
        assert "moves for" not in capsys.readouterr().out

    def test_log_file_option(self, tmp_path, monkeypatch, capsys):
        calls = []
        monkeypatch.setattr(commands, "setup_logging", lambda *args, **kwargs: calls.append(kwargs))
        log_file = tmp_path / "solve.log"
        assert main(["solve", "--disks", "3", "--log-file", str(log_file)]) == 0
        assert calls[0]["log_file"] == str(log_file)

    def test_bad_environment(self, monkeypatch, capsys):
        monkeypatch.setenv("HANOI_TUTOR_DISK_COUNT", "40")
        assert main(["solve"]) == 2
        assert "Configuration error" in capsys.readouterr().err


class TestPlay:
    def test_autoplay_to_completion(self, tmp_path, capsys):
        path = tmp_path / "analytics.txt"
        code = main([
            "play",
            "--disks", "3",
            "--interval-ms", "20",
            "--analytics-path", str(path),
        ])
        assert code == 0
        out = capsys.readouterr().out
        assert out.count("Move ") == 7
        assert "Solved!" in out
        assert "7 moves, 7 optimal" in out

        snapshot = AnalyticsStore(path).load()
        assert snapshot.optimal_moves == 7
        assert snapshot.optimal_moves_over_time == [7]

    def test_no_save(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        assert main(["play", "--disks", "3", "--interval-ms", "10", "--no-save"]) == 0
        assert not (tmp_path / "analytics.txt").exists()

    def test_corrupt_analytics_file_is_reported(self, tmp_path, capsys):
        path = tmp_path / "analytics.txt"
        path.write_text("abc\n")
        code = main([
            "play",
            "--disks", "3",
            "--interval-ms", "10",
            "--analytics-path", str(path),
        ])
        assert code == 0
        captured = capsys.readouterr()
        assert "Solved!" in captured.out
        assert "Analytics could not be saved" in captured.err
        assert path.read_text() == "abc\n"

    def test_rejects_zero_interval(self, tmp_path):
        assert main(["play", "--interval-ms", "0", "--no-save"]) == 1


class TestStats:
    def test_missing_file(self, tmp_path, capsys):
        assert main(["stats", "--analytics-path", str(tmp_path / "none.txt")]) == 0
        assert "Optimal moves:    0" in capsys.readouterr().out

    def test_json(self, tmp_path, capsys):
        path = tmp_path / "analytics.txt"
        AnalyticsStore(path).save(AnalyticsSnapshot(
            optimal_moves=9,
            unoptimal_moves=2,
            elapsed_seconds=41,
            optimal_moves_over_time=[7, 9],
        ))
        assert main(["stats", "--analytics-path", str(path), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["optimal_moves"] == 9
        assert data["optimal_moves_over_time"] == [7, 9]

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "analytics.txt"
        path.write_text("abc\n")
        assert main(["stats", "--analytics-path", str(path)]) == 1
