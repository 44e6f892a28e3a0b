"""
Tests for scripts/replay_events.py.
"""

import importlib.util
import json
import sys
from pathlib import Path

import pytest

from indexer.events import Transfer

SCRIPT_PATH = Path(__file__).resolve().parent.parent / "scripts" / "replay_events.py"


@pytest.fixture
def replay_module():
    spec = importlib.util.spec_from_file_location("replay_events", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def log_file(tmp_path):
    lines = [
        {
            "event": "Transfer",
            "args": {"from": "0x" + "0" * 40, "to": "0x" + "a" * 40, "value": 100},
            "blockNumber": 1,
            "transactionHash": "0x01",
            "logIndex": 0,
        },
        {"event": "Approval", "args": {}, "blockNumber": 2},
        {
            "event": "Transfer",
            "args": {"from": "0x" + "a" * 40, "to": "0x" + "b" * 40, "value": 40},
            "blockNumber": 3,
            "transactionHash": "0x03",
            "logIndex": 0,
        },
    ]
    path = tmp_path / "logs.jsonl"
    path.write_text(
        "\n".join(json.dumps(line) for line in lines) + "\nnot json\n\n",
        encoding="utf-8",
    )
    return path


class TestReplayScript:
    """Tests for the replay script."""

    def test_read_events_skips_bad_lines(self, replay_module, log_file):
        events = list(replay_module.read_events(log_file))

        assert len(events) == 2
        assert all(isinstance(e, Transfer) for e in events)
        assert [e.amount for e in events] == [100, 40]

    def test_dry_run_exit_code(self, replay_module, log_file, clean_env, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["replay_events.py", str(log_file), "--dry-run"])

        assert replay_module.main() == 0

    def test_database_replay(self, replay_module, log_file, clean_env, tmp_path, monkeypatch):
        clean_env.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'replay.db'}")
        monkeypatch.setattr(sys, "argv", ["replay_events.py", str(log_file)])

        assert replay_module.main() == 0

    def test_missing_file(self, replay_module, clean_env, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["replay_events.py", str(tmp_path / "absent.jsonl")])

        assert replay_module.main() == 1
