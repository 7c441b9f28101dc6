"""Tests for the management CLI."""

import json
from datetime import timedelta

import pytest

from app.cli import main
from app.utils.dates import utcnow


def _write_batches(path, batches: list[dict]):
    path.write_text(json.dumps(batches))
    return str(path)


def _batch(batch_id: str, days_stored: float, shelf_life_days: float = 10) -> dict:
    return {
        "batch_id": batch_id,
        "entry_date": (utcnow() - timedelta(days=days_stored)).isoformat(),
        "shelf_life_days": shelf_life_days,
        "temperature_c": 10,
        "humidity_pct": 65,
        "ethylene": "normal",
        "co2": "normal",
        "ammonia": "normal",
    }


@pytest.mark.unit
class TestEvaluateCommand:

    def test_evaluates_file(self, tmp_path, capsys):
        path = _write_batches(tmp_path / "batches.json", [
            _batch("B-1", 5),
            _batch("B-2", 10),
        ])

        assert main(["app.cli", "evaluate", path]) == 0

        out = capsys.readouterr().out
        assert "B-1" in out and "score= 28" in out and "retail_quick_commerce" in out
        assert "B-2" in out and "score= 48" in out and "hotel_restaurant" in out
        assert "2 batch(es) evaluated" in out
        assert "fresh=1, moderate=1, high=0" in out

    def test_invalid_shelf_life(self, tmp_path, capsys):
        path = _write_batches(tmp_path / "batches.json", [_batch("B-1", 5, shelf_life_days=0)])
        assert main(["app.cli", "evaluate", path]) == 1
        assert "FAILED" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert main(["app.cli", "evaluate", str(tmp_path / "nope.json")]) == 1
        assert "Cannot read" in capsys.readouterr().out

    def test_malformed_file(self, tmp_path, capsys):
        path = tmp_path / "batches.json"
        path.write_text('[{"batch_id": "B-1"}]')
        assert main(["app.cli", "evaluate", str(path)]) == 1
        assert "Invalid batch file" in capsys.readouterr().out


@pytest.mark.unit
class TestOtherCommands:

    def test_policy(self, capsys):
        assert main(["app.cli", "policy"]) == 0
        policy = json.loads(capsys.readouterr().out)
        assert policy["weight_gas"] == 0.20

    def test_usage(self, capsys):
        assert main(["app.cli"]) == 2
        assert "Usage" in capsys.readouterr().out
