from __future__ import annotations

import itertools
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest
from typer.testing import CliRunner

from gym_cli.core.storage import MemoryStorage
from gym_cli.core.store import PlanStore


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def id_factory() -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture()
def fixed_clock() -> Callable[[], datetime]:
    return lambda: datetime(2026, 2, 14, 18, 30, 5, 250000, tzinfo=timezone.utc)


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def store(storage: MemoryStorage, id_factory, fixed_clock) -> PlanStore:
    return PlanStore(storage, clock=fixed_clock, id_factory=id_factory)


@pytest.fixture()
def push_day(store: PlanStore) -> Dict[str, str]:
    plan = store.create_plan("Push Day")
    assert plan is not None
    bench = store.add_exercise(plan.id, "Bench", 20.0)
    press = store.add_exercise(plan.id, "Overhead Press", 15.0)
    dips = store.add_exercise(plan.id, "Dips", 0)
    assert bench and press and dips
    return {"plan": plan.id, "bench": bench.id, "press": press.id, "dips": dips.id}


@pytest.fixture()
def sample_plans_payload() -> List[Dict[str, Any]]:
    return [
        {
            "id": "plan-a",
            "name": "Pull Day",
            "exercises": [
                {
                    "id": "ex-1",
                    "name": "Rows",
                    "currentWeight": 42.5,
                    "previousWeight": 40.0,
                    "bestWeight": 45.0,
                    "notes": "slow eccentric",
                    "targetSets": 4,
                    "completedSets": 2,
                },
                {
                    "id": "ex-2",
                    "name": "Curls",
                    "currentWeight": 12.0,
                    "previousWeight": None,
                    "bestWeight": 12.0,
                    "notes": "",
                    "targetSets": 3,
                    "completedSets": 0,
                },
            ],
        },
        {"id": "plan-b", "name": "Legs", "exercises": []},
    ]


@pytest.fixture()
def cli_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    data_dir = tmp_path / "data"
    monkeypatch.setenv("GYM_DATA_DIR", str(data_dir))
    monkeypatch.setenv("GYM_CONFIG_FILE", str(tmp_path / "config.toml"))
    monkeypatch.setenv("GYM_OUTPUT_DIR", str(tmp_path / "export"))
    return data_dir


@pytest.fixture()
def write_temp_json(tmp_path: Path):
    def _write(name: str, payload: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload, indent=2) + "\n")
        return path

    return _write


@pytest.fixture()
def write_temp_text(tmp_path: Path):
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content.strip() + "\n")
        return path

    return _write
