"""CSV export of workout history."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from gym_cli.core.models import TrainingHistoryEntry

CSV_FIELDS = [
    "entryId",
    "date",
    "planId",
    "planName",
    "position",
    "exercise",
    "weight",
    "completedSets",
    "targetSets",
    "isPr",
]


def write_history_csv(path: Path, entries: Iterable[TrainingHistoryEntry]) -> int:
    """Write one row per exercise snapshot and return the row count."""
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = 0
    with path.open("w", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for entry in entries:
            for position, exercise in enumerate(entry.exercises, 1):
                writer.writerow(
                    {
                        "entryId": entry.id,
                        "date": entry.date_iso,
                        "planId": entry.plan_id,
                        "planName": entry.plan_name,
                        "position": position,
                        "exercise": exercise.name,
                        "weight": f"{exercise.weight:.1f}",
                        "completedSets": exercise.completed_sets,
                        "targetSets": exercise.target_sets,
                        "isPr": "true" if exercise.is_pr else "false",
                    }
                )
                rows += 1
    return rows
