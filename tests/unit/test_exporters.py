from __future__ import annotations

import csv
import json
from pathlib import Path

from gym_cli.core.models import HistoryExercise, TrainingHistoryEntry
from gym_cli.exporters.csv_export import CSV_FIELDS, write_history_csv
from gym_cli.exporters.json_export import history_payload, write_json
from gym_cli.exporters.markdown import entry_filename, entry_to_markdown, generate_index, write_entry_markdown


def _entry(plan_name: str = 'Push "Heavy" Day', entry_id: str = "1771093805250-ab12cd34", day: str = "14") -> TrainingHistoryEntry:
    return TrainingHistoryEntry(
        id=entry_id,
        date_iso=f"2026-02-{day}T18:30:05.250Z",
        plan_id="plan-1",
        plan_name=plan_name,
        exercises=(
            HistoryExercise(name="Bench", weight=62.5, completed_sets=3, target_sets=3, is_pr=True),
            HistoryExercise(name="Dips", weight=0.0, completed_sets=1, target_sets=4),
        ),
    )


def test_entry_to_markdown_contains_frontmatter_and_table() -> None:
    output = entry_to_markdown(_entry())
    assert output.startswith("---\n")
    assert 'plan: "Push \\"Heavy\\" Day"' in output
    assert 'date: "2026-02-14T18:30:05.250Z"' in output
    assert "prs: 1" in output
    assert "- **Date:** 2026-02-14 18:30" in output
    assert "| Bench | 62.5 kg | 3/3 | PR |" in output
    assert "| Dips | 0.0 kg | 1/4 |  |" in output


def test_write_entry_markdown_creates_expected_file(tmp_path: Path) -> None:
    path = write_entry_markdown(tmp_path, _entry())
    assert path.exists()
    assert path.parent == tmp_path / "push-heavy-day"
    assert path.name == entry_filename(_entry())
    assert path.name.startswith("2026-02-14-push-heavy-day-")


def test_write_entry_markdown_skips_overwrite_when_rewrite_false(tmp_path: Path) -> None:
    entry = _entry("Legs")
    path = write_entry_markdown(tmp_path, entry)
    path.write_text("ORIGINAL")
    assert write_entry_markdown(tmp_path, entry) == path
    assert path.read_text() == "ORIGINAL"

    write_entry_markdown(tmp_path, entry, rewrite=True)
    assert path.read_text().startswith("---\n")


def test_generate_index_lists_newest_first(tmp_path: Path) -> None:
    older = _entry("Legs", entry_id="a", day="10")
    newer = _entry("Pull", entry_id="b", day="12")
    index = generate_index(tmp_path, [older, newer])

    text = index.read_text()
    assert index == tmp_path / "INDEX.md"
    assert text.startswith("# Workout History")
    assert "_2 workouts_" in text
    assert text.index("[Pull](pull/") < text.index("[Legs](legs/")


def test_write_history_csv_one_row_per_exercise(tmp_path: Path) -> None:
    path = tmp_path / "out" / "history.csv"
    rows = write_history_csv(path, [_entry(), _entry("Legs", entry_id="x")])
    assert rows == 4

    with path.open(newline="") as handle:
        records = list(csv.DictReader(handle))
    assert list(records[0].keys()) == CSV_FIELDS
    assert records[0]["exercise"] == "Bench"
    assert records[0]["weight"] == "62.5"
    assert records[0]["isPr"] == "true"
    assert records[1]["position"] == "2"
    assert records[1]["isPr"] == "false"
    assert records[3]["entryId"] == "x"


def test_history_payload_and_write_json(tmp_path: Path) -> None:
    payload = history_payload([_entry()])
    assert payload["count"] == 1
    assert payload["history"][0]["planName"] == 'Push "Heavy" Day'
    assert payload["history"][0]["exercises"][0]["isPr"] is True

    path = write_json(tmp_path / "nested" / "history.json", payload)
    assert json.loads(path.read_text())["history"][0]["id"] == "1771093805250-ab12cd34"
