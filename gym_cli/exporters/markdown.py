"""Markdown export of workout history."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from gym_cli.core.models import TrainingHistoryEntry
from gym_cli.utils.formatting import format_date, format_weight
from gym_cli.utils.text import slugify


def entry_filename(entry: TrainingHistoryEntry) -> str:
    date = entry.date_iso[:10] or "unknown"
    return f"{date}-{slugify(entry.plan_name)}-{slugify(entry.id, max_len=20)}.md"


def entry_to_markdown(entry: TrainingHistoryEntry) -> str:
    """Convert a history entry to markdown with frontmatter."""
    title_yaml = entry.plan_name.replace('"', '\\"')
    completed = sum(1 for exercise in entry.exercises if exercise.completed_sets >= exercise.target_sets)

    rows = [
        "| Exercise | Weight | Sets | PR |",
        "|----------|--------|------|----|",
    ]
    for exercise in entry.exercises:
        rows.append(
            f"| {exercise.name} | {format_weight(exercise.weight)} | "
            f"{exercise.completed_sets}/{exercise.target_sets} | {'PR' if exercise.is_pr else ''} |"
        )
    table = "\n".join(rows)

    return (
        f"---\n"
        f"plan: \"{title_yaml}\"\n"
        f"date: \"{entry.date_iso}\"\n"
        f"exercises: {len(entry.exercises)}\n"
        f"completed: {completed}\n"
        f"prs: {entry.pr_count}\n"
        f"entryId: {entry.id}\n"
        f"---\n\n"
        f"# {entry.plan_name}\n\n"
        f"- **Date:** {format_date(entry.date_iso)}\n"
        f"- **Exercises:** {len(entry.exercises)} ({completed} completed)\n"
        f"- **Personal records:** {entry.pr_count}\n\n"
        f"{table}\n"
    )


def write_entry_markdown(output_dir: Path, entry: TrainingHistoryEntry, rewrite: bool = False) -> Path:
    """Write one history entry markdown file and return output path."""
    out_dir = output_dir / slugify(entry.plan_name)
    out_path = out_dir / entry_filename(entry)

    if out_path.exists() and not rewrite:
        return out_path

    out_dir.mkdir(parents=True, exist_ok=True)
    out_path.write_text(entry_to_markdown(entry))
    return out_path


def generate_index(output_dir: Path, entries: Iterable[TrainingHistoryEntry]) -> Path:
    """Generate a top-level index linking every exported entry, newest first."""
    data = sorted(entries, key=lambda entry: entry.date_iso, reverse=True)
    lines: List[str] = [
        "# Workout History",
        "",
        f"_{len(data)} workouts_",
        "",
        "| Date | Plan | Exercises | PRs |",
        "|------|------|-----------|-----|",
    ]
    for entry in data:
        rel_path = f"{slugify(entry.plan_name)}/{entry_filename(entry)}"
        lines.append(
            f"| {format_date(entry.date_iso)} | [{entry.plan_name}]({rel_path}) | "
            f"{len(entry.exercises)} | {entry.pr_count} |"
        )
    lines.append("")

    path = output_dir / "INDEX.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines))
    return path
