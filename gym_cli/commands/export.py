"""Export workout history to external formats."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from gym_cli.commands.common import emit, fail, get_state, resolve_plan
from gym_cli.core.config import resolve_output_dir
from gym_cli.core.constants import EXPORT_FORMATS
from gym_cli.exporters.csv_export import write_history_csv
from gym_cli.exporters.json_export import history_payload, write_json
from gym_cli.exporters.markdown import generate_index, write_entry_markdown
from gym_cli.utils.date_ranges import parse_date, validate_date


def export_command(
    ctx: typer.Context,
    output_format: str = typer.Option("json", "--format", help="Export format: json|markdown|csv"),
    output_dir: Optional[Path] = typer.Option(None, help="Output directory"),
    since: Optional[str] = typer.Option(None, help="Only workouts on/after YYYY-MM-DD", callback=validate_date),
    plan_ref: Optional[str] = typer.Option(None, "--plan", "-p", help="Only workouts of this plan"),
    rewrite: bool = typer.Option(False, help="Rewrite existing markdown files"),
) -> None:
    """Export workout history as JSON, markdown files or CSV."""
    state = get_state(ctx)
    fmt = output_format.lower()
    if fmt not in EXPORT_FORMATS:
        raise typer.BadParameter(f"format must be one of {'|'.join(EXPORT_FORMATS)}")

    entries = state.store.recent_history(since=parse_date(since) if since else None)
    if plan_ref:
        plan_id = resolve_plan(state, plan_ref).id
        entries = [entry for entry in entries if entry.plan_id == plan_id]
    if not entries:
        fail(state, "No workouts to export")

    out_dir = resolve_output_dir(state.config, explicit=output_dir)
    if fmt == "json":
        target = write_json(out_dir / "history.json", history_payload(entries))
    elif fmt == "csv":
        target = out_dir / "history.csv"
        write_history_csv(target, entries)
    else:
        for entry in entries:
            write_entry_markdown(out_dir, entry, rewrite=rewrite)
        target = generate_index(out_dir, entries)

    emit(
        state,
        {"status": "exported", "format": fmt, "count": len(entries), "path": str(target)},
        f"Exported {len(entries)} workouts as {fmt}\nExported to: {target}",
        [("status", "exported"), ("format", fmt), ("count", len(entries)), ("path", target)],
    )
