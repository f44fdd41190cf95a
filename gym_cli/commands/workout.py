"""Workout session commands: finish, history and rest timer."""

from __future__ import annotations

from typing import Optional

import typer

from gym_cli.commands.common import (
    emit,
    fail,
    get_state,
    history_table,
    print_json_payload,
    resolve_plan,
)
from gym_cli.core.config import config_number
from gym_cli.core.constants import DEFAULT_REST_INCREMENT, DEFAULT_REST_SECONDS
from gym_cli.core.timer import RestTimer, format_timer
from gym_cli.utils.date_ranges import parse_date, validate_date
from gym_cli.utils.formatting import format_date


def finish_command(
    ctx: typer.Context,
    plan_ref: Optional[str] = typer.Option(None, "--plan", "-p", help="Plan id, position or name (default: active plan)"),
) -> None:
    """Finish the workout: record history and reset completed sets."""
    state = get_state(ctx)
    plan = resolve_plan(state, plan_ref)
    entry = state.store.finish_workout(plan.id)
    if entry is None:
        fail(state, f"Plan '{plan.name}' has no exercises to record")

    completed = sum(1 for exercise in entry.exercises if exercise.completed_sets >= exercise.target_sets)
    message = (
        f"Workout saved: {entry.plan_name} on {format_date(entry.date_iso)}, "
        f"{completed}/{len(entry.exercises)} exercises completed"
    )
    prs = [exercise.name for exercise in entry.exercises if exercise.is_pr]
    if prs:
        message += f", new PRs: {', '.join(prs)}"

    emit(
        state,
        {"status": "finished", "entry": entry.to_dict()},
        message,
        [
            ("status", "finished"),
            ("id", entry.id),
            ("date", entry.date_iso),
            ("plan", entry.plan_name),
            ("exercises", len(entry.exercises)),
            ("prs", entry.pr_count),
        ],
    )


def history_command(
    ctx: typer.Context,
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Show only the N most recent workouts"),
    since: Optional[str] = typer.Option(None, help="Only workouts on/after YYYY-MM-DD", callback=validate_date),
    plan_ref: Optional[str] = typer.Option(None, "--plan", "-p", help="Only workouts of this plan"),
) -> None:
    """Show finished workouts, newest first."""
    state = get_state(ctx)
    plan_id = resolve_plan(state, plan_ref).id if plan_ref else None

    entries = state.store.recent_history(since=parse_date(since) if since else None)
    if plan_id:
        entries = [entry for entry in entries if entry.plan_id == plan_id]
    if limit is not None:
        entries = entries[: max(limit, 0)]

    if state.json_output:
        print_json_payload(state, {"count": len(entries), "history": [entry.to_dict() for entry in entries]})
        return

    if state.plain_output:
        for entry in entries:
            for exercise in entry.exercises:
                typer.echo(
                    f"{entry.date_iso}\t{entry.plan_name}\t{exercise.name}\t{exercise.weight:.1f}\t"
                    f"{exercise.completed_sets}/{exercise.target_sets}\t{'PR' if exercise.is_pr else ''}"
                )
        return

    if not entries:
        state.console.print("No workouts recorded yet")
        return
    state.console.print(history_table(entries))


def timer_command(
    ctx: typer.Context,
    seconds: Optional[int] = typer.Option(None, "--seconds", "-s", help="Rest duration (default: configured rest)"),
    extend: int = typer.Option(0, "--extend", "-e", count=True, help="Add the configured increment (repeatable)"),
) -> None:
    """Run a rest countdown between sets."""
    state = get_state(ctx)
    default_rest = int(config_number(state.config, "timer", "rest_seconds", DEFAULT_REST_SECONDS))
    increment = int(config_number(state.config, "timer", "increment_seconds", DEFAULT_REST_INCREMENT))

    timer = RestTimer(default_seconds=default_rest)
    timer.reset(seconds)
    for _ in range(extend):
        timer.add(increment)
    total = timer.seconds

    if total <= 0:
        fail(state, "Rest duration must be positive")

    if state.json_output or state.plain_output or state.quiet:
        timer.run()
    else:
        state.console.print(f"Rest {format_timer(total)} (Ctrl+C to stop)")
        with state.console.status(f"Rest {format_timer(total)}") as status:
            timer.run(on_tick=lambda left: status.update(f"Rest {format_timer(left)}"))

    emit(
        state,
        {"status": "finished", "seconds": total},
        f"Rest over after {format_timer(total)}",
        [("status", "finished"), ("seconds", total)],
    )
