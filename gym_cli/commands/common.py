"""Shared command helpers."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, NoReturn, Optional, Sequence, Tuple

import typer
from rich.table import Table

from gym_cli.core.models import Exercise, TrainingHistoryEntry, TrainingPlan
from gym_cli.core.state import CLIState
from gym_cli.utils.formatting import format_date, format_delta, format_sets, format_weight
from gym_cli.utils.text import name_key


def get_state(ctx: typer.Context) -> CLIState:
    """Extract validated CLI state from Typer context."""
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=2)
    return state


def print_json_payload(state: CLIState, payload: Any) -> None:
    """Print JSON payload with plain-mode fallback for piping."""
    if state.plain_output:
        typer.echo(json.dumps(payload, separators=(",", ":")))
        return
    state.console.print_json(data=payload)


def emit(
    state: CLIState,
    payload: Dict[str, Any],
    message: str,
    plain_rows: Optional[Sequence[Tuple[str, Any]]] = None,
) -> None:
    """Report a command result in JSON, tab-separated plain text, or rich text."""
    if state.json_output:
        print_json_payload(state, payload)
        return
    if state.plain_output:
        for key, value in plain_rows or [("status", payload.get("status", "ok"))]:
            typer.echo(f"{key}\t{_plain_value(value)}")
        return
    state.console.print(message, markup=False)


def fail(state: CLIState, message: str, code: int = 1) -> NoReturn:
    """Report an error in the active output mode and exit."""
    if state.json_output:
        print_json_payload(state, {"status": "error", "message": message})
    elif state.plain_output:
        typer.echo("status\terror")
        typer.echo(f"message\t{message}")
    else:
        state.console.print(f"Error: {message}", markup=False)
    raise typer.Exit(code=code)


def _plain_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float):
        return f"{value:.1f}"
    return str(value)


def _match(items: Sequence[Any], ref: str, kind: str) -> Tuple[Optional[Any], Optional[str]]:
    """Find an item by id, 1-based position, or case-insensitive name."""
    for item in items:
        if item.id == ref:
            return item, None

    if ref.isdigit():
        position = int(ref)
        if 1 <= position <= len(items):
            return items[position - 1], None

    matches = [item for item in items if name_key(item.name) == name_key(ref)]
    if len(matches) == 1:
        return matches[0], None
    if len(matches) > 1:
        return None, f"{kind} name '{ref}' is ambiguous; use its id or position"
    return None, f"{kind} '{ref}' not found"


def resolve_plan(state: CLIState, ref: Optional[str]) -> TrainingPlan:
    """Resolve a plan reference, defaulting to the active plan."""
    store = state.store
    if ref is None:
        plan = store.active_plan
        if plan is None:
            fail(state, "No active plan. Create one with `gym plan create NAME`.")
        return plan

    plan, error = _match(store.plans, ref, "Plan")
    if plan is None:
        fail(state, error or f"Plan '{ref}' not found")
    return plan


def resolve_exercise(state: CLIState, plan: TrainingPlan, ref: str) -> Exercise:
    exercise, error = _match(plan.exercises, ref, "Exercise")
    if exercise is None:
        fail(state, f"{error or 'Exercise not found'} in plan '{plan.name}'")
    return exercise


def exercise_payload(exercise: Exercise) -> Dict[str, Any]:
    payload = exercise.to_dict()
    payload["done"] = exercise.is_done
    payload["delta"] = format_delta(exercise)
    return payload


def plan_payload(state: CLIState, plan: TrainingPlan) -> Dict[str, Any]:
    return {
        "id": plan.id,
        "name": plan.name,
        "active": plan.id == state.store.active_plan_id,
        "stats": state.store.compute_plan_stats(plan.id).to_dict(),
        "exercises": [exercise_payload(exercise) for exercise in plan.exercises],
    }


def exercise_rows(exercise: Exercise, position: int) -> List[Tuple[str, Any]]:
    return [
        ("position", position),
        ("id", exercise.id),
        ("name", exercise.name),
        ("current_weight", exercise.current_weight),
        ("previous_weight", exercise.previous_weight),
        ("best_weight", exercise.best_weight),
        ("completed_sets", exercise.completed_sets),
        ("target_sets", exercise.target_sets),
        ("done", exercise.is_done),
        ("notes", exercise.notes),
    ]


def exercise_table(plan: TrainingPlan) -> Table:
    table = Table(title=plan.name)
    table.add_column("#", justify="right")
    table.add_column("Exercise")
    table.add_column("Weight", justify="right")
    table.add_column("Progress")
    table.add_column("Best", justify="right")
    table.add_column("Sets")
    table.add_column("Notes")

    for position, exercise in enumerate(plan.exercises, 1):
        table.add_row(
            str(position),
            exercise.name,
            format_weight(exercise.current_weight),
            format_delta(exercise) or "",
            format_weight(exercise.best_weight),
            format_sets(exercise),
            exercise.notes,
        )
    return table


def history_table(entries: Iterable[TrainingHistoryEntry]) -> Table:
    table = Table(title="Workout history")
    table.add_column("Date")
    table.add_column("Plan")
    table.add_column("Exercises")
    table.add_column("PRs", justify="right")

    for entry in entries:
        summary = ", ".join(
            f"{exercise.name} {exercise.weight:.1f} ({exercise.completed_sets}/{exercise.target_sets})"
            + (" PR" if exercise.is_pr else "")
            for exercise in entry.exercises
        )
        table.add_row(format_date(entry.date_iso), entry.plan_name, summary, str(entry.pr_count))
    return table
