"""Exercise commands: weights, sets, metadata and ordering."""

from __future__ import annotations

from typing import Optional

import typer

from gym_cli.commands.common import (
    emit,
    exercise_payload,
    exercise_rows,
    fail,
    get_state,
    resolve_exercise,
    resolve_plan,
)
from gym_cli.core.config import config_number
from gym_cli.core.constants import DEFAULT_START_WEIGHT, DEFAULT_WEIGHT_STEP
from gym_cli.core.state import CLIState
from gym_cli.utils.formatting import format_delta, format_sets, format_weight
from gym_cli.utils.parsing import parse_weight_option

app = typer.Typer(help="Add, edit and track exercises within a plan")

PLAN_OPTION_HELP = "Plan id, position or name (default: active plan)"
EXERCISE_ARG_HELP = "Exercise id, position or name"


def _report(state: CLIState, plan_id: str, exercise_id: str, changed: bool, verb: str) -> None:
    plan = state.store.get_plan(plan_id)
    exercise = plan.find_exercise(exercise_id) if plan else None
    if plan is None or exercise is None:
        fail(state, "Exercise disappeared while updating")

    status = verb if changed else "unchanged"
    position = plan.exercises.index(exercise) + 1
    summary = f"{exercise.name}: {format_weight(exercise.current_weight)}, sets {format_sets(exercise)}"
    delta = format_delta(exercise)
    if delta:
        summary += f" ({delta})"
    if not changed:
        summary = f"No changes. {summary}"

    emit(
        state,
        {"status": status, "planId": plan.id, "exercise": exercise_payload(exercise)},
        summary,
        [("status", status)] + exercise_rows(exercise, position),
    )


@app.command("add")
def add_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Exercise name"),
    weight: Optional[str] = typer.Option(None, "--weight", "-w", help="Start weight in kg"),
    sets: Optional[int] = typer.Option(None, "--sets", help="Target sets (1-12, default: 3)"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Free-text notes"),
    plan_ref: Optional[str] = typer.Option(None, "--plan", "-p", help=PLAN_OPTION_HELP),
) -> None:
    """Add an exercise to the end of a plan."""
    state = get_state(ctx)
    plan = resolve_plan(state, plan_ref)

    if weight is None:
        start_weight = config_number(state.config, "defaults", "start_weight", DEFAULT_START_WEIGHT)
    else:
        start_weight = parse_weight_option(weight)
        if start_weight is None:
            fail(state, f"Invalid weight '{weight}': expected a non-negative number")
    if not name.strip():
        fail(state, "Exercise name must not be empty")

    exercise = state.store.add_exercise(plan.id, name, start_weight, target_sets=sets, notes=notes)
    if exercise is None:
        fail(state, "Exercise could not be added")
    _report(state, plan.id, exercise.id, True, "added")


@app.command("weight")
def weight_command(
    ctx: typer.Context,
    exercise_ref: str = typer.Argument(..., help=EXERCISE_ARG_HELP),
    weight: str = typer.Argument(..., help="New weight in kg"),
    plan_ref: Optional[str] = typer.Option(None, "--plan", "-p", help=PLAN_OPTION_HELP),
) -> None:
    """Set an exercise's working weight."""
    state = get_state(ctx)
    plan = resolve_plan(state, plan_ref)
    exercise = resolve_exercise(state, plan, exercise_ref)

    value = parse_weight_option(weight)
    if value is None:
        fail(state, f"Invalid weight '{weight}': expected a non-negative number")

    changed = state.store.set_exercise_weight(plan.id, exercise.id, value)
    _report(state, plan.id, exercise.id, changed, "updated")


@app.command("adjust")
def adjust_command(
    ctx: typer.Context,
    exercise_ref: str = typer.Argument(..., help=EXERCISE_ARG_HELP),
    by: Optional[float] = typer.Option(None, "--by", help="Weight change in kg (default: configured step)"),
    down: bool = typer.Option(False, "--down", help="Decrease instead of increase"),
    plan_ref: Optional[str] = typer.Option(None, "--plan", "-p", help=PLAN_OPTION_HELP),
) -> None:
    """Increase (or decrease with --down) an exercise's weight by a step."""
    state = get_state(ctx)
    plan = resolve_plan(state, plan_ref)
    exercise = resolve_exercise(state, plan, exercise_ref)

    step = by if by is not None else config_number(state.config, "defaults", "weight_step", DEFAULT_WEIGHT_STEP)
    delta = -abs(step) if down else step
    changed = state.store.adjust_exercise_weight(plan.id, exercise.id, delta)
    _report(state, plan.id, exercise.id, changed, "updated")


@app.command("sets")
def sets_command(
    ctx: typer.Context,
    exercise_ref: str = typer.Argument(..., help=EXERCISE_ARG_HELP),
    count: int = typer.Argument(..., help="Number of completed sets"),
    plan_ref: Optional[str] = typer.Option(None, "--plan", "-p", help=PLAN_OPTION_HELP),
) -> None:
    """Set the number of completed sets (clamped to the target)."""
    state = get_state(ctx)
    plan = resolve_plan(state, plan_ref)
    exercise = resolve_exercise(state, plan, exercise_ref)
    changed = state.store.set_completed_sets(plan.id, exercise.id, count)
    _report(state, plan.id, exercise.id, changed, "updated")


@app.command("toggle")
def toggle_command(
    ctx: typer.Context,
    exercise_ref: str = typer.Argument(..., help=EXERCISE_ARG_HELP),
    set_number: int = typer.Argument(..., help="Set number to toggle (1-based)"),
    plan_ref: Optional[str] = typer.Option(None, "--plan", "-p", help=PLAN_OPTION_HELP),
) -> None:
    """Toggle one set done/undone."""
    state = get_state(ctx)
    plan = resolve_plan(state, plan_ref)
    exercise = resolve_exercise(state, plan, exercise_ref)
    if set_number < 1 or set_number > exercise.target_sets:
        fail(state, f"Set number must be between 1 and {exercise.target_sets}")
    changed = state.store.toggle_set(plan.id, exercise.id, set_number)
    _report(state, plan.id, exercise.id, changed, "updated")


@app.command("done")
def done_command(
    ctx: typer.Context,
    exercise_ref: str = typer.Argument(..., help=EXERCISE_ARG_HELP),
    plan_ref: Optional[str] = typer.Option(None, "--plan", "-p", help=PLAN_OPTION_HELP),
) -> None:
    """Mark all sets of an exercise as completed."""
    state = get_state(ctx)
    plan = resolve_plan(state, plan_ref)
    exercise = resolve_exercise(state, plan, exercise_ref)
    changed = state.store.set_exercise_completed(plan.id, exercise.id, True)
    _report(state, plan.id, exercise.id, changed, "completed")


@app.command("undo")
def undo_command(
    ctx: typer.Context,
    exercise_ref: str = typer.Argument(..., help=EXERCISE_ARG_HELP),
    plan_ref: Optional[str] = typer.Option(None, "--plan", "-p", help=PLAN_OPTION_HELP),
) -> None:
    """Reset all sets of an exercise to not completed."""
    state = get_state(ctx)
    plan = resolve_plan(state, plan_ref)
    exercise = resolve_exercise(state, plan, exercise_ref)
    changed = state.store.set_exercise_completed(plan.id, exercise.id, False)
    _report(state, plan.id, exercise.id, changed, "reset")


@app.command("edit")
def edit_command(
    ctx: typer.Context,
    exercise_ref: str = typer.Argument(..., help=EXERCISE_ARG_HELP),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Replace notes"),
    sets: Optional[int] = typer.Option(None, "--sets", help="Target sets (1-12)"),
    plan_ref: Optional[str] = typer.Option(None, "--plan", "-p", help=PLAN_OPTION_HELP),
) -> None:
    """Edit an exercise's name, notes or target sets."""
    state = get_state(ctx)
    if name is None and notes is None and sets is None:
        raise typer.BadParameter("Provide at least one of --name, --notes or --sets")

    plan = resolve_plan(state, plan_ref)
    exercise = resolve_exercise(state, plan, exercise_ref)
    changed = state.store.update_exercise_meta(
        plan.id,
        exercise.id,
        name=name,
        notes=notes,
        target_sets=sets,
    )
    _report(state, plan.id, exercise.id, changed, "updated")


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    exercise_ref: str = typer.Argument(..., help=EXERCISE_ARG_HELP),
    plan_ref: Optional[str] = typer.Option(None, "--plan", "-p", help=PLAN_OPTION_HELP),
) -> None:
    """Remove an exercise from a plan."""
    state = get_state(ctx)
    plan = resolve_plan(state, plan_ref)
    exercise = resolve_exercise(state, plan, exercise_ref)
    state.store.delete_exercise(plan.id, exercise.id)
    emit(
        state,
        {"status": "deleted", "planId": plan.id, "id": exercise.id, "name": exercise.name},
        f"Deleted {exercise.name} from {plan.name}",
        [("status", "deleted"), ("id", exercise.id), ("name", exercise.name)],
    )


@app.command("move")
def move_command(
    ctx: typer.Context,
    exercise_ref: str = typer.Argument(..., help=EXERCISE_ARG_HELP),
    to: Optional[str] = typer.Option(None, "--to", help="Move onto this exercise's position"),
    by: Optional[int] = typer.Option(None, "--by", help="Move by N positions (negative moves up)"),
    plan_ref: Optional[str] = typer.Option(None, "--plan", "-p", help=PLAN_OPTION_HELP),
) -> None:
    """Reorder an exercise within its plan."""
    state = get_state(ctx)
    if (to is None) == (by is None):
        raise typer.BadParameter("Provide exactly one of --to or --by")

    plan = resolve_plan(state, plan_ref)
    exercise = resolve_exercise(state, plan, exercise_ref)
    if to is not None:
        anchor = resolve_exercise(state, plan, to)
        changed = state.store.reorder_exercise(plan.id, exercise.id, anchor.id)
    else:
        changed = state.store.reorder_exercise(plan.id, exercise.id, int(by or 0))

    updated = state.store.get_plan(plan.id) or plan
    order = [item.name for item in updated.exercises]
    status = "moved" if changed else "unchanged"
    emit(
        state,
        {"status": status, "planId": plan.id, "order": [item.id for item in updated.exercises]},
        ("Order: " if changed else "No changes. Order: ") + ", ".join(order),
        [("status", status)] + [(str(pos), name) for pos, name in enumerate(order, 1)],
    )
