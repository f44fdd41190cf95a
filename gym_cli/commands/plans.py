"""Training plan commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.table import Table

from gym_cli.commands.common import (
    emit,
    exercise_table,
    fail,
    get_state,
    plan_payload,
    print_json_payload,
    resolve_plan,
)
from gym_cli.core.config import config_number
from gym_cli.core.constants import DEFAULT_START_WEIGHT
from gym_cli.utils.formatting import format_stats
from gym_cli.utils.parsing import PlanInputError, load_plan_input

app = typer.Typer(help="Create, select and manage training plans")

PLAN_OPTION_HELP = "Plan id, position or name (default: active plan)"


@app.command("create")
def create_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Plan name"),
) -> None:
    """Create a plan and make it the active plan."""
    state = get_state(ctx)
    plan = state.store.create_plan(name)
    if plan is None:
        fail(state, "Plan name must not be empty")

    emit(
        state,
        {"status": "created", "plan": plan_payload(state, plan)},
        f"Created plan {plan.name} ({plan.id})",
        [("status", "created"), ("id", plan.id), ("name", plan.name)],
    )


@app.command("rename")
def rename_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="New plan name"),
    plan_ref: Optional[str] = typer.Option(None, "--plan", "-p", help=PLAN_OPTION_HELP),
) -> None:
    """Rename a plan."""
    state = get_state(ctx)
    plan = resolve_plan(state, plan_ref)
    if not name.strip():
        fail(state, "Plan name must not be empty")

    changed = state.store.rename_plan(plan.id, name)
    new_name = name.strip()
    emit(
        state,
        {"status": "renamed" if changed else "unchanged", "id": plan.id, "name": new_name},
        f"Renamed plan to {new_name}" if changed else "Plan name unchanged",
        [("status", "renamed" if changed else "unchanged"), ("id", plan.id), ("name", new_name)],
    )


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    plan_ref: Optional[str] = typer.Option(None, "--plan", "-p", help=PLAN_OPTION_HELP),
) -> None:
    """Delete a plan (the active plan unless --plan is given)."""
    state = get_state(ctx)
    plan = resolve_plan(state, plan_ref)
    state.store.delete_plan(plan.id)

    active = state.store.active_plan
    emit(
        state,
        {
            "status": "deleted",
            "id": plan.id,
            "name": plan.name,
            "activePlanId": state.store.active_plan_id,
        },
        f"Deleted plan {plan.name}"
        + (f"; active plan is now {active.name}" if active else "; no plans left"),
        [("status", "deleted"), ("id", plan.id), ("active_plan_id", state.store.active_plan_id)],
    )


@app.command("select")
def select_command(
    ctx: typer.Context,
    plan_ref: str = typer.Argument(..., help="Plan id, position or name"),
) -> None:
    """Make a plan the active plan."""
    state = get_state(ctx)
    plan = resolve_plan(state, plan_ref)
    state.store.select_plan(plan.id)
    emit(
        state,
        {"status": "selected", "id": plan.id, "name": plan.name},
        f"Active plan: {plan.name}",
        [("status", "selected"), ("id", plan.id), ("name", plan.name)],
    )


@app.command("list")
def list_command(ctx: typer.Context) -> None:
    """List all plans."""
    state = get_state(ctx)
    store = state.store
    plans = [plan_payload(state, plan) for plan in store.plans]

    if state.json_output:
        print_json_payload(state, {"activePlanId": store.active_plan_id, "plans": plans})
        return

    if state.plain_output:
        for position, plan in enumerate(store.plans, 1):
            marker = "*" if plan.id == store.active_plan_id else ""
            typer.echo(f"{position}\t{plan.id}\t{plan.name}\t{len(plan.exercises)}\t{marker}")
        return

    if not store.plans:
        state.console.print("No plans yet. Create one with `gym plan create NAME`.")
        return

    table = Table(title=f"Plans ({len(store.plans)} total)")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Exercises", justify="right")
    table.add_column("Active")
    table.add_column("ID")
    for position, plan in enumerate(store.plans, 1):
        table.add_row(
            str(position),
            plan.name,
            str(len(plan.exercises)),
            "yes" if plan.id == store.active_plan_id else "",
            plan.id,
        )
    state.console.print(table)


@app.command("show")
def show_command(
    ctx: typer.Context,
    plan_ref: Optional[str] = typer.Argument(None, help=PLAN_OPTION_HELP),
) -> None:
    """Show a plan's exercises with progress and set completion."""
    state = get_state(ctx)
    plan = resolve_plan(state, plan_ref)
    payload = plan_payload(state, plan)

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo(f"plan\t{plan.id}\t{plan.name}")
        for position, exercise in enumerate(plan.exercises, 1):
            typer.echo(
                f"{position}\t{exercise.id}\t{exercise.name}\t{exercise.current_weight:.1f}\t"
                f"{exercise.completed_sets}/{exercise.target_sets}"
            )
        return

    if not plan.exercises:
        state.console.print(f"{plan.name}: no exercises yet. Add one with `gym exercise add NAME`.")
        return
    state.console.print(exercise_table(plan))
    state.console.print(format_stats(state.store.compute_plan_stats(plan.id)))


@app.command("stats")
def stats_command(
    ctx: typer.Context,
    plan_ref: Optional[str] = typer.Argument(None, help=PLAN_OPTION_HELP),
) -> None:
    """Show aggregate statistics for a plan."""
    state = get_state(ctx)
    plan = resolve_plan(state, plan_ref)
    stats = state.store.compute_plan_stats(plan.id)
    emit(
        state,
        {"id": plan.id, "name": plan.name, "stats": stats.to_dict()},
        f"{plan.name}: {format_stats(stats)}",
        [
            ("exercise_count", stats.exercise_count),
            ("avg_weight", stats.avg_weight),
            ("progressed_count", stats.progressed_count),
            ("done_count", stats.done_count),
        ],
    )


@app.command("import")
def import_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="YAML/JSON file with plan definition(s)"),
) -> None:
    """Import plans with their exercises from a YAML or JSON file."""
    state = get_state(ctx)
    store = state.store
    try:
        definitions = load_plan_input(file)
    except PlanInputError as exc:
        fail(state, str(exc))

    default_weight = config_number(state.config, "defaults", "start_weight", DEFAULT_START_WEIGHT)
    results: List[Dict[str, Any]] = []
    skipped = 0

    # Plans are inserted at the head, so create them last-to-first to keep file order.
    for definition in reversed(definitions):
        plan = store.create_plan(definition["name"])
        if plan is None:
            skipped += 1
            continue

        added = 0
        for item in definition["exercises"]:
            exercise = store.add_exercise(
                plan.id,
                item["name"],
                item.get("weight", default_weight),
                target_sets=item.get("sets"),
                notes=item.get("notes"),
            )
            if exercise is None:
                skipped += 1
                continue
            added += 1
        results.insert(0, {"id": plan.id, "name": plan.name, "exercises": added})

    payload = {"status": "imported", "plans": results, "skipped": skipped}
    emit(
        state,
        payload,
        f"Imported {len(results)} plans"
        + (f" ({skipped} invalid entries skipped)" if skipped else ""),
        [("status", "imported"), ("plans", len(results)), ("skipped", skipped)],
    )
