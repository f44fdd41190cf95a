"""Formatting helpers used by exports and console output."""

from __future__ import annotations

from typing import Optional

from gym_cli.core.models import Exercise, PlanStats


def format_weight(weight: Optional[float]) -> str:
    """Format a weight in kilograms with one decimal."""
    if weight is None:
        return "N/A"
    return f"{float(weight):.1f} kg"


def format_delta(exercise: Exercise) -> Optional[str]:
    """Describe an increase over the previous weight, e.g. ``+2.5 kg / +11.1%``."""
    if exercise.previous_weight is None:
        return None

    delta_kg = exercise.current_weight - exercise.previous_weight
    if delta_kg <= 0:
        return None

    if exercise.previous_weight > 0:
        delta_pct = delta_kg / exercise.previous_weight * 100
    else:
        delta_pct = 100.0
    return f"+{delta_kg:.1f} kg / +{delta_pct:.1f}%"


def format_sets(exercise: Exercise) -> str:
    """Render set progress as filled/empty markers, e.g. ``●●○ 2/3``."""
    done = "●" * exercise.completed_sets
    todo = "○" * (exercise.target_sets - exercise.completed_sets)
    return f"{done}{todo} {exercise.completed_sets}/{exercise.target_sets}"


def format_stats(stats: PlanStats) -> str:
    return (
        f"{stats.exercise_count} exercises, avg {stats.avg_weight:.1f} kg, "
        f"{stats.progressed_count} progressed, {stats.done_count} done"
    )


def format_date(date_iso: str) -> str:
    """Render an ISO timestamp as ``YYYY-MM-DD HH:MM``."""
    if len(date_iso) < 16:
        return date_iso or "N/A"
    return f"{date_iso[:10]} {date_iso[11:16]}"
