"""Data models for plans, exercises and workout history."""

from __future__ import annotations

import math
import secrets
import time
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Dict, Optional, Tuple

from gym_cli.core.constants import (
    DEFAULT_TARGET_SETS,
    MAX_TARGET_SETS,
    MAX_WEIGHT,
    MIN_TARGET_SETS,
)


def new_id() -> str:
    """Generate an opaque identifier (millisecond timestamp plus random suffix)."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_int(value: int, low: int, high: int) -> int:
    return int(max(low, min(high, value)))


def round_weight(value: float) -> float:
    """Round half-up to one decimal place."""
    number = Decimal(str(value))
    if not number.is_finite():
        return float(value)
    with localcontext() as ctx:
        # quantize needs every integer digit plus the decimal one
        ctx.prec = max(ctx.prec, number.adjusted() + 3)
        return float(number.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def parse_weight(value: Any) -> Optional[float]:
    """Return a finite, non-negative weight or None when the input is unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(Decimal(str(value).strip()))
    except (InvalidOperation, ValueError):
        return None
    if math.isnan(number) or math.isinf(number) or number < 0:
        return None
    return number


def _coerce_float(value: Any, default: float) -> float:
    parsed = parse_weight(value)
    return default if parsed is None else parsed


def parse_count(value: Any) -> Optional[int]:
    """Return a whole number of sets or None when the input is unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return int(number)


def _coerce_int(value: Any, default: int) -> int:
    parsed = parse_count(value)
    return default if parsed is None else parsed


@dataclass(frozen=True)
class Exercise:
    """One trainable movement within a plan."""

    id: str
    name: str
    current_weight: float
    previous_weight: Optional[float] = None
    best_weight: float = 0.0
    notes: str = ""
    target_sets: int = DEFAULT_TARGET_SETS
    completed_sets: int = 0

    @property
    def is_done(self) -> bool:
        return self.completed_sets >= self.target_sets

    @property
    def progressed(self) -> bool:
        return self.previous_weight is not None and self.current_weight > self.previous_weight

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "currentWeight": self.current_weight,
            "previousWeight": self.previous_weight,
            "bestWeight": self.best_weight,
            "notes": self.notes,
            "targetSets": self.target_sets,
            "completedSets": self.completed_sets,
        }


@dataclass(frozen=True)
class TrainingPlan:
    """Named, ordered collection of exercises."""

    id: str
    name: str
    exercises: Tuple[Exercise, ...] = ()

    def find_exercise(self, exercise_id: str) -> Optional[Exercise]:
        for exercise in self.exercises:
            if exercise.id == exercise_id:
                return exercise
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "exercises": [exercise.to_dict() for exercise in self.exercises],
        }


@dataclass(frozen=True)
class HistoryExercise:
    """Frozen copy of an exercise taken when a workout is finished."""

    name: str
    weight: float
    completed_sets: int
    target_sets: int
    is_pr: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "weight": self.weight,
            "completedSets": self.completed_sets,
            "targetSets": self.target_sets,
            "isPr": self.is_pr,
        }


@dataclass(frozen=True)
class TrainingHistoryEntry:
    """Immutable snapshot of a finished workout."""

    id: str
    date_iso: str
    plan_id: str
    plan_name: str
    exercises: Tuple[HistoryExercise, ...] = field(default_factory=tuple)

    @property
    def pr_count(self) -> int:
        return sum(1 for exercise in self.exercises if exercise.is_pr)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "dateIso": self.date_iso,
            "planId": self.plan_id,
            "planName": self.plan_name,
            "exercises": [exercise.to_dict() for exercise in self.exercises],
        }


@dataclass(frozen=True)
class PlanStats:
    """Aggregate statistics derived from a plan's current state."""

    exercise_count: int = 0
    avg_weight: float = 0.0
    progressed_count: int = 0
    done_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exerciseCount": self.exercise_count,
            "avgWeight": self.avg_weight,
            "progressedCount": self.progressed_count,
            "doneCount": self.done_count,
        }


def normalize_exercise(raw: Any, max_weight: float = MAX_WEIGHT) -> Optional[Exercise]:
    """Rebuild an exercise from stored data, defaulting and clamping every field.

    Stored records may predate newer fields, so nothing about their shape is
    assumed. Records written before per-set tracking only carry a boolean
    ``completed`` flag; a true flag loads as all sets completed.
    """
    if not isinstance(raw, dict):
        return None

    current = round_weight(clamp(_coerce_float(raw.get("currentWeight"), 0.0), 0.0, max_weight))
    previous_raw = parse_weight(raw.get("previousWeight"))
    previous = round_weight(clamp(previous_raw, 0.0, max_weight)) if previous_raw is not None else None
    best_raw = _coerce_float(raw.get("bestWeight"), current)
    best = max(current, round_weight(clamp(best_raw, 0.0, max_weight)))

    target_sets = clamp_int(
        _coerce_int(raw.get("targetSets"), DEFAULT_TARGET_SETS),
        MIN_TARGET_SETS,
        MAX_TARGET_SETS,
    )
    if raw.get("completedSets") is None and raw.get("completed") is True:
        completed_default = target_sets
    else:
        completed_default = 0
    completed_sets = clamp_int(
        _coerce_int(raw.get("completedSets"), completed_default),
        0,
        target_sets,
    )

    return Exercise(
        id=str(raw.get("id") or new_id()),
        name=str(raw.get("name") or ""),
        current_weight=current,
        previous_weight=previous,
        best_weight=best,
        notes=str(raw.get("notes") or ""),
        target_sets=target_sets,
        completed_sets=completed_sets,
    )


def normalize_plan(raw: Any, max_weight: float = MAX_WEIGHT) -> Optional[TrainingPlan]:
    if not isinstance(raw, dict):
        return None

    exercises_raw = raw.get("exercises")
    exercises = []
    if isinstance(exercises_raw, list):
        for item in exercises_raw:
            exercise = normalize_exercise(item, max_weight=max_weight)
            if exercise is not None:
                exercises.append(exercise)

    return TrainingPlan(
        id=str(raw.get("id") or new_id()),
        name=str(raw.get("name") or ""),
        exercises=tuple(exercises),
    )


def _normalize_history_exercise(raw: Any, max_weight: float = MAX_WEIGHT) -> Optional[HistoryExercise]:
    if not isinstance(raw, dict):
        return None
    target_sets = clamp_int(
        _coerce_int(raw.get("targetSets"), DEFAULT_TARGET_SETS),
        MIN_TARGET_SETS,
        MAX_TARGET_SETS,
    )
    return HistoryExercise(
        name=str(raw.get("name") or ""),
        weight=round_weight(clamp(_coerce_float(raw.get("weight"), 0.0), 0.0, max_weight)),
        completed_sets=clamp_int(_coerce_int(raw.get("completedSets"), 0), 0, target_sets),
        target_sets=target_sets,
        is_pr=bool(raw.get("isPr", False)),
    )


def normalize_history_entry(raw: Any, max_weight: float = MAX_WEIGHT) -> Optional[TrainingHistoryEntry]:
    if not isinstance(raw, dict):
        return None

    exercises_raw = raw.get("exercises")
    exercises = []
    if isinstance(exercises_raw, list):
        for item in exercises_raw:
            exercise = _normalize_history_exercise(item, max_weight=max_weight)
            if exercise is not None:
                exercises.append(exercise)

    return TrainingHistoryEntry(
        id=str(raw.get("id") or new_id()),
        date_iso=str(raw.get("dateIso") or ""),
        plan_id=str(raw.get("planId") or ""),
        plan_name=str(raw.get("planName") or ""),
        exercises=tuple(exercises),
    )
