"""Plan/exercise store: owns plans, workout history and the active plan."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Any, Callable, List, Optional, Sequence, Tuple, TypeVar, Union

from gym_cli.core.constants import (
    ACTIVE_SLOT,
    DEFAULT_TARGET_SETS,
    HISTORY_LIMIT,
    HISTORY_SLOT,
    MAX_TARGET_SETS,
    MAX_WEIGHT,
    MIN_TARGET_SETS,
    PLANS_SLOT,
)
from gym_cli.core.models import (
    Exercise,
    HistoryExercise,
    PlanStats,
    TrainingHistoryEntry,
    TrainingPlan,
    clamp,
    clamp_int,
    new_id,
    normalize_history_entry,
    normalize_plan,
    parse_count,
    parse_weight,
    round_weight,
)
from gym_cli.core.storage import StorageAdapter

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def _identity(item: Any) -> str:
    return str(getattr(item, "id"))


def move_item(items: Sequence[T], moving_id: str, target_id: str) -> List[T]:
    """Move the item with ``moving_id`` to the current position of ``target_id``."""
    result = list(items)
    if moving_id == target_id:
        return result
    ids = [_identity(item) for item in result]
    if moving_id not in ids or target_id not in ids:
        return result
    from_index = ids.index(moving_id)
    to_index = ids.index(target_id)
    moved = result.pop(from_index)
    result.insert(to_index, moved)
    return result


def shift_item(items: Sequence[T], moving_id: str, offset: int) -> List[T]:
    """Move an item by ``offset`` positions, clamped to the sequence bounds."""
    result = list(items)
    ids = [_identity(item) for item in result]
    if moving_id not in ids or not result:
        return result
    from_index = ids.index(moving_id)
    to_index = clamp_int(from_index + offset, 0, len(result) - 1)
    if to_index == from_index:
        return result
    moved = result.pop(from_index)
    result.insert(to_index, moved)
    return result


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _format_iso(moment: datetime) -> str:
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def _parse_json_list(payload: Optional[str], slot: str) -> List[Any]:
    if not payload:
        return []
    try:
        data = json.loads(payload)
    except ValueError as exc:
        LOGGER.warning("Ignoring unreadable %s payload: %s", slot, exc)
        return []
    if not isinstance(data, list):
        LOGGER.warning("Ignoring %s payload: expected a list, got %s", slot, type(data).__name__)
        return []
    return data


class PlanStore:
    """State reducer over the plans and history collections.

    Every mutating method validates its input before touching state. Invalid
    input (empty names, negative weights, unknown ids) is a silent no-op that
    returns ``False`` or ``None``. Successful mutations replace the affected
    immutable records and write the collection back through the storage
    adapter.
    """

    def __init__(
        self,
        storage: StorageAdapter,
        max_weight: float = MAX_WEIGHT,
        history_limit: int = HISTORY_LIMIT,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.storage = storage
        self.max_weight = float(max_weight)
        self.history_limit = max(int(history_limit), 1)
        self._clock = clock or _utcnow
        self._new_id = id_factory or new_id
        self._plans: Tuple[TrainingPlan, ...] = ()
        self._history: Tuple[TrainingHistoryEntry, ...] = ()
        self._active_plan_id: Optional[str] = None
        self.reload()

    # Loading and persistence

    def reload(self) -> None:
        """Load all collections from storage, normalizing every record."""
        plans = []
        for raw in _parse_json_list(self.storage.load(PLANS_SLOT), PLANS_SLOT):
            plan = normalize_plan(raw, max_weight=self.max_weight)
            if plan is not None:
                plans.append(plan)

        history = []
        for raw in _parse_json_list(self.storage.load(HISTORY_SLOT), HISTORY_SLOT):
            entry = normalize_history_entry(raw, max_weight=self.max_weight)
            if entry is not None:
                history.append(entry)

        self._plans = tuple(plans)
        self._history = tuple(history[: self.history_limit])
        self._active_plan_id = self._resolve_active(self._load_active())
        LOGGER.debug("Loaded %d plans and %d history entries", len(self._plans), len(self._history))

    def _load_active(self) -> Optional[str]:
        payload = self.storage.load(ACTIVE_SLOT)
        if not payload:
            return None
        try:
            data = json.loads(payload)
        except ValueError:
            return None
        return data if isinstance(data, str) else None

    def _resolve_active(self, candidate: Optional[str]) -> Optional[str]:
        if candidate and any(plan.id == candidate for plan in self._plans):
            return candidate
        return self._plans[0].id if self._plans else None

    def _save(self, slot: str, payload: Any) -> bool:
        ok = self.storage.save(slot, json.dumps(payload))
        if not ok:
            LOGGER.warning("Storage rejected write to slot %s", slot)
        return ok

    def _commit_plans(self, plans: Sequence[TrainingPlan], active_plan_id: Optional[str] = None) -> None:
        previous_active = self._active_plan_id
        self._plans = tuple(plans)
        candidate = active_plan_id if active_plan_id is not None else previous_active
        self._active_plan_id = self._resolve_active(candidate)
        self._save(PLANS_SLOT, [plan.to_dict() for plan in self._plans])
        if self._active_plan_id != previous_active or active_plan_id is not None:
            self._save(ACTIVE_SLOT, self._active_plan_id)

    def _commit_history(self, history: Sequence[TrainingHistoryEntry]) -> None:
        self._history = tuple(history)[: self.history_limit]
        self._save(HISTORY_SLOT, [entry.to_dict() for entry in self._history])

    # Read-only views

    @property
    def plans(self) -> Tuple[TrainingPlan, ...]:
        return self._plans

    @property
    def history(self) -> Tuple[TrainingHistoryEntry, ...]:
        return self._history

    @property
    def active_plan_id(self) -> Optional[str]:
        return self._active_plan_id

    @property
    def active_plan(self) -> Optional[TrainingPlan]:
        return self.get_plan(self._active_plan_id) if self._active_plan_id else None

    def get_plan(self, plan_id: Optional[str]) -> Optional[TrainingPlan]:
        for plan in self._plans:
            if plan.id == plan_id:
                return plan
        return None

    def get_exercise(self, plan_id: str, exercise_id: str) -> Optional[Exercise]:
        plan = self.get_plan(plan_id)
        return plan.find_exercise(exercise_id) if plan else None

    def recent_history(
        self,
        limit: Optional[int] = None,
        since: Optional[date] = None,
    ) -> List[TrainingHistoryEntry]:
        """Return history entries (newest first), optionally filtered by date."""
        entries = list(self._history)
        if since is not None:
            cutoff = since.isoformat()
            entries = [entry for entry in entries if entry.date_iso[:10] >= cutoff]
        if limit is not None:
            entries = entries[: max(limit, 0)]
        return entries

    def compute_plan_stats(self, plan_id: Optional[str]) -> PlanStats:
        """Derive aggregate statistics from the plan's current state."""
        plan = self.get_plan(plan_id)
        if plan is None or not plan.exercises:
            return PlanStats()

        exercises = plan.exercises
        total_weight = sum(exercise.current_weight for exercise in exercises)
        return PlanStats(
            exercise_count=len(exercises),
            avg_weight=total_weight / len(exercises),
            progressed_count=sum(1 for exercise in exercises if exercise.progressed),
            done_count=sum(1 for exercise in exercises if exercise.is_done),
        )

    # Plan lifecycle

    def create_plan(self, name: str) -> Optional[TrainingPlan]:
        clean = (name or "").strip()
        if not clean:
            return None
        plan = TrainingPlan(id=self._new_id(), name=clean)
        self._commit_plans((plan,) + self._plans, active_plan_id=plan.id)
        LOGGER.debug("Created plan %s (%s)", plan.id, clean)
        return plan

    def rename_plan(self, plan_id: str, name: str) -> bool:
        clean = (name or "").strip()
        plan = self.get_plan(plan_id)
        if plan is None or not clean or plan.name == clean:
            return False
        self._replace_plan(replace(plan, name=clean))
        return True

    def delete_plan(self, plan_id: str) -> bool:
        if self.get_plan(plan_id) is None:
            return False
        remaining = [plan for plan in self._plans if plan.id != plan_id]
        self._commit_plans(remaining)
        LOGGER.debug("Deleted plan %s; active plan is now %s", plan_id, self._active_plan_id)
        return True

    def select_plan(self, plan_id: str) -> bool:
        if self.get_plan(plan_id) is None:
            return False
        if plan_id == self._active_plan_id:
            return False
        self._active_plan_id = plan_id
        self._save(ACTIVE_SLOT, plan_id)
        return True

    def _replace_plan(self, updated: TrainingPlan) -> None:
        self._commit_plans([updated if plan.id == updated.id else plan for plan in self._plans])

    # Exercises

    def add_exercise(
        self,
        plan_id: str,
        name: str,
        start_weight: Any,
        target_sets: Any = None,
        notes: Optional[str] = None,
    ) -> Optional[Exercise]:
        """Append an exercise. Unusable ``target_sets`` fall back to the default."""
        clean = (name or "").strip()
        weight = parse_weight(start_weight)
        plan = self.get_plan(plan_id)
        if not clean or weight is None or plan is None:
            return None

        value = round_weight(clamp(weight, 0.0, self.max_weight))
        sets = parse_count(target_sets)
        if sets is not None:
            sets = clamp_int(sets, MIN_TARGET_SETS, MAX_TARGET_SETS)
        exercise = Exercise(
            id=self._new_id(),
            name=clean,
            current_weight=value,
            previous_weight=None,
            best_weight=value,
            notes="" if notes is None else str(notes),
            target_sets=DEFAULT_TARGET_SETS if sets is None else sets,
            completed_sets=0,
        )
        self._replace_plan(replace(plan, exercises=plan.exercises + (exercise,)))
        return exercise

    def _update_exercise(
        self,
        plan_id: str,
        exercise_id: str,
        change: Callable[[Exercise], Optional[Exercise]],
    ) -> bool:
        plan = self.get_plan(plan_id)
        exercise = plan.find_exercise(exercise_id) if plan else None
        if plan is None or exercise is None:
            return False

        updated = change(exercise)
        if updated is None or updated == exercise:
            return False

        exercises = tuple(updated if item.id == exercise_id else item for item in plan.exercises)
        self._replace_plan(replace(plan, exercises=exercises))
        return True

    def _with_weight(self, exercise: Exercise, weight: float) -> Optional[Exercise]:
        value = round_weight(clamp(weight, 0.0, self.max_weight))
        if value == exercise.current_weight:
            return None
        # A new load invalidates sets already logged for this exercise.
        return replace(
            exercise,
            previous_weight=exercise.current_weight,
            current_weight=value,
            best_weight=max(exercise.best_weight, value),
            completed_sets=0,
        )

    def set_exercise_weight(self, plan_id: str, exercise_id: str, weight: Any) -> bool:
        value = parse_weight(weight)
        if value is None:
            return False
        return self._update_exercise(plan_id, exercise_id, lambda ex: self._with_weight(ex, value))

    def adjust_exercise_weight(self, plan_id: str, exercise_id: str, delta: float) -> bool:
        try:
            step = float(delta)
        except (TypeError, ValueError, OverflowError):
            return False
        if not math.isfinite(step):
            return False
        return self._update_exercise(
            plan_id,
            exercise_id,
            lambda ex: self._with_weight(ex, ex.current_weight + step),
        )

    def set_completed_sets(self, plan_id: str, exercise_id: str, completed_sets: Any) -> bool:
        count = parse_count(completed_sets)
        if count is None:
            return False
        return self._update_exercise(
            plan_id,
            exercise_id,
            lambda ex: replace(ex, completed_sets=clamp_int(count, 0, ex.target_sets)),
        )

    def toggle_set(self, plan_id: str, exercise_id: str, ordinal: int) -> bool:
        """Toggle set number ``ordinal`` (1-based) done/undone."""

        def change(exercise: Exercise) -> Optional[Exercise]:
            if ordinal < 1 or ordinal > exercise.target_sets:
                return None
            if ordinal <= exercise.completed_sets:
                return replace(exercise, completed_sets=ordinal - 1)
            return replace(exercise, completed_sets=ordinal)

        return self._update_exercise(plan_id, exercise_id, change)

    def set_exercise_completed(self, plan_id: str, exercise_id: str, done: bool) -> bool:
        return self._update_exercise(
            plan_id,
            exercise_id,
            lambda ex: replace(ex, completed_sets=ex.target_sets if done else 0),
        )

    def update_exercise_meta(
        self,
        plan_id: str,
        exercise_id: str,
        name: Optional[str] = None,
        notes: Optional[str] = None,
        target_sets: Any = None,
    ) -> bool:
        sets = parse_count(target_sets)
        if target_sets is not None and sets is None:
            return False

        def change(exercise: Exercise) -> Exercise:
            updated = exercise
            if name is not None and name.strip():
                updated = replace(updated, name=name.strip())
            if notes is not None:
                updated = replace(updated, notes=notes)
            if sets is not None:
                target = clamp_int(sets, MIN_TARGET_SETS, MAX_TARGET_SETS)
                updated = replace(
                    updated,
                    target_sets=target,
                    completed_sets=clamp_int(updated.completed_sets, 0, target),
                )
            return updated

        return self._update_exercise(plan_id, exercise_id, change)

    def delete_exercise(self, plan_id: str, exercise_id: str) -> bool:
        plan = self.get_plan(plan_id)
        if plan is None or plan.find_exercise(exercise_id) is None:
            return False
        exercises = tuple(item for item in plan.exercises if item.id != exercise_id)
        self._replace_plan(replace(plan, exercises=exercises))
        return True

    def reorder_exercise(self, plan_id: str, moving_id: str, anchor: Union[str, int]) -> bool:
        """Move an exercise onto another exercise's slot (id) or by an offset (int)."""
        plan = self.get_plan(plan_id)
        if plan is None or plan.find_exercise(moving_id) is None:
            return False

        if isinstance(anchor, int) and not isinstance(anchor, bool):
            reordered = shift_item(plan.exercises, moving_id, anchor)
        else:
            reordered = move_item(plan.exercises, moving_id, str(anchor))

        if [item.id for item in reordered] == [item.id for item in plan.exercises]:
            return False
        self._replace_plan(replace(plan, exercises=tuple(reordered)))
        return True

    # Workouts

    def finish_workout(self, plan_id: str) -> Optional[TrainingHistoryEntry]:
        """Record a history snapshot and start a fresh set-completion cycle."""
        plan = self.get_plan(plan_id)
        if plan is None or not plan.exercises:
            return None

        snapshot = tuple(
            HistoryExercise(
                name=exercise.name,
                weight=exercise.current_weight,
                completed_sets=exercise.completed_sets,
                target_sets=exercise.target_sets,
                is_pr=(
                    exercise.previous_weight is not None
                    and exercise.current_weight >= exercise.best_weight
                    and exercise.current_weight > exercise.previous_weight
                ),
            )
            for exercise in plan.exercises
        )
        entry = TrainingHistoryEntry(
            id=self._new_id(),
            date_iso=_format_iso(self._clock()),
            plan_id=plan.id,
            plan_name=plan.name,
            exercises=snapshot,
        )

        self._commit_history((entry,) + self._history)
        reset = tuple(replace(exercise, completed_sets=0) for exercise in plan.exercises)
        if reset != plan.exercises:
            self._replace_plan(replace(plan, exercises=reset))
        LOGGER.debug("Finished workout for plan %s with %d exercises", plan.id, len(snapshot))
        return entry
