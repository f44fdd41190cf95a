"""Parsing helpers for plan import files and CLI input."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from gym_cli.core.models import parse_weight


class PlanInputError(ValueError):
    """Raised when a plan import file cannot be parsed."""


def parse_weight_option(value: Optional[str]) -> Optional[float]:
    """Parse a weight typed by the user (accepts ``22,5`` and a ``kg`` suffix)."""
    if value is None:
        return None
    text = value.strip().lower()
    if text.endswith("kg"):
        text = text[:-2].strip()
    return parse_weight(text.replace(",", "."))


def _normalize_exercise_input(raw: Any) -> Optional[Dict[str, Any]]:
    if isinstance(raw, str):
        return {"name": raw}
    if not isinstance(raw, dict):
        return None
    item: Dict[str, Any] = {"name": str(raw.get("name") or "")}
    weight = raw.get("weight", raw.get("start_weight"))
    if weight is not None:
        item["weight"] = weight
    sets = raw.get("sets", raw.get("target_sets"))
    if sets is not None:
        item["sets"] = sets
    if raw.get("notes"):
        item["notes"] = str(raw["notes"])
    return item


def load_plan_input(file_path: Path) -> List[Dict[str, Any]]:
    """Load plan definition(s) from a YAML or JSON file.

    Accepts a single plan object, a list of plans, or a mapping with a
    top-level ``plans`` list. Exercises may be given as names or as objects
    with ``name``, ``weight``, ``sets`` and ``notes``.
    """
    try:
        text = file_path.read_text()
    except OSError as exc:
        raise PlanInputError(f"Cannot read {file_path}: {exc}") from exc

    try:
        if file_path.suffix.lower() in {".yaml", ".yml"}:
            raw_data = yaml.safe_load(text)
        else:
            raw_data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise PlanInputError(f"Invalid plan file {file_path}: {exc}") from exc

    if isinstance(raw_data, dict) and isinstance(raw_data.get("plans"), list):
        raw_data = raw_data["plans"]
    if isinstance(raw_data, dict):
        raw_data = [raw_data]
    if not isinstance(raw_data, list):
        raise PlanInputError(f"{file_path} must contain a plan object or a list of plans")

    plans: List[Dict[str, Any]] = []
    for raw in raw_data:
        if not isinstance(raw, dict):
            continue
        exercises = []
        for item in raw.get("exercises") or []:
            exercise = _normalize_exercise_input(item)
            if exercise is not None:
                exercises.append(exercise)
        plans.append({"name": str(raw.get("name") or ""), "exercises": exercises})
    return plans
