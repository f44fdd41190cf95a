"""JSON export helpers."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable

from gym_cli.core.models import TrainingHistoryEntry


def write_json(path: Path, payload: Any) -> Path:
    """Write payload as pretty JSON and return path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n")
    return path


def history_payload(entries: Iterable[TrainingHistoryEntry]) -> Dict[str, Any]:
    items = [entry.to_dict() for entry in entries]
    return {
        "exportedAt": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "count": len(items),
        "history": items,
    }
