"""Slot-based storage adapters for persisted collections."""

from __future__ import annotations

import logging
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Dict, Optional, Protocol

LOGGER = logging.getLogger(__name__)


class StorageAdapter(Protocol):
    """Named-slot key/value storage holding serialized text payloads."""

    def load(self, slot: str) -> Optional[str]:
        ...

    def save(self, slot: str, payload: str) -> bool:
        ...


class FileStorage:
    """Store each slot as ``<slot>.json`` inside a data directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def path_for(self, slot: str) -> Path:
        return self.directory / f"{slot}.json"

    def load(self, slot: str) -> Optional[str]:
        path = self.path_for(slot)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("Could not read %s: %s", path, exc)
            return None

    def save(self, slot: str, payload: str) -> bool:
        path = self.path_for(slot)
        temp_path: Optional[Path] = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                "w", dir=path.parent, delete=False, encoding="utf-8", suffix=".tmp"
            ) as tmp:
                temp_path = Path(tmp.name)
                tmp.write(payload)
            temp_path.replace(path)
        except OSError as exc:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            LOGGER.warning("Could not write %s: %s", path, exc)
            return False
        LOGGER.debug("Saved slot %s to %s", slot, path)
        return True


class MemoryStorage:
    """In-memory storage used by tests and dry runs."""

    def __init__(self, slots: Optional[Dict[str, str]] = None) -> None:
        self.slots: Dict[str, str] = dict(slots or {})
        self.writes = 0

    def load(self, slot: str) -> Optional[str]:
        return self.slots.get(slot)

    def save(self, slot: str, payload: str) -> bool:
        self.slots[slot] = payload
        self.writes += 1
        return True
