"""
DataStore — process-wide, in-memory holder for the latest upload per source.

Each slot keeps exactly one version. A new upload replaces it wholesale and
the last write wins; there is no locking and nothing survives a restart.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass
class Snapshot:
    data: Any
    version: int
    uploaded_at: datetime
    source: str = "uploaded"

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "uploaded_at": self.uploaded_at.isoformat(),
            "source": self.source,
        }


class SnapshotStore:
    """Single-slot cache with a version counter."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._snapshot: Optional[Snapshot] = None
        self._version = 0

    def set(self, data: Any, source: str = "uploaded") -> Snapshot:
        self._version += 1
        self._snapshot = Snapshot(data=data, version=self._version, uploaded_at=datetime.now(), source=source)
        return self._snapshot

    def get(self) -> Optional[Snapshot]:
        return self._snapshot

    def clear(self) -> None:
        # version keeps counting so a cleared-then-reloaded slot is distinguishable
        self._snapshot = None

    @property
    def version(self) -> int:
        return self._version


class DataStore:
    """Named snapshot slots, created on first use."""

    def __init__(self) -> None:
        self._slots: dict[str, SnapshotStore] = {}

    def slot(self, name: str) -> SnapshotStore:
        if name not in self._slots:
            self._slots[name] = SnapshotStore(name)
        return self._slots[name]

    def status(self) -> dict[str, Optional[dict]]:
        """Per-slot snapshot metadata (None for empty slots)."""
        out = {}
        for name, slot in sorted(self._slots.items()):
            snap = slot.get()
            out[name] = snap.to_dict() if snap else None
        return out
