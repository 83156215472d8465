"""
FastAPI dependencies — DataStore singleton, source lookup.
"""
from __future__ import annotations

from fastapi import Path

from marketing_dashboard.config import NOTE_ACCOUNTS, SOURCES
from marketing_dashboard.data.schemas import SourceConfig
from marketing_dashboard.data.store import DataStore
from marketing_dashboard.errors import NotFoundError

# ---------------------------------------------------------------------------
# Global store singleton (set during startup)
# ---------------------------------------------------------------------------
_store: DataStore | None = None


def set_store(store: DataStore) -> None:
    global _store
    _store = store


def get_store() -> DataStore:
    """Return the process-wide store, creating it lazily outside the lifespan."""
    global _store
    if _store is None:
        _store = DataStore()
    return _store


# ---------------------------------------------------------------------------
# Source lookup from path params
# ---------------------------------------------------------------------------

def get_ad_source(source: str = Path(..., description="xiaowang | xiaowang-test | lifecar")) -> SourceConfig:
    config = SOURCES.get(source)
    if config is None or config.kind != "ads":
        valid = [name for name, c in SOURCES.items() if c.kind == "ads"]
        raise NotFoundError(f"Unknown ad source: {source}", f"Valid: {valid}")
    return config


def get_note_source(account: str = Path(..., description="xiaowang | lifecar")) -> SourceConfig:
    name = NOTE_ACCOUNTS.get(account)
    if name is None:
        raise NotFoundError(f"Unknown notes account: {account}", f"Valid: {list(NOTE_ACCOUNTS)}")
    return SOURCES[name]
