"""
Meta endpoints: health, configured sources.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from marketing_dashboard import config as settings
from marketing_dashboard.api.dependencies import get_store
from marketing_dashboard.api.response_models import HealthResponse, SourceInfo, SourcesResponse
from marketing_dashboard.data.store import DataStore

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(store: DataStore = Depends(get_store)):
    return HealthResponse(status="ok", slots=store.status())


@router.get("/sources", response_model=SourcesResponse)
def list_sources():
    sources = [
        SourceInfo(
            name=c.name,
            label=c.label,
            kind=c.kind,
            header_offset=int(c.header_offset),
            currency_conversion=c.currency_conversion,
            has_default_file=bool(c.default_file and (settings.DEFAULTS_FOLDER / c.default_file).exists()),
        )
        for c in settings.SOURCES.values()
    ]
    return SourcesResponse(sources=sources)
