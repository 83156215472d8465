"""
Advertising endpoints: upload, latest result, default file.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from marketing_dashboard import config as settings
from marketing_dashboard.api.dependencies import get_ad_source, get_store
from marketing_dashboard.api.processing import process_content, publish, read_upload
from marketing_dashboard.api.response_models import ERROR_RESPONSES, AdsResponse
from marketing_dashboard.data.schemas import SourceConfig
from marketing_dashboard.data.store import DataStore
from marketing_dashboard.errors import NotFoundError

router = APIRouter(prefix="/api/ads", tags=["ads"], responses=ERROR_RESPONSES)


def _response(result: dict, filename: str, message: str, snap=None) -> AdsResponse:
    return AdsResponse(
        success=True,
        data=result,
        row_count=result["total_rows"],
        message=message,
        filename=filename,
        source=snap.source if snap else None,
        version=snap.version if snap else None,
        uploaded_at=snap.uploaded_at.isoformat() if snap else None,
    )


@router.post("/{source}/upload", response_model=AdsResponse)
async def upload_ads(
    file: Optional[UploadFile] = File(None),
    config: SourceConfig = Depends(get_ad_source),
    store: DataStore = Depends(get_store),
):
    """Process an ad-platform export and make it the source's current data."""
    content, filename = await read_upload(file)
    result = process_content(content, filename, config)
    publish(store, config, {"filename": filename, "result": result})
    snap = store.slot(config.name).get()
    return _response(result, filename, f"Processed {result['total_rows']} rows", snap)


@router.get("/{source}", response_model=AdsResponse)
def current_ads(
    config: SourceConfig = Depends(get_ad_source),
    store: DataStore = Depends(get_store),
):
    """Most recent upload for the source, or a needs-upload signal."""
    snap = store.slot(config.name).get()
    if snap is None:
        return AdsResponse(success=True, needs_upload=True, message="No data uploaded yet")
    return _response(snap.data["result"], snap.data["filename"], "Latest upload", snap)


@router.get("/{source}/default", response_model=AdsResponse)
def default_ads(config: SourceConfig = Depends(get_ad_source)):
    """Process the source's bundled default export, if one is installed."""
    if not config.default_file:
        raise NotFoundError(f"No default file configured for {config.name}")
    path = settings.DEFAULTS_FOLDER / config.default_file
    if not path.exists():
        raise NotFoundError("Default data file not found", str(path))
    result = process_content(path.read_bytes(), path.name, config)
    return _response(result, path.name, "Default data loaded")
