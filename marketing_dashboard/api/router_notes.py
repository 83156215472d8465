"""
Notes endpoints: upload, fetch current, default file, clear.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from marketing_dashboard import config as settings
from marketing_dashboard.api.dependencies import get_note_source, get_store
from marketing_dashboard.api.processing import process_content, publish, read_upload
from marketing_dashboard.api.response_models import ERROR_RESPONSES, ClearResponse, NotesResponse
from marketing_dashboard.data.schemas import SourceConfig
from marketing_dashboard.data.snapshot import delete_snapshot, read_snapshot
from marketing_dashboard.data.store import DataStore
from marketing_dashboard.errors import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notes", tags=["notes"], responses=ERROR_RESPONSES)


@router.post("/{account}/upload", response_model=NotesResponse)
async def upload_notes(
    file: Optional[UploadFile] = File(None),
    config: SourceConfig = Depends(get_note_source),
    store: DataStore = Depends(get_store),
):
    """Replace the account's notes with the uploaded export (banner row + header)."""
    content, filename = await read_upload(file)
    notes = process_content(content, filename, config)
    publish(store, config, notes)
    snap = store.slot(config.name).get()
    return NotesResponse(
        success=True,
        data=notes,
        total=len(notes),
        message=f"成功上传 {len(notes)} 条记录",
        source=snap.source,
        version=snap.version,
        uploaded_at=snap.uploaded_at.isoformat(),
    )


@router.get("/{account}", response_model=NotesResponse)
def current_notes(
    config: SourceConfig = Depends(get_note_source),
    store: DataStore = Depends(get_store),
):
    """Latest notes; falls back to the JSON snapshot for accounts that write one."""
    snap = store.slot(config.name).get()
    if snap is None and config.snapshot_file:
        saved = read_snapshot(config.snapshot_file)
        if saved is not None:
            snap = store.slot(config.name).set(saved, source="snapshot")
    if snap is None:
        return NotesResponse(success=True, data=[], total=0, needs_upload=True, message="No notes uploaded yet")
    return NotesResponse(
        success=True,
        data=snap.data,
        total=len(snap.data),
        source=snap.source,
        version=snap.version,
        uploaded_at=snap.uploaded_at.isoformat(),
    )


@router.get("/{account}/default", response_model=NotesResponse)
def default_notes(config: SourceConfig = Depends(get_note_source)):
    """Filter and project the account's bundled notes export, if one is installed."""
    if not config.default_file:
        raise NotFoundError(f"No default file configured for {config.name}")
    path = settings.DEFAULTS_FOLDER / config.default_file
    if not path.exists():
        raise NotFoundError("Default data file not found", str(path))
    notes = process_content(path.read_bytes(), path.name, config)
    return NotesResponse(
        success=True,
        data=notes,
        total=len(notes),
        message="Default data loaded",
        source="default",
    )


@router.delete("/{account}", response_model=ClearResponse)
def clear_notes(
    config: SourceConfig = Depends(get_note_source),
    store: DataStore = Depends(get_store),
):
    """Reset the account's slot to empty and remove its snapshot file."""
    store.slot(config.name).clear()
    if config.snapshot_file and delete_snapshot(config.snapshot_file):
        logger.info("Removed snapshot for %s", config.name)
    return ClearResponse(success=True, message="All data cleared successfully")
