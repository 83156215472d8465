"""
Upload handling shared by the routers: read the file, run the source
pipeline, publish the result to the store (and snapshot file, if configured).
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import UploadFile

from marketing_dashboard.analytics.pipeline import run_pipeline
from marketing_dashboard.data.reader import file_kind, load_rows
from marketing_dashboard.data.schemas import SourceConfig
from marketing_dashboard.data.snapshot import write_snapshot
from marketing_dashboard.data.store import DataStore
from marketing_dashboard.errors import DashboardError, InputValidationError, UnexpectedFailure

logger = logging.getLogger(__name__)


async def read_upload(file: Optional[UploadFile]) -> tuple[bytes, str]:
    """Validate presence and extension, then pull the payload into memory."""
    if file is None or not file.filename:
        raise InputValidationError("No file provided", "Attach the export as multipart field 'file'")
    file_kind(file.filename)
    content = await file.read()
    logger.info("Received %s (%d bytes)", file.filename, len(content))
    return content, file.filename


def process_content(content: bytes, filename: str, config: SourceConfig) -> Any:
    """Single attempt; unexpected exceptions become UnexpectedFailure."""
    try:
        rows = load_rows(content, filename, config)
        return run_pipeline(rows, config)
    except DashboardError:
        raise
    except Exception as exc:
        logger.exception("Failed to process %s for %s", filename, config.name)
        raise UnexpectedFailure("Failed to process file", str(exc)) from exc


def publish(store: DataStore, config: SourceConfig, data: Any, source: str = "uploaded") -> None:
    """Replace the source's slot; also overwrite its JSON snapshot if it has one."""
    if config.snapshot_file:
        try:
            write_snapshot(config.snapshot_file, data)
        except OSError as exc:
            logger.exception("Snapshot write failed for %s", config.name)
            raise UnexpectedFailure("Failed to write snapshot", str(exc)) from exc
    store.slot(config.name).set(data, source=source)
