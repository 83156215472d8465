"""
Multi-sheet endpoints: all-in-one workbook upload and the leads workbook.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from marketing_dashboard.analytics.pipeline import run_pipeline
from marketing_dashboard.api.dependencies import get_store
from marketing_dashboard.api.processing import process_content, publish, read_upload
from marketing_dashboard.api.response_models import ERROR_RESPONSES
from marketing_dashboard.config import ALL_IN_ONE_SHEETS, SOURCES
from marketing_dashboard.data.reader import read_workbook, rows_from_matrix
from marketing_dashboard.data.schemas import HeaderOffset
from marketing_dashboard.data.store import DataStore
from marketing_dashboard.errors import DashboardError, UnexpectedFailure

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["upload"], responses=ERROR_RESPONSES)


def match_sheet(sheet_names: list[str], tokens: tuple[str, ...]) -> Optional[str]:
    """First sheet whose lower-cased, space-free name contains every token."""
    for name in sheet_names:
        key = name.lower().replace(" ", "")
        if all(token.lower() in key for token in tokens):
            return name
    return None


@router.post("/all-in-one-upload")
async def all_in_one_upload(
    file: Optional[UploadFile] = File(None),
    store: DataStore = Depends(get_store),
):
    """Route each recognised sheet to its source pipeline.

    Sheets are read with their first row as header. A sheet that fails is
    logged and reported as not processed; the other sheets still go through.
    """
    content, filename = await read_upload(file)
    try:
        sheets = read_workbook(content, filename)
    except DashboardError:
        raise
    except Exception as exc:
        logger.exception("Failed to read workbook %s", filename)
        raise UnexpectedFailure("Failed to process file", str(exc)) from exc
    logger.info("All-in-one %s: sheets %s", filename, list(sheets))

    processed: dict[str, bool] = {}
    data: dict[str, object] = {}
    for source_name, tokens in ALL_IN_ONE_SHEETS:
        processed[source_name] = False
        data[source_name] = None
        sheet = match_sheet(list(sheets), tokens)
        if sheet is None:
            continue
        config = replace(SOURCES[source_name], header_offset=HeaderOffset.FIRST_ROW)
        try:
            rows = rows_from_matrix(sheets[sheet], config.header_offset)
            result = run_pipeline(rows, config)
        except Exception:
            logger.exception("Error processing sheet %r as %s", sheet, source_name)
            continue
        if config.kind == "ads":
            publish(store, config, {"filename": filename, "result": result})
        else:
            publish(store, config, result)
        data[source_name] = result
        processed[source_name] = True

    return {
        "success": True,
        "message": "All data processed successfully",
        "processed": processed,
        "data": data,
        "filename": filename,
    }


@router.post("/leads/upload")
async def upload_leads(
    file: Optional[UploadFile] = File(None),
    store: DataStore = Depends(get_store),
):
    """Broker/consultation leads with daily, weekly and monthly counts."""
    config = SOURCES["leads"]
    content, filename = await read_upload(file)
    result = process_content(content, filename, config)
    publish(store, config, result)
    return {
        "success": True,
        "data": result,
        "total": result["total_rows"],
        "message": f"Processed {result['total_rows']} leads",
        "filename": filename,
    }


@router.get("/leads")
def current_leads(store: DataStore = Depends(get_store)):
    snap = store.slot(SOURCES["leads"].name).get()
    if snap is None:
        return {"success": True, "data": None, "total": 0, "needs_upload": True}
    return {
        "success": True,
        "data": snap.data,
        "total": snap.data["total_rows"],
        "version": snap.version,
        "uploaded_at": snap.uploaded_at.isoformat(),
    }
