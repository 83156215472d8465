"""
Marketing Dashboard — FastAPI app factory.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marketing_dashboard.data.store import DataStore
from marketing_dashboard.errors import DashboardError
from marketing_dashboard.api.dependencies import set_store
from marketing_dashboard.api.router_meta import router as meta_router
from marketing_dashboard.api.router_ads import router as ads_router
from marketing_dashboard.api.router_notes import router as notes_router
from marketing_dashboard.api.router_upload import router as upload_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging, create folders and a fresh, empty store."""
    from marketing_dashboard.config import BASE_FOLDER, DEFAULTS_FOLDER, LOG_LEVEL, PUBLIC_FOLDER
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    for d in [BASE_FOLDER, DEFAULTS_FOLDER, PUBLIC_FOLDER]:
        d.mkdir(parents=True, exist_ok=True)

    logger.info("DASHBOARD_DATA_DIR = %s", BASE_FOLDER)
    logger.info("PUBLIC_FOLDER = %s", PUBLIC_FOLDER)

    set_store(DataStore())
    logger.info("Marketing Dashboard ready — upload exports to populate the dashboard")
    yield


async def dashboard_error_handler(request: Request, exc: DashboardError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.details)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    app = FastAPI(
        title="Marketing Dashboard API",
        description="Ad-platform and notes exports — normalized summaries, daily series, rollups",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DashboardError, dashboard_error_handler)

    app.include_router(meta_router)
    app.include_router(ads_router)
    app.include_router(notes_router)
    app.include_router(upload_router)

    return app


app = create_app()
