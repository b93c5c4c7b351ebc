"""FastAPI app factory."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from flightlog.api.aircraft import router as aircraft_router
from flightlog.api.dashboard import router as dashboard_router
from flightlog.api.flights import router as flights_router
from flightlog.api.roster import router as roster_router
from flightlog.db.engine import get_engine, init_db
from flightlog.errors import DataUnavailable, FlightLogError

logger = logging.getLogger(__name__)


def _status_code(error: FlightLogError) -> int:
    if isinstance(error, DataUnavailable):
        return 503
    return 422


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    env = os.environ.get("ENVIRONMENT", "development")
    engine = get_engine()

    if env == "development":
        init_db(engine)
        logger.info("Dev mode: tables created via init_db")

    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    load_dotenv()

    app = FastAPI(
        title="Flight Log API",
        description="Flight school logbook and reporting API",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(FlightLogError)
    async def handle_flightlog_error(request: Request, error: FlightLogError):
        status_code = _status_code(error)
        if status_code >= 500:
            logger.warning("%s %s: %s", request.method, request.url.path, error.message)
        return JSONResponse(status_code=status_code, content=error.to_dict())

    app.include_router(dashboard_router, prefix="/api")
    app.include_router(flights_router, prefix="/api")
    app.include_router(roster_router, prefix="/api")
    app.include_router(aircraft_router, prefix="/api")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
