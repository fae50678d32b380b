"""
Web server for the airday station.

Provides the FastAPI application that exposes the scheduler over HTTP. The
app owns one StationState for its lifetime; nothing survives a restart.
"""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..adapters.search_client import SongSearchClient
from ..infra.exceptions import AirdayError, NotFoundError, UnauthorizedError, ValidationError
from ..infra.logging import configure_logging
from ..infra.settings import Settings, settings as default_settings
from ..runtime.clock import MasterClock
from ..runtime.scheduler_service import SchedulerService, StationState, TokenAuthorizer
from ..runtime.playlist_store import PlaylistStore
from .api import live, playlist, search
from .api.schemas import ErrorOut

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[AirdayError], int] = {
    ValidationError: 400,
    UnauthorizedError: 403,
    NotFoundError: 404,
}


def _error_response(exc: AirdayError) -> JSONResponse:
    status = next(
        (code for kind, code in _STATUS_BY_ERROR.items() if isinstance(exc, kind)),
        500,
    )
    body = ErrorOut(error=str(exc), code=exc.code)
    return JSONResponse(body.model_dump(), status_code=status)


def create_app(
    service: SchedulerService | None = None,
    *,
    clock: MasterClock | None = None,
    search_client: SongSearchClient | None = None,
    config: Settings | None = None,
) -> FastAPI:
    """Build the HTTP app around a scheduler service.

    Args:
        service: Scheduler to expose. A fresh one with its own StationState
            and a broadcast-key authorizer is created when omitted.
        clock: Clock for the created service (ignored when ``service`` is given).
        search_client: Upstream search client; built from settings when omitted.
        config: Settings override, mostly for tests.
    """
    cfg = config or default_settings
    if not cfg.broadcast_key:
        logger.warning("BROADCAST_KEY is not set; playlist mutations will be rejected")

    if service is None:
        state = StationState(store=PlaylistStore(default_duration=cfg.default_track_duration))
        service = SchedulerService(
            state,
            clock=clock,
            authorizer=TokenAuthorizer(cfg.broadcast_key),
        )
    if search_client is None:
        search_client = SongSearchClient(
            cfg.search_api_url,
            timeout=cfg.search_timeout,
            default_duration=cfg.default_track_duration,
        )

    app = FastAPI(
        title="airday",
        description="24-hour rolling broadcast scheduler",
        version=__version__,
    )
    app.state.scheduler = service
    app.state.search_client = search_client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(AirdayError)
    async def airday_error_handler(request: Request, exc: AirdayError):
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error_response(ValidationError(f"Malformed request: {exc.errors()}"))

    app.include_router(playlist.router)
    app.include_router(live.router)
    app.include_router(search.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


def run_server(host: str | None = None, port: int | None = None) -> None:
    """Run the station HTTP server until interrupted."""
    configure_logging()
    host = host or default_settings.host
    port = port or default_settings.port
    logger.info(f"Starting airday on {host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_config=None)
