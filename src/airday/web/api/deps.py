"""Shared FastAPI dependencies."""

from __future__ import annotations

from fastapi import Header, Query, Request

from ...adapters.search_client import SongSearchClient
from ...runtime.scheduler_service import SchedulerService


def get_service(request: Request) -> SchedulerService:
    """Scheduler service owned by the running app."""
    return request.app.state.scheduler


def get_search_client(request: Request) -> SongSearchClient:
    return request.app.state.search_client


def get_credential(
    token: str | None = Query(None, description="Broadcast key"),
    authorization: str | None = Header(None),
) -> str | None:
    """Credential from ``?token=`` or an ``Authorization: Bearer`` header."""
    if token:
        return token
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip()
    return None
