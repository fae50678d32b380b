"""
Song search proxy.

Forwards the query to the upstream search API and returns track payloads
ready to POST to /api/playlist.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from ...adapters.search_client import SongSearchClient
from ...infra.exceptions import SearchError
from .deps import get_search_client
from .schemas import ErrorOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["search"])


@router.get("/search")
def search(
    q: str | None = Query(None, description="Free-text song query"),
    client: SongSearchClient = Depends(get_search_client),
):
    if not q or not q.strip():
        body = ErrorOut(error="Missing query", code="MISSING_QUERY")
        return JSONResponse(body.model_dump(), status_code=400)
    try:
        return client.search(q.strip())
    except SearchError as e:
        logger.warning(f"Search failed for {q!r}: {e}")
        return JSONResponse(ErrorOut(error=str(e), code=e.code).model_dump(), status_code=502)
