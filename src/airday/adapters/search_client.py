"""
Song search client.

Proxies a query to the upstream song search API and normalizes results into
track payloads the playlist store accepts. Upstream results carry no
duration, so every result gets the configured default.
"""

from __future__ import annotations

from typing import Any

import requests
import structlog
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..domain.entities import DEFAULT_TRACK_DURATION
from ..infra.exceptions import SearchError

logger = structlog.get_logger(__name__)


def _link(value: Any) -> str | None:
    if isinstance(value, dict):
        link = value.get("link") or value.get("url")
        return link if isinstance(link, str) else None
    return value if isinstance(value, str) else None


def normalize_result(item: dict[str, Any], default_duration: int = DEFAULT_TRACK_DURATION) -> dict[str, Any]:
    """Map one upstream song to a track payload.

    Artwork is the third image rendition (the largest the API returns) and
    media is the last download link (highest bitrate).
    """
    images = item.get("image") or []
    downloads = item.get("downloadUrl") or []
    artwork = _link(images[2]) if isinstance(images, list) and len(images) > 2 else None
    media = _link(downloads[-1]) if isinstance(downloads, list) and downloads else None
    return {
        "id": str(item.get("id")) if item.get("id") is not None else None,
        "title": item.get("name"),
        "artist": item.get("primaryArtists"),
        "image": artwork,
        "url": media,
        "duration": default_duration,
    }


class SongSearchClient:
    """HTTP client for the upstream song search API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        default_duration: int = DEFAULT_TRACK_DURATION,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.strip()
        self.timeout = timeout
        self.default_duration = default_duration
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a requests session with retry logic."""
        session = requests.Session()
        retry_strategy = Retry(
            total=3,
            backoff_factor=0.5,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.headers.update({"Accept": "application/json"})
        return session

    def search(self, query: str) -> list[dict[str, Any]]:
        """Search songs by free text.

        Raises:
            SearchError: If the request fails or the response has an unexpected shape.
        """
        try:
            response = self.session.get(self.base_url, params={"query": query}, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.warning("search_failed", query=query, error=str(e))
            raise SearchError(f"Search request failed: {e}") from e
        except ValueError as e:
            raise SearchError(f"Search returned invalid JSON: {e}") from e

        try:
            results = data["data"]["results"]
        except (KeyError, TypeError) as e:
            raise SearchError("Search response is missing data.results") from e
        if not isinstance(results, list):
            raise SearchError("Search response data.results is not a list")

        return [normalize_result(item, self.default_duration) for item in results if isinstance(item, dict)]
