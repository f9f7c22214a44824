# backend/app/modules/board/persistence/remote.py
"""
Persistence adapter talking to the board's own REST API.

The server keys tiles by an integer primary key and a unique slug; the core
keys them by string id. The slug carries the core id across the wire.
"""

import logging
from typing import Any

import httpx

from app.exceptions import PersistenceError
from app.modules.board.persistence.base import PersistenceAdapter, Record

logger = logging.getLogger(__name__)

_SERVER_ONLY_FIELDS = ("slug", "createdAt", "updatedAt", "subtaskCompletion")


def tile_from_api(data: Record) -> Record:
    """Server tile representation -> core tile record."""
    record = {k: v for k, v in data.items() if k not in _SERVER_ONLY_FIELDS and v is not None}
    record["id"] = data["slug"]
    return record


class RestApiAdapter(PersistenceAdapter):
    def __init__(
        self,
        base_url: str,
        client: httpx.Client | None = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, json_body: Any = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self._client.request(method, url, json=json_body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PersistenceError(
                f"{method} {url} failed with HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise PersistenceError(f"{method} {url} failed: {e}") from e
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise PersistenceError(f"{method} {url} returned a non-JSON body") from e

    def load_tiles(self) -> list[Record] | None:
        data = self._request("GET", "/tiles")
        if not data:
            # An empty table means "never initialised"; the store seeds defaults.
            return None
        return [tile_from_api(item) for item in data]

    def save_tiles(self, tiles: list[Record]) -> None:
        logger.debug(f"Syncing {len(tiles)} tile(s) to {self.base_url}")
        self._request("PUT", "/tiles", tiles)

    def load_settings(self) -> Record | None:
        return self._request("GET", "/settings")

    def save_settings(self, settings: Record) -> None:
        self._request("PATCH", "/settings", settings)

    def load_photos(self) -> list[Record] | None:
        return self._request("GET", "/photos")

    def save_photos(self, photos: list[Record]) -> None:
        self._request("PUT", "/photos", photos)
