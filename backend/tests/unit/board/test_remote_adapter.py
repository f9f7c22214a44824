# backend/tests/unit/board/test_remote_adapter.py
import json

import httpx
import pytest

from app.exceptions import PersistenceError
from app.modules.board.persistence.remote import RestApiAdapter, tile_from_api

BASE_URL = "http://board.test/api/v1"


def make_adapter(handler) -> RestApiAdapter:
    return RestApiAdapter(BASE_URL, client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_tile_from_api_maps_slug_to_id() -> None:
    record = tile_from_api(
        {
            "id": 7,
            "slug": "research",
            "title": "Research",
            "dueDate": None,
            "createdAt": "2024-05-10T12:00:00Z",
            "updatedAt": "2024-05-10T12:00:00Z",
        }
    )
    assert record == {"id": "research", "title": "Research"}


def test_load_tiles() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/api/v1/tiles"
        return httpx.Response(200, json=[{"id": 1, "slug": "a", "title": "A", "order": 0}])

    assert make_adapter(handler).load_tiles() == [{"id": "a", "title": "A", "order": 0}]


def test_empty_remote_board_loads_none() -> None:
    adapter = make_adapter(lambda request: httpx.Response(200, json=[]))
    assert adapter.load_tiles() is None


def test_save_sections_use_put_and_patch() -> None:
    seen: list[tuple[str, str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={})

    adapter = make_adapter(handler)
    adapter.save_tiles([{"id": "a"}])
    adapter.save_settings({"darkMode": True})
    adapter.save_photos([])

    assert seen == [
        ("PUT", "/api/v1/tiles", [{"id": "a"}]),
        ("PATCH", "/api/v1/settings", {"darkMode": True}),
        ("PUT", "/api/v1/photos", []),
    ]


def test_http_error_status_raises_persistence_error() -> None:
    adapter = make_adapter(lambda request: httpx.Response(500, json={"detail": "boom"}))
    with pytest.raises(PersistenceError, match="HTTP 500"):
        adapter.load_settings()


def test_transport_error_raises_persistence_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PersistenceError):
        make_adapter(handler).save_tiles([])


def test_empty_body_is_none() -> None:
    adapter = make_adapter(lambda request: httpx.Response(204))
    assert adapter.load_photos() is None
