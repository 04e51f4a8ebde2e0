"""Shared pytest fixtures for STAC client tests."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from stac_client import STACClient, STACClientConfig
from stac_client.transport import HttpResponse

ITEM_SEARCH_URI = "https://api.stacspec.org/v1.0.0/item-search"


# =============================================================================
# Recording transport
# =============================================================================


class RecordingHttpClient:
    """In-memory HttpClient that replays queued responses and records calls."""

    def __init__(self) -> None:
        self.responses: List[Any] = []
        self.calls: List[Dict[str, Any]] = []
        self.opened: List[HttpResponse] = []
        self.close_count = 0

    def queue(self, body: Any, content_type: Optional[str] = "application/json") -> None:
        """Queue a response. Dicts/lists are JSON encoded, exceptions are raised."""
        self.responses.append((body, content_type))

    def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> HttpResponse:
        self.calls.append({"method": "GET", "url": url, "headers": headers})
        return self._next(url)

    def post(self, url: str, body: bytes, content_type: str) -> HttpResponse:
        self.calls.append(
            {"method": "POST", "url": url, "body": body, "content_type": content_type}
        )
        return self._next(url)

    def close(self) -> None:
        self.close_count += 1

    def _next(self, url: str) -> HttpResponse:
        body, content_type = self.responses.pop(0)
        if isinstance(body, Exception):
            raise body
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        response = HttpResponse.from_bytes(body, content_type, url=url)
        self.opened.append(response)
        return response


# =============================================================================
# Documents
# =============================================================================


def landing_page_doc(
    conformance: Optional[List[str]] = None,
    links: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """Build a landing page document."""
    return {
        "type": "Catalog",
        "id": "test-catalog",
        "stac_version": "1.0.0",
        "description": "Test catalog",
        "conformsTo": [ITEM_SEARCH_URI] if conformance is None else conformance,
        "links": links if links is not None else [],
    }


def search_link(method: str, href: str = "https://host/search") -> Dict[str, Any]:
    return {"rel": "search", "href": href, "type": "application/geo+json", "method": method}


def feature_collection_doc(n: int = 2) -> Dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "stac_version": "1.0.0",
                "id": f"item-{i}",
                "collection": "sentinel-2",
                "geometry": {"type": "Point", "coordinates": [10.0 + i, 20.0]},
                "bbox": [10.0 + i, 20.0, 10.0 + i, 20.0],
                "properties": {"datetime": "2024-01-01T00:00:00Z", "eo:cloud_cover": 5},
                "assets": {"data": {"href": f"https://host/data/{i}.tif"}},
                "links": [],
            }
            for i in range(n)
        ],
        "links": [{"rel": "next", "href": "https://host/search?token=abc"}],
        "numberMatched": 10,
        "numberReturned": n,
    }


@pytest.fixture
def config() -> STACClientConfig:
    """Configuration independent of the environment."""
    return STACClientConfig(_env_file=None)


@pytest.fixture
def http() -> RecordingHttpClient:
    return RecordingHttpClient()


@pytest.fixture
def make_client(
    http: RecordingHttpClient, config: STACClientConfig
) -> Callable[..., Tuple[STACClient, RecordingHttpClient]]:
    """Build a client over the recording transport from a landing page document."""

    def _make(landing_page: Optional[Dict[str, Any]] = None, **kwargs: Any):
        http.queue(landing_page if landing_page is not None else landing_page_doc(**kwargs))
        client = STACClient("https://host/stac", http=http, config=config)
        return client, http

    return _make
