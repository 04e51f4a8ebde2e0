"""
STAC API Client

A small client for SpatioTemporal Asset Catalog (STAC) APIs: bootstraps from a
landing page, negotiates capabilities (conformance classes and links) and
searches items with GET or POST depending on what the server advertises.

Architecture:
    stac_client/
    ├── config.py       # Environment-based configuration (pydantic-settings)
    ├── conformance.py  # Conformance classes and matcher
    ├── models.py       # Pydantic models (landing page, links, collections, GeoJSON)
    ├── search.py       # SearchQuery, SearchMode and the GET URL builder
    ├── transport.py    # HttpClient protocol and httpx transport
    ├── errors.py       # Error taxonomy
    └── client.py       # STACClient orchestration

Usage:
    from stac_client import STACClient, SearchQuery, SearchMode

    with STACClient("https://host/stac") as client:
        results = client.search(SearchQuery(collections=["sentinel-2"], limit=5))

Date: 18 OCT 2026
"""

from .client import STACClient
from .config import STACClientConfig, get_client_config
from .conformance import (
    COLLECTIONS,
    CORE,
    FEATURES,
    FIELDS,
    FILTER,
    ITEM_SEARCH,
    QUERY,
    SORT,
    ConformanceClass,
    matches,
)
from .errors import (
    CapabilityError,
    DecodeError,
    ProtocolError,
    STACClientError,
    TransportError,
    URLConstructionError,
)
from .models import (
    Collection,
    CollectionList,
    Feature,
    FeatureCollection,
    HttpMethod,
    LandingPage,
    Link,
)
from .search import SearchGetBuilder, SearchMode, SearchQuery, SortBy
from .transport import HttpClient, HttpResponse, HttpxHttpClient

__version__ = "1.0.0"
__all__ = [
    "STACClient",
    "STACClientConfig",
    "get_client_config",
    "ConformanceClass",
    "CORE",
    "ITEM_SEARCH",
    "COLLECTIONS",
    "FEATURES",
    "FILTER",
    "SORT",
    "FIELDS",
    "QUERY",
    "matches",
    "STACClientError",
    "TransportError",
    "ProtocolError",
    "DecodeError",
    "CapabilityError",
    "URLConstructionError",
    "HttpMethod",
    "Link",
    "LandingPage",
    "Collection",
    "CollectionList",
    "Feature",
    "FeatureCollection",
    "SearchMode",
    "SearchQuery",
    "SortBy",
    "SearchGetBuilder",
    "HttpClient",
    "HttpResponse",
    "HttpxHttpClient",
]
