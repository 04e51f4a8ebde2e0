# ============================================================================
# MODULE CONTEXT - STAC API CLIENT
# ============================================================================
# STATUS: Client Layer - STAC API orchestration
# PURPOSE: Landing page bootstrap, collection listing and capability-gated item search
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: STACClient
# DEPENDENCIES: pydantic, httpx (via transport), util_logger
# PATTERNS: Injectable transport, immutable landing page snapshot
# ============================================================================
"""
STAC API Client.

Bootstraps from a STAC API landing page, then searches items with whichever
HTTP method the server advertises.

Lifecycle:
    1. Construction issues exactly one GET for the landing page and keeps the
       decoded LandingPage for the client's lifetime.
    2. get_collections() follows the landing page "data" link (if any).
    3. search() checks the item-search conformance class, picks GET or POST,
       sends one request and decodes the first page of results.
    4. close() releases the transport.

Mode selection (SearchMode.AUTO):
    POST is preferred whenever a POST search link is declared, since it
    supports large requests (intersection geometries, complex filters, long
    collection lists). Otherwise GET is used.

Usage:
    with STACClient.open("https://earth-search.aws.element84.com/v1") as client:
        collections = client.get_collections()
        results = client.search(
            SearchQuery(collections=["sentinel-2-l2a"], bbox=[10, 20, 30, 40], limit=5)
        )
        for feature in results.features:
            print(feature.id, feature.shape.bounds)

The client holds no mutable state besides its closed flag, so search() and
get_collections() may be called from several threads as long as the
transport allows it. Timeouts and cancellation belong to the transport.
"""

import json
from dataclasses import replace
from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from util_logger import ComponentType, LogContext, LoggerFactory, LogLevel, log_exceptions

from .config import STACClientConfig, get_client_config
from .conformance import ConformanceClass
from .errors import CapabilityError, DecodeError, ProtocolError, STACClientError
from .models import (
    GEOJSON_MIME,
    JSON_MIME,
    Collection,
    CollectionList,
    FeatureCollection,
    HttpMethod,
    LandingPage,
)
from .search import SearchGetBuilder, SearchMode, SearchQuery
from .transport import HttpClient, HttpResponse, HttpxHttpClient

ModelT = TypeVar("ModelT", bound=BaseModel)

ACCEPTS_JSON = {"Accepts": JSON_MIME, "Accept": JSON_MIME}
ACCEPTS_GEOJSON = {"Accept": GEOJSON_MIME}

logger = LoggerFactory.create_logger(ComponentType.CLIENT, "STACClient")


class STACClient:
    """
    Minimal STAC API client.

    Attributes:
        landing_page_url: URL the client was bootstrapped from
        config: Immutable configuration the client was built with
    """

    def __init__(
        self,
        landing_page_url: str,
        http: Optional[HttpClient] = None,
        config: Optional[STACClientConfig] = None
    ):
        """
        Fetch and decode the landing page.

        Args:
            landing_page_url: STAC API root URL
            http: Transport to use. An HttpxHttpClient built from config if omitted.
            config: Client configuration. get_client_config() if omitted.

        Raises:
            TransportError: If the landing page request fails
            ProtocolError: If the landing page is not served as JSON
            DecodeError: If the body is not a landing page document
        """
        self.landing_page_url = landing_page_url
        self.config = config or get_client_config()
        if self.config.debug_logging:
            LoggerFactory.set_level(LogLevel.DEBUG)
        self._log_context = LogContext(landing_page_url=landing_page_url)
        self.logger = LoggerFactory.with_context(logger, self._log_context)

        owns_transport = http is None
        if http is None:
            http = HttpxHttpClient(
                timeout=self.config.timeout,
                follow_redirects=self.config.follow_redirects,
                headers={"User-Agent": self.config.user_agent}
            )
        self._http = http
        self._closed = False
        self._item_search = ConformanceClass(
            "item-search", tuple(self.config.item_search_conformance)
        )

        try:
            response = self._http.get(landing_page_url, ACCEPTS_JSON)
            self._landing_page = self._decode(response, JSON_MIME, LandingPage, landing_page_url)
        except Exception:
            if owns_transport:
                self._http.close()
            raise

        self.logger.info(
            f"STAC landing page loaded: {len(self._landing_page.links)} links, "
            f"{len(self._landing_page.conformance)} conformance classes"
        )

    @classmethod
    def open(cls, landing_page_url: str, **kwargs) -> "STACClient":
        """Alternate constructor, same arguments as STACClient()."""
        return cls(landing_page_url, **kwargs)

    @property
    def landing_page(self) -> LandingPage:
        """Landing page snapshot taken at construction."""
        return self._landing_page

    def conforms_to(self, conformance_class: ConformanceClass) -> bool:
        """True if the landing page declares conformance_class."""
        return self._landing_page.conforms_to(conformance_class)

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    @log_exceptions(logger=logger, expected=(STACClientError,))
    def get_collections(self) -> List[Collection]:
        """
        List collections through the landing page "data" link.

        Returns:
            Collections in server order. Empty if no untyped or JSON "data" link
            is declared.

        Raises:
            TransportError: If the request fails
            ProtocolError: If the listing is not served as JSON
            DecodeError: If the body is not a collection listing
        """
        data_link = self._landing_page.get_data_link()
        if data_link is None:
            self.logger.info("No data link declared, no collections to list")
            return []

        self.logger.debug(f"Listing collections from {data_link.href}")
        response = self._http.get(data_link.href, ACCEPTS_JSON)
        collection_list = self._decode(response, JSON_MIME, CollectionList, data_link.href)
        return collection_list.collections

    # ------------------------------------------------------------------
    # Item search
    # ------------------------------------------------------------------

    def select_search_mode(self, mode: SearchMode) -> SearchMode:
        """
        Resolve AUTO to a concrete mode.

        POST when the landing page declares a POST search link, GET otherwise.
        Explicit modes are returned unchanged.
        """
        if mode != SearchMode.AUTO:
            return mode
        if self._landing_page.get_search_link(HttpMethod.POST) is not None:
            return SearchMode.POST
        return SearchMode.GET

    @log_exceptions(logger=logger, expected=(STACClientError,))
    def search(
        self,
        query: Optional[SearchQuery] = None,
        mode: Optional[SearchMode] = None
    ) -> FeatureCollection:
        """
        Search items, returning the first page of results.

        Args:
            query: Search filter (an empty query if omitted)
            mode: GET, POST or AUTO (config.default_search_mode if omitted)

        Returns:
            Decoded GeoJSON FeatureCollection. Any "next" link is left in
            its links, pages are not followed.

        Raises:
            CapabilityError: If item search, or the search link for an
                explicit mode, is not advertised (no request is sent)
            URLConstructionError: If the GET URL cannot be built
            TransportError: If the request fails
            ProtocolError: If the response is not GeoJSON
            DecodeError: If the body is not a feature collection
        """
        if query is None:
            query = SearchQuery()
        if mode is None:
            mode = self.config.default_search_mode

        if not self._item_search.matches(self._landing_page.conformance):
            # might want to look for OGC API - Features support instead
            raise CapabilityError(
                "The server does not support the item-search conformance class, cannot query it",
                capability=self._item_search.name
            )

        resolved = self.select_search_mode(mode)
        log = LoggerFactory.with_context(
            logger, replace(self._log_context, search_mode=resolved.value)
        )
        if resolved != mode:
            log.debug(f"Search mode {mode.value} resolved to {resolved.value}")

        if resolved == SearchMode.GET:
            if self._landing_page.get_search_link(HttpMethod.GET) is None:
                raise CapabilityError(
                    "Cannot find GeoJSON search GET link", capability="search:GET"
                )
            url = SearchGetBuilder(self._landing_page).to_get_url(query)
            log.info(f"Searching items with GET {url}")
            response = self._http.get(url, ACCEPTS_GEOJSON)
        else:
            url = self._landing_page.get_search_link(HttpMethod.POST)
            if url is None:
                raise CapabilityError(
                    "Cannot find GeoJSON search POST link", capability="search:POST"
                )
            body = json.dumps(query.to_post_body()).encode("utf-8")
            log.info(f"Searching items with POST {url}")
            response = self._http.post(url, body, JSON_MIME)

        return self._decode(response, GEOJSON_MIME, FeatureCollection, url)

    # ------------------------------------------------------------------
    # Response handling
    # ------------------------------------------------------------------

    def _check_content_type(self, response: HttpResponse, expected: str, url: str) -> None:
        """Raise ProtocolError unless the content type starts with expected."""
        mime = response.content_type
        if mime is None or not mime.startswith(expected):
            raise ProtocolError(expected=expected, actual=mime, url=url)

    def _decode(
        self,
        response: HttpResponse,
        expected: str,
        model: Type[ModelT],
        url: str
    ) -> ModelT:
        """Validate content type, then read and decode the body, always closing it."""
        with response:
            self._check_content_type(response, expected, url)
            body = response.read()
            try:
                return model.model_validate_json(body)
            except ValidationError as e:
                raise DecodeError(
                    f"Failed to decode {model.__name__} from {url}: {e}", url=url
                ) from e

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the transport. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._http.close()
        self.logger.debug("STAC client closed")

    @property
    def is_closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "STACClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"STACClient({self.landing_page_url!r})"
