# ============================================================================
# MODULE CONTEXT - STAC CLIENT HTTP TRANSPORT
# ============================================================================
# STATUS: Transport Layer - Injectable HTTP capability
# PURPOSE: HttpClient protocol, response wrapper and the default httpx transport
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: HttpClient, HttpResponse, HttpxHttpClient
# DEPENDENCIES: httpx (sync)
# ============================================================================
"""
STAC Client HTTP Transport.

The client never talks to the network directly. It uses an HttpClient:

    get(url, headers) -> HttpResponse
    post(url, body, content_type) -> HttpResponse
    close()

close() is part of the protocol. Transports that hold nothing implement it
as a no-op, so the client never inspects transport types at runtime.

HttpResponse bodies must be consumed inside a `with` block: the body is
released on every exit path, including decode failures.

    with http.get(url, {"Accept": "application/json"}) as response:
        data = response.read()

Connection handling, TLS, timeouts and retries belong to the transport.
HTTP status codes are not interpreted beyond logging; the client relies on
content type validation.
"""

from typing import Callable, Dict, Optional, Protocol

import httpx

from util_logger import ComponentType, LoggerFactory

from .errors import TransportError

logger = LoggerFactory.create_logger(ComponentType.TRANSPORT, "HttpxHttpClient")


class HttpResponse:
    """
    Response returned by an HttpClient.

    Attributes:
        content_type: Content-Type header value (None if absent)
        status_code: HTTP status code
        url: Final URL of the response
    """

    def __init__(
        self,
        content_type: Optional[str],
        reader: Callable[[], bytes],
        closer: Optional[Callable[[], None]] = None,
        status_code: int = 200,
        url: Optional[str] = None
    ):
        self.content_type = content_type
        self.status_code = status_code
        self.url = url
        self._reader = reader
        self._closer = closer
        self._closed = False

    @classmethod
    def from_bytes(
        cls,
        content: bytes,
        content_type: Optional[str],
        status_code: int = 200,
        url: Optional[str] = None
    ) -> "HttpResponse":
        """Build an in-memory response."""
        return cls(content_type, lambda: content, status_code=status_code, url=url)

    def read(self) -> bytes:
        """Read the whole body."""
        return self._reader()

    def close(self) -> None:
        """Release the underlying stream. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._closer is not None:
            self._closer()

    @property
    def is_closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "HttpResponse":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class HttpClient(Protocol):
    """HTTP capability consumed by the STAC client."""

    def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> HttpResponse:
        ...

    def post(self, url: str, body: bytes, content_type: str) -> HttpResponse:
        ...

    def close(self) -> None:
        ...


class HttpxHttpClient:
    """
    Sync httpx implementation of HttpClient.

    Responses are opened in streaming mode and wrapped so the body is read
    once and the connection returned to the pool on close.

    Usage:
        # Option 1: Let the transport create its own httpx.Client
        http = HttpxHttpClient(timeout=10.0)

        # Option 2: Wrap an existing client (closed with the transport by default)
        http = HttpxHttpClient(client=httpx.Client(transport=...))

        http.close()
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
        follow_redirects: bool = True,
        headers: Optional[Dict[str, str]] = None,
        owns_client: bool = True
    ):
        """
        Initialize httpx transport.

        Args:
            client: Existing httpx.Client to use. Created if not provided.
            timeout: Request timeout in seconds (ignored when client is given)
            follow_redirects: Follow redirects (ignored when client is given)
            headers: Default headers (ignored when client is given)
            owns_client: Close the wrapped client when this transport closes
        """
        if client is None:
            client = httpx.Client(
                timeout=httpx.Timeout(timeout),
                follow_redirects=follow_redirects,
                headers=headers
            )
        self._client = client
        self._owns_client = owns_client
        self._closed = False

    def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> HttpResponse:
        """Issue a GET request."""
        return self._send("GET", url, headers=headers)

    def post(self, url: str, body: bytes, content_type: str) -> HttpResponse:
        """Issue a POST request with body sent as content_type."""
        return self._send("POST", url, content=body, headers={"Content-Type": content_type})

    def close(self) -> None:
        """Close the httpx client if owned. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._owns_client and not self._client.is_closed:
            self._client.close()

    def _send(self, method: str, url: str, **kwargs) -> HttpResponse:
        logger.debug(f"{method} {url}")

        # InvalidURL is not an HTTPError
        try:
            request = self._client.build_request(method, url, **kwargs)
            response = self._client.send(request, stream=True)
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timed out: {method} {url}", url=url) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"Request failed: {method} {url}: {e}", url=url) from e

        if response.status_code >= 400:
            logger.warning(f"{method} {url} returned HTTP {response.status_code}")

        def read() -> bytes:
            try:
                return response.read()
            except httpx.HTTPError as e:
                raise TransportError(f"Failed reading response body from {url}: {e}", url=url) from e

        return HttpResponse(
            content_type=response.headers.get("content-type"),
            reader=read,
            closer=response.close,
            status_code=response.status_code,
            url=str(response.url)
        )
