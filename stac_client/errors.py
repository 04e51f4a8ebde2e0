"""
STAC Client Error Taxonomy

Structured errors raised by the STAC client. All errors follow the code
format STAC-{category}{number}:

- STAC-TRN*: Transport errors (network / I/O failure)
- STAC-PRT*: Protocol errors (unexpected response content type)
- STAC-DEC*: Decode errors (body does not parse)
- STAC-CAP*: Capability errors (conformance class or link not advertised)
- STAC-URL*: URL construction errors (GET search URL cannot be built)

None of these are retried by the client. Callers branch on the type, e.g.
retry a TransportError but never a CapabilityError.

Date: 18 OCT 2026
"""

from typing import Any, Dict, Optional


class STACClientError(Exception):
    """
    Base class for all STAC client errors.

    Attributes:
        code: Structured error code (e.g. STAC-CAP001)
        message: Human-readable error message
        context: Extra key/value details about the failure
    """

    code: str = "STAC-000"

    _RESERVED_ATTRS = frozenset({"code", "message", "context", "args"})

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.context = context
        for key, value in context.items():
            if key not in self._RESERVED_ATTRS:
                setattr(self, key, value)
        super().__init__(f"[{self.code}] {message}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to JSON-serializable dict."""
        return {
            "code": self.code,
            "message": self.message,
            "context": {k: str(v) for k, v in self.context.items()},
        }


class TransportError(STACClientError):
    """Raised when the HTTP transport fails (connection, TLS, timeout, read)."""

    code = "STAC-TRN001"

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message, url=url)


class ProtocolError(STACClientError):
    """
    Raised when a response arrives with a content type other than expected.

    No partial decode is attempted once this is raised.
    """

    code = "STAC-PRT001"

    def __init__(self, expected: str, actual: Optional[str], url: Optional[str] = None):
        super().__init__(
            f"Was expecting a {expected} response, got a different mime type: {actual}",
            expected=expected,
            actual=actual,
            url=url,
        )


class DecodeError(STACClientError):
    """Raised when a body has the right content type but fails to parse."""

    code = "STAC-DEC001"

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message, url=url)


class CapabilityError(STACClientError):
    """
    Raised when the server does not advertise a required conformance class or link.

    Detected from the landing page, so it is raised before any request is sent.
    """

    code = "STAC-CAP001"

    def __init__(self, message: str, capability: Optional[str] = None):
        super().__init__(message, capability=capability)


class URLConstructionError(STACClientError):
    """Raised when a GET search URL cannot be built from a query."""

    code = "STAC-URL001"

    def __init__(self, message: str, parameter: Optional[str] = None):
        super().__init__(message, parameter=parameter)
