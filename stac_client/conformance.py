"""
STAC API Conformance Classes

Known conformance classes and the matcher used to gate client operations.

STAC has published more than one URI per capability across releases
(release candidates and betas are still widely deployed), so each class
lists every accepted form. Matching is exact string equality against the
URIs the server declares; no normalization is applied.

Date: 18 OCT 2026
"""

from dataclasses import dataclass
from typing import Iterable, Tuple


@dataclass(frozen=True)
class ConformanceClass:
    """A capability identified by one or more acceptable conformance URIs."""
    name: str
    uris: Tuple[str, ...]

    def matches(self, declared: Iterable[str]) -> bool:
        """True if declared contains at least one acceptable URI."""
        return not set(self.uris).isdisjoint(declared)


def _stac_api_uris(suffix: str) -> Tuple[str, ...]:
    """Canonical v1.0.0 URI followed by the historical pre-release forms."""
    return tuple(
        f"https://api.stacspec.org/{version}/{suffix}"
        for version in ("v1.0.0", "v1.0.0-rc.3", "v1.0.0-rc.2", "v1.0.0-rc.1",
                        "v1.0.0-beta.5", "v1.0.0-beta.4", "v1.0.0-beta.3",
                        "v1.0.0-beta.2", "v1.0.0-beta.1")
    )


CORE = ConformanceClass("core", _stac_api_uris("core"))
ITEM_SEARCH = ConformanceClass("item-search", _stac_api_uris("item-search"))
COLLECTIONS = ConformanceClass("collections", _stac_api_uris("collections"))
FEATURES = ConformanceClass("ogcapi-features", _stac_api_uris("ogcapi-features"))
FILTER = ConformanceClass("filter", _stac_api_uris("item-search#filter"))
SORT = ConformanceClass("sort", _stac_api_uris("item-search#sort"))
FIELDS = ConformanceClass("fields", _stac_api_uris("item-search#fields"))
QUERY = ConformanceClass("query", _stac_api_uris("item-search#query"))


def matches(required: ConformanceClass, declared: Iterable[str]) -> bool:
    """
    Test whether a required capability is among the declared conformance URIs.

    Args:
        required: Conformance class to look for
        declared: Conformance URIs advertised by the server

    Returns:
        True if any acceptable URI of required is declared
    """
    return required.matches(declared)
