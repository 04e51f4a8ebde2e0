# ============================================================================
# MODULE CONTEXT - STAC CLIENT MODELS
# ============================================================================
# STATUS: Models - STAC API response DTOs
# PURPOSE: Typed landing page, link, collection and feature collection models
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: HttpMethod, Link, LandingPage, Collection, CollectionList, Feature, FeatureCollection
# INTERFACES: Pydantic BaseModel
# DEPENDENCIES: pydantic, shapely
# SOURCE: STAC API v1.0.0 specification, GeoJSON RFC 7946
# VALIDATION: Pydantic v2 validation, unknown fields tolerated
# ============================================================================

"""
STAC API Pydantic Models

Decoded representations of the documents a STAC API serves. Every model
tolerates fields it does not declare (servers add extension fields freely)
and decodes missing optional fields to None rather than failing.

Landing pages, links and collections are frozen once decoded: the client
holds one landing page snapshot for its lifetime and never synthesizes
links or conformance classes.

References:
- STAC API v1.0.0: https://github.com/radiantearth/stac-api-spec
- GeoJSON RFC 7946: https://tools.ietf.org/html/rfc7946

Date: 18 OCT 2026
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from shapely.errors import ShapelyError
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

from .conformance import ConformanceClass

JSON_MIME = "application/json"
GEOJSON_MIME = "application/geo+json"


class HttpMethod(str, Enum):
    """HTTP methods a link may declare."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class Link(BaseModel):
    """
    STAC API Link object (RFC 8288 Web Linking plus STAC link extensions).

    Several links may share a relation, e.g. one "search" link per method.
    The method is kept exactly as advertised and compared case-sensitively.
    """
    model_config = ConfigDict(extra="allow", frozen=True)

    rel: str = Field(
        description="Link relation type (self, search, data, next, etc.)"
    )
    href: str = Field(
        description="URL of the linked resource"
    )
    type: Optional[str] = Field(
        default=None,
        description="Media type of the linked resource"
    )
    method: Optional[str] = Field(
        default=HttpMethod.GET.value,
        description="HTTP method to use when following the link"
    )
    title: Optional[str] = Field(
        default=None,
        description="Human-readable title for the link"
    )
    headers: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Headers to send when following the link"
    )
    body: Optional[Dict[str, Any]] = Field(
        default=None,
        description="JSON body to send when following a POST link"
    )
    merge: Optional[bool] = Field(
        default=False,
        description="Whether body should be merged into the current request body"
    )

    def uses(self, method: HttpMethod) -> bool:
        """True if this link declares the given method (exact match)."""
        return (self.method or HttpMethod.GET.value) == method.value

    def has_type(self, media_types: Iterable[Optional[str]]) -> bool:
        """
        True if the link type is one of media_types.

        An undeclared type matches when None or "" is in media_types.
        """
        accepted = set(media_types)
        if not self.type:
            return None in accepted or "" in accepted
        return self.type in accepted


class LandingPage(BaseModel):
    """
    STAC API Landing Page (root endpoint).

    Holds the declared conformance classes and the ordered link list.
    """
    model_config = ConfigDict(extra="allow", frozen=True)

    conformance: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("conformsTo", "conformance"),
        description="Conformance class URIs declared by the server"
    )
    links: List[Link] = Field(
        default_factory=list,
        description="Links to API resources in declaration order"
    )
    id: Optional[str] = None
    type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    stac_version: Optional[str] = None

    def find_link(
        self,
        rel: str,
        media_types: Optional[Iterable[Optional[str]]] = None
    ) -> Optional[Link]:
        """
        Return the first link with the given relation.

        Args:
            rel: Link relation to look for
            media_types: Optional accepted media types (None/"" accepts untyped links)

        Returns:
            First matching Link in declaration order, or None
        """
        accepted = list(media_types) if media_types is not None else None
        for link in self.links:
            if link.rel != rel:
                continue
            if accepted is None or link.has_type(accepted):
                return link
        return None

    def get_search_link(self, method: HttpMethod) -> Optional[str]:
        """
        Return the href of the first "search" link declaring method.

        Absence is not an error: callers treat None as a capability signal.
        """
        for link in self.links:
            if link.rel == "search" and link.uses(method):
                return link.href
        return None

    def get_data_link(self) -> Optional[Link]:
        """Return the first "data" link that is untyped or JSON."""
        return self.find_link("data", media_types=(None, JSON_MIME))

    def conforms_to(self, conformance_class: ConformanceClass) -> bool:
        """True if the server declares any URI of conformance_class."""
        return conformance_class.matches(self.conformance)


class Collection(BaseModel):
    """
    STAC Collection record.

    Decoded verbatim; only identifying fields are declared, everything else
    is kept as extra fields.
    """
    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    license: Optional[str] = None
    extent: Optional[Dict[str, Any]] = None
    links: List[Link] = Field(default_factory=list)


class CollectionList(BaseModel):
    """Collections listing as served by the landing page "data" link."""
    model_config = ConfigDict(extra="allow")

    collections: List[Collection] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)


class Feature(BaseModel):
    """GeoJSON Feature (a STAC Item when returned by item search)."""
    model_config = ConfigDict(extra="allow")

    type: Literal["Feature"]
    id: Optional[str] = None
    geometry: Optional[Dict[str, Any]] = None
    bbox: Optional[List[float]] = None
    properties: Optional[Dict[str, Any]] = Field(default_factory=dict)
    collection: Optional[str] = None
    assets: Optional[Dict[str, Any]] = Field(default_factory=dict)
    links: List[Link] = Field(default_factory=list)

    @field_validator("geometry")
    @classmethod
    def check_geometry(cls, v: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """Reject geometries shapely cannot build."""
        if v is None:
            return v
        try:
            shape(v)
        except (ShapelyError, ValueError, TypeError, KeyError, IndexError, AttributeError) as e:
            raise ValueError(f"Invalid GeoJSON geometry: {e}") from e
        return v

    @property
    def shape(self) -> Optional[BaseGeometry]:
        """Feature geometry as a shapely geometry (None for null geometry)."""
        if self.geometry is None:
            return None
        return shape(self.geometry)


class FeatureCollection(BaseModel):
    """
    GeoJSON FeatureCollection returned by item search.

    Only the first page is decoded; a "next" link, if any, is left in links
    for the caller to follow.
    """
    model_config = ConfigDict(extra="allow")

    type: Literal["FeatureCollection"]
    features: List[Feature]
    links: List[Link] = Field(default_factory=list)
    numberMatched: Optional[int] = None
    numberReturned: Optional[int] = None
    context: Optional[Dict[str, Any]] = None
