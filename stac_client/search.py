# ============================================================================
# MODULE CONTEXT - STAC ITEM SEARCH QUERY
# ============================================================================
# STATUS: Models - Item search query and GET URL builder
# PURPOSE: Structured search filter with query-string and JSON body encodings
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: SearchMode, SortBy, SearchQuery, SearchGetBuilder, format_datetime_interval
# INTERFACES: Pydantic BaseModel
# DEPENDENCIES: pydantic, httpx, shapely
# SOURCE: STAC API - Item Search v1.0.0 (GET and POST parameter tables)
# ============================================================================

"""
STAC Item Search Query

SearchQuery is an immutable value object built by the caller before
searching. It has two encodings:

- Query string (GET): compact strings, e.g. collections=a,b and bbox=1,2,3,4
- JSON body (POST): structured values, e.g. "bbox": [1, 2, 3, 4]

Fields left unset are omitted from both encodings. No defaults are
injected beyond what the caller set.

Datetime handling:
    A single value (string, date or datetime) is an instant, a two-element
    tuple is an interval where None is an open end (".."). Naive datetimes
    are taken as UTC.

Date: 18 OCT 2026
"""

import json
import math
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from shapely.geometry import mapping
from shapely.geometry.base import BaseGeometry

from util_logger import ComponentType, LoggerFactory

from .errors import URLConstructionError
from .models import HttpMethod, LandingPage

logger = LoggerFactory.create_logger(ComponentType.BUILDER, "SearchGetBuilder")

# Parameter names produced by the modelled fields (GET names)
RESERVED_PARAMETERS = frozenset({
    "collections", "ids", "bbox", "intersects", "datetime", "filter",
    "filter-lang", "sortby", "fields", "limit",
})


class SearchMode(Enum):
    """How a search request is sent."""
    GET = "GET"    # Forces GET (might fail if parameters are too long)
    POST = "POST"  # Forces POST (might fail if not supported by the server)
    AUTO = "AUTO"  # POST if the server declares it, GET otherwise


# ============================================================================
# DATETIME FORMATTING
# ============================================================================

def _format_instant(value: Union[str, date, datetime, None], end: bool = False) -> str:
    """Format one end of a datetime interval as RFC 3339 (".." when open)."""
    if value is None:
        return ".."
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
    if isinstance(value, date):
        bound = time(23, 59, 59) if end else time(0, 0, 0)
        return _format_instant(datetime.combine(value, bound, tzinfo=timezone.utc))
    text = str(value).strip()
    return text or ".."


def format_datetime_interval(value: Any) -> str:
    """
    Normalize a datetime filter into an ISO 8601 instant or interval string.

    Args:
        value: "2024-01-01T00:00:00Z/..", a date/datetime, or a (start, end) pair

    Returns:
        Instant ("2024-01-01T00:00:00Z") or interval ("start/end") string

    Raises:
        ValueError: If the value is empty or an interval with both ends open

    Example:
        >>> format_datetime_interval((date(2024, 1, 1), None))
        '2024-01-01T00:00:00Z/..'
    """
    if isinstance(value, (tuple, list)):
        if len(value) != 2:
            raise ValueError(f"datetime interval needs exactly 2 values, got {len(value)}")
        start, end = value
        if start is None and end is None:
            raise ValueError("datetime interval cannot be open at both ends")
        return f"{_format_instant(start)}/{_format_instant(end, end=True)}"

    if isinstance(value, (date, datetime)):
        return _format_instant(value)

    text = str(value).strip()
    if not text or text in ("..", "../.."):
        raise ValueError(f"Invalid datetime filter: {value!r}")
    return text


def _format_number(value: float) -> str:
    """Shortest exact representation, integers without a trailing .0"""
    if not math.isfinite(value):
        raise URLConstructionError(f"Cannot encode non-finite number {value}")
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def _format_scalar(name: str, value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_number(value)
    if isinstance(value, (str, date, datetime)):
        return value.isoformat() if isinstance(value, (date, datetime)) else value
    raise URLConstructionError(
        f"Search parameter '{name}' has a value of type {type(value).__name__} "
        f"that cannot be encoded as a query parameter",
        parameter=name
    )


# ============================================================================
# SEARCH QUERY MODEL
# ============================================================================

class SortBy(BaseModel):
    """One sort key of the STAC sort extension."""
    model_config = ConfigDict(frozen=True)

    field: str
    direction: str = Field(default="asc", pattern="^(asc|desc)$")

    @classmethod
    def parse(cls, value: str) -> "SortBy":
        """Parse the GET form: "+field", "-field" or "field"."""
        value = value.strip()
        if value.startswith("-"):
            return cls(field=value[1:], direction="desc")
        if value.startswith("+"):
            return cls(field=value[1:], direction="asc")
        return cls(field=value)

    def to_param(self) -> str:
        return ("-" if self.direction == "desc" else "+") + self.field


class SearchQuery(BaseModel):
    """
    STAC item search filter.

    Attributes:
        collections: Collection ids to search within
        ids: Item ids to return
        bbox: Bounding box (4 or 6 ordinates), exclusive with intersects
        intersects: GeoJSON geometry (or shapely geometry) to intersect
        datetime: Instant or interval, normalized to an ISO 8601 string
        filter: CQL2 filter (text string or JSON mapping)
        filter_lang: CQL2 language ("cql2-text" or "cql2-json")
        sortby: Sort keys
        fields: Fields to include ("field") or exclude ("-field")
        extra: Additional parameters passed through by name
        limit: Maximum number of items per page
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    collections: Optional[List[str]] = None
    ids: Optional[List[str]] = None
    bbox: Optional[List[float]] = None
    intersects: Optional[Dict[str, Any]] = None
    datetime: Optional[str] = None
    filter: Optional[Union[str, Dict[str, Any]]] = None
    filter_lang: Optional[str] = None
    sortby: Optional[List[SortBy]] = None
    fields: Optional[List[str]] = None
    extra: Optional[Dict[str, Any]] = None
    limit: Optional[int] = Field(default=None, ge=1)

    @field_validator("collections", "ids", "fields", mode="before")
    @classmethod
    def normalize_string_lists(cls, v):
        """Accept a single string or any iterable; sets are sorted for stable output."""
        if v is None:
            return v
        if isinstance(v, str):
            return [part for part in v.split(",") if part]
        if isinstance(v, (set, frozenset)):
            return sorted(v)
        return list(v)

    @field_validator("bbox")
    @classmethod
    def validate_bbox(cls, v):
        if v is None:
            return v
        if len(v) not in (4, 6):
            raise ValueError(f"bbox must have 4 or 6 ordinates, got {len(v)}")
        if not all(math.isfinite(o) for o in v):
            raise ValueError("bbox ordinates must be finite numbers")
        return v

    @field_validator("intersects", mode="before")
    @classmethod
    def geometry_to_geojson(cls, v):
        if isinstance(v, BaseGeometry):
            # shapely mapping() returns tuples, re-read as plain JSON
            return json.loads(json.dumps(mapping(v)))
        if v is not None and "type" not in v:
            raise ValueError("intersects must be a GeoJSON geometry with a 'type' member")
        return v

    @field_validator("datetime", mode="before")
    @classmethod
    def normalize_datetime(cls, v):
        if v is None:
            return v
        return format_datetime_interval(v)

    @field_validator("sortby", mode="before")
    @classmethod
    def parse_sortby(cls, v):
        if v is None:
            return v
        if isinstance(v, str):
            v = v.split(",")
        return [SortBy.parse(s) if isinstance(s, str) else s for s in v]

    @model_validator(mode="after")
    def check_exclusive_and_reserved(self):
        if self.bbox is not None and self.intersects is not None:
            raise ValueError("bbox and intersects cannot both be set")
        if self.extra:
            clashing = sorted(RESERVED_PARAMETERS.intersection(self.extra))
            if clashing:
                raise ValueError(
                    f"extra parameters clash with modelled fields: {', '.join(clashing)}"
                )
        return self

    def to_query_params(self) -> Dict[str, str]:
        """
        Encode the query as GET parameters, in a fixed order.

        Returns:
            Ordered mapping of parameter name to (unescaped) value

        Raises:
            URLConstructionError: If a value cannot be represented as a string
        """
        params: Dict[str, str] = {}
        if self.collections:
            params["collections"] = ",".join(self.collections)
        if self.ids:
            params["ids"] = ",".join(self.ids)
        if self.bbox is not None:
            params["bbox"] = ",".join(_format_number(o) for o in self.bbox)
        if self.intersects is not None:
            params["intersects"] = json.dumps(self.intersects, separators=(",", ":"))
        if self.datetime is not None:
            params["datetime"] = self.datetime
        if self.filter is not None:
            params["filter"] = (
                self.filter if isinstance(self.filter, str)
                else json.dumps(self.filter, separators=(",", ":"))
            )
        if self.filter_lang is not None:
            params["filter-lang"] = self.filter_lang
        if self.sortby:
            params["sortby"] = ",".join(s.to_param() for s in self.sortby)
        if self.fields:
            params["fields"] = ",".join(self.fields)
        if self.limit is not None:
            params["limit"] = str(self.limit)

        for name, value in (self.extra or {}).items():
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                params[name] = ",".join(_format_scalar(name, item) for item in value)
            else:
                params[name] = _format_scalar(name, value)
        return params

    def to_post_body(self) -> Dict[str, Any]:
        """
        Encode the query as a POST search JSON document.

        Extra parameters are merged at the top level.
        """
        body: Dict[str, Any] = {}
        if self.collections:
            body["collections"] = list(self.collections)
        if self.ids:
            body["ids"] = list(self.ids)
        if self.bbox is not None:
            body["bbox"] = list(self.bbox)
        if self.intersects is not None:
            body["intersects"] = self.intersects
        if self.datetime is not None:
            body["datetime"] = self.datetime
        if self.filter is not None:
            body["filter"] = self.filter
        if self.filter_lang is not None:
            body["filter-lang"] = self.filter_lang
        if self.sortby:
            body["sortby"] = [s.model_dump() for s in self.sortby]
        if self.fields:
            body["fields"] = {
                "include": [f.lstrip("+") for f in self.fields if not f.startswith("-")],
                "exclude": [f[1:] for f in self.fields if f.startswith("-")],
            }
        if self.limit is not None:
            body["limit"] = self.limit

        for name, value in (self.extra or {}).items():
            if value is not None:
                body.setdefault(name, value)
        return body


# ============================================================================
# GET URL BUILDER
# ============================================================================

class SearchGetBuilder:
    """Builds GET search URLs against the landing page's GET search link."""

    def __init__(self, landing_page: LandingPage):
        self.landing_page = landing_page

    def to_get_url(self, query: SearchQuery) -> str:
        """
        Build the GET search URL for a query.

        Query parameters already present on the search link are kept;
        search parameters are appended after them and percent-encoded.

        Args:
            query: Search filter

        Returns:
            Absolute search URL

        Raises:
            URLConstructionError: If no GET search link is declared or a
                value cannot be encoded
        """
        href = self.landing_page.get_search_link(HttpMethod.GET)
        if href is None:
            raise URLConstructionError("Cannot find GeoJSON search GET link")

        params = query.to_query_params()
        try:
            url = httpx.URL(href).copy_merge_params(params)
        except (httpx.InvalidURL, TypeError) as e:
            raise URLConstructionError(f"Failed to build the search query URL from {href}: {e}") from e

        logger.debug(f"Built GET search URL with {len(params)} parameters: {url}")
        return str(url)
