"""Unit tests for STAC response models.

Property-based tests use hypothesis for link lookup invariants.
"""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from stac_client.conformance import CORE, ITEM_SEARCH
from stac_client.models import (
    Collection,
    Feature,
    FeatureCollection,
    HttpMethod,
    LandingPage,
    Link,
)

link_strategy = st.builds(
    Link,
    rel=st.sampled_from(["search", "data", "self", "root", "conformance"]),
    href=st.sampled_from(["https://host/search", "https://host/a", "https://other/b"]),
    type=st.sampled_from([None, "", "application/json", "application/geo+json"]),
    method=st.sampled_from([None, "GET", "POST", "post", "Post", "PUT"]),
)


class TestLink:
    """Tests for Link decoding."""

    def test_method_defaults_to_get(self) -> None:
        link = Link.model_validate({"rel": "search", "href": "https://host/search"})

        assert link.method == "GET"
        assert link.uses(HttpMethod.GET)
        assert not link.uses(HttpMethod.POST)

    def test_method_match_is_case_sensitive(self) -> None:
        link = Link(rel="search", href="https://host/search", method="post")

        assert not link.uses(HttpMethod.POST)

    def test_link_is_immutable(self) -> None:
        link = Link(rel="self", href="https://host/")

        with pytest.raises(ValidationError):
            link.href = "https://elsewhere/"

    def test_post_link_extensions_decode(self) -> None:
        link = Link.model_validate({
            "rel": "next", "href": "https://host/search", "method": "POST",
            "body": {"token": "abc"}, "merge": True, "headers": {"X-Page": "2"},
        })

        assert link.body == {"token": "abc"}
        assert link.merge is True


class TestLandingPage:
    """Tests for LandingPage lookups."""

    def test_accepts_conforms_to_and_conformance_names(self) -> None:
        by_stac_name = LandingPage.model_validate({"conformsTo": ["a"], "links": []})
        by_short_name = LandingPage.model_validate({"conformance": ["a"], "links": []})

        assert by_stac_name.conformance == by_short_name.conformance == ["a"]

    def test_missing_fields_decode_to_empty(self) -> None:
        page = LandingPage.model_validate({})

        assert page.conformance == []
        assert page.links == []
        assert page.title is None

    def test_get_search_link_returns_first_in_declaration_order(self) -> None:
        page = LandingPage(links=[
            Link(rel="search", href="https://host/first", method="POST"),
            Link(rel="search", href="https://host/second", method="POST"),
            Link(rel="search", href="https://host/get"),
        ])

        assert page.get_search_link(HttpMethod.POST) == "https://host/first"
        assert page.get_search_link(HttpMethod.GET) == "https://host/get"
        assert page.get_search_link(HttpMethod.PUT) is None

    @given(st.lists(link_strategy, max_size=8))
    def test_no_post_search_link_means_absent(self, links) -> None:
        links = [l for l in links if not (l.rel == "search" and l.method == "POST")]
        page = LandingPage(links=links)

        assert page.get_search_link(HttpMethod.POST) is None

    @given(st.lists(link_strategy, max_size=8))
    def test_search_link_is_first_matching_href(self, links) -> None:
        page = LandingPage(links=links)
        expected = next(
            (l.href for l in links if l.rel == "search" and (l.method or "GET") == "GET"),
            None,
        )

        assert page.get_search_link(HttpMethod.GET) == expected

    def test_data_link_requires_empty_or_json_type(self) -> None:
        page = LandingPage(links=[
            Link(rel="data", href="https://host/html", type="text/html"),
            Link(rel="data", href="https://host/untyped", type=""),
            Link(rel="data", href="https://host/json", type="application/json"),
        ])

        assert page.get_data_link().href == "https://host/untyped"

    def test_find_link_without_type_filter(self) -> None:
        page = LandingPage(links=[Link(rel="self", href="https://host/", type="text/html")])

        assert page.find_link("self").href == "https://host/"
        assert page.find_link("self", media_types=["application/json"]) is None
        assert page.find_link("root") is None

    def test_conforms_to(self) -> None:
        page = LandingPage(conformance=[ITEM_SEARCH.uris[0]])

        assert page.conforms_to(ITEM_SEARCH)
        assert not page.conforms_to(CORE)


class TestFeatures:
    """Tests for GeoJSON decoding."""

    def test_feature_shape(self) -> None:
        feature = Feature.model_validate({
            "type": "Feature",
            "geometry": {
                "type": "Polygon",
                "coordinates": [[[0, 0], [2, 0], [2, 1], [0, 1], [0, 0]]],
            },
            "properties": {},
        })

        assert feature.shape.bounds == (0.0, 0.0, 2.0, 1.0)

    def test_null_geometry_and_properties(self) -> None:
        feature = Feature.model_validate({"type": "Feature", "geometry": None, "properties": None})

        assert feature.shape is None
        assert feature.properties is None

    def test_feature_collection_keeps_unknown_members(self) -> None:
        fc = FeatureCollection.model_validate({
            "type": "FeatureCollection",
            "features": [],
            "context": {"returned": 0},
            "x-extra": 1,
        })

        assert fc.context == {"returned": 0}
        assert fc.model_extra["x-extra"] == 1

    @pytest.mark.parametrize("doc", [
        {"hello": "world"},
        {"features": []},
        {"type": "Feature", "features": []},
        {"type": "FeatureCollection"},
    ])
    def test_feature_collection_requires_geojson_shape(self, doc) -> None:
        with pytest.raises(ValidationError):
            FeatureCollection.model_validate(doc)

    def test_feature_requires_type(self) -> None:
        with pytest.raises(ValidationError):
            Feature.model_validate({"geometry": None, "properties": {}})

    @pytest.mark.parametrize("geometry", [
        {"type": "Bogus", "coordinates": [1]},
        {"type": "Point"},
        {"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]},
    ])
    def test_invalid_geometry_rejected_at_decode(self, geometry) -> None:
        with pytest.raises(ValidationError, match="Invalid GeoJSON geometry"):
            Feature.model_validate({"type": "Feature", "geometry": geometry, "properties": {}})

    def test_collection_requires_id(self) -> None:
        with pytest.raises(ValidationError):
            Collection.model_validate({"title": "untitled"})
