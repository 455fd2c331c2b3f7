"""Unit tests for resource descriptions and property type inference."""

from __future__ import annotations

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from mummy.models.description import (
    EMPTY_DESCRIPTION,
    MetadataParseError,
    ResourceDescription,
    parse_property_value,
    to_handle,
)


class TestHandles:

    def test_kebab_case_becomes_camel_case(self):
        assert to_handle("published-on") == "publishedOn"
        assert to_handle("content-type") == "contentType"

    def test_plain_name_is_unchanged(self):
        assert to_handle("title") == "title"
        assert to_handle("og:type") == "og:type"


class TestTypeInference:

    def test_on_suffix_parses_date(self):
        assert parse_property_value("publishedOn", "2020-01-02") == date(2020, 1, 2)

    def test_at_suffix_parses_datetime(self):
        assert parse_property_value("createdAt", "2020-01-02T03:04:05") == datetime(
            2020, 1, 2, 3, 4, 5
        )

    def test_order_parses_int(self):
        assert parse_property_value("order", " 3 ") == 3

    def test_unmatched_name_stays_string(self):
        assert parse_property_value("color", "2020-01-02") == "2020-01-02"

    def test_typed_values_pass_through(self):
        value = date(2021, 5, 6)
        assert parse_property_value("publishedOn", value) is value

    def test_bad_date_raises_metadata_parse_error(self):
        with pytest.raises(MetadataParseError) as exc_info:
            parse_property_value("publishedOn", "yesterday")
        assert exc_info.value.name == "publishedOn"
        assert exc_info.value.value == "yesterday"
        assert "publishedOn" in str(exc_info.value)

    def test_bad_order_raises_metadata_parse_error(self):
        with pytest.raises(MetadataParseError):
            parse_property_value("order", "first")


class TestResourceDescription:

    def test_from_properties_fills_typed_fields(self):
        description = ResourceDescription.from_properties(
            [("title", "Hello"), ("published-on", "2020-01-02"), ("order", "2")]
        )
        assert description.title == "Hello"
        assert description.published_on == date(2020, 1, 2)
        assert description.order == 2

    def test_first_property_wins(self):
        description = ResourceDescription.from_properties(
            [("title", "First"), ("title", "Second"), ("tag", "a"), ("tag", "b")]
        )
        assert description.title == "First"
        assert description.properties["tag"] == "a"

    def test_typed_values_fit_their_fields(self):
        description = ResourceDescription.from_properties(
            [
                ("title", 1984),
                ("artist", 3.5),
                ("published-on", datetime(2020, 1, 2, 10, 30)),
                ("created-at", date(2021, 5, 6)),
                ("template", 7),
            ]
        )
        assert description.title == "1984"
        assert description.artist == "3.5"
        assert description.published_on == date(2020, 1, 2)
        assert description.created_at == datetime(2021, 5, 6)
        assert description.properties["template"] == 7

    def test_ad_hoc_properties_are_inferred_by_handle(self):
        description = ResourceDescription.from_properties([("updated-on", "2021-05-06")])
        assert description.properties["updatedOn"] == date(2021, 5, 6)

    def test_from_properties_propagates_parse_errors(self):
        with pytest.raises(MetadataParseError):
            ResourceDescription.from_properties([("published-on", "soon")])

    def test_find_and_has(self):
        description = ResourceDescription(title="T", properties={"color": "red"})
        assert description.find("title") == "T"
        assert description.find("color") == "red"
        assert description.find("artist") is None
        assert description.has("color")
        assert not description.has("missing")

    def test_with_properties_returns_changed_copy(self):
        base = ResourceDescription(title="T")
        changed = base.with_properties(aspect="preview")
        assert changed.aspect == "preview"
        assert changed.title == "T"
        assert base.aspect is None

    def test_frozen(self):
        description = ResourceDescription(title="T")
        with pytest.raises(ValidationError):
            description.title = "Other"

    def test_empty(self):
        assert EMPTY_DESCRIPTION.is_empty
        assert ResourceDescription().is_empty
        assert not ResourceDescription(title="T").is_empty
