"""Tests for assembling property values on the write path."""

from datetime import date, datetime, timezone

import pytest

from kbview.errors import InvalidDateValue
from kbview.formats import PropertyFormat
from kbview.models import PropertyLink, PropertyLinkWithValue
from kbview.property_entries import (
    build_property_entries,
    create_form_errors,
    format_date,
    is_unset,
    parse_form_pairs,
)


def link(key: str, fmt: PropertyFormat | str) -> PropertyLink:
    return PropertyLink(key=key, name=key.title(), format=fmt)


def test_invalid_date_does_not_block_other_properties() -> None:
    """Test an unparsable date is skipped while valid properties are kept."""
    defs = [
        link("title", PropertyFormat.TEXT),
        link("due", PropertyFormat.DATE),
        link("estimate", PropertyFormat.NUMBER),
    ]
    values = {"title": "Report", "due": "next tuesday-ish", "estimate": "3"}

    entries = build_property_entries(values, defs)

    assert entries == [
        PropertyLinkWithValue(key="title", text="Report"),
        PropertyLinkWithValue(key="estimate", number=3),
    ]


def test_invalid_number_is_skipped() -> None:
    """Test an unparsable number is skipped with the rest kept."""
    defs = [link("estimate", PropertyFormat.NUMBER), link("done", PropertyFormat.CHECKBOX)]
    entries = build_property_entries({"estimate": "lots", "done": True}, defs)
    assert entries == [PropertyLinkWithValue(key="done", checkbox=True)]


@pytest.mark.parametrize("value", [None, "", False, []])
def test_unset_values_are_omitted(value: object) -> None:
    """Test empty, false and null values produce no entry."""
    assert build_property_entries({"notes": value}, [link("notes", PropertyFormat.TEXT)]) == []


def test_missing_values_are_omitted() -> None:
    """Test definitions without a form value produce no entry."""
    assert build_property_entries({}, [link("notes", PropertyFormat.TEXT)]) == []


def test_zero_is_a_value() -> None:
    """Test zero is submitted rather than treated as unset."""
    entries = build_property_entries({"count": 0}, [link("count", PropertyFormat.NUMBER)])
    assert entries == [PropertyLinkWithValue(key="count", number=0)]


def test_each_format_fills_its_slot() -> None:
    """Test every format produces exactly one typed slot."""
    defs = [
        link("text", PropertyFormat.TEXT),
        link("number", PropertyFormat.NUMBER),
        link("select", PropertyFormat.SELECT),
        link("multi", PropertyFormat.MULTI_SELECT),
        link("date", PropertyFormat.DATE),
        link("files", PropertyFormat.FILES),
        link("checkbox", PropertyFormat.CHECKBOX),
        link("url", PropertyFormat.URL),
        link("email", PropertyFormat.EMAIL),
        link("phone", PropertyFormat.PHONE),
        link("objects", PropertyFormat.OBJECTS),
    ]
    values = {
        "text": "hello",
        "number": "2.5",
        "select": "tag-1",
        "multi": ["tag-1", "tag-2"],
        "date": datetime(2024, 5, 1, 10, 30, tzinfo=timezone.utc),
        "files": "file-1",
        "checkbox": True,
        "url": "https://example.com",
        "email": "a@example.com",
        "phone": "+100",
        "objects": ("obj-1", "obj-2"),
    }

    payloads = [entry.to_payload() for entry in build_property_entries(values, defs)]

    assert payloads == [
        {"key": "text", "text": "hello"},
        {"key": "number", "number": 2.5},
        {"key": "select", "select": "tag-1"},
        {"key": "multi", "multi_select": ["tag-1", "tag-2"]},
        {"key": "date", "date": "2024-05-01T10:30:00+00:00"},
        {"key": "files", "files": ["file-1"]},
        {"key": "checkbox", "checkbox": True},
        {"key": "url", "url": "https://example.com"},
        {"key": "email", "email": "a@example.com"},
        {"key": "phone", "phone": "+100"},
        {"key": "objects", "objects": ["obj-1", "obj-2"]},
    ]


def test_unsupported_format_is_skipped() -> None:
    """Test an unknown format is skipped on the write path."""
    defs = [link("rel", "relation"), link("notes", PropertyFormat.TEXT)]
    entries = build_property_entries({"rel": "x", "notes": "kept"}, defs)
    assert entries == [PropertyLinkWithValue(key="notes", text="kept")]


def test_bundled_keys_and_source() -> None:
    """Test bundled definitions are skipped and description/source appended."""
    defs = [
        link("description", PropertyFormat.TEXT),
        link("created_date", PropertyFormat.DATE),
        link("source", PropertyFormat.URL),
    ]
    values = {"description": "About", "created_date": "2024-01-01", "source": "https://example.com"}

    entries = build_property_entries(values, defs)

    assert entries == [
        PropertyLinkWithValue(key="description", text="About"),
        PropertyLinkWithValue(key="source", url="https://example.com"),
    ]


def test_format_date_variants() -> None:
    """Test accepted date inputs."""
    assert format_date("d", "2024-05-01T10:30:00Z") == "2024-05-01T10:30:00+00:00"
    assert format_date("d", "2024-05-01T10:30:00+02:00") == "2024-05-01T10:30:00+02:00"
    assert format_date("d", date(2024, 5, 1)).startswith("2024-05-01T00:00:00")
    assert format_date("d", "2024-05-01").startswith("2024-05-01T00:00:00")


def test_format_date_invalid() -> None:
    """Test unparsable dates raise InvalidDateValue."""
    with pytest.raises(InvalidDateValue) as exc_info:
        format_date("due", "soon")
    assert exc_info.value.key == "due"


def test_is_unset() -> None:
    """Test the not-set predicate."""
    assert is_unset(None)
    assert is_unset("")
    assert is_unset(False)
    assert is_unset(())
    assert not is_unset(0)
    assert not is_unset("0")
    assert not is_unset(True)


def test_parse_form_pairs() -> None:
    """Test command line pairs become form values shaped by property format."""
    defs = [
        link("title", PropertyFormat.TEXT),
        link("tags", PropertyFormat.MULTI_SELECT),
        link("done", PropertyFormat.CHECKBOX),
        link("links", PropertyFormat.OBJECTS),
        link("formula", "formula"),
    ]
    pairs = ["title = a=b", "tags=red, blue,", "done=Yes", "links=o1", "formula=x"]

    assert parse_form_pairs(pairs, defs) == {
        "title": "a=b",
        "tags": ["red", "blue"],
        "done": True,
        "links": ["o1"],
        "formula": "x",
    }
    assert parse_form_pairs(["done=no"], defs) == {"done": False}


def test_parse_form_pairs_errors() -> None:
    """Test malformed pairs and unknown keys are rejected."""
    defs = [link("title", PropertyFormat.TEXT)]
    with pytest.raises(ValueError, match="KEY=VALUE"):
        parse_form_pairs(["title"], defs)
    with pytest.raises(ValueError, match="Unknown property 'owner'"):
        parse_form_pairs(["owner=me"], defs)


def test_create_form_errors() -> None:
    """Test the create form rules for name, icon, source and numbers."""
    defs = [link("estimate", PropertyFormat.NUMBER)]

    assert create_form_errors("Plan", "📄", "page", {"estimate": "3"}, defs) == {}
    assert create_form_errors("  ", "x", "page", {"estimate": "lots"}, defs) == {
        "name": "Name is required",
        "icon": "Icon must be single emoji",
        "estimate": "Value must be a valid number",
    }


@pytest.mark.parametrize("type_key", ["note", "ot-note", "bookmark"])
def test_create_form_name_optional(type_key: str) -> None:
    """Test notes and bookmarks can be created without a name."""
    errors = create_form_errors("", "", type_key, {"source": "https://example.com"}, [])
    assert errors == {}


def test_create_form_bookmark_requires_source() -> None:
    """Test bookmarks need a source URL."""
    assert create_form_errors("", "", "ot-bookmark", {"source": " "}, []) == {
        "source": "Source is required for Bookmarks"
    }
