"""Tests for the property format taxonomy."""

import pytest

from kbview.errors import UnsupportedFormat
from kbview.formats import NUMBER_ERROR, PropertyFormat, number_field_validations, parse_number
from kbview.icons import FORMAT_TINT, icon_for_format
from kbview.models import Mask, PropertyLink


@pytest.mark.parametrize("fmt", list(PropertyFormat))
def test_icon_for_every_format(fmt: PropertyFormat) -> None:
    """Test every format has a glyph with the neutral tint."""
    icon = icon_for_format(fmt)
    assert icon.source.startswith("icons/property/")
    assert icon.tint == FORMAT_TINT
    assert icon.mask == Mask.NONE


def test_icons_are_distinct_per_format() -> None:
    """Test each format maps to its own glyph."""
    sources = {icon_for_format(fmt).source for fmt in PropertyFormat}
    assert len(sources) == len(PropertyFormat)


def test_icon_for_format_accepts_string_values() -> None:
    """Test formats given as API strings are accepted."""
    assert icon_for_format("multi_select").source == "icons/property/multiSelect.svg"


@pytest.mark.parametrize("value", ["relation", "", None, "Text"])
def test_icon_for_unknown_format(value: object) -> None:
    """Test values outside the taxonomy raise UnsupportedFormat."""
    with pytest.raises(UnsupportedFormat) as exc_info:
        icon_for_format(value)
    assert exc_info.value.format == value


def test_parse_number() -> None:
    """Test numeric parsing of form values."""
    assert parse_number("42") == 42
    assert parse_number(" 3.5 ") == 3.5
    assert parse_number(7) == 7
    for bad in ("abc", "nan", "inf", True):
        with pytest.raises(ValueError):
            parse_number(bad)


def test_number_field_validations() -> None:
    """Test validators are only built for number properties."""
    defs = [
        PropertyLink(key="estimate", name="Estimate", format=PropertyFormat.NUMBER),
        PropertyLink(key="notes", name="Notes", format=PropertyFormat.TEXT),
        PropertyLink(key="count", name="Count", format="number"),
    ]
    validations = number_field_validations(defs)

    assert set(validations) == {"estimate", "count"}
    assert validations["estimate"]("12") is None
    assert validations["estimate"]("") is None
    assert validations["estimate"](None) is None
    assert validations["estimate"]("twelve") == NUMBER_ERROR


@pytest.mark.parametrize("value", ["1_000", "1_0.5", "_1"])
def test_parse_number_rejects_digit_separators(value: str) -> None:
    """Test Python-only digit separators are not accepted as numbers."""
    with pytest.raises(ValueError):
        parse_number(value)
    assert number_field_validations([PropertyLink(key="n", name="N", format="number")])["n"](value) == NUMBER_ERROR
