"""Tests for tag color normalization."""

from kbview.colors import COLOR_TO_HEX, hex_to_color, normalize_tag, normalize_tags, tint_for
from kbview.models import RawTag, Tag, TintColor


def test_normalize_tag_maps_palette_color() -> None:
    """Test palette tokens map to their hex value and empty names default."""
    tag = normalize_tag(RawTag(name="", color="purple"))
    assert tag.name == "Untitled"
    assert tag.color == "#ab50cc"


def test_normalize_tag_passes_unknown_color_through() -> None:
    """Test tokens outside the palette are kept as-is."""
    tag = normalize_tag(RawTag(name="X", color="#123456"))
    assert tag.name == "X"
    assert tag.color == "#123456"


def test_normalize_tag_empty_color_defaults_to_grey() -> None:
    """Test an empty color token gets the default palette color."""
    assert normalize_tag(RawTag(id="t1", name="Idea", color="")).color == COLOR_TO_HEX["grey"]


def test_normalize_tag_keeps_identity() -> None:
    """Test id and key are carried over."""
    tag = normalize_tag(RawTag(id="t1", name="Done", color="lime", key="done"))
    assert tag == Tag(id="t1", name="Done", color="#5dd400", key="done")


def test_normalize_tags_keeps_order() -> None:
    """Test list normalization keeps input order."""
    tags = normalize_tags([RawTag(id="a", name="A", color="red"), RawTag(id="b", name="B", color="blue")])
    assert [tag.id for tag in tags] == ["a", "b"]
    assert [tag.color for tag in tags] == ["#f55522", "#3e58eb"]


def test_palette_has_ten_colors() -> None:
    """Test the palette contents."""
    assert list(COLOR_TO_HEX) == ["grey", "yellow", "orange", "red", "pink", "purple", "blue", "ice", "teal", "lime"]


def test_hex_to_color() -> None:
    """Test reverse lookup of palette names."""
    assert hex_to_color("#2aa7ee") == "ice"
    assert hex_to_color("#2AA7EE") == "ice"
    assert hex_to_color("#000000") is None


def test_tint_for() -> None:
    """Test tints use the resolved color in both appearances."""
    assert tint_for("teal") == TintColor(light="#0fc8ba", dark="#0fc8ba")
    assert tint_for("#abcdef") == TintColor(light="#abcdef", dark="#abcdef")
