"""Tests for icon resolution."""

from unittest.mock import MagicMock

import pytest

from kbview.colors import DEFAULT_TINT
from kbview.errors import IconResolutionFailure, UnsupportedFormat
from kbview.formats import PropertyFormat
from kbview.icons import MEMBER_GLYPH, IconContext, default_icon, resolve_icon
from kbview.models import ConcreteIcon, EmojiIcon, EntityKind, FileIcon, Mask, NoIcon, TintColor

OBJECT = IconContext(EntityKind.OBJECT)
MEMBER = IconContext(EntityKind.MEMBER)


def test_emoji_icon() -> None:
    """Test emojis are used as-is, without mask or tint."""
    icon = resolve_icon(EmojiIcon("📄"), OBJECT)
    assert icon == ConcreteIcon(source="📄", mask=Mask.NONE, tint=None)


def test_file_icon_resolved() -> None:
    """Test file icons use the resolver's result."""
    resolver = MagicMock(return_value="http://gateway/image/file-1?width=64")
    icon = resolve_icon(FileIcon("file-1"), OBJECT, resolver)

    assert icon.source == "http://gateway/image/file-1?width=64"
    assert icon.mask == Mask.ROUNDED_RECTANGLE
    resolver.assert_called_once_with("file-1")


@pytest.mark.parametrize("error", [IconResolutionFailure("missing"), ConnectionError("down"), KeyError("x")])
def test_file_icon_resolution_failure_falls_back(error: Exception) -> None:
    """Test any resolver failure falls back to the default glyph."""
    resolver = MagicMock(side_effect=error)
    icon = resolve_icon(FileIcon("file-1"), OBJECT, resolver)
    assert icon == default_icon(OBJECT)
    assert icon.tint == DEFAULT_TINT


def test_file_icon_empty_result_falls_back() -> None:
    """Test an empty resolver result counts as a failure."""
    icon = resolve_icon(FileIcon("file-1"), OBJECT, lambda file_id: "")
    assert icon == default_icon(OBJECT)


def test_file_icon_without_resolver_falls_back() -> None:
    """Test file icons without a resolver use the default glyph."""
    assert resolve_icon(FileIcon("file-1"), OBJECT) == default_icon(OBJECT)


@pytest.mark.parametrize(
    ("context", "source"),
    [
        (IconContext(EntityKind.OBJECT), "icons/type/document.svg"),
        (IconContext(EntityKind.OBJECT, layout="todo"), "icons/type/checkbox.svg"),
        (IconContext(EntityKind.OBJECT, layout="profile"), MEMBER_GLYPH),
        (IconContext(EntityKind.OBJECT, layout="collection"), "icons/type/layers.svg"),
        (IconContext(EntityKind.TYPE), "icons/type/document.svg"),
        (IconContext(EntityKind.MEMBER), MEMBER_GLYPH),
        (IconContext(EntityKind.SPACE), "icons/type/space.svg"),
        (IconContext(EntityKind.PROPERTY, format=PropertyFormat.DATE), "icons/property/date.svg"),
    ],
)
def test_no_icon_uses_kind_default(context: IconContext, source: str) -> None:
    """Test missing icons resolve to the kind-specific glyph deterministically."""
    first = resolve_icon(NoIcon(), context)
    second = resolve_icon(NoIcon(), context)
    assert first.source == source
    assert first == second


def test_none_raw_icon_is_tolerated() -> None:
    """Test an absent icon behaves like NoIcon."""
    assert resolve_icon(None, OBJECT) == default_icon(OBJECT)


def test_member_icons_are_circular() -> None:
    """Test member icons are always masked as circles."""
    fallback = resolve_icon(NoIcon(), MEMBER)
    assert fallback.mask == Mask.CIRCLE
    assert fallback.tint == TintColor(light="#b6b6b6", dark="#b6b6b6")

    file_icon = resolve_icon(FileIcon("avatar"), MEMBER, lambda file_id: f"http://gw/{file_id}")
    assert file_icon.mask == Mask.CIRCLE


@pytest.mark.parametrize("layout", ["participant", "profile"])
def test_circular_layouts(layout: str) -> None:
    """Test person-like layouts get a circular mask."""
    icon = resolve_icon(FileIcon("f"), IconContext(EntityKind.OBJECT, layout=layout), lambda file_id: "http://gw/f")
    assert icon.mask == Mask.CIRCLE


def test_property_context_without_format() -> None:
    """Test property icons need a format."""
    with pytest.raises(UnsupportedFormat):
        resolve_icon(NoIcon(), IconContext(EntityKind.PROPERTY))
