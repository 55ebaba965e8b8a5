"""Tag color palette and tag normalization."""

from collections.abc import Iterable

from kbview.models import UNTITLED, RawTag, Tag, TintColor

COLOR_TO_HEX: dict[str, str] = {
    "grey": "#b6b6b6",
    "yellow": "#ecd91b",
    "orange": "#ffb522",
    "red": "#f55522",
    "pink": "#e51ca0",
    "purple": "#ab50cc",
    "blue": "#3e58eb",
    "ice": "#2aa7ee",
    "teal": "#0fc8ba",
    "lime": "#5dd400",
}

HEX_TO_COLOR: dict[str, str] = {hex_value: name for name, hex_value in COLOR_TO_HEX.items()}

DEFAULT_TINT = TintColor(light="black", dark="white")
DEFAULT_TAG_COLOR = "grey"


def color_hex(color: str) -> str:
    """Map a palette token to its hex value, passing unknown tokens through."""
    return COLOR_TO_HEX.get(color, color)


def hex_to_color(hex_value: str) -> str | None:
    """Return the palette name for a hex value, or None if it is not in the palette."""
    return HEX_TO_COLOR.get(hex_value.lower())


def tint_for(color: str) -> TintColor:
    """Build a tint using the same resolved color for both appearances."""
    resolved = color_hex(color)
    return TintColor(light=resolved, dark=resolved)


def normalize_tag(raw_tag: RawTag) -> Tag:
    return Tag(
        id=raw_tag.id,
        name=raw_tag.name or UNTITLED,
        color=color_hex(raw_tag.color or DEFAULT_TAG_COLOR),
        key=raw_tag.key,
    )


def normalize_tags(raw_tags: Iterable[RawTag]) -> list[Tag]:
    return [normalize_tag(tag) for tag in raw_tags]
