"""Icon resolution for raw entity icons."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

from kbview.colors import DEFAULT_TINT, tint_for
from kbview.errors import UnsupportedFormat
from kbview.formats import PropertyFormat
from kbview.models import ConcreteIcon, EmojiIcon, EntityKind, FileIcon, Mask, RawIcon, TintColor

logger = structlog.get_logger()

FileResolver = Callable[[str], str]

FORMAT_TINT = TintColor(light="grey", dark="grey")
MEMBER_GLYPH = "icons/type/person-circle.svg"
MEMBER_COLOR = "grey"

CIRCULAR_LAYOUTS = frozenset({"participant", "profile"})

KIND_GLYPHS: dict[EntityKind, str] = {
    EntityKind.OBJECT: "icons/type/document.svg",
    EntityKind.TYPE: "icons/type/document.svg",
    EntityKind.MEMBER: MEMBER_GLYPH,
    EntityKind.SPACE: "icons/type/space.svg",
}

LAYOUT_GLYPHS: dict[str, str] = {
    "participant": MEMBER_GLYPH,
    "profile": MEMBER_GLYPH,
    "todo": "icons/type/checkbox.svg",
    "set": "icons/type/layers.svg",
    "collection": "icons/type/layers.svg",
    "bookmark": "icons/type/bookmark.svg",
    "note": "icons/type/note.svg",
}


@dataclass(frozen=True)
class IconContext:
    """What the icon belongs to.

    Attributes:
        kind: Entity kind owning the icon
        layout: Object layout, used for masks and fallback glyphs
        format: Property format, required when kind is PROPERTY
    """

    kind: EntityKind
    layout: str = ""
    format: PropertyFormat | None = None

    @property
    def mask(self) -> Mask:
        if self.kind == EntityKind.PROPERTY:
            return Mask.NONE
        if self.kind == EntityKind.MEMBER or self.layout in CIRCULAR_LAYOUTS:
            return Mask.CIRCLE
        return Mask.ROUNDED_RECTANGLE


def icon_for_format(format: Any) -> ConcreteIcon:
    """Return the glyph for a property format.

    Raises:
        UnsupportedFormat: If ``format`` is outside the taxonomy
    """
    fmt = PropertyFormat.parse(format)
    return ConcreteIcon(source=fmt.glyph, mask=Mask.NONE, tint=FORMAT_TINT)


def default_icon(context: IconContext) -> ConcreteIcon:
    """Return the built-in glyph used when an entity has no usable icon."""
    if context.kind == EntityKind.PROPERTY:
        if context.format is None:
            raise UnsupportedFormat(None)
        return icon_for_format(context.format)
    if context.kind == EntityKind.MEMBER:
        return ConcreteIcon(source=MEMBER_GLYPH, mask=Mask.CIRCLE, tint=tint_for(MEMBER_COLOR))

    source = LAYOUT_GLYPHS.get(context.layout) or KIND_GLYPHS[context.kind]
    return ConcreteIcon(source=source, mask=context.mask, tint=DEFAULT_TINT)


def resolve_icon(
    raw_icon: RawIcon | None,
    context: IconContext,
    resolve_file: FileResolver | None = None,
) -> ConcreteIcon:
    """Turn a raw icon into a concrete one.

    File lookups that fail for any reason fall back to the default glyph; a
    missing icon never prevents an entity from being displayed.

    Args:
        raw_icon: Icon as received from the API
        context: Kind and layout of the owning entity
        resolve_file: Callable mapping a file id to a URL or local path

    Returns:
        The icon to display
    """
    if isinstance(raw_icon, EmojiIcon) and raw_icon.value:
        mask = Mask.CIRCLE if context.kind == EntityKind.MEMBER else Mask.NONE
        return ConcreteIcon(source=raw_icon.value, mask=mask)

    if isinstance(raw_icon, FileIcon) and raw_icon.file_id:
        source = None
        if resolve_file is None:
            logger.debug("No file resolver, using default icon", file_id=raw_icon.file_id)
        else:
            try:
                source = resolve_file(raw_icon.file_id)
            except Exception as e:
                logger.warning("Failed to resolve file icon", file_id=raw_icon.file_id, error=str(e))
        if source:
            return ConcreteIcon(source=source, mask=context.mask)

    return default_icon(context)
