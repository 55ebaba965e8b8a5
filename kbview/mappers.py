"""Mapping of raw API entities into display entities."""

from collections.abc import Iterable

import structlog

from kbview.colors import normalize_tag
from kbview.errors import PayloadError
from kbview.formats import PropertyFormat
from kbview.icons import FileResolver, IconContext, icon_for_format, resolve_icon
from kbview.models import (
    UNTITLED,
    DisplayEntity,
    DisplayMember,
    DisplayObject,
    DisplayProperty,
    DisplaySpace,
    DisplayType,
    EntityKind,
    RawEntity,
    RawMember,
    RawObject,
    RawProperty,
    RawSpace,
    RawType,
)

logger = structlog.get_logger()


def map_object(raw: RawObject, resolve_file: FileResolver | None = None, hydrate: bool = False) -> DisplayObject:
    """Map a raw object into a display object.

    Args:
        raw: Object as received from the API
        resolve_file: Resolver for file icons
        hydrate: Also map the object's property values (detail views only)

    Returns:
        The display object
    """
    layout = raw.layout or ""
    icon = resolve_icon(raw.icon, IconContext(EntityKind.OBJECT, layout=layout), resolve_file)

    display_properties = None
    if hydrate:
        display_properties = tuple(map_property(prop) for prop in raw.properties or ())

    display = DisplayObject(
        id=raw.id,
        space_id=raw.space_id,
        name=raw.name or UNTITLED,
        icon=icon,
        type=raw.type,
        snippet=raw.snippet or "",
        layout=layout,
        archived=bool(raw.archived),
        properties=tuple(raw.properties or ()),
        display_properties=display_properties,
    )
    logger.debug("Mapped object", object_id=display.id, hydrated=hydrate)
    return display


def map_objects(
    raws: Iterable[RawObject], resolve_file: FileResolver | None = None, hydrate: bool = False
) -> list[DisplayObject]:
    return [map_object(raw, resolve_file, hydrate) for raw in raws]


def map_type(raw: RawType, resolve_file: FileResolver | None = None) -> DisplayType:
    layout = raw.layout or ""
    return DisplayType(
        id=raw.id,
        key=raw.key,
        name=raw.name or UNTITLED,
        icon=resolve_icon(raw.icon, IconContext(EntityKind.TYPE, layout=layout), resolve_file),
        space_id=raw.space_id,
        layout=layout,
        plural_name=raw.plural_name or "",
        archived=bool(raw.archived),
        properties=tuple(raw.properties or ()),
    )


def map_types(raws: Iterable[RawType], resolve_file: FileResolver | None = None) -> list[DisplayType]:
    return [map_type(raw, resolve_file) for raw in raws]


def map_member(raw: RawMember, resolve_file: FileResolver | None = None) -> DisplayMember:
    """Map a raw member. Member icons are always circular."""
    return DisplayMember(
        id=raw.id,
        space_id=raw.space_id,
        name=raw.name or UNTITLED,
        icon=resolve_icon(raw.icon, IconContext(EntityKind.MEMBER), resolve_file),
        identity=raw.identity or "",
        global_name=raw.global_name or "",
        role=raw.role or "",
        status=raw.status or "",
    )


def map_members(raws: Iterable[RawMember], resolve_file: FileResolver | None = None) -> list[DisplayMember]:
    return [map_member(raw, resolve_file) for raw in raws]


def map_property(raw: RawProperty) -> DisplayProperty:
    """Map a raw property, normalizing any tag values.

    Raises:
        UnsupportedFormat: If the format is outside the taxonomy
        PayloadError: If a value slot other than the format's own is populated
    """
    fmt = PropertyFormat.parse(raw.format)
    for slot in PropertyFormat.slots():
        if slot != fmt.slot and getattr(raw, slot) is not None:
            raise PayloadError(f"Property {raw.key!r} has format {fmt.value!r} but populates {slot}")

    select = normalize_tag(raw.select) if raw.select is not None else None
    multi_select = None
    if raw.multi_select is not None:
        multi_select = tuple(normalize_tag(tag) for tag in raw.multi_select)

    return DisplayProperty(
        id=raw.id,
        key=raw.key,
        name=raw.name or UNTITLED,
        format=fmt,
        icon=icon_for_format(fmt),
        space_id=raw.space_id,
        text=raw.text,
        number=raw.number,
        select=select,
        multi_select=multi_select,
        date=raw.date,
        files=raw.files,
        checkbox=raw.checkbox,
        url=raw.url,
        email=raw.email,
        phone=raw.phone,
        objects=raw.objects,
    )


def map_properties(raws: Iterable[RawProperty]) -> list[DisplayProperty]:
    return [map_property(raw) for raw in raws]


def map_space(raw: RawSpace, resolve_file: FileResolver | None = None) -> DisplaySpace:
    return DisplaySpace(
        id=raw.id,
        name=raw.name or UNTITLED,
        icon=resolve_icon(raw.icon, IconContext(EntityKind.SPACE), resolve_file),
        description=raw.description or "",
        gateway_url=raw.gateway_url or "",
        network_id=raw.network_id or "",
    )


def map_spaces(raws: Iterable[RawSpace], resolve_file: FileResolver | None = None) -> list[DisplaySpace]:
    return [map_space(raw, resolve_file) for raw in raws]


def map_entity(raw: RawEntity, resolve_file: FileResolver | None = None, hydrate: bool = False) -> DisplayEntity:
    """Map any raw entity by dispatching on its kind."""
    if isinstance(raw, RawObject):
        return map_object(raw, resolve_file, hydrate)
    if isinstance(raw, RawType):
        return map_type(raw, resolve_file)
    if isinstance(raw, RawMember):
        return map_member(raw, resolve_file)
    if isinstance(raw, RawProperty):
        return map_property(raw)
    if isinstance(raw, RawSpace):
        return map_space(raw, resolve_file)
    raise TypeError(f"Cannot map {type(raw).__name__}")
