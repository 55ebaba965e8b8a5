"""Parsing of REST API JSON payloads into raw models."""

from collections.abc import Callable
from typing import Any

import structlog

from kbview.errors import PayloadError
from kbview.formats import PropertyFormat
from kbview.models import (
    EmojiIcon,
    EntityKind,
    FileIcon,
    NoIcon,
    RawEntity,
    RawIcon,
    RawMember,
    RawObject,
    RawProperty,
    RawSpace,
    RawTag,
    RawType,
)

logger = structlog.get_logger()


def parse_icon(payload: Any) -> RawIcon:
    """Parse an icon payload.

    Accepts the tagged form (``{"format": "emoji", "emoji": ...}``) as well as a
    bare emoji string. Anything else becomes NoIcon.
    """
    if isinstance(payload, str):
        return EmojiIcon(value=payload) if payload else NoIcon()
    if not isinstance(payload, dict):
        return NoIcon()

    icon_format = payload.get("format")
    if icon_format == "emoji" and payload.get("emoji"):
        return EmojiIcon(value=payload["emoji"])
    if icon_format == "file" and payload.get("file"):
        return FileIcon(file_id=payload["file"])
    if icon_format is None:
        if payload.get("emoji"):
            return EmojiIcon(value=payload["emoji"])
        if payload.get("file"):
            return FileIcon(file_id=payload["file"])
    return NoIcon()


def parse_tag(payload: dict[str, Any]) -> RawTag:
    return RawTag(
        id=payload.get("id") or "",
        name=payload.get("name") or "",
        color=payload.get("color") or "",
        key=payload.get("key") or "",
    )


def _references(values: Any) -> tuple[str, ...]:
    refs = []
    for value in values or []:
        if isinstance(value, dict):
            refs.append(value.get("id", ""))
        else:
            refs.append(str(value))
    return tuple(refs)


def _slot_value(slot: str, raw_value: Any) -> Any:
    if slot == PropertyFormat.SELECT.slot:
        return parse_tag(raw_value) if isinstance(raw_value, dict) else RawTag(id=str(raw_value))
    if slot == PropertyFormat.MULTI_SELECT.slot:
        return tuple(parse_tag(tag) if isinstance(tag, dict) else RawTag(id=str(tag)) for tag in raw_value or [])
    if slot in (PropertyFormat.FILES.slot, PropertyFormat.OBJECTS.slot):
        return _references(raw_value)
    return raw_value


def parse_property(payload: dict[str, Any], space_id: str = "", strict: bool = True) -> RawProperty:
    """Parse a property definition or property value.

    Properties embedded in objects and types are parsed with ``strict=False``:
    the format is kept as received and every populated slot is carried over,
    leaving validation to :func:`kbview.mappers.map_property`.

    Raises:
        UnsupportedFormat: If strict and the format is outside the taxonomy
        PayloadError: If strict and a slot other than the one named by the format is populated
    """
    populated = [slot for slot in PropertyFormat.slots() if payload.get(slot) is not None]

    if strict:
        fmt: PropertyFormat | str = PropertyFormat.parse(payload.get("format"))
        mismatched = [slot for slot in populated if slot != fmt.slot]
        if mismatched:
            raise PayloadError(
                f"Property {payload.get('key')!r} has format {fmt.value!r} but populates {', '.join(mismatched)}"
            )
    else:
        raw_format = payload.get("format") or ""
        fmt = PropertyFormat(raw_format) if raw_format in PropertyFormat.slots() else raw_format

    return RawProperty(
        id=payload.get("id") or "",
        key=payload.get("key") or "",
        name=payload.get("name") or "",
        format=fmt,
        space_id=space_id,
        **{slot: _slot_value(slot, payload[slot]) for slot in populated},
    )


def _embedded_properties(payload: dict[str, Any], space_id: str) -> tuple[RawProperty, ...]:
    return tuple(parse_property(p, space_id, strict=False) for p in payload.get("properties") or [])


def parse_type(payload: dict[str, Any], space_id: str = "") -> RawType:
    return RawType(
        id=payload.get("id") or "",
        key=payload.get("key") or payload.get("type_key") or "",
        name=payload.get("name") or "",
        space_id=space_id,
        icon=parse_icon(payload.get("icon")),
        layout=payload.get("layout") or payload.get("recommended_layout") or "",
        plural_name=payload.get("plural_name") or "",
        archived=bool(payload.get("archived", False)),
        properties=_embedded_properties(payload, space_id),
    )


def parse_object(payload: dict[str, Any], space_id: str = "") -> RawObject:
    space_id = payload.get("space_id") or space_id
    type_payload = payload.get("type")
    return RawObject(
        id=payload.get("id") or "",
        space_id=space_id,
        name=payload.get("name") or "",
        icon=parse_icon(payload.get("icon")),
        type=parse_type(type_payload, space_id) if isinstance(type_payload, dict) else None,
        snippet=payload.get("snippet") or "",
        layout=payload.get("layout") or "",
        archived=bool(payload.get("archived", False)),
        properties=_embedded_properties(payload, space_id),
    )


def parse_member(payload: dict[str, Any], space_id: str = "") -> RawMember:
    return RawMember(
        id=payload.get("id") or "",
        space_id=space_id,
        name=payload.get("name") or "",
        icon=parse_icon(payload.get("icon")),
        identity=payload.get("identity") or "",
        global_name=payload.get("global_name") or "",
        role=payload.get("role") or "",
        status=payload.get("status") or "",
    )


def parse_space(payload: dict[str, Any], space_id: str = "") -> RawSpace:
    return RawSpace(
        id=payload.get("id") or space_id,
        name=payload.get("name") or "",
        icon=parse_icon(payload.get("icon")),
        description=payload.get("description") or "",
        gateway_url=payload.get("gateway_url") or "",
        network_id=payload.get("network_id") or "",
    )


PARSERS: dict[EntityKind, Callable[[dict[str, Any], str], RawEntity]] = {
    EntityKind.OBJECT: parse_object,
    EntityKind.TYPE: parse_type,
    EntityKind.MEMBER: parse_member,
    EntityKind.PROPERTY: parse_property,
    EntityKind.SPACE: parse_space,
}


def parse_entity(kind: EntityKind, payload: dict[str, Any], space_id: str = "") -> RawEntity:
    """Parse a payload of the given kind."""
    logger.debug("Parsing payload", kind=kind.value, entity_id=payload.get("id"))
    return PARSERS[kind](payload, space_id)
