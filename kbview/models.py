"""Data models for kbview.

Raw models mirror the REST API payloads and are never mutated. Display models
are the render-ready projections produced by :mod:`kbview.mappers`.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from kbview.formats import PropertyFormat

UNTITLED = "Untitled"


class EntityKind(str, Enum):
    """Kinds of entity the API exposes."""

    OBJECT = "object"
    TYPE = "type"
    MEMBER = "member"
    PROPERTY = "property"
    SPACE = "space"


class Mask(str, Enum):
    """Mask applied to an icon by the rendering layer."""

    NONE = "none"
    CIRCLE = "circle"
    ROUNDED_RECTANGLE = "rounded-rectangle"


# Raw icons


@dataclass(frozen=True)
class EmojiIcon:
    value: str


@dataclass(frozen=True)
class FileIcon:
    file_id: str


@dataclass(frozen=True)
class NoIcon:
    pass


RawIcon = Union[EmojiIcon, FileIcon, NoIcon]


@dataclass(frozen=True)
class TintColor:
    """Color pair used to tint a glyph in light and dark appearance."""

    light: str
    dark: str


@dataclass(frozen=True)
class ConcreteIcon:
    """Icon ready for display: an emoji, a file URL or a built-in glyph."""

    source: str
    mask: Mask = Mask.NONE
    tint: TintColor | None = None


# Tags


@dataclass(frozen=True)
class RawTag:
    id: str = ""
    name: str = ""
    color: str = ""
    key: str = ""


@dataclass(frozen=True)
class Tag:
    id: str
    name: str
    color: str
    key: str = ""


# Raw entities


@dataclass(frozen=True)
class RawProperty:
    """A property definition, optionally carrying a value.

    At most one of the value slots should be populated and it must be the slot
    named after ``format``. Properties embedded in objects are kept as received
    and only checked when mapped.
    """

    id: str
    key: str
    name: str
    format: PropertyFormat | str
    space_id: str = ""
    text: str | None = None
    number: float | int | None = None
    select: RawTag | None = None
    multi_select: tuple[RawTag, ...] | None = None
    date: str | None = None
    files: tuple[str, ...] | None = None
    checkbox: bool | None = None
    url: str | None = None
    email: str | None = None
    phone: str | None = None
    objects: tuple[str, ...] | None = None

    kind = EntityKind.PROPERTY

    @property
    def value(self) -> Any:
        return getattr(self, PropertyFormat.parse(self.format).slot)


@dataclass(frozen=True)
class RawType:
    id: str
    key: str
    name: str
    space_id: str = ""
    icon: RawIcon = field(default_factory=NoIcon)
    layout: str = ""
    plural_name: str = ""
    archived: bool = False
    properties: tuple[RawProperty, ...] = ()

    kind = EntityKind.TYPE


@dataclass(frozen=True)
class RawObject:
    id: str
    space_id: str
    name: str
    icon: RawIcon = field(default_factory=NoIcon)
    type: RawType | None = None
    snippet: str = ""
    layout: str = ""
    archived: bool = False
    properties: tuple[RawProperty, ...] = ()

    kind = EntityKind.OBJECT


@dataclass(frozen=True)
class RawMember:
    id: str
    space_id: str
    name: str
    icon: RawIcon = field(default_factory=NoIcon)
    identity: str = ""
    global_name: str = ""
    role: str = ""
    status: str = ""

    kind = EntityKind.MEMBER


@dataclass(frozen=True)
class RawSpace:
    id: str
    name: str
    icon: RawIcon = field(default_factory=NoIcon)
    description: str = ""
    gateway_url: str = ""
    network_id: str = ""

    kind = EntityKind.SPACE

    @property
    def space_id(self) -> str:
        return self.id


RawEntity = Union[RawObject, RawType, RawMember, RawProperty, RawSpace]


# Display entities


@dataclass(frozen=True)
class DisplayProperty:
    id: str
    key: str
    name: str
    format: PropertyFormat
    icon: ConcreteIcon
    space_id: str = ""
    text: str | None = None
    number: float | int | None = None
    select: Tag | None = None
    multi_select: tuple[Tag, ...] | None = None
    date: str | None = None
    files: tuple[str, ...] | None = None
    checkbox: bool | None = None
    url: str | None = None
    email: str | None = None
    phone: str | None = None
    objects: tuple[str, ...] | None = None

    kind = EntityKind.PROPERTY

    @property
    def value(self) -> Any:
        return getattr(self, self.format.slot)


@dataclass(frozen=True)
class DisplayType:
    id: str
    key: str
    name: str
    icon: ConcreteIcon
    space_id: str = ""
    layout: str = ""
    plural_name: str = ""
    archived: bool = False
    properties: tuple[RawProperty, ...] = ()

    kind = EntityKind.TYPE


@dataclass(frozen=True)
class DisplayObject:
    """Display projection of an object.

    ``properties`` are passed through as received. ``display_properties`` is
    only filled when the caller asked for hydration.
    """

    id: str
    space_id: str
    name: str
    icon: ConcreteIcon
    type: RawType | None = None
    snippet: str = ""
    layout: str = ""
    archived: bool = False
    properties: tuple[RawProperty, ...] = ()
    display_properties: tuple[DisplayProperty, ...] | None = None

    kind = EntityKind.OBJECT


@dataclass(frozen=True)
class DisplayMember:
    id: str
    space_id: str
    name: str
    icon: ConcreteIcon
    identity: str = ""
    global_name: str = ""
    role: str = ""
    status: str = ""

    kind = EntityKind.MEMBER


@dataclass(frozen=True)
class DisplaySpace:
    id: str
    name: str
    icon: ConcreteIcon
    description: str = ""
    gateway_url: str = ""
    network_id: str = ""

    kind = EntityKind.SPACE

    @property
    def space_id(self) -> str:
        return self.id


DisplayEntity = Union[DisplayObject, DisplayType, DisplayMember, DisplayProperty, DisplaySpace]


# Write path


@dataclass(frozen=True)
class PropertyLink:
    """A property definition as needed to assemble a write request."""

    key: str
    name: str
    format: PropertyFormat | str


@dataclass
class PropertyLinkWithValue:
    """A single typed property value to send to the API."""

    key: str
    text: str | None = None
    number: float | int | None = None
    select: str | None = None
    multi_select: list[str] | None = None
    date: str | None = None
    files: list[str] | None = None
    checkbox: bool | None = None
    url: str | None = None
    email: str | None = None
    phone: str | None = None
    objects: list[str] | None = None

    def to_payload(self) -> dict[str, Any]:
        """Convert to the JSON body shape, dropping unset slots."""
        payload: dict[str, Any] = {"key": self.key}
        for slot in PropertyFormat.slots():
            value = getattr(self, slot)
            if value is not None:
                payload[slot] = value
        return payload


@dataclass
class CreateObjectRequest:
    """Body of a create-object request."""

    name: str
    type_key: str
    icon: str = ""
    body: str = ""
    template_id: str = ""
    properties: list[PropertyLinkWithValue] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "icon": {"format": "emoji", "emoji": self.icon},
            "body": self.body,
            "template_id": self.template_id,
            "type_key": self.type_key,
            "properties": [entry.to_payload() for entry in self.properties],
        }


# Collaborator shapes


@dataclass(frozen=True)
class PinnedRef:
    """Reference to a pinned entity."""

    space_id: str
    entity_id: str


@dataclass
class Page:
    """One page of entities returned by a fetch collaborator."""

    items: list[Any] = field(default_factory=list)
    has_more: bool = False
    total: int | None = None
