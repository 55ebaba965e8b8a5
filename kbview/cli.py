"""CLI for kbview."""

from collections.abc import Callable
from typing import Annotated, Any, Literal

import structlog
from cyclopts import App, Parameter

from kbview.backend import Backend, ListKind
from kbview.backends import LocalApiBackend
from kbview.config import get_config
from kbview.config_commands import config_app
from kbview.colors import hex_to_color
from kbview.icons import FileResolver
from kbview.mappers import (
    map_entity,
    map_members,
    map_object,
    map_objects,
    map_properties,
    map_spaces,
    map_types,
)
from kbview.merge import MergedLists, merge_lists
from kbview.models import (
    ConcreteIcon,
    CreateObjectRequest,
    DisplayMember,
    DisplayObject,
    DisplayProperty,
    DisplaySpace,
    EntityKind,
    Tag,
)
from kbview.pin_commands import pin_app
from kbview.pinned import load_pinned
from kbview.property_entries import (
    DESCRIPTION_KEY,
    SOURCE_KEY,
    build_property_entries,
    create_form_errors,
    parse_form_pairs,
)
from kbview.storage import GLOBAL_SEARCH_SUFFIX, SPACES_SUFFIX, YamlPinnedStore, view_suffix
from kbview.strings import date_label, format_member_role, pluralize, section_title, short_date_label

logger = structlog.get_logger()

app = App(
    help="kbview - Browse a local knowledge base from the terminal",
)

app.command(pin_app)
app.command(config_app)


def configure_logging(log_level: str) -> None:
    """Configure structlog with the specified log level."""
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(min_level=log_level.lower()))


def get_backend() -> Backend:
    """Get the backend configured for the local REST API."""
    settings = get_config().api_settings()
    if not settings.key:
        raise ValueError("API key not configured. Set it using:\n  kbview config set api.key <key>")
    return LocalApiBackend(
        api_key=settings.key,
        base_url=settings.url,
        api_version=settings.version,
        gateway_url=settings.gateway,
    )


def get_pinned_store(suffix: str) -> YamlPinnedStore:
    """Get the pinned store for one view, honoring the configured capacity."""
    capacity = get_config().get_int("pinned.max")
    return YamlPinnedStore(suffix=suffix, capacity=capacity)


def pinned_getter(backend: Backend, kind: EntityKind) -> Callable[[str, str], Any]:
    """Build a getter fetching and mapping one pinned entity."""

    def get(space_id: str, entity_id: str) -> Any:
        return map_entity(backend.get(kind, space_id, entity_id), backend.resolve_file)

    return get


def map_items(kind: ListKind, items: list[Any], resolve_file: FileResolver) -> list[Any]:
    """Map one page of raw entities into display entities."""
    if kind in (ListKind.OBJECTS, ListKind.TEMPLATES):
        return map_objects(items, resolve_file)
    if kind == ListKind.TYPES:
        return map_types(items, resolve_file)
    if kind == ListKind.MEMBERS:
        return map_members(items, resolve_file)
    if kind == ListKind.PROPERTIES:
        return map_properties(items)
    return map_spaces(items, resolve_file)



def icon_text(icon: ConcreteIcon) -> str:
    """Render an icon as terminal text: emojis as-is, anything else as a bullet."""
    if icon.source.startswith(("icons/", "http://", "https://", "/")):
        return "•"
    return icon.source


def describe(entity: Any) -> str:
    line = f"{icon_text(entity.icon)} {entity.name}"
    if isinstance(entity, DisplayMember):
        line += f" ({format_member_role(entity.role)})"
        if entity.global_name:
            line += f" {entity.global_name}"
    elif isinstance(entity, DisplayObject):
        if entity.type is not None and entity.type.name:
            line += f" [{entity.type.name}]"
    elif isinstance(entity, DisplaySpace):
        return f"{line}  ({entity.id})"
    return f"{line}  ({entity.space_id}/{entity.id})"


def tag_text(tag: Tag) -> str:
    color = hex_to_color(tag.color) or tag.color
    return f"{tag.name} ({color})" if color else tag.name


def property_text(prop: DisplayProperty) -> str:
    """Render a property value as a single line, empty when unset."""
    if prop.select is not None:
        return tag_text(prop.select)
    if prop.multi_select is not None:
        return ", ".join(tag_text(tag) for tag in prop.multi_select)
    value = prop.value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, tuple):
        return ", ".join(value)
    return str(value)


def print_sections(merged: MergedLists, view: str, search_text: str, sort_field: str | None = None) -> None:
    if merged.pinned:
        print(f"Pinned ({pluralize(len(merged.pinned), 'item', with_number=True)}):")
        for entity in merged.pinned:
            print(f"  {describe(entity)}")
        print()

    if not merged.regular:
        print(f"No {view} found")
        return

    title = f"{section_title(search_text, view)} ({pluralize(len(merged.regular), 'item', with_number=True)})"
    label = date_label(sort_field)
    print(f"{title}, sorted by {label}:" if label else f"{title}:")
    for entity in merged.regular:
        print(f"  {describe(entity)}")


@app.command
def search(
    query: str = "",
    space: str | None = None,
    type: tuple[str, ...] = (),
    limit: int | None = None,
) -> None:
    """Search objects in a space, or across all spaces."""
    backend = get_backend()
    config = get_config()
    sort_field = config.get("sort")
    limit = limit or config.api_settings().limit

    page = backend.search(query, space_id=space, types=type, sort_field=sort_field, limit=limit)
    regular = map_objects(page.items, backend.resolve_file)

    store = get_pinned_store(view_suffix(space, "objects") if space else GLOBAL_SEARCH_SUFFIX)
    pinned = load_pinned(store, pinned_getter(backend, EntityKind.OBJECT))

    merged = merge_lists(pinned, regular, query, include_snippet=space is None, type_keys=type)
    print_sections(merged, "objects", query, sort_field)
    if page.has_more:
        print("\nMore results available, narrow the query or raise --limit")


@app.command(name="list")
def list_entities(
    kind: Literal["objects", "types", "members", "properties", "templates"],
    space: str,
    filter: str = "",
    type_id: str | None = None,
    offset: int = 0,
    limit: int | None = None,
) -> None:
    """List the entities of one kind in a space."""
    backend = get_backend()
    list_kind = ListKind(kind)
    limit = limit or get_config().api_settings().limit

    params = {"type_id": type_id} if type_id else {}
    page = backend.fetch_page(list_kind, space, offset=offset, limit=limit, **params)
    regular = map_items(list_kind, page.items, backend.resolve_file)

    pinned = []
    if list_kind != ListKind.TEMPLATES:
        store = get_pinned_store(view_suffix(space, kind))
        pinned = load_pinned(store, pinned_getter(backend, list_kind.entity_kind))

    print_sections(merge_lists(pinned, regular, filter), kind, filter)
    if page.has_more:
        print(f"\nMore {kind} available, use --offset {offset + len(page.items)}")



@app.command
def spaces(filter: str = "", offset: int = 0, limit: int | None = None) -> None:
    """List the spaces the API key can access."""
    backend = get_backend()
    limit = limit or get_config().api_settings().limit

    page = backend.fetch_page(ListKind.SPACES, "", offset=offset, limit=limit)
    regular = map_items(ListKind.SPACES, page.items, backend.resolve_file)
    pinned = load_pinned(get_pinned_store(SPACES_SUFFIX), pinned_getter(backend, EntityKind.SPACE))

    print_sections(merge_lists(pinned, regular, filter), "spaces", filter)
    if page.has_more:
        print(f"\nMore spaces available, use --offset {offset + len(page.items)}")


@app.command
def show(space: str, object_id: str) -> None:
    """Show an object with its property values."""
    backend = get_backend()
    sort_field = get_config().get("sort")
    obj = map_object(backend.get(EntityKind.OBJECT, space, object_id), backend.resolve_file, hydrate=True)

    print(f"Object: {obj.id}")
    print(f"Name: {icon_text(obj.icon)} {obj.name}")
    if obj.type is not None and obj.type.name:
        print(f"Type: {obj.type.name}")
    if obj.snippet:
        print(f"Snippet: {obj.snippet}")
    for prop in obj.display_properties or ():
        text = property_text(prop)
        if not text:
            continue
        # the active sort date is labelled the way list views label it
        label = short_date_label(sort_field) if prop.key == sort_field else prop.name
        print(f"{label}: {text}")


@app.command
def create(
    space: str,
    type_id: str,
    name: str = "",
    icon: str = "",
    description: str = "",
    body: str = "",
    source: str = "",
    template: str = "",
    prop: tuple[str, ...] = (),
) -> None:
    """Create an object of a type, setting properties with --prop KEY=VALUE."""
    backend = get_backend()
    object_type = backend.get(EntityKind.TYPE, space, type_id)
    property_defs = tuple(object_type.properties)

    form_values = parse_form_pairs(prop, property_defs)
    form_values[DESCRIPTION_KEY] = description
    form_values[SOURCE_KEY] = source

    errors = create_form_errors(name, icon, object_type.key, form_values, property_defs)
    if errors:
        details = "\n".join(f"  {field}: {message}" for field, message in errors.items())
        raise ValueError(f"Cannot create object:\n{details}")

    request = CreateObjectRequest(
        name=name,
        type_key=object_type.key,
        icon=icon,
        body=body,
        template_id=template,
        properties=build_property_entries(form_values, property_defs),
    )
    created = map_object(backend.create_object(space, request), backend.resolve_file)
    print(f"Created object {created.id}: {created.name}")


@app.meta.default
def main(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    log_level: Literal["debug", "info", "warning", "error", "critical"] = "critical",
) -> None:
    """Main entry point with global options."""
    configure_logging(log_level)
    app(tokens)


if __name__ == "__main__":
    app.meta()
