"""Merging of pinned and regular entity lists."""

from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

logger = structlog.get_logger()


@dataclass
class MergedLists:
    """Entities split into the pinned and regular sections of a list view."""

    pinned: list[Any] = field(default_factory=list)
    regular: list[Any] = field(default_factory=list)


def identity(entity: Any) -> tuple[str, str]:
    """Composite identity of an entity across spaces."""
    return (entity.space_id, entity.id)


def matches_search(entity: Any, search_text: str, include_snippet: bool = False) -> bool:
    """Case-insensitive substring match against the name and optionally the snippet."""
    if not search_text:
        return True
    needle = search_text.lower()
    if needle in (entity.name or "").lower():
        return True
    if include_snippet:
        return needle in (getattr(entity, "snippet", "") or "").lower()
    return False


def filter_by_search(entities: Iterable[Any], search_text: str, include_snippet: bool = False) -> list[Any]:
    return [entity for entity in entities if matches_search(entity, search_text, include_snippet)]


def _type_key(entity: Any) -> str | None:
    entity_type = getattr(entity, "type", None)
    return getattr(entity_type, "key", None)


def merge_lists(
    pinned_candidates: Sequence[Any],
    regular_page: Iterable[Any],
    search_text: str = "",
    include_snippet: bool = False,
    type_keys: Collection[str] | None = None,
) -> MergedLists:
    """Split entities into pinned and regular groups for display.

    Every ``(space_id, id)`` pair appears at most once across both groups. Input
    order is kept within each group.

    Args:
        pinned_candidates: Display entities known to be pinned, in pin order
        regular_page: Display entities from the server, in server order
        search_text: Filter applied to names (and snippets when requested)
        include_snippet: Also match the search text against snippets
        type_keys: When non-empty, drop pinned objects whose type key is not listed

    Returns:
        The pinned and regular groups
    """
    pinned_ids = {identity(entity) for entity in pinned_candidates}
    seen: set[tuple[str, str]] = set()

    pinned = []
    for entity in filter_by_search(pinned_candidates, search_text, include_snippet):
        key = identity(entity)
        if key in seen:
            continue
        if type_keys and _type_key(entity) not in type_keys:
            continue
        seen.add(key)
        pinned.append(entity)

    regular = []
    for entity in filter_by_search(regular_page, search_text, include_snippet):
        key = identity(entity)
        if key in pinned_ids or key in seen:
            continue
        seen.add(key)
        regular.append(entity)

    logger.debug("Merged lists", pinned_count=len(pinned), regular_count=len(regular), search_text=search_text)
    return MergedLists(pinned=pinned, regular=regular)
