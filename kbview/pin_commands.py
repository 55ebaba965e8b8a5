"""Pinned item commands for the kbview CLI."""

from typing import Literal

from cyclopts import App

from kbview.errors import PinnedCapacityError
from kbview.storage import GLOBAL_SEARCH_SUFFIX, SPACES_SUFFIX, view_suffix

pin_app = App(name="pin", help="Manage pinned items")

View = Literal["global_search", "spaces", "objects", "types", "members", "properties"]


def _suffix(view: View, space: str | None) -> str:
    if view == "global_search":
        return GLOBAL_SEARCH_SUFFIX
    if view == "spaces":
        return SPACES_SUFFIX
    if not space:
        raise ValueError(f"--space is required to pin {view}")
    return view_suffix(space, view)


@pin_app.command
def add(space_id: str, entity_id: str, view: View = "global_search", space: str | None = None) -> None:
    """Pin an entity to a view."""
    from kbview.cli import get_pinned_store

    store = get_pinned_store(_suffix(view, space))
    try:
        store.add(space_id, entity_id)
    except PinnedCapacityError as e:
        print(str(e))
        return
    print(f"Pinned {space_id}/{entity_id} to {store.key}")


@pin_app.command
def remove(space_id: str, entity_id: str, view: View = "global_search", space: str | None = None) -> None:
    """Unpin an entity from a view."""
    from kbview.cli import get_pinned_store

    store = get_pinned_store(_suffix(view, space))
    store.remove(space_id, entity_id)
    print(f"Unpinned {space_id}/{entity_id} from {store.key}")


@pin_app.command(name="list")
def list_pinned(view: View = "global_search", space: str | None = None) -> None:
    """List pinned references of a view in pin order."""
    from kbview.cli import get_pinned_store

    store = get_pinned_store(_suffix(view, space))
    refs = store.list()

    if not refs:
        print(f"No pinned items in {store.key}")
        return

    print(f"Pinned items in {store.key}:\n")
    for i, ref in enumerate(refs, 1):
        print(f"{i}. {ref.space_id}/{ref.entity_id}")
