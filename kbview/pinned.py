"""Hydration of pinned references into display entities."""

from collections.abc import Callable
from typing import Any

import structlog

from kbview.backend import PinnedStore
from kbview.errors import ApiError, NotFoundError

logger = structlog.get_logger()


def load_pinned(store: PinnedStore, getter: Callable[[str, str], Any]) -> list[Any]:
    """Fetch every pinned entity, in pin order.

    References the API reports as missing are removed from the store. Other
    failures only drop the entity from this result.

    Args:
        store: Pinned references for one view
        getter: Callable fetching and mapping an entity from ``(space_id, entity_id)``

    Returns:
        The pinned entities that could be fetched
    """
    entities = []
    for ref in store.list():
        try:
            entities.append(getter(ref.space_id, ref.entity_id))
        except NotFoundError:
            logger.info("Pruning missing pinned entity", space_id=ref.space_id, entity_id=ref.entity_id)
            store.remove(ref.space_id, ref.entity_id)
        except ApiError as e:
            logger.warning(
                "Failed to fetch pinned entity", space_id=ref.space_id, entity_id=ref.entity_id, error=str(e)
            )
    return entities
