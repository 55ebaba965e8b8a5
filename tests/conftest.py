"""Shared test fixtures."""

import pytest

from kbview.backend import PinnedStore
from kbview.models import PinnedRef


class MemoryPinnedStore(PinnedStore):
    """In-memory pinned store for testing."""

    def __init__(self) -> None:
        self.refs: list[PinnedRef] = []

    def list(self) -> list[PinnedRef]:
        return list(self.refs)

    def add(self, space_id: str, entity_id: str) -> None:
        ref = PinnedRef(space_id, entity_id)
        if ref not in self.refs:
            self.refs.append(ref)

    def remove(self, space_id: str, entity_id: str) -> None:
        self.refs = [ref for ref in self.refs if ref != PinnedRef(space_id, entity_id)]


@pytest.fixture
def memory_store() -> MemoryPinnedStore:
    """Create an empty in-memory pinned store."""
    return MemoryPinnedStore()
