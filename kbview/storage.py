"""YAML-backed storage of pinned entity references."""

from pathlib import Path
from typing import Any

import structlog
import yaml

from kbview.backend import PinnedStore
from kbview.errors import PinnedCapacityError
from kbview.models import PinnedRef

logger = structlog.get_logger()

PINNED_FILE_NAME = "pinned.yaml"
GLOBAL_SEARCH_SUFFIX = "global_search"
SPACES_SUFFIX = "spaces"


def view_suffix(space_id: str, view: str) -> str:
    """Namespace suffix for the pinned items of one view within a space."""
    return f"{space_id}_{view}"


def namespace_key(suffix: str) -> str:
    return f"pinned_{suffix}"


class YamlPinnedStore(PinnedStore):
    """Pinned references for one namespace, persisted in a shared YAML file.

    Each namespace keeps its own ordered list, so pinning in the global search
    does not affect the pins of a space's type view.
    """

    def __init__(self, suffix: str, path: Path | None = None, capacity: int | None = None) -> None:
        """Initialize the store.

        Args:
            suffix: Namespace suffix, see :func:`view_suffix`
            path: YAML file, defaults to ``~/.kbview/pinned.yaml``
            capacity: Maximum number of pinned references, unbounded if None
        """
        self.suffix = suffix
        self.key = namespace_key(suffix)
        self.path = Path(path) if path is not None else Path.home() / ".kbview" / PINNED_FILE_NAME
        self.capacity = capacity
        logger.debug("Pinned store initialized", path=str(self.path), namespace=self.key, capacity=capacity)

    def _load_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r") as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to load pinned store", path=str(self.path), error=str(e))
            raise ValueError(f"Failed to load pinned items from {self.path}: {e}") from e

    def _save(self, refs: list[PinnedRef]) -> None:
        data = self._load_all()
        data[self.key] = [{"space_id": ref.space_id, "entity_id": ref.entity_id} for ref in refs]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    def list(self) -> list[PinnedRef]:
        entries = self._load_all().get(self.key) or []
        return [PinnedRef(space_id=entry["space_id"], entity_id=entry["entity_id"]) for entry in entries]

    def add(self, space_id: str, entity_id: str) -> None:
        """Pin an entity.

        Raises:
            PinnedCapacityError: If the store is already full
        """
        refs = self.list()
        ref = PinnedRef(space_id, entity_id)
        if ref in refs:
            logger.debug("Already pinned", namespace=self.key, entity_id=entity_id)
            return
        if self.capacity is not None and len(refs) >= self.capacity:
            logger.warning("Pinned store is full", namespace=self.key, capacity=self.capacity)
            raise PinnedCapacityError(self.capacity)
        refs.append(ref)
        self._save(refs)
        logger.info("Pinned entity", namespace=self.key, space_id=space_id, entity_id=entity_id)

    def remove(self, space_id: str, entity_id: str) -> None:
        refs = self.list()
        remaining = [ref for ref in refs if ref != PinnedRef(space_id, entity_id)]
        if len(remaining) != len(refs):
            self._save(remaining)
            logger.info("Unpinned entity", namespace=self.key, space_id=space_id, entity_id=entity_id)
