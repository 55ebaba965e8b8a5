"""Collaborator interfaces the mapping layer depends on."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum

from kbview.models import CreateObjectRequest, EntityKind, Page, PinnedRef, RawEntity, RawObject


class ListKind(str, Enum):
    """Collections that can be fetched page by page."""

    OBJECTS = "objects"
    TYPES = "types"
    MEMBERS = "members"
    PROPERTIES = "properties"
    TEMPLATES = "templates"
    SPACES = "spaces"

    @property
    def entity_kind(self) -> EntityKind:
        return LIST_ENTITY_KINDS[self]


LIST_ENTITY_KINDS = {
    ListKind.OBJECTS: EntityKind.OBJECT,
    ListKind.TYPES: EntityKind.TYPE,
    ListKind.MEMBERS: EntityKind.MEMBER,
    ListKind.PROPERTIES: EntityKind.PROPERTY,
    ListKind.TEMPLATES: EntityKind.OBJECT,
    ListKind.SPACES: EntityKind.SPACE,
}


class Backend(ABC):
    """Abstract source of raw entities."""

    @abstractmethod
    def fetch_page(self, kind: ListKind, scope_id: str, offset: int = 0, limit: int = 100, **params: str) -> Page:
        """Fetch one page of raw entities.

        Args:
            kind: Collection to fetch
            scope_id: Space id (ignored for spaces)
            offset: Index of the first item
            limit: Maximum number of items
            **params: Extra path parameters, e.g. ``type_id`` for templates
        """
        pass

    @abstractmethod
    def get(self, kind: EntityKind, scope_id: str, entity_id: str) -> RawEntity:
        """Fetch a single raw entity.

        Raises:
            NotFoundError: If the entity does not exist
        """
        pass

    @abstractmethod
    def search(
        self,
        query: str,
        space_id: str | None = None,
        types: Sequence[str] = (),
        sort_field: str = "last_modified_date",
        direction: str = "desc",
        offset: int = 0,
        limit: int = 100,
    ) -> Page:
        """Search objects in one space, or across all spaces when ``space_id`` is None."""
        pass

    @abstractmethod
    def resolve_file(self, file_id: str) -> str:
        """Resolve a file id to a displayable URL.

        Raises:
            IconResolutionFailure: If the file cannot be resolved
        """
        pass

    @abstractmethod
    def create_object(self, space_id: str, request: CreateObjectRequest) -> RawObject:
        """Create an object in a space.

        Args:
            space_id: Space to create the object in
            request: Name, type, icon and property values of the new object

        Returns:
            The created object as returned by the API
        """
        pass


class PinnedStore(ABC):
    """Ordered set of pinned entity references."""

    @abstractmethod
    def list(self) -> list[PinnedRef]:
        """List pinned references in insertion order."""
        pass

    @abstractmethod
    def add(self, space_id: str, entity_id: str) -> None:
        """Pin an entity. Pinning an already pinned entity does nothing."""
        pass

    @abstractmethod
    def remove(self, space_id: str, entity_id: str) -> None:
        """Unpin an entity."""
        pass

    def contains(self, space_id: str, entity_id: str) -> bool:
        return PinnedRef(space_id, entity_id) in self.list()
