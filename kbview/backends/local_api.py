"""Backend for the knowledge-base application's local REST API using httpx."""

from collections.abc import Sequence
from typing import Any

import httpx
import structlog

from kbview.backend import Backend, ListKind
from kbview.errors import ApiError, IconResolutionFailure, NotFoundError
from kbview.models import CreateObjectRequest, EntityKind, Page, RawEntity, RawObject
from kbview.payloads import parse_entity, parse_object

logger = structlog.get_logger()

DEFAULT_API_URL = "http://localhost:31009/v1"
DEFAULT_API_VERSION = "2025-04-22"
MAX_LIMIT = 1000
ICON_WIDTH = 64

SINGULAR_PATHS = {
    EntityKind.OBJECT: "objects",
    EntityKind.TYPE: "types",
    EntityKind.MEMBER: "members",
    EntityKind.PROPERTY: "properties",
}


class LocalApiBackend(Backend):
    """Backend talking to the local REST API over HTTP."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = DEFAULT_API_URL,
        api_version: str = DEFAULT_API_VERSION,
        gateway_url: str | None = None,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the backend.

        Args:
            api_key: API key issued by the application
            base_url: Base URL of the REST API
            api_version: Value sent in the version header
            gateway_url: File gateway used to resolve file icons
            timeout: Request timeout in seconds
            client: Preconfigured client, mostly for tests
        """
        if not api_key:
            raise ValueError("API key required")

        self.base_url = base_url.rstrip("/")
        self.gateway_url = gateway_url.rstrip("/") if gateway_url else None

        logger.debug("Initializing local API backend", base_url=self.base_url)
        self.client = client or httpx.Client(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Anytype-Version": api_version,
            },
            timeout=httpx.Timeout(timeout),
        )
        logger.info("Local API backend initialized", base_url=self.base_url)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "LocalApiBackend":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        logger.debug("Sending API request", method=method, path=path)
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("API request failed", method=method, path=path, error=str(e))
            raise ApiError(f"Can't connect to API: {e}") from e
        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> dict[str, Any]:
        if response.status_code == 404:
            raise NotFoundError(f"Resource not found: {response.request.url.path}")

        if response.status_code >= 400:
            message = f"API error: {response.status_code}"
            try:
                error_data = response.json()
            except ValueError:
                error_data = None
            if isinstance(error_data, dict) and error_data.get("message"):
                message = error_data["message"]
            logger.error("API returned error", status=response.status_code, message=message)
            raise ApiError(message, status=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ApiError("Invalid response format from API", status=response.status_code) from e

    def _list_path(self, kind: ListKind, scope_id: str, params: dict[str, str]) -> str:
        if kind == ListKind.SPACES:
            return "/spaces"
        if kind == ListKind.TEMPLATES:
            type_id = params.get("type_id")
            if not type_id:
                raise ValueError("type_id required to list templates")
            return f"/spaces/{scope_id}/types/{type_id}/templates"
        return f"/spaces/{scope_id}/{kind.value}"

    def _page(self, payload: dict[str, Any], kind: EntityKind, scope_id: str) -> Page:
        pagination = payload.get("pagination") or {}
        items = [parse_entity(kind, item, scope_id) for item in payload.get("data") or []]
        return Page(items=items, has_more=bool(pagination.get("has_more", False)), total=pagination.get("total"))

    def fetch_page(self, kind: ListKind, scope_id: str, offset: int = 0, limit: int = 100, **params: str) -> Page:
        """Fetch one page of entities from a list endpoint."""
        limit = min(limit, MAX_LIMIT)
        logger.info("Fetching page", kind=kind.value, scope_id=scope_id, offset=offset, limit=limit)

        path = self._list_path(kind, scope_id, params)
        payload = self._request("GET", path, params={"offset": offset, "limit": limit})
        page = self._page(payload, kind.entity_kind, scope_id)

        logger.info("Fetched page", kind=kind.value, count=len(page.items), has_more=page.has_more)
        return page

    def get(self, kind: EntityKind, scope_id: str, entity_id: str) -> RawEntity:
        """Fetch a single entity."""
        logger.info("Fetching entity", kind=kind.value, scope_id=scope_id, entity_id=entity_id)

        if kind == EntityKind.SPACE:
            path = f"/spaces/{entity_id}"
        else:
            path = f"/spaces/{scope_id}/{SINGULAR_PATHS[kind]}/{entity_id}"

        payload = self._request("GET", path)
        return parse_entity(kind, self._entity_body(payload, kind, entity_id), scope_id)

    def _entity_body(self, payload: dict[str, Any], kind: EntityKind, entity_id: str) -> dict[str, Any]:
        body = payload.get(kind.value)
        if not isinstance(body, dict):
            raise ApiError(f"Response for {kind.value} {entity_id} has no {kind.value!r} field")
        return body

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
        """Search objects, globally when no space is given."""
        limit = min(limit, MAX_LIMIT)
        logger.info("Searching objects", query=query, space_id=space_id, types=list(types))

        body = {
            "query": query,
            "types": list(types),
            "sort": {"direction": direction, "timestamp": sort_field},
        }
        path = f"/spaces/{space_id}/search" if space_id else "/search"
        payload = self._request("POST", path, params={"offset": offset, "limit": limit}, json=body)
        page = self._page(payload, EntityKind.OBJECT, space_id or "")

        logger.info("Search completed", count=len(page.items), has_more=page.has_more)
        return page

    def resolve_file(self, file_id: str) -> str:
        """Resolve a file icon through the file gateway.

        Raises:
            IconResolutionFailure: If no gateway is configured or the file is not served
        """
        if not self.gateway_url:
            raise IconResolutionFailure("No file gateway configured")

        url = f"{self.gateway_url}/image/{file_id}?width={ICON_WIDTH}"
        try:
            response = self.client.head(url)
        except httpx.HTTPError as e:
            raise IconResolutionFailure(f"Failed to reach file gateway: {e}") from e
        if response.status_code != 200:
            raise IconResolutionFailure(f"File {file_id} not available: {response.status_code}")
        return url

    def create_object(self, space_id: str, request: CreateObjectRequest) -> RawObject:
        """Create an object and return it as stored by the API."""
        logger.info("Creating object", space_id=space_id, type_key=request.type_key, properties=len(request.properties))

        payload = self._request("POST", f"/spaces/{space_id}/objects", json=request.to_payload())
        obj = parse_object(self._entity_body(payload, EntityKind.OBJECT, request.name), space_id)

        logger.info("Object created", space_id=space_id, object_id=obj.id)
        return obj
