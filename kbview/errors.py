"""Exceptions raised by the kbview mapping layer and its collaborators."""

from typing import Any


class KbviewError(Exception):
    """Base class for kbview errors."""


class UnsupportedFormat(KbviewError, ValueError):
    """A property format outside the known taxonomy."""

    def __init__(self, format: Any) -> None:
        self.format = format
        super().__init__(f"Unsupported property format: {format!r}")


class PayloadError(KbviewError, ValueError):
    """A raw payload violates the shape its kind requires."""


class InvalidDateValue(KbviewError, ValueError):
    """A form value for a date property could not be parsed."""

    def __init__(self, key: str, value: Any) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid date value for property {key}: {value!r}")


class InvalidNumberValue(KbviewError, ValueError):
    """A form value for a number property could not be parsed."""

    def __init__(self, key: str, value: Any) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid number value for property {key}: {value!r}")


class IconResolutionFailure(KbviewError):
    """A file icon could not be turned into a displayable reference."""


class PinnedCapacityError(KbviewError):
    """The pinned store is full."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        super().__init__(f"Can't pin more than {capacity} items")


class ApiError(KbviewError):
    """The REST API answered with an error status or could not be reached."""

    def __init__(self, message: str, status: int | None = None) -> None:
        self.status = status
        super().__init__(message)


class NotFoundError(ApiError):
    """The REST API answered 404 for the requested entity."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status=404)
