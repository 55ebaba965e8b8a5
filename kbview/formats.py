"""Property format taxonomy."""

from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any

from kbview.errors import UnsupportedFormat


class PropertyFormat(str, Enum):
    """Value kinds a property can hold.

    The enum value doubles as the name of the value slot in API payloads.
    """

    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    DATE = "date"
    FILES = "files"
    CHECKBOX = "checkbox"
    URL = "url"
    EMAIL = "email"
    PHONE = "phone"
    OBJECTS = "objects"

    @property
    def slot(self) -> str:
        return self.value

    @property
    def glyph(self) -> str:
        return FORMAT_GLYPHS[self]

    @property
    def is_tag_format(self) -> bool:
        return self in (PropertyFormat.SELECT, PropertyFormat.MULTI_SELECT)

    @classmethod
    def parse(cls, value: Any) -> "PropertyFormat":
        """Return the format for ``value``, raising UnsupportedFormat if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedFormat(value) from None

    @classmethod
    def slots(cls) -> list[str]:
        return [fmt.slot for fmt in cls]


FORMAT_GLYPHS: dict[PropertyFormat, str] = {
    PropertyFormat.TEXT: "icons/property/text.svg",
    PropertyFormat.NUMBER: "icons/property/number.svg",
    PropertyFormat.SELECT: "icons/property/select.svg",
    PropertyFormat.MULTI_SELECT: "icons/property/multiSelect.svg",
    PropertyFormat.DATE: "icons/property/date.svg",
    PropertyFormat.FILES: "icons/property/file.svg",
    PropertyFormat.CHECKBOX: "icons/property/checkbox.svg",
    PropertyFormat.URL: "icons/property/url.svg",
    PropertyFormat.EMAIL: "icons/property/email.svg",
    PropertyFormat.PHONE: "icons/property/phone.svg",
    PropertyFormat.OBJECTS: "icons/property/object.svg",
}

NUMBER_ERROR = "Value must be a valid number"


def parse_number(value: Any) -> int | float:
    """Parse a form value as a number.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, (int, float)):
        number = value
    else:
        text = str(value).strip()
        # int() and float() accept digit separators, form input does not
        if "_" in text:
            raise ValueError(f"Not a number: {value!r}")
        try:
            number = int(text)
        except ValueError:
            number = float(text)
    if number != number or number in (float("inf"), float("-inf")):
        raise ValueError(f"Not a finite number: {value!r}")
    return number


def number_field_validations(property_defs: Iterable[Any]) -> dict[str, Callable[[Any], str | None]]:
    """Build form validators for every number property.

    Args:
        property_defs: Objects with ``key`` and ``format`` attributes

    Returns:
        Mapping of property key to a validator returning an error message or None
    """

    def validate(value: Any) -> str | None:
        if value is None or value == "":
            return None
        try:
            parse_number(value)
        except ValueError:
            return NUMBER_ERROR
        return None

    validations = {}
    for prop in property_defs:
        if prop.format == PropertyFormat.NUMBER:
            validations[prop.key] = validate
    return validations
