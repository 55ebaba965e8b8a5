"""Assembly of typed property values from raw form input."""

from collections.abc import Iterable, Mapping
from datetime import date, datetime, time
from typing import Any

import structlog

from kbview.errors import InvalidDateValue, InvalidNumberValue, UnsupportedFormat
from kbview.formats import PropertyFormat, number_field_validations, parse_number
from kbview.models import PropertyLinkWithValue
from kbview.strings import is_emoji

logger = structlog.get_logger()

BUNDLED_PROPERTY_KEYS = frozenset(
    {
        "description",
        "type",
        "added_date",
        "created_date",
        "creator",
        "last_modified_date",
        "last_modified_by",
        "last_opened_date",
        "links",
        "backlinks",
    }
)
DESCRIPTION_KEY = "description"
SOURCE_KEY = "source"

# Types whose objects may be created without a name, by key or unique key
NAMELESS_TYPE_KEYS = frozenset({"bookmark", "note", "ot-bookmark", "ot-note"})
BOOKMARK_TYPE_KEYS = frozenset({"bookmark", "ot-bookmark"})
LIST_FORMATS = (PropertyFormat.MULTI_SELECT, PropertyFormat.FILES, PropertyFormat.OBJECTS)
TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def is_unset(value: Any) -> bool:
    """Whether a form value means "not set" rather than "set to empty"."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def format_date(key: str, value: Any) -> str:
    """Coerce a form value into an RFC 3339 timestamp.

    Naive values are interpreted in local time.

    Raises:
        InvalidDateValue: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time())
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidDateValue(key, value) from None

    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed.isoformat(timespec="seconds")


def _as_list(value: Any) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return [str(value)]


def build_entry(key: str, fmt: PropertyFormat, raw: Any) -> PropertyLinkWithValue:
    """Build one typed entry for a set value.

    Raises:
        InvalidDateValue: For an unparsable date
        InvalidNumberValue: For an unparsable number
    """
    entry = PropertyLinkWithValue(key=key)
    if fmt in (PropertyFormat.TEXT, PropertyFormat.SELECT, PropertyFormat.URL, PropertyFormat.EMAIL, PropertyFormat.PHONE):
        setattr(entry, fmt.slot, str(raw))
    elif fmt == PropertyFormat.NUMBER:
        try:
            entry.number = parse_number(raw)
        except ValueError:
            raise InvalidNumberValue(key, raw) from None
    elif fmt == PropertyFormat.MULTI_SELECT:
        entry.multi_select = _as_list(raw)
    elif fmt == PropertyFormat.DATE:
        entry.date = format_date(key, raw)
    elif fmt == PropertyFormat.CHECKBOX:
        entry.checkbox = bool(raw)
    elif fmt in (PropertyFormat.FILES, PropertyFormat.OBJECTS):
        setattr(entry, fmt.slot, _as_list(raw))
    return entry


def build_property_entries(form_values: Mapping[str, Any], property_defs: Iterable[Any]) -> list[PropertyLinkWithValue]:
    """Assemble the property values to submit with a create or update request.

    Unset values are omitted. A value that cannot be coerced to its format is
    skipped with a warning so the remaining properties are still submitted.
    Bundled properties are not taken from ``property_defs``; the description
    and source entries are appended from their own form fields instead.

    Args:
        form_values: Raw form values keyed by property key
        property_defs: Objects with ``key`` and ``format`` attributes

    Returns:
        One entry per set property, in definition order
    """
    entries: list[PropertyLinkWithValue] = []

    for prop in property_defs:
        if prop.key in BUNDLED_PROPERTY_KEYS or prop.key == SOURCE_KEY:
            continue

        raw = form_values.get(prop.key)
        if is_unset(raw):
            continue

        try:
            fmt = PropertyFormat.parse(prop.format)
            entries.append(build_entry(prop.key, fmt, raw))
        except UnsupportedFormat as e:
            logger.warning("Skipping property with unsupported format", key=prop.key, format=str(e.format))
        except (InvalidDateValue, InvalidNumberValue) as e:
            logger.warning("Skipping property with invalid value", key=prop.key, error=str(e))

    description = form_values.get(DESCRIPTION_KEY)
    if not is_unset(description):
        entries.append(PropertyLinkWithValue(key=DESCRIPTION_KEY, text=str(description)))

    source = form_values.get(SOURCE_KEY)
    if not is_unset(source):
        entries.append(PropertyLinkWithValue(key=SOURCE_KEY, url=str(source)))

    logger.debug("Built property entries", count=len(entries))
    return entries


def parse_form_pairs(pairs: Iterable[str], property_defs: Iterable[Any]) -> dict[str, Any]:
    """Turn ``KEY=VALUE`` pairs from the command line into form values.

    Values of list formats are split on commas and checkbox values are read as
    booleans. Everything else is kept as text for :func:`build_property_entries`
    to coerce.

    Raises:
        ValueError: If a pair has no ``=`` or names an unknown property
    """
    formats = {prop.key: prop.format for prop in property_defs}
    form_values: dict[str, Any] = {}

    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Property must be given as KEY=VALUE: {pair!r}")
        key, value = pair.split("=", 1)
        key = key.strip()
        value = value.strip()
        if key not in formats:
            raise ValueError(f"Unknown property {key!r}, expected one of: {', '.join(sorted(formats))}")

        fmt = formats[key]
        if fmt in LIST_FORMATS:
            form_values[key] = [item.strip() for item in value.split(",") if item.strip()]
        elif fmt == PropertyFormat.CHECKBOX:
            form_values[key] = value.lower() in TRUE_VALUES
        else:
            form_values[key] = value

    return form_values


def create_form_errors(
    name: str, icon: str, type_key: str, form_values: Mapping[str, Any], property_defs: Iterable[Any]
) -> dict[str, str]:
    """Validate a create-object form.

    Returns:
        Error message per field, empty when the form can be submitted
    """
    errors: dict[str, str] = {}

    if type_key not in NAMELESS_TYPE_KEYS and not name.strip():
        errors["name"] = "Name is required"
    if icon and not is_emoji(icon):
        errors["icon"] = "Icon must be single emoji"
    if type_key in BOOKMARK_TYPE_KEYS and not str(form_values.get(SOURCE_KEY) or "").strip():
        errors[SOURCE_KEY] = "Source is required for Bookmarks"

    for key, validate in number_field_validations(property_defs).items():
        message = validate(form_values.get(key))
        if message:
            errors[key] = message

    return errors
