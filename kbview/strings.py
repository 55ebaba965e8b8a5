"""Label helpers for list views."""

import unicodedata

DATE_LABELS = {
    "created_date": "Created Date",
    "last_modified_date": "Last Modified Date",
    "last_opened_date": "Last Opened Date",
}

SHORT_DATE_LABELS = {
    "created_date": "Created",
    "last_modified_date": "Modified",
    "last_opened_date": "Opened",
}

MEMBER_ROLES = {
    "reader": "Viewer",
    "writer": "Editor",
    "owner": "Owner",
    "no_permissions": "No Permissions",
}


def pluralize(count: int, noun: str, suffix: str = "s", with_number: bool = False) -> str:
    pluralized = f"{noun}{suffix if count != 1 else ''}"
    return f"{count} {pluralized}" if with_number else pluralized


def date_label(sort_field: str | None) -> str | None:
    """Label of the date shown next to items sorted by ``sort_field``."""
    return DATE_LABELS.get(sort_field or "")


def short_date_label(sort_field: str | None) -> str:
    return SHORT_DATE_LABELS.get(sort_field or "", "Date")


def format_member_role(role: str) -> str:
    return MEMBER_ROLES.get(role, role)


def section_title(search_text: str, view: str) -> str:
    """Title of the regular section of a list view."""
    if search_text:
        return "Search Results"
    return f"All {view[:1].upper()}{view[1:]}"


ZERO_WIDTH_JOINER = "\u200d"
KEYCAP = "\u20e3"
VARIATION_SELECTORS = ("\ufe0e", "\ufe0f")


def is_emoji(value: str) -> bool:
    """Whether ``value`` is a single emoji, including modifier and joiner sequences."""
    if not value:
        return False
    return all(_is_emoji_segment(segment) for segment in value.split(ZERO_WIDTH_JOINER))


def _is_emoji_segment(segment: str) -> bool:
    keycap = KEYCAP in segment
    base = [ch for ch in segment if not _is_modifier(ch)]
    if keycap:
        return len(base) == 1 and base[0] in "#*0123456789"
    if len(base) == 2:
        return all(0x1F1E6 <= ord(ch) <= 0x1F1FF for ch in base)
    return len(base) == 1 and _is_pictograph(base[0])


def _is_modifier(ch: str) -> bool:
    code = ord(ch)
    return ch in VARIATION_SELECTORS or ch == KEYCAP or 0x1F3FB <= code <= 0x1F3FF or 0xE0020 <= code <= 0xE007F


def _is_pictograph(ch: str) -> bool:
    code = ord(ch)
    if 0x1F000 <= code <= 0x1FAFF or 0x2600 <= code <= 0x27BF or 0x2B00 <= code <= 0x2BFF:
        return True
    return unicodedata.category(ch) == "So"
