import re
from datetime import date, datetime
from typing import Optional

from babel.dates import format_date

DISPLAY_DATE_PATTERN = "dd MMM yyyy"
_BASIC_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")


def parse_timestamp(value: str) -> datetime:
    """Parse CMS timestamps such as 2021-03-25T19:25:28+0000 or ...Z."""
    normalized = value.strip()
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    normalized = _BASIC_OFFSET.sub(r"\1:\2", normalized)
    return datetime.fromisoformat(normalized)


def format_publication_date(value: Optional[str], locale: str) -> Optional[str]:
    """
    Format a publication timestamp as "25 mar 2021" using the locale's
    abbreviated month names. Returns None when there is no date.
    """
    if not value:
        return None
    published: date = parse_timestamp(value).date()
    # CLDR abbreviations carry a trailing dot in some locales ("mar.")
    return format_date(published, DISPLAY_DATE_PATTERN, locale=locale).replace(".", "")
