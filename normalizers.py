"""
Date and Country Normalizers
Turns multi-locale date strings into ISO dates and address blocks into a
canonical country name.
"""

import re
from datetime import date, datetime
from typing import Optional

from dateutil import parser as date_parser

from contract_fields import NOT_FOUND
from keyword_maps import COUNTRY_LOOKUP, MONTH_NAMES


_MONTH_NUMBERS = dict(MONTH_NAMES)
_MONTH_PATTERN = re.compile(
    r"(?<![a-zäöüéñ])(" + "|".join(re.escape(name) for name, _ in MONTH_NAMES) + r")(?![a-zäöüéñ])"
)
_ISO_DATE = re.compile(r"(?<!\d)(\d{4})[.\-/](\d{1,2})[.\-/](\d{1,2})(?!\d)")
_DATE_TOKEN = re.compile(r"(?<!\d)(\d{1,2})[.\-/](\d{1,2})[.\-/](\d{4}|\d{2})(?!\d)")
_DAY = re.compile(r"(?<!\d)(\d{1,2})(?!\d)")
_YEAR = re.compile(r"(?<!\d)(\d{4})(?!\d)")
_PARSE_DEFAULT = datetime(2000, 1, 1)

_COUNTRY_PATTERNS = tuple(
    (re.compile(r"(?<!\w)" + re.escape(key) + r"(?!\w)"), country)
    for key, country in COUNTRY_LOOKUP.items()
)


def _compose(year: str, month: str, day: str) -> Optional[str]:
    try:
        value = date(int(year), int(month), int(day))
    except ValueError:
        return None
    return value.isoformat()


def format_date(raw: str) -> str:
    """
    Normalize a date string to YYYY-MM-DD.

    Month names (English, German, Spanish, full or abbreviated) are replaced by
    their number in place. A D.M.Y / D-M-Y token is read day-first; a token
    separated only by "/" is read month-first (US style) unless its first group
    exceeds 12, in which case it must be the day. Two-digit years become 20YY.
    This day/month split is an approximation, not a guarantee.

    Args:
        raw: Raw date text as captured from the document

    Returns:
        ISO date, the raw text unchanged when nothing parses, or N/A for empty input
    """
    if not raw or raw.strip() == NOT_FOUND:
        return NOT_FOUND

    text = raw.strip()
    clean = text.replace(",", "").lower()

    month_match = _MONTH_PATTERN.search(clean)
    month_start = -1
    if month_match:
        month_start = month_match.start()
        month_number = _MONTH_NUMBERS[month_match.group(1)]
        clean = clean[:month_start] + month_number + clean[month_match.end():]

    iso_match = _ISO_DATE.search(clean)
    if iso_match:
        result = _compose(*iso_match.groups())
        if result:
            return result

    token = _DATE_TOKEN.search(clean)
    if token:
        first, second, year = token.groups()
        if len(year) == 2:
            year = "20" + year
        slash_only = "/" in text and "." not in text
        if month_match and token.start(1) == month_start:
            month, day = first, second
        elif month_match and token.start(2) == month_start:
            day, month = first, second
        elif slash_only and int(first) <= 12:
            month, day = first, second
        else:
            day, month = first, second
        result = _compose(year, month, day)
        if result:
            return result

    if month_match:
        # "march 15 2024" / "15 märz 2024": month known, read day and year from the rest
        remainder = clean[:month_start] + " " + clean[month_start + len(month_number):]
        year_match = _YEAR.search(remainder)
        if year_match:
            day_match = _DAY.search(remainder[:year_match.start()] + " " + remainder[year_match.end():])
            if day_match:
                result = _compose(year_match.group(1), month_number, day_match.group(1))
                if result:
                    return result

    if _YEAR.search(text):
        try:
            return date_parser.parse(text, default=_PARSE_DEFAULT).date().isoformat()
        except (ValueError, OverflowError):
            pass

    return raw


def extract_country(address: str) -> str:
    """
    Infer a canonical country name from an address block.

    The last line is checked against the city/country table first, then the
    whole block. When nothing matches, a last line without digits is returned
    as a best-effort guess.

    Args:
        address: Multi-line address block

    Returns:
        Country name, the last address line, or N/A
    """
    if not address or address.strip() == NOT_FOUND:
        return NOT_FOUND

    clean = address.replace("\r", "").strip()
    last_line = clean.split("\n")[-1].strip()

    for haystack in (last_line.upper(), clean.upper()):
        for pattern, country in _COUNTRY_PATTERNS:
            if pattern.search(haystack):
                return country

    if not re.search(r"\d", last_line) and len(last_line) > 2:
        return last_line
    return NOT_FOUND
