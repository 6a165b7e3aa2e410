"""
Value Cleaning and Validity Filters
Pure helpers that tidy a captured value and reject captures that drifted into
contract prose or into a neighbouring label.
"""

import re

from keyword_maps import (
    INVALID_VALUE_FRAGMENTS,
    LABEL_HINT_WORDS,
    LEGAL_MARKERS,
    LEGAL_OPENINGS,
    LEGAL_TERMS,
    PLACEHOLDER_VALUES,
)


LEGAL_WORD_LIMIT = 60

_LEADING_SEPARATORS = re.compile(r"^[:.\-#\s]+")
_TRAILING_SEPARATORS = re.compile(r"[;,.\s]+$")
_LABEL_FRAGMENT = re.compile(r"^(and address|information|details|contact)\b[:.\-\s]*", re.IGNORECASE)
_REASON_PREFIX = re.compile(
    r"^(reason\s+for\s+issuing\s+contract\s*[/\\]\s*amendment|reason\s+for\s+issuing\s+contract"
    r"|reason\s+for\s+issuing|for\s+issuing)[:.\-\s]*",
    re.IGNORECASE,
)
_CONTRACT_AMENDMENT_PREFIX = re.compile(r"^contract\s*[/\\]\s*amendment[:.\-\s]*", re.IGNORECASE)
_FOREIGN_LABEL_PREFIX = re.compile(
    r"^(Ancien Prix H\.T|d'application du prix|Designacion|Precio unitario|Divisa|Fecha|Vigencia)[:.\-\s]*",
    re.IGNORECASE,
)
_EARLY_COLON = re.compile(r"^([^:]{1,40}):(.*)", re.DOTALL)
_SENTENCE_STARTER = re.compile(r"^(The|This|Please|See|Refer|Attached|Subject|Regarding|Note)\b", re.IGNORECASE)
_NAME_CHARS = re.compile(r"[^A-Za-z0-9\s,.\-]")
_LONG_DIGIT_RUN = re.compile(r"\d{5}")


def _clean_once(value: str) -> str:
    clean = _LEADING_SEPARATORS.sub("", value)
    clean = _LABEL_FRAGMENT.sub("", clean)
    clean = _REASON_PREFIX.sub("", clean)
    clean = _CONTRACT_AMENDMENT_PREFIX.sub("", clean)
    clean = _FOREIGN_LABEL_PREFIX.sub("", clean)
    clean = _LEADING_SEPARATORS.sub("", clean)

    colon_match = _EARLY_COLON.match(clean)
    if colon_match:
        prefix = colon_match.group(1).lower()
        if any(word in prefix for word in LABEL_HINT_WORDS):
            clean = colon_match.group(2).strip()

    return _TRAILING_SEPARATORS.sub("", clean).strip()


def clean_value(value: str) -> str:
    """
    Strip label residue and separators from a captured value.

    Removes leading punctuation, known leading label fragments ("and address:",
    "reason for issuing ...", foreign leftovers), a leading "label:" prefix when
    it looks like a label, and trailing ;,. characters. The cleanup is repeated
    until the value stops changing, so cleaning a cleaned value is a no-op.

    Args:
        value: Raw captured text

    Returns:
        Cleaned value (may be empty)
    """
    if not value:
        return ""
    clean = value
    while True:
        next_clean = _clean_once(clean)
        if next_clean == clean:
            return clean
        clean = next_clean


def is_legal_text(value: str) -> bool:
    """True when the value reads like contract boilerplate rather than data."""
    if not value:
        return False
    lower = value.lower()
    if lower.startswith(LEGAL_OPENINGS):
        return True
    if any(marker in lower for marker in LEGAL_MARKERS):
        return True
    if sum(1 for term in LEGAL_TERMS if term in lower) >= 2:
        return True
    return len(value.split()) > LEGAL_WORD_LIMIT


def is_valid_value(value: str) -> bool:
    """
    Decide whether a captured value can be kept.

    Rejects placeholders left over from a label, legal prose, values containing
    another section's label (a double-label capture), values whose first few
    characters hold a "label:" pair, and values with no letters or digits.
    """
    if not value:
        return False
    lower = value.lower().strip()
    if lower in PLACEHOLDER_VALUES:
        return False
    if is_legal_text(value):
        return False
    if any(fragment in lower for fragment in INVALID_VALUE_FRAGMENTS):
        return False
    colon_index = value.find(":")
    if -1 < colon_index < 10:
        return False
    return any(char.isalnum() for char in value)


def is_likely_name(value: str) -> bool:
    """True for short person/company names; false for sentences, symbols or postal codes."""
    if not value or len(value) < 2:
        return False
    if _NAME_CHARS.search(value):
        return False
    if _SENTENCE_STARTER.match(value):
        return False
    return not _LONG_DIGIT_RUN.search(value)
