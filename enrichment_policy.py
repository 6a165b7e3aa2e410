"""
Enrichment Policy
Pure decision and merge rules around the optional AI enrichment step, and the
page reconciliation rule applied after the per-page pass.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Tuple

from contract_fields import DOCUMENT_LEVEL_PAGE_FIELDS, NOT_FOUND, PageExtraction
from keyword_maps import FOREIGN_MARKERS, TRANSLATABLE_FIELDS
from normalizers import format_date


FOREIGN_SCAN_CHARS = 2500
DENSITY_SCAN_CHARS = 500
NON_ASCII_THRESHOLD = 50
FOREIGN_VALUE_MIN_LENGTH = 3
TRANSLATED_LANGUAGE = "English (Translated)"

REASON_FOREIGN_MARKERS = "foreign_markers"
REASON_NON_LATIN = "non_latin_density"
REASON_MISSING_CONTRACT = "missing_contract_number"
REASON_MISSING_PART = "missing_part_number"


@dataclass(frozen=True)
class EnrichmentDecision:
    """Whether to call the enrichment service, and why."""
    warranted: bool
    triggered_foreign: bool
    reasons: Tuple[str, ...] = ()


def contains_foreign_marker(value: str) -> bool:
    lower = value.lower()
    return any(marker in lower for marker in FOREIGN_MARKERS)


def detect_foreign_language(text: str) -> bool:
    """True when the document head contains non-English contract vocabulary."""
    return contains_foreign_marker(text[:FOREIGN_SCAN_CHARS])


def has_non_latin_density(text: str) -> bool:
    """True when the first characters are dominated by non-ASCII script (CJK, Cyrillic)."""
    return sum(1 for char in text[:DENSITY_SCAN_CHARS] if ord(char) > 127) > NON_ASCII_THRESHOLD


def decide_enrichment(text: str, baseline: Mapping[str, str]) -> EnrichmentDecision:
    """
    Decide whether the heuristic baseline should be enriched.

    Enrichment is warranted on a foreign-language signal or when either
    critical identifier (contract number, part number) is missing.
    """
    reasons: List[str] = []
    if detect_foreign_language(text):
        reasons.append(REASON_FOREIGN_MARKERS)
    if has_non_latin_density(text):
        reasons.append(REASON_NON_LATIN)
    if baseline.get("contractNumber", NOT_FOUND) == NOT_FOUND:
        reasons.append(REASON_MISSING_CONTRACT)
    if baseline.get("partNumber", NOT_FOUND) == NOT_FOUND:
        reasons.append(REASON_MISSING_PART)

    triggered_foreign = REASON_FOREIGN_MARKERS in reasons or REASON_NON_LATIN in reasons
    return EnrichmentDecision(warranted=bool(reasons), triggered_foreign=triggered_foreign, reasons=tuple(reasons))


def _has_value(value) -> bool:
    return isinstance(value, str) and bool(value.strip()) and value.strip() != NOT_FOUND


def merge_enrichment(
    baseline: Mapping[str, str],
    ai_partial: Mapping[str, str],
    triggered_foreign: bool,
) -> Dict[str, str]:
    """
    Merge an enrichment result into the heuristic baseline.

    Rules:
        - A present, non-N/A AI value overwrites the baseline value. Amendment
          numbers are only taken when purely numeric; issue dates are normalized.
        - On the foreign-language path, a translatable field the AI left empty
          is set to N/A when the baseline value itself contains a foreign marker.
        - The AI's language is adopted when given; on the foreign path an
          unset or plain "English" language becomes "English (Translated)".

    Neither input is modified.

    Args:
        baseline: Heuristic record
        ai_partial: Partial field map from the enrichment service
        triggered_foreign: True when enrichment was triggered by a foreign-language signal

    Returns:
        New merged record
    """
    merged = dict(baseline)

    for name, value in ai_partial.items():
        if name not in merged or name == "language" or not _has_value(value):
            continue
        value = value.strip()
        if name == "amendmentNumber":
            if value.isdigit():
                merged[name] = value
        elif name == "issueDate":
            merged[name] = format_date(value)
        else:
            merged[name] = value

    if triggered_foreign:
        for name in TRANSLATABLE_FIELDS:
            if _has_value(ai_partial.get(name)):
                continue
            current = merged.get(name, NOT_FOUND)
            if current != NOT_FOUND and len(current) > FOREIGN_VALUE_MIN_LENGTH and contains_foreign_marker(current):
                merged[name] = NOT_FOUND

    language = ai_partial.get("language")
    if _has_value(language):
        merged["language"] = language.strip()
    if triggered_foreign and merged.get("language", NOT_FOUND) in ("", NOT_FOUND, "English"):
        merged["language"] = TRANSLATED_LANGUAGE

    return merged


def reconcile_pages(document_fields: Mapping[str, str], pages: Sequence[PageExtraction]) -> List[PageExtraction]:
    """
    Force the document-level party and location fields onto every page.

    Buyer, seller, lbe and manufacturing location on each page are replaced by
    the document-level values so all pages of one contract agree. Returns new
    page objects; the input pages are left untouched.
    """
    reconciled: List[PageExtraction] = []
    for page in pages:
        fields = dict(page["fields"])
        for name in DOCUMENT_LEVEL_PAGE_FIELDS:
            fields[name] = document_fields.get(name, NOT_FOUND)
        reconciled.append(PageExtraction(pageNumber=page["pageNumber"], rawText=page["rawText"], fields=fields))
    return reconciled
