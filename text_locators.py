"""
Keyword-Driven Locators
Find the value bound to a label inside raw document text, either on the same
line as the label or in the block of lines that follows it.
"""

import re
from functools import lru_cache
from typing import Callable, List, Optional, Sequence, Tuple

from keyword_maps import SECTION_STOP_PREFIXES, SECTION_STOP_TERMS
from value_filters import clean_value, is_legal_text, is_valid_value


# Layout thresholds (character offsets)
RIGHT_COLUMN_MIN_PREFIX = 4
RIGHT_COLUMN_MIN_OFFSET = 30
FAR_INDENT = 30
NEAR_INDENT = 10
LABEL_SLACK = 20
LOOKAHEAD_LINES = 2
LOOKAHEAD_COLON_LIMIT = 15

LEFT_COLUMN = "left"
RIGHT_COLUMN = "right"

_OK = "ok"
_SKIP = "skip"
_STOP = "stop"

_SEGMENT_SPLIT = re.compile(r"\s{3,}|\t")
_LABEL_PUNCTUATION = re.compile(r"[:.\-]")
_LABEL_REMAINDER = re.compile(r"^(and address|information|contact|details|code|number|\s)+$", re.IGNORECASE)
_RULE_LINE = re.compile(r"^[-_]{2,}$")
_DUNS_LABELLED = re.compile(r"duns(?:\s*(?:number|no|code|#))?[:.\s]*\d{9,15}", re.IGNORECASE)
_DUNS_TRAILING_LABEL = re.compile(r"duns[:.\s]*$", re.IGNORECASE)
_BARE_DUNS = re.compile(r"\b\d{9,15}\b")


@lru_cache(maxsize=512)
def _same_line_pattern(key: str) -> "re.Pattern":
    return re.compile(r"(?:^|\s)" + re.escape(key) + r"[:.\-\s]+(.*)", re.IGNORECASE)


def _accepted(value: str, accept: Optional[Callable[[str], bool]]) -> bool:
    return accept is None or accept(value)


def scan_line_for_value(
    text: str,
    keys: Sequence[str],
    accept: Optional[Callable[[str], bool]] = None,
    label_slack: int = LABEL_SLACK,
) -> str:
    """
    Same-line locator.

    Keys are tried in priority order; the first key that yields a valid value
    wins. For each line, "<key><separator><value>" is matched first. When the
    line is only the label (plus up to ``label_slack`` characters), the next
    two lines are checked for a standalone value, skipping lines that open
    with their own "label:" pair.

    Args:
        text: Document text
        keys: Ordered label synonyms
        accept: Optional extra predicate a candidate value must satisfy
        label_slack: Extra characters tolerated on a label-only line

    Returns:
        Cleaned value, or "" when nothing matched
    """
    lines = text.split("\n")
    for key in keys:
        pattern = _same_line_pattern(key)
        lower_key = key.lower()
        for index, raw_line in enumerate(lines):
            line = raw_line.strip()
            if not line:
                continue

            match = pattern.search(line)
            if match:
                value = clean_value(match.group(1))
                if value and is_valid_value(value) and _accepted(value, accept):
                    return value

            label_only = _LABEL_PUNCTUATION.sub("", line).strip()
            if not (label_only.lower().startswith(lower_key) and len(label_only) < len(key) + label_slack):
                continue

            for next_raw in lines[index + 1:index + 1 + LOOKAHEAD_LINES]:
                next_line = next_raw.strip()
                colon_index = next_line.find(":")
                if -1 < colon_index < LOOKAHEAD_COLON_LIMIT:
                    continue
                if next_line and is_valid_value(next_line) and lower_key not in next_line.lower():
                    value = clean_value(next_line)
                    if value and _accepted(value, accept):
                        return value
    return ""


def column_of(line: str, key_index: int) -> str:
    """
    Classify a label occurrence as sitting in the left or right column.

    A label preceded by real text, or starting far from the margin, belongs to
    the right-hand column of a two-column form.
    """
    prefix = line[:key_index]
    if len(prefix.strip()) >= RIGHT_COLUMN_MIN_PREFIX or key_index > RIGHT_COLUMN_MIN_OFFSET:
        return RIGHT_COLUMN
    return LEFT_COLUMN


def _is_section_stop(lower: str, lower_key: str) -> bool:
    if lower.startswith(SECTION_STOP_PREFIXES):
        return True
    for term, exemption in SECTION_STOP_TERMS:
        if term in lower and (exemption is None or exemption not in lower_key):
            return True
    return False


def _segment_status(segment: str, lower_key: str) -> Tuple[str, Optional[str]]:
    """Classify one captured segment and return the value to keep, if any."""
    if not segment or not segment.strip():
        return _OK, None

    clean = clean_value(segment)
    if _RULE_LINE.match(clean):
        return _SKIP, None

    if "duns" in clean.lower() or _BARE_DUNS.search(clean):
        clean = _DUNS_LABELLED.sub("", clean)
        clean = _BARE_DUNS.sub("", clean).strip()
        clean = clean_value(_DUNS_TRAILING_LABEL.sub("", clean))
        if not clean:
            return _SKIP, None

    lower = clean.lower()
    if is_legal_text(clean) or _is_section_stop(lower, lower_key):
        return _STOP, None
    if is_valid_value(clean):
        return _OK, clean
    return _OK, None


def _follow_segment(line: str, column: str, prefix: str) -> Tuple[Optional[str], bool]:
    """
    Pick the part of a following line that belongs to the label's column.

    Returns (segment, stop); a None segment means the line is skipped.
    """
    stripped = line.strip()
    indent = len(line) - len(line.lstrip())
    parts = _SEGMENT_SPLIT.split(stripped)

    if column == LEFT_COLUMN:
        if indent > FAR_INDENT:
            return None, False
        return parts[0], False

    if indent > FAR_INDENT:
        return stripped, False
    if len(parts) > 1:
        return parts[-1], False
    if len(prefix.strip()) >= RIGHT_COLUMN_MIN_PREFIX:
        # single-segment line under a right-column label belongs to the left column
        return None, False
    if len(prefix) > RIGHT_COLUMN_MIN_OFFSET and indent < NEAR_INDENT:
        return None, True
    return stripped, False


def scan_block_for_value(text: str, keys: Sequence[str], max_lines: int = 10) -> str:
    """
    Block locator.

    Collects the same-line remainder of a label plus up to ``max_lines``
    following lines, keeping only the segment in the label's column. Capture
    stops at the next section header or at legal prose, and embedded DUNS-like
    digit runs are removed from every captured line.

    Args:
        text: Document text
        keys: Ordered label synonyms
        max_lines: Number of lines after the label to consider

    Returns:
        Captured lines joined by newlines, or "" when nothing matched
    """
    lines = text.split("\n")
    for key in keys:
        lower_key = key.lower()
        for index, line in enumerate(lines):
            key_index = line.lower().find(lower_key)
            if key_index == -1:
                continue

            prefix = line[:key_index]
            column = column_of(line, key_index)
            rest = line[key_index + len(key):].strip()
            if _LABEL_REMAINDER.match(_LABEL_PUNCTUATION.sub("", rest)):
                rest = ""

            block: List[str] = []
            if rest:
                segment = rest if column == RIGHT_COLUMN else _SEGMENT_SPLIT.split(rest)[0]
                status, value = _segment_status(segment, lower_key)
                if status == _STOP:
                    # label runs straight into another section; try the next occurrence
                    continue
                if value:
                    block.append(value)

            for follow in lines[index + 1:index + 1 + max_lines]:
                if not follow.strip():
                    continue
                segment, stop = _follow_segment(follow, column, prefix)
                if stop:
                    break
                if segment is None:
                    continue
                status, value = _segment_status(segment, lower_key)
                if status == _STOP:
                    break
                if value:
                    block.append(value)

            if block:
                return "\n".join(block)
    return ""
