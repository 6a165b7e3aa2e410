"""
Field-Specific Extractors
One strategy per field category, built on the keyword locators, plus the
heuristic pass that assembles a complete record from raw document text.
"""

import logging
import os
import re
from typing import Dict, Optional, Sequence

from contract_fields import NOT_FOUND, new_record
from keyword_maps import CURRENCY_CODES, CURRENCY_SYMBOLS, KEYWORD_MAP
from normalizers import extract_country, format_date
from text_locators import scan_block_for_value, scan_line_for_value
from value_filters import is_legal_text, is_likely_name, is_valid_value

logger = logging.getLogger(__name__)


HEADER_CONTEXT_CHARS = 5000
ISO_HEADER_CHARS = 1000
PARTY_BLOCK_LINES = 12
ALL_BUYER_PLANTS = "All Buyer's Plants - As Scheduled"

_CODED_CONTRACT = re.compile(r"\b(PO|CTR|CW|SC)[- ]?(\d{4,10})\b", re.IGNORECASE)
_LOOSE_CONTRACT = re.compile(r"(?:Contract|Order)\s*(?:No|Number|#)[\s.:]+([A-Z0-9-]{4,20})", re.IGNORECASE)
_FILENAME_CONTRACT = re.compile(r"(PO\d+|CTR\d+|CW\d+)", re.IGNORECASE)
_FILENAME_STEM = re.compile(r"^[A-Z0-9]{6,12}$", re.IGNORECASE)
_AMENDMENT_DIGITS = re.compile(r"^\d{1,4}$")
_LOOSE_AMENDMENT = re.compile(
    r"\b(?:Amendment|Amnd|Amdt|Rev|Revision)(?:[:.\s]+(?:No|Num|#|Number))?[:.\-#\s]+(\d{1,4})\b",
    re.IGNORECASE,
)
_AMENDMENT_HEADER = re.compile(r"AMENDMENT NUMBER", re.IGNORECASE)
_NINE_DIGITS = re.compile(r"\d{9}")
_CURRENCY_CODE = re.compile(r"\b(" + "|".join(CURRENCY_CODES) + r")\b", re.IGNORECASE)
_CURRENCY_CODE_STRICT = re.compile(r"\b(" + "|".join(CURRENCY_CODES) + r")\b")
_HAZARD_YES = re.compile(r"yes|y\b", re.IGNORECASE)
_PHONE_SUFFIX = re.compile(r"(Ph|Tel|Fax|Cell|Mobile)[\s.:-]*[\d\-() ]+", re.IGNORECASE)
_TRAILING_DASHES = re.compile(r"[-/|]+$")
_ISO_HEADER_DATE = re.compile(r"\b\d{4}[-./]\d{2}[-./]\d{2}\b")
_ALL_BUYER_PLANTS = re.compile(r"all buyer'?s plants", re.IGNORECASE)
_NUMERIC_LINE = re.compile(r"^[\d\-\s.]+$")


def _or_not_found(value: str) -> str:
    return value or NOT_FOUND


def _is_compact_token(value: str) -> bool:
    return 3 < len(value) < 25 and " " not in value


def _has_digit(value: str) -> bool:
    return any(char.isdigit() for char in value)


def extract_contract_number(text: str, filename: str = "") -> str:
    """
    Resolve the contract number.

    Order: domain-coded number (PO/CTR/CW/SC + digits), labelled compact token,
    loose "Contract/Order No" pattern, then the filename.
    """
    coded = _CODED_CONTRACT.search(text)
    if coded:
        return coded.group(0).upper()

    value = scan_line_for_value(text, KEYWORD_MAP["contract"], accept=_is_compact_token)
    if value:
        return value

    loose = _LOOSE_CONTRACT.search(text)
    if loose:
        return loose.group(1)

    if filename:
        basename = os.path.basename(filename)
        coded_name = _FILENAME_CONTRACT.search(basename)
        if coded_name:
            return coded_name.group(0).upper()
        stem = basename.split(".")[0]
        if _FILENAME_STEM.match(stem) and _has_digit(stem):
            return stem.upper()

    return NOT_FOUND


def extract_amendment_number(text: str) -> str:
    """Amendment number as 1-4 digits; "0" (the original contract) when absent."""
    value = scan_line_for_value(text, KEYWORD_MAP["amendment"], accept=_AMENDMENT_DIGITS.match)
    if value:
        return value

    loose = _LOOSE_AMENDMENT.search(text)
    if loose:
        return loose.group(1)

    lines = text.split("\n")
    for index, line in enumerate(lines[:-1]):
        if _AMENDMENT_HEADER.search(line):
            following = lines[index + 1].strip()
            if _AMENDMENT_DIGITS.match(following):
                return following
            break

    return "0"


def extract_price(text: str, keys: Sequence[str]) -> str:
    """Same-line price lookup; the value must contain a digit."""
    return _or_not_found(scan_line_for_value(text, keys, accept=_has_digit, label_slack=15))


def extract_duns(text: str, keys: Sequence[str]) -> str:
    """
    Resolve a 9-digit DUNS-like code.

    The labelled value is tried first; otherwise any of the labels followed
    within 50 characters (newlines included) by a 9-digit run.
    """
    value = scan_line_for_value(text, keys)
    digits = _NINE_DIGITS.search(value)
    if digits:
        return digits.group(0)

    joined = "|".join(re.escape(key) for key in keys)
    nearby = re.search(r"(" + joined + r").{0,50}?(\d{9})", text, re.IGNORECASE | re.DOTALL)
    if nearby:
        return nearby.group(2)
    return NOT_FOUND


def extract_location(text: str) -> str:
    value = scan_block_for_value(text, KEYWORD_MAP["location"], max_lines=6)
    if value and len(value) > 5 and not is_legal_text(value):
        return value
    return NOT_FOUND


def extract_currency(text: str) -> str:
    """
    Resolve the ISO-like currency code.

    Labelled value, then any code in the document, then a currency symbol;
    defaults to USD.
    """
    value = scan_line_for_value(text, KEYWORD_MAP["currency"])
    labelled = _CURRENCY_CODE.search(value)
    if labelled:
        return labelled.group(0).upper()

    anywhere = _CURRENCY_CODE_STRICT.search(text)
    if anywhere:
        return anywhere.group(0)

    for symbol, code in CURRENCY_SYMBOLS:
        if symbol in text:
            return code
    return "USD"


def extract_hazardous(text: str) -> str:
    value = scan_line_for_value(text, KEYWORD_MAP["hazardous"])
    return "Yes" if _HAZARD_YES.search(value) else "No"


def extract_account_manager(text: str) -> str:
    """Labelled contact name with phone/fax suffixes removed; must look like a name."""
    value = scan_line_for_value(text, KEYWORD_MAP["manager"])
    if value:
        value = _PHONE_SUFFIX.sub("", value, count=1).strip()
        value = _TRAILING_DASHES.sub("", value).strip()
    if value and is_likely_name(value) and is_valid_value(value):
        return value
    return NOT_FOUND


def derive_client_name(buyer_block: str) -> str:
    """
    Client name from the buyer block.

    First line (up to its first comma) that is not purely numeric and is longer
    than two characters; otherwise the first line as-is.
    """
    if not buyer_block or buyer_block == NOT_FOUND or is_legal_text(buyer_block):
        return NOT_FOUND
    lines = buyer_block.split("\n")
    for line in lines:
        candidate = line.split(",")[0].strip()
        if not _NUMERIC_LINE.match(candidate) and len(candidate) > 2:
            return candidate
    return _or_not_found(lines[0].split(",")[0].strip())


def extract_issue_date(text: str) -> str:
    raw = scan_line_for_value(text, KEYWORD_MAP["date"])
    if not raw:
        header_date = _ISO_HEADER_DATE.search(text[:ISO_HEADER_CHARS])
        if header_date:
            raw = header_date.group(0)
    return format_date(raw)


def extract_receiving_plants(text: str) -> str:
    value = scan_block_for_value(text, KEYWORD_MAP["receivingPlants"], max_lines=10)
    if _ALL_BUYER_PLANTS.search(value):
        return ALL_BUYER_PLANTS
    return _or_not_found(value)


def extract_heuristic_fields(
    text: str,
    filename: str = "",
    is_page_mode: bool = False,
    company_hint: Optional[str] = None,
) -> Dict[str, str]:
    """
    Run every field extractor over a document (or page) text.

    Args:
        text: Full document text, or the text of a single page
        filename: Source filename; only used as a last-resort contract number
        is_page_mode: True for per-page runs (filename fallback disabled)
        company_hint: Caller-supplied company name; overrides the derived client name

    Returns:
        Complete record; unresolved fields hold their defaults
    """
    logger.debug(f"Heuristic pass over {len(text)} characters (page mode: {is_page_mode})")
    header = text[:HEADER_CONTEXT_CHARS]

    def line(key: str) -> str:
        return _or_not_found(scan_line_for_value(text, KEYWORD_MAP[key]))

    ship_from_duns = extract_duns(text, KEYWORD_MAP["shipFromDuns"])
    general_duns = extract_duns(text, KEYWORD_MAP["duns"])
    if general_duns == NOT_FOUND:
        general_duns = ship_from_duns

    buyer = (
        scan_block_for_value(header, KEYWORD_MAP["buyer"], max_lines=PARTY_BLOCK_LINES)
        or scan_line_for_value(header, KEYWORD_MAP["buyer"])
        or NOT_FOUND
    )
    if is_legal_text(buyer):
        buyer = NOT_FOUND
    seller = scan_block_for_value(header, KEYWORD_MAP["seller"], max_lines=PARTY_BLOCK_LINES) or NOT_FOUND
    if is_legal_text(seller):
        seller = NOT_FOUND

    manufacturing_location = seller if seller != NOT_FOUND else extract_location(text)
    client_name = company_hint.strip() if company_hint and company_hint.strip() else derive_client_name(buyer)
    issue_date = extract_issue_date(text)

    return new_record(
        contractNumber=extract_contract_number(text, "" if is_page_mode else filename),
        amendmentNumber=extract_amendment_number(text),
        partNumber=line("part"),
        partDescription=line("partDescription"),
        drawingNumber=line("drawingNumber"),
        lessFinishPartNumber=line("lessFinish"),
        programName=line("program"),
        issueDate=issue_date,
        effectiveDate=issue_date,
        sampleRequiredBy=line("sampleRequiredBy"),
        lbe=extract_country(manufacturing_location),
        sellerNameAndAddress=seller,
        dunsNumber=general_duns,
        manufacturingDunsNumber=ship_from_duns,
        buyerNameAndAddress=buyer,
        clientName=client_name,
        purchasingContact=line("purchasingContact"),
        buyerCode=line("buyerCode"),
        accountManager=extract_account_manager(text),
        mailingAddressInformation=_or_not_found(
            scan_block_for_value(text, KEYWORD_MAP["mailingAddress"], max_lines=10)
        ),
        manufacturingLocation=manufacturing_location,
        shippingTo=_or_not_found(scan_block_for_value(text, KEYWORD_MAP["shippingTo"], max_lines=8)),
        freightTerms=line("freightTerms"),
        deliveryTerms=line("deliveryTerms"),
        deliveryDuns=extract_duns(text, KEYWORD_MAP["deliveryDuns"]),
        shipFromDuns=ship_from_duns,
        dailyCapacity=line("dailyCapacity"),
        hoursPerDay=line("hoursPerDay"),
        containerType=line("containerType"),
        receivingPlants=extract_receiving_plants(text),
        currency=extract_currency(text),
        basePrice=extract_price(text, KEYWORD_MAP["price"]),
        totalPrice=extract_price(text, KEYWORD_MAP["totalPrice"]),
        unitOfMeasure=line("unitOfMeasure"),
        paymentTerms=line("paymentTerms"),
        reasonForIssuing=_or_not_found(
            scan_block_for_value(text, KEYWORD_MAP["reasonForIssuing"], max_lines=5)
        ),
        hazardousMaterialIndicator=extract_hazardous(text),
        rawMaterialCertAnalysis=line("rawCert"),
        rawMaterialAnnualCert=line("annualCert"),
    )
