"""
Contract Field Catalogue
Defines the normalized record produced for every processed contract document.

Every field is a string. Missing values use the "N/A" sentinel, except a few
fields whose absence carries a business meaning (an absent amendment number
means the original contract, currency falls back to USD, hazardous material
defaults to "No").
"""

from typing import Dict, List, TypedDict


NOT_FOUND = "N/A"

# Ordered field catalogue; order drives exports and API output
FIELD_NAMES = (
    # Identifiers
    "contractNumber",
    "amendmentNumber",
    "partNumber",
    "partDescription",
    "drawingNumber",
    "lessFinishPartNumber",
    "programName",
    # Dates
    "issueDate",
    "effectiveDate",
    "sampleRequiredBy",
    # Parties
    "lbe",
    "sellerNameAndAddress",
    "dunsNumber",
    "manufacturingDunsNumber",
    "buyerNameAndAddress",
    "clientName",
    "purchasingContact",
    "buyerCode",
    "accountManager",
    "mailingAddressInformation",
    # Logistics
    "manufacturingLocation",
    "shippingTo",
    "freightTerms",
    "deliveryTerms",
    "deliveryDuns",
    "shipFromDuns",
    "dailyCapacity",
    "hoursPerDay",
    "containerType",
    "receivingPlants",
    # Commercial
    "currency",
    "basePrice",
    "totalPrice",
    "unitOfMeasure",
    "paymentTerms",
    # Compliance / meta
    "reasonForIssuing",
    "hazardousMaterialIndicator",
    "rawMaterialCertAnalysis",
    "rawMaterialAnnualCert",
    "language",
)

FIELD_DEFAULTS: Dict[str, str] = {name: NOT_FOUND for name in FIELD_NAMES}
FIELD_DEFAULTS.update({
    "amendmentNumber": "0",
    "currency": "USD",
    "hazardousMaterialIndicator": "No",
    "language": "English",
})

# Fields pushed from the document-level record onto every page
DOCUMENT_LEVEL_PAGE_FIELDS = (
    "buyerNameAndAddress",
    "sellerNameAndAddress",
    "lbe",
    "manufacturingLocation",
)


class PageExtraction(TypedDict):
    """Field extraction for a single page of a multi-page source."""
    pageNumber: int
    rawText: str
    fields: Dict[str, str]


class NoExtractableTextError(ValueError):
    """Raised when a document yields no text at all, so no record can be built."""


def new_record(**values: str) -> Dict[str, str]:
    """
    Create a fresh record with every field set to its default.

    Args:
        **values: Field values to set; unknown names raise KeyError

    Returns:
        Dictionary keyed by every name in FIELD_NAMES
    """
    record = dict(FIELD_DEFAULTS)
    for name, value in values.items():
        if name not in record:
            raise KeyError(f"Unknown contract field: {name}")
        record[name] = value
    return record


def normalize_record(values: Dict[str, object]) -> Dict[str, str]:
    """Coerce an arbitrary mapping into a complete record of non-empty strings."""
    record = new_record()
    for name in FIELD_NAMES:
        value = values.get(name)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            record[name] = text
    return record


def missing_fields(record: Dict[str, str]) -> List[str]:
    """Names of fields still holding the N/A sentinel."""
    return [name for name in FIELD_NAMES if record.get(name) == NOT_FOUND]
