"""
Structured XML Contract Parser
Reads machine-readable contract exports directly by tag name, bypassing the
heuristic text search. Unrecognised XML is flattened to "Tag Name: value"
lines so the heuristic pass can still run over it.
"""

import logging
import re
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional

from contract_fields import NOT_FOUND, new_record
from normalizers import extract_country, format_date

logger = logging.getLogger(__name__)


class XmlContractAdapter:
    """
    Tag mapping for one XML contract dialect.

    Tags are matched by exact, case-sensitive local name anywhere below the
    document root. Subclass and override the tag names to support another
    integration's export.
    """

    root_tag = "CONTRACT"

    contract_number_tag = "CONTRACT_NO"
    order_date_tag = "ORDER_DATE"
    version_tag = "VER_NO"
    supplier_name_tag = "SUPPLIER_NAME"
    supplier_code_tag = "SUPPLIER"
    demand_location_desc_tag = "DEMAND_LOCATION_DESC"
    demand_location_tag = "DEMAND_LOCATION"
    product_location_desc_tag = "PRODUCT_LOCATION_DESC"
    purchaser_name_tag = "PURCHASER_NAME"
    purchaser_email_tag = "EMAIL"
    program_code_tag = "BMW_CBB_NAEL"
    activity_text_tag = "ACTIVITY_TEXT"
    product_tag = "PRODUCT"
    description_tag = "DESCRIPTION"
    net_price_tag = "NET_PRICE"
    item_currency_tag = "ITEM_CURRENCY"
    header_currency_tag = "CURRENCY_HEAD"
    price_uom_tag = "PRICE_UOM"
    payment_terms_tag = "PAYMENT_TERMS"
    incoterm_tag = "INCOTERM"
    delivery_terms_tag = "DELIVERY_TERMS"

    # Activity text short enough to double as a program name
    program_text_limit = 50

    def matches(self, text: str) -> bool:
        return f"<{self.root_tag}>" in text or f"<{self.root_tag} " in text

    def find_root(self, document: ET.Element) -> Optional[ET.Element]:
        for element in document.iter():
            if _local_name(element.tag) == self.root_tag:
                return element
        return None

    def to_record(self, document: ET.Element) -> Dict[str, str]:
        """Map the dialect's tags onto a complete contract record."""
        def get(tag: str) -> str:
            return _first_text(document, tag)

        issue_date = format_date(get(self.order_date_tag))
        supplier_code = get(self.supplier_code_tag)
        client_name = get(self.demand_location_desc_tag)
        manufacturing_location = get(self.product_location_desc_tag)

        purchaser = get(self.purchaser_name_tag)
        email = get(self.purchaser_email_tag)
        purchasing_contact = NOT_FOUND
        if purchaser != NOT_FOUND:
            purchasing_contact = f"{purchaser} {email if email != NOT_FOUND else ''}".strip()

        activity_text = get(self.activity_text_tag)
        program_name = get(self.program_code_tag)
        if program_name == NOT_FOUND and activity_text != NOT_FOUND and len(activity_text) < self.program_text_limit:
            program_name = activity_text

        currency = get(self.item_currency_tag)
        if currency == NOT_FOUND:
            currency = get(self.header_currency_tag)

        ship_to_code = get(self.demand_location_tag)
        shipping_to = client_name
        if ship_to_code != NOT_FOUND and client_name != NOT_FOUND:
            shipping_to = f"{client_name} ({ship_to_code})"

        lbe = extract_country(manufacturing_location)
        if lbe == NOT_FOUND:
            lbe = extract_country(client_name)

        values = {
            "contractNumber": get(self.contract_number_tag),
            "amendmentNumber": get(self.version_tag),
            "partNumber": get(self.product_tag),
            "partDescription": get(self.description_tag),
            "programName": program_name,
            "issueDate": issue_date,
            "effectiveDate": issue_date,
            "lbe": lbe,
            "sellerNameAndAddress": get(self.supplier_name_tag),
            "dunsNumber": supplier_code,
            "manufacturingDunsNumber": supplier_code,
            "shipFromDuns": supplier_code,
            "buyerNameAndAddress": client_name,
            "clientName": client_name,
            "accountManager": purchaser,
            "purchasingContact": purchasing_contact,
            "manufacturingLocation": manufacturing_location,
            "shippingTo": shipping_to,
            "currency": currency,
            "basePrice": get(self.net_price_tag),
            "unitOfMeasure": get(self.price_uom_tag),
            "paymentTerms": get(self.payment_terms_tag),
            "freightTerms": get(self.incoterm_tag),
            "deliveryTerms": get(self.delivery_terms_tag),
            "reasonForIssuing": activity_text,
        }
        # absent tags keep the record defaults ("0" amendment, USD, "No" hazardous)
        return new_record(**{name: value for name, value in values.items() if value != NOT_FOUND})


DEFAULT_ADAPTER = XmlContractAdapter()


def _local_name(tag) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _first_text(document: ET.Element, tag: str) -> str:
    for element in document.iter():
        if _local_name(element.tag) == tag:
            text = "".join(element.itertext()).strip()
            return text or NOT_FOUND
    return NOT_FOUND


def _parse(text: str) -> Optional[ET.Element]:
    try:
        return ET.fromstring(text.strip().lstrip("\ufeff"))
    except ET.ParseError as e:
        logger.warning(f"XML parse failed: {e}")
        return None


def is_xml_document(text: str, adapter: XmlContractAdapter = DEFAULT_ADAPTER) -> bool:
    """True when text opens with an XML prolog or contains the dialect's root tag."""
    return text.lstrip("\ufeff \t\r\n").startswith("<?xml") or adapter.matches(text)


def parse_xml_contract(text: str, adapter: XmlContractAdapter = DEFAULT_ADAPTER) -> Optional[Dict[str, str]]:
    """
    Parse an XML contract export into a complete record.

    Args:
        text: Raw XML text
        adapter: Tag mapping for the dialect

    Returns:
        Record dictionary, or None when the text is not well-formed or has no root tag
    """
    document = _parse(text)
    if document is None:
        return None
    if adapter.find_root(document) is None:
        logger.info(f"XML has no <{adapter.root_tag}> element; not a structured contract")
        return None
    return adapter.to_record(document)


def _format_tag_name(name: str) -> str:
    return re.sub(r"([a-z])([A-Z])", r"\1 \2", _local_name(name)).replace("_", " ").strip()


def _walk(element: ET.Element, lines: List[str]) -> None:
    tag_name = _format_tag_name(element.tag)
    for attr_name, attr_value in element.attrib.items():
        lines.append(f"{tag_name} {_format_tag_name(attr_name)}: {attr_value}")
    if element.text and element.text.strip():
        lines.append(f"{tag_name}: {element.text.strip()}")
    for child in element:
        if isinstance(child.tag, str):
            _walk(child, lines)
        if child.tail and child.tail.strip():
            lines.append(f"{tag_name}: {child.tail.strip()}")


def flatten_xml_to_text(text: str) -> str:
    """
    Flatten arbitrary XML into "Tag Name: value" lines.

    camelCase and underscores in tag names become spaces and attributes are
    emitted as "Tag Attr: value". Text that is not well-formed XML is returned
    unchanged.
    """
    document = _parse(text)
    if document is None:
        return text
    lines: List[str] = []
    _walk(document, lines)
    return "\n".join(lines)
