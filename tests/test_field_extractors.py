from contract_fields import FIELD_NAMES
from field_extractors import (
    ALL_BUYER_PLANTS,
    derive_client_name,
    extract_account_manager,
    extract_amendment_number,
    extract_contract_number,
    extract_currency,
    extract_duns,
    extract_hazardous,
    extract_heuristic_fields,
    extract_issue_date,
    extract_receiving_plants,
)
from keyword_maps import KEYWORD_MAP


def test_contract_number_prefers_coded_number():
    assert extract_contract_number("Contract No: PO1234567") == "PO1234567"
    assert extract_contract_number("ref ctr-55012 attached") == "CTR-55012"


def test_contract_number_from_label():
    assert extract_contract_number("Contract No: ABC-99812") == "ABC-99812"


def test_contract_number_falls_back_to_filename():
    assert extract_contract_number("nothing here", "scans/CTR556677.pdf") == "CTR556677"
    assert extract_contract_number("nothing here", "") == "N/A"


def test_amendment_number():
    assert extract_amendment_number("Amendment No: 3") == "3"
    assert extract_amendment_number("AMENDMENT NUMBER\n4\n") == "4"
    assert extract_amendment_number("Original issue") == "0"


def test_duns_from_label_and_nearby_digits():
    assert extract_duns("Supplier DUNS: 123456789", KEYWORD_MAP["shipFromDuns"]) == "123456789"
    assert extract_duns("D-U-N-S Number\n987654321", KEYWORD_MAP["duns"]) == "987654321"
    assert extract_duns("no code here", KEYWORD_MAP["duns"]) == "N/A"


def test_currency_cascade():
    assert extract_currency("Currency: eur") == "EUR"
    assert extract_currency("Amount payable in GBP only") == "GBP"
    assert extract_currency("Total: 500 €") == "EUR"
    assert extract_currency("") == "USD"


def test_hazardous_indicator():
    assert extract_hazardous("Hazardous Material: Yes") == "Yes"
    assert extract_hazardous("Hazardous Material: No") == "No"
    assert extract_hazardous("") == "No"


def test_account_manager_drops_phone_suffix():
    assert extract_account_manager("Account Manager: John Smith Tel: 555-1234") == "John Smith"
    assert extract_account_manager("Account Manager: see the attached list") == "N/A"


def test_derive_client_name_skips_numeric_lines():
    assert derive_client_name("12345\nAcme Corp, Inc\nMain Street") == "Acme Corp"
    assert derive_client_name("N/A") == "N/A"


def test_issue_date_header_fallback():
    assert extract_issue_date("Order confirmation 2024-05-06 page 1") == "2024-05-06"
    assert extract_issue_date("Issue Date: 03/15/2024") == "2024-03-15"


def test_receiving_plants_normalization():
    text = "Receiving Plants: All Buyer's Plants - As scheduled\n"
    assert extract_receiving_plants(text) == ALL_BUYER_PLANTS


def test_heuristic_fields_on_two_column_contract(contract_text):
    fields = extract_heuristic_fields(contract_text)

    assert list(fields) == list(FIELD_NAMES)
    assert fields["contractNumber"] == "PO1234567"
    assert fields["amendmentNumber"] == "2"
    assert fields["issueDate"] == "2024-03-15"
    assert fields["effectiveDate"] == "2024-03-15"
    assert fields["buyerNameAndAddress"] == "Acme Motors Inc\n100 Main Street\nDetroit, MI 48201 USA"
    assert fields["sellerNameAndAddress"] == "Widget Parts GmbH\nIndustriestrasse 5\n80331 München"
    assert fields["clientName"] == "Acme Motors Inc"
    assert fields["manufacturingLocation"] == fields["sellerNameAndAddress"]
    assert fields["lbe"] == "Germany"
    assert fields["partNumber"] == "4471-AB"
    assert fields["currency"] == "EUR"
    assert fields["basePrice"] == "12.50 EUR"
    assert fields["paymentTerms"] == "Net 30"


def test_heuristic_fields_defaults(contract_text):
    fields = extract_heuristic_fields(contract_text)

    assert fields["totalPrice"] == "N/A"
    assert fields["dunsNumber"] == "N/A"
    assert fields["hazardousMaterialIndicator"] == "No"
    assert fields["language"] == "English"


def test_heuristic_fields_company_hint_overrides_client(contract_text):
    fields = extract_heuristic_fields(contract_text, company_hint="Globex")
    assert fields["clientName"] == "Globex"


def test_heuristic_fields_page_mode_ignores_filename():
    assert extract_heuristic_fields("blank page", filename="PO998877.pdf")["contractNumber"] == "PO998877"
    assert extract_heuristic_fields("blank page", filename="PO998877.pdf", is_page_mode=True)["contractNumber"] == "N/A"


def test_heuristic_fields_duns_cascade():
    fields = extract_heuristic_fields("Supplier DUNS: 123456789\n")
    assert fields["shipFromDuns"] == "123456789"
    assert fields["manufacturingDunsNumber"] == "123456789"
    assert fields["dunsNumber"] == "123456789"
