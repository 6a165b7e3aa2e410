from xml_contract_parser import (
    XmlContractAdapter,
    flatten_xml_to_text,
    is_xml_document,
    parse_xml_contract,
)


def test_is_xml_document(xml_contract):
    assert is_xml_document(xml_contract)
    assert is_xml_document("<CONTRACT><CONTRACT_NO>1</CONTRACT_NO></CONTRACT>")
    assert is_xml_document("\ufeff<?xml version='1.0'?><order/>")
    assert not is_xml_document("Contract No: PO1234567")


def test_parse_xml_contract_maps_tags(xml_contract):
    record = parse_xml_contract(xml_contract)

    assert record["contractNumber"] == "5500012345"
    assert record["amendmentNumber"] == "3"
    assert record["issueDate"] == "2024-02-01"
    assert record["effectiveDate"] == "2024-02-01"
    assert record["sellerNameAndAddress"] == "Widget Parts GmbH"
    assert record["dunsNumber"] == "123456789"
    assert record["shipFromDuns"] == "123456789"
    assert record["partNumber"] == "7712345"
    assert record["partDescription"] == "Bracket, front"
    assert record["basePrice"] == "4.25"
    assert record["unitOfMeasure"] == "PCE"
    assert record["currency"] == "EUR"
    assert record["clientName"] == "Plant Spartanburg USA"
    assert record["shippingTo"] == "Plant Spartanburg USA (0410)"
    assert record["manufacturingLocation"] == "Salonta"
    assert record["lbe"] == "Romania"
    assert record["accountManager"] == "Jane Doe"
    assert record["purchasingContact"] == "Jane Doe jane.doe@example.com"
    assert record["paymentTerms"] == "Net 60"
    assert record["freightTerms"] == "FCA"


def test_parse_xml_contract_missing_tags_keep_defaults():
    record = parse_xml_contract("<CONTRACT><CONTRACT_NO>42</CONTRACT_NO></CONTRACT>")

    assert record["contractNumber"] == "42"
    assert record["amendmentNumber"] == "0"
    assert record["currency"] == "USD"
    assert record["hazardousMaterialIndicator"] == "No"
    assert record["partNumber"] == "N/A"


def test_parse_xml_contract_rejects_other_documents():
    assert parse_xml_contract("<order><id>1</id></order>") is None
    assert parse_xml_contract("<CONTRACT><CONTRACT_NO>1</CONTRACT>") is None


def test_custom_adapter_tag_names():
    class OrderAdapter(XmlContractAdapter):
        root_tag = "PurchaseOrder"
        contract_number_tag = "OrderNumber"

    text = "<PurchaseOrder><OrderNumber>PO-77</OrderNumber></PurchaseOrder>"
    assert parse_xml_contract(text) is None
    assert parse_xml_contract(text, adapter=OrderAdapter())["contractNumber"] == "PO-77"


def test_namespaced_tags_match_by_local_name():
    text = '<c:CONTRACT xmlns:c="urn:contracts"><c:CONTRACT_NO>991</c:CONTRACT_NO></c:CONTRACT>'
    assert parse_xml_contract(text)["contractNumber"] == "991"


def test_flatten_xml_to_text():
    text = '<order orderId="A1"><buyerName>Acme</buyerName><total_amount>10</total_amount></order>'
    lines = flatten_xml_to_text(text).split("\n")

    assert "order order Id: A1" in lines
    assert "buyer Name: Acme" in lines
    assert "total amount: 10" in lines


def test_flatten_returns_malformed_text_unchanged():
    assert flatten_xml_to_text("<order><id>1</order>") == "<order><id>1</order>"
