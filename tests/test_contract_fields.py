import pytest

from contract_fields import FIELD_NAMES, missing_fields, new_record, normalize_record


def test_new_record_defaults():
    record = new_record()

    assert list(record) == list(FIELD_NAMES)
    assert record["amendmentNumber"] == "0"
    assert record["currency"] == "USD"
    assert record["hazardousMaterialIndicator"] == "No"
    assert record["language"] == "English"
    assert record["contractNumber"] == "N/A"


def test_new_record_rejects_unknown_fields():
    with pytest.raises(KeyError):
        new_record(contractNo="PO1")


def test_normalize_record_coerces_values():
    record = normalize_record({"contractNumber": " PO1 ", "basePrice": 12.5, "partNumber": "", "bogus": "x"})

    assert record["contractNumber"] == "PO1"
    assert record["basePrice"] == "12.5"
    assert record["partNumber"] == "N/A"
    assert "bogus" not in record


def test_missing_fields():
    record = new_record(**{name: "x" for name in FIELD_NAMES if name != "lbe"})
    assert missing_fields(record) == ["lbe"]
