from contract_fields import PageExtraction, new_record
from enrichment_policy import (
    REASON_FOREIGN_MARKERS,
    REASON_MISSING_CONTRACT,
    REASON_MISSING_PART,
    REASON_NON_LATIN,
    TRANSLATED_LANGUAGE,
    decide_enrichment,
    detect_foreign_language,
    has_non_latin_density,
    merge_enrichment,
    reconcile_pages,
)


def test_enrichment_not_warranted_for_complete_english_baseline():
    decision = decide_enrichment("Contract No: PO1", new_record(contractNumber="PO1", partNumber="A-1"))

    assert not decision.warranted
    assert not decision.triggered_foreign
    assert decision.reasons == ()


def test_missing_identifiers_warrant_enrichment():
    decision = decide_enrichment("plain english", new_record())

    assert decision.warranted
    assert not decision.triggered_foreign
    assert decision.reasons == (REASON_MISSING_CONTRACT, REASON_MISSING_PART)


def test_foreign_markers_and_script_density():
    assert detect_foreign_language("Bestellung Nr. 4711")
    assert not detect_foreign_language("Purchase order 4711")
    assert has_non_latin_density("合同" * 30)
    assert not has_non_latin_density("München " * 10)

    decision = decide_enrichment("合同" * 30, new_record(contractNumber="1", partNumber="2"))
    assert decision.triggered_foreign
    assert decision.reasons == (REASON_FOREIGN_MARKERS, REASON_NON_LATIN)


def test_merge_overwrites_with_present_ai_values():
    baseline = new_record(paymentTerms="Net 30", issueDate="N/A")
    merged = merge_enrichment(
        baseline,
        {"paymentTerms": "Net 45", "issueDate": "March 5, 2024", "amendmentNumber": "A1", "currency": "N/A"},
        triggered_foreign=False,
    )

    assert merged["paymentTerms"] == "Net 45"
    assert merged["issueDate"] == "2024-03-05"
    assert merged["amendmentNumber"] == "0"
    assert merged["currency"] == "USD"
    assert merged["language"] == "English"
    assert baseline["paymentTerms"] == "Net 30"


def test_merge_blanks_untranslated_foreign_values():
    baseline = new_record(paymentTerms="30 Tage netto", partDescription="Halter", contractNumber="4500123")
    merged = merge_enrichment(baseline, {"partDescription": "Bracket"}, triggered_foreign=True)

    assert merged["paymentTerms"] == "N/A"
    assert merged["partDescription"] == "Bracket"
    assert merged["contractNumber"] == "4500123"
    assert merged["language"] == TRANSLATED_LANGUAGE


def test_merge_adopts_reported_language():
    merged = merge_enrichment(new_record(), {"language": "German"}, triggered_foreign=True)
    assert merged["language"] == "German"


def test_reconcile_pages_forces_document_party_fields():
    document = new_record(buyerNameAndAddress="Acme", sellerNameAndAddress="Widget", lbe="Germany")
    page = PageExtraction(pageNumber=1, rawText="p1", fields=new_record(buyerNameAndAddress="Other", partNumber="X"))

    reconciled = reconcile_pages(document, [page])

    assert reconciled[0]["fields"]["buyerNameAndAddress"] == "Acme"
    assert reconciled[0]["fields"]["sellerNameAndAddress"] == "Widget"
    assert reconciled[0]["fields"]["lbe"] == "Germany"
    assert reconciled[0]["fields"]["manufacturingLocation"] == "N/A"
    assert reconciled[0]["fields"]["partNumber"] == "X"
    assert page["fields"]["buyerNameAndAddress"] == "Other"
