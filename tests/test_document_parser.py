import pandas as pd
import pytest
from docx import Document

import document_parser
from document_parser import DocumentParser


def test_text_sources_have_no_pages(tmp_path):
    txt = tmp_path / "contract.txt"
    txt.write_text("Contract No: PO1234567\n", encoding="utf-8")
    xml = tmp_path / "contract.xml"
    xml.write_text("<CONTRACT><CONTRACT_NO>1</CONTRACT_NO></CONTRACT>", encoding="utf-8")

    parser = DocumentParser()
    assert parser.parse_with_pages(str(txt)) == ("Contract No: PO1234567\n", {})
    assert parser.parse_with_pages(str(xml))[1] == {}


def test_text_falls_back_to_latin1(tmp_path):
    path = tmp_path / "legacy.txt"
    path.write_bytes(b"Caf\xe9 contract")
    assert DocumentParser().parse(str(path)) == "Café contract"


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        DocumentParser().parse(str(tmp_path / "nope.pdf"))


def test_unsupported_extension_raises(tmp_path):
    path = tmp_path / "contract.exe"
    path.write_bytes(b"MZ")
    with pytest.raises(ValueError, match="Unsupported file format"):
        DocumentParser().parse(str(path))


def test_docx_paragraphs_and_tables(tmp_path):
    doc = Document()
    doc.add_paragraph("Contract No: PO1234567")
    table = doc.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Buyer"
    table.rows[0].cells[1].text = "Seller"
    path = tmp_path / "contract.docx"
    doc.save(str(path))

    text, pages = DocumentParser().parse_with_pages(str(path))

    assert "Contract No: PO1234567" in text
    assert "Buyer    Seller" in text
    assert list(pages) == [1]


def test_excel_sheets_become_pages(tmp_path):
    path = tmp_path / "contract.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame([["Contract No", "PO1234567"]]).to_excel(writer, sheet_name="Header", index=False, header=False)
        pd.DataFrame([["Part Number", "4471-AB"]]).to_excel(writer, sheet_name="Items", index=False, header=False)

    text, pages = DocumentParser().parse_with_pages(str(path))

    assert sorted(pages) == [1, 2]
    assert "Contract No,PO1234567" in pages[1]
    assert "Part Number,4471-AB" in pages[2]
    assert "PO1234567" in text


def test_scanned_pdf_uses_ocr(monkeypatch, tmp_path):
    path = tmp_path / "scan.pdf"
    path.write_bytes(b"%PDF-1.4")

    monkeypatch.setattr(DocumentParser, "_read_pdf_text_layer", lambda self, file_path: ("", {}))
    monkeypatch.setattr(document_parser, "TESSERACT_AVAILABLE", True)
    monkeypatch.setattr(document_parser, "ocr_pdf_with_tesseract", lambda file_path: ("ocr text", {1: "ocr text"}))

    assert DocumentParser().parse_with_pages(str(path)) == ("ocr text", {1: "ocr text"})
