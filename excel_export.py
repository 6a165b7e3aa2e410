"""
Excel / CSV Export Module
Writes extracted contract records to CSV and Excel, and builds a field-by-field
comparison workbook for two or more documents.
"""

import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from contract_fields import FIELD_NAMES, NOT_FOUND

logger = logging.getLogger(__name__)


# Leading export columns describe the document rather than the contract
DOCUMENT_COLUMNS = ("Document Name", "Language", "Processed By", "Processed Date")

FIELD_LABELS = {
    "contractNumber": "Contract Number",
    "amendmentNumber": "Amendment Number",
    "partNumber": "Part Number",
    "partDescription": "Part Description",
    "programName": "Program Name",
    "drawingNumber": "Drawing Number",
    "lessFinishPartNumber": "Less Finish Part Number",
    "issueDate": "Issue Date",
    "effectiveDate": "Effective Date",
    "sampleRequiredBy": "Sample Required By",
    "lbe": "LBE",
    "sellerNameAndAddress": "Seller Name and Address",
    "dunsNumber": "DUNS Number",
    "manufacturingDunsNumber": "Manufacturing DUNS Number",
    "buyerNameAndAddress": "Buyer Name and Address",
    "clientName": "Client Name",
    "purchasingContact": "Purchasing Contact",
    "buyerCode": "Buyer Code",
    "accountManager": "Account Manager",
    "mailingAddressInformation": "Mailing Address Information",
    "manufacturingLocation": "Manufacturing Location",
    "shippingTo": "Shipping To",
    "freightTerms": "Freight Terms",
    "deliveryTerms": "Delivery Terms",
    "deliveryDuns": "Delivery DUNS",
    "shipFromDuns": "Ship From DUNS",
    "dailyCapacity": "Daily Capacity",
    "hoursPerDay": "Hours Per Day",
    "containerType": "Container Type",
    "receivingPlants": "Receiving Plants",
    "currency": "Currency",
    "basePrice": "Base Price",
    "totalPrice": "Total Price",
    "unitOfMeasure": "Unit of Measure",
    "paymentTerms": "Payment Terms",
    "reasonForIssuing": "Reason for Issuing",
    "hazardousMaterialIndicator": "Hazardous Material Indicator",
    "rawMaterialCertAnalysis": "Raw Material Cert Analysis",
    "rawMaterialAnnualCert": "Raw Material Annual Cert",
}

# Record fields in export order (language is exported with the document columns)
EXPORT_FIELDS = tuple(name for name in FIELD_NAMES if name in FIELD_LABELS)
EXPORT_COLUMNS = list(DOCUMENT_COLUMNS) + [FIELD_LABELS[name] for name in EXPORT_FIELDS]

EXCEL_CELL_LIMIT = 32767
_HEADER_FILL = PatternFill(fill_type="solid", fgColor="FFEEEEEE")
_DIFFERENCE_FILL = PatternFill(fill_type="solid", fgColor="FFFFC7CE")


def _cell(value: Any) -> str:
    text = "" if value is None else str(value)
    if len(text) > EXCEL_CELL_LIMIT:
        text = text[:EXCEL_CELL_LIMIT - 3] + "..."
    return text


class ExcelExporter:
    """Handles CSV and Excel exports of extracted contract records."""

    def __init__(self, processed_by: str = ""):
        """
        Initialize the exporter.

        Args:
            processed_by: Operator name written to the "Processed By" column
        """
        self.processed_by = processed_by

    def build_rows(self, documents: Sequence[Mapping[str, Any]]) -> pd.DataFrame:
        """
        Build one row per document.

        Each document is a mapping with "name" and "fields" (the extracted
        record); "processed_by" and "processed_date" are optional.
        """
        exported_at = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        rows = []
        for document in documents:
            fields = document.get("fields") or {}
            row = {
                "Document Name": document.get("name", ""),
                "Language": fields.get("language", ""),
                "Processed By": document.get("processed_by") or self.processed_by,
                "Processed Date": document.get("processed_date") or exported_at,
            }
            for name in EXPORT_FIELDS:
                row[FIELD_LABELS[name]] = _cell(fields.get(name, NOT_FOUND))
            rows.append(row)
        return pd.DataFrame(rows, columns=EXPORT_COLUMNS)

    def export_to_csv(self, documents: Sequence[Mapping[str, Any]], csv_file_path: str) -> str:
        """Write documents to a UTF-8 CSV file and return its absolute path."""
        df = self.build_rows(documents)
        df.to_csv(csv_file_path, index=False, encoding="utf-8")
        logger.info(f"[EXPORT] {len(df)} rows written to {csv_file_path}")
        return os.path.abspath(csv_file_path)

    def export_to_excel(self, documents: Sequence[Mapping[str, Any]], excel_file_path: str) -> str:
        """Write documents to an Excel workbook and return its absolute path."""
        df = self.build_rows(documents)
        with pd.ExcelWriter(excel_file_path, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Contracts")
            worksheet = writer.sheets["Contracts"]
            for cell in worksheet[1]:
                cell.font = Font(bold=True)
                cell.fill = _HEADER_FILL
            worksheet.column_dimensions["A"].width = 30
            worksheet.freeze_panes = "B2"
        logger.info(f"[EXPORT] {len(df)} rows written to {excel_file_path}")
        return os.path.abspath(excel_file_path)

    def export_comparison_to_excel(self, documents: Sequence[Mapping[str, Any]], excel_file_path: str) -> str:
        """
        Write a side-by-side comparison workbook.

        Fields whose values differ between documents are listed first (and
        highlighted), followed by the fields all documents agree on.

        Raises:
            ValueError: If fewer than two documents are given
        """
        if len(documents) < 2:
            raise ValueError("Not enough data to generate a comparison report.")

        different, similar = compare_documents(documents)
        names = [document.get("name", f"Document {index}") for index, document in enumerate(documents, start=1)]

        rows, headings, highlighted = [], {}, set()
        if different:
            headings[len(rows)] = "FFFF0000"
            rows.append(["Differences"] + [""] * len(names))
            for name in different:
                highlighted.add(len(rows))
                rows.append([FIELD_LABELS.get(name, name)] + [_value_of(document, name) for document in documents])
            rows.append([""] * (len(names) + 1))
        if similar:
            headings[len(rows)] = "FF008000"
            rows.append(["Similarities"] + [""] * len(names))
            for name in similar:
                rows.append([FIELD_LABELS.get(name, name)] + [_value_of(document, name) for document in documents])

        with pd.ExcelWriter(excel_file_path, engine="openpyxl") as writer:
            pd.DataFrame(rows, columns=["Field"] + names).to_excel(writer, index=False, sheet_name="Comparison")
            sheet = writer.sheets["Comparison"]
            for cell in sheet[1]:
                cell.font = Font(bold=True)
                cell.fill = _HEADER_FILL
            # data row i sits on sheet row i + 2 (below the header)
            for index, color in headings.items():
                sheet.cell(row=index + 2, column=1).font = Font(bold=True, italic=True, color=color)
            for index in highlighted:
                for column in range(2, len(names) + 2):
                    sheet.cell(row=index + 2, column=column).fill = _DIFFERENCE_FILL

            sheet.column_dimensions["A"].width = 30
            for index in range(len(names)):
                sheet.column_dimensions[get_column_letter(index + 2)].width = 40

        logger.info(f"[EXPORT] comparison of {len(documents)} documents written to {excel_file_path}")
        return os.path.abspath(excel_file_path)


def _value_of(document: Mapping[str, Any], name: str) -> str:
    fields = document.get("fields") or {}
    return _cell(fields.get(name) or NOT_FOUND)


def compare_documents(documents: Sequence[Mapping[str, Any]]) -> Tuple[List[str], List[str]]:
    """Split the exported fields into (different, similar) across the given documents."""
    different, similar = [], []
    for name in EXPORT_FIELDS:
        values = {_value_of(document, name) for document in documents}
        (different if len(values) > 1 else similar).append(name)
    return different, similar


def export_records(
    documents: Sequence[Mapping[str, Any]],
    csv_path: Optional[str] = None,
    excel_path: Optional[str] = None,
    processed_by: str = "",
) -> Dict[str, str]:
    """
    Convenience function used by the CLI to write any requested exports.

    Returns:
        Mapping of export kind ("csv", "excel") to written path
    """
    exporter = ExcelExporter(processed_by=processed_by)
    written = {}
    if csv_path:
        written["csv"] = exporter.export_to_csv(documents, csv_path)
    if excel_path:
        written["excel"] = exporter.export_to_excel(documents, excel_path)
    return written
