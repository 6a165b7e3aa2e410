"""
Document Parser for various contract document formats.
Supports PDF, DOCX, Excel workbooks, scanned images and plain text inputs
(TXT, XML, JSON, CSV).
"""

import logging
import os
from pathlib import Path
from typing import Dict, Tuple

try:
    import PyPDF2
except ImportError:
    PyPDF2 = None

try:
    import pandas as pd
except ImportError:
    pd = None

try:
    from docx import Document
except ImportError:
    Document = None

from ocr_tesseract import TESSERACT_AVAILABLE, ocr_image_with_tesseract, ocr_pdf_with_tesseract

logger = logging.getLogger(__name__)


PDF_EXTENSIONS = (".pdf",)
DOCX_EXTENSIONS = (".docx",)
EXCEL_EXTENSIONS = (".xlsx", ".xls")
TEXT_EXTENSIONS = (".txt", ".text", ".xml", ".json", ".csv")
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".webp")

SUPPORTED_EXTENSIONS = PDF_EXTENSIONS + DOCX_EXTENSIONS + EXCEL_EXTENSIONS + TEXT_EXTENSIONS + IMAGE_EXTENSIONS


class DocumentParser:
    """Parses contract documents from various formats into full text plus a page map."""

    def __init__(self, ocr_fallback: bool = True, min_text_chars: int = 50, chars_per_page: int = 2000):
        """
        Initialize the document parser.

        Args:
            ocr_fallback: Run Tesseract on PDFs whose text layer is (nearly) empty
            min_text_chars: Text-layer size below which a PDF counts as scanned
            chars_per_page: Page size estimate for DOCX files
        """
        self.ocr_fallback = ocr_fallback
        self.min_text_chars = min_text_chars
        self.chars_per_page = chars_per_page

    def parse(self, file_path: str, use_ocr: bool = False) -> str:
        """
        Parse a document and extract text.

        Args:
            file_path: Path to the document file
            use_ocr: If True, always OCR PDF files (for scanned documents)

        Returns:
            Extracted text from the document
        """
        full_text, _ = self.parse_with_pages(file_path, use_ocr=use_ocr)
        return full_text

    def parse_with_pages(self, file_path: str, use_ocr: bool = False) -> Tuple[str, Dict[int, str]]:
        """
        Parse a document and extract text with page information.

        Args:
            file_path: Path to the document file
            use_ocr: If True, always OCR PDF files (for scanned documents)

        Returns:
            Tuple of (full_text, page_map) where:
            - full_text: Complete extracted text
            - page_map: Dictionary mapping 1-based page numbers to text content;
              empty for flat text sources (TXT, XML, JSON, CSV)

        Raises:
            ValueError: If file format is not supported or the file is unreadable
            FileNotFoundError: If file does not exist
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")

        file_ext = Path(file_path).suffix.lower()

        if file_ext in PDF_EXTENSIONS:
            return self._parse_pdf_with_pages(file_path, use_ocr)
        elif file_ext in DOCX_EXTENSIONS:
            return self._parse_docx_with_pages(file_path)
        elif file_ext in EXCEL_EXTENSIONS:
            return self._parse_excel_with_pages(file_path)
        elif file_ext in TEXT_EXTENSIONS:
            return self._parse_text(file_path), {}
        elif file_ext in IMAGE_EXTENSIONS:
            text = ocr_image_with_tesseract(file_path)
            return text, ({1: text} if text.strip() else {})
        else:
            raise ValueError(f"Unsupported file format: {file_ext}")

    def _parse_pdf_with_pages(self, file_path: str, use_ocr: bool) -> Tuple[str, Dict[int, str]]:
        """Extract text from PDF, falling back to OCR when the text layer is too thin."""
        if use_ocr:
            return ocr_pdf_with_tesseract(file_path)

        full_text, page_map = self._read_pdf_text_layer(file_path)
        if len(full_text.strip()) > self.min_text_chars or not self.ocr_fallback:
            return full_text, page_map

        if not TESSERACT_AVAILABLE:
            logger.warning(f"{Path(file_path).name} looks scanned but Tesseract is not installed; using text layer")
            return full_text, page_map

        logger.info(f"{Path(file_path).name}: text layer has {len(full_text.strip())} characters, running OCR")
        return ocr_pdf_with_tesseract(file_path)

    def _read_pdf_text_layer(self, file_path: str) -> Tuple[str, Dict[int, str]]:
        if PyPDF2 is None:
            raise ImportError("PyPDF2 is required for PDF parsing. Install it with: pip install PyPDF2")

        page_map = {}
        try:
            with open(file_path, 'rb') as file:
                pdf_reader = PyPDF2.PdfReader(file)
                for page_num, page in enumerate(pdf_reader.pages, start=1):
                    text = page.extract_text()
                    if text and text.strip():
                        page_map[page_num] = text
        except Exception as e:
            raise ValueError(f"Error parsing PDF: {str(e)}")

        return '\n\n'.join(page_map.values()), page_map

    def _parse_docx_with_pages(self, file_path: str) -> Tuple[str, Dict[int, str]]:
        """Extract text from DOCX file with page information (estimated)."""
        if Document is None:
            raise ImportError("python-docx is required for DOCX parsing. Install it with: pip install python-docx")

        try:
            doc = Document(file_path)
        except Exception as e:
            raise ValueError(f"Error parsing DOCX: {str(e)}")

        blocks = [paragraph.text for paragraph in doc.paragraphs if paragraph.text.strip()]
        for table in doc.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    # wide gaps keep table cells in separate columns for the block locator
                    blocks.append('    '.join(cells))

        page_map = {}
        current_page = []
        for block in blocks:
            current_page.append(block)
            if len('\n'.join(current_page)) > self.chars_per_page:
                page_map[len(page_map) + 1] = '\n'.join(current_page)
                current_page = []
        if current_page:
            page_map[len(page_map) + 1] = '\n'.join(current_page)

        return '\n'.join(blocks), page_map

    def _parse_excel_with_pages(self, file_path: str) -> Tuple[str, Dict[int, str]]:
        """One page per non-empty worksheet, each rendered as CSV text."""
        if pd is None:
            raise ImportError("pandas is required for Excel parsing. Install it with: pip install pandas openpyxl")

        try:
            sheets = pd.read_excel(file_path, sheet_name=None, header=None, dtype=str)
        except ImportError:
            raise
        except Exception as e:
            raise ValueError(f"Error parsing Excel workbook: {str(e)}")

        page_map = {}
        for sheet_name, frame in sheets.items():
            frame = frame.dropna(how='all').dropna(axis=1, how='all')
            if frame.empty:
                logger.debug(f"Skipping empty sheet {sheet_name!r}")
                continue
            page_map[len(page_map) + 1] = frame.to_csv(index=False, header=False).strip()

        return '\n\n'.join(page_map.values()), page_map

    def _parse_text(self, file_path: str) -> str:
        """Read plain text file."""
        try:
            with open(file_path, 'r', encoding='utf-8-sig') as file:
                return file.read()
        except UnicodeDecodeError:
            # Try with different encoding
            with open(file_path, 'r', encoding='latin-1') as file:
                return file.read()
