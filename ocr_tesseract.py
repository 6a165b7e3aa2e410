"""
Local OCR using Tesseract
Text acquisition for scanned PDFs and images.
"""
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, Tuple

try:
    import pytesseract
    from pdf2image import convert_from_path
    from PIL import Image
    TESSERACT_AVAILABLE = True
except ImportError:
    TESSERACT_AVAILABLE = False
    pytesseract = None
    convert_from_path = None
    Image = None

logger = logging.getLogger(__name__)


DEFAULT_LANG = "eng"
DEFAULT_DPI = 300

_WINDOWS_TESSERACT_PATHS = (
    r"C:\Program Files\Tesseract-OCR\tesseract.exe",
    r"C:\Program Files (x86)\Tesseract-OCR\tesseract.exe",
)

_INSTALL_HINT = (
    "Tesseract OCR is not available. Please install:\n"
    "1. pip install pytesseract pdf2image Pillow\n"
    "2. The Tesseract executable (apt install tesseract-ocr, brew install tesseract,\n"
    "   or https://github.com/UB-Mannheim/tesseract/wiki on Windows)"
)


@lru_cache(maxsize=1)
def _configure_tesseract() -> str:
    """Resolve the Tesseract executable once per process; returns the command used."""
    if not TESSERACT_AVAILABLE:
        raise ImportError(_INSTALL_HINT)

    command = os.getenv("TESSERACT_CMD")
    if not command and os.name == "nt":
        command = next((path for path in _WINDOWS_TESSERACT_PATHS if os.path.exists(path)), None)
    if command:
        pytesseract.pytesseract.tesseract_cmd = command
    return pytesseract.pytesseract.tesseract_cmd


def _ocr_lang() -> str:
    return os.getenv("TESSERACT_LANG") or DEFAULT_LANG


def ocr_pdf_with_tesseract(pdf_path: str, dpi: int = DEFAULT_DPI) -> Tuple[str, Dict[int, str]]:
    """
    Extract text from an image-based PDF using Tesseract OCR.

    Args:
        pdf_path: Path to PDF file
        dpi: Rendering resolution for each page

    Returns:
        Tuple of (full_text, page_map)
    """
    _configure_tesseract()
    logger.info(f"Converting PDF to images for OCR: {Path(pdf_path).name}")

    try:
        images = convert_from_path(pdf_path, dpi=dpi)
    except Exception as e:
        raise ValueError(f"Failed to convert PDF to images: {str(e)}")

    logger.info(f"Rendered {len(images)} pages, performing OCR...")

    page_map = {}
    lang = _ocr_lang()
    for page_num, image in enumerate(images, start=1):
        try:
            text = pytesseract.image_to_string(image, lang=lang)
        except pytesseract.TesseractError as e:
            logger.warning(f"Page {page_num}: OCR failed - {e}")
            text = ""
        page_map[page_num] = text
        logger.info(f"Page {page_num}: extracted {len(text)} characters")

    full_text = "\n\n".join(page_map.values())
    logger.info(f"OCR complete: {len(full_text)} characters extracted")
    return full_text, page_map


def ocr_image_with_tesseract(image_path: str) -> str:
    """Extract text from a single image file (PNG, JPEG, TIFF, BMP, WEBP)."""
    _configure_tesseract()
    try:
        with Image.open(image_path) as image:
            return pytesseract.image_to_string(image, lang=_ocr_lang())
    except (OSError, pytesseract.TesseractError) as e:
        raise ValueError(f"Error running OCR on image: {str(e)}")


def check_tesseract_installation() -> Tuple[bool, str]:
    """Check if Tesseract is properly installed."""
    if not TESSERACT_AVAILABLE:
        return False, "Python packages not installed (pytesseract, pdf2image, Pillow)"

    try:
        _configure_tesseract()
        version = pytesseract.get_tesseract_version()
        return True, f"Tesseract {version} is installed"
    except pytesseract.TesseractNotFoundError as e:
        return False, f"Tesseract executable not found: {str(e)}"
