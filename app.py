"""
FastAPI Application for the Contract Field Extraction Engine
Extract structured commercial fields from uploaded contracts or raw text
"""

import logging
import os
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from dotenv import load_dotenv

from contract_fields import NoExtractableTextError
from document_parser import SUPPORTED_EXTENSIONS
from enrichment_client import EnrichmentClient, EnrichmentSettings
from extraction_agent import ExtractionAgent
from ocr_tesseract import check_tesseract_installation

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Contract Field Extraction API",
    description="API for extracting structured contract fields from documents (PDF, DOCX, XLSX, XML, TXT, images)",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_agent() -> ExtractionAgent:
    """Get the shared extraction agent (singleton pattern)."""
    logger.info("[STARTUP] Building LangGraph ExtractionAgent")
    return ExtractionAgent()


class TextExtractionRequest(BaseModel):
    """Request model for text extraction."""
    text: str
    pages: Optional[List[str]] = None
    filename: str = ""
    company_hint: Optional[str] = None


class ExtractionResponse(BaseModel):
    """Response model for extraction results."""
    success: bool
    fields: Dict[str, Any]
    pages: List[Dict[str, Any]]
    metadata: Dict[str, Any]
    message: str = ""


# ============== API Routes ==============

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    settings = EnrichmentSettings.from_env()
    tesseract_ok, tesseract_message = check_tesseract_installation()
    return {
        "status": "healthy",
        "ai_enrichment_enabled": settings.enabled,
        "ai_model": settings.model,
        "tesseract_available": tesseract_ok,
        "tesseract": tesseract_message,
    }


@app.get("/api/ai/test-connection")
async def test_ai_connection():
    """Check that the configured enrichment model endpoint is reachable."""
    settings = EnrichmentSettings.from_env()
    ok, message = EnrichmentClient(settings).test_connection()
    return {
        "success": ok,
        "message": message,
        "base_url": settings.base_url,
        "model": settings.model,
    }


@app.post("/extract/file", response_model=ExtractionResponse)
def extract_from_file(
    file: UploadFile = File(...),
    company: Optional[str] = Form(None),
    use_ocr: bool = Form(False)
):
    """
    Extract contract fields from an uploaded file (direct API).
    """
    file_ext = Path(file.filename or "").suffix.lower()
    if file_ext not in SUPPORTED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type: {file_ext or 'none'}. Supported: {', '.join(SUPPORTED_EXTENSIONS)}"
        )

    with tempfile.NamedTemporaryFile(delete=False, suffix=file_ext) as temp_file:
        temp_file.write(file.file.read())
        temp_path = temp_file.name

    try:
        extracted_data, metadata = get_agent().extract_from_file(temp_path, use_ocr=use_ocr, company_hint=company)
    except NoExtractableTextError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Extraction failed for {file.filename}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)

    # the temp name means nothing to the caller
    metadata["file_path"] = None
    metadata["file_name"] = file.filename

    return ExtractionResponse(
        success=True,
        fields=extracted_data["fields"],
        pages=extracted_data["pages"],
        metadata=metadata,
        message=f"Successfully extracted data from {file.filename}"
    )


@app.post("/extract/text", response_model=ExtractionResponse)
def extract_from_text(request: TextExtractionRequest):
    """
    Extract contract fields from raw text (direct API).
    """
    if not request.text or not request.text.strip():
        raise HTTPException(status_code=400, detail="Text cannot be empty")

    try:
        extracted_data, metadata = get_agent().extract_from_text(
            request.text,
            pages=request.pages,
            filename=request.filename,
            company_hint=request.company_hint,
        )
    except NoExtractableTextError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Text extraction failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return ExtractionResponse(
        success=True,
        fields=extracted_data["fields"],
        pages=extracted_data["pages"],
        metadata=metadata,
        message="Successfully extracted data from text"
    )


if __name__ == "__main__":
    import uvicorn
    print("=" * 50)
    print("Contract Field Extraction Engine")
    print("=" * 50)
    print()
    print("API:     http://localhost:8000/docs")
    print()
    print("Press CTRL+C to stop the server")
    print("=" * 50)
    uvicorn.run(app, host="0.0.0.0", port=8000)
