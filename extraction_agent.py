"""
LangGraph-based Contract Extraction Agent
Runs the field-extraction workflow as a stateful graph:

    acquire_text -> detect_format -> xml_parse | heuristic_parse
    heuristic_parse -> decide_enrichment -> [ai_enrich] -> per_page_pass -> finalize

The XML path is terminal: it never enriches and never produces pages. XML that
is not a structured contract is flattened and run through heuristic_parse, then
goes straight to finalize.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Optional, Sequence, Tuple, TypedDict

# LangGraph imports
from langgraph.graph import StateGraph, END
from langgraph.graph.message import add_messages
from langchain_core.messages import AIMessage

# Local imports
from contract_fields import NoExtractableTextError, PageExtraction, missing_fields, normalize_record
from document_parser import DocumentParser
from enrichment_client import EnrichmentClient, EnrichmentSettings
from enrichment_policy import decide_enrichment, merge_enrichment, reconcile_pages
from field_extractors import extract_heuristic_fields
from xml_contract_parser import flatten_xml_to_text, is_xml_document, parse_xml_contract

logger = logging.getLogger(__name__)


DEFAULT_MAX_WORKERS = 4

METHOD_XML = "xml"
METHOD_HEURISTIC = "heuristic"
METHOD_HEURISTIC_AI = "heuristic+ai"


# ============== State Definition ==============

class ExtractionState(TypedDict):
    """State that flows through the extraction graph."""
    # Input
    file_path: Optional[str]
    filename: str
    company_hint: Optional[str]
    use_ocr: bool

    # Acquired text
    document_text: str
    page_texts: List[str]
    source_format: str

    # Extraction results
    document_fields: Dict[str, str]
    pages: List[PageExtraction]

    # Enrichment bookkeeping
    enrichment_warranted: bool
    triggered_foreign: bool
    enrichment_reasons: List[str]
    enrichment_status: str
    ai_fields: Dict[str, str]

    status: str

    # Messages for agent reasoning
    messages: Annotated[List, add_messages]


def _default_max_workers() -> int:
    try:
        return max(1, int(os.getenv("EXTRACTION_MAX_WORKERS", DEFAULT_MAX_WORKERS)))
    except ValueError:
        return DEFAULT_MAX_WORKERS


# ============== Main Agent Class ==============

class ExtractionAgent:
    """
    LangGraph-based Contract Extraction Agent.

    This agent uses a graph-based workflow to:
    1. Acquire document text (file parsing, OCR) or accept text directly
    2. Route machine-readable XML contracts to the structured parser
    3. Run the heuristic field extractors over the full text
    4. Optionally enrich/translate fields through the AI adapter
    5. Extract every page independently and reconcile party/location fields

    The agent holds no per-document state, so one instance can serve
    concurrent extractions.
    """

    def __init__(
        self,
        enrichment_client: Optional[EnrichmentClient] = None,
        enable_enrichment: Optional[bool] = None,
        parser: Optional[DocumentParser] = None,
        settings: Optional[EnrichmentSettings] = None,
    ):
        """
        Initialize the extraction agent.

        Args:
            enrichment_client: AI adapter (built from settings if not provided)
            enable_enrichment: Force enrichment on/off (settings/env if None)
            parser: Text-acquisition collaborator
            settings: Enrichment settings (environment if not provided)
        """
        self.settings = settings or getattr(enrichment_client, "settings", None) or EnrichmentSettings.from_env()
        self.enable_enrichment = self.settings.enabled if enable_enrichment is None else enable_enrichment
        self.enrichment_client = enrichment_client
        if self.enrichment_client is None and self.enable_enrichment:
            self.enrichment_client = EnrichmentClient(self.settings)
        self.parser = parser or DocumentParser()

        # Build the graph
        self.graph = self._build_graph()
        self.app = self.graph.compile()

    def _build_graph(self) -> StateGraph:
        """Build the extraction workflow graph."""
        workflow = StateGraph(ExtractionState)

        workflow.add_node("acquire_text", self._acquire_text_node)
        workflow.add_node("detect_format", self._detect_format_node)
        workflow.add_node("xml_parse", self._xml_parse_node)
        workflow.add_node("heuristic_parse", self._heuristic_parse_node)
        workflow.add_node("decide_enrichment", self._decide_enrichment_node)
        workflow.add_node("ai_enrich", self._ai_enrich_node)
        workflow.add_node("per_page_pass", self._per_page_node)
        workflow.add_node("finalize", self._finalize_node)

        workflow.set_entry_point("acquire_text")
        workflow.add_edge("acquire_text", "detect_format")

        # Detect -> XML or heuristic
        workflow.add_conditional_edges(
            "detect_format",
            self._route_format,
            {
                "xml": "xml_parse",
                "text": "heuristic_parse"
            }
        )

        # XML -> done, or flattened XML -> heuristic
        workflow.add_conditional_edges(
            "xml_parse",
            self._route_after_xml,
            {
                "parsed": "finalize",
                "flattened": "heuristic_parse"
            }
        )

        # Flattened XML stays on the XML path: no enrichment, no pages
        workflow.add_conditional_edges(
            "heuristic_parse",
            self._route_after_heuristic,
            {
                "document": "decide_enrichment",
                "xml": "finalize"
            }
        )

        # Decide -> enrich or skip straight to pages
        workflow.add_conditional_edges(
            "decide_enrichment",
            self._route_enrichment,
            {
                "enrich": "ai_enrich",
                "skip": "per_page_pass"
            }
        )

        workflow.add_edge("ai_enrich", "per_page_pass")
        workflow.add_edge("per_page_pass", "finalize")
        workflow.add_edge("finalize", END)

        return workflow

    # ============== Graph Nodes ==============

    def _acquire_text_node(self, state: ExtractionState) -> Dict[str, Any]:
        """Node: Read the document (or take the provided text) and its pages."""
        text = state.get("document_text") or ""
        page_texts = list(state.get("page_texts") or [])

        if state.get("file_path"):
            text, page_map = self.parser.parse_with_pages(state["file_path"], use_ocr=state.get("use_ocr", False))
            page_texts = [page_map[number] for number in sorted(page_map)]

        if not text or not text.strip():
            raise NoExtractableTextError(f"No extractable text found in {state.get('filename') or 'input'}")

        logger.info(f"[acquire_text] {len(text)} characters, {len(page_texts)} pages")
        return {
            "document_text": text,
            "page_texts": page_texts,
            "status": "text_acquired",
            "messages": [AIMessage(content=f"Acquired {len(text)} characters across {len(page_texts)} pages.")]
        }

    def _detect_format_node(self, state: ExtractionState) -> Dict[str, Any]:
        """Node: Route XML exports away from the heuristic pass."""
        source_format = "xml" if is_xml_document(state["document_text"]) else "text"
        logger.info(f"[detect_format] {source_format}")
        return {"source_format": source_format}

    def _xml_parse_node(self, state: ExtractionState) -> Dict[str, Any]:
        """Node: Read a structured XML contract, or flatten unknown XML for the heuristic pass."""
        record = parse_xml_contract(state["document_text"])
        if record is not None:
            logger.info("[xml_parse] structured contract parsed")
            return {
                "document_fields": record,
                "pages": [],
                "status": "xml_parsed",
                "messages": [AIMessage(content="Structured XML contract parsed by tag name.")]
            }

        logger.info("[xml_parse] not a structured contract; flattening for heuristic extraction")
        return {
            "document_text": flatten_xml_to_text(state["document_text"]),
            "source_format": "xml_flattened",
            "messages": [AIMessage(content="Unrecognised XML flattened to labelled lines.")]
        }

    def _heuristic_parse_node(self, state: ExtractionState) -> Dict[str, Any]:
        """Node: Run every field extractor over the full document text."""
        fields = extract_heuristic_fields(
            state["document_text"],
            filename=state.get("filename", ""),
            company_hint=state.get("company_hint"),
        )
        found = sum(1 for value in fields.values() if value != "N/A")
        logger.info(f"[heuristic_parse] {found} fields resolved")
        return {
            "document_fields": fields,
            "status": "heuristic_parsed",
            "messages": [AIMessage(content=f"Heuristic pass resolved {found} fields.")]
        }

    def _decide_enrichment_node(self, state: ExtractionState) -> Dict[str, Any]:
        """Node: Decide whether the AI enrichment step should run."""
        decision = decide_enrichment(state["document_text"], state["document_fields"])
        if not decision.warranted:
            status = "not_needed"
        elif not self.enrichment_enabled:
            status = "disabled"
        else:
            status = "pending"
        logger.info(f"[decide_enrichment] warranted={decision.warranted} reasons={list(decision.reasons)} status={status}")
        return {
            "enrichment_warranted": decision.warranted,
            "triggered_foreign": decision.triggered_foreign,
            "enrichment_reasons": list(decision.reasons),
            "enrichment_status": status,
        }

    def _ai_enrich_node(self, state: ExtractionState) -> Dict[str, Any]:
        """Node: Ask the AI adapter for fields and merge them into the baseline."""
        try:
            ai_fields = self.enrichment_client.enrich(state["document_text"])
        except Exception as e:
            # the baseline must survive any adapter failure
            logger.warning(f"[ai_enrich] enrichment failed, keeping heuristic baseline: {e}")
            ai_fields = {}
            status = "failed"
        else:
            status = "applied" if ai_fields else "empty"

        merged = merge_enrichment(state["document_fields"], ai_fields, state["triggered_foreign"])
        logger.info(f"[ai_enrich] {status}: {len(ai_fields)} fields returned")
        return {
            "document_fields": merged,
            "ai_fields": ai_fields,
            "enrichment_status": status,
            "messages": [AIMessage(content=f"Enrichment {status} with {len(ai_fields)} fields.")]
        }

    def _per_page_node(self, state: ExtractionState) -> Dict[str, Any]:
        """Node: Extract each page on its own, then push document-level party fields down."""
        page_results = [
            PageExtraction(
                pageNumber=number,
                rawText=page_text,
                fields=extract_heuristic_fields(
                    page_text,
                    filename=state.get("filename", ""),
                    is_page_mode=True,
                    company_hint=state.get("company_hint"),
                ),
            )
            for number, page_text in enumerate(state.get("page_texts") or [], start=1)
        ]
        pages = reconcile_pages(state["document_fields"], page_results)
        logger.info(f"[per_page_pass] {len(pages)} pages extracted")
        return {"pages": pages, "status": "pages_extracted"}

    def _finalize_node(self, state: ExtractionState) -> Dict[str, Any]:
        """Node: Complete the record, apply the caller's company hint and close the run."""
        fields = normalize_record(state["document_fields"])
        hint = (state.get("company_hint") or "").strip()
        if hint:
            fields["clientName"] = hint
        logger.info(f"[finalize] extraction completed ({state.get('source_format')})")
        return {"document_fields": fields, "status": "completed"}

    # ============== Routing ==============

    @property
    def enrichment_enabled(self) -> bool:
        return bool(self.enable_enrichment and self.enrichment_client is not None)

    def _route_format(self, state: ExtractionState) -> Literal["xml", "text"]:
        return "xml" if state["source_format"] == "xml" else "text"

    def _route_after_xml(self, state: ExtractionState) -> Literal["parsed", "flattened"]:
        return "parsed" if state.get("status") == "xml_parsed" else "flattened"

    def _route_after_heuristic(self, state: ExtractionState) -> Literal["document", "xml"]:
        return "xml" if state["source_format"] == "xml_flattened" else "document"

    def _route_enrichment(self, state: ExtractionState) -> Literal["enrich", "skip"]:
        return "enrich" if state["enrichment_status"] == "pending" else "skip"

    # ============== Public API ==============

    def _run(self, initial_state: ExtractionState) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        final_state = self.app.invoke(initial_state)

        source_format = final_state.get("source_format", "text")
        if source_format == "xml":
            method = METHOD_XML
        elif final_state.get("enrichment_status") in ("applied", "empty", "failed"):
            method = METHOD_HEURISTIC_AI
        else:
            method = METHOD_HEURISTIC

        extracted_data = {
            "fields": final_state["document_fields"],
            "pages": final_state.get("pages", []),
        }
        metadata = {
            "file_path": final_state.get("file_path"),
            "file_name": final_state.get("filename", ""),
            "extraction_method": method,
            "source_format": source_format,
            "page_count": len(final_state.get("pages", [])),
            "missing_fields": missing_fields(final_state["document_fields"]),
            "enrichment": {
                "warranted": final_state.get("enrichment_warranted", False),
                "reasons": final_state.get("enrichment_reasons", []),
                "status": final_state.get("enrichment_status", "not_needed"),
                "fields_returned": len(final_state.get("ai_fields", {})),
            },
            "status": final_state.get("status", "unknown"),
        }
        return extracted_data, metadata

    def _initial_state(self, **values: Any) -> ExtractionState:
        state: ExtractionState = {
            "file_path": None,
            "filename": "",
            "company_hint": None,
            "use_ocr": False,
            "document_text": "",
            "page_texts": [],
            "source_format": "text",
            "document_fields": {},
            "pages": [],
            "enrichment_warranted": False,
            "triggered_foreign": False,
            "enrichment_reasons": [],
            "enrichment_status": "not_needed",
            "ai_fields": {},
            "status": "pending",
            "messages": []
        }
        state.update(values)
        return state

    def extract_from_file(
        self,
        file_path: str,
        use_ocr: bool = False,
        company_hint: Optional[str] = None
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """
        Extract contract fields from a file.

        Args:
            file_path: Path to the document file
            use_ocr: Whether to force OCR for PDFs
            company_hint: Company name that overrides the derived client name

        Returns:
            Tuple of (extracted_data, metadata); extracted_data holds "fields" and "pages"

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the format is unsupported or the file is unreadable
            NoExtractableTextError: If the document yields no text
        """
        logger.info(f"Starting extraction workflow: {Path(file_path).name}")
        return self._run(self._initial_state(
            file_path=file_path,
            filename=Path(file_path).name,
            company_hint=company_hint,
            use_ocr=use_ocr,
        ))

    def extract_from_text(
        self,
        document_text: str,
        pages: Optional[Sequence[str]] = None,
        filename: str = "",
        company_hint: Optional[str] = None
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """
        Extract contract fields from raw text.

        Args:
            document_text: Full document text
            pages: Optional ordered page texts
            filename: Source filename (last-resort contract number)
            company_hint: Company name that overrides the derived client name

        Returns:
            Tuple of (extracted_data, metadata)

        Raises:
            NoExtractableTextError: If the text is empty
        """
        logger.info("Starting extraction workflow (from text)")
        return self._run(self._initial_state(
            document_text=document_text or "",
            page_texts=list(pages or []),
            filename=filename,
            company_hint=company_hint,
        ))

    def extract_batch(
        self,
        file_paths: Sequence[str],
        max_workers: Optional[int] = None,
        use_ocr: bool = False,
        company_hint: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Extract several files concurrently.

        A failing document is reported with its error and does not stop the
        batch. Results keep the order of ``file_paths``.

        Returns:
            One dict per file with file_path, extracted_data, metadata and error
        """
        workers = max_workers or _default_max_workers()
        results: List[Optional[Dict[str, Any]]] = [None] * len(file_paths)
        logger.info(f"Processing batch of {len(file_paths)} documents with {workers} workers")

        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_index = {
                executor.submit(self.extract_from_file, path, use_ocr, company_hint): index
                for index, path in enumerate(file_paths)
            }
            for future in as_completed(future_to_index):
                index = future_to_index[future]
                path = file_paths[index]
                try:
                    extracted_data, metadata = future.result()
                    results[index] = {"file_path": path, "extracted_data": extracted_data, "metadata": metadata, "error": None}
                except Exception as e:
                    logger.error(f"Extraction failed for {path}: {e}")
                    results[index] = {"file_path": path, "extracted_data": None, "metadata": None, "error": str(e)}

        return results
