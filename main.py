"""
Main entry point for the Contract Field Extraction Engine.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from enrichment_client import EnrichmentSettings
from excel_export import export_records
from extraction_agent import ExtractionAgent

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Contract Field Extraction Engine - Extract structured commercial fields from contract documents"
    )

    parser.add_argument(
        'inputs',
        nargs='+',
        help='Paths to contract documents (PDF, DOCX, XLSX, XML, JSON, CSV, TXT, images) or raw text with --text-input'
    )

    parser.add_argument(
        '--output',
        '-o',
        type=str,
        help='Output JSON file path (default: print to stdout)'
    )

    parser.add_argument(
        '--text-input',
        action='store_true',
        help='Treat inputs as raw text strings instead of file paths'
    )

    parser.add_argument(
        '--company',
        type=str,
        help='Company name that overrides the extracted client name'
    )

    parser.add_argument(
        '--ocr',
        action='store_true',
        help='Always OCR PDF files (for scanned documents)'
    )

    parser.add_argument(
        '--tesseract-cmd',
        type=str,
        help='Path to tesseract executable'
    )

    parser.add_argument(
        '--no-ai',
        action='store_true',
        help='Disable AI enrichment (heuristic extraction only)'
    )

    parser.add_argument('--ai-base-url', type=str, help='Ollama / OpenAI-compatible base URL')
    parser.add_argument('--ai-model', type=str, help='Model used for enrichment')
    parser.add_argument('--ai-timeout', type=float, help='Enrichment request timeout in seconds')

    parser.add_argument(
        '--workers',
        type=int,
        help='Number of documents processed in parallel (default: EXTRACTION_MAX_WORKERS or 4)'
    )

    parser.add_argument('--csv', type=str, help='Also export results to this CSV file')
    parser.add_argument('--excel', type=str, help='Also export results to this Excel file')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main function to run contract extraction."""
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    args = _build_arg_parser().parse_args(argv)

    if args.tesseract_cmd:
        os.environ["TESSERACT_CMD"] = args.tesseract_cmd

    settings = EnrichmentSettings.from_env(
        base_url=args.ai_base_url,
        model=args.ai_model,
        timeout_seconds=args.ai_timeout,
    )
    if args.no_ai:
        settings.enabled = False

    agent = ExtractionAgent(settings=settings)

    results = []
    failures = 0
    if args.text_input:
        for index, text in enumerate(args.inputs, start=1):
            try:
                extracted_data, metadata = agent.extract_from_text(text, company_hint=args.company)
            except ValueError as e:
                print(f"ERROR: input {index}: {str(e)}", file=sys.stderr)
                failures += 1
                continue
            results.append({"document": f"text_{index}", **extracted_data, "metadata": metadata})
    else:
        batch = agent.extract_batch(args.inputs, max_workers=args.workers, use_ocr=args.ocr, company_hint=args.company)
        for item in batch:
            if item["error"]:
                print(f"ERROR: {item['file_path']}: {item['error']}", file=sys.stderr)
                failures += 1
                continue
            results.append({"document": Path(item["file_path"]).name, **item["extracted_data"], "metadata": item["metadata"]})

    if results:
        payload = results[0] if len(args.inputs) == 1 else results
        output_json = json.dumps(payload, indent=2, ensure_ascii=False)

        if args.output:
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(output_json)
            print(f"Extraction complete! Results saved to: {args.output}")
        else:
            print(output_json)

        if args.csv or args.excel:
            documents = [{"name": result["document"], "fields": result["fields"]} for result in results]
            for kind, path in export_records(documents, csv_path=args.csv, excel_path=args.excel).items():
                print(f"{kind.upper()} export written to: {path}")

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
