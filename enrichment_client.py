"""
AI Enrichment Client
Narrow adapter to an OpenAI-compatible completion endpoint (a local Ollama
server by default) that extracts and translates a fixed set of contract fields.

The adapter is best-effort: any transport, timeout, status or parse failure
yields an empty field map and is only logged.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import openai
from openai import OpenAI

from keyword_maps import ENRICHMENT_FIELDS

logger = logging.getLogger(__name__)


DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_MODEL = "llama3.2"
DEFAULT_TIMEOUT_SECONDS = 120.0
DEFAULT_API_KEY = "ollama"
CONTEXT_CHARS = 4000

_FALSE_VALUES = ("false", "0", "no", "off")

# Fields whose value must come back in English
_TRANSLATED_IN_PROMPT = {
    "buyerNameAndAddress", "sellerNameAndAddress", "clientName", "partDescription",
    "paymentTerms", "manufacturingLocation", "shippingTo", "freightTerms",
    "programName", "lbe",
}

_FIELD_HINTS = {
    "issueDate": "Format YYYY-MM-DD",
    "currency": "ISO code, e.g. USD, EUR, CNY",
    "accountManager": "Translate content to English if descriptive",
    "language": 'The detected language name in English, e.g. "German", "Chinese", "French"',
}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() not in _FALSE_VALUES


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={value!r}; using {default}")
        return default


@dataclass
class EnrichmentSettings:
    """Connection settings for the enrichment endpoint."""

    enabled: bool = True
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    api_key: str = DEFAULT_API_KEY

    @classmethod
    def from_env(cls, **overrides: Any) -> "EnrichmentSettings":
        """
        Build settings from environment variables.

        Reads AI_ENRICHMENT_ENABLED, OLLAMA_BASE_URL, OLLAMA_MODEL,
        OLLAMA_TIMEOUT_SECONDS and OLLAMA_API_KEY. Keyword arguments that are
        not None override the environment.
        """
        settings = cls(
            enabled=_env_flag("AI_ENRICHMENT_ENABLED", True),
            base_url=os.getenv("OLLAMA_BASE_URL") or DEFAULT_BASE_URL,
            model=os.getenv("OLLAMA_MODEL") or DEFAULT_MODEL,
            timeout_seconds=_env_float("OLLAMA_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
            api_key=os.getenv("OLLAMA_API_KEY") or DEFAULT_API_KEY,
        )
        for name, value in overrides.items():
            if value is not None:
                setattr(settings, name, value)
        return settings

    @property
    def api_base(self) -> str:
        base = self.base_url.rstrip("/")
        return base if base.endswith("/v1") else f"{base}/v1"


def _build_prompt(text: str) -> str:
    field_lines = []
    for name in ENRICHMENT_FIELDS:
        hint = _FIELD_HINTS.get(name)
        if name in _TRANSLATED_IN_PROMPT:
            hint = "Translate content to English"
        field_lines.append(f"- {name} ({hint})" if hint else f"- {name}")
    fields = "\n".join(field_lines)

    return f"""Analyze the following contract text. It might be in a foreign language (e.g. German, Spanish, French, Chinese, Japanese).

TASK:
1. Detect the language of the document.
2. Extract the key fields listed below.
3. If an extracted value is not in English, TRANSLATE it into English before adding it to the JSON.
   Do NOT leave any text values in their original language.
   Example: if "Zahlungsbedingungen" is "30 Tage netto", "paymentTerms" must be "30 days net".
   Example: if "Designacion" is "Puntera", "partDescription" must be "Toe".

Return a strict JSON object. If a field is not found, use "N/A".

Fields to extract (ALWAYS RETURN IN ENGLISH):
{fields}

Text:
\"\"\"
{text}
\"\"\"
"""


def parse_enrichment_response(content: Optional[str]) -> Dict[str, str]:
    """
    Parse a model reply into a field map.

    Markdown fences are removed and the outermost {...} span is decoded. Only
    known fields with scalar values are kept. Malformed replies yield {}.
    """
    if not content:
        return {}
    clean = content.replace("```json", "").replace("```", "").strip()
    start = clean.find("{")
    end = clean.rfind("}")
    if start == -1 or end <= start:
        logger.warning("Enrichment reply contained no JSON object")
        return {}
    try:
        payload = json.loads(clean[start:end + 1])
    except json.JSONDecodeError as e:
        logger.warning(f"Enrichment reply is not valid JSON: {e}")
        return {}
    if not isinstance(payload, dict):
        return {}

    fields = {}
    for name in ENRICHMENT_FIELDS:
        value = payload.get(name)
        if isinstance(value, bool) or value is None:
            continue
        if isinstance(value, (str, int, float)):
            text = str(value).strip()
            if text:
                fields[name] = text
    return fields


class EnrichmentClient:
    """Best-effort field extraction and translation through an LLM endpoint."""

    def __init__(self, settings: Optional[EnrichmentSettings] = None, client: Optional[OpenAI] = None):
        """
        Initialize the client.

        Args:
            settings: Endpoint settings (environment defaults if not provided)
            client: Pre-built OpenAI client, mainly for tests
        """
        self.settings = settings or EnrichmentSettings.from_env()
        self.client = client or OpenAI(
            base_url=self.settings.api_base,
            api_key=self.settings.api_key,
            timeout=self.settings.timeout_seconds,
            max_retries=0,
        )

    @property
    def enabled(self) -> bool:
        return self.settings.enabled

    def enrich(self, text: str) -> Dict[str, str]:
        """
        Ask the model for the enrichment field set.

        Args:
            text: Document text; only the leading part is sent

        Returns:
            Partial field map; empty on any failure
        """
        if not text or not text.strip():
            return {}
        try:
            response = self.client.chat.completions.create(
                model=self.settings.model,
                messages=[
                    {
                        "role": "system",
                        "content": "You are a contract data extraction expert and translator. Return only valid JSON."
                    },
                    {
                        "role": "user",
                        "content": _build_prompt(text[:CONTEXT_CHARS])
                    }
                ],
                temperature=0.1,
                response_format={"type": "json_object"}
            )
        except openai.OpenAIError as e:
            logger.warning(f"Enrichment request failed ({type(e).__name__}): {e}")
            return {}

        if not response.choices:
            logger.warning("Enrichment reply had no choices")
            return {}
        fields = parse_enrichment_response(response.choices[0].message.content)
        logger.info(f"Enrichment returned {len(fields)} fields")
        return fields

    def test_connection(self) -> Tuple[bool, str]:
        """
        Check that the endpoint is reachable.

        Returns:
            (success, message)
        """
        try:
            models = self.client.models.list()
        except openai.APIStatusError as e:
            return False, f"Server responded with status {e.status_code}"
        except openai.OpenAIError as e:
            return False, str(e) or "Connection failed"
        names = [model.id for model in models.data]
        logger.info(f"Enrichment endpoint reachable; {len(names)} models available")
        if self.settings.model not in names and f"{self.settings.model}:latest" not in names:
            return True, f"Connected, but model '{self.settings.model}' is not installed"
        return True, "Connected"
