"""
AI enrichment for Ethereal.

Sends a thought to Gemini's generateContent endpoint with a constrained JSON
response and returns an AnalysisResult. Every failure degrades to None: a
thought always saves, with or without enrichment.
"""

import json
import logging
import os
import threading
from typing import Any

import httpx
from pydantic import ValidationError

from ethereal.config import load_config
from ethereal.models import (
    AnalysisResult,
    AnalysisRevision,
    ConnectionTestResult,
    UserSettings,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"

# Checked in order after explicit config and the settings record
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")

MOOD_PROPERTY = {
    "type": "STRING",
    "description": "The emotional tone of the thought (e.g., Calm, Anxious, Inspired, Reflective).",
}

RESPONSE_SCHEMAS: dict[AnalysisRevision, dict[str, Any]] = {
    AnalysisRevision.MOOD: {
        "type": "OBJECT",
        "properties": {"mood": MOOD_PROPERTY},
        "required": ["mood"],
    },
    AnalysisRevision.FULL: {
        "type": "OBJECT",
        "properties": {
            "summary": {
                "type": "STRING",
                "description": "A very concise one-sentence summary of the thought.",
            },
            "tags": {
                "type": "ARRAY",
                "items": {"type": "STRING"},
                "description": "Up to 3 relevant tags or keywords.",
            },
            "wisdom": {
                "type": "STRING",
                "description": "A brief, gentle, philosophical perspective or follow-up question based on the content.",
            },
            "mood": MOOD_PROPERTY,
        },
        "required": ["summary", "tags", "wisdom", "mood"],
    },
}

ANALYSIS_PROMPT = 'Reflect on the following thought and offer insight: "{content}"'

SYSTEM_INSTRUCTIONS = {
    "philosophical": (
        "You are a gentle and perceptive personal companion. Your goal is to help "
        "the user untangle their thoughts, offer brief feedback with a philosophical "
        "touch, and pick out the key words."
    ),
    "poetic": (
        "You are a warm companion who answers in the voice of a poet. Help the user "
        "hold their thoughts lightly, reflect them back in a single lyrical image, "
        "and pick out the key words."
    ),
    "concise": (
        "You are a calm, plain-spoken assistant. Name the feeling, summarize the "
        "thought in as few words as possible, and pick out the key words."
    ),
}

PING_PROMPT = "Reply with the single word OK."


class AnalysisError(Exception):
    """A remote call failed. Never escapes the public Analyzer methods."""


class Analyzer:
    """Enrichment adapter. Holds no state between calls."""

    def __init__(
        self,
        settings: UserSettings,
        config: dict[str, Any] | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.settings = settings
        self.config = config or load_config()
        self.ai_config = self.config.get("ai", {})
        self.transport = transport

        self.model = (
            settings.custom_model.strip()
            or self.ai_config.get("model")
            or DEFAULT_MODEL
        )
        self.base_url = (
            settings.api_base_url.strip()
            or self.ai_config.get("base_url")
            or DEFAULT_BASE_URL
        ).rstrip("/")
        self.revision = AnalysisRevision(self.ai_config.get("schema_revision", "full"))
        self.timeout = float(self.ai_config.get("timeout", 30.0))
        self.temperature = float(self.ai_config.get("temperature", 0.7))

    def resolve_api_key(self) -> str | None:
        """Explicit config, then settings, then environment."""
        key = self.ai_config.get("api_key") or self.settings.api_key.strip()
        if key:
            return key
        for var in API_KEY_ENV_VARS:
            if value := os.environ.get(var):
                return value
        return None

    def analyze(
        self,
        content: str,
        cancel_event: threading.Event | None = None,
    ) -> AnalysisResult | None:
        """
        Enrich a thought.

        Returns None without touching the network when enrichment is off,
        no API key is available, or the content is blank. Returns None on
        any remote or parse failure, and when cancel_event is set before
        the response is consumed.
        """
        if not self.settings.is_ai_enabled:
            return None
        api_key = self.resolve_api_key()
        if not api_key:
            return None
        if not content.strip():
            return None
        if cancel_event is not None and cancel_event.is_set():
            return None

        system = SYSTEM_INSTRUCTIONS.get(
            self.settings.ai_personality, SYSTEM_INSTRUCTIONS["philosophical"]
        )
        payload = {
            "contents": [
                {"role": "user", "parts": [{"text": ANALYSIS_PROMPT.format(content=content)}]}
            ],
            "systemInstruction": {"parts": [{"text": system}]},
            "generationConfig": {
                "temperature": self.temperature,
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMAS[self.revision],
            },
        }

        try:
            text = self._generate_content(api_key, self.model, payload)
            result = self._parse_response(text)
        except (httpx.HTTPError, httpx.InvalidURL, AnalysisError, ValidationError) as e:
            logger.warning("Gemini analysis failed: %s", e)
            return None

        if cancel_event is not None and cancel_event.is_set():
            logger.debug("Discarding analysis that arrived after cancellation")
            return None
        return result

    def test_connection(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
    ) -> ConnectionTestResult:
        """
        Send a minimal prompt to validate key, model and base URL.

        Arguments override the configured values, so unsaved settings can be
        checked before they are stored.
        """
        api_key = (api_key or "").strip() or self.resolve_api_key()
        model = (model or "").strip() or self.model
        base_url = ((base_url or "").strip() or self.base_url).rstrip("/")

        if not api_key:
            return ConnectionTestResult(success=False, message="API key is required.")

        payload = {
            "contents": [{"role": "user", "parts": [{"text": PING_PROMPT}]}],
            "generationConfig": {"temperature": 0.0},
        }
        try:
            self._generate_content(api_key, model, payload, base_url=base_url)
        except httpx.HTTPStatusError as e:
            detail = _error_message(e.response)
            return ConnectionTestResult(
                success=False,
                message=f"Request rejected ({e.response.status_code}): {detail}",
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return ConnectionTestResult(success=False, message=f"Network error: {e}")
        except AnalysisError as e:
            return ConnectionTestResult(success=False, message=str(e))

        return ConnectionTestResult(success=True, message=f"Connected to {model}.")

    def _generate_content(
        self,
        api_key: str,
        model: str,
        payload: dict[str, Any],
        base_url: str | None = None,
    ) -> str:
        """Call generateContent and return the first text part."""
        url = f"{base_url or self.base_url}/v1beta/models/{model}:generateContent"
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            response = client.post(
                url,
                headers={
                    "x-goog-api-key": api_key,
                    "Content-Type": "application/json",
                },
                json=payload,
            )
            response.raise_for_status()
            try:
                data = response.json()
            except ValueError as e:
                # Covers bodies that are not JSON or not UTF-8
                raise AnalysisError("Gemini returned a non-JSON response.") from e
        return _extract_text(data)

    def _parse_response(self, text: str) -> AnalysisResult:
        """Parse and validate the model's JSON payload."""
        text = text.strip()
        if text.startswith("```"):
            # Remove opening ``` (with optional language tag) and closing ```
            lines = text.split("\n")[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            text = "\n".join(lines)

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise AnalysisError(f"Response was not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise AnalysisError("Response JSON was not an object.")

        if self.revision is AnalysisRevision.MOOD:
            data = {"mood": data.get("mood")}
        return AnalysisResult.model_validate({**data, "revision": self.revision})


def _extract_text(data: Any) -> str:
    candidates = data.get("candidates") if isinstance(data, dict) else None
    if not isinstance(candidates, list) or not candidates:
        raise AnalysisError("Gemini response missing candidates.")
    first = candidates[0] if isinstance(candidates[0], dict) else {}
    content = first.get("content")
    parts = content.get("parts", []) if isinstance(content, dict) else []
    for part in parts:
        text = part.get("text") if isinstance(part, dict) else None
        if isinstance(text, str) and text.strip():
            return text
    raise AnalysisError("Gemini response did not include text output.")


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return response.reason_phrase

