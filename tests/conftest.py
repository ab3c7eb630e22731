"""Shared fixtures for Ethereal tests."""

import json

import httpx
import pytest

from ethereal.config import get_default_config
from ethereal.models import Thought, UserSettings
from ethereal.repository import JournalRepository
from ethereal.storage import MemoryStorage


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep every test away from the real home, config and API keys."""
    monkeypatch.setenv("ETHEREAL_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.delenv("ETHEREAL_DEBUG", raising=False)


@pytest.fixture
def repository():
    """A repository over an empty in-memory store."""
    return JournalRepository(MemoryStorage())


@pytest.fixture
def ai_config():
    return get_default_config()


@pytest.fixture
def ai_settings():
    """Settings with enrichment on and a key present."""
    return UserSettings(is_initialized=True, is_ai_enabled=True, api_key="test-key")


def gemini_reply(payload) -> dict:
    """Wrap a payload the way generateContent returns it."""
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


class FakeGemini:
    """Records requests and answers with a canned response."""

    def __init__(self, payload=None, status_code=200, body=None, error=None, content=None):
        self.payload = payload
        self.content = content
        self.status_code = status_code
        self.body = body
        self.error = error
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        if self.body is not None:
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, json=gemini_reply(self.payload))

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


FULL_ANALYSIS = {
    "summary": "Nervous about the upcoming exams.",
    "tags": ["school", "exams"],
    "wisdom": "What would feeling prepared look like?",
    "mood": "Anxious",
}


@pytest.fixture
def sample_thoughts():
    return [
        Thought(id="1700000000002", content="I feel great today", created_at=1700000000002,
                tags=["joy"], mood="Happy"),
        Thought(id="1700000000001", content="worried about exams", created_at=1700000000001,
                tags=["school"], mood="Anxious"),
    ]
