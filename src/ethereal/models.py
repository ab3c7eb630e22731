"""
Data models for Ethereal.

Records are stored and exported as camelCase JSON, one shape for both.
"""

import time
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MOODS = ("Calm", "Happy", "Anxious", "Inspired", "Reflective")

PERSONALITIES = ("philosophical", "poetic", "concise")

DEFAULT_AVATAR_URL = "https://picsum.photos/seed/ethereal/200/200"


def generate_id() -> str:
    """Generate a thought ID (Unix timestamp in milliseconds)."""
    return str(int(time.time() * 1000))


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Thought(_Record):
    """A single journal entry."""

    id: str
    content: str
    created_at: int = Field(description="Creation time, epoch milliseconds")
    tags: list[str] = Field(default_factory=list)
    mood: str | None = None
    summary: str | None = None
    ai_insight: str | None = None
    is_favorite: bool | None = None

    @classmethod
    def create(cls, content: str, mood: str | None = None) -> "Thought":
        """Build a new thought stamped with the current time."""
        thought_id = generate_id()
        return cls(
            id=thought_id,
            content=content,
            created_at=int(thought_id),
            tags=[],
            mood=mood or None,
            is_favorite=False,
        )


class UserSettings(_Record):
    """Singleton preferences record for the local profile."""

    user_id: str = ""
    user_name: str = ""
    email: str = ""
    password_hash: str = ""
    avatar_url: str = DEFAULT_AVATAR_URL
    is_initialized: bool = False
    is_ai_enabled: bool = True
    ai_personality: Literal["philosophical", "poetic", "concise"] = "philosophical"
    show_mood_trends: bool = True
    api_key: str = ""
    api_base_url: str = ""
    custom_model: str = ""


class AnalysisRevision(str, Enum):
    """Response shapes the enrichment call has used over time."""

    MOOD = "mood"  # earliest: mood only
    FULL = "full"  # mood + summary + tags + wisdom


class AnalysisResult(BaseModel):
    """
    Output of one enrichment call.

    Only ``mood`` is guaranteed. ``summary``, ``tags`` and ``wisdom`` are
    populated by the FULL revision and stay None under MOOD.
    """

    mood: str = Field(min_length=1)
    summary: str | None = None
    tags: list[str] | None = Field(default=None, description="Up to 3 keywords")
    wisdom: str | None = None
    revision: AnalysisRevision = AnalysisRevision.FULL

    @field_validator("mood", mode="before")
    @classmethod
    def _strip_mood(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        cleaned = [tag.strip() for tag in value if tag and tag.strip()]
        return cleaned[:3]


class ConnectionTestResult(BaseModel):
    """Outcome of a configuration check against the AI endpoint."""

    success: bool
    message: str
