"""
Persistence service for Ethereal.

Two collections live in the key-value store as JSON blobs: the thought list
and the settings record. Every mutation reads the whole collection, maps it
and writes it back. Missing or unreadable data reads as empty/defaults.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from ethereal.models import Thought, UserSettings
from ethereal.storage import KeyValueStore

logger = logging.getLogger(__name__)

# Each suffix names an immutable schema version. A new revision gets a new key.
THOUGHTS_KEY = "ethereal_notes_v1"
SETTINGS_KEY = "ethereal_settings_v2"


def merge_settings(stored: dict[str, Any], defaults: dict[str, Any]) -> dict[str, Any]:
    """Shallow merge: stored values win, missing keys come from defaults."""
    return {**defaults, **stored}


class JournalRepository:
    """Thoughts and settings over a key-value store."""

    def __init__(self, storage: KeyValueStore):
        self.storage = storage

    def _read_json(self, key: str) -> Any:
        raw = self.storage.get_item(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Unreadable data under %s, ignoring: %s", key, e)
            return None

    # Thoughts

    def list_thoughts(self) -> list[Thought]:
        """All thoughts, most recent first."""
        data = self._read_json(THOUGHTS_KEY)
        if not isinstance(data, list):
            return []

        thoughts = []
        for item in data:
            try:
                thoughts.append(Thought.model_validate(item))
            except ValidationError as e:
                logger.warning("Skipping malformed thought record: %s", e)
        return thoughts

    def replace_all(self, thoughts: list[Thought]) -> None:
        """Overwrite the whole thought collection."""
        payload = [thought.to_record() for thought in thoughts]
        self.storage.set_item(THOUGHTS_KEY, json.dumps(payload, ensure_ascii=False))

    def get_thought(self, thought_id: str) -> Thought | None:
        for thought in self.list_thoughts():
            if thought.id == thought_id:
                return thought
        return None

    def add_thought(self, thought: Thought) -> None:
        """Prepend a thought."""
        self.replace_all([thought, *self.list_thoughts()])

    def update_thought(self, updated: Thought) -> None:
        """Replace the thought with the same id. Absent ids are a no-op."""
        self.replace_all([
            updated if t.id == updated.id else t
            for t in self.list_thoughts()
        ])

    def delete_thought(self, thought_id: str) -> None:
        self.replace_all([t for t in self.list_thoughts() if t.id != thought_id])

    def toggle_favorite(self, thought_id: str) -> None:
        self.replace_all([
            t.model_copy(update={"is_favorite": not t.is_favorite}) if t.id == thought_id else t
            for t in self.list_thoughts()
        ])

    def clear_thoughts(self) -> None:
        self.replace_all([])

    # Settings

    def get_settings(self) -> UserSettings:
        """
        Load settings, filling any missing key from defaults.

        Stored values that fail validation are dropped field by field so one
        bad value does not reset the whole profile.
        """
        stored = self._read_json(SETTINGS_KEY)
        if not isinstance(stored, dict):
            stored = {}

        merged = merge_settings(stored, UserSettings().to_record())
        try:
            return UserSettings.model_validate(merged)
        except ValidationError as e:
            bad_keys = {err["loc"][0] for err in e.errors() if err["loc"]}
            logger.warning("Resetting invalid settings fields to defaults: %s", sorted(bad_keys))
            cleaned = {k: v for k, v in stored.items() if k not in bad_keys}
            return UserSettings.model_validate(
                merge_settings(cleaned, UserSettings().to_record())
            )

    def save_settings(self, settings: UserSettings) -> None:
        self.storage.set_item(
            SETTINGS_KEY, json.dumps(settings.to_record(), ensure_ascii=False)
        )
