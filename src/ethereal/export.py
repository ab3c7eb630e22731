"""
Export snapshots of the journal.

Read-only: a JSON backup in the same shape as the stored collection, and a
plain-text rendering for printing or reading back.
"""

import json
import time
from datetime import datetime

from ethereal.models import Thought

EXPORT_TITLE = "Ethereal Thoughts Journal"


def backup_filename() -> str:
    """Backup file name stamped with the current epoch milliseconds."""
    return f"ethereal-backup-{int(time.time() * 1000)}.json"


def export_json(thoughts: list[Thought]) -> str:
    return json.dumps([t.to_record() for t in thoughts], indent=2, ensure_ascii=False)


def parse_export(text: str) -> list[Thought]:
    """Parse a JSON backup. Raises ValueError on anything but a list of thoughts."""
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("Backup must contain a list of thoughts.")
    return [Thought.model_validate(item) for item in data]


def format_timestamp(epoch_ms: int) -> str:
    return datetime.fromtimestamp(epoch_ms / 1000).strftime("%Y-%m-%d %H:%M")


def export_text(thoughts: list[Thought]) -> str:
    """Numbered journal with date and mood on each heading line."""
    lines = [EXPORT_TITLE, "=" * len(EXPORT_TITLE), ""]

    for index, thought in enumerate(thoughts, 1):
        lines.append(
            f"{index}. [{format_timestamp(thought.created_at)}] [Mood: {thought.mood or 'N/A'}]"
        )
        lines.append(thought.content)
        if thought.tags:
            lines.append("Tags: " + ", ".join(f"#{tag}" for tag in thought.tags))
        if thought.ai_insight:
            lines.append(f"Insight: {thought.ai_insight}")
        lines.append("")

    if not thoughts:
        lines.append("No thoughts recorded yet.")

    return "\n".join(lines)
