"""
Terminal rendering for Ethereal.
"""

import os

from ethereal.export import format_timestamp
from ethereal.filtering import Category
from ethereal.models import Thought, UserSettings


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"

    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_MAGENTA = "\033[95m"

    @classmethod
    def enabled(cls) -> bool:
        """Check if colors should be enabled."""
        if os.environ.get("NO_COLOR"):
            return False
        return True


def c(text: str, *codes: str) -> str:
    """Apply color codes to text if colors are enabled."""
    if not Colors.enabled():
        return text
    return "".join(codes) + text + Colors.RESET


MOOD_COLORS = {
    "Calm": Colors.CYAN,
    "Happy": Colors.BRIGHT_YELLOW,
    "Anxious": Colors.RED,
    "Inspired": Colors.BRIGHT_MAGENTA,
    "Reflective": Colors.BLUE,
}

HEADINGS = {
    Category.ALL: "THOUGHTS",
    Category.FAVORITES: "FRAGMENTS",
    Category.INSPIRED: "INSPIRATION",
    Category.STATS: "MOOD TRENDS",
}


def format_id(thought_id: str) -> str:
    """Format a thought ID with hyphens for readability (4-3-3-3 pattern)."""
    clean = thought_id.replace("-", "")
    if len(clean) >= 13:
        return f"{clean[:4]}-{clean[4:7]}-{clean[7:10]}-{clean[10:]}"
    elif len(clean) >= 10:
        return f"{clean[:4]}-{clean[4:7]}-{clean[7:]}"
    elif len(clean) >= 7:
        return f"{clean[:4]}-{clean[4:]}"
    return clean


def format_thought_line(thought: Thought) -> str:
    star = c("★", Colors.YELLOW) if thought.is_favorite else " "
    mood = thought.mood or "-"
    mood_str = c(f"{mood:10}", MOOD_COLORS.get(mood, Colors.DIM))
    preview = thought.content.replace("\n", " ")[:48]
    tags = ""
    if thought.tags:
        tags = c("  " + " ".join(f"#{t}" for t in thought.tags), Colors.DIM)
    return f"{star} {c(format_id(thought.id), Colors.DIM)}  {mood_str}  {preview}{tags}"


def format_thought_list(thoughts: list[Thought], category: Category, total: int) -> str:
    """Thought list with header. `total` is the size of the unfiltered collection."""
    if total == 0:
        return c("Silent mind. Nothing captured yet.", Colors.DIM)

    lines = [c(f"━━━ {HEADINGS[category]} ━━━", Colors.BOLD, Colors.BLUE)]
    lines.append(c(f"Total: {len(thoughts)}", Colors.DIM))
    lines.append("")

    if not thoughts:
        lines.append(c("Nothing matches.", Colors.DIM))
        return "\n".join(lines)

    for thought in thoughts:
        lines.append(format_thought_line(thought))
    return "\n".join(lines)


def format_thought(thought: Thought) -> str:
    """Full view of one thought."""
    lines = [
        c(format_id(thought.id), Colors.BOLD),
        c(format_timestamp(thought.created_at), Colors.DIM),
        "",
        thought.content,
        "",
    ]
    if thought.mood:
        lines.append(f"Mood: {c(thought.mood, MOOD_COLORS.get(thought.mood, ''))}")
    if thought.tags:
        lines.append("Tags: " + ", ".join(f"#{t}" for t in thought.tags))
    if thought.summary:
        lines.append(f"Summary: {thought.summary}")
    if thought.ai_insight:
        lines.append(c(f"“{thought.ai_insight}”", Colors.MAGENTA))
    return "\n".join(lines).rstrip()


def format_mood_trends(trends: list[tuple[str, int]]) -> str:
    if not trends:
        return c("Trends are still growing. Save a few enriched thoughts first.", Colors.DIM)

    lines = [c("━━━ MOOD TRENDS ━━━", Colors.BOLD, Colors.BLUE), ""]
    peak = trends[0][1]
    for mood, count in trends:
        bar = "█" * max(1, round(20 * count / peak))
        lines.append(f"{mood:12} {c(bar, MOOD_COLORS.get(mood, Colors.DIM))} {count}")
    return "\n".join(lines)


def mask_secret(value: str) -> str:
    if not value:
        return "(not set)"
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}{'*' * (len(value) - 8)}{value[-4:]}"


def format_settings(settings: UserSettings) -> str:
    on_off = {True: "on", False: "off"}
    rows = [
        ("User ID", settings.user_id or "(not set)"),
        ("Name", settings.user_name or "(not set)"),
        ("Email", settings.email or "(not set)"),
        ("Password", "set" if settings.password_hash else "(not set)"),
        ("Avatar", settings.avatar_url),
        ("AI enrichment", on_off[settings.is_ai_enabled]),
        ("Personality", settings.ai_personality),
        ("Mood trends", on_off[settings.show_mood_trends]),
        ("API key", mask_secret(settings.api_key)),
        ("Base URL", settings.api_base_url or "(default)"),
        ("Model", settings.custom_model or "(default)"),
    ]
    lines = [c("━━━ SETTINGS ━━━", Colors.BOLD, Colors.BLUE)]
    for label, value in rows:
        lines.append(f"{label:14} {value}")
    return "\n".join(lines)
