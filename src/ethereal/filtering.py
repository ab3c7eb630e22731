"""
Filtering for the thought list.

Pure functions over an already-loaded collection. Results keep the input
order; nothing here sorts.
"""

from collections import Counter
from enum import Enum

from ethereal.models import Thought, UserSettings

INSPIRED_MOOD = "Inspired"
INSPIRED_TAG_MARKERS = ("灵感", "idea")


class Category(str, Enum):
    ALL = "all"
    FAVORITES = "favorites"
    INSPIRED = "inspired"
    STATS = "stats"  # view mode, not a data filter


def is_stats_available(settings: UserSettings) -> bool:
    """The stats view needs both enrichment and trend display switched on."""
    return settings.is_ai_enabled and settings.show_mood_trends


def resolve_category(category: Category | str, settings: UserSettings) -> Category:
    """Coerce a requested category, falling back to ALL when stats is gated off."""
    category = Category(category)
    if category is Category.STATS and not is_stats_available(settings):
        return Category.ALL
    return category


def is_inspired(thought: Thought) -> bool:
    if thought.mood == INSPIRED_MOOD:
        return True
    return any(marker in tag for tag in thought.tags for marker in INSPIRED_TAG_MARKERS)


def matches_category(thought: Thought, category: Category) -> bool:
    if category is Category.FAVORITES:
        return bool(thought.is_favorite)
    if category is Category.INSPIRED:
        return is_inspired(thought)
    return True


def matches_query(thought: Thought, query: str) -> bool:
    """Case-insensitive substring match on content, tags or mood."""
    query = query.lower()
    if not query:
        return True
    if query in thought.content.lower():
        return True
    if any(query in tag.lower() for tag in thought.tags):
        return True
    return bool(thought.mood) and query in thought.mood.lower()


def filter_thoughts(
    thoughts: list[Thought],
    query: str = "",
    category: Category | str = Category.ALL,
) -> list[Thought]:
    category = Category(category)
    return [
        t for t in thoughts
        if matches_category(t, category) and matches_query(t, query)
    ]


def mood_trends(thoughts: list[Thought]) -> list[tuple[str, int]]:
    """Mood counts for the stats view, most frequent first. Ties keep first-seen order."""
    counts = Counter(t.mood for t in thoughts if t.mood)
    return counts.most_common()
