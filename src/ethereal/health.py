"""
Status report for Ethereal.

Summarizes storage, profile and AI configuration without calling the
network. `ethereal test-connection` does the live check.
"""

import sqlite3

from ethereal.analyzer import Analyzer
from ethereal.filtering import is_stats_available
from ethereal.repository import JournalRepository


def check_storage(repository: JournalRepository) -> tuple[str, str]:
    """Check the thought store."""
    try:
        count = len(repository.list_thoughts())
    except sqlite3.Error as e:
        return "✗", f"Error: {e}"
    return "✓", f"OK ({count} thoughts)"


def check_profile(repository: JournalRepository) -> tuple[str, str]:
    settings = repository.get_settings()
    if not settings.is_initialized:
        return "!", "Not set up (run: ethereal init)"
    return "✓", f"{settings.user_name} <{settings.email}>"


def check_enrichment(repository: JournalRepository, analyzer: Analyzer) -> tuple[str, str]:
    """Check AI enrichment configuration (no network)."""
    settings = repository.get_settings()
    if not settings.is_ai_enabled:
        return "-", "Disabled"
    if not analyzer.resolve_api_key():
        return "✗", "No API key"
    return "✓", f"OK ({analyzer.model})"


def check_trends(repository: JournalRepository) -> tuple[str, str]:
    if is_stats_available(repository.get_settings()):
        return "✓", "Shown"
    return "-", "Hidden"


def run_health_check(
    repository: JournalRepository,
    analyzer: Analyzer,
) -> dict[str, tuple[str, str]]:
    """Run all health checks."""
    return {
        "Storage": check_storage(repository),
        "Profile": check_profile(repository),
        "Enrichment": check_enrichment(repository, analyzer),
        "Mood Trends": check_trends(repository),
    }


def format_health_report(checks: dict[str, tuple[str, str]]) -> str:
    """Format health check results."""
    lines = ["Ethereal Status", "-" * 40]

    for name, (status, message) in checks.items():
        lines.append(f"{status} {name}: {message}")

    return "\n".join(lines)
