"""
CLI for Ethereal.

Minimal CLI using stdlib argument handling. Subcommands import lazily.

Usage:
    ethereal "your thought here"    # Capture (primary interface)
    ethereal list                   # Browse
    ethereal --help                 # Show help
"""

import logging
import os
import sys
from typing import Any


def print_help() -> None:
    """Print help message."""
    print("""ethereal - a quiet journal for passing thoughts

Usage:
    ethereal "your thought here"    Capture a thought (enriched if AI is on)

Commands:
    ethereal list [--fav|--inspired] [query]
                                    List thoughts, newest first
    ethereal find <query>           Search content, tags and mood
    ethereal show <id>              Show one thought in full
    ethereal edit <id> <text>       Rewrite a thought (re-enriched)
    ethereal fav <id>               Toggle favorite
    ethereal delete <id> [--yes]    Remove a thought permanently
    ethereal stats                  Show mood trends
    ethereal export [--text] [path] Write a JSON (or text) snapshot; '-' for stdout
    ethereal init                   Set up your profile
    ethereal settings               Show settings
    ethereal set <key> <value>      Change a setting (see below)
    ethereal passwd                 Change the profile password
    ethereal test-connection        Check the AI key, model and base URL
    ethereal status                 Show configuration status
    ethereal clear [--yes]          Erase all thoughts

Settings keys:
    name, email, avatar, ai (on|off), personality (philosophical|poetic|concise),
    trends (on|off), api-key, base-url, model

Options:
    ethereal --help, -h             Show this help
    ethereal --version, -v          Show version""")


def print_version() -> None:
    """Print version."""
    from ethereal import __version__
    print(f"ethereal {__version__}")


def configure_logging() -> None:
    level = logging.DEBUG if os.environ.get("ETHEREAL_DEBUG") else logging.WARNING
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=level,
    )


def open_repository():
    """Open the on-disk journal."""
    from ethereal.config import ensure_dirs
    from ethereal.repository import JournalRepository
    from ethereal.storage import SQLiteStorage

    ensure_dirs()
    return JournalRepository(SQLiteStorage())


def make_analyzer(settings):
    from ethereal.analyzer import Analyzer
    return Analyzer(settings)


def normalize_id(raw: str) -> str:
    return raw.replace("-", "").strip()


def confirm(prompt: str, args: list[str]) -> bool:
    if "--yes" in args or "-y" in args:
        return True
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def require_profile(repository) -> bool:
    if not repository.get_settings().is_initialized:
        print("No profile yet. Run: ethereal init", file=sys.stderr)
        return False
    return True


def capture(text: str) -> int:
    """Capture a new thought through an editor session."""
    from ethereal.display import format_id
    from ethereal.session import EditorSession

    repository = open_repository()
    if not require_profile(repository):
        return 1

    settings = repository.get_settings()
    with EditorSession(repository, make_analyzer(settings)) as session:
        thought = session.save(text)

    mood = f" ({thought.mood})" if thought.mood else ""
    print(f"{format_id(thought.id)}{mood}")
    if thought.ai_insight:
        print(f"“{thought.ai_insight}”")
    return 0


def cmd_list(args: list[str]) -> int:
    """List thoughts with optional category and query."""
    from ethereal.display import format_thought_list
    from ethereal.filtering import Category, filter_thoughts

    category = Category.ALL
    words = []
    for arg in args:
        if arg in ("--fav", "--favorites", "-f"):
            category = Category.FAVORITES
        elif arg in ("--inspired", "-i"):
            category = Category.INSPIRED
        else:
            words.append(arg)

    repository = open_repository()
    thoughts = repository.list_thoughts()
    matches = filter_thoughts(thoughts, " ".join(words), category)
    print(format_thought_list(matches, category, total=len(thoughts)))
    return 0


def cmd_find(args: list[str]) -> int:
    if not args:
        print("Usage: ethereal find <query>", file=sys.stderr)
        return 1
    return cmd_list(args)


def cmd_show(args: list[str]) -> int:
    from ethereal.display import format_thought

    if not args:
        print("Usage: ethereal show <id>", file=sys.stderr)
        return 1

    thought = open_repository().get_thought(normalize_id(args[0]))
    if thought is None:
        print(f"Not found: {args[0]}", file=sys.stderr)
        return 1
    print(format_thought(thought))
    return 0


def cmd_edit(args: list[str]) -> int:
    """Rewrite an existing thought."""
    from ethereal.display import format_thought
    from ethereal.session import EditorSession

    if len(args) < 2:
        print("Usage: ethereal edit <id> <text>", file=sys.stderr)
        return 1

    repository = open_repository()
    thought = repository.get_thought(normalize_id(args[0]))
    if thought is None:
        print(f"Not found: {args[0]}", file=sys.stderr)
        return 1

    settings = repository.get_settings()
    with EditorSession(repository, make_analyzer(settings), thought=thought) as session:
        saved = session.save(" ".join(args[1:]))
    print(format_thought(saved))
    return 0


def cmd_fav(args: list[str]) -> int:
    if not args:
        print("Usage: ethereal fav <id>", file=sys.stderr)
        return 1

    repository = open_repository()
    thought_id = normalize_id(args[0])
    if repository.get_thought(thought_id) is None:
        print(f"Not found: {args[0]}", file=sys.stderr)
        return 1

    repository.toggle_favorite(thought_id)
    state = "Favorited" if repository.get_thought(thought_id).is_favorite else "Unfavorited"
    print(f"{state}: {args[0]}")
    return 0


def cmd_delete(args: list[str]) -> int:
    ids = [a for a in args if not a.startswith("-")]
    if not ids:
        print("Usage: ethereal delete <id> [--yes]", file=sys.stderr)
        return 1

    repository = open_repository()
    thought_id = normalize_id(ids[0])
    if repository.get_thought(thought_id) is None:
        print(f"Not found: {ids[0]}", file=sys.stderr)
        return 1
    if not confirm("Remove this thought permanently?", args):
        print("Kept.")
        return 0

    repository.delete_thought(thought_id)
    print(f"Removed: {ids[0]}")
    return 0


def cmd_stats() -> int:
    from ethereal.display import format_mood_trends
    from ethereal.filtering import Category, mood_trends, resolve_category

    repository = open_repository()
    settings = repository.get_settings()
    if resolve_category(Category.STATS, settings) is not Category.STATS:
        print("Mood trends need AI enrichment and trend display turned on.", file=sys.stderr)
        return 1

    print(format_mood_trends(mood_trends(repository.list_thoughts())))
    return 0


def cmd_export(args: list[str]) -> int:
    """Write a snapshot of the journal."""
    from pathlib import Path

    from ethereal.export import backup_filename, export_json, export_text

    as_text = "--text" in args
    paths = [a for a in args if a != "--text"]

    thoughts = open_repository().list_thoughts()
    payload = export_text(thoughts) if as_text else export_json(thoughts)

    if paths and paths[0] == "-":
        print(payload)
        return 0

    if paths:
        target = Path(paths[0])
    else:
        name = backup_filename()
        target = Path.cwd() / (name.replace(".json", ".txt") if as_text else name)

    target.write_text(payload + "\n", encoding="utf-8")
    print(f"Exported {len(thoughts)} thoughts to {target}")
    return 0


def cmd_init() -> int:
    """Interactive onboarding."""
    from getpass import getpass

    from ethereal.accounts import AccountError, complete_onboarding

    repository = open_repository()
    if repository.get_settings().is_initialized:
        print("Profile already set up. Use `ethereal set` to change it.")
        return 0

    try:
        user_name = input("Name: ")
        user_id = input("User ID: ")
        email = input("Email: ")
        password = getpass("Password (6+ characters): ")
    except EOFError:
        print("\nCancelled.", file=sys.stderr)
        return 1

    try:
        settings = complete_onboarding(repository, user_id, user_name, email, password)
    except AccountError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Welcome, {settings.user_name}.")
    return 0


def cmd_settings() -> int:
    from ethereal.display import format_settings

    print(format_settings(open_repository().get_settings()))
    return 0


SETTING_KEYS = {
    "name": "user_name",
    "email": "email",
    "avatar": "avatar_url",
    "ai": "is_ai_enabled",
    "personality": "ai_personality",
    "trends": "show_mood_trends",
    "api-key": "api_key",
    "base-url": "api_base_url",
    "model": "custom_model",
}

BOOLEAN_WORDS = {"on": True, "true": True, "yes": True, "off": False, "false": False, "no": False}


def parse_setting(key: str, value: str) -> tuple[str, Any]:
    """Map a CLI key/value onto a settings field. Raises ValueError."""
    from ethereal.accounts import is_valid_email
    from ethereal.models import PERSONALITIES

    if key not in SETTING_KEYS:
        raise ValueError(f"Unknown setting: {key}")
    field = SETTING_KEYS[key]

    if field in ("is_ai_enabled", "show_mood_trends"):
        if value.lower() not in BOOLEAN_WORDS:
            raise ValueError(f"{key} must be on or off")
        return field, BOOLEAN_WORDS[value.lower()]
    if field == "ai_personality" and value not in PERSONALITIES:
        raise ValueError(f"personality must be one of: {', '.join(PERSONALITIES)}")
    if field == "email" and not is_valid_email(value):
        raise ValueError("Email address is not valid.")
    if field == "user_name" and not value.strip():
        raise ValueError("Name cannot be empty.")
    return field, value.strip()


def cmd_set(args: list[str]) -> int:
    if len(args) < 2:
        print("Usage: ethereal set <key> <value>", file=sys.stderr)
        return 1

    key, value = args[0], " ".join(args[1:])
    try:
        field, parsed = parse_setting(key, value)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    repository = open_repository()
    settings = repository.get_settings().model_copy(update={field: parsed})
    repository.save_settings(settings)
    print(f"Saved {key}.")
    return 0


def cmd_passwd() -> int:
    from getpass import getpass

    from ethereal.accounts import AccountError, change_password

    repository = open_repository()
    if not require_profile(repository):
        return 1

    try:
        old = getpass("Current password: ")
        new = getpass("New password: ")
        again = getpass("Confirm new password: ")
    except EOFError:
        print("\nCancelled.", file=sys.stderr)
        return 1

    try:
        settings = change_password(repository.get_settings(), old, new, again)
    except AccountError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    repository.save_settings(settings)
    print("Password changed.")
    return 0


def cmd_test_connection() -> int:
    repository = open_repository()
    result = make_analyzer(repository.get_settings()).test_connection()
    if result.success:
        print(f"✓ {result.message}")
        return 0
    print(f"✗ {result.message}", file=sys.stderr)
    return 1


def cmd_status() -> int:
    from ethereal.health import format_health_report, run_health_check

    repository = open_repository()
    analyzer = make_analyzer(repository.get_settings())
    print(format_health_report(run_health_check(repository, analyzer)))
    return 0


def cmd_clear(args: list[str]) -> int:
    if not confirm("Erase ALL thoughts?", args):
        print("Kept.")
        return 0
    open_repository().clear_thoughts()
    print("All thoughts erased.")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    configure_logging()
    args = sys.argv[1:] if argv is None else argv

    # No args - check for piped input
    if not args:
        if not sys.stdin.isatty():
            text = sys.stdin.read().strip()
            if text:
                return capture(text)
        print_help()
        return 0

    first_arg, rest = args[0], args[1:]

    if first_arg in ("--help", "-h", "help"):
        print_help()
        return 0

    if first_arg in ("--version", "-v", "version"):
        print_version()
        return 0

    commands = {
        "list": lambda: cmd_list(rest),
        "find": lambda: cmd_find(rest),
        "show": lambda: cmd_show(rest),
        "edit": lambda: cmd_edit(rest),
        "fav": lambda: cmd_fav(rest),
        "delete": lambda: cmd_delete(rest),
        "stats": cmd_stats,
        "export": lambda: cmd_export(rest),
        "init": cmd_init,
        "settings": cmd_settings,
        "set": lambda: cmd_set(rest),
        "passwd": cmd_passwd,
        "test-connection": cmd_test_connection,
        "status": cmd_status,
        "clear": lambda: cmd_clear(rest),
    }

    try:
        if first_arg in commands:
            return commands[first_arg]()

        # Everything else is a thought to capture
        return capture(" ".join(args))
    except ValueError as e:
        # Empty thoughts and bad config values
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
