"""
Local profile management: onboarding and password changes.

There is no real authentication here. The password only guards the local
profile screen, but it is still stored as a bcrypt hash rather than as text.
"""

import random
import re

import bcrypt

from ethereal.models import UserSettings
from ethereal.repository import JournalRepository

MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes; newer releases reject anything longer
MAX_PASSWORD_BYTES = 72

EMAIL_REGEX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)


class AccountError(ValueError):
    """Raised when profile input is rejected."""


def hash_password(plain_password: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Validate a plaintext password against a stored hash."""
    if not hashed_password or password_too_long(plain_password):
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash
        return False


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_REGEX.match(email))


def random_avatar_url() -> str:
    return f"https://picsum.photos/seed/{random.random()}/200/200"


def validate_onboarding(user_id: str, user_name: str, email: str, password: str) -> list[str]:
    """Return every problem with the onboarding form; empty means valid."""
    errors = []
    if not user_name.strip():
        errors.append("Name is required.")
    if not user_id.strip():
        errors.append("User ID is required.")
    if not is_valid_email(email):
        errors.append("Email address is not valid.")
    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    elif password_too_long(password):
        errors.append(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
    return errors


def complete_onboarding(
    repository: JournalRepository,
    user_id: str,
    user_name: str,
    email: str,
    password: str,
    avatar_url: str | None = None,
) -> UserSettings:
    """Validate the form, store the profile and mark the journal initialized."""
    errors = validate_onboarding(user_id, user_name, email, password)
    if errors:
        raise AccountError(" ".join(errors))

    settings = repository.get_settings().model_copy(update={
        "user_id": user_id.strip(),
        "user_name": user_name.strip(),
        "email": email,
        "password_hash": hash_password(password),
        "avatar_url": avatar_url or random_avatar_url(),
        "is_initialized": True,
    })
    repository.save_settings(settings)
    return settings


def change_password(
    settings: UserSettings,
    old_password: str,
    new_password: str,
    confirm_password: str,
) -> UserSettings:
    """
    Return settings carrying the new password hash.

    The caller decides when to save; nothing is persisted here.
    """
    if not verify_password(old_password, settings.password_hash):
        raise AccountError("Current password is incorrect.")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise AccountError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters.")
    if password_too_long(new_password):
        raise AccountError(f"New password must be at most {MAX_PASSWORD_BYTES} bytes.")
    if new_password != confirm_password:
        raise AccountError("New passwords do not match.")
    return settings.model_copy(update={"password_hash": hash_password(new_password)})
