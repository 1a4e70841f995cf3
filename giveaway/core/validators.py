import re
from typing import Optional

from giveaway.core import state_machine as sm
from giveaway.core import messages

# local@domain.tld: no whitespace in any part, at least one char after the last dot
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# optional "+", then digits/spaces/hyphens; length checked separately
PHONE_RE = re.compile(r"^\+?[0-9 \-]+$")
PHONE_MIN_CHARS = 10


def validate_required(value: Optional[str]) -> bool:
    return bool((value or "").strip())


def validate_email(value: Optional[str]) -> bool:
    if not value:
        return False
    return EMAIL_RE.fullmatch(value) is not None


def validate_phone_number(value: Optional[str]) -> bool:
    """
    Optional leading '+', then at least 10 digits/spaces/hyphens.
    The '+' does not count toward the 10.
    """
    if not value or not PHONE_RE.fullmatch(value):
        return False
    body = value[1:] if value.startswith("+") else value
    return len(body) >= PHONE_MIN_CHARS


def validate_field(name: str, value: Optional[str]) -> Optional[str]:
    """Return the error message for one form field, or None when it passes."""
    if name not in sm.FIELDS:
        raise KeyError(name)
    if not validate_required(value):
        return messages.REQUIRED[name]
    if name == sm.EMAIL and not validate_email(value):
        return messages.INVALID_EMAIL
    if name == sm.PHONE_NUMBER and not validate_phone_number(value):
        return messages.INVALID_PHONE
    return None
