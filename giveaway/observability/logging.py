import json
import re
import time
from giveaway.settings import settings

# Contact details typed into the entry form: always fully redacted
SENSITIVE_KEYS = {"fullName", "name", "email", "phoneNumber"}

# Free text from collaborators or exceptions; may echo the entrant's details
FREE_TEXT_KEYS = {"responseText", "errorMessage", "error"}

_EMAIL_IN_TEXT = re.compile(r"[^\s@\"']+@[^\s@\"']+\.[^\s@\"']+")
_PHONE_IN_TEXT = re.compile(r"\+?\d[\d \-]{8,}\d")

def _redact_value(v):
    if isinstance(v, str) and len(v) > 0:
        return f"[REDACTED:{len(v)}chars]"
    if isinstance(v, dict):
        return {k: _redact_value(val) for k, val in v.items()}
    return v

def scrub_text(v):
    """Mask email addresses and phone numbers inside a free-text value."""
    if not isinstance(v, str):
        return v
    v = _EMAIL_IN_TEXT.sub("[EMAIL]", v)
    return _PHONE_IN_TEXT.sub("[PHONE]", v)

def _clean(k, v):
    if k in SENSITIVE_KEYS:
        return _redact_value(v)
    if k in FREE_TEXT_KEYS:
        return scrub_text(v)
    if isinstance(v, dict):
        return {sk: _clean(sk, sv) for sk, sv in v.items()}
    return v

def log(event: str, **fields):
    payload = {"ts": int(time.time()), "event": event}

    if settings.ENABLE_PII_REDACTION:
        payload.update({k: _clean(k, v) for k, v in fields.items()})
    else:
        payload.update(fields)

    print(json.dumps(payload, ensure_ascii=False))
