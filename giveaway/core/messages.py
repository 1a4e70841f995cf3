"""
User-facing messages for every error the entry form can show.

Field messages land in FormState.fieldErrors; submission messages land in
FormState.generalError. Each submission failure kind has its own text.
"""
from giveaway.core import state_machine as sm

# (a) local validation
REQUIRED = {
    sm.ORDER_ID: "Please enter your order ID.",
    sm.FULL_NAME: "Please enter your full name.",
    sm.EMAIL: "Please enter your email address.",
    sm.PHONE_NUMBER: "Please enter your phone number.",
}
INVALID_EMAIL = "Please enter a valid email address."
INVALID_PHONE = "Please enter a valid phone number (at least 10 digits, spaces or hyphens)."

# (b) order verification
ORDER_NOT_FOUND = "We couldn't find that order ID. Please check it and try again."
ORDER_VERIFY_UNAVAILABLE = "We couldn't verify your order right now. Please try again in a moment."
ORDER_NOT_VERIFIED = "Please verify your order ID before submitting."

# (c) claim submission, keyed by failure kind
DUPLICATE_CLAIM = "DUPLICATE_CLAIM"
PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
INVALID_DATA = "INVALID_DATA"
SERVER_ERROR = "SERVER_ERROR"
UNKNOWN = "UNKNOWN"
TRANSPORT_ERROR = "TRANSPORT_ERROR"

FAILURE_KINDS = (DUPLICATE_CLAIM, PAYLOAD_TOO_LARGE, INVALID_DATA, SERVER_ERROR, UNKNOWN)

SUBMISSION_FAILURE = {
    DUPLICATE_CLAIM: "A claim has already been submitted for this order. Each order can only be entered once.",
    PAYLOAD_TOO_LARGE: "Your submission was too large to process. Please shorten your details and try again.",
    INVALID_DATA: "Some of the information you entered was rejected. Please review your details and try again.",
    SERVER_ERROR: "Our server ran into a problem saving your entry. Please try again later.",
    UNKNOWN: "Something went wrong while submitting your entry. Please try again.",
    TRANSPORT_ERROR: "We couldn't reach the giveaway server. Please check your connection and try again.",
}

# Collaborator error.type -> failure kind
_WIRE_KINDS = {
    "DUPLICATE_CLAIM": DUPLICATE_CLAIM,
    "FILE_TOO_LARGE": PAYLOAD_TOO_LARGE,
    "INVALID_DATA": INVALID_DATA,
    "SERVER_ERROR": SERVER_ERROR,
}


def failure_kind_from_wire(error_type) -> str:
    """Anything absent or unrecognized is UNKNOWN."""
    if not isinstance(error_type, str):
        return UNKNOWN
    return _WIRE_KINDS.get(error_type.strip().upper(), UNKNOWN)


def submission_message(kind: str) -> str:
    return SUBMISSION_FAILURE.get(kind) or SUBMISSION_FAILURE[UNKNOWN]
