"""
Collaborator Response Contract
------------------------------
Turns raw responses from the verify-order and claim-ticket services into
result values the workflow consumes. Parsing never raises: anything that does
not match the documented shapes becomes a TRANSPORT_ERROR (verification) or
an UNKNOWN failure (claim).

Verify order  -> {"valid": bool, "asins": str | [str]}
Claim ticket  -> {"success": bool, "error"?: {"type": str, "message": str}}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from giveaway.core import messages

# Verification outcomes
VALID = "VALID"
INVALID = "INVALID"
TRANSPORT_ERROR = messages.TRANSPORT_ERROR

# Claim outcomes
SUCCESS = "SUCCESS"
FAILURE = "FAILURE"


@dataclass(frozen=True)
class VerificationResult:
    outcome: str  # VALID / INVALID / TRANSPORT_ERROR
    productId: Optional[str] = None
    detail: Optional[str] = None

    @classmethod
    def valid(cls, product_id: str) -> "VerificationResult":
        return cls(outcome=VALID, productId=product_id)

    @classmethod
    def invalid(cls) -> "VerificationResult":
        return cls(outcome=INVALID)

    @classmethod
    def transport_error(cls, detail: str) -> "VerificationResult":
        return cls(outcome=TRANSPORT_ERROR, detail=detail)


@dataclass(frozen=True)
class ClaimResult:
    outcome: str  # SUCCESS / FAILURE / TRANSPORT_ERROR
    kind: Optional[str] = None  # failure kind when outcome == FAILURE
    detail: Optional[str] = None

    @classmethod
    def success(cls) -> "ClaimResult":
        return cls(outcome=SUCCESS)

    @classmethod
    def failure(cls, kind: str, detail: Optional[str] = None) -> "ClaimResult":
        return cls(outcome=FAILURE, kind=kind, detail=detail)

    @classmethod
    def transport_error(cls, detail: str) -> "ClaimResult":
        return cls(outcome=TRANSPORT_ERROR, kind=messages.TRANSPORT_ERROR, detail=detail)

    @property
    def metric_key(self) -> str:
        if self.outcome == SUCCESS:
            return SUCCESS
        return self.kind or messages.UNKNOWN


def _as_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        return v.strip().lower() in ("true", "1", "yes", "y")
    return False


def select_product_id(asins: Any) -> Optional[str]:
    """
    The collaborator sends either one identifier or a list of them.
    Always pick one: the value itself, or the first non-empty list element.
    """
    if isinstance(asins, str):
        return asins.strip() or None
    if isinstance(asins, (list, tuple)):
        for a in asins:
            if isinstance(a, str) and a.strip():
                return a.strip()
    return None


def parse_verify_response(status_code: int, body: Any) -> VerificationResult:
    if not isinstance(body, dict) or "valid" not in body:
        return VerificationResult.transport_error(f"unexpected_response:{status_code}")

    if not _as_bool(body.get("valid")):
        # An explicit "not valid" answer counts even on a 4xx (e.g. 404)
        if 200 <= status_code < 500:
            return VerificationResult.invalid()
        return VerificationResult.transport_error(f"non_2xx:{status_code}")

    if not (200 <= status_code < 300):
        return VerificationResult.transport_error(f"non_2xx:{status_code}")

    product_id = select_product_id(body.get("asins"))
    if not product_id:
        return VerificationResult.transport_error("valid_without_identifier")
    return VerificationResult.valid(product_id)


def _kind_from_status(status_code: int) -> str:
    if status_code == 409:
        return messages.DUPLICATE_CLAIM
    if status_code == 413:
        return messages.PAYLOAD_TOO_LARGE
    if status_code in (400, 422):
        return messages.INVALID_DATA
    if 500 <= status_code < 600:
        return messages.SERVER_ERROR
    return messages.UNKNOWN


def parse_claim_response(status_code: int, body: Any) -> ClaimResult:
    if isinstance(body, dict) and _as_bool(body.get("success")) and 200 <= status_code < 300:
        return ClaimResult.success()

    err = body.get("error") if isinstance(body, dict) else None
    if isinstance(err, dict) and err.get("type"):
        detail = err.get("message") if isinstance(err.get("message"), str) else None
        return ClaimResult.failure(messages.failure_kind_from_wire(err.get("type")), detail=detail)

    if 200 <= status_code < 300:
        # 2xx without success=true and without a typed error
        return ClaimResult.failure(messages.UNKNOWN, detail="unexpected_response")
    return ClaimResult.failure(_kind_from_status(status_code), detail=f"non_2xx:{status_code}")
