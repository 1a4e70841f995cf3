import time

import httpx

from giveaway.settings import settings
from giveaway.clients.contract import VerificationResult, parse_verify_response
from giveaway.clients.payloads import build_verify_payload
from giveaway.observability.logging import log
import giveaway.observability.metrics as metrics


def _read_json(resp):
    try:
        return resp.json()
    except ValueError:
        return None


def verify_order(order_id: str) -> VerificationResult:
    """
    POST {VERIFY_ORDER_URL} with {"orderId": ...}.
    Returns VALID / INVALID / TRANSPORT_ERROR; never raises.
    """
    start = time.time()
    try:
        with httpx.Client(timeout=settings.REQUEST_TIMEOUT_SEC) as client:
            resp = client.post(settings.VERIFY_ORDER_URL, json=build_verify_payload(order_id))
        result = parse_verify_response(int(resp.status_code), _read_json(resp))
    except Exception as e:
        result = VerificationResult.transport_error(f"{type(e).__name__}:{str(e)[:200]}")
        log(
            event="order_verify_exception",
            orderId=order_id,
            errorType=type(e).__name__,
            error=str(e)[:500],
        )

    elapsed_ms = int((time.time() - start) * 1000)
    log(
        event="order_verify_completed",
        orderId=order_id,
        outcome=result.outcome,
        detail=result.detail,
        elapsedMs=elapsed_ms,
    )
    metrics.safe_record(metrics.increment_verification_outcome, result.outcome)
    metrics.safe_record(metrics.record_verification_latency, elapsed_ms)
    return result
