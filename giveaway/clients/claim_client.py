import time

import httpx

from giveaway.settings import settings
from giveaway.clients.contract import ClaimResult, parse_claim_response
from giveaway.clients.payloads import build_claim_payload, as_multipart_fields
from giveaway.store.models import FormState
from giveaway.observability.logging import log
import giveaway.observability.metrics as metrics


def _read_json(resp):
    try:
        return resp.json()
    except ValueError:
        return None


def _post(client: httpx.Client, payload: dict) -> httpx.Response:
    if settings.CLAIM_ENCODING == "multipart":
        return client.post(settings.CLAIM_TICKET_URL, files=as_multipart_fields(payload))
    return client.post(settings.CLAIM_TICKET_URL, json=payload)


def submit_claim(state: FormState) -> ClaimResult:
    """
    POST the claim record for a verified form to {CLAIM_TICKET_URL}.
    Returns SUCCESS / FAILURE(kind) / TRANSPORT_ERROR; never raises.
    """
    start = time.time()
    try:
        payload = build_claim_payload(state)
        with httpx.Client(timeout=settings.REQUEST_TIMEOUT_SEC) as client:
            resp = _post(client, payload)
        result = parse_claim_response(int(resp.status_code), _read_json(resp))
        if result.kind:
            log(
                event="claim_submit_rejected",
                orderId=state.orderId,
                statusCode=int(resp.status_code),
                kind=result.kind,
                errorMessage=result.detail,
            )
    except Exception as e:
        result = ClaimResult.transport_error(f"{type(e).__name__}:{str(e)[:200]}")
        log(
            event="claim_submit_exception",
            orderId=state.orderId,
            errorType=type(e).__name__,
            error=str(e)[:500],
        )

    elapsed_ms = int((time.time() - start) * 1000)
    log(
        event="claim_submit_completed",
        orderId=state.orderId,
        outcome=result.outcome,
        kind=result.kind,
        encoding=settings.CLAIM_ENCODING,
        elapsedMs=elapsed_ms,
    )
    metrics.safe_record(metrics.increment_claim_outcome, result.metric_key)
    metrics.safe_record(metrics.record_claim_latency, elapsed_ms)
    return result
