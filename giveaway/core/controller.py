import threading
import time
from typing import Optional

from giveaway.clients.contract import ClaimResult, VerificationResult, SUCCESS
from giveaway.core import messages
from giveaway.core import state_machine as sm
from giveaway.core import workflow
from giveaway.observability.logging import log
from giveaway.store.models import FormState
import giveaway.clients.order_client as order_client
import giveaway.clients.claim_client as claim_client
import giveaway.observability.metrics as metrics


class EntryController:
    """
    Owns the FormState of one entry session and drives it through the
    workflow. Events are processed one at a time; the lock only guards reading
    and writing the state, never a network call, so the busy stages
    (VERIFYING / SUBMITTING) are what keep a second call from firing.
    """

    def __init__(self, session_id: str):
        self.sessionId = session_id
        self.state: FormState = workflow.initial_state()
        self.lastSeenAt: float = time.time()
        self._lock = threading.Lock()

    def touch(self) -> None:
        self.lastSeenAt = time.time()

    def idle_seconds(self, now: Optional[float] = None) -> float:
        return (now or time.time()) - self.lastSeenAt

    def _set(self, new: FormState, trigger: str) -> FormState:
        old = self.state
        self.state = new
        if old.stage != new.stage:
            log(
                event="stage_transition",
                sessionId=self.sessionId,
                fromStage=old.stage,
                toStage=new.stage,
                trigger=trigger,
            )
        return new

    # --- user events -----------------------------------------------------

    def edit(self, name: str, value: str) -> FormState:
        with self._lock:
            self.touch()
            before = self.state
            new = self._set(workflow.edit_field(before, name, value), f"edit:{name}")
            if new is not before:
                log(
                    event="field_edited",
                    sessionId=self.sessionId,
                    field=name,
                    stage=new.stage,
                    productIdCleared=bool(before.productId and not new.productId),
                )
            return new

    def blur(self, name: str) -> FormState:
        """Leaving the order-id field verifies it; other fields are validated locally."""
        if name == sm.ORDER_ID:
            return self.verify()
        with self._lock:
            self.touch()
            return self._set(workflow.blur_field(self.state, name), f"blur:{name}")

    def verify(self) -> FormState:
        with self._lock:
            self.touch()
            before = self.state
            new, order_id = workflow.begin_verification(before)
            self._set(new, "verify")
            if order_id is None:
                if before.productId and not sm.is_busy(before.stage):
                    log(event="verification_skipped_cached", sessionId=self.sessionId, orderId=before.orderId)
                    metrics.safe_record(metrics.increment_verification_skipped)
                return new

        result = self._call_verify(order_id)

        with self._lock:
            self.touch()
            if workflow.is_stale(self.state, order_id):
                log(
                    event="verification_discarded_stale",
                    sessionId=self.sessionId,
                    orderId=order_id,
                    outcome=result.outcome,
                )
                metrics.safe_record(metrics.increment_verification_stale)
            else:
                log(
                    event="verification_result",
                    sessionId=self.sessionId,
                    orderId=order_id,
                    outcome=result.outcome,
                    detail=result.detail,
                )
            return self._set(workflow.apply_verification(self.state, order_id, result), f"verify:{result.outcome}")

    def submit(self) -> FormState:
        with self._lock:
            self.touch()
            new, should_send = workflow.begin_submission(self.state)
            self._set(new, "submit")
            if not should_send:
                log(
                    event="submission_blocked",
                    sessionId=self.sessionId,
                    stage=new.stage,
                    fieldErrors=sorted(new.fieldErrors.keys()),
                )
                return new
            snapshot = new.copy()

        result = self._call_claim(snapshot)

        with self._lock:
            self.touch()
            log(
                event="submission_result",
                sessionId=self.sessionId,
                orderId=snapshot.orderId,
                outcome=result.outcome,
                kind=result.kind,
            )
            if result.outcome != SUCCESS:
                self._set(workflow.fail_submission(self.state, result.kind or messages.UNKNOWN), f"submit:{result.metric_key}")
                return self._set(workflow.settle_failure(self.state), "failure_settled")
            return self._set(workflow.apply_submission(self.state, result), "submit:SUCCESS")

    # --- remote calls (no lock held) ----------------------------------------

    def _call_verify(self, order_id: str) -> VerificationResult:
        try:
            return order_client.verify_order(order_id)
        except Exception as e:
            log(event="order_verify_exception", sessionId=self.sessionId, errorType=type(e).__name__, error=str(e)[:500])
            return VerificationResult.transport_error(f"{type(e).__name__}:{str(e)[:200]}")

    def _call_claim(self, snapshot: FormState) -> ClaimResult:
        try:
            return claim_client.submit_claim(snapshot)
        except Exception as e:
            log(event="claim_submit_exception", sessionId=self.sessionId, errorType=type(e).__name__, error=str(e)[:500])
            return ClaimResult.transport_error(f"{type(e).__name__}:{str(e)[:200]}")
