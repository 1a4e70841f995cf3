"""
Entry workflow transitions.

Every function takes a FormState and returns a new one; nothing here does I/O.
The controller composes these with the two remote calls:

    COLLECTING --verify--> VERIFYING --VALID--> VERIFIED --submit--> SUBMITTING --SUCCESS--> COMPLETED
                               |                                       |
                               +--INVALID/TRANSPORT--> COLLECTING      +--failure--> FAILED -> COLLECTING

Editing orderId drops productId, so a claim can only ever go out for the
order id that was actually verified.
"""
from typing import Dict, Optional, Tuple

from giveaway.clients.contract import ClaimResult, VerificationResult, SUCCESS, VALID, INVALID
from giveaway.core import messages
from giveaway.core import state_machine as sm
from giveaway.core.validators import validate_field, validate_required
from giveaway.store.models import FormState


def initial_state() -> FormState:
    return FormState()


def can_submit(state: FormState) -> bool:
    return bool(state.productId) and state.stage == sm.VERIFIED


def edit_field(state: FormState, name: str, value: str) -> FormState:
    if name not in sm.FIELDS:
        raise KeyError(name)
    if state.stage == sm.COMPLETED:
        return state
    value = value if value is not None else ""
    if state.value_of(name) == value:
        return state

    new = state.copy(**{name: value})
    new.fieldErrors.pop(name, None)

    if name == sm.ORDER_ID:
        new.productId = None
        # In-flight stages keep their busy flag; the stale result is dropped on arrival
        if new.stage in (sm.VERIFIED, sm.FAILED):
            new.stage = sm.COLLECTING
    return new


def blur_field(state: FormState, name: str) -> FormState:
    """Validate one field when the user leaves it."""
    if state.stage == sm.COMPLETED:
        return state
    err = validate_field(name, state.value_of(name))
    if err == state.fieldErrors.get(name):
        return state
    new = state.copy()
    if err:
        new.fieldErrors[name] = err
    else:
        new.fieldErrors.pop(name, None)
    return new


def begin_verification(state: FormState) -> Tuple[FormState, Optional[str]]:
    """
    Returns the new state and the order id to send, or None when no call
    should be made (busy, finished, guard failed, or already verified).
    """
    if sm.is_busy(state.stage) or state.stage == sm.COMPLETED:
        return state, None

    if not validate_required(state.orderId):
        new = state.copy(stage=sm.COLLECTING, productId=None)
        new.fieldErrors[sm.ORDER_ID] = messages.REQUIRED[sm.ORDER_ID]
        return new, None

    if state.productId:
        # Cached: productId is only ever held for the current orderId
        if state.stage != sm.VERIFIED:
            return state.copy(stage=sm.VERIFIED), None
        return state, None

    new = state.copy(stage=sm.VERIFYING)
    new.fieldErrors.pop(sm.ORDER_ID, None)
    return new, state.orderId


def is_stale(state: FormState, order_id: str) -> bool:
    return state.orderId != order_id


def apply_verification(state: FormState, order_id: str, result: VerificationResult) -> FormState:
    if is_stale(state, order_id):
        # orderId changed while the call was in flight; the edit already cleared productId
        if state.stage == sm.VERIFYING:
            return state.copy(stage=sm.COLLECTING)
        return state

    if result.outcome == VALID and result.productId:
        new = state.copy(stage=sm.VERIFIED, productId=result.productId)
        new.fieldErrors.pop(sm.ORDER_ID, None)
        return new

    new = state.copy(stage=sm.COLLECTING, productId=None)
    if result.outcome == INVALID:
        new.fieldErrors[sm.ORDER_ID] = messages.ORDER_NOT_FOUND
    else:
        new.fieldErrors[sm.ORDER_ID] = messages.ORDER_VERIFY_UNAVAILABLE
    return new


def submission_errors(state: FormState) -> Dict[str, str]:
    """The synchronous gate in front of the claim call: one message per failing field."""
    errors: Dict[str, str] = {}
    for name in sm.FIELDS:
        err = validate_field(name, state.value_of(name))
        if err:
            errors[name] = err
    if not state.productId and sm.ORDER_ID not in errors:
        errors[sm.ORDER_ID] = messages.ORDER_NOT_VERIFIED
    return errors


def begin_submission(state: FormState) -> Tuple[FormState, bool]:
    """Returns the new state and whether the claim call should fire."""
    if sm.is_busy(state.stage) or state.stage == sm.COMPLETED:
        return state, False

    errors = submission_errors(state)
    if errors:
        new = state.copy()
        new.fieldErrors.update(errors)
        return new, False

    new = state.copy(stage=sm.SUBMITTING, generalError=None)
    return new, True


def fail_submission(state: FormState, kind: str) -> FormState:
    """SUBMITTING -> FAILED: fields kept, productId dropped, banner set."""
    return state.copy(
        stage=sm.FAILED,
        productId=None,
        generalError=messages.submission_message(kind),
    )


def settle_failure(state: FormState) -> FormState:
    """FAILED is never resting state: the form goes straight back to COLLECTING."""
    if state.stage != sm.FAILED:
        return state
    return state.copy(stage=sm.COLLECTING)


def apply_submission(state: FormState, result: ClaimResult) -> FormState:
    if result.outcome == SUCCESS:
        return FormState(stage=sm.COMPLETED)
    return settle_failure(fail_submission(state, result.kind or messages.UNKNOWN))
