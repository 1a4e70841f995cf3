import threading
import pytest
from unittest.mock import patch, MagicMock
from giveaway.clients.contract import ClaimResult, VerificationResult
from giveaway.core import messages
from giveaway.core import state_machine as sm
from giveaway.core.controller import EntryController
from giveaway.store.models import FormState


def _fill(ctrl, order_id="A1"):
    ctrl.edit("orderId", order_id)
    ctrl.edit("fullName", "Jane Doe")
    ctrl.edit("email", "jane@example.com")
    ctrl.edit("phoneNumber", "+1 555-123-4567")


@pytest.fixture
def ctrl():
    return EntryController("test_sess")


@patch("giveaway.core.controller.claim_client")
@patch("giveaway.core.controller.order_client")
def test_submit_without_verification_never_calls_claim(mock_order, mock_claim, ctrl):
    _fill(ctrl)
    state = ctrl.submit()

    mock_claim.submit_claim.assert_not_called()
    mock_order.verify_order.assert_not_called()
    assert state.fieldErrors["orderId"] == messages.ORDER_NOT_VERIFIED


@patch("giveaway.core.controller.order_client")
def test_edit_after_verification_clears_product_id(mock_order, ctrl):
    mock_order.verify_order.return_value = VerificationResult.valid("p1")
    _fill(ctrl)
    assert ctrl.verify().productId == "p1"

    state = ctrl.edit("orderId", "A2")
    assert state.productId is None
    assert state.stage == sm.COLLECTING


@patch("giveaway.core.controller.order_client")
def test_reverification_is_skipped_for_same_order_id(mock_order, ctrl):
    mock_order.verify_order.return_value = VerificationResult.valid("p1")
    ctrl.edit("orderId", "A1")

    ctrl.blur("orderId")
    ctrl.blur("orderId")
    ctrl.verify()

    mock_order.verify_order.assert_called_once_with("A1")
    assert ctrl.state.productId == "p1"


@patch("giveaway.core.controller.order_client")
def test_blank_order_id_blur_makes_no_call(mock_order, ctrl):
    state = ctrl.blur("orderId")
    mock_order.verify_order.assert_not_called()
    assert state.fieldErrors["orderId"] == messages.REQUIRED["orderId"]


@patch("giveaway.core.controller.order_client")
def test_blur_on_contact_field_is_local(mock_order, ctrl):
    ctrl.edit("email", "nope")
    state = ctrl.blur("email")
    mock_order.verify_order.assert_not_called()
    assert state.fieldErrors["email"] == messages.INVALID_EMAIL


@patch("giveaway.core.controller.claim_client")
@patch("giveaway.core.controller.order_client")
def test_duplicate_claim_keeps_fields_and_returns_to_collecting(mock_order, mock_claim, ctrl):
    mock_order.verify_order.return_value = VerificationResult.valid("p1")
    mock_claim.submit_claim.return_value = ClaimResult.failure(messages.DUPLICATE_CLAIM)
    _fill(ctrl)
    ctrl.verify()

    state = ctrl.submit()

    assert state.generalError == messages.SUBMISSION_FAILURE[messages.DUPLICATE_CLAIM]
    assert state.stage == sm.COLLECTING
    assert state.orderId == "A1"
    assert state.fullName == "Jane Doe"
    assert state.email == "jane@example.com"
    assert state.phoneNumber == "+1 555-123-4567"
    sent = mock_claim.submit_claim.call_args.args[0]
    assert sent.productId == "p1"
    assert sent.stage == sm.SUBMITTING


@patch("giveaway.core.controller.claim_client")
@patch("giveaway.core.controller.order_client")
def test_success_resets_form(mock_order, mock_claim, ctrl):
    mock_order.verify_order.return_value = VerificationResult.valid("p1")
    mock_claim.submit_claim.return_value = ClaimResult.success()
    _fill(ctrl)
    ctrl.verify()

    state = ctrl.submit()

    assert state == FormState(stage=sm.COMPLETED)
    # terminal: a second submit is not sent
    ctrl.submit()
    mock_claim.submit_claim.assert_called_once()


@patch("giveaway.core.controller.claim_client")
@patch("giveaway.core.controller.order_client")
def test_client_exceptions_become_form_errors(mock_order, mock_claim, ctrl):
    mock_order.verify_order.side_effect = RuntimeError("boom")
    _fill(ctrl)
    state = ctrl.verify()
    assert state.fieldErrors["orderId"] == messages.ORDER_VERIFY_UNAVAILABLE

    mock_order.verify_order.side_effect = None
    mock_order.verify_order.return_value = VerificationResult.valid("p1")
    ctrl.verify()
    mock_claim.submit_claim.side_effect = RuntimeError("boom")
    state = ctrl.submit()
    assert state.generalError == messages.SUBMISSION_FAILURE[messages.TRANSPORT_ERROR]
    assert state.stage == sm.COLLECTING


@patch("giveaway.core.controller.order_client")
def test_stale_verification_result_is_discarded(mock_order, ctrl):
    """The user changes the order id while the first verification is in flight."""
    started = threading.Event()
    release = threading.Event()

    def slow_verify(order_id):
        started.set()
        release.wait(timeout=5)
        return VerificationResult.valid("p-" + order_id)

    mock_order.verify_order.side_effect = slow_verify
    ctrl.edit("orderId", "A1")

    t = threading.Thread(target=ctrl.verify)
    t.start()
    assert started.wait(timeout=5)
    assert ctrl.state.stage == sm.VERIFYING

    # busy: a second verify while in flight is ignored
    assert ctrl.verify().stage == sm.VERIFYING
    ctrl.edit("orderId", "A2")
    release.set()
    t.join(timeout=5)

    assert ctrl.state.orderId == "A2"
    assert ctrl.state.productId is None
    assert ctrl.state.stage == sm.COLLECTING
    assert mock_order.verify_order.call_count == 1


@patch("giveaway.core.controller.claim_client")
@patch("giveaway.core.controller.order_client")
def test_concurrent_submit_is_ignored_while_in_flight(mock_order, mock_claim, ctrl):
    started = threading.Event()
    release = threading.Event()

    def slow_submit(state):
        started.set()
        release.wait(timeout=5)
        return ClaimResult.success()

    mock_order.verify_order.return_value = VerificationResult.valid("p1")
    mock_claim.submit_claim.side_effect = slow_submit
    _fill(ctrl)
    ctrl.verify()

    t = threading.Thread(target=ctrl.submit)
    t.start()
    assert started.wait(timeout=5)
    assert ctrl.submit().stage == sm.SUBMITTING
    release.set()
    t.join(timeout=5)

    assert mock_claim.submit_claim.call_count == 1
    assert ctrl.state.stage == sm.COMPLETED


@patch("giveaway.core.controller.log")
@patch("giveaway.core.controller.order_client")
def test_stage_transitions_are_logged(mock_order, mock_log, ctrl):
    mock_order.verify_order.return_value = VerificationResult.invalid()
    ctrl.edit("orderId", "A1")
    ctrl.verify()

    transitions = [
        (c.kwargs["fromStage"], c.kwargs["toStage"])
        for c in mock_log.call_args_list
        if c.kwargs.get("event") == "stage_transition"
    ]
    assert transitions == [(sm.COLLECTING, sm.VERIFYING), (sm.VERIFYING, sm.COLLECTING)]


@patch("giveaway.core.controller.log")
@patch("giveaway.core.controller.order_client")
def test_field_edits_are_logged_without_values(mock_order, mock_log, ctrl):
    mock_order.verify_order.return_value = VerificationResult.valid("p1")
    ctrl.edit("orderId", "A1")
    ctrl.verify()
    mock_log.reset_mock()

    ctrl.edit("email", "jane@example.com")
    ctrl.edit("email", "jane@example.com")  # unchanged: no event
    ctrl.edit("orderId", "A2")

    edits = [c.kwargs for c in mock_log.call_args_list if c.kwargs.get("event") == "field_edited"]
    assert [e["field"] for e in edits] == ["email", "orderId"]
    assert [e["productIdCleared"] for e in edits] == [False, True]
    assert all("jane@example.com" not in map(str, e.values()) for e in edits)
