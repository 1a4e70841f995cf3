from typing import Dict

from giveaway.store.models import FormState


def build_verify_payload(order_id: str) -> Dict[str, str]:
    return {"orderId": order_id}


def build_claim_payload(state: FormState) -> Dict[str, str]:
    """Claim record for a verified form. Wire key for the product id is `asin`."""
    if not state.productId:
        raise ValueError("claim payload requires a verified productId")
    return {
        "orderId": state.orderId,
        "asin": state.productId,
        "name": state.fullName,
        "email": state.email,
        "phoneNumber": state.phoneNumber,
    }


def as_multipart_fields(payload: Dict[str, str]) -> Dict[str, tuple]:
    # httpx sends (None, value) entries as plain multipart form fields
    return {k: (None, v) for k, v in payload.items()}
