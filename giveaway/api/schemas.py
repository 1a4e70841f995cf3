from typing import Dict, Literal, Optional
from pydantic import BaseModel

from giveaway.core import state_machine as sm
from giveaway.core.workflow import can_submit
from giveaway.store.models import FormState

FieldName = Literal["orderId", "fullName", "email", "phoneNumber"]

class FieldUpdate(BaseModel):
    field: FieldName
    value: str = ""

class FieldBlur(BaseModel):
    field: FieldName

class FormView(BaseModel):
    sessionId: str
    orderId: str = ""
    fullName: str = ""
    email: str = ""
    phoneNumber: str = ""
    productId: Optional[str] = None
    fieldErrors: Dict[str, str] = {}
    stage: str = sm.COLLECTING
    generalError: Optional[str] = None
    # 1 = order id page, 2 = contact details page
    step: int = 1
    busy: bool = False
    canSubmit: bool = False

    @classmethod
    def from_state(cls, session_id: str, state: FormState) -> "FormView":
        return cls(
            sessionId=session_id,
            orderId=state.orderId,
            fullName=state.fullName,
            email=state.email,
            phoneNumber=state.phoneNumber,
            productId=state.productId,
            fieldErrors=dict(state.fieldErrors),
            stage=state.stage,
            generalError=state.generalError,
            step=sm.step_for(state.stage),
            busy=sm.is_busy(state.stage),
            canSubmit=can_submit(state),
        )
