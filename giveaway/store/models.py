from dataclasses import dataclass, field, replace
from typing import Dict, Optional

from giveaway.core import state_machine as sm


@dataclass
class FormState:
    # Raw user input
    orderId: str = ""
    fullName: str = ""
    email: str = ""
    phoneNumber: str = ""

    # Set only by a successful verification of the current orderId
    productId: Optional[str] = None

    # field name -> message
    fieldErrors: Dict[str, str] = field(default_factory=dict)

    stage: str = sm.COLLECTING  # COLLECTING/VERIFYING/VERIFIED/SUBMITTING/COMPLETED/FAILED

    # Submission failure banner (not tied to a field)
    generalError: Optional[str] = None

    def copy(self, **changes) -> "FormState":
        """New FormState with `changes` applied; fieldErrors is never shared."""
        changes.setdefault("fieldErrors", dict(self.fieldErrors))
        return replace(self, **changes)

    def value_of(self, name: str) -> str:
        if name not in sm.FIELDS:
            raise KeyError(name)
        return getattr(self, name)
