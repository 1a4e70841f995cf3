# Entry workflow stages

# Step one: user is typing; order id not (or no longer) verified
COLLECTING = "COLLECTING"

# Order verification call in flight (busy)
VERIFYING = "VERIFYING"

# productId held for the current orderId; submit is possible
VERIFIED = "VERIFIED"

# Claim submission call in flight (busy)
SUBMITTING = "SUBMITTING"

# Terminal: claim accepted, form reset
COMPLETED = "COMPLETED"

# Submission failed; settles straight back to COLLECTING with generalError set
FAILED = "FAILED"

BUSY_STAGES = (VERIFYING, SUBMITTING)

# Form fields (wire names)
ORDER_ID = "orderId"
FULL_NAME = "fullName"
EMAIL = "email"
PHONE_NUMBER = "phoneNumber"

FIELDS = (ORDER_ID, FULL_NAME, EMAIL, PHONE_NUMBER)


def is_busy(stage: str) -> bool:
    return stage in BUSY_STAGES


def step_for(stage: str) -> int:
    """Form page shown for a stage: 1 = order id, 2 = contact details."""
    return 2 if stage in (VERIFIED, SUBMITTING) else 1
