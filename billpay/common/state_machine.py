"""Bill submission lifecycle enforced by the orchestrator."""

RECEIVED = "RECEIVED"
VALIDATED = "VALIDATED"
PAYMENT_VERIFIED = "PAYMENT_VERIFIED"
NOTIFIED = "NOTIFIED"
REJECTED_VALIDATION = "REJECTED_VALIDATION"
REJECTED_PAYMENT = "REJECTED_PAYMENT"
REJECTED_NOTIFICATION = "REJECTED_NOTIFICATION"

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    RECEIVED: {VALIDATED, REJECTED_VALIDATION},
    VALIDATED: {PAYMENT_VERIFIED, REJECTED_PAYMENT},
    PAYMENT_VERIFIED: {NOTIFIED, REJECTED_NOTIFICATION},
    NOTIFIED: set(),
    REJECTED_VALIDATION: set(),
    REJECTED_PAYMENT: set(),
    REJECTED_NOTIFICATION: set(),
}


def validate_transition(current: str, new: str) -> None:
    """Raise when a transition is not allowed by the state machine."""

    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise ValueError(f"Invalid transition: {current} -> {new}")


def is_terminal(state: str) -> bool:
    return not ALLOWED_TRANSITIONS.get(state, set())
