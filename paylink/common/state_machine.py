"""Checkout stage transitions enforced by the orchestrator."""

VALIDATING = "VALIDATING"
RESOLVING_CUSTOMER = "RESOLVING_CUSTOMER"
SUBMITTING_CHARGE = "SUBMITTING_CHARGE"
RESPONDING = "RESPONDING"
FAILED = "FAILED"

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    VALIDATING: {RESOLVING_CUSTOMER, SUBMITTING_CHARGE, FAILED},
    RESOLVING_CUSTOMER: {SUBMITTING_CHARGE, FAILED},
    SUBMITTING_CHARGE: {RESPONDING, FAILED},
    RESPONDING: set(),
    FAILED: set(),
}


def validate_transition(current: str, new: str) -> None:
    """Raise when a transition is not allowed by the state machine."""

    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise ValueError(f"Invalid transition: {current} -> {new}")


class CheckoutStage:
    """Tracks the stage of one checkout request and its visited history."""

    def __init__(self) -> None:
        self.current = VALIDATING
        self.history: list[str] = [VALIDATING]

    def advance(self, new: str) -> None:
        validate_transition(self.current, new)
        self.current = new
        self.history.append(new)

    def fail(self) -> None:
        """Jump to `FAILED` unless the request already reached a terminal stage."""

        if self.current not in (RESPONDING, FAILED):
            self.advance(FAILED)

    @property
    def terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self.current]
