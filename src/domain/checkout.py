"""Checkout state machine (single source of truth for transitions)"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional
from src.domain.order import PaymentMethod


class CheckoutState(str, Enum):
    IDLE = "idle"
    PAYMENT_SELECTION = "payment_selection"
    CREDIT_CHECK = "credit_check"
    CREDIT_BLOCKED = "credit_blocked"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    CANCELLED = "cancelled"


ALLOWED_TRANSITIONS: Mapping[CheckoutState, frozenset[CheckoutState]] = {
    CheckoutState.IDLE: frozenset(
        {
            CheckoutState.PAYMENT_SELECTION,
            CheckoutState.CANCELLED,
        }
    ),
    CheckoutState.PAYMENT_SELECTION: frozenset(
        {
            CheckoutState.IDLE,
            CheckoutState.CREDIT_CHECK,
            CheckoutState.SUBMITTING,
            CheckoutState.CANCELLED,
        }
    ),
    CheckoutState.CREDIT_CHECK: frozenset(
        {
            CheckoutState.CREDIT_BLOCKED,
            CheckoutState.SUBMITTING,
        }
    ),
    CheckoutState.CREDIT_BLOCKED: frozenset(
        {
            CheckoutState.PAYMENT_SELECTION,
            CheckoutState.CANCELLED,
        }
    ),
    CheckoutState.SUBMITTING: frozenset(
        {
            CheckoutState.SUBMITTED,
            CheckoutState.PAYMENT_SELECTION,
        }
    ),
    CheckoutState.SUBMITTED: frozenset(),
    CheckoutState.CANCELLED: frozenset(),
}

TERMINAL_STATES = frozenset({CheckoutState.SUBMITTED, CheckoutState.CANCELLED})


class InvalidCheckoutTransition(ValueError):
    def __init__(self, current: CheckoutState, target: CheckoutState):
        self.current = current
        self.target = target
        super().__init__(f"Transition '{current.value} -> {target.value}' is not allowed")


@dataclass
class CheckoutSession:
    """
    Checkout progress for one cart session

    Idle -> PaymentSelection -> [CreditCheck] -> Submitting -> Submitted
    CreditCheck -> CreditBlocked -> PaymentSelection
    Submitting -> PaymentSelection on gateway failure
    PaymentSelection -> Idle when stock no longer covers the cart at submit
    """

    session_id: str
    state: CheckoutState = CheckoutState.IDLE
    payment_method: Optional[PaymentMethod] = None
    order_id: Optional[str] = None
    last_error_code: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def can_transition(self, target: CheckoutState) -> bool:
        return target in ALLOWED_TRANSITIONS[self.state]

    def transition_to(self, target: CheckoutState) -> None:
        if not self.can_transition(target):
            raise InvalidCheckoutTransition(self.state, target)
        self.state = target
