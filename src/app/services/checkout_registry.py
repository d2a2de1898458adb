"""In-process registry of checkout sessions

Holds the checkout state machine of every cart session and the lock
that serializes submissions. Checkout progress lives for the life of
the process; the cart itself lives in the line item store.
"""

import asyncio
from src.domain.checkout import CheckoutSession, CheckoutState


class CheckoutRegistry:
    def __init__(self):
        self._sessions: dict[str, CheckoutSession] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, session_id: str) -> CheckoutSession:
        """Current checkout session, created in IDLE on first access"""
        checkout = self._sessions.get(session_id)
        if checkout is None:
            checkout = CheckoutSession(session_id=session_id)
            self._sessions[session_id] = checkout
        return checkout

    def restart(self, session_id: str) -> CheckoutSession:
        """Replace a finished checkout with a fresh IDLE one"""
        checkout = CheckoutSession(session_id=session_id)
        self._sessions[session_id] = checkout
        return checkout

    def lock_for(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        return lock

    def is_submitting(self, session_id: str) -> bool:
        """True while an order submission for the session is in flight"""
        checkout = self._sessions.get(session_id)
        if checkout is not None and checkout.state == CheckoutState.SUBMITTING:
            return True
        lock = self._locks.get(session_id)
        return lock is not None and lock.locked()
