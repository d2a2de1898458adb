"""Change Notifier Implementations

Provides concrete implementations for broadcasting cart changes.
"""

import inspect
import logging
from typing import Awaitable, Callable, Optional, Union
import httpx
from src.app.services.notification_service import CartChangedEvent, ChangeNotifier

logger = logging.getLogger(__name__)

Subscriber = Callable[[CartChangedEvent], Union[None, Awaitable[None]]]


class InMemoryChangeNotifier(ChangeNotifier):
    """
    In-process pub/sub channel

    Subscribers are plain or async callables invoked in subscription
    order. A failing subscriber is logged and does not stop the others.
    """

    def __init__(self, subscribers: Optional[list[Subscriber]] = None):
        self.subscribers: list[Subscriber] = list(subscribers or [])

    def subscribe(self, subscriber: Subscriber) -> None:
        self.subscribers.append(subscriber)

    async def publish(self, event: CartChangedEvent) -> bool:
        success = True
        for subscriber in self.subscribers:
            try:
                outcome = subscriber(event)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as e:
                logger.error(f"Cart change subscriber {subscriber!r} failed: {e}")
                success = False
        return success


class LoggingChangeNotifier(ChangeNotifier):
    """
    Notifier that logs every change

    Useful for development and testing, or as a fallback.
    """

    async def publish(self, event: CartChangedEvent) -> bool:
        logger.info(
            f"[CART CHANGED] Session: {event.session_id}, "
            f"Reason: {event.reason.value}, "
            f"Entries: {event.item_count}"
        )
        return True


class WebhookChangeNotifier(ChangeNotifier):
    """
    Notifier that POSTs each change to an HTTP webhook
    """

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            webhook_url: URL to POST changes to
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.transport = transport

    async def publish(self, event: CartChangedEvent) -> bool:
        payload = {
            "type": "cart_changed",
            "session_id": event.session_id,
            "reason": event.reason.value,
            "item_count": event.item_count,
            "occurred_at": event.occurred_at.isoformat(),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to deliver cart change for session {event.session_id}: {e}")
            return False


class CompositeChangeNotifier(ChangeNotifier):
    """
    Notifier that delegates to multiple notifiers

    Every notifier receives the event even if an earlier one fails.
    """

    def __init__(self, notifiers: list[ChangeNotifier]):
        self.notifiers = notifiers

    async def publish(self, event: CartChangedEvent) -> bool:
        """
        Returns:
            True if at least one notifier succeeded, False otherwise
        """
        success = False
        for notifier in self.notifiers:
            try:
                if await notifier.publish(event):
                    success = True
            except Exception as e:
                logger.error(f"Notifier {type(notifier).__name__} failed: {e}")
        return success


class CartItemCounter:
    """
    Subscriber that tracks the number of stored entries per session

    Fed only by change events, so cart size indicators never re-read
    the store. Sessions with no event yet return None.
    """

    def __init__(self):
        self._counts: dict[str, int] = {}

    def __call__(self, event: CartChangedEvent) -> None:
        self._counts[event.session_id] = event.item_count

    def get(self, session_id: str) -> Optional[int]:
        return self._counts.get(session_id)

    def prime(self, session_id: str, count: int) -> None:
        """Seed a count read from the store for a session not seen yet"""
        self._counts.setdefault(session_id, count)


def create_change_notifier(
    webhook_url: Optional[str] = None,
    subscribers: Optional[list[Subscriber]] = None,
) -> ChangeNotifier:
    """
    Factory function to create the cart change channel

    Args:
        webhook_url: Optional webhook URL. If provided, changes are also
                     POSTed there.
        subscribers: In-process subscribers (e.g., CartItemCounter)

    Returns:
        Configured ChangeNotifier
    """
    notifiers: list[ChangeNotifier] = [
        InMemoryChangeNotifier(subscribers),
        LoggingChangeNotifier(),
    ]

    if webhook_url:
        notifiers.append(WebhookChangeNotifier(webhook_url))

    return CompositeChangeNotifier(notifiers)
