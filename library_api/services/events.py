"""
Event System for Real-Time Broadcasting

In-process publish/subscribe used by GraphQL subscriptions.

Features:
- Topic-based fan-out: one publish reaches every current subscriber
- One asyncio.Queue per subscriber, delivery in publish order
- No replay: a subscriber only sees events published after it registered
- Registrations live for the process lifetime only

Usage:
    from library_api.services.events import EventType, PubSub

    pubsub = PubSub()

    async with pubsub.subscribe(EventType.BOOK_ADDED) as events:
        async for book in events:
            ...

    await pubsub.publish(EventType.BOOK_ADDED, book)
"""

import asyncio
import logging
from collections import defaultdict
from collections.abc import AsyncIterator
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)


# =============================================================================
# Event Types
# =============================================================================


class EventType(StrEnum):
    """Topics that can be published."""

    BOOK_ADDED = "BOOK_ADDED"


# =============================================================================
# TopicSubscription
# =============================================================================


class TopicSubscription:
    """
    A live registration on one topic.

    Registration happens on construction, not on first iteration, so a
    subscriber is guaranteed to see every event published after
    PubSub.subscribe() returns. Closing (or leaving the `async with`
    block) unregisters it.
    """

    def __init__(self, pubsub: "PubSub", topic: str):
        self.topic = topic
        self._pubsub = pubsub
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self.closed = False
        pubsub._register(topic, self._queue)

    def __aiter__(self) -> AsyncIterator[Any]:
        return self

    async def __anext__(self) -> Any:
        if self.closed:
            raise StopAsyncIteration
        return await self._queue.get()

    def pending(self) -> int:
        """Number of delivered events not yet consumed."""
        return self._queue.qsize()

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._pubsub._unregister(self.topic, self._queue)

    async def __aenter__(self) -> "TopicSubscription":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()


# =============================================================================
# PubSub
# =============================================================================


class PubSub:
    """
    In-memory topic registry.

    One instance lives on app.state for the lifetime of the process and
    is shared by every request through the GraphQL context.
    """

    def __init__(self):
        self._subscribers: dict[str, set[asyncio.Queue]] = defaultdict(set)

    def _register(self, topic: str, queue: asyncio.Queue) -> None:
        self._subscribers[topic].add(queue)
        logger.debug(f"Subscriber added to '{topic}' ({len(self._subscribers[topic])} total)")

    def _unregister(self, topic: str, queue: asyncio.Queue) -> None:
        subscribers = self._subscribers.get(topic)
        if subscribers is None:
            return
        subscribers.discard(queue)
        if not subscribers:
            del self._subscribers[topic]
        logger.debug(f"Subscriber removed from '{topic}'")

    def subscribe(self, topic: str) -> TopicSubscription:
        """Register a new subscriber on `topic`."""
        return TopicSubscription(self, topic)

    async def publish(self, topic: str, payload: Any) -> int:
        """
        Deliver `payload` to every subscriber currently registered on `topic`.

        Returns:
            Number of subscribers the event was delivered to
        """
        subscribers = list(self._subscribers.get(topic, ()))
        for queue in subscribers:
            queue.put_nowait(payload)
        logger.debug(f"Published {topic}: {len(subscribers)} subscribers")
        return len(subscribers)

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, ()))

    def get_stats(self) -> dict[str, int]:
        """Subscriber count per topic, for the health endpoint."""
        return {topic: len(queues) for topic, queues in self._subscribers.items()}
