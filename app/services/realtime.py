"""Change notifications for connected clients.

Writers publish a :class:`ChangeEvent` on the in-process :class:`ChangeFeed`
after each commit. Consumers never talk to the feed directly: they iterate a
notifier's ``events()``. :class:`PushBackend` reads the feed,
:class:`PollingBackend` re-reads the database on an interval, and
:class:`FallbackNotifier` serves push and drops to polling for a fixed delay
whenever the push subscription breaks.
"""
import asyncio
import logging
from contextlib import aclosing
from dataclasses import dataclass, field
from typing import AsyncIterator, Awaitable, Callable, Dict, Optional, Protocol, Set

logger = logging.getLogger("game")

GAME_STATE = "game_state"
ANSWERS = "answers"
USER_SESSIONS = "user_sessions"


@dataclass
class ChangeEvent:
    table: str
    action: str
    record: dict = field(default_factory=dict)

    def as_message(self) -> dict:
        return {"type": "change", "table": self.table, "event": self.action, "record": self.record}


class RealtimeError(Exception):
    """Raised when a push subscription can no longer deliver events."""


_CLOSED = object()


class Subscription:
    def __init__(self, table: str, maxsize: int):
        self.table = table
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.closed = False

    def offer(self, event: ChangeEvent) -> bool:
        if self.closed:
            return False
        try:
            self.queue.put_nowait(event)
            return True
        except asyncio.QueueFull:
            self.close()
            return False

    def close(self):
        if self.closed:
            return
        self.closed = True
        while not self.queue.empty():
            self.queue.get_nowait()
        self.queue.put_nowait(_CLOSED)

    async def get(self) -> ChangeEvent:
        item = await self.queue.get()
        if item is _CLOSED:
            raise RealtimeError(f"subscription to {self.table} closed")
        return item


class ChangeFeed:
    """In-process publish/subscribe keyed by table name."""

    def __init__(self, max_pending: int = 100):
        self.max_pending = max_pending
        self.subscribers: Dict[str, Set[Subscription]] = {}

    def subscribe(self, table: str) -> Subscription:
        subscription = Subscription(table, self.max_pending)
        self.subscribers.setdefault(table, set()).add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription):
        subs = self.subscribers.get(subscription.table)
        if subs:
            subs.discard(subscription)

    def subscriber_count(self, table: str) -> int:
        return len(self.subscribers.get(table, ()))

    async def publish(self, event: ChangeEvent):
        for subscription in list(self.subscribers.get(event.table, ())):
            if not subscription.offer(event):
                # Slow consumer: cut it loose so it falls back to polling
                logger.warning("Dropping lagging subscriber on %s", event.table)
                self.unsubscribe(subscription)


class StateChangeNotifier(Protocol):
    def events(self) -> AsyncIterator[ChangeEvent]: ...


class PushBackend:
    def __init__(self, feed: ChangeFeed, table: str, predicate: Optional[Callable[[ChangeEvent], bool]] = None):
        self.feed = feed
        self.table = table
        self.predicate = predicate

    async def events(self) -> AsyncIterator[ChangeEvent]:
        subscription = self.feed.subscribe(self.table)
        try:
            while True:
                event = await subscription.get()
                if self.predicate is None or self.predicate(event):
                    yield event
        finally:
            self.feed.unsubscribe(subscription)


class PollingBackend:
    """Yields a snapshot event whenever the fetched record changes."""

    def __init__(self, table: str, fetch: Callable[[], Awaitable[dict]], interval: float):
        self.table = table
        self.fetch = fetch
        self.interval = interval

    async def events(self, until: Optional[float] = None) -> AsyncIterator[ChangeEvent]:
        loop = asyncio.get_running_loop()
        last: Optional[dict] = None
        while True:
            record = await self.fetch()
            if record != last:
                last = record
                yield ChangeEvent(self.table, "SNAPSHOT", record)
            delay = self.interval
            if until is not None:
                remaining = until - loop.time()
                if remaining <= 0:
                    return
                delay = min(delay, remaining)
            await asyncio.sleep(delay)


class FallbackNotifier:
    def __init__(self, primary: PushBackend, fallback: PollingBackend, reconnect_delay: float):
        self.primary = primary
        self.fallback = fallback
        self.reconnect_delay = reconnect_delay

    async def events(self) -> AsyncIterator[ChangeEvent]:
        loop = asyncio.get_running_loop()
        while True:
            try:
                async with aclosing(self.primary.events()) as stream:
                    async for event in stream:
                        yield event
                return
            except RealtimeError as exc:
                logger.warning(
                    "Push subscription failed table=%s error=%s; polling for %.1fs before reconnecting",
                    self.primary.table,
                    exc,
                    self.reconnect_delay,
                )
            deadline = loop.time() + self.reconnect_delay
            async with aclosing(self.fallback.events(until=deadline)) as stream:
                async for event in stream:
                    yield event
            logger.info("Reconnecting push subscription table=%s", self.primary.table)


feed = ChangeFeed()
