"""
Registry of live stream subscribers.

- add() appends under the lock. After aclose() it closes the subscriber instead.
- broadcast() holds the same lock for the whole pass and sends to every
  subscriber in insertion order. A subscriber whose send fails is removed and
  closed before the next one is tried, so it is never sent to again.

Known risk: sends are sequential and there is no timeout. One subscriber that
stops reading stalls the pass, delays everyone after it and blocks add().
"""
import asyncio
import logging

from siggen.schemas import Sample
from siggen.services.subscriber import Subscriber, SubscriberSendError

logger = logging.getLogger("siggen.registry")


class SubscriberRegistry:
    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []
        self._lock = asyncio.Lock()
        self._evicted = 0
        self._closed = False

    async def add(self, subscriber: Subscriber) -> None:
        async with self._lock:
            if self._closed:
                # Torn down while waiting for the lock.
                logger.info("Registry closed, dropping %r", subscriber)
                subscriber.close()
                return
            self._subscribers.append(subscriber)

    async def broadcast(self, sample: Sample) -> int:
        """Send *sample* to every subscriber; returns how many were evicted."""
        async with self._lock:
            logger.info("Subscribers: %d", len(self._subscribers))
            evicted = 0
            i = 0
            while i < len(self._subscribers):
                sub = self._subscribers[i]
                try:
                    await sub.send(sample)
                except SubscriberSendError as exc:
                    logger.warning("Subscriber failed, err: %s", exc)
                    del self._subscribers[i]
                    sub.close()
                    evicted += 1
                    continue
                i += 1
            self._evicted += evicted
            return evicted

    async def aclose(self) -> None:
        """Close and drop every subscriber."""
        async with self._lock:
            self._closed = True
            subs, self._subscribers = self._subscribers, []
        for sub in subs:
            sub.close()

    def snapshot(self) -> list[Subscriber]:
        return list(self._subscribers)

    @property
    def evicted(self) -> int:
        return self._evicted

    def __len__(self) -> int:
        return len(self._subscribers)
