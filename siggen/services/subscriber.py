"""
One stream subscriber: an accepted connection plus its outgoing framing.

- send() writes one NUL-terminated JSON record and drains the writer so the
  bytes go out now. Any failure on the way raises SubscriberSendError; there
  is no retry and no partial-write recovery.
- close() releases the connection. Calling it again is a no-op.
"""
import asyncio
from typing import Any

from siggen.schemas import Sample
from siggen.services.framing import encode_frame


class SubscriberSendError(Exception):
    """Raised when a sample could not be serialized, written or flushed."""


class Subscriber:
    def __init__(self, writer: asyncio.StreamWriter):
        self._writer = writer
        self._closed = False
        self.peer: Any = writer.get_extra_info("peername")

    async def send(self, sample: Sample) -> None:
        if self._closed:
            raise SubscriberSendError(f"subscriber {self.peer} is closed")
        try:
            self._writer.write(encode_frame(sample))
            await self._writer.drain()
        except Exception as exc:
            raise SubscriberSendError(f"send to {self.peer} failed: {exc!r}") from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._writer.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def __repr__(self) -> str:
        return f"Subscriber(peer={self.peer!r}, closed={self._closed})"
