"""
Signal worker.

- Listens for TCP subscribers; each accepted connection is registered and is
  from then on only written to by the broadcast pass (no per-connection task).
- Ticks every GEN_PERIOD_SEC: next raw value -> x amplitude -> Sample stamped
  with wall-clock epoch seconds -> broadcast to the registry.
- Bind or accept-loop failure is fatal: main() exits with status 1.
"""
import asyncio
import logging
import math
import sys
import time
from typing import Any, Callable, Optional

from siggen.core.config import settings
from siggen.core.log import setup_logging
from siggen.schemas import Sample
from siggen.services.registry import SubscriberRegistry
from siggen.services.subscriber import Subscriber
from siggen.services.waveforms import Generator, make_generator

logger = logging.getLogger("siggen.worker")

# Message asyncio uses when accept() fails with EMFILE/ENFILE/ENOBUFS/ENOMEM.
ACCEPT_RESOURCE_MESSAGE = "socket.accept() out of system resource"


def is_accept_error(context: dict[str, Any]) -> bool:
    """True when an event-loop error context comes from a listener's accept()."""
    if context.get("message", "").startswith(ACCEPT_RESOURCE_MESSAGE):
        return True
    callback = getattr(context.get("handle"), "_callback", None)
    return getattr(callback, "__name__", "") == "_accept_connection"


class SignalWorker:
    def __init__(
        self,
        generator: Optional[Generator] = None,
        *,
        waveform: Optional[str] = None,
        amplitude: Optional[float] = None,
        period_sec: Optional[float] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        registry: Optional[SubscriberRegistry] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.waveform = waveform or settings.GEN_WAVEFORM
        self._generator = generator or make_generator(
            self.waveform, settings.GEN_SINE_STEP
        )
        self.amplitude = settings.GEN_AMPLITUDE if amplitude is None else amplitude
        self.period_sec = settings.GEN_PERIOD_SEC if period_sec is None else period_sec
        self._host = settings.listen_host() if host is None else (host or None)
        self.port = settings.GEN_PORT if port is None else port
        self.registry = registry if registry is not None else SubscriberRegistry()
        self._clock = clock
        self._running = False
        self._server: Optional[asyncio.AbstractServer] = None
        self._fatal: Optional[asyncio.Future[None]] = None
        self._guarded_loop: Optional[asyncio.AbstractEventLoop] = None
        self._previous_handler: Any = None
        self._tasks: set[asyncio.Task[Any]] = set()
        self.stats: dict[str, Any] = {
            "status": "stopped",
            "waveform": self.waveform,
            "amplitude": self.amplitude,
            "period_sec": self.period_sec,
            "port": self.port,
            "ticks": 0,
            "connections": 0,
            "evicted": 0,
            "last_value": None,
            "last_timestamp": None,
        }

    def _spawn(self, coro: Any, name: str) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        if task.cancelled() or task.exception() is None:
            return
        self.stats["status"] = f"failed ({task.exception()})"
        logger.critical("%s crashed: %s", task.get_name(), task.exception())

    async def start(self) -> None:
        """Bind the listener and start the ticker. OSError on bind failure."""
        logger.info("Amplitude: %f", self.amplitude)
        logger.info("Waveform: %s", self.waveform)
        self._server = await asyncio.start_server(
            self._on_connect, host=self._host, port=self.port
        )
        sock = self._server.sockets[0].getsockname()
        self.port = sock[1]
        self.stats["port"] = self.port
        logger.info("Listen on %s:%d", sock[0], sock[1])

        self._running = True
        self._fatal = asyncio.get_running_loop().create_future()
        self.stats["status"] = "running"
        self._spawn(self._tick_loop(), "siggen-ticker")

    def accept_failed(self, exc: BaseException) -> None:
        """Mark the accept loop dead; wait() raises *exc*."""
        self.stats["status"] = f"failed ({exc})"
        if self._fatal is not None and not self._fatal.done():
            self._fatal.set_exception(exc)

    def install_accept_guard(self) -> None:
        """Route accept() errors reported by the event loop into accept_failed()."""
        loop = asyncio.get_running_loop()
        previous = loop.get_exception_handler()

        def handler(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
            if is_accept_error(context):
                exc = context.get("exception") or OSError(context.get("message", ""))
                logger.critical("Accept failed: %s", exc)
                self.accept_failed(exc)
            if previous is not None:
                previous(loop, context)
            else:
                loop.default_exception_handler(context)

        loop.set_exception_handler(handler)
        self._guarded_loop = loop
        self._previous_handler = previous

    async def wait(self) -> None:
        """Block until the ticker ends or the listener fails; re-raise the cause."""
        waiters: list[asyncio.Future[Any]] = list(self._tasks)
        if self._fatal is not None:
            waiters.append(self._fatal)
        if not waiters:
            return
        done, _ = await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        for fut in done:
            if not fut.cancelled() and fut.exception() is not None:
                raise fut.exception()

    async def stop(self) -> None:
        self._running = False
        if self._server is not None:
            self._server.close()
        for t in list(self._tasks):
            t.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        # Listener shutdown waits on open connections, so drop subscribers first.
        await self.registry.aclose()
        if self._server is not None:
            try:
                await asyncio.wait_for(self._server.wait_closed(), timeout=5.0)
            except asyncio.TimeoutError:
                logger.warning("Listener did not close within 5s")
            self._server = None
        if self._fatal is not None and not self._fatal.done():
            self._fatal.cancel()
        if self._guarded_loop is not None:
            self._guarded_loop.set_exception_handler(self._previous_handler)
            self._guarded_loop = None
        self.stats["status"] = "stopped"
        logger.info("Signal worker stopped")

    async def _on_connect(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        logger.info("Connection from %s", writer.get_extra_info("peername"))
        self.stats["connections"] += 1
        await self.registry.add(Subscriber(writer))

    async def tick(self) -> Sample:
        """One tick: generate, scale, stamp, broadcast."""
        value = self._generator.next() * self.amplitude
        logger.info("Emitting value: %f", value)
        sample = Sample(timestamp=int(self._clock()), value=value)
        evicted = await self.registry.broadcast(sample)
        self.stats["ticks"] += 1
        self.stats["evicted"] += evicted
        self.stats["last_value"] = sample.value
        self.stats["last_timestamp"] = sample.timestamp
        return sample

    async def _tick_loop(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self.period_sec
        while self._running:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            await self.tick()
            next_tick += self.period_sec
            behind = loop.time() - next_tick
            if behind > 0:
                # No catch-up: resume at the next boundary still ahead of us.
                skipped = math.ceil(behind / self.period_sec)
                logger.warning("Tick overran, skipping %d boundary(ies)", skipped)
                next_tick += skipped * self.period_sec

    def stats_snapshot(self) -> dict[str, Any]:
        data = dict(self.stats)
        data["subscribers"] = len(self.registry)
        return data


async def run_worker() -> int:
    setup_logging()
    worker = SignalWorker()
    try:
        await worker.start()
    except OSError as exc:
        logger.critical("Listen failed: %s", exc)
        return 1
    worker.install_accept_guard()
    try:
        await worker.wait()
    except asyncio.CancelledError:
        pass
    except Exception as exc:
        logger.critical("Worker failed: %s", exc)
        return 1
    finally:
        await worker.stop()
    return 0


def main() -> None:
    try:
        code = asyncio.run(run_worker())
    except KeyboardInterrupt:
        code = 0
    sys.exit(code)


if __name__ == "__main__":
    main()
