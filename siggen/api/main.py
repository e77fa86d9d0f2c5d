"""
FastAPI application wrapping the signal worker.

- The TCP stream runs in-process, started from the app lifespan.
- A failed stream listener is fatal: the process exits with status 1.
- Health: /health/live, /health/ready
- API: /api/v1/stats
"""
import asyncio
import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import Callable

import uvicorn
from fastapi import FastAPI

from siggen.api.health import router as health_router
from siggen.api.router import router as api_router
from siggen.core.config import settings
from siggen.core.log import setup_logging
from siggen.services.generator_state import set_worker
from siggen.worker.main import SignalWorker

logger = logging.getLogger("siggen.api")


def _exit_process(exc: BaseException) -> None:
    """Default failure hook when no server handle is registered."""
    logging.shutdown()
    os._exit(1)


async def _watch_worker(
    worker: SignalWorker, on_failure: Callable[[BaseException], None]
) -> None:
    try:
        await worker.wait()
    except Exception as exc:
        logger.critical("Signal worker failed: %s", exc)
        on_failure(exc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()

    # Bind failure propagates and aborts startup.
    worker = SignalWorker()
    await worker.start()
    worker.install_accept_guard()
    set_worker(worker)

    on_failure = getattr(app.state, "on_worker_failure", None) or _exit_process
    watcher = asyncio.create_task(
        _watch_worker(worker, on_failure), name="siggen-watch"
    )

    yield

    watcher.cancel()
    try:
        await watcher
    except asyncio.CancelledError:
        pass
    set_worker(None)
    await worker.stop()


app = FastAPI(
    title="Signal generator",
    description="Periodic waveform samples streamed to TCP subscribers",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(api_router, prefix=settings.API_PREFIX)


def main() -> None:
    config = uvicorn.Config(
        app,
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
    server = uvicorn.Server(config)
    failures: list[BaseException] = []

    def stop_server(exc: BaseException) -> None:
        failures.append(exc)
        server.should_exit = True

    app.state.on_worker_failure = stop_server
    server.run()
    if failures or not server.started:
        sys.exit(1)


if __name__ == "__main__":
    main()
