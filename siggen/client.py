"""
Minimal stream consumer.

    siggen-tail --host 127.0.0.1 --port 3000

Prints one line per received sample until the server closes the connection.
"""
import argparse
import asyncio
import logging
import sys
from typing import AsyncIterator

from siggen.core.config import settings
from siggen.core.log import setup_logging
from siggen.schemas import Sample
from siggen.services.framing import FrameDecoder

logger = logging.getLogger("siggen.client")

READ_CHUNK = 4096


async def read_samples(host: str, port: int) -> AsyncIterator[Sample]:
    """Connect to a generator and yield samples as their frames complete."""
    reader, writer = await asyncio.open_connection(host, port)
    decoder = FrameDecoder()
    try:
        while True:
            data = await reader.read(READ_CHUNK)
            if not data:
                if decoder.pending:
                    logger.warning("Connection closed mid-frame (%d bytes)", decoder.pending)
                return
            for sample in decoder.feed(data):
                yield sample
    finally:
        writer.close()


async def _tail(host: str, port: int, count: int) -> None:
    n = 0
    async for sample in read_samples(host, port):
        print(f"{sample.timestamp} {sample.value:.6f}", flush=True)
        n += 1
        if count and n >= count:
            return


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Print samples from a running generator.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=settings.GEN_PORT)
    parser.add_argument("-n", "--count", type=int, default=0, help="stop after N samples")
    args = parser.parse_args(argv)
    setup_logging("WARNING")
    try:
        asyncio.run(_tail(args.host, args.port, args.count))
    except KeyboardInterrupt:
        pass
    except OSError as exc:
        logger.error("Connection to %s:%d failed: %s", args.host, args.port, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
