import asyncio

from siggen.client import read_samples
from siggen.services.waveforms import TRIANGLE, TableGenerator
from siggen.worker.main import SignalWorker
from tests.helpers import wait_until


async def test_read_samples_yields_broadcast_values(local_settings):
    worker = SignalWorker(TableGenerator(TRIANGLE), amplitude=2.0)
    await worker.start()
    try:
        stream = read_samples("127.0.0.1", worker.port)
        pending = asyncio.ensure_future(stream.__anext__())
        await wait_until(lambda: len(worker.registry) == 1)

        await worker.tick()
        first = await asyncio.wait_for(pending, 2.0)
        await worker.tick()
        second = await asyncio.wait_for(stream.__anext__(), 2.0)

        assert [first.value, second.value] == [-2.0, -1.5]
        await stream.aclose()
    finally:
        await worker.stop()
