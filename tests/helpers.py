import asyncio


class FakeWriter:
    """Stands in for asyncio.StreamWriter; records bytes and close()."""

    def __init__(self, peer=("127.0.0.1", 50000), fail_on=None, gate=None):
        self.peer = peer
        self.fail_on = fail_on
        self.gate = gate
        self.data = bytearray()
        self.closed = False
        self.drained = 0

    def get_extra_info(self, name, default=None):
        return self.peer if name == "peername" else default

    def write(self, data):
        if self.fail_on == "write":
            raise ConnectionResetError("peer reset")
        self.data.extend(data)

    async def drain(self):
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_on == "drain":
            raise BrokenPipeError("broken pipe")
        self.drained += 1

    def close(self):
        self.closed = True


async def wait_until(predicate, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)
