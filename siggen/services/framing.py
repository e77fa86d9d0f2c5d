"""
Stream framing: each Sample is its compact JSON object followed by one NUL byte.

    {"timestamp":1700000000,"value":12.5}\\x00

There is no length prefix; readers split on the NUL terminator.
"""
from siggen.schemas import Sample

DELIMITER = b"\x00"


def encode_frame(sample: Sample) -> bytes:
    """JSON payload of *sample* with the trailing delimiter."""
    return sample.model_dump_json().encode("utf-8") + DELIMITER


class FrameDecoder:
    """Incremental decoder: feed() raw bytes, get back the complete samples."""

    def __init__(self) -> None:
        self._buf = bytearray()

    def feed(self, data: bytes) -> list[Sample]:
        self._buf.extend(data)
        samples: list[Sample] = []
        while True:
            end = self._buf.find(DELIMITER)
            if end < 0:
                return samples
            frame = bytes(self._buf[:end])
            del self._buf[: end + 1]
            if frame.strip():
                samples.append(Sample.model_validate_json(frame))

    @property
    def pending(self) -> int:
        """Bytes buffered after the last complete frame."""
        return len(self._buf)
