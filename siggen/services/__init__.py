from siggen.services.framing import FrameDecoder, encode_frame
from siggen.services.generator_state import get_stats, get_worker, set_worker
from siggen.services.registry import SubscriberRegistry
from siggen.services.subscriber import Subscriber, SubscriberSendError
from siggen.services.waveforms import SineGenerator, TableGenerator, make_generator

__all__ = [
    "FrameDecoder",
    "SineGenerator",
    "Subscriber",
    "SubscriberRegistry",
    "SubscriberSendError",
    "TableGenerator",
    "encode_frame",
    "get_stats",
    "get_worker",
    "make_generator",
    "set_worker",
]
