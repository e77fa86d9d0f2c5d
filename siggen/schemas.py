"""Wire and API schemas."""
from pydantic import BaseModel, ConfigDict


class Sample(BaseModel):
    """One timestamped value, produced once per tick and never mutated."""
    model_config = ConfigDict(frozen=True)

    timestamp: int
    value: float


class StatsOut(BaseModel):
    """Generator worker stats."""
    status: str = "unknown"
    waveform: str = ""
    amplitude: float = 0.0
    period_sec: float = 0.0
    port: int = 0
    ticks: int = 0
    subscribers: int = 0
    connections: int = 0
    evicted: int = 0
    last_value: float | None = None
    last_timestamp: int | None = None
