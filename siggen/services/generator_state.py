"""
Process-wide handle on the running signal worker.

Set at app lifespan start; read by API routes.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from siggen.worker.main import SignalWorker

_worker: Optional[SignalWorker] = None


def set_worker(w: Optional[SignalWorker]) -> None:
    global _worker
    _worker = w


def get_worker() -> SignalWorker:
    if _worker is None:
        raise RuntimeError("Generator state not initialized")
    return _worker


def get_stats() -> Dict[str, Any]:
    return get_worker().stats_snapshot()
