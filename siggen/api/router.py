"""
Status API.

- GET /stats — worker stats: waveform, amplitude, ticks, subscriber count, evictions
"""
from fastapi import APIRouter, HTTPException

from siggen.schemas import StatsOut
from siggen.services.generator_state import get_stats

router = APIRouter()


@router.get("/stats", response_model=StatsOut)
async def stats():
    """Live worker stats (in-memory)."""
    try:
        data = get_stats()
    except RuntimeError:
        raise HTTPException(status_code=503, detail="Generator not running")
    return StatsOut(**data)
