from __future__ import annotations

import time

from fastapi import APIRouter, HTTPException, Request

router = APIRouter(prefix="/api/sources", tags=["sources"])


@router.get("")
async def source_status(request: Request):
    return [c.status() for c in request.app.state.aggregator.caches]


@router.post("/{name}/refresh")
async def refresh_source(name: str, request: Request):
    cache = request.app.state.aggregator.cache(name)
    if cache is None:
        raise HTTPException(404, f"Unknown source: {name}")

    start = time.monotonic()
    cache.invalidate()
    items = await cache.get()
    return {
        "source": name,
        "items": len(items),
        "duration_seconds": round(time.monotonic() - start, 2),
    }
