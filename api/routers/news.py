from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from config.settings import settings

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/news", tags=["news"])

_FAILURE = {"ok": False, "error": "Failed to fetch news feeds"}


@router.get("")
async def list_news(request: Request):
    try:
        items = await request.app.state.aggregator.fetch_aggregated_news()
    except Exception:
        log.exception("Unexpected error while aggregating news")
        return JSONResponse(_FAILURE, status_code=500)

    return JSONResponse(
        {"ok": True, "count": len(items), "items": [it.to_dict() for it in items]},
        headers={"Cache-Control": settings.NEWS_CACHE_CONTROL},
    )


@router.get("/{item_id}")
async def get_article(item_id: str, request: Request):
    try:
        item = await request.app.state.aggregator.find(item_id)
    except Exception:
        log.exception("Unexpected error while resolving article %s", item_id)
        return JSONResponse(_FAILURE, status_code=500)

    if item is None:
        return JSONResponse({"ok": False, "error": "Article not found"}, status_code=404)
    return {"ok": True, "item": item.to_dict()}
