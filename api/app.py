from __future__ import annotations

import logging

from fastapi import FastAPI

from api.routers import news, sources
from sources.aggregator import NewsAggregator, build_aggregator

log = logging.getLogger(__name__)


def create_app(aggregator: NewsAggregator | None = None) -> FastAPI:
    app = FastAPI(title="NewsFlash", version="0.1.0")
    app.state.aggregator = aggregator or build_aggregator()
    log.info(
        "Serving sources: %s",
        ", ".join(c.name for c in app.state.aggregator.caches),
    )

    # Register API routers
    app.include_router(news.router)
    app.include_router(sources.router)

    # Health check
    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
