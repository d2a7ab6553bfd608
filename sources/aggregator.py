from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence

from config.settings import settings
from core.models import NewsItem
from sources.cache import SourceCache
from sources.reddit import RedditSource
from sources.rss import RssSource

log = logging.getLogger(__name__)


def deduplicate_by_link(items: Iterable[NewsItem]) -> list[NewsItem]:
    """Keep the first occurrence of every link and preserve order.

    Whichever source is declared first wins a cross-source duplicate.
    """
    seen: set[str] = set()
    out: list[NewsItem] = []
    for it in items:
        if it.link in seen:
            continue
        seen.add(it.link)
        out.append(it)
    return out


def sort_newest_first(items: Iterable[NewsItem]) -> list[NewsItem]:
    # sorted() is stable, so equal timestamps keep merge order:
    # source declaration order first, then each source's fetch order.
    return sorted(items, key=lambda it: it.published_at, reverse=True)


class NewsAggregator:
    """Fans out to every per-source cache and merges the results."""

    def __init__(self, caches: Sequence[SourceCache]) -> None:
        self._caches = list(caches)

    @property
    def caches(self) -> list[SourceCache]:
        return list(self._caches)

    def cache(self, name: str) -> SourceCache | None:
        for c in self._caches:
            if c.name == name:
                return c
        return None

    async def fetch_aggregated_news(self) -> list[NewsItem]:
        batches = await asyncio.gather(*(c.get() for c in self._caches))
        merged = [item for batch in batches for item in batch]
        unique = deduplicate_by_link(merged)
        log.debug("Aggregated %d items (%d before dedup)", len(unique), len(merged))
        return sort_newest_first(unique)

    async def find(self, item_id: str) -> NewsItem | None:
        """Resolve one article by id against the current aggregate."""
        for item in await self.fetch_aggregated_news():
            if item.id == item_id:
                return item
        return None


def _split(value: str) -> list[str]:
    return [s.strip() for s in value.split(",") if s.strip()]


def build_aggregator() -> NewsAggregator:
    ttl = settings.SOURCE_CACHE_TTL_SECONDS
    rss = RssSource(_split(settings.RSS_FEED_URLS))
    reddit = RedditSource(
        _split(settings.REDDIT_SUBREDDITS),
        sort=settings.REDDIT_SORT,
        limit=settings.REDDIT_LIMIT,
        base_url=settings.REDDIT_BASE_URL,
        max_redirects=settings.MAX_REDIRECTS,
    )
    return NewsAggregator([SourceCache(rss, ttl), SourceCache(reddit, ttl)])
