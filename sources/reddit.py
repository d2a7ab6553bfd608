"""Reddit source using httpx (JSON listings)."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

import httpx

from config.settings import settings
from core.models import NewsItem
from core.text import clip_summary, collapse_whitespace
from sources.base import BaseSource, ClientFactory, build_client
from sources.exceptions import SourceFetchError, TooManyRedirects

log = logging.getLogger(__name__)


def _default_client() -> httpx.AsyncClient:
    # Redirects are followed by hand so the hop count stays bounded.
    return build_client(settings.REDDIT_USER_AGENT, follow_redirects=False)


def _created_at(post: dict[str, Any], fetched_at: datetime) -> datetime:
    created = post.get("created_utc")
    if isinstance(created, bool) or not isinstance(created, (int, float)):
        return fetched_at
    try:
        return datetime.fromtimestamp(created, tz=timezone.utc)
    except (OverflowError, ValueError, OSError):
        return fetched_at


def _str_field(post: dict[str, Any], key: str) -> str:
    val = post.get(key)
    return val.strip() if isinstance(val, str) else ""


def normalise_post(
    post: dict[str, Any],
    subreddit: str,
    fetched_at: datetime,
    base_url: str = "https://www.reddit.com",
) -> NewsItem | None:
    if post.get("stickied"):
        return None
    title = _str_field(post, "title")
    if not title:
        return None

    permalink = _str_field(post, "permalink")
    permalink_url = f"{base_url.rstrip('/')}{permalink}" if permalink else ""
    external_url = _str_field(post, "url")
    if post.get("is_self"):
        link = permalink_url or external_url
    else:
        link = external_url or permalink_url
    if not link:
        return None

    summary = ""
    selftext = post.get("selftext")
    if isinstance(selftext, str) and selftext:
        summary = clip_summary(collapse_whitespace(selftext))

    return NewsItem.create(
        title=title,
        link=link,
        source=f"r/{_str_field(post, 'subreddit') or subreddit}",
        published_at=_created_at(post, fetched_at),
        summary=summary,
    )


class RedditSource(BaseSource):
    name = "reddit"

    def __init__(
        self,
        subreddits: Sequence[str],
        *,
        sort: str = "hot",
        limit: int = 25,
        base_url: str = "https://www.reddit.com",
        max_redirects: int = 5,
        client_factory: ClientFactory = _default_client,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(logger or log)
        self._subreddits = list(subreddits)
        self._sort = sort
        self._limit = limit
        self._base_url = base_url.rstrip("/")
        self._max_redirects = max_redirects
        self._client_factory = client_factory

    def targets(self) -> list[str]:
        return [f"r/{sub}" for sub in self._subreddits]

    def listing_url(self, subreddit: str) -> httpx.URL:
        return httpx.URL(
            f"{self._base_url}/r/{subreddit}/{self._sort}.json",
            params={"limit": self._limit, "raw_json": 1},
        )

    async def fetch(self) -> list[NewsItem]:
        try:
            async with self._client_factory() as client:
                results = await asyncio.gather(
                    *(self._fetch_subreddit(client, sub) for sub in self._subreddits)
                )
        except Exception as exc:
            self._log.error("Reddit fetch cycle failed: %s", exc)
            return []
        return [item for batch in results for item in batch]

    async def _fetch_subreddit(
        self, client: httpx.AsyncClient, sub: str
    ) -> list[NewsItem]:
        try:
            listing = await self._get_json(client, self.listing_url(sub))
            items = self._parse_listing(listing, sub)
        except Exception as exc:
            self._log.warning("r/%s failed: %s", sub, exc)
            return []
        self._log.info("r/%s: %d posts fetched", sub, len(items))
        return items

    async def _get_json(self, client: httpx.AsyncClient, url: httpx.URL) -> Any:
        for _ in range(self._max_redirects + 1):
            resp = await client.get(url)
            location = resp.headers.get("location")
            if 300 <= resp.status_code < 400 and location:
                url = resp.url.join(location)
                continue
            if resp.status_code != 200:
                raise SourceFetchError(f"HTTP {resp.status_code}")
            return resp.json()
        raise TooManyRedirects(
            f"more than {self._max_redirects} redirects, last to {url}"
        )

    def _parse_listing(self, listing: Any, sub: str) -> list[NewsItem]:
        data = listing.get("data") if isinstance(listing, dict) else None
        children = data.get("children") if isinstance(data, dict) else None
        if not isinstance(children, list):
            raise SourceFetchError("listing has no children")

        fetched_at = datetime.now(timezone.utc)
        items: list[NewsItem] = []
        for child in children:
            post = child.get("data") if isinstance(child, dict) else None
            if not isinstance(post, dict):
                continue
            item = normalise_post(post, sub, fetched_at, self._base_url)
            if item is not None:
                items.append(item)
        return items
