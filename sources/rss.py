"""RSS/Atom source using httpx for transport and feedparser for parsing."""

from __future__ import annotations

import asyncio
import calendar
import io
import logging
import time
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlparse

import feedparser
import httpx

from config.settings import settings
from core.models import NewsItem
from core.text import clip_summary, collapse_whitespace, strip_html
from sources.base import BaseSource, ClientFactory, build_client
from sources.exceptions import SourceFetchError

log = logging.getLogger(__name__)

NO_TITLE = "(no title)"


def _default_client() -> httpx.AsyncClient:
    return build_client(settings.RSS_USER_AGENT)


def _hostname(url: Any) -> str:
    if not isinstance(url, str) or not url:
        return ""
    return urlparse(url).hostname or ""


def feed_source_label(feed: Any, feed_url: str) -> str:
    """Feed title, else the feed's site hostname, else the feed URL's host."""
    title = feed.get("title") if feed else None
    if isinstance(title, str) and title.strip():
        return title.strip()
    return _hostname(feed.get("link") if feed else None) or _hostname(feed_url) or feed_url


def _published_at(entry: Any, fetched_at: datetime) -> datetime:
    for key in ("published_parsed", "updated_parsed"):
        val = entry.get(key)
        if isinstance(val, time.struct_time):
            try:
                return datetime.fromtimestamp(calendar.timegm(val), tz=timezone.utc)
            except (OverflowError, ValueError, OSError):
                continue
    return fetched_at


def _as_text(value: Any, content_type: Any) -> str:
    if not isinstance(value, str):
        return ""
    # feedparser has already decoded entities in plain-text fields
    if content_type == "text/plain":
        return collapse_whitespace(value)
    return strip_html(value)


def _entry_summary(entry: Any) -> str:
    detail = entry.get("summary_detail")
    text = _as_text(
        entry.get("summary"),
        detail.get("type") if isinstance(detail, dict) else None,
    )
    if text:
        return text
    content = entry.get("content")
    if isinstance(content, list):
        for part in content:
            if not isinstance(part, dict):
                continue
            text = _as_text(part.get("value"), part.get("type"))
            if text:
                return text
    return ""


def normalise_entry(
    entry: Any, source: str, fetched_at: datetime
) -> NewsItem | None:
    link = entry.get("link")
    if not isinstance(link, str) or not link.strip():
        return None

    title = entry.get("title")
    title = title.strip() if isinstance(title, str) else ""

    return NewsItem.create(
        title=title or NO_TITLE,
        link=link.strip(),
        source=source,
        published_at=_published_at(entry, fetched_at),
        summary=clip_summary(_entry_summary(entry)),
    )


class RssSource(BaseSource):
    name = "rss"

    def __init__(
        self,
        feed_urls: Sequence[str],
        *,
        client_factory: ClientFactory = _default_client,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(logger or log)
        self._feed_urls = list(feed_urls)
        self._client_factory = client_factory

    def targets(self) -> list[str]:
        return list(self._feed_urls)

    async def fetch(self) -> list[NewsItem]:
        try:
            async with self._client_factory() as client:
                results = await asyncio.gather(
                    *(self._fetch_feed(client, url) for url in self._feed_urls)
                )
        except Exception as exc:
            self._log.error("RSS fetch cycle failed: %s", exc)
            return []
        return [item for batch in results for item in batch]

    async def _fetch_feed(
        self, client: httpx.AsyncClient, url: str
    ) -> list[NewsItem]:
        try:
            resp = await client.get(url)
            if resp.status_code != 200:
                raise SourceFetchError(f"HTTP {resp.status_code}")
            # feedparser is synchronous; keep it off the event loop
            items = await asyncio.to_thread(self._parse_feed, resp, url)
        except Exception as exc:
            self._log.warning("RSS feed %s failed: %s", url, exc)
            return []
        self._log.info("Fetched %s: %d items", url, len(items))
        return items

    def _parse_feed(self, resp: httpx.Response, url: str) -> list[NewsItem]:
        headers = {"content-location": str(resp.url)}
        content_type = resp.headers.get("content-type")
        if content_type:
            headers["content-type"] = content_type

        parsed = feedparser.parse(io.BytesIO(resp.content), response_headers=headers)
        entries = parsed.get("entries") or []
        if not entries and parsed.get("bozo"):
            exc = parsed.get("bozo_exception")
            raise SourceFetchError(f"Invalid RSS/Atom feed ({exc})")

        source = feed_source_label(parsed.get("feed"), url)
        fetched_at = datetime.now(timezone.utc)
        items: list[NewsItem] = []
        for entry in entries:
            item = normalise_entry(entry, source, fetched_at)
            if item is not None:
                items.append(item)
        return items
