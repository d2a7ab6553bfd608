from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from core.identity import make_id


def _iso_utc(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a trailing Z."""
    stamp = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


@dataclass(frozen=True)
class NewsItem:
    """A single article or post normalised from any source."""

    id: str  # make_id(link)
    title: str
    link: str
    source: str  # feed title / hostname, or "r/<subreddit>"
    published_at: datetime  # timezone-aware UTC
    summary: str = ""

    @classmethod
    def create(
        cls,
        *,
        title: str,
        link: str,
        source: str,
        published_at: datetime,
        summary: str = "",
    ) -> NewsItem:
        return cls(
            id=make_id(link),
            title=title,
            link=link,
            source=source,
            published_at=published_at,
            summary=summary,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "link": self.link,
            "source": self.source,
            "publishedAt": _iso_utc(self.published_at),
            "summary": self.summary,
        }
