from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from core.models import NewsItem
from sources.base import BaseSource

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    data: tuple[NewsItem, ...]
    expires_at: float


class SourceCache:
    """Time-bounded memo around a single source.

    Not locked: two requests landing on an expired slot may both fetch,
    and the last one to finish wins the slot.
    """

    def __init__(
        self,
        source: BaseSource,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = source
        self._ttl = ttl_seconds
        self._clock = clock
        self._entry: CacheEntry | None = None

    @property
    def name(self) -> str:
        return self._source.name

    async def get(self) -> Sequence[NewsItem]:
        entry = self._entry
        if entry is not None and self._clock() < entry.expires_at:
            return entry.data

        items = await self._source.fetch()
        self._entry = CacheEntry(
            data=tuple(items), expires_at=self._clock() + self._ttl
        )
        log.debug("Cached %d items for %s", len(items), self.name)
        return self._entry.data

    def invalidate(self) -> None:
        self._entry = None

    def status(self) -> dict:
        entry = self._entry
        if entry is None:
            return {
                "source": self.name,
                "targets": self._source.targets(),
                "cached": False,
                "items": 0,
                "expires_in_seconds": None,
            }
        remaining = entry.expires_at - self._clock()
        return {
            "source": self.name,
            "targets": self._source.targets(),
            "cached": remaining > 0,
            "items": len(entry.data),
            "expires_in_seconds": round(max(remaining, 0.0), 1),
        }
