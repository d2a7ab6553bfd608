"""Shared fixtures: fake sources, a controllable clock and mock HTTP clients."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from core.models import NewsItem
from sources.base import BaseSource

BASE_TIME = datetime(2025, 1, 6, 12, 0, tzinfo=timezone.utc)


class StaticSource(BaseSource):
    """Returns a fixed batch and counts how often it was asked."""

    def __init__(self, name: str, items: list[NewsItem]) -> None:
        super().__init__()
        self.name = name
        self.items = items
        self.calls = 0

    async def fetch(self) -> list[NewsItem]:
        self.calls += 1
        return list(self.items)


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def make_item():
    def _make(
        link: str,
        *,
        source: str = "Example Wire",
        minutes_ago: int = 0,
        title: str = "A headline",
        summary: str = "",
    ) -> NewsItem:
        return NewsItem.create(
            title=title,
            link=link,
            source=source,
            published_at=BASE_TIME - timedelta(minutes=minutes_ago),
            summary=summary,
        )

    return _make


@pytest.fixture()
def static_source():
    return StaticSource


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def mock_client():
    """Build a client factory whose requests are answered by ``handler``."""

    def _factory(handler):
        def _client() -> httpx.AsyncClient:
            return httpx.AsyncClient(transport=httpx.MockTransport(handler))

        return _client

    return _factory
