"""Reddit source: listing normalisation, redirects and failure isolation."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

import httpx

from sources.reddit import RedditSource, normalise_post

FETCHED_AT = datetime(2025, 1, 6, 12, 0, tzinfo=timezone.utc)

LISTING = {
    "kind": "Listing",
    "data": {
        "children": [
            {
                "kind": "t3",
                "data": {
                    "title": "Weekly discussion thread",
                    "stickied": True,
                    "is_self": True,
                    "permalink": "/r/news/comments/pin/weekly/",
                    "created_utc": 1736150400,
                    "subreddit": "news",
                },
            },
            {
                "kind": "t3",
                "data": {
                    "title": "Bridge reopens after repairs",
                    "url": "https://example.com/story",
                    "permalink": "/r/news/comments/a1/bridge_reopens/",
                    "is_self": False,
                    "stickied": False,
                    "selftext": "",
                    "created_utc": 1736150400.0,
                    "subreddit": "news",
                },
            },
            {
                "kind": "t3",
                "data": {
                    "title": "What does the new law change?",
                    "url": "https://www.reddit.com/r/news/comments/b2/new_law/",
                    "permalink": "/r/news/comments/b2/new_law/",
                    "is_self": True,
                    "stickied": False,
                    "selftext": "Line one\n\nLine   two\n",
                    "created_utc": 1736146800,
                    "subreddit": "news",
                },
            },
            {"kind": "t3", "data": {"title": "   ", "url": "https://example.com/blank"}},
            {"kind": "t3", "data": {"title": "Nowhere to go", "is_self": False}},
            {"kind": "t1"},
            "garbage",
        ]
    },
}


def test_normalises_listing(mock_client) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=LISTING)

    source = RedditSource(["news"], client_factory=mock_client(handler))
    items = asyncio.run(source.fetch())

    assert [it.title for it in items] == [
        "Bridge reopens after repairs",
        "What does the new law change?",
    ]
    link_post, self_post = items
    assert link_post.link == "https://example.com/story"
    assert link_post.source == "r/news"
    assert link_post.summary == ""
    assert link_post.published_at == datetime(2025, 1, 6, 8, 0, tzinfo=timezone.utc)

    assert self_post.link == "https://www.reddit.com/r/news/comments/b2/new_law/"
    assert self_post.summary == "Line one Line two"
    assert self_post.published_at == datetime(2025, 1, 6, 7, 0, tzinfo=timezone.utc)

    (request,) = seen
    assert request.url.path == "/r/news/hot.json"
    assert request.url.params["limit"] == "25"
    assert request.url.params["raw_json"] == "1"


def test_follows_redirect_manually(mock_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "www.reddit.com":
            return httpx.Response(
                301, headers={"Location": "https://old.reddit.com/r/news/hot.json?limit=25&raw_json=1"}
            )
        return httpx.Response(200, json=LISTING)

    source = RedditSource(["news"], client_factory=mock_client(handler))
    items = asyncio.run(source.fetch())
    assert len(items) == 2


def test_redirect_loop_is_bounded(mock_client, caplog) -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(302, headers={"Location": "/r/news/hot.json?again=1"})

    source = RedditSource(["news"], max_redirects=3, client_factory=mock_client(handler))
    with caplog.at_level(logging.WARNING):
        assert asyncio.run(source.fetch()) == []

    assert len(calls) == 4
    assert "r/news failed" in caplog.text
    assert "redirects" in caplog.text


def test_one_failing_subreddit_does_not_break_others(mock_client, caplog) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.startswith("/r/broken/"):
            return httpx.Response(429, text="slow down")
        return httpx.Response(200, json=LISTING)

    source = RedditSource(["broken", "news"], client_factory=mock_client(handler))
    with caplog.at_level(logging.WARNING):
        items = asyncio.run(source.fetch())

    assert len(items) == 2
    assert all(it.source == "r/news" for it in items)
    assert "r/broken failed: HTTP 429" in caplog.text


def test_malformed_listing_yields_empty(mock_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.startswith("/r/text/"):
            return httpx.Response(200, text="<html>not json</html>")
        return httpx.Response(200, json={"data": {"children": "nope"}})

    source = RedditSource(["text", "shape"], client_factory=mock_client(handler))
    assert asyncio.run(source.fetch()) == []


def test_normalise_post_link_fallbacks() -> None:
    self_without_permalink = normalise_post(
        {"title": "Self", "is_self": True, "url": "https://www.reddit.com/r/x/comments/1/self/"},
        "x",
        FETCHED_AT,
    )
    assert self_without_permalink.link == "https://www.reddit.com/r/x/comments/1/self/"

    link_without_url = normalise_post(
        {"title": "Link", "is_self": False, "permalink": "/r/x/comments/2/link/"},
        "x",
        FETCHED_AT,
    )
    assert link_without_url.link == "https://www.reddit.com/r/x/comments/2/link/"


def test_normalise_post_tolerates_missing_fields() -> None:
    item = normalise_post(
        {"title": "Bare", "url": "https://example.com/bare", "created_utc": "yesterday"},
        "worldnews",
        FETCHED_AT,
    )
    assert item.source == "r/worldnews"
    assert item.published_at == FETCHED_AT
    assert item.summary == ""


def test_normalise_post_clips_selftext() -> None:
    item = normalise_post(
        {
            "title": "Long read",
            "is_self": True,
            "permalink": "/r/x/comments/3/long/",
            "selftext": "word " * 300,
        },
        "x",
        FETCHED_AT,
    )
    assert len(item.summary) == 500
    assert item.summary.endswith("...")
