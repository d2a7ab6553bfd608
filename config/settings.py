from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    API_PORT: int = 8001
    LOG_LEVEL: str = "INFO"
    NEWS_CACHE_CONTROL: str = "public, s-maxage=60, stale-while-revalidate=300"

    # RSS
    RSS_FEED_URLS: str = (
        "https://rss.nytimes.com/services/xml/rss/nyt/HomePage.xml,"
        "https://feeds.bbci.co.uk/news/rss.xml,"
        "https://www.theguardian.com/world/rss,"
        "https://rss.cnn.com/rss/edition.rss,"
        "https://feeds.nbcnews.com/nbcnews/public/news"
    )
    # Some feeds block requests without a User-Agent
    RSS_USER_AGENT: str = "NewsAggregator/1.0"

    # Reddit
    REDDIT_SUBREDDITS: str = "worldnews,news,technology,science,finance,politics"
    REDDIT_SORT: str = "hot"
    REDDIT_LIMIT: int = 25
    REDDIT_BASE_URL: str = "https://www.reddit.com"
    REDDIT_USER_AGENT: str = "NewsFlash/1.0 (news aggregator)"

    # Fetching behaviour
    REQUEST_TIMEOUT_SECONDS: float = 10.0
    MAX_REDIRECTS: int = 5
    SOURCE_CACHE_TTL_SECONDS: float = 300.0
    # Off by default so intercepted/self-signed certificates still work.
    VERIFY_TLS: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
