from __future__ import annotations

import logging
import ssl
from abc import ABC, abstractmethod
from collections.abc import Callable

import certifi
import httpx

from config.settings import settings
from core.models import NewsItem

ClientFactory = Callable[[], httpx.AsyncClient]


class BaseSource(ABC):
    """One upstream provider type.

    ``fetch`` must never raise: per-request failures are logged and the
    source returns whatever it managed to normalise, possibly nothing.
    """

    name: str

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger or logging.getLogger(type(self).__module__)

    def targets(self) -> list[str]:
        """Feeds or communities this source reads, in fetch order."""
        return []

    @abstractmethod
    async def fetch(self) -> list[NewsItem]:
        """Execute a full fetch cycle."""
        ...


def _verify_setting() -> ssl.SSLContext | bool:
    if not settings.VERIFY_TLS:
        return False
    return ssl.create_default_context(cafile=certifi.where())


def build_client(
    user_agent: str,
    *,
    follow_redirects: bool = True,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"User-Agent": user_agent},
        follow_redirects=follow_redirects,
        max_redirects=settings.MAX_REDIRECTS,
        timeout=settings.REQUEST_TIMEOUT_SECONDS,
        verify=_verify_setting(),
    )
