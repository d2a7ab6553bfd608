from __future__ import annotations

import hashlib

ID_LENGTH = 16


def make_id(link: str) -> str:
    """Deterministic id derived from a URL, shared by every source.

    Used both as the dedup key across sources and as the article route
    parameter, so it must not depend on anything but the link itself.
    """
    return hashlib.sha256(link.encode("utf-8")).hexdigest()[:ID_LENGTH]
