"""Edge cache for rendered responses, keyed by a URL-shaped string.

The handler only sees the ``match``/``put`` pair, so any shared store can sit
behind it. ``MemoryEdgeCache`` keeps entries in-process and honors the
freshness lifetime declared by the stored response's ``Cache-Control``.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Protocol

from starlette.responses import Response


class EdgeCache(Protocol):
    async def match(self, key: str) -> Response | None: ...

    async def put(self, key: str, response: Response) -> None: ...


@dataclass(frozen=True)
class _Entry:
    status_code: int
    raw_headers: tuple[tuple[bytes, bytes], ...]
    body: bytes
    expires_at: float


def freshness_lifetime(cache_control: str | None) -> int:
    """Seconds a shared cache may serve the response; 0 means don't store."""
    if not cache_control:
        return 0
    directives = {}
    for part in cache_control.split(","):
        name, _, value = part.strip().partition("=")
        directives[name.strip().lower()] = value.strip().strip('"')
    if "no-store" in directives or "private" in directives:
        return 0
    for name in ("s-maxage", "max-age"):
        if name in directives:
            try:
                return max(int(directives[name]), 0)
            except ValueError:
                return 0
    return 0


class MemoryEdgeCache:
    def __init__(self, clock: Callable[[], float] = time.monotonic, max_entries: int = 1024):
        self._clock = clock
        self.max_entries = max_entries
        self._lock = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    async def match(self, key: str) -> Response | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return None
        resp = Response(content=entry.body, status_code=entry.status_code)
        resp.raw_headers = list(entry.raw_headers)
        return resp

    async def put(self, key: str, response: Response) -> None:
        ttl = freshness_lifetime(response.headers.get("cache-control"))
        if ttl <= 0:
            return
        now = self._clock()
        entry = _Entry(
            status_code=response.status_code,
            raw_headers=tuple(response.raw_headers),
            body=bytes(response.body),
            expires_at=now + ttl,
        )
        with self._lock:
            self._purge(now)
            self._entries.pop(key, None)
            # Keys embed the client's Host, so bound the store; oldest goes first
            while len(self._entries) >= self.max_entries:
                del self._entries[next(iter(self._entries))]
            self._entries[key] = entry

    def _purge(self, now: float):
        expired = [k for k, e in self._entries.items() if e.expires_at <= now]
        for k in expired:
            del self._entries[k]

    def __len__(self):
        return len(self._entries)


_default_cache = MemoryEdgeCache()


def get_cache() -> EdgeCache:
    return _default_cache
