# app/navigation.py
"""
Route cache invalidation and post-write redirects.

Actions only see the Navigator protocol, so tests can record calls
instead of touching the HTTP layer.
"""

import logging
import threading
from collections import OrderedDict
from typing import Any, Dict, Optional, Protocol, Tuple

from fastapi import Depends
from fastapi.responses import RedirectResponse

from app.config import get_settings

logger = logging.getLogger(__name__)

INVOICES_PATH = "/dashboard/invoices"


class Navigator(Protocol):
    def invalidate(self, path: str) -> None:
        ...

    def redirect(self, path: str) -> Any:
        ...


class RouteCache:
    """
    In-process cache of rendered route payloads keyed by (path, query).

    Holds at most max_size entries, evicting the oldest first. Each path has a
    generation that invalidate() bumps; a set() carrying the generation read
    before the payload was built is dropped if a write happened in between.
    """

    def __init__(self, max_size: int = 256) -> None:
        self.max_size = max_size
        self._entries: "OrderedDict[Tuple[str, str], Any]" = OrderedDict()
        self._generations: Dict[str, int] = {}
        self._lock = threading.Lock()

    def get(self, path: str, query: str = "") -> Optional[Any]:
        with self._lock:
            return self._entries.get((path, query))

    def generation(self, path: str) -> int:
        with self._lock:
            return self._generations.get(path, 0)

    def set(self, path: str, query: str, payload: Any, generation: Optional[int] = None) -> bool:
        with self._lock:
            if generation is not None and generation != self._generations.get(path, 0):
                logger.debug("Dropped stale payload for %s", path)
                return False

            key = (path, query)
            self._entries[key] = payload
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                oldest_key, _ = self._entries.popitem(last=False)
                logger.debug("Evicted oldest cache entry %s", oldest_key)
            return True

    def invalidate(self, path: str) -> int:
        with self._lock:
            self._generations[path] = self._generations.get(path, 0) + 1
            stale = [key for key in self._entries if key[0] == path]
            for key in stale:
                del self._entries[key]
        logger.debug("Invalidated %s cached entries for %s", len(stale), path)
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)



class DashboardNavigator:
    def __init__(self, cache: RouteCache) -> None:
        self.cache = cache

    def invalidate(self, path: str) -> None:
        self.cache.invalidate(path)

    def redirect(self, path: str) -> RedirectResponse:
        # 303 so the browser follows a form POST with a GET
        return RedirectResponse(url=path, status_code=303)


_route_cache = RouteCache(max_size=get_settings().ROUTE_CACHE_MAX_SIZE)


def get_route_cache() -> RouteCache:
    return _route_cache


def get_navigator(cache: RouteCache = Depends(get_route_cache)) -> Navigator:
    return DashboardNavigator(cache)
