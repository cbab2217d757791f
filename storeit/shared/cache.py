import logging
import threading
from typing import Any, Dict, Hashable

log = logging.getLogger(__name__)

# sentinel so a cached None is still a hit
MISSING = object()


def _norm(path: str) -> str:
    path = "/" + (path or "").strip("/")
    return path


class PageCache:
    """
    Rendered page payloads keyed by route path, then by an arbitrary key
    (user, query string...). Mutating actions drop a whole path at once.
    """

    def __init__(self):
        self._pages: Dict[str, Dict[Hashable, Any]] = {}
        self._lock = threading.Lock()

    def get(self, path: str, key: Hashable):
        with self._lock:
            return self._pages.get(_norm(path), {}).get(key, MISSING)

    def set(self, path: str, key: Hashable, value: Any) -> None:
        with self._lock:
            self._pages.setdefault(_norm(path), {})[key] = value

    def revalidate(self, path: str) -> None:
        with self._lock:
            dropped = self._pages.pop(_norm(path), None)
        log.debug("revalidated %s (%d entries)", _norm(path), len(dropped or {}))

    def is_cached(self, path: str) -> bool:
        with self._lock:
            return bool(self._pages.get(_norm(path)))

    def clear(self) -> None:
        with self._lock:
            self._pages.clear()


page_cache = PageCache()


def revalidate_path(path: str) -> None:
    page_cache.revalidate(path)
