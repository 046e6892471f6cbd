import threading
import time
from typing import Any, Callable, Dict, Optional, Set, Tuple

from spacetraveling.settings import settings


class PageCache:
    """
    Stale-while-revalidate store for rendered page models.
    Entries older than ttl_seconds are still served but reported as stale.
    """

    def __init__(
        self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic
    ):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._refreshing: Set[str] = set()
        self._lock = threading.Lock()

    def get(self, key: str) -> Tuple[Optional[Any], bool]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None, False
        stored_at, value = entry
        return value, self.clock() - stored_at >= self.ttl_seconds

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = (self.clock(), value)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def begin_refresh(self, key: str) -> bool:
        """Claim the regeneration of key; False if one is already running."""
        with self._lock:
            if key in self._refreshing:
                return False
            self._refreshing.add(key)
            return True

    def end_refresh(self, key: str) -> None:
        with self._lock:
            self._refreshing.discard(key)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._refreshing.clear()


page_cache = PageCache(settings.REVALIDATE_SECONDS)
