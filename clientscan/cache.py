"""Result cache for ClientScan.

A detector classifies one logical subject ("the current client"), so the
default cache is a single slot under a constant key. No expiry: callers
invalidate when the subject changes (navigation, reload, new request).
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from . import metrics
from .models import CacheStats

logger = logging.getLogger('clientscan.cache')

DEFAULT_CACHE_KEY = 'browser_detection'

T = TypeVar('T')


class ResultCache(ABC, Generic[T]):
    """Cache interface: get / set / clear / stats."""

    @abstractmethod
    def get(self, key: str) -> Optional[T]:
        ...

    @abstractmethod
    def set(self, key: str, value: T) -> None:
        ...

    @abstractmethod
    def set_if_empty(self, key: str, value: T) -> T:
        """Compare-and-set: keep an existing entry for ``key``, else store ``value``."""

    @abstractmethod
    def clear(self) -> None:
        ...

    @abstractmethod
    def stats(self) -> CacheStats:
        ...


class SingleSlotCache(ResultCache[T]):
    """Holds at most one entry. Setting a new key replaces the old entry.

    Guarded by a lock; a detector may be shared by threads of an embedding host.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._key: Optional[str] = None
        self._value: Optional[T] = None

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            hit = self._key == key and self._value is not None
            value = self._value if hit else None
        if hit:
            metrics.CACHE_HITS.inc()
            logger.debug('cache_hit key=%s', key)
        else:
            metrics.CACHE_MISSES.inc()
        return value

    def set(self, key: str, value: T) -> None:
        with self._lock:
            self._key = key
            self._value = value
        logger.debug('cache_set key=%s', key)

    def set_if_empty(self, key: str, value: T) -> T:
        """Store ``value`` unless the slot already holds ``key``; return the stored value."""
        with self._lock:
            if self._key == key and self._value is not None:
                return self._value
            self._key = key
            self._value = value
            return value

    def clear(self) -> None:
        with self._lock:
            self._key = None
            self._value = None
        logger.debug('cache_cleared')

    def stats(self) -> CacheStats:
        with self._lock:
            occupied = self._value is not None
            key = self._key if occupied else None
        return CacheStats(occupied=occupied, key=key, size=1 if occupied else 0,
                          keys=(key,) if key is not None else ())


class NullCache(ResultCache[T]):
    """Never stores anything; every classify() runs a fresh pass."""

    def get(self, key: str) -> Optional[T]:
        return None

    def set(self, key: str, value: T) -> None:
        return None

    def set_if_empty(self, key: str, value: T) -> T:
        return value

    def clear(self) -> None:
        return None

    def stats(self) -> CacheStats:
        return CacheStats(occupied=False, key=None)
