"""Throttled logging for extractor soft-failures.

A host probe that throws (a detached document, a locked-down style object)
throws on every classification of that client. Each failure is still turned
into an ``ExtractorError`` outcome, but only the first few per site reach
the log; after that one line per cooldown window carries the running count.

Counters are process-wide and exposed through ``/admin/suppressed``.
"""
import logging
import threading
import time
from typing import Dict, Tuple

# (logger name, failure site, level)
_Site = Tuple[str, str, int]


class _SiteCounter:
    __slots__ = ('count', 'last_emit', 'last_error')

    def __init__(self):
        self.count = 0
        self.last_emit = 0.0
        self.last_error = ''


_lock = threading.Lock()
_sites: Dict[_Site, _SiteCounter] = {}


def log_suppressed(
    logger: logging.Logger,
    exc: BaseException,
    context: str,
    *,
    level: int = logging.DEBUG,
    sample: int = 5,
    cooldown: float = 120.0,
) -> int:
    """Log ``exc`` for failure site ``context`` unless the site is being throttled.

    The first ``sample`` failures are always written; later ones only when
    ``cooldown`` seconds have passed since the last write. Returns how many
    times the site has failed so far, written or not.
    """
    site: _Site = (logger.name, context, level)
    now = time.time()
    with _lock:
        counter = _sites.get(site)
        if counter is None:
            counter = _sites[site] = _SiteCounter()
        counter.count += 1
        counter.last_error = f'{type(exc).__name__}: {exc}'
        seen = counter.count
        emit = seen <= sample or now - counter.last_emit >= cooldown
        if emit:
            counter.last_emit = now
    if emit:
        logger.log(level, '%s err=%s (suppressed=%d)', context, exc, seen - 1,
                   exc_info=(type(exc), exc, exc.__traceback__))
    return seen


def get_suppressed_snapshot() -> Dict[str, Dict[str, object]]:
    """Copy of the per-site counters keyed ``logger:context:level``."""
    with _lock:
        return {
            f'{name}:{context}:{level}': {
                'count': c.count,
                'last_emit': c.last_emit,
                'last_error': c.last_error,
            }
            for (name, context, level), c in _sites.items()
        }


def reset_suppressed_state() -> None:
    with _lock:
        _sites.clear()
