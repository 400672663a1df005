"""Detector configuration.

Everything the classification pass depends on, frozen and passed into the
detector constructor. The detector itself never reads the environment; the
Flask factory in ``clientscan/__init__.py`` is the only place env vars are
consulted.
"""

import time
from dataclasses import dataclass, field, replace
from typing import Callable, Tuple

from .cache import DEFAULT_CACHE_KEY
from .device import MOBILE_KEYWORDS, MOBILE_MAX_WIDTH, TABLET_KEYWORDS, TABLET_MAX_WIDTH
from .exceptions import ConfigurationError
from .extractors import DEFAULT_EXTRACTORS, Extractor
from .labels import ExtractorId
from .patterns import BROWSER_PATTERNS, BrowserPatternRule


@dataclass(frozen=True)
class DetectorConfig:
    patterns: Tuple[BrowserPatternRule, ...] = BROWSER_PATTERNS
    extractors: Tuple[Tuple[ExtractorId, Extractor], ...] = DEFAULT_EXTRACTORS
    cache_key: str = DEFAULT_CACHE_KEY
    mobile_keywords: Tuple[str, ...] = MOBILE_KEYWORDS
    tablet_keywords: Tuple[str, ...] = TABLET_KEYWORDS
    mobile_max_width: int = MOBILE_MAX_WIDTH
    tablet_max_width: int = TABLET_MAX_WIDTH
    clock: Callable[[], float] = field(default=time.time, compare=False)

    def __post_init__(self):
        if not self.cache_key:
            raise ConfigurationError('cache_key', 'must be a non-empty string')
        if self.mobile_max_width >= self.tablet_max_width:
            raise ConfigurationError('mobile_max_width', 'must be below tablet_max_width')
        ids = [source for source, _ in self.extractors]
        if len(set(ids)) != len(ids):
            raise ConfigurationError('extractors', 'duplicate extractor id')

    def without_extractor(self, source: ExtractorId) -> 'DetectorConfig':
        """Copy of this config with one extractor removed."""
        kept = tuple((s, fn) for s, fn in self.extractors if s != source)
        return replace(self, extractors=kept)


DEFAULT_CONFIG = DetectorConfig()
