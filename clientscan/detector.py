"""Client detector: the public classification surface.

Usage:
    detector = ClientDetector(signal)
    result = detector.classify()        # cached after the first call
    detector.invalidate_cache()         # e.g. on navigation
    detector.cache_stats()              # CacheStats(occupied=..., key=...)

Each detector classifies one logical subject, the client described by its
``ClientSignal``. For per-request classification pass ``cache=NullCache()``
or build a new detector per request.
"""

import logging
from typing import Any, Dict, List, Optional

from . import metrics
from .cache import NullCache, ResultCache, SingleSlotCache
from .config import DEFAULT_CONFIG, DetectorConfig
from .device import classify_device
from .extractors import run_extractors
from .fusion import fuse
from .labels import BrowserLabel, DeviceClass
from .models import CacheStats, DetectionResult, EngineInfo, ExtractorOutcome, FusionResult, OSInfo
from .resolver import VersionResolver
from .signals import ClientSignal

logger = logging.getLogger('clientscan.detector')


class ClientDetector:

    def __init__(self, signal: ClientSignal,
                 config: Optional[DetectorConfig] = None,
                 cache: Optional[ResultCache[DetectionResult]] = None):
        self.signal = signal
        self.config = config or DEFAULT_CONFIG
        self.cache: ResultCache[DetectionResult] = cache if cache is not None else SingleSlotCache()
        self.resolver = VersionResolver(self.config.patterns)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def run_extractors(self) -> List[ExtractorOutcome]:
        return run_extractors(self.signal, self.config.extractors)

    def fuse(self) -> FusionResult:
        return fuse(self.run_extractors())

    def classify(self) -> DetectionResult:
        """Return the detection for the current client, computing it on a miss."""
        key = self.config.cache_key
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        with metrics.track_classification() as tracker:
            result = self._build_result()
        metrics.record_classification(result.browser.value, tracker.duration)
        logger.info('classified browser=%s version=%s os=%s platform=%s confidence=%.2f methods=%s failures=%d',
                    result.browser.value, result.browser_version, result.os, result.platform,
                    result.confidence, [m.value for m in result.detection_methods], len(result.failures))
        # a concurrent caller may have filled the slot meanwhile; keep the first
        return self.cache.set_if_empty(key, result)

    def _build_result(self) -> DetectionResult:
        signal = self.signal
        fusion = self.fuse()
        label = fusion.label
        version = self.resolve_version(label)
        engine = self.resolver.engine_info(label, signal.ua, browser_version=version)
        os_info = self.os_info()
        return DetectionResult(
            browser=label,
            browser_version=version,
            engine=engine.engine,
            engine_version=engine.version,
            os=os_info.os,
            os_version=os_info.os_version,
            device_class=self.device_class(),
            confidence=min(1.0, max(0.0, fusion.confidence)),
            detection_methods=fusion.contributing_extractors,
            failures=tuple(f.message for f in fusion.failures),
            user_agent=signal.ua,
            vendor=signal.vendor or '',
            timestamp=self.config.clock(),
        )

    def invalidate_cache(self) -> None:
        self.cache.clear()
        logger.debug('detection cache invalidated key=%s', self.config.cache_key)

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    # ------------------------------------------------------------------
    # Standalone accessors (no caching)
    # ------------------------------------------------------------------

    def device_class(self) -> DeviceClass:
        cfg = self.config
        return classify_device(self.signal, cfg.mobile_keywords, cfg.tablet_keywords,
                               cfg.mobile_max_width, cfg.tablet_max_width)

    def platform(self) -> str:
        return self.device_class().platform

    def resolve_version(self, label: BrowserLabel) -> str:
        return self.resolver.resolve_version(label, self.signal.ua, self.signal.brands)

    def engine_info(self, label: BrowserLabel) -> EngineInfo:
        return self.resolver.engine_info(label, self.signal.ua, brands=self.signal.brands)

    def os_info(self) -> OSInfo:
        return self.resolver.os_info(self.signal.ua)

    def complete_info(self) -> Dict[str, Any]:
        return self.classify().to_dict()


def classify_signal(signal: ClientSignal, config: Optional[DetectorConfig] = None) -> DetectionResult:
    """One-shot classification without caching."""
    return ClientDetector(signal, config=config, cache=NullCache()).classify()
