"""Value objects passed between extractors, fusion, resolver and cache."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .exceptions import ExtractorError
from .labels import BrowserLabel, DeviceClass, ExtractorId, UNKNOWN


@dataclass(frozen=True)
class Candidate:
    """One extractor's guess at the browser label."""

    label: BrowserLabel
    confidence: float  # 0.0 - 1.0
    source: ExtractorId

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f'confidence out of range: {self.confidence}')
        if self.label == BrowserLabel.UNKNOWN:
            raise ValueError('a candidate never carries the Unknown label')


@dataclass(frozen=True)
class ExtractorOutcome:
    """Result of one extractor invocation: a candidate, nothing, or an error."""

    source: ExtractorId
    candidate: Optional[Candidate] = None
    error: Optional[ExtractorError] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class FusionResult:
    label: BrowserLabel
    confidence: float
    contributing_extractors: Tuple[ExtractorId, ...] = ()
    failures: Tuple[ExtractorError, ...] = ()


@dataclass(frozen=True)
class EngineInfo:
    engine: str
    version: str


@dataclass(frozen=True)
class OSInfo:
    os: str
    os_version: str


@dataclass(frozen=True)
class CacheStats:
    occupied: bool
    key: Optional[str]
    size: int = 0
    keys: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {'occupied': self.occupied, 'key': self.key, 'size': self.size, 'keys': list(self.keys)}


@dataclass(frozen=True)
class DetectionResult:
    """Externally visible classification of the current client."""

    browser: BrowserLabel = BrowserLabel.UNKNOWN
    browser_version: str = UNKNOWN
    engine: str = UNKNOWN
    engine_version: str = UNKNOWN
    os: str = UNKNOWN
    os_version: str = UNKNOWN
    device_class: DeviceClass = DeviceClass.DESKTOP
    confidence: float = 0.0
    detection_methods: Tuple[ExtractorId, ...] = ()
    failures: Tuple[str, ...] = ()
    user_agent: str = ''
    vendor: str = ''
    timestamp: float = field(default=0.0)

    @property
    def is_mobile(self) -> bool:
        return self.device_class == DeviceClass.MOBILE

    @property
    def is_tablet(self) -> bool:
        return self.device_class == DeviceClass.TABLET

    @property
    def is_desktop(self) -> bool:
        return self.device_class == DeviceClass.DESKTOP

    @property
    def platform(self) -> str:
        return self.device_class.platform

    def to_dict(self) -> Dict[str, Any]:
        return {
            'browser': self.browser.value,
            'browser_version': self.browser_version,
            'engine': self.engine,
            'engine_version': self.engine_version,
            'platform': self.platform,
            'os': self.os,
            'os_version': self.os_version,
            'is_mobile': self.is_mobile,
            'is_tablet': self.is_tablet,
            'is_desktop': self.is_desktop,
            'confidence': self.confidence,
            'detection_methods': [m.value for m in self.detection_methods],
            'failures': list(self.failures),
            'user_agent': self.user_agent,
            'vendor': self.vendor,
            'timestamp': self.timestamp,
        }
