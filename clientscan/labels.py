"""Closed enumerations shared by the extractors, fusion and resolver."""

from enum import Enum


class BrowserLabel(str, Enum):
    """Browser family. Used as an equality key when grouping candidates."""

    CHROME = 'Chrome'
    FIREFOX = 'Firefox'
    SAFARI = 'Safari'
    EDGE = 'Edge'
    OPERA = 'Opera'
    INTERNET_EXPLORER = 'Internet Explorer'
    UNKNOWN = 'Unknown'

    @classmethod
    def parse(cls, value) -> 'BrowserLabel':
        """Map a free-form name onto a label, ``UNKNOWN`` when nothing fits."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.UNKNOWN
        lowered = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == lowered or member.name.lower() == lowered:
                return member
        return _LABEL_ALIASES.get(lowered, cls.UNKNOWN)


_LABEL_ALIASES = {
    'ie': BrowserLabel.INTERNET_EXPLORER,
    'msie': BrowserLabel.INTERNET_EXPLORER,
    'internet_explorer': BrowserLabel.INTERNET_EXPLORER,
    'microsoft edge': BrowserLabel.EDGE,
    'google chrome': BrowserLabel.CHROME,
}


class ExtractorId(str, Enum):
    """Identity of a signal extractor, in evaluation order."""

    CAPABILITY_API = 'capability_api'
    VENDOR_STRING = 'vendor_string'
    USER_AGENT = 'user_agent'
    FEATURE_PROBE = 'feature_probe'


class DeviceClass(str, Enum):
    MOBILE = 'mobile'
    TABLET = 'tablet'
    DESKTOP = 'desktop'

    @property
    def platform(self) -> str:
        """Display form used in results (``Mobile``, ``Tablet``, ``Desktop``)."""
        return self.value.capitalize()


class RenderingEngine(str, Enum):
    BLINK = 'Blink'
    GECKO = 'Gecko'
    WEBKIT = 'WebKit'
    TRIDENT = 'Trident'
    UNKNOWN = 'Unknown'


class OSFamily(str, Enum):
    WINDOWS = 'Windows'
    MACOS = 'macOS'
    LINUX = 'Linux'
    ANDROID = 'Android'
    IOS = 'iOS'
    UNKNOWN = 'Unknown'


UNKNOWN = 'Unknown'
