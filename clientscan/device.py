"""Device-class heuristic (mobile / tablet / desktop).

Independent of browser label resolution. Mobile is checked before tablet, so
a UA matching both keyword lists is mobile. Missing viewport or touch
information simply fails the screen-size branch.
"""

from typing import Optional, Sequence

from .labels import DeviceClass
from .signals import ClientSignal

MOBILE_KEYWORDS = (
    'mobile', 'android', 'iphone', 'ipod', 'blackberry',
    'windows phone', 'opera mini', 'iemobile',
)
TABLET_KEYWORDS = ('ipad', 'tablet', 'playbook', 'silk')

MOBILE_MAX_WIDTH = 768
TABLET_MAX_WIDTH = 1024


def _has_keyword(ua: str, keywords: Sequence[str]) -> bool:
    return any(keyword in ua for keyword in keywords)


def _touch_width(signal: ClientSignal) -> Optional[int]:
    # Width only counts on touch-capable devices.
    if not signal.has_touch or signal.viewport_width is None:
        return None
    return signal.viewport_width


def is_mobile(signal: ClientSignal,
              keywords: Sequence[str] = MOBILE_KEYWORDS,
              max_width: int = MOBILE_MAX_WIDTH) -> bool:
    if _has_keyword(signal.ua_lower, keywords):
        return True
    width = _touch_width(signal)
    return width is not None and width <= max_width


def is_tablet(signal: ClientSignal,
              keywords: Sequence[str] = TABLET_KEYWORDS,
              min_width: int = MOBILE_MAX_WIDTH,
              max_width: int = TABLET_MAX_WIDTH) -> bool:
    if _has_keyword(signal.ua_lower, keywords):
        return True
    width = _touch_width(signal)
    return width is not None and min_width < width <= max_width


def classify_device(signal: ClientSignal,
                    mobile_keywords: Sequence[str] = MOBILE_KEYWORDS,
                    tablet_keywords: Sequence[str] = TABLET_KEYWORDS,
                    mobile_max_width: int = MOBILE_MAX_WIDTH,
                    tablet_max_width: int = TABLET_MAX_WIDTH) -> DeviceClass:
    """Return exactly one device class for the signal."""
    if is_mobile(signal, mobile_keywords, mobile_max_width):
        return DeviceClass.MOBILE
    if is_tablet(signal, tablet_keywords, mobile_max_width, tablet_max_width):
        return DeviceClass.TABLET
    return DeviceClass.DESKTOP
