"""Client signal record and the adapters that build it.

A ``ClientSignal`` is the plain-data output of the host probing layer. Every
field is optional; ``None`` means the probe did not report it, which the
extractors treat exactly like a failed check.

Two builders are provided for the HTTP host:

- ``signal_from_payload``: JSON probe results posted by a page script
- ``signal_from_headers``: request headers only (User-Agent + client hints)
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .exceptions import SignalValidationError


@dataclass(frozen=True)
class Brand:
    """One entry of a structured brand/version list (``navigator.userAgentData``)."""

    brand: str
    version: str = ''


# host hook: (style property, test value) -> whether the engine kept the value
StyleProber = Callable[[str, str], bool]


@dataclass(frozen=True)
class ClientSignal:
    user_agent: Optional[str] = None
    vendor: Optional[str] = None
    has_install_trigger: Optional[bool] = None
    has_chrome_runtime_connect: Optional[bool] = None
    has_chrome_webstore: Optional[bool] = None
    has_safari_push_notification: Optional[bool] = None
    has_opera_version: Optional[bool] = None
    document_mode: Optional[int] = None
    brands: Optional[Tuple[Brand, ...]] = None
    viewport_width: Optional[int] = None
    has_touch: Optional[bool] = None
    css_support: Optional[Mapping[str, bool]] = None
    style_prober: Optional[StyleProber] = field(default=None, compare=False, repr=False)

    @property
    def ua(self) -> str:
        return self.user_agent or ''

    @property
    def ua_lower(self) -> str:
        return self.ua.lower()

    @property
    def vendor_lower(self) -> str:
        return (self.vendor or '').lower()

    @property
    def vendor_is_empty(self) -> bool:
        """True only when the vendor probe ran and reported an empty string."""
        return self.vendor is not None and self.vendor == ''

    def brand_names(self) -> Tuple[str, ...]:
        return tuple(b.brand for b in self.brands or ())


_BOOL_FIELDS = (
    'has_install_trigger',
    'has_chrome_runtime_connect',
    'has_chrome_webstore',
    'has_safari_push_notification',
    'has_opera_version',
    'has_touch',
)
_STR_FIELDS = ('user_agent', 'vendor')
_INT_FIELDS = ('document_mode', 'viewport_width')


def _coerce_bool(name: str, value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise SignalValidationError(name, 'expected boolean')


def _coerce_int(name: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise SignalValidationError(name, 'expected integer')
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        # JSON decoders accept Infinity and NaN
        if not math.isfinite(value) or not value.is_integer():
            raise SignalValidationError(name, 'expected integer')
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise SignalValidationError(name, 'expected integer')


def _coerce_brands(value: Any) -> Optional[Tuple[Brand, ...]]:
    if value is None:
        return None
    if not isinstance(value, list):
        raise SignalValidationError('brands', 'expected list of {brand, version}')
    out = []
    for idx, item in enumerate(value):
        if not isinstance(item, dict) or not isinstance(item.get('brand'), str):
            raise SignalValidationError(f'brands[{idx}]', 'expected object with string brand')
        version = item.get('version')
        out.append(Brand(brand=item['brand'], version='' if version is None else str(version)))
    return tuple(out)


def _coerce_css_support(value: Any) -> Optional[Dict[str, bool]]:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise SignalValidationError('css_support', 'expected mapping of property -> boolean')
    return {str(k): _coerce_bool(f'css_support.{k}', v) for k, v in value.items()}


def signal_from_payload(payload: Any) -> ClientSignal:
    """Build a signal from a decoded JSON probe payload.

    Unknown keys are ignored. Raises ``SignalValidationError`` when a known
    key carries a value of the wrong type.
    """
    if not isinstance(payload, dict):
        raise SignalValidationError('payload', 'expected JSON object')
    kwargs: Dict[str, Any] = {}
    for name in _STR_FIELDS:
        value = payload.get(name)
        if value is not None and not isinstance(value, str):
            raise SignalValidationError(name, 'expected string')
        kwargs[name] = value
    for name in _BOOL_FIELDS:
        kwargs[name] = _coerce_bool(name, payload.get(name))
    for name in _INT_FIELDS:
        kwargs[name] = _coerce_int(name, payload.get(name))
    kwargs['brands'] = _coerce_brands(payload.get('brands'))
    kwargs['css_support'] = _coerce_css_support(payload.get('css_support'))
    return ClientSignal(**kwargs)


# "Microsoft Edge";v="120.0.2210.91", "Chromium";v="120"
_SF_BRAND = re.compile(r'"((?:[^"\\]|\\.)*)"\s*;\s*v\s*=\s*"((?:[^"\\]|\\.)*)"')


def parse_client_hint_brands(header_value: Optional[str]) -> Optional[Tuple[Brand, ...]]:
    """Parse a ``Sec-CH-UA`` style structured header into brands."""
    if not header_value:
        return None
    brands = tuple(Brand(brand=m.group(1), version=m.group(2)) for m in _SF_BRAND.finditer(header_value))
    return brands or None


def signal_from_headers(headers: Mapping[str, str]) -> ClientSignal:
    """Build a signal from HTTP request headers alone.

    Only the user agent and the client-hint brand list are observable
    server-side; capability flags stay absent. ``Sec-CH-UA-Mobile: ?1`` is
    taken as touch capability.
    """
    brands = parse_client_hint_brands(headers.get('Sec-CH-UA-Full-Version-List'))
    if brands is None:
        brands = parse_client_hint_brands(headers.get('Sec-CH-UA'))
    mobile_hint = headers.get('Sec-CH-UA-Mobile')
    has_touch = None
    if mobile_hint is not None:
        has_touch = mobile_hint.strip() == '?1'
    return ClientSignal(
        user_agent=headers.get('User-Agent'),
        brands=brands,
        has_touch=has_touch,
    )
