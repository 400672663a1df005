"""Version, rendering engine and OS resolution.

Fills in the derived fields of a detection once the browser label is fused:

1. Brand list (structured, high confidence) - authoritative when it names the label
2. Label's pattern cascade against the raw UA (primary, then fallbacks)
3. Generic dotted number anywhere in the UA (last resort)

Engine and OS resolution follow the same cascade-with-fallback shape.
Nothing here raises on bad input; unresolved fields come back as "Unknown".
"""

import logging
from typing import Optional, Tuple

from .labels import BrowserLabel, OSFamily, RenderingEngine, UNKNOWN
from .models import EngineInfo, OSInfo
from .patterns import (
    ANDROID_CODENAMES,
    BRAND_ALIASES,
    BROWSER_PATTERNS,
    ENGINE_BY_LABEL,
    ENGINE_TOKENS,
    GENERIC_VERSION,
    IPADOS_FIRST_MAJOR,
    IPHONE_OS_LAST_MAJOR,
    LINUX_DISTRIBUTIONS,
    MACOS_BANDS,
    OS_FAMILY_TOKENS,
    OS_VERSION_TOKENS,
    WINDOWS_RELEASES,
    BrowserPatternRule,
    get_rule_for_label,
    normalize_brand,
)
from .signals import Brand
from .validator import is_plausible_version, major_version, normalize_version, parse_version

logger = logging.getLogger('clientscan.resolver')


class VersionResolver:
    """Cascading version/engine/OS resolver.

    Usage:
        resolver = VersionResolver()
        version = resolver.resolve_version(BrowserLabel.FIREFOX, ua)
        engine = resolver.engine_info(BrowserLabel.FIREFOX, ua)
        os_info = resolver.os_info(ua)
    """

    def __init__(self, rules: Tuple[BrowserPatternRule, ...] = BROWSER_PATTERNS):
        self.rules = rules

    # ------------------------------------------------------------------
    # Browser version
    # ------------------------------------------------------------------

    @staticmethod
    def brand_matches(brand_name: str, label: BrowserLabel) -> bool:
        key = normalize_brand(brand_name)
        return key == label.value.lower() or BRAND_ALIASES.get(key) == label

    def from_brands(self, label: BrowserLabel, brands: Optional[Tuple[Brand, ...]]) -> Optional[str]:
        """Version from the structured brand list, if it names the label."""
        if not brands or label == BrowserLabel.UNKNOWN:
            return None
        for entry in brands:
            if not self.brand_matches(entry.brand, label):
                continue
            version = normalize_version(entry.version)
            if is_plausible_version(version):
                logger.debug('version from brand list label=%s brand=%s version=%s',
                             label.value, entry.brand, version)
                return version
        return None

    def from_cascade(self, label: BrowserLabel, user_agent: str) -> Optional[str]:
        """Primary pattern, then each fallback in order."""
        rule = get_rule_for_label(label, self.rules)
        if rule is None or not user_agent:
            return None
        for pattern in rule.cascade():
            raw = pattern.search(user_agent)
            if raw is None:
                continue
            version = normalize_version(raw)
            if is_plausible_version(version):
                logger.debug('version from pattern label=%s pattern=%s version=%s',
                             label.value, pattern.name, version)
                return version
        return None

    @staticmethod
    def from_generic(user_agent: str) -> Optional[str]:
        # Favours "some answer" over "Unknown": first dotted number in the UA.
        raw = GENERIC_VERSION.search(user_agent or '')
        return normalize_version(raw) if raw else None

    def resolve_version(self, label: BrowserLabel, user_agent: str,
                        brands: Optional[Tuple[Brand, ...]] = None) -> str:
        """Return the browser version for ``label`` or ``"Unknown"``."""
        label = BrowserLabel.parse(label)
        if label == BrowserLabel.UNKNOWN:
            return UNKNOWN
        version = (
            self.from_brands(label, brands)
            or self.from_cascade(label, user_agent)
            or self.from_generic(user_agent)
        )
        if not version:
            logger.debug('version unresolved label=%s', label.value)
            return UNKNOWN
        return version

    # ------------------------------------------------------------------
    # Rendering engine
    # ------------------------------------------------------------------

    @staticmethod
    def engine_for(label: BrowserLabel) -> RenderingEngine:
        return ENGINE_BY_LABEL.get(BrowserLabel.parse(label), RenderingEngine.UNKNOWN)

    def engine_info(self, label: BrowserLabel, user_agent: str,
                    browser_version: Optional[str] = None,
                    brands: Optional[Tuple[Brand, ...]] = None) -> EngineInfo:
        """Engine name from the label; version from the label's version when it
        resolves, otherwise from the engine's own UA token."""
        label = BrowserLabel.parse(label)
        engine = self.engine_for(label)
        if engine == RenderingEngine.UNKNOWN:
            return EngineInfo(engine=UNKNOWN, version=UNKNOWN)
        if browser_version is None:
            browser_version = self.resolve_version(label, user_agent, brands)
        if browser_version != UNKNOWN:
            return EngineInfo(engine=engine.value, version=browser_version)
        for token in ENGINE_TOKENS.get(engine, ()):
            raw = token.search(user_agent or '')
            version = normalize_version(raw) if raw else ''
            if is_plausible_version(version):
                return EngineInfo(engine=engine.value, version=version)
        return EngineInfo(engine=engine.value, version=UNKNOWN)

    # ------------------------------------------------------------------
    # Operating system
    # ------------------------------------------------------------------

    @staticmethod
    def os_family(user_agent: str) -> OSFamily:
        ua = user_agent or ''
        for family, token, veto in OS_FAMILY_TOKENS:
            if token.search(ua) and not (veto is not None and veto.search(ua)):
                return family
        return OSFamily.UNKNOWN

    def os_info(self, user_agent: str) -> OSInfo:
        family = self.os_family(user_agent)
        if family == OSFamily.UNKNOWN:
            return OSInfo(os=UNKNOWN, os_version=UNKNOWN)
        if family == OSFamily.LINUX:
            return OSInfo(os=family.value, os_version=_linux_release(user_agent))

        pattern = OS_VERSION_TOKENS.get(family)
        raw = pattern.search(user_agent) if pattern else None
        if not raw:
            return OSInfo(os=family.value, os_version=family.value)
        version = normalize_version(raw)
        release = _release_name(family, version, user_agent)
        return OSInfo(os=family.value, os_version=release or f'{family.value} {version}')


def _release_name(family: OSFamily, version: str, user_agent: str) -> Optional[str]:
    """Map a captured OS version onto a human-readable release name."""
    if family == OSFamily.WINDOWS:
        return WINDOWS_RELEASES.get(version)
    if family == OSFamily.MACOS:
        parsed = parse_version(version)
        if not parsed or len(parsed) < 2 or parsed[0] != 10:
            return None
        for minimum, name in MACOS_BANDS:
            if parsed[1] >= minimum:
                return name
        return None
    if family == OSFamily.ANDROID:
        major = major_version(version)
        codename = ANDROID_CODENAMES.get(major) if major is not None else None
        return f'Android {major} ({codename})' if codename else None
    if family == OSFamily.IOS:
        major = major_version(version)
        if major is None:
            return None
        if 'ipad' in user_agent.lower() and major >= IPADOS_FIRST_MAJOR:
            return f'iPadOS {version}'
        if major <= IPHONE_OS_LAST_MAJOR:
            return f'iPhone OS {version}'
        return f'iOS {version}'
    return None


def _linux_release(user_agent: str) -> str:
    lowered = user_agent.lower()
    for token, name in LINUX_DISTRIBUTIONS:
        if token in lowered:
            return f'Linux ({name})'
    return OSFamily.LINUX.value
