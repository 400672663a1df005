"""Version extraction patterns database.

Each browser family has one primary pattern (tuned for desktop user agents)
and an ordered list of fallback patterns for known mobile variants. The
resolver tries them in order and stops at the first match:

1. primary (desktop token)
2. fallbacks, in declaration order
3. generic dotted number (last resort, see ``GENERIC_VERSION``)

Every version group accepts two-part and three-part (or longer) dotted
numbers. Rendering engine tokens and OS version tokens live here too so the
whole table can be swapped through ``DetectorConfig``.
"""

import re
from typing import Dict, NamedTuple, Optional, Pattern, Tuple

from .labels import BrowserLabel, OSFamily, RenderingEngine

# 120.0 | 17.0.1 | 120.0.6099.109
VERSION = r'(\d+(?:\.\d+)+)'
# iOS style: 17_0 | 16_6_1
UNDERSCORE_VERSION = r'(\d+(?:_\d+)+)'


class VersionPattern(NamedTuple):
    """Named regex with a single capture group for the version."""

    name: str
    regex: Pattern[str]

    def search(self, text: str) -> Optional[str]:
        match = self.regex.search(text)
        if match and match.groups() and match.group(1):
            return match.group(1)
        return None


class BrowserPatternRule(NamedTuple):
    label: BrowserLabel
    primary: VersionPattern
    fallbacks: Tuple[VersionPattern, ...] = ()

    def cascade(self) -> Tuple[VersionPattern, ...]:
        return (self.primary,) + self.fallbacks


def _p(name: str, pattern: str) -> VersionPattern:
    return VersionPattern(name, re.compile(pattern, re.IGNORECASE))


# ============================================================================
# BROWSER VERSION PATTERNS
# ============================================================================

BROWSER_PATTERNS: Tuple[BrowserPatternRule, ...] = (
    BrowserPatternRule(
        BrowserLabel.CHROME,
        _p('chrome', r'chrome/' + VERSION),
        (
            _p('chrome_ios', r'crios/' + VERSION),
        ),
    ),
    BrowserPatternRule(
        BrowserLabel.FIREFOX,
        _p('firefox', r'firefox/' + VERSION),
        (
            _p('firefox_ios', r'fxios/' + VERSION),
            _p('firefox_rv', r'rv:' + VERSION + r'\)\s*gecko/'),
        ),
    ),
    BrowserPatternRule(
        BrowserLabel.SAFARI,
        _p('safari', r'version/' + VERSION + r'.*safari/'),
        (
            _p('safari_mobile', r'version/' + VERSION + r'\s+mobile/'),
            _p('safari_webview', r'(?:iphone|ipad|ipod).*?os ' + UNDERSCORE_VERSION + r' like mac os x'),
        ),
    ),
    BrowserPatternRule(
        BrowserLabel.EDGE,
        _p('edge', r'edg/' + VERSION),
        (
            _p('edge_android', r'edga/' + VERSION),
            _p('edge_ios', r'edgios/' + VERSION),
            _p('edge_legacy', r'edge/' + VERSION),
        ),
    ),
    BrowserPatternRule(
        BrowserLabel.OPERA,
        _p('opera', r'opr/' + VERSION),
        (
            _p('opera_ios', r'opios/' + VERSION),
            _p('opera_mini', r'opera mini/' + VERSION),
            _p('opera_version', r'opera.*?version/' + VERSION),
            _p('opera_presto', r'opera[/ ]' + VERSION),
        ),
    ),
    BrowserPatternRule(
        BrowserLabel.INTERNET_EXPLORER,
        _p('msie', r'msie\s' + VERSION),
        (
            _p('trident_rv', r'trident/.*?rv:' + VERSION),
        ),
    ),
)

GENERIC_VERSION = _p('generic', r'(\d+\.\d+(?:\.\d+)*)')

# Brand-list names that map onto a label besides the label's own name.
BRAND_ALIASES: Dict[str, BrowserLabel] = {
    'microsoft edge': BrowserLabel.EDGE,
    'google chrome': BrowserLabel.CHROME,
}

# ============================================================================
# RENDERING ENGINES
# ============================================================================

ENGINE_BY_LABEL: Dict[BrowserLabel, RenderingEngine] = {
    BrowserLabel.CHROME: RenderingEngine.BLINK,
    BrowserLabel.EDGE: RenderingEngine.BLINK,
    BrowserLabel.OPERA: RenderingEngine.BLINK,
    BrowserLabel.FIREFOX: RenderingEngine.GECKO,
    BrowserLabel.SAFARI: RenderingEngine.WEBKIT,
    BrowserLabel.INTERNET_EXPLORER: RenderingEngine.TRIDENT,
    BrowserLabel.UNKNOWN: RenderingEngine.UNKNOWN,
}

ENGINE_TOKENS: Dict[RenderingEngine, Tuple[VersionPattern, ...]] = {
    RenderingEngine.BLINK: (_p('blink', r'blink/' + VERSION), _p('blink_chrome', r'chrome/' + VERSION)),
    RenderingEngine.GECKO: (_p('gecko_rv', r'rv:' + VERSION), _p('gecko', r'gecko/' + VERSION)),
    RenderingEngine.WEBKIT: (_p('webkit', r'webkit/' + VERSION),),
    RenderingEngine.TRIDENT: (_p('trident', r'trident/' + VERSION),),
    RenderingEngine.UNKNOWN: (),
}

# ============================================================================
# OPERATING SYSTEMS
# ============================================================================

# Family detection, in priority order. The second element vetoes the match
# when present (a more specific mobile platform token).
OS_FAMILY_TOKENS: Tuple[Tuple[OSFamily, Pattern[str], Optional[Pattern[str]]], ...] = (
    (OSFamily.WINDOWS, re.compile(r'\bwin', re.I), None),
    (OSFamily.MACOS, re.compile(r'mac|macintosh', re.I), re.compile(r'iphone|ipad|ipod', re.I)),
    (OSFamily.LINUX, re.compile(r'linux|x11', re.I), re.compile(r'android', re.I)),
    (OSFamily.ANDROID, re.compile(r'android', re.I), None),
    (OSFamily.IOS, re.compile(r'iphone|ipad|ipod', re.I), None),
)

OS_VERSION_TOKENS: Dict[OSFamily, VersionPattern] = {
    OSFamily.WINDOWS: _p('windows_nt', r'windows nt (\d+\.\d+)'),
    OSFamily.MACOS: _p('mac_os_x', r'mac os x ' + r'(\d+(?:[_.]\d+)+)'),
    OSFamily.ANDROID: _p('android', r'android (\d+(?:\.\d+)*)'),
    OSFamily.IOS: _p('ios', r'os ' + UNDERSCORE_VERSION + r' like mac os x'),
}

WINDOWS_RELEASES: Dict[str, str] = {
    '10.0': 'Windows 10/11',
    '6.3': 'Windows 8.1',
    '6.2': 'Windows 8',
    '6.1': 'Windows 7',
    '6.0': 'Windows Vista',
    '5.2': 'Windows XP',
    '5.1': 'Windows XP',
}

# macOS 10.x minor bands, highest first. Safari froze the UA at 10_15_7 on
# Big Sur and later, so the top band is open-ended.
MACOS_BANDS: Tuple[Tuple[int, str], ...] = (
    (15, 'macOS Big Sur+'),
    (14, 'macOS Mojave'),
    (13, 'macOS High Sierra'),
    (12, 'macOS Sierra'),
    (11, 'OS X El Capitan'),
    (10, 'OS X Yosemite'),
)

ANDROID_CODENAMES: Dict[int, str] = {
    16: 'Baklava',
    15: 'Vanilla Ice Cream',
    14: 'Upside Down Cake',
    13: 'Tiramisu',
    12: 'Snow Cone',
    11: 'Red Velvet Cake',
    10: 'Quince Tart',
    9: 'Pie',
    8: 'Oreo',
    7: 'Nougat',
    6: 'Marshmallow',
    5: 'Lollipop',
}

# iOS release-line bands: "iPhone OS" up to 3.x, iPad reports iPadOS from 13 on.
IPHONE_OS_LAST_MAJOR = 3
IPADOS_FIRST_MAJOR = 13

LINUX_DISTRIBUTIONS: Tuple[Tuple[str, str], ...] = (
    ('cros', 'Chrome OS'),
    ('ubuntu', 'Ubuntu'),
    ('fedora', 'Fedora'),
    ('debian', 'Debian'),
)


def get_rule_for_label(label: BrowserLabel,
                       rules: Tuple[BrowserPatternRule, ...] = BROWSER_PATTERNS) -> Optional[BrowserPatternRule]:
    """Return the pattern rule for a label, or None when it has no cascade."""
    for rule in rules:
        if rule.label == label:
            return rule
    return None


def normalize_brand(name: str) -> str:
    """Normalize a brand name to alias key format."""
    return ' '.join(name.lower().split())
