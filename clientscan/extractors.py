"""Signal extractors.

Four independent procedures, each mapping a ``ClientSignal`` to at most one
``Candidate``:

1. capability_api: browser-exclusive runtime hooks (highest confidence)
2. vendor_string: ``navigator.vendor`` plus the Edge UA token
3. user_agent: ordered substring cascade over the UA string
4. feature_probe: vendor-prefixed style support, confirmed by capability hooks

Extractors are pure. A missing field is a failed check, never an error.
``run_extractors`` is the only place exceptions are caught; it turns them into
``ExtractorOutcome`` values carrying an ``ExtractorError``.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from . import metrics
from .exceptions import ExtractorError
from .labels import BrowserLabel, ExtractorId
from .logging_utils import log_suppressed
from .models import Candidate, ExtractorOutcome
from .signals import ClientSignal

logger = logging.getLogger('clientscan.extractors')

Extractor = Callable[[ClientSignal], Optional[Candidate]]


def _is_android_webview(signal: ClientSignal) -> bool:
    # Mobile Edge on Android reports a Chrome/Safari UA with an empty vendor.
    ua = signal.ua_lower
    return 'android' in ua and 'chrome' in ua and 'safari' in ua


def capability_api(signal: ClientSignal) -> Optional[Candidate]:
    """Browser-exclusive runtime hooks, first match wins.

    Firefox goes first: its install hook is the least likely to be faked by
    a polyfill on another engine.
    """
    src = ExtractorId.CAPABILITY_API
    if signal.has_install_trigger:
        return Candidate(BrowserLabel.FIREFOX, 0.95, src)
    if signal.has_chrome_runtime_connect:
        return Candidate(BrowserLabel.CHROME, 0.95, src)
    if signal.has_safari_push_notification:
        return Candidate(BrowserLabel.SAFARI, 0.95, src)
    if 'Microsoft Edge' in signal.brand_names():
        return Candidate(BrowserLabel.EDGE, 0.95, src)
    if signal.has_opera_version:
        return Candidate(BrowserLabel.OPERA, 0.9, src)
    if signal.document_mode:
        return Candidate(BrowserLabel.INTERNET_EXPLORER, 0.95, src)
    return None


def vendor_string(signal: ClientSignal) -> Optional[Candidate]:
    src = ExtractorId.VENDOR_STRING
    vendor = signal.vendor_lower
    ua = signal.ua_lower

    # Edge's vendor is often empty or claims Google; the UA token decides.
    if 'edg' in ua:
        return Candidate(BrowserLabel.EDGE, 0.9, src)

    if 'google' in vendor:
        return Candidate(BrowserLabel.CHROME, 0.9, src)
    if 'apple' in vendor:
        return Candidate(BrowserLabel.SAFARI, 0.9, src)
    if 'mozilla' in vendor:
        return Candidate(BrowserLabel.FIREFOX, 0.8, src)
    if signal.vendor_is_empty:
        if 'edg' in ua or 'edge' in ua:
            return Candidate(BrowserLabel.EDGE, 0.8, src)
        if _is_android_webview(signal):
            return Candidate(BrowserLabel.EDGE, 0.7, src)
    return None


def user_agent(signal: ClientSignal) -> Optional[Candidate]:
    """Ordered UA cascade.

    Firefox is tested before Safari (Firefox UAs carry "like Gecko" tokens),
    and Edge's "edg" before the generic "chrome" token (Chromium Edge always
    carries both). Plain Safari fires last with the lowest confidence.
    """
    src = ExtractorId.USER_AGENT
    ua = signal.ua_lower
    if not ua:
        return None

    if 'firefox' in ua or 'fxios' in ua:
        return Candidate(BrowserLabel.FIREFOX, 0.85, src)
    if 'edg' in ua:
        return Candidate(BrowserLabel.EDGE, 0.85, src)
    if 'opr' in ua or 'opera' in ua:
        return Candidate(BrowserLabel.OPERA, 0.85, src)
    if 'msie' in ua or 'trident' in ua:
        return Candidate(BrowserLabel.INTERNET_EXPLORER, 0.95, src)
    if 'chrome' in ua and 'edg' not in ua and 'opr' not in ua:
        return Candidate(BrowserLabel.CHROME, 0.95 if 'crios' in ua else 0.8, src)
    if 'safari' in ua and 'google' in signal.vendor_lower:
        return Candidate(BrowserLabel.CHROME, 0.85, src)
    if 'edge' in ua:
        return Candidate(BrowserLabel.EDGE, 0.85, src)
    if _is_android_webview(signal) and signal.vendor_is_empty:
        return Candidate(BrowserLabel.EDGE, 0.8, src)
    if 'safari' in ua and 'chrome' not in ua:
        return Candidate(BrowserLabel.SAFARI, 0.7, src)
    return None


# (style property, test value) pairs probed on a scratch element
WEBKIT_TRANSFORM = ('webkitTransform', 'translateZ(0)')
WEBKIT_APPEARANCE = ('webkitAppearance', 'none')


def _style_supported(signal: ClientSignal, prop: str, value: str) -> bool:
    if signal.css_support is not None and prop in signal.css_support:
        return bool(signal.css_support[prop])
    if signal.style_prober is None:
        return False
    try:
        return bool(signal.style_prober(prop, value))
    except Exception as exc:
        raise ExtractorError(ExtractorId.FEATURE_PROBE.value, f'style probe {prop} failed: {exc}', cause=exc) from exc


def feature_probe(signal: ClientSignal) -> Optional[Candidate]:
    """Vendor-prefixed CSS support. The weakest signal of the four.

    Prefix support alone proves nothing (Blink and WebKit both keep webkit
    prefixes), so Chrome and Safari are only reported together with their
    capability objects. The Edge patterns from the UA extractor are repeated
    here at lower confidence and take precedence.
    """
    src = ExtractorId.FEATURE_PROBE
    candidate: Optional[Candidate] = None

    if _style_supported(signal, *WEBKIT_TRANSFORM) and signal.has_chrome_webstore:
        candidate = Candidate(BrowserLabel.CHROME, 0.7, src)
    if _style_supported(signal, *WEBKIT_APPEARANCE) and signal.has_safari_push_notification:
        candidate = Candidate(BrowserLabel.SAFARI, 0.7, src)

    ua = signal.ua_lower
    if 'edg' in ua or 'edge' in ua:
        candidate = Candidate(BrowserLabel.EDGE, 0.7, src)
    elif _is_android_webview(signal) and signal.vendor_is_empty:
        candidate = Candidate(BrowserLabel.EDGE, 0.6, src)
    return candidate


DEFAULT_EXTRACTORS: Tuple[Tuple[ExtractorId, Extractor], ...] = (
    (ExtractorId.CAPABILITY_API, capability_api),
    (ExtractorId.VENDOR_STRING, vendor_string),
    (ExtractorId.USER_AGENT, user_agent),
    (ExtractorId.FEATURE_PROBE, feature_probe),
)


def run_extractor(source: ExtractorId, extractor: Extractor, signal: ClientSignal) -> ExtractorOutcome:
    """Invoke one extractor, converting any exception into an error outcome."""
    try:
        candidate = extractor(signal)
    except Exception as exc:
        error = exc if isinstance(exc, ExtractorError) else ExtractorError.from_exception(source.value, exc)
        log_suppressed(logger, exc, f'extractor={source.value}', level=logging.WARNING)
        metrics.record_extractor_failure(source.value)
        return ExtractorOutcome(source=source, error=error)
    return ExtractorOutcome(source=source, candidate=candidate)


def run_extractors(signal: ClientSignal,
                   extractors: Sequence[Tuple[ExtractorId, Extractor]] = DEFAULT_EXTRACTORS) -> List[ExtractorOutcome]:
    """Run every extractor in order. Never raises."""
    outcomes = [run_extractor(source, fn, signal) for source, fn in extractors]
    logger.debug('extractors ran count=%d candidates=%s failures=%d',
                 len(outcomes),
                 [(o.source.value, o.candidate.label.value) for o in outcomes if o.candidate],
                 sum(1 for o in outcomes if o.failed))
    return outcomes
