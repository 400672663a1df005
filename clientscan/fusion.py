"""Conflict resolution across extractor candidates.

Scoring per label is ``count x max_confidence``. Two override rules are
applied in a single pass over the labels (first-seen order), ahead of the
plain score comparison:

- Edge voted by at least two extractors takes the running best
- Chrome with max confidence >= 0.9 (capability-API backed) takes it

The pass does not stop at an override: a later label matching an override,
or beating the running score, replaces it. Two weak Edge votes can therefore
outrank one strong capability-API vote for another label; that ordering is
intentional and must not be "fixed" here.
"""

import logging
from typing import Dict, Iterable, List

from .labels import BrowserLabel
from .models import Candidate, ExtractorOutcome, FusionResult

logger = logging.getLogger('clientscan.fusion')

EDGE_MIN_VOTES = 2
CHROME_OVERRIDE_CONFIDENCE = 0.9


def _group(candidates: List[Candidate]) -> Dict[BrowserLabel, Dict[str, float]]:
    grouped: Dict[BrowserLabel, Dict[str, float]] = {}
    for cand in candidates:
        entry = grouped.setdefault(cand.label, {'count': 0, 'max_confidence': 0.0})
        entry['count'] += 1
        entry['max_confidence'] = max(entry['max_confidence'], cand.confidence)
    return grouped


def select_label(candidates: List[Candidate]) -> BrowserLabel:
    """Pick the winning label from a non-empty candidate list."""
    best_label = BrowserLabel.UNKNOWN
    best_score = 0.0
    for label, entry in _group(candidates).items():
        count = int(entry['count'])
        confidence = entry['max_confidence']
        score = count * confidence
        if label == BrowserLabel.EDGE and count >= EDGE_MIN_VOTES:
            best_label, best_score = label, score
        elif label == BrowserLabel.CHROME and confidence >= CHROME_OVERRIDE_CONFIDENCE:
            best_label, best_score = label, score
        elif score > best_score:
            best_label, best_score = label, score
    return best_label


def fuse(outcomes: Iterable[ExtractorOutcome]) -> FusionResult:
    """Merge extractor outcomes into a single decision.

    Error outcomes are dropped from voting and reported in ``failures``.
    Deterministic for a given ordered outcome list.
    """
    outcomes = list(outcomes)
    failures = tuple(o.error for o in outcomes if o.error is not None)
    candidates = [o.candidate for o in outcomes if o.candidate is not None and o.error is None]
    if not candidates:
        return FusionResult(label=BrowserLabel.UNKNOWN, confidence=0.0, failures=failures)

    label = select_label(candidates)
    matched = [c for c in candidates if c.label == label]
    confidence = max((c.confidence for c in matched), default=0.0)
    result = FusionResult(
        label=label,
        confidence=confidence,
        contributing_extractors=tuple(c.source for c in matched),
        failures=failures,
    )
    logger.debug('fused label=%s confidence=%.2f contributors=%s candidates=%d',
                 label.value, confidence, [s.value for s in result.contributing_extractors], len(candidates))
    return result
