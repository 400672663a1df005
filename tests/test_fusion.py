"""Tests for clientscan.fusion: grouping, scoring and override rules."""
import pytest

from clientscan.exceptions import ExtractorError
from clientscan.fusion import fuse, select_label
from clientscan.labels import BrowserLabel, ExtractorId
from clientscan.models import Candidate, ExtractorOutcome

CAP = ExtractorId.CAPABILITY_API
VEN = ExtractorId.VENDOR_STRING
UA = ExtractorId.USER_AGENT
FEAT = ExtractorId.FEATURE_PROBE


def _outcomes(*entries):
    return [ExtractorOutcome(source=src, candidate=Candidate(label, conf, src)) for label, conf, src in entries]


def test_no_candidates_is_unknown():
    result = fuse([])
    assert result.label == BrowserLabel.UNKNOWN
    assert result.confidence == 0.0
    assert result.contributing_extractors == ()


def test_empty_outcomes_are_ignored():
    result = fuse([ExtractorOutcome(source=src) for src in ExtractorId])
    assert result.label == BrowserLabel.UNKNOWN


def test_single_candidate():
    result = fuse(_outcomes((BrowserLabel.FIREFOX, 0.85, UA)))
    assert result.label == BrowserLabel.FIREFOX
    assert result.confidence == 0.85
    assert result.contributing_extractors == (UA,)


def test_highest_score_wins():
    # Safari 2 x 0.7 = 1.4 beats Firefox 1 x 0.85
    result = fuse(_outcomes(
        (BrowserLabel.FIREFOX, 0.85, CAP),
        (BrowserLabel.SAFARI, 0.7, VEN),
        (BrowserLabel.SAFARI, 0.7, UA),
    ))
    assert result.label == BrowserLabel.SAFARI
    assert result.confidence == 0.7
    assert result.contributing_extractors == (VEN, UA)


def test_tie_keeps_first_seen_label():
    result = fuse(_outcomes((BrowserLabel.SAFARI, 0.8, VEN), (BrowserLabel.FIREFOX, 0.8, UA)))
    assert result.label == BrowserLabel.SAFARI


class TestOverrides:

    def test_two_weak_edge_votes_beat_strong_single_vote(self):
        result = fuse(_outcomes(
            (BrowserLabel.SAFARI, 0.95, CAP),
            (BrowserLabel.EDGE, 0.7, UA),
            (BrowserLabel.EDGE, 0.6, FEAT),
        ))
        assert result.label == BrowserLabel.EDGE
        assert result.confidence == 0.7
        assert result.contributing_extractors == (UA, FEAT)

    def test_single_edge_vote_gets_no_override(self):
        result = fuse(_outcomes((BrowserLabel.SAFARI, 0.9, VEN), (BrowserLabel.EDGE, 0.85, UA)))
        assert result.label == BrowserLabel.SAFARI

    def test_capability_backed_chrome_beats_higher_score(self):
        result = fuse(_outcomes(
            (BrowserLabel.FIREFOX, 0.95, CAP),
            (BrowserLabel.FIREFOX, 0.85, UA),
            (BrowserLabel.CHROME, 0.9, VEN),
        ))
        assert result.label == BrowserLabel.CHROME
        assert result.confidence == 0.9

    def test_weak_chrome_gets_no_override(self):
        result = fuse(_outcomes((BrowserLabel.FIREFOX, 0.95, CAP), (BrowserLabel.CHROME, 0.85, UA)))
        assert result.label == BrowserLabel.FIREFOX

    def test_later_override_overwrites_earlier_one(self):
        edge_first = _outcomes(
            (BrowserLabel.EDGE, 0.9, VEN),
            (BrowserLabel.EDGE, 0.85, UA),
            (BrowserLabel.CHROME, 0.95, CAP),
        )
        chrome_first = _outcomes(
            (BrowserLabel.CHROME, 0.95, CAP),
            (BrowserLabel.EDGE, 0.9, VEN),
            (BrowserLabel.EDGE, 0.85, UA),
        )
        assert select_label([o.candidate for o in edge_first]) == BrowserLabel.CHROME
        assert select_label([o.candidate for o in chrome_first]) == BrowserLabel.EDGE


def test_error_outcomes_are_recorded_not_voted():
    err = ExtractorError('feature_probe', 'boom')
    outcomes = _outcomes((BrowserLabel.CHROME, 0.8, UA)) + [ExtractorOutcome(source=FEAT, error=err)]
    result = fuse(outcomes)
    assert result.label == BrowserLabel.CHROME
    assert result.failures == (err,)
    assert FEAT not in result.contributing_extractors


def test_fusion_is_deterministic():
    outcomes = _outcomes(
        (BrowserLabel.CHROME, 0.95, CAP),
        (BrowserLabel.EDGE, 0.9, VEN),
        (BrowserLabel.EDGE, 0.85, UA),
        (BrowserLabel.EDGE, 0.7, FEAT),
    )
    assert fuse(outcomes) == fuse(list(outcomes)) == fuse(iter(outcomes))


class TestCandidate:

    @pytest.mark.parametrize('conf', [-0.1, 1.01])
    def test_confidence_range(self, conf):
        with pytest.raises(ValueError):
            Candidate(BrowserLabel.CHROME, conf, UA)

    def test_unknown_label_rejected(self):
        with pytest.raises(ValueError):
            Candidate(BrowserLabel.UNKNOWN, 0.5, UA)
