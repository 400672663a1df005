"""Tests for clientscan.config: detector configuration validation."""
from dataclasses import FrozenInstanceError

import pytest

from clientscan.config import DEFAULT_CONFIG, DetectorConfig
from clientscan.exceptions import ConfigurationError
from clientscan.extractors import user_agent
from clientscan.labels import ExtractorId


def test_defaults():
    assert DEFAULT_CONFIG.cache_key == 'browser_detection'
    assert [source for source, _ in DEFAULT_CONFIG.extractors] == list(ExtractorId)
    assert DEFAULT_CONFIG.mobile_max_width == 768
    assert DEFAULT_CONFIG.tablet_max_width == 1024


def test_empty_cache_key_rejected():
    with pytest.raises(ConfigurationError) as ei:
        DetectorConfig(cache_key='')
    assert ei.value.details == {'setting': 'cache_key'}


def test_width_order_enforced():
    with pytest.raises(ConfigurationError):
        DetectorConfig(mobile_max_width=1024, tablet_max_width=768)


def test_duplicate_extractor_rejected():
    with pytest.raises(ConfigurationError):
        DetectorConfig(extractors=((ExtractorId.USER_AGENT, user_agent), (ExtractorId.USER_AGENT, user_agent)))


def test_without_extractor_returns_copy():
    cfg = DEFAULT_CONFIG.without_extractor(ExtractorId.FEATURE_PROBE)
    assert ExtractorId.FEATURE_PROBE not in [s for s, _ in cfg.extractors]
    assert len(DEFAULT_CONFIG.extractors) == 4


def test_config_is_frozen():
    with pytest.raises(FrozenInstanceError):
        DEFAULT_CONFIG.cache_key = 'other'
