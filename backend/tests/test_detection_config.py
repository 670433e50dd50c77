"""Tests for detection config loading."""

import pytest
from pydantic import ValidationError

from pocketledger.services.detection_config import (
    DEFAULT_DETECTION_CONFIG,
    DetectionConfig,
    load_detection_config,
    resolve_config,
)


class TestDetectionConfig:
    def test_defaults(self):
        config = DetectionConfig()
        assert config.similarity_threshold == 0.7
        assert config.subscription_amount_tolerance == 0.10
        assert config.default_amount_tolerance == 0.20
        assert config.min_group_size == 2
        assert config.monthly_band.contains(30)
        assert not config.monthly_band.contains(39)
        assert config.fallback_monthly_band.contains(39)

    def test_frozen(self):
        with pytest.raises(ValidationError):
            DEFAULT_DETECTION_CONFIG.similarity_threshold = 0.9

    def test_load_from_json(self, tmp_path):
        path = tmp_path / "detection.json"
        path.write_text('{"similarity_threshold": 0.8, "excluded_categories": ["Groceries"]}')

        config = load_detection_config(str(path))

        assert config.similarity_threshold == 0.8
        assert config.excluded_categories == ("Groceries",)
        # Missing keys keep their defaults
        assert config.min_group_size == 2

    def test_resolve_prefers_explicit_config(self):
        config = DetectionConfig(min_group_size=5)
        assert resolve_config(config) is config
        assert resolve_config(None) == DEFAULT_DETECTION_CONFIG
