"""Tests for merchant and amount similarity."""

from pocketledger.services.detection_config import DetectionConfig
from pocketledger.services.similarity import amounts_similar, calculate_similarity


class TestCalculateSimilarity:
    """Test merchant key similarity scores."""

    def test_identical(self):
        assert calculate_similarity("netflix", "netflix") == 1.0

    def test_case_insensitive(self):
        assert calculate_similarity("Netflix", "netflix") == 1.0

    def test_containment(self):
        assert calculate_similarity("netflix", "netflix premium") == 0.8
        assert calculate_similarity("netflix premium", "netflix") == 0.8

    def test_common_words(self):
        """One shared word out of three scores a sixth above 0.5."""
        score = calculate_similarity("amazon prime video", "amazon music unlimited")
        assert abs(score - (0.5 + (1 / 3) * 0.5)) < 1e-9

    def test_short_words_do_not_count(self):
        assert calculate_similarity("db ag berlin", "db ag munich") == 0.0

    def test_unrelated(self):
        assert calculate_similarity("spotify", "telekom") == 0.0

    def test_symmetric(self):
        pairs = [
            ("amazon prime video", "amazon music unlimited"),
            ("netflix", "netflix premium"),
            ("rewe markt", "rewe city markt"),
        ]
        for a, b in pairs:
            assert calculate_similarity(a, b) == calculate_similarity(b, a)


class TestAmountsSimilar:
    """Test relative amount tolerance."""

    def test_subscription_tolerance(self):
        """Subscriptions allow 10% relative to the mean."""
        assert amounts_similar(10.0, 10.9, is_subscription=True)
        assert not amounts_similar(10.0, 11.5, is_subscription=True)

    def test_default_tolerance(self):
        """Everything else allows 20%."""
        assert amounts_similar(10.0, 11.5, is_subscription=False)
        assert not amounts_similar(50.0, 150.0, is_subscription=False)

    def test_sign_is_ignored(self):
        assert amounts_similar(-15.99, 15.99, is_subscription=True)

    def test_both_zero(self):
        assert amounts_similar(0, 0, is_subscription=False)

    def test_injected_tolerance(self):
        config = DetectionConfig(default_amount_tolerance=0.5)
        assert amounts_similar(10.0, 14.0, is_subscription=False, config=config)
