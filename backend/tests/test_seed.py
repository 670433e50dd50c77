"""Tests for default category rule seeding."""

from pocketledger.models.category_rule import CategoryRule
from pocketledger.seed import DEFAULT_CATEGORY_RULES, seed_category_rules
from pocketledger.services.detection_config import DEFAULT_CATEGORIES


def test_seed_once(db_session):
    expected = sum(len(keywords) for keywords in DEFAULT_CATEGORY_RULES.values())

    assert seed_category_rules(db_session) == expected
    assert seed_category_rules(db_session) == 0
    assert db_session.query(CategoryRule).count() == expected


def test_seeded_categories_are_known():
    assert set(DEFAULT_CATEGORY_RULES) <= set(DEFAULT_CATEGORIES)
