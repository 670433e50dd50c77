"""Tests for transaction categorization."""

from datetime import date, datetime, timedelta

import pytest

from pocketledger.models.category_rule import CategoryRule
from pocketledger.services import categorization_service
from pocketledger.services.categorization_service import (
    categorize_locally,
    categorize_transactions,
    categorize_with_ai,
    match_category_rules,
)


class FakeAIClient:
    """Returns a canned JSON payload or raises."""

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.calls = []

    async def complete_json(self, system_prompt, user_prompt, **kwargs):
        self.calls.append((system_prompt, user_prompt))
        if self.error:
            raise self.error
        return self.payload


@pytest.fixture
def fake_ai(monkeypatch):
    def _install(payload=None, error=None):
        client = FakeAIClient(payload=payload, error=error)
        monkeypatch.setattr(categorization_service, "get_ai_client", lambda: client)
        return client
    return _install


@pytest.fixture
def rules(db_session):
    base = datetime(2024, 1, 1)
    rows = [
        CategoryRule(id="r1", pattern="netflix", category="Entertainment", is_regex=False, created_at=base),
        CategoryRule(id="r2", pattern=r"^rewe\b", category="Groceries", is_regex=True, created_at=base + timedelta(seconds=1)),
        CategoryRule(id="r3", pattern="miete", category="Rent", is_regex=False, created_at=base + timedelta(seconds=2)),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows


class TestMatchCategoryRules:
    def test_substring_rule(self, rules):
        assert match_category_rules("Mastercard NETFLIX.COM", rules) == "Entertainment"

    def test_regex_rule(self, rules):
        assert match_category_rules("REWE Markt Berlin", rules) == "Groceries"
        assert match_category_rules("Penny REWE Group", rules) is None

    def test_no_match(self, rules):
        assert match_category_rules("Stadtwerke", rules) is None

    def test_invalid_regex_skipped(self):
        broken = CategoryRule(id="bad", pattern="([", category="Other", is_regex=True)
        good = CategoryRule(id="ok", pattern="spotify", category="Entertainment", is_regex=False)
        assert match_category_rules("Spotify AB", [broken, good]) == "Entertainment"

    def test_default_category(self, rules):
        assert categorize_locally("Unknown shop", rules) == "Other"


class TestCategorizeWithAI:
    @pytest.mark.asyncio
    async def test_results_payload(self, fake_ai):
        client = fake_ai({"results": [{"category": "Entertainment"}, {"category": "Rent"}]})

        labels = await categorize_with_ai(["Netflix", "Miete Januar"])

        assert labels == ["Entertainment", "Rent"]
        system_prompt, user_prompt = client.calls[0]
        assert "Entertainment" in system_prompt
        assert "1. Netflix" in user_prompt
        assert "2. Miete Januar" in user_prompt

    @pytest.mark.asyncio
    async def test_bare_list_payload(self, fake_ai):
        fake_ai([{"category": "Groceries"}])
        assert await categorize_with_ai(["REWE"]) == ["Groceries"]

    @pytest.mark.asyncio
    async def test_unknown_label_is_none(self, fake_ai):
        fake_ai({"transactions": [{"category": "Space Travel"}]})
        assert await categorize_with_ai(["Rocket"]) == [None]

    @pytest.mark.asyncio
    async def test_short_response_padded(self, fake_ai):
        fake_ai({"results": [{"category": "Rent"}]})
        assert await categorize_with_ai(["Miete", "Netflix"]) == ["Rent", None]

    @pytest.mark.asyncio
    async def test_malformed_payload_raises(self, fake_ai):
        fake_ai({"answer": "Entertainment"})
        with pytest.raises(ValueError):
            await categorize_with_ai(["Netflix"])


class TestCategorizeTransactions:
    """Test the AI, rules, default fallback chain."""

    @pytest.mark.asyncio
    async def test_local_rules(self, db_session, rules, make_transaction):
        txns = [
            make_transaction("Netflix", date(2024, 1, 1), "-15.99", category=""),
            make_transaction("Stadtwerke", date(2024, 1, 1), "-80", category=""),
        ]

        count = await categorize_transactions(db_session, txns, use_ai=False)

        assert count == 2
        assert [t.category for t in txns] == ["Entertainment", "Other"]
        assert all(t.ai_categorized is False for t in txns)

    @pytest.mark.asyncio
    async def test_existing_categories_untouched(self, db_session, rules, make_transaction):
        txn = make_transaction("Netflix", date(2024, 1, 1), "-15.99", category="Subscriptions")

        assert await categorize_transactions(db_session, [txn], use_ai=False) == 0
        assert txn.category == "Subscriptions"

    @pytest.mark.asyncio
    async def test_ai_labels(self, db_session, rules, fake_ai, make_transaction):
        fake_ai({"results": [{"category": "Subscriptions"}, {"category": "Nonsense"}]})
        txns = [
            make_transaction("Netflix", date(2024, 1, 1), "-15.99", category=""),
            make_transaction("Miete Januar", date(2024, 1, 1), "-850", category=""),
        ]

        await categorize_transactions(db_session, txns, use_ai=True)

        assert txns[0].category == "Subscriptions"
        assert txns[0].ai_categorized is True
        # Invalid AI label falls back to the local rules
        assert txns[1].category == "Rent"
        assert txns[1].ai_categorized is False

    @pytest.mark.asyncio
    async def test_ai_failure_falls_back(self, db_session, rules, fake_ai, make_transaction):
        fake_ai(error=RuntimeError("provider down"))
        txn = make_transaction("Netflix", date(2024, 1, 1), "-15.99", category="")

        count = await categorize_transactions(db_session, [txn], use_ai=True)

        assert count == 1
        assert txn.category == "Entertainment"
        assert txn.ai_categorized is False
