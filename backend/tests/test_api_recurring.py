"""Tests for recurring detection API endpoints."""

from datetime import date

import pytest

from pocketledger.dependencies import get_config
from pocketledger.services.detection_config import DetectionConfig

NETFLIX_GROUP_ID = "netflix-subscription_monthly_1599"


@pytest.fixture
def stored(add_transactions, make_transaction, netflix_transactions):
    return add_transactions(
        *netflix_transactions,
        make_transaction("FitX Gym", date(2024, 1, 1), "-10", "Health & Fitness", id="gym-1"),
        make_transaction("FitX Gym", date(2024, 1, 8), "-10", "Health & Fitness", id="gym-2"),
        make_transaction("FitX Gym", date(2024, 1, 15), "-10", "Health & Fitness", id="gym-3"),
    )


class TestRecurringAPI:
    def test_list_groups(self, client, stored):
        data = client.get("/api/v1/recurring").json()

        assert [g["id"] for g in data] == [NETFLIX_GROUP_ID, "fitx-gym_weekly_1000"]
        netflix = data[0]
        assert netflix["frequency"] == "monthly"
        assert netflix["is_subscription"] is True
        assert netflix["next_expected_date"] == "2024-04-15"
        assert netflix["transaction_ids"] == ["nf-1", "nf-2", "nf-3"]
        assert len(netflix["transactions"]) == 3

    def test_list_does_not_persist(self, client, stored):
        client.get("/api/v1/recurring")
        assert client.get("/api/v1/transactions/nf-1").json()["is_recurring"] is False

    def test_process_persists(self, client, stored):
        data = client.post("/api/v1/recurring/process").json()

        assert data["total_found"] == 2
        txn = client.get("/api/v1/transactions/gym-2").json()
        assert txn["is_recurring"] is True
        assert txn["recurring_group_id"] == "fitx-gym_weekly_1000"

    def test_summary(self, client, stored):
        data = client.get("/api/v1/recurring/summary").json()

        assert data["total_recurring"] == 2
        assert data["monthly_total"] == pytest.approx(59.29)
        assert data["yearly_total"] == pytest.approx(711.5, abs=0.05)
        assert data["by_category"]["Entertainment"]["count"] == 1
        assert data["top_subscriptions"][0]["name"] == "netflix subscription"

    def test_summary_skips_hidden(self, client, stored):
        client.post(f"/api/v1/subscriptions/{NETFLIX_GROUP_ID}/hide")

        data = client.get("/api/v1/recurring/summary").json()

        assert data["total_recurring"] == 1
        assert data["monthly_total"] == pytest.approx(43.3)

    def test_empty_store(self, client):
        assert client.get("/api/v1/recurring").json() == []
        summary = client.get("/api/v1/recurring/summary").json()
        assert summary["monthly_total"] == 0

    def test_config_dependency_override(self, client, stored):
        app = client.app
        app.dependency_overrides[get_config] = lambda: DetectionConfig(min_group_size=4)

        assert client.get("/api/v1/recurring").json() == []
