"""Tests for statement import and deletion."""

from datetime import date
from decimal import Decimal

import pytest

from pocketledger.models.category_rule import CategoryRule
from pocketledger.models.transaction import Transaction, TransactionType
from pocketledger.schemas.statement import StatementImportRequest
from pocketledger.schemas.transaction import TransactionCreate
from pocketledger.services import statement_service


def _request(file_name="jan-mar-2024.pdf", transactions=None):
    return StatementImportRequest(
        file_name=file_name,
        month="March",
        year=2024,
        opening_balance=Decimal("1000"),
        closing_balance=Decimal("2920.03"),
        transactions=transactions or [],
    )


def _line(description, txn_date, amount, type=TransactionType.expense, category=None, id=None):
    return TransactionCreate(
        id=id,
        description=description,
        date=txn_date,
        amount=Decimal(amount),
        type=type,
        category=category,
    )


class TestImportStatement:
    @pytest.mark.asyncio
    async def test_import_categorizes_and_detects(self, db_session):
        db_session.add(CategoryRule(id="r1", pattern="netflix", category="Entertainment", is_regex=False))
        db_session.commit()

        request = _request(transactions=[
            _line("Netflix Subscription", date(2024, 1, 15), "-15.99", id="nf-1"),
            _line("Netflix Subscription", date(2024, 2, 15), "-15.99", id="nf-2"),
            _line("Netflix Subscription", date(2024, 3, 15), "-15.99", id="nf-3"),
            _line("ACME Gehalt", date(2024, 1, 28), "3000", type=TransactionType.income, category="Salary"),
            _line("Bakery", date(2024, 2, 2), "-4.00"),
        ])

        statement, categorized, groups = await statement_service.import_statement(db_session, request, use_ai=False)

        assert categorized == 4
        assert statement.total_income == Decimal("3000.00")
        assert statement.total_expenses == Decimal("51.97")
        assert len(statement.transactions) == 5
        assert [g.id for g in groups] == ["netflix-subscription_monthly_1599"]

        netflix = db_session.get(Transaction, "nf-1")
        assert netflix.category == "Entertainment"
        assert netflix.is_recurring is True
        assert netflix.recurring_group_id == "netflix-subscription_monthly_1599"
        assert netflix.merchant_name == "netflix subscription"

    @pytest.mark.asyncio
    async def test_detection_spans_statements(self, db_session):
        first = _request("jan.pdf", [_line("Spotify Premium", date(2024, 1, 15), "-9.99", category="Entertainment")])
        second = _request("feb.pdf", [_line("Spotify Premium", date(2024, 2, 15), "-9.99", category="Entertainment")])

        _, _, groups = await statement_service.import_statement(db_session, first, use_ai=False)
        assert groups == []

        _, _, groups = await statement_service.import_statement(db_session, second, use_ai=False)
        assert len(groups) == 1
        assert groups[0].frequency == "monthly"


class TestDeleteStatement:
    @pytest.mark.asyncio
    async def test_delete_resets_annotations(self, db_session):
        first = _request("jan.pdf", [
            _line("Spotify Premium", date(2024, 1, 15), "-9.99", category="Entertainment", id="sp-1"),
        ])
        second = _request("feb.pdf", [
            _line("Spotify Premium", date(2024, 2, 15), "-9.99", category="Entertainment", id="sp-2"),
        ])
        await statement_service.import_statement(db_session, first, use_ai=False)
        statement, _, _ = await statement_service.import_statement(db_session, second, use_ai=False)

        assert statement_service.delete_statement(db_session, statement.id) is True

        assert db_session.get(Transaction, "sp-2") is None
        remaining = db_session.get(Transaction, "sp-1")
        assert remaining.is_recurring is False
        assert remaining.recurring_group_id is None

    def test_delete_unknown(self, db_session):
        assert statement_service.delete_statement(db_session, "missing") is False

    @pytest.mark.asyncio
    async def test_list_statements(self, db_session):
        await statement_service.import_statement(db_session, _request("jan.pdf"), use_ai=False)
        await statement_service.import_statement(db_session, _request("feb.pdf"), use_ai=False)

        assert len(statement_service.get_statements(db_session)) == 2
