"""Shared test fixtures."""

import os

# Keep the lifespan hook away from the on-disk database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from datetime import date
from decimal import Decimal
import uuid

from pocketledger.database import Base
from pocketledger.dependencies import get_db
from pocketledger.main import app
from pocketledger.models.statement import Statement
from pocketledger.models.transaction import Transaction, TransactionType


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test using in-memory SQLite."""
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Create session
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def build_transaction(
    description,
    txn_date,
    amount,
    category="Other",
    type=TransactionType.expense,
    id=None,
    statement_id=None,
):
    """Unsaved transaction with the columns detection reads."""
    return Transaction(
        id=id or str(uuid.uuid4()),
        statement_id=statement_id,
        description=description,
        date=txn_date,
        amount=Decimal(str(amount)),
        currency="EUR",
        type=type,
        category=category,
        ai_categorized=False,
        is_recurring=False,
    )


@pytest.fixture
def make_transaction():
    """Factory for unsaved transactions."""
    return build_transaction


@pytest.fixture
def sample_statement(db_session):
    """Create a sample statement."""
    statement = Statement(
        id=str(uuid.uuid4()),
        file_name="march-2024.pdf",
        month="March",
        year=2024,
        opening_balance=Decimal("1000.00"),
        closing_balance=Decimal("900.00"),
    )
    db_session.add(statement)
    db_session.commit()
    db_session.refresh(statement)
    return statement


@pytest.fixture
def add_transactions(db_session, sample_statement):
    """Persist transactions on the sample statement."""
    def _add(*transactions):
        for txn in transactions:
            txn.statement_id = sample_statement.id
            db_session.add(txn)
        db_session.commit()
        return list(transactions)
    return _add


@pytest.fixture
def netflix_transactions():
    """Three monthly Netflix charges."""
    return [
        build_transaction("Netflix Subscription", date(2024, 1, 15), "-15.99", "Entertainment", id="nf-1"),
        build_transaction("Netflix Subscription", date(2024, 2, 15), "-15.99", "Entertainment", id="nf-2"),
        build_transaction("Netflix Subscription", date(2024, 3, 15), "-15.99", "Entertainment", id="nf-3"),
    ]
