"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from fingrip_gateway.api.main import create_app
from fingrip_gateway.infrastructure.database.models import Base
from fingrip_gateway.infrastructure.database.session import get_db
from fingrip_gateway.domain.models import FinancialCategory, Transaction, TransactionType


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def app(db: Session):
    """FastAPI app wired to the test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Create FastAPI test client with test database"""
    return TestClient(app)


def make_transaction(
    amount: float,
    type: TransactionType = TransactionType.EXPENSE,
    category: FinancialCategory = FinancialCategory.OTHER,
    day: date | None = None,
    description: str = "Test",
) -> Transaction:
    return Transaction(
        date=day or date.today(),
        amount=amount,
        type=type,
        category=category,
        description=description,
    )


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """One month of salary and typical spending"""
    base_date = date.today() - timedelta(days=30)
    return [
        make_transaction(4000.0, TransactionType.INCOME, FinancialCategory.INCOME, base_date, "Salary"),
        make_transaction(1100.0, category=FinancialCategory.HOUSING, day=base_date, description="Rent"),
        make_transaction(350.0, category=FinancialCategory.FOOD, day=base_date + timedelta(days=3), description="Groceries"),
        make_transaction(150.0, category=FinancialCategory.DEBT, day=base_date + timedelta(days=5), description="Loan"),
        make_transaction(300.0, category=FinancialCategory.INSURANCE, day=base_date + timedelta(days=6), description="Insurance"),
        make_transaction(200.0, category=FinancialCategory.INVESTMENTS, day=base_date + timedelta(days=7), description="ETF"),
        make_transaction(250.0, category=FinancialCategory.ENTERTAINMENT, day=base_date + timedelta(days=9), description="Concert"),
        make_transaction(500.0, TransactionType.TRANSFER, FinancialCategory.SAVINGS, base_date, "To savings"),
    ]
