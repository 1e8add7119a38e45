"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import uuid
import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finance_tracker.api.main import create_app
from finance_tracker.infrastructure.database.models import Base
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.store import RecordStore
from finance_tracker.domain.models import Company, Expense, Income, Subscription


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
def store(db: Session) -> RecordStore:
    return RecordStore(db)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def make_company(payment_type: str = "monthly", expected_amount: int = 10_000_000, **kwargs) -> Company:
    return Company(
        id=kwargs.pop("id", uuid.uuid4()),
        name=kwargs.pop("name", f"{payment_type.title()} Co"),
        payment_type=payment_type,
        expected_amount=expected_amount,
        color=kwargs.pop("color", "#3b82f6"),
        **kwargs,
    )


def make_income(company: Company, period: str, amount: int, status: str = "received", **kwargs) -> Income:
    return Income(
        id=kwargs.pop("id", uuid.uuid4()),
        company_id=company.id,
        period=period,
        amount=amount,
        status=status,
        **kwargs,
    )


def make_expense(category: str, amount: int, day: date, **kwargs) -> Expense:
    return Expense(
        id=kwargs.pop("id", uuid.uuid4()),
        category=category,
        amount=amount,
        description=kwargs.pop("description", category),
        raw_input=kwargs.pop("raw_input", f"{category} {amount}"),
        date=day,
        **kwargs,
    )


def make_subscription(name: str, billing_day: int, amount: int = 200_000, is_active: bool = True, **kwargs) -> Subscription:
    return Subscription(
        id=kwargs.pop("id", uuid.uuid4()),
        name=name,
        amount=amount,
        billing_day=billing_day,
        category=kwargs.pop("category", "Entertainment"),
        is_active=is_active,
        color=kwargs.pop("color", "#a855f7"),
        **kwargs,
    )
