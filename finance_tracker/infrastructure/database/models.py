"""SQLAlchemy ORM models for the finance tracker tables"""

import uuid
from sqlalchemy import Column, BigInteger, Boolean, Date, DateTime, ForeignKey, Integer, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class CompanyRow(Base):
    """Income source with a weekly or monthly pay cycle"""

    __tablename__ = "companies"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    payment_type = Column(Text, nullable=False)
    payment_day = Column(Integer, nullable=True)
    expected_amount = Column(BigInteger, nullable=False, default=0)
    color = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    incomes = relationship("IncomeRow", back_populates="company", cascade="all, delete-orphan")
    # No delete cascade: removing the company nulls tasks.company_id
    tasks = relationship("TaskRow")


class IncomeRow(Base):
    """Payment received (or due) from a company"""

    __tablename__ = "incomes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    period = Column(Text, nullable=False)
    payment_date = Column(Date, nullable=True)
    amount = Column(BigInteger, nullable=False)
    status = Column(Text, nullable=False, default="pending")
    received_date = Column(Date, nullable=True)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    company = relationship("CompanyRow", back_populates="incomes")


class ExpenseRow(Base):
    """Spending record; billing_month is set only on materialized subscription charges"""

    __tablename__ = "expenses"
    # NULL billing_month never collides, so manual expenses are unconstrained
    __table_args__ = (UniqueConstraint("raw_input", "billing_month", name="uq_expense_auto_charge"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    category = Column(Text, nullable=False)
    amount = Column(BigInteger, nullable=False)
    description = Column(Text, nullable=False)
    raw_input = Column(Text, nullable=False)
    date = Column(Date, nullable=False, index=True)
    billing_month = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class SubscriptionRow(Base):
    """Recurring monthly charge"""

    __tablename__ = "subscriptions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    amount = Column(BigInteger, nullable=False)
    billing_day = Column(Integer, nullable=False)
    category = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    color = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TaskRow(Base):
    """Task board card"""

    __tablename__ = "tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default="new")
    priority = Column(Text, nullable=False, default="medium")
    due_date = Column(DateTime(timezone=True), nullable=True)
    color = Column(Text, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    company_id = Column(Uuid, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
