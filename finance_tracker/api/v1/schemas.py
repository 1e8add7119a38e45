"""Pydantic schemas for API request/response validation

Wire names are camelCase; the alias generator maps them onto the snake_case
domain fields in both directions.
"""

import datetime as dt
import uuid
from datetime import date, datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from finance_tracker.domain.models import check_payment_day
from finance_tracker.domain.period import is_week_period, parse_month_period, parse_week_period

PaymentType = Literal["weekly", "monthly"]
IncomeStatus = Literal["pending", "received"]
TaskStatus = Literal["new", "scheduled", "in_progress", "completed"]
TaskPriority = Literal["low", "medium", "high"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _check_period(period: Optional[str]) -> Optional[str]:
    if period is not None:
        if is_week_period(period):
            parse_week_period(period)
        else:
            parse_month_period(period)
    return period


# Companies

class CompanyCreate(CamelModel):
    """Request body for POST /v1/companies"""

    name: str = Field(..., min_length=1)
    payment_type: PaymentType
    payment_day: Optional[int] = Field(None, ge=1, le=31)
    expected_amount: int = Field(0, ge=0, description="Expected amount per pay cycle")
    color: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def validate_payment_day(self):
        check_payment_day(self.payment_type, self.payment_day)
        return self


class CompanyUpdate(CamelModel):
    """Request body for PATCH /v1/companies/{id}"""

    name: Optional[str] = Field(None, min_length=1)
    payment_type: Optional[PaymentType] = None
    payment_day: Optional[int] = Field(None, ge=1, le=31)
    expected_amount: Optional[int] = Field(None, ge=0)
    color: Optional[str] = Field(None, min_length=1)

    @model_validator(mode="after")
    def validate_payment_day(self):
        check_payment_day(self.payment_type, self.payment_day)
        return self


class CompanyOut(CamelModel):
    id: uuid.UUID
    name: str
    payment_type: PaymentType
    payment_day: Optional[int] = None
    expected_amount: int
    color: str
    created_at: Optional[datetime] = None


# Incomes

class IncomeCreate(CamelModel):
    """Request body for POST /v1/incomes"""

    company_id: uuid.UUID
    period: str = Field(..., description='"2025-01" for monthly, "2025-W03" for weekly')
    payment_date: Optional[date] = None
    amount: int = Field(..., gt=0)
    status: IncomeStatus = "pending"
    received_date: Optional[date] = None
    note: Optional[str] = None

    @field_validator("period")
    @classmethod
    def check_period(cls, value: Optional[str]) -> Optional[str]:
        return _check_period(value)


class IncomeUpdate(CamelModel):
    company_id: Optional[uuid.UUID] = None
    period: Optional[str] = None
    payment_date: Optional[date] = None
    amount: Optional[int] = Field(None, gt=0)
    status: Optional[IncomeStatus] = None
    received_date: Optional[date] = None
    note: Optional[str] = None

    @field_validator("period")
    @classmethod
    def check_period(cls, value: Optional[str]) -> Optional[str]:
        return _check_period(value)


class IncomeOut(CamelModel):
    id: uuid.UUID
    company_id: uuid.UUID
    period: str
    payment_date: Optional[date] = None
    amount: int
    status: IncomeStatus
    received_date: Optional[date] = None
    note: Optional[str] = None
    created_at: Optional[datetime] = None


# Expenses

class ExpenseCreate(CamelModel):
    """Request body for POST /v1/expenses"""

    category: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0)
    description: str = Field(..., min_length=1)
    raw_input: str = ""
    date: dt.date


class ExpenseUpdate(CamelModel):
    category: Optional[str] = Field(None, min_length=1)
    amount: Optional[int] = Field(None, gt=0)
    description: Optional[str] = Field(None, min_length=1)
    raw_input: Optional[str] = None
    date: Optional[dt.date] = None


class ExpenseOut(CamelModel):
    id: uuid.UUID
    category: str
    amount: int
    description: str
    raw_input: str
    date: dt.date
    billing_month: Optional[str] = None
    created_at: Optional[datetime] = None


class ParseRequest(CamelModel):
    """Request body for POST /v1/spending/parse"""

    input: str = Field(..., min_length=1, description='Free-form text such as "pho 45k"')


# Subscriptions

class SubscriptionCreate(CamelModel):
    """Request body for POST /v1/subscriptions"""

    name: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0)
    billing_day: int = Field(..., ge=1, le=31)
    category: str = Field(..., min_length=1)
    is_active: bool = True
    color: str = Field(..., min_length=1)


class SubscriptionUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    amount: Optional[int] = Field(None, gt=0)
    billing_day: Optional[int] = Field(None, ge=1, le=31)
    category: Optional[str] = Field(None, min_length=1)
    is_active: Optional[bool] = None
    color: Optional[str] = Field(None, min_length=1)


class SubscriptionOut(CamelModel):
    id: uuid.UUID
    name: str
    amount: int
    billing_day: int
    category: str
    is_active: bool
    color: str
    created_at: Optional[datetime] = None


class SubscriptionSummaryOut(CamelModel):
    """Response for GET /v1/subscriptions/summary"""

    groups: Dict[str, List[SubscriptionOut]]
    total_monthly: int
    active_count: int


class MaterializeResponse(CamelModel):
    """Response for POST /v1/subscriptions/materialize"""

    month: str
    created: List[ExpenseOut]


# Tasks

class TaskCreate(CamelModel):
    """Request body for POST /v1/tasks"""

    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: TaskStatus = "new"
    priority: TaskPriority = "medium"
    due_date: Optional[datetime] = None
    color: str = Field(..., min_length=1)
    company_id: Optional[uuid.UUID] = None


class TaskUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    color: Optional[str] = Field(None, min_length=1)
    sort_order: Optional[int] = Field(None, ge=0)
    company_id: Optional[uuid.UUID] = None


class TaskMove(CamelModel):
    """Request body for POST /v1/tasks/{id}/move"""

    status: TaskStatus
    sort_order: int = Field(..., ge=0)


class TaskOut(CamelModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    color: str
    sort_order: int
    company_id: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None


class TaskBoardOut(CamelModel):
    """Response for GET /v1/tasks/board"""

    new: List[TaskOut]
    scheduled: List[TaskOut]
    in_progress: List[TaskOut]
    completed: List[TaskOut]


# Snapshot

class SnapshotOut(CamelModel):
    """Response for GET /v1/data"""

    companies: List[CompanyOut]
    incomes: List[IncomeOut]
    expenses: List[ExpenseOut]
    subscriptions: List[SubscriptionOut]
    tasks: List[TaskOut]


# Aggregates

class ComparisonOut(CamelModel):
    diff: int
    percentage: float
    is_positive: bool


class TrendPointOut(CamelModel):
    month: str
    label: str
    amount: int
    amount_label: str
    is_current: bool


class CompanyBreakdownOut(CamelModel):
    company: CompanyOut
    total: int
    received: int
    pending: int


class CategoryShareOut(CamelModel):
    category: str
    amount: int
    percentage: float


class CategorySummaryOut(CamelModel):
    categories: List[CategoryShareOut]
    total: int


class DashboardResponse(CamelModel):
    """Response for GET /v1/dashboard"""

    month: str
    month_label: str
    expected: int
    received: int
    spending: int
    progress: float
    net_savings: int
    comparison: Optional[ComparisonOut] = None
    trend: List[TrendPointOut]
    companies: List[CompanyBreakdownOut]
    categories: CategorySummaryOut
    subscription_total: int
    subscription_count: int
    upcoming: List[SubscriptionOut]
    formatted: Dict[str, str]


class CompanyIncomesOut(CamelModel):
    company: CompanyOut
    incomes: List[IncomeOut]


class CompensationResponse(CamelModel):
    """Response for GET /v1/compensation"""

    month: str
    month_label: str
    prev_month: str
    next_month: str
    weeks: List[str]
    expected: int
    received: int
    progress: float
    weekly_companies: List[CompanyIncomesOut]
    monthly_companies: List[CompanyIncomesOut]


class ExpenseDayOut(CamelModel):
    date: dt.date
    expenses: List[ExpenseOut]


class SpendingResponse(CamelModel):
    """Response for GET /v1/spending"""

    view: Literal["day", "week", "month"]
    start: date
    end: date
    days: List[ExpenseDayOut]
    summary: CategorySummaryOut
