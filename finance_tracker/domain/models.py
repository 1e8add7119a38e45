"""Domain models - pure Python dataclasses representing business entities"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

from finance_tracker.domain.exceptions import InvalidRecord

PAYMENT_TYPES = ("weekly", "monthly")
INCOME_STATUSES = ("pending", "received")
TASK_STATUSES = ("new", "scheduled", "in_progress", "completed")
TASK_PRIORITIES = ("low", "medium", "high")


def check_payment_day(payment_type: Optional[str], payment_day: Optional[int]) -> None:
    """Weekly companies are paid on a weekday: 1-7, 1 = Monday"""
    if payment_type == "weekly" and payment_day is not None and payment_day > 7:
        raise InvalidRecord("company", "Weekly payment day must be 1-7 (1 = Monday)")


@dataclass
class Company:
    """Employer or client paying income on a weekly or monthly cycle"""

    id: uuid.UUID
    name: str
    payment_type: str  # "weekly" or "monthly"
    expected_amount: int  # per pay cycle
    color: str
    payment_day: Optional[int] = None  # 1-31 monthly, 1-7 weekly (1 = Monday)
    created_at: Optional[datetime] = None


@dataclass
class Income:
    """Single payment from a company, bucketed by month or week period"""

    id: uuid.UUID
    company_id: uuid.UUID
    period: str  # "2025-01" or "2025-W03"
    amount: int
    status: str  # "pending" or "received"
    payment_date: Optional[date] = None
    received_date: Optional[date] = None
    note: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class Expense:
    """One-off spending record"""

    id: uuid.UUID
    category: str
    amount: int
    description: str
    raw_input: str
    date: date
    billing_month: Optional[str] = None  # set only on materialized recurring charges
    created_at: Optional[datetime] = None


@dataclass
class Subscription:
    """Recurring monthly charge"""

    id: uuid.UUID
    name: str
    amount: int
    billing_day: int  # 1-31
    category: str
    is_active: bool
    color: str
    created_at: Optional[datetime] = None


@dataclass
class Task:
    """Card on the task board"""

    id: uuid.UUID
    title: str
    status: str
    priority: str
    color: str
    sort_order: int
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    company_id: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None


@dataclass
class Snapshot:
    """Consistent view of every collection at one moment"""

    companies: List[Company] = field(default_factory=list)
    incomes: List[Income] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)
    subscriptions: List[Subscription] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)


@dataclass
class ExpenseDraft:
    """Expense creation request emitted by the materializer"""

    category: str
    amount: int
    description: str
    raw_input: str
    date: date
    billing_month: Optional[str] = None
    subscription_id: Optional[uuid.UUID] = None


@dataclass
class ParsedExpense:
    """Structured guess returned by the natural-language parser"""

    amount: int
    category: str
    description: str
    date: date


@dataclass
class MonthTotals:
    """Expected vs received income for one month"""

    expected: int
    received: int
    progress: float


@dataclass
class MonthComparison:
    """Current expected income against previous month's recorded income"""

    diff: int
    percentage: float
    is_positive: bool


@dataclass
class TrendPoint:
    month: str
    label: str
    amount: int
    is_current: bool


@dataclass
class CompanyBreakdown:
    company: Company
    total: int
    received: int
    pending: int


@dataclass
class CategoryShare:
    category: str
    amount: int
    percentage: float


@dataclass
class CategorySummary:
    categories: List[CategoryShare]
    total: int


@dataclass
class ExpenseDay:
    """Expenses recorded on a single calendar day"""

    date: date
    expenses: List[Expense]


@dataclass
class DashboardStats:
    """Everything the dashboard shows for the current month"""

    month: str
    expected: int
    received: int
    spending: int
    progress: float
    net_savings: int
    comparison: Optional[MonthComparison]
    trend: List[TrendPoint]
    companies: List[CompanyBreakdown]
    categories: CategorySummary
    subscription_total: int
    subscription_count: int
    upcoming: List[Subscription]


@dataclass
class SubscriptionSummary:
    groups: Dict[str, List[Subscription]]
    total_monthly: int
    active_count: int
