"""Row -> domain entity conversion with numeric and date coercion"""

from datetime import date, datetime
from typing import Any, Optional

from finance_tracker.domain.models import Company, Expense, Income, Subscription, Task
from finance_tracker.infrastructure.database.models import CompanyRow, ExpenseRow, IncomeRow, SubscriptionRow, TaskRow


def _to_int(value: Any) -> int:
    # Numeric columns may come back as Decimal or str depending on the driver
    return int(value) if value is not None else 0


def _to_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _to_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value))


def to_company(row: CompanyRow) -> Company:
    return Company(
        id=row.id,
        name=row.name,
        payment_type=row.payment_type,
        payment_day=row.payment_day,
        expected_amount=_to_int(row.expected_amount),
        color=row.color,
        created_at=_to_datetime(row.created_at),
    )


def to_income(row: IncomeRow) -> Income:
    return Income(
        id=row.id,
        company_id=row.company_id,
        period=row.period,
        payment_date=_to_date(row.payment_date),
        amount=_to_int(row.amount),
        status=row.status,
        received_date=_to_date(row.received_date),
        note=row.note,
        created_at=_to_datetime(row.created_at),
    )


def to_expense(row: ExpenseRow) -> Expense:
    return Expense(
        id=row.id,
        category=row.category,
        amount=_to_int(row.amount),
        description=row.description,
        raw_input=row.raw_input,
        date=_to_date(row.date),
        billing_month=row.billing_month,
        created_at=_to_datetime(row.created_at),
    )


def to_subscription(row: SubscriptionRow) -> Subscription:
    return Subscription(
        id=row.id,
        name=row.name,
        amount=_to_int(row.amount),
        billing_day=_to_int(row.billing_day),
        category=row.category,
        is_active=bool(row.is_active),
        color=row.color,
        created_at=_to_datetime(row.created_at),
    )


def to_task(row: TaskRow) -> Task:
    return Task(
        id=row.id,
        title=row.title,
        description=row.description,
        status=row.status,
        priority=row.priority,
        due_date=_to_datetime(row.due_date),
        color=row.color,
        sort_order=_to_int(row.sort_order),
        company_id=row.company_id,
        created_at=_to_datetime(row.created_at),
    )
