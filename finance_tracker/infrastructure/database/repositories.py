"""Data access layer for tracker records"""

import uuid
from typing import Any, Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from finance_tracker.infrastructure.database.models import CompanyRow, ExpenseRow, IncomeRow, SubscriptionRow, TaskRow


class RecordRepository:
    """Create/read/update/delete for one table"""

    model = None
    default_order = ()

    def __init__(self, db: Session):
        self.db = db

    def create(self, fields: Dict[str, Any]):
        """Insert a row and flush to get its ID without committing"""
        row = self.model(**fields)
        self.db.add(row)
        self.db.flush()
        self.db.refresh(row)
        return row

    def get(self, record_id: uuid.UUID) -> Optional[Any]:
        return self.db.get(self.model, record_id)

    def update(self, row, fields: Dict[str, Any]):
        """Apply only the supplied fields"""
        for name, value in fields.items():
            setattr(row, name, value)
        self.db.flush()
        return row

    def delete(self, row) -> None:
        self.db.delete(row)
        self.db.flush()

    def list_all(self) -> List[Any]:
        return self.db.query(self.model).order_by(*self.default_order).all()


class CompanyRepository(RecordRepository):
    """Repository for companies; deleting one removes its incomes"""

    model = CompanyRow
    default_order = (CompanyRow.created_at.desc(),)


class IncomeRepository(RecordRepository):
    """Repository for incomes"""

    model = IncomeRow
    default_order = (IncomeRow.created_at.desc(),)


class ExpenseRepository(RecordRepository):
    """Repository for expenses"""

    model = ExpenseRow
    default_order = (ExpenseRow.date.desc(), ExpenseRow.created_at.desc())


class SubscriptionRepository(RecordRepository):
    """Repository for subscriptions"""

    model = SubscriptionRow
    default_order = (SubscriptionRow.created_at.desc(),)


class TaskRepository(RecordRepository):
    """Repository for task board cards"""

    model = TaskRow
    default_order = (TaskRow.sort_order.asc(), TaskRow.created_at.asc())

    def max_sort_order(self, status: str) -> int:
        """Highest sort_order in a column, -1 when the column is empty"""
        value = (
            self.db.query(func.max(TaskRow.sort_order))
            .filter(TaskRow.status == status)
            .scalar()
        )
        return -1 if value is None else value
