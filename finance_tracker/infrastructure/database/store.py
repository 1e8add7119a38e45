"""Records store - single coordinator for every persisted change

Writes are confirmed first: a mutation is flushed and committed, and only the
committed record is handed back. Any database error rolls the session back and
surfaces as StoreOperationFailed, leaving previously returned state untouched.
A write that breaks a uniqueness or reference constraint surfaces as
RecordConflict instead.
"""

import uuid
from contextlib import contextmanager
from datetime import date
from typing import Any, Callable, Dict, Iterator, Optional, Tuple
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from finance_tracker.domain.exceptions import RecordConflict, RecordNotFound, StoreOperationFailed
from finance_tracker.domain.materializer import billing_month_for
from finance_tracker.domain.models import (
    Expense,
    ExpenseDraft,
    Income,
    Snapshot,
    Subscription,
    Task,
    check_payment_day,
)
from finance_tracker.infrastructure.database import mapping
from finance_tracker.infrastructure.database.repositories import (
    CompanyRepository,
    ExpenseRepository,
    IncomeRepository,
    RecordRepository,
    SubscriptionRepository,
    TaskRepository,
)
from finance_tracker.infrastructure.observability.logging import log_recurring_charge, log_store_failure
from finance_tracker.infrastructure.observability.metrics import record_recurring_charge, store_failure_counter


class RecordStore:
    """Create/update/delete/load for companies, incomes, expenses, subscriptions, and tasks"""

    def __init__(self, db: Session):
        self.db = db
        self.tasks = TaskRepository(db)
        self._kinds: Dict[str, Tuple[RecordRepository, Callable[[Any], Any]]] = {
            "company": (CompanyRepository(db), mapping.to_company),
            "income": (IncomeRepository(db), mapping.to_income),
            "expense": (ExpenseRepository(db), mapping.to_expense),
            "subscription": (SubscriptionRepository(db), mapping.to_subscription),
            "task": (self.tasks, mapping.to_task),
        }

    def _failed(self, operation: str, error: Exception) -> StoreOperationFailed:
        self.db.rollback()
        store_failure_counter.labels(operation=operation).inc()
        log_store_failure(operation, error)
        return StoreOperationFailed(operation, str(error))

    @contextmanager
    def _write(self, operation: str) -> Iterator[None]:
        """Commit on success; roll back on any failure"""
        try:
            yield
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise RecordConflict(operation, str(e.orig)) from e
        except SQLAlchemyError as e:
            raise self._failed(operation, e) from e
        except Exception:
            self.db.rollback()
            raise

    def _lookup(self, kind: str, record_id: uuid.UUID):
        repo, _ = self._kinds[kind]
        row = repo.get(record_id)
        if row is None:
            raise RecordNotFound(kind, record_id)
        return row

    def load_all(self) -> Snapshot:
        """Read every collection in one pass"""
        def rows(kind: str) -> list:
            repo, to_entity = self._kinds[kind]
            return [to_entity(row) for row in repo.list_all()]

        try:
            return Snapshot(
                companies=rows("company"),
                incomes=rows("income"),
                expenses=rows("expense"),
                subscriptions=rows("subscription"),
                tasks=rows("task"),
            )
        except SQLAlchemyError as e:
            raise self._failed("load_all", e) from e

    def get(self, kind: str, record_id: uuid.UUID):
        _, to_entity = self._kinds[kind]
        try:
            return to_entity(self._lookup(kind, record_id))
        except SQLAlchemyError as e:
            raise self._failed(f"get_{kind}", e) from e

    def _prepare(self, kind: str, fields: Dict[str, Any], row=None) -> Dict[str, Any]:
        """Check cross-record rules against the stored row merged with the new fields"""
        def merged(name: str) -> Any:
            return fields[name] if name in fields else getattr(row, name, None)

        if kind == "company":
            check_payment_day(merged("payment_type"), merged("payment_day"))
        elif kind in ("income", "task") and fields.get("company_id") is not None:
            self._lookup("company", fields["company_id"])
        elif kind == "expense" and (row is None or "date" in fields or "raw_input" in fields):
            # billing_month follows the charge's date so a moved charge frees its old month
            fields = {**fields, "billing_month": billing_month_for(merged("raw_input") or "", merged("date"))}
        return fields

    def create(self, kind: str, fields: Dict[str, Any]):
        repo, to_entity = self._kinds[kind]
        with self._write(f"create_{kind}"):
            fields = self._prepare(kind, fields)
            if kind == "task":
                fields = {**fields, "sort_order": self.tasks.max_sort_order(fields["status"]) + 1}
            row = repo.create(fields)
        return to_entity(row)

    def update(self, kind: str, record_id: uuid.UUID, fields: Dict[str, Any]):
        repo, to_entity = self._kinds[kind]
        with self._write(f"update_{kind}"):
            row = self._lookup(kind, record_id)
            row = repo.update(row, self._prepare(kind, fields, row))
        return to_entity(row)
    def delete(self, kind: str, record_id: uuid.UUID) -> None:
        repo, _ = self._kinds[kind]
        with self._write(f"delete_{kind}"):
            repo.delete(self._lookup(kind, record_id))

    def toggle_income_status(self, income_id: uuid.UUID, today: date) -> Income:
        """pending <-> received, stamping or clearing the received date"""
        row = self._lookup("income", income_id)
        if row.status == "pending":
            fields = {"status": "received", "received_date": today}
        else:
            fields = {"status": "pending", "received_date": None}
        return self.update("income", income_id, fields)

    def toggle_subscription_active(self, subscription_id: uuid.UUID) -> Subscription:
        row = self._lookup("subscription", subscription_id)
        return self.update("subscription", subscription_id, {"is_active": not row.is_active})

    def move_task(self, task_id: uuid.UUID, status: str, sort_order: int) -> Task:
        return self.update("task", task_id, {"status": status, "sort_order": sort_order})

    def create_recurring_charge(self, draft: ExpenseDraft) -> Optional[Expense]:
        """
        Insert a materialized subscription charge.

        Returns None when the (raw_input, billing_month) constraint shows the
        charge already exists.
        """
        repo, _ = self._kinds["expense"]
        subscription_id = str(draft.subscription_id)
        try:
            row = repo.create({
                "category": draft.category,
                "amount": draft.amount,
                "description": draft.description,
                "raw_input": draft.raw_input,
                "date": draft.date,
                "billing_month": draft.billing_month,
            })
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            record_recurring_charge(created=False)
            log_recurring_charge(subscription_id, draft.billing_month, created=False)
            return None
        except SQLAlchemyError as e:
            raise self._failed("create_recurring_charge", e) from e

        record_recurring_charge(created=True)
        log_recurring_charge(subscription_id, draft.billing_month, created=True)
        return mapping.to_expense(row)
