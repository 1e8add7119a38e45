"""CRUD endpoints for companies, incomes, expenses, subscriptions, and tasks"""

import uuid
from datetime import date
from typing import Any, Dict, FrozenSet, Type

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from finance_tracker.api.dependencies import get_store, get_today
from finance_tracker.api.v1.schemas import (
    CompanyCreate,
    CompanyOut,
    CompanyUpdate,
    ExpenseCreate,
    ExpenseOut,
    ExpenseUpdate,
    IncomeCreate,
    IncomeOut,
    IncomeUpdate,
    SnapshotOut,
    SubscriptionCreate,
    SubscriptionOut,
    SubscriptionUpdate,
    TaskCreate,
    TaskOut,
    TaskUpdate,
)
from finance_tracker.infrastructure.database.store import RecordStore

router = APIRouter()

# Columns a PATCH may explicitly clear with null; other nulls are ignored
NULLABLE_FIELDS: Dict[str, FrozenSet[str]] = {
    "company": frozenset({"payment_day"}),
    "income": frozenset({"payment_date", "received_date", "note"}),
    "expense": frozenset(),
    "subscription": frozenset(),
    "task": frozenset({"description", "due_date", "company_id"}),
}


def update_fields(kind: str, body: BaseModel) -> Dict[str, Any]:
    """Fields explicitly sent in a PATCH body, minus nulls on required columns"""
    return {
        name: value
        for name, value in body.model_dump(exclude_unset=True).items()
        if value is not None or name in NULLABLE_FIELDS[kind]
    }


def register_crud(
    kind: str,
    path: str,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    out_schema: Type[BaseModel],
) -> None:
    """Attach create/read/update/delete routes for one record kind"""

    @router.post(path, response_model=out_schema, status_code=201, name=f"create_{kind}")
    def create_record(body: create_schema, store: RecordStore = Depends(get_store)):
        return out_schema.model_validate(store.create(kind, body.model_dump()))

    @router.get(f"{path}/{{record_id}}", response_model=out_schema, name=f"get_{kind}")
    def get_record(record_id: uuid.UUID, store: RecordStore = Depends(get_store)):
        return out_schema.model_validate(store.get(kind, record_id))

    @router.patch(f"{path}/{{record_id}}", response_model=out_schema, name=f"update_{kind}")
    def update_record(record_id: uuid.UUID, body: update_schema, store: RecordStore = Depends(get_store)):
        return out_schema.model_validate(store.update(kind, record_id, update_fields(kind, body)))

    @router.delete(f"{path}/{{record_id}}", status_code=204, name=f"delete_{kind}")
    def delete_record(record_id: uuid.UUID, store: RecordStore = Depends(get_store)):
        store.delete(kind, record_id)
        return Response(status_code=204)


register_crud("company", "/companies", CompanyCreate, CompanyUpdate, CompanyOut)
register_crud("income", "/incomes", IncomeCreate, IncomeUpdate, IncomeOut)
register_crud("expense", "/expenses", ExpenseCreate, ExpenseUpdate, ExpenseOut)
register_crud("subscription", "/subscriptions", SubscriptionCreate, SubscriptionUpdate, SubscriptionOut)
register_crud("task", "/tasks", TaskCreate, TaskUpdate, TaskOut)


@router.get("/data", response_model=SnapshotOut)
def load_all(store: RecordStore = Depends(get_store)):
    """Every collection in a single consistent read"""
    return SnapshotOut.model_validate(store.load_all())


@router.post("/incomes/{income_id}/toggle-status", response_model=IncomeOut)
def toggle_income_status(
    income_id: uuid.UUID,
    today: date = Depends(get_today),
    store: RecordStore = Depends(get_store),
):
    """Flip pending/received; marking received stamps today's date"""
    return IncomeOut.model_validate(store.toggle_income_status(income_id, today))


@router.post("/subscriptions/{subscription_id}/toggle-active", response_model=SubscriptionOut)
def toggle_subscription_active(subscription_id: uuid.UUID, store: RecordStore = Depends(get_store)):
    """Pause or resume a subscription without deleting its history"""
    return SubscriptionOut.model_validate(store.toggle_subscription_active(subscription_id))
