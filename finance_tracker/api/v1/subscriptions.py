"""Subscription overview and monthly charge materialization"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Request

from finance_tracker.api.dependencies import get_request_id, get_store, get_today
from finance_tracker.api.v1.schemas import ExpenseOut, MaterializeResponse, SubscriptionSummaryOut
from finance_tracker.domain.aggregation import summarize_subscriptions
from finance_tracker.domain.materializer import plan_recurring_charges
from finance_tracker.domain.period import month_period_of
from finance_tracker.infrastructure.database.store import RecordStore

router = APIRouter()


@router.get("/subscriptions/summary", response_model=SubscriptionSummaryOut)
def get_subscription_summary(store: RecordStore = Depends(get_store)):
    """Subscriptions grouped by category with the active monthly total"""
    return SubscriptionSummaryOut.model_validate(summarize_subscriptions(store.load_all().subscriptions))


@router.post("/subscriptions/materialize", response_model=MaterializeResponse)
def materialize_recurring_charges(
    request: Request,
    today: date = Depends(get_today),
    store: RecordStore = Depends(get_store),
):
    """
    Turn this month's due subscription charges into expenses.

    Safe to call repeatedly: charges already present are skipped, and a
    concurrent duplicate is rejected by the store. A store failure aborts the
    run; the next call picks up whatever was not created.
    """
    request_id = get_request_id(request)
    snapshot = store.load_all()

    created = []
    for draft in plan_recurring_charges(snapshot.subscriptions, snapshot.expenses, today):
        expense = store.create_recurring_charge(draft)
        if expense is not None:
            created.append(ExpenseOut.model_validate(expense))

    logging.info(
        "Recurring charges materialized",
        extra={"request_id": request_id, "created_count": len(created)},
    )
    return MaterializeResponse(month=month_period_of(today), created=created)
