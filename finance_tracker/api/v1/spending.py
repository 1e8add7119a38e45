"""Spending views and natural-language expense entry"""

import logging
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from finance_tracker.api.dependencies import get_gemini_client, get_request_id, get_store, get_today
from finance_tracker.api.v1.schemas import ExpenseOut, ParseRequest, SpendingResponse
from finance_tracker.domain.aggregation import (
    expenses_in_range,
    group_expenses_by_day,
    summarize_categories,
    view_range,
)
from finance_tracker.domain.exceptions import ParseFailed
from finance_tracker.infrastructure.clients.gemini import GeminiClient
from finance_tracker.infrastructure.database.store import RecordStore

router = APIRouter()


@router.get("/spending", response_model=SpendingResponse)
def get_spending(
    view: Literal["day", "week", "month"] = Query("month"),
    day: Optional[date] = Query(None, alias="date", description="Any date inside the period to show"),
    today: date = Depends(get_today),
    store: RecordStore = Depends(get_store),
):
    """Expenses for a day, Monday-start week, or month, grouped by day with a category split"""
    start, end = view_range(view, day or today)
    expenses = expenses_in_range(store.load_all().expenses, start, end)

    return SpendingResponse.model_validate(
        {
            "view": view,
            "start": start,
            "end": end,
            "days": group_expenses_by_day(expenses),
            "summary": summarize_categories(expenses),
        }
    )


@router.post("/spending/parse", response_model=ExpenseOut, status_code=201)
async def parse_and_record_expense(
    request_body: ParseRequest,
    request: Request,
    today: date = Depends(get_today),
    store: RecordStore = Depends(get_store),
    gemini_client: GeminiClient = Depends(get_gemini_client),
):
    """
    Record an expense typed as free-form text.

    Flow:
    1. Ask the parser for amount, category, description, and date
    2. Store the expense with the original text as raw input
    3. On a parse failure return 422 and echo the input back for editing
    """
    request_id = get_request_id(request)

    try:
        parsed = await gemini_client.parse_expense(request_body.input, today)
    except ParseFailed as e:
        logging.warning(f"Expense parse failed: {e}", extra={"request_id": request_id})
        return JSONResponse(status_code=422, content={"detail": str(e), "input": e.raw_input})

    expense = store.create(
        "expense",
        {
            "category": parsed.category,
            "amount": parsed.amount,
            "description": parsed.description,
            "raw_input": request_body.input,
            "date": parsed.date,
        },
    )
    return ExpenseOut.model_validate(expense)
