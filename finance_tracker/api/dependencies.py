"""Dependency injection for FastAPI endpoints"""

from datetime import date
from typing import Optional

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from finance_tracker.infrastructure.clients.gemini import GeminiClient
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.store import RecordStore


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    """Provide the records store bound to this request's session"""
    return RecordStore(db)


def get_gemini_client() -> GeminiClient:
    """Provide natural-language expense parser instance"""
    return GeminiClient()


def get_today(as_of: Optional[date] = Query(None, alias="asOf", description="Reference date, defaults to today")) -> date:
    """Reference date for time-relative figures"""
    return as_of or date.today()
