"""Gemini HTTP client for turning free-form text into a structured expense"""

import json
import time
from datetime import date, timedelta
from typing import Any, Dict

import httpx
from finance_tracker.domain.exceptions import ParseFailed
from finance_tracker.domain.models import ParsedExpense
from finance_tracker.config import settings
from finance_tracker.infrastructure.observability.logging import log_parse_outcome
from finance_tracker.infrastructure.observability.metrics import parse_latency_histogram, record_parse

PLACEHOLDER_API_KEY = "your_api_key_here"

PROMPT_TEMPLATE = """You are an expense-tracking assistant. Parse the input and return JSON.

Rules:
- amount: amount in VND (15k = 15000, 1tr = 1000000, 1m = 1000000)
- category: a short, fitting category name in the same language as the input (Food, Transport, Shopping, Entertainment, Bills, Health, etc.)
- description: a brief description
- date: ISO date string YYYY-MM-DD
  - "today" or no date given = {today}
  - "yesterday" = {yesterday}
  - a weekday "this week" = counted from today
  - a specific day such as "25/12" = {year}-12-25

Response format (JSON only, no markdown, no explanation):
{{"amount": number, "category": "string", "description": "string", "date": "YYYY-MM-DD"}}

Input: "{text}\""""


def build_prompt(text: str, today: date) -> str:
    return PROMPT_TEMPLATE.format(
        today=today.isoformat(),
        yesterday=(today - timedelta(days=1)).isoformat(),
        year=today.year,
        text=text,
    )


def strip_code_fence(text: str) -> str:
    """Remove a ```json ... ``` wrapper the model sometimes adds"""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.removeprefix("```json").removeprefix("```")
        cleaned = cleaned.replace("```", "").strip()
    return cleaned


def validate_parsed(payload: Any, raw_input: str) -> ParsedExpense:
    """
    Check the model's JSON reply and convert it to a ParsedExpense.

    Raises:
        ParseFailed: On a non-positive or non-numeric amount, a missing field,
            or an unreadable date
    """
    if not isinstance(payload, dict):
        raise ParseFailed("Parser reply is not a JSON object", raw_input)

    amount = payload.get("amount")
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount <= 0:
        raise ParseFailed("Invalid amount", raw_input)

    category = payload.get("category")
    description = payload.get("description")
    raw_date = payload.get("date")
    if not category or not description or not raw_date:
        raise ParseFailed("Missing required fields", raw_input)

    try:
        parsed_date = date.fromisoformat(str(raw_date))
    except ValueError as e:
        raise ParseFailed(f"Invalid date: {raw_date}", raw_input) from e

    return ParsedExpense(
        amount=round(amount),
        category=str(category),
        description=str(description),
        date=parsed_date,
    )


class GeminiClient:
    """Client for the Gemini generateContent API"""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.base_url = base_url or settings.gemini_api_base
        self.model = model or settings.gemini_model
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY

    def _request_body(self, text: str, today: date) -> Dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": build_prompt(text, today)}]}],
            "generationConfig": {
                "temperature": settings.gemini_temperature,
                "maxOutputTokens": settings.gemini_max_output_tokens,
            },
        }

    async def parse_expense(self, text: str, today: date | None = None) -> ParsedExpense:
        """
        Turn free-form text ("pho 45k", "grab 1tr yesterday") into an expense guess.

        Raises:
            ParseFailed: On missing credentials, HTTP or network errors, or an
                unusable model reply. The original text travels with the error.
        """
        start_time = time.time()
        try:
            with parse_latency_histogram.time():
                parsed = await self._parse(text, today or date.today())
        except ParseFailed as e:
            record_parse(ok=False)
            log_parse_outcome(False, (time.time() - start_time) * 1000, str(e))
            raise

        record_parse(ok=True)
        log_parse_outcome(True, (time.time() - start_time) * 1000)
        return parsed

    async def _parse(self, text: str, today: date) -> ParsedExpense:
        if not self.configured:
            raise ParseFailed("Gemini API key not configured", text)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/models/{self.model}:generateContent",
                    params={"key": self.api_key},
                    json=self._request_body(text, today),
                )
                response.raise_for_status()
                data = response.json()
            except httpx.TimeoutException as e:
                raise ParseFailed(f"Gemini API timeout after {self.timeout}s", text) from e
            except httpx.HTTPStatusError as e:
                raise ParseFailed(f"Gemini API error: {e.response.status_code}", text) from e
            except httpx.RequestError as e:
                raise ParseFailed(f"Gemini API unreachable: {e}", text) from e
            except ValueError as e:
                raise ParseFailed("Gemini API returned invalid JSON", text) from e

        try:
            reply = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            reply = None
        if not reply:
            raise ParseFailed("No response from Gemini", text)

        cleaned = strip_code_fence(reply)
        try:
            payload = json.loads(cleaned)
        except ValueError as e:
            raise ParseFailed(f"Failed to parse AI response: {cleaned}", text) from e

        return validate_parsed(payload, text)
