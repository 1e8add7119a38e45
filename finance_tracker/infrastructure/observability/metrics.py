"""Prometheus metrics for store health, recurring charges, and the expense parser"""

from prometheus_client import Counter, Histogram

# Store metrics
store_failure_counter = Counter(
    "finance_store_failures_total",
    "Store operations rolled back on database errors",
    ["operation"],
)

# Recurring charge metrics
recurring_charge_counter = Counter(
    "finance_recurring_charges_total",
    "Subscription charges turned into expenses",
    ["outcome"],  # created | duplicate
)

# Parser metrics
parse_counter = Counter(
    "finance_expense_parse_total",
    "Natural-language expense parse attempts",
    ["outcome"],  # ok | failed
)

parse_latency_histogram = Histogram(
    "finance_expense_parse_seconds",
    "Expense parser round-trip time",
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_recurring_charge(created: bool) -> None:
    recurring_charge_counter.labels(outcome="created" if created else "duplicate").inc()


def record_parse(ok: bool) -> None:
    parse_counter.labels(outcome="ok" if ok else "failed").inc()
