"""Prometheus metrics for recurring processing, salary credits, timeline builds and goal quotes"""

from prometheus_client import Counter, Histogram
from wealth_gateway.domain.models import SalaryCreditResult, SchedulerResult

# Recurring scheduler metrics
recurring_materialized_counter = Counter(
    "wealth_recurring_materialized_total",
    "Ledger entries created from recurring templates",
)

recurring_skipped_counter = Counter(
    "wealth_recurring_skipped_total",
    "Due recurring templates skipped during a batch",
    ["reason"],  # invalid_payload | conflict | error
)

# Salary auto-credit metrics
salary_credited_counter = Counter(
    "wealth_salary_credited_total",
    "Salary credits booked as income",
)

salary_skipped_counter = Counter(
    "wealth_salary_skipped_total",
    "Salary credits not booked on a run",
    ["reason"],  # already_credited | error
)

# Timeline metrics
timeline_buckets_histogram = Histogram(
    "wealth_timeline_buckets",
    "Months in generated net worth timelines",
    buckets=[1, 3, 6, 12, 24, 60, 120, 240],
)

# Goal metrics
goal_quote_counter = Counter(
    "wealth_goal_quotes_total",
    "Required contribution quotes computed",
    ["outcome"],  # feasible | infeasible
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_scheduler_run(result: SchedulerResult) -> None:
    """Record created and skipped counts for one batch"""
    recurring_materialized_counter.inc(result.created_count)
    for _, reason in result.skipped:
        recurring_skipped_counter.labels(reason=reason).inc()


def record_goal_quote(feasible: bool) -> None:
    goal_quote_counter.labels(outcome="feasible" if feasible else "infeasible").inc()


def record_salary_run(result: SalaryCreditResult) -> None:
    salary_credited_counter.inc(result.credited_count)
    for _, reason in result.skipped:
        salary_skipped_counter.labels(reason=reason).inc()
