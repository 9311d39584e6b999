"""Prometheus metrics for monitoring forecast risk, coaching output and provider health"""

from prometheus_client import Counter, Histogram

from forecast_gateway.domain.models import ForecastResult

# Forecast metrics
forecast_counter = Counter(
    "forecast_runs_total",
    "Total forecasts computed",
    ["risk"],  # at_risk | healthy
)

coach_tip_counter = Counter(
    "coach_tips_total",
    "Cash coach tips emitted",
    ["action"],  # apply-plan | none
)

plan_counter = Counter(
    "stay_positive_plan_total",
    "Stay-positive plan transforms requested",
    ["outcome"],  # applied | unchanged
)

# Bank API metrics
bank_fetch_failures_counter = Counter(
    "bank_fetch_failures_total",
    "Failed bank API calls",
    ["resource"],  # account | purchases | deposits | bills | accounts
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_forecast(result: ForecastResult) -> None:
    """Record risk outcome and tip mix for one forecast"""
    forecast_counter.labels(risk="at_risk" if result.risk else "healthy").inc()
    for tip in result.tips:
        coach_tip_counter.labels(action=tip.action).inc()


def record_plan(changed: bool) -> None:
    plan_counter.labels(outcome="applied" if changed else "unchanged").inc()
