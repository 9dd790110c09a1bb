"""Custom metrics for the restaurant POS service."""

from opentelemetry import metrics

from restaurant_pos_service.observability.config import SERVICE_NAME

meter = metrics.get_meter(SERVICE_NAME)

bills_created_counter = meter.create_counter(
    name="bills_created_total",
    description="Total number of new bills created",
    unit="1",
)

bills_merged_counter = meter.create_counter(
    name="bills_merged_total",
    description="Total number of submissions merged into an open bill",
    unit="1",
)

stock_adjustment_failure_counter = meter.create_counter(
    name="stock_adjustment_failure_total",
    description="Total number of menu stock adjustments that failed",
    unit="1",
)

bill_total_histogram = meter.create_histogram(
    name="bill_total_amount",
    description="Bill totals after each create or merge",
    unit="1",
)


def record_bill_submission(is_update: bool, total: float) -> None:
    """Record a bill submission.

    Args:
        is_update: Whether the submission merged into an existing bill
        total: Bill total after the submission
    """
    if is_update:
        bills_merged_counter.add(1)
    else:
        bills_created_counter.add(1)
    bill_total_histogram.record(total, {"merged": is_update})


def record_stock_adjustment_failure(operation: str) -> None:
    """Record a failed stock adjustment.

    Args:
        operation: Billing operation that triggered it ("submit" or "replace")
    """
    stock_adjustment_failure_counter.add(1, {"operation": operation})
