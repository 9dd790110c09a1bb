"""Billing service: bill lifecycle, same-day merging and stock reconciliation.

Bills and menu stock are written separately with no transaction between them.
The bill write always happens first; stock adjustments that fail afterwards
are logged and reported back per item instead of undoing the bill.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import Any

from restaurant_pos_service.errors import NotFoundError, PosServiceError, ValidationError
from restaurant_pos_service.models.bill_models import (
    Bill,
    BillStatus,
    Customer,
    KitchenOrder,
    LineItem,
)
from restaurant_pos_service.models.common import generate_entity_id, round_half_up
from restaurant_pos_service.observability.decorators import traced
from restaurant_pos_service.observability.metrics import (
    record_bill_submission,
    record_stock_adjustment_failure,
)
from restaurant_pos_service.repositories.pos_repositories import BillRepository
from restaurant_pos_service.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

STATS_SCAN_LIMIT = 1000


def local_now() -> datetime:
    """Current time as an aware datetime in the server's local timezone."""
    return datetime.now().astimezone()


@dataclass
class StockAdjustment:
    """Outcome of one stock delta applied to the catalog.

    Attributes:
        item_id: Menu item that was adjusted
        delta: Signed change requested
        success: Whether the catalog accepted the change
        error_message: Failure reason if the change was not applied
    """

    item_id: str
    delta: int
    success: bool
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "itemId": self.item_id,
            "delta": self.delta,
            "success": self.success,
            "error": self.error_message,
        }


@dataclass
class BillSubmission:
    """Result of submitting items for a customer.

    Attributes:
        bill: The created or merged bill
        is_update: True when merged into an existing open bill
        kitchen_order: Kitchen view of the bill, None without kitchen items
        stock_adjustments: Per-item catalog outcomes
    """

    bill: Bill
    is_update: bool
    kitchen_order: KitchenOrder | None
    stock_adjustments: list[StockAdjustment]

    @property
    def failed_adjustments(self) -> list[StockAdjustment]:
        return [adjustment for adjustment in self.stock_adjustments if not adjustment.success]


@dataclass
class BillReplacement:
    """Result of replacing a bill's items."""

    bill: Bill
    stock_adjustments: list[StockAdjustment]


@dataclass
class BillStats:
    """Revenue summary over the scanned bills."""

    total_bills: int
    today_bills: int
    total_revenue: Decimal
    today_revenue: Decimal
    avg_order_value: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalBills": self.total_bills,
            "todayBills": self.today_bills,
            "totalRevenue": self.total_revenue,
            "todayRevenue": self.today_revenue,
            "avgOrderValue": self.avg_order_value,
        }


def merge_line_items(existing: list[LineItem], incoming: list[LineItem]) -> list[LineItem]:
    """Fold incoming lines into an existing item list.

    A line whose itemId is already on the bill adds its quantity to that line;
    anything else is appended. Lines without an itemId are never combined.

    Args:
        existing: Current bill lines
        incoming: Newly submitted lines

    Returns:
        list: New list of lines; the inputs are not modified
    """
    merged = [line.model_copy() for line in existing]
    for new_line in incoming:
        match = None
        if new_line.item_id:
            match = next((line for line in merged if line.item_id == new_line.item_id), None)

        if match is not None:
            match.quantity += new_line.quantity
        else:
            merged.append(new_line.model_copy())
    return merged


def _quantities_by_item(lines: Iterable[LineItem]) -> dict[str, int]:
    quantities: dict[str, int] = {}
    for line in lines:
        if line.item_id:
            quantities[line.item_id] = quantities.get(line.item_id, 0) + line.quantity
    return quantities


def replacement_stock_deltas(
    old_lines: list[LineItem], new_lines: list[LineItem]
) -> list[tuple[str, int]]:
    """Compute catalog stock deltas for replacing one item list with another.

    Items whose quantity grew draw stock down, items that shrank give it back,
    and items dropped from the bill restore their full old quantity.

    Returns:
        list: (item_id, signed delta) pairs, zero deltas omitted
    """
    old_quantities = _quantities_by_item(old_lines)
    new_quantities = _quantities_by_item(new_lines)

    deltas: list[tuple[str, int]] = []
    for item_id, new_quantity in new_quantities.items():
        diff = new_quantity - old_quantities.get(item_id, 0)
        if diff != 0:
            deltas.append((item_id, -diff))

    for item_id, old_quantity in old_quantities.items():
        if item_id not in new_quantities:
            deltas.append((item_id, old_quantity))

    return deltas


class BillingService:
    """Service owning the bill lifecycle.

    Keeps menu stock in step with bill contents through the CatalogService.
    """

    def __init__(
        self,
        bill_repository: BillRepository,
        catalog_service: CatalogService,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        """Initialize the BillingService.

        Args:
            bill_repository: Repository for bills
            catalog_service: Catalog used for stock adjustments
            clock: Returns the current aware local time; defines "today"
        """
        self.bill_repository = bill_repository
        self.catalog_service = catalog_service
        self.clock = clock

    def today_window(self) -> tuple[datetime, datetime]:
        """Return [local midnight today, local midnight tomorrow)."""
        midnight = self.clock().replace(hour=0, minute=0, second=0, microsecond=0)
        return midnight, midnight + timedelta(days=1)

    def _now_utc(self) -> datetime:
        return self.clock().astimezone(UTC)

    async def create(
        self,
        customer: Customer,
        items: list[LineItem],
        payment_method: str = "cash",
        status: BillStatus | None = None,
    ) -> Bill:
        """Create and store a new bill.

        Args:
            customer: Customer details
            items: Ordered lines
            payment_method: Payment method, "cash" by default
            status: Initial status, "open" by default

        Returns:
            The stored bill
        """
        now = self._now_utc()
        bill = Bill(
            bill_id=generate_entity_id("BILL"),
            customer=customer,
            items=items,
            status=status or BillStatus.OPEN,
            payment_method=payment_method or "cash",
            created_at=now,
            updated_at=now,
        )
        self.bill_repository.save(bill)
        logger.info(f"Created bill {bill.bill_id} with {len(items)} lines, total {bill.total}")
        return bill

    async def find_open_bill_for_phone_today(self, phone: str | None) -> Bill | None:
        """Find today's not-completed bill for a phone number.

        If several match, the most recently created wins.

        Args:
            phone: Customer phone, compared after trimming

        Returns:
            The matching bill, or None for a blank phone or no match
        """
        phone = (phone or "").strip()
        if not phone:
            return None

        start, end = self.today_window()
        candidates = [
            bill
            for bill in self.bill_repository.list_created_between(start, end)
            if bill.customer.normalized_phone == phone and bill.status != BillStatus.COMPLETED
        ]
        if not candidates:
            return None

        if len(candidates) > 1:
            logger.warning(
                f"Found {len(candidates)} open bills today for one phone, using the most recent"
            )
        return max(candidates, key=lambda bill: bill.created_at)

    @traced("bill.submit")
    async def add_or_create(
        self,
        customer: Customer,
        items: list[LineItem],
        payment_method: str = "cash",
        status: BillStatus | None = None,
    ) -> BillSubmission:
        """Submit items for a customer.

        Merges into today's open bill for the customer's phone when there is
        one, otherwise creates a new bill. Every submitted line with an itemId
        then draws its quantity from catalog stock.

        Args:
            customer: Customer details; phone is the merge key
            items: Newly ordered lines
            payment_method: Used only when a new bill is created
            status: Status to set, "open" by default

        Returns:
            BillSubmission describing the bill, merge flag, kitchen order and
            stock outcomes

        Raises:
            ValidationError: If no items are given
        """
        if not items:
            raise ValidationError("Please provide customer and items")

        existing = await self.find_open_bill_for_phone_today(customer.phone)

        if existing is not None:
            merged_customer = Customer.model_validate(
                {**existing.customer.model_dump(), **customer.model_dump(exclude_unset=True)}
            )
            merged = existing.model_copy(
                update={
                    "customer": merged_customer,
                    "items": merge_line_items(existing.items, items),
                    "status": status or BillStatus.OPEN,
                    "updated_at": self._now_utc(),
                }
            )
            bill = self.bill_repository.update_contents(merged)
            is_update = True
            logger.info(f"Merged {len(items)} lines into bill {bill.bill_id}, total {bill.total}")
        else:
            bill = await self.create(customer, items, payment_method, status)
            is_update = False

        adjustments = await self._apply_stock_deltas(
            [(item.item_id, -item.quantity) for item in items if item.item_id], "submit"
        )

        record_bill_submission(is_update, float(bill.total))
        return BillSubmission(
            bill=bill,
            is_update=is_update,
            kitchen_order=KitchenOrder.from_bill(bill),
            stock_adjustments=adjustments,
        )

    @traced("bill.replace", id_kwargs=("bill_id",))
    async def replace(
        self,
        bill_id: str,
        items: list[LineItem],
        customer: Customer | None = None,
        status: BillStatus | None = None,
    ) -> BillReplacement:
        """Replace a bill's items and return stock for the difference.

        Args:
            bill_id: Bill to edit
            items: Complete new item list
            customer: New customer details, previous ones if omitted
            status: New status, "open" if omitted

        Returns:
            BillReplacement with the stored bill and stock outcomes

        Raises:
            ValidationError: If no items are given
            NotFoundError: If the bill does not exist
        """
        if not items:
            raise ValidationError("Please provide items")

        existing = self.bill_repository.get(bill_id)
        if existing is None:
            raise NotFoundError("Bill not found")

        deltas = replacement_stock_deltas(existing.items, items)
        replaced = existing.model_copy(
            update={
                "customer": customer or existing.customer,
                "items": items,
                "status": status or BillStatus.OPEN,
                "updated_at": self._now_utc(),
            }
        )
        bill = self.bill_repository.update_contents(replaced)
        logger.info(f"Replaced items on bill {bill_id}, {len(deltas)} stock changes")

        adjustments = await self._apply_stock_deltas(deltas, "replace")
        return BillReplacement(bill=bill, stock_adjustments=adjustments)

    async def set_status(self, bill_id: str, status: BillStatus) -> Bill:
        """Overwrite a bill's status. Any transition is allowed."""
        bill = self.bill_repository.update_status(bill_id, status)
        logger.info(f"Bill {bill_id} status set to {status.value}")
        return bill

    async def get_all(self, limit: int = 100) -> list[Bill]:
        """Scan up to ``limit`` bills, newest first."""
        bills = self.bill_repository.list_bills(limit=limit)
        return sorted(bills, key=lambda bill: bill.created_at, reverse=True)

    async def get_by_id(self, bill_id: str) -> Bill:
        bill = self.bill_repository.get(bill_id)
        if bill is None:
            raise NotFoundError("Bill not found")
        return bill

    async def get_pending(self) -> list[Bill]:
        bills = self.bill_repository.list_by_statuses([BillStatus.OPEN, BillStatus.PENDING])
        return sorted(bills, key=lambda bill: bill.created_at, reverse=True)

    async def get_by_date_range(self, start: datetime, end: datetime) -> list[Bill]:
        return self.bill_repository.list_created_between(start, end)

    async def get_today(self) -> list[Bill]:
        start, end = self.today_window()
        return await self.get_by_date_range(start, end)

    async def get_stats(self) -> BillStats:
        """Summarize revenue.

        Scans up to 1000 bills plus today's bills on every call; there is no
        caching.
        """
        all_bills = self.bill_repository.list_bills(limit=STATS_SCAN_LIMIT)
        today_bills = await self.get_today()

        total_revenue = sum((bill.total for bill in all_bills), Decimal("0"))
        today_revenue = sum((bill.total for bill in today_bills), Decimal("0"))
        avg_order_value = (
            round_half_up(total_revenue / len(all_bills)) if all_bills else Decimal("0")
        )

        return BillStats(
            total_bills=len(all_bills),
            today_bills=len(today_bills),
            total_revenue=total_revenue,
            today_revenue=today_revenue,
            avg_order_value=avg_order_value,
        )

    async def _apply_stock_deltas(
        self, deltas: list[tuple[str, int]], operation: str
    ) -> list[StockAdjustment]:
        results: list[StockAdjustment] = []
        for item_id, delta in deltas:
            try:
                await self.catalog_service.update_stock(item_id, delta)
                results.append(StockAdjustment(item_id=item_id, delta=delta, success=True))
            except PosServiceError as e:
                logger.error(f"Failed to update stock for {item_id} by {delta}: {e}")
                record_stock_adjustment_failure(operation)
                results.append(
                    StockAdjustment(
                        item_id=item_id, delta=delta, success=False, error_message=str(e)
                    )
                )
        return results
