"""Billing endpoints under /api/billing."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from restaurant_pos_service.handlers.dependencies import get_billing_service
from restaurant_pos_service.handlers.responses import list_response, success_response
from restaurant_pos_service.models.bill_models import BillStatus, Customer, LineItem
from restaurant_pos_service.models.common import CAMEL_CASE_CONFIG
from restaurant_pos_service.services.billing_service import BillingService

router = APIRouter(prefix="/api/billing", tags=["Billing"])


class BillSubmitRequest(BaseModel):
    """Items submitted for a customer; merged into today's open bill if any."""

    model_config = CAMEL_CASE_CONFIG

    customer: Customer
    items: list[LineItem] = Field(..., min_length=1)
    payment_method: str = "cash"
    status: BillStatus | None = None


class BillReplaceRequest(BaseModel):
    """Full replacement of a bill's items."""

    model_config = CAMEL_CASE_CONFIG

    customer: Customer | None = None
    items: list[LineItem] = Field(..., min_length=1)
    status: BillStatus | None = None


class BillStatusRequest(BaseModel):
    status: BillStatus


@router.get("")
async def list_bills(
    limit: int = Query(100, ge=1), billing: BillingService = Depends(get_billing_service)
) -> JSONResponse:
    return list_response(await billing.get_all(limit=limit))


@router.get("/pending")
async def list_pending_bills(
    billing: BillingService = Depends(get_billing_service),
) -> JSONResponse:
    return list_response(await billing.get_pending())


@router.get("/today")
async def list_today_bills(billing: BillingService = Depends(get_billing_service)) -> JSONResponse:
    return list_response(await billing.get_today())


@router.get("/stats")
async def get_bill_stats(billing: BillingService = Depends(get_billing_service)) -> JSONResponse:
    stats = await billing.get_stats()
    return success_response(data=stats.to_dict())


@router.get("/find-by-phone/{phone}")
async def find_bill_by_phone(
    phone: str, billing: BillingService = Depends(get_billing_service)
) -> JSONResponse:
    """Look up today's open bill for a phone number."""
    bill = await billing.find_open_bill_for_phone_today(phone)
    return success_response(exists=bill is not None, data=bill)


@router.get("/{bill_id}")
async def get_bill(
    bill_id: str, billing: BillingService = Depends(get_billing_service)
) -> JSONResponse:
    return success_response(data=await billing.get_by_id(bill_id))


@router.post("")
async def submit_bill(
    body: BillSubmitRequest, billing: BillingService = Depends(get_billing_service)
) -> JSONResponse:
    """Create a bill, or add to today's open bill for the same phone.

    Responds 201 for a new bill and 200 for a merge.
    """
    submission = await billing.add_or_create(
        customer=body.customer,
        items=body.items,
        payment_method=body.payment_method,
        status=body.status,
    )
    return success_response(
        status_code=200 if submission.is_update else 201,
        isUpdate=submission.is_update,
        data=submission.bill,
        kitchenOrder=submission.kitchen_order,
        stockAdjustments=[adjustment.to_dict() for adjustment in submission.stock_adjustments],
    )


@router.put("/{bill_id}")
async def replace_bill(
    bill_id: str, body: BillReplaceRequest, billing: BillingService = Depends(get_billing_service)
) -> JSONResponse:
    replacement = await billing.replace(
        bill_id=bill_id, items=body.items, customer=body.customer, status=body.status
    )
    return success_response(
        data=replacement.bill,
        stockAdjustments=[adjustment.to_dict() for adjustment in replacement.stock_adjustments],
    )


@router.patch("/{bill_id}/status")
async def set_bill_status(
    bill_id: str, body: BillStatusRequest, billing: BillingService = Depends(get_billing_service)
) -> JSONResponse:
    return success_response(data=await billing.set_status(bill_id, body.status))
