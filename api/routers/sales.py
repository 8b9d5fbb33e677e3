"""
Sales API Endpoints.

CRUD for sale records plus marking a bounty month paid/unpaid.
"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from api.deps import get_clock, get_sale_repository
from api.models import (
    BountyMonthModel,
    BountyMonthResponse,
    PaymentModel,
    SaleCreateRequest,
    SaleListResponse,
    SaleResponse,
    SaleUpdateRequest,
)
from domain.sale import BountyMonth, LineStatus, Payment, SaleRecord
from domain.stats import month_amount, quantize_money
from repositories.base import SaleRepository
from services.sale_service import (
    Clock,
    DuplicateIdentifier,
    SaleInput,
    SaleNotFound,
    SaleUpdate,
    SaleValidationError,
    create_sale,
    delete_sale,
    toggle_bounty_paid,
    update_sale,
)

router = APIRouter()


def _to_bounty_months(months: List[BountyMonthModel]) -> List[BountyMonth]:
    return [
        BountyMonth(
            month_number=m.month_number,
            paid=m.paid,
            payments=tuple(Payment(type=p.type, amount=p.amount) for p in m.payments),
            date_paid=m.date_paid,
            notes=m.notes,
        )
        for m in months
    ]


def sale_to_response(sale: SaleRecord) -> SaleResponse:
    if isinstance(sale.activation_date, date):
        activation = sale.activation_date.isoformat()
    else:
        activation = str(sale.activation_date)

    return SaleResponse(
        sale_id=sale.sale_id,
        imei=sale.imei,
        store_location=sale.store_location,
        category=sale.category,
        email=sale.email,
        activation_date=activation,
        status=sale.status,
        customer_name=sale.customer_name,
        customer_pin=sale.customer_pin,
        notes=sale.notes,
        created_at=sale.created_at,
        paid_month_count=sale.paid_month_count,
        bounty_tracking=[
            BountyMonthResponse(
                month_number=m.month_number,
                paid=m.paid,
                payments=[PaymentModel(type=p.type, amount=p.amount) for p in m.payments],
                amount=quantize_money(month_amount(m)),
                date_paid=m.date_paid,
                notes=m.notes,
            )
            for m in sale.bounty_tracking
        ],
    )


def _not_found(e: SaleNotFound) -> HTTPException:
    return HTTPException(status_code=404, detail=str(e))


@router.get(
    "/sales",
    response_model=SaleListResponse,
    summary="List Sales",
    description="List recorded sales, optionally only active or deactivated lines."
)
def list_sales(
    status: Optional[LineStatus] = Query(None, description="Filter by line status ('active' or 'deactivated')"),
    repo: SaleRepository = Depends(get_sale_repository),
):
    items = [sale_to_response(s) for s in repo.list_sales(status=status)]
    return SaleListResponse(items=items, total_count=len(items))


@router.post(
    "/sales",
    response_model=SaleResponse,
    status_code=201,
    summary="Record Sale",
    description="Record a new sale. IMEI must be unique; six bounty months are always created."
)
def record_sale(
    request: SaleCreateRequest,
    repo: SaleRepository = Depends(get_sale_repository),
    clock: Clock = Depends(get_clock),
):
    """
    Record a new sale.

    **Errors:**
    - 409: a sale with this IMEI already exists
    - 422: invalid input (e.g. negative payment amount, duplicate month)
    """
    data = SaleInput(
        imei=request.imei,
        store_location=request.store_location,
        category=request.category,
        email=request.email,
        activation_date=request.activation_date,
        customer_name=request.customer_name,
        customer_pin=request.customer_pin,
        notes=request.notes,
        status=request.status,
        bounty_tracking=_to_bounty_months(request.bounty_tracking),
    )
    try:
        sale = create_sale(repo, data, clock=clock)
    except DuplicateIdentifier as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SaleValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return sale_to_response(sale)


@router.get("/sales/{sale_id}", response_model=SaleResponse, summary="Get Sale")
def get_sale(sale_id: UUID, repo: SaleRepository = Depends(get_sale_repository)):
    sale = repo.get_sale(sale_id)
    if sale is None:
        raise HTTPException(status_code=404, detail=f"Sale not found: {sale_id}")
    return sale_to_response(sale)


@router.put(
    "/sales/{sale_id}",
    response_model=SaleResponse,
    summary="Update Sale",
    description="Partially update a sale. Supplying bounty_tracking replaces all months."
)
def edit_sale(
    sale_id: UUID,
    request: SaleUpdateRequest,
    repo: SaleRepository = Depends(get_sale_repository),
):
    changes = SaleUpdate(
        imei=request.imei,
        store_location=request.store_location,
        category=request.category,
        email=request.email,
        activation_date=request.activation_date,
        customer_name=request.customer_name,
        customer_pin=request.customer_pin,
        notes=request.notes,
        status=request.status,
        bounty_tracking=(
            _to_bounty_months(request.bounty_tracking) if request.bounty_tracking is not None else None
        ),
    )
    try:
        sale = update_sale(repo, sale_id, changes)
    except SaleNotFound as e:
        raise _not_found(e)
    except DuplicateIdentifier as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SaleValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return sale_to_response(sale)


@router.delete("/sales/{sale_id}", status_code=204, summary="Delete Sale")
def remove_sale(sale_id: UUID, repo: SaleRepository = Depends(get_sale_repository)):
    try:
        delete_sale(repo, sale_id)
    except SaleNotFound as e:
        raise _not_found(e)
    return Response(status_code=204)


@router.post(
    "/sales/{sale_id}/bounty/{month_number}/toggle",
    response_model=SaleResponse,
    summary="Toggle Bounty Paid",
    description="Mark a bounty month paid (or back to unpaid) and stamp the date paid with today's date."
)
def toggle_bounty(
    sale_id: UUID,
    month_number: int,
    repo: SaleRepository = Depends(get_sale_repository),
    clock: Clock = Depends(get_clock),
):
    try:
        sale = toggle_bounty_paid(repo, sale_id, month_number, clock=clock)
    except SaleNotFound as e:
        raise _not_found(e)
    except SaleValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return sale_to_response(sale)
