"""Invoice routes."""

import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from timebill.api.dependencies import get_current_user, get_invoice_service
from timebill.models.base import MessageResponse, Page
from timebill.models.invoice import (
    InvoiceCreate,
    InvoiceDetailOut,
    InvoiceOut,
    InvoiceStatus,
    InvoiceStatusUpdate,
    SendInvoiceRequest,
)
from timebill.models.time_entry import UnbilledEntryOut
from timebill.services import CurrentUser, InvoiceService

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post("", response_model=InvoiceDetailOut, status_code=status.HTTP_201_CREATED)
def create_invoice(
    payload: InvoiceCreate,
    user: CurrentUser = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.create_invoice(payload, user)


@router.get("", response_model=Page[InvoiceOut])
def list_invoices(
    client_id: Optional[int] = Query(None, alias="clientId", ge=1),
    invoice_status: Optional[InvoiceStatus] = Query(None, alias="status"),
    start_date: Optional[dt.date] = Query(None, alias="startDate"),
    end_date: Optional[dt.date] = Query(None, alias="endDate"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user: CurrentUser = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    invoices, total = service.list_invoices(
        user, client_id, invoice_status, start_date, end_date, page, limit
    )
    return Page[InvoiceOut].build(
        [InvoiceOut.model_validate(invoice) for invoice in invoices], total, page, limit
    )


@router.get("/unbilled-entries/{client_id}", response_model=List[UnbilledEntryOut])
def unbilled_entries(
    client_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.unbilled_entries(client_id, user)


@router.get("/{invoice_id}", response_model=InvoiceDetailOut)
def get_invoice(
    invoice_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.get_invoice(invoice_id, user)


@router.patch("/{invoice_id}/status", response_model=InvoiceDetailOut)
def update_invoice_status(
    payload: InvoiceStatusUpdate,
    invoice_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.update_status(invoice_id, payload, user)


@router.get(
    "/{invoice_id}/download",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
def download_invoice(
    invoice_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    invoice, pdf = service.invoice_pdf(invoice_id, user)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename=invoice-{invoice.invoice_number}.pdf"
        },
    )


@router.post("/{invoice_id}/send", response_model=MessageResponse)
def send_invoice(
    payload: SendInvoiceRequest,
    invoice_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    service.send_invoice(invoice_id, payload.recipient_email, user)
    return MessageResponse(message="Invoice email sent successfully")
