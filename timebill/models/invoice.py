"""Invoice payloads and responses."""

import datetime as dt
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from timebill.calculators.invoice_calculator import quantize_money
from timebill.models.base import BaseDataModel, Money, ResponseModel

InvoiceStatus = Literal["draft", "sent", "paid", "overdue", "cancelled"]


class InvoiceItemInput(BaseDataModel):
    description: str
    quantity: Decimal = Field(..., ge=Decimal("0.01"))
    unit_price: Decimal = Field(..., ge=Decimal("0"))
    time_entry_ids: List[int] = Field(default_factory=list)

    @field_validator("quantity", "unit_price")
    @classmethod
    def round_to_cents(cls, v: Decimal) -> Decimal:
        """Round to the two decimals the invoice_items columns store.

        The line amount is computed from the rounded values, so a reloaded
        item still satisfies ``amount == quantity * rate``.
        """
        return quantize_money(v)


class InvoiceCreate(BaseDataModel):
    client_id: int = Field(..., ge=1)
    issue_date: dt.date
    # Defaults to issue date + DEFAULT_PAYMENT_DAYS
    due_date: Optional[dt.date] = None
    tax_rate: Decimal = Field(Decimal("0"), ge=Decimal("0"), le=Decimal("100"))
    notes: Optional[str] = None
    items: List[InvoiceItemInput] = Field(..., min_length=1)

    @field_validator("tax_rate")
    @classmethod
    def round_tax_rate(cls, v: Decimal) -> Decimal:
        return quantize_money(v)


class InvoiceStatusUpdate(BaseDataModel):
    status: InvoiceStatus
    notes: Optional[str] = None


class SendInvoiceRequest(BaseDataModel):
    recipient_email: str


class InvoiceItemOut(ResponseModel):
    id: int
    invoice_id: int
    description: str
    quantity: Money
    rate: Money
    amount: Money
    time_entry_ids: List[int] = Field(default_factory=list)
    created_at: Optional[dt.datetime] = None


class InvoiceClientOut(ResponseModel):
    id: int
    company_name: Optional[str] = None
    first_name: str
    last_name: str
    email: str


class InvoiceOut(ResponseModel):
    id: int
    client_id: int
    invoice_number: str
    issue_date: dt.date
    due_date: dt.date
    status: InvoiceStatus
    subtotal: Money
    tax_rate: Money
    tax_amount: Money
    total_amount: Money
    notes: Optional[str] = None
    paid_at: Optional[dt.datetime] = None
    item_count: int = 0
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class InvoiceDetailOut(InvoiceOut):
    client: InvoiceClientOut
    items: List[InvoiceItemOut] = Field(default_factory=list)
