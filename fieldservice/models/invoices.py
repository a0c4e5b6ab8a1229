# fieldservice/models/invoices.py

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class PaymentMethod(str, Enum):
    CARD = "card"
    CASH = "cash"
    CHECK = "check"


class LineItemIn(BaseModel):
    description: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., gt=0, decimal_places=2)


class InvoiceCreate(BaseModel):
    line_items: List[LineItemIn] = Field(..., min_length=1)
    # None falls back to the configured DEFAULT_TAX_RATE
    tax_rate: Optional[Decimal] = Field(default=None, ge=0, le=1)


class PaymentCreate(BaseModel):
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    method: PaymentMethod = PaymentMethod.CARD


class LineItemOut(BaseModel):
    id: int
    description: str
    quantity: int
    unit_price: Decimal
    total: Decimal

    class Config:
        from_attributes = True


class PaymentOut(BaseModel):
    id: int
    invoice_id: int
    amount: Decimal
    method: PaymentMethod
    created_at: datetime

    class Config:
        from_attributes = True


class InvoiceOut(BaseModel):
    id: int
    job_id: int
    job_title: Optional[str] = None
    customer_name: Optional[str] = None
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    balance: Decimal
    created_at: datetime
    line_items: List[LineItemOut] = Field(default_factory=list)
    payments: List[PaymentOut] = Field(default_factory=list)

    class Config:
        from_attributes = True


class PaymentResult(BaseModel):
    payment: PaymentOut
    invoice: InvoiceOut
