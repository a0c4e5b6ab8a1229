# fieldservice/api/invoices.py

from typing import List

from fastapi import APIRouter, Depends

from fieldservice.api.deps import get_billing_service
from fieldservice.models.invoices import InvoiceOut, PaymentCreate, PaymentResult
from fieldservice.services.billing import BillingService

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.get("/", response_model=List[InvoiceOut])
def list_invoices(
    service: BillingService = Depends(get_billing_service),
) -> List[InvoiceOut]:
    """
    Return all invoices, newest first, with line items and payments.
    """
    return service.get_all_invoices()


@router.get("/{invoice_id}", response_model=InvoiceOut)
def get_invoice(
    invoice_id: int,
    service: BillingService = Depends(get_billing_service),
) -> InvoiceOut:
    return service.get_invoice_by_id(invoice_id)


@router.post("/{invoice_id}/payments", response_model=PaymentResult, status_code=201)
def create_payment(
    invoice_id: int,
    payload: PaymentCreate,
    service: BillingService = Depends(get_billing_service),
) -> PaymentResult:
    """
    Record a payment. Rejected when it exceeds the remaining balance.
    """
    return service.create_payment(invoice_id, payload.amount, payload.method)
