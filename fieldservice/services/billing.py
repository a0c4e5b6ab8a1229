# fieldservice/services/billing.py
"""
Invoice ledger: payments, balances and completion of paid jobs.
"""

import logging
from decimal import Decimal
from typing import List

from fieldservice.db.gateway import PersistenceGateway
from fieldservice.errors import NotFoundError, ValidationFailedError
from fieldservice.models.invoices import InvoiceOut, PaymentMethod, PaymentResult
from fieldservice.models.jobs import JobStatus
from fieldservice.money import format_money, to_money

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class BillingService:
    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    def get_all_invoices(self) -> List[InvoiceOut]:
        with self.gateway.read() as conn:
            return self.gateway.list_invoices(conn)

    def get_invoice_by_id(self, invoice_id: int) -> InvoiceOut:
        with self.gateway.read() as conn:
            invoice = self.gateway.get_invoice(conn, invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice not found")
        return invoice

    def create_payment(
        self,
        invoice_id: int,
        amount: Decimal,
        method: PaymentMethod = PaymentMethod.CARD,
    ) -> PaymentResult:
        """
        Record a payment and reduce the invoice balance.

        The invoice row is read under the write lock, so two payments against
        the same invoice cannot both pass the balance check. A payment that
        brings the balance to exactly zero marks the job Paid.
        """
        amount = to_money(amount)

        with self.gateway.transaction() as conn:
            invoice = self.gateway.get_invoice(conn, invoice_id, lock=True)
            if invoice is None:
                raise NotFoundError("Invoice not found")

            if amount <= ZERO:
                raise ValidationFailedError("Payment amount must be positive")

            balance = to_money(invoice.balance)
            if amount > balance:
                logger.warning(
                    "Rejected payment of %s on invoice %s (balance %s)",
                    amount, invoice_id, balance,
                )
                raise ValidationFailedError(
                    f"Payment amount ({format_money(amount)}) exceeds "
                    f"remaining balance ({format_money(balance)})"
                )

            payment = self.gateway.insert_payment(conn, invoice_id, amount, PaymentMethod(method).value)
            new_balance = balance - amount
            self.gateway.set_invoice_balance(conn, invoice_id, new_balance)

            if new_balance == ZERO:
                self.gateway.set_job_status(conn, invoice.job_id, JobStatus.PAID.value)
                self.gateway.add_activity(
                    conn, invoice.job_id, "Payment Completed", "Invoice paid in full"
                )
            else:
                self.gateway.add_activity(
                    conn,
                    invoice.job_id,
                    "Payment Received",
                    f"Payment of {format_money(amount)} received. "
                    f"Remaining balance: {format_money(new_balance)}",
                )

            refreshed = self.gateway.get_invoice(conn, invoice_id)

        logger.info(
            "Payment %s of %s recorded on invoice %s, balance now %s",
            payment.id, amount, invoice_id, new_balance,
        )
        if new_balance == ZERO:
            logger.info("Invoice %s paid in full; job %s marked Paid", invoice_id, invoice.job_id)

        return PaymentResult(payment=payment, invoice=refreshed)
