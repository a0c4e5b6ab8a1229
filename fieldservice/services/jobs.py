# fieldservice/services/jobs.py
"""
Job lifecycle: creation, status transitions, scheduling and invoicing.

    New -> Scheduled -> Done -> Invoiced -> Paid

Each operation runs in one gateway transaction, so the job row, the child
entity and the activity entry are written together or not at all.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy.exc import IntegrityError

from fieldservice.config import settings
from fieldservice.db.gateway import PersistenceGateway, to_naive_utc
from fieldservice.errors import (
    ConflictError,
    NotFoundError,
    PreconditionFailedError,
    ValidationFailedError,
)
from fieldservice.models.invoices import InvoiceOut, LineItemIn
from fieldservice.models.jobs import AppointmentOut, JobDetail, JobOut, JobStatus
from fieldservice.money import format_money, to_money
from fieldservice.services.scheduling import find_conflicts

logger = logging.getLogger(__name__)

# Statuses the generic update may only set once the job has an appointment.
REQUIRES_APPOINTMENT = frozenset({JobStatus.SCHEDULED, JobStatus.DONE})

# Moves the generic update accepts under the strict policy. Invoiced and Paid
# are reached only through create_invoice and a full payment.
MANUAL_TRANSITIONS = frozenset({
    (JobStatus.NEW, JobStatus.SCHEDULED),
    (JobStatus.SCHEDULED, JobStatus.DONE),
})

WINDOW_FORMAT = "%Y-%m-%d %H:%M"


class JobService:
    def __init__(
        self,
        gateway: PersistenceGateway,
        default_tax_rate: Optional[Decimal] = None,
        strict_transitions: bool = False,
    ):
        self.gateway = gateway
        self.default_tax_rate = (
            settings.default_tax_rate if default_tax_rate is None else default_tax_rate
        )
        self.strict_transitions = strict_transitions

    def create_job(self, customer_id: int, title: str, description: str) -> JobDetail:
        with self.gateway.transaction() as conn:
            if self.gateway.get_customer(conn, customer_id) is None:
                raise NotFoundError("Customer not found")

            job_id = self.gateway.insert_job(
                conn, customer_id, title, description, JobStatus.NEW.value
            )
            self.gateway.add_activity(conn, job_id, "Job Created", f"Job created: {title}")
            job = self.gateway.get_job_detail(conn, job_id)

        logger.info("Job %s created for customer %s", job_id, customer_id)
        return job

    def get_job_by_id(self, job_id: int) -> JobDetail:
        with self.gateway.read() as conn:
            job = self.gateway.get_job_detail(conn, job_id)
        if job is None:
            raise NotFoundError("Job not found")
        return job

    def get_all_jobs(self, status: Optional[JobStatus] = None) -> List[JobOut]:
        with self.gateway.read() as conn:
            return self.gateway.list_jobs(conn, status.value if status else None)

    def update_job_status(self, job_id: int, new_status: JobStatus) -> JobDetail:
        with self.gateway.transaction() as conn:
            job = self.gateway.get_job(conn, job_id, lock=True)
            if job is None:
                raise NotFoundError("Job not found")

            if self.strict_transitions and (job.status, new_status) not in MANUAL_TRANSITIONS:
                raise PreconditionFailedError(
                    f"Cannot change job status from {job.status.value} to {new_status.value}"
                )
            if new_status in REQUIRES_APPOINTMENT and job.appointment is None:
                raise PreconditionFailedError(
                    f"Cannot mark job as {new_status.value} without an appointment"
                )

            self.gateway.set_job_status(conn, job_id, new_status.value)
            self.gateway.add_activity(
                conn, job_id, "Status Changed", f"Status changed to {new_status.value}"
            )
            updated = self.gateway.get_job_detail(conn, job_id)

        logger.info("Job %s status %s -> %s", job_id, job.status.value, new_status.value)
        return updated

    def create_appointment(
        self, job_id: int, technician_id: int, start_time: datetime, end_time: datetime
    ) -> AppointmentOut:
        start_time = to_naive_utc(start_time)
        end_time = to_naive_utc(end_time)

        try:
            with self.gateway.transaction() as conn:
                job = self.gateway.get_job(conn, job_id, lock=True)
                if job is None:
                    raise NotFoundError("Job not found")
                if job.appointment is not None:
                    raise ConflictError("Job already has an appointment")

                # Locking the technician row serializes bookings for this technician
                technician = self.gateway.get_technician(conn, technician_id, lock=True)
                if technician is None:
                    raise NotFoundError("Technician not found")

                if end_time <= start_time:
                    raise ValidationFailedError("End time must be after start time")

                existing = self.gateway.list_technician_appointments(conn, technician_id)
                conflicts = find_conflicts(technician_id, start_time, end_time, existing)
                if conflicts:
                    logger.warning(
                        "Rejected booking for job %s: technician %s already booked (appointments %s)",
                        job_id, technician_id, [a.id for a in conflicts],
                    )
                    raise ConflictError(
                        f"Technician {technician.name} has a conflicting appointment in this time window"
                    )

                self.gateway.insert_appointment(conn, job_id, technician_id, start_time, end_time)
                self.gateway.add_activity(
                    conn,
                    job_id,
                    "Job Scheduled",
                    f"Scheduled with {technician.name} from "
                    f"{start_time.strftime(WINDOW_FORMAT)} to {end_time.strftime(WINDOW_FORMAT)}",
                )
                self.gateway.set_job_status(conn, job_id, JobStatus.SCHEDULED.value)
                appointment = self.gateway.get_appointment_for_job(conn, job_id)
        except IntegrityError as e:
            # Only a lost race on unique(job_id) is a conflict; other violations propagate
            if self._job_has(job_id, "appointment"):
                raise ConflictError("Job already has an appointment") from e
            raise

        logger.info(
            "Job %s scheduled with technician %s from %s to %s",
            job_id, technician_id, start_time, end_time,
        )
        return appointment

    def create_invoice(
        self,
        job_id: int,
        items: Sequence[LineItemIn],
        tax_rate: Optional[Decimal] = None,
    ) -> InvoiceOut:
        if tax_rate is None:
            tax_rate = self.default_tax_rate

        try:
            with self.gateway.transaction() as conn:
                job = self.gateway.get_job(conn, job_id, lock=True)
                if job is None:
                    raise NotFoundError("Job not found")
                if job.status != JobStatus.DONE:
                    raise PreconditionFailedError("Job must be Done before creating an invoice")
                if job.invoice is not None:
                    raise ConflictError("Job already has an invoice")
                for item in items:
                    if item.unit_price != to_money(item.unit_price):
                        raise ValidationFailedError(
                            f"Unit price must be a whole number of cents (got {item.unit_price})"
                        )

                rows = [
                    {
                        "description": item.description,
                        "quantity": item.quantity,
                        "unit_price": item.unit_price,
                        "total": to_money(item.quantity * item.unit_price),
                    }
                    for item in items
                ]
                subtotal = to_money(sum((row["total"] for row in rows), Decimal("0")))
                tax = to_money(subtotal * Decimal(tax_rate))
                total = subtotal + tax

                invoice_id = self.gateway.insert_invoice(conn, job_id, subtotal, tax, total, rows)
                self.gateway.set_job_status(conn, job_id, JobStatus.INVOICED.value)
                self.gateway.add_activity(
                    conn, job_id, "Invoice Created", f"Invoice created for {format_money(total)}"
                )
                invoice = self.gateway.get_invoice(conn, invoice_id)
        except IntegrityError as e:
            if self._job_has(job_id, "invoice"):
                raise ConflictError("Job already has an invoice") from e
            raise

        logger.info("Invoice %s created for job %s (total %s)", invoice_id, job_id, total)
        return invoice

    def _job_has(self, job_id: int, child: str) -> bool:
        """Whether the job's appointment or invoice exists, read after a failed write."""
        with self.gateway.read() as conn:
            job = self.gateway.get_job(conn, job_id)
        return job is not None and getattr(job, child) is not None
