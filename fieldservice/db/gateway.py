# fieldservice/db/gateway.py
"""
Persistence gateway over the SQLAlchemy Core tables.

Services receive a PersistenceGateway in their constructor and run each
operation inside one ``transaction()`` (writes) or ``read()`` scope. Query
methods take the open connection as their first argument so several of them
compose into a single atomic unit.

``transaction()`` serializes writers: on SQLite it opens with BEGIN IMMEDIATE,
on server databases the ``lock=True`` lookups add SELECT ... FOR UPDATE.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterator, List, Optional, Sequence

from sqlalchemy import func, insert, select, update
from sqlalchemy.engine import Connection, Engine

from fieldservice.db.engine import WRITE_LOCK_OPTION
from fieldservice.db.schema import (
    appointments,
    customers,
    invoices,
    job_activities,
    jobs,
    line_items,
    payments,
    technicians,
)
from fieldservice.models.customers import CustomerJob, CustomerOut, CustomerSummary
from fieldservice.models.invoices import InvoiceOut, LineItemOut, PaymentOut
from fieldservice.models.jobs import ActivityOut, AppointmentOut, JobDetail, JobOut
from fieldservice.models.technicians import TechnicianOut, TechnicianSummary


def utcnow() -> datetime:
    """Current time as naive UTC, the form every timestamp is stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


_APPOINTMENT_COLUMNS = (
    appointments.c.id,
    appointments.c.job_id,
    appointments.c.technician_id,
    technicians.c.name.label("technician_name"),
    appointments.c.start_time,
    appointments.c.end_time,
)

_INVOICE_COLUMNS = (
    invoices.c.id,
    invoices.c.job_id,
    jobs.c.title.label("job_title"),
    customers.c.name.label("customer_name"),
    invoices.c.subtotal,
    invoices.c.tax,
    invoices.c.total,
    invoices.c.balance,
    invoices.c.created_at,
)


class PersistenceGateway:
    def __init__(self, engine: Engine):
        self.engine = engine

    # ---- Scopes ----

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Atomic write scope; commits on success, rolls back on any error."""
        with self.engine.connect() as conn:
            conn.execution_options(**{WRITE_LOCK_OPTION: True})
            with conn.begin():
                yield conn

    @contextmanager
    def read(self) -> Iterator[Connection]:
        with self.engine.connect() as conn:
            yield conn

    # ---- Customers ----

    def insert_customer(self, conn: Connection, name: str, phone: str, email: str, address: str) -> CustomerOut:
        values = {
            "name": name,
            "phone": phone,
            "email": email,
            "address": address,
            "created_at": utcnow(),
        }
        customer_id = conn.execute(insert(customers).values(**values)).inserted_primary_key[0]
        return CustomerOut(id=customer_id, **values)

    def get_customer(self, conn: Connection, customer_id: int) -> Optional[CustomerOut]:
        row = conn.execute(
            select(customers).where(customers.c.id == customer_id)
        ).mappings().first()
        return CustomerOut(**row) if row else None

    def get_customer_by_email(self, conn: Connection, email: str) -> Optional[CustomerOut]:
        row = conn.execute(
            select(customers).where(customers.c.email == email)
        ).mappings().first()
        return CustomerOut(**row) if row else None

    def list_customers(self, conn: Connection) -> List[CustomerSummary]:
        job_count = (
            select(func.count(jobs.c.id))
            .where(jobs.c.customer_id == customers.c.id)
            .scalar_subquery()
        )
        stmt = (
            select(customers, job_count.label("job_count"))
            .order_by(customers.c.created_at.desc(), customers.c.id.desc())
        )
        return [CustomerSummary(**row) for row in conn.execute(stmt).mappings().all()]

    def list_customer_jobs(self, conn: Connection, customer_id: int) -> List[CustomerJob]:
        stmt = (
            select(jobs.c.id, jobs.c.title, jobs.c.status, jobs.c.created_at)
            .where(jobs.c.customer_id == customer_id)
            .order_by(jobs.c.created_at.desc(), jobs.c.id.desc())
        )
        return [CustomerJob(**row) for row in conn.execute(stmt).mappings().all()]

    # ---- Technicians ----

    def insert_technician(self, conn: Connection, name: str) -> TechnicianOut:
        values = {"name": name, "created_at": utcnow()}
        technician_id = conn.execute(insert(technicians).values(**values)).inserted_primary_key[0]
        return TechnicianOut(id=technician_id, **values)

    def get_technician(self, conn: Connection, technician_id: int, lock: bool = False) -> Optional[TechnicianOut]:
        stmt = select(technicians).where(technicians.c.id == technician_id)
        if lock:
            stmt = stmt.with_for_update()
        row = conn.execute(stmt).mappings().first()
        return TechnicianOut(**row) if row else None

    def list_technicians(self, conn: Connection) -> List[TechnicianSummary]:
        appointment_count = (
            select(func.count(appointments.c.id))
            .where(appointments.c.technician_id == technicians.c.id)
            .scalar_subquery()
        )
        stmt = (
            select(technicians, appointment_count.label("appointment_count"))
            .order_by(technicians.c.created_at.desc(), technicians.c.id.desc())
        )
        return [TechnicianSummary(**row) for row in conn.execute(stmt).mappings().all()]

    def list_technician_appointments(self, conn: Connection, technician_id: int) -> List[AppointmentOut]:
        stmt = (
            select(*_APPOINTMENT_COLUMNS)
            .select_from(appointments.join(technicians))
            .where(appointments.c.technician_id == technician_id)
            .order_by(appointments.c.start_time)
        )
        return [AppointmentOut(**row) for row in conn.execute(stmt).mappings().all()]

    # ---- Jobs ----

    def insert_job(self, conn: Connection, customer_id: int, title: str, description: str, status: str) -> int:
        return conn.execute(
            insert(jobs).values(
                customer_id=customer_id,
                title=title,
                description=description,
                status=status,
                created_at=utcnow(),
            )
        ).inserted_primary_key[0]

    def get_job(self, conn: Connection, job_id: int, lock: bool = False) -> Optional[JobOut]:
        """Job with its customer, appointment and invoice loaded."""
        stmt = select(jobs).where(jobs.c.id == job_id)
        if lock:
            stmt = stmt.with_for_update()
        row = conn.execute(stmt).mappings().first()
        if row is None:
            return None
        return self._load_job(conn, row)

    def get_job_detail(self, conn: Connection, job_id: int) -> Optional[JobDetail]:
        job = self.get_job(conn, job_id)
        if job is None:
            return None
        return JobDetail(**job.model_dump(), activities=self.list_activities(conn, job_id))

    def list_jobs(self, conn: Connection, status: Optional[str] = None) -> List[JobOut]:
        stmt = select(jobs).order_by(jobs.c.created_at.desc(), jobs.c.id.desc())
        if status is not None:
            stmt = stmt.where(jobs.c.status == status)
        rows = conn.execute(stmt).mappings().all()
        return [self._load_job(conn, row) for row in rows]

    def set_job_status(self, conn: Connection, job_id: int, status: str) -> None:
        conn.execute(update(jobs).where(jobs.c.id == job_id).values(status=status))

    def _load_job(self, conn: Connection, row) -> JobOut:
        return JobOut(
            **row,
            customer=self.get_customer(conn, row["customer_id"]),
            appointment=self.get_appointment_for_job(conn, row["id"]),
            invoice=self.get_invoice_for_job(conn, row["id"]),
        )

    # ---- Activities ----

    def add_activity(self, conn: Connection, job_id: int, action: str, details: str) -> None:
        conn.execute(
            insert(job_activities).values(
                job_id=job_id, action=action, details=details, created_at=utcnow()
            )
        )

    def list_activities(self, conn: Connection, job_id: int) -> List[ActivityOut]:
        stmt = (
            select(job_activities)
            .where(job_activities.c.job_id == job_id)
            .order_by(job_activities.c.created_at, job_activities.c.id)
        )
        return [ActivityOut(**row) for row in conn.execute(stmt).mappings().all()]

    # ---- Appointments ----

    def insert_appointment(
        self, conn: Connection, job_id: int, technician_id: int, start_time: datetime, end_time: datetime
    ) -> int:
        return conn.execute(
            insert(appointments).values(
                job_id=job_id,
                technician_id=technician_id,
                start_time=start_time,
                end_time=end_time,
                created_at=utcnow(),
            )
        ).inserted_primary_key[0]

    def get_appointment_for_job(self, conn: Connection, job_id: int) -> Optional[AppointmentOut]:
        stmt = (
            select(*_APPOINTMENT_COLUMNS)
            .select_from(appointments.join(technicians))
            .where(appointments.c.job_id == job_id)
        )
        row = conn.execute(stmt).mappings().first()
        return AppointmentOut(**row) if row else None

    # ---- Invoices ----

    def insert_invoice(
        self,
        conn: Connection,
        job_id: int,
        subtotal: Decimal,
        tax: Decimal,
        total: Decimal,
        items: Sequence[dict],
    ) -> int:
        """Insert an invoice with balance = total, plus its line items."""
        invoice_id = conn.execute(
            insert(invoices).values(
                job_id=job_id,
                subtotal=subtotal,
                tax=tax,
                total=total,
                balance=total,
                created_at=utcnow(),
            )
        ).inserted_primary_key[0]
        conn.execute(
            insert(line_items),
            [{"invoice_id": invoice_id, **item} for item in items],
        )
        return invoice_id

    def get_invoice(self, conn: Connection, invoice_id: int, lock: bool = False) -> Optional[InvoiceOut]:
        """Invoice with line items and payment history loaded."""
        stmt = (
            select(*_INVOICE_COLUMNS)
            .select_from(invoices.join(jobs).join(customers))
            .where(invoices.c.id == invoice_id)
        )
        if lock:
            stmt = stmt.with_for_update(of=invoices)
        row = conn.execute(stmt).mappings().first()
        return self._load_invoice(conn, row) if row else None

    def get_invoice_for_job(self, conn: Connection, job_id: int) -> Optional[InvoiceOut]:
        stmt = (
            select(*_INVOICE_COLUMNS)
            .select_from(invoices.join(jobs).join(customers))
            .where(invoices.c.job_id == job_id)
        )
        row = conn.execute(stmt).mappings().first()
        return self._load_invoice(conn, row) if row else None

    def list_invoices(self, conn: Connection) -> List[InvoiceOut]:
        stmt = (
            select(*_INVOICE_COLUMNS)
            .select_from(invoices.join(jobs).join(customers))
            .order_by(invoices.c.created_at.desc(), invoices.c.id.desc())
        )
        return [self._load_invoice(conn, row) for row in conn.execute(stmt).mappings().all()]

    def set_invoice_balance(self, conn: Connection, invoice_id: int, balance: Decimal) -> None:
        conn.execute(update(invoices).where(invoices.c.id == invoice_id).values(balance=balance))

    def _load_invoice(self, conn: Connection, row) -> InvoiceOut:
        item_rows = conn.execute(
            select(line_items)
            .where(line_items.c.invoice_id == row["id"])
            .order_by(line_items.c.id)
        ).mappings().all()
        return InvoiceOut(
            **row,
            line_items=[LineItemOut(**item) for item in item_rows],
            payments=self.list_payments(conn, row["id"]),
        )

    # ---- Payments ----

    def insert_payment(self, conn: Connection, invoice_id: int, amount: Decimal, method: str) -> PaymentOut:
        values = {
            "invoice_id": invoice_id,
            "amount": amount,
            "method": method,
            "created_at": utcnow(),
        }
        payment_id = conn.execute(insert(payments).values(**values)).inserted_primary_key[0]
        return PaymentOut(id=payment_id, **values)

    def list_payments(self, conn: Connection, invoice_id: int) -> List[PaymentOut]:
        stmt = (
            select(payments)
            .where(payments.c.invoice_id == invoice_id)
            .order_by(payments.c.created_at, payments.c.id)
        )
        return [PaymentOut(**row) for row in conn.execute(stmt).mappings().all()]
