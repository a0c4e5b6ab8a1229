"""Shared test fixtures and helpers."""

from datetime import datetime
from decimal import Decimal
from itertools import count
from typing import Optional

import pytest

from fieldservice.db.engine import create_db_engine
from fieldservice.db.gateway import PersistenceGateway
from fieldservice.db.schema import metadata
from fieldservice.models.customers import CustomerCreate
from fieldservice.models.invoices import LineItemIn
from fieldservice.models.jobs import JobStatus
from fieldservice.services.billing import BillingService
from fieldservice.services.customers import CustomerService
from fieldservice.services.jobs import JobService
from fieldservice.services.technicians import TechnicianService

_emails = count(1)


@pytest.fixture
def engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'test.sqlite'}", busy_timeout=5)
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def gateway(engine):
    return PersistenceGateway(engine)


@pytest.fixture
def customer_service(gateway):
    return CustomerService(gateway)


@pytest.fixture
def technician_service(gateway):
    return TechnicianService(gateway)


@pytest.fixture
def job_service(gateway):
    return JobService(gateway, default_tax_rate=Decimal("0.08"))


@pytest.fixture
def billing_service(gateway):
    return BillingService(gateway)


@pytest.fixture
def customer(customer_service):
    return make_customer(customer_service)


@pytest.fixture
def technician(technician_service):
    return technician_service.create_technician("Taylor")


def make_customer(customer_service: CustomerService, name: str = "Test Customer", email: Optional[str] = None):
    """Register a customer with a unique email unless one is given."""
    return customer_service.create_customer(
        CustomerCreate(
            name=name,
            phone="555-0100",
            email=email or f"customer{next(_emails)}@example.com",
            address="123 Test St",
        )
    )


def at(hour: int, minute: int = 0, day: int = 15) -> datetime:
    """A naive UTC timestamp on 2024-01-<day>."""
    return datetime(2024, 1, day, hour, minute)


def item(description: str = "Service", quantity: int = 1, unit_price: str = "100") -> LineItemIn:
    return LineItemIn(description=description, quantity=quantity, unit_price=Decimal(unit_price))


def make_done_job(job_service: JobService, customer_id: int, technician_id: int, start_hour: int = 9):
    """Create a job, book it for two hours and mark it Done."""
    job = job_service.create_job(customer_id, "Test Job", "Test Description")
    job_service.create_appointment(job.id, technician_id, at(start_hour), at(start_hour + 2))
    job_service.update_job_status(job.id, JobStatus.DONE)
    return job


def make_invoice(
    job_service: JobService,
    customer_id: int,
    technician_id: int,
    unit_price: str = "100",
    tax_rate: str = "0.1",
    start_hour: int = 9,
):
    """A single-item invoice on a fresh Done job (100 at 10% tax gives 110.00)."""
    job = make_done_job(job_service, customer_id, technician_id, start_hour)
    return job_service.create_invoice(job.id, [item(unit_price=unit_price)], Decimal(tax_rate))
