# fieldservice/api/deps.py
"""
FastAPI dependencies that build services around the shared gateway.

Tests swap the database by overriding ``get_gateway``.
"""

from fastapi import Depends

from fieldservice.config import settings
from fieldservice.db.engine import get_engine
from fieldservice.db.gateway import PersistenceGateway
from fieldservice.services.billing import BillingService
from fieldservice.services.customers import CustomerService
from fieldservice.services.jobs import JobService
from fieldservice.services.technicians import TechnicianService


def get_gateway() -> PersistenceGateway:
    return PersistenceGateway(get_engine())


def get_customer_service(gateway: PersistenceGateway = Depends(get_gateway)) -> CustomerService:
    return CustomerService(gateway)


def get_technician_service(gateway: PersistenceGateway = Depends(get_gateway)) -> TechnicianService:
    return TechnicianService(gateway)


def get_job_service(gateway: PersistenceGateway = Depends(get_gateway)) -> JobService:
    return JobService(
        gateway,
        default_tax_rate=settings.default_tax_rate,
        strict_transitions=settings.strict_status_transitions,
    )


def get_billing_service(gateway: PersistenceGateway = Depends(get_gateway)) -> BillingService:
    return BillingService(gateway)
