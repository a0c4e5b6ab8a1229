# scripts/seed.py

import logging
from datetime import datetime, timedelta
from typing import Optional

from fieldservice.db.engine import get_engine
from fieldservice.db.gateway import PersistenceGateway, utcnow
from fieldservice.db.schema import metadata
from fieldservice.models.customers import CustomerCreate
from fieldservice.services.customers import CustomerService
from fieldservice.services.jobs import JobService
from fieldservice.services.technicians import TechnicianService

logger = logging.getLogger(__name__)

CUSTOMERS = [
    {
        "name": "John Smith",
        "phone": "555-0101",
        "email": "john.smith@example.com",
        "address": "123 Main St, Springfield, IL 62701",
    },
    {
        "name": "Sarah Johnson",
        "phone": "555-0102",
        "email": "sarah.j@example.com",
        "address": "456 Oak Ave, Springfield, IL 62702",
    },
    {
        "name": "Mike Williams",
        "phone": "555-0103",
        "email": "mike.w@example.com",
        "address": "789 Pine Rd, Springfield, IL 62703",
    },
]

# (customer index, title, description)
JOBS = [
    (0, "HVAC Repair", "Air conditioning unit not cooling properly"),
    (1, "Plumbing Installation", "Install new kitchen faucet"),
    (2, "Electrical Inspection", "Annual electrical system inspection"),
]


def seed(gateway: PersistenceGateway, now: Optional[datetime] = None) -> dict:
    """
    Load demo data: three customers, one technician, three jobs. The last job
    is booked with the technician tomorrow 10:00-12:00 (UTC).
    """
    now = now or utcnow()
    customer_service = CustomerService(gateway)
    technician_service = TechnicianService(gateway)
    job_service = JobService(gateway)

    customers = [customer_service.create_customer(CustomerCreate(**c)) for c in CUSTOMERS]
    taylor = technician_service.create_technician("Taylor")

    jobs = [
        job_service.create_job(customers[idx].id, title, description)
        for idx, title, description in JOBS
    ]

    start = (now + timedelta(days=1)).replace(hour=10, minute=0, second=0, microsecond=0)
    job_service.create_appointment(jobs[-1].id, taylor.id, start, start + timedelta(hours=2))

    return {
        "customers": customers,
        "technicians": [taylor],
        "jobs": jobs,
    }


def main():
    engine = get_engine()
    metadata.drop_all(engine)
    metadata.create_all(engine)

    result = seed(PersistenceGateway(engine))

    logger.info("Seed data created successfully")
    logger.info("Customers:   %s", ", ".join(c.name for c in result["customers"]))
    logger.info("Technicians: %s", ", ".join(t.name for t in result["technicians"]))
    logger.info("Jobs:        %s (2 New, 1 Scheduled)", len(result["jobs"]))


if __name__ == "__main__":
    main()
