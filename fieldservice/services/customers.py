# fieldservice/services/customers.py

import logging
from typing import List

from sqlalchemy.exc import IntegrityError

from fieldservice.db.gateway import PersistenceGateway
from fieldservice.errors import ConflictError, NotFoundError
from fieldservice.models.customers import CustomerCreate, CustomerDetail, CustomerOut, CustomerSummary

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "Customer with this email already exists"


class CustomerService:
    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    def create_customer(self, data: CustomerCreate) -> CustomerOut:
        try:
            with self.gateway.transaction() as conn:
                if self.gateway.get_customer_by_email(conn, data.email) is not None:
                    raise ConflictError(DUPLICATE_EMAIL)
                customer = self.gateway.insert_customer(
                    conn, data.name, data.phone, data.email, data.address
                )
        except IntegrityError as e:
            raise ConflictError(DUPLICATE_EMAIL) from e

        logger.info("Customer %s registered", customer.id)
        return customer

    def get_customer_by_id(self, customer_id: int) -> CustomerDetail:
        with self.gateway.read() as conn:
            customer = self.gateway.get_customer(conn, customer_id)
            if customer is None:
                raise NotFoundError("Customer not found")
            jobs = self.gateway.list_customer_jobs(conn, customer_id)
        return CustomerDetail(**customer.model_dump(), jobs=jobs)

    def get_all_customers(self) -> List[CustomerSummary]:
        with self.gateway.read() as conn:
            return self.gateway.list_customers(conn)
