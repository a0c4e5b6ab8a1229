# fieldservice/api/customers.py

from typing import List

from fastapi import APIRouter, Depends

from fieldservice.api.deps import get_customer_service
from fieldservice.models.customers import (
    CustomerCreate,
    CustomerDetail,
    CustomerOut,
    CustomerSummary,
)
from fieldservice.services.customers import CustomerService

router = APIRouter(prefix="/customers", tags=["customers"])


@router.post("/", response_model=CustomerOut, status_code=201)
def create_customer(
    payload: CustomerCreate,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerOut:
    """
    Register a new customer. Emails are unique.
    """
    return service.create_customer(payload)


@router.get("/", response_model=List[CustomerSummary])
def list_customers(
    service: CustomerService = Depends(get_customer_service),
) -> List[CustomerSummary]:
    """
    Return all customers, newest first, with their job counts.
    """
    return service.get_all_customers()


@router.get("/{customer_id}", response_model=CustomerDetail)
def get_customer(
    customer_id: int,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerDetail:
    """
    Return a single customer by ID along with their jobs.
    """
    return service.get_customer_by_id(customer_id)
