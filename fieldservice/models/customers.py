# fieldservice/models/customers.py

from datetime import datetime
from typing import List

from pydantic import BaseModel, EmailStr, Field


class CustomerCreate(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: EmailStr
    address: str = Field(..., min_length=1)


class CustomerOut(BaseModel):
    id: int
    name: str
    phone: str
    email: EmailStr
    address: str
    created_at: datetime

    class Config:
        from_attributes = True


class CustomerSummary(CustomerOut):
    job_count: int = 0


class CustomerJob(BaseModel):
    id: int
    title: str
    status: str
    created_at: datetime


class CustomerDetail(CustomerOut):
    jobs: List[CustomerJob] = Field(default_factory=list)
