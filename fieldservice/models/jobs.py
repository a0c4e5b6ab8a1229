# fieldservice/models/jobs.py

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from fieldservice.models.customers import CustomerOut
from fieldservice.models.invoices import InvoiceOut


class JobStatus(str, Enum):
    """Lifecycle states, in forward order."""

    NEW = "New"
    SCHEDULED = "Scheduled"
    DONE = "Done"
    INVOICED = "Invoiced"
    PAID = "Paid"


class JobCreate(BaseModel):
    customer_id: int
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)


class StatusUpdate(BaseModel):
    status: JobStatus


class AppointmentCreate(BaseModel):
    technician_id: int
    start_time: datetime
    end_time: datetime


class AppointmentOut(BaseModel):
    id: int
    job_id: int
    technician_id: int
    technician_name: Optional[str] = None
    start_time: datetime
    end_time: datetime

    class Config:
        from_attributes = True


class ActivityOut(BaseModel):
    id: int
    job_id: int
    action: str
    details: str
    created_at: datetime

    class Config:
        from_attributes = True


class JobOut(BaseModel):
    id: int
    title: str
    description: str
    customer_id: int
    status: JobStatus
    created_at: datetime
    customer: Optional[CustomerOut] = None
    appointment: Optional[AppointmentOut] = None
    invoice: Optional[InvoiceOut] = None

    class Config:
        from_attributes = True


class JobDetail(JobOut):
    activities: List[ActivityOut] = Field(default_factory=list)
