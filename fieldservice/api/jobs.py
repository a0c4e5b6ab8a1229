# fieldservice/api/jobs.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from fieldservice.api.deps import get_job_service
from fieldservice.models.invoices import InvoiceCreate, InvoiceOut
from fieldservice.models.jobs import (
    AppointmentCreate,
    AppointmentOut,
    JobCreate,
    JobDetail,
    JobOut,
    JobStatus,
    StatusUpdate,
)
from fieldservice.services.jobs import JobService

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post("/", response_model=JobDetail, status_code=201)
def create_job(
    payload: JobCreate,
    service: JobService = Depends(get_job_service),
) -> JobDetail:
    return service.create_job(payload.customer_id, payload.title, payload.description)


@router.get("/", response_model=List[JobOut])
def list_jobs(
    status: Optional[JobStatus] = Query(
        default=None,
        description="New | Scheduled | Done | Invoiced | Paid",
    ),
    service: JobService = Depends(get_job_service),
) -> List[JobOut]:
    """
    Return jobs newest first, optionally filtered by exact status.
    """
    return service.get_all_jobs(status)


@router.get("/{job_id}", response_model=JobDetail)
def get_job(
    job_id: int,
    service: JobService = Depends(get_job_service),
) -> JobDetail:
    """
    Full job view: customer, appointment, invoice and activity log.
    """
    return service.get_job_by_id(job_id)


@router.patch("/{job_id}/status", response_model=JobDetail)
def update_job_status(
    job_id: int,
    payload: StatusUpdate,
    service: JobService = Depends(get_job_service),
) -> JobDetail:
    return service.update_job_status(job_id, payload.status)


@router.post("/{job_id}/appointments", response_model=AppointmentOut, status_code=201)
def create_appointment(
    job_id: int,
    payload: AppointmentCreate,
    service: JobService = Depends(get_job_service),
) -> AppointmentOut:
    """
    Book a technician for the job. Moves the job to Scheduled.
    """
    return service.create_appointment(
        job_id, payload.technician_id, payload.start_time, payload.end_time
    )


@router.post("/{job_id}/invoice", response_model=InvoiceOut, status_code=201)
def create_invoice(
    job_id: int,
    payload: InvoiceCreate,
    service: JobService = Depends(get_job_service),
) -> InvoiceOut:
    """
    Invoice a Done job. Moves the job to Invoiced.
    """
    return service.create_invoice(job_id, payload.line_items, payload.tax_rate)
