# fieldservice/api/technicians.py

from typing import List

from fastapi import APIRouter, Depends

from fieldservice.api.deps import get_technician_service
from fieldservice.models.technicians import (
    TechnicianCreate,
    TechnicianDetail,
    TechnicianOut,
    TechnicianSummary,
)
from fieldservice.services.technicians import TechnicianService

router = APIRouter(prefix="/technicians", tags=["technicians"])


@router.post("/", response_model=TechnicianOut, status_code=201)
def create_technician(
    payload: TechnicianCreate,
    service: TechnicianService = Depends(get_technician_service),
) -> TechnicianOut:
    return service.create_technician(payload.name)


@router.get("/", response_model=List[TechnicianSummary])
def list_technicians(
    service: TechnicianService = Depends(get_technician_service),
) -> List[TechnicianSummary]:
    return service.get_all_technicians()


@router.get("/{technician_id}", response_model=TechnicianDetail)
def get_technician(
    technician_id: int,
    service: TechnicianService = Depends(get_technician_service),
) -> TechnicianDetail:
    """
    Return a technician and their appointments in start-time order.
    """
    return service.get_technician_by_id(technician_id)
