# fieldservice/models/technicians.py

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from fieldservice.models.jobs import AppointmentOut


class TechnicianCreate(BaseModel):
    name: str = Field(..., min_length=1)


class TechnicianOut(BaseModel):
    id: int
    name: str
    created_at: datetime

    class Config:
        from_attributes = True


class TechnicianSummary(TechnicianOut):
    appointment_count: int = 0


class TechnicianDetail(TechnicianOut):
    appointments: List[AppointmentOut] = Field(default_factory=list)
