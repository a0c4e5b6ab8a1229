# fieldservice/services/technicians.py

import logging
from typing import List

from fieldservice.db.gateway import PersistenceGateway
from fieldservice.errors import NotFoundError
from fieldservice.models.technicians import TechnicianDetail, TechnicianOut, TechnicianSummary

logger = logging.getLogger(__name__)


class TechnicianService:
    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    def create_technician(self, name: str) -> TechnicianOut:
        with self.gateway.transaction() as conn:
            technician = self.gateway.insert_technician(conn, name)
        logger.info("Technician %s added", technician.id)
        return technician

    def get_all_technicians(self) -> List[TechnicianSummary]:
        with self.gateway.read() as conn:
            return self.gateway.list_technicians(conn)

    def get_technician_by_id(self, technician_id: int) -> TechnicianDetail:
        with self.gateway.read() as conn:
            technician = self.gateway.get_technician(conn, technician_id)
            if technician is None:
                raise NotFoundError("Technician not found")
            appointments = self.gateway.list_technician_appointments(conn, technician_id)
        return TechnicianDetail(**technician.model_dump(), appointments=appointments)
