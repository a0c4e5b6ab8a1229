# fieldservice/__init__.py
"""
Field-service backend: customers, technicians, jobs, appointments,
invoices and payments behind a FastAPI app.

Run with:
    uvicorn fieldservice:app --reload
"""

from .main import app

__all__ = ["app"]
