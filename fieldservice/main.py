import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fieldservice.api.customers import router as customers_router
from fieldservice.api.invoices import router as invoices_router
from fieldservice.api.jobs import router as jobs_router
from fieldservice.api.technicians import router as technicians_router
from fieldservice.config import settings
from fieldservice.errors import DomainError, ErrorKind

logger = logging.getLogger(__name__)

VERSION = "1.0.0"

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION_FAILED: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.PRECONDITION_FAILED: 400,
}

app = FastAPI(
    title=settings.api_title,
    version=VERSION,
)


@app.exception_handler(DomainError)
async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.kind.value, exc.message)
    return JSONResponse(
        status_code=STATUS_BY_KIND[exc.kind],
        content={"error": exc.message, "kind": exc.kind.value},
    )


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "details": jsonable_encoder(exc.errors())},
    )


@app.get("/health")
def health_check():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": VERSION,
    }

app.include_router(customers_router)
app.include_router(technicians_router)
app.include_router(jobs_router)
app.include_router(invoices_router)
