# src/main.py

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.common.config import settings
from src.common.database.database import ClinicDatabase, build_database
from src.common.schemas import ErrorResponse
from src.common.utils.exceptions import ClinicError, StorageError
from src.common.utils.global_messages import GlobalMessages
from src.common.utils.logger import setup_logging
from src.router.routers import API_PREFIX, include_routers

log = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def _error(status_code: int, error: str, details=None, **extra) -> JSONResponse:
    body = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


def _field_errors(exc: RequestValidationError):
    details = []
    for err in exc.errors():
        # Drop the "body"/"query"/"path" segment, keep the field path
        location = [str(part) for part in err.get("loc", ())[1:]] or [str(err.get("loc", ("body",))[0])]
        details.append({"field": ".".join(location), "message": err.get("msg", "")})
    return details


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ClinicError)
    async def clinic_error_handler(request: Request, exc: ClinicError):
        if isinstance(exc, StorageError):
            log.error("%s %s: %s", request.method, request.url.path, exc.message, exc_info=exc.__cause__ or exc)
        return _error(exc.status_code, exc.public_message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error(400, GlobalMessages.INVALID_DATA, _field_errors(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return _error(404, GlobalMessages.ROUTE_NOT_FOUND, path=request.url.path)
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(500, GlobalMessages.INTERNAL_ERROR)


def create_app(database: Optional[ClinicDatabase] = None) -> FastAPI:
    """Build the API around a database client; production builds one from settings."""
    setup_logging(settings.LOG_LEVEL)
    database = database or build_database()

    # Lifespan context manager for startup and shutdown events
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await database.connect()
        yield
        await database.close()

    app = FastAPI(
        title="Dental Clinic API",
        description="Patients, appointments, procedures and finances of a dental clinic",
        version=API_VERSION,
        lifespan=lifespan
    )
    app.state.database = database

    # Middleware for CORS using allowed origins from settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    include_routers(app)

    @app.get("/")
    async def root():
        return {
            "message": "API de Clínica Dental",
            "version": API_VERSION,
            "endpoints": {
                "auth": f"{API_PREFIX}/auth",
                "patients": f"{API_PREFIX}/patients",
                "appointments": f"{API_PREFIX}/appointments",
                "procedures": f"{API_PREFIX}/procedures",
                "bills": f"{API_PREFIX}/bills",
                "monthlyClosings": f"{API_PREFIX}/monthly-closings",
                "health": "/health",
            },
        }

    @app.get("/health")
    async def health(request: Request):
        connected = await request.app.state.database.ping()
        return JSONResponse(
            status_code=200 if connected else 503,
            content={
                "status": "healthy" if connected else "unhealthy",
                "database": "connected" if connected else "disconnected",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("src.main:app", host="0.0.0.0", port=settings.PORT, reload=settings.DEBUG)
