# src/router/routers.py

from fastapi import FastAPI
from src.auth.auth_controller import router as auth_router
from src.modules.patients.patients_controller import router as patients_router
from src.modules.appointments.appointments_controller import router as appointments_router
from src.modules.procedures.procedures_controller import router as procedures_router
from src.modules.bills.bills_controller import router as bills_router
from src.modules.monthly_closings.monthly_closings_controller import router as monthly_closings_router

API_PREFIX = "/api"


def include_routers(app: FastAPI) -> None:
    """Include all API routers in the FastAPI application."""
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(patients_router, prefix=API_PREFIX)
    app.include_router(appointments_router, prefix=API_PREFIX)
    app.include_router(procedures_router, prefix=API_PREFIX)
    app.include_router(bills_router, prefix=API_PREFIX)
    app.include_router(monthly_closings_router, prefix=API_PREFIX)
