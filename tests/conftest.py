import itertools
import os

# Settings are read once at import time
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_LEVEL", "warning")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from src.common.database.database import ClinicDatabase
from src.main import create_app


@pytest.fixture
async def database():
    """Fresh in-memory database per test; StaticPool keeps every session on one connection."""
    db = ClinicDatabase(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await db.create_all()
    yield db
    await db.close()


@pytest.fixture
async def session(database):
    async with database.session() as db_session:
        yield db_session


@pytest.fixture
async def client(database):
    app = create_app(database)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
def create_patient(client):
    counter = itertools.count(1)

    async def _create(**overrides):
        payload = {
            "first_name": "Ana",
            "first_last_name": "Pérez",
            "identification": f"CC-{next(counter):05d}",
            **overrides,
        }
        response = await client.post("/api/patients", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def create_appointment(client):
    async def _create(patient_id, state=None, **overrides):
        payload = {
            "patient_id": patient_id,
            "appointment_date": "2024-03-15T10:00:00",
            **overrides,
        }
        response = await client.post("/api/appointments", json=payload)
        assert response.status_code == 201, response.text
        appointment = response.json()["data"]
        if state:
            response = await client.put(f"/api/appointments/{appointment['id']}", json={"state": state})
            assert response.status_code == 200, response.text
            appointment = response.json()["data"]
        return appointment

    return _create


@pytest.fixture
def create_procedure(client):
    async def _create(patient_id, **overrides):
        payload = {
            "patient_id": patient_id,
            "procedure_description": "Limpieza dental",
            "total_cost": 100,
            "payment_method": "cash",
            **overrides,
        }
        response = await client.post("/api/procedures", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def create_bill(client):
    async def _create(**overrides):
        payload = {
            "description": "Arriendo consultorio",
            "amount": 500,
            "bill_date": "2024-01-05",
            **overrides,
        }
        response = await client.post("/api/bills", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create
