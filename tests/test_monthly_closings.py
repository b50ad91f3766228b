import pytest

from src.common.database.gateway import TableGateway


@pytest.fixture
async def january_activity(create_patient, create_procedure, create_bill):
    """General 1000 and orthodontic 1000 of income, fixed 500 and variable 300 of expenses."""
    patient = await create_patient()
    await create_procedure(patient["id"], total_cost=1000, procedure_date="2024-01-10")
    await create_procedure(patient["id"], total_cost=1000, is_orthodontics=True, procedure_date="2024-01-20")
    await create_procedure(patient["id"], total_cost=5000, procedure_date="2024-02-01")
    await create_bill(amount=500, is_recurrent=True, category="rent", bill_date="2024-01-05")
    await create_bill(description="Insumos", amount=300, category="supplies", bill_date="2024-01-15")
    await create_bill(description="Febrero", amount=200, bill_date="2024-02-10")


def assert_january_figures(data):
    assert data["total_general_income"] == pytest.approx(1000)
    assert data["total_clinical_orthodontic_income"] == pytest.approx(400)
    assert data["total_orthodontic_doctor_income"] == pytest.approx(600)
    assert data["total_fixed_expenses"] == pytest.approx(500)
    assert data["total_variable_expenses"] == pytest.approx(300)
    assert data["net_profit"] == pytest.approx(600)


async def test_financial_summary(client, january_activity):
    response = await client.get("/api/monthly-closings/summary/financial", params={
        "startDate": "2024-01-01", "endDate": "2024-01-31",
    })

    assert response.status_code == 200
    assert_january_figures(response.json()["data"])


async def test_financial_summary_requires_dates(client):
    response = await client.get("/api/monthly-closings/summary/financial", params={"endDate": "2024-01-31"})
    assert response.status_code == 400


async def test_create_closing_for_calendar_month(client, january_activity):
    response = await client.post("/api/monthly-closings", json={
        "month": "enero",
        "year": 2024,
        "comment": "Mes tranquilo",
    })

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["month"] == "ENERO"
    assert data["year"] == 2024
    assert data["comment"] == "Mes tranquilo"
    assert data["closing_date"]
    assert_january_figures(data)


async def test_closing_period_can_be_overridden(client, january_activity):
    response = await client.post("/api/monthly-closings", json={
        "month": "ENERO",
        "year": 2024,
        "startDate": "2024-01-15",
        "endDate": "2024-01-31",
    })

    data = response.json()["data"]
    assert data["total_general_income"] == 0
    assert data["total_clinical_orthodontic_income"] == pytest.approx(400)
    assert data["total_fixed_expenses"] == 0
    assert data["net_profit"] == pytest.approx(100)


async def test_month_is_closed_only_once(client):
    payload = {"month": "MARZO", "year": 2024}

    assert (await client.post("/api/monthly-closings", json=payload)).status_code == 201
    duplicate = await client.post("/api/monthly-closings", json=payload)

    assert duplicate.status_code == 400
    assert duplicate.json()["error"] == "Ya existe un cierre para este mes y año"
    assert (await client.get("/api/monthly-closings")).json()["total"] == 1


async def test_concurrent_duplicate_closing_is_a_conflict(client, monkeypatch):
    payload = {"month": "ABRIL", "year": 2024}
    assert (await client.post("/api/monthly-closings", json=payload)).status_code == 201

    async def nothing_exists(self, *conditions):
        return False

    # Second request misses the first one and reaches the unique constraint
    monkeypatch.setattr(TableGateway, "exists", nothing_exists)
    duplicate = await client.post("/api/monthly-closings", json=payload)

    assert duplicate.status_code == 400
    assert duplicate.json()["error"] == "Ya existe un cierre para este mes y año"
    assert (await client.get("/api/monthly-closings")).json()["total"] == 1


async def test_unknown_month_is_rejected(client):
    response = await client.post("/api/monthly-closings", json={"month": "SMARCH", "year": 2024})

    assert response.status_code == 400
    assert "month" in [detail["field"] for detail in response.json()["details"]]


async def test_list_latest_year_first_with_default_limit(client):
    months = ["ENERO", "FEBRERO", "MARZO", "ABRIL", "MAYO", "JUNIO", "JULIO"]
    for year in (2023, 2024):
        for month in months:
            response = await client.post("/api/monthly-closings", json={"month": month, "year": year})
            assert response.status_code == 201

    body = (await client.get("/api/monthly-closings")).json()

    assert body["limit"] == 12
    assert body["total"] == 14
    assert body["totalPages"] == 2
    assert len(body["data"]) == 12
    assert body["data"][0]["year"] == 2024
    assert body["data"][0]["month"] == "JULIO"


async def test_get_closing(client):
    created = (await client.post("/api/monthly-closings", json={"month": "MAYO", "year": 2025})).json()["data"]

    found = await client.get(f"/api/monthly-closings/{created['id']}")

    assert found.status_code == 200
    assert found.json()["data"]["id"] == created["id"]
    assert (await client.get("/api/monthly-closings/9999")).status_code == 404
