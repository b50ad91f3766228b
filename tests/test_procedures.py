import pytest


# ========== CREATE TESTS ==========

async def test_direct_general_procedure(client, create_patient):
    patient = await create_patient(first_name="Luis", first_last_name="Mora")

    response = await client.post("/api/procedures", json={
        "patient_id": patient["id"],
        "procedure_description": "Extracción",
        "total_cost": 180.5,
        "payment_method": "cash",
        "procedure_date": "2024-02-01",
    })

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["clinic_income"] == pytest.approx(180.5)
    assert data["doctor_income"] == 0
    assert data["patient_name"] == "Luis Mora"
    assert data["appointment_id"] is None


async def test_orthodontic_procedure_split(client, create_patient, create_procedure):
    patient = await create_patient()

    data = await create_procedure(patient["id"], total_cost=1000, is_orthodontics=True)

    assert data["clinic_income"] == pytest.approx(400.0)
    assert data["doctor_income"] == pytest.approx(600.0)
    assert data["clinic_income"] + data["doctor_income"] == pytest.approx(data["total_cost"])


async def test_procedure_date_defaults_to_today(client, create_patient, create_procedure):
    patient = await create_patient()
    data = await create_procedure(patient["id"])
    assert data["procedure_date"]


async def test_procedure_copies_flag_from_appointment(client, create_patient, create_appointment, create_procedure):
    patient = await create_patient()
    appointment = await create_appointment(patient["id"], is_orthodontics=True)

    data = await create_procedure(patient["id"], appointment_id=appointment["id"], is_orthodontics=False)

    assert data["is_orthodontics"] is True
    assert data["original_appointment_date"] == "2024-03-15T10:00:00"


async def test_appointment_cannot_back_two_procedures(client, create_patient, create_appointment, create_procedure):
    patient = await create_patient()
    appointment = await create_appointment(patient["id"])
    await create_procedure(patient["id"], appointment_id=appointment["id"])

    response = await client.post("/api/procedures", json={
        "patient_id": patient["id"],
        "appointment_id": appointment["id"],
        "procedure_description": "Repetido",
        "total_cost": 10,
        "payment_method": "cash",
    })

    assert response.status_code == 400


async def test_appointment_of_another_patient_is_rejected(client, create_patient, create_appointment):
    owner = await create_patient()
    other = await create_patient()
    appointment = await create_appointment(owner["id"])

    response = await client.post("/api/procedures", json={
        "patient_id": other["id"],
        "appointment_id": appointment["id"],
        "procedure_description": "Prestada",
        "total_cost": 10,
        "payment_method": "cash",
    })

    assert response.status_code == 400
    assert response.json()["error"] == "La cita pertenece a otro paciente"
    assert (await client.get("/api/procedures/count")).json()["count"] == 0


@pytest.mark.parametrize("override, field", [
    ({"total_cost": 0}, "total_cost"),
    ({"total_cost": -5}, "total_cost"),
    ({"payment_method": "bitcoin"}, "payment_method"),
    ({"procedure_description": ""}, "procedure_description"),
])
async def test_invalid_procedure_is_rejected(client, create_patient, override, field):
    patient = await create_patient()
    payload = {
        "patient_id": patient["id"],
        "procedure_description": "Limpieza",
        "total_cost": 100,
        "payment_method": "cash",
        **override,
    }

    response = await client.post("/api/procedures", json=payload)

    assert response.status_code == 400
    assert field in [detail["field"] for detail in response.json()["details"]]


@pytest.mark.parametrize("raw_cost", ["NaN", "Infinity", "1e10"])
async def test_unstorable_cost_is_rejected(client, create_patient, raw_cost):
    patient = await create_patient()
    body = (
        f'{{"patient_id": {patient["id"]}, "procedure_description": "Limpieza", '
        f'"payment_method": "cash", "total_cost": {raw_cost}}}'
    )

    response = await client.post("/api/procedures", content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert "total_cost" in [detail["field"] for detail in response.json()["details"]]
    assert (await client.get("/api/procedures/count")).json()["count"] == 0


async def test_procedure_for_unknown_patient(client):
    response = await client.post("/api/procedures", json={
        "patient_id": 31337,
        "procedure_description": "Limpieza",
        "total_cost": 100,
        "payment_method": "cash",
    })
    assert response.status_code == 404


# ========== LIST TESTS ==========

async def test_normal_and_orthodontic_lists(client, create_patient, create_procedure):
    patient = await create_patient()
    general = await create_procedure(patient["id"])
    ortho = await create_procedure(patient["id"], is_orthodontics=True)

    normal = (await client.get("/api/procedures/normal")).json()
    orthodontics = (await client.get("/api/procedures/orthodontics")).json()

    assert [p["id"] for p in normal["data"]] == [general["id"]]
    assert [p["id"] for p in orthodontics["data"]] == [ortho["id"]]
    assert (await client.get("/api/procedures/count")).json() == {"success": True, "count": 2}


async def test_list_filters_and_orders_newest_first(client, create_patient, create_procedure):
    patient = await create_patient()
    older = await create_procedure(patient["id"], procedure_date="2024-01-10", payment_method="card")
    newer = await create_procedure(patient["id"], procedure_date="2024-01-20", payment_method="card")
    await create_procedure(patient["id"], procedure_date="2024-02-05", payment_method="transfer")

    january = (await client.get("/api/procedures", params={
        "startDate": "2024-01-01", "endDate": "2024-01-31", "paymentMethod": "card",
    })).json()

    assert january["total"] == 2
    assert [p["id"] for p in january["data"]] == [newer["id"], older["id"]]


async def test_patient_procedures(client, create_patient, create_procedure):
    patient = await create_patient()
    other = await create_patient()
    mine = await create_procedure(patient["id"])
    await create_procedure(other["id"])

    data = (await client.get(f"/api/procedures/patient/{patient['id']}")).json()["data"]

    assert [p["id"] for p in data] == [mine["id"]]


# ========== UPDATE / DELETE TESTS ==========

async def test_update_recomputes_split(client, create_patient, create_procedure):
    patient = await create_patient()
    procedure = await create_procedure(patient["id"], total_cost=200)

    response = await client.put(f"/api/procedures/{procedure['id']}", json={"is_orthodontics": True})

    data = response.json()["data"]
    assert data["clinic_income"] == pytest.approx(80.0)
    assert data["doctor_income"] == pytest.approx(120.0)


async def test_flag_of_converted_appointment_is_locked(client, create_patient, create_appointment, create_procedure):
    patient = await create_patient()
    appointment = await create_appointment(patient["id"], is_orthodontics=True)
    procedure = await create_procedure(patient["id"], appointment_id=appointment["id"])
    url = f"/api/procedures/{procedure['id']}"

    response = await client.put(url, json={"is_orthodontics": False})

    assert response.status_code == 400
    assert response.json()["error"] == "El tipo de ortodoncia lo define la cita de origen"
    assert (await client.get(url)).json()["data"]["is_orthodontics"] is True
    assert (await client.put(url, json={"is_orthodontics": True, "total_cost": 300})).status_code == 200


async def test_single_read_includes_patient_email(client, create_patient, create_procedure):
    patient = await create_patient(email="luis@correo.com")
    procedure = await create_procedure(patient["id"])

    single = (await client.get(f"/api/procedures/{procedure['id']}")).json()["data"]
    listed = (await client.get("/api/procedures")).json()["data"][0]

    assert single["patient_email"] == "luis@correo.com"
    assert listed["patient_email"] is None


async def test_delete_procedure(client, create_patient, create_procedure):
    patient = await create_patient()
    procedure = await create_procedure(patient["id"])

    assert (await client.delete(f"/api/procedures/{procedure['id']}")).status_code == 200
    assert (await client.get(f"/api/procedures/{procedure['id']}")).status_code == 404


# ========== STATS TESTS ==========

async def test_income_stats(client, create_patient, create_procedure):
    patient = await create_patient()
    await create_procedure(patient["id"], total_cost=1000, procedure_date="2024-01-10")
    await create_procedure(patient["id"], total_cost=1000, is_orthodontics=True, procedure_date="2024-01-20")
    await create_procedure(patient["id"], total_cost=999, procedure_date="2024-02-01")

    response = await client.get("/api/procedures/stats/income", params={
        "startDate": "2024-01-01", "endDate": "2024-01-31",
    })

    data = response.json()["data"]
    assert data["total_income"] == pytest.approx(2000)
    assert data["general_income"] == pytest.approx(1000)
    assert data["orthodontics_income"] == pytest.approx(1000)
    assert data["clinic_income"] == pytest.approx(1400)
    assert data["doctor_income"] == pytest.approx(600)
    assert (data["total_procedures"], data["orthodontics_count"], data["general_count"]) == (2, 1, 1)


async def test_income_stats_require_both_dates(client):
    response = await client.get("/api/procedures/stats/income", params={"startDate": "2024-01-01"})

    assert response.status_code == 400
    assert [detail["field"] for detail in response.json()["details"]] == ["endDate"]


async def test_income_stats_reject_reversed_range(client):
    response = await client.get("/api/procedures/stats/income", params={
        "startDate": "2024-02-01", "endDate": "2024-01-01",
    })
    assert response.status_code == 400
