import pytest


async def test_create_bill_defaults_to_other_category(client, create_bill):
    bill = await create_bill(category="")

    assert bill["category"] == "other"
    assert bill["is_recurrent"] is False


@pytest.mark.parametrize("override, field", [
    ({"amount": 0}, "amount"),
    ({"amount": 1e10}, "amount"),
    ({"description": ""}, "description"),
    ({"bill_date": None}, "bill_date"),
])
async def test_invalid_bill_is_rejected(client, override, field):
    payload = {"description": "Guantes", "amount": 40, "bill_date": "2024-01-05", **override}

    response = await client.post("/api/bills", json=payload)

    assert response.status_code == 400
    assert field in [detail["field"] for detail in response.json()["details"]]


async def test_expense_stats_split_fixed_and_variable(client, create_bill):
    await create_bill(amount=500, is_recurrent=True, category="rent", bill_date="2024-01-01")
    await create_bill(description="Insumos", amount=300, category="supplies", bill_date="2024-01-31")
    await create_bill(description="Fuera de rango", amount=200, bill_date="2024-02-01")

    response = await client.get("/api/bills/stats/expenses", params={
        "startDate": "2024-01-01", "endDate": "2024-01-31",
    })

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["fixed_expenses"] == pytest.approx(500)
    assert data["variable_expenses"] == pytest.approx(300)
    assert data["total_expenses"] == pytest.approx(800)
    assert (data["total_bills"], data["fixed_count"], data["variable_count"]) == (2, 1, 1)


async def test_expense_stats_require_dates(client):
    response = await client.get("/api/bills/stats/expenses")

    assert response.status_code == 400
    assert {detail["field"] for detail in response.json()["details"]} == {"startDate", "endDate"}


async def test_type_and_category_filters(client, create_bill):
    rent = await create_bill(is_recurrent=True, category="rent")
    supplies = await create_bill(description="Anestesia", amount=80, category="supplies")

    fixed = (await client.get("/api/bills", params={"type": "FIJO"})).json()
    variable = (await client.get("/api/bills", params={"type": "VARIABLE"})).json()
    by_category = (await client.get("/api/bills", params={"category": "supplies"})).json()

    assert [b["id"] for b in fixed["data"]] == [rent["id"]]
    assert [b["id"] for b in variable["data"]] == [supplies["id"]]
    assert [b["id"] for b in by_category["data"]] == [supplies["id"]]


async def test_list_newest_bill_first(client, create_bill):
    old = await create_bill(bill_date="2024-01-01")
    new = await create_bill(bill_date="2024-03-01")

    data = (await client.get("/api/bills")).json()["data"]

    assert [b["id"] for b in data] == [new["id"], old["id"]]


async def test_recurrent_bills_sorted_by_description(client, create_bill):
    await create_bill(description="Salarios", is_recurrent=True, category="salaries")
    await create_bill(description="Arriendo", is_recurrent=True, category="rent")
    await create_bill(description="Compra única", amount=20)

    data = (await client.get("/api/bills/recurrent/all")).json()["data"]

    assert [b["description"] for b in data] == ["Arriendo", "Salarios"]


async def test_update_and_delete_bill(client, create_bill):
    bill = await create_bill()

    updated = await client.put(f"/api/bills/{bill['id']}", json={"amount": 650.75})
    assert updated.json()["data"]["amount"] == pytest.approx(650.75)

    assert (await client.delete(f"/api/bills/{bill['id']}")).status_code == 200
    missing = await client.get(f"/api/bills/{bill['id']}")
    assert missing.status_code == 404
    assert missing.json()["error"] == "Gasto no encontrado"
