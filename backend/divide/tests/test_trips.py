"""
Tests for trip, people, outing and expense endpoints.
"""


def create_trip(client, name="Cartagena", currency="COP"):
    response = client.post("/api/trips", json={"name": name, "currency": currency})
    assert response.status_code == 201
    return response.json()


def add_person(client, trip_id, name):
    response = client.post(f"/api/trips/{trip_id}/people", json={"name": name})
    assert response.status_code == 201
    return response.json()


def add_outing(client, trip_id, name):
    response = client.post(f"/api/trips/{trip_id}/outings", json={"name": name})
    assert response.status_code == 201
    return response.json()


def add_expense(client, trip_id, outing_id, amount, payer, description="Expense"):
    return client.post(
        f"/api/trips/{trip_id}/outings/{outing_id}/expenses",
        json={"description": description, "amount": amount, "payer": payer}
    )


def test_create_and_list_trips(client):
    """Test trip creation and listing."""
    trip = create_trip(client, currency="usd")
    assert trip["name"] == "Cartagena"
    assert trip["currency"] == "USD"

    response = client.get("/api/trips")
    assert response.status_code == 200
    assert [t["id"] for t in response.json()] == [trip["id"]]


def test_create_trip_uses_default_currency(client):
    response = client.post("/api/trips", json={"name": "Bogotá"})
    assert response.status_code == 201
    assert response.json()["currency"] == "COP"


def test_create_trip_rejects_unknown_currency(client):
    response = client.post("/api/trips", json={"name": "Lima", "currency": "PEN"})
    assert response.status_code == 400
    assert "PEN" in response.json()["error"]


def test_unknown_trip_is_404(client):
    response = client.get("/api/trips/999")
    assert response.status_code == 404
    assert response.json() == {"error": "Trip not found"}


def test_person_names_are_normalized_and_unique(client):
    trip = create_trip(client)
    person = add_person(client, trip["id"], "  aNA ")
    assert person["name"] == "Ana"

    response = client.post(f"/api/trips/{trip['id']}/people", json={"name": "ana"})
    assert response.status_code == 400

    response = client.post(f"/api/trips/{trip['id']}/people", json={"name": "   "})
    assert response.status_code == 400


def test_outing_settlement(client):
    """Outings start with the whole roster and settle among attendees."""
    trip = create_trip(client)
    for name in ["Ana", "Luis"]:
        add_person(client, trip["id"], name)
    outing = add_outing(client, trip["id"], "Dinner")
    assert [p["name"] for p in outing["participants"]] == ["Ana", "Luis"]

    response = add_expense(client, trip["id"], outing["id"], 100, "ana", "Arepas")
    assert response.status_code == 201
    assert response.json()["payer"] == "Ana"

    response = client.get(f"/api/trips/{trip['id']}/outings/{outing['id']}/settlement")
    assert response.status_code == 200
    data = response.json()
    assert data["balances"] == {"Ana": 50, "Luis": -50}
    assert data["settlements"] == [{"from": "Luis", "to": "Ana", "amount": 50}]
    assert data["summary"].startswith("Dinner\n")
    assert "Luis -> Ana: $ 50" in data["summary"]


def test_expense_validation(client):
    trip = create_trip(client)
    add_person(client, trip["id"], "Ana")
    add_person(client, trip["id"], "Luis")
    outing = add_outing(client, trip["id"], "Beach")

    assert add_expense(client, trip["id"], outing["id"], 10, "Pedro").status_code == 400
    assert add_expense(client, trip["id"], outing["id"], -5, "Ana").status_code == 422
    assert add_expense(client, trip["id"], outing["id"], 10, "Ana", "  ").status_code == 400

    response = add_expense(client, trip["id"], outing["id"], 10.567, "Ana")
    assert response.status_code == 201
    assert response.json()["amount"] == 10.57


def test_trip_summary_across_outings(client):
    trip = create_trip(client, currency="EUR")
    people = {name: add_person(client, trip["id"], name) for name in ["A", "B", "C", "D"]}

    dinner = add_outing(client, trip["id"], "Dinner")
    response = client.post(
        f"/api/trips/{trip['id']}/outings/{dinner['id']}/participants/{people['D']['id']}"
    )
    assert response.status_code == 200
    assert [p["name"] for p in response.json()["participants"]] == ["A", "B", "C"]
    add_expense(client, trip["id"], dinner["id"], 90, "A")

    museum = add_outing(client, trip["id"], "Museum")
    add_expense(client, trip["id"], museum["id"], 40, "D")

    response = client.get(f"/api/trips/{trip['id']}/summary")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 130
    assert data["balances"] == {"A": 50, "B": -40, "C": -40, "D": 30}
    assert data["settlements"] == [
        {"from": "B", "to": "A", "amount": 40},
        {"from": "C", "to": "A", "amount": 10},
        {"from": "C", "to": "D", "amount": 30}
    ]
    assert "Total expenses: 130,00 €" in data["summary"]


def test_toggle_out_drops_expenses_paid(client):
    trip = create_trip(client)
    ana = add_person(client, trip["id"], "Ana")
    add_person(client, trip["id"], "Luis")
    outing = add_outing(client, trip["id"], "Museum")
    add_expense(client, trip["id"], outing["id"], 30, "Ana")
    add_expense(client, trip["id"], outing["id"], 20, "Luis")

    response = client.post(f"/api/trips/{trip['id']}/outings/{outing['id']}/participants/{ana['id']}")
    assert response.status_code == 200
    data = response.json()
    assert [p["name"] for p in data["participants"]] == ["Luis"]
    assert [e["payer"] for e in data["expenses"]] == ["Luis"]

    # Toggling back in does not restore the dropped expense
    response = client.post(f"/api/trips/{trip['id']}/outings/{outing['id']}/participants/{ana['id']}")
    assert [p["name"] for p in response.json()["participants"]] == ["Luis", "Ana"]
    assert len(response.json()["expenses"]) == 1


def test_last_participant_cannot_leave(client):
    trip = create_trip(client)
    ana = add_person(client, trip["id"], "Ana")
    outing = add_outing(client, trip["id"], "Solo walk")

    response = client.post(f"/api/trips/{trip['id']}/outings/{outing['id']}/participants/{ana['id']}")
    assert response.status_code == 400


def test_remove_person_drops_their_expenses(client):
    trip = create_trip(client)
    ana = add_person(client, trip["id"], "Ana")
    add_person(client, trip["id"], "Luis")
    add_person(client, trip["id"], "Sara")
    outing = add_outing(client, trip["id"], "Dinner")
    add_expense(client, trip["id"], outing["id"], 60, "Ana")
    add_expense(client, trip["id"], outing["id"], 30, "Luis")

    response = client.delete(f"/api/trips/{trip['id']}/people/{ana['id']}")
    assert response.status_code == 200

    detail = client.get(f"/api/trips/{trip['id']}").json()
    assert [p["name"] for p in detail["people"]] == ["Luis", "Sara"]
    dinner = detail["outings"][0]
    assert [p["name"] for p in dinner["participants"]] == ["Luis", "Sara"]
    assert [e["payer"] for e in dinner["expenses"]] == ["Luis"]

    summary = client.get(f"/api/trips/{trip['id']}/summary").json()
    assert summary["balances"] == {"Luis": 15, "Sara": -15}
    assert summary["settlements"] == [{"from": "Sara", "to": "Luis", "amount": 15}]


def test_remove_expense_and_outing(client):
    trip = create_trip(client)
    add_person(client, trip["id"], "Ana")
    add_person(client, trip["id"], "Luis")
    outing = add_outing(client, trip["id"], "Taxi")
    expense = add_expense(client, trip["id"], outing["id"], 12, "Ana").json()

    response = client.delete(f"/api/trips/{trip['id']}/outings/{outing['id']}/expenses/{expense['id']}")
    assert response.status_code == 200
    response = client.delete(f"/api/trips/{trip['id']}/outings/{outing['id']}/expenses/{expense['id']}")
    assert response.status_code == 404

    settlement = client.get(f"/api/trips/{trip['id']}/outings/{outing['id']}/settlement").json()
    assert settlement["is_even"] is True

    response = client.delete(f"/api/trips/{trip['id']}/outings/{outing['id']}")
    assert response.status_code == 200
    assert client.get(f"/api/trips/{trip['id']}").json()["outings"] == []


def test_delete_trip(client):
    trip = create_trip(client)
    add_person(client, trip["id"], "Ana")
    add_outing(client, trip["id"], "Park")

    response = client.delete(f"/api/trips/{trip['id']}")
    assert response.status_code == 200
    assert client.get(f"/api/trips/{trip['id']}").status_code == 404


def test_trip_timestamps_are_set(client):
    trip = create_trip(client)
    assert trip["created_at"]
    assert trip["updated_at"]


def test_blank_outing_name_gets_default(client):
    trip = create_trip(client)
    add_person(client, trip["id"], "Ana")
    outing = add_outing(client, trip["id"], "   ")
    assert outing["name"] == "Outing"
    assert [p["name"] for p in outing["participants"]] == ["Ana"]


def test_create_trip_service_with_session(db_session):
    """The service works straight on a session, currency falling back to the default."""
    from divide.services import trip_service

    trip = trip_service.create_trip("  Medellín ", None, db_session)
    assert trip.name == "Medellín"
    assert trip.currency == "COP"
    assert trip.created_at is not None
    assert trip_service.list_trips(db_session) == [trip]
