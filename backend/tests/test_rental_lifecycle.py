"""
Parcours complet: annonce, location, échéance, paiement, tableau de bord
"""
from models import AuditLog


def test_listing_to_payment_flow(client, db, landlord, tenant, auth_headers):
    landlord_headers = auth_headers(landlord)
    tenant_headers = auth_headers(tenant)

    response = client.post("/api/properties", json={
        "name": "Harbour View",
        "address": "5 Dock Road",
        "city": "Marseille",
        "state": "PACA",
        "zip_code": "13002",
        "type": "APARTMENT",
        "rent_amount": 2500,
    }, headers=landlord_headers)
    assert response.status_code == 201
    property_id = response.json()["property"]["id"]

    listing = client.get("/api/properties/available", headers=tenant_headers).json()["properties"]
    assert [p["id"] for p in listing] == [property_id]

    response = client.post("/api/rentals", json={
        "property_id": property_id,
        "tenant_id": tenant.tenant_profile.id,
        "start_date": "2024-01-01",
    }, headers=landlord_headers)
    assert response.status_code == 201
    rental_id = response.json()["rental"]["id"]

    assert client.get("/api/properties/available", headers=tenant_headers).json()["properties"] == []

    response = client.post("/api/rents", json={
        "rental_id": rental_id,
        "amount": 2500,
        "due_date": "2024-02-01",
    }, headers=landlord_headers)
    assert response.status_code == 201
    payment_id = response.json()["rent_payment"]["id"]

    before = client.get("/api/tenant/dashboard", headers=tenant_headers).json()
    assert before["total_pending"] == 2500
    assert [p["id"] for p in before["pending_payments"]] == [payment_id]

    response = client.patch(f"/api/rents/{payment_id}", json={"status": "PAID"}, headers=landlord_headers)
    assert response.status_code == 200

    after = client.get("/api/tenant/dashboard", headers=tenant_headers).json()
    assert after["total_pending"] == before["total_pending"] - 2500
    assert after["pending_payments"] == []
    assert after["recent_payments"][0]["status"] == "PAID"

    actions = {(log.entity_type.value, log.action.value) for log in db.query(AuditLog)}
    assert ("PROPERTY", "CREATE") in actions
    assert ("RENTAL", "CREATE") in actions
    assert ("RENT_PAYMENT", "UPDATE") in actions


def test_root_and_unknown_route(client):
    assert client.get("/").json()["status"] == "active"

    response = client.get("/api/nowhere")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
