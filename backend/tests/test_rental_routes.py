"""
Tests des routes des locations
"""
from datetime import date

from enums import PropertyStatus, RentalStatus
from models import Property, Rental


def test_create_rental_marks_property_occupied(client, db, prop, landlord, tenant, auth_headers):
    response = client.post("/api/rentals", json={
        "property_id": prop.id,
        "tenant_id": tenant.tenant_profile.id,
        "start_date": "2024-06-01",
    }, headers=auth_headers(landlord))

    assert response.status_code == 201
    rental = response.json()["rental"]
    assert rental["status"] == "ACTIVE"
    assert rental["monthly_rent"] == 2500
    assert rental["deposit"] == 5000
    assert rental["tenant"]["name"] == "Tom Tenant"

    db.expire_all()
    assert db.get(Property, prop.id).status == PropertyStatus.OCCUPIED


def test_create_rental_on_occupied_property_refused(client, db, prop, rental, landlord, other_tenant, auth_headers):
    response = client.post("/api/rentals", json={
        "property_id": prop.id,
        "tenant_id": other_tenant.tenant_profile.id,
        "start_date": "2024-06-01",
    }, headers=auth_headers(landlord))

    assert response.status_code == 400
    assert response.json() == {"error": "Property already has an active rental"}
    assert db.query(Rental).count() == 1


def test_create_rental_on_foreign_property_forbidden(client, prop, other_landlord, tenant, auth_headers):
    response = client.post("/api/rentals", json={
        "property_id": prop.id,
        "tenant_id": tenant.tenant_profile.id,
        "start_date": "2024-06-01",
    }, headers=auth_headers(other_landlord))

    assert response.status_code == 403


def test_create_rental_for_unknown_tenant(client, prop, landlord, auth_headers):
    response = client.post("/api/rentals", json={
        "property_id": prop.id,
        "tenant_id": 999,
        "start_date": "2024-06-01",
    }, headers=auth_headers(landlord))

    assert response.status_code == 404
    assert response.json() == {"error": "Tenant not found"}


def test_create_rental_end_before_start(client, prop, landlord, tenant, auth_headers):
    response = client.post("/api/rentals", json={
        "property_id": prop.id,
        "tenant_id": tenant.tenant_profile.id,
        "start_date": "2024-06-01",
        "end_date": "2024-05-01",
    }, headers=auth_headers(landlord))

    assert response.status_code == 400
    assert response.json()["error"] == "End date must be on or after start date"


def test_list_rentals_newest_start_first(client, make, prop, landlord, tenant, auth_headers):
    older = make.rental(prop, tenant, status=RentalStatus.ENDED, start_date=date(2022, 1, 1))
    newer = make.rental(prop, tenant, start_date=date(2024, 1, 1))

    response = client.get("/api/rentals", headers=auth_headers(landlord))

    assert [r["id"] for r in response.json()["rentals"]] == [newer.id, older.id]

    response = client.get("/api/rentals", params={"status": "ENDED"}, headers=auth_headers(landlord))
    assert [r["id"] for r in response.json()["rentals"]] == [older.id]


def test_tenant_lists_own_rentals_only(client, make, landlord, tenant, other_tenant, auth_headers):
    own = make.rental(make.property(landlord), tenant)
    make.rental(make.property(landlord), other_tenant)

    response = client.get("/api/rentals", headers=auth_headers(tenant))

    assert [r["id"] for r in response.json()["rentals"]] == [own.id]


def test_tenant_reads_own_rental(client, rental, tenant, other_tenant, auth_headers):
    assert client.get(f"/api/rentals/{rental.id}", headers=auth_headers(tenant)).status_code == 200
    assert client.get(f"/api/rentals/{rental.id}", headers=auth_headers(other_tenant)).status_code == 403


def test_ending_rental_frees_property(client, db, prop, rental, landlord, auth_headers):
    response = client.patch(f"/api/rentals/{rental.id}", json={
        "status": "ENDED",
        "end_date": "2024-09-30",
    }, headers=auth_headers(landlord))

    assert response.status_code == 200
    assert response.json()["rental"]["status"] == "ENDED"
    db.expire_all()
    assert db.get(Property, prop.id).status == PropertyStatus.AVAILABLE


def test_ended_rental_cannot_be_reactivated(client, make, prop, landlord, tenant, auth_headers):
    ended = make.rental(prop, tenant, status=RentalStatus.ENDED)

    response = client.patch(f"/api/rentals/{ended.id}", json={"status": "ACTIVE"}, headers=auth_headers(landlord))

    assert response.status_code == 400
    assert response.json() == {"error": "Cannot change rental status from ENDED to ACTIVE"}


def test_tenant_cannot_update_rental(client, rental, tenant, auth_headers):
    response = client.patch(f"/api/rentals/{rental.id}", json={"monthly_rent": 1}, headers=auth_headers(tenant))
    assert response.status_code == 403


def test_update_rental_rejects_null_status(client, db, rental, landlord, auth_headers):
    response = client.patch(f"/api/rentals/{rental.id}", json={"status": None}, headers=auth_headers(landlord))

    assert response.status_code == 400
    assert response.json()["error"] == "status: Status cannot be null"
    db.expire_all()
    assert db.get(Rental, rental.id).status == RentalStatus.ACTIVE
