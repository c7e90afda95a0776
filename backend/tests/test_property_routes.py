"""
Tests des routes des biens
"""
from decimal import Decimal

from enums import PropertyStatus
from models import Property

NEW_PROPERTY = {
    "name": "Canal Loft",
    "address": "8 Quai de Jemmapes",
    "city": "Paris",
    "state": "IDF",
    "zip_code": "75010",
    "type": "APARTMENT",
    "bedrooms": 1,
    "bathrooms": 1,
    "rent_amount": 1450,
    "deposit": 2900,
    "amenities": ["Balcony", " Balcony ", "Elevator"],
}


def test_landlord_creates_property(client, db, landlord, auth_headers):
    response = client.post("/api/properties", json=NEW_PROPERTY, headers=auth_headers(landlord))

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Property created successfully"
    assert body["property"]["status"] == "AVAILABLE"
    assert body["property"]["rent_amount"] == 1450
    assert body["property"]["amenities"] == ["Balcony", "Elevator"]
    assert body["property"]["landlord_id"] == landlord.landlord_profile.id
    assert db.query(Property).count() == 1


def test_create_property_validation(client, landlord, auth_headers):
    response = client.post(
        "/api/properties", json={**NEW_PROPERTY, "bedrooms": -1}, headers=auth_headers(landlord)
    )

    assert response.status_code == 400
    assert response.json()["error"] == "bedrooms: Bedrooms cannot be negative"


def test_tenant_cannot_create_property(client, tenant, auth_headers):
    response = client.post("/api/properties", json=NEW_PROPERTY, headers=auth_headers(tenant))

    assert response.status_code == 403
    assert response.json() == {"error": "Forbidden"}


def test_create_property_requires_authentication(client):
    assert client.post("/api/properties", json=NEW_PROPERTY).status_code == 401


def test_landlord_without_profile_gets_not_found(client, make, auth_headers):
    orphan = make.landlord(with_profile=False)

    response = client.get("/api/properties", headers=auth_headers(orphan))

    assert response.status_code == 404
    assert response.json() == {"error": "Landlord profile not found"}


def test_landlord_lists_only_own_properties(client, make, landlord, other_landlord, auth_headers):
    make.property(landlord, name="Mine A")
    make.property(landlord, name="Mine B", status=PropertyStatus.MAINTENANCE)
    make.property(other_landlord, name="Theirs")

    response = client.get("/api/properties", headers=auth_headers(landlord))
    assert sorted(p["name"] for p in response.json()["properties"]) == ["Mine A", "Mine B"]

    response = client.get("/api/properties", params={"status": "MAINTENANCE"}, headers=auth_headers(landlord))
    assert [p["name"] for p in response.json()["properties"]] == ["Mine B"]


def test_tenant_lists_only_available_properties(client, make, landlord, other_landlord, tenant, auth_headers):
    make.property(landlord, name="Open")
    make.property(other_landlord, name="Also Open")
    make.property(landlord, name="Closed", status=PropertyStatus.MAINTENANCE)

    response = client.get(
        "/api/properties", params={"status": "MAINTENANCE"}, headers=auth_headers(tenant)
    )

    assert response.status_code == 200
    assert sorted(p["name"] for p in response.json()["properties"]) == ["Also Open", "Open"]


def test_available_listing_includes_landlord_contact(client, prop, landlord, tenant, auth_headers):
    response = client.get("/api/properties/available", headers=auth_headers(tenant))

    listing = response.json()["properties"]
    assert len(listing) == 1
    assert listing[0]["landlord"]["name"] == "Laura Landlord"
    assert listing[0]["landlord"]["email"] == landlord.email
    assert listing[0]["landlord"]["business_name"] == "Laura Immo"


def test_owner_reads_property(client, prop, landlord, auth_headers):
    response = client.get(f"/api/properties/{prop.id}", headers=auth_headers(landlord))

    assert response.status_code == 200
    assert response.json()["property"]["id"] == prop.id


def test_other_landlord_cannot_read_property(client, prop, other_landlord, auth_headers):
    response = client.get(f"/api/properties/{prop.id}", headers=auth_headers(other_landlord))
    assert response.status_code == 403


def test_unknown_property_is_not_found(client, landlord, auth_headers):
    response = client.get("/api/properties/999", headers=auth_headers(landlord))

    assert response.status_code == 404
    assert response.json() == {"error": "Property not found"}


def test_tenant_reads_available_property(client, prop, tenant, auth_headers):
    assert client.get(f"/api/properties/{prop.id}", headers=auth_headers(tenant)).status_code == 200


def test_tenant_cannot_read_unrelated_occupied_property(client, make, landlord, tenant, auth_headers):
    prop = make.property(landlord, status=PropertyStatus.OCCUPIED)

    response = client.get(f"/api/properties/{prop.id}", headers=auth_headers(tenant))
    assert response.status_code == 403


def test_tenant_reads_property_they_rent(client, prop, rental, tenant, auth_headers):
    response = client.get(f"/api/properties/{prop.id}", headers=auth_headers(tenant))

    assert response.status_code == 200
    assert response.json()["property"]["status"] == "OCCUPIED"


def test_owner_updates_property(client, db, prop, landlord, auth_headers):
    response = client.patch(
        f"/api/properties/{prop.id}", json={"rent_amount": 2600, "name": "Sunset Deluxe"},
        headers=auth_headers(landlord)
    )

    assert response.status_code == 200
    assert response.json()["property"]["rent_amount"] == 2600
    db.expire_all()
    assert db.get(Property, prop.id).name == "Sunset Deluxe"


def test_non_owner_update_is_forbidden_and_row_unchanged(client, db, prop, other_landlord, auth_headers):
    response = client.patch(
        f"/api/properties/{prop.id}", json={"rent_amount": 1}, headers=auth_headers(other_landlord)
    )

    assert response.status_code == 403
    db.expire_all()
    assert db.get(Property, prop.id).rent_amount == Decimal("2500")


def test_tenant_cannot_update_property(client, prop, tenant, auth_headers):
    response = client.patch(f"/api/properties/{prop.id}", json={"name": "Hacked"}, headers=auth_headers(tenant))
    assert response.status_code == 403


def test_update_property_rejects_null_required_field(client, db, prop, landlord, auth_headers):
    response = client.patch(f"/api/properties/{prop.id}", json={"name": None}, headers=auth_headers(landlord))

    assert response.status_code == 400
    assert response.json()["error"] == "name: Name cannot be null"
    db.expire_all()
    assert db.get(Property, prop.id).name == "Sunset Apartment"


def test_update_property_accepts_null_optional_field(client, prop, landlord, auth_headers):
    response = client.patch(f"/api/properties/{prop.id}", json={"description": None}, headers=auth_headers(landlord))
    assert response.status_code == 200


def test_delete_property_with_active_rental_refused(client, db, prop, rental, landlord, auth_headers):
    response = client.delete(f"/api/properties/{prop.id}", headers=auth_headers(landlord))

    assert response.status_code == 400
    assert response.json() == {"error": "Cannot delete property with an active rental"}
    db.expire_all()
    assert db.get(Property, prop.id) is not None


def test_delete_property(client, db, prop, landlord, auth_headers):
    response = client.delete(f"/api/properties/{prop.id}", headers=auth_headers(landlord))

    assert response.status_code == 200
    assert response.json() == {"message": "Property deleted successfully"}
    db.expire_all()
    assert db.get(Property, prop.id) is None
