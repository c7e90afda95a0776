"""
Tests du tableau de bord locataire
"""
from datetime import date

from enums import PaymentStatus, RentalStatus, DocumentStatus


def test_dashboard_totals(client, make, landlord, tenant, rental, auth_headers):
    make.payment(rental, amount="2500", due_date=date(2024, 3, 1))
    make.payment(rental, amount="2500", due_date=date(2024, 2, 1), status=PaymentStatus.OVERDUE)
    make.payment(rental, amount="2500", due_date=date(2024, 1, 1),
                 status=PaymentStatus.PAID, paid_date=date(2024, 1, 1))
    make.rental(make.property(landlord, name="Old Place"), tenant,
                status=RentalStatus.ENDED, start_date=date(2021, 1, 1))
    make.document(tenant)
    make.document(tenant, status=DocumentStatus.APPROVED)

    response = client.get("/api/tenant/dashboard", headers=auth_headers(tenant))

    assert response.status_code == 200
    body = response.json()
    assert body["active_rentals"] == 1
    assert body["total_pending"] == 5000
    assert body["upcoming_payments"] == 2
    assert body["pending_documents"] == 1
    assert [p["due_date"] for p in body["pending_payments"]] == ["2024-02-01", "2024-03-01"]
    assert body["pending_payments"][0]["property_name"] == "Sunset Apartment"
    assert [r["property"]["name"] for r in body["recent_rentals"]] == ["Sunset Apartment", "Old Place"]
    assert [p["due_date"] for p in body["recent_payments"]] == ["2024-03-01", "2024-02-01", "2024-01-01"]


def test_dashboard_ignores_other_tenants(client, make, landlord, tenant, other_tenant, auth_headers):
    other_rental = make.rental(make.property(landlord), other_tenant)
    make.payment(other_rental)

    body = client.get("/api/tenant/dashboard", headers=auth_headers(tenant)).json()

    assert body["active_rentals"] == 0
    assert body["total_pending"] == 0
    assert body["pending_payments"] == []


def test_recent_lists_are_capped(client, make, rental, tenant, auth_headers):
    for month in range(1, 9):
        make.payment(rental, due_date=date(2024, month, 1))

    body = client.get("/api/tenant/dashboard", headers=auth_headers(tenant)).json()

    assert len(body["recent_payments"]) == 5
    assert len(body["pending_payments"]) == 8


def test_landlord_has_no_tenant_dashboard(client, landlord, auth_headers):
    response = client.get("/api/tenant/dashboard", headers=auth_headers(landlord))

    assert response.status_code == 403


def test_dashboard_without_profile(client, make, auth_headers):
    orphan = make.tenant(with_profile=False)

    response = client.get("/api/tenant/dashboard", headers=auth_headers(orphan))

    assert response.status_code == 404
    assert response.json() == {"error": "Tenant profile not found"}
