"""
Tests des routes des pièces justificatives
"""
from enums import DocumentStatus
from models import Document

UPLOAD = {
    "type": "INCOME_PROOF",
    "file_name": "payslip-2024-05.pdf",
    "file_url": "https://files.rentdesk.io/payslip-2024-05.pdf",
    "file_size": 120000,
}


def test_tenant_registers_document(client, tenant, auth_headers):
    response = client.post("/api/documents", json=UPLOAD, headers=auth_headers(tenant))

    assert response.status_code == 201
    document = response.json()["document"]
    assert document["status"] == "PENDING"
    assert document["tenant_id"] == tenant.tenant_profile.id
    assert document["reviewed_at"] is None


def test_landlord_cannot_register_document(client, landlord, auth_headers):
    assert client.post("/api/documents", json=UPLOAD, headers=auth_headers(landlord)).status_code == 403


def test_document_too_large(client, tenant, auth_headers):
    response = client.post(
        "/api/documents", json={**UPLOAD, "file_size": 50 * 1024 * 1024}, headers=auth_headers(tenant)
    )
    assert response.status_code == 400


def test_tenant_without_profile_gets_not_found(client, make, auth_headers):
    orphan = make.tenant(with_profile=False)

    response = client.post("/api/documents", json=UPLOAD, headers=auth_headers(orphan))

    assert response.status_code == 404
    assert response.json() == {"error": "Tenant profile not found"}


def test_landlord_list_includes_summary(client, make, rental, landlord, tenant, other_tenant, auth_headers):
    make.document(tenant)
    make.document(tenant, status=DocumentStatus.APPROVED)
    make.document(tenant, status=DocumentStatus.REJECTED)
    make.document(other_tenant)

    response = client.get("/api/documents", headers=auth_headers(landlord))

    body = response.json()
    assert len(body["documents"]) == 3
    assert body["summary"] == {
        "pending_count": 1,
        "approved_count": 1,
        "rejected_count": 1,
        "total_count": 3,
    }

    response = client.get("/api/documents", params={"status": "PENDING"}, headers=auth_headers(landlord))
    assert len(response.json()["documents"]) == 1
    assert response.json()["summary"]["total_count"] == 1


def test_tenant_list_has_no_summary(client, make, tenant, other_tenant, auth_headers):
    own = make.document(tenant)
    make.document(other_tenant)

    response = client.get("/api/documents", headers=auth_headers(tenant))

    body = response.json()
    assert [d["id"] for d in body["documents"]] == [own.id]
    assert "summary" not in body


def test_approve_document(client, db, make, rental, landlord, tenant, auth_headers):
    document = make.document(tenant)

    response = client.patch(f"/api/documents/{document.id}", json={
        "status": "APPROVED",
        "rejection_reason": "ignored",
    }, headers=auth_headers(landlord))

    assert response.status_code == 200
    body = response.json()["document"]
    assert body["status"] == "APPROVED"
    assert body["rejection_reason"] is None
    assert body["reviewed_at"] is not None


def test_reject_document_keeps_reason(client, make, rental, landlord, tenant, auth_headers):
    document = make.document(tenant)

    response = client.patch(f"/api/documents/{document.id}", json={
        "status": "REJECTED",
        "rejection_reason": "Blurry scan",
    }, headers=auth_headers(landlord))

    assert response.json()["document"]["rejection_reason"] == "Blurry scan"


def test_review_is_one_shot(client, db, make, rental, landlord, tenant, auth_headers):
    document = make.document(tenant, status=DocumentStatus.APPROVED)

    response = client.patch(f"/api/documents/{document.id}", json={"status": "REJECTED"}, headers=auth_headers(landlord))

    assert response.status_code == 400
    assert response.json() == {"error": "Document has already been reviewed"}
    db.expire_all()
    assert db.get(Document, document.id).status == DocumentStatus.APPROVED


def test_review_to_pending_is_invalid(client, make, rental, landlord, tenant, auth_headers):
    document = make.document(tenant)

    response = client.patch(f"/api/documents/{document.id}", json={"status": "PENDING"}, headers=auth_headers(landlord))

    assert response.status_code == 400
    assert response.json()["error"] == "status: Status must be APPROVED or REJECTED"


def test_unrelated_landlord_cannot_review(client, make, rental, other_landlord, tenant, auth_headers):
    document = make.document(tenant)

    response = client.patch(
        f"/api/documents/{document.id}", json={"status": "APPROVED"}, headers=auth_headers(other_landlord)
    )
    assert response.status_code == 403


def test_tenant_cannot_review_own_document(client, make, tenant, auth_headers):
    document = make.document(tenant)

    response = client.patch(f"/api/documents/{document.id}", json={"status": "APPROVED"}, headers=auth_headers(tenant))
    assert response.status_code == 403


def test_tenant_reads_own_document_only(client, make, tenant, other_tenant, auth_headers):
    document = make.document(tenant)

    assert client.get(f"/api/documents/{document.id}", headers=auth_headers(tenant)).status_code == 200
    assert client.get(f"/api/documents/{document.id}", headers=auth_headers(other_tenant)).status_code == 403
