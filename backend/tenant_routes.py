"""
Routes API pour la gestion des locataires (côté propriétaire)
"""
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session
from typing import List, Optional

from database import get_db
from models import TenantProfile, RentPayment
from enums import EntityType, ActionType, KycStatus
from permission_service import AccessScope, get_landlord_scope
from services.query_service import QueryService
from services import tenant_service
from services.tenant_service import tenant_crud
from constants import SUCCESS_MESSAGES, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, TENANT_PAYMENT_HISTORY_SIZE
import schemas

router = APIRouter(prefix="/api/tenants", tags=["tenants"])


def tenant_filter(
    search: Optional[str] = None,
    kyc_status: Optional[KycStatus] = None
) -> schemas.TenantFilter:
    return schemas.TenantFilter(search=search, kyc_status=kyc_status)


def serialize_tenant(
    tenant: TenantProfile, landlord_id: int, payment_history: int = 0
) -> schemas.TenantWithRentalsOut:
    """
    Locataire avec ses locations sur les biens du propriétaire uniquement.
    payment_history > 0 ajoute les dernières échéances de chaque location.
    """
    rentals = []
    scoped = [r for r in tenant.rentals if r.property.landlord_id == landlord_id]
    for rental in sorted(scoped, key=lambda r: (r.start_date, r.id), reverse=True):
        rental_out = schemas.TenantRentalOut.model_validate(rental)
        payments: List[RentPayment] = []
        if payment_history:
            payments = sorted(rental.payments, key=lambda p: (p.due_date, p.id), reverse=True)[:payment_history]
        rentals.append(rental_out.model_copy(update={
            "payments": [schemas.PaymentBriefOut.model_validate(p) for p in payments]
        }))

    documents = sorted(tenant.documents, key=lambda d: (d.created_at, d.id), reverse=True)
    base = schemas.TenantOut.model_validate(tenant)
    return schemas.TenantWithRentalsOut(
        **base.model_dump(),
        rentals=rentals,
        documents=[schemas.DocumentBriefOut.model_validate(d) for d in documents],
    )


@router.get("")
async def list_tenants(
    filters: schemas.TenantFilter = Depends(tenant_filter),
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    scope: AccessScope = Depends(get_landlord_scope),
    db: Session = Depends(get_db)
):
    """Locataires ayant au moins une location sur les biens du propriétaire"""
    decision = scope.scope(EntityType.TENANT)
    query = QueryService.tenants(db, decision, filters)
    tenants = tenant_crud.get_multi(query, skip, limit)
    return {"tenants": [serialize_tenant(t, decision.profile_id) for t in tenants]}


@router.post("")
async def invite_tenant(
    invite_in: schemas.TenantInvite,
    scope: AccessScope = Depends(get_landlord_scope),
    db: Session = Depends(get_db)
):
    """
    Invitation: 200 si le locataire existe déjà, 201 sinon.
    Un locataire existant sans location chez l'appelant n'est renvoyé que par son id.
    """
    scope.landlord_profile()
    result = tenant_service.invite_tenant(db, scope.principal, invite_in)

    if result.status_code == status.HTTP_200_OK and not scope.can(EntityType.TENANT, result.tenant):
        tenant_out = {"id": result.tenant.id}
    else:
        tenant_out = schemas.TenantOut.model_validate(result.tenant)

    content = {
        "message": result.message,
        "tenant": tenant_out,
    }
    if result.temporary_password:
        content["temporary_password"] = result.temporary_password
    return JSONResponse(status_code=result.status_code, content=jsonable_encoder(content))


@router.get("/{tenant_id}")
async def get_tenant(
    tenant_id: int,
    scope: AccessScope = Depends(get_landlord_scope),
    db: Session = Depends(get_db)
):
    tenant = scope.get_authorized(tenant_crud, EntityType.TENANT, tenant_id, ActionType.READ)
    landlord = scope.landlord_profile()
    return {"tenant": serialize_tenant(tenant, landlord.id, TENANT_PAYMENT_HISTORY_SIZE)}


@router.patch("/{tenant_id}")
async def update_tenant(
    tenant_id: int,
    tenant_in: schemas.TenantUpdate,
    scope: AccessScope = Depends(get_landlord_scope),
    db: Session = Depends(get_db)
):
    tenant = scope.get_authorized(tenant_crud, EntityType.TENANT, tenant_id, ActionType.UPDATE)
    tenant = tenant_service.update_tenant(db, scope.principal, tenant, tenant_in)
    return {
        "message": SUCCESS_MESSAGES["tenant_updated"],
        "tenant": schemas.TenantOut.model_validate(tenant),
    }


@router.delete("/{tenant_id}")
async def delete_tenant(
    tenant_id: int,
    scope: AccessScope = Depends(get_landlord_scope),
    db: Session = Depends(get_db)
):
    tenant = scope.get_authorized(tenant_crud, EntityType.TENANT, tenant_id, ActionType.DELETE)
    tenant_service.delete_tenant(db, scope.principal, tenant)
    return {"message": SUCCESS_MESSAGES["tenant_deleted"]}
