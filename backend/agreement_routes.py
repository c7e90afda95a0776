"""
Routes API pour les contrats de location
"""
from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional

from database import get_db
from enums import EntityType, ActionType, AgreementStatus
from permission_service import AccessScope, get_access_scope, get_landlord_scope
from services.query_service import QueryService
from services import agreement_service
from services.agreement_service import agreement_crud
from constants import SUCCESS_MESSAGES, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
import schemas

router = APIRouter(prefix="/api/agreements", tags=["agreements"])


def agreement_filter(
    rental_id: Optional[int] = None,
    status: Optional[AgreementStatus] = None
) -> schemas.AgreementFilter:
    return schemas.AgreementFilter(rental_id=rental_id, status=status)


@router.get("")
async def list_agreements(
    filters: schemas.AgreementFilter = Depends(agreement_filter),
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    scope: AccessScope = Depends(get_access_scope),
    db: Session = Depends(get_db)
):
    query = QueryService.agreements(db, scope.scope(EntityType.AGREEMENT), filters)
    agreements = agreement_crud.get_multi(query, skip, limit)
    return {"agreements": [schemas.AgreementOut.model_validate(a) for a in agreements]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_agreement(
    payload: Dict[str, Any] = Body(...),
    scope: AccessScope = Depends(get_landlord_scope),
    db: Session = Depends(get_db)
):
    """
    Accepte la forme rattachée à une location (rental_id, terms, template_variables)
    ou l'ancienne forme rattachée à un bien (property_id, content, variables)
    """
    scope.landlord_profile()
    agreement_in = schemas.AgreementCreate.model_validate(
        agreement_service.migrate_agreement_payload(db, payload, scope)
    )
    agreement = agreement_service.create_agreement(db, scope, scope.principal, agreement_in)
    return {
        "message": SUCCESS_MESSAGES["agreement_created"],
        "agreement": schemas.AgreementOut.model_validate(agreement),
    }


@router.get("/{agreement_id}")
async def get_agreement(
    agreement_id: int,
    scope: AccessScope = Depends(get_access_scope),
    db: Session = Depends(get_db)
):
    agreement = scope.get_authorized(agreement_crud, EntityType.AGREEMENT, agreement_id, ActionType.READ)
    return {"agreement": schemas.AgreementOut.model_validate(agreement)}


@router.get("/{agreement_id}/render", response_model=schemas.AgreementRenderOut)
async def render_agreement(
    agreement_id: int,
    scope: AccessScope = Depends(get_access_scope),
    db: Session = Depends(get_db)
):
    """Texte du contrat avec les variables substituées et échappées"""
    agreement = scope.get_authorized(agreement_crud, EntityType.AGREEMENT, agreement_id, ActionType.READ)
    return agreement_service.render_agreement(agreement)


@router.patch("/{agreement_id}")
async def update_agreement(
    agreement_id: int,
    agreement_in: schemas.AgreementUpdate,
    scope: AccessScope = Depends(get_landlord_scope),
    db: Session = Depends(get_db)
):
    agreement = scope.get_authorized(agreement_crud, EntityType.AGREEMENT, agreement_id, ActionType.UPDATE)
    agreement = agreement_service.update_agreement(db, scope.principal, agreement, agreement_in)
    return {
        "message": SUCCESS_MESSAGES["agreement_updated"],
        "agreement": schemas.AgreementOut.model_validate(agreement),
    }


@router.delete("/{agreement_id}")
async def delete_agreement(
    agreement_id: int,
    scope: AccessScope = Depends(get_landlord_scope),
    db: Session = Depends(get_db)
):
    agreement = scope.get_authorized(agreement_crud, EntityType.AGREEMENT, agreement_id, ActionType.DELETE)
    agreement_service.delete_agreement(db, scope.principal, agreement)
    return {"message": SUCCESS_MESSAGES["agreement_deleted"]}
