"""
Routes API pour les pièces justificatives (KYC) des locataires
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from database import get_db
from enums import EntityType, ActionType, DocumentStatus, DocumentType
from permission_service import AccessScope, get_access_scope, get_landlord_scope, get_tenant_scope
from services.query_service import QueryService
from services import document_service
from services.document_service import document_crud
from constants import SUCCESS_MESSAGES, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
import schemas

router = APIRouter(prefix="/api/documents", tags=["documents"])


def document_filter(
    status: Optional[DocumentStatus] = None,
    tenant_id: Optional[int] = None,
    type: Optional[DocumentType] = None
) -> schemas.DocumentFilter:
    return schemas.DocumentFilter(status=status, tenant_id=tenant_id, type=type)


@router.get("")
async def list_documents(
    filters: schemas.DocumentFilter = Depends(document_filter),
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    scope: AccessScope = Depends(get_access_scope),
    db: Session = Depends(get_db)
):
    """Propriétaire: documents de ses locataires avec totaux. Locataire: ses documents"""
    query = QueryService.documents(db, scope.scope(EntityType.DOCUMENT), filters)
    documents = document_crud.get_multi(query, skip, limit)
    content = {"documents": [schemas.DocumentOut.model_validate(d) for d in documents]}

    if scope.principal.is_landlord:
        content["summary"] = QueryService.document_summary(query)
    return content


@router.post("", status_code=status.HTTP_201_CREATED)
async def upload_document(
    document_in: schemas.DocumentCreate,
    scope: AccessScope = Depends(get_tenant_scope),
    db: Session = Depends(get_db)
):
    tenant = scope.tenant_profile()
    document = document_service.register_document(db, scope.principal, tenant, document_in)
    return {
        "message": SUCCESS_MESSAGES["document_created"],
        "document": schemas.DocumentOut.model_validate(document),
    }


@router.get("/{document_id}")
async def get_document(
    document_id: int,
    scope: AccessScope = Depends(get_access_scope),
    db: Session = Depends(get_db)
):
    document = scope.get_authorized(document_crud, EntityType.DOCUMENT, document_id, ActionType.READ)
    return {"document": schemas.DocumentOut.model_validate(document)}


@router.patch("/{document_id}")
async def review_document(
    document_id: int,
    review_in: schemas.DocumentReview,
    scope: AccessScope = Depends(get_landlord_scope),
    db: Session = Depends(get_db)
):
    document = scope.get_authorized(document_crud, EntityType.DOCUMENT, document_id, ActionType.UPDATE)
    document = document_service.review_document(db, scope.principal, document, review_in)
    return {
        "message": SUCCESS_MESSAGES["document_reviewed"],
        "document": schemas.DocumentOut.model_validate(document),
    }
