"""
Service des pièces justificatives: dépôt par le locataire, revue par le propriétaire
"""
from datetime import datetime, timezone

from sqlalchemy.orm import Session

import models
import schemas
from auth import Principal
from base_crud import BaseCRUDService
from constants import ERROR_MESSAGES
from database import unit_of_work
from enums import DocumentStatus, EntityType
from error_handlers import ValidationFailedError

document_crud = BaseCRUDService(
    models.Document, EntityType.DOCUMENT, "document",
    not_found_message=ERROR_MESSAGES["document_not_found"]
)


def register_document(
    db: Session, principal: Principal, tenant: models.TenantProfile, document_in: schemas.DocumentCreate
) -> models.Document:
    """Enregistre les métadonnées d'un fichier déjà stocké"""
    with unit_of_work(db):
        document = document_crud.create(
            db, document_in, principal.user_id,
            tenant_id=tenant.id, status=DocumentStatus.PENDING
        )
    db.refresh(document)
    return document


def review_document(
    db: Session, principal: Principal, document: models.Document, review_in: schemas.DocumentReview
) -> models.Document:
    """
    Revue unique: seul un document PENDING peut être approuvé ou rejeté
    """
    if document.status != DocumentStatus.PENDING:
        raise ValidationFailedError("Document has already been reviewed")

    changes = {
        "status": review_in.status,
        "reviewed_at": datetime.now(timezone.utc).replace(tzinfo=None),
        "rejection_reason": review_in.rejection_reason if review_in.status == DocumentStatus.REJECTED else None,
    }

    with unit_of_work(db):
        document_crud.update(db, document, changes, principal.user_id)
    db.refresh(document)
    return document
