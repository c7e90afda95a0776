"""
Service des locataires: invitation, mise à jour et suppression
"""
from dataclasses import dataclass
import logging
from typing import Optional

from fastapi import status
from sqlalchemy.orm import Session

import models
import schemas
from auth import Principal, get_password_hash, generate_temporary_password, get_user_by_email
from base_crud import BaseCRUDService
from constants import SUCCESS_MESSAGES, TEMPORARY_PASSWORD_LENGTH
from database import unit_of_work
from enums import UserRole, EntityType
from error_handlers import ValidationFailedError
from services.rental_service import has_active_rental, tenant_crud

logger = logging.getLogger(__name__)

user_crud = BaseCRUDService(models.User, EntityType.USER, "utilisateur")

PROFILE_FIELDS = ("phone_number", "date_of_birth", "occupation", "kyc_status")


@dataclass
class InviteResult:
    tenant: models.TenantProfile
    status_code: int
    message: str
    temporary_password: Optional[str] = None


def invite_tenant(db: Session, principal: Principal, invite_in: schemas.TenantInvite) -> InviteResult:
    """
    Trois cas selon l'email:
    - profil locataire existant: renvoyé tel quel (200)
    - utilisateur sans profil: profil créé (201), refusé pour un propriétaire
    - email inconnu: utilisateur + profil créés avec un mot de passe temporaire (201)
    """
    profile_data = invite_in.model_dump(include={"phone_number", "date_of_birth", "occupation"})
    user = get_user_by_email(db, invite_in.email)

    if user is not None:
        if user.tenant_profile is not None:
            return InviteResult(user.tenant_profile, status.HTTP_200_OK, SUCCESS_MESSAGES["tenant_exists"])

        if user.role != UserRole.TENANT:
            raise ValidationFailedError("User is registered as a landlord")

        with unit_of_work(db):
            tenant = tenant_crud.create(db, profile_data, principal.user_id, user_id=user.id)
        db.refresh(tenant)
        return InviteResult(tenant, status.HTTP_201_CREATED, SUCCESS_MESSAGES["tenant_profile_created"])

    temporary_password = generate_temporary_password(TEMPORARY_PASSWORD_LENGTH)
    with unit_of_work(db):
        user = user_crud.create(db, {
            "email": invite_in.email,
            "name": invite_in.name,
            "hashed_password": get_password_hash(temporary_password),
            "role": UserRole.TENANT,
        }, principal.user_id)
        tenant = tenant_crud.create(db, profile_data, principal.user_id, user_id=user.id)
    db.refresh(tenant)

    logger.info("Locataire invité: %s (profil %s)", invite_in.email, tenant.id)
    return InviteResult(
        tenant, status.HTTP_201_CREATED, SUCCESS_MESSAGES["tenant_created"], temporary_password
    )


def update_tenant(
    db: Session, principal: Principal, tenant: models.TenantProfile, tenant_in: schemas.TenantUpdate
) -> models.TenantProfile:
    """Champs du profil et nom de l'utilisateur dans une seule transaction"""
    changes = tenant_in.model_dump(exclude_unset=True)
    profile_changes = {key: value for key, value in changes.items() if key in PROFILE_FIELDS}

    with unit_of_work(db):
        tenant_crud.update(db, tenant, profile_changes, principal.user_id)
        if changes.get("name"):
            user_crud.update(db, tenant.user, {"name": changes["name"]}, principal.user_id)
    db.refresh(tenant)
    return tenant


def delete_tenant(db: Session, principal: Principal, tenant: models.TenantProfile) -> None:
    """Refusé tant qu'une location est active; sinon locations, paiements, contrats et documents suivent"""
    if has_active_rental(db, tenant_id=tenant.id):
        raise ValidationFailedError("Cannot delete tenant with active rentals")

    with unit_of_work(db):
        tenant_crud.delete(db, tenant, principal.user_id)
