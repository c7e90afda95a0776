"""
Service de contrôle d'accès par rôle et par chaîne de propriété

Un propriétaire accède à ce qui remonte à son profil via les clés étrangères
(bien -> location -> paiement / contrat, locataire via ses locations).
Un locataire accède à ce qui est rattaché à son propre profil.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional
import logging

from fastapi import Depends
from sqlalchemy import or_, select, false
from sqlalchemy.orm import Session

import models
from auth import Principal, get_current_principal, require_landlord, require_tenant
from database import get_db
from base_crud import BaseCRUDService
from constants import ERROR_MESSAGES
from enums import UserRole, EntityType, ActionType, PropertyStatus
from error_handlers import AuthorizationError, NotFoundError

logger = logging.getLogger(__name__)

READ_ONLY_ACTIONS = {ActionType.READ}


@dataclass(frozen=True)
class AccessDecision:
    """Résultat d'un calcul de périmètre: autorisé ou non, et le filtre SQL associé"""
    allowed: bool
    predicate: Any
    profile_id: Optional[int]


class IAccessScope(ABC):
    """Interface pour la vérification des accès"""

    @abstractmethod
    def scope(self, entity_type: EntityType) -> AccessDecision:
        """Filtre SQL des lignes visibles pour le principal"""
        pass

    @abstractmethod
    def can(self, entity_type: EntityType, entity, action: ActionType = ActionType.READ) -> bool:
        """Vérifie l'accès à une entité déjà chargée"""
        pass


class AccessScope(IAccessScope):
    """Périmètre d'accès d'un principal, résolu contre la base de données"""

    def __init__(self, db: Session, principal: Principal):
        self.db = db
        self.principal = principal
        self._landlord_profile = None
        self._tenant_profile = None

    # ==================== RÔLE ET PROFIL ====================

    def require_role(self, role: UserRole) -> None:
        if self.principal.role != role:
            logger.warning("Accès refusé: utilisateur %s (%s) requiert %s",
                           self.principal.user_id, self.principal.role.value, role.value)
            raise AuthorizationError()

    def landlord_profile(self) -> models.LandlordProfile:
        if self._landlord_profile is None:
            self._landlord_profile = self.db.query(models.LandlordProfile).filter(
                models.LandlordProfile.user_id == self.principal.user_id
            ).first()
            if self._landlord_profile is None:
                raise NotFoundError(ERROR_MESSAGES["landlord_profile_not_found"])
        return self._landlord_profile

    def tenant_profile(self) -> models.TenantProfile:
        if self._tenant_profile is None:
            self._tenant_profile = self.db.query(models.TenantProfile).filter(
                models.TenantProfile.user_id == self.principal.user_id
            ).first()
            if self._tenant_profile is None:
                raise NotFoundError(ERROR_MESSAGES["tenant_profile_not_found"])
        return self._tenant_profile

    def profile(self):
        """Profil correspondant au rôle du principal (404 s'il manque)"""
        if self.principal.is_landlord:
            return self.landlord_profile()
        return self.tenant_profile()

    # ==================== FILTRES SQL ====================

    def scope(self, entity_type: EntityType) -> AccessDecision:
        profile_id = self.profile().id
        if self.principal.is_landlord:
            predicate = self._landlord_predicate(entity_type, profile_id)
        else:
            predicate = self._tenant_predicate(entity_type, profile_id)

        if predicate is None:
            return AccessDecision(allowed=False, predicate=false(), profile_id=profile_id)
        return AccessDecision(allowed=True, predicate=predicate, profile_id=profile_id)

    @staticmethod
    def _landlord_rental_ids(landlord_id: int):
        return select(models.Rental.id).join(
            models.Property, models.Rental.property_id == models.Property.id
        ).where(models.Property.landlord_id == landlord_id)

    @staticmethod
    def _landlord_tenant_ids(landlord_id: int):
        return select(models.Rental.tenant_id).join(
            models.Property, models.Rental.property_id == models.Property.id
        ).where(models.Property.landlord_id == landlord_id)

    def _landlord_predicate(self, entity_type: EntityType, landlord_id: int):
        if entity_type == EntityType.PROPERTY:
            return models.Property.landlord_id == landlord_id
        if entity_type == EntityType.RENTAL:
            return models.Rental.property_id.in_(
                select(models.Property.id).where(models.Property.landlord_id == landlord_id)
            )
        if entity_type == EntityType.RENT_PAYMENT:
            return models.RentPayment.rental_id.in_(self._landlord_rental_ids(landlord_id))
        if entity_type == EntityType.AGREEMENT:
            return models.RentAgreement.rental_id.in_(self._landlord_rental_ids(landlord_id))
        if entity_type == EntityType.TENANT:
            return models.TenantProfile.id.in_(self._landlord_tenant_ids(landlord_id))
        if entity_type == EntityType.DOCUMENT:
            return models.Document.tenant_id.in_(self._landlord_tenant_ids(landlord_id))
        return None

    def _tenant_predicate(self, entity_type: EntityType, tenant_id: int):
        own_rental_ids = select(models.Rental.id).where(models.Rental.tenant_id == tenant_id)

        if entity_type == EntityType.PROPERTY:
            return or_(
                models.Property.status == PropertyStatus.AVAILABLE,
                models.Property.id.in_(
                    select(models.Rental.property_id).where(models.Rental.tenant_id == tenant_id)
                ),
            )
        if entity_type == EntityType.RENTAL:
            return models.Rental.tenant_id == tenant_id
        if entity_type == EntityType.RENT_PAYMENT:
            return models.RentPayment.rental_id.in_(own_rental_ids)
        if entity_type == EntityType.AGREEMENT:
            return models.RentAgreement.rental_id.in_(own_rental_ids)
        if entity_type == EntityType.DOCUMENT:
            return models.Document.tenant_id == tenant_id
        if entity_type == EntityType.TENANT:
            return models.TenantProfile.id == tenant_id
        return None

    # ==================== ENTITÉS CHARGÉES ====================

    def can(self, entity_type: EntityType, entity, action: ActionType = ActionType.READ) -> bool:
        profile_id = self.profile().id
        if self.principal.is_landlord:
            return self._landlord_owns(entity_type, entity, profile_id)
        return self._tenant_can(entity_type, entity, action, profile_id)

    @staticmethod
    def _landlord_owns(entity_type: EntityType, entity, landlord_id: int) -> bool:
        if entity_type == EntityType.PROPERTY:
            return entity.landlord_id == landlord_id
        if entity_type == EntityType.RENTAL:
            return entity.property.landlord_id == landlord_id
        if entity_type in (EntityType.RENT_PAYMENT, EntityType.AGREEMENT):
            return entity.rental.property.landlord_id == landlord_id
        if entity_type == EntityType.TENANT:
            return any(r.property.landlord_id == landlord_id for r in entity.rentals)
        if entity_type == EntityType.DOCUMENT:
            return any(r.property.landlord_id == landlord_id for r in entity.tenant.rentals)
        return False

    @staticmethod
    def _tenant_can(entity_type: EntityType, entity, action: ActionType, tenant_id: int) -> bool:
        if entity_type == EntityType.PROPERTY:
            if action not in READ_ONLY_ACTIONS:
                return False
            return (entity.status == PropertyStatus.AVAILABLE
                    or any(r.tenant_id == tenant_id for r in entity.rentals))
        if entity_type == EntityType.RENTAL:
            return action in READ_ONLY_ACTIONS and entity.tenant_id == tenant_id
        if entity_type in (EntityType.RENT_PAYMENT, EntityType.AGREEMENT):
            return action in READ_ONLY_ACTIONS and entity.rental.tenant_id == tenant_id
        if entity_type == EntityType.DOCUMENT:
            # Le locataire dépose ses pièces, la revue reste au propriétaire
            return action in (ActionType.READ, ActionType.CREATE) and entity.tenant_id == tenant_id
        if entity_type == EntityType.TENANT:
            return action in READ_ONLY_ACTIONS and entity.id == tenant_id
        return False

    def check(self, entity_type: EntityType, entity, action: ActionType = ActionType.READ) -> None:
        if not self.can(entity_type, entity, action):
            logger.warning("Accès refusé: utilisateur %s, %s %s id=%s",
                           self.principal.user_id, action.value, entity_type.value,
                           getattr(entity, "id", None))
            raise AuthorizationError()

    def get_authorized(self, crud: BaseCRUDService, entity_type: EntityType,
                       entity_id: int, action: ActionType = ActionType.READ):
        """
        Ordre des contrôles: profil de l'appelant (404), cible (404), propriété (403)
        """
        self.profile()
        entity = crud.get_or_404(self.db, entity_id)
        self.check(entity_type, entity, action)
        return entity


# ==================== DÉPENDANCES FASTAPI ====================

def get_access_scope(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
) -> AccessScope:
    return AccessScope(db, principal)


def get_landlord_scope(
    principal: Principal = Depends(require_landlord),
    db: Session = Depends(get_db)
) -> AccessScope:
    return AccessScope(db, principal)


def get_tenant_scope(
    principal: Principal = Depends(require_tenant),
    db: Session = Depends(get_db)
) -> AccessScope:
    return AccessScope(db, principal)
