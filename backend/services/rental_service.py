"""
Service des locations: création, fin de location et statut d'occupation du bien
"""
from sqlalchemy.orm import Session

import models
import schemas
from auth import Principal
from base_crud import BaseCRUDService
from constants import ERROR_MESSAGES
from database import unit_of_work
from enums import RentalStatus, PropertyStatus, EntityType, ActionType, RENTAL_TRANSITIONS
from error_handlers import ValidationFailedError
from permission_service import AccessScope

rental_crud = BaseCRUDService(
    models.Rental, EntityType.RENTAL, "location",
    not_found_message=ERROR_MESSAGES["rental_not_found"]
)
property_crud = BaseCRUDService(
    models.Property, EntityType.PROPERTY, "bien",
    not_found_message=ERROR_MESSAGES["property_not_found"]
)
tenant_crud = BaseCRUDService(
    models.TenantProfile, EntityType.TENANT, "locataire",
    not_found_message=ERROR_MESSAGES["tenant_not_found"]
)


def has_active_rental(db: Session, exclude_rental_id: int = None, **criteria) -> bool:
    """Vrai s'il existe une location ACTIVE correspondant aux critères (property_id, tenant_id)"""
    query = db.query(models.Rental.id).filter(models.Rental.status == RentalStatus.ACTIVE)
    for field, value in criteria.items():
        query = query.filter(getattr(models.Rental, field) == value)
    if exclude_rental_id is not None:
        query = query.filter(models.Rental.id != exclude_rental_id)
    return query.first() is not None


def create_rental(
    db: Session, scope: AccessScope, principal: Principal, rental_in: schemas.RentalCreate
) -> models.Rental:
    """
    Lie un bien du propriétaire à un locataire et marque le bien occupé
    """
    prop = scope.get_authorized(property_crud, EntityType.PROPERTY, rental_in.property_id, ActionType.UPDATE)
    tenant = tenant_crud.get_or_404(db, rental_in.tenant_id)

    if has_active_rental(db, property_id=prop.id):
        raise ValidationFailedError("Property already has an active rental")

    data = rental_in.model_dump()
    if data["monthly_rent"] is None:
        data["monthly_rent"] = prop.rent_amount
    if data["deposit"] is None:
        data["deposit"] = prop.deposit

    with unit_of_work(db):
        rental = rental_crud.create(db, data, principal.user_id, tenant_id=tenant.id, status=RentalStatus.ACTIVE)
        property_crud.update(db, prop, {"status": PropertyStatus.OCCUPIED}, principal.user_id)
    db.refresh(rental)
    return rental


def update_rental(
    db: Session, principal: Principal, rental: models.Rental, rental_in: schemas.RentalUpdate
) -> models.Rental:
    changes = rental_in.model_dump(exclude_unset=True)

    target_status = changes.get("status")
    if target_status is not None and target_status != rental.status:
        if target_status not in RENTAL_TRANSITIONS[rental.status]:
            raise ValidationFailedError(
                f"Cannot change rental status from {rental.status.value} to {target_status.value}"
            )

    end_date = changes.get("end_date", rental.end_date)
    if end_date is not None and end_date < rental.start_date:
        raise ValidationFailedError("End date must be on or after start date")

    ending = target_status in (RentalStatus.ENDED, RentalStatus.TERMINATED) and rental.status == RentalStatus.ACTIVE

    with unit_of_work(db):
        rental_crud.update(db, rental, changes, principal.user_id)
        prop = rental.property
        if ending and prop.status == PropertyStatus.OCCUPIED and not has_active_rental(
            db, exclude_rental_id=rental.id, property_id=prop.id
        ):
            property_crud.update(db, prop, {"status": PropertyStatus.AVAILABLE}, principal.user_id)
    db.refresh(rental)
    return rental
