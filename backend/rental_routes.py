"""
Routes API pour les locations
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from database import get_db
from models import Rental
from enums import EntityType, ActionType, RentalStatus
from permission_service import AccessScope, get_access_scope, get_landlord_scope
from services.query_service import QueryService
from services import rental_service
from services.rental_service import rental_crud
from constants import SUCCESS_MESSAGES, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
import schemas

router = APIRouter(prefix="/api/rentals", tags=["rentals"])


def rental_filter(
    status: Optional[RentalStatus] = None,
    property_id: Optional[int] = None,
    tenant_id: Optional[int] = None
) -> schemas.RentalFilter:
    return schemas.RentalFilter(status=status, property_id=property_id, tenant_id=tenant_id)


@router.get("")
async def list_rentals(
    filters: schemas.RentalFilter = Depends(rental_filter),
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    scope: AccessScope = Depends(get_access_scope),
    db: Session = Depends(get_db)
):
    """Locations visibles, la plus récente en premier"""
    query = QueryService.rentals(db, scope.scope(EntityType.RENTAL), filters)
    rentals = rental_crud.get_multi(
        query, skip, limit, order_by=[Rental.start_date.desc(), Rental.id.desc()]
    )
    return {"rentals": [schemas.RentalOut.model_validate(r) for r in rentals]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_rental(
    rental_in: schemas.RentalCreate,
    scope: AccessScope = Depends(get_landlord_scope),
    db: Session = Depends(get_db)
):
    rental = rental_service.create_rental(db, scope, scope.principal, rental_in)
    return {
        "message": SUCCESS_MESSAGES["rental_created"],
        "rental": schemas.RentalOut.model_validate(rental),
    }


@router.get("/{rental_id}")
async def get_rental(
    rental_id: int,
    scope: AccessScope = Depends(get_access_scope),
    db: Session = Depends(get_db)
):
    rental = scope.get_authorized(rental_crud, EntityType.RENTAL, rental_id, ActionType.READ)
    return {"rental": schemas.RentalOut.model_validate(rental)}


@router.patch("/{rental_id}")
async def update_rental(
    rental_id: int,
    rental_in: schemas.RentalUpdate,
    scope: AccessScope = Depends(get_landlord_scope),
    db: Session = Depends(get_db)
):
    rental = scope.get_authorized(rental_crud, EntityType.RENTAL, rental_id, ActionType.UPDATE)
    rental = rental_service.update_rental(db, scope.principal, rental, rental_in)
    return {
        "message": SUCCESS_MESSAGES["rental_updated"],
        "rental": schemas.RentalOut.model_validate(rental),
    }
