"""
Routes API pour la gestion des biens
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from decimal import Decimal

from database import get_db, unit_of_work
from enums import EntityType, ActionType, PropertyStatus, PropertyType
from permission_service import AccessScope, get_access_scope, get_landlord_scope
from services.query_service import QueryService
from services.rental_service import property_crud, has_active_rental
from error_handlers import ValidationFailedError
from constants import SUCCESS_MESSAGES, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
import schemas

router = APIRouter(prefix="/api/properties", tags=["properties"])


def property_filter(
    status: Optional[PropertyStatus] = None,
    type: Optional[PropertyType] = None,
    search: Optional[str] = None
) -> schemas.PropertyFilter:
    return schemas.PropertyFilter(status=status, type=type, search=search)


def available_property_filter(
    search: Optional[str] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
    property_type: Optional[PropertyType] = None,
    min_rent: Optional[Decimal] = None,
    max_rent: Optional[Decimal] = None,
    bedrooms: Optional[int] = None
) -> schemas.AvailablePropertyFilter:
    return schemas.AvailablePropertyFilter(
        search=search, city=city, state=state, property_type=property_type,
        min_rent=min_rent, max_rent=max_rent, bedrooms=bedrooms
    )


@router.get("")
async def list_properties(
    filters: schemas.PropertyFilter = Depends(property_filter),
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    scope: AccessScope = Depends(get_access_scope),
    db: Session = Depends(get_db)
):
    """Propriétaire: ses biens. Locataire: les biens disponibles"""
    if scope.principal.is_tenant:
        filters = filters.model_copy(update={"status": PropertyStatus.AVAILABLE})

    query = QueryService.properties(db, scope.scope(EntityType.PROPERTY), filters)
    properties = property_crud.get_multi(query, skip, limit)
    return {"properties": [schemas.PropertyOut.model_validate(p) for p in properties]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_property(
    property_in: schemas.PropertyCreate,
    scope: AccessScope = Depends(get_landlord_scope),
    db: Session = Depends(get_db)
):
    landlord = scope.landlord_profile()

    with unit_of_work(db):
        prop = property_crud.create(db, property_in, scope.principal.user_id, landlord_id=landlord.id)
    db.refresh(prop)

    return {
        "message": SUCCESS_MESSAGES["property_created"],
        "property": schemas.PropertyOut.model_validate(prop),
    }


@router.get("/available")
async def list_available_properties(
    filters: schemas.AvailablePropertyFilter = Depends(available_property_filter),
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    scope: AccessScope = Depends(get_access_scope),
    db: Session = Depends(get_db)
):
    """Annonces disponibles avec le contact du propriétaire"""
    query = QueryService.available_properties(db, filters)
    properties = property_crud.get_multi(query, skip, limit)
    return {"properties": [schemas.PropertyWithLandlordOut.model_validate(p) for p in properties]}


@router.get("/{property_id}")
async def get_property(
    property_id: int,
    scope: AccessScope = Depends(get_access_scope),
    db: Session = Depends(get_db)
):
    prop = scope.get_authorized(property_crud, EntityType.PROPERTY, property_id, ActionType.READ)
    return {"property": schemas.PropertyWithLandlordOut.model_validate(prop)}


@router.patch("/{property_id}")
async def update_property(
    property_id: int,
    property_in: schemas.PropertyUpdate,
    scope: AccessScope = Depends(get_landlord_scope),
    db: Session = Depends(get_db)
):
    prop = scope.get_authorized(property_crud, EntityType.PROPERTY, property_id, ActionType.UPDATE)

    with unit_of_work(db):
        property_crud.update(db, prop, property_in, scope.principal.user_id)
    db.refresh(prop)

    return {
        "message": SUCCESS_MESSAGES["property_updated"],
        "property": schemas.PropertyOut.model_validate(prop),
    }


@router.delete("/{property_id}")
async def delete_property(
    property_id: int,
    scope: AccessScope = Depends(get_landlord_scope),
    db: Session = Depends(get_db)
):
    prop = scope.get_authorized(property_crud, EntityType.PROPERTY, property_id, ActionType.DELETE)

    if has_active_rental(db, property_id=prop.id):
        raise ValidationFailedError("Cannot delete property with an active rental")

    with unit_of_work(db):
        property_crud.delete(db, prop, scope.principal.user_id)

    return {"message": SUCCESS_MESSAGES["property_deleted"]}
