"""
Routes API pour les échéances de loyer
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from database import get_db
from models import RentPayment
from enums import EntityType, ActionType, PaymentStatus
from permission_service import AccessScope, get_access_scope, get_landlord_scope
from services.query_service import QueryService
from services import rent_service
from services.rent_service import payment_crud
from constants import SUCCESS_MESSAGES, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
import schemas

router = APIRouter(prefix="/api/rents", tags=["rents"])


def rent_payment_filter(
    status: Optional[PaymentStatus] = None,
    property_id: Optional[int] = None,
    tenant_id: Optional[int] = None
) -> schemas.RentPaymentFilter:
    return schemas.RentPaymentFilter(status=status, property_id=property_id, tenant_id=tenant_id)


@router.get("")
async def list_rent_payments(
    filters: schemas.RentPaymentFilter = Depends(rent_payment_filter),
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    scope: AccessScope = Depends(get_landlord_scope),
    db: Session = Depends(get_db)
):
    """Échéances des biens du propriétaire avec totaux"""
    query = QueryService.rent_payments(db, scope.scope(EntityType.RENT_PAYMENT), filters)
    payments = payment_crud.get_multi(
        query, skip, limit, order_by=[RentPayment.due_date.desc(), RentPayment.id.desc()]
    )
    return {
        "rent_payments": [schemas.RentPaymentOut.model_validate(p) for p in payments],
        "summary": QueryService.rent_summary(query),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_rent_payment(
    payment_in: schemas.RentPaymentCreate,
    scope: AccessScope = Depends(get_landlord_scope),
    db: Session = Depends(get_db)
):
    payment = rent_service.create_payment(db, scope, scope.principal, payment_in)
    return {
        "message": SUCCESS_MESSAGES["payment_created"],
        "rent_payment": schemas.RentPaymentOut.model_validate(payment),
    }


@router.get("/{payment_id}")
async def get_rent_payment(
    payment_id: int,
    scope: AccessScope = Depends(get_access_scope),
    db: Session = Depends(get_db)
):
    payment = scope.get_authorized(payment_crud, EntityType.RENT_PAYMENT, payment_id, ActionType.READ)
    return {"rent_payment": schemas.RentPaymentOut.model_validate(payment)}


@router.patch("/{payment_id}")
async def update_rent_payment(
    payment_id: int,
    payment_in: schemas.RentPaymentUpdate,
    scope: AccessScope = Depends(get_landlord_scope),
    db: Session = Depends(get_db)
):
    payment = scope.get_authorized(payment_crud, EntityType.RENT_PAYMENT, payment_id, ActionType.UPDATE)
    payment = rent_service.update_payment(db, scope.principal, payment, payment_in)
    return {
        "message": SUCCESS_MESSAGES["payment_updated"],
        "rent_payment": schemas.RentPaymentOut.model_validate(payment),
    }
