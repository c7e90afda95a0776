"""
Service des échéances de loyer: transitions de statut et passage en retard
"""
import logging
from datetime import date, datetime
from typing import Optional, Union

from sqlalchemy.orm import Session

import models
import schemas
from auth import Principal
from base_crud import BaseCRUDService
from constants import ERROR_MESSAGES
from database import unit_of_work
from enums import PaymentStatus, RentalStatus, EntityType, ActionType, PAYMENT_TRANSITIONS
from error_handlers import ValidationFailedError
from permission_service import AccessScope
from services.rental_service import rental_crud

logger = logging.getLogger(__name__)

payment_crud = BaseCRUDService(
    models.RentPayment, EntityType.RENT_PAYMENT, "échéance",
    not_found_message=ERROR_MESSAGES["payment_not_found"]
)


def check_transition(current: PaymentStatus, target: PaymentStatus) -> None:
    if target == current:
        return
    if target not in PAYMENT_TRANSITIONS[current]:
        raise ValidationFailedError(
            f"Cannot change payment status from {current.value} to {target.value}"
        )


def create_payment(
    db: Session, scope: AccessScope, principal: Principal, payment_in: schemas.RentPaymentCreate
) -> models.RentPayment:
    rental = scope.get_authorized(rental_crud, EntityType.RENTAL, payment_in.rental_id, ActionType.UPDATE)
    if rental.status != RentalStatus.ACTIVE:
        raise ValidationFailedError("Cannot add payments to an inactive rental")

    with unit_of_work(db):
        payment = payment_crud.create(db, payment_in, principal.user_id, status=PaymentStatus.PENDING)
    db.refresh(payment)
    return payment


def update_payment(
    db: Session, principal: Principal, payment: models.RentPayment,
    payment_in: schemas.RentPaymentUpdate, today: Optional[date] = None
) -> models.RentPayment:
    """
    Le passage à PAID écrit statut et date de paiement dans la même transaction
    """
    changes = payment_in.model_dump(exclude_unset=True)
    target_status = changes.get("status")

    if target_status is not None:
        check_transition(payment.status, target_status)
        if target_status == PaymentStatus.PAID and changes.get("paid_date") is None:
            changes["paid_date"] = payment.paid_date or today or date.today()

    if payment.status == PaymentStatus.PAID and (
        "amount" in changes or "due_date" in changes
    ):
        raise ValidationFailedError("Cannot modify a paid rent payment")

    final_status = target_status or payment.status
    if changes.get("paid_date") is not None and final_status != PaymentStatus.PAID:
        raise ValidationFailedError("paid_date can only be set on a paid rent payment")

    with unit_of_work(db):
        payment_crud.update(db, payment, changes, principal.user_id)
    db.refresh(payment)
    return payment


def mark_overdue(db: Session, now: Union[datetime, date, None] = None) -> int:
    """
    Passe en OVERDUE les échéances PENDING dont la date est dépassée.
    Idempotent: un second passage avec la même date ne modifie rien.
    """
    now = now or datetime.now()
    today = now.date() if isinstance(now, datetime) else now

    with unit_of_work(db):
        count = db.query(models.RentPayment).filter(
            models.RentPayment.status == PaymentStatus.PENDING,
            models.RentPayment.due_date < today,
        ).update(
            {models.RentPayment.status: PaymentStatus.OVERDUE},
            synchronize_session=False
        )

    logger.info("%d échéance(s) passée(s) en retard au %s", count, today.isoformat())
    return count
