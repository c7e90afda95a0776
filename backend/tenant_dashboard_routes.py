"""
Routes API pour le tableau de bord du locataire
"""
from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models import Rental, RentPayment, Document
from enums import RentalStatus, DocumentStatus, OUTSTANDING_PAYMENT_STATUSES
from permission_service import AccessScope, get_tenant_scope
from constants import DASHBOARD_RECENT_RENTALS, DASHBOARD_RECENT_PAYMENTS
import schemas

router = APIRouter(prefix="/api/tenant", tags=["tenant-dashboard"])


def _payment_out(payment: RentPayment) -> schemas.DashboardPaymentOut:
    return schemas.DashboardPaymentOut(
        id=payment.id,
        amount=payment.amount,
        due_date=payment.due_date,
        paid_date=payment.paid_date,
        status=payment.status,
        property_name=payment.rental.property.name,
    )


@router.get("/dashboard", response_model=schemas.TenantDashboardOut)
async def get_dashboard(
    scope: AccessScope = Depends(get_tenant_scope),
    db: Session = Depends(get_db)
):
    """Synthèse: locations actives, échéances à régler, documents en attente"""
    tenant = scope.tenant_profile()
    payments_query = db.query(RentPayment).join(
        Rental, RentPayment.rental_id == Rental.id
    ).filter(
        Rental.tenant_id == tenant.id
    ).options(
        joinedload(RentPayment.rental).joinedload(Rental.property)
    )

    active_rentals = db.query(Rental).filter(
        Rental.tenant_id == tenant.id,
        Rental.status == RentalStatus.ACTIVE
    ).count()

    pending_payments = payments_query.filter(
        RentPayment.status.in_(OUTSTANDING_PAYMENT_STATUSES)
    ).order_by(RentPayment.due_date.asc(), RentPayment.id.asc()).all()

    total_pending = sum((p.amount for p in pending_payments), Decimal("0"))

    pending_documents = db.query(Document).filter(
        Document.tenant_id == tenant.id,
        Document.status == DocumentStatus.PENDING
    ).count()

    recent_rentals = db.query(Rental).filter(
        Rental.tenant_id == tenant.id
    ).options(
        joinedload(Rental.property)
    ).order_by(Rental.start_date.desc(), Rental.id.desc()).limit(DASHBOARD_RECENT_RENTALS).all()

    recent_payments = payments_query.order_by(
        RentPayment.due_date.desc(), RentPayment.id.desc()
    ).limit(DASHBOARD_RECENT_PAYMENTS).all()

    return schemas.TenantDashboardOut(
        active_rentals=active_rentals,
        total_pending=total_pending,
        upcoming_payments=len(pending_payments),
        pending_documents=pending_documents,
        pending_payments=[_payment_out(p) for p in pending_payments],
        recent_rentals=[schemas.DashboardRentalOut.model_validate(r) for r in recent_rentals],
        recent_payments=[_payment_out(p) for p in recent_payments],
    )
