"""
Service pour les requêtes de liste
Traduit les filtres typés en prédicats SQLAlchemy, combinés au périmètre d'accès
"""
from decimal import Decimal
from typing import Dict, Tuple

from sqlalchemy import or_, func, select
from sqlalchemy.orm import Session, Query, selectinload, joinedload

from models import (
    User, LandlordProfile, TenantProfile, Property, Rental, RentPayment,
    Document, RentAgreement
)
from enums import PropertyStatus, PaymentStatus, DocumentStatus
from permission_service import AccessDecision
import schemas


def _contains(column, term: str):
    return column.ilike(f"%{term}%")


class QueryService:
    """
    Requêtes filtrées par entité; la pagination et le tri restent à l'appelant
    """

    @staticmethod
    def properties(db: Session, decision: AccessDecision, filters: schemas.PropertyFilter) -> Query:
        query = db.query(Property).filter(decision.predicate)

        if filters.status:
            query = query.filter(Property.status == filters.status)
        if filters.type:
            query = query.filter(Property.type == filters.type)
        if filters.search:
            query = query.filter(or_(
                _contains(Property.name, filters.search),
                _contains(Property.address, filters.search),
                _contains(Property.city, filters.search),
            ))
        return query

    @staticmethod
    def available_properties(db: Session, filters: schemas.AvailablePropertyFilter) -> Query:
        """
        Annonces publiques: biens disponibles avec le contact du propriétaire
        """
        query = db.query(Property).filter(
            Property.status == PropertyStatus.AVAILABLE
        ).options(
            joinedload(Property.landlord).joinedload(LandlordProfile.user)
        )

        if filters.search:
            query = query.filter(or_(
                _contains(Property.name, filters.search),
                _contains(Property.address, filters.search),
                _contains(Property.description, filters.search),
            ))
        if filters.city:
            query = query.filter(func.lower(Property.city) == filters.city.lower())
        if filters.state:
            query = query.filter(func.lower(Property.state) == filters.state.lower())
        if filters.property_type:
            query = query.filter(Property.type == filters.property_type)
        if filters.min_rent is not None:
            query = query.filter(Property.rent_amount >= filters.min_rent)
        if filters.max_rent is not None:
            query = query.filter(Property.rent_amount <= filters.max_rent)
        if filters.bedrooms is not None:
            query = query.filter(Property.bedrooms == filters.bedrooms)
        return query

    @staticmethod
    def tenants(db: Session, decision: AccessDecision, filters: schemas.TenantFilter) -> Query:
        query = db.query(TenantProfile).join(
            User, TenantProfile.user_id == User.id
        ).filter(decision.predicate).options(
            selectinload(TenantProfile.rentals).joinedload(Rental.property),
            selectinload(TenantProfile.documents),
        )

        if filters.kyc_status:
            query = query.filter(TenantProfile.kyc_status == filters.kyc_status)
        if filters.search:
            query = query.filter(or_(
                _contains(User.name, filters.search),
                _contains(User.email, filters.search),
            ))
        return query

    @staticmethod
    def rentals(db: Session, decision: AccessDecision, filters: schemas.RentalFilter) -> Query:
        query = db.query(Rental).filter(decision.predicate).options(
            joinedload(Rental.property),
            joinedload(Rental.tenant).joinedload(TenantProfile.user),
        )

        if filters.status:
            query = query.filter(Rental.status == filters.status)
        if filters.property_id is not None:
            query = query.filter(Rental.property_id == filters.property_id)
        if filters.tenant_id is not None:
            query = query.filter(Rental.tenant_id == filters.tenant_id)
        return query

    @staticmethod
    def rent_payments(db: Session, decision: AccessDecision, filters: schemas.RentPaymentFilter) -> Query:
        query = db.query(RentPayment).filter(decision.predicate)

        if filters.property_id is not None or filters.tenant_id is not None:
            rental_ids = select(Rental.id)
            if filters.property_id is not None:
                rental_ids = rental_ids.where(Rental.property_id == filters.property_id)
            if filters.tenant_id is not None:
                rental_ids = rental_ids.where(Rental.tenant_id == filters.tenant_id)
            query = query.filter(RentPayment.rental_id.in_(rental_ids))
        if filters.status:
            query = query.filter(RentPayment.status == filters.status)
        return query

    @staticmethod
    def documents(db: Session, decision: AccessDecision, filters: schemas.DocumentFilter) -> Query:
        query = db.query(Document).filter(decision.predicate)

        if filters.status:
            query = query.filter(Document.status == filters.status)
        if filters.tenant_id is not None:
            query = query.filter(Document.tenant_id == filters.tenant_id)
        if filters.type:
            query = query.filter(Document.type == filters.type)
        return query

    @staticmethod
    def agreements(db: Session, decision: AccessDecision, filters: schemas.AgreementFilter) -> Query:
        query = db.query(RentAgreement).filter(decision.predicate)

        if filters.rental_id is not None:
            query = query.filter(RentAgreement.rental_id == filters.rental_id)
        if filters.status:
            query = query.filter(RentAgreement.status == filters.status)
        return query

    # ==================== AGRÉGATS ====================

    @staticmethod
    def _totals_by_status(query: Query, status_column, amount_column=None) -> Dict:
        columns = [status_column, func.count()]
        if amount_column is not None:
            columns.append(func.sum(amount_column))
        rows = query.order_by(None).with_entities(*columns).group_by(status_column).all()
        return {row[0]: tuple(row[1:]) for row in rows}

    @staticmethod
    def rent_summary(query: Query) -> schemas.RentSummary:
        """
        Totaux sur l'ensemble filtré (avant pagination)
        """
        totals = QueryService._totals_by_status(query, RentPayment.status, RentPayment.amount)

        def bucket(status: PaymentStatus) -> Tuple[int, Decimal]:
            count, amount = totals.get(status, (0, None))
            return count, Decimal(str(amount or 0))

        pending_count, pending_amount = bucket(PaymentStatus.PENDING)
        overdue_count, overdue_amount = bucket(PaymentStatus.OVERDUE)
        _, paid_amount = bucket(PaymentStatus.PAID)

        return schemas.RentSummary(
            total_due=pending_amount + overdue_amount,
            total_paid=paid_amount,
            overdue_count=overdue_count,
            pending_count=pending_count,
        )

    @staticmethod
    def document_summary(query: Query) -> schemas.DocumentSummary:
        totals = QueryService._totals_by_status(query, Document.status)
        counts = {status: totals.get(status, (0,))[0] for status in DocumentStatus}
        return schemas.DocumentSummary(
            pending_count=counts[DocumentStatus.PENDING],
            approved_count=counts[DocumentStatus.APPROVED],
            rejected_count=counts[DocumentStatus.REJECTED],
            total_count=sum(counts.values()),
        )
