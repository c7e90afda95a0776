"""
Service des contrats de location
Substitution des variables {{nom}} dans le texte et cycle de vie du contrat
"""
import html
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Any

from sqlalchemy.orm import Session

import models
import schemas
from auth import Principal
from base_crud import BaseCRUDService
from constants import ERROR_MESSAGES
from database import unit_of_work
from enums import AgreementStatus, EntityType, ActionType, AGREEMENT_TRANSITIONS
from error_handlers import ValidationFailedError
from permission_service import AccessScope
from services.rental_service import property_crud, rental_crud

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")

# Un changement de ces champs produit une nouvelle version du contrat
VERSIONED_FIELDS = ("terms", "template_variables")

agreement_crud = BaseCRUDService(
    models.RentAgreement, EntityType.AGREEMENT, "contrat",
    not_found_message=ERROR_MESSAGES["agreement_not_found"]
)


# ==================== SUBSTITUTION ====================

def render_terms(template: str, variables: Dict[str, Any], escape: bool = True) -> str:
    """
    Remplace chaque {{ nom }} par sa valeur.

    Les valeurs sont du texte non fiable: échappées en HTML par défaut.
    Les variables inconnues restent telles quelles dans le texte.
    """
    def replace(match):
        name = match.group(1)
        if name not in variables or variables[name] is None:
            return match.group(0)
        value = str(variables[name])
        return html.escape(value) if escape else value

    return PLACEHOLDER_PATTERN.sub(replace, template or "")


def placeholder_names(template: str) -> List[str]:
    seen = []
    for name in PLACEHOLDER_PATTERN.findall(template or ""):
        if name not in seen:
            seen.append(name)
    return seen


def missing_variables(template: str, variables: Dict[str, Any]) -> List[str]:
    return sorted(
        name for name in placeholder_names(template)
        if variables.get(name) is None
    )


def _format_amount(value: Optional[Decimal]) -> Optional[str]:
    if value is None:
        return None
    return f"{Decimal(value):.2f}"


def _format_date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def default_variables(agreement: models.RentAgreement, today: Optional[date] = None) -> Dict[str, str]:
    """
    Variables déduites du contrat et de sa location
    """
    rental = agreement.rental
    prop = rental.property if rental else None
    landlord = prop.landlord if prop else None
    tenant = rental.tenant if rental else None

    values = {
        "landlordName": landlord.name if landlord else None,
        "tenantName": tenant.name if tenant else None,
        "propertyAddress": prop.full_address if prop else None,
        "propertyName": prop.name if prop else None,
        "rentAmount": _format_amount(agreement.rent_amount),
        "depositAmount": _format_amount(agreement.security_deposit),
        "leaseStartDate": _format_date(agreement.start_date),
        "leaseEndDate": _format_date(agreement.end_date),
        "agreementDate": _format_date(today or date.today()),
    }
    return {key: value for key, value in values.items() if value is not None}


def effective_variables(agreement: models.RentAgreement, today: Optional[date] = None) -> Dict[str, str]:
    """Variables par défaut, surchargées par celles saisies sur le contrat"""
    return {**default_variables(agreement, today), **(agreement.template_variables or {})}


def render_agreement(agreement: models.RentAgreement, today: Optional[date] = None) -> schemas.AgreementRenderOut:
    variables = effective_variables(agreement, today)
    return schemas.AgreementRenderOut(
        agreement_id=agreement.id,
        version=agreement.version,
        content=render_terms(agreement.terms, variables),
        missing_variables=missing_variables(agreement.terms, variables),
    )


# ==================== ANCIEN FORMAT ====================

def _first(payload: Dict[str, Any], *keys):
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def _to_decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValidationFailedError(f"Invalid amount: {value}")


def migrate_agreement_payload(
    db: Session, payload: Dict[str, Any], scope: Optional[AccessScope] = None
) -> Dict[str, Any]:
    """
    Convertit un contrat rattaché à un bien (content / variables / property_id)
    vers la forme rattachée à une location (terms / template_variables / rental_id).

    Le bien est résolu avant ses locations: inconnu (404), puis hors périmètre
    de l'appelant quand un scope est fourni (403).
    Le contrat est rattaché à la location la plus récente du bien.
    Les montants manquants sont repris des variables puis de la location.
    """
    if _first(payload, "rental_id", "rentalId") is not None:
        return dict(payload)

    property_id = _first(payload, "property_id", "propertyId")
    if property_id is None:
        raise ValidationFailedError("Either rental_id or property_id is required")

    if scope is not None:
        prop = scope.get_authorized(property_crud, EntityType.PROPERTY, property_id, ActionType.UPDATE)
    else:
        prop = property_crud.get_or_404(db, property_id)

    rental = db.query(models.Rental).filter(
        models.Rental.property_id == prop.id
    ).order_by(models.Rental.start_date.desc(), models.Rental.id.desc()).first()
    if rental is None:
        raise ValidationFailedError("Property has no rental to attach the agreement to")

    variables = {
        str(key): str(value)
        for key, value in (_first(payload, "template_variables", "variables") or {}).items()
        if value is not None
    }

    rent_amount = _to_decimal(_first(payload, "rent_amount", "rentAmount") or variables.get("rentAmount"))
    deposit = _to_decimal(
        _first(payload, "security_deposit", "securityDeposit") or variables.get("depositAmount")
    )

    migrated = {
        "rental_id": rental.id,
        "start_date": _first(payload, "start_date", "startDate") or rental.start_date,
        "end_date": _first(payload, "end_date", "endDate") or rental.end_date,
        "rent_amount": rent_amount if rent_amount is not None else rental.monthly_rent,
        "security_deposit": deposit if deposit is not None else (rental.deposit or Decimal("0")),
        "terms": _first(payload, "terms", "content") or "",
        "template_variables": variables,
    }
    for key in ("status", "version"):
        if payload.get(key) is not None:
            migrated[key] = payload[key]
    return migrated


# ==================== CYCLE DE VIE ====================

def check_transition(current: AgreementStatus, target: AgreementStatus) -> None:
    if target == current:
        return
    if target not in AGREEMENT_TRANSITIONS[current]:
        raise ValidationFailedError(
            f"Cannot change agreement status from {current.value} to {target.value}"
        )


def create_agreement(
    db: Session, scope: AccessScope, principal: Principal, agreement_in: schemas.AgreementCreate
) -> models.RentAgreement:
    """
    Contrat toujours créé en brouillon, version 1, sur une location du propriétaire
    """
    scope.get_authorized(rental_crud, EntityType.RENTAL, agreement_in.rental_id, ActionType.UPDATE)

    with unit_of_work(db):
        agreement = agreement_crud.create(
            db, agreement_in, principal.user_id,
            status=AgreementStatus.DRAFT, version=1
        )
    db.refresh(agreement)
    return agreement


def update_agreement(
    db: Session, principal: Principal, agreement: models.RentAgreement,
    agreement_in: schemas.AgreementUpdate
) -> models.RentAgreement:
    changes = agreement_in.model_dump(exclude_unset=True)

    target_status = changes.get("status")
    if target_status is not None:
        check_transition(agreement.status, target_status)

    start_date = changes.get("start_date") or agreement.start_date
    end_date = changes.get("end_date") or agreement.end_date
    if end_date <= start_date:
        raise ValidationFailedError("End date must be after start date")

    if any(field in changes and changes[field] != getattr(agreement, field) for field in VERSIONED_FIELDS):
        changes["version"] = agreement.version + 1

    with unit_of_work(db):
        agreement_crud.update(db, agreement, changes, principal.user_id)
    db.refresh(agreement)
    return agreement


def delete_agreement(db: Session, principal: Principal, agreement: models.RentAgreement) -> None:
    if agreement.status != AgreementStatus.DRAFT:
        raise ValidationFailedError("Cannot delete active or terminated agreements")

    with unit_of_work(db):
        agreement_crud.delete(db, agreement, principal.user_id)
