"""
Tests unitaires du périmètre d'accès par rôle
"""
import pytest

from auth import Principal
from enums import EntityType, ActionType, PropertyStatus, RentalStatus, UserRole
from error_handlers import AuthorizationError, NotFoundError
from models import Property, Rental, RentPayment, Document, TenantProfile
from permission_service import AccessScope
from services.rental_service import property_crud


def scope_for(db, user):
    return AccessScope(db, Principal(user_id=user.id, role=user.role))


def visible(db, scope, model, entity_type):
    decision = scope.scope(entity_type)
    return {row.id for row in db.query(model).filter(decision.predicate)}


def test_landlord_scope_limited_to_own_properties(db, make, landlord, other_landlord):
    own = make.property(landlord)
    make.property(other_landlord, name="Elsewhere")

    assert visible(db, scope_for(db, landlord), Property, EntityType.PROPERTY) == {own.id}


def test_landlord_scope_follows_rental_chain(db, make, landlord, other_landlord, tenant, other_tenant):
    own_rental = make.rental(make.property(landlord), tenant)
    foreign_rental = make.rental(make.property(other_landlord), other_tenant)
    own_payment = make.payment(own_rental)
    make.payment(foreign_rental)
    own_document = make.document(tenant)
    make.document(other_tenant)

    scope = scope_for(db, landlord)
    assert visible(db, scope, Rental, EntityType.RENTAL) == {own_rental.id}
    assert visible(db, scope, RentPayment, EntityType.RENT_PAYMENT) == {own_payment.id}
    assert visible(db, scope, TenantProfile, EntityType.TENANT) == {tenant.tenant_profile.id}
    assert visible(db, scope, Document, EntityType.DOCUMENT) == {own_document.id}


def test_tenant_sees_available_and_rented_properties(db, make, landlord, tenant, other_tenant):
    available = make.property(landlord, name="Free")
    rented = make.property(landlord, name="Mine")
    make.rental(rented, tenant)
    taken = make.property(landlord, name="Taken")
    make.rental(taken, other_tenant)

    assert visible(db, scope_for(db, tenant), Property, EntityType.PROPERTY) == {available.id, rented.id}


def test_tenant_cannot_mutate_properties(db, make, landlord, tenant):
    prop = make.property(landlord)
    scope = scope_for(db, tenant)

    assert scope.can(EntityType.PROPERTY, prop, ActionType.READ)
    assert not scope.can(EntityType.PROPERTY, prop, ActionType.UPDATE)
    assert not scope.can(EntityType.PROPERTY, prop, ActionType.DELETE)


def test_tenant_can_create_own_documents_only(db, make, tenant, other_tenant):
    own = make.document(tenant)
    foreign = make.document(other_tenant)
    scope = scope_for(db, tenant)

    assert scope.can(EntityType.DOCUMENT, own, ActionType.CREATE)
    assert not scope.can(EntityType.DOCUMENT, own, ActionType.UPDATE)
    assert not scope.can(EntityType.DOCUMENT, foreign, ActionType.READ)


def test_landlord_owns_tenant_through_any_rental(db, make, landlord, tenant):
    make.rental(make.property(landlord), tenant, status=RentalStatus.ENDED)

    assert scope_for(db, landlord).can(EntityType.TENANT, tenant.tenant_profile, ActionType.DELETE)


def test_missing_profile_is_not_found(db, make):
    landlord = make.landlord(with_profile=False)

    with pytest.raises(NotFoundError) as exc_info:
        scope_for(db, landlord).scope(EntityType.PROPERTY)
    assert exc_info.value.message == "Landlord profile not found"


def test_require_role_mismatch_is_forbidden(db, tenant):
    with pytest.raises(AuthorizationError):
        scope_for(db, tenant).require_role(UserRole.LANDLORD)


def test_get_authorized_checks_existence_before_ownership(db, make, landlord, other_landlord):
    prop = make.property(other_landlord)
    scope = scope_for(db, landlord)

    with pytest.raises(NotFoundError):
        scope.get_authorized(property_crud, EntityType.PROPERTY, prop.id + 100)
    with pytest.raises(AuthorizationError):
        scope.get_authorized(property_crud, EntityType.PROPERTY, prop.id)


def test_occupied_property_hidden_from_unrelated_tenant(db, make, landlord, tenant):
    prop = make.property(landlord, status=PropertyStatus.OCCUPIED)

    assert not scope_for(db, tenant).can(EntityType.PROPERTY, prop)
