"""
Fixtures communes: base SQLite en mémoire, client HTTP et fabrique d'entités
"""
import os

# Avant tout import applicatif: database.py lit ces variables au chargement
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CREATE_TABLES"] = "false"
os.environ["JWT_SECRET_KEY"] = "rentdesk-test-secret"

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine
from models import (
    User, LandlordProfile, TenantProfile, Property, Rental, RentPayment,
    Document, RentAgreement
)
from enums import (
    UserRole, KycStatus, PropertyType, PropertyStatus, RentalStatus,
    PaymentStatus, DocumentType, DocumentStatus, AgreementStatus
)
from auth import get_password_hash, create_token_for_user

PASSWORD = "secret-pass-1"
PASSWORD_HASH = get_password_hash(PASSWORD)

LEASE_TERMS = (
    "Agreement between {{landlordName}} and {{tenantName}} "
    "for {{propertyAddress}} at {{rentAmount}} per month."
)


class Factory:
    """Crée et commite des entités de test directement via l'ORM"""

    def __init__(self, db):
        self.db = db
        self._counter = 0

    def _email(self, prefix):
        self._counter += 1
        return f"{prefix}{self._counter}@rentdesk.io"

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def landlord(self, name="Laura Landlord", email=None, with_profile=True):
        user = User(
            email=email or self._email("landlord"),
            name=name,
            hashed_password=PASSWORD_HASH,
            role=UserRole.LANDLORD,
        )
        if with_profile:
            user.landlord_profile = LandlordProfile(
                phone_number="+33600000001", business_name="Laura Immo"
            )
        return self._save(user)

    def tenant(self, name="Tom Tenant", email=None, with_profile=True, kyc_status=KycStatus.PENDING):
        user = User(
            email=email or self._email("tenant"),
            name=name,
            hashed_password=PASSWORD_HASH,
            role=UserRole.TENANT,
        )
        if with_profile:
            user.tenant_profile = TenantProfile(
                phone_number="+33600000002", occupation="Engineer", kyc_status=kyc_status
            )
        return self._save(user)

    def property(self, landlord, **fields):
        values = {
            "name": "Sunset Apartment",
            "address": "123 Main Street",
            "city": "San Francisco",
            "state": "CA",
            "zip_code": "94102",
            "type": PropertyType.APARTMENT,
            "bedrooms": 2,
            "bathrooms": 1,
            "rent_amount": Decimal("2500"),
            "deposit": Decimal("5000"),
            "status": PropertyStatus.AVAILABLE,
            "images": [],
            "amenities": ["Parking"],
        }
        values.update(fields)
        return self._save(Property(landlord_id=landlord.landlord_profile.id, **values))

    def rental(self, prop, tenant, status=RentalStatus.ACTIVE, start_date=date(2024, 1, 1), **fields):
        values = {
            "end_date": date(2025, 1, 1),
            "monthly_rent": prop.rent_amount,
            "deposit": prop.deposit,
        }
        values.update(fields)
        rental = self._save(Rental(
            property_id=prop.id,
            tenant_id=tenant.tenant_profile.id,
            start_date=start_date,
            status=status,
            **values
        ))
        if status == RentalStatus.ACTIVE:
            prop.status = PropertyStatus.OCCUPIED
            self.db.commit()
        return rental

    def payment(self, rental, amount="2500", due_date=date(2024, 2, 1),
                status=PaymentStatus.PENDING, paid_date=None):
        return self._save(RentPayment(
            rental_id=rental.id,
            amount=Decimal(amount),
            due_date=due_date,
            paid_date=paid_date,
            status=status,
        ))

    def document(self, tenant, status=DocumentStatus.PENDING, type=DocumentType.ID_PROOF):
        return self._save(Document(
            tenant_id=tenant.tenant_profile.id,
            type=type,
            file_name="passport.pdf",
            file_url="https://files.rentdesk.io/passport.pdf",
            file_size=2048,
            status=status,
        ))

    def agreement(self, rental, status=AgreementStatus.DRAFT, terms=LEASE_TERMS, **fields):
        values = {
            "start_date": date(2024, 1, 1),
            "end_date": date(2025, 1, 1),
            "rent_amount": rental.monthly_rent,
            "security_deposit": rental.deposit or Decimal("0"),
            "template_variables": {},
            "version": 1,
        }
        values.update(fields)
        return self._save(RentAgreement(rental_id=rental.id, terms=terms, status=status, **values))


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make(db):
    return Factory(db)


@pytest.fixture
def client():
    from main import app
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    def build(user):
        return {"Authorization": f"Bearer {create_token_for_user(user)}"}
    return build


@pytest.fixture
def landlord(make):
    return make.landlord()


@pytest.fixture
def other_landlord(make):
    return make.landlord(name="Oscar Owner")


@pytest.fixture
def tenant(make):
    return make.tenant()


@pytest.fixture
def other_tenant(make):
    return make.tenant(name="Olga Occupant")


@pytest.fixture
def prop(make, landlord):
    return make.property(landlord)


@pytest.fixture
def rental(make, prop, tenant):
    return make.rental(prop, tenant)
