"""
Script pour peupler la base avec un jeu de données de démonstration
Un propriétaire, deux locataires, trois biens, une location et son contrat
"""
import sys
import os
from datetime import date, datetime
from decimal import Decimal

# Ajout du chemin pour les imports
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from database import SessionLocal, unit_of_work
from models import (
    User, LandlordProfile, TenantProfile, Property, Rental, RentPayment,
    Document, RentAgreement
)
from enums import (
    UserRole, KycStatus, PropertyType, PropertyStatus, RentalStatus,
    PaymentStatus, DocumentType, DocumentStatus, AgreementStatus
)
from auth import get_password_hash
from services.agreement_service import migrate_agreement_payload

LANDLORD_EMAIL = "landlord@example.com"
DEMO_PASSWORD = "demo-pass-123"

STANDARD_LEASE = (
    "This Rental Agreement is entered into on {{agreementDate}} between:\n\n"
    "LANDLORD: {{landlordName}}\n"
    "TENANT: {{tenantName}}\n\n"
    "PROPERTY: {{propertyAddress}}\n\n"
    "TERMS:\n"
    "1. Monthly Rent: ${{rentAmount}}\n"
    "2. Security Deposit: ${{depositAmount}}\n"
    "3. Lease Term: {{leaseStartDate}} to {{leaseEndDate}}\n\n"
    "The tenant agrees to pay rent on the first day of each month.\n\n"
    "LANDLORD SIGNATURE: _________________\n"
    "TENANT SIGNATURE: _________________"
)


def create_user(db, email, name, role, **profile_fields):
    user = User(
        email=email,
        name=name,
        hashed_password=get_password_hash(DEMO_PASSWORD),
        role=role,
        email_verified_at=datetime.utcnow(),
    )
    if role == UserRole.LANDLORD:
        user.landlord_profile = LandlordProfile(**profile_fields)
    else:
        user.tenant_profile = TenantProfile(**profile_fields)
    db.add(user)
    db.flush()
    return user


def seed_demo_data():
    """Crée les données de démonstration si elles n'existent pas"""

    print("=== DONNÉES DE DÉMONSTRATION ===")
    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == LANDLORD_EMAIL).first():
            print("   [INFO] Données déjà présentes, rien à faire")
            return False

        with unit_of_work(db):
            print("1. Création des utilisateurs...")
            landlord = create_user(
                db, LANDLORD_EMAIL, "John Landlord", UserRole.LANDLORD,
                phone_number="+1234567890", business_name="Premium Properties LLC",
            )
            alice = create_user(
                db, "tenant1@example.com", "Alice Tenant", UserRole.TENANT,
                phone_number="+1234567891", date_of_birth=date(1990, 5, 15),
                occupation="Software Engineer", kyc_status=KycStatus.APPROVED,
            )
            create_user(
                db, "tenant2@example.com", "Bob Renter", UserRole.TENANT,
                phone_number="+1234567892", date_of_birth=date(1988, 8, 22),
                occupation="Marketing Manager", kyc_status=KycStatus.PENDING,
            )
            print("   [OK] 1 propriétaire, 2 locataires")

            print("\n2. Création des biens...")
            landlord_id = landlord.landlord_profile.id
            sunset = Property(
                landlord_id=landlord_id, name="Sunset Apartment",
                description="Beautiful 2-bedroom apartment with stunning sunset views.",
                address="123 Main Street", city="San Francisco", state="CA", zip_code="94102",
                type=PropertyType.APARTMENT, size=Decimal("1200"), bedrooms=2, bathrooms=2,
                rent_amount=Decimal("2500"), deposit=Decimal("5000"), status=PropertyStatus.OCCUPIED,
                images=["/placeholder-property-1.jpg", "/placeholder-property-2.jpg"],
                amenities=["Parking", "Gym", "Pool", "Pet Friendly", "Air Conditioning"],
            )
            studio = Property(
                landlord_id=landlord_id, name="Downtown Studio",
                description="Cozy studio in the heart of downtown.",
                address="456 Market Street", city="San Francisco", state="CA", zip_code="94103",
                type=PropertyType.STUDIO, size=Decimal("500"), bedrooms=0, bathrooms=1,
                rent_amount=Decimal("1800"), deposit=Decimal("3600"),
                images=["/placeholder-studio.jpg"], amenities=["Heating", "Internet", "Security"],
            )
            villa = Property(
                landlord_id=landlord_id, name="Luxury Villa",
                description="Spacious 4-bedroom villa with garden and garage.",
                address="789 Oak Avenue", city="Palo Alto", state="CA", zip_code="94301",
                type=PropertyType.HOUSE, size=Decimal("3000"), bedrooms=4, bathrooms=3,
                rent_amount=Decimal("5000"), deposit=Decimal("10000"),
                amenities=["Parking", "Garden", "Garage", "Pet Friendly"],
            )
            db.add_all([sunset, studio, villa])
            db.flush()
            print("   [OK] 3 biens")

            print("\n3. Création de la location et des échéances...")
            rental = Rental(
                property_id=sunset.id, tenant_id=alice.tenant_profile.id,
                start_date=date(2024, 1, 1), end_date=date(2025, 1, 1),
                monthly_rent=Decimal("2500"), deposit=Decimal("5000"), status=RentalStatus.ACTIVE,
            )
            db.add(rental)
            db.flush()
            db.add_all([
                RentPayment(rental_id=rental.id, amount=Decimal("2500"), due_date=date(2024, 10, 1),
                            paid_date=date(2024, 9, 28), status=PaymentStatus.PAID),
                RentPayment(rental_id=rental.id, amount=Decimal("2500"), due_date=date(2024, 11, 1),
                            status=PaymentStatus.PENDING),
                Document(tenant_id=alice.tenant_profile.id, type=DocumentType.ID_PROOF,
                         file_name="drivers_license.pdf", file_url="/documents/sample-id.pdf",
                         file_size=1024000, status=DocumentStatus.APPROVED),
            ])
            print("   [OK] 1 location, 2 échéances, 1 document")

            print("\n4. Création du contrat (ancien format rattaché au bien)...")
            agreement_data = migrate_agreement_payload(db, {
                "property_id": sunset.id,
                "content": STANDARD_LEASE,
                "variables": {
                    "landlordName": "John Landlord",
                    "tenantName": "Alice Tenant",
                    "rentAmount": "2500",
                    "depositAmount": "5000",
                },
                "status": AgreementStatus.ACTIVE,
                "start_date": date(2024, 1, 1),
                "end_date": date(2025, 1, 1),
            })
            db.add(RentAgreement(**agreement_data))
            print("   [OK] Contrat rattaché à la location", rental.id)

        print("\n=== DONNÉES CRÉÉES ===")
        print(f"Mot de passe de démonstration: {DEMO_PASSWORD}")
        return True
    finally:
        db.close()


if __name__ == "__main__":
    seed_demo_data()
