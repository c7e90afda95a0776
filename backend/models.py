from sqlalchemy import Column, Integer, String, ForeignKey, Enum, Date, DateTime, Text, Numeric, Index, JSON
from sqlalchemy.orm import relationship
from database import Base
import datetime

# Import centralisé des enums
from enums import (
    UserRole, KycStatus, PropertyType, PropertyStatus, RentalStatus,
    PaymentStatus, DocumentType, DocumentStatus, AgreementStatus,
    ActionType, EntityType
)
from model_mixins import TimestampMixin, AddressMixin, ContactMixin


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(200), nullable=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), nullable=False)
    email_verified_at = Column(DateTime, nullable=True)

    # Un seul profil, selon le rôle
    landlord_profile = relationship("LandlordProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    tenant_profile = relationship("TenantProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")

    @property
    def profile_id(self):
        profile = self.landlord_profile if self.role == UserRole.LANDLORD else self.tenant_profile
        return profile.id if profile else None


class LandlordProfile(TimestampMixin, ContactMixin, Base):
    __tablename__ = "landlord_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    business_name = Column(String(255), nullable=True)

    user = relationship("User", back_populates="landlord_profile")
    properties = relationship("Property", back_populates="landlord", cascade="all, delete-orphan")

    @property
    def name(self):
        return self.user.name if self.user else None

    @property
    def email(self):
        return self.user.email if self.user else None


class TenantProfile(TimestampMixin, ContactMixin, Base):
    __tablename__ = "tenant_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    date_of_birth = Column(Date, nullable=True)
    occupation = Column(String(200), nullable=True)
    kyc_status = Column(Enum(KycStatus), default=KycStatus.PENDING, nullable=False)

    user = relationship("User", back_populates="tenant_profile")
    rentals = relationship("Rental", back_populates="tenant", cascade="all, delete-orphan")
    documents = relationship("Document", back_populates="tenant", cascade="all, delete-orphan")

    @property
    def name(self):
        return self.user.name if self.user else None

    @property
    def email(self):
        return self.user.email if self.user else None

    __table_args__ = (
        Index('idx_tenant_kyc', 'kyc_status'),
    )


class Property(TimestampMixin, AddressMixin, Base):
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, index=True)
    landlord_id = Column(Integer, ForeignKey("landlord_profiles.id", ondelete="CASCADE"), nullable=False)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(Enum(PropertyType), nullable=False)
    size = Column(Numeric(10, 2), nullable=True)  # Surface
    bedrooms = Column(Integer, nullable=True)
    bathrooms = Column(Integer, nullable=True)

    rent_amount = Column(Numeric(10, 2), nullable=False)
    deposit = Column(Numeric(10, 2), nullable=True)
    status = Column(Enum(PropertyStatus), default=PropertyStatus.AVAILABLE, nullable=False)

    images = Column(JSON, default=list)      # URLs ordonnées
    amenities = Column(JSON, default=list)   # Équipements, sans doublons

    landlord = relationship("LandlordProfile", back_populates="properties")
    rentals = relationship("Rental", back_populates="property", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_property_landlord', 'landlord_id'),
        Index('idx_property_status', 'status'),
        Index('idx_property_city', 'city'),
    )


class Rental(TimestampMixin, Base):
    __tablename__ = "rentals"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False)
    tenant_id = Column(Integer, ForeignKey("tenant_profiles.id", ondelete="CASCADE"), nullable=False)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)  # Null = durée indéterminée
    monthly_rent = Column(Numeric(10, 2), nullable=False)
    deposit = Column(Numeric(10, 2), nullable=True)
    status = Column(Enum(RentalStatus), default=RentalStatus.ACTIVE, nullable=False)

    property = relationship("Property", back_populates="rentals")
    tenant = relationship("TenantProfile", back_populates="rentals")
    payments = relationship("RentPayment", back_populates="rental", cascade="all, delete-orphan")
    agreements = relationship("RentAgreement", back_populates="rental", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_rental_property', 'property_id'),
        Index('idx_rental_tenant', 'tenant_id'),
        Index('idx_rental_status', 'status'),
    )


class RentPayment(TimestampMixin, Base):
    __tablename__ = "rent_payments"

    id = Column(Integer, primary_key=True, index=True)
    rental_id = Column(Integer, ForeignKey("rentals.id", ondelete="CASCADE"), nullable=False)

    amount = Column(Numeric(10, 2), nullable=False)
    due_date = Column(Date, nullable=False)
    paid_date = Column(Date, nullable=True)
    status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)
    payment_method = Column(String(100), nullable=True)
    transaction_id = Column(String(255), nullable=True)

    rental = relationship("Rental", back_populates="payments")

    __table_args__ = (
        Index('idx_payment_rental', 'rental_id'),
        Index('idx_payment_status_due', 'status', 'due_date'),
    )


class Document(TimestampMixin, Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenant_profiles.id", ondelete="CASCADE"), nullable=False)

    type = Column(Enum(DocumentType), nullable=False)
    file_name = Column(String(255), nullable=False)
    file_url = Column(String(1000), nullable=False)
    file_size = Column(Integer, nullable=True)  # En octets

    status = Column(Enum(DocumentStatus), default=DocumentStatus.PENDING, nullable=False)
    rejection_reason = Column(Text, nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    tenant = relationship("TenantProfile", back_populates="documents")

    __table_args__ = (
        Index('idx_document_tenant', 'tenant_id'),
        Index('idx_document_status', 'status'),
    )


class RentAgreement(TimestampMixin, Base):
    __tablename__ = "rent_agreements"

    id = Column(Integer, primary_key=True, index=True)
    rental_id = Column(Integer, ForeignKey("rentals.id", ondelete="CASCADE"), nullable=False)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    rent_amount = Column(Numeric(10, 2), nullable=False)
    security_deposit = Column(Numeric(10, 2), nullable=False)

    # Texte du contrat avec des variables {{nom}}
    terms = Column(Text, nullable=False)
    template_variables = Column(JSON, default=dict)

    status = Column(Enum(AgreementStatus), default=AgreementStatus.DRAFT, nullable=False)
    version = Column(Integer, default=1, nullable=False)

    rental = relationship("Rental", back_populates="agreements")

    __table_args__ = (
        Index('idx_agreement_rental', 'rental_id'),
        Index('idx_agreement_status', 'status'),
    )


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    action = Column(Enum(ActionType), nullable=False)
    entity_type = Column(Enum(EntityType), nullable=False)
    entity_id = Column(Integer, nullable=True)
    description = Column(String(500), nullable=False)
    details = Column(Text, nullable=True)  # JSON sérialisé
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_audit_entity', 'entity_type', 'entity_id'),
        Index('idx_audit_user', 'user_id'),
    )
