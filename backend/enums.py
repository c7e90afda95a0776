"""
Enums partagés pour l'application RentDesk
Centralisation de toutes les énumérations pour éviter la duplication
"""
import enum


class UserRole(str, enum.Enum):
    """Rôle global d'un utilisateur"""
    LANDLORD = "LANDLORD"
    TENANT = "TENANT"


class KycStatus(str, enum.Enum):
    """Statut de vérification d'identité d'un locataire"""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class PropertyType(str, enum.Enum):
    """Types de biens"""
    APARTMENT = "APARTMENT"
    HOUSE = "HOUSE"
    CONDO = "CONDO"
    STUDIO = "STUDIO"
    ROOM = "ROOM"


class PropertyStatus(str, enum.Enum):
    """Disponibilité d'un bien"""
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    MAINTENANCE = "MAINTENANCE"


class RentalStatus(str, enum.Enum):
    """Statuts d'une location"""
    ACTIVE = "ACTIVE"
    ENDED = "ENDED"
    TERMINATED = "TERMINATED"


class PaymentStatus(str, enum.Enum):
    """Statuts d'une échéance de loyer"""
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class DocumentType(str, enum.Enum):
    """Types de pièces justificatives (KYC)"""
    ID_PROOF = "ID_PROOF"
    ADDRESS_PROOF = "ADDRESS_PROOF"
    INCOME_PROOF = "INCOME_PROOF"
    EMPLOYMENT_PROOF = "EMPLOYMENT_PROOF"
    BANK_STATEMENT = "BANK_STATEMENT"
    OTHER = "OTHER"


class DocumentStatus(str, enum.Enum):
    """Statuts de vérification d'un document"""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class AgreementStatus(str, enum.Enum):
    """Statuts d'un contrat de location"""
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    TERMINATED = "TERMINATED"


class ActionType(str, enum.Enum):
    """Types d'actions pour l'audit logging"""
    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"


class EntityType(str, enum.Enum):
    """Types d'entités dans l'application"""
    USER = "USER"
    PROPERTY = "PROPERTY"
    TENANT = "TENANT"
    RENTAL = "RENTAL"
    RENT_PAYMENT = "RENT_PAYMENT"
    DOCUMENT = "DOCUMENT"
    AGREEMENT = "AGREEMENT"


# Transitions autorisées (statut courant -> statuts atteignables)
AGREEMENT_TRANSITIONS = {
    AgreementStatus.DRAFT: {AgreementStatus.ACTIVE},
    AgreementStatus.ACTIVE: {AgreementStatus.EXPIRED, AgreementStatus.TERMINATED},
    AgreementStatus.EXPIRED: set(),
    AgreementStatus.TERMINATED: set(),
}

PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.OVERDUE},
    PaymentStatus.OVERDUE: {PaymentStatus.PAID},
    PaymentStatus.PAID: set(),
}

RENTAL_TRANSITIONS = {
    RentalStatus.ACTIVE: {RentalStatus.ENDED, RentalStatus.TERMINATED},
    RentalStatus.ENDED: set(),
    RentalStatus.TERMINATED: set(),
}

# Échéances comptées comme dues
OUTSTANDING_PAYMENT_STATUSES = (PaymentStatus.PENDING, PaymentStatus.OVERDUE)
