from pydantic import BaseModel, EmailStr, Field, PlainSerializer, field_validator, model_validator
from typing import Annotated, Optional, List, Dict
from datetime import date, datetime
from decimal import Decimal

# Import centralisé des enums
from enums import (
    UserRole, KycStatus, PropertyType, PropertyStatus, RentalStatus,
    PaymentStatus, DocumentType, DocumentStatus, AgreementStatus
)
from validators import CommonValidators
from constants import MAX_BEDROOMS, MAX_BATHROOMS, MAX_DOCUMENT_SIZE

# Montants: Decimal en interne, nombre JSON en sortie
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# ==================== AUTHENTIFICATION ====================

class RegisterRequest(BaseModel):
    email: EmailStr = Field(..., description="Adresse email")
    password: str = Field(..., description="Mot de passe")
    name: str = Field(..., max_length=200, description="Nom complet")
    role: UserRole = Field(..., description="LANDLORD ou TENANT")
    phone_number: Optional[str] = Field(None, max_length=50)
    business_name: Optional[str] = Field(None, max_length=255, description="Propriétaires uniquement")

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return CommonValidators.validate_password(v)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return CommonValidators.validate_name(v)

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, v):
        return CommonValidators.validate_phone(v)


class UserOut(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    role: UserRole
    profile_id: Optional[int] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


# ==================== RÉFÉRENCES IMBRIQUÉES ====================

class LandlordContactOut(BaseModel):
    id: int
    name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    business_name: Optional[str] = None

    model_config = {"from_attributes": True}


class PropertyBriefOut(BaseModel):
    id: int
    name: str
    address: str
    city: str

    model_config = {"from_attributes": True}


class TenantBriefOut(BaseModel):
    id: int
    name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    kyc_status: KycStatus

    model_config = {"from_attributes": True}


class RentalRefOut(BaseModel):
    id: int
    status: RentalStatus
    property: PropertyBriefOut
    tenant: TenantBriefOut

    model_config = {"from_attributes": True}


# ==================== PROPRIÉTÉS ====================

class PropertyBase(BaseModel):
    name: str = Field(..., max_length=255, description="Nom du bien")
    description: Optional[str] = None
    address: str = Field(..., max_length=500)
    city: str = Field(..., max_length=200)
    state: str = Field(..., max_length=200)
    zip_code: str = Field(..., max_length=20)
    type: PropertyType
    size: Optional[Decimal] = Field(None, gt=0, description="Surface")
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    rent_amount: Decimal = Field(..., gt=0)
    deposit: Optional[Decimal] = Field(None, ge=0)
    images: List[str] = Field(default_factory=list, description="URLs ordonnées")
    amenities: List[str] = Field(default_factory=list)

    @field_validator('name', 'address', 'city', 'state', 'zip_code')
    @classmethod
    def validate_required_text(cls, v, info):
        return CommonValidators.validate_name(v, info.field_name.replace('_', ' '))

    @field_validator('bedrooms')
    @classmethod
    def validate_bedrooms(cls, v):
        return CommonValidators.validate_count(v, "bedrooms", MAX_BEDROOMS)

    @field_validator('bathrooms')
    @classmethod
    def validate_bathrooms(cls, v):
        return CommonValidators.validate_count(v, "bathrooms", MAX_BATHROOMS)

    @field_validator('rent_amount', 'deposit')
    @classmethod
    def validate_amounts(cls, v, info):
        return CommonValidators.validate_amount(v, info.field_name.replace('_', ' '))

    @field_validator('amenities')
    @classmethod
    def validate_amenities(cls, v):
        return CommonValidators.validate_unique_strings(v)


class PropertyCreate(PropertyBase):
    status: PropertyStatus = PropertyStatus.AVAILABLE


class PropertyUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    address: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=200)
    state: Optional[str] = Field(None, max_length=200)
    zip_code: Optional[str] = Field(None, max_length=20)
    type: Optional[PropertyType] = None
    size: Optional[Decimal] = Field(None, gt=0)
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    rent_amount: Optional[Decimal] = Field(None, gt=0)
    deposit: Optional[Decimal] = Field(None, ge=0)
    status: Optional[PropertyStatus] = None
    images: Optional[List[str]] = None
    amenities: Optional[List[str]] = None

    @field_validator('name', 'address', 'city', 'state', 'zip_code')
    @classmethod
    def validate_text(cls, v, info):
        return CommonValidators.validate_optional_name(v, info.field_name.replace('_', ' '))

    @field_validator('bedrooms')
    @classmethod
    def validate_bedrooms(cls, v):
        return CommonValidators.validate_count(v, "bedrooms", MAX_BEDROOMS)

    @field_validator('bathrooms')
    @classmethod
    def validate_bathrooms(cls, v):
        return CommonValidators.validate_count(v, "bathrooms", MAX_BATHROOMS)

    @field_validator('rent_amount', 'deposit')
    @classmethod
    def validate_amounts(cls, v, info):
        return CommonValidators.validate_amount(v, info.field_name.replace('_', ' '))

    @field_validator('amenities')
    @classmethod
    def validate_amenities(cls, v):
        return CommonValidators.validate_unique_strings(v)

    @field_validator('name', 'address', 'city', 'state', 'zip_code', 'type', 'rent_amount', 'status')
    @classmethod
    def validate_required(cls, v, info):
        return CommonValidators.reject_null(v, info.field_name.replace('_', ' '))


class PropertyOut(BaseModel):
    id: int
    landlord_id: int
    name: str
    description: Optional[str] = None
    address: str
    city: str
    state: str
    zip_code: str
    type: PropertyType
    size: Optional[Money] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    rent_amount: Money
    deposit: Optional[Money] = None
    status: PropertyStatus
    images: List[str] = []
    amenities: List[str] = []
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_validator('images', 'amenities', mode='before')
    @classmethod
    def none_as_empty(cls, v):
        return v or []


class PropertyWithLandlordOut(PropertyOut):
    landlord: LandlordContactOut


# ==================== LOCATAIRES ====================

class TenantInvite(BaseModel):
    email: EmailStr
    name: str = Field(..., max_length=200)
    phone_number: Optional[str] = Field(None, max_length=50)
    date_of_birth: Optional[date] = None
    occupation: Optional[str] = Field(None, max_length=200)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return CommonValidators.validate_name(v)

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, v):
        return CommonValidators.validate_phone(v)


class TenantUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    phone_number: Optional[str] = Field(None, max_length=50)
    date_of_birth: Optional[date] = None
    occupation: Optional[str] = Field(None, max_length=200)
    kyc_status: Optional[KycStatus] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return CommonValidators.validate_optional_name(v)

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, v):
        return CommonValidators.validate_phone(v)

    @field_validator('name', 'kyc_status')
    @classmethod
    def validate_required(cls, v, info):
        return CommonValidators.reject_null(v, info.field_name.replace('_', ' '))


class TenantOut(BaseModel):
    id: int
    user_id: int
    name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    occupation: Optional[str] = None
    kyc_status: KycStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class PaymentBriefOut(BaseModel):
    id: int
    amount: Money
    due_date: date
    paid_date: Optional[date] = None
    status: PaymentStatus

    model_config = {"from_attributes": True}


class DocumentBriefOut(BaseModel):
    id: int
    type: DocumentType
    file_name: str
    status: DocumentStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class TenantRentalOut(BaseModel):
    id: int
    start_date: date
    end_date: Optional[date] = None
    monthly_rent: Money
    status: RentalStatus
    property: PropertyBriefOut
    payments: List[PaymentBriefOut] = []

    model_config = {"from_attributes": True}


class TenantWithRentalsOut(TenantOut):
    rentals: List[TenantRentalOut] = []
    documents: List[DocumentBriefOut] = []


# ==================== LOCATIONS ====================

class RentalCreate(BaseModel):
    property_id: int
    tenant_id: int
    start_date: date
    end_date: Optional[date] = None
    monthly_rent: Optional[Decimal] = Field(None, gt=0, description="Par défaut le loyer du bien")
    deposit: Optional[Decimal] = Field(None, ge=0, description="Par défaut le dépôt du bien")

    @model_validator(mode='after')
    def validate_dates(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError('End date must be on or after start date')
        return self


class RentalUpdate(BaseModel):
    end_date: Optional[date] = None
    monthly_rent: Optional[Decimal] = Field(None, gt=0)
    deposit: Optional[Decimal] = Field(None, ge=0)
    status: Optional[RentalStatus] = None

    @field_validator('monthly_rent', 'status')
    @classmethod
    def validate_required(cls, v, info):
        return CommonValidators.reject_null(v, info.field_name.replace('_', ' '))


class RentalOut(BaseModel):
    id: int
    property_id: int
    tenant_id: int
    start_date: date
    end_date: Optional[date] = None
    monthly_rent: Money
    deposit: Optional[Money] = None
    status: RentalStatus
    property: PropertyBriefOut
    tenant: TenantBriefOut
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ==================== PAIEMENTS ====================

class RentPaymentCreate(BaseModel):
    rental_id: int
    amount: Decimal = Field(..., gt=0)
    due_date: date
    payment_method: Optional[str] = Field(None, max_length=100)
    transaction_id: Optional[str] = Field(None, max_length=255)

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        return CommonValidators.validate_amount(v)


class RentPaymentUpdate(BaseModel):
    status: Optional[PaymentStatus] = None
    paid_date: Optional[date] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    due_date: Optional[date] = None
    payment_method: Optional[str] = Field(None, max_length=100)
    transaction_id: Optional[str] = Field(None, max_length=255)

    @field_validator('status', 'amount', 'due_date')
    @classmethod
    def validate_required(cls, v, info):
        return CommonValidators.reject_null(v, info.field_name.replace('_', ' '))


class RentPaymentOut(BaseModel):
    id: int
    rental_id: int
    amount: Money
    due_date: date
    paid_date: Optional[date] = None
    status: PaymentStatus
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    rental: RentalRefOut
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RentSummary(BaseModel):
    total_due: Money = Decimal("0")
    total_paid: Money = Decimal("0")
    overdue_count: int = 0
    pending_count: int = 0


# ==================== DOCUMENTS ====================

class DocumentCreate(BaseModel):
    type: DocumentType
    file_name: str = Field(..., max_length=255)
    file_url: str = Field(..., max_length=1000, description="URL du fichier déjà stocké")
    file_size: Optional[int] = Field(None, ge=0, le=MAX_DOCUMENT_SIZE)

    @field_validator('file_name', 'file_url')
    @classmethod
    def validate_text(cls, v, info):
        return CommonValidators.validate_name(v, info.field_name.replace('_', ' '))


class DocumentReview(BaseModel):
    status: DocumentStatus
    rejection_reason: Optional[str] = None

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        if v == DocumentStatus.PENDING:
            raise ValueError('Status must be APPROVED or REJECTED')
        return v


class DocumentOut(BaseModel):
    id: int
    tenant_id: int
    type: DocumentType
    file_name: str
    file_url: str
    file_size: Optional[int] = None
    status: DocumentStatus
    rejection_reason: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    tenant: TenantBriefOut
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DocumentSummary(BaseModel):
    pending_count: int = 0
    approved_count: int = 0
    rejected_count: int = 0
    total_count: int = 0


# ==================== CONTRATS ====================

class AgreementCreate(BaseModel):
    rental_id: int
    start_date: date
    end_date: date
    rent_amount: Decimal = Field(..., gt=0)
    security_deposit: Decimal = Field(..., ge=0)
    terms: str = Field(..., min_length=1, description="Texte avec variables {{nom}}")
    template_variables: Dict[str, str] = Field(default_factory=dict)

    @model_validator(mode='after')
    def validate_dates(self):
        if self.end_date <= self.start_date:
            raise ValueError('End date must be after start date')
        return self


class AgreementUpdate(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    rent_amount: Optional[Decimal] = Field(None, gt=0)
    security_deposit: Optional[Decimal] = Field(None, ge=0)
    terms: Optional[str] = Field(None, min_length=1)
    template_variables: Optional[Dict[str, str]] = None
    status: Optional[AgreementStatus] = None

    @field_validator('start_date', 'end_date', 'rent_amount', 'security_deposit', 'terms', 'status')
    @classmethod
    def validate_required(cls, v, info):
        return CommonValidators.reject_null(v, info.field_name.replace('_', ' '))


class AgreementOut(BaseModel):
    id: int
    rental_id: int
    start_date: date
    end_date: date
    rent_amount: Money
    security_deposit: Money
    terms: str
    template_variables: Dict[str, str] = {}
    status: AgreementStatus
    version: int
    rental: RentalRefOut
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_validator('template_variables', mode='before')
    @classmethod
    def none_as_empty(cls, v):
        return v or {}


class AgreementRenderOut(BaseModel):
    agreement_id: int
    version: int
    content: str
    missing_variables: List[str] = []


# ==================== TABLEAU DE BORD LOCATAIRE ====================

class DashboardRentalOut(BaseModel):
    id: int
    start_date: date
    end_date: Optional[date] = None
    monthly_rent: Money
    status: RentalStatus
    property: PropertyBriefOut

    model_config = {"from_attributes": True}


class DashboardPaymentOut(BaseModel):
    id: int
    amount: Money
    due_date: date
    paid_date: Optional[date] = None
    status: PaymentStatus
    property_name: str


class TenantDashboardOut(BaseModel):
    active_rentals: int
    total_pending: Money
    upcoming_payments: int
    pending_documents: int
    pending_payments: List[DashboardPaymentOut] = []
    recent_rentals: List[DashboardRentalOut] = []
    recent_payments: List[DashboardPaymentOut] = []


# ==================== FILTRES ====================

class PropertyFilter(BaseModel):
    status: Optional[PropertyStatus] = None
    type: Optional[PropertyType] = None
    search: Optional[str] = None

    @field_validator('search')
    @classmethod
    def validate_search(cls, v):
        return CommonValidators.validate_search(v)


class AvailablePropertyFilter(BaseModel):
    search: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    property_type: Optional[PropertyType] = None
    min_rent: Optional[Decimal] = Field(None, ge=0)
    max_rent: Optional[Decimal] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)

    @field_validator('search', 'city', 'state')
    @classmethod
    def validate_search(cls, v):
        return CommonValidators.validate_search(v)

    @model_validator(mode='after')
    def validate_rent_range(self):
        if self.min_rent is not None and self.max_rent is not None and self.min_rent > self.max_rent:
            raise ValueError('min_rent must be less than or equal to max_rent')
        return self


class TenantFilter(BaseModel):
    search: Optional[str] = None
    kyc_status: Optional[KycStatus] = None

    @field_validator('search')
    @classmethod
    def validate_search(cls, v):
        return CommonValidators.validate_search(v)


class RentalFilter(BaseModel):
    status: Optional[RentalStatus] = None
    property_id: Optional[int] = None
    tenant_id: Optional[int] = None


class RentPaymentFilter(BaseModel):
    status: Optional[PaymentStatus] = None
    property_id: Optional[int] = None
    tenant_id: Optional[int] = None


class DocumentFilter(BaseModel):
    status: Optional[DocumentStatus] = None
    tenant_id: Optional[int] = None
    type: Optional[DocumentType] = None


class AgreementFilter(BaseModel):
    rental_id: Optional[int] = None
    status: Optional[AgreementStatus] = None
