"""
Constantes centralisées pour l'application RentDesk
Standardisation des valeurs et conventions utilisées dans l'application
"""

# ==================== CONFIGURATION GÉNÉRALE ====================

APP_NAME = "RentDesk"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "API de gestion locative multi-propriétaires"

# ==================== CONFIGURATION DE SÉCURITÉ ====================

# JWT
DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES = 60
JWT_ALGORITHM = "HS256"

# Mots de passe
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128
TEMPORARY_PASSWORD_LENGTH = 12

# CORS
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"

# ==================== PAGINATION ====================

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 500

# ==================== LIMITES MÉTIER ====================

# Tableau de bord locataire
DASHBOARD_RECENT_RENTALS = 5
DASHBOARD_RECENT_PAYMENTS = 5

# Fiche locataire côté propriétaire
TENANT_PAYMENT_HISTORY_SIZE = 10

# Fichiers (métadonnées uniquement, le stockage est externe)
MAX_DOCUMENT_SIZE = 10 * 1024 * 1024  # 10 MB

# Propriétés
MAX_BEDROOMS = 50
MAX_BATHROOMS = 50

# Prix
MAX_RENT_AMOUNT = 1_000_000

# ==================== MESSAGES ====================

ERROR_MESSAGES = {
    "unauthorized": "Unauthorized",
    "forbidden": "Forbidden",
    "internal": "Internal server error",
    "validation": "Validation error",
    "landlord_profile_not_found": "Landlord profile not found",
    "tenant_profile_not_found": "Tenant profile not found",
    "property_not_found": "Property not found",
    "tenant_not_found": "Tenant not found",
    "rental_not_found": "Rental not found",
    "payment_not_found": "Rent payment not found",
    "document_not_found": "Document not found",
    "agreement_not_found": "Agreement not found",
}

SUCCESS_MESSAGES = {
    "property_created": "Property created successfully",
    "property_updated": "Property updated successfully",
    "property_deleted": "Property deleted successfully",
    "tenant_created": "Tenant created successfully",
    "tenant_profile_created": "Tenant profile created successfully",
    "tenant_exists": "Tenant already exists",
    "tenant_updated": "Tenant updated successfully",
    "tenant_deleted": "Tenant deleted successfully",
    "rental_created": "Rental created successfully",
    "rental_updated": "Rental updated successfully",
    "payment_created": "Rent payment created successfully",
    "payment_updated": "Rent payment updated successfully",
    "document_created": "Document uploaded successfully",
    "document_reviewed": "Document verification status updated",
    "agreement_created": "Agreement created successfully",
    "agreement_updated": "Agreement updated successfully",
    "agreement_deleted": "Agreement deleted successfully",
}
