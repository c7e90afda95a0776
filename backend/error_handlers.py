"""
Gestionnaires d'erreurs centralisés pour l'application RentDesk
Standardisation de la gestion et du format des erreurs
"""
import logging
from typing import Dict, Any, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, DataError
from starlette.exceptions import HTTPException as StarletteHTTPException

from constants import ERROR_MESSAGES

logger = logging.getLogger(__name__)


# ==================== EXCEPTIONS MÉTIER ====================

class AppError(Exception):
    """Erreur métier traduite en réponse HTTP à la frontière du handler"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailedError(AppError):
    """Entrée invalide ou transition d'état interdite"""
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(AppError):
    """Session absente ou invalide"""
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = ERROR_MESSAGES["unauthorized"]):
        super().__init__(message)


class AuthorizationError(AppError):
    """Session valide mais rôle ou propriété insuffisants"""
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = ERROR_MESSAGES["forbidden"]):
        super().__init__(message)


class NotFoundError(AppError):
    """Entité introuvable"""
    status_code = status.HTTP_404_NOT_FOUND


# ==================== FORMAT DE RÉPONSE ====================

class ErrorResponse:
    """Structure standardisée pour les réponses d'erreur"""

    def __init__(
        self,
        message: str,
        details: Any = None,
        status_code: int = 400
    ):
        self.message = message
        self.details = details
        self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        """Convertit en dictionnaire pour la réponse JSON"""
        response = {"error": self.message}
        if self.details:
            response["details"] = self.details
        return response

    def to_json_response(self) -> JSONResponse:
        """Retourne une JSONResponse FastAPI"""
        return JSONResponse(
            status_code=self.status_code,
            content=self.to_dict()
        )


class DatabaseErrorHandler:
    """Gestionnaire pour les erreurs de base de données"""

    @staticmethod
    def handle_integrity_error(error: IntegrityError) -> ErrorResponse:
        """
        Gère les erreurs d'intégrité de la base de données
        """
        error_message = str(error.orig).lower()

        if "duplicate" in error_message or "unique" in error_message:
            if "email" in error_message:
                return ErrorResponse("Email already in use", status_code=status.HTTP_400_BAD_REQUEST)
            return ErrorResponse("Value already exists", status_code=status.HTTP_400_BAD_REQUEST)

        if "foreign key" in error_message:
            return ErrorResponse("Invalid reference to a related record", status_code=status.HTTP_400_BAD_REQUEST)

        return ErrorResponse("Database constraint violated", status_code=status.HTTP_400_BAD_REQUEST)

    @staticmethod
    def handle_data_error(error: DataError) -> ErrorResponse:
        """
        Gère les erreurs de données de la base de données
        """
        error_message = str(error.orig)

        if "Data too long" in error_message:
            return ErrorResponse("Value too long for field", status_code=status.HTTP_400_BAD_REQUEST)

        return ErrorResponse("Invalid data format", status_code=status.HTTP_400_BAD_REQUEST)


class ValidationErrorHandler:
    """Gestionnaire pour les erreurs de validation Pydantic"""

    @staticmethod
    def format_errors(errors) -> list:
        formatted = []
        for error_detail in errors:
            # "body" / "query" n'apportent rien au client
            location = [str(loc) for loc in error_detail["loc"] if loc not in ("body", "query", "path")]
            formatted.append({
                "field": ".".join(location),
                "message": ValidationErrorHandler._clean_message(error_detail["msg"]),
                "type": error_detail["type"],
            })
        return formatted

    @staticmethod
    def _clean_message(message: str) -> str:
        # Les ValueError levées dans nos validateurs sont préfixées par Pydantic
        prefix = "Value error, "
        return message[len(prefix):] if message.startswith(prefix) else message

    @staticmethod
    def handle_validation_error(errors) -> ErrorResponse:
        """
        Réponse 400 avec le message du premier champ en erreur
        """
        formatted = ValidationErrorHandler.format_errors(errors)
        if formatted:
            first = formatted[0]
            message = f"{first['field']}: {first['message']}" if first["field"] else first["message"]
        else:
            message = ERROR_MESSAGES["validation"]

        return ErrorResponse(
            message=message,
            details=formatted,
            status_code=status.HTTP_400_BAD_REQUEST
        )


# ==================== HANDLERS FASTAPI ====================

async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s -> %s", request.method, request.url.path, exc.message)
    return ErrorResponse(exc.message, exc.details, exc.status_code).to_json_response()


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return ValidationErrorHandler.handle_validation_error(exc.errors()).to_json_response()


async def validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return ValidationErrorHandler.handle_validation_error(exc.errors()).to_json_response()


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else ERROR_MESSAGES["internal"]
    response = ErrorResponse(message, status_code=exc.status_code).to_json_response()
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return DatabaseErrorHandler.handle_integrity_error(exc).to_json_response()


async def data_error_handler(request: Request, exc: DataError) -> JSONResponse:
    logger.warning("Data error on %s %s: %s", request.method, request.url.path, exc.orig)
    return DatabaseErrorHandler.handle_data_error(exc).to_json_response()


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return ErrorResponse(
        ERROR_MESSAGES["internal"],
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    ).to_json_response()
