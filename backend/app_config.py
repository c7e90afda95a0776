"""
Configuration centralisée de l'application RentDesk
Organisation des routes, middleware et configuration
"""
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError, DataError
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic import ValidationError

# Import des modules de configuration
from database import engine
import models

# Import des middlewares
from middleware import RequestLoggingMiddleware
from error_handlers import (
    AppError, app_error_handler, validation_exception_handler,
    request_validation_exception_handler, http_exception_handler,
    integrity_error_handler, data_error_handler, general_exception_handler
)

# Import des contrôleurs et routes
from controllers.auth_controller import router as auth_router
import property_routes
import tenant_routes
import rental_routes
import rent_routes
import document_routes
import agreement_routes
import tenant_dashboard_routes

# Import des constantes
from constants import APP_NAME, APP_VERSION, APP_DESCRIPTION, DEFAULT_CORS_ORIGINS


def get_cors_origins() -> list:
    origins = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in origins.split(",") if origin.strip()]


def should_create_tables() -> bool:
    return os.getenv("CREATE_TABLES", "true").lower() in ("1", "true", "yes")


class AppConfigurator:
    """
    Configurateur centralisé pour l'application FastAPI
    """

    @staticmethod
    def create_app() -> FastAPI:
        """
        Crée et configure l'application FastAPI
        """
        # Créer les tables
        if should_create_tables():
            models.Base.metadata.create_all(bind=engine)

        # Créer l'application
        app = FastAPI(
            title=APP_NAME,
            version=APP_VERSION,
            description=APP_DESCRIPTION
        )

        # Configurer les middlewares
        AppConfigurator._configure_middlewares(app)

        # Configurer les gestionnaires d'exceptions
        AppConfigurator._configure_exception_handlers(app)

        # Configurer les routes
        AppConfigurator._configure_routes(app)

        return app

    @staticmethod
    def _configure_middlewares(app: FastAPI):
        """
        Configure tous les middlewares
        """
        # CORS
        app.add_middleware(
            CORSMiddleware,
            allow_origins=get_cors_origins(),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )

        # Middleware de logging des requêtes
        app.add_middleware(RequestLoggingMiddleware)

    @staticmethod
    def _configure_exception_handlers(app: FastAPI):
        """
        Configure tous les gestionnaires d'exceptions
        """
        app.add_exception_handler(AppError, app_error_handler)
        app.add_exception_handler(ValidationError, validation_exception_handler)
        app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
        app.add_exception_handler(StarletteHTTPException, http_exception_handler)
        app.add_exception_handler(IntegrityError, integrity_error_handler)
        app.add_exception_handler(DataError, data_error_handler)
        app.add_exception_handler(Exception, general_exception_handler)

    @staticmethod
    def _configure_routes(app: FastAPI):
        """
        Configure toutes les routes de l'application
        """
        # Routes d'authentification
        app.include_router(auth_router)

        # Routes métier
        app.include_router(property_routes.router)
        app.include_router(tenant_routes.router)
        app.include_router(rental_routes.router)
        app.include_router(rent_routes.router)
        app.include_router(document_routes.router)
        app.include_router(agreement_routes.router)
        app.include_router(tenant_dashboard_routes.router)
