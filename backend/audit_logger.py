from sqlalchemy.orm import Session
import models
import json
import logging
from typing import Optional, Dict, Any
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from enums import ActionType, EntityType

logger = logging.getLogger("audit")


class AuditLogger:
    """Service de logging pour auditer toutes les mutations de l'application"""

    @staticmethod
    def log_action(
        db: Session,
        action: ActionType,
        entity_type: EntityType,
        description: str,
        user_id: Optional[int] = None,
        entity_id: Optional[int] = None,
        details: Optional[Dict[Any, Any]] = None,
    ):
        """
        Ajoute une entrée d'audit à la session courante

        Args:
            db: Session de base de données
            action: Type d'action (CREATE, UPDATE, etc.)
            entity_type: Type d'entité concernée (PROPERTY, RENTAL, etc.)
            description: Description de l'action
            user_id: ID de l'utilisateur qui effectue l'action
            entity_id: ID de l'entité concernée
            details: Détails supplémentaires (avant/après)

        Pas de commit ici: l'entrée suit la transaction de la mutation.
        """
        details_json = None
        if details:
            details_json = json.dumps(details, default=_json_default, ensure_ascii=False)

        audit_log = models.AuditLog(
            user_id=user_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            description=description,
            details=details_json,
        )
        db.add(audit_log)

        logger.info(
            "%s %s id=%s user=%s: %s",
            action.value, entity_type.value, entity_id, user_id, description
        )
        return audit_log

    @staticmethod
    def log_auth_action(db: Session, action: ActionType, user_id: int, description: str, details: Dict = None):
        """Log spécialisé pour les actions d'authentification"""
        return AuditLogger.log_action(
            db=db,
            action=action,
            entity_type=EntityType.USER,
            description=description,
            user_id=user_id,
            entity_id=user_id,
            details=details,
        )

    @staticmethod
    def log_crud_action(db: Session, action: ActionType, entity_type: EntityType,
                        entity_id: int, user_id: int, description: str,
                        before_data: Dict = None, after_data: Dict = None):
        """Log spécialisé pour les actions CRUD"""
        details = {}
        if before_data:
            details["before"] = before_data
        if after_data:
            details["after"] = after_data

        return AuditLogger.log_action(
            db=db,
            action=action,
            entity_type=entity_type,
            description=description,
            user_id=user_id,
            entity_id=entity_id,
            details=details,
        )


def _json_default(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    return str(value)


def get_model_data(obj) -> Dict:
    """
    Convertit un objet SQLAlchemy en dictionnaire pour le logging
    """
    if obj is None:
        return {}

    data = {}
    for column in obj.__table__.columns:
        if column.name == "hashed_password":
            continue
        value = getattr(obj, column.name)
        if isinstance(value, (datetime, date)):
            value = value.isoformat()
        elif isinstance(value, Decimal):
            value = str(value)
        elif isinstance(value, Enum):
            value = value.value
        data[column.name] = value
    return data
