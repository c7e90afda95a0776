"""
Classes de base pour les opérations CRUD
Réduction de la duplication de code pour les opérations courantes

Les méthodes d'écriture ne commitent pas: l'appelant les regroupe dans
un unit_of_work pour que plusieurs écritures liées restent atomiques.
"""
from typing import Type, TypeVar, Generic, Optional, List, Dict, Any, Union
from sqlalchemy.orm import Session, Query
from pydantic import BaseModel
from database import Base
from audit_logger import AuditLogger, get_model_data
from enums import ActionType, EntityType
from error_handlers import NotFoundError

# Types génériques pour les modèles et schémas
ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class BaseCRUDService(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Service de base pour les opérations CRUD
    Implémente les opérations courantes avec audit logging automatique
    """

    def __init__(
        self,
        model: Type[ModelType],
        entity_type: EntityType,
        entity_name: str = None,
        not_found_message: str = None
    ):
        self.model = model
        self.entity_type = entity_type
        self.entity_name = entity_name or model.__name__.lower()
        self.not_found_message = not_found_message or f"{model.__name__} not found"

    def _label(self, db_obj: ModelType):
        return getattr(db_obj, 'name', None) or db_obj.id

    def get(self, db: Session, id: int) -> Optional[ModelType]:
        """
        Récupère un objet par son ID
        """
        return db.query(self.model).filter(self.model.id == id).first()

    def get_or_404(self, db: Session, id: int) -> ModelType:
        db_obj = self.get(db, id)
        if db_obj is None:
            raise NotFoundError(self.not_found_message)
        return db_obj

    def get_multi(
        self,
        query: Query,
        skip: int = 0,
        limit: int = 100,
        order_by: Optional[list] = None
    ) -> List[ModelType]:
        """
        Pagination d'une requête déjà filtrée, du plus récent au plus ancien par défaut
        """
        if order_by is None:
            order_by = [self.model.created_at.desc(), self.model.id.desc()]
        return query.order_by(*order_by).offset(skip).limit(limit).all()

    def create(
        self,
        db: Session,
        obj_in: Union[CreateSchemaType, Dict[str, Any]],
        user_id: int,
        **extra_fields
    ) -> ModelType:
        """
        Crée un nouvel objet avec audit logging
        """
        obj_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=False)
        obj_data = {**obj_data, **extra_fields}
        db_obj = self.model(**obj_data)

        db.add(db_obj)
        db.flush()  # Pour obtenir l'ID sans commit

        AuditLogger.log_crud_action(
            db=db,
            action=ActionType.CREATE,
            entity_type=self.entity_type,
            entity_id=db_obj.id,
            user_id=user_id,
            description=f"Création de {self.entity_name}: {self._label(db_obj)}",
            after_data=get_model_data(db_obj),
        )
        return db_obj

    def update(
        self,
        db: Session,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]],
        user_id: int
    ) -> ModelType:
        """
        Met à jour un objet avec audit logging
        """
        before_data = get_model_data(db_obj)

        obj_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        for field, value in obj_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        db.flush()

        AuditLogger.log_crud_action(
            db=db,
            action=ActionType.UPDATE,
            entity_type=self.entity_type,
            entity_id=db_obj.id,
            user_id=user_id,
            description=f"Modification de {self.entity_name}: {self._label(db_obj)}",
            before_data=before_data,
            after_data=get_model_data(db_obj),
        )
        return db_obj

    def delete(
        self,
        db: Session,
        db_obj: ModelType,
        user_id: int
    ) -> ModelType:
        """
        Supprime un objet avec audit logging
        """
        before_data = get_model_data(db_obj)
        entity_id = db_obj.id
        label = self._label(db_obj)

        db.delete(db_obj)
        db.flush()

        AuditLogger.log_crud_action(
            db=db,
            action=ActionType.DELETE,
            entity_type=self.entity_type,
            entity_id=entity_id,
            user_id=user_id,
            description=f"Suppression de {self.entity_name}: {label}",
            before_data=before_data,
        )
        return db_obj
