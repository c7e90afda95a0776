"""
Contrôleur pour l'authentification
Inscription, connexion et profil de l'utilisateur courant
"""
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from database import get_db, unit_of_work
from auth import (
    get_password_hash, verify_password, create_token_for_user, get_current_user,
    get_user_by_email
)
from models import User, LandlordProfile, TenantProfile
from enums import ActionType, EntityType, UserRole
from audit_logger import AuditLogger, get_model_data
from error_handlers import AuthenticationError, ValidationFailedError
import schemas

router = APIRouter(prefix="/auth", tags=["Authentification"])


@router.post("/register", response_model=schemas.TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(user_in: schemas.RegisterRequest, db: Session = Depends(get_db)):
    """
    Inscription d'un utilisateur avec le profil correspondant à son rôle
    """
    if get_user_by_email(db, user_in.email):
        raise ValidationFailedError("Email already in use")

    with unit_of_work(db):
        user = User(
            email=user_in.email,
            name=user_in.name,
            hashed_password=get_password_hash(user_in.password),
            role=user_in.role,
        )
        if user_in.role == UserRole.LANDLORD:
            user.landlord_profile = LandlordProfile(
                phone_number=user_in.phone_number,
                business_name=user_in.business_name,
            )
        else:
            user.tenant_profile = TenantProfile(phone_number=user_in.phone_number)

        db.add(user)
        db.flush()

        AuditLogger.log_crud_action(
            db=db,
            action=ActionType.CREATE,
            entity_type=EntityType.USER,
            entity_id=user.id,
            user_id=user.id,
            description=f"Inscription de {user.email}",
            after_data=get_model_data(user),
        )
    db.refresh(user)

    return schemas.TokenResponse(
        access_token=create_token_for_user(user),
        user=schemas.UserOut.model_validate(user),
    )


@router.post("/login", response_model=schemas.TokenResponse)
async def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """
    Connexion par email (champ username du formulaire OAuth2) et mot de passe
    """
    user = get_user_by_email(db, form_data.username)
    if not user or not verify_password(form_data.password, user.hashed_password):
        raise AuthenticationError("Invalid email or password")

    with unit_of_work(db):
        AuditLogger.log_auth_action(db, ActionType.LOGIN, user.id, f"Connexion de {user.email}")

    return schemas.TokenResponse(
        access_token=create_token_for_user(user),
        user=schemas.UserOut.model_validate(user),
    )


@router.get("/me", response_model=schemas.UserOut)
async def me(current_user: User = Depends(get_current_user)):
    return current_user
