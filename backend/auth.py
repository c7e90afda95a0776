from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
import bcrypt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from database import get_db
from enums import UserRole
from error_handlers import AuthenticationError, AuthorizationError
from constants import DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM
import models
import logging
import os
import secrets

logger = logging.getLogger(__name__)

# Utilise une variable d'environnement pour la clé secrète
# Si pas définie, génère une clé aléatoire (pour dev seulement)
SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not SECRET_KEY:
    SECRET_KEY = secrets.token_urlsafe(32)
    logger.warning("JWT_SECRET_KEY non définie, utilisation d'une clé temporaire")

ALGORITHM = JWT_ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES))

# auto_error désactivé: l'absence de jeton passe par AuthenticationError
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Identité de l'appelant, transmise explicitement à chaque service"""
    user_id: int
    role: UserRole

    @property
    def is_landlord(self) -> bool:
        return self.role == UserRole.LANDLORD

    @property
    def is_tenant(self) -> bool:
        return self.role == UserRole.TENANT


def get_password_hash(password):
    """Hash un mot de passe avec bcrypt"""
    password_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(plain_password, hashed_password):
    """Vérifie un mot de passe contre son hash bcrypt"""
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError:
        # Hash stocké corrompu ou dans un autre format
        return False


def generate_temporary_password(length: int) -> str:
    return secrets.token_urlsafe(length)[:length]


def create_access_token(data: dict, expires_delta: timedelta | None = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def create_token_for_user(user: models.User) -> str:
    return create_access_token({"sub": str(user.id), "role": user.role.value})


def get_user_by_email(db: Session, email: str):
    return db.query(models.User).filter(models.User.email == email).first()


def get_current_user(token: str | None = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> models.User:
    if not token:
        raise AuthenticationError()

    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise AuthenticationError()

    user = db.query(models.User).filter(models.User.id == user_id).first()
    if user is None:
        raise AuthenticationError()
    return user


def get_current_principal(current_user: models.User = Depends(get_current_user)) -> Principal:
    # Le rôle vient de la base, pas du jeton
    return Principal(user_id=current_user.id, role=current_user.role)


def require_role(role: UserRole):
    """Dépendance FastAPI: refuse (403) les principaux d'un autre rôle"""
    def checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role != role:
            raise AuthorizationError()
        return principal
    return checker


require_landlord = require_role(UserRole.LANDLORD)
require_tenant = require_role(UserRole.TENANT)
