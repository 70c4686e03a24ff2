# likert_app/core/security.py
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from passlib.context import CryptContext
from sqlalchemy.orm import Session, selectinload

from likert_app.core.config import settings
from likert_app.core.errors import ForbiddenError, UnauthorizedError
from likert_app.db.session import get_db
from likert_app.models.user import User

logger = logging.getLogger(__name__)

# auto_error=False: sin token respondemos el mismo 401 uniforme que con token inválido
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)
ADMIN_ROLE_NAMES = {"administrador", "admin", "administrator"}

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.PASSWORD_BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: Optional[str]) -> bool:
    """Compara contra el hash guardado. Sin hash nunca hay login."""
    if not hashed:
        # mismo costo que una verificación real
        pwd_context.dummy_verify()
        return False
    return pwd_context.verify(password, hashed)


def create_access_token(subject: dict[str, Any], expires_minutes: int | None = None) -> str:
    """
    Genera un JWT con 'exp' e 'iat'.
    - 'sub' se normaliza a str.
    - 'iat' se pone como epoch seconds (int) para comparaciones.
    """
    if expires_minutes is None:
        expires_minutes = settings.JWT_EXPIRE_MINUTES

    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=expires_minutes)

    claims = dict(subject)
    if "sub" in claims and not isinstance(claims["sub"], str):
        claims["sub"] = str(claims["sub"])

    to_encode = {
        **claims,
        "iat": int(now.timestamp()),
        "exp": exp,  # PyJWT acepta datetime tz-aware
    }
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """
    Decodifica exigiendo 'exp' e 'iat' y verificando expiración.
    Cualquier fallo es el mismo UnauthorizedError.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "iat"], "verify_exp": True},
            leeway=5,  # pequeño margen por skew de reloj
        )
    except jwt.ExpiredSignatureError:
        logger.info("Token expirado")
        raise UnauthorizedError()
    except jwt.InvalidTokenError:
        logger.info("Token inválido")
        raise UnauthorizedError()


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Devuelve el objeto User activo con sus roles cargados.
    """
    if not token:
        raise UnauthorizedError()

    payload = decode_token(token)
    sub = payload.get("sub")
    if not sub:
        raise UnauthorizedError()

    try:
        user_id = UUID(str(sub))
    except ValueError:
        raise UnauthorizedError()

    user = (
        db.query(User)
        .options(selectinload(User.roles))
        .filter(User.id == user_id, User.estado == "activo")
        .first()
    )
    if not user:
        raise UnauthorizedError()
    return user


def user_is_admin(user: User) -> bool:
    names = {str(r.nombre).lower() for r in (user.roles or []) if r.nombre}
    return bool(ADMIN_ROLE_NAMES & names)


def get_admin_user(user: User = Depends(get_current_user)) -> User:
    if not user_is_admin(user):
        raise ForbiddenError()
    return user
