# likert_app/api/v1/endpoints/auth.py
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from likert_app.core.errors import UnauthorizedError
from likert_app.core.security import create_access_token, get_current_user, verify_password
from likert_app.db.session import get_db
from likert_app.models.user import User
from likert_app.schemas.auth import LoginIn, TokenOut, MeOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenOut)
def login(data: LoginIn, db: Session = Depends(get_db)):
    """
    Login con correo y contraseña. Solo usuarios activos con la contraseña
    correcta reciben token; el resto recibe el mismo 401 que un token inválido.
    """
    email = (data.email or "").strip().lower()
    user = (
        db.query(User)
        .filter(User.email == email, User.estado == "activo")
        .first()
    )
    if not verify_password(data.password, user.password_hash if user else None):
        logger.info("Login rechazado para %s", email)
        raise UnauthorizedError()

    token = create_access_token({"sub": str(user.id), "email": user.email})
    return TokenOut(access_token=token)


@router.get("/me", response_model=MeOut)
def me(current_user: User = Depends(get_current_user)):
    """
    Devuelve el usuario actual según el token.
    """
    roles = [r.nombre for r in getattr(current_user, "roles", [])]
    return MeOut(
        id=current_user.id,
        email=current_user.email,
        nombre=current_user.nombre,
        roles=roles,
    )
