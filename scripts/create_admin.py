#!/usr/bin/env python3
"""
Crea (o reactiva) un usuario administrador con contraseña.
Ejecutar desde la raíz del repo:
    python scripts/create_admin.py admin@tu-dominio.com "Nombre"
La contraseña se pide por consola si no se pasa --password.
"""
import argparse
import getpass
import logging

from likert_app.core.config import configure_logging
from likert_app.core.security import hash_password
from likert_app.db.session import SessionLocal
from likert_app.models.user import Role, User

logger = logging.getLogger("create_admin")

ADMIN_ROLE = "admin"


def ensure_admin(db, email: str, password: str, nombre: str | None = None) -> User:
    if not password:
        raise ValueError("La contraseña no puede estar vacía.")

    role = db.query(Role).filter(Role.nombre == ADMIN_ROLE).first()
    if not role:
        role = Role(nombre=ADMIN_ROLE)
        db.add(role)

    email = email.strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if not user:
        user = User(email=email, nombre=nombre, estado="activo")
        db.add(user)
    else:
        user.estado = "activo"
        if nombre:
            user.nombre = nombre
    user.password_hash = hash_password(password)

    if role not in user.roles:
        user.roles.append(role)
    db.commit()
    db.refresh(user)
    return user


def main():
    parser = argparse.ArgumentParser(description="Crea un usuario administrador")
    parser.add_argument("email")
    parser.add_argument("nombre", nargs="?", default=None)
    parser.add_argument("--password", default=None, help="si falta, se pide por consola")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Contraseña: ")

    configure_logging()
    db = SessionLocal()
    try:
        user = ensure_admin(db, args.email, password, args.nombre)
        logger.info("[OK] Administrador %s (%s)", user.email, user.id)
    finally:
        db.close()


if __name__ == "__main__":
    main()
