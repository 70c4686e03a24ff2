"""
Fixtures compartidas: BD SQLite en memoria por test, cliente FastAPI con
``get_db`` sobreescrito y un administrador con su token.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("PASSWORD_BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from likert_app.core.security import create_access_token
from likert_app.db.base import Base
from likert_app.db.session import get_db
from likert_app.main import app
from likert_app.models.user import User
from scripts.create_admin import ensure_admin

ADMIN_EMAIL = "admin@encuestas.co"
ADMIN_PASSWORD = "clave-segura-123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin(db):
    return ensure_admin(db, ADMIN_EMAIL, ADMIN_PASSWORD, "Admin")


@pytest.fixture
def admin_headers(admin):
    token = create_access_token({"sub": str(admin.id), "email": admin.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def plain_user_headers(db):
    user = User(email="persona@encuestas.co", nombre="Persona", estado="activo")
    db.add(user)
    db.commit()
    token = create_access_token({"sub": str(user.id), "email": user.email})
    return {"Authorization": f"Bearer {token}"}


def survey_payload(**overrides):
    """Encuesta de ejemplo: 2 preguntas básicas y una sección de 3 preguntas con topes 2/2."""
    payload = {
        "title": "Clima laboral",
        "description": "Encuesta semestral",
        "basic_info_questions": [
            {"id": "name", "label": "Nombre", "type": "text"},
            {"id": "area", "label": "Área", "type": "select", "options": ["Ventas", "Soporte"]},
        ],
        "sections": [
            {
                "id": "s1",
                "title": "Liderazgo",
                "max_one_points": 2,
                "max_five_points": 2,
                "questions": [
                    {"id": "q1", "text": "Mi jefe me escucha"},
                    {"id": "q2", "text": "Recibo retroalimentación"},
                    {"id": "q3", "text": "Confío en la dirección", "isReverseCoded": True},
                ],
            }
        ],
    }
    payload.update(overrides)
    return payload


def response_payload(q1, q2, q3, name="Ana", area="Ventas"):
    return {
        "basic_info": {"name": name, "area": area},
        "section_answers": {"s1": {"q1": q1, "q2": q2, "q3": q3}},
    }


@pytest.fixture
def created_survey(client, admin_headers):
    r = client.post("/api/v1/admin/surveys", json=survey_payload(), headers=admin_headers)
    assert r.status_code == 201, r.text
    return r.json()
