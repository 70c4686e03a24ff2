# likert_app/db/session.py
import logging
import re

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from likert_app.core.config import settings

logger = logging.getLogger(__name__)


def _mask(u: str) -> str:
    """Enmascara la contraseña en la URL para logs seguros"""
    return re.sub(r"://([^:]+):([^@]+)@", r"://\1:***@", u)


def build_engine(db_url: str) -> Engine:
    if db_url.startswith("sqlite"):
        # SQLite (tests/local): sin pool de conexiones ni timeouts de red
        engine = create_engine(db_url, connect_args={"check_same_thread": False})
    else:
        engine = create_engine(
            db_url,
            pool_size=5,              # 5 conexiones concurrentes
            max_overflow=10,          # Hasta 15 total en picos
            pool_timeout=30,          # 30s para obtener conexión
            pool_recycle=1800,        # Recicla cada 30 min
            pool_pre_ping=True,       # Verifica que la conexión esté viva
            echo=False,
        )
    return engine


@event.listens_for(Engine, "connect")
def _sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite no aplica ON DELETE CASCADE sin este pragma
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


db_url = settings.db_url
logger.info("[DB] Using: %s", _mask(db_url))

engine = build_engine(db_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Dependency para FastAPI"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connection() -> bool:
    """Verifica que la conexión funcione"""
    try:
        with engine.connect() as conn:
            row = conn.execute(text("SELECT 1")).fetchone()
            return bool(row and row[0] == 1)
    except SQLAlchemyError as e:
        logger.error("[DB] Connection failed: %s", e)
        return False
