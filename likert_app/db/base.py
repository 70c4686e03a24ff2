# likert_app/db/base.py
from likert_app.db.base_class import Base  # noqa: F401

# Importa todos los modelos que definen tablas para registrar la metadata
# (alembic autogenerate y create_all en tests)
from likert_app.models import user  # noqa: F401
from likert_app.models import survey  # noqa: F401
