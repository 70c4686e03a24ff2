# likert_app/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from likert_app.core.config import configure_logging, settings
from likert_app.core.errors import register_error_handlers
from likert_app.api.v1.endpoints import health, auth, surveys, admin_surveys, admin_reports

API_V1_PREFIX = "/api/v1"

configure_logging()

app = FastAPI(
    title=settings.APP_NAME,
    description="API para encuestas Likert por secciones con topes de puntaje",
    version="1.0.0",
)

# CORS (en prod: restringe orígenes con CORS_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routers versionados
app.include_router(health.router,  prefix=API_V1_PREFIX)
app.include_router(auth.router,    prefix=API_V1_PREFIX)
app.include_router(surveys.router, prefix=API_V1_PREFIX)

# Admin: monta AQUÍ el prefijo /api/v1/admin
app.include_router(admin_surveys.router, prefix=f"{API_V1_PREFIX}/admin")
app.include_router(admin_reports.router, prefix=f"{API_V1_PREFIX}/admin")


@app.get("/")
def root():
    return {
        "message": "Likert Survey API",
        "version": "1.0.0",
        "docs": "/docs",
        "api_v1": API_V1_PREFIX,
    }
