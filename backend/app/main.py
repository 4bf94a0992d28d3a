# app/main.py

import asyncio

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from starlette.exceptions import HTTPException as StarletteHTTPException

# Routers
from app.routes.appointments import appointment_router
from app.routes.auth import auth_router
from app.routes.profile import profile_router
from app.routes.search import search_router

# Core
from profesiones.core.config import settings
from profesiones.core.error_handlers import (
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from profesiones.core.logging_config import setup_logging
from profesiones.db.database import USERS, ensure_indexes, get_database

logger = setup_logging()

# ------------------------
# App init
# ------------------------
app = FastAPI(
    title="ProfesionesUY API",
    version="1.0.0",
    description="Marketplace de profesionales: registro, perfiles y agenda de citas",
)

# ------------------------
# Swagger Authorize (JWT bearer)
# ------------------------
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}
    }
    # Only operations that depend on the bearer token are marked as secured
    for path in openapi_schema["paths"].values():
        for method in path.values():
            if "security" in method:
                method["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

# ------------------------
# CORS
# ------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ------------------------
# Routes
# ------------------------
app.include_router(auth_router, prefix="/api")
app.include_router(profile_router, prefix="/api")
app.include_router(appointment_router, prefix="/api")
app.include_router(search_router, prefix="/api")

# ------------------------
# Exception handlers
# ------------------------
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


# ------------------------
# Health & root
# ------------------------
@app.get("/")
async def root():
    return {"success": True, "message": "¡API Profesiones UY funcionando!"}


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


# ------------------------
# DB connectivity check
# ------------------------
@app.on_event("startup")
async def startup_db_check():
    if settings.JWT_SECRET_KEY == "profesiones-dev-secret-change-me-in-production":
        logger.warning("JWT_SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION")
    db = get_database()
    try:
        # 5-second timeout to avoid blocking startup
        await asyncio.wait_for(db[USERS].find_one({}), timeout=5)
        await ensure_indexes(db)
        logger.info("✅ MongoDB connected successfully.")
    except Exception as e:
        logger.error("❌ MongoDB connection failed: %s", e)
