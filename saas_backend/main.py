"""FastAPI main application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from saas_backend.core.config import settings
from saas_backend.core.middleware import setup_middleware
from saas_backend.core.exceptions import SaaSPlatformError

from saas_backend.api.auth import router as auth_router
from saas_backend.api.businesses import router as businesses_router
from saas_backend.api.roles import router as roles_router
from saas_backend.api.users import router as users_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("saas_backend")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting %s", settings.APP_NAME)

    from saas_backend.db.session import SessionLocal, engine

    if settings.CREATE_TABLES_ON_STARTUP:
        import saas_backend.models  # noqa: F401
        from saas_backend.db.base import Base
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ready")

    if settings.SEED_ROLES_ON_STARTUP:
        from saas_backend.db.seeds.seed_roles import seed_default_roles
        db = SessionLocal()
        try:
            seed_default_roles(db, logger=logging.getLogger("saas_backend.seeds"))
        except SQLAlchemyError as e:
            logger.error("Role seeding failed: %s", e)
        finally:
            db.close()

    # Redis check
    from saas_backend.services.cache_service import cache_service
    if cache_service.health_check():
        logger.info("Redis connected")
    else:
        logger.warning("Redis not available, caching disabled")

    yield

    logger.info("Shutting down %s", settings.APP_NAME)


app = FastAPI(
    title="SaaS Backend API",
    description="Multi-tenant business management backend",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Middleware
setup_middleware(app)


@app.exception_handler(SaaSPlatformError)
async def platform_exception_handler(request: Request, exc: SaaSPlatformError):
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )

# Register routers
app.include_router(auth_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(roles_router, prefix="/api")
app.include_router(businesses_router, prefix="/api")


@app.get("/")
async def root():
    return {
        "name": settings.APP_NAME,
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/api/health")
async def health():
    """Quick health check endpoint."""
    return {"status": "ok"}
