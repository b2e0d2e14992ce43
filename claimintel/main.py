# claimintel/main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from claimintel.core.config import settings
from claimintel.core.dependencies import Services
from claimintel.core.exceptions import ClaimIntelException
from claimintel.core.logging import get_logger

logger = get_logger(__name__)

# ===================
# Lifespan Management
# ===================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"LLM Provider: {settings.LLM_PROVIDER}")
    if getattr(app.state, "services", None) is None:
        app.state.services = Services()
    yield
    logger.info("Shutting down...")

# ===================
# Application Setup
# ===================

def create_app(services: Services = None) -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Insurance claims intake with AI document extraction and fraud review",
        version=settings.APP_VERSION,
        lifespan=lifespan
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ClaimIntelException)
    async def claimintel_exception_handler(request: Request, exc: ClaimIntelException):
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code}: {exc.message}", path=request.url.path)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    from claimintel.api.v1.claims import router as claims_router
    from claimintel.api.v1.notifications import router as notifications_router
    from claimintel.api.v1.dashboard import router as dashboard_router
    from claimintel.api.v1.admin import router as admin_router

    app.include_router(claims_router, prefix=f"{settings.API_PREFIX}/claims", tags=["claims"])
    app.include_router(notifications_router, prefix=f"{settings.API_PREFIX}/notifications", tags=["notifications"])
    app.include_router(dashboard_router, prefix=f"{settings.API_PREFIX}/dashboard", tags=["dashboard"])
    app.include_router(admin_router, prefix=f"{settings.API_PREFIX}/admin", tags=["admin"])

    # ===================
    # Root Endpoints
    # ===================

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "status": "running",
            "docs": "/docs",
            "endpoints": {
                "claims": f"{settings.API_PREFIX}/claims",
                "notifications": f"{settings.API_PREFIX}/notifications",
                "dashboard": f"{settings.API_PREFIX}/dashboard",
                "admin": f"{settings.API_PREFIX}/admin"
            }
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": settings.APP_VERSION}

    return app


app = create_app()
