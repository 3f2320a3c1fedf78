from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
import time
import logging
import os

from .api.v1.profiles import router as profiles_router
from .api.v1.specialists import router as specialists_router
from .api.v1.appointments import router as appointments_router
from .api.v1.symptom_checks import router as symptom_checks_router
from .api.v1.pharmacies import router as pharmacies_router
from .api.v1.care_plans import router as care_plans_router
from .api.v1.notification_preferences import router as preferences_router
from .api.v1.articles import router as articles_router
from .api.functions import router as functions_router
from .api.storage import router as storage_router
from .core.config import settings
from .core.database import init_db, SessionLocal
from .services.seed_data import seed_reference_data

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Patient services for NauriCare: appointments, symptom checks, pharmacies and care plans",
    openapi_url="/api/v1/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Middleware setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Only add TrustedHostMiddleware in production, not in testing
if not os.getenv("TESTING"):
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=["localhost", "127.0.0.1", "*.localhost", "testserver"]
    )

# Custom middleware for request logging and timing
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    # Log request
    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Time: {process_time:.4f}s"
    )

    return response

# Exception handlers
@app.exception_handler(404)
async def not_found_handler(request: Request, exc: HTTPException):
    # Keep service messages such as the onboarding redirect hint
    detail = getattr(exc, "detail", None)
    if not detail or detail == "Not Found":
        detail = "The requested resource was not found"
    return JSONResponse(
        status_code=404,
        content={
            "error": "Not Found",
            "message": detail,
            "detail": detail,
            "path": str(request.url.path)
        }
    )

@app.exception_handler(500)
async def internal_error_handler(request: Request, exc: Exception):
    logger.error(f"Internal server error: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "message": "An unexpected error occurred"
        }
    )

# Include routers
app.include_router(profiles_router, prefix="/api/v1")
app.include_router(specialists_router, prefix="/api/v1")
app.include_router(appointments_router, prefix="/api/v1")
app.include_router(symptom_checks_router, prefix="/api/v1")
app.include_router(pharmacies_router, prefix="/api/v1")
app.include_router(care_plans_router, prefix="/api/v1")
app.include_router(preferences_router, prefix="/api/v1")
app.include_router(articles_router, prefix="/api/v1")
app.include_router(functions_router)
app.include_router(storage_router)

# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Initialize application on startup."""
    logger.info("Starting NauriCare patient services...")

    # Check database connection
    db_url = settings.get_database_url
    db_type = "PostgreSQL" if "postgresql" in db_url else "SQLite" if "sqlite" in db_url else "Unknown"
    logger.info(f"Using {db_type} database")

    # Initialize database
    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {str(e)}")
        raise

    if settings.SEED_REFERENCE_DATA:
        db = SessionLocal()
        try:
            seed_reference_data(db)
        finally:
            db.close()

    if not settings.email_delivery_enabled:
        logger.warning("RESEND_API_KEY not set; notification emails will only be logged")

    logger.info("Application startup complete")

@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on application shutdown."""
    logger.info("Shutting down NauriCare patient services...")

# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.VERSION
    }

# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Welcome to the NauriCare API",
        "version": settings.VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/health"
    }

# API Info endpoint
@app.get("/api/v1/info")
async def api_info():
    """API information endpoint."""
    return {
        "name": settings.APP_NAME,
        "version": settings.VERSION,
        "endpoints": {
            "profiles": "/api/v1/profiles",
            "specialists": "/api/v1/specialists",
            "appointments": "/api/v1/appointments",
            "symptom_checks": "/api/v1/symptom-checks",
            "pharmacies": "/api/v1/pharmacies",
            "care_plans": "/api/v1/care-plans",
            "notification_preferences": "/api/v1/notification-preferences",
            "articles": "/api/v1/articles",
            "functions": "/functions/v1",
            "storage": storage_router.prefix,
            "docs": "/docs",
            "openapi": "/api/v1/openapi.json"
        }
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "nauricare.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )
