import logging
import time
from datetime import datetime

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .core.config import Config
from .core.middleware import log_requests, global_exception_handler, validation_exception_handler
from .core.observability import init_sentry
from .routes import admin, investor, marketing, resource, seo
from .services.supabase_service import get_client

logger = logging.getLogger(__name__)


init_sentry()

app = FastAPI(title="Golden Gate Home Advisors API")

# CORS setup
ALLOWED_ORIGINS = Config.allowed_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def _log_requests(request, call_next):
    return await log_requests(request, call_next)


@app.exception_handler(RequestValidationError)
async def _validation_exception_handler(request, exc):
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def _global_exception_handler(request, exc):
    return await global_exception_handler(request, exc)


app.include_router(marketing.router)
app.include_router(resource.router)
app.include_router(admin.router)
app.include_router(investor.router)
app.include_router(seo.router)


@app.get("/health")
async def health_check():
    """Basic health and dependency checks for the API."""
    health_start_time = time.time()

    try:
        Config.validate()
        get_client().table("site_settings").select("id").limit(1).execute()

        health_duration = time.time() - health_start_time
        return {
            "status": "healthy",
            "service": "goldengate-api",
            "timestamp": datetime.now().isoformat(),
            "response_time_ms": round(health_duration * 1000, 2),
        }
    except Exception as e:
        health_duration = time.time() - health_start_time
        logger.error(f"Health check failed: {str(e)} - Duration: {health_duration:.1f}s")
        return {
            "status": "unhealthy",
            "service": "goldengate-api",
            "timestamp": datetime.now().isoformat(),
            "error": str(e),
            "response_time_ms": round(health_duration * 1000, 2),
        }


@app.get("/api")
async def api_info():
    """Return basic API information."""
    return {
        "service": "Golden Gate Home Advisors API",
        "version": "1.0",
        "endpoints": {
            "lead": "/resource/lead",
            "submit_loi": "/resource/submit-loi",
            "countersign_loi": "/resource/countersign-loi",
            "upload_accreditation": "/resource/upload-accreditation",
            "clerk_webhook": "/resource/clerk-webhook",
            "sitemap": "/sitemap.xml",
            "health": "/health",
        },
        "timestamp": datetime.now().isoformat(),
        "description": "Content, lead capture and investor portal backend for goldengateadvisors.com",
    }
