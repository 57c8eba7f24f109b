# credvault - FastAPI backend
#
# create_app() builds the service graph from Settings once and mounts the
# auth and credential routers. Unhandled errors return a generic 500 body;
# internal detail is only shown outside production.

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, load_settings
from ..core import EventSeverity, EventType, configure_audit_logger
from .auth_routes import router as auth_router
from .credential_routes import router as credential_router
from .services import build_services

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API application for the given (or environment) settings."""
    settings = settings or load_settings()

    audit = configure_audit_logger(settings.audit_dir)

    app = FastAPI(
        title="credvault API",
        description="Encrypted payment provider credentials per user",
        version=__version__,
    )
    app.state.services = build_services(settings)

    app.include_router(auth_router)
    app.include_router(credential_router)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        detail = "Internal server error" if settings.is_production else str(exc)
        return JSONResponse(status_code=500, content={"success": False, "error": detail})

    @app.get("/api/health")
    async def health():
        return {"status": "ok", "version": __version__}

    audit.log_event(
        event_type=EventType.SYSTEM_START,
        severity=EventSeverity.INFO,
        message="credvault API initialized",
        details={
            "version": __version__,
            "insecure_default_keys": settings.uses_default_keys,
        },
    )

    return app
