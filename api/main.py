"""
ClaimIQ API

HTTP transport for the claim intelligence core.

Configuration is read from CIQ_* environment variables (see claimiq.config).
Every endpoint except /health requires a bearer token and is rate limited
per principal.
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from claimiq import __version__
from claimiq.config import Settings
from claimiq.exceptions import (
    AdminRequired,
    AgentAlreadyExists,
    AgentNotFound,
    AuthorizationError,
    ClaimIQError,
    ClaimNotFound,
    InvalidTransition,
    OrgAccessDenied,
    RateLimitExceeded,
    StateConflict,
)

from api.routes import agents, claims, negotiation
from api.schemas.responses import HealthResponse
from api.services import Services, build_services


# =============================================================================
# Logging
# =============================================================================

class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    EXTRA_FIELDS = ("request_id", "claim_id", "principal", "status_code", "duration_ms")

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Add extra fields if present
        for name in self.EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def configure_logging(level: str) -> logging.Logger:
    """Attach a JSON handler to the "claimiq" logger (once)."""
    root = logging.getLogger("claimiq")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not any(isinstance(h.formatter, JSONFormatter) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
    return logging.getLogger("claimiq.api")


logger = logging.getLogger("claimiq.api")


# =============================================================================
# Error Mapping
# =============================================================================

STATUS_CODES: dict[type, int] = {
    ClaimNotFound: 404,
    AgentNotFound: 404,
    InvalidTransition: 422,
    StateConflict: 409,
    AgentAlreadyExists: 409,
    AuthorizationError: 401,
    OrgAccessDenied: 403,
    AdminRequired: 403,
    RateLimitExceeded: 429,
}


def status_for(exc: ClaimIQError) -> int:
    for exc_type in type(exc).__mro__:
        if exc_type in STATUS_CODES:
            return STATUS_CODES[exc_type]
    return 500


async def claimiq_error_handler(request: Request, exc: ClaimIQError) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")
    status_code = status_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "%s: %s",
        exc.code,
        exc.message,
        extra={"request_id": request_id, "claim_id": exc.claim_id, "status_code": status_code},
    )

    headers: dict[str, str] = {}
    if isinstance(exc, RateLimitExceeded):
        headers["Retry-After"] = str(max(1, int(exc.retry_after + 0.999)))
    elif isinstance(exc, AuthorizationError):
        headers["WWW-Authenticate"] = "Bearer"

    return JSONResponse(
        status_code=status_code,
        content={
            "error": exc.message,
            "code": exc.code,
            "details": exc.details or None,
            "request_id": request_id,
        },
        headers=headers,
    )


# =============================================================================
# Application
# =============================================================================

def create_app(
    settings: Optional[Settings] = None,
    services: Optional[Services] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Services are built at startup from settings unless supplied (tests).
    """
    settings = settings or (services.settings if services else Settings.from_env())
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "services", None) is None:
            app.state.services = build_services(settings)
        loaded = app.state.services
        logger.info(
            "ClaimIQ API started",
            extra={"request_id": "startup"},
        )
        logger.info(
            "Loaded %d rules, %d carriers, %d agents",
            len(loaded.rule_engine.rules),
            len(loaded.negotiation.carriers),
            len(loaded.registry.list_agents()),
        )
        yield
        logger.info("Shutting down")
        app.state.services.orchestrator.close()

    app = FastAPI(
        title="ClaimIQ API",
        description="""
**Claim intelligence orchestration for roofing insurance claims.**

## Features

- **Orchestration**: next-best actions, approval/risk intelligence and explanations
- **Lifecycle**: validated state transitions with an append-only history
- **Negotiation**: carrier-specific tactics from the carrier strategy pack
- **Agents**: utility-scored agent catalog
        """,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.docs_enabled else None,
        redoc_url="/redoc" if settings.docs_enabled else None,
        openapi_url="/openapi.json" if settings.docs_enabled else None,
    )
    app.state.services = services

    app.add_exception_handler(ClaimIQError, claimiq_error_handler)

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Add request ID to all requests."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        start_time = time.time()

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "%s %s",
            request.method,
            request.url.path,
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            },
        )
        return response

    app.include_router(claims.router)
    app.include_router(negotiation.router)
    app.include_router(agents.router)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health(request: Request):
        """Liveness probe; no authentication required."""
        current = request.app.state.services
        return HealthResponse(
            healthy=True,
            version=__version__,
            rules_loaded=len(current.rule_engine.rules),
            carriers_loaded=len(current.negotiation.carriers),
            agents=len(current.registry.list_agents()),
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
