"""
FastAPI application for the appointment agenda

Booking, clients, catalog, templates and reminders under /api/v1
"""
import logging
from collections import defaultdict
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from agenda.api.v1.router import api_v1_router
from agenda.config.settings import get_settings
from agenda.core.errors import AppError
from agenda.core.middleware import correlation_id_middleware, request_logging_middleware
from agenda.core.monitoring import health_router
from agenda.utils.my_logging import setup_logging

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    setup_logging()
    logger.info(f"🚀 {settings.APP_NAME} starting up...")

    routes_by_tag = defaultdict(list)
    for route in app.routes:
        if isinstance(route, APIRoute):
            tag = route.tags[0] if route.tags else "other"
            for method in route.methods:
                routes_by_tag[tag].append((method, route.path))

    for tag, routes in sorted(routes_by_tag.items()):
        for method, path in sorted(routes, key=lambda x: (x[1], x[0])):
            logger.debug(f"[{tag}] {method:8} {path}")
    logger.info(f"✅ Total routes registered: {sum(len(r) for r in routes_by_tag.values())}")

    yield

    # Shutdown
    logger.info(f"🛑 {settings.APP_NAME} shutting down...")


async def app_error_handler(request: Request, exc: AppError):
    correlation_id = getattr(request.state, "correlation_id", None)
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {**exc.to_dict(), "correlation_id": correlation_id}},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body") or "body"
        details.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request",
                "details": details,
                "correlation_id": getattr(request.state, "correlation_id", None),
            }
        },
    )


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""

    app = FastAPI(
        title=settings.APP_NAME,
        description="Appointment booking with catalog pricing and SMS reminders",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "PUT"],
        allow_headers=["*"],
    )

    # Registered last runs first: correlation id is set before logging reads it
    app.middleware("http")(request_logging_middleware)
    app.middleware("http")(correlation_id_middleware)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Include routers
    app.include_router(health_router, prefix="/health", tags=["monitoring"])
    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "service": settings.APP_NAME,
            "version": "0.1.0",
            "status": "running",
            "endpoints": {
                "api": "/api/v1",
                "health": "/health",
                "docs": "/docs" if settings.DEBUG else "disabled"
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "agenda.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
