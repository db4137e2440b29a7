"""FastAPI application entry point."""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from wattboard import models  # noqa: F401  registers tables on Base.metadata
from wattboard.api.routes import auth, energy, health
from wattboard.core.config import settings
from wattboard.core.database import Base, engine
from wattboard.core.exceptions import UnauthorizedError, WattboardError
from wattboard.core.logging import configure_logging

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("wattboard.main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    if settings.uses_default_secret:
        logger.warning("Using the built-in development SECRET_KEY; set SECRET_KEY in production")
    # Startup: Create database tables
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Wattboard energy tracking API",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization", "Accept", "x-auth-token"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of every request."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


@app.exception_handler(WattboardError)
async def handle_domain_error(request: Request, exc: WattboardError) -> JSONResponse:
    """Translate domain errors into JSON responses; hide internals on 500s."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": "Internal server error"},
        )

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )


@app.exception_handler(SQLAlchemyError)
async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Unhandled database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# Include API routers
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(auth.router, prefix="/api")
app.include_router(energy.router, prefix="/api")


@app.get("/")
def root() -> dict[str, str]:
    """API banner."""
    return {"message": "API is running", "version": settings.VERSION}


@app.get("/test")
def connectivity_check() -> dict[str, str]:
    return {"message": "Test endpoint is working!"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "wattboard.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
