"""FastAPI app entry point for the garage tire storage API."""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from tirestore.api.deps import close_services, get_garage_service, limiter
from tirestore.api.routes import router
from tirestore.config import get_settings, validate_settings
from tirestore.core.errors import GarageError
from tirestore.core.logging import log_error, log_request, logger

settings = get_settings()

# Validate settings on startup
try:
    validate_settings(settings)
except ValueError as e:
    logger.error(f"Configuration error: {e}")
    raise

logger.setLevel(settings.log_level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - initialize services on startup."""
    logger.info("Starting garage tire storage API...")
    get_garage_service()
    yield
    logger.info("Shutting down...")
    await close_services()


app = FastAPI(
    title="Garage Tire Storage API",
    description="Rack registry and automatic tire placement for garages",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(GarageError)
async def garage_error_handler(request: Request, exc: GarageError):
    if exc.status_code >= 500:
        log_error(exc.message, path=request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, **exc.extra},
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    log_error("Rate limit exceeded", client=get_remote_address(request))
    return JSONResponse(
        status_code=429, content={"message": "Rate limit exceeded. Try again later."}
    )


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        log_error("Unhandled error", e, path=request.url.path)
        raise

    duration_ms = (time.time() - start) * 1000
    log_request(request.method, request.url.path, response.status_code, duration_ms)

    return response


app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok", "storage": settings.storage_backend.value}
