"""
Tournament Payments — FastAPI Application Entry Point

Registers the payment router, configures middleware and error rendering,
and initializes the database and logging on startup.
"""
import logging
import time
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from payments_api.config import get_settings
from payments_api.database import SessionLocal, init_db
from payments_api.exceptions import PaymentError, InvalidRequest
from payments_api.routes import payment_router
from payments_api.schemas.schemas import HealthResponse
from payments_api.services.square_gateway import close_gateway
from payments_api.utils.logger import configure_logging

settings = get_settings()
logger = logging.getLogger("payments_api")

# ─── Application Instance ───────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "Payment intake for tournament entry fees. Charges card tokens through Square, "
        "records each payment, and marks the matching tournament registration as paid."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
)

# ─── Startup ─────────────────────────────────────────────────────────
BOOT_TIME = time.time()


@app.on_event("startup")
def on_startup():
    """Initialize logging and database tables, then log boot info."""
    configure_logging(settings)
    init_db()

    logger.info(
        "\n%s\n  %s v%s\n  TIME: %s\n  SQUARE: %s (%s)\n  DATABASE: %s\n  DEBUG: %s\n%s",
        "=" * 60,
        settings.APP_NAME,
        settings.APP_VERSION,
        datetime.now().isoformat(),
        settings.SQUARE_ENVIRONMENT,
        "[OK] Token loaded" if settings.SQUARE_ACCESS_TOKEN else "[!] Token missing",
        settings.DATABASE_URL,
        settings.DEBUG,
        "=" * 60,
    )


@app.on_event("shutdown")
def on_shutdown():
    """Release the Square HTTP connection pool."""
    close_gateway()


# ─── Middleware ──────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with timing."""
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 1)

    if request.url.path.startswith("/api"):
        logger.info("-> %s %s -> %s (%sms)", request.method, request.url.path, response.status_code, duration)

    return response


# ─── Error Rendering ─────────────────────────────────────────────────
@app.exception_handler(PaymentError)
async def payment_error_handler(request: Request, exc: PaymentError):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies get the same envelope as any other invalid request."""
    logger.info("Rejected malformed body on %s: %s", request.url.path, exc.errors())
    return await payment_error_handler(request, InvalidRequest("Invalid request body"))


# ─── API Routers ─────────────────────────────────────────────────────
app.include_router(payment_router)


@app.get("/health", tags=["Health"], response_model=HealthResponse)
def deep_health():
    """Detailed health check including dependency statuses."""
    db_ok = False
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except Exception as exc:
        logger.warning("Health check database query failed: %s", exc)
    finally:
        db.close()

    return HealthResponse(
        status="healthy" if db_ok else "degraded",
        database="connected" if db_ok else "disconnected",
        gateway="configured" if settings.SQUARE_ACCESS_TOKEN else "unconfigured",
        version=settings.APP_VERSION,
        uptime_seconds=round(time.time() - BOOT_TIME, 1),
    )
