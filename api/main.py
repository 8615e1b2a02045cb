"""
Storefront Orders - Main FastAPI Application.

REST and websocket surface for checkout, payment reconciliation, order
administration and returns.
"""
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api import dependencies
from api.errors import register_exception_handlers
from api.routes import health, orders, payments, realtime, returns, settings, webhooks
from core.infrastructure.database.config import close_database, init_database
from core.infrastructure.logging import configure_logging
from core.infrastructure.realtime import RedisRealtimeRelay
from core.settings import get_app_settings

configure_logging(get_app_settings().logging.level)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


# =============================================================================
# CREATE FASTAPI APP
# =============================================================================

app = FastAPI(
    title="Storefront Orders API",
    description="""
    Order and payment reconciliation backend.

    Features:
    - Server-side pricing and order codes
    - Stripe and PayPal checkouts with idempotent reconciliation
    - Admin order lifecycle, cancellations and refunds
    - Returns (RMA)
    - Realtime order, return and analytics updates
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

register_exception_handlers(app)


# =============================================================================
# REQUEST LOGGING MIDDLEWARE
# =============================================================================

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing."""
    start_time = time.time()
    logger.info(f"→ {request.method} {request.url.path}")

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        f"← {request.method} {request.url.path} "
        f"[{response.status_code}] ({duration:.3f}s)"
    )
    return response


# =============================================================================
# STARTUP/SHUTDOWN EVENTS
# =============================================================================

_relay = None


@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    global _relay
    logger.info("🚀 Storefront Orders API starting up...")
    await init_database()

    realtime_settings = get_app_settings().realtime
    if realtime_settings.backend == "redis":
        _relay = RedisRealtimeRelay(
            dependencies.get_realtime_hub(),
            redis_url=realtime_settings.redis_url,
            channel_prefix=realtime_settings.channel_prefix,
        )
        await _relay.start()


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown."""
    global _relay
    logger.info("👋 Storefront Orders API shutting down...")
    if _relay is not None:
        await _relay.stop()
        _relay = None
    await dependencies.shutdown_dependencies()
    await close_database()


# =============================================================================
# INCLUDE ROUTERS
# =============================================================================

app.include_router(health.router, tags=["Health"])

# Provider routes first so "/stripe/..." is never captured by "/{order_id}".
app.include_router(payments.router, prefix=f"{API_PREFIX}/orders", tags=["Payments"])
app.include_router(orders.router, prefix=f"{API_PREFIX}/orders", tags=["Orders"])
app.include_router(webhooks.router, prefix=API_PREFIX, tags=["Webhooks"])
app.include_router(returns.router, prefix=f"{API_PREFIX}/returns", tags=["Returns"])
app.include_router(settings.router, prefix=f"{API_PREFIX}/admin/settings", tags=["Settings"])
app.include_router(realtime.router, tags=["Realtime"])


@app.get("/", tags=["Root"])
async def root():
    """API root endpoint."""
    return {
        "message": "Storefront Orders API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }
