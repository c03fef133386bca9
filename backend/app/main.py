"""FastAPI application entry point"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.exceptions import RequestValidationError
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.logging import setup_logging
from app.core.middleware import (
    access_log_middleware, global_exception_handler, http_exception_handler,
    route_guard_middleware, setup_cors_middleware, validation_exception_handler
)
from app.core.otel import initialize_otel, instrument_app, instrument_sqlalchemy, setup_otel_logging
from app.db.session import engine, init_db
from app.tasks.email_dispatch import shutdown_dispatcher

# Import routers
from app.api import auth, blogs, dashboard, downloads, payments, public, speakers, trainings, whitepapers
from app.api import settings as settings_router

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    # Startup
    otel_initialized = initialize_otel()
    if otel_initialized:
        if setup_otel_logging():
            logger.info(f"OpenTelemetry fully initialized, exporting to {settings.OTEL_EXPORTER_OTLP_ENDPOINT}")
        else:
            logger.warning("OpenTelemetry metrics/traces initialized but logging setup failed")
        instrument_sqlalchemy(engine)
    else:
        logger.info("OpenTelemetry not configured - running without distributed tracing")

    logger.info("Initializing database...")
    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    yield

    # Shutdown
    logger.info("Shutting down, waiting for queued emails...")
    shutdown_dispatcher()


# Create FastAPI app
app = FastAPI(
    title="Content Admin Backend",
    description="Content management and lead capture for trainings, whitepapers and blogs",
    version="1.0.0",
    lifespan=lifespan
)

instrument_app(app)

# Middleware: the last one added runs first
app.middleware("http")(route_guard_middleware)
app.middleware("http")(access_log_middleware)
setup_cors_middleware(app)

# Exception handlers
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Include routers
app.include_router(auth.router)
app.include_router(auth.setup_router)  # /api/setup
app.include_router(public.router)
app.include_router(blogs.router)
app.include_router(whitepapers.router)
app.include_router(trainings.router)
app.include_router(speakers.router)
app.include_router(downloads.router)
app.include_router(payments.router)
app.include_router(settings_router.router)
app.include_router(dashboard.router)


# Prometheus metrics endpoint
@app.get("/metrics")
def metrics_endpoint():
    """Prometheus metrics endpoint"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


# Health check endpoint
@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}
