"""Middleware and exception handlers for the FastAPI application"""
import logging
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from app.core.config import settings
from app.core.security import delete_session, log_api_access, verify_session

logger = logging.getLogger(__name__)
security_logger = logging.getLogger("security")


def get_allowed_origins():
    """Get list of allowed CORS origins"""
    allowed_origins = [settings.FRONTEND_URL]
    if settings.ENVIRONMENT == "development":
        allowed_origins.extend([
            "http://localhost:3000",
            "http://localhost:8000",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:8000"
        ])
    return allowed_origins


def setup_cors_middleware(app):
    """Setup CORS middleware for FastAPI app"""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def is_guarded_path(path: str) -> bool:
    """Admin pages need a session, except the login page itself"""
    prefix = settings.ADMIN_PATH_PREFIX
    if path == settings.ADMIN_LOGIN_PATH:
        return False
    return path == prefix or path.startswith(prefix + "/")


async def route_guard_middleware(request: Request, call_next):
    """Redirect unauthenticated admin page requests to the login page

    No cookie -> redirect. Cookie that fails verification -> clear it and
    redirect. Valid cookie -> pass through unchanged.
    """
    path = request.url.path
    if not is_guarded_path(path):
        return await call_next(request)

    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return RedirectResponse(settings.ADMIN_LOGIN_PATH, status_code=307)

    if verify_session(token) is None:
        security_logger.info(f"Invalid session on {path}, redirecting to login")
        response = RedirectResponse(settings.ADMIN_LOGIN_PATH, status_code=307)
        delete_session(response)
        return response

    return await call_next(request)


async def access_log_middleware(request: Request, call_next):
    """Log every request with its final status code"""
    status_code = 500
    error = None
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    except Exception as e:
        error = str(e)
        raise
    finally:
        log_api_access(request, status_code, error)


async def http_exception_handler(request: Request, exc: HTTPException):
    """Render HTTP errors as {"success": false, "error": ...}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render request validation errors in the same shape"""
    return JSONResponse(
        status_code=422,
        content={"success": False, "error": "Invalid request", "details": jsonable_encoder(exc.errors())}
    )


async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"}
    )
