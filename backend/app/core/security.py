"""Session tokens, cookie handling and auth dependencies

Sessions are not stored server-side. The cookie carries a signed token:

    base64url(json claims) "." base64url(HMAC-SHA256(claims, SECRET_KEY))

Claims are userId, email, role, iat and exp. Expiry is absolute (1 hour from
issuance) and there is no renewal.
"""
import base64
import hashlib
import hmac
import json
import logging
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, Request, Response

from app.core.config import settings
from app.schemas.auth import SessionPayload

security_logger = logging.getLogger("security")
api_access_logger = logging.getLogger("api_access")


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode().rstrip("=")


def _b64decode(data: str) -> bytes:
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


def _sign(message: bytes) -> str:
    if not settings.SECRET_KEY:
        raise ValueError("SECRET_KEY environment variable is required")
    digest = hmac.new(settings.SECRET_KEY.encode(), message, hashlib.sha256).digest()
    return _b64encode(digest)


def create_session_token(user_id: str, email: str, role: str, issued_at: Optional[int] = None) -> str:
    """Sign a session token valid for SESSION_TTL_SECONDS from issuance"""
    iat = int(time.time()) if issued_at is None else int(issued_at)
    claims = {
        "userId": str(user_id),
        "email": email,
        "role": role,
        "iat": iat,
        "exp": iat + settings.SESSION_TTL_SECONDS,
    }
    body = _b64encode(json.dumps(claims, separators=(",", ":")).encode())
    return f"{body}.{_sign(body.encode())}"


def verify_session(token: str) -> Optional[SessionPayload]:
    """Verify signature and expiry of a session token

    Returns None on any failure (bad signature, malformed token, expired).
    Never raises.
    """
    try:
        body, signature = token.split(".")
        if not hmac.compare_digest(signature, _sign(body.encode())):
            security_logger.warning("Session token signature mismatch")
            return None

        claims = json.loads(_b64decode(body))
        expires_at = int(claims["exp"])
        if expires_at <= int(time.time()):
            return None

        return SessionPayload(
            user_id=claims["userId"],
            email=claims["email"],
            role=claims["role"],
            issued_at=datetime.fromtimestamp(int(claims["iat"]), tz=timezone.utc),
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
        )
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        security_logger.warning(f"Failed to verify session: {type(e).__name__}")
        return None


def create_session(response: Response, user_id: str, email: str, role: str) -> str:
    """Issue a session token and store it in the session cookie"""
    token = create_session_token(user_id, email, role)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
        max_age=settings.SESSION_TTL_SECONDS
    )
    return token


def get_session(request: Request) -> Optional[SessionPayload]:
    """Read the session cookie; None means not authenticated"""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    return verify_session(token)


def delete_session(response: Response) -> None:
    """Clear the session cookie (idempotent)"""
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax"
    )


def require_session(request: Request) -> SessionPayload:
    """Dependency: Require a valid session, return its payload"""
    session = get_session(request)
    if session is None:
        raise HTTPException(401, "Unauthorized")
    return session


def log_api_access(request: Request, status_code: int = 200, error: Optional[str] = None):
    """Log one line of API access information"""
    client_ip = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    if not client_ip:
        client_ip = request.client.host if request.client else "unknown"

    log_data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "method": request.method,
        "path": request.url.path,
        "query": str(request.url.query) if request.url.query else None,
        "client_ip": client_ip,
        "user_agent": request.headers.get("User-Agent", "unknown"),
        "status_code": status_code,
        "error": error
    }

    if error or status_code >= 400:
        api_access_logger.warning(f"API Access: {json.dumps(log_data)}")
    else:
        api_access_logger.info(f"API Access: {json.dumps(log_data)}")
