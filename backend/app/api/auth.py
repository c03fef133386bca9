"""Auth API routes"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from app.core.errors import ServiceError
from app.core.security import create_session, delete_session, get_session
from app.db.session import get_db
from app.schemas.auth import LoginRequest, SetupRequest
from app.services.auth_service import authenticate_user, create_admin_user

router = APIRouter(prefix="/api/auth", tags=["auth"])
setup_router = APIRouter(prefix="/api", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/login")
def login(request_data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Check credentials and start a session"""
    if not request_data.email or not request_data.password:
        raise HTTPException(400, "Email and password are required")

    user = authenticate_user(request_data.email, request_data.password, db)
    if not user:
        raise HTTPException(401, "Invalid credentials")

    create_session(response, str(user.id), user.email, user.role)
    return {"success": True}


@router.post("/logout")
def logout(response: Response):
    """Clear the session cookie"""
    delete_session(response)
    return {"success": True}


@router.get("/session")
def session_info(request: Request):
    """Who is signed in"""
    session = get_session(request)
    if session is None:
        raise HTTPException(401, "Not authenticated")
    return {"user": {"email": session.email}}


@setup_router.post("/setup")
def setup(request_data: SetupRequest, db: Session = Depends(get_db)):
    """Create the first admin account"""
    try:
        user = create_admin_user(request_data.email, request_data.password, request_data.name, db)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
    return {"success": True, "user": {"id": user.id, "email": user.email, "role": user.role}}
