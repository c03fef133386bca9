"""Authentication service - credential checks and first-admin setup"""
import bcrypt
import logging
from typing import Optional
from sqlalchemy.orm import Session

from app.core.errors import ConflictError
from app.core.metrics import login_attempts_counter
from app.models.user import User

logger = logging.getLogger(__name__)
security_logger = logging.getLogger("security")


def hash_password(password: str) -> str:
    """Hash a password using bcrypt"""
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash"""
    if not password_hash or not password:
        return False
    return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))


def get_user_by_email(email: str, db: Session) -> Optional[User]:
    """Get user by email"""
    return db.query(User).filter(User.email == email).first()


def authenticate_user(email: str, password: str, db: Session) -> Optional[User]:
    """Authenticate a user by email and password

    Unknown email and wrong password are indistinguishable to the caller.
    """
    user = get_user_by_email(email, db)
    if not user or not verify_password(password, user.password_hash):
        login_attempts_counter.labels(status="failure").inc()
        security_logger.warning(f"Failed login attempt for {email}")
        return None

    login_attempts_counter.labels(status="success").inc()
    security_logger.info(f"User {user.id} logged in")
    return user


def create_admin_user(email: str, password: str, name: str, db: Session) -> User:
    """One-time setup: create the first admin account

    Raises:
        ConflictError: If any user already exists
    """
    if db.query(User.id).first() is not None:
        security_logger.warning(f"Setup attempt for {email} after setup was completed")
        raise ConflictError("Setup already completed")

    user = User(email=email, password_hash=hash_password(password), name=name, role="admin")
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created admin user {user.id} ({email})")
    return user
