"""Shared pytest fixtures for test suite"""
import os
import sys
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest
from cryptography.fernet import Fernet

# Settings are read at import time, configure the environment first
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-session-signing")
os.environ.setdefault("ENCRYPTION_KEY", Fernet.generate_key().decode())
os.environ.setdefault("ENVIRONMENT", "test")

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.session import get_db
from app.models import Base, Speaker, Training, Whitepaper
from app.models.user import User
from app.schemas.auth import SessionPayload
from app.services.auth_service import create_admin_user
from app.services.config_service import save_email_config, save_stripe_config
from app.tasks.email_dispatch import wait_for_pending


# SQLite in-memory database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"

# Create test engine with StaticPool for in-memory database
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session factory
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "AdminPassword123!"

WHITEPAPER_TEMPLATE = {
    "subject": "Your copy of {{whitepaperTitle}}",
    "html_body": "<p>Hi {{userName}},</p><p><a href=\"{{downloadLink}}\">Download</a></p><p>{{companyName}} {{year}}</p>",
    "text_body": "Hi {{userName}}, download {{whitepaperTitle}} at {{downloadLink}}",
    "attach_pdf": False,
}


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh SQLite in-memory database session for each test"""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def background_sessions():
    """Point the email dispatcher's worker sessions at the test database"""
    with patch("app.tasks.email_dispatch.SessionLocal", TestSessionLocal):
        yield
        wait_for_pending(timeout=10)


@pytest.fixture(scope="function")
def client(db_session: Session, background_sessions) -> Generator[TestClient, None, None]:
    """FastAPI test client with test database"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close session here, handled by fixture

    app.dependency_overrides[get_db] = override_get_db

    try:
        # Disable OpenTelemetry export in tests
        with patch("app.main.initialize_otel", return_value=False):
            with TestClient(app) as test_client:
                yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def admin_user(db_session: Session) -> User:
    return create_admin_user(ADMIN_EMAIL, ADMIN_PASSWORD, "Admin", db_session)


@pytest.fixture(scope="function")
def admin_session(admin_user: User) -> SessionPayload:
    """Session payload as the route dependencies would see it"""
    from datetime import datetime, timedelta, timezone
    now = datetime.now(timezone.utc)
    return SessionPayload(
        user_id=str(admin_user.id),
        email=admin_user.email,
        role="admin",
        issued_at=now,
        expires_at=now + timedelta(hours=1),
    )


@pytest.fixture(scope="function")
def authenticated_client(client: TestClient, admin_user: User) -> TestClient:
    """Client holding a valid session cookie"""
    response = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    assert "session" in response.cookies
    return client


@pytest.fixture(scope="function")
def email_config(db_session: Session) -> dict:
    """Saved Resend configuration with a whitepaper template"""
    return save_email_config({
        "provider": "resend",
        "api_key": "re_test_key",
        "from_email": "learning@example.com",
        "from_name": "Example Learning",
        "reply_to": "support@example.com",
        "enable_auto_send": True,
        "templates": {"whitepaper": WHITEPAPER_TEMPLATE},
    }, db_session)


@pytest.fixture(scope="function")
def stripe_config(db_session: Session) -> dict:
    return save_stripe_config({
        "enabled": True,
        "publishable_key": "pk_test_123",
        "secret_key": "sk_test_123",
        "currency": "usd",
    }, db_session)


@pytest.fixture(scope="function")
def whitepaper(db_session: Session) -> Whitepaper:
    wp = Whitepaper(
        title="Risk Management 101",
        slug="risk-management-101",
        description="Managing risk in regulated industries",
        pdf_url="https://cdn.example.com/risk-management-101.pdf",
        status="published",
        views=0,
        downloads=0,
    )
    db_session.add(wp)
    db_session.commit()
    db_session.refresh(wp)
    return wp


@pytest.fixture(scope="function")
def speaker(db_session: Session) -> Speaker:
    sp = Speaker(name="Jane Auditor", expertise="Quality audits", years=15, industries=["pharma"])
    db_session.add(sp)
    db_session.commit()
    db_session.refresh(sp)
    return sp


@pytest.fixture(scope="function")
def training(db_session: Session, speaker: Speaker) -> Training:
    tr = Training(
        title="CAPA Fundamentals",
        slug="capa-fundamentals",
        type="live",
        level="basic",
        industry="Life Sciences",
        description="Corrective and preventive action basics",
        content="",
        duration="60 Mins",
        regular_price=199.0,
        discount_price=149.0,
        speaker_id=speaker.id,
        speaker_name=speaker.name,
        status="published",
    )
    db_session.add(tr)
    db_session.commit()
    db_session.refresh(tr)
    return tr
