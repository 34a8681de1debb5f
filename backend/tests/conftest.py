"""
Shared test fixtures for the Wall Masters backend tests.
"""
import os
import sys

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment before importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef")
os.environ.setdefault("JWT_REFRESH_SECRET", "fedcba9876543210fedcba9876543210fedcba9876543210fedcba9876543210")

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from wallmasters import models  # noqa: E402,F401
from wallmasters.api import addresses, auth, contact, deps, orders, saved_items  # noqa: E402
from wallmasters.database import Base  # noqa: E402
from wallmasters.errors import register_error_handlers  # noqa: E402
from wallmasters.services import mailer  # noqa: E402

PASSWORD = "TestPass123!"


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def app(session_factory):
    app = FastAPI()
    register_error_handlers(app)
    for module in (auth, addresses, orders, saved_items, contact):
        app.include_router(module.router)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[deps.get_db] = override_get_db
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture outgoing mail instead of talking to SMTP."""
    outbox = []

    def fake_send_email(to_email, subject, text_content, html_content=None, reply_to=None):
        outbox.append({"to": to_email, "subject": subject, "text": text_content, "html": html_content})
        return True

    monkeypatch.setattr(mailer, "send_email", fake_send_email)
    return outbox


def register_user(client: TestClient, email: str = "jo@example.com", name: str = "Jo", password: str = PASSWORD):
    response = client.post(
        "/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
