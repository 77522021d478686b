import os
from typing import AsyncGenerator

# Settings are read at import time, so the test environment is pinned first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["SMTP_USERNAME"] = ""
os.environ["WHATSAPP_API_URL"] = ""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from libs.common.config import get_settings

# Clear cached settings to reload with the test env vars
get_settings.cache_clear()

from libs.auth.dependencies import create_access_token
from libs.auth.models import UserRole
from libs.db.base import Base
from libs.db.registry import load_all_models
from libs.db.session import get_async_db
from services.communications_service.notifications import (
    NotificationService,
    get_notification_service,
)
from services.gateway_service.app.main import app
from tests.factories import UserFactory

load_all_models()


class RecordingNotifier(NotificationService):
    """Captures outbound notifications instead of sending them."""

    def __init__(self):
        self.sent = []

    async def send_free_session_confirmation(
        self, email, phone, parent_name, kid_name, session_id=None
    ):
        self.sent.append(
            {
                "kind": "free_session",
                "email": email,
                "phone": phone,
                "parent_name": parent_name,
                "kid_name": kid_name,
                "session_id": session_id,
            }
        )

    async def send_session_change(self, email, phone, session_id, changes):
        self.sent.append(
            {
                "kind": "session_change",
                "email": email,
                "phone": phone,
                "session_id": session_id,
                "changes": changes,
            }
        )

    async def send_invoice_update(self, invoice_id, parent_email, parent_phone, status):
        self.sent.append(
            {
                "kind": "invoice_update",
                "invoice_id": invoice_id,
                "email": parent_email,
                "phone": parent_phone,
                "status": status,
            }
        )


@pytest_asyncio.fixture
async def test_engine():
    """
    Fresh in-memory SQLite database per test. StaticPool keeps every
    connection on the same underlying database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest_asyncio.fixture
async def client(db_session, notifier) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient with the app and overridden DB and notifier dependencies.
    """
    app.dependency_overrides[get_async_db] = lambda: db_session
    app.dependency_overrides[get_notification_service] = lambda: notifier

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


def _headers(user) -> dict:
    token = create_access_token(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def admin_user(db_session):
    user = UserFactory.create(role=UserRole.ADMIN, email="admin@test.com")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def parent_user(db_session):
    user = UserFactory.parent(email="parent@test.com")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def coach_user(db_session):
    user = UserFactory.coach(email="coach@test.com")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return _headers(admin_user)


@pytest.fixture
def parent_headers(parent_user) -> dict:
    return _headers(parent_user)


@pytest.fixture
def coach_headers(coach_user) -> dict:
    return _headers(coach_user)
