import os
import sys
import tempfile
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from dotenv import load_dotenv

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

# Optional overrides (e.g. a Postgres DATABASE_URL) for local test runs
env_test_path = os.path.join(os.path.dirname(__file__), ".env.test")
if os.path.exists(env_test_path):
    load_dotenv(env_test_path, override=True)

# Defaults must be in place before settings are first read
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="lms-uploads-"))

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from libs.auth.dependencies import create_access_token
from libs.common.config import get_settings
from libs.common.emails.accounts import NotificationResult, get_account_notifier
from libs.common.storage import LocalFileStorage, get_file_storage
from libs.db.base import Base
from libs.db.session import get_async_db
from services.lms_service import models as _lms_models  # noqa: F401

get_settings.cache_clear()
settings = get_settings()


class RecordingNotifier:
    """Stands in for AccountNotifier; records every call."""

    def __init__(self, success: bool = True):
        self.success = success
        self.sent: list[tuple[str, str, str]] = []

    async def notify_account_created(self, user, password):
        self.sent.append(("account_created", user.email, password))
        return NotificationResult(success=self.success, error=None if self.success else "smtp down")

    async def notify_password_reset(self, user, new_password):
        self.sent.append(("password_reset", user.email, new_password))
        return NotificationResult(success=self.success, error=None if self.success else "smtp down")


@pytest_asyncio.fixture
async def test_engine():
    """
    Fresh schema per test. In-memory SQLite by default; any DATABASE_URL works.
    """
    kwargs = {}
    if settings.DATABASE_URL.startswith("sqlite"):
        # One shared connection so every session sees the same in-memory database
        kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}

    engine = create_async_engine(settings.DATABASE_URL, **kwargs)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
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
def storage(tmp_path) -> LocalFileStorage:
    return LocalFileStorage(str(tmp_path), protected_paths={settings.DEFAULT_AVATAR})


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest_asyncio.fixture
async def client(db_session, storage, notifier) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient with DB, storage and notifier dependencies overridden.
    """
    from services.lms_service.app.main import app

    app.dependency_overrides[get_async_db] = lambda: db_session
    app.dependency_overrides[get_file_storage] = lambda: storage
    app.dependency_overrides[get_account_notifier] = lambda: notifier

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Callable[[object], dict]:
    """
    Return a function building real bearer headers for a persisted user.
    """

    def _headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _headers
