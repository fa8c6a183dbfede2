import os

# must be set before app settings are imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["OPENAI_API_KEY"] = ""

import json
from types import SimpleNamespace
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  registers tables
from app.ai.client import get_ai_client
from app.core.database import get_async_session
from app.core.write_errors import write_error_channel
from app.main import app
from app.models.base import Base
from app.models.shared.enums import Role
from app.schemas.auth.login import RegisterRequest
from app.services.auth.auth_service import AuthService
from app.services.auth.permission_service import PermissionService, default_entry
from app.services.data_import.staging import staging_area

TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_PASSWORD = "StrongPass123!"


class FakeCompletions:
    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeAIClient:
    """Stands in for AsyncOpenAI: records calls, returns a canned completion"""

    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None):
        self.completions = FakeCompletions(content, error)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
async def engine():
    """Fresh in-memory database per test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture(autouse=True)
def clear_process_state():
    staging_area._staged.clear()
    write_error_channel.clear()
    yield
    staging_area._staged.clear()
    write_error_channel.clear()


@pytest.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Create test client"""
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def login_as(session_maker):
    """Register a login with the given role and return its auth headers"""
    async def _login_as(
        email: str,
        role: Role = Role.EMPLOYEE,
        employee_id: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> dict:
        async with session_maker() as session:
            auth_service = AuthService(session)
            account = await auth_service.register(RegisterRequest(
                email=email,
                password=TEST_PASSWORD,
                employee_id=employee_id,
                display_name=display_name,
            ))
            if role != Role.EMPLOYEE:
                await PermissionService(session).save_permissions({account.id: default_entry(role)})
            tokens = await auth_service.create_token(account)
        return {"Authorization": f"Bearer {tokens['access_token']}"}

    return _login_as


@pytest.fixture
async def admin_headers(login_as) -> dict:
    """Get authentication headers for admin user"""
    return await login_as("admin@example.com", Role.ADMIN, display_name="Admin")


@pytest.fixture
def fake_ai():
    """Install a fake AI client for the request dependency"""
    def _install(content: Optional[str] = None, error: Optional[Exception] = None) -> FakeAIClient:
        fake = FakeAIClient(content, error)
        app.dependency_overrides[get_ai_client] = lambda: fake
        return fake

    return _install


def json_upload(payload, filename: str = "data.json") -> dict:
    return {"file": (filename, json.dumps(payload, ensure_ascii=False).encode("utf-8"), "application/json")}
