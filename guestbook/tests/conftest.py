import sys
import os
from pathlib import Path

# Ensure project root is on sys.path so `import guestbook` works
ROOT = str(Path(__file__).resolve().parents[2])
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Settings are read at import time; pin a test environment first
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["NTFY_ENABLED"] = "false"

import pytest
import pytest_asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool, StaticPool
from httpx import AsyncClient, ASGITransport

from guestbook.core.database import Base, get_db
from guestbook.core.deps import get_domain_provider
from guestbook.core.security import CredentialVerifier, get_password_hash
from guestbook.core.config import settings
from guestbook.app.main import app
from guestbook.models import User


SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)

TestingSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False
)

# 1. DB fixture
@pytest_asyncio.fixture(scope="function")
async def db_session():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestingSessionLocal() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

@pytest_asyncio.fixture(scope="function")
async def session_factory(tmp_path):
    """Independent sessions, each on its own connection to one file database."""
    file_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'guestbook.db'}",
        poolclass=NullPool,
    )
    async with file_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=file_engine, class_=AsyncSession, expire_on_commit=False)

    await file_engine.dispose()

# 2. Credentials
@pytest.fixture(scope="function")
def verifier():
    return CredentialVerifier(settings.SECRET_KEY, settings.ALGORITHM, settings.TOKEN_ISSUER)

@pytest.fixture(scope="function")
def make_token(verifier):
    def _make(username: str, **kwargs) -> str:
        return verifier.create_access_token(subject=username, **kwargs)
    return _make

# 3. Owners
async def _create_user(db: AsyncSession, username: str, password: str, require_approval: bool = False) -> User:
    user = User(
        username=username,
        hashed_password=get_password_hash(password),
        require_approval=require_approval,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user

@pytest_asyncio.fixture(scope="function")
async def alice(db_session: AsyncSession):
    """Owner who moderates visitor entries."""
    return await _create_user(db_session, "alice", "alicepass", require_approval=True)

@pytest_asyncio.fixture(scope="function")
async def carol(db_session: AsyncSession):
    """Owner without moderation."""
    return await _create_user(db_session, "carol", "carolpass", require_approval=False)

@pytest.fixture(scope="function")
def alice_headers(make_token, alice):
    return {"Authorization": f"Bearer {make_token(alice.username)}"}

@pytest.fixture(scope="function")
def carol_headers(make_token, carol):
    return {"Authorization": f"Bearer {make_token(carol.username)}"}

# 4. Deterministic clock, one second per call
@pytest.fixture(scope="function")
def ticking_clock():
    state = {"now": datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)}

    def _tick():
        state["now"] = state["now"] + timedelta(seconds=1)
        return state["now"]
    return _tick

# 5. Hosting provider mock
@pytest.fixture(scope="function")
def mock_domain_provider():
    provider = AsyncMock()
    provider.add_domain.return_value = None
    provider.remove_domain.return_value = True
    return provider

# 6. Client fixture (AsyncClient)
@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession, mock_domain_provider):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_domain_provider] = lambda: mock_domain_provider

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
