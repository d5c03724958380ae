# tests/conftest.py - Shared test fixtures
import os
import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# Use SQLite for tests
TEST_DB_URL = "sqlite+aiosqlite:///./test.db"
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-unit-tests-only-min-32-chars"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"

from models import Base, User, Role
from auth import AuthService
from database import get_db_session, enable_sqlite_foreign_keys
from main import app
from services.notifications import NotificationLog
from services.performance import PerformanceAggregator
from services.tasks import TaskLifecycleManager
from services.teams import TeamRegistry
from services.users import UserDirectory

TEST_PASSWORD = "TestPassword123!"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    engine = create_async_engine(TEST_DB_URL, echo=False)
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine):
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(db_engine):
    """HTTP test client with overridden DB dependency"""
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def make_user(db_session, role: Role, email: str, full_name: str) -> User:
    user = User(
        id=str(uuid.uuid4()),
        email=email,
        full_name=full_name,
        password_hash=AuthService.hash_password(TEST_PASSWORD),
        role=role,
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def manager(db_session):
    return await make_user(db_session, Role.MANAGER, "manager@taskdesk.dev", "Maria Manager")


@pytest_asyncio.fixture
async def employee(db_session):
    return await make_user(db_session, Role.EMPLOYEE, "employee@taskdesk.dev", "Evan Employee")


@pytest_asyncio.fixture
async def other_employee(db_session):
    return await make_user(db_session, Role.EMPLOYEE, "employee2@taskdesk.dev", "Erin Employee")


@pytest_asyncio.fixture
async def team_lead(db_session):
    return await make_user(db_session, Role.TEAM_LEAD, "lead@taskdesk.dev", "Lena Lead")


@pytest_asyncio.fixture
async def admin_user(db_session):
    return await make_user(db_session, Role.ADMIN, "admin@taskdesk.dev", "Adam Admin")


# --- Services over the test session ---

@pytest.fixture
def users(db_session):
    return UserDirectory(db_session, AuthService.hash_password)


@pytest.fixture
def notifications(db_session):
    return NotificationLog(db_session)


@pytest.fixture
def tasks(db_session, users, notifications):
    return TaskLifecycleManager(db_session, users, notifications)


@pytest.fixture
def teams(db_session, users):
    return TeamRegistry(db_session, users)


@pytest.fixture
def performance(db_session):
    return PerformanceAggregator(db_session)


def get_auth_headers(user: User) -> dict:
    """Generate auth headers for a user"""
    token_data = {
        "sub": user.id,
        "email": user.email,
        "role": user.role.value if isinstance(user.role, Role) else user.role,
    }
    token = AuthService.create_access_token(token_data)
    return {"Authorization": f"Bearer {token}"}
