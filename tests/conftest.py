"""
Pytest configuration and fixtures for Printhaus tests.

The app runs against an in-memory SQLite database (aiosqlite); every test
gets a fresh schema.
"""
import os
import tempfile

import pytest

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-only"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["COOKIE_SECURE"] = "false"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="printhaus-uploads-")

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from printhaus.core.database import Base, get_db  # noqa: E402
from printhaus.core.security import create_session_token  # noqa: E402
from printhaus.main import app  # noqa: E402
import printhaus.models  # noqa: E402,F401
from printhaus.models.user import User, UserType  # noqa: E402
from printhaus.services.seed import seed_catalog  # noqa: E402
from printhaus.services.user_service import UserService  # noqa: E402

TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """HTTP client against the real app with get_db pointed at the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_session_token(user.id)}"}


@pytest.fixture
def make_user(session_factory):
    """Factory: await make_user("a@example.com") -> (user, headers)."""

    async def _make_user(email: str, user_type: str = UserType.CUSTOMER.value):
        async with session_factory() as session:
            user = await UserService(session).create_user(
                email=email,
                password=TEST_PASSWORD,
                first_name="Test",
                last_name="User",
                user_type=user_type,
            )
        return user, auth_headers(user)

    return _make_user


@pytest.fixture
async def customer(make_user):
    return await make_user("customer@example.com")


@pytest.fixture
async def other_customer(make_user):
    return await make_user("other@example.com")


@pytest.fixture
async def admin(make_user):
    return await make_user("admin@example.com", UserType.ADMIN.value)


@pytest.fixture
async def catalog(session_factory):
    """Seeded starter catalog; returns {product name: product}."""
    from sqlalchemy import select
    from printhaus.models.catalog import Product

    async with session_factory() as session:
        await seed_catalog(session)
        result = await session.execute(select(Product))
        return {p.name: p for p in result.scalars().all()}


@pytest.fixture
def png_bytes():
    import io
    from PIL import Image

    buf = io.BytesIO()
    Image.new("RGB", (32, 32), color=(200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()

