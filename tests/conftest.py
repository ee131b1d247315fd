import asyncio
import os

import pytest

# Settings are read at import time, so the environment must be ready first
os.environ["API_KEY"] = "test-api-key"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"

from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from blog_api.main import app
from blog_api.db.database import Base, get_db
from blog_api.repositories.category_repo import CategoryRepository
from blog_api.repositories.user_repo import UserRepository

API_KEY = "test-api-key"
PASSWORD = "secret123"


async def _create_tables(engine):
    import blog_api.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def test_engine(tmp_path):
    # NullPool: the app and the fixtures run on different event loops
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'blog_test.db'}",
        poolclass=NullPool,
    )

    # SQLite leaves foreign keys (and ON DELETE CASCADE) off per connection
    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    asyncio.run(_create_tables(engine))
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(bind=test_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def build_headers(token=None):
    headers = {"x-api-key": API_KEY}
    if token:
        headers["Authorization"] = token
    return headers


@pytest.fixture
def auth_headers():
    """Headers with the API key and, when given, the raw token."""
    return build_headers


@pytest.fixture
def create_category(session_factory):
    """Categories have no endpoint; insert them straight through the repository."""
    def _create(name="Tech"):
        async def _insert():
            async with session_factory() as session:
                category = await CategoryRepository(session).create(name=name)
                return category.id

        return asyncio.run(_insert())

    return _create


@pytest.fixture
def update_user(session_factory):
    """Flip account flags that no endpoint exposes (is_deleted, is_active, ...)."""
    def _update(username, **fields):
        async def _apply():
            async with session_factory() as session:
                repo = UserRepository(session)
                user = await repo.get_by_username(username)
                await repo.update(user, **fields)

        asyncio.run(_apply())

    return _update


@pytest.fixture
def register_user(client):
    def _register(username="alice", email=None, password=PASSWORD, **extra):
        payload = {
            "fullname": username.title(),
            "username": username,
            "email": email or f"{username}@mail.com",
            "password": password,
        }
        payload.update(extra)
        return client.post("/v1/user/register", json=payload, headers=build_headers())

    return _register


@pytest.fixture
def login_user(client):
    def _login(login, password=PASSWORD):
        response = client.post(
            "/v1/user/login",
            json={"login_email_phone": login, "password": password},
            headers=build_headers(),
        )
        assert response.status_code == 200, response.json()
        return response.json()["data"]["user"]["token"]

    return _login


@pytest.fixture
def user_token(register_user, login_user):
    """Register a fresh user and return a token for them."""
    def _make(username="alice"):
        response = register_user(username)
        assert response.status_code == 201, response.json()
        return login_user(f"{username}@mail.com")

    return _make


@pytest.fixture
def create_post(client):
    def _create(token, category_id, title="Hello", content="World", **extra):
        payload = {"title": title, "content": content, "category_id": category_id}
        payload.update(extra)
        response = client.post(
            "/v1/posts/create-posts", json=payload, headers=build_headers(token)
        )
        assert response.status_code == 201, response.json()
        return response.json()["data"]

    return _create
