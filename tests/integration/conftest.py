import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import conpanion.domain.entities  # noqa: F401
from conpanion.depends import get_unit_of_work
from conpanion.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from conpanion.app.use_cases.notifications import SeedNotificationTemplatesUseCase

PASSWORD = "SecurePass123!"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        await SeedNotificationTemplatesUseCase(SqlAlchemyUnitOfWork(session)).execute()
        yield session


@pytest_asyncio.fixture
async def client(db_session):
    from httpx import ASGITransport
    from conpanion.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig, lifespan=False)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
def signup_user(client: AsyncClient):
    """Sign up, confirm and log in; returns the user id, email and auth headers"""

    async def _signup(email: str, first_name: str = "") -> dict:
        signup = await client.post(
            "/api/auth/signup",
            json={"email": email, "password": PASSWORD, "first_name": first_name},
        )
        assert signup.status_code == 201, signup.text
        body = signup.json()

        confirm = await client.post(
            "/api/auth/confirm", json={"token": body["confirmation_token"]}
        )
        assert confirm.status_code == 200, confirm.text

        login = await client.post(
            "/api/auth/login", json={"email": email, "password": PASSWORD}
        )
        assert login.status_code == 200, login.text
        token = login.json()["access_token"]
        return {
            "id": body["user"]["id"],
            "email": email,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _signup
