import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from credentialing.adapter.database import create_schema, drop_schema
from credentialing.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from credentialing.api.app import create_app
from credentialing.app.services.rbac_seed import seed_rbac
from credentialing.domain.entities import Organization
from tests.fixtures.helpers import API, IntegrationConfig, auth_headers, create_staff_identity
from tests.fixtures.json_loader import TestDataLoader


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def app():
    app = create_app(IntegrationConfig)
    engine = app.state.engine
    await drop_schema(engine)
    await create_schema(engine)
    async with app.state.session_factory() as session:
        await seed_rbac(SqlAlchemyUnitOfWork(session))
    yield app
    await drop_schema(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(app):
    return app.state.session_factory


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def admin_headers(session_factory):
    await create_staff_identity(session_factory, "admin-sub", "admin@example.com", "admin")
    return auth_headers("admin-sub", "admin@example.com")


@pytest_asyncio.fixture
async def support_headers(session_factory):
    # support_staff can read therapists but cannot approve them
    await create_staff_identity(
        session_factory, "support-sub", "support@example.com", "support_staff"
    )
    return auth_headers("support-sub", "support@example.com")


@pytest_asyncio.fixture
async def organization(session_factory):
    async with session_factory() as session:
        uow = SqlAlchemyUnitOfWork(session)
        async with uow:
            organization = await uow.organizations.create(Organization(name="Harbor Therapy Group"))
            await uow.commit()
            return organization


@pytest_asyncio.fixture
async def registered(client, test_data):
    """Registers the default applicant and returns the response data"""
    response = await client.post(f"{API}/register", json=test_data.application())
    assert response.status_code == 201, response.text
    return response.json()["data"]
