"""Shared test fixtures and utilities for all tests."""
import os
from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from dependency_injector import providers
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.app.containers import API_MODULES, Container
from src.app.main import create_app
from src.client import IcanGrowClient
from src.shared.database.database import Database, DatabaseSettings
from src.shared.database.unit_of_work import UnitOfWork
from tests.app.fake_identity_provider import FakeIdentityProvider


@pytest.fixture(scope="function")
def async_db_url(tmp_path):
    """
    Database URL for the test run.

    Defaults to a throwaway SQLite file; set TEST_DATABASE_URL to run the
    same suite against PostgreSQL (postgresql+asyncpg://...).
    """
    return os.environ.get("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest_asyncio.fixture(scope="function")
async def db(async_db_url):
    """
    Create database instance with test database.
    Function-scoped for test isolation.
    """
    db = Database(DatabaseSettings(db_url=async_db_url))
    yield db
    await db.dispose()


@pytest_asyncio.fixture(scope="function")
async def clean_database(db):
    """
    Clean the database before each test.
    Drops and recreates all tables.
    """
    await db.drop_tables()
    await db.create_tables()
    yield db


@pytest.fixture
def identity_provider():
    """In-memory identity provider shared by the container and the test."""
    return FakeIdentityProvider()


@pytest.fixture(scope="function")
def test_container(clean_database, identity_provider):
    """
    Create a test container with database and identity provider overrides.
    Function-scoped to ensure each test gets a fresh container.
    """
    container = Container()

    container.database.override(providers.Object(clean_database))
    container.identity_provider.override(providers.Object(identity_provider))

    container.wire(modules=API_MODULES)
    yield container
    container.identity_provider.reset_override()
    container.database.reset_override()
    container.unwire()


@pytest_asyncio.fixture(scope="function")
async def test_app(test_container):
    """
    Create test application with container.
    Function-scoped for test isolation.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Database tables are already created by clean_database fixture
        yield

    yield create_app(container=test_container, lifespan=lifespan)


@pytest_asyncio.fixture
async def http_client(test_app):
    """Raw httpx client talking to the app in-process; app errors become 500 responses."""
    transport = ASGITransport(app=test_app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def caller(identity_provider):
    """A registered, confirmed user."""
    return identity_provider.register("grower@farm.com", "Secret123", full_name="Gina Grower")


@pytest.fixture
def access_token(identity_provider, caller):
    return identity_provider.issue_token(caller)


@pytest.fixture
def auth_headers(access_token):
    return {"Authorization": f"Bearer {access_token}"}


@pytest_asyncio.fixture
async def api_client(http_client, access_token):
    """
    Create an authenticated API client for testing.
    test_app already depends on clean_database for test isolation.
    """
    client = IcanGrowClient(base_url="http://test", client=http_client, access_token=access_token)
    async with client:
        yield client


# =========================================================================
# Common repository and service fixtures (available to all test directories)
# =========================================================================

@pytest.fixture
def client_repository(test_container):
    """Get client repository from container."""
    return test_container.client_repository()


@pytest.fixture
def unit_of_work(clean_database, test_container):
    """UnitOfWork on the clean database using the container's entity mapper."""
    return UnitOfWork(clean_database, test_container.entity_mapper())


@pytest.fixture
def client_service(test_container):
    """Get client service from container."""
    return test_container.client_service()


@pytest.fixture
def auth_service(test_container):
    """Get auth service from container."""
    return test_container.auth_service()
