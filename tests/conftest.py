import os
import sys
from datetime import date
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# Ensure project root is on sys.path so `main`, `api.*`, `services.*` imports work
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

# The API tests run against the in-memory store; set before settings are imported.
os.environ["USE_DB"] = "false"
os.environ["MYSQL_ASYNC_URL"] = "disabled"


from config.settings import Settings
from main import create_app
from services.user_service import UserService
from services.user_store import InMemoryUserStore


TODAY = date(2024, 6, 15)


@pytest.fixture()
def store():
    return InMemoryUserStore()


@pytest.fixture()
def service(store):
    """Service with min age 18 and a fixed clock (2024-06-15)."""
    return UserService(store, min_age=18, today=lambda: TODAY)


@pytest.fixture()
def app():
    return create_app(Settings(MIN_AGE=18, USE_DB=False, MYSQL_ASYNC_URL="disabled", LOG_LEVEL="WARNING"))


@pytest_asyncio.fixture()
async def client(app):
    """Async test client calling the app in-memory, no real HTTP server."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture()
def user_payload():
    return {
        "email": "a@b.com",
        "firstName": "A",
        "lastName": "B",
        "birthDate": "1990-01-01",
        "address": "1 Main St",
        "phoneNumber": "+12345678901",
    }
