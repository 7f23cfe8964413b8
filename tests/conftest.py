import os
import tempfile

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ------------------------------------------------------------------
# FORCE TESTING MODE
# Must run BEFORE importing app.main so settings, the DB engine and
# the uploads mount pick these values up.
# ------------------------------------------------------------------
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_proccms.db"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="proccms-uploads-")
os.environ["PROJECT_OFFICE_EMAIL"] = "office@campus.edu"
os.environ["SMTP_HOST"] = ""

from app.main import app  # noqa: E402
from app.core.database import AsyncSessionLocal, drop_db, init_db  # noqa: E402
from app.services.auth_service import create_admin, create_user  # noqa: E402
from app.services.staff_service import create_staff  # noqa: E402


@pytest_asyncio.fixture(autouse=True)
async def fresh_db():
    # ASGITransport does not fire startup events, so tables are built here
    await drop_db()
    await init_db()
    yield


@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest_asyncio.fixture
async def db_session():
    async with AsyncSessionLocal() as session:
        yield session


# ------------------------------------------------------------------
# ACCOUNT HELPERS
# ------------------------------------------------------------------
async def login(client, username, password):
    res = await client.post("/api/auth/login", json={"username": username, "password": password})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


@pytest_asyncio.fixture
async def admin_headers(client):
    async with AsyncSessionLocal() as session:
        await create_admin(
            session,
            username="admin",
            password="adminpass",
            name="Office Admin",
            department="OFFICE",
            email="admin@campus.edu",
        )
    return await login(client, "admin", "adminpass")


@pytest_asyncio.fixture
async def user_headers(client):
    async with AsyncSessionLocal() as session:
        await create_user(
            session,
            username="alice",
            password="alicepass",
            name="Alice Rao",
            department="CSE",
            email="alice@campus.edu",
            phone="9000000001",
        )
    return await login(client, "alice", "alicepass")


@pytest_asyncio.fixture
async def other_user_headers(client):
    async with AsyncSessionLocal() as session:
        await create_user(
            session,
            username="bob",
            password="bobpass",
            name="Bob Menon",
            department="ECE",
            email="bob@campus.edu",
            phone="9000000002",
        )
    return await login(client, "bob", "bobpass")


@pytest_asyncio.fixture
async def staff_headers(client):
    async with AsyncSessionLocal() as session:
        await create_staff(
            session,
            name="Ravi Kumar",
            username="ravi",
            password="ravipass",
            department="Maintenance",
            email="ravi@campus.edu",
            phone="9000000003",
        )
    return await login(client, "ravi", "ravipass")
