import os
import tempfile

# Settings are read at import time; configure them before the app is imported
_TMP_DIR = tempfile.mkdtemp(prefix="sbclc-tests-")
os.environ["APP_ENV"] = "development"
os.environ["DB_TYPE"] = "sqlite"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["JWT_ACCESS_SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_EMAIL"] = "admin@sbclc.com"
os.environ["ADMIN_PASSWORD"] = "admin-secret"

import httpx
import pytest
from sqlalchemy import select

from main import app
from app.core.db import AsyncSessionLocal, Base, engine
from app.core.security import create_access_token, hash_password
from app.models.masters.client_models import Client
from app.models.users.user_models import User
from app.scripts import add_approval_history, add_approval_matrix, add_master_data_tables, init_database

ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]
USER_PASSWORD = "secret123"
_USER_PASSWORD_HASH = hash_password(USER_PASSWORD)

STAFF = {
    "manager": ("manager@sbclc.com", "Maria Manager"),
    "supervisor": ("supervisor@sbclc.com", "Sam Supervisor"),
    "operator": ("operator@sbclc.com", "Olive Operator"),
    "viewer": ("viewer@sbclc.com", "Victor Viewer"),
}


@pytest.fixture(autouse=True)
async def database():
    await init_database.run()
    await add_master_data_tables.run()
    await add_approval_history.run()
    await add_approval_matrix.run()

    async with AsyncSessionLocal() as session:
        for role, (email, full_name) in STAFF.items():
            session.add(
                User(
                    username=email,
                    full_name=full_name,
                    password_hash=_USER_PASSWORD_HASH,
                    role=role,
                    is_active=True,
                )
            )
        await session.commit()

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db():
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def users(db):
    result = await db.execute(select(User))
    return {u.role: u for u in result.scalars().all()}


@pytest.fixture
async def sample_client_id(db):
    return await db.scalar(select(Client.id).where(Client.client_code == "CLI001"))


def _headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def admin_headers(users):
    return _headers(users["admin"])


@pytest.fixture
def manager_headers(users):
    return _headers(users["manager"])


@pytest.fixture
def supervisor_headers(users):
    return _headers(users["supervisor"])


@pytest.fixture
def operator_headers(users):
    return _headers(users["operator"])


@pytest.fixture
def viewer_headers(users):
    return _headers(users["viewer"])


@pytest.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


def quotation_payload(client_id: int, **overrides) -> dict:
    payload = {
        "client_id": client_id,
        "booking_no": "BK-1001",
        "origin": "Manila",
        "destination": "Cebu",
        "items": [
            {"description": "Ocean freight", "category": "non-receipted", "quantity": "2", "rate": "15000"},
            {"description": "Arrastre", "category": "receipted", "quantity": "1", "rate": "3500.50"},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def new_quotation(client, operator_headers, sample_client_id):
    async def _create(**overrides) -> dict:
        res = await client.post(
            "/api/quotations",
            json=quotation_payload(sample_client_id, **overrides),
            headers=operator_headers,
        )
        assert res.status_code == 200, res.text
        return res.json()["data"]

    return _create


@pytest.fixture
def pending_quotation(client, operator_headers, new_quotation):
    async def _create(**overrides) -> dict:
        q = await new_quotation(**overrides)
        res = await client.post(f"/api/quotations/{q['id']}/submit", headers=operator_headers)
        assert res.status_code == 200, res.text
        return res.json()["data"]

    return _create
