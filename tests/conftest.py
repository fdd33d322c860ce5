import asyncio
import os
import tempfile

# Point the app at a throwaway SQLite file before anything imports settings
_TEST_DB_DIR = tempfile.mkdtemp(prefix="medrecords-test-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_DIR}/test.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["API_KEYS"] = "[]"

import pytest
from fastapi.testclient import TestClient

import medrecords.models  # noqa: F401 — register ORM models with Base.metadata
from medrecords.db.database import Base, engine
from medrecords.main import create_app

API_KEY = "test-api-key"


async def _reset_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()


@pytest.fixture
def reset_database():
    asyncio.run(_reset_schema())
    yield


@pytest.fixture
def client(reset_database):
    with TestClient(create_app()) as c:
        yield c


@pytest.fixture
def api_headers():
    return {"X-API-Key": API_KEY}


@pytest.fixture
def patient_payload():
    return {
        "firstName": "Alice",
        "lastName": "Johnson",
        "dateOfBirth": "1992-03-10",
        "gender": "female",
    }


@pytest.fixture
def patient_id(client, api_headers, patient_payload):
    response = client.post("/api/patients", json=patient_payload, headers=api_headers)
    assert response.status_code == 201
    return response.json()["data"]["id"]
