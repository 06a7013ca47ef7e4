import pytest
from fastapi.testclient import TestClient

from database import Database
from main import app


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def client():
    # Entering the client runs the lifespan, which opens a fresh in-memory store
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def store(client) -> Database:
    return client.app.state.db


@pytest.fixture()
async def db():
    database = Database(":memory:")
    await database.connect()
    yield database
    await database.close()


@pytest.fixture()
def order_payload():
    def build(**overrides):
        payload = {
            "name": "Jane Doe",
            "email": "jane.doe@example.com",
            "phone": "+1-555-0123",
            "address": "123 Elm Street, Springfield",
            "product_id": 1,
            "quantity": 1,
        }
        payload.update(overrides)
        return payload

    return build
