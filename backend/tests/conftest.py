"""
Pytest configuration and fixtures for backend tests.
"""
import os

# Must be set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret"

import itertools  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from db import database  # noqa: E402
from main import app  # noqa: E402

_email_counter = itertools.count(1)


@pytest.fixture(scope="function")
def client(tmp_path, monkeypatch):
    """
    Test client backed by a fresh SQLite file per test.
    Tables are created by the application lifespan.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    monkeypatch.setattr(database, "engine", engine)
    monkeypatch.setattr(database, "async_session_maker", async_sessionmaker(engine, expire_on_commit=False))

    with TestClient(app) as test_client:
        yield test_client


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register_org(client, organization_name: str = "Org", password: str = "pw") -> dict:
    """Register a new organization; returns {token, user, headers}"""
    email = f"admin{next(_email_counter)}@{organization_name.lower().replace(' ', '-')}.com"
    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "name": "Admin", "organizationName": organization_name},
    )
    assert response.status_code == 201, response.json()
    data = response.json()
    data["headers"] = bearer(data["token"])
    data["password"] = password
    return data


@pytest.fixture
def org_a(client):
    return register_org(client, "Org A")


@pytest.fixture
def org_b(client):
    return register_org(client, "Org B")


@pytest.fixture
def manager_a(client, org_a):
    """A MANAGER in Org A, created by Org A's admin"""
    email = f"manager{next(_email_counter)}@org-a.com"
    response = client.post(
        "/api/auth/create-user",
        json={"email": email, "password": "pw", "name": "Manager"},
        headers=org_a["headers"],
    )
    assert response.status_code == 201, response.json()
    login = client.post("/api/auth/login", json={"email": email, "password": "pw"})
    assert login.status_code == 200, login.json()
    data = login.json()
    data["headers"] = bearer(data["token"])
    return data


def create_location(client, headers, name="Main"):
    response = client.post("/api/locations", json={"name": name}, headers=headers)
    assert response.status_code == 201, response.json()
    return response.json()


def create_ingredient(client, headers, name="Flour", price=2.5, unit="kg"):
    response = client.post("/api/ingredients", json={"name": name, "price": price, "unit": unit}, headers=headers)
    assert response.status_code == 201, response.json()
    return response.json()


def create_menu_item(client, headers, name="Bread", description=None):
    response = client.post("/api/menu-items", json={"name": name, "description": description}, headers=headers)
    assert response.status_code == 201, response.json()
    return response.json()


def create_mapping(client, headers, menu_item, location, ingredient, quantity=1):
    response = client.post(
        "/api/mix-mappings",
        json={
            "menuItemId": menu_item["id"],
            "locationId": location["id"],
            "ingredientId": ingredient["id"],
            "quantity": quantity,
        },
        headers=headers,
    )
    assert response.status_code == 201, response.json()
    return response.json()
