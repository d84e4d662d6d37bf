import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'trackify.db'}",
        bcrypt_rounds=4,
        _env_file=None,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def other_client(app):
    return TestClient(app)


def register(client, phone="5550001", password="abc123", name=""):
    return client.post(
        "/api/register", json={"name": name, "phone": phone, "password": password}
    )


@pytest.fixture
def user_client(client):
    assert register(client).status_code == 200
    return client


@pytest.fixture
def second_user_client(other_client):
    assert register(other_client, phone="5550002").status_code == 200
    return other_client
