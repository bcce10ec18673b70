from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.db.engine import Database
from app.db.schema import metadata
from app.main import create_app

DATA_DIR = Path(__file__).resolve().parents[1] / "data"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url_override="sqlite://",
        static_dir=str(tmp_path / "public"),
        seed_data_dir=str(DATA_DIR),
    )


@pytest.fixture
def database(settings):
    db = Database.from_settings(settings)
    metadata.create_all(db.engine)
    yield db
    db.dispose()


@pytest.fixture
def app(settings, database):
    return create_app(settings, database=database)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_customer(client):
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        payload = {
            "name": f"Customer {counter['n']}",
            "identification_number": f"ID-{counter['n']:04d}",
        }
        payload.update(fields)
        response = client.post("/api/customers", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _make
