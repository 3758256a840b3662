import os
import sys
from pathlib import Path
from urllib.parse import urlparse, parse_qs

# Config de pruebas: base de datos en memoria y límites holgados
os.environ["DB_URL"] = "sqlite://"
os.environ["SERVICE_ENV"] = "dev"
os.environ["ADMIN_EMAIL"] = "chef@example.com"
os.environ["MAGIC_LINK_ECHO"] = "true"
os.environ["RATE_LIMIT_RPM"] = "100000"
os.environ["RATE_LIMIT_BURST"] = "100000"
os.environ["TAG_MATCH_POLICY"] = "all"

import pytest

# Ensure project root on path for imports when executing from tests dir
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session

import recipebox.main as main
from recipebox import models_db  # noqa: F401
from recipebox.db import engine

ADMIN_EMAIL = "chef@example.com"


@pytest.fixture(autouse=True)
def fresh_db():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield


@pytest.fixture
def session():
    with Session(engine, expire_on_commit=False) as s:
        yield s


@pytest.fixture
def client():
    with TestClient(main.app) as c:
        yield c


def login(client, email):
    """Enlace mágico + verificación. Devuelve (headers, user_id)."""
    r = client.post("/auth/magic-link", json={"email": email})
    assert r.status_code == 200, r.text
    link = r.json()["magic_link"]
    token = parse_qs(urlparse(link).query)["token"][0]
    r = client.post("/auth/verify", json={"token": token})
    assert r.status_code == 200, r.text
    data = r.json()
    return {"Authorization": f"Bearer {data['access_token']}"}, data["user_id"]


@pytest.fixture
def owner(client):
    return login(client, "owner@example.com")


@pytest.fixture
def other(client):
    return login(client, "other@example.com")


@pytest.fixture
def admin(client):
    return login(client, ADMIN_EMAIL)


def recipe_payload(**overrides):
    data = {
        "title": "Poulet rôti",
        "ingredients": [
            {"quantity": "2", "unit": "pièce", "ingredient": "Poulet"},
            {"quantity": "", "unit": "(vide)", "ingredient": "sel"},
            {"quantity": "3", "unit": "g", "ingredient": "   "},
        ],
        "steps": ["Préchauffer le four", "  ", "Enfourner 45 min"],
        "tags": ["Plat"],
        "status": "published",
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_recipe(client):
    def _make(headers, **overrides):
        r = client.post("/recipes", json=recipe_payload(**overrides), headers=headers)
        assert r.status_code == 201, r.text
        return r.json()
    return _make
