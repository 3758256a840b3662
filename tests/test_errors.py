import logging

import pytest
from sqlalchemy.exc import OperationalError

import recipebox.main as main
from recipebox.db import get_session
from recipebox.errors import StoreError, store_call
from recipebox.services import recipes as recipe_store


class BrokenSession:
    """Sesión cuyo backend siempre falla."""

    def __init__(self):
        self.rolled_back = 0

    def _fail(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    exec = get = add = commit = refresh = delete = _fail

    def rollback(self):
        self.rolled_back += 1


def test_store_call_wraps_and_rolls_back(caplog):
    s = BrokenSession()
    with caplog.at_level(logging.ERROR, logger="recipebox.errors"):
        with pytest.raises(StoreError) as exc:
            with store_call("saving recipe", s):
                s.commit()
    assert exc.value.action == "saving recipe"
    assert str(exc.value).startswith("error saving recipe:")
    assert s.rolled_back == 1
    assert len(caplog.records) == 1


def test_backend_failure_is_surfaced_once(client):
    main.app.dependency_overrides[get_session] = lambda: BrokenSession()
    try:
        r = client.get("/recipes")
    finally:
        main.app.dependency_overrides.pop(get_session, None)
    assert r.status_code == 503
    body = r.json()
    assert body["code"] == "store_error"
    assert body["meta"] == {"action": "loading recipes"}
    assert "connection refused" in body["detail"]


def test_recipe_persists_when_tag_linking_fails(client, owner, make_recipe, monkeypatch):
    headers, _ = owner

    def failing_relink(session, recipe_id, names):
        raise StoreError("linking recipe tags", "constraint violation")

    monkeypatch.setattr(recipe_store, "relink_recipe_tags", failing_relink)
    created = make_recipe(headers, tags=["Dessert"])
    assert created["tags"] == []
    monkeypatch.undo()
    assert client.get(f"/recipes/{created['id']}").json()["title"] == "Poulet rôti"
