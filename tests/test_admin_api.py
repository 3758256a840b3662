def test_admin_routes_require_admin(client, owner):
    headers, _ = owner
    assert client.get("/admin/recipes").status_code == 401
    r = client.get("/admin/recipes", headers=headers)
    assert r.status_code == 403
    assert r.json()["code"] == "forbidden"


def test_admin_lists_every_status(client, owner, admin, make_recipe):
    h1, _ = owner
    ha, _ = admin
    make_recipe(h1, title="Publiée")
    make_recipe(h1, title="Brouillon", status="draft")
    titles = [r["title"] for r in client.get("/admin/recipes", headers=ha).json()]
    assert titles == ["Brouillon", "Publiée"]


def test_toggle_status(client, owner, admin, make_recipe):
    h1, _ = owner
    ha, _ = admin
    rid = make_recipe(h1)["id"]
    r = client.post(f"/admin/recipes/{rid}/toggle-status", headers=ha)
    assert r.json()["status"] == "draft"
    assert client.get("/recipes").json()["recipes"] == []
    r = client.post(f"/admin/recipes/{rid}/toggle-status", headers=ha)
    assert r.json()["status"] == "published"
    assert client.post("/admin/recipes/999/toggle-status", headers=ha).status_code == 404


def test_admin_deletes_any_recipe(client, owner, admin, make_recipe):
    h1, _ = owner
    ha, _ = admin
    rid = make_recipe(h1)["id"]
    assert client.delete(f"/admin/recipes/{rid}", headers=ha).status_code == 200
    assert client.get(f"/recipes/{rid}").status_code == 404


def test_tag_crud(client, admin):
    ha, admin_id = admin
    r = client.post("/admin/tags", json={"name": "Dessert"}, headers=ha)
    assert r.status_code == 201
    tag = r.json()
    assert tag["createdBy"] == admin_id
    client.post("/admin/tags", json={"name": "Apéro"}, headers=ha)
    assert [t["name"] for t in client.get("/admin/tags", headers=ha).json()] == ["Apéro", "Dessert"]

    r = client.patch(f"/admin/tags/{tag['id']}", json={"name": "Desserts"}, headers=ha)
    assert r.status_code == 200 and r.json()["name"] == "Desserts"
    r = client.patch(f"/admin/tags/{tag['id']}", json={"name": "Apéro"}, headers=ha)
    assert r.status_code == 409
    assert client.post("/admin/tags", json={"name": "  "}, headers=ha).status_code == 422


def test_delete_in_use_tag_needs_confirmation(client, owner, admin, make_recipe):
    h1, _ = owner
    ha, _ = admin
    rid = make_recipe(h1, tags=["Dessert"])["id"]
    tag = next(t for t in client.get("/admin/tags", headers=ha).json() if t["name"] == "Dessert")
    r = client.delete(f"/admin/tags/{tag['id']}", headers=ha)
    assert r.status_code == 409
    assert r.json()["code"] == "conflict"
    r = client.delete(f"/admin/tags/{tag['id']}", params={"force": True}, headers=ha)
    assert r.json() == {"ok": True, "unlinked": 1}
    assert client.get(f"/recipes/{rid}").json()["tags"] == ["Perso"]


def test_delete_unused_tag(client, admin):
    ha, _ = admin
    tag = client.post("/admin/tags", json={"name": "Vide"}, headers=ha).json()
    assert client.delete(f"/admin/tags/{tag['id']}", headers=ha).json() == {"ok": True, "unlinked": 0}
    assert client.delete(f"/admin/tags/{tag['id']}", headers=ha).status_code == 404
