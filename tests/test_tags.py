from sqlmodel import select

from recipebox.models_db import RecipeRecord, RecipeTagLink, TagRecord
from recipebox.services import tags as tag_store


def _recipe(session, title="Tarte"):
    rec = RecipeRecord(title=title, status="published")
    session.add(rec)
    session.commit()
    session.refresh(rec)
    return rec


def _all_tags(session):
    return [t.name for t in session.exec(select(TagRecord).order_by(TagRecord.name)).all()]


def test_normalize_tag_names():
    assert tag_store.normalize_tag_names([" Dessert", "Dessert", "", "  ", "Four"]) == ["Dessert", "Four"]


def test_ensure_tags_exist_is_idempotent(session):
    tag_store.ensure_tags_exist(session, {"Dessert"})
    tag_store.ensure_tags_exist(session, {"Dessert"})
    assert _all_tags(session) == ["Dessert"]


def test_tag_names_are_case_sensitive(session):
    tag_store.ensure_tags_exist(session, ["dessert", "Dessert"])
    assert _all_tags(session) == ["Dessert", "dessert"]


def test_upsert_returns_existing_row(session):
    first = tag_store.upsert_tag(session, "Four", created_by="u1")
    again = tag_store.upsert_tag(session, "Four", created_by="u2")
    assert again.id == first.id
    assert again.created_by == "u1"


def test_relink_replaces_instead_of_merging(session):
    rec = _recipe(session)
    tag_store.ensure_tags_exist(session, ["A", "B"])
    tag_store.relink_recipe_tags(session, rec.id, ["A", "B"])
    assert tag_store.list_links_by_recipe(session, rec.id) == ["A", "B"]
    tag_store.relink_recipe_tags(session, rec.id, {"A"})
    assert tag_store.list_links_by_recipe(session, rec.id) == ["A"]


def test_relink_silently_drops_unknown_names(session):
    rec = _recipe(session)
    tag_store.ensure_tags_exist(session, ["A"])
    tag_store.relink_recipe_tags(session, rec.id, ["A", "Ghost"])
    assert tag_store.list_links_by_recipe(session, rec.id) == ["A"]
    assert "Ghost" not in _all_tags(session)


def test_relink_only_touches_its_recipe(session):
    r1, r2 = _recipe(session, "r1"), _recipe(session, "r2")
    tag_store.ensure_tags_exist(session, ["A", "B"])
    tag_store.relink_recipe_tags(session, r1.id, ["A"])
    tag_store.relink_recipe_tags(session, r2.id, ["B"])
    tag_store.relink_recipe_tags(session, r1.id, [])
    assert tag_store.list_links_by_recipe(session, r1.id) == []
    assert tag_store.list_links_for_recipes(session, [r1.id, r2.id]) == [(r2.id, "B")]


def test_orphan_tags_survive_unlinking(session):
    rec = _recipe(session)
    tag_store.ensure_tags_exist(session, ["A"])
    tag_store.relink_recipe_tags(session, rec.id, ["A"])
    tag_store.relink_recipe_tags(session, rec.id, [])
    assert _all_tags(session) == ["A"]


def test_usage_and_delete(session):
    rec = _recipe(session)
    tag = tag_store.upsert_tag(session, "A")
    tag_store.relink_recipe_tags(session, rec.id, ["A"])
    assert tag_store.tag_usage(session, tag.id) == 1
    tag_store.delete_tag(session, tag)
    assert _all_tags(session) == []
    assert session.exec(select(RecipeTagLink)).all() == []


def test_links_keep_the_given_order(session):
    r1, r2 = _recipe(session, "r1"), _recipe(session, "r2")
    tag_store.ensure_tags_exist(session, ["Zeste", "Dessert", "Perso"])
    tag_store.relink_recipe_tags(session, r1.id, ["Zeste", "Dessert", "Perso"])
    tag_store.relink_recipe_tags(session, r2.id, ["Perso", "Zeste"])
    assert tag_store.list_links_by_recipe(session, r1.id) == ["Zeste", "Dessert", "Perso"]
    assert tag_store.list_links_for_recipes(session, [r2.id, r1.id]) == [
        (r1.id, "Zeste"), (r1.id, "Dessert"), (r1.id, "Perso"),
        (r2.id, "Perso"), (r2.id, "Zeste"),
    ]
    tag_store.relink_recipe_tags(session, r1.id, ["Perso", "Zeste"])
    assert tag_store.list_links_by_recipe(session, r1.id) == ["Perso", "Zeste"]
