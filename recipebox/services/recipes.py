"""
Almacén de recetas y montaje del catálogo (receta + tags + comentarios).
"""
from __future__ import annotations
import logging
import time
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import delete
from sqlmodel import Session, select

from ..config import settings
from ..errors import store_call, StoreError
from ..models_db import RecipeRecord, CommentRecord, RecipeTagLink, utcnow
from ..schemas import Ingredient, IngredientIn, Recipe, RecipeIn
from .comments import list_comment_records, comments_by_recipe
from .emoji import classify
from .mapping import to_app, to_storage, to_storage_update, tags_by_recipe
from .session import SessionSnapshot
from .tags import ensure_tags_exist, relink_recipe_tags, list_links_by_recipe, list_links_for_recipes, normalize_tag_names

logger = logging.getLogger("recipebox.recipes")

EMPTY_UNIT = "(vide)"


# -------- Almacén --------

def list_recipe_records(session: Session, status: Optional[str] = None) -> List[RecipeRecord]:
    stmt = select(RecipeRecord)
    if status:
        stmt = stmt.where(RecipeRecord.status == status)
    stmt = stmt.order_by(RecipeRecord.created_at.desc(), RecipeRecord.id.desc())
    with store_call("loading recipes", session):
        return list(session.exec(stmt).all())


def get_recipe_record(session: Session, recipe_id: int) -> Optional[RecipeRecord]:
    with store_call("loading recipe", session):
        return session.get(RecipeRecord, recipe_id)


def insert_recipe(session: Session, data: Dict[str, Any]) -> RecipeRecord:
    with store_call("saving recipe", session):
        rec = RecipeRecord(**data)
        session.add(rec)
        session.commit()
        session.refresh(rec)
        return rec


def update_recipe(session: Session, rec: RecipeRecord, partial: Dict[str, Any]) -> RecipeRecord:
    # last-write-wins: sin control de versión
    with store_call("saving recipe", session):
        for k, v in partial.items():
            setattr(rec, k, v)
        rec.updated_at = utcnow()
        session.add(rec)
        session.commit()
        session.refresh(rec)
        return rec


def delete_recipe(session: Session, rec: RecipeRecord) -> None:
    with store_call("deleting recipe", session):
        session.exec(delete(CommentRecord).where(CommentRecord.recipe_id == rec.id))
        session.exec(delete(RecipeTagLink).where(RecipeTagLink.recipe_id == rec.id))
        session.delete(rec)
        session.commit()


# -------- Catálogo --------

def assemble(session: Session, records: Iterable[RecipeRecord], with_comments: bool = True) -> List[Recipe]:
    records = list(records)
    ids = [r.id for r in records]
    tags = tags_by_recipe(list_links_for_recipes(session, ids))
    comments = comments_by_recipe(list_comment_records(session, recipe_ids=ids)) if with_comments else {}
    return [to_app(r, tags.get(r.id, []), comments.get(r.id, [])) for r in records]


def load_catalog(session: Session, status: Optional[str] = "published", with_comments: bool = True) -> List[Recipe]:
    return assemble(session, list_recipe_records(session, status=status), with_comments=with_comments)


def load_recipe(session: Session, recipe_id: int) -> Optional[Recipe]:
    rec = get_recipe_record(session, recipe_id)
    if not rec:
        return None
    return to_app(
        rec,
        list_links_by_recipe(session, recipe_id),
        list_comment_records(session, recipe_ids=[recipe_id]),
    )


# -------- Formulario -> receta --------

DEFAULT_STATUS = "draft"


def default_image_prompt(title: str) -> str:
    return f"{title} gourmet food warm photography"


def draft_id() -> int:
    """Id provisional (timestamp en ms) para un borrador aún no guardado."""
    return int(time.time() * 1000)


def parse_quantity(raw: Any) -> Optional[float]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip().replace(",", ".")
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    return value if value > 0 else None


def build_ingredients(rows: Iterable[IngredientIn]) -> List[Ingredient]:
    out: List[Ingredient] = []
    for row in rows:
        name = (row.ingredient or "").strip()
        if not name:
            continue
        unit = (row.unit or "").strip()
        out.append(Ingredient(
            emoji=classify(name),
            quantity=parse_quantity(row.quantity),
            unit="" if unit == EMPTY_UNIT else unit,
            ingredient=name,
        ))
    return out


def build_steps(steps: Iterable[str]) -> List[str]:
    return [s.strip() for s in steps if s and s.strip()]


def recipe_tags(user_tags: Iterable[str], is_custom: bool) -> List[str]:
    """Tags del usuario; las recetas propias llevan además el tag de recetas personales al final."""
    custom = settings.custom_recipe_tag
    tags = [t for t in normalize_tag_names(user_tags) if t != custom]
    if is_custom and custom:
        tags.append(custom)
    return tags


def draft_from_form(data: RecipeIn, owner: SessionSnapshot) -> Recipe:
    return Recipe(
        id=draft_id(),
        title=data.title,
        image_prompt=data.image_prompt or default_image_prompt(data.title),
        ingredients=build_ingredients(data.ingredients),
        steps=build_steps(data.steps),
        prep_time=(data.prep_time or "").strip() or settings.default_prep_time,
        cook_time=(data.cook_time or "").strip() or settings.default_cook_time,
        servings=data.servings or settings.default_servings,
        tags=recipe_tags(data.tags, is_custom=True),
        is_custom=True,
        status=data.status or DEFAULT_STATUS,
        user_id=owner.user_id,
    )


def _link_tags(session: Session, recipe_id: int, names: List[str], created_by: Optional[str]) -> None:
    # sin rollback: si el enlace falla la receta queda guardada sin tags
    try:
        ensure_tags_exist(session, names, created_by=created_by)
        relink_recipe_tags(session, recipe_id, names)
    except StoreError:
        logger.warning("Recipe %s saved without its tags", recipe_id)


def create_recipe(session: Session, data: RecipeIn, owner: SessionSnapshot) -> Recipe:
    draft = draft_from_form(data, owner)
    rec = insert_recipe(session, to_storage(draft))
    _link_tags(session, rec.id, draft.tags, owner.user_id)
    logger.info("Recipe %s created by %s", rec.id, owner.user_id)
    return load_recipe(session, rec.id)


def edit_recipe(session: Session, rec: RecipeRecord, data: RecipeIn, editor: SessionSnapshot) -> Recipe:
    current = load_recipe(session, rec.id)
    updated = current.model_copy(update={
        "title": data.title,
        "image_prompt": data.image_prompt or default_image_prompt(data.title),
        "ingredients": build_ingredients(data.ingredients),
        "steps": build_steps(data.steps),
        "prep_time": (data.prep_time or "").strip() or current.prep_time,
        "cook_time": (data.cook_time or "").strip() or current.cook_time,
        "servings": data.servings or current.servings,
        "tags": recipe_tags(data.tags, is_custom=current.is_custom),
        "status": data.status or current.status,
    })
    update_recipe(session, rec, to_storage_update(updated))
    _link_tags(session, rec.id, updated.tags, editor.user_id)
    return load_recipe(session, rec.id)


def set_status(session: Session, rec: RecipeRecord, status: str) -> RecipeRecord:
    return update_recipe(session, rec, {"status": status})
