"""
Vocabulario compartido de tags y enlaces receta↔tag.

- ensure_tags_exist: upsert idempotente (un nombre ya existente no es error).
- relink_recipe_tags: "reemplazar todo". Borra los enlaces de la receta y
  vuelve a insertarlos; entre ambos pasos un lector concurrente puede ver la
  receta sin tags (consistencia débil aceptada, sin transacción envolvente).
  El orden de la lista de nombres se guarda en recipe_tags.position y es el
  orden en que se devuelven los tags de la receta.
"""
from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..errors import store_call
from ..models_db import TagRecord, RecipeTagLink

logger = logging.getLogger("recipebox.tags")


def normalize_tag_names(names: Iterable[str]) -> List[str]:
    """Recorta, descarta vacíos y desduplica preservando el orden."""
    seen = set()
    out: List[str] = []
    for raw in names:
        n = (raw or "").strip()
        if not n or n in seen:
            continue
        seen.add(n)
        out.append(n)
    return out


# -------- Almacén de tags --------

def list_tags(session: Session) -> List[TagRecord]:
    with store_call("loading tags", session):
        return list(session.exec(select(TagRecord).order_by(TagRecord.name)).all())


def get_tag(session: Session, tag_id: int) -> Optional[TagRecord]:
    with store_call("loading tag", session):
        return session.get(TagRecord, tag_id)


def upsert_tag(session: Session, name: str, created_by: Optional[str] = None) -> TagRecord:
    """Inserta el tag; si el nombre ya existe devuelve la fila existente (on conflict ignore)."""
    with store_call("saving tag", session):
        existing = session.exec(select(TagRecord).where(TagRecord.name == name)).first()
        if existing:
            return existing
        tag = TagRecord(name=name, created_by=created_by)
        session.add(tag)
        try:
            session.commit()
        except IntegrityError:
            # otra sesión lo insertó entre medias
            session.rollback()
            logger.debug("Tag %r inserted concurrently", name)
            return session.exec(select(TagRecord).where(TagRecord.name == name)).one()
        return tag


def rename_tag(session: Session, tag: TagRecord, new_name: str) -> TagRecord:
    with store_call("renaming tag", session):
        tag.name = new_name
        session.add(tag)
        session.commit()
        return tag


def tag_usage(session: Session, tag_id: int) -> int:
    with store_call("counting tag usage", session):
        return session.exec(
            select(func.count()).select_from(RecipeTagLink).where(RecipeTagLink.tag_id == tag_id)
        ).one()


def delete_tag(session: Session, tag: TagRecord) -> None:
    """Borra el tag y sus enlaces. La confirmación si está en uso es cosa del llamador."""
    with store_call("deleting tag", session):
        session.exec(delete(RecipeTagLink).where(RecipeTagLink.tag_id == tag.id))
        session.delete(tag)
        session.commit()


# -------- Tabla puente --------

def list_links_by_recipe(session: Session, recipe_id: int) -> List[str]:
    with store_call("loading recipe tags", session):
        rows = session.exec(
            select(TagRecord.name)
            .join(RecipeTagLink, RecipeTagLink.tag_id == TagRecord.id)
            .where(RecipeTagLink.recipe_id == recipe_id)
            .order_by(RecipeTagLink.position)
        ).all()
    return list(rows)


def list_links_for_recipes(session: Session, recipe_ids: Iterable[int]) -> List[Tuple[int, str]]:
    ids = list(recipe_ids)
    if not ids:
        return []
    with store_call("loading recipe tags", session):
        rows = session.exec(
            select(RecipeTagLink.recipe_id, TagRecord.name)
            .join(TagRecord, RecipeTagLink.tag_id == TagRecord.id)
            .where(RecipeTagLink.recipe_id.in_(ids))
            .order_by(RecipeTagLink.recipe_id, RecipeTagLink.position)
        ).all()
    return [(r[0], r[1]) for r in rows]


def delete_links_by_recipe(session: Session, recipe_id: int) -> None:
    with store_call("unlinking recipe tags", session):
        session.exec(delete(RecipeTagLink).where(RecipeTagLink.recipe_id == recipe_id))
        session.commit()


def insert_links(session: Session, recipe_id: int, tag_ids: Iterable[int]) -> None:
    """Enlaza los tags en el orden recibido; ese orden es el de visualización."""
    tag_ids = list(tag_ids)
    if not tag_ids:
        return
    with store_call("linking recipe tags", session):
        session.add_all([
            RecipeTagLink(recipe_id=recipe_id, tag_id=tag_id, position=pos)
            for pos, tag_id in enumerate(tag_ids)
        ])
        session.commit()


# -------- Normalización y enlace --------

def ensure_tags_exist(session: Session, names: Iterable[str], created_by: Optional[str] = None) -> None:
    for name in normalize_tag_names(names):
        upsert_tag(session, name, created_by=created_by)


def resolve_tag_ids(session: Session, names: Iterable[str]) -> Dict[str, int]:
    """Nombre -> id. Los nombres sin fila se omiten (join permisivo)."""
    wanted = normalize_tag_names(names)
    if not wanted:
        return {}
    with store_call("loading tags", session):
        rows = session.exec(select(TagRecord).where(TagRecord.name.in_(wanted))).all()
    return {t.name: t.id for t in rows}


def relink_recipe_tags(session: Session, recipe_id: int, names: Iterable[str]) -> None:
    names = normalize_tag_names(names)
    ids = resolve_tag_ids(session, names)
    delete_links_by_recipe(session, recipe_id)
    insert_links(session, recipe_id, [ids[n] for n in names if n in ids])
