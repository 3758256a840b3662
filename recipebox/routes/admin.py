from __future__ import annotations
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from ..db import get_session
from ..errors import ErrorResponse
from ..schemas import Recipe, Tag, TagIn
from ..security import get_current_session
from ..services import recipes as recipe_store
from ..services import tags as tag_store
from ..services.mapping import tag_to_app
from ..services.roles import is_admin
from ..services.session import SessionSnapshot

logger = logging.getLogger("recipebox.admin")


def require_admin(viewer: SessionSnapshot = Depends(get_current_session)) -> SessionSnapshot:
    if not is_admin(viewer.email):
        raise HTTPException(status_code=403, detail="No autorizado")
    return viewer


router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# -------- Recetas --------

@router.get("/recipes", response_model=List[Recipe], summary="Todas las recetas (borradores incluidos)")
def list_all_recipes(session: Session = Depends(get_session)):
    return recipe_store.load_catalog(session, status=None, with_comments=False)


def _record_or_404(session: Session, recipe_id: int):
    rec = recipe_store.get_recipe_record(session, recipe_id)
    if not rec:
        raise HTTPException(status_code=404, detail="Receta no encontrada")
    return rec


@router.post(
    "/recipes/{recipe_id}/toggle-status",
    response_model=Recipe,
    summary="Publicar / despublicar",
    responses={404: {"model": ErrorResponse}},
)
def toggle_status(recipe_id: int, session: Session = Depends(get_session)):
    rec = _record_or_404(session, recipe_id)
    new_status = "draft" if rec.status == "published" else "published"
    recipe_store.set_status(session, rec, new_status)
    logger.info("Recipe %s is now %s", recipe_id, new_status)
    return recipe_store.load_recipe(session, recipe_id)


@router.delete("/recipes/{recipe_id}", responses={404: {"model": ErrorResponse}})
def delete_any_recipe(recipe_id: int, session: Session = Depends(get_session)):
    rec = _record_or_404(session, recipe_id)
    recipe_store.delete_recipe(session, rec)
    return {"status": "ok", "deleted_id": recipe_id}


# -------- Tags --------

@router.get("/tags", response_model=List[Tag])
def list_tags(session: Session = Depends(get_session)):
    return [tag_to_app(t) for t in tag_store.list_tags(session)]


@router.post("/tags", response_model=Tag, status_code=201, responses={422: {"model": ErrorResponse}})
def create_tag(
    data: TagIn,
    session: Session = Depends(get_session),
    viewer: SessionSnapshot = Depends(require_admin),
):
    name = data.name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Tag name is required")
    return tag_to_app(tag_store.upsert_tag(session, name, created_by=viewer.user_id))


@router.patch(
    "/tags/{tag_id}",
    response_model=Tag,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def rename_tag(tag_id: int, data: TagIn, session: Session = Depends(get_session)):
    tag = tag_store.get_tag(session, tag_id)
    if not tag:
        raise HTTPException(status_code=404, detail="Tag no encontrado")
    name = data.name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Tag name is required")
    if name != tag.name and tag_store.resolve_tag_ids(session, [name]):
        raise HTTPException(status_code=409, detail=f"Tag '{name}' already exists")
    return tag_to_app(tag_store.rename_tag(session, tag, name))


@router.delete(
    "/tags/{tag_id}",
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def delete_tag(
    tag_id: int,
    force: bool = Query(False, description="Confirmar aunque haya recetas que lo usan"),
    session: Session = Depends(get_session),
):
    tag = tag_store.get_tag(session, tag_id)
    if not tag:
        raise HTTPException(status_code=404, detail="Tag no encontrado")
    usage = tag_store.tag_usage(session, tag_id)
    if usage and not force:
        raise HTTPException(status_code=409, detail=f"Tag in use by {usage} recipe(s); retry with force=true")
    tag_store.delete_tag(session, tag)
    logger.info("Tag %s deleted (was used by %s recipes)", tag_id, usage)
    return {"ok": True, "unlinked": usage}
