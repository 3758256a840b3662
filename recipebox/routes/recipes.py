from __future__ import annotations

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from ..config import settings
from ..db import get_session
from ..errors import ErrorResponse
from ..models_db import RecipeRecord
from ..schemas import Comment, CommentIn, Recipe, RecipeDetail, RecipeIn, RecipeList
from ..security import get_current_session, get_optional_session
from ..services import recipes as recipe_store
from ..services.comments import insert_comment, list_comment_records
from ..services.filtering import FilterSpec, TagMatchPolicy, ViewMode, distinct_tags, filter_recipes
from ..services.mapping import comment_to_app
from ..services.ratings import average_rating, comment_is_acceptable
from ..services.roles import can_edit, role_for_session
from ..services.session import SessionSnapshot

logger = logging.getLogger("recipebox.routes.recipes")

router = APIRouter(prefix="/recipes", tags=["recipes"])


def _visible_record(session: Session, recipe_id: int, viewer: Optional[SessionSnapshot]) -> RecipeRecord:
    """Borradores: sólo los ve su dueño o el admin."""
    rec = recipe_store.get_recipe_record(session, recipe_id)
    if not rec:
        raise HTTPException(status_code=404, detail="Receta no encontrada")
    if rec.status != "published" and not can_edit(role_for_session(viewer, rec.user_id)):
        raise HTTPException(status_code=404, detail="Receta no encontrada")
    return rec


def _editable_record(session: Session, recipe_id: int, viewer: SessionSnapshot) -> RecipeRecord:
    rec = _visible_record(session, recipe_id, viewer)
    if not can_edit(role_for_session(viewer, rec.user_id)):
        raise HTTPException(status_code=403, detail="No autorizado")
    return rec


def _detail(recipe: Recipe, viewer: Optional[SessionSnapshot]) -> RecipeDetail:
    role = role_for_session(viewer, recipe.user_id)
    return RecipeDetail(
        **recipe.model_dump(),
        average_rating=average_rating(recipe.comments),
        role=role.value,
        can_edit=can_edit(role),
    )


@router.get(
    "",
    response_model=RecipeList,
    summary="Catálogo publicado con búsqueda y filtros",
    responses={401: {"model": ErrorResponse}},
)
def list_recipes(
    q: str = Query("", description="Texto en título o ingredientes"),
    view: ViewMode = Query(ViewMode.ALL),
    tag: List[str] = Query([], description="Tags requeridos"),
    favorite: List[int] = Query([], description="Ids favoritos del cliente"),
    policy: Optional[TagMatchPolicy] = Query(None),
    session: Session = Depends(get_session),
    viewer: Optional[SessionSnapshot] = Depends(get_optional_session),
):
    catalog = recipe_store.load_catalog(session, status="published")
    spec = FilterSpec(
        search_text=q,
        view_mode=view,
        required_tags=frozenset(t.strip() for t in tag if t.strip()),
        tag_policy=policy or TagMatchPolicy(settings.tag_match_policy),
        favorite_ids=frozenset(favorite),
        owner_id=viewer.user_id if viewer else None,
    )
    return RecipeList(recipes=filter_recipes(catalog, spec), all_tags=distinct_tags(catalog))


@router.get("/tags", response_model=List[str], summary="Tags usados por las recetas publicadas")
def list_catalog_tags(session: Session = Depends(get_session)):
    return distinct_tags(recipe_store.load_catalog(session, status="published", with_comments=False))


@router.get(
    "/{recipe_id}",
    response_model=RecipeDetail,
    summary="Detalle de una receta (nota media y permisos)",
    responses={404: {"model": ErrorResponse}},
)
def get_recipe(
    recipe_id: int,
    session: Session = Depends(get_session),
    viewer: Optional[SessionSnapshot] = Depends(get_optional_session),
):
    _visible_record(session, recipe_id, viewer)
    return _detail(recipe_store.load_recipe(session, recipe_id), viewer)


@router.post(
    "",
    response_model=RecipeDetail,
    status_code=201,
    summary="Crear una receta propia",
    responses={401: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
def create_recipe(
    data: RecipeIn,
    session: Session = Depends(get_session),
    viewer: SessionSnapshot = Depends(get_current_session),
):
    recipe = recipe_store.create_recipe(session, data, viewer)
    return _detail(recipe, viewer)


@router.put(
    "/{recipe_id}",
    response_model=RecipeDetail,
    summary="Actualizar una receta (dueño o admin)",
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
def update_recipe(
    recipe_id: int,
    data: RecipeIn,
    session: Session = Depends(get_session),
    viewer: SessionSnapshot = Depends(get_current_session),
):
    rec = _editable_record(session, recipe_id, viewer)
    recipe = recipe_store.edit_recipe(session, rec, data, viewer)
    return _detail(recipe, viewer)


@router.delete(
    "/{recipe_id}",
    summary="Eliminar una receta (dueño o admin)",
    responses={200: {"description": "Eliminada"}, 403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def delete_recipe(
    recipe_id: int,
    session: Session = Depends(get_session),
    viewer: SessionSnapshot = Depends(get_current_session),
):
    rec = _editable_record(session, recipe_id, viewer)
    recipe_store.delete_recipe(session, rec)
    logger.info("Recipe %s deleted by %s", recipe_id, viewer.user_id)
    return {"status": "ok", "deleted_id": recipe_id}


@router.get(
    "/{recipe_id}/comments",
    response_model=List[Comment],
    summary="Comentarios (más recientes primero)",
    responses={404: {"model": ErrorResponse}},
)
def list_comments(
    recipe_id: int,
    session: Session = Depends(get_session),
    viewer: Optional[SessionSnapshot] = Depends(get_optional_session),
):
    _visible_record(session, recipe_id, viewer)
    return [comment_to_app(c) for c in list_comment_records(session, recipe_ids=[recipe_id])]


@router.post(
    "/{recipe_id}/comments",
    response_model=Comment,
    status_code=201,
    summary="Añadir un comentario con nota",
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def add_comment(
    recipe_id: int,
    data: CommentIn,
    session: Session = Depends(get_session),
    viewer: Optional[SessionSnapshot] = Depends(get_optional_session),
):
    if not comment_is_acceptable(data):
        raise HTTPException(status_code=422, detail="Name, text and rating are required")
    _visible_record(session, recipe_id, viewer)
    return insert_comment(session, recipe_id, data)
