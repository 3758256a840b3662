from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from ..db import get_session
from ..errors import ErrorResponse
from ..schemas import Tag, TagIn
from ..security import get_current_session
from ..services import tags as tag_store
from ..services.mapping import tag_to_app
from ..services.session import SessionSnapshot

router = APIRouter(prefix="/tags", tags=["tags"])

@router.get("", response_model=List[Tag], summary="Vocabulario compartido de tags")
def list_tags(session: Session = Depends(get_session)):
    return [tag_to_app(t) for t in tag_store.list_tags(session)]

@router.post(
    "",
    response_model=Tag,
    summary="Crear un tag desde el formulario de receta (idempotente)",
    responses={401: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def create_tag(
    data: TagIn,
    session: Session = Depends(get_session),
    viewer: SessionSnapshot = Depends(get_current_session),
):
    name = data.name.strip()
    if not name:
        raise HTTPException(422, "Tag name is required")
    return tag_to_app(tag_store.upsert_tag(session, name, created_by=viewer.user_id))
