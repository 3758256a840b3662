from __future__ import annotations
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlmodel import Session, select

from ..errors import store_call
from ..models_db import CommentRecord
from ..schemas import Comment, CommentIn
from .mapping import comment_to_app, comment_to_storage


def display_date(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime("%d/%m/%Y")


def list_comment_records(session: Session, recipe_ids: Optional[Iterable[int]] = None) -> List[CommentRecord]:
    """Comentarios, más recientes primero. Sin recipe_ids devuelve todos."""
    stmt = select(CommentRecord)
    if recipe_ids is not None:
        ids = list(recipe_ids)
        if not ids:
            return []
        stmt = stmt.where(CommentRecord.recipe_id.in_(ids))
    stmt = stmt.order_by(CommentRecord.created_at.desc(), CommentRecord.id.desc())
    with store_call("loading comments", session):
        return list(session.exec(stmt).all())


def comments_by_recipe(records: Iterable[CommentRecord]) -> Dict[int, List[CommentRecord]]:
    out: Dict[int, List[CommentRecord]] = {}
    for c in records:
        out.setdefault(c.recipe_id, []).append(c)
    return out


def insert_comment(session: Session, recipe_id: int, data: CommentIn) -> Comment:
    draft = Comment(id=0, user=data.user.strip(), rating=data.rating, text=data.text.strip(), date=display_date())
    with store_call("saving comment", session):
        rec = CommentRecord(**comment_to_storage(draft, recipe_id))
        session.add(rec)
        session.commit()
        session.refresh(rec)
    return comment_to_app(rec)
