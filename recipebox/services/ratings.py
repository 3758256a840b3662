from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from ..schemas import Comment, CommentIn


def average_rating(comments: Optional[Iterable[Comment]]) -> float:
    """Media de las notas redondeada a un decimal (4.25 -> 4.3); 0 si no hay comentarios."""
    ratings = [c.rating for c in (comments or [])]
    if not ratings:
        return 0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def comment_is_acceptable(comment: CommentIn) -> bool:
    return bool(comment.user.strip() and comment.text.strip() and comment.rating > 0)
