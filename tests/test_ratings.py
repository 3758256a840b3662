import pytest

from recipebox.schemas import Comment, CommentIn
from recipebox.services.ratings import average_rating, comment_is_acceptable


def _comments(*ratings):
    return [Comment(id=i, user="u", rating=r, text="t", date="01/01/2025") for i, r in enumerate(ratings)]


def test_empty_or_missing_is_zero():
    assert average_rating([]) == 0
    assert average_rating(None) == 0


@pytest.mark.parametrize("ratings, expected", [
    ((5,), 5.0),
    ((4, 5), 4.5),
    ((1, 2, 2), 1.7),
    ((4, 4, 5, 4), 4.3),  # 4.25 se redondea hacia arriba
    ((3, 3, 3), 3.0),
])
def test_mean_rounded_to_one_decimal(ratings, expected):
    assert average_rating(_comments(*ratings)) == expected


def test_comment_gate():
    assert comment_is_acceptable(CommentIn(user="Ana", text="Top", rating=4))
    assert not comment_is_acceptable(CommentIn(user="", text="Top", rating=4))
    assert not comment_is_acceptable(CommentIn(user="Ana", text="   ", rating=4))
    assert not comment_is_acceptable(CommentIn(user="Ana", text="Top", rating=0))
