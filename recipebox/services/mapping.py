"""
Conversión entre la representación de almacenamiento (snake_case, sin tags)
y el modelo de aplicación (camelCase, tags embebidos).

Funciones puras: sin validación y sin acceso a la base de datos. Los tags y
comentarios se resuelven fuera y se pasan ya cargados.
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional

from ..models_db import RecipeRecord, CommentRecord, TagRecord
from ..schemas import Recipe, Comment, Ingredient, Tag

# campos que el propio registro de receta posee (sin id ni timestamps)
RECIPE_FIELDS = (
    "title", "image_prompt", "ingredients", "steps", "prep_time", "cook_time",
    "servings", "is_custom", "status", "user_id",
)
# campos modificables tras la creación: la propiedad (is_custom/user_id) es inmutable
RECIPE_UPDATABLE_FIELDS = tuple(f for f in RECIPE_FIELDS if f not in ("is_custom", "user_id"))


def ingredient_to_app(raw: Dict[str, Any]) -> Ingredient:
    return Ingredient(
        emoji=raw.get("emoji") or "",
        quantity=raw.get("quantity"),
        unit=raw.get("unit") or "",
        ingredient=raw.get("ingredient") or "",
    )


def ingredient_to_storage(ing: Ingredient) -> Dict[str, Any]:
    return {
        "emoji": ing.emoji,
        "quantity": ing.quantity,
        "unit": ing.unit,
        "ingredient": ing.ingredient,
    }


def comment_to_app(record: CommentRecord) -> Comment:
    return Comment(
        id=record.id,
        user=record.user_name,
        rating=record.rating,
        text=record.text,
        date=record.date,
    )


def comment_to_storage(comment: Comment, recipe_id: int) -> Dict[str, Any]:
    return {
        "recipe_id": recipe_id,
        "user_name": comment.user,
        "rating": comment.rating,
        "text": comment.text,
        "date": comment.date,
    }


def tag_to_app(record: TagRecord) -> Tag:
    return Tag(id=record.id, name=record.name, created_by=record.created_by)


def to_app(
    record: RecipeRecord,
    tags: Optional[Iterable[str]] = None,
    comments: Optional[Iterable[CommentRecord]] = None,
) -> Recipe:
    return Recipe(
        id=record.id,
        title=record.title,
        image_prompt=record.image_prompt,
        ingredients=[ingredient_to_app(i) for i in (record.ingredients or [])],
        steps=list(record.steps or []),
        prep_time=record.prep_time,
        cook_time=record.cook_time,
        servings=record.servings,
        tags=list(tags or []),
        is_custom=record.is_custom,
        status=record.status,
        user_id=record.user_id,
        comments=[comment_to_app(c) for c in (comments or [])],
    )


def to_storage(recipe: Recipe) -> Dict[str, Any]:
    """Dict listo para RecipeRecord(**d); tags, comentarios e id quedan fuera."""
    return {
        "title": recipe.title,
        "image_prompt": recipe.image_prompt,
        "ingredients": [ingredient_to_storage(i) for i in recipe.ingredients],
        "steps": list(recipe.steps),
        "prep_time": recipe.prep_time,
        "cook_time": recipe.cook_time,
        "servings": recipe.servings,
        "is_custom": recipe.is_custom,
        "status": recipe.status,
        "user_id": recipe.user_id,
    }


def to_storage_update(recipe: Recipe) -> Dict[str, Any]:
    full = to_storage(recipe)
    return {k: full[k] for k in RECIPE_UPDATABLE_FIELDS}


def tags_by_recipe(pairs: Iterable[tuple[int, str]]) -> Dict[int, List[str]]:
    out: Dict[int, List[str]] = {}
    for recipe_id, name in pairs:
        out.setdefault(recipe_id, []).append(name)
    return out
