"""
Motor de filtrado/búsqueda del catálogo.

Los predicados (texto, modo de vista, tags) se combinan con AND. La salida
conserva el orden de entrada: aquí no se ordena.

Política de tags:
- ALL: la receta debe tener todos los tags seleccionados.
- ANY: basta con uno.
Con ningún tag seleccionado no se filtra, sea cual sea la política.
"""
from __future__ import annotations
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from ..schemas import Recipe


class ViewMode(str, Enum):
    ALL = "all"
    FAVORITES = "favorites"
    OWN_CREATIONS = "own-creations"
    OWNED_BY = "owned-by"


class TagMatchPolicy(str, Enum):
    ALL = "all"
    ANY = "any"


class FilterSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    search_text: str = ""
    view_mode: ViewMode = ViewMode.ALL
    required_tags: FrozenSet[str] = frozenset()
    tag_policy: TagMatchPolicy = TagMatchPolicy.ALL
    # favoritos que el llamador guarda en local
    favorite_ids: FrozenSet[int] = frozenset()
    # usuario para OWNED_BY; None = nadie ha iniciado sesión
    owner_id: Optional[str] = None


def matches_text(recipe: Recipe, search_text: str) -> bool:
    q = search_text.strip().lower()
    if not q:
        return True
    if q in recipe.title.lower():
        return True
    return any(q in (i.ingredient or "").lower() for i in recipe.ingredients)


def matches_view(recipe: Recipe, spec: FilterSpec) -> bool:
    mode = spec.view_mode
    if mode == ViewMode.FAVORITES:
        return recipe.id in spec.favorite_ids
    if mode == ViewMode.OWN_CREATIONS:
        return bool(recipe.is_custom)
    if mode == ViewMode.OWNED_BY:
        return spec.owner_id is not None and recipe.user_id == spec.owner_id
    return True


def matches_tags(recipe: Recipe, required: FrozenSet[str], policy: TagMatchPolicy) -> bool:
    if not required:
        return True
    tags = set(recipe.tags)
    if policy == TagMatchPolicy.ANY:
        return not tags.isdisjoint(required)
    return required <= tags


def matches(recipe: Recipe, spec: FilterSpec) -> bool:
    return (
        matches_text(recipe, spec.search_text)
        and matches_view(recipe, spec)
        and matches_tags(recipe, spec.required_tags, spec.tag_policy)
    )


def filter_recipes(recipes: Iterable[Recipe], spec: FilterSpec) -> List[Recipe]:
    return [r for r in recipes if matches(r, spec)]


def distinct_tags(recipes: Iterable[Recipe]) -> List[str]:
    """Unión de los tags de todas las recetas, sin duplicados y ordenada."""
    return sorted({t for r in recipes for t in r.tags})
