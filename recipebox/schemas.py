from typing import List, Optional
from typing_extensions import Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

StatusLiteral = Literal["draft", "published"]


class CamelModel(BaseModel):
    """Modelos de aplicación: camelCase en el cable, snake_case en Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# === Modelo de aplicación ===

class Ingredient(CamelModel):
    emoji: str = ""
    quantity: Optional[float] = None
    unit: str = ""
    ingredient: str


class Comment(CamelModel):
    id: int
    user: str
    rating: int
    text: str
    date: str


class Recipe(CamelModel):
    id: int
    title: str
    image_prompt: str = ""
    ingredients: List[Ingredient] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    prep_time: str = ""
    cook_time: str = ""
    servings: int = 2
    tags: List[str] = Field(default_factory=list)
    is_custom: bool = False
    status: StatusLiteral = "draft"
    user_id: Optional[str] = None
    comments: List[Comment] = Field(default_factory=list)


class Tag(CamelModel):
    id: int
    name: str
    created_by: Optional[str] = None


class Profile(CamelModel):
    id: str
    email: str
    username: Optional[str] = None
    role: Literal["user", "admin"] = "user"


# === Peticiones ===

class IngredientIn(CamelModel):
    """Fila del formulario: la cantidad llega como texto libre."""
    quantity: Optional[str | float] = None
    unit: str = ""
    ingredient: str = ""


class RecipeIn(CamelModel):
    title: str
    image_prompt: Optional[str] = None
    ingredients: List[IngredientIn] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    servings: Optional[int] = Field(default=None, gt=0)
    tags: List[str] = Field(default_factory=list)
    # None: alta como borrador; en edición conserva el estado actual
    status: Optional[StatusLiteral] = None

    @field_validator("title")
    @classmethod
    def _title_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        return v


class CommentIn(CamelModel):
    user: str = ""
    rating: int = Field(default=0, ge=0, le=5)
    text: str = ""


class TagIn(CamelModel):
    name: str


# === Respuestas ===

class RecipeDetail(Recipe):
    average_rating: float = 0
    role: Literal["anonymous", "owner", "admin"] = "anonymous"
    can_edit: bool = False


class RecipeList(CamelModel):
    recipes: List[Recipe]
    all_tags: List[str]


class SessionOut(CamelModel):
    user_id: str
    email: str
    is_admin: bool = False
    username: Optional[str] = None
