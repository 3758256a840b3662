from __future__ import annotations
from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
import uuid

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON as SAJSON


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecipeRecord(SQLModel, table=True):
    """
    Receta tal y como se guarda (snake_case). Los tags NO van aquí:
    viven en la tabla puente recipe_tags.
    """
    __tablename__ = "recipes"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    image_prompt: str = ""
    ingredients: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(SAJSON))
    steps: List[str] = Field(default_factory=list, sa_column=Column(SAJSON))
    prep_time: str = ""
    cook_time: str = ""
    servings: int = 2
    is_custom: bool = False
    status: str = Field(default="draft", index=True)  # "draft" | "published"
    user_id: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)


class CommentRecord(SQLModel, table=True):
    __tablename__ = "comments"

    id: Optional[int] = Field(default=None, primary_key=True)
    recipe_id: int = Field(foreign_key="recipes.id", index=True)
    user_name: str
    rating: int
    text: str
    date: str
    created_at: datetime = Field(default_factory=utcnow)


class TagRecord(SQLModel, table=True):
    __tablename__ = "tags"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    created_by: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class RecipeTagLink(SQLModel, table=True):
    __tablename__ = "recipe_tags"

    recipe_id: int = Field(foreign_key="recipes.id", primary_key=True)
    tag_id: int = Field(foreign_key="tags.id", primary_key=True)
    position: int = 0  # orden de visualización dentro de la receta


class Profile(SQLModel, table=True):
    """
    Perfil del usuario autenticado (se crea en el primer login).
    """
    __tablename__ = "profiles"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    email: str = Field(index=True, unique=True)
    username: Optional[str] = Field(default=None, index=True, unique=True)
    role: str = Field(default="user")  # "user" | "admin"
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
