from typing import List, Dict
from fastapi import APIRouter, Body
from ..services.emoji import INGREDIENT_EMOJIS, classify_many

router = APIRouter(prefix="/ingredients", tags=["ingredients"])

@router.get("/categories", response_model=List[str])
def list_categories():
    return [cat for cat, _ in INGREDIENT_EMOJIS]

@router.post("/emoji", response_model=Dict[str, str], summary="Emoji para cada ingrediente")
def emoji_endpoint(names: List[str] = Body(..., examples=[["Poulet", "pomme de terre"]])):
    return classify_many(names)
