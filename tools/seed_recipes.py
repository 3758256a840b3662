#!/usr/bin/env python3
from __future__ import annotations
import argparse
import json
from pathlib import Path
from typing import Any, Dict, List
import sys

# Asegura que el repo raíz está en sys.path aunque no se exporte PYTHONPATH=.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sqlmodel import Session

from recipebox.db import engine, init_db
from recipebox.routes.auth import get_or_create_profile
from recipebox.schemas import RecipeIn
from recipebox.services.recipes import create_recipe
from recipebox.services.session import SessionSnapshot


def load_items(path: Path) -> List[Dict[str, Any]]:
    """
    JSON con una receta o una lista de recetas (mismo formato que POST /recipes):
    {"title": ..., "ingredients": [{"quantity": "2", "unit": "pièce", "ingredient": "Poulet"}], ...}
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    return data if isinstance(data, list) else [data]


def main():
    ap = argparse.ArgumentParser(description="Carga recetas desde JSON usando los mismos servicios que la API")
    ap.add_argument("path", type=Path)
    ap.add_argument("--owner", required=True, help="Email del dueño de las recetas")
    ap.add_argument("--publish", action="store_true", help="Publicar en lugar de dejar como borrador")
    args = ap.parse_args()

    init_db()
    items = load_items(args.path)
    created = 0
    with Session(engine, expire_on_commit=False) as session:
        prof = get_or_create_profile(session, args.owner)
        owner = SessionSnapshot(user_id=prof.id, email=prof.email)
        for raw in items:
            if args.publish:
                raw = raw | {"status": "published"}
            recipe = create_recipe(session, RecipeIn.model_validate(raw), owner)
            created += 1
            print(f"  #{recipe.id} {recipe.title} ({len(recipe.ingredients)} ingredientes, tags={recipe.tags})")
    print(f"✅ {created} recetas cargadas para {args.owner}")

if __name__ == "__main__":
    main()
