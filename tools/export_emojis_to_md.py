#!/usr/bin/env python3
from __future__ import annotations
import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from recipebox.services.emoji import INGREDIENT_EMOJIS, DEFAULT_EMOJI

TEMPLATE = """---
title: Emojis de ingredientes por categoría
lang: fr
tags: [ingredients, emojis]
---

> **Nota:** se busca primero la clave exacta y luego la clave más larga contenida en el nombre.
> Sin coincidencia: {default}

{body}
"""

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--out", default="docs/ingredient_emojis.md")
    args = ap.parse_args()

    lines = []
    for cat, mapping in INGREDIENT_EMOJIS:
        lines.append(f"## {cat}\n")
        for key in sorted(mapping):
            lines.append(f"- {mapping[key]} **{key}**")
        lines.append("")

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(TEMPLATE.format(default=DEFAULT_EMOJI, body="\n".join(lines).strip()), encoding="utf-8")
    print(f"Escrito {out}")

if __name__ == "__main__":
    main()
