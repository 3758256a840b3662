import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from recipebox.main import app

def main(out: str = "openapi.json"):
    schema = app.openapi()
    with open(out, "w", encoding="utf-8") as f:
        json.dump(schema, f, ensure_ascii=False, indent=2)
    print(f"✅ {out} escrito en el repo raíz")

if __name__ == "__main__":
    main(*sys.argv[1:2])
