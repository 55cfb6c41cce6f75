import sys
from pathlib import Path

from recipeshare.db import init_db, SessionLocal
from recipeshare.errors import ValidationError
from recipeshare.seed import import_recipes, load_recipes


def main(path=None):
    init_db()
    p = Path(path) if path else Path(__file__).resolve().parents[1] / 'data' / 'recipes.json'
    if not p.exists():
        print(f'{p} not found')
        return 1
    try:
        recipes = load_recipes(p)
    except ValidationError as e:
        for err in e.errors:
            print(f"{err['field']}: {err['message']}")
        return 1
    with SessionLocal() as db:
        added = import_recipes(db, recipes)
    print(f'Imported {added} recipes')
    return 0


if __name__ == '__main__':
    sys.exit(main(*sys.argv[1:2]))
