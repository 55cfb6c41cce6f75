import json
import logging
from pathlib import Path
from typing import List

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from . import crud, models, schemas
from .errors import ValidationError, field_errors

logger = logging.getLogger(__name__)

SEED_RECIPES = [
    {
        "title": "Simple Tomato Pasta",
        "ingredients": "pasta, tomato sauce, garlic, olive oil, salt",
        "steps": "Boil pasta. Heat sauce. Combine and serve.",
        "cookingTimeMinutes": 20,
        "dietaryTags": "vegetarian",
    },
    {
        "title": "Greek Salad",
        "ingredients": "cucumber, tomato, red onion, feta, olive oil, lemon",
        "steps": "Chop ingredients, toss with dressing.",
        "cookingTimeMinutes": 10,
        "dietaryTags": "vegetarian,gluten-free",
    },
    {
        "title": "Avocado Toast",
        "ingredients": "bread, avocado, lemon, salt, pepper",
        "steps": "Toast bread, mash avocado, season, spread on toast.",
        "cookingTimeMinutes": 5,
        "dietaryTags": "vegetarian",
    },
]


def parse_recipes(data) -> List[schemas.RecipeIn]:
    """Validate a list of recipe payloads.

    Raises:
        ValidationError: with the offending field prefixed by its index.
    """
    recipes = []
    for i, item in enumerate(data):
        try:
            recipes.append(schemas.RecipeIn.model_validate(item))
        except PydanticValidationError as exc:
            errors = field_errors(exc.errors())
            for err in errors:
                err["field"] = f"[{i}].{err['field']}"
            raise ValidationError(errors) from exc
    return recipes


def load_recipes(path) -> List[schemas.RecipeIn]:
    """Load recipes from a JSON file holding a list of recipe objects.

    Args:
        path (str or Path): Path to the JSON file.

    Returns:
        list: validated recipes; empty if the file does not exist.
    """
    p = Path(path)
    if not p.exists():
        return []
    with p.open("r", encoding="utf-8") as f:
        return parse_recipes(json.load(f))


def seed_recipes(db: Session, recipes=None) -> int:
    """Insert the sample recipes if the table is empty.

    Returns the number of rows added.
    """
    if db.query(models.Recipe.id).first() is not None:
        return 0
    items = parse_recipes(SEED_RECIPES if recipes is None else recipes)
    for recipe in items:
        crud.create_recipe(db, recipe)
    logger.info("Seeded %d recipes", len(items))
    return len(items)


def import_recipes(db: Session, recipes) -> int:
    """Insert recipes whose title is not stored yet; return how many."""
    added = 0
    for recipe in recipes:
        if crud.get_recipe_by_title(db, recipe.title):
            logger.debug("Skipping existing recipe %r", recipe.title)
            continue
        crud.create_recipe(db, recipe)
        added += 1
    return added
