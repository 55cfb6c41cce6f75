from typing import Optional

from sqlalchemy.orm import Session
from . import models, schemas


def get_recipe(db: Session, recipe_id: int):
    return db.get(models.Recipe, recipe_id)


def get_recipe_by_title(db: Session, title: str):
    return db.query(models.Recipe).filter(models.Recipe.title == title).first()


def get_recipes(db: Session, tag: Optional[str] = None):
    query = db.query(models.Recipe)
    if not tag or not tag.strip():
        return query.order_by(models.Recipe.id).all()
    query = query.filter(
        models.Recipe.dietary_tags.isnot(None),
        models.Recipe.dietary_tags.contains(tag, autoescape=True),
    )
    # LIKE ignores case on SQLite and MySQL; containment must not
    return [
        r for r in query.order_by(models.Recipe.id).all()
        if tag in r.dietary_tags
    ]


def recipe_exists(db: Session, recipe_id: int) -> bool:
    return (
        db.query(models.Recipe.id)
        .filter(models.Recipe.id == recipe_id)
        .first()
        is not None
    )


def create_recipe(db: Session, recipe: schemas.RecipeBase):
    db_recipe = models.Recipe(
        title=recipe.title,
        ingredients=recipe.ingredients,
        steps=recipe.steps,
        cooking_time_minutes=recipe.cooking_time_minutes,
        dietary_tags=recipe.dietary_tags,
    )
    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    return db_recipe


def update_recipe(db: Session, recipe_id: int, recipe: schemas.RecipeBase):
    db_recipe = get_recipe(db, recipe_id)
    if not db_recipe:
        return None
    db_recipe.title = recipe.title
    db_recipe.ingredients = recipe.ingredients
    db_recipe.steps = recipe.steps
    db_recipe.cooking_time_minutes = recipe.cooking_time_minutes
    db_recipe.dietary_tags = recipe.dietary_tags
    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    return db_recipe


def delete_recipe(db: Session, recipe_id: int):
    db_recipe = get_recipe(db, recipe_id)
    if not db_recipe:
        return False
    db.delete(db_recipe)
    db.commit()
    return True
