"""Storage providers for recipes.

The HTTP layer only talks to a `RecipeStore`. `SqlAlchemyRecipeStore` is
what the app uses; `InMemoryRecipeStore` keeps records in a dict and is
handy in tests.
"""

import abc
import functools
import logging
import threading
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud, schemas
from .errors import RecipeNotFound, StorageFailure

logger = logging.getLogger(__name__)


class RecipeStore(abc.ABC):
    @abc.abstractmethod
    def list(self, tag: Optional[str] = None) -> List[schemas.Recipe]:
        """Return all recipes, or those whose tags contain ``tag``."""

    @abc.abstractmethod
    def get(self, recipe_id: int) -> schemas.Recipe:
        """Return one recipe or raise `RecipeNotFound`."""

    @abc.abstractmethod
    def create(self, recipe: schemas.RecipeBase) -> schemas.Recipe:
        """Persist ``recipe`` under a new id and return it."""

    @abc.abstractmethod
    def update(self, recipe_id: int, recipe: schemas.RecipeBase) -> schemas.Recipe:
        """Overwrite every field but the id, or raise `RecipeNotFound`."""

    @abc.abstractmethod
    def remove(self, recipe_id: int) -> None:
        """Delete the recipe or raise `RecipeNotFound`."""

    @abc.abstractmethod
    def exists(self, recipe_id: int) -> bool:
        ...


def _storage_call(method):
    """Roll back and re-raise database errors as `StorageFailure`."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Storage error in %s", method.__name__)
            raise StorageFailure(str(exc)) from exc

    return wrapper


class SqlAlchemyRecipeStore(RecipeStore):
    def __init__(self, db: Session):
        self.db = db

    @_storage_call
    def list(self, tag=None):
        return [
            schemas.Recipe.model_validate(r)
            for r in crud.get_recipes(self.db, tag=tag)
        ]

    @_storage_call
    def get(self, recipe_id):
        r = crud.get_recipe(self.db, recipe_id)
        if r is None:
            raise RecipeNotFound(recipe_id)
        return schemas.Recipe.model_validate(r)

    @_storage_call
    def create(self, recipe):
        return schemas.Recipe.model_validate(crud.create_recipe(self.db, recipe))

    @_storage_call
    def update(self, recipe_id, recipe):
        r = crud.update_recipe(self.db, recipe_id, recipe)
        if r is None:
            raise RecipeNotFound(recipe_id)
        return schemas.Recipe.model_validate(r)

    @_storage_call
    def remove(self, recipe_id):
        if not crud.delete_recipe(self.db, recipe_id):
            raise RecipeNotFound(recipe_id)

    @_storage_call
    def exists(self, recipe_id):
        return crud.recipe_exists(self.db, recipe_id)


class InMemoryRecipeStore(RecipeStore):
    def __init__(self):
        self._records: Dict[int, schemas.Recipe] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def list(self, tag=None):
        with self._lock:
            records = [self._records[k] for k in sorted(self._records)]
        if not tag or not tag.strip():
            return records
        return [r for r in records if r.dietary_tags and tag in r.dietary_tags]

    def get(self, recipe_id):
        with self._lock:
            try:
                return self._records[recipe_id]
            except KeyError:
                raise RecipeNotFound(recipe_id) from None

    def create(self, recipe):
        with self._lock:
            stored = schemas.Recipe(
                id=self._next_id,
                **recipe.model_dump(include=_FIELDS),
            )
            self._records[stored.id] = stored
            self._next_id += 1
        return stored

    def update(self, recipe_id, recipe):
        with self._lock:
            if recipe_id not in self._records:
                raise RecipeNotFound(recipe_id)
            stored = schemas.Recipe(
                id=recipe_id,
                **recipe.model_dump(include=_FIELDS),
            )
            self._records[recipe_id] = stored
        return stored

    def remove(self, recipe_id):
        with self._lock:
            if self._records.pop(recipe_id, None) is None:
                raise RecipeNotFound(recipe_id)

    def exists(self, recipe_id):
        with self._lock:
            return recipe_id in self._records


# Attributes copied on create/update; the id always comes from the store
_FIELDS = set(schemas.RecipeBase.model_fields)
