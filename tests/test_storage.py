import pytest
from sqlalchemy.exc import OperationalError

from recipeshare import models
from recipeshare.errors import RecipeNotFound, StorageFailure
from recipeshare.schemas import RecipeIn
from recipeshare.storage import InMemoryRecipeStore, SqlAlchemyRecipeStore

from conftest import engine


def make_recipe(**overrides):
    fields = {
        "title": "Shakshuka",
        "ingredients": "eggs, tomatoes, peppers, onion, cumin",
        "steps": "Simmer the sauce, crack in the eggs, cover until set.",
        "cooking_time_minutes": 25,
        "dietary_tags": "vegetarian,gluten-free",
    }
    fields.update(overrides)
    return RecipeIn(**fields)


@pytest.fixture(params=["sqlalchemy", "memory"])
def store(request):
    if request.param == "sqlalchemy":
        return SqlAlchemyRecipeStore(request.getfixturevalue("db_session"))
    return request.getfixturevalue("memory_store")


def test_list_is_ordered_and_stable(store):
    first = store.list()
    assert [r.id for r in first] == [1, 2, 3]
    assert store.list() == first


def test_create_assigns_fresh_ids(store):
    a = store.create(make_recipe())
    b = store.create(make_recipe(id=1, title="Second"))
    assert a.id == 4
    assert b.id == 5
    assert store.get(5).title == "Second"
    assert store.get(1).title == "Simple Tomato Pasta"


def test_get_missing(store):
    with pytest.raises(RecipeNotFound) as info:
        store.get(404)
    assert info.value.recipe_id == 404


def test_exists(store):
    assert store.exists(1)
    assert not store.exists(99)


def test_update_overwrites_everything_but_id(store):
    updated = store.update(1, make_recipe(id=1, dietary_tags=None))
    assert updated.id == 1
    got = store.get(1)
    assert got.title == "Shakshuka"
    assert got.cooking_time_minutes == 25
    assert got.dietary_tags is None


def test_update_missing(store):
    with pytest.raises(RecipeNotFound):
        store.update(99, make_recipe(id=99))
    assert len(store.list()) == 3


def test_remove(store):
    store.remove(2)
    assert not store.exists(2)
    assert [r.id for r in store.list()] == [1, 3]
    with pytest.raises(RecipeNotFound):
        store.remove(2)


def test_create_after_remove_gets_unused_id(store):
    store.remove(3)
    created = store.create(make_recipe())
    assert created.id not in (1, 2)
    assert [r.id for r in store.list()] == [1, 2, created.id]


def test_tag_filter(store):
    store.create(make_recipe(title="Tofu Stir Fry", dietary_tags="vegan"))
    store.create(make_recipe(title="Plain", dietary_tags=None))
    assert [r.title for r in store.list(tag="vegan")] == ["Tofu Stir Fry"]
    assert [r.title for r in store.list(tag="gluten")] == ["Greek Salad"]
    assert store.list(tag="Vegetarian") == []
    assert len(store.list(tag="")) == 5


def test_sql_errors_become_storage_failures(db_session):
    store = SqlAlchemyRecipeStore(db_session)
    models.Base.metadata.drop_all(bind=engine)
    with pytest.raises(StorageFailure) as info:
        store.list()
    assert isinstance(info.value.__cause__, OperationalError)
