import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.convertors import Convertor, register_url_convertor

from . import schemas
from .config import get_settings
from .db import SessionLocal, init_db
from .errors import (
    IdMismatch,
    RecipeNotFound,
    StorageFailure,
    field_errors,
)
from .seed import seed_recipes
from .storage import RecipeStore, SqlAlchemyRecipeStore

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tests bring their own database
    if not settings.is_testing:
        init_db()
        if settings.seed_on_startup:
            with SessionLocal() as db:
                seed_recipes(db)
    logger.info("RecipeShare API started (environment=%s)", settings.environment)
    yield


app = FastAPI(
    title="RecipeShare API",
    description="Create, list, update and delete recipes.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)) -> RecipeStore:
    return SqlAlchemyRecipeStore(db)


class RecipeIdConvertor(Convertor):
    """Path ids in 0..2**31-1, the range of the id column.

    Anything longer or larger does not match the route and ends in 404.
    """

    regex = (
        "(?:[0-9]{1,9}|1[0-9]{9}|20[0-9]{8}|21[0-3][0-9]{7}|214[0-6][0-9]{6}"
        "|2147[0-3][0-9]{5}|21474[0-7][0-9]{4}|214748[0-2][0-9]{3}"
        "|2147483[0-5][0-9]{2}|21474836[0-3][0-9]|214748364[0-7])"
    )

    def convert(self, value: str) -> int:
        return int(value)

    def to_string(self, value: int) -> str:
        value = int(value)
        if not 0 <= value <= MAX_RECIPE_ID:
            raise ValueError(f"Recipe id out of range: {value}")
        return str(value)


MAX_RECIPE_ID = 2**31 - 1

register_url_convertor("recipe_id", RecipeIdConvertor())

router = APIRouter(prefix="/api/recipes", tags=["recipes"])

NOT_FOUND = {404: {"description": "Recipe not found"}}
BAD_REQUEST = {400: {"model": schemas.ValidationErrorResponse}}


@router.get("", response_model=List[schemas.Recipe])
def list_recipes(tag: Optional[str] = None, store: RecipeStore = Depends(get_store)):
    """Return all recipes, optionally only those whose tags contain ``tag``."""
    return store.list(tag=tag)


@router.get("/{recipe_id:recipe_id}", response_model=schemas.Recipe, responses=NOT_FOUND)
def get_recipe(recipe_id: int, store: RecipeStore = Depends(get_store)):
    return store.get(recipe_id)


@router.post(
    "",
    response_model=schemas.Recipe,
    status_code=201,
    responses=BAD_REQUEST,
)
def create_recipe(
    recipe: schemas.RecipeIn,
    request: Request,
    response: Response,
    store: RecipeStore = Depends(get_store),
):
    """Create a recipe. The server assigns the id; any id sent is ignored."""
    created = store.create(recipe)
    response.headers["Location"] = str(
        request.url_for("get_recipe", recipe_id=created.id)
    )
    logger.info("Created recipe %d (%r)", created.id, created.title)
    return created


@router.put(
    "/{recipe_id:recipe_id}",
    status_code=204,
    response_class=Response,
    responses={**BAD_REQUEST, **NOT_FOUND},
)
def update_recipe(
    recipe_id: int,
    recipe: schemas.RecipeIn,
    store: RecipeStore = Depends(get_store),
):
    """Replace every field of an existing recipe. Body id must match the URL."""
    if recipe.id != recipe_id:
        raise IdMismatch(recipe_id, recipe.id)
    if not store.exists(recipe_id):
        raise RecipeNotFound(recipe_id)
    store.update(recipe_id, recipe)
    logger.info("Updated recipe %d", recipe_id)
    return Response(status_code=204)


@router.delete(
    "/{recipe_id:recipe_id}",
    status_code=204,
    response_class=Response,
    responses=NOT_FOUND,
)
def delete_recipe(recipe_id: int, store: RecipeStore = Depends(get_store)):
    store.remove(recipe_id)
    logger.info("Deleted recipe %d", recipe_id)
    return Response(status_code=204)


app.include_router(router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "detail": "One or more validation errors occurred.",
            "errors": field_errors(exc.errors()),
        },
    )


@app.exception_handler(RecipeNotFound)
async def not_found_handler(request: Request, exc: RecipeNotFound):
    logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(IdMismatch)
async def id_mismatch_handler(request: Request, exc: IdMismatch):
    logger.warning(
        "ID mismatch on %s: path=%s body=%s", request.url.path, exc.path_id, exc.body_id
    )
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(StorageFailure)
async def storage_failure_handler(request: Request, exc: StorageFailure):
    return JSONResponse(
        status_code=500, content={"detail": "A storage error occurred."}
    )
