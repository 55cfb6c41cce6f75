from typing import Any, Dict, Iterable, List

# Location prefixes FastAPI puts in front of the offending field name
_LOCATION_SOURCES = ("body", "query", "path", "header", "cookie")


class RecipeShareError(Exception):
    """Base class for errors surfaced by the recipes API."""


class RecipeNotFound(RecipeShareError):
    def __init__(self, recipe_id: int):
        super().__init__(f"Recipe {recipe_id} not found")
        self.recipe_id = recipe_id


class IdMismatch(RecipeShareError):
    def __init__(self, path_id: int, body_id):
        super().__init__("ID mismatch.")
        self.path_id = path_id
        self.body_id = body_id


class StorageFailure(RecipeShareError):
    """The backing store failed; the cause is chained."""


class ValidationError(RecipeShareError):
    def __init__(self, errors: List[Dict[str, str]]):
        super().__init__("One or more validation errors occurred.")
        self.errors = errors


def field_errors(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic error dicts into ``{"field", "message"}`` pairs.

    The field is the dotted location without the request part it came from,
    so ``("body", "title")`` becomes ``"title"``. Errors about the body as a
    whole (missing or malformed JSON) are reported under ``"body"``.
    """
    result = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if err.get("type") == "json_invalid":
            loc = []
        elif loc and loc[0] in _LOCATION_SOURCES and len(loc) > 1:
            loc = loc[1:]
        field = ".".join(loc) or "body"
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        result.append({"field": field, "message": message})
    return result
