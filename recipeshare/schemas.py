from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Upper bound of the integer column
MAX_COOKING_TIME = 2**31 - 1


class RecipeBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(
        ..., json_schema_extra={"example": "Simple Tomato Pasta"}
    )
    ingredients: str = Field(
        ...,
        json_schema_extra={
            "example": "pasta, tomato sauce, garlic, olive oil, salt"
        },
    )
    steps: str = Field(
        ...,
        json_schema_extra={
            "example": "Boil pasta. Heat sauce. Combine and serve."
        },
    )
    cooking_time_minutes: int = Field(
        ...,
        strict=True,
        ge=1,
        le=MAX_COOKING_TIME,
        json_schema_extra={"example": 20},
    )
    dietary_tags: Optional[str] = Field(
        default=None, json_schema_extra={"example": "vegetarian"}
    )

    @field_validator("title", "ingredients", "steps")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


class RecipeIn(RecipeBase):
    """Request body for create and update.

    ``id`` is ignored on create and must match the URL on update.
    """

    id: Optional[int] = None


class Recipe(RecipeBase):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int


class FieldError(BaseModel):
    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    detail: str
    errors: List[FieldError]
