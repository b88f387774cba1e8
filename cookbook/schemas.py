from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


def normalize_tag(tag: str) -> str:
    """Strip ``tag`` and make sure it starts with ``#``."""
    tag = tag.strip()
    if tag and not tag.startswith("#"):
        tag = "#" + tag
    return tag


def format_amount(amount: float) -> str:
    # shortest decimal digits, written out without an exponent
    text = format(Decimal(repr(float(amount))), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


class Ingredient(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(
        ..., alias="Name", json_schema_extra={"example": "Olivenöl"}
    )
    amount: float = Field(
        0,
        alias="Amount",
        ge=0,
        allow_inf_nan=False,
        json_schema_extra={"example": 100},
    )
    unit: str = Field("", alias="Unit", json_schema_extra={"example": "ml"})

    def __str__(self) -> str:
        if self.amount == 0:
            return self.name
        return f"{format_amount(self.amount)}{self.unit} {self.name}"


class Recipe(BaseModel):
    """A single recipe document.

    Field aliases are the keys used in stored documents; python names are
    accepted as well so forms and tests can build recipes directly.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(
        ...,
        alias="Title",
        min_length=1,
        json_schema_extra={"example": "Pesto Rosso"},
    )
    ingredients: List[Ingredient] = Field(
        default_factory=list, alias="Ingredients"
    )
    steps: List[str] = Field(
        default_factory=list,
        alias="Steps",
        json_schema_extra={
            "example": ["Alles in einen Mixer geben.", "Pürieren."]
        },
    )
    image: str = Field("", alias="Image")
    source: str = Field("", alias="Source")
    tags: List[str] = Field(
        default_factory=list,
        alias="Tags",
        json_schema_extra={"example": ["#Vegetarisch", "#Soße"]},
    )

    @field_validator("ingredients", "steps", "tags", mode="before")
    @classmethod
    def _null_is_empty(cls, value):
        # documents written by older versions store empty lists as null
        if value is None:
            return []
        return value

    @field_validator("image", "source", mode="before")
    @classmethod
    def _null_is_blank(cls, value):
        if value is None:
            return ""
        return value

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, tags: List[str]) -> List[str]:
        return [t for t in (normalize_tag(tag) for tag in tags) if t]

    def __str__(self) -> str:
        ingredients = "".join("\n" + str(i) for i in self.ingredients)
        steps = "".join("\n\n" + s for s in self.steps)
        tags = " ".join(self.tags).strip(" ")
        return (
            f"{self.title}\n{ingredients}{steps}\n\n"
            f"{tags}\n{self.image}\n{self.source}"
        )


class IngredientText(BaseModel):
    text: str = Field(
        "", json_schema_extra={"example": "70g Parmesan\n1 Knoblauchzehe"}
    )
