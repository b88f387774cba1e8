from typing import List

from .ingredients import parse_ingredients
from .schemas import Recipe, normalize_tag


def split_steps(text: str) -> List[str]:
    steps = []
    for line in text.split("\n"):
        line = line.strip("\r\n")
        if line:
            steps.append(line)
    return steps


def split_tags(text: str) -> List[str]:
    return [normalize_tag(t) for t in text.split()]


def recipe_from_form(
    title: str,
    ingredients: str = "",
    steps: str = "",
    image: str = "",
    source: str = "",
    tags: str = "",
) -> Recipe:
    """Build a Recipe from the raw text fields of the edit form.

    Raises ParseError when an ingredient line is malformed.
    """
    return Recipe(
        title=title.strip(),
        ingredients=parse_ingredients(ingredients),
        steps=split_steps(steps),
        image=image.strip(),
        source=source.strip(),
        tags=split_tags(tags),
    )
