import logging

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from .errors import DecodeError, EncodeError
from .schemas import Recipe

logger = logging.getLogger(__name__)


def to_document(recipe: Recipe) -> bytes:
    """Encode ``recipe`` as a UTF-8 JSON document.

    Non-ASCII text is written unescaped so tag search can match the raw
    file content.
    """
    try:
        return recipe.model_dump_json(by_alias=True).encode("utf-8")
    except PydanticSerializationError as e:
        logger.error("Could not encode recipe %s to JSON (%s)", recipe.title, e)
        raise EncodeError(f"could not encode recipe {recipe.title!r}: {e}") from e


def from_document(data: bytes, name: str = "") -> Recipe:
    """Decode a document written by :func:`to_document`.

    ``name`` only identifies the document in log and error messages.
    """
    try:
        return Recipe.model_validate_json(data)
    except ValidationError as e:
        logger.error("Could not decode JSON to recipe %s (%s)", name, e)
        raise DecodeError(f"could not decode recipe {name!r}: {e}") from e


def render(recipe: Recipe) -> str:
    return str(recipe)
