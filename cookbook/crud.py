import logging
import os
import re
import tempfile
from pathlib import Path
from typing import List, Optional

from .errors import NotFound, StorageError
from .schemas import Recipe
from .serializer import from_document, to_document

logger = logging.getLogger(__name__)

DOCUMENT_SUFFIX = ".txt"
_NOT_KEY_CHARS = re.compile(r"[^A-Za-zÄÖÜäöüß0-9\- ]")


def title_key(title: str) -> str:
    """Sanitize ``title`` into a document key (the file name stem)."""
    key = " ".join(_NOT_KEY_CHARS.sub("", title).split())
    if not key:
        raise ValueError(f"title {title!r} has no usable characters")
    return key


def _document_file(data_dir: Path, key: str) -> Path:
    return Path(data_dir) / (key + DOCUMENT_SUFFIX)


def document_path(data_dir: Path, title: str) -> Path:
    return _document_file(data_dir, title_key(title))


def list_titles(data_dir: Path) -> List[str]:
    try:
        names = sorted(os.listdir(data_dir))
    except OSError as e:
        logger.error("Could not list %s (%s)", data_dir, e)
        return []
    return [
        n[: -len(DOCUMENT_SUFFIX)]
        for n in names
        if n.endswith(DOCUMENT_SUFFIX) and not n.startswith(".")
    ]


def get_recipe(data_dir: Path, title: str) -> Recipe:
    path = document_path(data_dir, title)
    try:
        data = path.read_bytes()
    except FileNotFoundError as e:
        logger.info("No recipe stored at %s", path)
        raise NotFound(title) from e
    except OSError as e:
        logger.error("Could not read file %s (%s)", path, e)
        raise StorageError(f"could not read {path}: {e}") from e
    return from_document(data, title)


def _write_atomic(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # temp file starts with "." so list_titles never shows it
    fd, tmp = tempfile.mkstemp(
        dir=path.parent, prefix="." + path.stem, suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        raise


def save_recipe(
    data_dir: Path, recipe: Recipe, previous_title: Optional[str] = None
) -> str:
    """Store ``recipe`` and return its key.

    When ``previous_title`` maps to a different key the old document is
    removed, but only once the new one is in place.
    """
    key = title_key(recipe.title)
    path = _document_file(data_dir, key)
    data = to_document(recipe)
    try:
        _write_atomic(path, data)
    except OSError as e:
        logger.error("Could not write file %s (%s)", path, e)
        raise StorageError(f"could not write {path}: {e}") from e
    logger.info("Saved recipe %s to %s", recipe.title, path)

    if previous_title is None:
        return key
    try:
        previous_key = title_key(previous_title)
    except ValueError:
        return key
    if previous_key != key:
        old = _document_file(data_dir, previous_key)
        # case-insensitive file systems map both keys to one file
        if old.exists() and old.samefile(path):
            return key
        try:
            old.unlink()
        except OSError as e:
            logger.warning("Problem removing the file: %s (%s)", old, e)
        else:
            logger.info("Renamed recipe %s to %s", previous_key, key)
    return key


def delete_recipe(data_dir: Path, title: str) -> bool:
    path = document_path(data_dir, title)
    try:
        path.unlink()
    except FileNotFoundError:
        logger.warning("Problem removing the file: %s (not found)", path)
        return False
    except OSError as e:
        logger.error("Problem removing the file: %s (%s)", path, e)
        raise StorageError(f"could not remove {path}: {e}") from e
    logger.info("Deleted recipe %s", title)
    return True
