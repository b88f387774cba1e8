"""Tag search over the document directory.

Documents are matched on their raw content, so ``#Haupt`` also finds
recipes tagged ``#Hauptspeise``.
"""

import logging
from pathlib import Path
from typing import Iterable, List

from .crud import DOCUMENT_SUFFIX
from .errors import StorageError
from .schemas import normalize_tag

logger = logging.getLogger(__name__)


def _documents(directory: Path):
    if not Path(directory).is_dir():
        raise StorageError(f"{directory} is not a directory")
    try:
        paths = sorted(Path(directory).glob("*" + DOCUMENT_SUFFIX))
    except OSError as e:
        raise StorageError(f"could not list {directory}: {e}") from e
    for path in paths:
        if path.name.startswith("."):
            continue
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping unreadable document %s (%s)", path, e)
            continue
        yield path.stem, content


def search(directory: Path, tag: str) -> List[str]:
    """Return the keys of all documents containing ``tag``."""
    return [key for key, content in _documents(directory) if tag in content]


def search_all(directory: Path, tags: Iterable[str]) -> List[str]:
    """Return the keys of documents containing every tag in ``tags``."""
    tags = [t for t in (normalize_tag(tag) for tag in tags) if t]
    if not tags:
        return []
    matches = []
    for key, content in _documents(directory):
        if all(tag in content for tag in tags):
            matches.append(key)
    logger.debug("Search for %s matched %d document(s)", tags, len(matches))
    return matches
