import sys
from pathlib import Path

# Ensure project root is on sys.path so `cookbook` can be imported when tests are run
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))  # noqa: E402

import pytest

from cookbook import crud
from cookbook.errors import StorageError
from cookbook.schemas import Recipe
from cookbook.search import search, search_all


@pytest.fixture
def data_dir(tmp_path):
    crud.save_recipe(tmp_path, Recipe(title="Chicken", tags=["Hühnchen", "Hauptspeise"]))
    crud.save_recipe(tmp_path, Recipe(title="Pesto", tags=["Soße", "Vegetarisch"]))
    crud.save_recipe(tmp_path, Recipe(title="Risotto", tags=["Hauptspeise", "Vegetarisch"]))
    return tmp_path


def test_search_single_tag(data_dir):
    assert search(data_dir, "#Hauptspeise") == ["Chicken", "Risotto"]
    assert search(data_dir, "#Hühnchen") == ["Chicken"]


def test_search_matches_raw_content(data_dir):
    assert search(data_dir, "#Haupt") == ["Chicken", "Risotto"]


def test_search_all_intersects(data_dir):
    assert search_all(data_dir, ["Hauptspeise", "#Vegetarisch"]) == ["Risotto"]
    assert search_all(data_dir, ["Dessert"]) == []


def test_search_all_without_tags(data_dir):
    assert search_all(data_dir, ["", " "]) == []


def test_search_missing_directory(tmp_path):
    with pytest.raises(StorageError):
        search(tmp_path / "missing", "#Hauptspeise")
