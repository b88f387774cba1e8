import sys
from pathlib import Path

# Ensure project root is on sys.path so `cookbook` can be imported when tests are run
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))  # noqa: E402

import pytest
from pydantic import ValidationError

from cookbook.errors import DecodeError
from cookbook.schemas import Ingredient, Recipe
from cookbook.serializer import from_document, render, to_document


def chicken(**overrides):
    fields = dict(
        title="Chicken",
        ingredients=[
            Ingredient(name="Chicken", amount=1, unit="kg"),
            Ingredient(name="Salt", amount=1, unit="TL"),
            Ingredient(name="Honey", amount=4, unit="EL"),
            Ingredient(name="Peperoni", amount=1, unit="Piece"),
        ],
        steps=["1. Cook chicken.", "2. Eat chicken."],
        image="chicken.jpg",
        source="http://chicken.go/",
        tags=["Hühnchen", "Hauptspeise"],
    )
    fields.update(overrides)
    return Recipe(**fields)


@pytest.mark.parametrize(
    "ingredient, want",
    [
        (Ingredient(name="Chicken", amount=1, unit="kg"), "1kg Chicken"),
        (Ingredient(name="Banana", amount=0, unit=""), "Banana"),
        (Ingredient(name="Cinnamon", amount=1.5, unit="EL"), "1.5EL Cinnamon"),
        (Ingredient(name="Knoblauchzehe", amount=2), "2 Knoblauchzehe"),
        (Ingredient(name="Salz", amount=0.00001, unit="g"), "0.00001g Salz"),
        (Ingredient(name="Eier", amount=1e16), "10000000000000000 Eier"),
    ],
)
def test_ingredient_text(ingredient, want):
    assert str(ingredient) == want


def test_render_layout():
    want = (
        "Chicken\n\n1kg Chicken\n1TL Salt\n4EL Honey\n1Piece Peperoni\n\n"
        "1. Cook chicken.\n\n2. Eat chicken.\n\n#Hühnchen #Hauptspeise\n"
        "chicken.jpg\nhttp://chicken.go/"
    )
    assert render(chicken()) == want


def test_render_keeps_empty_lines():
    assert render(Recipe(title="Wasser")) == "Wasser\n\n\n\n\n"


def test_tags_are_normalized():
    r = Recipe(title="x", tags=[" Hühnchen", "#Hauptspeise", "  "])
    assert r.tags == ["#Hühnchen", "#Hauptspeise"]


def test_document_round_trip():
    r = chicken()
    back = from_document(to_document(r))
    assert back == r
    assert render(back) == render(r)


def test_round_trip_of_empty_recipe():
    r = Recipe(title="Leer")
    assert render(from_document(to_document(r))) == render(r)


def test_document_layout():
    doc = to_document(chicken(tags=["Hühnchen"]))
    assert doc.startswith(b'{"Title":"Chicken","Ingredients":[{"Name":"Chicken"')
    # written unescaped so tag search can find it in the raw file
    assert "#Hühnchen".encode("utf-8") in doc


def test_decode_document_with_null_lists():
    doc = (
        b'{"Title":"Chicken","Ingredients":[{"Name":"Chicken","Amount":1,'
        b'"Unit":"kg"}],"Steps":null,"Image":"","Source":"","Tags":null}'
    )
    r = from_document(doc)
    assert r.ingredients == [Ingredient(name="Chicken", amount=1, unit="kg")]
    assert r.steps == []
    assert r.tags == []


@pytest.mark.parametrize(
    "doc",
    [
        b"not json",
        b'{"Title":""}',
        b'{"Title":"x","Ingredients":[{"Name":"a","Amount":-1}]}',
        b'{"Ingredients":[]}',
        b'{"Title":"x","Ingredients":[{"Name":"a","Amount":1e999}]}',
    ],
)
def test_decode_errors(doc):
    with pytest.raises(DecodeError):
        from_document(doc, "broken")


@pytest.mark.parametrize("amount", [float("inf"), float("nan")])
def test_amount_must_be_finite(amount):
    with pytest.raises(ValidationError):
        Ingredient(name="Salz", amount=amount)
