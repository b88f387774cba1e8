"""Ingredient-line parser.

Turns free text such as::

    70g Parmesan
    1 Knoblauchzehe
    Salz

into structured :class:`~cookbook.schemas.Ingredient` records. A line is
read left to right as ``quantity unit " " name``: the quantity is one or
more digits with an optional ``.``/``,`` fraction, the unit is the run of
ASCII letters glued to it, and exactly one space separates both from the
name. Lines without that leading group are names only.
"""

import math
import string
from typing import List, Optional, Tuple

from .errors import ParseError
from .schemas import Ingredient

DIGITS = frozenset(string.digits)
UNIT_CHARS = frozenset(string.ascii_letters)
NAME_CHARS = frozenset(string.ascii_letters + string.digits + "äöüÄÖÜß()- ")
DECIMAL_SEPARATORS = ".,"


def _skip(line: str, pos: int, chars) -> int:
    while pos < len(line) and line[pos] in chars:
        pos += 1
    return pos


def _scan_quantity(line: str, start: int = 0) -> Optional[Tuple[str, str, int]]:
    """Scan the ``quantity unit " "`` group of ``line`` at ``start``.

    Returns ``(number, unit, name_start)`` or None when there is no
    complete group at ``start``.
    """
    pos = _skip(line, start, DIGITS)
    if pos == start:
        return None
    if pos < len(line) and line[pos] in DECIMAL_SEPARATORS:
        fraction_end = _skip(line, pos + 1, DIGITS)
        if fraction_end > pos + 1:
            pos = fraction_end
    number = line[start:pos]
    unit_end = _skip(line, pos, UNIT_CHARS)
    if unit_end >= len(line) or line[unit_end] != " ":
        return None
    return number, line[pos:unit_end], unit_end + 1


def parse_line(line: str, lineno: int = 1) -> Ingredient:
    """Parse a single non-blank ingredient line."""
    # leading spaces are never part of the quantity or the name
    indent = len(line) - len(line.lstrip(" "))
    quantity = _scan_quantity(line, indent)
    if quantity is None:
        amount, unit = 0.0, ""
        start = indent
    else:
        number, unit, start = quantity
        amount = float(number.replace(",", ".", 1))
        if not math.isfinite(amount):
            raise ParseError(lineno, indent + 1, line, "a finite quantity")
        if amount == 0:
            unit = ""

    name = line[start:]
    if not name:
        raise ParseError(lineno, start + 1, line, "ingredient name")
    for offset, char in enumerate(name):
        if char not in NAME_CHARS:
            raise ParseError(
                lineno,
                start + offset + 1,
                line,
                "letter, digit, space, hyphen or parenthesis",
            )
    return Ingredient(name=name, amount=amount, unit=unit)


def parse_ingredients(text: str) -> List[Ingredient]:
    """Parse one ingredient per line, skipping blank lines.

    Raises:
        ParseError: for the first line that does not match; nothing is
            returned for the lines before it.
    """
    ingredients = []
    for lineno, raw in enumerate(text.split("\n"), start=1):
        line = raw.strip("\r\n")
        if not line.strip():
            continue
        ingredients.append(parse_line(line, lineno))
    return ingredients
