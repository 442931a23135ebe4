"""
Level specifier parsing.

A level is either an explicit target size (positive integer) or the
"Automatic" keyword. Clients send integers as JSON numbers or as numeric
strings, so everything is normalized to one canonical string form:

    1000, "1000", " 1000 "   → "1000"
    "Automatic", "automatic" → "Automatic"

Duplicate detection runs on the canonical form, so [1000, "1000"] is a
duplicate.
"""

from typing import Iterable, Union

from models.enums import AUTOMATIC_LEVEL
from models.errors import ValidationError

LevelSpec = Union[int, str]


def normalize_level(level: LevelSpec) -> str:
    """Return the canonical form of a level. Raises ValueError if malformed."""
    # bool is an int subclass; True is not a target size
    if isinstance(level, bool):
        raise ValueError(f"Invalid level: {level!r}")

    if isinstance(level, int):
        value = level
    elif isinstance(level, str):
        text = level.strip()
        if text.lower() == AUTOMATIC_LEVEL.lower():
            return AUTOMATIC_LEVEL
        if not text.isdigit():
            raise ValueError(f"Invalid level: {level!r}")
        value = int(text)
    else:
        raise ValueError(f"Invalid level: {level!r}")

    if value < 1:
        raise ValueError(f"Level must be a positive integer, got {value}")
    return str(value)


def find_duplicates(levels: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    duplicates: list[str] = []
    for level in levels:
        if level in seen and level not in duplicates:
            duplicates.append(level)
        seen.add(level)
    return duplicates


def normalize_levels(levels: Iterable[LevelSpec], field: str = "levels") -> list[str]:
    """
    Normalize a whole level list, collecting every problem before raising.

    Returns the canonical list (order preserved). Raises ValidationError
    listing malformed entries and duplicates. Emptiness is NOT checked here:
    the caller decides whether an empty list means "use defaults" or is an error.
    """
    errors = []
    normalized = []
    for index, level in enumerate(levels):
        try:
            normalized.append(normalize_level(level))
        except ValueError as e:
            errors.append({"field": f"{field}[{index}]", "message": str(e)})

    for duplicate in find_duplicates(normalized):
        errors.append({"field": field, "message": f"Duplicate level: {duplicate}"})

    if errors:
        raise ValidationError(errors, f"Invalid {field}")
    return normalized
