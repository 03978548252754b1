"""
Dietary preference and allergy vocabularies.

Dietary preferences come from a fixed palette and are validated as
``DietaryPreference`` members at the API boundary.  Allergies are either one
of the common ``KnownAllergy`` values or a ``CustomAllergy`` holding whatever
the user typed in.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union

logger = logging.getLogger(__name__)


class DietaryPreference(str, Enum):
    vegetarian = "vegetarian"
    vegan = "vegan"
    pescatarian = "pescatarian"
    gluten_free = "gluten-free"
    dairy_free = "dairy-free"
    nut_free = "nut-free"
    keto = "keto"
    paleo = "paleo"
    low_carb = "low-carb"


class KnownAllergy(str, Enum):
    peanuts = "peanuts"
    tree_nuts = "tree nuts"
    dairy = "dairy"
    eggs = "eggs"
    soy = "soy"
    wheat = "wheat"
    fish = "fish"
    shellfish = "shellfish"
    sesame = "sesame"

    @property
    def term(self) -> str:
        return self.value


@dataclass(frozen=True)
class CustomAllergy:
    term: str


Allergy = Union[KnownAllergy, CustomAllergy]


def normalize_term(raw: str) -> str:
    return raw.strip().lower()


def parse_allergy(raw: str) -> Allergy:
    term = normalize_term(raw)
    try:
        return KnownAllergy(term)
    except ValueError:
        return CustomAllergy(term)


def parse_allergies(raw: Iterable[str] | None) -> list[Allergy]:
    """Parse stored or submitted allergy strings, dropping blanks and duplicates."""
    result: list[Allergy] = []
    for value in raw or []:
        if not isinstance(value, str) or not value.strip():
            continue
        allergy = parse_allergy(value)
        if allergy not in result:
            result.append(allergy)
    return result


def parse_dietary_preferences(raw: Iterable[str] | None) -> list[DietaryPreference]:
    """Lenient parse for values read back from the store.

    Unknown strings are skipped with a warning rather than failing the request;
    the HTTP layer rejects them on the way in.
    """
    result: list[DietaryPreference] = []
    for value in raw or []:
        if not isinstance(value, str) or not value.strip():
            continue
        try:
            pref = DietaryPreference(normalize_term(value))
        except ValueError:
            logger.warning("Ignoring unknown dietary preference %r", value)
            continue
        if pref not in result:
            result.append(pref)
    return result


def allergy_terms(allergies: Iterable[Allergy]) -> list[str]:
    return [a.term for a in allergies]
