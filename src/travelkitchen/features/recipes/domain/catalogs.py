"""Option catalogs shown on the generation forms and used in prompts."""
from __future__ import annotations

from typing import Dict, Iterable, List, NamedTuple, Sequence, Tuple, Union


class Option(NamedTuple):
    id: str
    label: str


class TimeOption(NamedTuple):
    value: int
    label: str


EQUIPMENT_OPTIONS: Tuple[Option, ...] = (
    Option("hob", "Hob / Stovetop"),
    Option("microwave", "Microwave"),
    Option("oven", "Oven"),
    Option("kettle", "Kettle"),
    Option("rice_cooker", "Rice Cooker"),
    Option("toaster", "Toaster"),
)

LIMITATION_OPTIONS: Tuple[Option, ...] = (
    Option("one_pot", "Only one pot/pan"),
    Option("limited_knife", "Limited knife/cutting"),
    Option("no_fridge", "No fridge access"),
)

DIET_OPTIONS: Tuple[Option, ...] = (
    Option("vegetarian", "Vegetarian"),
    Option("vegan", "Vegan"),
    Option("halal", "Halal"),
    Option("kosher", "Kosher"),
)

ALLERGY_OPTIONS: Tuple[Option, ...] = (
    Option("nuts", "Nuts"),
    Option("dairy", "Dairy"),
    Option("gluten", "Gluten"),
    Option("seafood", "Seafood"),
    Option("eggs", "Eggs"),
    Option("soy", "Soy"),
)

TIME_OPTIONS: Tuple[TimeOption, ...] = (
    TimeOption(10, "10 min"),
    TimeOption(20, "20 min"),
    TimeOption(30, "30 min"),
    TimeOption(45, "45 min"),
)

PREFERENCE_OPTIONS: Tuple[Option, ...] = (
    Option("spicy", "Spicy"),
    Option("mild", "Mild"),
    Option("high_protein", "High Protein"),
    Option("comfort", "Comfort Food"),
    Option("fresh", "Fresh & Light"),
)

QUICK_STAPLES: Tuple[str, ...] = (
    "rice",
    "pasta",
    "eggs",
    "onion",
    "garlic",
    "canned beans",
    "olive oil",
    "salt",
    "pepper",
)


def label_for(catalog: Sequence[Option], option_id: str) -> str:
    """Display label for `option_id`; unknown ids are returned verbatim."""
    for opt in catalog:
        if opt.id == option_id:
            return opt.label
    return option_id


def labels_for(catalog: Sequence[Option], ids: Iterable[str]) -> List[str]:
    return [label_for(catalog, i) for i in ids]


def unavailable_options(catalog: Sequence[Option], ids: Iterable[str]) -> List[Option]:
    selected = set(ids)
    return [opt for opt in catalog if opt.id not in selected]


def catalogs_payload() -> Dict[str, List[Union[Dict[str, object], str]]]:
    return {
        "equipment": [o._asdict() for o in EQUIPMENT_OPTIONS],
        "limitations": [o._asdict() for o in LIMITATION_OPTIONS],
        "diet": [o._asdict() for o in DIET_OPTIONS],
        "allergies": [o._asdict() for o in ALLERGY_OPTIONS],
        "time": [o._asdict() for o in TIME_OPTIONS],
        "preferences": [o._asdict() for o in PREFERENCE_OPTIONS],
        "quickStaples": list(QUICK_STAPLES),
    }
