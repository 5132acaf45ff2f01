from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from travelkitchen.features.recipes.api.schemas import (
    CamelModel,
    Number,
    RecipeStep,
    ShoppingList,
    StrictModel,
    Substitution,
)


class SessionInputs(CamelModel):
    equipment: List[str]
    dietary_preferences: Optional[List[str]] = None
    allergens: Optional[List[str]] = None
    country: Optional[str] = None
    base_ingredient: Optional[str] = None
    additional_ingredients: Optional[List[str]] = None
    time_limit: Optional[Number] = None


class IdeasRequest(SessionInputs):
    # "generate more": extra user direction and titles to avoid
    context: Optional[str] = None
    existing_titles: Optional[List[str]] = None


class RecipeIdeaPreview(CamelModel):
    title: str
    description: str
    key_ingredients: List[str]
    estimated_time: Number
    servings: Number
    equipment_needed: List[str]
    dietary_tags: List[str]
    difficulty: Literal["easy", "medium", "hard"]


class IdeasResponse(StrictModel):
    ideas: List[RecipeIdeaPreview]


class StoredIdea(RecipeIdeaPreview):
    # ideas written back by clients; the tier is not re-checked
    difficulty: str


class FullRecipe(CamelModel):
    shopping: ShoppingList
    prep_group: List[str]
    steps: List[RecipeStep]
    substitutions: List[Substitution]
    tips: List[str]


class ExpandIdeaRequest(StrictModel):
    idea: StoredIdea
    session_inputs: SessionInputs = Field(alias="sessionInputs")


class CreateSessionRequest(StrictModel):
    inputs: SessionInputs


class AddIdeasRequest(StrictModel):
    ideas: List[StoredIdea]


class FullRecipeRequest(StrictModel):
    full_recipe: FullRecipe = Field(alias="fullRecipe")
