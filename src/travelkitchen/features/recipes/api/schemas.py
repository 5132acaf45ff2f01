from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# JSON numbers: ints stay ints, strings and booleans are rejected.
Number = Union[int, float]


class StrictModel(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")


class CamelModel(StrictModel):
    # Wire names only: "prep_group" in a payload is an unknown key, not prepGroup.
    # Build instances in Python with the camelCase keywords too.
    model_config = ConfigDict(strict=True, extra="ignore", alias_generator=to_camel)


# ---- request bodies --------------------------------------------------------

class RecipeFormData(CamelModel):
    equipment: List[str] = Field(min_length=1)
    limitations: Optional[List[str]] = None
    country: Optional[str] = None
    diet: Optional[List[str]] = None
    allergies: Optional[List[str]] = None
    servings: Number = 2
    time_limit: Number = 30
    ingredients_have: List[str] = Field(default_factory=list)
    ingredients_to_buy: Optional[List[str]] = None
    preferences: Optional[List[str]] = None
    notes: Optional[str] = None

    @field_validator("servings")
    @classmethod
    def _servings_range(cls, v: Number) -> Number:
        if not 1 <= v <= 6:
            raise ValueError("Servings must be between 1 and 6")
        return v

    @field_validator("time_limit")
    @classmethod
    def _time_limit_range(cls, v: Number) -> Number:
        if not 10 <= v <= 60:
            raise ValueError("Time limit must be between 10 and 60 minutes")
        return v

    @model_validator(mode="after")
    def _needs_an_ingredient(self) -> "RecipeFormData":
        if not self.ingredients_have and not self.ingredients_to_buy:
            raise ValueError("Add at least one ingredient you have or plan to buy")
        return self


class ChatMessage(StrictModel):
    role: Literal["user", "assistant"]
    content: str


# ---- model responses -------------------------------------------------------

class ShoppingList(StrictModel):
    have: List[str]
    need: List[str]
    optional: List[str]


class RecipeStep(StrictModel):
    title: str
    detail: str
    time_minutes: Number


class Substitution(StrictModel):
    ingredient: str
    swap_options: List[str]


class RecipeResponse(StrictModel):
    title: str
    summary: str
    assumptions: List[str]
    servings: Number
    time_minutes: Number
    equipment_used: List[str]
    shopping: ShoppingList
    prep_group: List[str]
    steps: List[RecipeStep]
    substitutions: List[Substitution]
    diet_notes: List[str]


class UpdateRecipeRequest(StrictModel):
    messages: List[ChatMessage]
    recipe: RecipeResponse
    inputs: RecipeFormData


class RecipeChatRequest(StrictModel):
    messages: List[ChatMessage] = Field(min_length=1)
    recipe: RecipeResponse


# ---- persisted recipes -----------------------------------------------------

class RecipeInputs(CamelModel):
    equipment: List[str]
    dietary_preferences: Optional[List[str]] = None
    allergens: Optional[List[str]] = None
    country: Optional[str] = None
    ingredients: List[str]
    servings: Optional[Number] = None
    max_time: Optional[Number] = None


class PrepTask(CamelModel):
    task: str
    ingredients: List[str] = Field(default_factory=list)


class SavedStep(CamelModel):
    number: int
    instruction: str
    duration: Optional[Number] = None
    equipment: Optional[str] = None


class SavedSubstitution(CamelModel):
    original: str
    substitute: str
    note: Optional[str] = None


class SaveRecipeRequest(CamelModel):
    title: str
    description: str
    inputs: RecipeInputs
    prep_time: Number
    cook_time: Number
    servings: Number
    equipment_used: List[str]
    shopping_list: ShoppingList
    prep_group: List[PrepTask]
    steps: List[SavedStep]
    substitutions: List[SavedSubstitution]
    tips: Optional[List[str]] = None
