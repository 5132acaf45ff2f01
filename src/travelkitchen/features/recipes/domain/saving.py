"""Mappings from generated output to the stored recipe shape."""
from __future__ import annotations

from typing import List, Sequence

from travelkitchen.features.recipes.api.schemas import (
    PrepTask,
    RecipeFormData,
    RecipeInputs,
    RecipeResponse,
    RecipeStep,
    SavedStep,
    SavedSubstitution,
    SaveRecipeRequest,
    Substitution,
)


def _steps(steps: Sequence[RecipeStep]) -> List[SavedStep]:
    return [
        SavedStep(number=i, instruction=f"{s.title}: {s.detail}", duration=s.time_minutes)
        for i, s in enumerate(steps, 1)
    ]


def _substitutions(subs: Sequence[Substitution]) -> List[SavedSubstitution]:
    return [SavedSubstitution(original=s.ingredient, substitute=", ".join(s.swap_options)) for s in subs]


def recipe_from_generation(recipe: RecipeResponse, inputs: RecipeFormData) -> SaveRecipeRequest:
    return SaveRecipeRequest(
        title=recipe.title,
        description=recipe.summary,
        inputs=RecipeInputs(
            equipment=inputs.equipment,
            dietaryPreferences=inputs.diet,
            allergens=inputs.allergies,
            country=inputs.country,
            ingredients=[*inputs.ingredients_have, *(inputs.ingredients_to_buy or [])],
            servings=inputs.servings,
            maxTime=inputs.time_limit,
        ),
        prepTime=0,
        cookTime=recipe.time_minutes,
        servings=recipe.servings,
        equipmentUsed=recipe.equipment_used,
        shoppingList=recipe.shopping,
        prepGroup=[PrepTask(task=t) for t in recipe.prep_group],
        steps=_steps(recipe.steps),
        substitutions=_substitutions(recipe.substitutions),
        tips=recipe.diet_notes,
    )


def recipe_from_idea(idea, full_recipe, session_inputs) -> SaveRecipeRequest:
    """Build a stored recipe from an expanded idea and its session's inputs."""
    return SaveRecipeRequest(
        title=idea.title,
        description=idea.description,
        inputs=RecipeInputs(
            equipment=session_inputs.equipment,
            dietaryPreferences=session_inputs.dietary_preferences,
            allergens=session_inputs.allergens,
            country=session_inputs.country,
            ingredients=idea.key_ingredients,
            servings=idea.servings,
            maxTime=idea.estimated_time,
        ),
        prepTime=0,
        cookTime=idea.estimated_time,
        servings=idea.servings,
        equipmentUsed=idea.equipment_needed,
        shoppingList=full_recipe.shopping,
        prepGroup=[PrepTask(task=t) for t in full_recipe.prep_group],
        steps=_steps(full_recipe.steps),
        substitutions=_substitutions(full_recipe.substitutions),
        tips=full_recipe.tips,
    )
