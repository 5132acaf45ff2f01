from __future__ import annotations

import logging
from typing import AsyncGenerator

from travelkitchen.features.recipes.api.schemas import (
    RecipeChatRequest,
    RecipeFormData,
    RecipeResponse,
    UpdateRecipeRequest,
)
from travelkitchen.features.recipes.domain.prompts import (
    RECIPE_SYSTEM_PROMPT,
    UPDATE_USER_PROMPT,
    build_chat_system_prompt,
    build_recipe_prompt,
    build_update_system_prompt,
)
from travelkitchen.shared.llm.openai_client import build_messages, stream_chat
from travelkitchen.shared.llm.structured import generate_structured

logger = logging.getLogger("recipes")


async def generate_recipe(form: RecipeFormData) -> RecipeResponse:
    """
    Generate a single recipe from the validated form.
    """
    prompt = build_recipe_prompt(form)
    logger.info("generating recipe equipment=%s servings=%s", form.equipment, form.servings)
    return await generate_structured(RECIPE_SYSTEM_PROMPT, prompt, RecipeResponse, what="recipe")


async def update_recipe(req: UpdateRecipeRequest) -> RecipeResponse:
    """
    Regenerate a recipe with the changes discussed in the chat transcript.
    """
    system = build_update_system_prompt(req.messages, req.recipe, req.inputs)
    logger.info("regenerating recipe %r after %d chat turns", req.recipe.title, len(req.messages))
    return await generate_structured(system, UPDATE_USER_PROMPT, RecipeResponse, what="updated recipe")


async def stream_recipe_chat(req: RecipeChatRequest) -> AsyncGenerator[str, None]:
    """
    Stream the assistant's reply about the current recipe, token by token.
    Nothing is stored; the client keeps the transcript.
    """
    messages = build_messages(
        build_chat_system_prompt(req.recipe),
        [m.model_dump() for m in req.messages],
    )
    async for tok in stream_chat(messages):
        if tok:
            yield tok
