from __future__ import annotations

import logging
from typing import List

from travelkitchen.features.ideas.api.schemas import (
    ExpandIdeaRequest,
    FullRecipe,
    IdeasRequest,
    IdeasResponse,
    RecipeIdeaPreview,
)
from travelkitchen.features.ideas.domain.prompts import (
    EXPAND_SYSTEM_PROMPT,
    IDEAS_SYSTEM_PROMPT,
    build_expand_prompt,
    build_ideas_prompt,
)
from travelkitchen.shared.llm.structured import generate_structured

logger = logging.getLogger("ideas")


async def generate_ideas(req: IdeasRequest) -> List[RecipeIdeaPreview]:
    """
    Generate a batch of recipe idea previews, avoiding titles already shown.
    """
    prompt = build_ideas_prompt(req)
    logger.info("generating ideas base=%r avoiding=%d titles", req.base_ingredient, len(req.existing_titles or []))
    result = await generate_structured(IDEAS_SYSTEM_PROMPT, prompt, IdeasResponse, what="ideas")
    return result.ideas


async def expand_idea(req: ExpandIdeaRequest) -> FullRecipe:
    prompt = build_expand_prompt(req.idea, req.session_inputs)
    logger.info("expanding idea %r", req.idea.title)
    return await generate_structured(EXPAND_SYSTEM_PROMPT, prompt, FullRecipe, what="expanded recipe")
